"""
Attack dispatch between the two players of a match.

Turn order and the win condition are decided by the match orchestration;
this only applies one attack consistently to both sides.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from game.logic.exceptions import AttackAlreadyMadeError
from game.logic.types import AttackHit

if TYPE_CHECKING:
    from game.logic.player import MatchPlayer
    from game.logic.types import AttackInput, AttackResult

logger = structlog.get_logger()


def fire_attack(attacker: MatchPlayer, target: MatchPlayer, attack: AttackInput) -> AttackResult:
    """
    Resolve ``attack`` against ``target`` and record it on ``attacker``.

    Raises:
        AttackAlreadyMadeError: If the attacker has already attacked this origin

    """
    if attacker.has_attacked_location(attack.origin):
        raise AttackAlreadyMadeError(uuid=attacker.uuid, origin=attack.origin)

    result = target.resolve_incoming_attack(attack)
    attacker.record_outgoing_attack(attack, result)
    logger.info(
        "attack resolved",
        attacker=attacker.uuid,
        target=target.uuid,
        origin=list(attack.origin),
        hit=result.hit,
        destroyed=isinstance(result, AttackHit) and result.destroyed,
    )
    return result

