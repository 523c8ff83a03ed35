"""
Authoritative state for one player in a match.

A MatchPlayer owns the player's board (ship cells and their hit flags), the
history of attacks the player has made, and the player's score. It resolves
attacks made against it, records attacks it made, and produces two plain
representations: a full snapshot for the cache and the owning client, and a
redacted view for the opponent.

Instances are not thread-safe. The match orchestration layer must ensure at
most one attack is resolved against a player at a time.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import TypeAdapter, ValidationError

from game.logic.enums import ShipType
from game.logic.exceptions import InvalidBoardError, InvalidPlayerStateError
from game.logic.positions import check_ship_cell_counts, create_position_data_with_cells, is_same_origin
from game.logic.settings import DEFAULT_SHIP_LAYOUT, GameSettings, validate_settings
from game.logic.types import (
    AttackHit,
    AttackInput,
    AttackMiss,
    AttackRecord,
    BoardState,
    CellPosition,
    OpponentBoard,
    OpponentView,
    PlayerRecord,
    ShipPositionData,
    StoredShip,
    coerce_score,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from game.logic.types import AttackResult

logger = structlog.get_logger()

_PLACEMENT_ADAPTER: TypeAdapter[ShipPositionData] = TypeAdapter(ShipPositionData)


def now_ms() -> int:
    """Wall-clock capture time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


class MatchPlayer:
    """
    One player's board, attack history, identity and score.

    Lifecycle:
    - Created when the player joins a match, either with an unconfirmed default
      board (``valid=False``) or rehydrated from a cached snapshot
    - Board replaced via set_board until the player confirms a valid placement
    - Mutated by resolve_incoming_attack when targeted, and by
      record_outgoing_attack after attacking
    """

    def __init__(  # noqa: PLR0913
        self,
        *,
        uuid: str,
        username: str,
        match: str,
        is_ai: bool = False,
        score: object = 0,
        board: BoardState | None = None,
        attacks: list[AttackRecord] | None = None,
        placement: Mapping[ShipType, Any] | None = None,
        settings: GameSettings | None = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        if settings is not None:
            validate_settings(settings)
        self._settings = settings or GameSettings()
        self._clock = clock

        self._uuid = uuid
        self._username = username
        self._match = match
        self._is_ai = is_ai
        self._score = coerce_score(score)
        self._attacks: list[AttackRecord] = list(attacks) if attacks else []

        if board is not None:
            check_ship_cell_counts(board.positions, self._settings)
            self._board = board
        else:
            # unconfirmed starting positions; the player must confirm them in the UI
            self._board = BoardState(
                valid=False,
                positions=self._expand_placement(DEFAULT_SHIP_LAYOUT if placement is None else placement),
            )

    @classmethod
    def from_snapshot(
        cls,
        data: Mapping[str, Any],
        *,
        settings: GameSettings | None = None,
        clock: Callable[[], int] = now_ms,
    ) -> MatchPlayer:
        """
        Rehydrate a player from a snapshot produced by to_snapshot.

        Raises:
            InvalidPlayerStateError: If the snapshot is malformed or its ships do not
                match the configured ship sizes

        """
        try:
            record = PlayerRecord.model_validate(data)
        except ValidationError as exc:
            raise InvalidPlayerStateError(f"invalid player snapshot: {exc}") from exc
        logger.debug("rehydrating match player", uuid=record.uuid)
        try:
            return cls(
                uuid=record.uuid,
                username=record.username,
                match=record.match,
                is_ai=record.is_ai,
                score=record.score,
                board=record.board,
                attacks=record.attacks,
                settings=settings,
                clock=clock,
            )
        except InvalidBoardError as exc:
            raise InvalidPlayerStateError(f"invalid player snapshot for {record.uuid}: {exc}") from exc

    # --- identity ---

    @property
    def uuid(self) -> str:
        return self._uuid

    @property
    def username(self) -> str:
        return self._username

    @property
    def is_ai(self) -> bool:
        return self._is_ai

    @property
    def match_id(self) -> str:
        return self._match

    def set_match_id(self, match_id: str) -> None:
        logger.debug("setting player match id", uuid=self._uuid, match_id=match_id)
        self._match = match_id

    # --- score ---

    @property
    def score(self) -> int:
        return self._score

    def increment_score_by(self, amount: int) -> int:
        """Add ``amount`` (possibly negative) to the score and return the new total, truncated to an int."""
        self._score = coerce_score(self._score + amount)
        return self._score

    # --- board ---

    @property
    def board(self) -> BoardState:
        return self._board

    @property
    def positions(self) -> dict[ShipType, StoredShip]:
        return self._board.positions

    @property
    def has_locked_valid_positions(self) -> bool:
        return self._board.valid

    def set_board(self, placement: Mapping[ShipType, Any], *, valid: bool) -> None:
        """
        Replace the board with freshly expanded ships from a validated placement.

        All hit and sunk state is reset. Callers must refuse this once the player
        has locked a valid board and the match has started.

        Raises:
            InvalidBoardError: If the placement cannot be parsed or expanded

        """
        positions = self._expand_placement(placement)
        logger.debug("setting ship positions", uuid=self._uuid, valid=valid, ships=len(positions))
        self._board = BoardState(valid=valid, positions=positions)

    def _expand_placement(self, placement: Mapping[ShipType, Any]) -> dict[ShipType, StoredShip]:
        try:
            placements = _PLACEMENT_ADAPTER.validate_python(dict(placement))
        except ValidationError as exc:
            raise InvalidBoardError(f"malformed ship placement: {exc}") from exc
        return create_position_data_with_cells(placements, self._settings)

    # --- attacks made by this player ---

    @property
    def attacks(self) -> tuple[AttackRecord, ...]:
        return tuple(self._attacks)

    @property
    def has_attacked(self) -> bool:
        return bool(self._attacks)

    @property
    def shots_fired_count(self) -> int:
        return len(self._attacks)

    def has_attacked_location(self, origin: CellPosition | tuple[int, int]) -> bool:
        return any(is_same_origin(record.attack.origin, origin) for record in self._attacks)

    def record_outgoing_attack(self, attack: AttackInput, result: AttackResult) -> AttackRecord:
        """
        Append an attack this player made, stamped with the current time.

        No deduplication happens here; callers check has_attacked_location first.
        """
        record = AttackRecord(ts=self._clock(), attack=attack, result=result)
        self._attacks.append(record)
        return record

    def get_continuous_hits_count(self) -> int:
        """
        Return how many of this player's most recent attacks were hits in a row.

        Attacks are ordered by timestamp, most recent first. Records sharing a
        timestamp are ordered by append position, the later one counting as more
        recent. Counting stops at the first miss.
        """
        most_recent_first = sorted(
            enumerate(self._attacks),
            key=lambda indexed: (indexed[1].ts, indexed[0]),
            reverse=True,
        )
        count = 0
        for _, record in most_recent_first:
            if not record.result.hit:
                break
            count += 1
        return count

    # --- attacks made against this player ---

    def resolve_incoming_attack(self, attack: AttackInput | CellPosition | tuple[int, int]) -> AttackResult:
        """
        Determine whether an attack against this player hits, and apply it.

        Ships are checked in ShipType declaration order. Sunk ships are skipped,
        so an attack on a sunk ship's cell reports a miss. A hit marks the cell,
        recomputes the ship's sunk flag, and reports ``destroyed`` if the ship is
        now sunk. Repeated hits on the same cell of an afloat ship are not
        prevented here.
        """
        origin = CellPosition(*(attack.origin if isinstance(attack, AttackInput) else attack))
        positions = self._board.positions

        for ship_type in ShipType:
            ship = positions.get(ship_type)
            if ship is None or ship.sunk:
                continue

            cell = ship.find_cell(origin)
            if cell is None:
                continue

            cell.hit = True
            destroyed = ship.refresh_sunk()
            if destroyed:
                logger.debug("ship sunk", uuid=self._uuid, ship_type=ship_type)
            return AttackHit(origin=cell.origin, type=cell.type, destroyed=destroyed)

        return AttackMiss(origin=origin)

    # --- serialization ---

    def to_opponent_view(self) -> OpponentView:
        """
        Build the redacted view of this player sent to their opponent.

        Only sunk ships are included. Attack records are copied with prediction
        metadata removed; the stored history is left untouched.
        """
        revealed = {
            ship_type: ship.model_copy(deep=True)
            for ship_type, ship in self._board.positions.items()
            if ship.sunk
        }
        logger.debug("revealing sunk ships", uuid=self._uuid, ships=list(revealed))

        attacks = [
            AttackRecord(
                ts=record.ts,
                attack=AttackInput(origin=record.attack.origin),
                result=record.result.model_copy(deep=True),
            )
            for record in self._attacks
        ]
        return OpponentView(
            username=self._username,
            attacks=attacks,
            board=OpponentBoard(valid=self._board.valid, positions=revealed),
        )

    def to_record(self) -> PlayerRecord:
        return PlayerRecord(
            uuid=self._uuid,
            username=self._username,
            score=self._score,
            is_ai=self._is_ai,
            match=self._match,
            board=self._board,
            attacks=self._attacks,
        )

    def to_snapshot(self) -> dict[str, Any]:
        """Full state as plain JSON-compatible data, for the cache or the owning client."""
        return self.to_record().model_dump(mode="json")
