"""
Events describing match transitions, for external observers.

The emitter only stages events. The service hands them to the repository (audit trail) and to the
Response once the operation is about to commit, so a rejected operation never emits anything.
"""

import logging

from chess_escrow.core.identity import match_id_to_hex
from chess_escrow.core.models import Address, Event, MatchId
from chess_escrow.core.shared_types import EventType

logger = logging.getLogger(__name__)


class EventEmitter:
    def __init__(self) -> None:
        self._staged: list[Event] = []

    def match_created(self, match_id: MatchId, challenger: Address, opponent: Address) -> None:
        self._emit(
            EventType.MATCH_CREATED,
            challenger=challenger,
            opponent=opponent,
            match_id=match_id_to_hex(match_id),
        )

    def match_aborted(self, match_id: MatchId, challenger: Address) -> None:
        self._emit(EventType.MATCH_ABORTED, match_id=match_id_to_hex(match_id), challenger=challenger)

    def match_started(self, match_id: MatchId, challenger: Address, opponent: Address) -> None:
        self._emit(
            EventType.MATCH_STARTED,
            match_id=match_id_to_hex(match_id),
            challenger=challenger,
            opponent=opponent,
        )

    def move_executed(self, match_id: MatchId, player: Address, move: str) -> None:
        self._emit(EventType.MOVE_EXECUTED, match_id=match_id_to_hex(match_id), player=player, move=move)

    def match_won(self, match_id: MatchId, winner: Address, board: str) -> None:
        self._emit(EventType.MATCH_WON, match_id=match_id_to_hex(match_id), winner=winner, board=board)

    def match_drawn(self, match_id: MatchId, board: str) -> None:
        self._emit(EventType.MATCH_DRAWN, match_id=match_id_to_hex(match_id), board=board)

    def drain(self) -> list[Event]:
        """Hand over the staged events (in emission order) and start empty again."""
        events, self._staged = self._staged, []
        return events

    def discard(self) -> None:
        self._staged.clear()

    def _emit(self, event_type: EventType, **attributes: str) -> None:
        event = Event(type=event_type, attributes=attributes)
        logger.debug("Staged event %s %s", event_type, attributes)
        self._staged.append(event)
