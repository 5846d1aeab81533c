"""Protocol repository: the match registry plus contract configuration and the audit trail."""

from typing import Protocol

from chess_escrow.core.models import Address, ContractConfig, Event, Match, MatchId


class MatchRepository(Protocol):
    """
    Persistence layer orchestration.

    NOTE: writes are staged until commit(). One service operation == one commit (or one rollback).
    """

    # -- configuration --
    def get_config(self) -> ContractConfig | None:
        """Configuration written by Initialize, if any."""
        ...

    def save_config(self, config: ContractConfig) -> None:
        """Create or overwrite the configuration row."""
        ...

    # -- matches + both indexes --
    def get_match(self, match_id: MatchId) -> Match | None:
        """Get match by ID, if record exists."""
        ...

    def insert_match(self, match_id: MatchId, chess_match: Match) -> None:
        """Store a new match, index both players and record nonce -> id."""
        ...

    def update_match(self, match_id: MatchId, chess_match: Match) -> None:
        """Overwrite an existing match in place."""
        ...

    def remove_match(self, match_id: MatchId, chess_match: Match) -> None:
        """Remove the match, both player index entries and the nonce index entry."""
        ...

    def player_match_ids(self, player: Address) -> list[MatchId]:
        """Open matches the player takes part in (either side)."""
        ...

    def match_ids(self, start_after: int | None = None, limit: int | None = None) -> list[tuple[int, MatchId]]:
        """(nonce, id) pairs in creation order."""
        ...

    # -- audit trail --
    def append_events(self, events: list[Event], block_height: int) -> None:
        """Record events of a committed operation."""
        ...

    def events_for_match(self, match_id_hex: str) -> list[Event]:
        """Every recorded event of a match, oldest first."""
        ...

    # -- unit of work --
    def commit(self) -> None: ...

    def rollback(self) -> None: ...
