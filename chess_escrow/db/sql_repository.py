"""Implementation of (Match)Repository using SQLAlchemy"""

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from chess_escrow.core.models import (
    Address,
    Coin,
    ContractConfig,
    Event,
    Match,
    MatchId,
    flatten_state,
    restore_state,
)
from chess_escrow.core.shared_types import EventType, Side, StateKind
from chess_escrow.db.schema import (
    DBContractConfig,
    DBEvent,
    DBMatch,
    DBMatchId,
    DBPlayerMatch,
)

CONFIG_ROW_ID = 1


class SQLMatchRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    # -- configuration --
    def get_config(self) -> ContractConfig | None:
        config_db = self.db.get(DBContractConfig, CONFIG_ROW_ID)
        if config_db is None:
            return None
        return ContractConfig(
            admin=config_db.admin,
            min_bet=Coin(int(config_db.min_bet_amount), config_db.min_bet_denom),
            next_nonce=config_db.next_nonce,
            contract_name=config_db.contract_name,
            contract_version=config_db.contract_version,
        )

    def save_config(self, config: ContractConfig) -> None:
        config_db = self.db.get(DBContractConfig, CONFIG_ROW_ID)
        if config_db is None:
            config_db = DBContractConfig(id=CONFIG_ROW_ID)
            self.db.add(config_db)
        config_db.admin = config.admin
        config_db.min_bet_amount = str(config.min_bet.amount)
        config_db.min_bet_denom = config.min_bet.denom
        config_db.next_nonce = config.next_nonce
        config_db.contract_name = config.contract_name
        config_db.contract_version = config.contract_version

    # -- matches + both indexes --
    def get_match(self, match_id: MatchId) -> Match | None:
        """Get match by ID, if record exists."""
        match_db = self.db.get(DBMatch, match_id)
        if match_db:
            return self._to_model(match_db)
        return None

    def insert_match(self, match_id: MatchId, chess_match: Match) -> None:
        match_db = DBMatch(id=match_id)
        self._copy_into(match_db, chess_match)
        self.db.add(match_db)
        self.db.add(DBPlayerMatch(player=chess_match.challenger, match_id=match_id))
        self.db.add(DBPlayerMatch(player=chess_match.opponent, match_id=match_id))
        self.db.add(DBMatchId(nonce=chess_match.nonce, match_id=match_id))

    def update_match(self, match_id: MatchId, chess_match: Match) -> None:
        match_db = self.db.get(DBMatch, match_id)
        if match_db is None:
            raise LookupError(f"No match stored under {match_id.hex()}")
        self._copy_into(match_db, chess_match)

    def remove_match(self, match_id: MatchId, chess_match: Match) -> None:
        # index entries first, they reference the match row
        self.db.execute(
            delete(DBPlayerMatch).where(
                DBPlayerMatch.match_id == match_id,
                DBPlayerMatch.player.in_([chess_match.challenger, chess_match.opponent]),
            )
        )
        self.db.execute(delete(DBMatchId).where(DBMatchId.nonce == chess_match.nonce))
        self.db.execute(delete(DBMatch).where(DBMatch.id == match_id))

    def player_match_ids(self, player: Address) -> list[MatchId]:
        query = (
            select(DBPlayerMatch.match_id)
            .where(DBPlayerMatch.player == player)
            .order_by(DBPlayerMatch.match_id)
        )
        return list(self.db.scalars(query))

    def match_ids(
        self, start_after: int | None = None, limit: int | None = None
    ) -> list[tuple[int, MatchId]]:
        query = select(DBMatchId).order_by(DBMatchId.nonce)
        if start_after is not None:
            query = query.where(DBMatchId.nonce > start_after)
        if limit is not None:
            query = query.limit(limit)
        return [(row.nonce, row.match_id) for row in self.db.scalars(query)]

    # -- audit trail --
    def append_events(self, events: list[Event], block_height: int) -> None:
        for event in events:
            self.db.add(
                DBEvent(
                    block_height=block_height,
                    type=str(event.type),
                    match_id=event.attributes["match_id"],
                    attributes=dict(event.attributes),
                )
            )

    def events_for_match(self, match_id_hex: str) -> list[Event]:
        query = (
            select(DBEvent).where(DBEvent.match_id == match_id_hex).order_by(DBEvent.seq)
        )
        return [
            Event(type=EventType(row.type), attributes=dict(row.attributes))
            for row in self.db.scalars(query)
        ]

    # -- unit of work --
    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()

    # -- conversions --
    def _copy_into(self, match_db: DBMatch, chess_match: Match) -> None:
        state, turn = flatten_state(chess_match.state)
        match_db.challenger = chess_match.challenger
        match_db.opponent = chess_match.opponent
        match_db.board = chess_match.board
        match_db.state = state
        match_db.turn = turn
        match_db.nonce = chess_match.nonce
        match_db.last_move = chess_match.last_move
        match_db.start = chess_match.start
        match_db.bet_amount = str(chess_match.bet.amount)
        match_db.bet_denom = chess_match.bet.denom

    def _to_model(self, match_db: DBMatch) -> Match:
        """Convert SQLAlchemy model to data transfer model."""
        return Match(
            challenger=match_db.challenger,
            opponent=match_db.opponent,
            board=match_db.board,
            state=restore_state(
                StateKind(match_db.state), Side(match_db.turn) if match_db.turn else None
            ),
            nonce=match_db.nonce,
            last_move=match_db.last_move,
            start=match_db.start,
            bet=Coin(int(match_db.bet_amount), match_db.bet_denom),
        )
