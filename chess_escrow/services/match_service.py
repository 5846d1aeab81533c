"""
Orchestration of the match lifecycle: message in -> registry, escrow and rules engine -> Response out.

Every public operation is all-or-nothing. It first runs every check (reads only), then applies the staged
writes, records the staged events and commits once. Any failure rolls the session back and re-raises.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import replace

from chess_escrow.api.models import (
    AbortMatchMsg,
    ConfigResponse,
    CreateMatchMsg,
    ExecuteMsg,
    InstantiateMsg,
    JoinMatchMsg,
    MakeMoveMsg,
    MatchResponse,
    MigrateMsg,
)
from chess_escrow.core.addresses import validate_address
from chess_escrow.core.config import CONTRACT_NAME, CONTRACT_VERSION
from chess_escrow.core.exceptions import (
    AlreadyInitializedError,
    ContractVersionError,
    InvalidBoardEncodingError,
    InvalidOpponentError,
    MatchError,
    NotAwaitingOpponentError,
    NotInitializedError,
    NotMatchCreatorError,
    UnauthorizedError,
    UnknownMatchError,
)
from chess_escrow.core.identity import derive_match_id, match_id_from_hex, match_id_to_hex
from chess_escrow.core.models import (
    Address,
    AwaitingOpponent,
    BankSend,
    ContractConfig,
    Drawn,
    Env,
    Event,
    Match,
    MatchId,
    MessageInfo,
    OnGoing,
    Response,
    Won,
)
from chess_escrow.db.repository import MatchRepository
from chess_escrow.engine.move_validator import MoveValidator
from chess_escrow.engine.rules import PythonChessEngine, RulesEngine
from chess_escrow.escrow import stake
from chess_escrow.services.events import EventEmitter

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 30
MAX_LIST_LIMIT = 100


class MatchService:
    """Orchestration of layers for staked chess matches."""

    def __init__(self, repository: MatchRepository, engine: RulesEngine | None = None) -> None:
        self.repo = repository
        self.engine = engine or PythonChessEngine()
        self.validator = MoveValidator(self.engine)
        self.emitter = EventEmitter()

    # -- Instance lifecycle --
    def instantiate(self, env: Env, info: MessageInfo, msg: InstantiateMsg) -> Response:
        """Store admin, minimum bet and a fresh nonce counter. Only once per instance."""
        with self._operation("instantiate", info.sender):
            if self.repo.get_config() is not None:
                raise AlreadyInitializedError()

            config = ContractConfig(
                admin=info.sender,
                min_bet=msg.min_bet,
                next_nonce=0,
                contract_name=CONTRACT_NAME,
                contract_version=CONTRACT_VERSION,
            )
            self.repo.save_config(config)
            self._commit(env)

        logger.info("Initialized by %s with minimum bet %s", info.sender, msg.min_bet)
        return Response(attributes={"action": "instantiate", "owner": info.sender})

    def migrate(self, env: Env, info: MessageInfo, msg: MigrateMsg) -> Response:
        """Admin only: move the stored contract version up to the running one."""
        with self._operation("migrate", info.sender):
            config = self._load_config()
            if info.sender != config.admin:
                raise UnauthorizedError("Only the admin can migrate the contract.")
            if config.contract_name != CONTRACT_NAME:
                raise ContractVersionError(
                    f"Stored contract {config.contract_name!r} is not {CONTRACT_NAME!r}."
                )
            if _version_key(config.contract_version) > _version_key(CONTRACT_VERSION):
                raise ContractVersionError(
                    f"Cannot migrate down from {config.contract_version} to {CONTRACT_VERSION}."
                )

            self.repo.save_config(replace(config, contract_version=CONTRACT_VERSION))
            self._commit(env)

        return Response(
            attributes={
                "action": "migrate",
                "from_version": config.contract_version,
                "to_version": CONTRACT_VERSION,
            }
        )

    def execute(self, env: Env, info: MessageInfo, msg: ExecuteMsg) -> Response:
        """Dispatch the message envelope to the matching lifecycle operation."""
        match msg.variant:
            case CreateMatchMsg() as create_msg:
                return self.create_match(env, info, create_msg)
            case AbortMatchMsg() as abort_msg:
                return self.abort_match(env, info, abort_msg)
            case JoinMatchMsg() as join_msg:
                return self.join_match(env, info, join_msg)
            case MakeMoveMsg() as move_msg:
                return self.make_move(env, info, move_msg)

    # -- Match lifecycle --
    def create_match(self, env: Env, info: MessageInfo, msg: CreateMatchMsg) -> Response:
        """Challenger deposits a stake and names an opponent."""
        challenger = info.sender
        with self._operation("create_match", challenger):
            config = self._load_config()
            opponent = validate_address(msg.opponent)
            if challenger == opponent:
                raise InvalidOpponentError("Cannot challenge yourself.")
            bet = stake.validate_creation(info.funds, config.min_bet)

            nonce = config.next_nonce
            match_id = derive_match_id(challenger, opponent, nonce)
            new_match = Match.new(challenger, opponent, nonce, bet, board=self.engine.initial_board())

            self.repo.insert_match(match_id, new_match)
            self.repo.save_config(replace(config, next_nonce=nonce + 1))
            self.emitter.match_created(match_id, challenger, opponent)
            events = self._commit(env)

        logger.info("Created match %s: %s vs %s for %s", match_id_to_hex(match_id), challenger, opponent, bet)
        return Response(
            attributes={"action": "create_match", "sender": challenger}, events=events
        )

    def abort_match(self, env: Env, info: MessageInfo, msg: AbortMatchMsg) -> Response:
        """
        Challenger withdraws the challenge before the opponent joined.
        ----

        NOTE: no transfer is issued, the challenger's deposit stays with the contract.
        """
        challenger = info.sender
        with self._operation("abort_match", challenger):
            self._load_config()
            match_id = match_id_from_hex(msg.match_id)
            chess_match = self._lookup_match(match_id)
            if challenger != chess_match.challenger:
                raise NotMatchCreatorError()
            self._ensure_awaiting_opponent(chess_match)

            self.repo.remove_match(match_id, chess_match)
            self.emitter.match_aborted(match_id, challenger)
            events = self._commit(env)

        logger.info("Aborted match %s", msg.match_id)
        return Response(attributes={"action": "abort_match", "sender": challenger}, events=events)

    def join_match(self, env: Env, info: MessageInfo, msg: JoinMatchMsg) -> Response:
        """Designated opponent matches the stake. The game starts with white (challenger) to move."""
        opponent = info.sender
        with self._operation("join_match", opponent):
            self._load_config()
            match_id = match_id_from_hex(msg.match_id)
            chess_match = self._lookup_match(match_id)
            if opponent != chess_match.opponent:
                raise InvalidOpponentError("Only the challenged player can join this match.")
            stake.validate_join(info.funds, chess_match.bet)
            self._ensure_awaiting_opponent(chess_match)

            started = chess_match.started(env.block_height)
            self.repo.update_match(match_id, started)
            self.emitter.match_started(match_id, started.challenger, started.opponent)
            events = self._commit(env)

        logger.info("Started match %s at height %d", msg.match_id, env.block_height)
        return Response(attributes={"action": "join_match", "sender": opponent}, events=events)

    def make_move(self, env: Env, info: MessageInfo, msg: MakeMoveMsg) -> Response:
        """
        Play a move.
        ----

        * game continues -> store the new board in place
        * checkmate -> winner takes the pot, match is removed
        * draw -> both stakes refunded, match is removed
        """
        player = info.sender
        with self._operation("make_move", player):
            self._load_config()
            match_id = match_id_from_hex(msg.match_id)
            self.validator.check_encoding(msg.move)
            chess_match = self._lookup_match(match_id)
            self.validator.check_turn(chess_match, player)
            played = self.validator.play(chess_match.board, msg.move)

            updated = replace(
                chess_match,
                board=played.board,
                state=played.state,
                last_move=env.block_height,
            )
            messages: list[BankSend] = []
            self.emitter.move_executed(match_id, player, msg.move)
            match played.state:
                case Won():
                    self.emitter.match_won(match_id, player, played.board)
                    messages = stake.settle_win(updated.bet, player)
                    self.repo.remove_match(match_id, updated)
                case Drawn():
                    self.emitter.match_drawn(match_id, played.board)
                    messages = stake.settle_draw(updated.bet, updated.challenger, updated.opponent)
                    self.repo.remove_match(match_id, updated)
                case OnGoing():
                    self.repo.update_match(match_id, updated)
            events = self._commit(env)

        logger.info("Move %s by %s in match %s -> %s", msg.move, player, msg.match_id, played.state)
        return Response(
            attributes={"action": "make_move", "sender": player},
            events=events,
            messages=messages,
        )

    # -- Queries (read-only) --
    def config(self) -> ConfigResponse:
        return ConfigResponse.from_config(self._load_config())

    def get_match(self, match_id_hex: str) -> MatchResponse:
        match_id = match_id_from_hex(match_id_hex)
        return MatchResponse.from_match(match_id, self._lookup_match(match_id))

    def player_matches(self, player: Address) -> list[MatchResponse]:
        """Open matches of a player, whichever side they play."""
        return [
            MatchResponse.from_match(match_id, self._lookup_match(match_id))
            for match_id in self.repo.player_match_ids(player)
        ]

    def list_matches(
        self, start_after: int | None = None, limit: int = DEFAULT_LIST_LIMIT
    ) -> list[MatchResponse]:
        """Open matches in creation order. Page with the nonce of the last match seen."""
        limit = max(0, min(limit, MAX_LIST_LIMIT))
        return [
            MatchResponse.from_match(match_id, self._lookup_match(match_id))
            for _, match_id in self.repo.match_ids(start_after=start_after, limit=limit)
        ]

    def match_events(self, match_id_hex: str) -> list[Event]:
        """Audit trail of a match. Still available after the match was removed."""
        match_id = match_id_from_hex(match_id_hex)
        return self.repo.events_for_match(match_id_to_hex(match_id))

    # -- Internal helpers --
    @contextmanager
    def _operation(self, action: str, sender: Address) -> Iterator[None]:
        """Roll back everything staged so far if the operation fails."""
        try:
            yield
        except Exception as exc:
            self.emitter.discard()
            self.repo.rollback()
            if isinstance(exc, InvalidBoardEncodingError):
                logger.error("Stored board is corrupt, %s from %s rejected: %s", action, sender, exc)
            elif isinstance(exc, MatchError):
                logger.info("Rejected %s from %s: %s", action, sender, type(exc).__name__)
            else:
                logger.exception("Unexpected failure in %s from %s", action, sender)
            raise

    def _commit(self, env: Env) -> list[Event]:
        events = self.emitter.drain()
        self.repo.append_events(events, env.block_height)
        self.repo.commit()
        return events

    def _load_config(self) -> ContractConfig:
        config = self.repo.get_config()
        if config is None:
            raise NotInitializedError()
        return config

    def _lookup_match(self, match_id: MatchId) -> Match:
        """Attempt to find the match in the repository and raise error if it fails."""
        chess_match = self.repo.get_match(match_id)
        if chess_match is None:
            raise UnknownMatchError(f"No match with id {match_id_to_hex(match_id)}.")
        return chess_match

    def _ensure_awaiting_opponent(self, chess_match: Match) -> None:
        if not isinstance(chess_match.state, AwaitingOpponent):
            raise NotAwaitingOpponentError()


def _version_key(version: str) -> tuple[int, ...]:
    try:
        return tuple(int(part) for part in version.split("."))
    except ValueError as exc:
        raise ContractVersionError(f"Cannot read contract version {version!r}.") from exc
