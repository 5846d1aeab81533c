"""Message (request) and Response models"""

from typing import Self

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from chess_escrow.core.exceptions import InvalidMatchIdError, InvalidMoveEncodingError
from chess_escrow.core.identity import is_match_id_hex, match_id_to_hex
from chess_escrow.core.models import Coin, ContractConfig, Match, MatchId, flatten_state
from chess_escrow.core.shared_types import Side, StateKind
from chess_escrow.engine.move_validator import MOVE_ENCODING_LENGTH


def _check_match_id(value: str) -> str:
    if not is_match_id_hex(value):
        raise InvalidMatchIdError(
            f"Cannot interpret match_id: {value!r} as 64 lowercase hexadecimal characters."
        )
    return value


# --- MESSAGE MODELS ---
class InstantiateMsg(BaseModel):
    min_bet: Coin

    @field_validator("min_bet")
    @classmethod
    def validate_min_bet(cls, value: Coin) -> Coin:
        if value.amount < 0:
            raise ValueError("min_bet amount cannot be negative")
        if not value.denom:
            raise ValueError("min_bet needs a denomination")
        return value


class MigrateMsg(BaseModel):
    pass


class CreateMatchMsg(BaseModel):
    opponent: str


class AbortMatchMsg(BaseModel):
    match_id: str

    @field_validator("match_id")
    @classmethod
    def validate_match_id(cls, value: str) -> str:
        return _check_match_id(value)


class JoinMatchMsg(BaseModel):
    match_id: str

    @field_validator("match_id")
    @classmethod
    def validate_match_id(cls, value: str) -> str:
        return _check_match_id(value)


class MakeMoveMsg(BaseModel):
    match_id: str
    move: str

    @field_validator("match_id")
    @classmethod
    def validate_match_id(cls, value: str) -> str:
        return _check_match_id(value)

    @field_validator("move")
    @classmethod
    def validate_move(cls, value: str) -> str:
        if len(value) != MOVE_ENCODING_LENGTH:
            raise InvalidMoveEncodingError(
                f"Cannot interpret move: {value!r} as a from-square + to-square pair."
            )
        return value


ExecuteVariant = CreateMatchMsg | AbortMatchMsg | JoinMatchMsg | MakeMoveMsg


class ExecuteMsg(BaseModel):
    """Externally tagged envelope, e.g. {"make_move": {"match_id": "...", "move": "e2e4"}}"""

    model_config = ConfigDict(extra="forbid")

    create_match: CreateMatchMsg | None = None
    abort_match: AbortMatchMsg | None = None
    join_match: JoinMatchMsg | None = None
    make_move: MakeMoveMsg | None = None

    @model_validator(mode="after")
    def exactly_one_variant(self) -> Self:
        chosen = [name for name in type(self).model_fields if getattr(self, name) is not None]
        if len(chosen) != 1:
            raise ValueError(f"Expected exactly one operation, got {chosen or 'none'}.")
        return self

    @property
    def variant(self) -> ExecuteVariant:
        return next(
            getattr(self, name)
            for name in type(self).model_fields
            if getattr(self, name) is not None
        )


# --- RESPONSE MODELS ---
class MatchResponse(BaseModel):
    match_id: str
    challenger: str
    opponent: str
    board: str
    state: StateKind
    turn: Side | None
    nonce: int
    last_move: int
    start: int
    bet: Coin

    @classmethod
    def from_match(cls, match_id: MatchId, chess_match: Match) -> Self:
        state, turn = flatten_state(chess_match.state)
        return cls(
            match_id=match_id_to_hex(match_id),
            challenger=chess_match.challenger,
            opponent=chess_match.opponent,
            board=chess_match.board,
            state=state,
            turn=turn,
            nonce=chess_match.nonce,
            last_move=chess_match.last_move,
            start=chess_match.start,
            bet=chess_match.bet,
        )


class ConfigResponse(BaseModel):
    admin: str
    min_bet: Coin
    next_nonce: int
    contract_name: str
    contract_version: str

    @classmethod
    def from_config(cls, config: ContractConfig) -> Self:
        return cls(
            admin=config.admin,
            min_bet=config.min_bet,
            next_nonce=config.next_nonce,
            contract_name=config.contract_name,
            contract_version=config.contract_version,
        )
