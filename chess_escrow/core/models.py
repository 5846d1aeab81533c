"""
Boundary layer data model(s).

These objects are passed between the Service, the persistence layer and the API models.
(Decouples the SQLAlchemy tables and the pydantic messages from what the match lifecycle actually needs.)
"""

from dataclasses import dataclass, field, replace
from typing import Self

from chess_escrow.core.shared_types import EventType, Side, StateKind

# Type aliases to make the models easier to read
Address = str
MatchId = bytes


@dataclass(frozen=True)
class Coin:
    """A single fungible-asset unit: amount of one denomination."""

    amount: int
    denom: str

    def __str__(self) -> str:
        return f"{self.amount}{self.denom}"


# --- Match state: closed union, match exhaustively on it ---
@dataclass(frozen=True)
class AwaitingOpponent:
    pass


@dataclass(frozen=True)
class OnGoing:
    turn: Side


@dataclass(frozen=True)
class Won:
    pass


@dataclass(frozen=True)
class Drawn:
    pass


MatchState = AwaitingOpponent | OnGoing | Won | Drawn


def flatten_state(state: MatchState) -> tuple[StateKind, Side | None]:
    """Tag + side to move, for storage columns and responses."""
    match state:
        case AwaitingOpponent():
            return StateKind.AWAITING_OPPONENT, None
        case OnGoing(turn=turn):
            return StateKind.ON_GOING, turn
        case Won():
            return StateKind.WON, None
        case Drawn():
            return StateKind.DRAWN, None


def restore_state(kind: StateKind, turn: Side | None) -> MatchState:
    match kind:
        case StateKind.AWAITING_OPPONENT:
            return AwaitingOpponent()
        case StateKind.ON_GOING:
            if turn is None:
                raise ValueError("An ongoing match needs a side to move")
            return OnGoing(turn)
        case StateKind.WON:
            return Won()
        case StateKind.DRAWN:
            return Drawn()


@dataclass
class Match:
    """A staked game between a challenger (white) and an opponent (black)."""

    challenger: Address
    opponent: Address
    board: str
    state: MatchState
    nonce: int
    last_move: int
    start: int
    bet: Coin

    @classmethod
    def new(cls, challenger: Address, opponent: Address, nonce: int, bet: Coin, board: str) -> Self:
        return cls(
            challenger=challenger,
            opponent=opponent,
            board=board,
            state=AwaitingOpponent(),
            nonce=nonce,
            last_move=0,
            start=0,
            bet=bet,
        )

    def started(self, block_height: int) -> Self:
        """Copy of the match after the opponent joined. White always moves first."""
        return replace(self, state=OnGoing(Side.WHITE), start=block_height)


@dataclass
class ContractConfig:
    """On-ledger configuration, written once by Initialize. Only the nonce counter changes afterwards."""

    admin: Address
    min_bet: Coin
    next_nonce: int
    contract_name: str
    contract_version: str


# --- Host inputs ---
@dataclass(frozen=True)
class Env:
    block_height: int


@dataclass(frozen=True)
class MessageInfo:
    sender: Address
    funds: list[Coin] = field(default_factory=list)


# --- Operation outputs ---
@dataclass(frozen=True)
class BankSend:
    """Transfer instruction executed by the ledger after the operation committed."""

    to_address: Address
    amount: list[Coin]


@dataclass(frozen=True)
class Event:
    type: EventType
    attributes: dict[str, str]


@dataclass
class Response:
    attributes: dict[str, str] = field(default_factory=dict)
    events: list[Event] = field(default_factory=list)
    messages: list[BankSend] = field(default_factory=list)
