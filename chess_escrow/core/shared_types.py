"""
Type definitions used across layers
"""

from enum import StrEnum


class Side(StrEnum):
    WHITE = "white"
    BLACK = "black"


class StateKind(StrEnum):
    """Tag of a MatchState, used where the state has to be flattened (DB columns, responses)."""

    AWAITING_OPPONENT = "awaiting_opponent"
    ON_GOING = "on_going"
    WON = "won"
    DRAWN = "drawn"


class GameStatus(StrEnum):
    """What the rules engine reports about a position."""

    ONGOING = "ongoing"
    WON = "won"
    DRAWN = "drawn"


class InvalidBetReason(StrEnum):
    MISSING_BET = "missing_bet"
    TOO_MANY_COINS = "too_many_coins"
    WRONG_DENOM = "wrong_denom"
    AMOUNT_TOO_LOW = "amount_too_low"
    INVALID_AMOUNT = "invalid_amount"


class EventType(StrEnum):
    MATCH_CREATED = "match_created"
    MATCH_ABORTED = "match_aborted"
    MATCH_STARTED = "match_started"
    MOVE_EXECUTED = "move_executed"
    MATCH_WON = "match_won"
    MATCH_DRAWN = "match_drawn"
