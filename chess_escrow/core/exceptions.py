"""
Error taxonomy of the match contract.

Every error rejects the whole operation it was raised in: nothing is persisted, no event is recorded and no funds move.
NOTE: none of these subclass ValueError, so pydantic validators can raise them and they reach the caller unwrapped.
"""

from chess_escrow.core.shared_types import InvalidBetReason


class MatchError(Exception):
    """Top-level error for anything the contract rejects."""

    default_message = "Match operation rejected"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


# --- Instance lifecycle ---
class NotInitializedError(MatchError):
    default_message = "Contract has not been initialized"


class AlreadyInitializedError(MatchError):
    default_message = "Contract is already initialized"


class ContractVersionError(MatchError):
    default_message = "Cannot migrate between these contract versions"


class UnauthorizedError(MatchError):
    default_message = "Unauthorized"


# --- Request validation ---
class InvalidAddressError(MatchError):
    default_message = "Invalid address"


class InvalidOpponentError(MatchError):
    default_message = "Invalid opponent"


class InvalidBetError(MatchError):
    default_message = "Invalid bet"

    def __init__(self, reason: InvalidBetReason, message: str | None = None) -> None:
        self.reason = reason
        super().__init__(message or f"{self.default_message}: {reason}")


class InvalidMatchIdError(MatchError):
    default_message = "Invalid match ID"


# --- Match state ---
class UnknownMatchError(MatchError):
    default_message = "Unknown match"


class NotMatchCreatorError(MatchError):
    default_message = "Not the match creator"


class NotAwaitingOpponentError(MatchError):
    default_message = "Not awaiting opponent"


class StillAwaitingOpponentError(MatchError):
    default_message = "Still awaiting opponent"


class MatchAlreadyFinishedError(MatchError):
    default_message = "Match already finished"


class NotYourTurnError(MatchError):
    default_message = "Not your turn"


# --- Moves / board ---
class InvalidMoveEncodingError(MatchError):
    default_message = "Invalid move encoding"


class InvalidBoardEncodingError(MatchError):
    default_message = "Invalid board encoding"


class IllegalMoveError(MatchError):
    default_message = "Illegal move"
