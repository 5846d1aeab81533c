"""
Stake escrow rules: which deposits are accepted, and who gets paid when a match ends.

Pure functions, no storage access. The contract holds the deposits; settlement only produces BankSend
instructions that the ledger executes after the operation committed.
NOTE: aborting a match produces no transfer. The challenger's deposit is not refunded on abort.
"""

from chess_escrow.core.exceptions import InvalidBetError
from chess_escrow.core.models import Address, BankSend, Coin
from chess_escrow.core.shared_types import InvalidBetReason


def _single_coin(funds: list[Coin]) -> Coin:
    """Exactly one coin per funding operation."""
    if not funds:
        raise InvalidBetError(InvalidBetReason.MISSING_BET)
    if len(funds) > 1:
        raise InvalidBetError(InvalidBetReason.TOO_MANY_COINS)
    return funds[0]


def validate_creation(funds: list[Coin], min_bet: Coin) -> Coin:
    """Challenger's deposit: the configured denomination, at least the minimum amount."""
    bet = _single_coin(funds)
    if bet.denom != min_bet.denom:
        raise InvalidBetError(InvalidBetReason.WRONG_DENOM)
    if bet.amount < min_bet.amount:
        raise InvalidBetError(InvalidBetReason.AMOUNT_TOO_LOW)
    return bet


def validate_join(funds: list[Coin], challenger_stake: Coin) -> Coin:
    """Opponent's deposit must match the challenger's stake exactly (no more, no less)."""
    bet = _single_coin(funds)
    if bet.denom != challenger_stake.denom:
        raise InvalidBetError(InvalidBetReason.WRONG_DENOM)
    if bet.amount != challenger_stake.amount:
        raise InvalidBetError(InvalidBetReason.INVALID_AMOUNT)
    return bet


def settle_win(stake: Coin, winner: Address) -> list[BankSend]:
    """The whole pot (both stakes) goes to the winner."""
    pot = Coin(amount=2 * stake.amount, denom=stake.denom)
    return [BankSend(to_address=winner, amount=[pot])]


def settle_draw(stake: Coin, challenger: Address, opponent: Address) -> list[BankSend]:
    """Both players get their own stake back."""
    return [
        BankSend(to_address=challenger, amount=[stake]),
        BankSend(to_address=opponent, amount=[stake]),
    ]
