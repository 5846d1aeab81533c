"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import JSON, BigInteger, ForeignKey, LargeBinary, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Coin amounts are 128-bit on the ledger and do not fit a 64-bit integer column: stored as decimal text.
AMOUNT_LENGTH = 40
MATCH_ID_LENGTH = 32


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBContractConfig(Base):
    """Single row, written by Initialize."""

    __tablename__ = "contract_config"
    id: Mapped[int] = mapped_column(primary_key=True, default=1)
    admin: Mapped[str]
    min_bet_amount: Mapped[str] = mapped_column(String(AMOUNT_LENGTH))
    min_bet_denom: Mapped[str]
    next_nonce: Mapped[int] = mapped_column(BigInteger)
    contract_name: Mapped[str]
    contract_version: Mapped[str]


class DBMatch(Base):
    __tablename__ = "matches"
    id: Mapped[bytes] = mapped_column(LargeBinary(MATCH_ID_LENGTH), primary_key=True)
    challenger: Mapped[str]
    opponent: Mapped[str]
    board: Mapped[str]
    state: Mapped[str]
    turn: Mapped[Optional[str]]
    nonce: Mapped[int] = mapped_column(BigInteger, unique=True)
    last_move: Mapped[int] = mapped_column(BigInteger)
    start: Mapped[int] = mapped_column(BigInteger)
    bet_amount: Mapped[str] = mapped_column(String(AMOUNT_LENGTH))
    bet_denom: Mapped[str]


class DBPlayerMatch(Base):
    """Membership set (player, match id): the open matches of a player."""

    __tablename__ = "player_matches"
    player: Mapped[str] = mapped_column(primary_key=True)
    match_id: Mapped[bytes] = mapped_column(
        LargeBinary(MATCH_ID_LENGTH), ForeignKey("matches.id"), primary_key=True
    )


class DBMatchId(Base):
    """nonce -> match id, gives creation-ordered enumeration."""

    __tablename__ = "match_ids"
    nonce: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    match_id: Mapped[bytes] = mapped_column(
        LargeBinary(MATCH_ID_LENGTH), ForeignKey("matches.id")
    )


class DBEvent(Base):
    """Append-only audit trail. Rows outlive the match they describe."""

    __tablename__ = "events"
    seq: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    block_height: Mapped[int] = mapped_column(BigInteger)
    type: Mapped[str]
    match_id: Mapped[str] = mapped_column(String(2 * MATCH_ID_LENGTH), index=True)
    attributes: Mapped[dict[str, str]] = mapped_column(JSON)
    recorded_at: Mapped[datetime] = mapped_column(default=utc_now)
