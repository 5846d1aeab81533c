"""
Deterministic match identifiers.

id = sha256(challenger bytes || opponent bytes || nonce as 8 big-endian bytes)
Inside the contract the id is 32 raw bytes. Outside (requests, events, responses) it is always lowercase hex.
"""

import hashlib
from string import hexdigits

from chess_escrow.core.exceptions import InvalidMatchIdError
from chess_escrow.core.models import Address, MatchId

MATCH_ID_BYTES = 32
MATCH_ID_HEX_LENGTH = 2 * MATCH_ID_BYTES
NONCE_BYTES = 8


def derive_match_id(challenger: Address, opponent: Address, nonce: int) -> MatchId:
    payload = (
        challenger.encode("utf-8")
        + opponent.encode("utf-8")
        + nonce.to_bytes(NONCE_BYTES, "big")
    )
    return hashlib.sha256(payload).digest()


def match_id_to_hex(match_id: MatchId) -> str:
    return match_id.hex()


def is_match_id_hex(value: str) -> bool:
    """64 characters, lowercase hexadecimal only."""
    return (
        len(value) == MATCH_ID_HEX_LENGTH
        and all(c in hexdigits for c in value)
        and value == value.lower()
    )


def match_id_from_hex(value: str) -> MatchId:
    """Parse the boundary representation back into the raw 32-byte id."""
    if not is_match_id_hex(value):
        raise InvalidMatchIdError(f"Cannot interpret {value!r} as a match ID.")
    return bytes.fromhex(value)
