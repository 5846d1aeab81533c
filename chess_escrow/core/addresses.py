"""Shape check for bech32-style ledger addresses (e.g. 'neutron1m9l358...')"""

from chess_escrow.core.exceptions import InvalidAddressError
from chess_escrow.core.models import Address

BECH32_CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
MAX_ADDRESS_LENGTH = 90
MIN_DATA_LENGTH = 6  # the checksum alone is 6 characters


def is_valid_address(addr: str) -> bool:
    """
    Normalized form only: lowercase human readable part, separator '1', data part in the bech32 alphabet.
    NOTE: the checksum itself is not verified, the ledger does that before a transfer lands.
    """
    if not addr or len(addr) > MAX_ADDRESS_LENGTH:
        return False
    if addr != addr.lower():
        return False

    hrp, separator, data = addr.rpartition("1")
    if not separator or not hrp or len(data) < MIN_DATA_LENGTH:
        return False
    if not all(33 <= ord(c) <= 126 for c in hrp):
        return False
    return all(c in BECH32_CHARSET for c in data)


def validate_address(addr: str) -> Address:
    if not is_valid_address(addr):
        raise InvalidAddressError(f"Not a valid address: {addr!r}")
    return addr
