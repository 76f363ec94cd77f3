"""RLP header decoding, address derivation and amount formatting helpers."""

from __future__ import annotations

from dataclasses import dataclass

from Crypto.Hash import keccak

HEXDIGITS = "0123456789abcdef"
ADDRESS_LENGTH = 20
PUBLIC_KEY_LENGTH = 65
DISPLAYABLE_ADDRESS_SIZE = 43

_U64_MAX = (1 << 64) - 1
_EIP1191_CHAIN_IDS = frozenset({30, 31})


class RLPError(ValueError):
    """Raised when an RLP header is malformed or exceeds the 32-bit length limit."""


@dataclass(frozen=True)
class RLPHeader:
    """Decoded RLP prefix: payload length, header size and whether it is a list."""

    length: int
    offset: int
    is_list: bool


def keccak256(data: bytes) -> bytes:
    """Keccak-256 digest (the original Keccak padding used by Ethereum)."""
    return keccak.new(digest_bits=256, data=bytes(data)).digest()


def _long_form_size(prefix: int) -> int:
    """Number of length bytes following a long-form prefix, 0 for short forms."""
    if 0xB8 <= prefix <= 0xBF:
        return prefix - 0xB7
    if prefix >= 0xF8:
        return prefix - 0xF7
    return 0


def _check_prefix(prefix: int) -> None:
    if 0xBC <= prefix <= 0xBF or prefix >= 0xFC:
        raise RLPError(f"RLP prefix 0x{prefix:02x} exceeds the 32-bit length limit")


def rlp_can_decode(buffer: bytes) -> bool:
    """Tell whether ``buffer`` holds enough bytes to decode the RLP header.

    Raises RLPError once enough bytes are present but the header is invalid.
    """
    if not buffer:
        return False
    prefix = buffer[0]
    if len(buffer) < 1 + _long_form_size(prefix):
        return False
    _check_prefix(prefix)
    return True


def rlp_decode_length(buffer: bytes) -> RLPHeader:
    """Decode the RLP header at the start of ``buffer``."""
    if not buffer:
        raise RLPError("empty RLP buffer")
    prefix = buffer[0]
    if prefix <= 0x7F:
        return RLPHeader(length=1, offset=0, is_list=False)
    if prefix <= 0xB7:
        return RLPHeader(length=prefix - 0x80, offset=1, is_list=False)
    if 0xC0 <= prefix <= 0xF7:
        return RLPHeader(length=prefix - 0xC0, offset=1, is_list=True)
    _check_prefix(prefix)
    size = _long_form_size(prefix)
    if len(buffer) < 1 + size:
        raise RLPError("truncated RLP length")
    length = int.from_bytes(buffer[1 : 1 + size], "big")
    return RLPHeader(length=length, offset=1 + size, is_list=prefix >= 0xF8)


def eth_address_from_key(public_key: bytes) -> bytes:
    """Derive the 20-byte address from a 65-byte uncompressed public key."""
    if len(public_key) != PUBLIC_KEY_LENGTH:
        raise ValueError(f"public key must be {PUBLIC_KEY_LENGTH} bytes")
    return keccak256(public_key[1:])[-ADDRESS_LENGTH:]


def eth_address_string_from_key(public_key: bytes, chain_id: int) -> str:
    """Checksummed 40-character address string derived from a public key."""
    return eth_address_string_from_binary(eth_address_from_key(public_key), chain_id)


def u64_to_string(value: int, size: int = 21) -> str:
    """Decimal rendering of an unsigned 64-bit value.

    ``size`` is the room available, counting one slot for a terminator;
    a ValueError is raised when the digits do not fit.
    """
    if not 0 <= value <= _U64_MAX:
        raise ValueError("value does not fit in 64 bits")
    text = str(value)
    if len(text) + 1 > size:
        raise ValueError("destination too small")
    return text


def eth_address_string_from_binary(address: bytes, chain_id: int) -> str:
    """Mixed-case checksummed address without the 0x prefix.

    EIP-55 is used, or EIP-1191 for the chain ids that require it.
    """
    if len(address) != ADDRESS_LENGTH:
        raise ValueError(f"address must be {ADDRESS_LENGTH} bytes")
    lower = bytes(address).hex()
    prefix = f"{u64_to_string(chain_id, 51)}0x" if chain_id in _EIP1191_CHAIN_IDS else ""
    digest = keccak256((prefix + lower).encode("ascii"))
    chars = []
    for index, char in enumerate(lower):
        if char.isdigit():
            chars.append(char)
            continue
        nibble = (digest[index // 2] >> (4 * (1 - index % 2))) & 0x0F
        chars.append(char.upper() if nibble >= 8 else char)
    return "".join(chars)


def eth_displayable_address(
    address: bytes, chain_id: int, max_length: int | None = None
) -> str:
    """Checksummed address with the 0x prefix.

    ``max_length`` counts a terminator slot, as the display buffers do.
    """
    if max_length is not None and max_length < DISPLAYABLE_ADDRESS_SIZE:
        raise ValueError("destination too small for an address")
    return "0x" + eth_address_string_from_binary(address, chain_id)


def _check_room(required: int, max_length: int | None) -> None:
    if max_length is not None and max_length < required:
        raise ValueError("destination too small")


def adjust_decimals(src: str, decimals: int, max_length: int | None = None) -> str:
    """Insert a decimal point ``decimals`` digits from the right of ``src``.

    Trailing zeros of the fraction are dropped, and the point too when no
    fraction is left. ``max_length`` counts a terminator slot.
    """
    if decimals < 0:
        raise ValueError("decimals must not be negative")
    if src == "0":
        _check_room(2, max_length)
        return "0"
    if len(src) <= decimals:
        delta = decimals - len(src)
        _check_room(len(src) + 3 + delta, max_length)
        integer, fraction = "0", "0" * delta + src
    else:
        _check_room(len(src) + 2, max_length)
        cut = len(src) - decimals
        integer, fraction = src[:cut], src[cut:]
    fraction = fraction.rstrip("0")
    return f"{integer}.{fraction}" if fraction else integer


def all_zeroes(data: bytes) -> bool:
    """True when every byte is zero (and for empty input)."""
    return not any(data)


def is_max_int(data: bytes) -> bool:
    """True when every byte is 0xff (and for empty input)."""
    return all(byte == 0xFF for byte in data)