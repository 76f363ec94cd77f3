import pytest

from ethstream.ethutils import (
    RLPError,
    RLPHeader,
    adjust_decimals,
    all_zeroes,
    eth_address_from_key,
    eth_address_string_from_binary,
    eth_address_string_from_key,
    eth_displayable_address,
    is_max_int,
    keccak256,
    rlp_can_decode,
    rlp_decode_length,
    u64_to_string,
)

GENERATOR_KEY = bytes.fromhex(
    "04"
    "79be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"
    "483ada7726a3c4655da4fbfc0e1108a8fd17b448a68554199c47d08ffb10d4b8"
)


def test_keccak256_empty():
    assert keccak256(b"").hex() == (
        "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
    )


@pytest.mark.parametrize(
    "buffer, expected",
    [
        (b"\x05", RLPHeader(1, 0, False)),
        (b"\x83", RLPHeader(3, 1, False)),
        (b"\xb8\x40", RLPHeader(64, 2, False)),
        (b"\xb9\x01\x00", RLPHeader(256, 3, False)),
        (b"\xc3", RLPHeader(3, 1, True)),
        (b"\xf9\x01\x00", RLPHeader(256, 3, True)),
        (b"\xfb\x00\x00\x01\x00", RLPHeader(256, 5, True)),
    ],
)
def test_rlp_decode_length(buffer, expected):
    assert rlp_decode_length(buffer) == expected


@pytest.mark.parametrize("prefix", [0xBC, 0xBF, 0xFC, 0xFF])
def test_rlp_decode_length_rejects_long_lengths(prefix):
    with pytest.raises(RLPError):
        rlp_decode_length(bytes([prefix]) + b"\x00" * 8)


def test_rlp_can_decode_waits_for_length_bytes():
    assert rlp_can_decode(b"") is False
    assert rlp_can_decode(b"\xb9\x01") is False
    assert rlp_can_decode(b"\xb9\x01\x00") is True
    assert rlp_can_decode(b"\x80") is True


def test_rlp_can_decode_invalid_once_complete():
    assert rlp_can_decode(b"\xbc\x00\x00") is False
    with pytest.raises(RLPError):
        rlp_can_decode(b"\xbc\x00\x00\x00\x00\x00")
    with pytest.raises(RLPError):
        rlp_can_decode(b"\xfc\x00\x00\x00\x00\x00")


def test_u64_to_string():
    assert u64_to_string(0, 2) == "0"
    assert u64_to_string(12345, 6) == "12345"
    assert u64_to_string((1 << 64) - 1) == "18446744073709551615"


def test_u64_to_string_errors():
    with pytest.raises(ValueError):
        u64_to_string(12345, 5)
    with pytest.raises(ValueError):
        u64_to_string(-1)
    with pytest.raises(ValueError):
        u64_to_string(1 << 64)


def test_eip55_checksum():
    expected = "5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
    address = bytes.fromhex(expected)
    assert eth_address_string_from_binary(address, 1) == expected


def test_checksum_keeps_hex_digits():
    address = bytes(range(20))
    result = eth_address_string_from_binary(address, 1)
    assert result.lower() == address.hex()
    assert len(result) == 40


def test_eip1191_checksum_differs_only_in_case():
    address = bytes.fromhex("5aaeb6053f3e94c9b9a09f33669435e7ef1beaed")
    rsk = eth_address_string_from_binary(address, 30)
    assert rsk.lower() == address.hex()
    assert rsk != eth_address_string_from_binary(address, 1)


def test_address_wrong_length():
    with pytest.raises(ValueError):
        eth_address_string_from_binary(b"\x00" * 19, 1)


def test_address_from_key():
    assert eth_address_from_key(GENERATOR_KEY) == bytes.fromhex(
        "7e5f4552091a69125d5dfcd7b8c3659c62b3d43c"
    )


def test_address_string_from_key_matches_binary():
    text = eth_address_string_from_key(GENERATOR_KEY, 1)
    assert text == eth_address_string_from_binary(eth_address_from_key(GENERATOR_KEY), 1)
    assert text.lower() == eth_address_from_key(GENERATOR_KEY).hex()


def test_address_from_key_wrong_length():
    with pytest.raises(ValueError):
        eth_address_from_key(GENERATOR_KEY[:64])


def test_displayable_address():
    address = bytes(range(20))
    shown = eth_displayable_address(address, 1, 43)
    assert shown == "0x" + eth_address_string_from_binary(address, 1)
    with pytest.raises(ValueError):
        eth_displayable_address(address, 1, 42)


@pytest.mark.parametrize(
    "src, decimals, expected",
    [
        ("0", 18, "0"),
        ("12345", 2, "123.45"),
        ("12300", 2, "123"),
        ("12340", 2, "123.4"),
        ("5", 3, "0.005"),
        ("500", 3, "0.5"),
        ("42", 0, "42"),
        ("000", 5, "0"),
    ],
)
def test_adjust_decimals(src, decimals, expected):
    assert adjust_decimals(src, decimals) == expected


def test_adjust_decimals_room():
    assert adjust_decimals("12345", 2, 7) == "123.45"
    with pytest.raises(ValueError):
        adjust_decimals("12345", 2, 6)
    with pytest.raises(ValueError):
        adjust_decimals("5", 3, 6)
    with pytest.raises(ValueError):
        adjust_decimals("0", 3, 1)


def test_all_zeroes_and_max_int():
    assert all_zeroes(bytes(32)) is True
    assert all_zeroes(b"\x00\x01") is False
    assert is_max_int(b"\xff" * 32) is True
    assert is_max_int(b"\xff\xfe") is False