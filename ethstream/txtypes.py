"""Transaction field layouts, parser statuses and parsed transaction content."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

TX_FLAG_TYPE = 0x01
ADDRESS_LENGTH = 20
INT256_LENGTH = 32
V_LENGTH = 8
RLP_NONE = 0
MIN_TX_TYPE = 0x00
MAX_TX_TYPE = 0x7F


class CustomStatus(IntEnum):
    """Outcome of a custom field processor."""

    NOT_HANDLED = 0
    HANDLED = 1
    SUSPENDED = 2
    FAULT = 3


class ParserStatus(IntEnum):
    """State reported by the streaming transaction parser."""

    PROCESSING = 0
    SUSPENDED = 1
    FINISHED = 2
    FAULT = 3
    CONTINUE = 4


class TxType(IntEnum):
    """EIP-2718 transaction type."""

    EIP2930 = 0x01
    EIP1559 = 0x02
    LEGACY = 0xC0

    @classmethod
    def from_first_byte(cls, value: int) -> TxType:
        """Classify a transaction by its first byte.

        Bytes from 0xc0 up start a legacy RLP list; bytes in [0x00, 0x7f]
        name a typed transaction, which must be a supported one.
        """
        if not 0 <= value <= 0xFF:
            raise ValueError(f"not a byte: {value}")
        if value >= cls.LEGACY:
            return cls.LEGACY
        if MIN_TX_TYPE <= value <= MAX_TX_TYPE:
            try:
                return cls(value)
            except ValueError:
                raise ValueError(f"unsupported transaction type 0x{value:02x}") from None
        raise ValueError(f"invalid transaction type byte 0x{value:02x}")


class LegacyField(IntEnum):
    NONE = RLP_NONE
    CONTENT = 1
    TYPE = 2
    NONCE = 3
    GASPRICE = 4
    STARTGAS = 5
    TO = 6
    VALUE = 7
    DATA = 8
    V = 9
    R = 10
    S = 11
    DONE = 12


class EIP2930Field(IntEnum):
    NONE = RLP_NONE
    CONTENT = 1
    TYPE = 2
    CHAINID = 3
    NONCE = 4
    GASPRICE = 5
    GASLIMIT = 6
    TO = 7
    VALUE = 8
    DATA = 9
    ACCESS_LIST = 10
    DONE = 11


class EIP1559Field(IntEnum):
    NONE = RLP_NONE
    CONTENT = 1
    TYPE = 2
    CHAINID = 3
    NONCE = 4
    MAX_PRIORITY_FEE_PER_GAS = 5
    MAX_FEE_PER_GAS = 6
    GASLIMIT = 7
    TO = 8
    VALUE = 9
    DATA = 10
    ACCESS_LIST = 11
    DONE = 12


@dataclass
class TxInt256:
    """Big-endian integer of at most 32 bytes as it appeared in the transaction."""

    value: bytes = b""

    def set(self, data: bytes) -> None:
        """Store ``data``, which must be at most 32 bytes long."""
        if len(data) > INT256_LENGTH:
            raise ValueError(f"integer longer than {INT256_LENGTH} bytes")
        self.value = bytes(data)

    @property
    def length(self) -> int:
        return len(self.value)

    def to_int(self) -> int:
        """The stored bytes as an unsigned integer; zero when empty."""
        return int.from_bytes(self.value, "big")


@dataclass
class TxContent:
    """Fields extracted from a transaction.

    ``gasprice`` holds maxFeePerGas for EIP-1559 transactions and ``startgas``
    the gas limit. ``data_present`` is cleared when the data field is empty.
    """

    gasprice: TxInt256 = field(default_factory=TxInt256)
    startgas: TxInt256 = field(default_factory=TxInt256)
    value: TxInt256 = field(default_factory=TxInt256)
    nonce: TxInt256 = field(default_factory=TxInt256)
    chain_id: TxInt256 = field(default_factory=TxInt256)
    destination: bytes = b""
    v: bytes = b""
    data_present: bool = True