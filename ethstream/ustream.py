"""Streaming RLP parser that extracts and hashes transaction fields."""

from __future__ import annotations

from typing import Any, Callable, Optional

from Crypto.Hash import keccak

from .ethutils import rlp_can_decode, rlp_decode_length
from .txtypes import (
    ADDRESS_LENGTH,
    INT256_LENGTH,
    RLP_NONE,
    TX_FLAG_TYPE,
    V_LENGTH,
    CustomStatus,
    EIP1559Field,
    EIP2930Field,
    LegacyField,
    ParserStatus,
    TxContent,
    TxType,
)

MAX_INT256 = INT256_LENGTH
MAX_ADDRESS = ADDRESS_LENGTH
_RLP_HEADER_MAX = 5

CustomProcessor = Callable[["TxParser"], CustomStatus]


class TxParseError(ValueError):
    """Raised when a transaction cannot be parsed."""


class TxParser:
    """Incremental parser for legacy, EIP-2930 and EIP-1559 transactions.

    Bytes are fed with :meth:`process`, possibly in several chunks. Every byte
    seen is hashed with Keccak-256, and the recognised fields are stored in
    ``content``. An optional custom processor is called before each field is
    handled and may take over the field, suspend parsing, or abort it.
    """

    def __init__(
        self,
        content: Optional[TxContent] = None,
        tx_type: int = TxType.LEGACY,
        custom_processor: Optional[CustomProcessor] = None,
        extra: Any = None,
    ) -> None:
        self.content = content if content is not None else TxContent()
        self.tx_type = tx_type
        self.custom_processor = custom_processor
        self.extra = extra
        self.current_field = RLP_NONE + 1
        self.current_field_length = 0
        self.current_field_pos = 0
        self.current_field_is_list = False
        self.processing_field = False
        self.field_single_byte = False
        self.data_length = 0
        self.processing_flags = 0
        self._rlp_header = bytearray()
        self._field_data = bytearray()
        self._buffer = b""
        self._pos = 0
        self._sha3 = keccak.new(digest_bits=256, update_after_digest=True)

    # -- input access -------------------------------------------------

    @property
    def remaining(self) -> int:
        """Bytes of the current chunk not consumed yet."""
        return len(self._buffer) - self._pos

    def read_byte(self) -> int:
        """Consume and hash one byte of input."""
        if self.remaining < 1:
            raise TxParseError("read past the end of the input")
        byte = self._buffer[self._pos]
        self._pos += 1
        if self.processing_field:
            self.current_field_pos += 1
        if not (self.processing_field and self.field_single_byte):
            self._sha3.update(bytes((byte,)))
        return byte

    def copy_data(self, length: int, store: Optional[bytearray] = None) -> bytes:
        """Consume and hash ``length`` bytes, appending them to ``store`` if given."""
        if length < 0 or self.remaining < length:
            raise TxParseError("copy past the end of the input")
        chunk = self._buffer[self._pos : self._pos + length]
        if store is not None:
            store.extend(chunk)
        if not (self.processing_field and self.field_single_byte):
            self._sha3.update(chunk)
        self._pos += length
        if self.processing_field:
            self.current_field_pos += length
        return chunk

    def digest(self) -> bytes:
        """Keccak-256 of every byte hashed so far."""
        return self._sha3.digest()

    def is_done(self) -> bool:
        """True once the last field of the transaction has been parsed."""
        done = {
            TxType.LEGACY: LegacyField.DONE,
            TxType.EIP2930: EIP2930Field.DONE,
            TxType.EIP1559: EIP1559Field.DONE,
        }.get(self.tx_type)
        return done is not None and self.current_field == done

    # -- driving ------------------------------------------------------

    def process(self, buffer: bytes, flags: int = 0) -> ParserStatus:
        """Feed a new chunk of the transaction and parse as far as possible."""
        self._buffer = bytes(buffer)
        self._pos = 0
        self.processing_flags = flags
        return self._guarded()

    def resume(self) -> ParserStatus:
        """Continue parsing the current chunk, e.g. after a suspension."""
        return self._guarded()

    def _guarded(self) -> ParserStatus:
        try:
            return self._run()
        except TxParseError:
            raise
        except ValueError as exc:
            raise TxParseError(str(exc)) from exc

    def _run(self) -> ParserStatus:
        while True:
            if self.is_done():
                return ParserStatus.FINISHED
            # Pre EIP-155 transactions stop before v, r and s.
            if (
                self.tx_type == TxType.LEGACY
                and self.current_field == LegacyField.V
                and not self.remaining
            ):
                self.content.v = b""
                return ParserStatus.FINISHED
            if not self.remaining:
                return ParserStatus.PROCESSING
            if not self.processing_field and not self._parse_rlp():
                return ParserStatus.PROCESSING
            status = CustomStatus.NOT_HANDLED
            if self.custom_processor is not None:
                status = CustomStatus(self.custom_processor(self))
                if status == CustomStatus.SUSPENDED:
                    return ParserStatus.SUSPENDED
                if status == CustomStatus.FAULT:
                    raise TxParseError("custom processor aborted")
            if status == CustomStatus.NOT_HANDLED:
                handlers = self._HANDLERS.get(self.tx_type)
                if handlers is None:
                    raise TxParseError(f"transaction type {self.tx_type} is not supported")
                handler = handlers.get(self.current_field)
                if handler is None:
                    raise TxParseError("invalid RLP decoder state")
                handler(self)

    def _parse_rlp(self) -> bool:
        """Read a field header; False when more input is needed."""
        can_decode = False
        while self.remaining:
            self._rlp_header.append(self.read_byte())
            if rlp_can_decode(bytes(self._rlp_header)):
                can_decode = True
                break
            if len(self._rlp_header) == _RLP_HEADER_MAX:
                raise TxParseError("RLP header too long")
        if not can_decode:
            return False
        header = rlp_decode_length(bytes(self._rlp_header))
        self.current_field_length = header.length
        self.current_field_is_list = header.is_list
        if header.offset == 0:
            # A single byte encodes itself: rewind so it is read as the value.
            self._pos -= 1
            self.field_single_byte = True
        else:
            self.field_single_byte = False
        self.current_field_pos = 0
        self._rlp_header.clear()
        self._field_data.clear()
        self.processing_field = True
        return True

    # -- field handlers -----------------------------------------------

    def _finish_field(self) -> None:
        self.current_field += 1
        self.processing_field = False

    def _consume(
        self,
        label: str,
        *,
        is_list: bool = False,
        max_length: Optional[int] = None,
        keep: bool = True,
    ) -> Optional[bytes]:
        """Consume the current field; return its bytes once it is complete."""
        if self.current_field_is_list != is_list:
            raise TxParseError(f"invalid type for {label}")
        if max_length is not None and self.current_field_length > max_length:
            raise TxParseError(f"invalid length for {label}")
        if self.current_field_pos < self.current_field_length:
            size = min(self.remaining, self.current_field_length - self.current_field_pos)
            self.copy_data(size, self._field_data if keep else None)
        if self.current_field_pos == self.current_field_length:
            self._finish_field()
            return bytes(self._field_data)
        return None

    def _process_content(self) -> None:
        if not self.current_field_is_list:
            raise TxParseError("invalid type for CONTENT")
        self.data_length = self.current_field_length
        self._finish_field()
        if not self.processing_flags & TX_FLAG_TYPE:
            self.current_field += 1

    def _process_type(self) -> None:
        self._consume("TYPE", max_length=MAX_INT256, keep=False)

    def _process_chain_id(self) -> None:
        data = self._consume("CHAINID", max_length=MAX_INT256)
        if data is not None:
            self.content.chain_id.set(data)

    def _process_nonce(self) -> None:
        data = self._consume("NONCE", max_length=MAX_INT256)
        if data is not None:
            self.content.nonce.set(data)

    def _process_start_gas(self) -> None:
        data = self._consume("STARTGAS", max_length=MAX_INT256)
        if data is not None:
            self.content.startgas.set(data)

    def _process_gasprice(self) -> None:
        data = self._consume("GASPRICE", max_length=MAX_INT256)
        if data is not None:
            self.content.gasprice.set(data)

    def _process_value(self) -> None:
        data = self._consume("VALUE", max_length=MAX_INT256)
        if data is not None:
            self.content.value.set(data)

    def _process_to(self) -> None:
        data = self._consume("TO", max_length=MAX_ADDRESS)
        if data is not None:
            self.content.destination = data

    def _process_data(self) -> None:
        if self.current_field_is_list:
            raise TxParseError("invalid type for DATA")
        if self.current_field_pos < self.current_field_length:
            size = min(self.remaining, self.current_field_length - self.current_field_pos)
            if size == 1 and self._buffer[self._pos] == 0x00:
                self.content.data_present = False
        self._consume("DATA", keep=False)

    def _process_access_list(self) -> None:
        self._consume("ACCESS_LIST", is_list=True, keep=False)

    def _process_and_discard(self) -> None:
        self._consume("discarded field", keep=False)

    def _process_v(self) -> None:
        data = self._consume("V")
        if data is not None:
            self.content.v = data[:V_LENGTH]

    _HANDLERS: dict = {
        TxType.LEGACY: {
            LegacyField.CONTENT: _process_content,
            LegacyField.TYPE: _process_type,
            LegacyField.NONCE: _process_nonce,
            LegacyField.GASPRICE: _process_gasprice,
            LegacyField.STARTGAS: _process_start_gas,
            LegacyField.TO: _process_to,
            LegacyField.VALUE: _process_value,
            LegacyField.DATA: _process_data,
            LegacyField.V: _process_v,
            LegacyField.R: _process_and_discard,
            LegacyField.S: _process_and_discard,
        },
        TxType.EIP2930: {
            EIP2930Field.CONTENT: _process_content,
            EIP2930Field.TYPE: _process_type,
            EIP2930Field.CHAINID: _process_chain_id,
            EIP2930Field.NONCE: _process_nonce,
            EIP2930Field.GASPRICE: _process_gasprice,
            EIP2930Field.GASLIMIT: _process_start_gas,
            EIP2930Field.TO: _process_to,
            EIP2930Field.VALUE: _process_value,
            EIP2930Field.DATA: _process_data,
            EIP2930Field.ACCESS_LIST: _process_access_list,
        },
        TxType.EIP1559: {
            EIP1559Field.CONTENT: _process_content,
            EIP1559Field.TYPE: _process_type,
            EIP1559Field.CHAINID: _process_chain_id,
            EIP1559Field.NONCE: _process_nonce,
            EIP1559Field.MAX_PRIORITY_FEE_PER_GAS: _process_and_discard,
            EIP1559Field.MAX_FEE_PER_GAS: _process_gasprice,
            EIP1559Field.GASLIMIT: _process_start_gas,
            EIP1559Field.TO: _process_to,
            EIP1559Field.VALUE: _process_value,
            EIP1559Field.DATA: _process_data,
            EIP1559Field.ACCESS_LIST: _process_access_list,
        },
    }