# ethstream

Tools for handling Ethereum transactions the way a hardware wallet sees them:
byte by byte, in chunks, with a running Keccak-256 hash.

## What is inside

- `ethstream.ustream`: `TxParser`, an incremental RLP parser for legacy,
  EIP-2930 and EIP-1559 transactions. Feed it chunks with `process()`; it
  fills a `TxContent` (nonce, gas price or max fee per gas, gas limit,
  destination, value, chain id, `v`) and hashes every byte it reads.
  `digest()` returns the Keccak-256 of what was hashed so far. A custom
  processor may take over any field, suspend parsing (`resume()` picks it up
  again) or abort it. Malformed input raises `TxParseError`.
- `ethstream.txtypes`: the parser's enums (`TxType`, `ParserStatus`,
  `CustomStatus`, `LegacyField`, `EIP2930Field`, `EIP1559Field`) and the
  `TxInt256` / `TxContent` containers.
- `ethstream.ethutils`: RLP header decoding (`rlp_can_decode`,
  `rlp_decode_length`, raising `RLPError`), `keccak256`, address derivation
  from a 65-byte public key (`eth_address_from_key`,
  `eth_address_string_from_key`), EIP-55 / EIP-1191 checksummed addresses
  (`eth_address_string_from_binary`, `eth_displayable_address`),
  `adjust_decimals` for rendering token amounts, `u64_to_string`,
  `all_zeroes` and `is_max_int`.
- `ethstream.network`: chain id to network name and ticker lookup
  (`get_chain_id`, `get_network`, `get_network_name`, `get_network_ticker`).

## Install

```
pip install .
```

## Examples

```python
from ethstream.ethutils import adjust_decimals, eth_displayable_address

address = bytes.fromhex("5aaeb6053f3e94c9b9a09f33669435e7ef1beaed")
print(eth_displayable_address(address, chain_id=1))
# 0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed

print(adjust_decimals("1500000000000000000", 18))
# 1.5
```

Parsing a transaction in pieces:

```python
from ethstream.network import get_chain_id, get_network_ticker
from ethstream.txtypes import ParserStatus, TxContent, TxType
from ethstream.ustream import TxParser

raw = bytes.fromhex("...")  # an unsigned, RLP-encoded transaction
tx_type = TxType.from_first_byte(raw[0])
# Typed transactions start with their type byte, which is not part of the RLP.
payload = raw if tx_type is TxType.LEGACY else raw[1:]

content = TxContent()
parser = TxParser(content, tx_type)
status = parser.process(payload[:100])
if status is ParserStatus.PROCESSING:
    status = parser.process(payload[100:])

chain_id = get_chain_id(tx_type, content)
print(status, content.value.to_int(), get_network_ticker(chain_id, "ETH "))
print(parser.digest().hex())  # hash of the bytes fed to the parser
```

`process()` returns `ParserStatus.PROCESSING` while more input is needed,
`FINISHED` once the transaction is complete and `SUSPENDED` when a custom
processor asks to pause.

## What it does not do

There is no signing, no key derivation from seeds, no device transport and no
command-line tool. Amounts are kept as raw big-endian bytes in `TxInt256`
(use `to_int()` for a Python integer); there is no separate fixed-width
integer type.

## Tests

```
pip install .[test]
pytest
```