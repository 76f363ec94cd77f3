"""Known networks and lookup of the chain a transaction targets."""

from __future__ import annotations

from dataclasses import dataclass

from .txtypes import TxContent, TxType

MAX_NETWORK_TICKER_LEN = 8


@dataclass(frozen=True)
class NetworkInfo:
    """A network's display name and ticker."""

    chain_id: int
    name: str
    ticker: str


NETWORKS: tuple[NetworkInfo, ...] = (
    NetworkInfo(1, "Ethereum", "ETH "),
    NetworkInfo(3, "Ropsten", "ETH "),
    NetworkInfo(4, "Rinkeby", "ETH "),
    NetworkInfo(5, "Goerli", "ETH "),
    NetworkInfo(10, "Optimism", "ETH "),
    NetworkInfo(42, "Kovan", "ETH "),
    NetworkInfo(56, "BSC", "BNB "),
    NetworkInfo(100, "xDai", "xDAI "),
    NetworkInfo(137, "Polygon", "MATIC "),
    NetworkInfo(250, "Fantom", "FTM "),
    NetworkInfo(42161, "Arbitrum", "AETH "),
    NetworkInfo(42220, "Celo", "CELO "),
    NetworkInfo(43114, "Avalanche", "AVAX "),
    NetworkInfo(44787, "Celo Alfajores", "aCELO "),
    NetworkInfo(62320, "Celo Baklava", "bCELO "),
    NetworkInfo(11297108109, "Palm Network", "PALM "),
)

_BY_CHAIN_ID = {network.chain_id: network for network in NETWORKS}
_U64_MASK = (1 << 64) - 1


def _u64_from_be(data: bytes) -> int:
    return int.from_bytes(data[-8:], "big") & _U64_MASK


def get_chain_id(tx_type: int, content: TxContent) -> int:
    """Chain id of a parsed transaction; 0 for an unknown transaction type.

    Legacy transactions carry it in ``v`` (EIP-155), typed ones in the
    chain id field.
    """
    if tx_type == TxType.LEGACY:
        return _u64_from_be(content.v)
    if tx_type in (TxType.EIP2930, TxType.EIP1559):
        return _u64_from_be(content.chain_id.value)
    return 0


def get_network(chain_id: int) -> NetworkInfo | None:
    """The known network with this chain id, if any."""
    return _BY_CHAIN_ID.get(chain_id)


def get_network_name(chain_id: int) -> str | None:
    """Name of the network with this chain id, or None when unknown."""
    network = get_network(chain_id)
    return None if network is None else network.name


def get_network_ticker(chain_id: int, coin_name: str) -> str:
    """Ticker of the network with this chain id, else ``coin_name``."""
    network = get_network(chain_id)
    return coin_name if network is None else network.ticker