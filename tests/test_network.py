import pytest

from ethstream.network import (
    NETWORKS,
    NetworkInfo,
    get_chain_id,
    get_network,
    get_network_name,
    get_network_ticker,
)
from ethstream.txtypes import TxContent, TxType


def test_known_networks():
    assert get_network(1) == NetworkInfo(1, "Ethereum", "ETH ")
    assert get_network_name(137) == "Polygon"
    assert get_network_ticker(56, "ETH") == "BNB "
    assert get_network_name(11297108109) == "Palm Network"


def test_unknown_network():
    assert get_network(999999) is None
    assert get_network_name(999999) is None
    assert get_network_ticker(999999, "AKA") == "AKA"


def test_network_table_is_consistent():
    assert len({n.chain_id for n in NETWORKS}) == len(NETWORKS)
    for network in NETWORKS:
        assert get_network(network.chain_id) is network
        assert len(network.ticker) < 8


def test_chain_id_legacy_uses_v():
    content = TxContent(v=b"\x89")
    assert get_chain_id(TxType.LEGACY, content) == 137


def test_chain_id_typed_uses_chain_id_field():
    content = TxContent(v=b"\x01")
    content.chain_id.set((11297108109).to_bytes(5, "big"))
    assert get_chain_id(TxType.EIP1559, content) == 11297108109
    assert get_chain_id(TxType.EIP2930, content) == 11297108109


@pytest.mark.parametrize("tx_type", [0x03, 0x7F])
def test_chain_id_unknown_type(tx_type):
    content = TxContent(v=b"\x01")
    content.chain_id.set(b"\x01")
    assert get_chain_id(tx_type, content) == 0


def test_chain_id_empty_v_is_zero():
    assert get_chain_id(TxType.LEGACY, TxContent()) == 0
    assert get_network(get_chain_id(TxType.LEGACY, TxContent())) is None