"""Streaming Ethereum transaction parsing, network lookup and address helpers."""

__version__ = "1.9.18"

__all__ = ["ethutils", "network", "txtypes", "ustream"]