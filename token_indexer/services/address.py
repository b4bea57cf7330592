"""Helpers for routing wallet addresses to a chain and sanity-checking them."""

from __future__ import annotations

import re
from functools import lru_cache

from ..types import ChainTag

_BASE58_ALPHABET = set("123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz")

_EVM_ADDRESS_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")
_TRON_ADDRESS_RE = re.compile(r"^T[1-9A-HJ-NP-Za-km-z]{33}$")


def classify(address: str) -> ChainTag:
    """Route an address to a chain by its prefix.

    ``0x`` means Ethereum, a leading ``T`` means Tron, and anything else is
    treated as Solana. Nothing else about the string is inspected, so a
    malformed address is routed the same way as a valid one.
    """

    if address.startswith("0x"):
        return ChainTag.EVM
    if address.startswith("T"):
        return ChainTag.RESOURCE_CHAIN
    return ChainTag.ACCOUNT_CHAIN


@lru_cache(maxsize=128)
def is_valid_solana_address(address: str) -> bool:
    if not address:
        return False
    length = len(address)
    if length < 32 or length > 44:
        return False
    return all(ch in _BASE58_ALPHABET for ch in address)


def looks_like_address(address: str, chain: ChainTag) -> bool:
    """Length and alphabet check for diagnostics only; routing never depends on it."""

    if not address:
        return False
    if chain is ChainTag.EVM:
        return bool(_EVM_ADDRESS_RE.fullmatch(address))
    if chain is ChainTag.RESOURCE_CHAIN:
        return bool(_TRON_ADDRESS_RE.fullmatch(address))
    return is_valid_solana_address(address)


__all__ = [
    "classify",
    "is_valid_solana_address",
    "looks_like_address",
]
