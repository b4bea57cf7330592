"""
Balance resolution entry point.

Classifies an address, hands it to exactly one chain provider and wraps the
provider's tokens in a ResolutionResult. Providers absorb their own upstream
failures, so nothing here retries or catches network errors.
"""

from __future__ import annotations

import asyncio
from time import perf_counter
from typing import Dict, Iterable, List, Mapping, Optional

import httpx
import structlog

from ..providers.base import BalanceProvider
from ..providers.ethplorer import EthplorerProvider
from ..providers.solana import SolanaProvider
from ..providers.tronscan import TronscanProvider
from ..types import ChainTag, ResolutionResult, ResolutionStatus, TokenBalance
from .address import classify, looks_like_address

logger = structlog.stdlib.get_logger(__name__)

EMPTY_INPUT_PROMPT = "Please enter or connect a wallet address."
NO_TOKENS_MESSAGE = "No token balances found for this address."
SYNTHETIC_DATA_MESSAGE = (
    "Live balances are unavailable for this chain; the tokens shown are demonstration data."
)


def default_providers(client: Optional[httpx.AsyncClient] = None) -> Dict[ChainTag, BalanceProvider]:
    return {
        ChainTag.EVM: EthplorerProvider(client=client),
        ChainTag.RESOURCE_CHAIN: TronscanProvider(client=client),
        ChainTag.ACCOUNT_CHAIN: SolanaProvider(client=client),
    }


def _summarise(tokens: List[TokenBalance]) -> tuple[ResolutionStatus, Optional[str]]:
    if any(token.synthetic for token in tokens):
        diagnostic = next((token.diagnostic for token in tokens if token.diagnostic), None)
        return ResolutionStatus.DEGRADED, diagnostic or SYNTHETIC_DATA_MESSAGE
    if tokens:
        return ResolutionStatus.OK, None
    return ResolutionStatus.EMPTY, NO_TOKENS_MESSAGE


class BalanceResolver:
    """Stateless dispatcher from an address to its chain's provider."""

    def __init__(
        self,
        providers: Optional[Mapping[ChainTag, BalanceProvider]] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.providers: Dict[ChainTag, BalanceProvider] = (
            dict(providers) if providers is not None else default_providers(client)
        )
        missing = [chain.value for chain in ChainTag if chain not in self.providers]
        if missing:
            raise ValueError(f"No provider registered for: {', '.join(missing)}")

    async def resolve(self, raw_input: Optional[str]) -> ResolutionResult:
        if not raw_input:
            logger.info("resolution_rejected", reason="empty_input")
            return ResolutionResult(
                address="",
                status=ResolutionStatus.REJECTED,
                message=EMPTY_INPUT_PROMPT,
            )

        address = raw_input
        chain = classify(address)
        if not looks_like_address(address, chain):
            # Routing stays prefix-based; this only helps explain downstream failures.
            logger.warning("address_sanity_check_failed", address=address, chain=chain.value)

        provider = self.providers[chain]
        start = perf_counter()
        tokens = list(await provider.fetch_balances(address))
        status, message = _summarise(tokens)

        logger.info(
            "resolution_completed",
            address=address,
            chain=chain.value,
            provider=provider.name,
            status=status.value,
            tokens=len(tokens),
            duration_ms=round((perf_counter() - start) * 1000, 1),
        )

        return ResolutionResult(
            address=address,
            chain=chain,
            status=status,
            message=message,
            **{chain.value: tokens},
        )

    async def resolve_many(self, addresses: Iterable[Optional[str]]) -> List[ResolutionResult]:
        """Resolve independent addresses concurrently, keeping input order."""
        return list(await asyncio.gather(*(self.resolve(address) for address in addresses)))

    async def health(self) -> Dict[str, Dict]:
        return {provider.name: await provider.health_check() for provider in self.providers.values()}


async def resolve_address(raw_input: Optional[str]) -> ResolutionResult:
    """Resolve a single address with the default providers."""
    return await BalanceResolver().resolve(raw_input)


__all__ = [
    "BalanceResolver",
    "EMPTY_INPUT_PROMPT",
    "default_providers",
    "resolve_address",
]
