"""Solana token balances from public token-list APIs, tried in priority order.

No single public Solana read endpoint is reliable, so several equivalent
providers are registered as ``SolanaSource`` descriptors and walked by the
fallback sequencer. When every provider fails the adapter returns clearly
marked synthetic data instead of an empty list.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from functools import partial
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence
from urllib.parse import quote

import httpx
import structlog

from ..config import settings
from ..services.fallback import FallbackSequencer
from ..types import ChainTag, TokenBalance
from .base import BalanceProvider, clean_text, parse_amount

logger = structlog.stdlib.get_logger(__name__)

SOL_MINT = "So11111111111111111111111111111111111111112"
USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"

UNAVAILABLE_DIAGNOSTIC = (
    "Solana token lookup is currently unavailable because the public Solana APIs "
    "did not respond. Any Solana data shown is synthetic and not a real balance."
)

Transform = Callable[[Any], List[TokenBalance]]


@dataclass(frozen=True)
class SolanaSource:
    """One public provider: where to call it and how to read its answer."""

    name: str
    url_template: str
    transform: Transform
    headers: Mapping[str, str] = field(default_factory=dict)

    def url_for(self, address: str) -> str:
        return self.url_template.format(address=quote(address, safe=""))


def _token_entries(payload: Any) -> List[Any]:
    if not isinstance(payload, dict):
        raise ValueError("expected a JSON object")
    result = payload.get("result")
    if not isinstance(result, dict):
        return []
    tokens = result.get("tokens")
    return tokens if isinstance(tokens, list) else []


def _normalise_entry(entry: Any, amount_field: str) -> Optional[TokenBalance]:
    if not isinstance(entry, dict):
        return None

    # These APIs report human-scaled amounts; only positive holdings are kept.
    balance = parse_amount(entry.get(amount_field))
    if balance is None or balance <= 0:
        return None

    mint = clean_text(entry.get("mint")) or None
    name = clean_text(entry.get("name")) or (f"Token {mint[:8]}..." if mint else "")
    symbol = clean_text(entry.get("symbol")) or (f"{mint[:6]}..." if mint else "")
    if not name or not symbol:
        return None

    return TokenBalance(name=name, symbol=symbol, balance=balance, chain_specific_id=mint)


def transform_token_list(payload: Any, amount_field: str = "balance") -> List[TokenBalance]:
    """Normalise a ``{"result": {"tokens": [...]}}`` body."""
    balances: List[TokenBalance] = []
    for entry in _token_entries(payload):
        token = _normalise_entry(entry, amount_field)
        if token is not None:
            balances.append(token)
    return balances


DEFAULT_SOLANA_SOURCES: Sequence[SolanaSource] = (
    SolanaSource(
        name="allthatnode",
        url_template="https://api.allthatnode.com/solana/v1/mainnet/account/{address}/tokens",
        transform=transform_token_list,
    ),
    SolanaSource(
        name="quicknode",
        url_template="https://api.quicknode.com/solana/v1/mainnet/account/{address}/tokens",
        transform=transform_token_list,
    ),
    SolanaSource(
        name="solanafm",
        url_template="https://api.solana.fm/v0/accounts/{address}/tokens",
        transform=partial(transform_token_list, amount_field="amount"),
    ),
)


def build_demo_balances() -> List[TokenBalance]:
    """Fixed demonstration balances shown when every provider is down."""
    return [
        TokenBalance(
            name="Solana (SOL)",
            symbol="SOL",
            balance=Decimal("1.5"),
            chain_specific_id=SOL_MINT,
            synthetic=True,
        ),
        TokenBalance(
            name="USDC",
            symbol="USDC",
            balance=Decimal("100.0"),
            chain_specific_id=USDC_MINT,
            synthetic=True,
        ),
    ]


def build_unavailable_balance() -> TokenBalance:
    return TokenBalance(
        name="Solana API Unavailable",
        symbol="INFO",
        balance=Decimal(0),
        diagnostic=UNAVAILABLE_DIAGNOSTIC,
        synthetic=True,
    )


class SolanaProvider(BalanceProvider):
    """Fetch SPL token balances, falling back across public providers."""

    name = "solana-public"
    chain = ChainTag.ACCOUNT_CHAIN

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout_s: Optional[float] = None,
        sources: Optional[Sequence[SolanaSource]] = None,
        demo_fallback_enabled: Optional[bool] = None,
        placeholder_factory: Callable[[], List[TokenBalance]] = build_demo_balances,
    ) -> None:
        super().__init__(client=client, timeout_s=timeout_s)
        self.sources: Sequence[SolanaSource] = tuple(sources if sources is not None else DEFAULT_SOLANA_SOURCES)
        self.demo_fallback_enabled = (
            settings.solana_demo_fallback_enabled if demo_fallback_enabled is None else demo_fallback_enabled
        )
        self._placeholder_factory = placeholder_factory
        self._base_headers: Dict[str, str] = {
            "User-Agent": settings.solana_user_agent,
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        self._sequencer: FallbackSequencer[SolanaSource, TokenBalance] = FallbackSequencer("solana")

    async def health_check(self) -> Dict[str, Any]:
        return {
            "status": "configured",
            "chain": self.chain.value,
            "sources": [source.name for source in self.sources],
            "demo_fallback_enabled": self.demo_fallback_enabled,
        }

    async def fetch_balances(self, address: str) -> List[TokenBalance]:
        outcome = await self._sequencer.run(self.sources, partial(self._attempt, address))
        if not outcome.exhausted:
            return outcome.items

        logger.warning(
            "solana_fallback_exhausted",
            address=address,
            attempts={record.name: record.outcome.value for record in outcome.attempts},
        )
        return self._degraded_balances()

    async def _attempt(self, address: str, source: SolanaSource) -> List[TokenBalance]:
        payload = await self._get_json(
            source.url_for(address),
            headers={**self._base_headers, **source.headers},
            provider=source.name,
        )
        return source.transform(payload)

    def _degraded_balances(self) -> List[TokenBalance]:
        if self.demo_fallback_enabled:
            try:
                placeholder = self._placeholder_factory()
            except Exception:
                logger.exception("solana_placeholder_failed")
            else:
                if placeholder:
                    logger.warning("solana_demo_data_returned", tokens=len(placeholder))
                    return list(placeholder)
        return [build_unavailable_balance()]
