"""Tronscan-backed TRC-20 balance provider."""

from __future__ import annotations

from typing import Any, List, Optional

import httpx
import structlog

from ..config import settings
from ..errors import ProviderError
from ..types import ChainTag, TokenBalance
from .base import BalanceProvider, clean_text, parse_decimals, scale_raw_balance

logger = structlog.stdlib.get_logger(__name__)

DEFAULT_DECIMALS = 6

# Tronscan's convention for unnamed tokens; not derived from the contract.
UNKNOWN_TOKEN_NAME = "Unknown Token"
UNKNOWN_TOKEN_SYMBOL = "N/A"


class TronscanProvider(BalanceProvider):
    """Fetch TRC-20 balances from the Tronscan account API."""

    name = "tronscan"
    chain = ChainTag.RESOURCE_CHAIN
    source_url = "https://tronscan.org"

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout_s: Optional[float] = None,
        base_url: Optional[str] = None,
    ) -> None:
        super().__init__(client=client, timeout_s=timeout_s)
        self.base_url = (base_url or settings.tronscan_base_url).rstrip("/")

    async def fetch_balances(self, address: str) -> List[TokenBalance]:
        try:
            payload = await self._get_json(
                f"{self.base_url}/api/account",
                params={"address": address},
                headers={"accept": "application/json"},
            )
            return self._parse_tokens(payload)
        except ProviderError as exc:
            logger.warning(
                "provider_request_failed",
                provider=self.name,
                address=address,
                category=exc.category.value,
                status_code=exc.status_code,
                error=exc.message,
            )
            return []

    def _parse_tokens(self, payload: Any) -> List[TokenBalance]:
        if not isinstance(payload, dict):
            raise ProviderError("expected a JSON object", self.name)

        items = payload.get("trc20token_balances") or []
        if not isinstance(items, list):
            raise ProviderError("'trc20token_balances' is not a list", self.name)

        balances: List[TokenBalance] = []
        for item in items:
            if not isinstance(item, dict):
                continue

            decimals = parse_decimals(item.get("tokenDecimal"), DEFAULT_DECIMALS)
            balance = scale_raw_balance(item.get("balance"), decimals)
            if balance is None:
                logger.debug(
                    "provider_entry_skipped",
                    provider=self.name,
                    token_id=item.get("tokenId"),
                    balance=item.get("balance"),
                )
                continue

            balances.append(
                TokenBalance(
                    name=clean_text(item.get("tokenName")) or UNKNOWN_TOKEN_NAME,
                    symbol=clean_text(item.get("tokenAbbr")) or UNKNOWN_TOKEN_SYMBOL,
                    balance=balance,
                    chain_specific_id=clean_text(item.get("tokenId")) or None,
                )
            )

        return balances
