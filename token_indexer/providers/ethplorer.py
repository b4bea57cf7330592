"""Ethplorer-backed Ethereum token balance provider."""

from __future__ import annotations

from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx
import structlog

from ..config import settings
from ..errors import ProviderError
from ..types import ChainTag, TokenBalance
from .base import BalanceProvider, clean_text, parse_decimals, scale_raw_balance

logger = structlog.stdlib.get_logger(__name__)

DEFAULT_DECIMALS = 18


def _placeholder_name(contract: Optional[str]) -> str:
    return f"Token {contract[:10]}..." if contract else "Unknown Token"


def _placeholder_symbol(contract: Optional[str]) -> str:
    return f"{contract[:8]}..." if contract else "UNKNOWN"


class EthplorerProvider(BalanceProvider):
    """Fetch ERC-20 balances via Ethplorer's getAddressInfo endpoint."""

    name = "ethplorer"
    chain = ChainTag.EVM
    source_url = "https://ethplorer.io"

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout_s: Optional[float] = None,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
    ) -> None:
        super().__init__(client=client, timeout_s=timeout_s)
        self.base_url = (base_url or settings.ethplorer_base_url).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.ethplorer_api_key

    async def ready(self) -> bool:
        return bool(self.api_key)

    async def fetch_balances(self, address: str) -> List[TokenBalance]:
        try:
            payload = await self._get_json(
                f"{self.base_url}/getAddressInfo/{quote(address, safe='')}",
                params={"apiKey": self.api_key},
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

        # Ethplorer reports bad keys and invalid addresses in-band.
        error = payload.get("error")
        if error:
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise ProviderError(message or "upstream error", self.name)

        items = payload.get("tokens") or []
        if not isinstance(items, list):
            raise ProviderError("'tokens' is not a list", self.name)

        balances: List[TokenBalance] = []
        for item in items:
            token = self._parse_token(item)
            if token is not None:
                balances.append(token)
        return balances

    def _parse_token(self, item: Any) -> Optional[TokenBalance]:
        if not isinstance(item, dict):
            return None

        info: Dict[str, Any] = item.get("tokenInfo") or {}
        if not isinstance(info, dict):
            info = {}

        contract = clean_text(info.get("address")) or None
        decimals = parse_decimals(info.get("decimals"), DEFAULT_DECIMALS)
        balance = scale_raw_balance(item.get("balance"), decimals)
        if balance is None:
            logger.debug("provider_entry_skipped", provider=self.name, contract=contract, balance=item.get("balance"))
            return None

        name = clean_text(info.get("name")) or _placeholder_name(contract)
        symbol = clean_text(info.get("symbol")) or _placeholder_symbol(contract)

        return TokenBalance(
            name=name,
            symbol=symbol,
            balance=balance,
            chain_specific_id=contract,
        )
