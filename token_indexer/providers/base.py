from abc import ABC, abstractmethod
from decimal import Decimal, DecimalException, InvalidOperation
from typing import Any, Dict, List, Mapping, Optional

import httpx

from ..config import settings
from ..errors import ErrorCategory, ProviderError
from ..types import ChainTag, TokenBalance


def parse_decimals(value: Any, default: int) -> int:
    """Read a token's decimal precision, falling back to the chain default."""
    if value is None or value == "":
        return default
    try:
        decimals = int(value)
    except (ValueError, TypeError):
        return default
    if decimals < 0 or decimals > 255:
        return default
    return decimals


def clean_text(value: Any) -> str:
    """Coerce an optional display field to a stripped string."""
    if value is None:
        return ""
    return str(value).strip()


def parse_amount(value: Any) -> Optional[Decimal]:
    """Parse a provider amount into a finite Decimal, or None if it is unusable."""
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        return None
    if not amount.is_finite():
        return None
    return amount


def scale_raw_balance(raw: Any, decimals: int) -> Optional[Decimal]:
    """Divide a raw integer amount by 10**decimals.

    Returns None for unparseable or negative amounts, and for amounts whose
    scaled value falls outside the Decimal context (e.g. "1e1000100").
    """
    amount = parse_amount(raw)
    if amount is None or amount < 0:
        return None
    try:
        scaled = amount / (Decimal(10) ** decimals)
    except DecimalException:
        return None
    return scaled if scaled.is_finite() else None


class BalanceProvider(ABC):
    """Base interface for a single chain's balance source.

    ``fetch_balances`` is the public contract and must never raise for
    upstream problems: it returns a (possibly empty) list instead.
    """

    name: str
    chain: ChainTag
    source_url: Optional[str] = None

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout_s: Optional[float] = None,
    ) -> None:
        self._client = client
        self.timeout_s = timeout_s or settings.request_timeout_seconds

    async def ready(self) -> bool:
        """Check if provider is ready to serve requests"""
        return True

    async def health_check(self) -> Dict[str, Any]:
        # Public endpoints are rate limited; report configured state without calling them.
        if not await self.ready():
            return {"status": "unavailable", "reason": "provider not configured"}
        return {"status": "configured", "chain": self.chain.value, "url": self.source_url}

    @abstractmethod
    async def fetch_balances(self, address: str) -> List[TokenBalance]:
        """Get all token balances for an address"""

    async def _get_json(
        self,
        url: str,
        *,
        params: Optional[Mapping[str, str]] = None,
        headers: Optional[Mapping[str, str]] = None,
        provider: Optional[str] = None,
    ) -> Any:
        """GET ``url`` and decode the JSON body, raising ProviderError on any failure."""
        label = provider or self.name
        try:
            if self._client is not None:
                response = await self._client.get(
                    url, params=params, headers=headers, timeout=self.timeout_s
                )
            else:
                async with httpx.AsyncClient(timeout=self.timeout_s) as client:
                    response = await client.get(url, params=params, headers=headers)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise ProviderError("request timed out", label, ErrorCategory.TIMEOUT) from exc
        except httpx.HTTPStatusError as exc:
            raise ProviderError(
                "unexpected status",
                label,
                ErrorCategory.HTTP_STATUS,
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderError(str(exc) or exc.__class__.__name__, label, ErrorCategory.NETWORK) from exc
        except httpx.InvalidURL as exc:
            # Not an HTTPError; raised before any request is sent.
            raise ProviderError(f"invalid request URL: {exc}", label, ErrorCategory.MALFORMED) from exc

        try:
            return response.json()
        except ValueError as exc:
            raise ProviderError("response body is not valid JSON", label) from exc
