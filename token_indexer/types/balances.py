from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ChainTag(str, Enum):
    """Chains an address can be routed to."""

    EVM = "ethereum"
    RESOURCE_CHAIN = "tron"
    ACCOUNT_CHAIN = "solana"


class ResolutionStatus(str, Enum):
    OK = "ok"                # genuine balances returned
    EMPTY = "empty"          # query ran, nothing to show
    DEGRADED = "degraded"    # synthetic placeholder or "unavailable" entry
    REJECTED = "rejected"    # empty input, no network call made


class TokenBalance(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, description="Display name of the token")
    symbol: str = Field(min_length=1, description="Display symbol of the token")
    balance: Decimal = Field(ge=0, description="Balance already scaled by the token's decimals")
    chain_specific_id: Optional[str] = Field(
        default=None,
        description="Mint or contract address, when the source provides one",
    )
    diagnostic: Optional[str] = Field(
        default=None,
        description="Explanation attached only to a degraded 'unavailable' entry",
    )
    synthetic: bool = Field(
        default=False,
        description="True for demonstration or unavailable entries that are not real balances",
    )

    @field_validator("name", "symbol")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class ResolutionResult(BaseModel):
    """Outcome of resolving one address.

    Exactly one of the per-chain buckets is populated for a non-rejected
    result; which one tells the caller the chain the address was routed to.
    """

    model_config = ConfigDict(frozen=True)

    address: str = Field(description="Address as queried (whitespace stripped)")
    chain: Optional[ChainTag] = Field(default=None, description="Chain the address was routed to")
    status: ResolutionStatus
    message: Optional[str] = Field(default=None, description="User-facing note, e.g. the empty-input prompt")
    ethereum: List[TokenBalance] = Field(default_factory=list)
    tron: List[TokenBalance] = Field(default_factory=list)
    solana: List[TokenBalance] = Field(default_factory=list)

    @property
    def tokens(self) -> List[TokenBalance]:
        if self.chain is None:
            return []
        return getattr(self, self.chain.value)

    @property
    def is_synthetic(self) -> bool:
        return any(token.synthetic for token in self.tokens)
