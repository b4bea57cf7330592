from .balances import ChainTag, ResolutionResult, ResolutionStatus, TokenBalance
from .requests import BatchBalancesRequest

__all__ = [
    "ChainTag",
    "ResolutionResult",
    "ResolutionStatus",
    "TokenBalance",
    "BatchBalancesRequest",
]
