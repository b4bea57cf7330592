from fastapi import APIRouter, Depends
from typing import Dict, Any

from .balances import get_resolver
from ..services.resolver import BalanceResolver

router = APIRouter()


@router.get("/healthz")
async def health_check(resolver: BalanceResolver = Depends(get_resolver)) -> Dict[str, Any]:
    """Report configured state of every chain provider.

    Upstream APIs are public and rate limited, so this never calls them.
    """
    provider_status = await resolver.health()

    available_providers = sum(
        1 for status in provider_status.values()
        if status["status"] == "configured"
    )

    return {
        "status": "healthy" if available_providers == len(provider_status) else "degraded",
        "providers": provider_status,
        "available_providers": available_providers,
        "total_providers": len(provider_status)
    }
