from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from ..services.resolver import BalanceResolver
from ..types import BatchBalancesRequest, ResolutionResult, ResolutionStatus

router = APIRouter(prefix="/balances")


def get_resolver() -> BalanceResolver:
    return BalanceResolver()


def _record(request: Request, results: List[ResolutionResult]) -> None:
    # Read back by RequestLoggingMiddleware for the http_request log line.
    request.state.resolutions = [
        (result.chain.value if result.chain else None, result.status.value) for result in results
    ]


def _reject_empty(request: Request, result: ResolutionResult) -> ResolutionResult:
    _record(request, [result])
    if result.status is ResolutionStatus.REJECTED:
        raise HTTPException(status_code=400, detail=result.message)
    return result


@router.get("", response_model=ResolutionResult)
async def get_balances(
    request: Request,
    address: str = Query("", description="Wallet address on Ethereum, Tron or Solana"),
    resolver: BalanceResolver = Depends(get_resolver),
) -> ResolutionResult:
    """Resolve token balances for an address of any supported chain"""
    return _reject_empty(request, await resolver.resolve(address.strip()))


@router.get("/{address}", response_model=ResolutionResult)
async def get_balances_for_address(
    request: Request,
    address: str,
    resolver: BalanceResolver = Depends(get_resolver),
) -> ResolutionResult:
    return _reject_empty(request, await resolver.resolve(address.strip()))


@router.post("/batch", response_model=List[ResolutionResult])
async def get_balances_batch(
    request: Request,
    body: BatchBalancesRequest,
    resolver: BalanceResolver = Depends(get_resolver),
) -> List[ResolutionResult]:
    """Resolve several addresses at once; empty entries come back as rejected results."""
    results = await resolver.resolve_many([address.strip() for address in body.addresses])
    _record(request, results)
    return results
