#!/usr/bin/env python3
"""Simple CLI for looking up token balances locally"""

import argparse
import asyncio
import sys
from typing import List, Optional

from token_indexer.logging_config import setup_logging
from token_indexer.services.resolver import BalanceResolver
from token_indexer.types import ResolutionResult, ResolutionStatus

CHAIN_LABELS = {
    "ethereum": "Ethereum",
    "tron": "Tron",
    "solana": "Solana",
}


def print_result(result: ResolutionResult) -> None:
    """Pretty print one resolution result"""
    if result.status is ResolutionStatus.REJECTED:
        print(f"❌ {result.message}")
        return

    print(f"\n🔍 {result.address}")
    print("=" * 60)
    print(f"Chain: {CHAIN_LABELS.get(result.chain.value, result.chain.value)}")
    print(f"Status: {result.status.value}")

    if result.tokens:
        print("\nTokens:")
        print("-" * 60)
        for i, token in enumerate(result.tokens, 1):
            marker = " [DEMO]" if token.synthetic else ""
            print(f"{i:2d}. {token.balance:>20,f} {token.symbol:<10} {token.name}{marker}")
            if token.diagnostic:
                print(f"    ⚠️  {token.diagnostic}")

    if result.message:
        print(f"\n{result.message}")


async def cli_balances(addresses: List[str], as_json: bool) -> int:
    resolver = BalanceResolver()
    results = await resolver.resolve_many([address.strip() for address in addresses])

    if as_json:
        print("[" + ",\n".join(result.model_dump_json(indent=2) for result in results) + "]")
    else:
        for result in results:
            print_result(result)

    return 2 if any(r.status is ResolutionStatus.REJECTED for r in results) else 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Multi-chain token balance lookup")
    parser.add_argument("addresses", nargs="+", help="Ethereum (0x...), Tron (T...) or Solana addresses")
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL for this run")
    args = parser.parse_args(argv)

    setup_logging(args.log_level, json_logs=args.json)
    return asyncio.run(cli_balances(args.addresses, args.json))


if __name__ == "__main__":
    sys.exit(main())
