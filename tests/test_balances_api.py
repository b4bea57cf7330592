from decimal import Decimal
from typing import List
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from token_indexer.api.balances import get_resolver
from token_indexer.main import app
from token_indexer.middleware import logging_middleware
from token_indexer.providers.base import BalanceProvider
from token_indexer.providers.solana import build_demo_balances
from token_indexer.services.resolver import EMPTY_INPUT_PROMPT, BalanceResolver
from token_indexer.types import ChainTag, TokenBalance

EVM_ADDRESS = "0xd8da6bf26964af9d7eed9e03e53415d37aa96045"
SOLANA_ADDRESS = "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM"


class FixedProvider(BalanceProvider):
    def __init__(self, name: str, chain: ChainTag, tokens: List[TokenBalance]):
        super().__init__()
        self.name = name
        self.chain = chain
        self.tokens = tokens
        self.calls: List[str] = []

    async def fetch_balances(self, address: str) -> List[TokenBalance]:
        self.calls.append(address)
        return list(self.tokens)


@pytest.fixture
def providers():
    return {
        ChainTag.EVM: FixedProvider("ethplorer", ChainTag.EVM, [
            TokenBalance(name="Wrapped Ether", symbol="WETH", balance=Decimal("1.5"), chain_specific_id="0xc02a"),
        ]),
        ChainTag.RESOURCE_CHAIN: FixedProvider("tronscan", ChainTag.RESOURCE_CHAIN, []),
        ChainTag.ACCOUNT_CHAIN: FixedProvider("solana-public", ChainTag.ACCOUNT_CHAIN, build_demo_balances()),
    }


@pytest.fixture
def client(providers):
    app.dependency_overrides[get_resolver] = lambda: BalanceResolver(providers=providers)
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["chains"] == ["ethereum", "tron", "solana"]


def test_health_endpoint(client):
    response = client.get("/healthz")
    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "healthy"
    assert set(data["providers"]) == {"ethplorer", "tronscan", "solana-public"}
    assert data["available_providers"] == data["total_providers"] == 3


def test_balances_by_path(client, providers):
    response = client.get(f"/balances/{EVM_ADDRESS}")
    assert response.status_code == 200
    assert response.headers["x-request-id"]

    data = response.json()
    assert data["chain"] == "ethereum"
    assert data["status"] == "ok"
    assert data["tron"] == [] and data["solana"] == []
    token = data["ethereum"][0]
    assert token["symbol"] == "WETH"
    assert Decimal(token["balance"]) == Decimal("1.5")
    assert token["chain_specific_id"] == "0xc02a"
    assert token["synthetic"] is False
    assert providers[ChainTag.EVM].calls == [EVM_ADDRESS]


def test_balances_by_query_marks_synthetic_data(client):
    response = client.get("/balances", params={"address": SOLANA_ADDRESS})
    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "degraded"
    assert [t["symbol"] for t in data["solana"]] == ["SOL", "USDC"]
    assert all(t["synthetic"] for t in data["solana"])


@pytest.mark.parametrize("params", [{}, {"address": ""}, {"address": "   "}])
def test_empty_address_is_rejected(client, providers, params):
    response = client.get("/balances", params=params)

    assert response.status_code == 400
    assert response.json()["detail"] == EMPTY_INPUT_PROMPT
    assert all(not provider.calls for provider in providers.values())


def test_batch_keeps_order_and_reports_rejections(client):
    response = client.post("/balances/batch", json={"addresses": [SOLANA_ADDRESS, "", EVM_ADDRESS]})
    assert response.status_code == 200

    data = response.json()
    assert [item["status"] for item in data] == ["degraded", "rejected", "ok"]
    assert [item["chain"] for item in data] == ["solana", None, "ethereum"]


def test_batch_requires_addresses(client):
    response = client.post("/balances/batch", json={"addresses": []})
    assert response.status_code == 422


def test_surrounding_whitespace_is_trimmed_before_resolving(client, providers):
    response = client.get("/balances", params={"address": f"  {EVM_ADDRESS}\n"})
    assert response.status_code == 200

    data = response.json()
    assert data["address"] == EVM_ADDRESS
    assert data["chain"] == "ethereum"
    assert providers[ChainTag.EVM].calls == [EVM_ADDRESS]
    assert providers[ChainTag.ACCOUNT_CHAIN].calls == []


def test_batch_trims_each_address(client, providers):
    response = client.post("/balances/batch", json={"addresses": [f" {EVM_ADDRESS} ", "  "]})
    assert response.status_code == 200

    assert [item["status"] for item in response.json()] == ["ok", "rejected"]
    assert providers[ChainTag.EVM].calls == [EVM_ADDRESS]


# =============================================================================
# Request logging
# =============================================================================

@pytest.fixture
def request_logger(monkeypatch):
    fake = MagicMock()
    monkeypatch.setattr(logging_middleware, "logger", fake)
    return fake


def test_request_log_names_chain_and_resolution(client, request_logger):
    response = client.get(f"/balances/{EVM_ADDRESS}", headers={"x-request-id": "abc123"})
    assert response.headers["x-request-id"] == "abc123"

    request_logger.info.assert_called_once()
    event, = request_logger.info.call_args.args
    fields = request_logger.info.call_args.kwargs
    assert event == "http_request"
    assert fields["status"] == 200
    assert fields["chain"] == "ethereum"
    assert fields["resolution"] == "ok"


def test_rejected_request_is_logged_as_warning(client, request_logger):
    client.get("/balances", params={"address": ""})

    request_logger.warning.assert_called_once()
    fields = request_logger.warning.call_args.kwargs
    assert fields["status"] == 400
    assert fields["chain"] is None
    assert fields["resolution"] == "rejected"


def test_batch_request_log_summarises_resolutions(client, request_logger):
    client.post("/balances/batch", json={"addresses": [SOLANA_ADDRESS, "", EVM_ADDRESS]})

    fields = request_logger.info.call_args.kwargs
    assert fields["addresses"] == 3
    assert fields["resolutions"] == ["degraded", "ok", "rejected"]


def test_health_request_has_no_resolution_fields(client, request_logger):
    client.get("/healthz")

    fields = request_logger.info.call_args.kwargs
    assert "chain" not in fields and "resolutions" not in fields
