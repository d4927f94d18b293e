"""
Tests for the quote collaborators.

The Jupiter provider runs against httpx.MockTransport; no network access.
"""

from __future__ import annotations

import httpx
import pytest

import quote_providers
from quote_providers import (
    JupiterQuoteProvider,
    SimulatedQuoteProvider,
    TOKENS,
    get_quote_provider,
)

SOL_MINT = TOKENS["SOL"]["mint"]


# --- Simulated venues ---


@pytest.mark.asyncio
async def test_simulated_quotes_shape():
    quotes = await SimulatedQuoteProvider().get_quotes("SOL", "USDC", 1)
    assert [q.venue_name for q in quotes] == ["Jupiter", "Raydium", "Orca"]
    jupiter, raydium, orca = quotes
    assert 198.9 <= jupiter.output_amount <= 200.5
    assert 0.02 <= jupiter.price_impact_pct < 0.08
    assert 0.08 <= orca.price_impact_pct < 0.18
    assert 1_000_000 <= orca.liquidity_usd < 1_500_000
    assert raydium.pool_address


@pytest.mark.asyncio
async def test_simulated_quotes_deterministic_per_amount():
    provider = SimulatedQuoteProvider()
    first = await provider.get_quotes("SOL", "USDC", 2.5)
    second = await provider.get_quotes("SOL", "USDC", 2.5)
    assert first == second


@pytest.mark.asyncio
async def test_simulated_quotes_non_positive_amount():
    assert await SimulatedQuoteProvider().get_quotes("SOL", "USDC", 0) == []


@pytest.mark.asyncio
async def test_simulated_unknown_token_priced_at_one():
    quotes = await SimulatedQuoteProvider().get_quotes("FOO", "BAR", 10)
    assert all(9.79 <= q.output_amount <= 10.03 for q in quotes)


# --- Jupiter ---


def _patch_client(monkeypatch, handler):
    real_client = httpx.AsyncClient
    monkeypatch.setattr(
        quote_providers.httpx,
        "AsyncClient",
        lambda *a, **kw: real_client(transport=httpx.MockTransport(handler)),
    )


def _jupiter_handler(request: httpx.Request) -> httpx.Response:
    dex = request.url.params.get("dexes")
    assert request.url.params["amount"] == "1000000000"
    if dex is None:
        return httpx.Response(200, json={
            "outAmount": "199500000",
            "priceImpactPct": "0.001",
            "routePlan": [{
                "swapInfo": {
                    "label": "Raydium",
                    "ammKey": "AMM1",
                    "feeAmount": "25000",
                    "feeMint": SOL_MINT,
                },
                "percent": 100,
            }],
        })
    if dex == "Raydium":
        return httpx.Response(200, json={
            "outAmount": "199000000", "priceImpactPct": "0.002", "routePlan": [],
        })
    if dex == "Orca V2":
        return httpx.Response(500, json={"error": "boom"})
    return httpx.Response(200, json={"outAmount": "0", "routePlan": []})


@pytest.mark.asyncio
async def test_jupiter_quotes(monkeypatch):
    _patch_client(monkeypatch, _jupiter_handler)
    quotes = await JupiterQuoteProvider().get_quotes("SOL", "USDC", 1)

    assert [q.venue_name for q in quotes] == ["Jupiter (Raydium)", "Raydium"]
    best = quotes[0]
    assert best.output_amount == pytest.approx(199.5)
    assert best.price_impact_pct == pytest.approx(0.1)
    assert best.fee_usd == pytest.approx(0.005)
    assert best.pool_address == "AMM1"
    assert quotes[1].output_amount == pytest.approx(199.0)


@pytest.mark.asyncio
async def test_jupiter_aggregated_failure_propagates(monkeypatch):
    _patch_client(monkeypatch, lambda request: httpx.Response(503))
    with pytest.raises(httpx.HTTPStatusError):
        await JupiterQuoteProvider().get_quotes("SOL", "USDC", 1)


@pytest.mark.asyncio
async def test_jupiter_unsupported_pair():
    with pytest.raises(ValueError):
        await JupiterQuoteProvider().get_quotes("SOL", "DOGE", 1)


# --- Factory ---


def test_factory(monkeypatch):
    monkeypatch.delenv("QUOTE_PROVIDER", raising=False)
    assert isinstance(get_quote_provider(), SimulatedQuoteProvider)
    assert isinstance(get_quote_provider("jupiter"), JupiterQuoteProvider)
    with pytest.raises(ValueError):
        get_quote_provider("uniswap")
