"""Tests for the DeFiAnalytics orchestrator (no language model, simulated venues)."""

from __future__ import annotations

import httpx
import pytest

from analytics import DeFiAnalytics
from assistant import CHAT_DEFAULT_FALLBACK, CHAT_FALLBACKS, DeFiAssistant
from models import ChatMessage, Intent, Tier
from fakes import FailingQuoteProvider, FakeGenerator

VALID_WALLET = "9QCfNuQuxct1Xk9ytFYgxc5fThmTzL4pHQnSjjrVUrka"


# --- Health score ---


@pytest.mark.asyncio
async def test_health_score_deterministic(analytics):
    first = await analytics.health_score(VALID_WALLET)
    second = await analytics.health_score(VALID_WALLET)
    assert first.scores == second.scores
    assert first.portfolio == second.portfolio
    assert first.address == VALID_WALLET


@pytest.mark.asyncio
async def test_health_score_report_contents(analytics):
    report = await analytics.health_score(f"  {VALID_WALLET}  ")
    assert report.address == VALID_WALLET
    assert 0 <= report.scores.overall <= 100
    assert isinstance(report.scores.tier, Tier)
    assert len(report.achievements) == 6
    assert report.recommendations


@pytest.mark.asyncio
async def test_health_score_empty_address(analytics):
    assert await analytics.health_score("") is None
    assert await analytics.health_score("   ") is None


# --- Portfolio ---


@pytest.mark.asyncio
async def test_analyze_portfolio(analytics):
    report = await analytics.analyze_portfolio(VALID_WALLET)
    assert 2 <= len(report.tokens) <= 4
    assert report.total_value == round(sum(t.value for t in report.tokens), 2)
    assert 0 <= report.risk_analysis.risk_score <= 100
    assert report.ai_insights


@pytest.mark.asyncio
async def test_analyze_portfolio_without_insights(analytics):
    report = await analytics.analyze_portfolio(VALID_WALLET, include_insights=False)
    assert report.ai_insights is None


# --- Swap routes ---


@pytest.mark.asyncio
async def test_swap_routes_sorted(analytics):
    report = await analytics.swap_routes("SOL", "USDC", 10)
    outputs = [r.quote.output_amount for r in report.routes]
    assert outputs == sorted(outputs, reverse=True)
    assert report.best_route == report.routes[0].quote
    assert report.ai_recommendation


@pytest.mark.asyncio
async def test_swap_routes_non_positive_amount(analytics):
    assert await analytics.swap_routes("SOL", "USDC", 0) is None
    assert await analytics.swap_routes("SOL", "USDC", -3) is None


@pytest.mark.asyncio
async def test_swap_routes_uses_generator_text():
    gen = FakeGenerator("Take the Jupiter route.")
    analytics = DeFiAnalytics(assistant=DeFiAssistant(gen))
    report = await analytics.swap_routes("SOL", "USDC", 1)
    assert report.ai_recommendation == "Take the Jupiter route."


@pytest.mark.asyncio
async def test_swap_routes_propagates_quote_errors():
    analytics = DeFiAnalytics(
        assistant=DeFiAssistant(None),
        quote_provider=FailingQuoteProvider(httpx.ConnectError("offline")),
    )
    with pytest.raises(httpx.ConnectError):
        await analytics.swap_routes("SOL", "USDC", 1)


# --- Arbitrage ---


def test_arbitrage_without_rng_is_stable(analytics):
    assert len(analytics.arbitrage()) == 4
    assert analytics.arbitrage() == analytics.arbitrage()


# --- Chat ---


@pytest.mark.asyncio
async def test_chat_swap_attaches_routes(analytics):
    reply = await analytics.chat("swap 5 SOL to USDC")
    assert reply.intent.intent == Intent.SWAP_ROUTES
    assert reply.intent.amount == 5
    assert reply.data["amount"] == 5
    assert len(reply.data["routes"]) == 3
    assert reply.message == CHAT_FALLBACKS[Intent.SWAP_ROUTES]


@pytest.mark.asyncio
async def test_chat_health_with_wallet(analytics):
    reply = await analytics.chat(f"What is the health score of {VALID_WALLET}?")
    assert reply.intent.intent == Intent.HEALTH_SCORE
    assert reply.intent.wallet_address == VALID_WALLET
    assert set(reply.data) == {"scores", "badges"}


@pytest.mark.asyncio
async def test_chat_health_without_wallet(analytics):
    reply = await analytics.chat("what is my health score")
    assert reply.data is None
    assert reply.message == CHAT_FALLBACKS[Intent.HEALTH_SCORE]


@pytest.mark.asyncio
async def test_chat_arbitrage(analytics):
    reply = await analytics.chat("any arbitrage right now?")
    assert reply.intent.intent == Intent.ARBITRAGE
    assert len(reply.data["opportunities"]) == 4
    assert reply.data["opportunities"][3]["profit_tier"] == "high"


@pytest.mark.asyncio
async def test_chat_general(analytics):
    reply = await analytics.chat("hello there")
    assert reply.intent.intent == Intent.GENERAL
    assert reply.data is None
    assert reply.message == CHAT_DEFAULT_FALLBACK


@pytest.mark.asyncio
async def test_chat_swap_quote_failure_degrades():
    analytics = DeFiAnalytics(
        assistant=DeFiAssistant(None),
        quote_provider=FailingQuoteProvider(httpx.ConnectError("offline")),
    )
    reply = await analytics.chat("swap 2 SOL for USDC")
    assert reply.intent.intent == Intent.SWAP_ROUTES
    assert reply.data is None
    assert reply.message == CHAT_FALLBACKS[Intent.SWAP_ROUTES]


@pytest.mark.asyncio
async def test_chat_passes_history_to_generator():
    gen = FakeGenerator("Sure.")
    analytics = DeFiAnalytics(assistant=DeFiAssistant(gen))
    history = [
        ChatMessage(type="user", content="hi"),
        ChatMessage(type="assistant", content="hello"),
    ]
    reply = await analytics.chat("hello again", history)
    assert reply.message == "Sure."
    assert gen.calls[0]["prompt"] == "hello again"
    assert [t["role"] for t in gen.calls[0]["history"]] == ["user", "assistant"]
