"""Tests for synthetic portfolio generation."""

from __future__ import annotations

import math

import pytest

from generator import fraction, seed
from synthesizer import (
    CATEGORY_CATALOGUE,
    TOKEN_CATALOGUE,
    synthesize,
    synthesize_tokens,
)

VALID_WALLET = "9QCfNuQuxct1Xk9ytFYgxc5fThmTzL4pHQnSjjrVUrka"

ADDRESSES = [
    VALID_WALLET,
    "So11111111111111111111111111111111111111112",
    "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v",
    "short",
]


@pytest.mark.parametrize("address", ADDRESSES)
def test_synthesize_is_deterministic(address):
    assert synthesize(address) == synthesize(address)


@pytest.mark.parametrize("address", ["", "   "])
def test_synthesize_empty_address_returns_none(address):
    assert synthesize(address) is None
    assert synthesize_tokens(address) is None


@pytest.mark.parametrize("address", ADDRESSES)
def test_synthesize_fields_within_ranges(address):
    p = synthesize(address)
    assert 1000 <= p.total_value <= 50000
    assert 3 <= p.token_count < 12
    assert 2 <= len(p.categories) < 6
    assert p.categories == CATEGORY_CATALOGUE[: len(p.categories)]
    assert 0 <= p.risk_token_count < max(1, p.token_count * 0.4)
    assert 0 <= p.governance_participation < 15
    assert 30 <= p.holding_period_days < 365
    assert 30 <= p.wallet_age_days < 730
    assert 50 <= p.transaction_count < 1000
    assert 2 <= p.unique_protocols < 20


def test_synthesize_draws_share_one_fraction():
    """Each field is the same fraction scaled into its own range."""
    f = fraction(seed(VALID_WALLET))
    p = synthesize(VALID_WALLET)
    assert p.token_count == math.floor(3 + f * 9)
    assert p.wallet_age_days == math.floor(30 + f * 700)
    assert p.transaction_count == math.floor(50 + f * 950)


def test_surrounding_whitespace_does_not_change_result():
    assert synthesize(f"  {VALID_WALLET}  ") == synthesize(VALID_WALLET)


@pytest.mark.parametrize("address", ADDRESSES)
def test_synthesize_tokens(address):
    tokens = synthesize_tokens(address)
    assert 2 <= len(tokens) <= 4
    assert [t.symbol for t in tokens] == [e["symbol"] for e in TOKEN_CATALOGUE[: len(tokens)]]
    assert tokens[0].symbol == "SOL"
    assert 180 <= tokens[0].price < 220
    for t in tokens:
        if t.symbol in ("USDC", "USDT"):
            assert t.price == 1.0
        assert t.value >= 0
        assert t.logo_uri.endswith(f"{t.mint}/logo.png")
    assert synthesize_tokens(address) == tokens
