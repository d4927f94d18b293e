"""Tests for swap route ranking and price-impact tiers."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from models import RiskTier, SwapQuote
from routes import best_route, classify_impact, rank, rank_with_tiers


def _quote(venue: str, out: float, impact: float) -> SwapQuote:
    return SwapQuote(venue_name=venue, output_amount=out, price_impact_pct=impact)


def test_rank_descending_output_ties_by_impact():
    quotes = [_quote("a", 10, 1), _quote("b", 12, 5), _quote("c", 12, 2)]
    ranked = rank(quotes)
    assert [(q.output_amount, q.price_impact_pct) for q in ranked] == [
        (12, 2), (12, 5), (10, 1),
    ]


def test_rank_does_not_mutate_input():
    quotes = [_quote("a", 10, 1), _quote("b", 12, 5)]
    rank(quotes)
    assert [q.venue_name for q in quotes] == ["a", "b"]


def test_rank_empty():
    assert rank([]) == []
    assert best_route([]) is None
    assert rank_with_tiers([]) == []


def test_best_route():
    quotes = [_quote("Orca", 199.1, 0.1), _quote("Jupiter", 199.6, 0.05)]
    assert best_route(quotes).venue_name == "Jupiter"


@pytest.mark.parametrize("impact,tier", [
    (0.0, RiskTier.LOW),
    (0.099, RiskTier.LOW),
    (0.1, RiskTier.MEDIUM),
    (0.49, RiskTier.MEDIUM),
    (0.5, RiskTier.HIGH),
    (3.0, RiskTier.HIGH),
])
def test_classify_impact(impact, tier):
    assert classify_impact(impact) == tier
    assert classify_impact(_quote("x", 1, impact)) == tier


def test_rank_with_tiers():
    routes = rank_with_tiers([_quote("slow", 9, 0.7), _quote("fast", 10, 0.05)])
    assert [r.quote.venue_name for r in routes] == ["fast", "slow"]
    assert [r.impact_tier for r in routes] == [RiskTier.LOW, RiskTier.HIGH]


def test_quote_rejects_non_positive_output():
    with pytest.raises(ValidationError):
        _quote("x", 0, 0.1)
