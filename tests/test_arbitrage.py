"""Tests for the arbitrage opportunity feed."""

from __future__ import annotations

import random

import pytest

from arbitrage import OPPORTUNITIES, list_opportunities, profit_tier


def test_snapshot_without_rng():
    opps = list_opportunities()
    assert [o.pair for o in opps] == ["SOL/USDC", "USDC/USDT", "RAY/USDC", "ORCA/USDC"]
    assert opps[0].sol_price == 198.50
    assert opps[3].risk_level == "High"


def test_jitter_stays_within_bounds():
    opps = list_opportunities(random.Random(7))
    for opp, ref in zip(opps, OPPORTUNITIES):
        for key in ("sol_price", "eth_price", "bsc_price"):
            assert ref[key] * 0.98 <= getattr(opp, key) <= ref[key] * 1.02
        assert opp.profit_margin >= 0
        assert abs(opp.profit_margin - max(0.0, ref["profit_margin"])) <= 1.0


def test_jitter_is_reproducible_with_same_seed():
    assert list_opportunities(random.Random(1)) == list_opportunities(random.Random(1))


@pytest.mark.parametrize("margin,tier", [
    (7.48, "high"), (5.0, "medium"), (2.01, "medium"), (2.0, "low"), (0.14, "low"),
])
def test_profit_tier(margin, tier):
    assert profit_tier(margin) == tier


def test_opportunities_carry_profit_tier():
    opps = list_opportunities()
    assert [o.profit_tier for o in opps] == ["low", "low", "high", "high"]

    for opp in list_opportunities(random.Random(3)):
        assert opp.profit_tier == profit_tier(opp.profit_margin)
