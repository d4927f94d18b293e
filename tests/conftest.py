"""
Shared fixtures: hand-built profiles and a DeFiAnalytics instance wired to
the simulated quote venues with no language model.
"""

from __future__ import annotations

import pytest

from analytics import DeFiAnalytics
from assistant import DeFiAssistant
from models import SyntheticPortfolio
from quote_providers import SimulatedQuoteProvider


@pytest.fixture
def strong_profile() -> SyntheticPortfolio:
    """d=100, s=80, g=80, e≈92.88 → overall 88, Diamond."""
    return SyntheticPortfolio(
        total_value=25_000,
        token_count=10,
        categories=["DeFi", "Gaming", "Infrastructure", "Meme", "NFT"],
        risk_token_count=1,
        governance_participation=10,
        holding_period_days=180,
        wallet_age_days=400,
        transaction_count=300,
        unique_protocols=12,
    )


@pytest.fixture
def weak_profile() -> SyntheticPortfolio:
    """d=43, s=65, g=0, e≈14.93 → overall 34, Bronze."""
    return SyntheticPortfolio(
        total_value=1_500,
        token_count=3,
        categories=["DeFi", "Gaming"],
        risk_token_count=1,
        governance_participation=0,
        holding_period_days=30,
        wallet_age_days=60,
        transaction_count=50,
        unique_protocols=2,
    )


@pytest.fixture
def analytics() -> DeFiAnalytics:
    return DeFiAnalytics(
        assistant=DeFiAssistant(None),
        quote_provider=SimulatedQuoteProvider(),
    )
