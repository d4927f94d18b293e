import random
from typing import Optional

from models import ArbitrageOpportunity


# Reference snapshot of cross-venue prices per pair
OPPORTUNITIES = [
    {
        "pair": "SOL/USDC",
        "sol_price": 198.50,
        "eth_price": 202.30,
        "bsc_price": 200.15,
        "profit_margin": 1.91,
        "volume_24h": 2_500_000,
        "gas_cost": 12.50,
        "net_profit": 26.40,
        "risk_level": "Low",
    },
    {
        "pair": "USDC/USDT",
        "sol_price": 1.0005,
        "eth_price": 0.9998,
        "bsc_price": 1.0012,
        "profit_margin": 0.14,
        "volume_24h": 8_900_000,
        "gas_cost": 8.20,
        "net_profit": 5.80,
        "risk_level": "Low",
    },
    {
        "pair": "RAY/USDC",
        "sol_price": 2.45,
        "eth_price": 2.58,
        "bsc_price": 2.52,
        "profit_margin": 5.31,
        "volume_24h": 450_000,
        "gas_cost": 15.30,
        "net_profit": 68.70,
        "risk_level": "Medium",
    },
    {
        "pair": "ORCA/USDC",
        "sol_price": 3.21,
        "eth_price": 3.45,
        "bsc_price": 3.38,
        "profit_margin": 7.48,
        "volume_24h": 320_000,
        "gas_cost": 18.50,
        "net_profit": 95.20,
        "risk_level": "High",
    },
]

PRICE_JITTER = 0.02
MARGIN_JITTER = 1.0

HIGH_PROFIT_MARGIN = 5
MEDIUM_PROFIT_MARGIN = 2


def list_opportunities(rng: Optional[random.Random] = None) -> list[ArbitrageOpportunity]:
    """Current opportunities, each tagged with its profit tier.

    Without an rng the reference snapshot is returned as is. With one, prices
    move by up to ±2% and margins by up to ±1 point to mimic a live feed.
    """
    opportunities = []
    for opp in OPPORTUNITIES:
        data = dict(opp)
        if rng is not None:
            for key in ("sol_price", "eth_price", "bsc_price"):
                data[key] = opp[key] * (1 - PRICE_JITTER + rng.random() * 2 * PRICE_JITTER)
            # Only the margin moves; net_profit and gas_cost stay at snapshot values
            data["profit_margin"] = max(
                0.0, opp["profit_margin"] + (rng.random() - 0.5) * 2 * MARGIN_JITTER
            )
        data["profit_tier"] = profit_tier(data["profit_margin"])
        opportunities.append(ArbitrageOpportunity(**data))
    return opportunities


def profit_tier(margin: float) -> str:
    if margin > HIGH_PROFIT_MARGIN:
        return "high"
    if margin > MEDIUM_PROFIT_MARGIN:
        return "medium"
    return "low"
