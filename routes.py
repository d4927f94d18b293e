from typing import Optional, Union

from models import RankedRoute, RiskTier, SwapQuote


# Price impact (percent) upper bounds, checked in order
IMPACT_TIERS = [
    (0.1, RiskTier.LOW),
    (0.5, RiskTier.MEDIUM),
]


def rank(quotes: list[SwapQuote]) -> list[SwapQuote]:
    """Best output first; equal outputs ordered by lower price impact."""
    return sorted(quotes, key=lambda q: (-q.output_amount, q.price_impact_pct))


def best_route(quotes: list[SwapQuote]) -> Optional[SwapQuote]:
    ranked = rank(quotes)
    return ranked[0] if ranked else None


def classify_impact(quote: Union[SwapQuote, float]) -> RiskTier:
    impact = quote.price_impact_pct if isinstance(quote, SwapQuote) else quote
    for upper, tier in IMPACT_TIERS:
        if impact < upper:
            return tier
    return RiskTier.HIGH


def rank_with_tiers(quotes: list[SwapQuote]) -> list[RankedRoute]:
    return [RankedRoute(quote=q, impact_tier=classify_impact(q)) for q in rank(quotes)]
