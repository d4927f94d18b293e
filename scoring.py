"""
DeFi health scoring.

Pure functions over a SyntheticPortfolio: four sub-scores bounded to
[0, 100], a weighted overall score and its tier, the headline badges and the
rule-based recommendation list used when no language model is available.
Also hosts the token-level portfolio risk analysis.
"""

from models import (
    PortfolioRiskAnalysis,
    PortfolioToken,
    RiskLevel,
    ScoreSet,
    SyntheticPortfolio,
    Tier,
)
from utils import clamp, round_half_up


# ── Weights & thresholds ──────────────────────────────────────────────────────

WEIGHTS = {
    "diversification": 0.25,
    "security": 0.30,
    "governance": 0.20,
    "experience": 0.25,
}

# Checked top-down, first match wins
TIER_THRESHOLDS = [
    (85, Tier.DIAMOND),
    (75, Tier.PLATINUM),
    (65, Tier.GOLD),
    (50, Tier.SILVER),
]

NEW_WALLET_DAYS = 90
NEW_WALLET_PENALTY = 15
RISK_TOKEN_PENALTY = 20
ACTIVE_WALLET_TXS = 200
ACTIVE_WALLET_BONUS = 10

RECOMMENDATION_THRESHOLD = 70
MIN_PROTOCOLS = 5
MAX_RECOMMENDATIONS = 4

# Mints considered established enough to carry no market-cap risk
KNOWN_SAFE_MINTS = {
    "So11111111111111111111111111111111111111112",   # SOL
    "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v",  # USDC
    "Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB",  # USDT
}
UNSAFE_TOKEN_RISK = 20
CONCENTRATION_SHARE = 0.5
CONCENTRATION_RISK = 30


# ── Scores ────────────────────────────────────────────────────────────────────


def tier_for(overall: float) -> Tier:
    for threshold, tier in TIER_THRESHOLDS:
        if overall >= threshold:
            return tier
    return Tier.BRONZE


def diversification_score(p: SyntheticPortfolio) -> float:
    raw = (
        len(p.categories) * 15
        + max(0, p.token_count) * 3
        + max(0, p.unique_protocols) * 2
    )
    return clamp(raw)


def security_score(p: SyntheticPortfolio) -> float:
    penalty = max(0, p.risk_token_count) * RISK_TOKEN_PENALTY
    if max(0, p.wallet_age_days) < NEW_WALLET_DAYS:
        penalty += NEW_WALLET_PENALTY
    return clamp(100 - penalty)


def governance_score(p: SyntheticPortfolio) -> float:
    raw = max(0, p.governance_participation) * 7
    if p.transaction_count > ACTIVE_WALLET_TXS:
        raw += ACTIVE_WALLET_BONUS
    return clamp(raw)


def experience_score(p: SyntheticPortfolio) -> float:
    raw = (
        max(0, p.wallet_age_days) / 365 * 30
        + max(0, p.transaction_count) / 10
        + max(0, p.holding_period_days) / 30 * 5
    )
    return clamp(raw)


def overall_score(
    diversification: float, security: float, governance: float, experience: float
) -> int:
    weighted = (
        diversification * WEIGHTS["diversification"]
        + security * WEIGHTS["security"]
        + governance * WEIGHTS["governance"]
        + experience * WEIGHTS["experience"]
    )
    return int(clamp(round_half_up(weighted)))


def score(profile: SyntheticPortfolio) -> ScoreSet:
    d = diversification_score(profile)
    s = security_score(profile)
    g = governance_score(profile)
    e = experience_score(profile)
    overall = overall_score(d, s, g, e)
    return ScoreSet(
        diversification=d,
        security=s,
        governance=g,
        experience=e,
        overall=overall,
        tier=tier_for(overall),
    )


# ── Badges & Recommendations ─────────────────────────────────────────────────


def earned_badges(profile: SyntheticPortfolio, scores: ScoreSet) -> list[str]:
    badges = []
    if len(profile.categories) >= 5:
        badges.append("Diversification Master")
    if profile.governance_participation >= 10:
        badges.append("DAO Participant")
    if profile.holding_period_days >= 180:
        badges.append("Diamond Hands")
    if profile.wallet_age_days >= 365:
        badges.append("Veteran Trader")
    if profile.unique_protocols >= 10:
        badges.append("DeFi Explorer")
    if scores.security >= 90:
        badges.append("Security Expert")
    return badges


def fallback_recommendations(
    scores: ScoreSet, profile: SyntheticPortfolio
) -> list[str]:
    """Rule-based advice keyed off the weakest areas, at most four items."""
    recommendations = []
    if scores.diversification < RECOMMENDATION_THRESHOLD:
        recommendations.append(
            "Diversify across more token categories to reduce concentration risk"
        )
    if scores.security < RECOMMENDATION_THRESHOLD:
        recommendations.append(
            "Review and remove high-risk tokens from your portfolio"
        )
    if scores.governance < RECOMMENDATION_THRESHOLD:
        recommendations.append(
            "Participate in governance voting to improve your DAO engagement"
        )
    if scores.experience < RECOMMENDATION_THRESHOLD:
        recommendations.append(
            "Consider longer holding periods and explore more DeFi protocols"
        )
    if profile.unique_protocols < MIN_PROTOCOLS:
        recommendations.append(
            "Explore additional DeFi protocols to increase your ecosystem exposure"
        )
    return recommendations[:MAX_RECOMMENDATIONS]


# ── Token-level Risk ──────────────────────────────────────────────────────────


def analyze_portfolio_risk(tokens: list[PortfolioToken]) -> PortfolioRiskAnalysis:
    total = sum(max(0.0, t.value) for t in tokens)
    risk = 0
    flags: list[str] = []

    for token in tokens:
        if token.mint not in KNOWN_SAFE_MINTS:
            risk += UNSAFE_TOKEN_RISK
            flags.append("Low market cap token")
        if total > 0 and max(0.0, token.value) / total > CONCENTRATION_SHARE:
            risk += CONCENTRATION_RISK
            flags.append("High concentration risk")

    if risk > 60:
        level = RiskLevel.HIGH
    elif risk > 30:
        level = RiskLevel.MODERATE
    else:
        level = RiskLevel.LOW

    return PortfolioRiskAnalysis(
        risk_score=min(risk, 100), risk_level=level, risk_flags=flags
    )
