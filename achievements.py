from models import Badge, ScoreSet, SyntheticPortfolio


# id -> (name, description, icon, max_progress)
ACHIEVEMENTS = {
    "diversifier": (
        "Portfolio Diversifier", "Hold tokens from 5+ different categories", "🎯", 5,
    ),
    "security_expert": (
        "Security Expert", "Maintain 90+ security score", "🛡️", 90,
    ),
    "governance_guru": (
        "Governance Guru", "Participate in 10+ DAO votes", "🗳️", 10,
    ),
    "diamond_hands": (
        "Diamond Hands", "Hold positions for 6+ months", "💎", 180,
    ),
    "defi_explorer": (
        "DeFi Explorer", "Use 10+ different protocols", "🌐", 10,
    ),
    "veteran_trader": (
        "Veteran Trader", "Wallet active for 1+ year", "⭐", 365,
    ),
}


def _progress(
    achievement_id: str, scores: ScoreSet, profile: SyntheticPortfolio, cap: float
) -> float:
    if achievement_id == "diversifier":
        return len(profile.categories)
    if achievement_id == "security_expert":
        return scores.security
    if achievement_id == "governance_guru":
        # Seven points of governance score per vote
        return min(scores.governance / 7, cap)
    if achievement_id == "diamond_hands":
        return min(profile.holding_period_days, cap)
    if achievement_id == "defi_explorer":
        return profile.unique_protocols
    if achievement_id == "veteran_trader":
        return profile.wallet_age_days
    return 0


def evaluate(scores: ScoreSet, profile: SyntheticPortfolio) -> list[Badge]:
    """One badge per catalogue entry, in catalogue order."""
    return [
        Badge(
            id=achievement_id,
            name=name,
            description=description,
            icon=icon,
            progress=max(0, _progress(achievement_id, scores, profile, max_progress)),
            max_progress=max_progress,
        )
        for achievement_id, (name, description, icon, max_progress)
        in ACHIEVEMENTS.items()
    ]
