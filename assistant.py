import json
from typing import Any, Optional

from agent import TextGenerator
from models import (
    ChatIntent,
    ChatMessage,
    Intent,
    PortfolioRiskAnalysis,
    PortfolioToken,
    SavedPortfolio,
    ScoreSet,
    SwapQuote,
    SyntheticPortfolio,
)
from prompts import (
    HEALTH_RECOMMENDATIONS_PROMPT,
    INTENT_GUIDANCE,
    PORTFOLIO_INSIGHTS_PROMPT,
    SWAP_RECOMMENDATION_PROMPT,
    SYSTEM_PROMPT,
)
from scoring import fallback_recommendations


# ── Fallbacks ─────────────────────────────────────────────────────────────────

INSIGHTS_FALLBACK = (
    "Portfolio analysis shows good diversification. Consider rebalancing if any "
    "single token exceeds 40% of total value."
)
SWAP_FALLBACK = (
    "Consider using the route with the highest output amount while keeping price "
    "impact below 1% for optimal results."
)
NO_ROUTES_FALLBACK = "No swap routes are available for this pair right now."

CHAT_FALLBACKS = {
    Intent.PORTFOLIO_ANALYSIS: (
        "I can analyze portfolios! Provide a wallet address for risk assessment "
        "and optimization tips."
    ),
    Intent.SWAP_ROUTES: (
        "Jupiter offers the best swap rates by aggregating DEXs. Consider price "
        "impact for large trades."
    ),
    Intent.HEALTH_SCORE: (
        "I calculate DeFi health scores based on diversification, security, and "
        "governance. Need a wallet address."
    ),
}
CHAT_DEFAULT_FALLBACK = "I'm having technical difficulties. Please try again."

HISTORY_TURNS = 5
CONTEXT_TURNS = 3
CONTEXT_SNIPPET = 100


def build_context(history: list[ChatMessage], portfolios: list[SavedPortfolio]) -> str:
    lines = []
    if portfolios:
        lines.append(f"User has {len(portfolios)} saved portfolio(s):")
        for p in portfolios:
            lines.append(f"- {p.name}: ${p.total_value:,.0f} ({p.risk_level} risk)")
    if history:
        lines.append("")
        lines.append("Recent conversation context:")
        for msg in history[-CONTEXT_TURNS:]:
            lines.append(f"{msg.type}: {msg.content[:CONTEXT_SNIPPET]}...")
    return "\n".join(lines).strip()


def _as_turns(history: list[ChatMessage]) -> list[dict]:
    turns = [
        {
            "role": "user" if m.type == "user" else "assistant",
            "content": m.content,
        }
        for m in history[-HISTORY_TURNS:]
    ]
    # Providers expect the transcript to open with a user turn
    while turns and turns[0]["role"] != "user":
        turns.pop(0)
    return turns


class DeFiAssistant:
    """Wraps every language-model call with a deterministic fallback."""

    def __init__(self, generator: Optional[TextGenerator] = None):
        self.generator = generator

    async def _generate(self, label: str, prompt: str, max_tokens: int, **kwargs) -> Optional[str]:
        if self.generator is None:
            return None
        try:
            text = await self.generator.complete(prompt, max_tokens, **kwargs)
        except Exception as e:
            print(f"  [!] {label} generation failed: {e}")
            return None
        if not text or not text.strip():
            print(f"  [!] {label} generation returned no text")
            return None
        return text.strip()

    # ── Health ────────────────────────────────────────────────────────────

    async def recommendations(
        self, scores: ScoreSet, profile: SyntheticPortfolio
    ) -> list[str]:
        prompt = HEALTH_RECOMMENDATIONS_PROMPT.format(
            diversification=scores.diversification,
            security=scores.security,
            governance=scores.governance,
            experience=scores.experience,
            overall=scores.overall,
            tier=scores.tier.value,
            total_value=profile.total_value,
            token_count=profile.token_count,
            categories=", ".join(profile.categories),
            wallet_age_days=profile.wallet_age_days,
            transaction_count=profile.transaction_count,
            unique_protocols=profile.unique_protocols,
        )
        text = await self._generate("Recommendations", prompt, 400)
        lines = [line.strip() for line in (text or "").split("\n") if line.strip()]
        return lines or fallback_recommendations(scores, profile)

    # ── Portfolio ─────────────────────────────────────────────────────────

    async def portfolio_insights(
        self, tokens: list[PortfolioToken], risk: PortfolioRiskAnalysis
    ) -> str:
        prompt = PORTFOLIO_INSIGHTS_PROMPT.format(
            total_value=sum(t.value for t in tokens),
            risk_score=risk.risk_score,
            risk_level=risk.risk_level.value,
            holdings="\n".join(
                f"- {t.symbol}: {t.balance} tokens (${t.value:,.2f})" for t in tokens
            ),
        )
        return await self._generate("Portfolio insights", prompt, 300) or INSIGHTS_FALLBACK

    # ── Swap ──────────────────────────────────────────────────────────────

    async def swap_recommendation(
        self,
        input_token: str,
        output_token: str,
        amount: float,
        ranked: list[SwapQuote],
    ) -> str:
        if not ranked:
            return NO_ROUTES_FALLBACK
        best = ranked[0]
        prompt = SWAP_RECOMMENDATION_PROMPT.format(
            amount=amount,
            input_token=input_token,
            output_token=output_token,
            venue=best.venue_name,
            output_amount=best.output_amount,
            price_impact=best.price_impact_pct,
            fee=best.fee_usd,
            liquidity=best.liquidity_usd,
            alternatives=", ".join(q.venue_name for q in ranked[1:]) or "none",
        )
        return await self._generate("Swap recommendation", prompt, 200) or SWAP_FALLBACK

    # ── Chat ──────────────────────────────────────────────────────────────

    async def reply(
        self,
        message: str,
        intent: ChatIntent,
        history: list[ChatMessage],
        portfolios: list[SavedPortfolio],
        data: Optional[dict[str, Any]] = None,
    ) -> str:
        guidance_key = intent.intent.value
        if data is None and f"{guidance_key}_no_wallet" in INTENT_GUIDANCE:
            guidance_key = f"{guidance_key}_no_wallet"

        system = SYSTEM_PROMPT
        context = build_context(history, portfolios)
        if context:
            system += f"\n\nUser Context:\n{context}"
        if guidance_key in INTENT_GUIDANCE:
            system += f"\n\n{INTENT_GUIDANCE[guidance_key]}"
        if data is not None:
            system += f"\n\nData:\n{json.dumps(data, default=str)}"

        text = await self._generate(
            "Chat", message, 500, system=system, history=_as_turns(history)
        )
        return text or CHAT_FALLBACKS.get(intent.intent, CHAT_DEFAULT_FALLBACK)
