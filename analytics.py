import random
from typing import Any, Optional

from achievements import evaluate
from arbitrage import list_opportunities
from assistant import DeFiAssistant
from intents import classify
from models import (
    ArbitrageOpportunity,
    ChatIntent,
    ChatMessage,
    ChatReply,
    HealthReport,
    Intent,
    PortfolioReport,
    SavedPortfolio,
    SwapRoutesReport,
)
from quote_providers import QuoteProvider, SimulatedQuoteProvider
from routes import rank, rank_with_tiers
from scoring import analyze_portfolio_risk, earned_badges, score
from synthesizer import synthesize, synthesize_tokens


class DeFiAnalytics:
    """Orchestrates the synthetic-data pipelines behind every view."""

    def __init__(
        self,
        assistant: Optional[DeFiAssistant] = None,
        quote_provider: Optional[QuoteProvider] = None,
        rng: Optional[random.Random] = None,
    ):
        self.assistant = assistant or DeFiAssistant()
        self.quote_provider = quote_provider or SimulatedQuoteProvider()
        self.rng = rng

    # ── Health Score ──────────────────────────────────────────────────────

    async def health_score(self, address: str) -> Optional[HealthReport]:
        profile = synthesize(address)
        if profile is None:
            return None

        scores = score(profile)
        return HealthReport(
            address=address.strip(),
            scores=scores,
            badges=earned_badges(profile, scores),
            achievements=evaluate(scores, profile),
            recommendations=await self.assistant.recommendations(scores, profile),
            portfolio=profile,
        )

    # ── Portfolio ─────────────────────────────────────────────────────────

    async def analyze_portfolio(
        self, address: str, include_insights: bool = True
    ) -> Optional[PortfolioReport]:
        tokens = synthesize_tokens(address)
        if tokens is None:
            return None

        risk = analyze_portfolio_risk(tokens)
        insights = None
        if include_insights:
            insights = await self.assistant.portfolio_insights(tokens, risk)

        return PortfolioReport(
            address=address.strip(),
            tokens=tokens,
            total_value=round(sum(t.value for t in tokens), 2),
            risk_analysis=risk,
            ai_insights=insights,
        )

    # ── Swap Routes ───────────────────────────────────────────────────────

    async def swap_routes(
        self,
        input_token: str,
        output_token: str,
        amount: float,
        include_recommendation: bool = True,
    ) -> Optional[SwapRoutesReport]:
        """Ranked quotes for a swap. Quote-provider errors propagate."""
        if amount <= 0:
            return None

        quotes = await self.quote_provider.get_quotes(input_token, output_token, amount)
        ranked = rank(quotes)

        recommendation = None
        if include_recommendation:
            recommendation = await self.assistant.swap_recommendation(
                input_token, output_token, amount, ranked
            )

        return SwapRoutesReport(
            input_token=input_token,
            output_token=output_token,
            amount=amount,
            routes=rank_with_tiers(quotes),
            best_route=ranked[0] if ranked else None,
            ai_recommendation=recommendation,
        )

    # ── Arbitrage ─────────────────────────────────────────────────────────

    def arbitrage(self) -> list[ArbitrageOpportunity]:
        return list_opportunities(self.rng)

    # ── Chat ──────────────────────────────────────────────────────────────

    async def _intent_data(self, intent: ChatIntent) -> Optional[dict[str, Any]]:
        if intent.intent == Intent.PORTFOLIO_ANALYSIS and intent.wallet_address:
            report = await self.analyze_portfolio(
                intent.wallet_address, include_insights=False
            )
            return report.model_dump(mode="json") if report else None

        if intent.intent == Intent.HEALTH_SCORE and intent.wallet_address:
            profile = synthesize(intent.wallet_address)
            if profile is None:
                return None
            scores = score(profile)
            return {
                "scores": scores.model_dump(mode="json"),
                "badges": earned_badges(profile, scores),
            }

        if intent.intent == Intent.SWAP_ROUTES:
            try:
                report = await self.swap_routes(
                    intent.input_token,
                    intent.output_token,
                    intent.amount,
                    include_recommendation=False,
                )
            except Exception as e:
                print(f"  [!] Swap quotes for chat failed: {e}")
                return None
            return report.model_dump(mode="json") if report else None

        if intent.intent == Intent.ARBITRAGE:
            return {
                "opportunities": [o.model_dump() for o in self.arbitrage()],
            }
        return None

    async def chat(
        self,
        message: str,
        history: Optional[list[ChatMessage]] = None,
        portfolios: Optional[list[SavedPortfolio]] = None,
    ) -> ChatReply:
        history = history or []
        portfolios = portfolios or []

        intent = classify(message)
        data = await self._intent_data(intent)
        text = await self.assistant.reply(message, intent, history, portfolios, data)
        return ChatReply(message=text, intent=intent, data=data)
