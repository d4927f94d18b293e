from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, computed_field, field_validator


# ── Enums ─────────────────────────────────────────────────────────────────────


class Tier(str, Enum):
    BRONZE = "Bronze"
    SILVER = "Silver"
    GOLD = "Gold"
    PLATINUM = "Platinum"
    DIAMOND = "Diamond"


class Intent(str, Enum):
    PORTFOLIO_ANALYSIS = "portfolio_analysis"
    SWAP_ROUTES = "swap_routes"
    HEALTH_SCORE = "health_score"
    ARBITRAGE = "arbitrage"
    DCA_STRATEGY = "dca_strategy"
    LIMIT_ORDER = "limit_order"
    GENERAL = "general"


class RiskTier(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RiskLevel(str, Enum):
    LOW = "Low-Risk"
    MODERATE = "Moderate"
    HIGH = "High-Stakes"


class Frequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class OrderStatus(str, Enum):
    CANCELLED = "Cancelled"
    EXPIRED = "Expired"
    READY = "Ready to Execute"
    WAITING = "Waiting"


# ── Core Data Models ──────────────────────────────────────────────────────────


class SyntheticPortfolio(BaseModel):
    total_value: float = Field(0.0, ge=0)
    token_count: int = Field(0, ge=0)
    categories: list[str] = Field(..., min_length=1)
    risk_token_count: int = Field(0, ge=0)
    governance_participation: int = Field(0, ge=0)
    holding_period_days: int = Field(0, ge=0)
    wallet_age_days: int = Field(0, ge=0)
    transaction_count: int = Field(0, ge=0)
    unique_protocols: int = Field(0, ge=0)

    @field_validator(
        "total_value", "token_count", "risk_token_count",
        "governance_participation", "holding_period_days", "wallet_age_days",
        "transaction_count", "unique_protocols",
        mode="before",
    )
    @classmethod
    def _clamp_negative(cls, value):
        # Malformed upstream data is clamped, not rejected.
        if isinstance(value, (int, float)) and value < 0:
            return 0
        return value


class ScoreSet(BaseModel):
    diversification: float = Field(..., ge=0, le=100)
    security: float = Field(..., ge=0, le=100)
    governance: float = Field(..., ge=0, le=100)
    experience: float = Field(..., ge=0, le=100)
    overall: int = Field(..., ge=0, le=100)
    tier: Tier


class SwapQuote(BaseModel):
    venue_name: str
    output_amount: float = Field(..., gt=0)
    price_impact_pct: float = Field(0.0, ge=0)
    fee_usd: float = Field(0.0, ge=0)
    liquidity_usd: float = Field(0.0, ge=0)
    pool_address: Optional[str] = None


class ChatIntent(BaseModel):
    intent: Intent
    confidence: float = Field(..., ge=0, le=1)
    wallet_address: Optional[str] = None
    tokens: list[str] = []
    input_token: str = "SOL"
    output_token: str = "USDC"
    amount: float = 1.0


class Badge(BaseModel):
    id: str
    name: str
    description: str
    icon: str
    progress: float = Field(0.0, ge=0)
    max_progress: float = Field(..., gt=0)

    @computed_field
    @property
    def unlocked(self) -> bool:
        return self.progress >= self.max_progress


class PortfolioToken(BaseModel):
    mint: str
    symbol: str
    name: str
    balance: float = 0.0
    price: float = 0.0
    value: float = 0.0
    logo_uri: Optional[str] = None


class PortfolioRiskAnalysis(BaseModel):
    risk_score: int = Field(0, ge=0, le=100)
    risk_level: RiskLevel = RiskLevel.LOW
    risk_flags: list[str] = []


class RankedRoute(BaseModel):
    quote: SwapQuote
    impact_tier: RiskTier


class ArbitrageOpportunity(BaseModel):
    pair: str
    sol_price: float
    eth_price: float
    bsc_price: float
    profit_margin: float = Field(0.0, ge=0)
    volume_24h: float = 0.0
    gas_cost: float = 0.0
    net_profit: float = 0.0
    risk_level: str = "Low"
    profit_tier: str = "low"


class DcaOrder(BaseModel):
    input_token: str = "USDC"
    output_token: str = "SOL"
    amount: float = Field(..., gt=0)
    frequency: Frequency = Frequency.WEEKLY
    is_active: bool = True
    total_executions: int = 0
    average_price: float = 0.0


class LimitOrder(BaseModel):
    input_token: str = "SOL"
    output_token: str = "USDC"
    amount: float = Field(..., gt=0)
    target_price: float = Field(..., gt=0)
    is_active: bool = True
    expires_at: Optional[datetime] = None


class SavedPortfolio(BaseModel):
    """A portfolio summary as handed over by the persistence layer."""

    name: str
    wallet_address: str = ""
    total_value: float = 0.0
    risk_level: str = RiskLevel.LOW.value
    risk_score: int = 0


class ChatMessage(BaseModel):
    type: str = "user"
    content: str
    timestamp: Optional[float] = None


# ── Reports ───────────────────────────────────────────────────────────────────


class HealthReport(BaseModel):
    address: str
    scores: ScoreSet
    badges: list[str] = []
    achievements: list[Badge] = []
    recommendations: list[str] = []
    portfolio: SyntheticPortfolio


class PortfolioReport(BaseModel):
    address: str
    tokens: list[PortfolioToken] = []
    total_value: float = 0.0
    risk_analysis: PortfolioRiskAnalysis
    ai_insights: Optional[str] = None


class SwapRoutesReport(BaseModel):
    input_token: str
    output_token: str
    amount: float
    routes: list[RankedRoute] = []
    best_route: Optional[SwapQuote] = None
    ai_recommendation: Optional[str] = None


class ChatReply(BaseModel):
    message: str
    intent: ChatIntent
    data: Optional[dict[str, Any]] = None


# ── API Models ────────────────────────────────────────────────────────────────


class HealthResponse(BaseModel):
    status: str
    version: str


class AddressRequest(BaseModel):
    address: str = Field(..., description="Public Solana wallet address")


class SwapRequest(BaseModel):
    input_token: str = Field("SOL", description="Symbol of the token to sell")
    output_token: str = Field("USDC", description="Symbol of the token to buy")
    amount: float = Field(..., description="Amount of the input token")


class IntentRequest(BaseModel):
    message: str


class ChatRequest(BaseModel):
    message: str
    history: list[ChatMessage] = []
    portfolios: list[SavedPortfolio] = []


class AnalyticsResponse(BaseModel):
    success: bool
    error: Optional[str] = None
    result: Optional[Any] = None
    processing_time_ms: Optional[int] = None
