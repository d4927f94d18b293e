import io
import os
import random
import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Literal, Optional

import httpx
from dotenv import load_dotenv
from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from fastmcp import FastMCP

load_dotenv()

from agent import TextGenerator
from analytics import DeFiAnalytics
from assistant import DeFiAssistant
from exports import to_csv, to_excel
from intents import classify
from models import (
    AddressRequest,
    AnalyticsResponse,
    ChatIntent,
    ChatRequest,
    Frequency,
    HealthResponse,
    IntentRequest,
    SwapRequest,
)
from orders import create_dca_order, create_limit_order, limit_order_status, next_execution
from quote_providers import get_quote_provider
from utils import short_address


VERSION = "1.0.0"


# ── MCP Server (mounted at /mcp) ─────────────────────────────────────────────

mcp = FastMCP(
    name="DeFi Analytics Agent",
    instructions=(
        "Solana DeFi analytics. Score a wallet's portfolio health, analyze portfolio "
        "risk, compare swap routes across DEXs, list arbitrage opportunities and "
        "chat about DeFi strategy."
    ),
)


@mcp.tool()
async def health_score_mcp(address: str) -> dict:
    """
    Compute the DeFi health score of a wallet.

    Args:
        address: Public Solana wallet address.

    Returns:
        Sub-scores, overall score, tier, badges, achievements and recommendations.
    """
    report = await analytics.health_score(address)
    if report is None:
        return {"error": "A wallet address is required."}
    return report.model_dump(mode="json")


@mcp.tool()
async def swap_routes_mcp(input_token: str, output_token: str, amount: float) -> dict:
    """
    Compare swap routes for a token pair, best route first.

    Args:
        input_token:  Symbol to sell, e.g. SOL.
        output_token: Symbol to buy, e.g. USDC.
        amount:       Amount of the input token.
    """
    try:
        report = await analytics.swap_routes(input_token, output_token, amount)
    except (httpx.HTTPError, ValueError) as e:
        return {"error": f"Quote fetch failed: {e}"}
    if report is None:
        return {"error": "Amount must be positive."}
    return report.model_dump(mode="json")


@mcp.tool()
async def chat_mcp(message: str) -> dict:
    """Ask the DeFi assistant a free-text question."""
    reply = await analytics.chat(message)
    return reply.model_dump(mode="json")


# ── Lifespan ──────────────────────────────────────────────────────────────────

# Streamable HTTP at the mount root, one JSON body per request
mcp_app = mcp.http_app(path="/", json_response=True, stateless_http=True)

analytics: DeFiAnalytics | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    global analytics
    try:
        generator = TextGenerator()
    except Exception as e:
        print(f"  [!] AI text generation disabled: {e}")
        generator = None
    analytics = DeFiAnalytics(
        assistant=DeFiAssistant(generator),
        quote_provider=get_quote_provider(),
        rng=random.Random(),
    )
    async with mcp_app.lifespan(app):
        print("  DeFi Analytics Agent ready")
        yield
    print("  Shutting down.")


# ── App ───────────────────────────────────────────────────────────────────────

app = FastAPI(
    title="DeFi Analytics Agent",
    description=(
        "Solana DeFi portfolio analytics: health scores with tiers and achievements, "
        "portfolio risk, swap-route comparison, arbitrage opportunities and a "
        "conversational assistant.\n\n"
        "Exposes **REST**, **MCP** (`/mcp/`), and **A2A** (`/a2a`) endpoints."
    ),
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.mount("/mcp", mcp_app)


def _elapsed_ms(start: float) -> int:
    return int((time.time() - start) * 1000)


# ── Info ──────────────────────────────────────────────────────────────────────


@app.get("/", tags=["Info"])
def root(request: Request):
    base = str(request.base_url).rstrip("/")
    return {
        "name": "DeFi Analytics Agent",
        "version": VERSION,
        "endpoints": {
            "docs": f"{base}/docs",
            "health": f"{base}/health",
            "health_score": f"{base}/health-score",
            "portfolio": f"{base}/portfolio/analyze",
            "swap_routes": f"{base}/swap/routes",
            "arbitrage": f"{base}/arbitrage",
            "chat": f"{base}/chat",
            "a2a_card": f"{base}/.well-known/agent.json",
            "a2a_tasks": f"{base}/a2a",
            "mcp": f"{base}/mcp/",
        },
    }


@app.get("/health", response_model=HealthResponse, tags=["Info"])
def health():
    return HealthResponse(status="ok", version=VERSION)


# ── Health Score ──────────────────────────────────────────────────────────────


@app.post("/health-score", tags=["Wallet"])
async def health_score(
    req: AddressRequest,
    format: Literal["json", "csv", "excel"] = Query(
        default="json",
        description="Output format: json (default) | csv | excel",
    ),
):
    """
    Score a wallet's DeFi health.

    Returns four sub-scores (diversification, security, governance, experience),
    the weighted overall score, its tier (Bronze → Diamond), earned badges,
    achievement progress and recommendations.
    """
    start = time.time()
    report = await analytics.health_score(req.address)
    if report is None:
        return AnalyticsResponse(
            success=False, error="A wallet address is required.",
            processing_time_ms=_elapsed_ms(start),
        )

    if format == "json":
        return AnalyticsResponse(
            success=True, result=report, processing_time_ms=_elapsed_ms(start),
        )

    short = short_address(report.address, 4)

    if format == "csv":
        return StreamingResponse(
            content=io.BytesIO(to_csv(report)),
            media_type="text/csv",
            headers={
                "Content-Disposition": f'attachment; filename="health_{short}.csv"'
            },
        )

    if format == "excel":
        return StreamingResponse(
            content=io.BytesIO(to_excel(report)),
            media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            headers={
                "Content-Disposition": f'attachment; filename="health_{short}.xlsx"'
            },
        )


# ── Portfolio ─────────────────────────────────────────────────────────────────


@app.post("/portfolio/analyze", tags=["Wallet"])
async def analyze_portfolio(
    req: AddressRequest,
    include_insights: bool = Query(
        default=True,
        description="Include AI-powered insights in the report",
    ),
):
    """Token holdings, concentration / market-cap risk and insights for a wallet."""
    start = time.time()
    report = await analytics.analyze_portfolio(req.address, include_insights)
    if report is None:
        return AnalyticsResponse(
            success=False, error="A wallet address is required.",
            processing_time_ms=_elapsed_ms(start),
        )
    return AnalyticsResponse(
        success=True, result=report, processing_time_ms=_elapsed_ms(start),
    )


# ── Swap Routes ───────────────────────────────────────────────────────────────


@app.post("/swap/routes", tags=["Trading"])
async def swap_routes(req: SwapRequest):
    """
    Compare swap routes across venues.

    Routes are ordered by output amount (highest first), ties broken by lower
    price impact. Each route carries a low / medium / high price-impact tier.
    """
    start = time.time()
    try:
        report = await analytics.swap_routes(
            req.input_token, req.output_token, req.amount
        )
    except (httpx.HTTPError, ValueError) as e:
        return AnalyticsResponse(
            success=False, error=f"Quote fetch failed: {e}",
            processing_time_ms=_elapsed_ms(start),
        )

    if report is None:
        return AnalyticsResponse(
            success=False, error="Amount must be positive.",
            processing_time_ms=_elapsed_ms(start),
        )
    return AnalyticsResponse(
        success=True, result=report, processing_time_ms=_elapsed_ms(start),
    )


@app.get("/arbitrage", tags=["Trading"])
def arbitrage():
    """Cross-venue arbitrage opportunities."""
    return [o.model_dump() for o in analytics.arbitrage()]


# ── Orders ────────────────────────────────────────────────────────────────────


@app.post("/orders/dca", tags=["Trading"])
def dca_order(
    input_token: str = "USDC",
    output_token: str = "SOL",
    amount: float = 0,
    frequency: Frequency = Frequency.WEEKLY,
):
    """Validate a DCA order and report when it would first execute."""
    order = create_dca_order(input_token, output_token, amount, frequency)
    if order is None:
        return AnalyticsResponse(success=False, error="Amount must be positive.")
    return AnalyticsResponse(
        success=True,
        result={
            "order": order,
            "next_execution": next_execution(order, datetime.now()),
        },
    )


@app.post("/orders/limit", tags=["Trading"])
def limit_order(
    input_token: str = "SOL",
    output_token: str = "USDC",
    amount: float = 0,
    target_price: float = 0,
    current_price: float = Query(..., description="Current price of the base token"),
    expiry_days: int = 30,
):
    """Validate a limit order and report its status at the given price."""
    order = create_limit_order(
        input_token, output_token, amount, target_price, expiry_days
    )
    if order is None:
        return AnalyticsResponse(
            success=False, error="Amount and target price must be positive.",
        )
    return AnalyticsResponse(
        success=True,
        result={
            "order": order,
            "status": limit_order_status(order, current_price, datetime.now()),
        },
    )


# ── Assistant ─────────────────────────────────────────────────────────────────


@app.post("/intent", response_model=ChatIntent, tags=["Assistant"])
def intent(req: IntentRequest):
    """Classify a message without generating a reply."""
    return classify(req.message)


@app.post("/chat", tags=["Assistant"])
async def chat(req: ChatRequest):
    """Chat with the DeFi assistant."""
    start = time.time()
    reply = await analytics.chat(req.message, req.history, req.portfolios)
    return AnalyticsResponse(
        success=True, result=reply, processing_time_ms=_elapsed_ms(start),
    )


# ── A2A: Agent Card ──────────────────────────────────────────────────────────


@app.get("/.well-known/agent.json", tags=["A2A"])
def agent_card(request: Request):
    """Google A2A Agent Card: describes this agent's identity and capabilities."""
    base = str(request.base_url).rstrip("/")
    return JSONResponse({
        "name": "DeFi Analytics Agent",
        "description": (
            "Solana DeFi analytics assistant. Ask about a wallet's portfolio risk "
            "or health score, compare swap routes, or explore arbitrage, DCA and "
            "limit-order strategies."
        ),
        "url": base,
        "version": VERSION,
        "provider": {
            "organization": "AI Agents Marketplace",
            "url": base,
        },
        "capabilities": {
            "streaming": False,
            "pushNotifications": False,
            "stateTransitionHistory": False,
        },
        "authentication": {"schemes": []},
        "defaultInputModes": ["application/json"],
        "defaultOutputModes": ["application/json"],
        "skills": [
            {
                "id": "defi_chat",
                "name": "DeFi Assistant",
                "description": (
                    "Answers free-text DeFi questions. Detects the intent (portfolio, "
                    "swap routes, health score, arbitrage, DCA, limit orders), "
                    "attaches the matching analytics and replies conversationally."
                ),
                "tags": [
                    "defi", "solana", "portfolio", "swap", "jupiter",
                    "arbitrage", "dca", "analytics",
                ],
                "examples": [
                    "What is the health score of 9QCfNuQuxct1Xk9ytFYgxc5fThmTzL4pHQnSjjrVUrka?",
                    "Swap 10 SOL for USDC",
                    "Analyze my portfolio risk",
                    "Any arbitrage opportunities right now?",
                ],
                "inputModes": ["application/json"],
                "outputModes": ["application/json"],
            }
        ],
    })


# ── A2A: JSON-RPC Task Endpoint ──────────────────────────────────────────────


@app.post("/a2a", tags=["A2A"])
async def a2a_endpoint(request: Request):
    """
    Google A2A Protocol, JSON-RPC 2.0 task endpoint.

    Send a task with a text part and receive the assistant reply.

    Example request:
    ```json
    {
      "jsonrpc": "2.0",
      "method": "tasks/send",
      "id": "1",
      "params": {
        "id": "task-uuid",
        "message": {
          "role": "user",
          "parts": [{"type": "text", "text": "swap 10 SOL for USDC"}]
        }
      }
    }
    ```
    """
    try:
        body = await request.json()
    except Exception:
        return JSONResponse({
            "jsonrpc": "2.0", "id": None,
            "error": {"code": -32700, "message": "Parse error"},
        })

    rpc_id = body.get("id")
    method = body.get("method", "")
    params = body.get("params", {})

    def rpc_error(code: int, message: str):
        return JSONResponse({
            "jsonrpc": "2.0", "id": rpc_id,
            "error": {"code": code, "message": message},
        })

    if method != "tasks/send":
        return rpc_error(-32601, f"Method '{method}' not supported. Use 'tasks/send'.")

    parts = params.get("message", {}).get("parts", [])
    text_part: Optional[str] = next(
        (p.get("text", "") for p in parts if p.get("type") == "text"), None
    )

    if not text_part:
        return rpc_error(
            -32602,
            "No text part found. Send a 'text' part containing your question.",
        )

    reply = await analytics.chat(text_part.strip())
    task_id = params.get("id", str(uuid.uuid4()))

    return JSONResponse({
        "jsonrpc": "2.0",
        "id": rpc_id,
        "result": {
            "id": task_id,
            "status": {
                "state": "completed",
                "timestamp": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
            },
            "artifacts": [
                {
                    "name": "defi_reply",
                    "description": f"Reply to a {reply.intent.intent.value} request",
                    "parts": [
                        {"type": "text", "text": reply.message},
                        {"type": "data", "data": reply.model_dump(mode="json")},
                    ],
                }
            ],
        },
    })


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("APP_ENV", "development") == "development",
    )
