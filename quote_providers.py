import asyncio
import os
from abc import ABC, abstractmethod
from typing import Optional

import httpx

from generator import next_value
from models import SwapQuote


# ── Token Registry ────────────────────────────────────────────────────────────

TOKENS = {
    "SOL": {"mint": "So11111111111111111111111111111111111111112", "decimals": 9},
    "USDC": {"mint": "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v", "decimals": 6},
    "USDT": {"mint": "Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB", "decimals": 6},
    "mSOL": {"mint": "mSoLzYCxHdYgdzU16g5QSh3i5K3z3KZK7ytfqcJm7So", "decimals": 9},
    "stSOL": {"mint": "7dHbWXmci3dT8UFYWYZweBLXgycu7Y3iL6trKn1Y7ARj", "decimals": 9},
    "JUP": {"mint": "JUPyiwrYJFskUPiHa7hkeR8VUtAeFoSYbKedZNsDvCN", "decimals": 6},
    "RAY": {"mint": "4k3Dyjzvzp8eMZWUXbBCjEvwSkkk59S5iCNLY3QrkX6R", "decimals": 6},
    "BONK": {"mint": "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263", "decimals": 5},
}

# Approximate USD prices, used by the simulated venues and for fee conversion
REFERENCE_PRICES: dict[str, float] = {
    "SOL": 200.0,
    "USDC": 1.0,
    "USDT": 1.0,
    "RAY": 2.5,
    "JUP": 0.8,
    "BONK": 0.00002,
}


# ── Base Provider ─────────────────────────────────────────────────────────────


class QuoteProvider(ABC):
    """Source of per-venue swap quotes."""

    @abstractmethod
    async def get_quotes(
        self, input_symbol: str, output_symbol: str, amount: float
    ) -> list[SwapQuote]:
        ...


# ── Simulated Venues ──────────────────────────────────────────────────────────
# Output multiplier, price impact (%), fee (USD) and liquidity (USD) ranges.

SIMULATED_VENUES = [
    {
        "name": "Jupiter",
        "output": (0.995, 1.002),
        "impact": (0.02, 0.08),
        "fee": (1.5, 2.5),
        "liquidity": (1_800_000, 2_200_000),
        "pool": "7qbRF6YsyGuLUVs6Y1q64bdVrfe4ZcUUz1JRdoVNUJnm",
    },
    {
        "name": "Raydium",
        "output": (0.985, 0.998),
        "impact": (0.05, 0.12),
        "fee": (2.0, 3.0),
        "liquidity": (1_200_000, 1_800_000),
        "pool": "58oQChx4yWmvKdwLLZzBi4ChoCc2fqCUWBkwMihLYQo2",
    },
    {
        "name": "Orca",
        "output": (0.980, 0.995),
        "impact": (0.08, 0.18),
        "fee": (2.5, 3.5),
        "liquidity": (1_000_000, 1_500_000),
        "pool": "9W959DqEETiGZocYWCQPaJ6sBmUzgfxXfqGeTEdp3aQP",
    },
]


class SimulatedQuoteProvider(QuoteProvider):
    """Deterministic quotes seeded by the swap amount."""

    async def get_quotes(
        self, input_symbol: str, output_symbol: str, amount: float
    ) -> list[SwapQuote]:
        if amount <= 0:
            return []

        input_price = REFERENCE_PRICES.get(input_symbol, 1.0)
        output_price = REFERENCE_PRICES.get(output_symbol, 1.0)
        expected = amount * input_price / output_price
        s = amount * 1000

        return [
            SwapQuote(
                venue_name=v["name"],
                output_amount=expected * next_value(s, *v["output"]),
                price_impact_pct=next_value(s, *v["impact"]),
                fee_usd=next_value(s, *v["fee"]),
                liquidity_usd=next_value(s, *v["liquidity"]),
                pool_address=v["pool"],
            )
            for v in SIMULATED_VENUES
        ]


# ── Jupiter Quote API ─────────────────────────────────────────────────────────
# One aggregated quote plus one quote restricted to each listed DEX.

JUPITER_QUOTE_API = os.getenv("JUPITER_QUOTE_API", "https://quote-api.jup.ag/v6")
JUPITER_DEXES = ["Raydium", "Orca V2", "Meteora DLMM"]


class JupiterQuoteProvider(QuoteProvider):
    def __init__(self):
        self.api_base = JUPITER_QUOTE_API
        self.slippage_bps = int(os.getenv("QUOTE_SLIPPAGE_BPS", "50"))

    async def _quote(
        self,
        client: httpx.AsyncClient,
        input_symbol: str,
        output_symbol: str,
        amount: float,
        dex: Optional[str] = None,
    ) -> Optional[SwapQuote]:
        src, dst = TOKENS[input_symbol], TOKENS[output_symbol]
        params = {
            "inputMint": src["mint"],
            "outputMint": dst["mint"],
            "amount": str(int(amount * 10 ** src["decimals"])),
            "slippageBps": str(self.slippage_bps),
        }
        if dex:
            params["dexes"] = dex

        resp = await client.get(f"{self.api_base}/quote", params=params, timeout=15)
        resp.raise_for_status()
        data = resp.json()

        out_amount = int(data.get("outAmount", 0)) / 10 ** dst["decimals"]
        if out_amount <= 0:
            return None

        route_plan = data.get("routePlan", [])
        labels = [r.get("swapInfo", {}).get("label", "") for r in route_plan]
        venue = dex or "Jupiter"
        if not dex and labels:
            venue = f"Jupiter ({' → '.join(l for l in labels if l)})"

        return SwapQuote(
            venue_name=venue,
            output_amount=out_amount,
            price_impact_pct=abs(float(data.get("priceImpactPct") or 0)) * 100,
            fee_usd=self._fees_usd(route_plan),
            pool_address=(
                route_plan[0].get("swapInfo", {}).get("ammKey") if route_plan else None
            ),
        )

    @staticmethod
    def _fees_usd(route_plan: list[dict]) -> float:
        by_mint = {t["mint"]: (sym, t["decimals"]) for sym, t in TOKENS.items()}
        total = 0.0
        for step in route_plan:
            info = step.get("swapInfo", {})
            known = by_mint.get(info.get("feeMint", ""))
            if not known:
                continue
            symbol, decimals = known
            fee = int(info.get("feeAmount", 0)) / 10 ** decimals
            total += fee * REFERENCE_PRICES.get(symbol, 0.0)
        return round(total, 4)

    async def get_quotes(
        self, input_symbol: str, output_symbol: str, amount: float
    ) -> list[SwapQuote]:
        if input_symbol not in TOKENS or output_symbol not in TOKENS:
            raise ValueError(
                f"Unsupported token pair: {input_symbol}/{output_symbol}"
            )

        async with httpx.AsyncClient() as client:
            # The aggregated quote must succeed; single-DEX quotes are best effort
            aggregated = await self._quote(client, input_symbol, output_symbol, amount)
            results = await asyncio.gather(
                *[
                    self._quote(client, input_symbol, output_symbol, amount, dex)
                    for dex in JUPITER_DEXES
                ],
                return_exceptions=True,
            )

        quotes = [aggregated] if aggregated else []
        for dex, r in zip(JUPITER_DEXES, results):
            if isinstance(r, SwapQuote):
                quotes.append(r)
            elif isinstance(r, Exception):
                print(f"  [!] Jupiter quote via {dex} failed: {r}")
        return quotes


# ── Factory ───────────────────────────────────────────────────────────────────


def get_quote_provider(name: Optional[str] = None) -> QuoteProvider:
    name = (name or os.getenv("QUOTE_PROVIDER", "simulated")).lower()
    if name == "jupiter":
        return JupiterQuoteProvider()
    elif name == "simulated":
        return SimulatedQuoteProvider()
    raise ValueError(
        f"Unknown QUOTE_PROVIDER '{name}'. Set QUOTE_PROVIDER to 'simulated' or 'jupiter'."
    )
