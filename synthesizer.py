import math
from typing import Optional

from generator import next_value, seed
from models import PortfolioToken, SyntheticPortfolio


# ── Ranges ────────────────────────────────────────────────────────────────────
# (min, max) pairs fed to the generator. Integer fields are floored.

CATEGORY_CATALOGUE = [
    "DeFi", "Gaming", "Infrastructure", "Meme", "NFT", "Layer1", "Layer2",
]

TOKEN_COUNT_RANGE = (3, 12)
CATEGORY_COUNT_RANGE = (2, 6)
TOTAL_VALUE_RANGE = (1000, 50000)
RISK_TOKEN_SHARE = 0.4
GOVERNANCE_RANGE = (0, 15)
HOLDING_PERIOD_RANGE = (30, 365)
WALLET_AGE_RANGE = (30, 730)
TRANSACTION_RANGE = (50, 1000)
PROTOCOL_RANGE = (2, 20)

# Token-level holdings
HOLDING_COUNT_RANGE = (2, 5)
LEAD_BALANCE_RANGE = (0.1, 50)
BALANCE_RANGE = (0.1, 1000)
SOL_PRICE_RANGE = (180, 220)
LST_PRICE_RANGE = (150, 200)

STABLECOINS = {"USDC", "USDT"}

TOKEN_CATALOGUE = [
    {
        "mint": "So11111111111111111111111111111111111111112",
        "symbol": "SOL",
        "name": "Solana",
    },
    {
        "mint": "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v",
        "symbol": "USDC",
        "name": "USD Coin",
    },
    {
        "mint": "Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB",
        "symbol": "USDT",
        "name": "Tether USD",
    },
    {
        "mint": "mSoLzYCxHdYgdzU16g5QSh3i5K3z3KZK7ytfqcJm7So",
        "symbol": "mSOL",
        "name": "Marinade Staked SOL",
    },
    {
        "mint": "7dHbWXmci3dT8UFYWYZweBLXgycu7Y3iL6trKn1Y7ARj",
        "symbol": "stSOL",
        "name": "Lido Staked SOL",
    },
]

LOGO_BASE = "https://raw.githubusercontent.com/solana-labs/token-list/main/assets/mainnet"


def _draw_int(seed_value: int, bounds: tuple[float, float]) -> int:
    return math.floor(next_value(seed_value, *bounds))


def synthesize(address: str) -> Optional[SyntheticPortfolio]:
    """Fabricate a stable portfolio profile for a wallet address.

    Returns None when the address is empty.
    """
    address = address.strip()
    if not address:
        return None

    s = seed(address)
    token_count = _draw_int(s, TOKEN_COUNT_RANGE)
    categories = CATEGORY_CATALOGUE[: _draw_int(s, CATEGORY_COUNT_RANGE)]

    return SyntheticPortfolio(
        total_value=round(next_value(s, *TOTAL_VALUE_RANGE)),
        token_count=token_count,
        categories=categories,
        risk_token_count=_draw_int(s, (0, max(1, token_count * RISK_TOKEN_SHARE))),
        governance_participation=_draw_int(s, GOVERNANCE_RANGE),
        holding_period_days=_draw_int(s, HOLDING_PERIOD_RANGE),
        wallet_age_days=_draw_int(s, WALLET_AGE_RANGE),
        transaction_count=_draw_int(s, TRANSACTION_RANGE),
        unique_protocols=_draw_int(s, PROTOCOL_RANGE),
    )


def synthesize_tokens(address: str) -> Optional[list[PortfolioToken]]:
    """Token holdings for the portfolio risk view, largest catalogue entries first."""
    address = address.strip()
    if not address:
        return None

    s = seed(address)
    count = _draw_int(s, HOLDING_COUNT_RANGE)

    tokens: list[PortfolioToken] = []
    for index, entry in enumerate(TOKEN_CATALOGUE[:count]):
        bounds = LEAD_BALANCE_RANGE if index == 0 else BALANCE_RANGE
        balance = next_value(s, *bounds)

        symbol = entry["symbol"]
        if symbol == "SOL":
            price = next_value(s, *SOL_PRICE_RANGE)
        elif symbol in STABLECOINS:
            price = 1.0
        else:
            price = next_value(s, *LST_PRICE_RANGE)

        tokens.append(PortfolioToken(
            mint=entry["mint"],
            symbol=symbol,
            name=entry["name"],
            balance=round(balance, 2),
            price=price,
            value=round(balance * price, 2),
            logo_uri=f"{LOGO_BASE}/{entry['mint']}/logo.png",
        ))
    return tokens
