"""
Rule-based intent classification for chat messages.

Rules are evaluated top to bottom and the first match wins. Confidence is a
constant per rule, not a measure of match strength. Entity extraction runs
regardless of which rule matched.
"""

import re
from typing import Callable, Optional

from models import ChatIntent, Intent
from utils import BASE58_ADDRESS


DEFAULT_INPUT_TOKEN = "SOL"
DEFAULT_OUTPUT_TOKEN = "USDC"
DEFAULT_AMOUNT = 1.0

KNOWN_TOKENS = [
    "SOL", "USDC", "USDT", "BTC", "ETH", "mSOL", "stSOL",
    "BONK", "WIF", "JUP", "RAY",
]
_CANONICAL = {t.upper(): t for t in KNOWN_TOKENS}

_WALLET_RE = re.compile(BASE58_ADDRESS)
_TOKEN_RE = re.compile(r"\b(" + "|".join(KNOWN_TOKENS) + r")\b", re.IGNORECASE)
_AMOUNT_RE = re.compile(r"\b\d+(?:\.\d+)?\b")


def _names_a_pair(lower: str, tokens: list[str]) -> bool:
    return len(tokens) >= 2 and ("to" in lower or "for" in lower)


# (intent, keywords, confidence, extra predicate)
INTENT_RULES: list[tuple[Intent, tuple[str, ...], float, Optional[Callable]]] = [
    (
        Intent.PORTFOLIO_ANALYSIS,
        ("portfolio", "risk", "analyze", "diversif", "balance", "allocation"),
        0.9,
        None,
    ),
    (
        Intent.SWAP_ROUTES,
        ("swap", "route", "dex", "exchange", "trade", "convert"),
        0.9,
        _names_a_pair,
    ),
    (
        Intent.HEALTH_SCORE,
        ("health", "score", "tier", "rating", "grade", "assessment"),
        0.9,
        None,
    ),
    (Intent.ARBITRAGE, ("arbitrage", "profit", "opportunity"), 0.7, None),
    (Intent.DCA_STRATEGY, ("dca", "dollar cost", "averaging"), 0.7, None),
    (Intent.LIMIT_ORDER, ("limit order", "limit price", "target price"), 0.7, None),
]

GENERAL_CONFIDENCE = 0.5


def extract_wallet(message: str) -> Optional[str]:
    match = _WALLET_RE.search(message)
    return match.group(0) if match else None


def extract_tokens(message: str) -> list[str]:
    return [_CANONICAL[m.upper()] for m in _TOKEN_RE.findall(message)]


def extract_amount(message: str) -> Optional[float]:
    match = _AMOUNT_RE.search(message)
    return float(match.group(0)) if match else None


def classify(message: str) -> ChatIntent:
    lower = message.lower()
    tokens = extract_tokens(message)
    amount = extract_amount(message)

    intent, confidence = Intent.GENERAL, GENERAL_CONFIDENCE
    for rule_intent, keywords, rule_confidence, extra in INTENT_RULES:
        if any(k in lower for k in keywords) or (extra and extra(lower, tokens)):
            intent, confidence = rule_intent, rule_confidence
            break

    return ChatIntent(
        intent=intent,
        confidence=confidence,
        wallet_address=extract_wallet(message),
        tokens=tokens,
        input_token=tokens[0] if tokens else DEFAULT_INPUT_TOKEN,
        output_token=tokens[1] if len(tokens) > 1 else DEFAULT_OUTPUT_TOKEN,
        amount=amount if amount and amount > 0 else DEFAULT_AMOUNT,
    )
