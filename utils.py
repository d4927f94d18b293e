import math

# Solana: Base58, 32-44 chars (no 0, O, I, l)
BASE58_ADDRESS = r"[1-9A-HJ-NP-Za-km-z]{32,44}"


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values, like Math.round."""
    return math.floor(value + 0.5)


def short_address(address: str, chars: int = 6) -> str:
    """Truncate: 9QCfNu...VUrka"""
    if len(address) <= chars * 2 + 3:
        return address
    return f"{address[:chars]}...{address[-chars:]}"


def format_currency(amount: float, symbol: str = "$", decimals: int = 2) -> str:
    if abs(amount) >= 1_000_000:
        return f"{symbol}{amount / 1_000_000:,.{decimals}f}M"
    elif abs(amount) >= 1_000:
        return f"{symbol}{amount / 1_000:,.{decimals}f}K"
    return f"{symbol}{amount:,.{decimals}f}"


def format_number(n: int) -> str:
    return f"{n:,}"
