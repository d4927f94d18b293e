from datetime import datetime, timedelta
from typing import Optional

from models import DcaOrder, Frequency, LimitOrder, OrderStatus


FREQUENCY_INTERVALS = {
    Frequency.DAILY: timedelta(days=1),
    Frequency.WEEKLY: timedelta(days=7),
    Frequency.MONTHLY: timedelta(days=30),
}

DEFAULT_EXPIRY_DAYS = 30

# Token whose price limit targets are quoted in
BASE_TOKEN = "SOL"


def next_execution(order: DcaOrder, now: datetime) -> datetime:
    return now + FREQUENCY_INTERVALS[order.frequency]


def limit_order_status(
    order: LimitOrder, current_price: float, now: datetime
) -> OrderStatus:
    if not order.is_active:
        return OrderStatus.CANCELLED
    if order.expires_at is not None and now > order.expires_at:
        return OrderStatus.EXPIRED

    # Selling the base token waits for the price to rise, buying for it to fall
    if order.input_token == BASE_TOKEN:
        reached = current_price >= order.target_price
    else:
        reached = current_price <= order.target_price
    return OrderStatus.READY if reached else OrderStatus.WAITING


def create_dca_order(
    input_token: str,
    output_token: str,
    amount: float,
    frequency: Frequency = Frequency.WEEKLY,
) -> Optional[DcaOrder]:
    if amount <= 0:
        return None
    return DcaOrder(
        input_token=input_token,
        output_token=output_token,
        amount=amount,
        frequency=frequency,
    )


def create_limit_order(
    input_token: str,
    output_token: str,
    amount: float,
    target_price: float,
    expiry_days: int = DEFAULT_EXPIRY_DAYS,
    now: Optional[datetime] = None,
) -> Optional[LimitOrder]:
    if amount <= 0 or target_price <= 0:
        return None
    now = now or datetime.now()
    return LimitOrder(
        input_token=input_token,
        output_token=output_token,
        amount=amount,
        target_price=target_price,
        expires_at=now + timedelta(days=expiry_days),
    )
