# subslayer/utils/spending.py
"""
Spending aggregation over subscription rows.

Works on anything exposing ``cost``, ``billing_cycle``, ``status`` and
``created_at`` attributes: ORM rows on the server, ``SubscriptionRecord``
objects in the client.

The historical months are a display heuristic: there is no billing history,
so a month's figure is the monthly-equivalent cost of the subscriptions that
already existed on the first of that month and are still active today,
scaled by a fresh random factor in [0.85, 1.15]. Only the current month is an
exact figure.
"""
from __future__ import annotations

import calendar
import random
from dataclasses import dataclass, asdict
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

SERIES_LENGTH = 7
JITTER_LOW = 0.85
JITTER_HIGH = 1.15

MONTH_LABELS = [calendar.month_abbr[m] for m in range(1, 13)]


@dataclass
class SpendingPoint:
    month: str
    amount: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def monthly_equivalent(subscription: Any) -> float:
    """Per-month cost: the cost itself for monthly plans, cost / 12 for annual ones"""
    cost = float(subscription.cost or 0)
    if subscription.billing_cycle == "annual":
        return cost / 12
    return cost


def is_active(subscription: Any) -> bool:
    return subscription.status == "active"


def total_monthly_spend(subscriptions: Iterable[Any]) -> float:
    return sum(monthly_equivalent(sub) for sub in subscriptions if is_active(sub))


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _shift_month(year: int, month: int, back: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) - back
    return index // 12, index % 12 + 1


def month_starts(now: Optional[datetime] = None) -> List[datetime]:
    """First day of each month in the series, oldest first, ending with the current month"""
    now = now or datetime.now()
    starts = []
    for back in range(SERIES_LENGTH - 1, -1, -1):
        year, month = _shift_month(now.year, now.month, back)
        starts.append(datetime(year, month, 1))
    return starts


def zero_series(now: Optional[datetime] = None) -> List[SpendingPoint]:
    return [SpendingPoint(month=MONTH_LABELS[start.month - 1], amount=0.0) for start in month_starts(now)]


def build_spending_series(
    subscriptions: Iterable[Any],
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
) -> List[SpendingPoint]:
    """
    Seven points, oldest to newest, the last one being the current month.

    Every call draws new jitter factors for the six historical months, so two
    calls on the same rows return different history but the same last point.
    """
    subscriptions = list(subscriptions)
    rng = rng or random
    starts = month_starts(now)

    series: List[SpendingPoint] = []
    for index, start in enumerate(starts):
        label = MONTH_LABELS[start.month - 1]

        if index == len(starts) - 1:
            series.append(SpendingPoint(month=label, amount=round(total_monthly_spend(subscriptions), 2)))
            continue

        month_total = sum(
            monthly_equivalent(sub)
            for sub in subscriptions
            if is_active(sub) and sub.created_at is not None and _naive_utc(sub.created_at) <= start
        )
        month_total *= rng.uniform(JITTER_LOW, JITTER_HIGH)
        series.append(SpendingPoint(month=label, amount=round(month_total, 2)))

    return series


def add_one_month(day: date) -> date:
    """Same day next month, clamped to the length of that month"""
    year, month = _shift_month(day.year, day.month, -1)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))
