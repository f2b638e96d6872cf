# subslayer/api/v1/routes/dashboard.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Dict, Any, List
from datetime import date
from collections import defaultdict

from subslayer.core.database import get_async_session
from subslayer.core.auth import User
from subslayer.crud.subscription import get_subscriptions_for_user
from subslayer.utils.spending import (
    build_spending_series,
    monthly_equivalent,
    total_monthly_spend,
)
from subslayer.api.deps import get_current_user

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

@router.get("/spending")
async def get_spending_series(
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
) -> List[Dict[str, Any]]:
    """
    Seven-month spending series ending with the current month. Only the last
    point is exact; earlier months are estimated on every request.
    """
    subscriptions = await get_subscriptions_for_user(user.id, db)
    return [point.to_dict() for point in build_spending_series(subscriptions)]

@router.get("/summary")
async def get_dashboard_summary(
    renewal_window_days: int = Query(30, ge=1, le=365, description="How far ahead to list renewals"),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
) -> Dict[str, Any]:
    """
    Returns the dashboard cards in one call:
    - Cards: monthly and annual spend, counts per status
    - Charts: monthly-equivalent spend per category
    - Lists: active subscriptions renewing within the window
    """
    subscriptions = await get_subscriptions_for_user(user.id, db)
    today = date.today()

    counts = {"active": 0, "paused": 0, "cancelled": 0}
    per_category = defaultdict(float)
    upcoming = []

    for sub in subscriptions:
        counts[sub.status.value] += 1
        if sub.status != "active":
            continue

        per_category[sub.category or "Other"] += monthly_equivalent(sub)

        days_until = (sub.next_billing - today).days
        if 0 <= days_until <= renewal_window_days:
            upcoming.append({
                "id": str(sub.id),
                "name": sub.name,
                "cost": sub.cost,
                "currency": sub.currency,
                "next_billing": sub.next_billing.isoformat(),
                "days_until": days_until,
                "color": sub.color,
            })

    monthly_total = total_monthly_spend(subscriptions)

    categories = [
        {"name": name, "value": round(value, 2)}
        for name, value in per_category.items()
    ]
    categories.sort(key=lambda x: x["value"], reverse=True)
    upcoming.sort(key=lambda x: x["days_until"])

    return {
        "summary": {
            "total_monthly": round(monthly_total, 2),
            "total_annual": round(monthly_total * 12, 2),
            "active_count": counts["active"],
            "paused_count": counts["paused"],
            "cancelled_count": counts["cancelled"],
            "total_count": len(subscriptions),
        },
        "categories": categories,
        "upcoming_renewals": upcoming,
    }
