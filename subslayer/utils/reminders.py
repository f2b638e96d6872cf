# subslayer/utils/reminders.py
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from subslayer.core.auth import User
from subslayer.crud import notification as crud_notification
from subslayer.crud.profile import get_or_create_profile
from subslayer.crud.subscription import get_subscriptions_for_user
from subslayer.schemas.notification import NotificationCreate
from subslayer.utils.emails import render_renewal_email, send_email_via_sendgrid

logger = logging.getLogger(__name__)

URGENT_DAYS = 3


@dataclass
class ReminderDraft:
    subscription_id: uuid.UUID
    subscription_name: str
    type: str
    title: str
    message: str
    days_until: int
    urgent: bool
    cost: float
    currency: str
    renewal_date: date

    @property
    def status(self) -> str:
        if self.type == "overdue":
            return "alert"
        return "urgent" if self.urgent else "reminder"


def _plural_days(days: int) -> str:
    return f"{days} day{'' if days == 1 else 's'}"


def _already_notified(existing: Iterable[Any], subscription_id: uuid.UUID, kind: str, days_until: int) -> bool:
    for note in existing:
        if note.subscription_id != subscription_id or note.type != kind:
            continue
        if kind == "overdue":
            return True
        if abs((note.days_until or 0) - days_until) <= 1:
            return True
    return False


def build_renewal_notifications(
    subscriptions: Iterable[Any],
    reminder_days: int,
    existing: Iterable[Any] = (),
    today: Optional[date] = None,
) -> List[ReminderDraft]:
    """
    Renewal reminders for active subscriptions billing within ``reminder_days``
    and one overdue alert per subscription whose billing date has passed.
    Subscriptions already notified for (about) the same day are skipped.
    """
    today = today or date.today()
    existing = list(existing)
    drafts: List[ReminderDraft] = []

    for sub in subscriptions:
        if sub.status != "active":
            continue

        days_until = (sub.next_billing - today).days

        if 0 <= days_until <= reminder_days:
            if _already_notified(existing, sub.id, "renewal", days_until):
                continue
            when = "today" if days_until == 0 else f"in {_plural_days(days_until)}"
            drafts.append(ReminderDraft(
                subscription_id=sub.id,
                subscription_name=sub.name,
                type="renewal",
                title=f"{sub.name} renewal {when}",
                message=f"Your {sub.name} subscription will renew {when} for {sub.cost:.2f} {sub.currency}",
                days_until=days_until,
                urgent=days_until <= URGENT_DAYS,
                cost=sub.cost,
                currency=sub.currency,
                renewal_date=sub.next_billing,
            ))
        elif days_until < 0:
            if _already_notified(existing, sub.id, "overdue", days_until):
                continue
            drafts.append(ReminderDraft(
                subscription_id=sub.id,
                subscription_name=sub.name,
                type="overdue",
                title=f"{sub.name} payment overdue",
                message=f"Your {sub.name} subscription payment is {_plural_days(abs(days_until))} overdue",
                days_until=days_until,
                urgent=True,
                cost=sub.cost,
                currency=sub.currency,
                renewal_date=sub.next_billing,
            ))

    return drafts


async def run_renewal_reminders(db: AsyncSession, user: User, today: Optional[date] = None) -> tuple[int, int]:
    """
    Store new reminder notifications for ``user`` and email the renewal ones.
    Returns ``(created, emailed)``. Nothing is generated while the user has
    email notifications switched off.
    """
    profile = await get_or_create_profile(user, db)
    if not profile.email_notifications:
        logger.info(f"Email notifications disabled for {user.email}; skipping renewal run")
        return 0, 0

    subscriptions = await get_subscriptions_for_user(user.id, db)
    existing = await crud_notification.get_notifications_for_user(db, user.id, limit=500)
    drafts = build_renewal_notifications(subscriptions, profile.reminder_days, existing, today)

    if not drafts:
        return 0, 0

    await crud_notification.create_notifications(db, [
        NotificationCreate(
            user_id=user.id,
            title=draft.title,
            message=draft.message,
            type=draft.type,
            status=draft.status,
            subscription_id=draft.subscription_id,
            days_until=draft.days_until,
        )
        for draft in drafts
    ])

    emailed = 0
    for draft in drafts:
        if draft.type != "renewal":
            continue
        subject, html_body = render_renewal_email(
            draft.subscription_name,
            draft.cost,
            draft.currency,
            draft.days_until,
            draft.renewal_date,
        )
        if await send_email_via_sendgrid(user.email, subject, html_body):
            emailed += 1

    logger.info(f"Renewal run for {user.email}: {len(drafts)} notifications, {emailed} emails")
    return len(drafts), emailed
