"""
Outbound transactional email.

SendGrid's client is blocking, so every send runs in a thread pool. Templates
are plain ``str.format`` HTML; each ``render_*`` helper returns
``(subject, html_body)``.
"""
import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import Tuple

import sendgrid
from sendgrid.helpers.mail import Mail

from subslayer.core.config import settings

logger = logging.getLogger(__name__)


def is_email_configured() -> bool:
    return bool(settings.SENDGRID_API_KEY)


async def send_email_via_sendgrid(to_email: str, subject: str, body: str) -> bool:
    """
    Send an HTML email through SendGrid. Returns False instead of raising so
    that auth hooks never fail a registration because of mail delivery.
    """
    if not is_email_configured():
        logger.warning(f"SendGrid API key not configured. Skipping email to {to_email}")
        return False

    try:
        logger.info(f"Attempting to send email to {to_email}")

        if not to_email or "@" not in to_email:
            logger.error(f"Invalid email format: {to_email}")
            return False

        message = Mail(
            from_email=(settings.EMAIL_FROM, settings.EMAIL_FROM_NAME),
            to_emails=to_email,
            subject=subject,
            html_content=body
        )
        message.reply_to = settings.EMAIL_FROM

        sg = sendgrid.SendGridAPIClient(api_key=settings.SENDGRID_API_KEY)

        loop = asyncio.get_running_loop()
        with ThreadPoolExecutor() as executor:
            response = await loop.run_in_executor(executor, sg.send, message)

        if response.status_code == 202:
            logger.info(f"✅ Email sent successfully to {to_email}")
            return True

        logger.error(f"❌ Failed to send email. Status code: {response.status_code}")
        logger.error(f"Response body: {response.body}")
        return False

    except Exception as e:
        logger.error(f"❌ Exception while sending email to {to_email}: {str(e)}")
        return False


_LAYOUT = """
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title}</title>
</head>
<body style="margin: 0; padding: 0; font-family: Arial, sans-serif; background-color: #f4f4f4;">
    <div style="max-width: 600px; margin: 0 auto; background-color: #ffffff; padding: 20px;">
        <div style="text-align: center; padding: 20px 0; border-bottom: 1px solid #eee;">
            <h1 style="color: #8B5CF6; margin: 0; font-size: 24px;">SubSlayer</h1>
        </div>
        <div style="padding: 30px 20px;">
            {content}
        </div>
        <div style="text-align: center; padding: 20px; border-top: 1px solid #eee; color: #999; font-size: 12px;">
            <p style="margin: 0;">© {year} SubSlayer. All rights reserved.</p>
        </div>
    </div>
</body>
</html>
"""

_BUTTON = (
    '<div style="text-align: center; margin: 30px 0;">'
    '<a href="{link}" style="background-color: #8B5CF6; color: #ffffff; padding: 15px 30px; '
    'text-decoration: none; border-radius: 5px; display: inline-block; font-weight: bold;">{label}</a>'
    '</div>'
)


def _wrap(title: str, content: str) -> str:
    return _LAYOUT.format(title=title, content=content, year=date.today().year)


def render_welcome_email(user_name: str) -> Tuple[str, str]:
    content = (
        f'<h2 style="color: #333;">Welcome to SubSlayer, {user_name}!</h2>'
        '<p style="color: #666; line-height: 1.6;">Track every subscription in one place, '
        'see what you spend each month and get reminded before anything renews.</p>'
        + _BUTTON.format(link=settings.FRONTEND_URL, label="Open your dashboard")
    )
    return "🎉 Welcome to SubSlayer", _wrap("Welcome - SubSlayer", content)


def render_verification_email(user_name: str, verify_link: str) -> Tuple[str, str]:
    content = (
        f'<p style="color: #666;">Hello <strong>{user_name}</strong>!</p>'
        '<p style="color: #666; line-height: 1.6;">Please confirm your email address to finish '
        'setting up your account.</p>'
        + _BUTTON.format(link=verify_link, label="Verify Email Address")
        + f'<p style="color: #666; word-break: break-all; font-family: monospace;">{verify_link}</p>'
    )
    return "🔐 Verify your SubSlayer account", _wrap("Verify Email - SubSlayer", content)


def render_password_reset_email(user_name: str, reset_link: str) -> Tuple[str, str]:
    content = (
        f'<p style="color: #666;">Hello <strong>{user_name}</strong>!</p>'
        '<p style="color: #666; line-height: 1.6;">We received a request to reset your password. '
        'If you did not make it, ignore this email.</p>'
        + _BUTTON.format(link=reset_link, label="Reset Password")
    )
    return "🔑 Reset your SubSlayer password", _wrap("Reset Password - SubSlayer", content)


def render_renewal_email(
    subscription_name: str,
    cost: float,
    currency: str,
    days_until: int,
    renewal_date: date,
) -> Tuple[str, str]:
    when = "today" if days_until == 0 else f"in {days_until} day{'' if days_until == 1 else 's'}"
    content = (
        f'<h2 style="color: #333;">{subscription_name} renews {when}</h2>'
        f'<p style="color: #666; line-height: 1.6;">Your {subscription_name} subscription will be '
        f'charged <strong>{cost:.2f} {currency}</strong> on {renewal_date.isoformat()}.</p>'
        '<p style="color: #666; line-height: 1.6;">Still using it? If not, now is the time to cancel.</p>'
        + _BUTTON.format(link=f"{settings.FRONTEND_URL}/subscriptions", label="Manage subscriptions")
    )
    return f"⏰ {subscription_name} renews {when}", _wrap("Renewal Reminder - SubSlayer", content)
