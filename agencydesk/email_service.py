"""
Email Service using Resend
Provides email functionality using MJML templates for responsive design
"""

import logging
from collections.abc import Mapping
from datetime import date
from typing import Optional, Union

import resend
from mjml import mjml_to_html

from .config import EMAIL_FROM_ADDRESS, RESEND_API_KEY
from .email_templates import asset_expiry_reminder_template

logger = logging.getLogger(__name__)

resend.api_key = RESEND_API_KEY


def compile_mjml_to_html(mjml_content: str) -> str:
    """Compile MJML template to production-ready HTML"""
    try:
        result = mjml_to_html(mjml_content)
        # mjml >= 0.12 returns a ParseResult tuple, older releases a mapping
        if isinstance(result, Mapping):
            html, errors = result.get("html", ""), result.get("errors")
        else:
            html, errors = result.html, result.errors
        if errors:
            logger.warning(f"MJML compilation warnings: {errors}")
        return html
    except Exception as e:
        logger.error(f"MJML compilation error: {e}")
        raise Exception(f"Failed to compile MJML template: {str(e)}") from e


async def send_email(
    to: Union[str, list[str]],
    subject: str,
    mjml_content: str,
    from_address: Optional[str] = None,
) -> dict:
    """
    Send an email through Resend

    Args:
        to: Recipient email(s)
        subject: Email subject line
        mjml_content: MJML template content (will be compiled to HTML)
        from_address: Optional custom from address

    Returns:
        Send response dict
    """
    if not RESEND_API_KEY:
        logger.error("❌ No email service configured - RESEND_API_KEY missing")
        raise Exception("Email service not configured")

    html_content = compile_mjml_to_html(mjml_content)
    recipients = [to] if isinstance(to, str) else to

    try:
        logger.info(f"📧 Sending email via Resend to: {recipients}")
        response = resend.Emails.send(
            {
                "from": from_address or EMAIL_FROM_ADDRESS,
                "to": recipients,
                "subject": subject,
                "html": html_content,
            }
        )
        logger.info(f"✅ Email sent successfully via Resend: {response}")
        return response
    except Exception as e:
        logger.error(f"❌ Email send error to {recipients}: {e}")
        raise Exception(f"Failed to send email: {str(e)}") from e


def asset_expiry_subject(asset_type: str, asset_name: str, reminder_type: str) -> str:
    label = "Warranty" if asset_type == "Product" else "Service"
    if reminder_type == "DAYS_30":
        return f"{label} expiring in 30 days - {asset_name}"
    if reminder_type == "DAYS_15":
        return f"{label} expiring in 15 days - {asset_name}"
    if reminder_type == "EXPIRED":
        return f"{label} expired - {asset_name}"
    return f"{label} expiring soon - {asset_name}"


async def send_asset_expiry_reminder(
    to: str,
    user_name: str,
    asset_name: str,
    asset_type: str,
    expiry_date: date,
    reminder_type: str,
    days_left: int,
) -> dict:
    """Warranty / service expiry reminder for an IT asset"""
    mjml_content = asset_expiry_reminder_template(
        user_name=user_name,
        asset_name=asset_name,
        asset_type=asset_type,
        expiry_date=expiry_date,
        days_left=days_left,
        reminder_type=reminder_type,
    )
    return await send_email(
        to=to,
        subject=asset_expiry_subject(asset_type, asset_name, reminder_type),
        mjml_content=mjml_content,
    )
