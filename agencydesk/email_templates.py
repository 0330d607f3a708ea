"""
MJML Email Templates
All email templates using MJML for responsive, cross-client compatibility
"""

import html
from datetime import date
from typing import Optional

from .config import FRONTEND_URL

# App theme colors - Indigo/Slate color scheme
THEME = {
    "primary": "#4f46e5",
    "primary_dark": "#4338ca",
    "primary_light": "#e0e7ff",
    "background": "#f8fafc",
    "card_bg": "#ffffff",
    "text_primary": "#0f172a",
    "text_secondary": "#334155",
    "text_muted": "#64748b",
    "border": "#e2e8f0",
    "success": "#10b981",
    "warning": "#f59e0b",
    "danger": "#ef4444",
}

APP_NAME = "AgencyDesk"


def get_base_template(
    title: str,
    preview_text: str,
    content_sections: str,
    cta_url: Optional[str] = None,
    cta_label: Optional[str] = None,
) -> str:
    """Base MJML template wrapper for all emails"""

    cta_section = ""
    if cta_url and cta_label:
        cta_section = f"""
        <mj-section padding="20px 0">
          <mj-column>
            <mj-button
              href="{cta_url}"
              background-color="{THEME['primary']}"
              color="#ffffff"
              font-weight="600"
              border-radius="8px"
              padding="18px 40px"
              font-size="16px">
              {cta_label}
            </mj-button>
          </mj-column>
        </mj-section>
        """

    return f"""
    <mjml>
      <mj-head>
        <mj-title>{title}</mj-title>
        <mj-preview>{preview_text}</mj-preview>
        <mj-attributes>
          <mj-all font-family="-apple-system, BlinkMacSystemFont, 'Segoe UI', 'Helvetica Neue', Arial, sans-serif" />
          <mj-text font-size="16px" line-height="1.6" color="{THEME['text_secondary']}" />
        </mj-attributes>
      </mj-head>
      <mj-body background-color="{THEME['background']}">
        <!-- Header -->
        <mj-section background-color="#ffffff" padding="32px 20px">
          <mj-column>
            <mj-text font-size="22px" font-weight="700" color="{THEME['primary']}" padding="0">
              {APP_NAME}
            </mj-text>
          </mj-column>
        </mj-section>

        <mj-section background-color="#ffffff" padding="0 40px 40px 40px">
          <mj-column>
            <mj-divider border-color="{THEME['border']}" border-width="1px" padding="0 0 32px 0" />
          </mj-column>
        </mj-section>

        <!-- Main Content -->
        <mj-section background-color="#ffffff" padding="0 40px 48px 40px">
          <mj-column>
            <mj-text font-size="24px" font-weight="600" color="{THEME['text_primary']}" line-height="1.3" padding="0 0 16px 0">
              {title}
            </mj-text>

            {content_sections}
          </mj-column>
        </mj-section>

        {cta_section}

        <!-- Footer -->
        <mj-section padding="32px 20px">
          <mj-column>
            <mj-text align="center" font-size="13px" color="#94a3b8" padding="0">
              This is an automated reminder from {APP_NAME}.
            </mj-text>
          </mj-column>
        </mj-section>
      </mj-body>
    </mjml>
    """


def asset_expiry_reminder_template(
    user_name: str,
    asset_name: str,
    asset_type: str,
    expiry_date: date,
    days_left: int,
    reminder_type: str,
) -> str:
    """Warranty / service expiry reminder for an IT asset"""
    period = "warranty" if asset_type == "Product" else "service period"
    expiry_str = expiry_date.strftime("%B %d, %Y")
    # Names are user input
    asset_name = html.escape(asset_name)
    user_name = html.escape(user_name)

    if reminder_type == "EXPIRED":
        title = f"{period.capitalize()} expired"
        accent = THEME["danger"]
        headline = f"The {period} for <strong>{asset_name}</strong> expired on {expiry_str}."
        action = "Renew it as soon as possible to avoid any interruption."
    else:
        title = f"{period.capitalize()} expiring soon"
        accent = THEME["warning"]
        when = "today" if days_left == 0 else f"in {days_left} day{'s' if days_left != 1 else ''}"
        headline = f"The {period} for <strong>{asset_name}</strong> ends {when}, on {expiry_str}."
        action = "Plan the renewal ahead of time so nothing lapses."

    content = f"""
    <mj-text>
      Hi {user_name},
    </mj-text>

    <mj-text>
      {headline}
    </mj-text>

    <mj-text padding="8px 0 24px 0">
      <span style="color: {THEME['text_muted']};">Asset:</span> {asset_name}<br/>
      <span style="color: {THEME['text_muted']};">Type:</span> {asset_type}<br/>
      <span style="color: {THEME['text_muted']};">Expiry date:</span>
      <span style="color: {accent}; font-weight: 600;">{expiry_str}</span>
    </mj-text>

    <mj-text>
      {action}
    </mj-text>
    """

    return get_base_template(
        title=title,
        preview_text=f"{asset_name}: {title.lower()}",
        content_sections=content,
        cta_url=f"{FRONTEND_URL}/it-management/assets",
        cta_label="View Assets",
    )
