"""HTML bodies for alert emails."""

from datetime import datetime, timezone
from html import escape
from typing import Iterable, Tuple

DISPLAY_FORMAT = "%d/%m/%Y %H:%M:%S UTC"


def format_timestamp(value: datetime) -> str:
    """Render a timestamp for an email body."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime(DISPLAY_FORMAT)


def render_health_alert(
    alert_lines: Iterable[Tuple[str, str]],
    last_fetch_info: str,
    recent_articles: int,
    sent_at: datetime,
) -> str:
    """Health alert: fired conditions plus a snapshot of the system."""
    items = "\n\n".join(f"• {escape(message)}\n  {escape(details)}" for message, details in alert_lines)
    return f"""
      <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
        <h1 style="color: #dc2626;">⚠️ Amaran Sistem MalaiNaadu</h1>

        <p style="font-size: 16px;">Sistem pengambilan berita menghadapi masalah:</p>

        <div style="background: #fef2f2; border-left: 4px solid #dc2626; padding: 16px; margin: 20px 0;">
          <pre style="white-space: pre-wrap; font-family: inherit; margin: 0;">{items}</pre>
        </div>

        <h3 style="margin-top: 24px;">Status Sistem:</h3>
        <ul style="line-height: 1.8;">
          <li><strong>Fetch terakhir:</strong> {escape(last_fetch_info)}</li>
          <li><strong>Artikel (1 jam):</strong> {recent_articles}</li>
          <li><strong>Masa amaran:</strong> {format_timestamp(sent_at)}</li>
        </ul>

        <p style="margin-top: 24px; color: #6b7280; font-size: 14px;">
          Sila periksa sistem segera di panel admin.
        </p>

        <hr style="margin-top: 32px; border: none; border-top: 1px solid #e5e7eb;">
        <p style="color: #9ca3af; font-size: 12px;">
          Amaran automatik dari MalaiNaadu<br>
          Untuk berhenti menerima amaran, sila kemas kini tetapan di panel admin.
        </p>
      </div>
    """


def render_publish_failure(
    title: str,
    error: str,
    article_url: str,
    admin_url: str,
    sent_at: datetime,
) -> str:
    """Facebook publish failure notice."""
    return f"""
      <h2>Facebook Posting Failed</h2>
      <p><strong>Article:</strong> {escape(title)}</p>
      <p><strong>Error:</strong> {escape(error)}</p>
      <p><strong>Article URL:</strong> <a href="{escape(article_url)}">{escape(article_url)}</a></p>
      <p><strong>Time:</strong> {format_timestamp(sent_at)}</p>
      <hr>
      <p>You can retry posting from the <a href="{escape(admin_url)}">Admin Panel</a>.</p>
    """
