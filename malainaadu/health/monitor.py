"""Fetch health check with cooldown-limited email alerts."""

import logging
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from psycopg import Connection
from pydantic import BaseModel, Field

from ..alerts import ResendMailer, render_health_alert
from ..alerts.templates import format_timestamp
from ..config import HealthConfig
from ..db import AlertManager, ArticleStorage, FetchLogManager
from ..errors import ConfigurationError
from ..models import EmailAlertSubscription, FetchLog
from ..utils import utcnow

logger = logging.getLogger(__name__)

ALERT_SUBJECT = "⚠️ Amaran Sistem MalaiNaadu - Masalah Pengambilan Berita"


class AlertInfo(BaseModel):
    """One fired health condition."""

    type: str = Field(..., description="fetch_failure, no_recent_fetch or no_articles")
    message: str
    details: str


class HealthReport(BaseModel):
    """Result of a health check."""

    status: str = Field(..., description="healthy, unhealthy or alert_sent")
    message: Optional[str] = None
    alerts: List[AlertInfo] = Field(default_factory=list)
    recipients: List[str] = Field(default_factory=list)

    def to_response(self) -> dict:
        """Response body with counts rather than lists."""
        body = {"status": self.status}
        if self.status != "healthy":
            body["alerts"] = len(self.alerts)
        if self.status == "alert_sent":
            body["recipients"] = len(self.recipients)
        if self.message:
            body["message"] = self.message
        return body


def _last_activity(fetch_log: FetchLog) -> datetime:
    return fetch_log.completed_at or fetch_log.started_at


def evaluate(
    latest: Optional[FetchLog],
    recent_articles: int,
    now: datetime,
    stale_after: timedelta,
) -> List[AlertInfo]:
    """Conditions fired by the latest run and the recent article count."""
    alerts = []

    if latest is None:
        alerts.append(
            AlertInfo(
                type="no_recent_fetch",
                message="Tiada rekod pengambilan RSS",
                details="Sistem pengambilan mungkin tidak dikonfigurasi",
            )
        )
    else:
        if latest.status == "failed":
            alerts.append(
                AlertInfo(
                    type="fetch_failure",
                    message="Pengambilan RSS gagal",
                    details=latest.error_message or "Tiada maklumat ralat",
                )
            )

        last_time = _last_activity(latest)
        # A run still marked running goes stale from its start time
        if last_time < now - stale_after:
            alerts.append(
                AlertInfo(
                    type="no_recent_fetch",
                    message=f"Tiada pengambilan RSS dalam {int(stale_after.total_seconds() // 60)} minit",
                    details=f"Fetch terakhir: {format_timestamp(last_time)}",
                )
            )

    if recent_articles == 0:
        alerts.append(
            AlertInfo(
                type="no_articles",
                message="Tiada artikel baharu dalam 1 jam",
                details="Artikel terakhir: Tiada dalam tempoh 1 jam",
            )
        )

    return alerts


def is_eligible(subscription: EmailAlertSubscription, now: datetime, default_cooldown: int = 60) -> bool:
    """A subscriber may be alerted once strictly more than the cooldown has passed."""
    if subscription.last_alert_sent is None:
        return True
    cooldown = timedelta(minutes=subscription.alert_cooldown_minutes or default_cooldown)
    return now - subscription.last_alert_sent > cooldown


class HealthMonitor:
    """Inspect the latest fetch run and recent article volume."""

    def __init__(
        self,
        conn: Connection,
        mailer: Optional[ResendMailer],
        settings: Optional[HealthConfig] = None,
        fetch_logs: Optional[FetchLogManager] = None,
        articles: Optional[ArticleStorage] = None,
        alerts: Optional[AlertManager] = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.conn = conn
        self.mailer = mailer
        self.settings = settings or HealthConfig()
        self.fetch_logs = fetch_logs or FetchLogManager()
        self.articles = articles or ArticleStorage()
        self.alerts = alerts or AlertManager()
        self.clock = clock

    def check(self, now: Optional[datetime] = None) -> HealthReport:
        """
        Run one health check.

        Raises:
            ConfigurationError: when no email provider is configured
            EmailError: when the alert email cannot be sent
        """
        if self.mailer is None:
            raise ConfigurationError("Email service not configured", variable="RESEND_API_KEY")

        now = now or self.clock()
        logger.info("Starting fetch health check")

        latest = self.fetch_logs.get_latest(self.conn)
        window_start = now - timedelta(minutes=self.settings.article_window_minutes)
        recent_articles = self.articles.count_created_since(self.conn, window_start)

        alerts = evaluate(
            latest,
            recent_articles,
            now,
            stale_after=timedelta(minutes=self.settings.stale_after_minutes),
        )
        logger.info("Found %d alert(s)", len(alerts))

        if not alerts:
            return HealthReport(status="healthy", message="No issues detected")

        subscribers = self.alerts.get_error_subscribers(self.conn)
        if not subscribers:
            logger.info("No subscribers configured for alerts")
            return HealthReport(
                status="unhealthy",
                alerts=alerts,
                message="Issues detected but no subscribers configured",
            )

        eligible = [s for s in subscribers if is_eligible(s, now, self.settings.default_cooldown_minutes)]
        if not eligible:
            logger.info("All subscribers are in cooldown period")
            return HealthReport(
                status="unhealthy",
                alerts=alerts,
                message="Issues detected but all subscribers in cooldown",
            )

        recipients = [s.email for s in eligible]
        last_fetch_info = (
            f"{format_timestamp(_last_activity(latest))} ({latest.status})" if latest else "Tiada rekod"
        )
        html = render_health_alert(
            [(a.message, a.details) for a in alerts],
            last_fetch_info=last_fetch_info,
            recent_articles=recent_articles,
            sent_at=now,
        )

        logger.info("Sending alert email to %d recipient(s)", len(recipients))
        self.mailer.send(to=recipients, subject=ALERT_SUBJECT, html=html)

        for subscription in eligible:
            self.alerts.mark_alert_sent(self.conn, subscription.id, now)

        self.alerts.log_alert(
            self.conn,
            alert_type=", ".join(a.type for a in alerts),
            message="\n\n".join(f"• {a.message}\n  {a.details}" for a in alerts),
            recipients=recipients,
        )

        return HealthReport(status="alert_sent", alerts=alerts, recipients=recipients)
