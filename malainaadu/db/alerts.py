"""Alert subscriptions and alert audit log."""

from datetime import datetime
from typing import List

from psycopg import Connection

from ..models import EmailAlertSubscription


class AlertManager:
    """Read subscribers and record sent alerts."""

    def get_error_subscribers(self, conn: Connection) -> List[EmailAlertSubscription]:
        """Subscribers opted into processing-error alerts."""
        with conn.cursor() as cur:
            cur.execute(
                "SELECT * FROM email_alerts WHERE processing_errors = TRUE ORDER BY id"
            )
            return [EmailAlertSubscription(**row) for row in cur.fetchall()]

    def mark_alert_sent(self, conn: Connection, subscription_id: int, sent_at: datetime) -> None:
        """Start a subscriber's cooldown window."""
        with conn.cursor() as cur:
            cur.execute(
                "UPDATE email_alerts SET last_alert_sent = %s WHERE id = %s",
                (sent_at, subscription_id),
            )
        conn.commit()

    def log_alert(
        self,
        conn: Connection,
        alert_type: str,
        message: str,
        recipients: List[str],
    ) -> int:
        """Append an alert log row."""
        with conn.cursor() as cur:
            cur.execute(
                """
                INSERT INTO alert_logs (alert_type, message, recipients)
                VALUES (%s, %s, %s)
                RETURNING id
                """,
                (alert_type, message, recipients),
            )
            log_id = cur.fetchone()["id"]
        conn.commit()
        return log_id
