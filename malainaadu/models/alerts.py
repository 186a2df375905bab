"""Email alert subscriptions and the alert audit log."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .base import DBModel


class EmailAlertSubscription(DBModel):
    """Per-admin alert opt-in."""

    user_id: str = Field(..., description="Admin user (one row per user)")
    email: str = Field(..., description="Recipient address")
    new_articles: bool = Field(False)
    processing_errors: bool = Field(True)
    last_alert_sent: Optional[datetime] = Field(None)
    alert_cooldown_minutes: Optional[int] = Field(60, ge=0)


class AlertLog(DBModel):
    """A sent health alert."""

    alert_type: str = Field(..., description="Comma-joined alert types")
    message: str
    recipients: List[str] = Field(default_factory=list)
