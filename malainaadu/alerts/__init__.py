"""Alert email delivery."""

from .mailer import ResendMailer
from .templates import render_health_alert, render_publish_failure

__all__ = ["ResendMailer", "render_health_alert", "render_publish_failure"]
