"""Fetch health monitoring."""

from .monitor import AlertInfo, HealthMonitor, HealthReport, evaluate, is_eligible

__all__ = ["AlertInfo", "HealthMonitor", "HealthReport", "evaluate", "is_eligible"]
