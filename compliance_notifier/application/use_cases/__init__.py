"""Aggregate application use cases."""

from .notifications import create_notification, send_notification, should_send
from .sweeps import run_notification_cron

__all__ = [
    "create_notification",
    "run_notification_cron",
    "send_notification",
    "should_send",
]
