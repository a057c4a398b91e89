"""Notification listener harness (Flask) for receiving HiPay callbacks."""

from hipay_professional.listener.app import (
    NotificationEvent,
    NotificationQueue,
    create_app,
    run_listener,
)

__all__ = ["NotificationEvent", "NotificationQueue", "create_app", "run_listener"]
