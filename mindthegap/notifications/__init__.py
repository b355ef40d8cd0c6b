"""Transient user-facing messages."""

from mindthegap.notifications.center import MessageCenter

__all__ = ["MessageCenter"]
