"""
Message Center

Holds the one transient message the dashboard shows at a time (success,
error or info) and clears it after a timeout.

There is exactly one timer. Showing a new message cancels the previous
timer before starting a new one, and close() cancels whatever is pending,
so a stale timer can never clear a newer message.
"""

import threading
from typing import Callable, Optional

from mindthegap.log import get_logger
from mindthegap.models.dashboard import Message, MessageType


logger = get_logger(__name__)


class MessageCenter:
    """Single-slot auto-dismissing message holder."""

    def __init__(
        self,
        timeout_seconds: float = 3.2,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
    ):
        self._timeout_seconds = timeout_seconds
        self._timer_factory = timer_factory
        self._lock = threading.RLock()
        self._current: Optional[Message] = None
        self._timer: Optional[threading.Timer] = None

    @property
    def current(self) -> Optional[Message]:
        with self._lock:
            return self._current

    def show(self, message_type: MessageType, text: str) -> Message:
        message = Message(type=message_type, text=text)
        with self._lock:
            self._cancel_timer()
            self._current = message
            self._timer = self._timer_factory(self._timeout_seconds, self._expire, args=(message,))
            self._timer.daemon = True
            self._timer.start()
        logger.debug("message_shown", type=message_type.value, text=text)
        return message

    def success(self, text: str) -> Message:
        return self.show(MessageType.SUCCESS, text)

    def error(self, text: str) -> Message:
        return self.show(MessageType.ERROR, text)

    def info(self, text: str) -> Message:
        return self.show(MessageType.INFO, text)

    def dismiss(self) -> None:
        with self._lock:
            self._cancel_timer()
            self._current = None

    def close(self) -> None:
        """Release the pending timer. The current message is kept."""
        with self._lock:
            self._cancel_timer()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _expire(self, message: Message) -> None:
        with self._lock:
            # Only clear the message this timer was started for
            if self._current is message:
                self._current = None
                self._timer = None
