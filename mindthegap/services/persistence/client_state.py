"""
Client Environment

The persistence adapters need a handful of browser-side surfaces: the
current URL and its query parameters, cookies, a durable key/value store
and the clipboard. They get them through this interface so that the same
adapters run inside Streamlit, in tests and headless.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from email.utils import format_datetime
from typing import Optional
from urllib.parse import parse_qsl, quote, urlsplit

from mindthegap.services.persistence.sharing import URI_COMPONENT_SAFE, strip_query_param


def build_cookie_header(
    name: str,
    value: str,
    max_age_days: int = 30,
    now: Optional[datetime] = None,
) -> str:
    """
    Cookie string for the session pointer.

    >>> build_cookie_header("k", "a b", 30, datetime(2026, 1, 1, tzinfo=timezone.utc))
    'k=a%20b; expires=Sat, 31 Jan 2026 00:00:00 GMT; path=/; SameSite=Lax'
    """
    now = now or datetime.now(timezone.utc)
    expires = format_datetime(now + timedelta(days=max_age_days), usegmt=True)
    return (
        f"{name}={quote(value, safe=URI_COMPONENT_SAFE)}; "
        f"expires={expires}; path=/; SameSite=Lax"
    )


class ClientEnvironment(ABC):
    """Browser-side state the persistence adapters read and write."""

    @abstractmethod
    def current_url(self) -> str:
        """The page URL as the user sees it (share links are built from it)."""
        pass

    @abstractmethod
    def get_query_param(self, name: str) -> Optional[str]:
        pass

    @abstractmethod
    def remove_query_param(self, name: str) -> None:
        """Strip a parameter from the visible URL."""
        pass

    @abstractmethod
    def read_cookie(self, name: str) -> Optional[str]:
        pass

    @abstractmethod
    def write_cookie(self, name: str, value: str, max_age_days: int) -> None:
        pass

    @abstractmethod
    def read_storage(self, key: str) -> Optional[str]:
        """Read from durable client storage."""
        pass

    @abstractmethod
    def write_storage(self, key: str, value: str) -> None:
        """Write to durable client storage. May raise on I/O failure."""
        pass

    @abstractmethod
    def copy_to_clipboard(self, text: str) -> bool:
        """Copy text; returns False or raises when no clipboard is available."""
        pass


class InMemoryClientEnvironment(ClientEnvironment):
    """
    Client environment held entirely in memory.

    Used by tests and by headless runs. Cookie writes are recorded as the
    header strings a browser would receive.
    """

    def __init__(
        self,
        url: str = "http://localhost:8501/",
        cookies: Optional[dict[str, str]] = None,
        storage: Optional[dict[str, str]] = None,
        clipboard_available: bool = True,
    ):
        self.url = url
        self.cookies: dict[str, str] = dict(cookies or {})
        self.storage: dict[str, str] = dict(storage or {})
        self.clipboard_available = clipboard_available
        self.clipboard: list[str] = []
        self.cookie_headers: list[str] = []

    def current_url(self) -> str:
        return self.url

    def get_query_param(self, name: str) -> Optional[str]:
        for key, value in parse_qsl(urlsplit(self.url).query, keep_blank_values=True):
            if key == name:
                return value
        return None

    def remove_query_param(self, name: str) -> None:
        self.url = strip_query_param(self.url, name)

    def read_cookie(self, name: str) -> Optional[str]:
        return self.cookies.get(name)

    def write_cookie(self, name: str, value: str, max_age_days: int) -> None:
        self.cookies[name] = value
        self.cookie_headers.append(build_cookie_header(name, value, max_age_days))

    def read_storage(self, key: str) -> Optional[str]:
        return self.storage.get(key)

    def write_storage(self, key: str, value: str) -> None:
        self.storage[key] = value

    def copy_to_clipboard(self, text: str) -> bool:
        if not self.clipboard_available:
            raise RuntimeError("Clipboard is not available")
        self.clipboard.append(text)
        return True
