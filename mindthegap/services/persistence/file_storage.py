"""
File-backed Durable Storage

Local mode keeps each browser's snapshot on the dashboard host, one JSON
file per browser. The browser is identified by a random token kept in a
long-lived cookie: the first visit mints the token and sets the cookie,
later visits find their own file again. Nothing is shared between
browsers.

DESIGN DECISION: the token is the only part of the path that comes from
the client, so it is checked against a fixed hex pattern before use.
"""

import json
import re
import tempfile
import uuid
from pathlib import Path
from typing import Optional, Union

from mindthegap.log import get_logger
from mindthegap.services.persistence.client_state import ClientEnvironment


logger = get_logger(__name__)


BROWSER_TOKEN_PATTERN = re.compile(r"[0-9a-f]{32}")


def mint_browser_token() -> str:
    return uuid.uuid4().hex


def is_browser_token(value: Optional[str]) -> bool:
    return value is not None and BROWSER_TOKEN_PATTERN.fullmatch(value) is not None


class JsonFileStorage:
    """
    Key/value strings in a JSON file.

    Reads of a missing file return None; reads of a corrupt file raise.
    Writes create parent directories and replace the file atomically
    through a uniquely named temporary file. A corrupt file is logged and
    overwritten on the next write.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        data = json.loads(self._path.read_text(encoding="utf-8") or "{}")
        if not isinstance(data, dict):
            raise ValueError(f"Storage file {self._path} does not hold an object")
        return data

    def read(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def write(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except ValueError as e:
            logger.warning("storage_file_corrupt", path=str(self._path), error=str(e))
            data = {}
        data[key] = value

        self._path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=self._path.parent,
            prefix=self._path.name + ".",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            json.dump(data, tmp, ensure_ascii=False)
        Path(tmp.name).replace(self._path)


class BrowserScopedStorage:
    """
    One JsonFileStorage per browser, keyed by a cookie token.

    Args:
        directory: Where the per-browser files live
        cookies: Cookie surface of the current browser session
        cookie_name: Cookie holding the browser token
        max_age_days: Lifetime of that cookie
    """

    def __init__(
        self,
        directory: Union[str, Path],
        cookies: ClientEnvironment,
        cookie_name: str = "mindthegap_browser",
        max_age_days: int = 400,
    ):
        self._directory = Path(directory)
        self._cookies = cookies
        self._cookie_name = cookie_name
        self._max_age_days = max_age_days

    def token(self) -> str:
        """This browser's token, minted and stored in a cookie on first use."""
        token = self._cookies.read_cookie(self._cookie_name)
        if is_browser_token(token):
            return token
        if token is not None:
            logger.warning("browser_token_rejected", cookie=self._cookie_name)
        token = mint_browser_token()
        self._cookies.write_cookie(self._cookie_name, token, self._max_age_days)
        logger.info("browser_token_minted")
        return token

    def storage(self) -> JsonFileStorage:
        return JsonFileStorage(self._directory / f"{self.token()}.json")

    def read(self, key: str) -> Optional[str]:
        return self.storage().read(key)

    def write(self, key: str, value: str) -> None:
        self.storage().write(key, value)
