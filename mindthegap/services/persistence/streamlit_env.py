"""
Streamlit Client Environment

Maps the ClientEnvironment surfaces onto what a Streamlit session offers:
- query parameters: st.query_params
- cookies: read from st.context.cookies; written by a small script
  injected into the page (Streamlit has no server-side cookie writer)
- durable storage: one JSON file per browser on the dashboard host,
  selected by a token cookie (see BrowserScopedStorage)
- clipboard: navigator.clipboard via an injected script

Cookie writes made in this run are also kept in session state, because
st.context.cookies only reflects what the browser sent with the request.
"""

import json
from typing import Optional

import streamlit as st
import streamlit.components.v1 as components

from mindthegap.config import AppSettings
from mindthegap.services.persistence.client_state import ClientEnvironment, build_cookie_header
from mindthegap.services.persistence.file_storage import BrowserScopedStorage
from mindthegap.services.persistence.sharing import build_share_link, strip_query_param


_COOKIE_OVERRIDES_KEY = "_mindthegap_cookie_overrides"


class StreamlitClientEnvironment(ClientEnvironment):
    """ClientEnvironment for a running Streamlit session."""

    def __init__(self, settings: AppSettings):
        self._settings = settings
        self._storage = BrowserScopedStorage(
            settings.local_storage_dir,
            cookies=self,
            cookie_name=settings.browser_cookie_name,
            max_age_days=settings.browser_cookie_max_age_days,
        )

    def current_url(self) -> str:
        url = strip_query_param(self._settings.public_url, self._settings.share_param)
        for key in st.query_params.keys():
            url = build_share_link(url, key, st.query_params[key])
        return url

    def get_query_param(self, name: str) -> Optional[str]:
        return st.query_params.get(name)

    def remove_query_param(self, name: str) -> None:
        if name in st.query_params:
            del st.query_params[name]

    def read_cookie(self, name: str) -> Optional[str]:
        overrides = st.session_state.get(_COOKIE_OVERRIDES_KEY, {})
        if name in overrides:
            return overrides[name]
        return st.context.cookies.get(name)

    def write_cookie(self, name: str, value: str, max_age_days: int) -> None:
        st.session_state.setdefault(_COOKIE_OVERRIDES_KEY, {})[name] = value
        header = build_cookie_header(name, value, max_age_days)
        components.html(
            f"<script>window.parent.document.cookie = {json.dumps(header)};</script>",
            height=0,
        )

    def read_storage(self, key: str) -> Optional[str]:
        return self._storage.read(key)

    def write_storage(self, key: str, value: str) -> None:
        self._storage.write(key, value)

    def copy_to_clipboard(self, text: str) -> bool:
        components.html(
            f"<script>window.parent.navigator.clipboard.writeText({json.dumps(text)});</script>",
            height=0,
        )
        return True
