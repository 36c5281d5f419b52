"""scene_emulator.live.scene_source

Live scene provider: fetches raw frame bytes over HTTP(S) with ``requests``.

The URL comes either from the constructor or, on every fetch, from an
environment variable (default ``VENDOR_QEMU_CAMERA_URL``), so a running
emulator can be pointed at a live feed (or back to the procedural scene)
without a restart.

The payload is copied verbatim into the scene buffer by the caller; no
decoding or validation happens here.

Failure policy
--------------
Fetch failures (connection errors, timeouts, non-2xx responses) never raise
into the frame pipeline. They are logged at WARNING, kept in ``last_error``,
and the fetch yields ``b""`` so the scene stays unchanged for that frame.
"""

from __future__ import annotations

import logging
import os
from typing import Optional, Protocol, runtime_checkable

import requests

logger = logging.getLogger(__name__)

DEFAULT_URL_ENV = "VENDOR_QEMU_CAMERA_URL"


@runtime_checkable
class SceneProvider(Protocol):
    """External source of raw scene bytes, polled once per frame."""

    def is_configured(self) -> bool:
        ...

    def fetch(self) -> bytes:
        ...


class LiveSceneSource:
    """HTTP scene provider backed by one long-lived ``requests.Session``.

    Parameters
    ----------
    url : str, optional
        Fixed source URL. When *None* the URL is read from ``env_key`` on
        every call.
    env_key : str
        Environment variable holding the URL.
    timeout : float, optional
        Request timeout in seconds. *None* blocks until the server answers.
    session : requests.Session, optional
        Session to reuse. One is created (and owned) when omitted.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        env_key: str = DEFAULT_URL_ENV,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._url = url
        self.env_key = env_key
        self.timeout = timeout
        self._owns_session = session is None
        self.session: Optional[requests.Session] = session if session is not None else requests.Session()
        self.last_error: Optional[Exception] = None

    @property
    def url(self) -> Optional[str]:
        if self._url:
            return self._url
        return os.environ.get(self.env_key) or None

    def is_configured(self) -> bool:
        return bool(self.url)

    def fetch(self) -> bytes:
        """GET the configured URL and return the body (``b""`` on failure)."""
        url = self.url
        if not url:
            return b""
        if self.session is None:
            raise RuntimeError("LiveSceneSource is closed")

        logger.debug("Fetching live scene from %s", url)
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            self.last_error = exc
            logger.warning("Live scene fetch from %s failed: %s", url, exc)
            return b""

        self.last_error = None
        return response.content

    def close(self) -> None:
        if self.session is not None and self._owns_session:
            self.session.close()
        self.session = None

    def __enter__(self) -> "LiveSceneSource":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
