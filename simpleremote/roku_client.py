"""Small HTTP client for the device's External Control Protocol endpoints."""

import urllib.parse
from typing import Optional

import requests

from . import config
from .logging_config import log
from .models import DeviceInfoResponse


def normalize_location(value: str, default_port: Optional[int] = None) -> str:
    """Return `http://host:port/` for a bare host, `host:port` or URL input."""
    raw = str(value or "").strip()
    if not raw:
        raise ValueError("device location is empty")
    if "://" not in raw:
        raw = f"http://{raw}"
    parsed = urllib.parse.urlsplit(raw)
    if not parsed.hostname:
        raise ValueError(f"device location has no host: {value!r}")
    port = parsed.port or int(default_port or config.ECP_PORT)
    host = parsed.hostname
    if ":" in host:
        host = f"[{host}]"
    return urllib.parse.urlunsplit((parsed.scheme or "http", f"{host}:{port}", "/", "", ""))


class RokuApiClient:
    """Thin wrapper around `requests` with an explicit target per call."""

    def __init__(self, session: Optional[requests.Session] = None) -> None:
        self.session = session or requests.Session()

    def _get(self, location: str, path: str, timeout: float) -> requests.Response:
        """Execute GET request to a path relative to the device location."""
        url = f"{str(location).rstrip('/')}/{path.lstrip('/')}"
        return self.session.get(url, timeout=timeout)

    def get_device_info(self, location: str, timeout: Optional[float] = None) -> DeviceInfoResponse:
        """Query `query/device-info` on the device at `location`."""
        effective = float(timeout if timeout is not None else config.DEVICE_INFO_TIMEOUT_S)
        log.debug(f"device-info request -> {location} (timeout={effective}s)")
        resp = self._get(location, "query/device-info", timeout=effective)
        resp.raise_for_status()
        return DeviceInfoResponse.from_xml(resp.content, location=location)

    def close(self) -> None:
        self.session.close()
