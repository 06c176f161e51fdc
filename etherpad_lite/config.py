from __future__ import annotations

"""Immutable client configuration, built from a URL or from the environment."""

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional, Union
from urllib.parse import urlsplit

from etherpad_lite.errors import InvalidArgument

API_VERSION = "1"
DEFAULT_URL = "http://localhost:9001/api"
DEFAULT_TIMEOUT = 10.0
HTTPS_PORT = 443

_DEFAULT_PORTS = {"http": 80, "https": HTTPS_PORT}

ApiKey = Union[str, Path]


def read_api_key(source: ApiKey) -> str:
    """Return the API key, reading it from a file when ``source`` is a path."""

    if isinstance(source, Path):
        try:
            key = source.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise InvalidArgument(f"unable to read API key file {source}: {exc}") from exc
    else:
        key = source
    if not isinstance(key, str) or not key.strip():
        raise InvalidArgument("an API key is required")
    return key


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Connection settings for one Etherpad Lite instance.

    Parameters
    ----------
    api_key:
        Key sent as the ``apikey`` parameter on every request.
    host, port, scheme:
        Location of the server. ``port`` alone decides whether TLS is used.
    base_path:
        Path prefix of the API (``/api`` for a stock install).
    api_version:
        Version segment inserted between ``base_path`` and the method name.
    ca_path:
        Trust-anchor directory for this client. ``None`` defers to the
        process-wide default store.
    timeout:
        Request timeout in seconds, ``None`` to block indefinitely.
    """

    api_key: str
    host: str
    port: int
    scheme: str = "http"
    base_path: str = ""
    api_version: str = API_VERSION
    ca_path: Optional[str] = None
    timeout: Optional[float] = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        if not isinstance(self.api_key, str) or not self.api_key:
            raise InvalidArgument("an API key is required")
        if not self.host:
            raise InvalidArgument("a host is required")
        if not isinstance(self.port, int) or isinstance(self.port, bool) or not 0 < self.port < 65536:
            raise InvalidArgument(f"{self.port!r} is not a valid port")

    @classmethod
    def from_url(
        cls,
        api_key: ApiKey,
        url: str = DEFAULT_URL,
        *,
        ca_path: Optional[str] = None,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        api_version: str = API_VERSION,
    ) -> "ClientConfig":
        """Parse ``url`` (which should include the scheme) into a config."""

        key = read_api_key(api_key)
        try:
            parts = urlsplit(url)
            port = parts.port
        except (TypeError, ValueError) as exc:
            raise InvalidArgument(f"{url} is not a valid url") from exc
        scheme = (parts.scheme or "").lower()
        if port is None:
            port = _DEFAULT_PORTS.get(scheme)
        if not parts.hostname or port is None:
            raise InvalidArgument(f"{url} is not a valid url")
        return cls(
            api_key=key,
            host=parts.hostname,
            port=port,
            scheme=scheme,
            base_path=parts.path,
            api_version=str(api_version),
            ca_path=os.fspath(ca_path) if ca_path is not None else None,
            timeout=timeout,
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ClientConfig":
        """Build a config from ``ETHERPAD_*`` environment variables."""

        env = os.environ if environ is None else environ
        key: Optional[ApiKey] = env.get("ETHERPAD_API_KEY") or None
        if key is None and env.get("ETHERPAD_API_KEY_FILE"):
            key = Path(env["ETHERPAD_API_KEY_FILE"])
        if key is None:
            raise InvalidArgument("set ETHERPAD_API_KEY or ETHERPAD_API_KEY_FILE")
        timeout_raw = (env.get("ETHERPAD_TIMEOUT") or "").strip()
        try:
            timeout = float(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT
        except ValueError as exc:
            raise InvalidArgument(f"ETHERPAD_TIMEOUT must be a number, got {timeout_raw!r}") from exc
        return cls.from_url(
            key,
            env.get("ETHERPAD_URL") or DEFAULT_URL,
            ca_path=env.get("ETHERPAD_CA_PATH") or None,
            timeout=timeout,
        )

    @property
    def secure(self) -> bool:
        # Port alone decides; https on a non-standard port is treated as plain HTTP.
        return self.port == HTTPS_PORT

    @property
    def url(self) -> str:
        scheme = "https" if self.secure else "http"
        host = f"[{self.host}]" if ":" in self.host else self.host
        netloc = host if self.port == _DEFAULT_PORTS[scheme] else f"{host}:{self.port}"
        return f"{scheme}://{netloc}{self.base_path}"

    def with_ca_path(self, ca_path: Optional[str]) -> "ClientConfig":
        return replace(self, ca_path=ca_path)


__all__ = [
    "API_VERSION",
    "ClientConfig",
    "DEFAULT_TIMEOUT",
    "DEFAULT_URL",
    "HTTPS_PORT",
    "read_api_key",
]
