"""Discovery of the CA certificate directory used to verify HTTPS peers.

The probe runs at most once per :class:`TrustStore`. A process-wide
``default_trust_store`` serves every client that is not given its own
``ca_path``; operators can pin it with :func:`set_default_ca_path` or the
``ETHERPAD_CA_PATH`` environment variable.

The probe is lazy: it runs when the first HTTPS client is created, not when
the package is imported, so the "CA certificates not found" warning appears
at that point. Plain HTTP clients never trigger it.
"""
from __future__ import annotations

import os
from threading import Lock
from typing import Callable, Optional, Sequence

from etherpad_lite.utils.log_json import JsonLogger

CA_PATH_ENV = "ETHERPAD_CA_PATH"

CA_PATH_CANDIDATES: tuple[str, ...] = (
    "/etc/ssl/certs",
    "/etc/ssl",
    "/usr/share/ssl",
    "/usr/lib/ssl",
    "/System/Library/OpenSSL",
    "/usr/local/ssl",
)

_logger = JsonLogger("trust")


def probe_ca_path(
    candidates: Sequence[str] = CA_PATH_CANDIDATES,
    *,
    exists: Callable[[str], bool] = os.path.exists,
) -> Optional[str]:
    """Return the first candidate that exists, or ``None``."""
    for path in candidates:
        if exists(path):
            return path
    return None


class TrustStore:
    """Lazily resolved trust-anchor directory."""

    def __init__(
        self,
        candidates: Sequence[str] = CA_PATH_CANDIDATES,
        *,
        exists: Callable[[str], bool] = os.path.exists,
        env_var: Optional[str] = CA_PATH_ENV,
    ) -> None:
        self._candidates = tuple(candidates)
        self._exists = exists
        self._env_var = env_var
        self._ca_path: Optional[str] = None
        self._resolved = False
        self._lock = Lock()

    @property
    def resolved(self) -> bool:
        return self._resolved

    @property
    def ca_path(self) -> Optional[str]:
        with self._lock:
            if not self._resolved:
                self._ca_path = self._discover()
                self._resolved = True
            return self._ca_path

    @ca_path.setter
    def ca_path(self, value: Optional[str]) -> None:
        with self._lock:
            self._ca_path = os.fspath(value) if value is not None else None
            self._resolved = True

    def reset(self) -> None:
        """Forget the resolved path so the next access probes again."""
        with self._lock:
            self._ca_path = None
            self._resolved = False

    def _discover(self) -> Optional[str]:
        if self._env_var:
            override = os.getenv(self._env_var)
            if override:
                _logger.info("tls.ca_path.found", path=override, source="env")
                return override
        path = probe_ca_path(self._candidates, exists=self._exists)
        if path is None:
            _logger.warning(
                "tls.ca_path.missing",
                message=(
                    "unable to find your CA certificates; HTTPS connections will "
                    "*not* be verified. Set one with "
                    "etherpad_lite.set_default_ca_path('/path/to/certs') or "
                    f"the {CA_PATH_ENV} environment variable."
                ),
                candidates=list(self._candidates),
            )
        else:
            _logger.info("tls.ca_path.found", path=path, source="probe")
        return path


default_trust_store = TrustStore()


def set_default_ca_path(path: Optional[str]) -> None:
    """Pin the process-wide trust-anchor directory for clients created afterwards."""
    default_trust_store.ca_path = path


def default_ca_path() -> Optional[str]:
    return default_trust_store.ca_path


__all__ = [
    "CA_PATH_CANDIDATES",
    "CA_PATH_ENV",
    "TrustStore",
    "default_ca_path",
    "default_trust_store",
    "probe_ca_path",
    "set_default_ca_path",
]
