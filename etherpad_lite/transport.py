"""HTTP transport bound to a single Etherpad Lite host."""
from __future__ import annotations

from typing import Optional

import requests

from etherpad_lite.config import HTTPS_PORT, ClientConfig
from etherpad_lite.errors import TransportError
from etherpad_lite.utils.log_json import JsonLogger

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

_logger = JsonLogger("transport")


class Transport:
    """One :class:`requests.Session` talking to ``host:port``.

    TLS is used when ``port`` is 443. The peer is verified against ``ca_path``
    when one is given; otherwise verification is switched off.
    """

    def __init__(
        self,
        host: str,
        port: int,
        *,
        ca_path: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.host = host
        self.port = port
        self.ca_path = ca_path
        self.timeout = timeout
        self.session = session or requests.Session()
        self._owns_session = session is None
        self.session.trust_env = False
        self.session.headers.update({"Accept": "application/json"})
        if self.secure:
            if ca_path:
                self.session.verify = ca_path
            else:
                self.session.verify = False
                _logger.warning("transport.insecure", host=host, port=port)

    @classmethod
    def from_config(
        cls, config: ClientConfig, *, session: Optional[requests.Session] = None
    ) -> "Transport":
        return cls(
            config.host,
            config.port,
            ca_path=config.ca_path,
            timeout=config.timeout,
            session=session,
        )

    @property
    def secure(self) -> bool:
        return self.port == HTTPS_PORT

    @property
    def origin(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        if self.secure:
            return f"https://{host}"
        if self.port == 80:
            return f"http://{host}"
        return f"http://{host}:{self.port}"

    def send(self, verb: str, path: str, body: Optional[str] = None) -> str:
        """Issue one request and return the raw response body."""
        url = f"{self.origin}{path}"
        headers = {"Content-Type": FORM_CONTENT_TYPE} if body is not None else None
        try:
            resp = self.session.request(
                verb,
                url,
                data=body,
                headers=headers,
                timeout=self.timeout,
            )
        except (requests.RequestException, OSError) as exc:
            # A missing CA bundle path surfaces as a bare OSError before any socket opens.
            _logger.error("transport.error", verb=verb, host=self.host, port=self.port, error=str(exc))
            raise TransportError(f"request to {self.host}:{self.port} failed: {exc}") from exc
        _logger.debug("transport.response", verb=verb, status=resp.status_code)
        return resp.text

    def close(self) -> None:
        if self._owns_session:
            self.session.close()


__all__ = ["FORM_CONTENT_TYPE", "Transport"]
