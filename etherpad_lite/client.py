"""Thin wrapper around Etherpad Lite's HTTP JSON API."""
from __future__ import annotations

import json
import time
from datetime import datetime
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlencode

from etherpad_lite.config import API_VERSION, DEFAULT_TIMEOUT, DEFAULT_URL, ApiKey, ClientConfig
from etherpad_lite.endpoints import GET, POST, lookup
from etherpad_lite.errors import (
    CallResult,
    EtherpadLiteError,
    Failure,
    InvalidArgument,
    ProtocolError,
    ServerError,
    Success,
    describe,
)
from etherpad_lite.transport import Transport
from etherpad_lite.trust import TrustStore, default_trust_store
from etherpad_lite.utils.log_json import JsonLogger

CODE_OK = 0
CODE_INVALID_PARAMETERS = 1
CODE_INTERNAL_ERROR = 2
CODE_INVALID_METHOD = 3
CODE_INVALID_API_KEY = 4

APIKEY_PARAM = "apikey"

_REJECTED_CODES = (CODE_INVALID_PARAMETERS, CODE_INVALID_METHOD, CODE_INVALID_API_KEY)
_VERBS = (GET, POST)

_logger = JsonLogger("client")


def build_path(base_path: str, api_version: str, method: str) -> str:
    """Join the non-empty segments into ``/<base>/<version>/<method>``."""
    segments = [str(part).strip("/") for part in (base_path, api_version, method)]
    return "/" + "/".join(segment for segment in segments if segment)


def encode_value(key: str, value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return str(int(value.timestamp()))
    if isinstance(value, (str, int, float)):
        return str(value)
    raise InvalidArgument(f"parameter {key!r} must be a scalar, got {type(value).__name__}")


def encode_params(params: Mapping[str, Any]) -> str:
    return urlencode([(str(key), encode_value(key, value)) for key, value in params.items()])


def handle_result(body: str) -> Any:
    """Decode a response body and return its ``data`` or raise for its ``code``."""

    try:
        envelope = json.loads(body)
    except (TypeError, ValueError):
        raise ProtocolError.undecodable(body) from None
    if not isinstance(envelope, dict):
        raise ProtocolError.unknown_envelope(envelope)
    code = envelope.get("code")
    if isinstance(code, bool) or not isinstance(code, int):
        raise ProtocolError.unknown_envelope(envelope)
    if code == CODE_OK:
        return envelope.get("data")
    if code in _REJECTED_CODES:
        raise InvalidArgument(describe(envelope), code=code)
    if code == CODE_INTERNAL_ERROR:
        raise ServerError(describe(envelope))
    raise ProtocolError.unknown_envelope(envelope)


class EtherpadLiteClient:
    """Typed method calls for an Etherpad Lite instance.

    Parameters
    ----------
    api_key:
        The instance's API key, or a :class:`pathlib.Path` to a file holding it.
    url:
        Base URL of the API, including the scheme (e.g. ``http://localhost:9001/api``).
        Ignored when ``config`` is given.
    ca_path:
        Trust-anchor directory for HTTPS. Defaults to ``trust_store``'s path.
    timeout:
        Request timeout in seconds.
    config:
        A ready :class:`ClientConfig`; replaces ``api_key``/``url``/``ca_path``/``timeout``.
    transport:
        Object with ``send(verb, path, body)``; one is built from the config when omitted.
    trust_store:
        Store consulted for the CA path of secure connections.

    One instance holds one connection and is not meant for overlapping calls
    from several threads.
    """

    API_VERSION = API_VERSION

    def __init__(
        self,
        api_key: Optional[ApiKey] = None,
        url: str = DEFAULT_URL,
        *,
        ca_path: Optional[str] = None,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        config: Optional[ClientConfig] = None,
        transport: Optional[Any] = None,
        trust_store: Optional[TrustStore] = None,
    ) -> None:
        if config is None:
            if api_key is None:
                raise InvalidArgument("an API key is required")
            config = ClientConfig.from_url(api_key, url, ca_path=ca_path, timeout=timeout)
        if config.secure and config.ca_path is None:
            store = trust_store or default_trust_store
            config = config.with_ca_path(store.ca_path)
        self.config = config
        self.transport = transport if transport is not None else Transport.from_config(config)
        _logger.info(
            "api.client.init",
            url=config.url,
            secure=config.secure,
            verified=bool(config.secure and config.ca_path),
        )

    # ------------------------------------------------------------------#
    @property
    def api_key(self) -> str:
        return self.config.api_key

    @property
    def url(self) -> str:
        return self.config.url

    @property
    def secure(self) -> bool:
        """True when the connection uses HTTPS, which is decided by port 443 alone."""
        return self.config.secure

    def close(self) -> None:
        close = getattr(self.transport, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> "EtherpadLiteClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------------#
    def call(
        self,
        method: str,
        params: Optional[Mapping[str, Any]] = None,
        http_method: str = GET,
    ) -> Any:
        """Call ``method`` and return the ``data`` portion of the response.

        ``params`` are sent as the query string for GET and as a form body for
        POST. The API key is always added and overrides any ``apikey`` entry.
        """

        if not isinstance(method, str) or not method.strip("/"):
            raise InvalidArgument(f"{method!r} is not a valid API method name")
        verb = str(http_method).upper()
        if verb not in _VERBS:
            raise InvalidArgument(f"{http_method} is not a valid HTTP method")
        request_params: Dict[str, Any] = dict(params or {})
        request_params[APIKEY_PARAM] = self.config.api_key
        path = build_path(self.config.base_path, self.config.api_version, method)
        encoded = encode_params(request_params)

        _logger.info("api.request", method=method, verb=verb, params=request_params)
        started = time.perf_counter()
        if verb == GET:
            body = self.transport.send(verb, f"{path}?{encoded}")
        else:
            body = self.transport.send(verb, path, encoded)
        latency_ms = round((time.perf_counter() - started) * 1000, 2)
        try:
            data = handle_result(body)
        except EtherpadLiteError as exc:
            _logger.error(
                "api.error",
                method=method,
                verb=verb,
                latency_ms=latency_ms,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            raise
        _logger.info("api.response", method=method, verb=verb, latency_ms=latency_ms)
        return data

    def get(self, method: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        """Alias to :meth:`call` using GET."""
        return self.call(method, params, GET)

    def post(self, method: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        """Alias to :meth:`call` using POST."""
        return self.call(method, params, POST)

    def try_call(
        self,
        method: str,
        params: Optional[Mapping[str, Any]] = None,
        http_method: str = GET,
    ) -> CallResult:
        """Like :meth:`call` but returns :class:`Success` or :class:`Failure`."""
        try:
            return Success(self.call(method, params, http_method))
        except EtherpadLiteError as exc:
            return Failure(exc)

    def invoke(self, endpoint_name: str, /, **arguments: Any) -> Any:
        """Call a known API method with snake_case arguments checked against its table row."""
        endpoint = lookup(endpoint_name)
        return self.call(endpoint.name, endpoint.build_params(arguments), endpoint.verb)

    # Groups
    # Pads can belong to a group. Public pads never belong to one.

    def create_group(self) -> Any:
        return self.invoke("createGroup")

    def create_group_if_not_exists_for(self, group_mapper: str) -> Any:
        """Maps your application's group to an Etherpad Lite group, creating it if needed."""
        return self.invoke("createGroupIfNotExistsFor", group_mapper=group_mapper)

    def delete_group(self, group_id: str) -> Any:
        return self.invoke("deleteGroup", group_id=group_id)

    def list_pads(self, group_id: str) -> Any:
        return self.invoke("listPads", group_id=group_id)

    def create_group_pad(self, group_id: str, pad_name: str, text: Optional[str] = None) -> Any:
        return self.invoke("createGroupPad", group_id=group_id, pad_name=pad_name, text=text)

    # Authors

    def create_author(self, name: Optional[str] = None) -> Any:
        return self.invoke("createAuthor", name=name)

    def create_author_if_not_exists_for(self, author_mapper: str, name: Optional[str] = None) -> Any:
        """Maps your application's author to an Etherpad Lite author, creating it if needed."""
        return self.invoke("createAuthorIfNotExistsFor", author_mapper=author_mapper, name=name)

    # Sessions
    # A session ties an author to a group until ``valid_until``.

    def create_session(self, group_id: str, author_id: str, valid_until: Any) -> Any:
        return self.invoke(
            "createSession", group_id=group_id, author_id=author_id, valid_until=valid_until
        )

    def delete_session(self, session_id: str) -> Any:
        return self.invoke("deleteSession", session_id=session_id)

    def get_session_info(self, session_id: str) -> Any:
        return self.invoke("getSessionInfo", session_id=session_id)

    def list_sessions_of_group(self, group_id: str) -> Any:
        return self.invoke("listSessionsOfGroup", group_id=group_id)

    def list_sessions_of_author(self, author_id: str) -> Any:
        return self.invoke("listSessionsOfAuthor", author_id=author_id)

    # Pad content

    def get_text(self, pad_id: str, rev: Optional[int] = None) -> Any:
        return self.invoke("getText", pad_id=pad_id, rev=rev)

    def set_text(self, pad_id: str, text: str) -> Any:
        return self.invoke("setText", pad_id=pad_id, text=text)

    def get_html(self, pad_id: str, rev: Optional[int] = None) -> Any:
        return self.invoke("getHTML", pad_id=pad_id, rev=rev)

    def set_html(self, pad_id: str, html: str) -> Any:
        return self.invoke("setHTML", pad_id=pad_id, html=html)

    # Pads
    # Group pads are named GROUPID$PADNAME; public pad names may not contain "$".

    def create_pad(self, pad_id: str, text: Optional[str] = None) -> Any:
        return self.invoke("createPad", pad_id=pad_id, text=text)

    def get_revisions_count(self, pad_id: str) -> Any:
        return self.invoke("getRevisionsCount", pad_id=pad_id)

    def delete_pad(self, pad_id: str) -> Any:
        return self.invoke("deletePad", pad_id=pad_id)

    def get_read_only_id(self, pad_id: str) -> Any:
        return self.invoke("getReadOnlyID", pad_id=pad_id)

    def set_public_status(self, pad_id: str, public_status: bool) -> Any:
        return self.invoke("setPublicStatus", pad_id=pad_id, public_status=public_status)

    def get_public_status(self, pad_id: str) -> Any:
        return self.invoke("getPublicStatus", pad_id=pad_id)

    def set_password(self, pad_id: str, password: str) -> Any:
        return self.invoke("setPassword", pad_id=pad_id, password=password)

    def is_password_protected(self, pad_id: str) -> Any:
        return self.invoke("isPasswordProtected", pad_id=pad_id)


__all__ = [
    "APIKEY_PARAM",
    "CODE_INTERNAL_ERROR",
    "CODE_INVALID_API_KEY",
    "CODE_INVALID_METHOD",
    "CODE_INVALID_PARAMETERS",
    "CODE_OK",
    "EtherpadLiteClient",
    "build_path",
    "encode_params",
    "handle_result",
]
