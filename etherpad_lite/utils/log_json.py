from __future__ import annotations

"""Structured JSON logger that scrubs API keys before anything is written."""

import json
import logging
import os
import re
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, MutableMapping

SECRET_KEYS = frozenset({"apikey", "api_key", "password"})
APIKEY_QUERY_RE = re.compile(r"(apikey=)[^&\s]+", re.IGNORECASE)
TOKEN_RE = re.compile(r"(?:bearer\s+)?[A-Za-z0-9\-_=]{32,}", re.IGNORECASE)

_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def _scrub(value: str) -> str:
    value = APIKEY_QUERY_RE.sub(r"\1[redacted]", value)
    value = TOKEN_RE.sub("[redacted]", value)
    return value


def _sanitize(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {
            str(k): "[redacted]" if str(k).lower() in SECRET_KEYS else _sanitize(v)
            for k, v in obj.items()
            if v is not None
        }
    if isinstance(obj, (list, tuple)):
        return [_sanitize(v) for v in obj]
    if isinstance(obj, (int, float, bool)):
        return obj
    if obj is None:
        return None
    return _scrub(str(obj))


def _truncate(details: Mapping[str, Any] | Iterable[Any], max_bytes: int) -> Any:
    if max_bytes <= 0:
        return details
    serialized = json.dumps(details, ensure_ascii=False, sort_keys=True, separators=(",", ":"))
    blob = serialized.encode("utf-8")
    if len(blob) <= max_bytes:
        return details
    preview = blob[:max_bytes].decode("utf-8", errors="ignore")
    return {"note": "truncated", "preview": preview}


def _default_level() -> int:
    name = os.getenv("ETHERPAD_LOG_LEVEL", "WARNING").strip().upper()
    return _LEVEL_MAP.get(name, logging.WARNING)


class JsonLogger:
    """Emit structured JSON events with consistent keys."""

    def __init__(
        self,
        service: str,
        *,
        logger: logging.Logger | None = None,
        level: int | None = None,
        max_details_bytes: int = 4096,
    ) -> None:
        self._service = service
        self._logger = logger or logging.getLogger(f"etherpad_lite.{service}")
        if logger is None:
            if not self._logger.handlers:
                handler = logging.StreamHandler()
                handler.setFormatter(logging.Formatter("%(message)s"))
                self._logger.addHandler(handler)
            self._logger.propagate = False
            self._logger.setLevel(level if level is not None else _default_level())
        self._max_details_bytes = max(0, int(max_details_bytes))

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def debug(self, event: str, **fields: Any) -> dict[str, Any] | None:
        return self._emit("DEBUG", event, fields)

    def info(self, event: str, **fields: Any) -> dict[str, Any] | None:
        return self._emit("INFO", event, fields)

    def warning(self, event: str, **fields: Any) -> dict[str, Any] | None:
        return self._emit("WARNING", event, fields)

    def error(self, event: str, **fields: Any) -> dict[str, Any] | None:
        return self._emit("ERROR", event, fields)

    def emit(self, level: str, event: str, **fields: Any) -> dict[str, Any] | None:
        return self._emit(level.upper(), event, dict(fields))

    def _emit(self, level: str, event: str, fields: MutableMapping[str, Any]) -> dict[str, Any] | None:
        numeric = _LEVEL_MAP.get(level.upper(), logging.INFO)
        if not self._logger.isEnabledFor(numeric):
            return None
        entry: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": level.upper(),
            "service": self._service,
            "event": event,
        }
        for key in ("method", "verb", "status", "latency_ms"):
            value = fields.pop(key, None)
            if value is not None:
                entry[key] = value
        if fields:
            entry["details"] = _truncate(_sanitize(dict(fields)), self._max_details_bytes)
        payload = json.dumps(entry, ensure_ascii=False, sort_keys=True, separators=(",", ":"))
        self._logger.log(numeric, payload)
        return entry


__all__ = ["JsonLogger"]
