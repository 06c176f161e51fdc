"""Exceptions raised by the Etherpad Lite client and the tagged call result."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

VERSION_HINT = (
    "Make sure you are running the latest version of the Etherpad Lite server. "
    "If that is not possible, try rolling this client back to an earlier version."
)


class EtherpadLiteError(Exception):
    """Base class for every failure surfaced by the client."""


class InvalidArgument(EtherpadLiteError, ValueError):
    """Raised for bad client input or when the server rejects parameters, method or key.

    ``code`` holds the server's envelope code (1, 3 or 4) or ``None`` when the
    problem was detected before any request was sent.
    """

    def __init__(self, message: str, *, code: Optional[int] = None) -> None:
        super().__init__(message)
        self.code = code


class ServerError(EtherpadLiteError):
    """Raised when the server reports an internal error (code 2)."""

    def __init__(self, message: str, *, code: int = 2) -> None:
        super().__init__(message)
        self.code = code


class ProtocolError(EtherpadLiteError):
    """Raised when the response is not JSON or carries an unknown code."""

    def __init__(
        self,
        message: str,
        *,
        body: Optional[str] = None,
        envelope: Optional[Any] = None,
    ) -> None:
        super().__init__(message)
        self.body = body
        self.envelope = envelope

    @classmethod
    def undecodable(cls, body: str) -> "ProtocolError":
        return cls(f"Error while talking to the API ({body}). {VERSION_HINT}", body=body)

    @classmethod
    def unexpected_payload(cls, method: str, key: str, data: Any) -> "ProtocolError":
        return cls(
            f"{method} answered without the expected {key!r} field: {data!r}. {VERSION_HINT}",
            envelope={"code": 0, "data": data},
        )

    @classmethod
    def unknown_envelope(cls, envelope: Any) -> "ProtocolError":
        return cls(
            f"An unknown error occurred while handling the response: {envelope!r}. {VERSION_HINT}",
            envelope=envelope,
        )


class TransportError(EtherpadLiteError):
    """Raised when the request never obtained a response from the server."""


@dataclass(frozen=True, slots=True)
class Success:
    data: Any = None

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> Any:
        return self.data


@dataclass(frozen=True, slots=True)
class Failure:
    error: EtherpadLiteError

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self) -> Any:
        raise self.error


CallResult = Union[Success, Failure]


def describe(envelope: Mapping[str, Any]) -> str:
    """Return the server message of ``envelope`` or a generic fallback."""
    message = envelope.get("message")
    if message:
        return str(message)
    return f"Etherpad Lite API returned code {envelope.get('code')!r}"


__all__ = [
    "CallResult",
    "EtherpadLiteError",
    "Failure",
    "InvalidArgument",
    "ProtocolError",
    "ServerError",
    "Success",
    "TransportError",
    "VERSION_HINT",
    "describe",
]
