from __future__ import annotations

"""Python client for the Etherpad Lite HTTP JSON API."""

from importlib.metadata import PackageNotFoundError, version

from .client import EtherpadLiteClient
from .config import API_VERSION, ClientConfig
from .errors import (
    CallResult,
    EtherpadLiteError,
    Failure,
    InvalidArgument,
    ProtocolError,
    ServerError,
    Success,
    TransportError,
)
from .models import Author, Group, Instance, Pad, Session, connect
from .trust import TrustStore, default_trust_store, set_default_ca_path

try:
    __version__ = version("etherpad-lite-client")
except PackageNotFoundError:  # pragma: no cover - package not installed
    __version__ = "0.1.0"

__all__ = [
    "API_VERSION",
    "Author",
    "CallResult",
    "ClientConfig",
    "EtherpadLiteClient",
    "EtherpadLiteError",
    "Failure",
    "Group",
    "Instance",
    "InvalidArgument",
    "Pad",
    "ProtocolError",
    "ServerError",
    "Session",
    "Success",
    "TransportError",
    "TrustStore",
    "__version__",
    "connect",
    "default_trust_store",
    "set_default_ca_path",
]
