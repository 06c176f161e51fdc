from __future__ import annotations

import os
from pathlib import Path
from typing import Any, List, Optional

import pytest
import vcr

from etherpad_lite.trust import default_trust_store

try:
    from pytest_socket import disable_socket, enable_socket
except Exception:  # pragma: no cover - pytest_socket optional in some environments
    disable_socket = enable_socket = None  # type: ignore[assignment]


@pytest.fixture(autouse=True)
def _disable_network(request: pytest.FixtureRequest):
    """Block real sockets unless a test opts in with the ``network`` marker."""

    if os.getenv("PYTEST_ALLOW_NETWORK", "0") == "1" or not (
        disable_socket and enable_socket
    ):
        yield
        return
    if request.node.get_closest_marker("network"):
        enable_socket()
        yield
        return
    disable_socket()
    try:
        yield
    finally:
        enable_socket()


@pytest.fixture(autouse=True)
def _isolated_trust_store(monkeypatch):
    """Keep the process-wide CA path from leaking between tests."""

    monkeypatch.delenv("ETHERPAD_CA_PATH", raising=False)
    default_trust_store.reset()
    yield
    default_trust_store.reset()


@pytest.fixture
def recorder() -> vcr.VCR:
    cassette_dir = Path(__file__).parent / "fixtures" / "cassettes"
    return vcr.VCR(
        cassette_library_dir=str(cassette_dir),
        record_mode=os.getenv("VCR_RECORD_MODE", "none"),
    )


class StubTransport:
    """Records every ``send`` and replays canned bodies."""

    def __init__(self, bodies: Optional[List[str]] = None) -> None:
        self.bodies = list(bodies or [])
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    def send(self, verb: str, path: str, body: Optional[str] = None) -> str:
        self.calls.append({"verb": verb, "path": path, "body": body})
        return self.bodies.pop(0)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def stub_transport() -> StubTransport:
    return StubTransport()
