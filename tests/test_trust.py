from __future__ import annotations

import logging

from etherpad_lite import trust
from etherpad_lite.trust import CA_PATH_CANDIDATES, TrustStore, probe_ca_path


class _Recorder(logging.Handler):
    def __init__(self) -> None:
        super().__init__()
        self.messages: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.messages.append(record.getMessage())


def test_candidates_are_searched_in_order():
    assert CA_PATH_CANDIDATES[0] == "/etc/ssl/certs"
    seen = []

    def exists(path):
        seen.append(path)
        return path in {"/usr/lib/ssl", "/usr/local/ssl"}

    assert probe_ca_path(exists=exists) == "/usr/lib/ssl"
    assert seen == ["/etc/ssl/certs", "/etc/ssl", "/usr/share/ssl", "/usr/lib/ssl"]


def test_probe_runs_once():
    calls = []

    def exists(path):
        calls.append(path)
        return True

    store = TrustStore(["/a", "/b"], exists=exists, env_var=None)

    assert store.ca_path == "/a"
    assert store.ca_path == "/a"
    assert calls == ["/a"]


def test_missing_certificates_warn():
    recorder = _Recorder()
    logger = trust._logger.logger
    logger.addHandler(recorder)
    previous = logger.level
    logger.setLevel(logging.WARNING)
    try:
        store = TrustStore(["/nope"], exists=lambda path: False, env_var=None)
        assert store.ca_path is None
    finally:
        logger.removeHandler(recorder)
        logger.setLevel(previous)

    assert any("tls.ca_path.missing" in message for message in recorder.messages)


def test_environment_overrides_probe(monkeypatch):
    monkeypatch.setenv("ETHERPAD_CA_PATH", "/opt/certs")
    store = TrustStore(["/a"], exists=lambda path: True)

    assert store.ca_path == "/opt/certs"


def test_explicit_path_skips_probe():
    def exists(path):
        raise AssertionError("probed")

    store = TrustStore(["/a"], exists=exists, env_var=None)

    store.ca_path = "/pinned"

    assert store.ca_path == "/pinned"


def test_set_default_ca_path_is_seen_by_new_clients():
    from etherpad_lite import EtherpadLiteClient, set_default_ca_path

    set_default_ca_path("/pinned")
    client = EtherpadLiteClient("k", "https://pads.example.org/api")

    assert client.config.ca_path == "/pinned"
