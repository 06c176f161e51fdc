from __future__ import annotations

from pathlib import Path
from urllib.parse import parse_qs, urlsplit

import pytest

from etherpad_lite import EtherpadLiteClient, Instance, ProtocolError, connect
from etherpad_lite.models import Author, Group


def _instance(stub_transport, *bodies: str) -> Instance:
    stub_transport.bodies.extend(bodies)
    return Instance(EtherpadLiteClient("secret", transport=stub_transport))


def _sent(call) -> dict[str, list[str]]:
    if call["verb"] == "GET":
        return parse_qs(urlsplit(call["path"]).query)
    return parse_qs(call["body"])


def _method(call) -> str:
    return urlsplit(call["path"]).path.rsplit("/", 1)[-1]


def test_create_author(stub_transport):
    eth = _instance(stub_transport, '{"code":0,"data":{"authorID":"a.1"}}')

    author = eth.create_author()

    assert author.id == "a.1"
    assert _method(stub_transport.calls[0]) == "createAuthor"


def test_mapped_author_is_reused(stub_transport):
    eth = _instance(
        stub_transport,
        '{"code":0,"data":{"authorID":"a.7"}}',
        '{"code":0,"data":{"authorID":"a.7"}}',
    )

    first = eth.create_author(mapper="Author A", name="Ann")
    second = eth.author("Author A")

    assert first.id == second.id
    assert [_method(c) for c in stub_transport.calls] == ["createAuthorIfNotExistsFor"] * 2
    assert _sent(stub_transport.calls[0])["name"] == ["Ann"]
    assert "name" not in _sent(stub_transport.calls[1])


def test_group_pads_and_sessions(stub_transport):
    eth = _instance(
        stub_transport,
        '{"code":0,"data":{"groupID":"g.1"}}',
        '{"code":0,"data":{"padID":"g.1$notes"}}',
        '{"code":0,"data":{"padIDs":["g.1$notes"]}}',
        '{"code":0,"data":null}',
    )

    group = eth.create_group(mapper="team")
    pad = group.create_pad("notes", "hello")

    assert pad.id == "g.1$notes"
    assert pad.group_id == "g.1"
    assert pad.name == "notes"
    assert [p.id for p in group.pads()] == ["g.1$notes"]
    assert group.sessions() == []
    assert _sent(stub_transport.calls[1]) == {
        "groupID": ["g.1"],
        "padName": ["notes"],
        "text": ["hello"],
        "apikey": ["secret"],
    }


def test_pad_accessors(stub_transport):
    eth = _instance(
        stub_transport,
        '{"code":0,"data":{"text":"v1"}}',
        '{"code":0,"data":{"html":"<p>v1</p>"}}',
        '{"code":0,"data":{"revisions":2}}',
        '{"code":0,"data":{"readOnlyID":"r.9"}}',
        '{"code":0,"data":{"publicStatus":false}}',
        '{"code":0,"data":{"isPasswordProtected":true}}',
        '{"code":0,"data":null}',
    )
    pad = eth.pad("notes")

    assert pad.text(rev=1) == "v1"
    assert pad.html() == "<p>v1</p>"
    assert pad.revision_count() == 2
    assert pad.read_only_id() == "r.9"
    assert pad.is_public() is False
    assert pad.is_password_protected() is True
    pad.set_public(True)

    assert pad.group_id is None
    assert _sent(stub_transport.calls[0])["rev"] == ["1"]
    assert _sent(stub_transport.calls[-1])["publicStatus"] == ["true"]


def test_author_sessions(stub_transport):
    eth = _instance(
        stub_transport,
        '{"code":0,"data":{"sessionID":"s.1"}}',
        '{"code":0,"data":{"s.1":{"groupID":"g.1","authorID":"a.1","validUntil":1900000000}}}',
        '{"code":0,"data":{"groupID":"g.1","authorID":"a.1","validUntil":1900000000}}',
    )
    author = Author(eth, "a.1")
    session = author.create_session(Group(eth, "g.1"), 1900000000)

    assert session.id == "s.1"
    assert [s.id for s in author.sessions()] == ["s.1"]
    assert session.valid_until() == 1900000000
    assert _sent(stub_transport.calls[0]) == {
        "groupID": ["g.1"],
        "authorID": ["a.1"],
        "validUntil": ["1900000000"],
        "apikey": ["secret"],
    }


def test_unexpected_payload_shape(stub_transport):
    eth = _instance(stub_transport, '{"code":0,"data":{"nope":1}}')

    with pytest.raises(ProtocolError) as excinfo:
        eth.create_author()

    assert "expected 'authorID' field" in str(excinfo.value)
    assert "unknown error" not in str(excinfo.value)
    assert excinfo.value.envelope == {"code": 0, "data": {"nope": 1}}


def test_connect_accepts_key_file(tmp_path: Path):
    key_file = tmp_path / "APIKEY.txt"
    key_file.write_text("file-key\n", encoding="utf-8")

    with connect("http://localhost:9001/api", key_file) as eth:
        assert eth.client.api_key == "file-key"
    with connect("http://localhost:9001/api", str(key_file)) as eth:
        assert eth.client.api_key == "file-key"


def test_connect_from_environment(monkeypatch):
    monkeypatch.setenv("ETHERPAD_API_KEY", "env-key")
    monkeypatch.setenv("ETHERPAD_URL", "http://pads.example.org:9001/api")

    with connect() as eth:
        assert eth.client.api_key == "env-key"
        assert eth.client.config.host == "pads.example.org"


def test_session_accessors_fetch_info_once_per_call(stub_transport):
    info = '{"code":0,"data":{"groupID":"g.1","authorID":"a.1","validUntil":1900000000}}'
    eth = _instance(stub_transport, info, info)
    session = eth.session("s.1")

    assert session.group_id() == "g.1"
    assert session.author_id() == "a.1"
    assert [_method(c) for c in stub_transport.calls] == ["getSessionInfo", "getSessionInfo"]
