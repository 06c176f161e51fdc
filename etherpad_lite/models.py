"""Object wrappers over :class:`EtherpadLiteClient` for authors, groups, pads and sessions."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from etherpad_lite.client import EtherpadLiteClient
from etherpad_lite.config import ApiKey, ClientConfig
from etherpad_lite.errors import ProtocolError

GROUP_PAD_SEPARATOR = "$"


def _field(data: Any, key: str, method: str) -> Any:
    if not isinstance(data, dict) or key not in data:
        raise ProtocolError.unexpected_payload(method, key, data)
    return data[key]


@dataclass
class Instance:
    """Entry point of the object layer; holds one client."""

    client: EtherpadLiteClient

    # Authors
    def create_author(self, name: Optional[str] = None, *, mapper: Optional[str] = None) -> "Author":
        """Create an author; with ``mapper`` an existing mapped author is returned instead."""
        if mapper is not None:
            data = self.client.create_author_if_not_exists_for(mapper, name)
        else:
            data = self.client.create_author(name)
        author_id = _field(data, "authorID", "createAuthor")
        return Author(self, author_id, name=name, mapper=mapper)

    def author(self, mapper: str, name: Optional[str] = None) -> "Author":
        return self.create_author(name, mapper=mapper)

    # Groups
    def create_group(self, *, mapper: Optional[str] = None) -> "Group":
        if mapper is not None:
            data = self.client.create_group_if_not_exists_for(mapper)
        else:
            data = self.client.create_group()
        return Group(self, _field(data, "groupID", "createGroup"), mapper=mapper)

    def group(self, mapper: str) -> "Group":
        return self.create_group(mapper=mapper)

    # Pads
    def create_pad(self, pad_id: str, text: Optional[str] = None) -> "Pad":
        self.client.create_pad(pad_id, text)
        return Pad(self, pad_id)

    def pad(self, pad_id: str) -> "Pad":
        """Return a handle for an existing pad without contacting the server."""
        return Pad(self, pad_id)

    # Sessions
    def session(self, session_id: str) -> "Session":
        return Session(self, session_id)

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "Instance":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


@dataclass
class Author:
    instance: Instance = field(repr=False)
    id: str
    name: Optional[str] = None
    mapper: Optional[str] = None

    def sessions(self) -> List["Session"]:
        data = self.instance.client.list_sessions_of_author(self.id)
        return _sessions(self.instance, data)

    def create_session(self, group: Union["Group", str], valid_until: Union[int, datetime]) -> "Session":
        group_id = group.id if isinstance(group, Group) else group
        data = self.instance.client.create_session(group_id, self.id, valid_until)
        return Session(self.instance, _field(data, "sessionID", "createSession"))


@dataclass
class Group:
    instance: Instance = field(repr=False)
    id: str
    mapper: Optional[str] = None

    def pads(self) -> List["Pad"]:
        data = self.instance.client.list_pads(self.id)
        return [Pad(self.instance, pad_id) for pad_id in _field(data, "padIDs", "listPads") or []]

    def create_pad(self, name: str, text: Optional[str] = None) -> "Pad":
        data = self.instance.client.create_group_pad(self.id, name, text)
        pad_id = data.get("padID") if isinstance(data, dict) else None
        return Pad(self.instance, pad_id or f"{self.id}{GROUP_PAD_SEPARATOR}{name}")

    def pad(self, name: str) -> "Pad":
        return Pad(self.instance, f"{self.id}{GROUP_PAD_SEPARATOR}{name}")

    def sessions(self) -> List["Session"]:
        return _sessions(self.instance, self.instance.client.list_sessions_of_group(self.id))

    def delete(self) -> None:
        self.instance.client.delete_group(self.id)


@dataclass
class Pad:
    instance: Instance = field(repr=False)
    id: str

    @property
    def group_id(self) -> Optional[str]:
        if GROUP_PAD_SEPARATOR not in self.id:
            return None
        return self.id.split(GROUP_PAD_SEPARATOR, 1)[0]

    @property
    def name(self) -> str:
        return self.id.split(GROUP_PAD_SEPARATOR, 1)[-1]

    def text(self, rev: Optional[int] = None) -> str:
        return _field(self.instance.client.get_text(self.id, rev), "text", "getText")

    def set_text(self, text: str) -> None:
        self.instance.client.set_text(self.id, text)

    def html(self, rev: Optional[int] = None) -> str:
        return _field(self.instance.client.get_html(self.id, rev), "html", "getHTML")

    def set_html(self, html: str) -> None:
        self.instance.client.set_html(self.id, html)

    def revision_count(self) -> int:
        return _field(self.instance.client.get_revisions_count(self.id), "revisions", "getRevisionsCount")

    def read_only_id(self) -> str:
        return _field(self.instance.client.get_read_only_id(self.id), "readOnlyID", "getReadOnlyID")

    def is_public(self) -> bool:
        return _field(self.instance.client.get_public_status(self.id), "publicStatus", "getPublicStatus")

    def set_public(self, status: bool) -> None:
        self.instance.client.set_public_status(self.id, status)

    def is_password_protected(self) -> bool:
        data = self.instance.client.is_password_protected(self.id)
        return _field(data, "isPasswordProtected", "isPasswordProtected")

    def set_password(self, password: str) -> None:
        self.instance.client.set_password(self.id, password)

    def delete(self) -> None:
        self.instance.client.delete_pad(self.id)


@dataclass
class Session:
    instance: Instance = field(repr=False)
    id: str

    def info(self) -> Dict[str, Any]:
        return self.instance.client.get_session_info(self.id) or {}

    def group_id(self) -> Optional[str]:
        return self.info().get("groupID")

    def author_id(self) -> Optional[str]:
        return self.info().get("authorID")

    def valid_until(self) -> Optional[int]:
        return self.info().get("validUntil")

    def delete(self) -> None:
        self.instance.client.delete_session(self.id)


def _sessions(instance: Instance, data: Any) -> List[Session]:
    # Servers answer with null instead of an empty object when nothing matches.
    if not data:
        return []
    return [Session(instance, session_id) for session_id in data]


def connect(
    url: Optional[str] = None,
    api_key: Optional[ApiKey] = None,
    **kwargs: Any,
) -> Instance:
    """Return an :class:`Instance` for ``url``.

    ``api_key`` may be the key itself or a :class:`pathlib.Path` to a file
    holding it. Without arguments the ``ETHERPAD_*`` environment variables
    are used.
    """

    if api_key is None:
        config = ClientConfig.from_env()
        if url is not None:
            config = ClientConfig.from_url(config.api_key, url, ca_path=config.ca_path, timeout=config.timeout)
        return Instance(EtherpadLiteClient(config=config, **kwargs))
    if isinstance(api_key, str) and Path(api_key).is_file():
        api_key = Path(api_key)
    if url is None:
        return Instance(EtherpadLiteClient(api_key, **kwargs))
    return Instance(EtherpadLiteClient(api_key, url, **kwargs))


__all__ = ["Author", "Group", "Instance", "Pad", "Session", "connect"]
