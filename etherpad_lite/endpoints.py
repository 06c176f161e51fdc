"""Lookup table of the Etherpad Lite API methods exposed by the client."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Tuple

from etherpad_lite.errors import InvalidArgument

GET = "GET"
POST = "POST"

_CAMEL_RE = re.compile(r"(?<=[a-z0-9])([A-Z]+)")


def snake_case(name: str) -> str:
    """``getReadOnlyID`` -> ``get_read_only_id``."""
    return _CAMEL_RE.sub(r"_\1", name).lower()


@dataclass(frozen=True, slots=True)
class Endpoint:
    name: str
    verb: str
    required: Tuple[str, ...] = ()
    optional: Tuple[str, ...] = ()
    doc: str = ""

    @property
    def python_name(self) -> str:
        return snake_case(self.name)

    def build_params(self, arguments: Mapping[str, Any]) -> Dict[str, Any]:
        """Map snake_case keyword arguments onto wire parameter names.

        Required arguments must be present and not ``None``. Optional ones are
        left out entirely when ``None``.
        """

        wire = {snake_case(key): key for key in self.required + self.optional}
        unknown = sorted(set(arguments) - set(wire))
        if unknown:
            raise InvalidArgument(f"{self.name} got unexpected arguments: {', '.join(unknown)}")
        params: Dict[str, Any] = {}
        for key in self.required:
            value = arguments.get(snake_case(key))
            if value is None:
                raise InvalidArgument(f"{self.name} requires {snake_case(key)}")
            params[key] = value
        for key in self.optional:
            value = arguments.get(snake_case(key))
            if value is not None:
                params[key] = value
        return params


_TABLE = (
    # Groups
    Endpoint("createGroup", POST, doc="Creates a new group."),
    Endpoint(
        "createGroupIfNotExistsFor",
        POST,
        ("groupMapper",),
        doc="Creates a group for groupMapper unless one is already mapped.",
    ),
    Endpoint("deleteGroup", POST, ("groupID",), doc="Deletes a group."),
    Endpoint("listPads", GET, ("groupID",), doc="Returns all pads of a group."),
    Endpoint(
        "createGroupPad",
        POST,
        ("groupID", "padName"),
        ("text",),
        doc="Creates a pad inside a group.",
    ),
    # Authors
    Endpoint("createAuthor", POST, (), ("name",), doc="Creates a new author."),
    Endpoint(
        "createAuthorIfNotExistsFor",
        POST,
        ("authorMapper",),
        ("name",),
        doc="Creates an author for authorMapper unless one is already mapped.",
    ),
    # Sessions
    Endpoint(
        "createSession",
        POST,
        ("groupID", "authorID", "validUntil"),
        doc="Creates a session for an author in a group, valid until a Unix timestamp.",
    ),
    Endpoint("deleteSession", POST, ("sessionID",), doc="Deletes a session."),
    Endpoint("getSessionInfo", GET, ("sessionID",), doc="Returns information about a session."),
    Endpoint("listSessionsOfGroup", GET, ("groupID",), doc="Returns all sessions of a group."),
    Endpoint("listSessionsOfAuthor", GET, ("authorID",), doc="Returns all sessions of an author."),
    # Pad content
    Endpoint("getText", GET, ("padID",), ("rev",), doc="Returns the text of a pad, optionally at a revision."),
    Endpoint("setText", POST, ("padID", "text"), doc="Sets the text of a pad."),
    Endpoint("getHTML", GET, ("padID",), ("rev",), doc="Returns the HTML of a pad, optionally at a revision."),
    Endpoint("setHTML", POST, ("padID", "html"), doc="Sets the HTML of a pad."),
    # Pads
    Endpoint("createPad", POST, ("padID",), ("text",), doc="Creates a public pad."),
    Endpoint("getRevisionsCount", GET, ("padID",), doc="Returns the number of revisions of a pad."),
    Endpoint("deletePad", POST, ("padID",), doc="Deletes a pad."),
    Endpoint("getReadOnlyID", GET, ("padID",), doc="Returns the read-only id of a pad."),
    Endpoint("setPublicStatus", POST, ("padID", "publicStatus"), doc="Sets the public status of a group pad."),
    Endpoint("getPublicStatus", GET, ("padID",), doc="Returns the public status of a group pad."),
    Endpoint("setPassword", POST, ("padID", "password"), doc="Sets the password of a group pad."),
    Endpoint("isPasswordProtected", GET, ("padID",), doc="Returns whether a pad has a password."),
)

ENDPOINTS: Dict[str, Endpoint] = {endpoint.name: endpoint for endpoint in _TABLE}


def lookup(name: str) -> Endpoint:
    try:
        return ENDPOINTS[name]
    except KeyError:
        raise InvalidArgument(f"{name!r} is not a known API method") from None


__all__ = ["ENDPOINTS", "Endpoint", "GET", "POST", "lookup", "snake_case"]
