"""RDAP response objects common to all queries, and the Autnum object."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


class DecodeData:
    """Snapshot of every field of a decoded RDAP object, with decode notes.

    Field names are the RDAP names (``"port43"``), not attribute names. Values
    are kept as decoded and are independent of the object's attributes.
    """

    def __init__(self) -> None:
        self._known: set[str] = set()
        self._values: dict[str, Any] = {}
        self._notes: dict[str, list[str]] = {}

    def notes(self, name: str) -> list[str]:
        """Return the minor warnings recorded while decoding field ``name``."""
        return list(self._notes.get(name, ()))

    def value(self, name: str) -> Any:
        """Return the decoded value of field ``name``, or None."""
        return self._values.get(name)

    def fields(self) -> list[str]:
        """Return the names of all decoded fields, known and unknown."""
        return list(self._values)

    def unknown_fields(self) -> list[str]:
        """Return the names of decoded fields that are not part of the object."""
        return [name for name in self._values if name not in self._known]

    def add_note(self, name: str, note: str) -> None:
        """Record a decoding warning for field ``name``."""
        self._notes.setdefault(name, []).append(note)

    def set_value(self, name: str, value: Any, known: bool) -> None:
        """Record the decoded value of field ``name``."""
        self._values[name] = value
        if known:
            self._known.add(name)

    def __repr__(self) -> str:
        return f"DecodeData(fields={self.fields()!r}, notes={self._notes!r})"


def _decode_data() -> Any:
    return field(default=None, repr=False, compare=False)


def _wire(name: str, **kwargs: Any) -> Any:
    return field(metadata={"rdap": name}, **kwargs)


@dataclass
class Link:
    """A link to another resource on the Internet."""

    decode_data: DecodeData | None = _decode_data()
    value: str = _wire("value", default="")
    rel: str = _wire("rel", default="")
    href: str = _wire("href", default="")
    hreflang: list[str] = _wire("hreflang", default_factory=list)
    title: str = _wire("title", default="")
    media: str = _wire("media", default="")
    type: str = _wire("type", default="")


@dataclass
class Notice:
    """Information about the entire RDAP response."""

    decode_data: DecodeData | None = _decode_data()
    title: str = _wire("title", default="")
    type: str = _wire("type", default="")
    description: list[str] = _wire("description", default_factory=list)
    links: list[Link] = _wire("links", default_factory=list)


@dataclass
class Remark:
    """Information about the containing RDAP object."""

    decode_data: DecodeData | None = _decode_data()
    title: str = _wire("title", default="")
    type: str = _wire("type", default="")
    description: list[str] = _wire("description", default_factory=list)
    links: list[Link] = _wire("links", default_factory=list)


@dataclass
class Event:
    """An event that has occurred or may occur in the future."""

    decode_data: DecodeData | None = _decode_data()
    action: str = _wire("eventAction", default="")
    actor: str = _wire("eventActor", default="")
    date: str = _wire("eventDate", default="")
    links: list[Link] = _wire("links", default_factory=list)


@dataclass
class PublicID:
    """A public identifier mapped to an object class."""

    decode_data: DecodeData | None = _decode_data()
    type: str = _wire("type", default="")
    identifier: str = _wire("identifier", default="")


@dataclass
class Autnum:
    """An Autonomous System registration; a topmost RDAP response object."""

    decode_data: DecodeData | None = _decode_data()
    lang: str = _wire("lang", default="")
    conformance: list[str] = _wire("rdapConformance", default_factory=list)
    object_class_name: str = _wire("objectClassName", default="")
    notices: list[Notice] = _wire("notices", default_factory=list)
    handle: str = _wire("handle", default="")
    start_autnum: int | None = _wire("startAutnum", default=None)
    end_autnum: int | None = _wire("endAutnum", default=None)
    ip_version: str = _wire("ipVersion", default="")
    name: str = _wire("name", default="")
    type: str = _wire("type", default="")
    status: list[str] = _wire("status", default_factory=list)
    country: str = _wire("country", default="")
    entities: list[Any] = _wire("entities", default_factory=list)
    remarks: list[Remark] = _wire("remarks", default_factory=list)
    links: list[Link] = _wire("links", default_factory=list)
    port43: str = _wire("port43", default="")
    events: list[Event] = _wire("events", default_factory=list)