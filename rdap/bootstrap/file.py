"""Parsing of bootstrap Service Registry documents."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlsplit

_FIELDS = ("description", "publication", "version", "services")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


@dataclass
class File:
    """A bootstrap registry file such as dns.json or object-tags.json.

    ``entries`` maps each service entry (e.g. ``"2c00::/12"`` or ``"br"``) to
    its RDAP base URLs. ``document`` holds the raw JSON document.
    """

    description: str = ""
    publication: str = ""
    version: str = ""
    entries: dict[str, list[str]] = field(default_factory=dict)
    document: bytes = b""


def parse_file(document: bytes | str) -> File:
    """Parse a bootstrap registry JSON document.

    Raises ValueError for malformed JSON or a malformed services array.
    Unparsable URLs are skipped; entries left without URLs are dropped.
    """
    raw = document.encode("utf-8") if isinstance(document, str) else bytes(document)
    doc = json.loads(raw)
    if doc is None:
        doc = {}
    if not isinstance(doc, dict):
        raise ValueError("Bootstrap document must be a JSON object")

    values: dict[str, Any] = {}
    for key, value in doc.items():
        lowered = key.lower()
        if lowered in _FIELDS:
            values[lowered] = value

    entries: dict[str, list[str]] = {}
    for service in _services(values.get("services")):
        if len(service) == 2:
            names, raw_urls = service
        elif len(service) == 3:
            _, names, raw_urls = service
        else:
            raise ValueError("Malformed bootstrap (bad services array)")

        urls = [url for url in raw_urls if _is_valid_url(url)]
        if urls:
            for name in names:
                entries[name] = list(urls)

    return File(
        description=_string(values.get("description"), "description"),
        publication=_string(values.get("publication"), "publication"),
        version=_string(values.get("version"), "version"),
        entries=entries,
        document=raw,
    )


def _string(value: Any, name: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"Bootstrap field {name!r} must be a string")
    return value


def _list(value: Any, what: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"Malformed bootstrap ({what} must be an array)")
    return value


def _services(value: Any) -> list[list[list[str]]]:
    return [
        [
            [_string(item, "services") for item in _list(group, "service group")]
            for group in _list(service, "service")
        ]
        for service in _list(value, "services")
    ]


def _is_valid_url(raw: str) -> bool:
    if any(ord(char) < 0x20 or ord(char) == 0x7F for char in raw):
        return False
    if raw.startswith(":"):
        return False
    if _BAD_ESCAPE.search(raw):
        return False
    try:
        urlsplit(raw).port
    except ValueError:
        return False
    return True