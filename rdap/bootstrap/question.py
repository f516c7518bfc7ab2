"""Bootstrap registry types, questions and answers."""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass, field


class RegistryType(enum.Enum):
    """A bootstrap Service Registry."""

    DNS = 0
    IPV4 = 1
    IPV6 = 2
    ASN = 3
    SERVICE_PROVIDER = 4

    def __str__(self) -> str:
        return _NAMES[self]

    def filename(self) -> str:
        """Return the registry's JSON document filename, e.g. ``dns.json``."""
        return _FILENAMES[self]


_NAMES = {
    RegistryType.DNS: "dns",
    RegistryType.IPV4: "ipv4",
    RegistryType.IPV6: "ipv6",
    RegistryType.ASN: "asn",
    RegistryType.SERVICE_PROVIDER: "serviceprovider",
}

_FILENAMES = {
    RegistryType.ASN: "asn.json",
    RegistryType.DNS: "dns.json",
    RegistryType.IPV4: "ipv4.json",
    RegistryType.IPV6: "ipv6.json",
    RegistryType.SERVICE_PROVIDER: "object-tags.json",
}


@dataclass(frozen=True)
class Question:
    """A bootstrap query against one Service Registry.

    ``timeout`` is the number of seconds network transfers may take while
    answering the question; None means no limit.
    """

    registry_type: RegistryType = RegistryType.DNS
    query: str = ""
    timeout: float | None = None

    def with_timeout(self, timeout: float | None) -> Question:
        """Return a copy of the question with ``timeout``."""
        return dataclasses.replace(self, timeout=timeout)


@dataclass
class Answer:
    """The result of bootstrapping a single query.

    ``query`` is the query as looked up, after any canonicalisation (such as
    lowercasing domain names or removing "AS" from AS numbers). ``entry`` is
    the matching service entry, empty if there was no match. ``urls`` are the
    RDAP base URLs.
    """

    query: str = ""
    entry: str = ""
    urls: list[str] = field(default_factory=list)