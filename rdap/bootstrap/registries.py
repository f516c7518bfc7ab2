"""Bootstrap Service Registries: AS numbers, domains, IP networks, service providers."""

from __future__ import annotations

import abc
import bisect
import ipaddress
import re
from collections.abc import Callable
from dataclasses import dataclass

from rdap.bootstrap.file import File, parse_file
from rdap.bootstrap.question import Answer, Question, RegistryType

_MAX_ASN = 2**32 - 1
_DIGITS = re.compile(r"[0-9]+")

IPNetwork = ipaddress.IPv4Network | ipaddress.IPv6Network


class Registry(abc.ABC):
    """A parsed Service Registry that answers bootstrap questions.

    ``file`` describes the registry's JSON document.
    """

    def __init__(self, file: File) -> None:
        self.file = file

    @abc.abstractmethod
    def lookup(self, question: Question) -> Answer:
        """Return the RDAP base URLs for ``question``."""


def _parse_document(document: bytes | str, what: str) -> File:
    try:
        return parse_file(document)
    except ValueError as exc:
        raise ValueError(f"Error parsing {what}: {exc}") from exc


def _search(count: int, predicate: Callable[[int], bool]) -> int:
    """Return the smallest index in [0, count) where predicate holds, else count."""
    low, high = 0, count
    while low < high:
        middle = (low + high) // 2
        if predicate(middle):
            high = middle
        else:
            low = middle + 1
    return low


def _parse_uint32(text: str) -> int:
    if not _DIGITS.fullmatch(text):
        raise ValueError(f"invalid AS number {text!r}")
    value = int(text)
    if value > _MAX_ASN:
        raise ValueError(f"AS number {text!r} out of range")
    return value


def parse_asn(asn: str) -> int:
    """Parse an AS number such as ``"AS1234"``, ``"as1234"`` or ``"1234"``."""
    return _parse_uint32(asn.lower().lstrip("as"))


def parse_asn_range(asn_range: str) -> tuple[int, int]:
    """Parse ``"1234"`` or ``"1234-5678"`` into an ordered (first, last) pair."""
    parts = asn_range.split("-")
    if len(parts) not in (1, 2):
        raise ValueError("Malformed ASN range")
    first = _parse_uint32(parts[0])
    last = _parse_uint32(parts[1]) if len(parts) == 2 else first
    return (first, last) if first <= last else (last, first)


@dataclass(frozen=True)
class _ASNRange:
    first: int
    last: int
    urls: list[str]

    def __str__(self) -> str:
        if self.first == self.last:
            return f"AS{self.first}"
        return f"AS{self.first}-AS{self.last}"


class ASNRegistry(Registry):
    """The AS number Service Registry (asn.json)."""

    def __init__(self, document: bytes | str) -> None:
        super().__init__(_parse_document(document, "ASN registry"))
        ranges = []
        for entry, urls in self.file.entries.items():
            try:
                first, last = parse_asn_range(entry)
            except ValueError:
                continue
            ranges.append(_ASNRange(first, last, urls))
        self._ranges = sorted(ranges, key=lambda item: item.first)

    def lookup(self, question: Question) -> Answer:
        """Look up an AS number such as ``"AS1234"``; raise ValueError if malformed."""
        asn = parse_asn(question.query)
        ranges = self._ranges
        index = _search(len(ranges), lambda i: asn <= ranges[i].last)

        entry = ""
        urls: list[str] = []
        if index < len(ranges) and ranges[index].first <= asn <= ranges[index].last:
            entry = str(ranges[index])
            urls = list(ranges[index].urls)

        return Answer(query=str(asn), entry=entry, urls=urls)


class DNSRegistry(Registry):
    """The domain name Service Registry (dns.json)."""

    def __init__(self, document: bytes | str) -> None:
        super().__init__(_parse_document(document, "DNS bootstrap"))

    def lookup(self, question: Question) -> Answer:
        """Find the longest registered suffix of the domain, down to the root zone."""
        query = question.query.removesuffix(".").lower()
        fqdn = query
        entries = self.file.entries

        while fqdn not in entries and fqdn:
            _, _, fqdn = fqdn.partition(".")

        return Answer(query=query, entry=fqdn, urls=list(entries.get(fqdn, ())))


def _parse_cidr(text: str) -> IPNetwork:
    address, separator, prefix = text.partition("/")
    if not separator or "%" in address or not _DIGITS.fullmatch(prefix):
        raise ValueError(f"invalid CIDR address: {text}")
    try:
        ip = ipaddress.ip_address(address)
    except ValueError:
        raise ValueError(f"invalid CIDR address: {text}") from None
    length = int(prefix)
    if length > ip.max_prefixlen:
        raise ValueError(f"invalid CIDR address: {text}")
    return ipaddress.ip_network((ip, length), strict=False)


@dataclass(frozen=True)
class _NetEntry:
    network: IPNetwork
    urls: list[str]


class NetRegistry(Registry):
    """The IPv4 (ipv4.json) or IPv6 (ipv6.json) Service Registry."""

    def __init__(self, document: bytes | str, ip_version: int) -> None:
        if ip_version not in (4, 6):
            raise ValueError(f"Unknown IP version {ip_version}")
        super().__init__(_parse_document(document, "net registry file"))
        self.ip_version = ip_version

        networks: dict[int, list[_NetEntry]] = {}
        for cidr, urls in self.file.entries.items():
            try:
                network = _parse_cidr(cidr)
            except ValueError:
                continue
            if network.version != ip_version:
                continue
            networks.setdefault(network.prefixlen, []).append(_NetEntry(network, urls))

        self._networks = {
            size: sorted(entries, key=lambda item: int(item.network.network_address))
            for size, entries in networks.items()
        }

    def lookup(self, question: Question) -> Answer:
        """Find the most specific network containing an address or CIDR range.

        Raises ValueError for malformed input or an address of the other IP version.
        """
        query = question.query
        if "/" not in query:
            query = f"{query}/{32 if self.ip_version == 4 else 128}"

        lookup_net = _parse_cidr(query)
        if lookup_net.version != self.ip_version:
            raise ValueError("Lookup address has wrong IP protocol")

        address = lookup_net.network_address
        for size in sorted(self._networks, reverse=True):
            if size > lookup_net.prefixlen:
                continue
            entries = self._networks[size]
            index = _search(
                len(entries),
                lambda i: address in entries[i].network
                or int(entries[i].network.network_address) >= int(address),
            )
            if index < len(entries) and address in entries[index].network:
                match = entries[index]
                return Answer(query=query, entry=str(match.network), urls=list(match.urls))

        return Answer(query=query)


class ServiceProviderRegistry(Registry):
    """The service provider object tag registry (object-tags.json)."""

    def __init__(self, document: bytes | str) -> None:
        super().__init__(_parse_document(document, "Service Provider bootstrap"))

    def lookup(self, question: Question) -> Answer:
        """Look up the service tag of an entity handle, e.g. ``FRNIC`` in ``12345-FRNIC``.

        Missing, malformed and unknown tags give an answer without URLs.
        """
        query = question.query
        dash = query.rfind("-")
        if dash == -1 or dash == len(query) - 1:
            return Answer(query=query)

        service = query[dash + 1 :]
        urls = self.file.entries.get(service)
        if urls is None:
            return Answer(query=query)
        return Answer(query=query, entry=service, urls=list(urls))


def new_registry(registry_type: RegistryType, document: bytes | str) -> Registry:
    """Parse ``document`` as the Service Registry of ``registry_type``."""
    if registry_type is RegistryType.ASN:
        return ASNRegistry(document)
    if registry_type is RegistryType.DNS:
        return DNSRegistry(document)
    if registry_type is RegistryType.IPV4:
        return NetRegistry(document, 4)
    if registry_type is RegistryType.IPV6:
        return NetRegistry(document, 6)
    if registry_type is RegistryType.SERVICE_PROVIDER:
        return ServiceProviderRegistry(document)
    raise ValueError(f"Unknown registry type {registry_type!r}")