"""Bootstrap client: finds the RDAP servers that can answer a query.

The client downloads the IANA Service Registry files (asn.json, dns.json,
ipv4.json, ipv6.json and object-tags.json), keeps them in a cache and answers
bootstrap questions from them. A long-lived client downloads each file only
once per cache period, however many lookups are made.
"""

from __future__ import annotations

import hashlib
from collections.abc import Callable
from urllib.parse import urljoin, urlsplit, urlunsplit

import requests

from rdap.bootstrap.cache import FileState, MemoryCache, RegistryCache
from rdap.bootstrap.question import Answer, Question, RegistryType
from rdap.bootstrap.registries import (
    ASNRegistry,
    DNSRegistry,
    NetRegistry,
    Registry,
    ServiceProviderRegistry,
    new_registry,
)

DEFAULT_BASE_URL = "https://data.iana.org/rdap/"
"""Default location of the Service Registry files."""

DEFAULT_CACHE_TIMEOUT = 24 * 60 * 60.0
"""Default number of seconds a Service Registry file is cached."""


class BootstrapClient:
    """An RDAP bootstrap client.

    ``http`` is the requests session used for downloads, ``base_url`` the
    location of the Service Registry files, ``cache`` the Service Registry
    cache (in memory by default) and ``verbose`` an optional callback for
    progress messages.
    """

    def __init__(
        self,
        http: requests.Session | None = None,
        base_url: str | None = None,
        cache: RegistryCache | None = None,
        verbose: Callable[[str], None] | None = None,
    ) -> None:
        self.http = http if http is not None else requests.Session()
        self.base_url = base_url if base_url is not None else DEFAULT_BASE_URL
        self.cache = cache if cache is not None else MemoryCache(timeout=DEFAULT_CACHE_TIMEOUT)
        self.verbose = verbose
        self._registries: dict[RegistryType, Registry] = {}

    def _say(self, text: str) -> None:
        if self.verbose is not None:
            self.verbose(text)

    def download(self, registry: RegistryType, timeout: float | None = None) -> None:
        """Download one Service Registry file, cache it and refresh the registry.

        Raises requests exceptions for network failures and non-200 replies,
        and ValueError for a malformed document.
        """
        document = self._fetch(registry, timeout)
        parsed = new_registry(registry, document)
        self.cache.save(self.filename_for(registry), document)
        self._registries[registry] = parsed

    def _fetch(self, registry: RegistryType, timeout: float | None) -> bytes:
        response = self.http.get(self._url_for(registry), timeout=timeout)
        with response:
            if response.status_code != 200:
                raise requests.HTTPError(
                    "Server returned non-200 status code: "
                    f"{response.status_code} {response.reason}",
                    response=response,
                )
            return response.content

    def _url_for(self, registry: RegistryType) -> str:
        parts = urlsplit(self.base_url)
        path = parts.path
        if path and not path.endswith("/"):
            path += "/"
        base = urlunsplit((parts.scheme, parts.netloc, path, parts.query, parts.fragment))
        return urljoin(base, registry.filename())

    def _reload_from_cache(self, registry: RegistryType) -> None:
        document = self.cache.load(self.filename_for(registry))
        self._registries[registry] = new_registry(registry, document)

    def _freshen_from_cache(self, registry: RegistryType) -> None:
        if self.cache.state(self.filename_for(registry)) is FileState.SHOULD_RELOAD:
            try:
                self._reload_from_cache(registry)
            except (OSError, ValueError):
                pass

    def lookup(self, question: Question) -> Answer:
        """Return the RDAP base URLs for ``question``.

        The Service Registry file is downloaded if it is not yet loaded.
        """
        self._say("  bootstrap: Looking up...")
        self._say(f"  bootstrap: Question type : {question.registry_type}")
        self._say(f"  bootstrap: Question query: {question.query}")

        registry = question.registry_type
        filename = self.filename_for(registry)
        state = self.cache.state(filename)
        self._say(f"  bootstrap: Cache state: {filename}: {state}")

        force_download = False
        if state is FileState.SHOULD_RELOAD:
            try:
                self._reload_from_cache(registry)
            except (OSError, ValueError) as exc:
                force_download = True
                self._say(f"  bootstrap: Cache load error ({exc}), downloading...")

        if registry not in self._registries or force_download:
            self._say(f"  bootstrap: Downloading {registry.filename()}")
            self.download(registry, question.timeout)
        else:
            self._say("  bootstrap: Using cached Service Registry file")

        answer = self._registries[registry].lookup(question)

        self._say(f"  bootstrap: Looked up '{answer.query}'")
        if answer.entry:
            self._say(f"  bootstrap: Matching entry '{answer.entry}'")
        else:
            self._say("  bootstrap: No match")
        for number, url in enumerate(answer.urls, start=1):
            self._say(f"  bootstrap: Service URL #{number}: '{url}'")

        return answer

    def _current(self, registry: RegistryType, kind: type) -> Registry | None:
        self._freshen_from_cache(registry)
        current = self._registries.get(registry)
        return current if isinstance(current, kind) else None

    def asn(self) -> ASNRegistry | None:
        """Return the loaded ASN registry, or None. Never downloads."""
        return self._current(RegistryType.ASN, ASNRegistry)

    def dns(self) -> DNSRegistry | None:
        """Return the loaded DNS registry, or None. Never downloads."""
        return self._current(RegistryType.DNS, DNSRegistry)

    def ipv4(self) -> NetRegistry | None:
        """Return the loaded IPv4 registry, or None. Never downloads."""
        return self._current(RegistryType.IPV4, NetRegistry)

    def ipv6(self) -> NetRegistry | None:
        """Return the loaded IPv6 registry, or None. Never downloads."""
        return self._current(RegistryType.IPV6, NetRegistry)

    def service_provider(self) -> ServiceProviderRegistry | None:
        """Return the loaded service provider registry, or None. Never downloads."""
        return self._current(RegistryType.SERVICE_PROVIDER, ServiceProviderRegistry)

    def filename_for(self, registry: RegistryType) -> str:
        """Return the cache filename for ``registry``.

        For the default bootstrap service this is the plain filename (e.g.
        ``dns.json``); other services get a six character hash of their URL
        as a prefix (e.g. ``012def_dns.json``) so files are never mixed up.
        """
        filename = registry.filename()
        if self.base_url != DEFAULT_BASE_URL:
            digest = hashlib.sha256(self.base_url.encode("utf-8")).hexdigest()
            filename = f"{digest[:6]}_{filename}"
        return filename