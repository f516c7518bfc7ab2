import json
import re

import pytest
import requests
import responses

from rdap.bootstrap.cache import DiskCache, MemoryCache
from rdap.bootstrap.client import DEFAULT_BASE_URL, BootstrapClient
from rdap.bootstrap.question import Question, RegistryType
from rdap.bootstrap.registries import DNSRegistry

IANA = "https://data.iana.org/rdap/"


def _document(services):
    return json.dumps(
        {
            "description": "RDAP bootstrap file",
            "publication": "2017-01-01T00:00:00Z",
            "version": "1.0",
            "services": services,
        }
    )


ASN_JSON = _document(
    [
        [["1768-1769"], ["https://rdap.apnic.net/"]],
        [["287"], ["https://rdap.arin.net/registry", "http://rdap.arin.net/registry"]],
        [["265629-266652"], ["https://rdap.lacnic.net/rdap/"]],
    ]
)
DNS_JSON = _document(
    [
        [["br"], ["https://rdap.registro.br/"]],
        [["cz"], ["https://rdap.nic.cz/"]],
        [["fr"], ["https://rdap.nic.fr/"]],
    ]
)
IPV4_JSON = _document(
    [
        [
            ["41.0.0.0/8", "102.0.0.0/8"],
            ["https://rdap.afrinic.net/rdap/", "http://rdap.afrinic.net/rdap/"],
        ]
    ]
)
IPV6_JSON = _document([[["2001:1400::/23"], ["https://rdap.db.ripe.net/"]]])
OBJECT_TAGS_JSON = _document(
    [[["hostmaster@example.com"], ["FRNIC"], ["https://rdap.nic.fr/"]]]
)

BOOTSTRAP = {
    "asn.json": ASN_JSON,
    "dns.json": DNS_JSON,
    "ipv4.json": IPV4_JSON,
    "ipv6.json": IPV6_JSON,
    "object-tags.json": OBJECT_TAGS_JSON,
}


@pytest.fixture
def mock_http():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


@pytest.fixture
def iana(mock_http):
    for name, body in BOOTSTRAP.items():
        mock_http.add(responses.GET, IANA + name, body=body, status=200)
    return mock_http


def test_download(iana):
    client = BootstrapClient()
    client.download(RegistryType.DNS)

    assert client.asn() is None
    assert isinstance(client.dns(), DNSRegistry)
    assert client.ipv4() is None
    assert client.ipv6() is None


@pytest.mark.parametrize(
    "registry, query, urls",
    [
        (RegistryType.ASN, "as1768", ["https://rdap.apnic.net/"]),
        (RegistryType.DNS, "example.br", ["https://rdap.registro.br/"]),
        (
            RegistryType.IPV4,
            "41.0.0.0",
            ["https://rdap.afrinic.net/rdap/", "http://rdap.afrinic.net/rdap/"],
        ),
        (RegistryType.IPV6, "2001:1400::", ["https://rdap.db.ripe.net/"]),
        (RegistryType.SERVICE_PROVIDER, "12345-FRNIC", ["https://rdap.nic.fr/"]),
    ],
)
def test_lookups(iana, registry, query, urls):
    client = BootstrapClient()
    answer = client.lookup(Question(registry_type=registry, query=query))
    assert answer.urls == urls


def test_lookup_with_download_error(mock_http):
    for name in ("asn.json", "dns.json", "ipv4.json", "ipv6.json"):
        mock_http.add(responses.GET, IANA + name, body="<html>404</html>", status=404)

    client = BootstrapClient()
    with pytest.raises(requests.HTTPError, match="non-200 status code: 404"):
        client.lookup(Question(registry_type=RegistryType.DNS, query="example.br"))
    assert client.dns() is None


def test_lookup_downloads_once(iana):
    client = BootstrapClient()
    question = Question(registry_type=RegistryType.DNS, query="example.cz")
    first = client.lookup(question)
    second = client.lookup(question)

    assert first.urls == ["https://rdap.nic.cz/"]
    assert second.entry == "cz"
    assert len(iana.calls) == 1


def test_download_saves_to_cache(iana):
    cache = MemoryCache()
    client = BootstrapClient(cache=cache)
    client.download(RegistryType.ASN)
    assert cache.load("asn.json") == ASN_JSON.encode("utf-8")


def test_malformed_document_is_not_stored(mock_http):
    mock_http.add(responses.GET, IANA + "dns.json", body="{not json", status=200)
    cache = MemoryCache()
    client = BootstrapClient(cache=cache)

    with pytest.raises(ValueError):
        client.download(RegistryType.DNS)
    assert client.dns() is None
    with pytest.raises(FileNotFoundError):
        cache.load("dns.json")


def test_filename_for_default_base_url():
    client = BootstrapClient()
    assert client.base_url == DEFAULT_BASE_URL
    assert client.filename_for(RegistryType.DNS) == "dns.json"
    assert client.filename_for(RegistryType.SERVICE_PROVIDER) == "object-tags.json"


def test_filename_for_custom_base_url():
    first = BootstrapClient(base_url="https://rdap.example.org/one")
    second = BootstrapClient(base_url="https://rdap.example.org/two")

    name_one = first.filename_for(RegistryType.DNS)
    name_two = second.filename_for(RegistryType.DNS)

    assert re.fullmatch(r"[0-9a-f]{6}_dns\.json", name_one)
    assert re.fullmatch(r"[0-9a-f]{6}_dns\.json", name_two)
    assert name_one[:6] != name_two[:6]
    assert first.filename_for(RegistryType.ASN)[:6] == name_one[:6]


def test_custom_base_url_without_trailing_slash(mock_http):
    mock_http.add(
        responses.GET, "https://rdap.example.org/custom/dns.json", body=DNS_JSON, status=200
    )
    client = BootstrapClient(base_url="https://rdap.example.org/custom")
    answer = client.lookup(Question(registry_type=RegistryType.DNS, query="www.EXAMPLE.BR"))

    assert answer.entry == "br"
    assert answer.urls == ["https://rdap.registro.br/"]
    assert mock_http.calls[0].request.url == "https://rdap.example.org/custom/dns.json"


def test_disk_cache_shared_between_clients(iana, tmp_path):
    directory = tmp_path / ".openrdap"
    first = BootstrapClient(cache=DiskCache(directory))
    first.download(RegistryType.DNS)
    assert len(iana.calls) == 1

    second = BootstrapClient(cache=DiskCache(directory))
    registry = second.dns()
    assert isinstance(registry, DNSRegistry)
    assert registry.lookup(Question(query="example.fr")).urls == ["https://rdap.nic.fr/"]

    answer = second.lookup(Question(registry_type=RegistryType.DNS, query="example.cz"))
    assert answer.urls == ["https://rdap.nic.cz/"]
    assert len(iana.calls) == 1


def test_verbose_messages(iana):
    messages = []
    client = BootstrapClient(verbose=messages.append)
    client.lookup(Question(registry_type=RegistryType.DNS, query="example.br"))

    assert messages[0] == "  bootstrap: Looking up..."
    assert "  bootstrap: Question type : dns" in messages
    assert "  bootstrap: Cache state: dns.json: not cached" in messages
    assert "  bootstrap: Downloading dns.json" in messages
    assert "  bootstrap: Matching entry 'br'" in messages
    assert messages[-1] == "  bootstrap: Service URL #1: 'https://rdap.registro.br/'"


def test_verbose_reports_no_match(iana):
    messages = []
    client = BootstrapClient(verbose=messages.append)
    answer = client.lookup(Question(registry_type=RegistryType.ASN, query="999999"))

    assert answer.urls == []
    assert "  bootstrap: No match" in messages


def test_lookup_bad_query_raises(iana):
    client = BootstrapClient()
    with pytest.raises(ValueError):
        client.lookup(Question(registry_type=RegistryType.ASN, query="not-a-number"))