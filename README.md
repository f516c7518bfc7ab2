# rdap

Tools for the bootstrapping step of RDAP (Registration Data Access
Protocol): given a domain name, an IP address or network, an AS number or an
entity handle, find the RDAP servers that can answer a query about it.

The package reads the RDAP Service Registry files (`asn.json`, `dns.json`,
`ipv4.json`, `ipv6.json` and `object-tags.json`), keeps them in a memory or
disk cache, and looks queries up in them. It also provides data classes for
common RDAP response objects and the error type used by RDAP clients.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Looking up RDAP servers

```python
from rdap.bootstrap.client import BootstrapClient
from rdap.bootstrap.question import Question, RegistryType

client = BootstrapClient()
answer = client.lookup(Question(registry_type=RegistryType.DNS, query="www.example.br"))

print(answer.query)   # the query as looked up (trailing dot removed, lowercased)
print(answer.entry)   # the matching registry entry, e.g. "br"; "" if none
for url in answer.urls:
    print(url)
```

`lookup` downloads the matching Service Registry file the first time it is
needed, and reuses the loaded copy afterwards. If a shared disk cache holds a
newer copy written by another client, that copy is reloaded first.
`Question.with_timeout` returns a copy of a question whose `timeout` (in
seconds) is passed to the download.

`BootstrapClient` takes optional `http` (a `requests.Session`), `base_url`
(default `https://data.iana.org/rdap/`), `cache` (default a `MemoryCache`
with a 24 hour timeout) and `verbose` (a callback receiving progress
messages). With a non-default `base_url`, cache filenames get a six character
hash prefix (see `filename_for`), so files from different services are never
mixed up.

The registry types are:

| `RegistryType`                   | Example queries                            |
|----------------------------------|--------------------------------------------|
| `RegistryType.DNS`               | `example.cz`, `sub.example.com`            |
| `RegistryType.IPV4`              | `192.0.2.0`, `192.0.2.0/25`                |
| `RegistryType.IPV6`              | `2001:db8::`, `2001:db8::/62`              |
| `RegistryType.ASN`               | `AS2856`, `as2856`, `2856`                 |
| `RegistryType.SERVICE_PROVIDER`  | `12345-FRNIC` (the tag after the last `-`) |

`client.download(registry, timeout=None)` fetches one file explicitly. It
raises a `requests` exception on network failures or a non-200 reply, and
`ValueError` for a malformed document.

The loaded registries are available without any network traffic through
`client.asn()`, `client.dns()`, `client.ipv4()`, `client.ipv6()` and
`client.service_provider()`; each returns `None` until its file has been
loaded, through `download`, `lookup`, or a newer copy in a shared disk cache.

## Working with registry files directly

```python
from rdap.bootstrap.file import parse_file
from rdap.bootstrap.question import Question, RegistryType
from rdap.bootstrap.registries import new_registry

with open("asn.json", "rb") as handle:
    document = handle.read()

registry_file = parse_file(document)
print(registry_file.version, len(registry_file.entries))

registry = new_registry(RegistryType.ASN, document)
answer = registry.lookup(Question(registry_type=RegistryType.ASN, query="AS1768"))
```

`parse_file` raises `ValueError` for invalid JSON or a malformed services
array; unparsable URLs are skipped. `ASNRegistry`, `DNSRegistry`,
`NetRegistry` and `ServiceProviderRegistry` share the `Registry` interface
(`lookup` and the `file` attribute). A malformed query (an AS number that is
not a number, an unparsable IP network, or an address of the other IP
version) raises `ValueError`; a query that simply matches nothing returns an
answer with an empty `entry` and no URLs. `parse_asn` and `parse_asn_range`
are available on their own.

## Caching

`rdap.bootstrap.cache` provides `MemoryCache` and `DiskCache`, both following
the `RegistryCache` interface (`load`, `save`, `state`, and a `timeout` in
seconds). `state` reports a `FileState`: `ABSENT`, `GOOD`, `SHOULD_RELOAD`
(a newer copy was written to a shared disk cache by another cache object) or
`EXPIRED`. Expired files can still be loaded; loading a missing file raises
an `OSError`.

A `DiskCache` keeps its files in `~/.openrdap` by default (pass `directory=`
to change it) and creates the directory as needed; `init_dir` returns `True`
when it created the directory.

## Response objects and errors

`rdap.objects` defines the data classes `Link`, `Notice`, `Remark`, `Event`,
`PublicID` and `Autnum`, and `DecodeData`, which records decoded field values
and notes (`value`, `fields`, `unknown_fields`, `notes`, `set_value`,
`add_note`).

`rdap.errors` defines `ClientError`, carrying a `ClientErrorType`, and the
helpers `is_client_error` and `client_error_from_rdap_error`.

## What this package does not do

- It has no command-line program; it is used as a library.
- It does not send RDAP queries to the servers it finds, and it does not
  decode RDAP responses into the classes in `rdap.objects`; those classes
  are plain containers to be filled by the caller.