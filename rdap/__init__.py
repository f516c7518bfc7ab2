"""RDAP support: bootstrap server lookups, registry caching, response objects and errors."""

__version__ = "0.9.1"