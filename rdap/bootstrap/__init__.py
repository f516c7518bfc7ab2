"""RDAP bootstrapping: Service Registry files, caches and server lookups."""

__all__ = ["cache", "client", "file", "question", "registries"]