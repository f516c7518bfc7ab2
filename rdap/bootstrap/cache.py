"""Caches for bootstrap Service Registry files, in memory or on disk."""

from __future__ import annotations

import abc
import enum
import errno
import os
import stat
import time
from pathlib import Path

DEFAULT_TIMEOUT = 24 * 60 * 60.0
"""Default number of seconds a cached file stays fresh."""

DEFAULT_CACHE_DIR_NAME = ".openrdap"


class FileState(enum.Enum):
    """Cache state of a single Service Registry file."""

    ABSENT = 0
    """The file is not in the cache."""
    GOOD = 1
    """The file is cached and the latest version has already been loaded or saved."""
    SHOULD_RELOAD = 2
    """The file is cached and a newer version is available to load."""
    EXPIRED = 3
    """The file is cached but has expired; it can still be loaded."""

    def __str__(self) -> str:
        return _STATE_NAMES[self]


_STATE_NAMES = {
    FileState.ABSENT: "not cached",
    FileState.GOOD: "good",
    FileState.SHOULD_RELOAD: "good",
    FileState.EXPIRED: "expired",
}


class RegistryCache(abc.ABC):
    """A cache of Service Registry files.

    ``timeout`` is the number of seconds a file is kept before its state
    becomes ``FileState.EXPIRED``.
    """

    timeout: float

    @abc.abstractmethod
    def load(self, filename: str) -> bytes:
        """Return the cached contents of ``filename``; raise OSError if absent."""

    @abc.abstractmethod
    def save(self, filename: str, data: bytes) -> None:
        """Store ``data`` as ``filename``."""

    @abc.abstractmethod
    def state(self, filename: str) -> FileState:
        """Return the cache state of ``filename``."""


class MemoryCache(RegistryCache):
    """Caches Service Registry files in memory."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.timeout = timeout
        self._data: dict[str, bytes] = {}
        self._mtime: dict[str, float] = {}

    def save(self, filename: str, data: bytes) -> None:
        self._data[filename] = bytes(data)
        self._mtime[filename] = time.time()

    def load(self, filename: str) -> bytes:
        """Return the file even when expired; raise FileNotFoundError if absent."""
        try:
            return self._data[filename]
        except KeyError:
            raise FileNotFoundError(f"File {filename} not in cache") from None

    def state(self, filename: str) -> FileState:
        mtime = self._mtime.get(filename)
        if mtime is None:
            return FileState.ABSENT
        if mtime + self.timeout < time.time():
            return FileState.EXPIRED
        return FileState.GOOD


class DiskCache(RegistryCache):
    """Caches Service Registry files in a directory, by default ``~/.openrdap``.

    File modification times decide expiry, and let several caches share one
    directory: a file saved by another cache reads as ``SHOULD_RELOAD``.
    """

    def __init__(
        self,
        directory: str | os.PathLike[str] | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.timeout = timeout
        self.directory: str | os.PathLike[str] = (
            directory if directory is not None else Path.home() / DEFAULT_CACHE_DIR_NAME
        )
        self._last_loaded: dict[str, int] = {}

    def init_dir(self) -> bool:
        """Create the cache directory if missing; return True if it was created."""
        path = Path(self.directory)
        try:
            info = os.stat(path)
        except FileNotFoundError:
            path.mkdir(mode=0o775)
            return True
        if not stat.S_ISDIR(info.st_mode):
            raise NotADirectoryError(errno.ENOTDIR, "Cache dir is not a dir", str(path))
        return False

    def save(self, filename: str, data: bytes) -> None:
        """Write ``data`` to disk, creating the cache directory if necessary."""
        self.init_dir()
        fd = os.open(self._path(filename), os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o664)
        with os.fdopen(fd, "wb") as handle:
            handle.write(bytes(data))
        try:
            mtime = self._mtime_ns(filename)
        except OSError as exc:
            raise OSError(
                exc.errno, f"File {filename} failed to save correctly: {exc.strerror}"
            ) from exc
        self._last_loaded[filename] = mtime

    def load(self, filename: str) -> bytes:
        """Read the file from disk, even when expired; raise OSError if missing."""
        try:
            mtime = self._mtime_ns(filename)
        except OSError as exc:
            raise OSError(exc.errno, f"Unable to load {filename}: {exc.strerror}") from exc
        data = self._path(filename).read_bytes()
        self._last_loaded[filename] = mtime
        return data

    def state(self, filename: str) -> FileState:
        try:
            mtime = self._mtime_ns(filename)
        except OSError:
            return FileState.ABSENT
        expiry = time.time_ns() - round(self.timeout * 1_000_000_000)
        if mtime <= expiry:
            return FileState.EXPIRED
        last_loaded = self._last_loaded.get(filename)
        if last_loaded is not None and mtime <= last_loaded:
            return FileState.GOOD
        return FileState.SHOULD_RELOAD

    def _mtime_ns(self, filename: str) -> int:
        return os.stat(self._path(filename)).st_mtime_ns

    def _path(self, filename: str) -> Path:
        return Path(self.directory) / filename