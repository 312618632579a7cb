"""Read access to the log directory: list, open and download files."""

import os
from dataclasses import dataclass

from log_retention import path_guard
from log_retention.errors import DirectoryError, InvalidPathError, LogFileError


@dataclass(frozen=True)
class LogFileEntry:
    name: str
    size: int

    def to_dict(self) -> dict:
        return {"Name": self.name, "Size": self.size}


class LogDirectory:
    def __init__(self, directory: str):
        self._directory = directory

    @property
    def path(self) -> str:
        return self._directory

    def list(self) -> list[LogFileEntry]:
        """Every entry in the directory, sorted by name. Re-reads the directory each call."""
        entries = []
        try:
            with os.scandir(self._directory) as it:
                for e in it:
                    try:
                        size = e.stat(follow_symlinks=False).st_size
                    except FileNotFoundError:
                        # Removed (e.g. by the sweeper) since the scan started
                        continue
                    entries.append(LogFileEntry(e.name, size))
        except OSError as e:
            raise DirectoryError(f"cannot list {self._directory}: {e}") from e
        entries.sort(key=lambda entry: entry.name)
        return entries

    def resolve(self, name: str) -> str:
        path = path_guard.resolve(self._directory, name)
        if path is None:
            raise InvalidPathError(f"invalid file: {name!r}")
        return path

    def open(self, name: str):
        """Open a log file for binary reading. The caller closes it."""
        path = self.resolve(name)
        try:
            return open(path, "rb")
        except OSError as e:
            raise LogFileError(f"cannot open {name}: {e}") from e

    def download(self, name: str):
        """Like open(), plus the attachment file name for the response."""
        return self.open(name), os.path.basename(name)
