"""Single active log file with size-based or time-based rotation."""

import logging
import os
import threading
from datetime import datetime, timezone

from log_retention.config import Config
from log_retention.policy import ActiveFileState, build_policy

logger = logging.getLogger(__name__)


class ActiveFileWriter:
    """Owns the one open output file of a log directory.

    Writes, the byte counter and the rotation swap all happen under a single
    lock, so a rotation never lands in the middle of an append. Nothing is
    logged while the lock is held: the writer usually sits behind a logging
    handler, and logging from inside the lock would re-enter it.
    """

    def __init__(self, config: Config, policy=None, broadcaster=None, time_func=None):
        self._config = config
        self._policy = policy or build_policy(config)
        self._broadcaster = broadcaster
        self._time_func = time_func or (lambda: datetime.now(timezone.utc))
        self._lock = threading.Lock()

        now = self._time_func()
        path = os.path.join(config.log_dir, now.strftime(config.name_format) + ".log")
        os.makedirs(os.path.dirname(path), exist_ok=True)
        handle = open(path, "ab", buffering=0)
        size = os.fstat(handle.fileno()).st_size
        self._state = ActiveFileState(handle=handle, path=path, bytes_written=size, opened_at=now)

    @property
    def current_path(self) -> str | None:
        with self._lock:
            return self._state.path if self._state else None

    @property
    def bytes_written(self) -> int:
        with self._lock:
            return self._state.bytes_written if self._state else 0

    @property
    def opened_at(self) -> datetime | None:
        with self._lock:
            return self._state.opened_at if self._state else None

    def write(self, data: bytes) -> int:
        """Append *data* to the active file and return the number of bytes written.

        I/O errors propagate to the caller. A failed rotation is not an error
        for the caller: the current file stays active and rotation is retried
        on the next write.
        """
        problems = []
        with self._lock:
            if self._state is None:
                raise ValueError("write to closed log writer")

            n = self._state.handle.write(data) or 0
            self._state.bytes_written += n

            if n and self._broadcaster is not None:
                self._broadcaster.publish(bytes(data[:n]))

            now = self._time_func()
            if self._policy.should_rotate(self._state, now):
                self._rotate(now, problems)

        for message, args in problems:
            logger.error(message, *args)
        return n

    def _rotate(self, now: datetime, problems: list):
        old = self._state
        try:
            handle, path = self._create_next(now)
        except OSError as e:
            problems.append(("Rotation failed, still writing to %s: %s", (old.path, e)))
            return

        self._state = ActiveFileState(handle=handle, path=path, bytes_written=0, opened_at=now)
        try:
            old.handle.close()
        except OSError as e:
            problems.append(("Failed to close rotated file %s: %s", (old.path, e)))

    def _create_next(self, now: datetime):
        """Create a fresh file for *now*, adding a _N suffix if the name is taken."""
        stem = now.strftime(self._config.name_format)
        path = os.path.join(self._config.log_dir, stem + ".log")
        os.makedirs(os.path.dirname(path), exist_ok=True)

        suffix = 0
        while True:
            try:
                return open(path, "xb", buffering=0), path
            except FileExistsError:
                suffix += 1
                path = os.path.join(self._config.log_dir, f"{stem}_{suffix}.log")

    def close(self):
        with self._lock:
            if self._state is not None:
                self._state.handle.close()
                self._state = None
