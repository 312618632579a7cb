"""logging.Handler that persists records through an ActiveFileWriter."""

import logging
import threading


class WriterHandler(logging.Handler):
    """Formats each record as a UTF-8 line and hands it to the writer.

    A record emitted while this thread is already inside emit() (the writer
    reporting its own rotation failure) is not written back into the file.
    """

    def __init__(self, writer, level=logging.NOTSET):
        super().__init__(level)
        self._writer = writer
        self._local = threading.local()

    def emit(self, record: logging.LogRecord):
        if getattr(self._local, "busy", False):
            return
        self._local.busy = True
        try:
            line = self.format(record) + "\n"
            self._writer.write(line.encode("utf-8", errors="replace"))
        except Exception:
            self.handleError(record)
        finally:
            self._local.busy = False
