"""Periodic retention sweep: delete log files older than the retention window."""

import logging
import os
import stat
from datetime import datetime, timedelta, timezone

from apscheduler.schedulers.background import BackgroundScheduler

logger = logging.getLogger(__name__)

JOB_ID = "retention-sweep"


class RetentionSweeper:
    def __init__(self, log_dir: str, retention_days: int, interval_seconds: int = 1800,
                 time_func=None, scheduler=None):
        self._log_dir = log_dir
        self._max_age = timedelta(days=retention_days)
        self._interval = interval_seconds
        self._time_func = time_func or (lambda: datetime.now(timezone.utc))
        self._scheduler = scheduler or BackgroundScheduler()

    @property
    def running(self) -> bool:
        return self._scheduler.running

    def start(self):
        """Sweep now, then every interval until stop() is called."""
        self._scheduler.add_job(
            self.sweep_once,
            "interval",
            seconds=self._interval,
            id=JOB_ID,
            replace_existing=True,
            next_run_time=datetime.now(timezone.utc),
            max_instances=1,
            coalesce=True,
        )
        if not self._scheduler.running:
            self._scheduler.start()
        logger.info("Retention sweep every %ds over %s (max age %s)",
                    self._interval, self._log_dir, self._max_age)

    def stop(self, wait: bool = True):
        if self._scheduler.running:
            self._scheduler.shutdown(wait=wait)

    def sweep_once(self) -> list[str]:
        """Walk the directory once and delete expired files. Returns deleted paths."""
        # Naive clocks are taken as local time
        cutoff = self._time_func().astimezone(timezone.utc) - self._max_age
        deleted = []

        if not os.path.isdir(self._log_dir):
            logger.error("Retention sweep skipped: %s is not a directory", self._log_dir)
            return deleted

        def _walk_error(err: OSError):
            logger.error("Retention sweep could not read %s: %s", err.filename, err)

        for dirpath, _dirnames, filenames in os.walk(self._log_dir, onerror=_walk_error):
            for name in filenames:
                path = os.path.join(dirpath, name)
                try:
                    st = os.stat(path, follow_symlinks=False)
                except OSError as e:
                    logger.warning("Cannot stat %s: %s", path, e)
                    continue

                if not stat.S_ISREG(st.st_mode):
                    continue

                modified = datetime.fromtimestamp(st.st_mtime, tz=timezone.utc)
                if modified >= cutoff:
                    continue

                try:
                    os.remove(path)
                except OSError as e:
                    logger.error("Failed to delete %s: %s", path, e)
                    continue
                deleted.append(path)
                logger.info("Deleted expired log file %s", path)

        return deleted
