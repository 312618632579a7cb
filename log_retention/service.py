"""Wires the writer, broadcaster, sweeper and directory together."""

import logging
from dataclasses import dataclass

from log_retention.broadcaster import TailBroadcaster
from log_retention.config import Config
from log_retention.directory import LogDirectory
from log_retention.handler import WriterHandler
from log_retention.sweeper import RetentionSweeper
from log_retention.writer import ActiveFileWriter

logger = logging.getLogger(__name__)


@dataclass
class LogService:
    config: Config
    broadcaster: TailBroadcaster
    directory: LogDirectory
    sweeper: RetentionSweeper
    writer: ActiveFileWriter | None = None
    handler: WriterHandler | None = None

    def attach(self, target: logging.Logger | None = None, formatter: logging.Formatter | None = None):
        """Route records from *target* (the root logger by default) into the writer."""
        if self.writer is None:
            return
        self.handler = WriterHandler(self.writer)
        if formatter is not None:
            self.handler.setFormatter(formatter)
        (target or logging.getLogger()).addHandler(self.handler)

    def start(self):
        self.sweeper.start()

    def shutdown(self, target: logging.Logger | None = None):
        if self.handler is not None:
            (target or logging.getLogger()).removeHandler(self.handler)
            self.handler = None
        self.sweeper.stop()
        if self.writer is not None:
            self.writer.close()


def build_service(config: Config, time_func=None, scheduler=None) -> LogService:
    """Build all components. A writer that cannot open its file disables file logging only."""
    broadcaster = TailBroadcaster(max_queue=config.tail_queue_size)
    try:
        writer = ActiveFileWriter(config, broadcaster=broadcaster, time_func=time_func)
    except OSError as e:
        logger.error("File logging disabled, cannot open log file in %s: %s", config.log_dir, e)
        writer = None
    else:
        logger.info("Writing logs to %s", writer.current_path)

    sweeper = RetentionSweeper(
        config.log_dir,
        config.retention_days,
        interval_seconds=config.sweep_interval_seconds,
        time_func=time_func,
        scheduler=scheduler,
    )
    return LogService(
        config=config,
        broadcaster=broadcaster,
        directory=LogDirectory(config.log_dir),
        sweeper=sweeper,
        writer=writer,
    )
