"""Log retention service: rotating file logs, retention sweeps and an HTTP API to read them."""

import argparse
import logging
import os
import signal
import sys
import threading
import time

from log_retention.api import create_app
from log_retention.config import load_config
from log_retention.service import build_service

LOG_FORMAT = "%(asctime)s [log-retention] %(levelname)s %(message)s"

logging.basicConfig(level=logging.INFO, format=LOG_FORMAT, stream=sys.stderr)
logger = logging.getLogger(__name__)

_running = True


def _signal_handler(sig, _frame):
    global _running
    logger.info("Shutdown signal received (signal %d), stopping...", sig)
    _running = False


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Rotating log storage with retention and live tail")
    parser.add_argument("--config", default=os.environ.get("CONFIG_PATH"),
                        help="YAML file with a 'logrotate' section")
    parser.add_argument("--log-dir", default=None, help="Directory for log files")
    parser.add_argument("--host", default=None)
    parser.add_argument("--port", type=int, default=None)
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    config = load_config(args.config, overrides={
        "log_dir": args.log_dir,
        "host": args.host,
        "port": args.port,
    })
    logger.info(
        "Config: log_dir=%s, max_bytes=%d, retention_days=%d, rotation_hours=%d, format=%s",
        config.log_dir, config.max_bytes, config.retention_days,
        config.rotation_interval_hours, config.name_format,
    )

    service = build_service(config)
    service.attach(formatter=logging.Formatter(LOG_FORMAT))
    service.start()

    app = create_app(service.directory, service.broadcaster, writer_enabled=service.writer is not None)
    server = threading.Thread(
        target=app.run,
        kwargs={"host": config.host, "port": config.port, "threaded": True, "use_reloader": False},
        daemon=True,
    )
    server.start()
    logger.info("API listening on %s:%d", config.host, config.port)

    try:
        while _running:
            time.sleep(0.5)
    except KeyboardInterrupt:
        pass

    service.shutdown()
    logger.info("Shut down cleanly")


if __name__ == "__main__":
    main()
