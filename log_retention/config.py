"""Configuration module: frozen dataclass built from defaults, YAML and environment variables."""

import logging
import os
from dataclasses import dataclass, replace

import yaml

logger = logging.getLogger(__name__)

DEFAULT_NAME_FORMAT = "%Y-%m-%dT%H"

# YAML key (under the "logrotate" section) -> Config field
_YAML_KEYS = {
    "path": "log_dir",
    "size": "max_bytes",
    "days": "retention_days",
    "rotation_days": "rotation_days",
    "formatter": "name_format",
    "sweep_interval_seconds": "sweep_interval_seconds",
    "tail_queue_size": "tail_queue_size",
    "host": "host",
    "port": "port",
}

# Environment variable -> Config field
_ENV_KEYS = {
    "LOG_DIR": "log_dir",
    "LOG_MAX_BYTES": "max_bytes",
    "RETENTION_DAYS": "retention_days",
    "ROTATION_DAYS": "rotation_days",
    "LOG_NAME_FORMAT": "name_format",
    "SWEEP_INTERVAL_SECONDS": "sweep_interval_seconds",
    "TAIL_QUEUE_SIZE": "tail_queue_size",
    "SERVER_HOST": "host",
    "SERVER_PORT": "port",
}

_INT_FIELDS = {
    "max_bytes",
    "retention_days",
    "rotation_days",
    "sweep_interval_seconds",
    "tail_queue_size",
    "port",
}


@dataclass(frozen=True)
class Config:
    log_dir: str = "./logs"
    max_bytes: int = 0  # 0 = rotate by age instead of size
    retention_days: int = 3
    rotation_days: int | None = None  # None = same as retention_days
    name_format: str = DEFAULT_NAME_FORMAT
    sweep_interval_seconds: int = 30 * 60
    tail_queue_size: int = 1024
    host: str = "0.0.0.0"
    port: int = 8080

    @property
    def size_based(self) -> bool:
        return self.max_bytes > 0

    @property
    def rotation_interval_hours(self) -> int:
        days = self.rotation_days if self.rotation_days is not None else self.retention_days
        return days * 24


def load_yaml_config(path: str | None) -> dict:
    """Return the ``logrotate`` section of a YAML file, or {} if there is none."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    logger.info("Loaded YAML config from %s", path)
    section = data.get("logrotate", data) if isinstance(data, dict) else {}
    return section or {}


def _coerce(field_name: str, value):
    if value is None:
        return None
    if field_name in _INT_FIELDS:
        return int(value)
    return str(value)


def normalize(config: Config) -> Config:
    """Apply the day and formatter fallbacks and validate the result."""
    changes = {}
    if not config.log_dir:
        changes["log_dir"] = Config.log_dir
    if config.retention_days == 0:
        changes["retention_days"] = 1
    if config.rotation_days == 0:
        changes["rotation_days"] = 1
    if not config.name_format:
        changes["name_format"] = DEFAULT_NAME_FORMAT
    if changes:
        config = replace(config, **changes)

    if config.max_bytes < 0:
        raise ValueError(f"max_bytes must be >= 0, got {config.max_bytes}")
    if config.retention_days < 1:
        raise ValueError(f"retention_days must be >= 1, got {config.retention_days}")
    if config.rotation_days is not None and config.rotation_days < 1:
        raise ValueError(f"rotation_days must be >= 1, got {config.rotation_days}")
    if config.rotation_days is not None and config.rotation_days > config.retention_days:
        # An idle active file older than the retention window would be swept while open
        raise ValueError(
            f"rotation_days ({config.rotation_days}) must not exceed retention_days ({config.retention_days})"
        )
    if config.sweep_interval_seconds <= 0:
        raise ValueError("sweep_interval_seconds must be positive")
    if config.tail_queue_size <= 0:
        raise ValueError("tail_queue_size must be positive")
    return config


def load_config(yaml_path: str | None = None, overrides: dict | None = None) -> Config:
    """Build Config from defaults, then YAML, then env vars, then explicit overrides."""
    values = {}

    for key, value in load_yaml_config(yaml_path).items():
        field_name = _YAML_KEYS.get(key.lower())
        if field_name is None:
            logger.warning("Ignoring unknown config key %r", key)
            continue
        if value is None:
            continue
        values[field_name] = _coerce(field_name, value)

    for env_name, field_name in _ENV_KEYS.items():
        raw = os.environ.get(env_name)
        if raw is not None and raw != "":
            values[field_name] = _coerce(field_name, raw)

    for field_name, value in (overrides or {}).items():
        if value is not None:
            values[field_name] = _coerce(field_name, value)

    return normalize(Config(**values))
