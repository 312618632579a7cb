"""Rotation policies: decide when the active log file should be replaced."""

from dataclasses import dataclass
from datetime import datetime, timedelta

from log_retention.config import Config


@dataclass
class ActiveFileState:
    """The writer's view of the currently open output file."""

    handle: object
    path: str
    bytes_written: int
    opened_at: datetime


@dataclass(frozen=True)
class SizePolicy:
    max_bytes: int

    def should_rotate(self, state: ActiveFileState, now: datetime) -> bool:
        return state.bytes_written >= self.max_bytes


@dataclass(frozen=True)
class TimePolicy:
    interval: timedelta

    def should_rotate(self, state: ActiveFileState, now: datetime) -> bool:
        return now - state.opened_at > self.interval


def build_policy(config: Config) -> SizePolicy | TimePolicy:
    """Size rotation when max_bytes is set, otherwise rotate by file age."""
    if config.size_based:
        return SizePolicy(config.max_bytes)
    return TimePolicy(timedelta(hours=config.rotation_interval_hours))
