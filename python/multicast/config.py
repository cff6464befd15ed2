"""Configuration types for multicast streams."""

import logging
from dataclasses import dataclass
from enum import IntEnum

LOGGER_NAME = "multicast"


class LogLevel(IntEnum):
    """Log levels mirroring Python's logging module."""

    NOTSET = logging.NOTSET
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL


@dataclass(frozen=True)
class MulticastConfig:
    """Static package configuration.

    Attributes:
        log_level: Threshold for the ``multicast`` logger hierarchy. Connection
            cycles and ref-count transitions are logged at DEBUG, observer
            callback failures at WARNING.
    """

    log_level: LogLevel = LogLevel.WARNING


def configure_logging(config: MulticastConfig | None = None) -> logging.Logger:
    """Apply config to the package logger and return it."""
    config = config or MulticastConfig()
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(config.log_level)
    return logger
