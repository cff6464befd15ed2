"""Behavior multicasting for reactivex: a shared upstream with current-value replay."""

from multicast.config import LogLevel, MulticastConfig, configure_logging
from multicast.connectable import Connectable, ConnectableStream, Connection
from multicast.current_value_subject import CurrentValueSubject, StopReason
from multicast.exceptions import MulticastError, ObserverCallbackError
from multicast.publish_behavior import multicast_behavior, publish_behavior
from multicast.ref_count import ref_count

__all__ = [
    "Connectable",
    "ConnectableStream",
    "Connection",
    "CurrentValueSubject",
    "LogLevel",
    "MulticastConfig",
    "MulticastError",
    "ObserverCallbackError",
    "StopReason",
    "configure_logging",
    "multicast_behavior",
    "publish_behavior",
    "ref_count",
]
