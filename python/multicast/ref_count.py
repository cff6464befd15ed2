"""Reference-counted auto-connect for connectable streams."""

import logging
import threading
from collections.abc import Callable
from typing import TYPE_CHECKING

import reactivex
from reactivex import Observable
from reactivex.abc import DisposableBase, ObserverBase, SchedulerBase
from reactivex.disposable import Disposable

if TYPE_CHECKING:
    from multicast.connectable import Connectable

log = logging.getLogger(__name__)


def ref_count[T]() -> Callable[["Connectable[T]"], Observable[T]]:
    """Turn a connectable into a plain stream that manages its own connection.

    The first subscriber connects the source and the last one to leave disposes
    the connection. The subscriber is attached before connecting, so it sees the
    replayed current value ahead of anything the upstream emits synchronously
    while connecting.

    Once the upstream has completed or errored the multicast is over: later
    subscribers, including those made by retry or repeat placed after this
    operator, receive the terminal signal and the upstream is not run again.
    Only unsubscribing from a live connection resets the cycle.
    """

    def _operator(source: "Connectable[T]") -> Observable[T]:
        lock = threading.RLock()
        count = 0
        connection: DisposableBase | None = None

        def subscribe(
            observer: ObserverBase[T], scheduler: SchedulerBase | None = None
        ) -> DisposableBase:
            nonlocal count, connection
            stopped = False

            def on_error(error: Exception) -> None:
                nonlocal stopped
                stopped = True
                observer.on_error(error)

            def on_completed() -> None:
                nonlocal stopped
                stopped = True
                observer.on_completed()

            with lock:
                count += 1
                should_connect = count == 1

            subscription = source.subscribe(
                observer.on_next, on_error, on_completed, scheduler=scheduler
            )

            # a subscriber stopped on arrival found a finished cycle
            if should_connect and not stopped:
                log.debug("first subscriber attached, connecting")
                shared = source.connect(scheduler)
                with lock:
                    connection = shared

            def dispose() -> None:
                nonlocal count, connection
                subscription.dispose()
                with lock:
                    count -= 1
                    if count > 0:
                        return
                    shared, connection = connection, None
                if shared is not None:
                    log.debug("last subscriber left, disconnecting")
                    shared.dispose()

            return Disposable(dispose)

        return reactivex.create(subscribe)

    return _operator
