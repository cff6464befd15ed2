"""Connectable multicast stream: subscribing and running the upstream are separate steps."""

import logging
import threading
from collections.abc import Callable
from typing import Any, Protocol

from reactivex import Observable
from reactivex.abc import DisposableBase, ObserverBase, SchedulerBase
from reactivex.disposable import SingleAssignmentDisposable

from multicast.current_value_subject import CurrentValueSubject
from multicast.ref_count import ref_count

log = logging.getLogger(__name__)


class Connectable[T](Protocol):
    """A stream whose upstream only runs once connect() is called."""

    def subscribe(
        self,
        on_next: ObserverBase[T] | Callable[[T], None] | None = None,
        on_error: Callable[[Exception], None] | None = None,
        on_completed: Callable[[], None] | None = None,
        *,
        scheduler: SchedulerBase | None = None,
    ) -> DisposableBase: ...

    def connect(self, scheduler: SchedulerBase | None = None) -> DisposableBase: ...


class Connection(DisposableBase):
    """Handle for one connection cycle between the upstream and a subject.

    Disposing it unsubscribes from the upstream and discards the subject of the
    cycle, so the next cycle starts again from the initial value. A connection
    whose upstream terminated on its own is finished: its subject stays in the
    terminal state, also after the handle is disposed, so later subscribers
    receive the terminal signal instead of a fresh cycle.
    """

    def __init__(self, owner: "ConnectableStream[Any]", subject: CurrentValueSubject[Any]) -> None:
        self.owner = owner
        self.subject = subject
        self.subscription = SingleAssignmentDisposable()
        self.is_disposed = False
        self.is_finished = False
        self.lock = threading.RLock()

    def finish(self) -> None:
        with self.lock:
            if self.is_disposed or self.is_finished:
                return
            self.is_finished = True
        log.debug("upstream terminated, connection finished")
        self.owner._release(self, discard_subject=False)

    def dispose(self) -> None:
        with self.lock:
            if self.is_disposed:
                return
            self.is_disposed = True
        log.debug("disposing connection")
        self.subscription.dispose()
        self.owner._release(self, discard_subject=not self.is_finished)


class ConnectableStream[T](Observable[T]):
    """Shares one upstream subscription among many subscribers through a subject.

    Subscribers attach to the current subject whether or not the stream is
    connected; only connect() subscribes the subject to the upstream. Each
    connection cycle gets a fresh subject from subject_factory.
    """

    def __init__(
        self,
        source: Observable[T],
        subject_factory: Callable[[], CurrentValueSubject[T]],
    ) -> None:
        super().__init__()
        self.source = source
        self.subject_factory = subject_factory
        self.subject: CurrentValueSubject[T] | None = None
        self.connection: Connection | None = None
        self.lock = threading.RLock()

    @property
    def is_connected(self) -> bool:
        return self.connection is not None

    def get_subject(self) -> CurrentValueSubject[T]:
        with self.lock:
            if self.subject is None:
                self.subject = self.subject_factory()
            return self.subject

    def _subscribe_core(
        self, observer: ObserverBase[T], scheduler: SchedulerBase | None = None
    ) -> DisposableBase:
        return self.get_subject().subscribe(observer, scheduler=scheduler)

    def connect(self, scheduler: SchedulerBase | None = None) -> Connection:
        """Subscribe the subject to the upstream, or return the live connection.

        A subject that already stopped belongs to a finished cycle and is
        replaced, so connecting again runs the upstream from scratch.
        """
        with self.lock:
            if self.connection is not None:
                return self.connection
            if self.subject is None or self.subject.is_stopped:
                self.subject = self.subject_factory()
            connection = Connection(self, self.subject)
            self.connection = connection

        subject = connection.subject
        log.debug("connecting to upstream %r", self.source)

        def on_next(value: T) -> None:
            if not connection.is_disposed:
                subject.on_next(value)

        def on_error(error: Exception) -> None:
            if connection.is_disposed:
                return
            connection.finish()
            subject.on_error(error)

        def on_completed() -> None:
            if connection.is_disposed:
                return
            connection.finish()
            subject.on_completed()

        connection.subscription.disposable = self.source.subscribe(
            on_next, on_error, on_completed, scheduler=scheduler
        )
        return connection

    def ref_count(self) -> Observable[T]:
        """Connect on the first subscriber, disconnect when the last one leaves."""
        return ref_count()(self)

    def _release(self, connection: Connection, discard_subject: bool) -> None:
        with self.lock:
            if self.connection is connection:
                self.connection = None
            if discard_subject and self.subject is connection.subject:
                self.subject = None
