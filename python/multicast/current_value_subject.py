"""Multicast subject that retains its current value and replays it to new subscribers."""

import logging
import threading
from collections.abc import Callable
from enum import Enum

from reactivex import Observable, abc
from reactivex.abc import DisposableBase, ObserverBase, SchedulerBase
from reactivex.disposable import Disposable
from reactivex.internal.exceptions import DisposedException

from multicast.exceptions import ObserverCallbackError

log = logging.getLogger(__name__)


class StopReason(Enum):
    NONE = "none"
    COMPLETED = "completed"
    ERRORED = "errored"


class CurrentValueSubject[T](Observable[T], abc.SubjectBase[T]):
    """Broadcasts values to every attached observer and remembers the last one.

    A new subscriber receives the current value synchronously, before subscribe
    returns, then every value pushed afterwards. Once the subject has stopped a
    new subscriber receives only the terminal signal: a completed subject does
    not replay its last value.

    Only the single current value is retained, there is no history.
    """

    def __init__(self, value: T) -> None:
        super().__init__()
        self.value = value
        # dict keeps subscription order with O(1) membership
        self.observers: dict[ObserverBase[T], None] = {}
        self.is_stopped = False
        self.is_disposed = False
        self.exception: Exception | None = None
        self.lock = threading.RLock()

    @property
    def stop_reason(self) -> StopReason:
        if not self.is_stopped:
            return StopReason.NONE
        return StopReason.COMPLETED if self.exception is None else StopReason.ERRORED

    def check_disposed(self) -> None:
        if self.is_disposed:
            raise DisposedException()

    def _subscribe_core(
        self, observer: ObserverBase[T], scheduler: SchedulerBase | None = None
    ) -> DisposableBase:
        with self.lock:
            self.check_disposed()
            if not self.is_stopped:
                self.observers[observer] = None
                try:
                    observer.on_next(self.value)
                except Exception:
                    self.observers.pop(observer, None)
                    raise
                return Disposable(lambda: self._unsubscribe(observer))
            exception = self.exception

        if exception is not None:
            observer.on_error(exception)
        else:
            observer.on_completed()
        return Disposable()

    def _unsubscribe(self, observer: ObserverBase[T]) -> None:
        with self.lock:
            if not self.is_disposed:
                self.observers.pop(observer, None)

    def _is_attached(self, observer: ObserverBase[T]) -> bool:
        with self.lock:
            return observer in self.observers

    def has_observers(self) -> bool:
        with self.lock:
            return bool(self.observers)

    def get_value(self) -> T:
        """Return the current value, or raise the error the subject stopped with."""
        with self.lock:
            self.check_disposed()
            if self.exception is not None:
                raise self.exception
            return self.value

    def on_next(self, value: T) -> None:
        with self.lock:
            self.check_disposed()
            if self.is_stopped:
                return
            self.value = value
            observers = list(self.observers)

        def notify(observer: ObserverBase[T]) -> None:
            # unsubscribed earlier in this pass
            if self._is_attached(observer):
                observer.on_next(value)

        self._deliver(observers, notify)

    def on_error(self, error: Exception) -> None:
        with self.lock:
            self.check_disposed()
            if self.is_stopped:
                return
            self.is_stopped = True
            self.exception = error
            observers = list(self.observers)
            self.observers.clear()

        self._deliver(observers, lambda observer: observer.on_error(error))

    def on_completed(self) -> None:
        with self.lock:
            self.check_disposed()
            if self.is_stopped:
                return
            self.is_stopped = True
            observers = list(self.observers)
            self.observers.clear()

        self._deliver(observers, lambda observer: observer.on_completed())

    def dispose(self) -> None:
        """Detach all observers and release the subject."""
        with self.lock:
            self.is_disposed = True
            self.observers.clear()
            self.exception = None

    def _deliver(
        self,
        observers: list[ObserverBase[T]],
        notify: Callable[[ObserverBase[T]], None],
    ) -> None:
        """Notify a snapshot of observers, isolating failures from one another.

        Every observer in the snapshot is visited even if an earlier one raised.
        A single failure is re-raised as is, several are raised together.
        """
        errors: list[Exception] = []
        for observer in observers:
            try:
                notify(observer)
            except Exception as e:
                log.warning("observer %r raised during delivery: %r", observer, e)
                errors.append(e)

        if len(errors) == 1:
            raise errors[0]
        if errors:
            raise ObserverCallbackError("observer callbacks failed", errors)
