"""publish_behavior: multicast a source through a subject that replays its current value.

Example:
    >>> published = source.pipe(publish_behavior(0))
    >>> published.subscribe(print)  # prints 0 straight away
    >>> connection = published.connect()  # upstream starts now
    >>> connection.dispose()

    >>> shared = source.pipe(publish_behavior(0), ref_count())
"""

from collections.abc import Callable
from typing import Any, overload

import reactivex
from reactivex import Observable
from reactivex.abc import DisposableBase, ObserverBase, SchedulerBase
from reactivex.disposable import CompositeDisposable

from multicast.connectable import ConnectableStream
from multicast.current_value_subject import CurrentValueSubject
from multicast.utils import Mapper, Operator


def multicast_behavior[T](source: Observable[T], initial_value: T) -> ConnectableStream[T]:
    """Wrap source in a connectable stream seeded with initial_value.

    Every connection cycle starts from a fresh subject holding initial_value.
    """

    def subject_factory() -> CurrentValueSubject[T]:
        return CurrentValueSubject(initial_value)

    return ConnectableStream(source, subject_factory)


@overload
def publish_behavior[T](
    initial_value: T,
) -> Callable[[Observable[T]], ConnectableStream[T]]: ...


@overload
def publish_behavior[T, U](
    initial_value: T, mapper: Mapper[ConnectableStream[T], U]
) -> Operator[T, U]: ...


def publish_behavior(
    initial_value: Any, mapper: Mapper[ConnectableStream[Any], Any] | None = None
) -> Callable[[Observable[Any]], Observable[Any]]:
    """Multicast operator with current-value replay.

    Without a mapper the result is a ConnectableStream: subscribers get
    initial_value (or the latest value) immediately, but the source only runs
    once connect() is called.

    With a mapper each subscriber gets a private connectable, subscribes to
    mapper(connectable) and then connects it, so the mapper can use the shared
    source as many times as it likes without re-running it.
    """
    if mapper is None:

        def _publish(source: Observable[Any]) -> ConnectableStream[Any]:
            return multicast_behavior(source, initial_value)

        return _publish

    selector = mapper

    def _operator(source: Observable[Any]) -> Observable[Any]:
        def subscribe(
            observer: ObserverBase[Any], scheduler: SchedulerBase | None = None
        ) -> DisposableBase:
            connectable = multicast_behavior(source, initial_value)
            subscription = selector(connectable).subscribe(observer, scheduler=scheduler)
            return CompositeDisposable(subscription, connectable.connect(scheduler))

        return reactivex.create(subscribe)

    return _operator
