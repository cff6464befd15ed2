"""Shared typing helpers for multicast operators."""

from collections.abc import Callable

from reactivex import Observable

type Operator[T, U] = Callable[[Observable[T]], Observable[U]]

# Selector applied to a private multicast, see publish_behavior(initial, mapper)
type Mapper[T, U] = Callable[[T], Observable[U]]
