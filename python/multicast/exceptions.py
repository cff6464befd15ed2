"""Exceptions raised by multicast streams."""


class MulticastError(Exception):
    """Base exception for multicast stream errors."""


class ObserverCallbackError(MulticastError, ExceptionGroup):
    """Several observer callbacks raised during a single delivery pass."""
