from __future__ import annotations


class ImmutalistError(Exception):
    pass


class InvalidArgument(ImmutalistError, ValueError):
    """Raised before any work when an argument violates a precondition."""


class UnsupportedOperation(ImmutalistError):
    pass


class EmptyOptional(ImmutalistError):
    def __init__(self, msg: str = "called unwrap() on an empty Option"):
        super().__init__(msg)
