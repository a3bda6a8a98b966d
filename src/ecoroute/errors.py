"""Error types raised by the optimization engine."""

from __future__ import annotations


class RouteEngineError(Exception):
    """Base class for route optimization errors."""


class InvalidCoordinate(RouteEngineError, ValueError):
    """A pickup or delivery coordinate is missing or out of range."""

    def __init__(self, side: str, axis: str | None, message: str) -> None:
        self.side = side
        self.axis = axis
        super().__init__(message)


class ProviderUnavailable(RouteEngineError, ConnectionError):
    """The live distance/time provider could not answer.

    ``kind`` is one of ``network``, ``timeout``, ``auth``, ``rate_limit``,
    ``malformed`` or ``unconfigured``.
    """

    def __init__(self, kind: str, message: str) -> None:
        self.kind = kind
        super().__init__(message)


class UnknownOptimizationFailure(RouteEngineError, RuntimeError):
    """Unexpected error while building candidate routes."""
