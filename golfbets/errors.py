"""Error taxonomy for the settlement engine."""

from __future__ import annotations


class GolfBetsError(Exception):
    pass


class ConfigurationError(GolfBetsError, ValueError):
    """Missing or invalid course/bet configuration.

    Fatal to the affected computation; callers should block game start until
    the configuration is fixed.
    """


class InvariantViolation(GolfBetsError, RuntimeError):
    """Raised when a recomputation detects state that correct inputs never produce."""

    def __init__(self, invariant: str, message: str):
        super().__init__(f"{invariant}: {message}")
        self.invariant = invariant
        self.detail = message


__all__ = ["GolfBetsError", "ConfigurationError", "InvariantViolation"]
