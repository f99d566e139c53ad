"""
Exceptions raised by the Amarillo rules engine.

Every exception here signals a programmer error (a broken contract between
the caller and the engine). None of them is meant to be caught and retried.
"""


class ContractViolation(RuntimeError):
    """Base class for violated rules-engine contracts."""


class IllegalActionError(ContractViolation, ValueError):
    """An action that is not among the legal actions was applied."""


class TileCountError(ContractViolation):
    """Tiles were gained or lost by a transition."""


class MarkerError(ContractViolation):
    """The first-player marker is somewhere it cannot be."""
