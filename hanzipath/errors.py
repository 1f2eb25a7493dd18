"""
Exception types for HanziPath.

Absence is not an error anywhere in the library: unknown ids, components and
sentences come back as None, 0, an empty set or -1. The exceptions below are
reserved for caller mistakes and broken invariants.
"""


class InvalidArgumentError(ValueError):
    """A required collaborator is missing or an argument is out of range."""


class InconsistentStateError(RuntimeError):
    """An internal invariant does not hold (asymmetric graph, mutation after seal)."""
