"""Error hierarchy for densegraph.

Each class also derives from the builtin exception callers would expect
(``IndexError``, ``ValueError``, ``KeyError``), so generic handlers keep working.
"""

from __future__ import annotations


class DenseGraphError(Exception):
    """Base exception for densegraph failures."""


class IndexOutOfRange(DenseGraphError, IndexError):
    """A row, column or dimension falls outside its valid range."""


class InvalidDimension(IndexOutOfRange, ValueError):
    """A matrix was requested with a negative row or column count."""


class DomainViolation(DenseGraphError, ValueError):
    """Semantic misuse at the graph level."""


class DuplicateVertex(DomainViolation):
    """A vertex with this name is already present."""


class UnknownVertex(DomainViolation, KeyError):
    """No vertex with this name is present."""

    # KeyError.__str__ would repr() the message
    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class EdgeAlreadyExists(DomainViolation):
    """The forward adjacency cell already holds an edge."""


class EdgeNotFound(DomainViolation):
    """The forward adjacency cell holds the no-edge value."""


__all__ = [
    "DenseGraphError",
    "IndexOutOfRange",
    "InvalidDimension",
    "DomainViolation",
    "DuplicateVertex",
    "UnknownVertex",
    "EdgeAlreadyExists",
    "EdgeNotFound",
]
