# densegraph/__init__.py
"""densegraph: single import, full API."""

from __future__ import annotations

from importlib import import_module
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version
from typing import Any

# Lazily exposed submodules (imported on first attribute access)
_lazy_submodules = {
    "core": "densegraph.core",
    "errors": "densegraph.errors",
}

# Curated top-level symbols (lazy). name -> (module, attribute)
_lazy_symbols: dict[str, tuple[str, str]] = {
    # Core
    "Graph": ("densegraph.core.graph", "Graph"),
    "DenseMatrix": ("densegraph.core.matrix", "DenseMatrix"),
    "GraphDiff": ("densegraph.core._GraphDiff", "GraphDiff"),
    # Errors
    "DenseGraphError": ("densegraph.errors", "DenseGraphError"),
    "IndexOutOfRange": ("densegraph.errors", "IndexOutOfRange"),
    "InvalidDimension": ("densegraph.errors", "InvalidDimension"),
    "DomainViolation": ("densegraph.errors", "DomainViolation"),
    "DuplicateVertex": ("densegraph.errors", "DuplicateVertex"),
    "UnknownVertex": ("densegraph.errors", "UnknownVertex"),
    "EdgeAlreadyExists": ("densegraph.errors", "EdgeAlreadyExists"),
    "EdgeNotFound": ("densegraph.errors", "EdgeNotFound"),
}

__all__ = sorted(set(list(_lazy_submodules) + list(_lazy_symbols)))


def __getattr__(name: str) -> Any:  # PEP 562: lazy attribute resolution
    if name in _lazy_symbols:
        mod, attr = _lazy_symbols[name]
        return getattr(import_module(mod), attr)
    if name in _lazy_submodules:
        return import_module(_lazy_submodules[name])
    raise AttributeError(name)


def __dir__() -> list[str]:
    return sorted(list(globals().keys()) + list(__all__))


try:
    __version__ = _pkg_version("densegraph")
except PackageNotFoundError:
    __version__ = "0.0.0"
