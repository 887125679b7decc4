"""Minimal property injection library.

This package provides a lightweight dependency injection container for Python
that builds registered classes with their zero-argument constructor, then fills
in declared properties with the singletons of other registered classes.
Injections declared on base classes are honoured, and dependency cycles are
reported instead of recursing forever.

Exports:
- `Container`: DI container; `register_type`, `declare_injection`, `get`, `reset`.
- `container`: the process-wide default `Container`.
- `Injectable`: class decorator registering a class (and its `Inject` markers).
- `Inject`: class-attribute marker declaring a property injection.
- `ResolutionError` and its subclasses `UndefinedDependencyError`,
  `UnregisteredTypeError` and `CircularDependencyError`.
"""

from ._container import (
    CircularDependencyError,
    Container,
    InjectionMap,
    InjectionRecord,
    Metadata,
    Registry,
    ResolutionError,
    UndefinedDependencyError,
    UnregisteredTypeError,
    container,
)
from ._markers import Inject, Injectable


__all__ = [
    "CircularDependencyError",
    "Container",
    "Inject",
    "Injectable",
    "InjectionMap",
    "InjectionRecord",
    "Metadata",
    "Registry",
    "ResolutionError",
    "UndefinedDependencyError",
    "UnregisteredTypeError",
    "container",
]
