from __future__ import annotations

import inspect
import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeVar, overload


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    T = TypeVar("T")

    # A class, or a zero-argument callable returning one (forward reference)
    DependencyRef = type | Callable[[], type | None] | None


def _type_name(tp: object) -> str:
    return getattr(tp, "__name__", repr(tp))


class ResolutionError(RuntimeError):
    pass


class UndefinedDependencyError(ResolutionError):
    def __init__(self) -> None:
        super().__init__(
            "[DI] Cannot resolve dependency: type is undefined. Possible circular import or missing dependency."
        )


class UnregisteredTypeError(ResolutionError):
    def __init__(self, tp: object) -> None:
        super().__init__(f"[DI] {_type_name(tp)} is not registered. Use @Injectable")
        self.type = tp


class CircularDependencyError(ResolutionError):
    def __init__(self, tp: type, chain: tuple[type, ...]) -> None:
        super().__init__(f"[DI] Circular dependency detected while resolving {_type_name(tp)}")
        self.type = tp
        self.chain = chain


@dataclass
class Metadata:
    instance: object | None = None  # cached singleton


@dataclass(frozen=True)
class InjectionRecord:
    property_key: str
    dependency: DependencyRef

    def target(self) -> type | None:
        """Return the dependency class, evaluating a forward reference if needed."""
        dep = self.dependency
        if dep is not None and not inspect.isclass(dep):
            try:
                return dep()
            except (NameError, AttributeError, ImportError) as exc:
                # name not bound yet, or a partially imported module
                raise UndefinedDependencyError from exc
        return dep


class Registry:
    """Known injectable types and their cached-instance slots."""

    def __init__(self) -> None:
        self._metadata: dict[type, Metadata] = {}

    def register(self, cls: type) -> None:
        if cls not in self._metadata:
            self._metadata[cls] = Metadata()

    def is_registered(self, cls: object) -> bool:
        return cls in self._metadata

    def get_metadata(self, cls: type) -> Metadata:
        return self._metadata[cls]

    def clear_instances(self) -> None:
        for meta in self._metadata.values():
            meta.instance = None

    def __len__(self) -> int:
        return len(self._metadata)


class InjectionMap:
    """Property injections, kept per declaring type in declaration order."""

    def __init__(self) -> None:
        self._injections: dict[type, list[InjectionRecord]] = {}

    def add_injection(self, declaring: type, key: str, dependency: DependencyRef) -> None:
        self._injections.setdefault(declaring, []).append(InjectionRecord(key, dependency))

    def get_direct_injections(self, cls: type) -> tuple[InjectionRecord, ...]:
        return tuple(self._injections.get(cls, ()))


class Container:
    """Minimal property-injection container.

    - register types and declare property injections
    - resolve by zero-argument construction, then property assignment
    - injections declared on base classes apply to subclasses
    - every registered type is a singleton until `reset()`.
    """

    def __init__(self) -> None:
        self._registry = Registry()
        self._injections = InjectionMap()
        self._resolving: list[type] = []
        self._lock = threading.RLock()

    def register_type(self, cls: type) -> None:
        """Mark `cls` as injectable. Registering twice is a no-op."""
        if not inspect.isclass(cls):
            msg = f"Only classes can be registered, got {cls!r}"
            raise TypeError(msg)

        with self._lock:
            if not self._registry.is_registered(cls):
                logger.debug("Registering %s", cls.__qualname__)
            self._registry.register(cls)

    def declare_injection(self, declaring: type, key: str, dependency: DependencyRef) -> None:
        """Declare that `key` on instances of `declaring` receives the `dependency` singleton.

        Example:
          container.declare_injection(Service, "repo", Repo)
          container.declare_injection(A, "b", lambda: B)  # forward reference

        """
        if not inspect.isclass(declaring):
            msg = f"Injections can only be declared on classes, got {declaring!r}"
            raise TypeError(msg)

        if dependency is not None and not inspect.isclass(dependency) and not callable(dependency):
            msg = f"Dependency for {declaring.__name__}.{key} must be a class or a callable, got {dependency!r}"
            raise TypeError(msg)

        with self._lock:
            logger.debug("Declaring injection %s.%s -> %s", declaring.__qualname__, key, _type_name(dependency))
            self._injections.add_injection(declaring, key, dependency)

    def is_registered(self, cls: object) -> bool:
        with self._lock:
            return self._registry.is_registered(cls)

    def injections_for(self, cls: type) -> tuple[InjectionRecord, ...]:
        """Injections declared directly on `cls` (not inherited)."""
        with self._lock:
            return self._injections.get_direct_injections(cls)

    @overload
    def get(self, cls: type[T]) -> T: ...

    @overload
    def get(self, cls: None) -> object: ...

    def get(self, cls: type[T] | None) -> object:
        """Resolve `cls` to its singleton instance, building it on first use.

        Raises `UndefinedDependencyError` for a missing type reference,
        `UnregisteredTypeError` for a type never registered and
        `CircularDependencyError` when `cls` is reentered while under construction.
        """
        if cls is None:
            raise UndefinedDependencyError

        with self._lock:
            if not self._registry.is_registered(cls):
                raise UnregisteredTypeError(cls)

            meta = self._registry.get_metadata(cls)
            if meta.instance is not None:
                return meta.instance

            if cls in self._resolving:
                chain = (*self._resolving, cls)
                logger.warning("Circular dependency: %s", " -> ".join(_type_name(t) for t in chain))
                raise CircularDependencyError(cls, chain)

            self._resolving.append(cls)
            try:
                instance = cls()
                logger.debug("Constructed %s", cls.__qualname__)
                self._inject(cls, instance)
                meta.instance = instance
                return instance
            finally:
                self._resolving.pop()

    def _inject(self, cls: type, instance: object) -> None:
        for owner in _injectable_lineage(cls):
            for record in self._injections.get_direct_injections(owner):
                setattr(instance, record.property_key, self.get(record.target()))

    def reset(self) -> None:
        """Drop every cached singleton. Registrations and injections are kept."""
        with self._lock:
            logger.debug("Clearing %d cached instance(s)", len(self._registry))
            self._registry.clear_instances()


def _injectable_lineage(cls: type) -> Iterator[type]:
    """Yield `cls` and its ancestors, most derived first, stopping before `object`."""
    for owner in inspect.getmro(cls):
        if owner is object:
            return
        yield owner


# Process-wide default, used by the declarative markers unless told otherwise.
container = Container()
