from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any, TypeVar

from ._container import Container, _injectable_lineage, container


if TYPE_CHECKING:
    T = TypeVar("T")


class Inject:
    """Class-attribute marker for a property the container fills in.

    Example:
      @Injectable()
      class Service:
          repo = Inject(Repo)
          peer = Inject(lambda: Peer)  # forward reference

    The marker only records the dependency; `Injectable` declares it.
    """

    def __init__(self, dependency: Any) -> None:
        if dependency is not None and not inspect.isclass(dependency) and not callable(dependency):
            msg = f"Inject() expects a class or a callable returning one, got {dependency!r}"
            raise TypeError(msg)
        self.dependency = dependency
        self.name: str | None = None

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, instance: object | None, owner: type | None = None) -> Any:
        if instance is None:
            return self
        # injected values live in the instance __dict__ and shadow the marker
        msg = f"'{type(instance).__name__}.{self.name}' has not been injected"
        raise AttributeError(msg)

    def __repr__(self) -> str:
        return f"Inject({getattr(self.dependency, '__name__', self.dependency)!r})"


class Injectable:
    """Class decorator registering a class and the `Inject` markers of its lineage.

    Markers on undecorated base classes are declared against the base that
    owns them, once per container.
    """

    def __init__(self, container: Container | None = None) -> None:
        self._container = container

    def __call__(self, cls: type[T]) -> type[T]:
        if not inspect.isclass(cls):
            msg = f"@Injectable can only decorate classes, got {cls!r}"
            raise TypeError(msg)

        target = self._container if self._container is not None else container
        for owner in _injectable_lineage(cls):
            declared = {record.property_key for record in target.injections_for(owner)}
            for key, value in vars(owner).items():
                if isinstance(value, Inject) and key not in declared:
                    target.declare_injection(owner, key, value.dependency)

        target.register_type(cls)
        return cls
