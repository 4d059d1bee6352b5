from __future__ import annotations

import abc
import logging
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from ._instantiator import instantiate
from ._invoker import invoke, normalize_callable
from ._types import as_argument_map, check_instantiable, locate_class, type_name


if TYPE_CHECKING:
    from collections.abc import Sequence

    from ._invoker import CallTarget
    from ._types import ArgumentMap, ContainerRef


logger = logging.getLogger(__name__)


@runtime_checkable
class ServiceProvider(Protocol):
    """What a hosting container stores: something that builds a service on demand."""

    @property
    def service_type(self) -> type: ...

    def get(
        self, arguments: ArgumentMap | Sequence[Any] | None = None, container: ContainerRef | None = None
    ) -> Any: ...

    def __call__(
        self, arguments: ArgumentMap | Sequence[Any] | None = None, container: ContainerRef | None = None
    ) -> Any: ...


class _Descriptor(abc.ABC):
    __slots__ = ("_arguments", "_service_type")

    def __init__(self, service_type: type, arguments: ArgumentMap | Sequence[Any] | None) -> None:
        object.__setattr__(self, "_service_type", service_type)
        object.__setattr__(self, "_arguments", MappingProxyType(as_argument_map(arguments)))

    def __setattr__(self, name: str, value: Any) -> None:
        msg = f"{type(self).__name__} is immutable"
        raise AttributeError(msg)

    def __delattr__(self, name: str) -> None:
        msg = f"{type(self).__name__} is immutable"
        raise AttributeError(msg)

    @property
    def service_type(self) -> type:
        return self._service_type

    @property
    def arguments(self) -> ArgumentMap:
        """Default arguments captured at creation (read-only)."""
        return self._arguments

    def merge_arguments(self, arguments: ArgumentMap | Sequence[Any] | None = None) -> dict[str | int, Any]:
        """Overlay call-time arguments on the defaults, key by key (shallow)."""
        return {**self._arguments, **as_argument_map(arguments)}

    @abc.abstractmethod
    def get(self, arguments: ArgumentMap | Sequence[Any] | None = None, container: ContainerRef | None = None) -> Any:
        """Build the service, call-time arguments overlaid on the defaults."""

    def __call__(
        self, arguments: ArgumentMap | Sequence[Any] | None = None, container: ContainerRef | None = None
    ) -> Any:
        return self.get(arguments, container)


class Service(_Descriptor):
    """Binds a concrete class to default constructor arguments.

    Example:
      service = Service("app.db.Database", {"dsn": "sqlite://"})
      db = service(container=container)

    Every call builds a new instance.
    """

    __slots__ = ()

    def __init__(self, service_type: type | str, arguments: ArgumentMap | Sequence[Any] | None = None) -> None:
        cls = locate_class(service_type)
        check_instantiable(cls)
        super().__init__(cls, arguments)

    def get(self, arguments: ArgumentMap | Sequence[Any] | None = None, container: ContainerRef | None = None) -> Any:
        return instantiate(self._service_type, self.merge_arguments(arguments), container)

    def __repr__(self) -> str:
        return f"Service({type_name(self._service_type)!r}, {dict(self._arguments)!r})"


class Factory(_Descriptor):
    """Binds a class identity to a factory callable and its default arguments.

    The factory may be any shape `invoke` accepts; it is normalized (and
    validated) once, here.
    """

    __slots__ = ("_factory",)

    def __init__(
        self,
        service_type: type | str,
        factory: Any,
        arguments: ArgumentMap | Sequence[Any] | None = None,
    ) -> None:
        cls = locate_class(service_type)
        object.__setattr__(self, "_factory", normalize_callable(factory))
        super().__init__(cls, arguments)

    @property
    def factory(self) -> CallTarget:
        return self._factory

    def get(self, arguments: ArgumentMap | Sequence[Any] | None = None, container: ContainerRef | None = None) -> Any:
        logger.debug("Building %s through factory", type_name(self._service_type))
        return invoke(self._factory, self.merge_arguments(arguments), container)

    def __repr__(self) -> str:
        return f"Factory({type_name(self._service_type)!r}, {self._factory!r}, {dict(self._arguments)!r})"
