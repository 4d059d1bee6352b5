from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ._parameters import ParameterResolver, build_call, describe_parameters
from ._types import as_argument_map, check_instantiable, locate_class, type_name


if TYPE_CHECKING:
    from collections.abc import Sequence

    from ._types import ArgumentMap, ContainerRef


logger = logging.getLogger(__name__)


class ClassInstantiator:
    """Build instances of a class, resolving constructor parameters.

    Stateless: instantiability is checked on every call.
    """

    def __init__(self, resolver: ParameterResolver | None = None) -> None:
        self._resolver = resolver or ParameterResolver()

    def instantiate(
        self,
        service_type: type | str,
        arguments: ArgumentMap | Sequence[Any] | None = None,
        container: ContainerRef | None = None,
    ) -> Any:
        cls = locate_class(service_type)
        check_instantiable(cls)

        if not _declares_constructor(cls):
            logger.debug("Instantiating %s, no constructor declared", type_name(cls))
            return cls()

        supplied = as_argument_map(arguments)
        parameters = describe_parameters(cls)
        resolved = self._resolver.resolve(parameters, supplied, container, target=cls)
        args, kwargs = build_call(parameters, resolved, supplied)

        logger.debug(
            "Instantiating %s with %d positional and %d keyword arguments", type_name(cls), len(args), len(kwargs)
        )
        return cls(*args, **kwargs)


def _declares_constructor(cls: type) -> bool:
    for klass in cls.__mro__:
        if klass is object:
            continue
        for name in ("__init__", "__new__"):
            func = klass.__dict__.get(name)
            if func is None:
                continue
            func = getattr(func, "__func__", func)
            # Protocol bases carry a typing placeholder that later swaps itself for object.__init__
            if func is getattr(object, name) or getattr(func, "__module__", None) == "typing":
                continue
            return True
    return False


_instantiator = ClassInstantiator()


def instantiate(
    service_type: type | str,
    arguments: ArgumentMap | Sequence[Any] | None = None,
    container: ContainerRef | None = None,
) -> Any:
    """Instantiate `service_type` (a class or dotted class name) with autowiring."""
    return _instantiator.instantiate(service_type, arguments, container)
