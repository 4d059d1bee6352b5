from __future__ import annotations

import functools
import inspect
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ._errors import InaccessibleMethodError, InvalidCallableError, InvalidTypeError
from ._instantiator import ClassInstantiator
from ._parameters import ParameterResolver, build_call, describe_parameters
from ._types import as_argument_map, locate, locate_class, type_name


if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from ._types import ArgumentMap, ContainerRef


logger = logging.getLogger(__name__)

SCOPE_SEPARATOR = "::"


@dataclass(frozen=True)
class MethodTarget:
    """A method looked up on an object or a class.

    `owner_name` is the type name used in error messages, exactly as given
    when the owner was named by a string.
    """

    owner: Any
    name: str
    owner_name: str

    @property
    def qualified_name(self) -> str:
        return f"{self.owner_name}{SCOPE_SEPARATOR}{self.name}"

    def bind(self) -> Callable[..., Any]:
        method = None
        for attr in self._candidate_attributes():
            method = getattr(self.owner, attr, None)
            if method is not None:
                break

        if method is None or not callable(method):
            msg = f"Method {self.qualified_name} does not exist."
            raise InvalidTypeError(msg)

        if not is_public(self.name):
            msg = f"Cannot access non-public method {self.qualified_name}."
            raise InaccessibleMethodError(msg)

        return method

    def _candidate_attributes(self) -> list[str]:
        names = [self.name]
        if self.name.startswith("__") and not self.name.endswith("__"):
            # private names are stored mangled with the defining class name
            cls = self.owner if inspect.isclass(self.owner) else type(self.owner)
            names.extend(f"_{klass.__name__.lstrip('_')}{self.name}" for klass in cls.__mro__)
        return names


@dataclass(frozen=True)
class FunctionTarget:
    func: Callable[..., Any]


CallTarget = MethodTarget | FunctionTarget


def is_public(name: str) -> bool:
    return not name.startswith("_") or (name.startswith("__") and name.endswith("__"))


def normalize_callable(ref: Any) -> CallTarget:
    """Normalize the accepted callable shapes into a call target.

    Precedence:
    1. `(owner, "method")` pair
    2. `"pkg.module.Type::method"` string
    3. callable object, invoked through `__call__`
    4. plain function, class or dotted function name.
    """
    if isinstance(ref, (MethodTarget, FunctionTarget)):
        return ref

    if isinstance(ref, (tuple, list)) and len(ref) == 2 and isinstance(ref[1], str):
        owner, name = ref
        return _method_target(owner, name)

    if isinstance(ref, str):
        if SCOPE_SEPARATOR in ref:
            owner, name = ref.split(SCOPE_SEPARATOR, 1)
            return _method_target(owner, name)
        try:
            ref = locate(ref)
        except InvalidTypeError as exc:
            msg = "A callable expected."
            raise InvalidCallableError(msg) from exc

    if not callable(ref):
        msg = "A callable expected."
        raise InvalidCallableError(msg)

    if inspect.isclass(ref) or inspect.isroutine(ref) or isinstance(ref, functools.partial):
        return FunctionTarget(ref)

    return MethodTarget(ref, "__call__", type_name(type(ref)))


def _method_target(owner: Any, name: str) -> MethodTarget:
    if not name.isidentifier():
        msg = f"{name!r} is not a method name."
        raise InvalidCallableError(msg)

    if isinstance(owner, str):
        return MethodTarget(locate_class(owner), name, owner)

    return MethodTarget(owner, name, type_name(owner if inspect.isclass(owner) else type(owner)))


class CallableInvoker:
    """Call functions and methods, resolving their parameters."""

    def __init__(self, resolver: ParameterResolver | None = None) -> None:
        self._resolver = resolver or ParameterResolver()
        self._instantiator = ClassInstantiator(self._resolver)

    def invoke(
        self,
        callable_ref: Any,
        arguments: ArgumentMap | Sequence[Any] | None = None,
        container: ContainerRef | None = None,
    ) -> Any:
        target = normalize_callable(callable_ref)

        if isinstance(target, FunctionTarget) and inspect.isclass(target.func):
            return self._instantiator.instantiate(target.func, arguments, container)

        func = target.func if isinstance(target, FunctionTarget) else target.bind()

        supplied = as_argument_map(arguments)
        parameters = describe_parameters(func)
        resolved = self._resolver.resolve(parameters, supplied, container, target=func)
        args, kwargs = build_call(parameters, resolved, supplied)

        logger.debug("Invoking %r", func)
        return func(*args, **kwargs)


_invoker = CallableInvoker()


def invoke(
    callable_ref: Any,
    arguments: ArgumentMap | Sequence[Any] | None = None,
    container: ContainerRef | None = None,
) -> Any:
    """Invoke any supported callable shape with autowiring."""
    return _invoker.invoke(callable_ref, arguments, container)
