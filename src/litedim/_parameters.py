from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, get_type_hints

from ._errors import MissingArgumentError


if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from ._types import ArgumentMap, ContainerRef


logger = logging.getLogger(__name__)

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
_VARIADIC = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


@dataclass(frozen=True)
class ParameterSpec:
    """One declared parameter of a callable.

    `position` is the index in the introspected signature (bound `self`/`cls`
    excluded). `annotation` is None for untyped parameters. `default` is only
    meaningful when `has_default` is set.
    """

    name: str
    position: int
    annotation: Any = None
    has_default: bool = False
    default: Any = None
    kind: Any = inspect.Parameter.POSITIONAL_OR_KEYWORD

    @property
    def is_variadic(self) -> bool:
        return self.kind in _VARIADIC

    @property
    def injectable_type(self) -> type | None:
        """The annotated class, if it is one a container could provide."""
        ann = self.annotation
        if inspect.isclass(ann) and getattr(ann, "__module__", "") != "builtins":
            return ann
        return None


# Callables without an introspectable signature accept whatever was passed.
_OPAQUE = (
    ParameterSpec("args", 0, kind=inspect.Parameter.VAR_POSITIONAL),
    ParameterSpec("kwargs", 1, kind=inspect.Parameter.VAR_KEYWORD),
)


def describe_parameters(target: Callable[..., Any]) -> tuple[ParameterSpec, ...]:
    """Describe the parameters of a function, bound method or class constructor."""
    try:
        sig = inspect.signature(target)
    except (TypeError, ValueError):
        logger.debug("No signature available for %r, forwarding arguments as-is", target)
        return _OPAQUE

    hints = _get_type_hints(target)

    specs = []
    for position, (name, p) in enumerate(sig.parameters.items()):
        annotation = hints.get(name)
        if annotation is None and p.annotation is not p.empty and not isinstance(p.annotation, str):
            annotation = p.annotation
        specs.append(
            ParameterSpec(
                name=name,
                position=position,
                annotation=annotation,
                has_default=p.default is not p.empty,
                default=None if p.default is p.empty else p.default,
                kind=p.kind,
            )
        )
    return tuple(specs)


class ParameterResolver:
    """Turns declared parameters plus supplied arguments into call values.

    Resolution precedence, per parameter:
    1. supplied argument keyed by name
    2. supplied argument keyed by position
    3. declared default
    4. container binding for the annotated class
    5. error.
    """

    def resolve(
        self,
        parameters: Sequence[ParameterSpec],
        supplied: ArgumentMap,
        container: ContainerRef | None = None,
        target: Any = None,
    ) -> list[Any] | ArgumentMap:
        regular = [p for p in parameters if not p.is_variadic]
        if not regular:
            # nothing to resolve against: hand the arguments over untouched
            return supplied

        return [self.resolve_param(p, supplied, container, target) for p in regular]

    def resolve_param(
        self,
        parameter: ParameterSpec,
        supplied: ArgumentMap,
        container: ContainerRef | None = None,
        target: Any = None,
    ) -> Any:
        if parameter.name in supplied:
            return supplied[parameter.name]

        if parameter.position in supplied:
            return supplied[parameter.position]

        if parameter.has_default:
            return parameter.default

        cls = parameter.injectable_type
        if cls is not None and container is not None and container.has(cls):
            logger.debug("Autowiring parameter '%s' with %s", parameter.name, cls.__qualname__)
            return container.get(cls)

        raise MissingArgumentError(parameter, target)


def build_call(
    parameters: Sequence[ParameterSpec],
    resolved: list[Any] | ArgumentMap,
    supplied: ArgumentMap,
) -> tuple[list[Any], dict[str, Any]]:
    """Split resolved values into positional and keyword arguments.

    Supplied arguments that match no declared parameter are forwarded only
    through a declared `*args` (int keys, in key order) or `**kwargs` (str keys).
    """
    regular = [p for p in parameters if not p.is_variadic]
    args: list[Any] = []
    kwargs: dict[str, Any] = {}

    if regular:
        for p, value in zip(regular, resolved, strict=True):
            if p.kind is inspect.Parameter.KEYWORD_ONLY:
                kwargs[p.name] = value
            else:
                args.append(value)

    kinds = {p.kind for p in parameters}

    if inspect.Parameter.VAR_POSITIONAL in kinds:
        n_positional = sum(1 for p in regular if p.kind in _POSITIONAL)
        taken = {p.position for p in regular}
        extra = sorted(k for k in supplied if type(k) is int and k >= n_positional and k not in taken)
        args.extend(supplied[k] for k in extra)

    if inspect.Parameter.VAR_KEYWORD in kinds:
        declared = {p.name for p in regular}
        kwargs.update({k: v for k, v in supplied.items() if isinstance(k, str) and k not in declared})

    return args, kwargs


def _get_type_hints(target: Any) -> dict[str, Any]:
    if not inspect.isclass(target):
        return _hints_of(target, target)

    hints: dict[str, Any] = {}
    for attr in ("__new__", "__init__"):
        func = inspect.getattr_static(target, attr, None)
        hints.update(_hints_of(getattr(func, "__func__", func), target))
    return hints


def _hints_of(func: Any, owner: Any) -> dict[str, Any]:
    try:
        hints = get_type_hints(func)
    except TypeError:
        hints = {}
    except NameError as exc:
        owner_name = getattr(owner, "__qualname__", repr(owner))
        logger.warning("'%s' name error retrieving %s type hints", exc.name or exc, owner_name)
        hints = {}

    hints.pop("return", None)
    return hints
