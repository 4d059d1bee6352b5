from __future__ import annotations

import builtins
import importlib
import inspect
import typing
from collections.abc import Mapping, Sequence
from typing import Any, Protocol, cast, runtime_checkable

from ._errors import InvalidTypeError


ArgumentMap = Mapping[str | int, Any]


@runtime_checkable
class ContainerRef(Protocol):
    """What the core needs from a hosting container.

    Keys are the annotated classes of the parameters being autowired.
    """

    def has(self, key: Any) -> bool: ...

    def get(self, key: Any) -> object: ...


def as_argument_map(arguments: ArgumentMap | Sequence[Any] | None) -> dict[str | int, Any]:
    """Copy `arguments` into a plain dict; sequences become position-keyed."""
    if arguments is None:
        return {}
    if isinstance(arguments, Mapping):
        return dict(arguments)
    if isinstance(arguments, Sequence) and not isinstance(arguments, (str, bytes)):
        return dict(enumerate(arguments))

    msg = f"Arguments must be a mapping or a sequence, got {type(arguments).__name__}"
    raise TypeError(msg)


def locate(path: str) -> Any:
    """Import the object named by a dotted path (`pkg.module.Class.Inner`).

    Bare names are looked up in `builtins`.
    """
    parts = path.split(".") if isinstance(path, str) else []
    if not parts or not all(part.isidentifier() for part in parts):
        msg = f"{path!r} is not a dotted name."
        raise InvalidTypeError(msg)

    if len(parts) == 1:
        try:
            return getattr(builtins, path)
        except AttributeError:
            msg = f"{path!r} does not name an existing object."
            raise InvalidTypeError(msg) from None

    for split in range(len(parts) - 1, 0, -1):
        module_name = ".".join(parts[:split])
        try:
            obj = importlib.import_module(module_name)
        except ModuleNotFoundError as exc:
            # only a missing `module_name` (or one of its parents) means "try a shorter prefix"
            if exc.name and (module_name == exc.name or module_name.startswith(exc.name + ".")):
                continue
            raise

        try:
            for attr in parts[split:]:
                obj = getattr(obj, attr)
        except AttributeError:
            msg = f"{path!r} does not name an existing object."
            raise InvalidTypeError(msg) from None
        return obj

    msg = f"{path!r} does not name an existing object."
    raise InvalidTypeError(msg)


def locate_class(service_type: type | str) -> type:
    """Accept a class or a dotted class name and return the class."""
    cls = locate(service_type) if isinstance(service_type, str) else service_type
    if not inspect.isclass(cls):
        msg = f"A class expected, got {service_type!r}."
        raise InvalidTypeError(msg)
    return cls


def type_name(cls: type) -> str:
    return cls.__qualname__


def check_instantiable(cls: type) -> None:
    """Raise InvalidTypeError for abstract classes and protocols."""
    if inspect.isabstract(cls) or is_protocol(cls):
        msg = f"{type_name(cls)} class is not instantiable."
        raise InvalidTypeError(msg)


if hasattr(typing, "is_protocol"):
    # https://docs.python.org/3/library/typing.html#typing.is_protocol
    def is_protocol(tp: type) -> bool:
        return inspect.isclass(tp) and typing.is_protocol(tp)

else:

    def is_protocol(tp: type) -> bool:
        """Detect whether 'tp' is a typing.Protocol class itself (not a nominal implementation)."""
        return (
            inspect.isclass(tp)
            and issubclass(tp, cast("type", Protocol))
            and bool(getattr(tp, "_is_protocol", False))
        )
