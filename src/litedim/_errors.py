from __future__ import annotations

from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from ._parameters import ParameterSpec


class ResolutionError(RuntimeError):
    pass


class InvalidTypeError(ResolutionError):
    """Raised for unknown type names and for classes that cannot be instantiated."""


class InvalidCallableError(ResolutionError):
    pass


class InaccessibleMethodError(ResolutionError):
    pass


class MissingArgumentError(ResolutionError):
    """A required parameter has no supplied value, no default and no container binding."""

    def __init__(self, parameter: ParameterSpec, target: Any = None) -> None:
        self.parameter = parameter
        self.target = target

        where = f" of {_describe(target)}" if target is not None else ""
        ann = parameter.annotation
        ann_repr = getattr(ann, "__name__", repr(ann)) if ann is not None else "no-annotation"
        super().__init__(
            f"Cannot satisfy parameter '{parameter.name}' (position {parameter.position}){where}. "
            f"No argument/default/container binding found (annotation: {ann_repr})."
        )


def _describe(target: Any) -> str:
    return getattr(target, "__qualname__", None) or getattr(target, "__name__", None) or repr(target)
