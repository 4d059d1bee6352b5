"""Minimal dependency injection core.

This package resolves the parameters of one constructor or callable at a time:
each parameter is taken from the supplied arguments (by name, then by position),
from its declared default, or autowired from a hosting container by its
annotated class.

Exports:
- `Service`: binds a concrete class to default arguments; calling it builds a new instance.
- `Factory`: binds a class identity to a factory callable and default arguments.
- `instantiate` / `invoke`: one-off class instantiation and callable invocation.
- `ContainerRef`: the `has`/`get` protocol a hosting container implements.
"""

from ._errors import (
    InaccessibleMethodError,
    InvalidCallableError,
    InvalidTypeError,
    MissingArgumentError,
    ResolutionError,
)
from ._instantiator import ClassInstantiator, instantiate
from ._invoker import CallableInvoker, FunctionTarget, MethodTarget, invoke, normalize_callable
from ._parameters import ParameterResolver, ParameterSpec, describe_parameters
from ._service import Factory, Service, ServiceProvider
from ._types import ArgumentMap, ContainerRef


__all__ = [
    "ArgumentMap",
    "CallableInvoker",
    "ClassInstantiator",
    "ContainerRef",
    "Factory",
    "FunctionTarget",
    "InaccessibleMethodError",
    "InvalidCallableError",
    "InvalidTypeError",
    "MethodTarget",
    "MissingArgumentError",
    "ParameterResolver",
    "ParameterSpec",
    "ResolutionError",
    "Service",
    "ServiceProvider",
    "describe_parameters",
    "instantiate",
    "invoke",
    "normalize_callable",
]
