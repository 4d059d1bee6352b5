import functools
import unittest
from unittest.mock import MagicMock

import pytest
import sample_services
from sample_services import Car, Engine, Greeter

from litedim import (
    CallableInvoker,
    FunctionTarget,
    InaccessibleMethodError,
    InvalidCallableError,
    InvalidTypeError,
    MethodTarget,
    MissingArgumentError,
    invoke,
    normalize_callable,
)


class TestNormalizeCallable(unittest.TestCase):
    def test_pair_becomes_method_target(self):
        greeter = Greeter()
        target = normalize_callable((greeter, "greet"))
        assert target == MethodTarget(greeter, "greet", "Greeter")

    def test_pair_with_type_name_locates_class(self):
        target = normalize_callable(["sample_services.Greeter", "create"])
        assert target.owner is Greeter
        assert target.owner_name == "sample_services.Greeter"

    def test_scope_string_becomes_method_target(self):
        target = normalize_callable("sample_services.Greeter::shout")
        assert target == MethodTarget(Greeter, "shout", "sample_services.Greeter")

    def test_callable_object_becomes_call_method_target(self):
        greeter = Greeter()
        target = normalize_callable(greeter)
        assert target == MethodTarget(greeter, "__call__", "Greeter")

    def test_function_class_and_partial_become_function_targets(self):
        partial = functools.partial(sample_services.make_car, name="p")
        for ref in (sample_services.make_car, Car, partial, len):
            assert normalize_callable(ref) == FunctionTarget(ref)

    def test_dotted_function_name_is_located(self):
        assert normalize_callable("sample_services.make_car") == FunctionTarget(sample_services.make_car)

    def test_non_callable_raises(self):
        with pytest.raises(InvalidCallableError, match="A callable expected."):
            normalize_callable(42)
        with pytest.raises(InvalidCallableError, match="A callable expected."):
            normalize_callable("foo")
        with pytest.raises(InvalidCallableError):
            normalize_callable("sample_services.not_callable")

    def test_unknown_type_in_scope_string_raises(self):
        with pytest.raises(InvalidTypeError):
            normalize_callable("sample_services.Missing::create")


def test_invoke_bound_method_pair():
    assert invoke((Greeter("hey"), "greet"), {"name": "bob"}) == "hey bob"


def test_invoke_scope_string_class_method():
    greeter = invoke("sample_services.Greeter::create")
    assert isinstance(greeter, Greeter)
    assert greeter.greeting == "hi"


def test_invoke_scope_string_static_method():
    assert invoke("sample_services.Greeter::shout", ["abc"]) == "ABC"


def test_invoke_callable_object():
    assert invoke(Greeter("yo"), {0: "ann"}) == "yo ann!"


def test_invoke_closure():
    engine = Engine()
    assert invoke(lambda: engine) is engine


def test_invoke_zero_parameter_function_ignores_arguments():
    def build():
        return "built"

    assert invoke(build, [1, 2, 3]) == "built"


def test_invoke_dotted_function_autowires_from_container():
    engine = Engine()
    container = MagicMock()
    container.has.return_value = True
    container.get.return_value = engine

    car = invoke("sample_services.make_car", None, container)

    assert car.engine is engine
    assert car.name == "built"
    container.has.assert_called_once_with(Engine)


def test_invoke_class_instantiates_it():
    car = invoke(Car, {"engine": Engine()})
    assert isinstance(car, Car)


def test_invoke_callable_without_signature_receives_arguments():
    def collect(*args, **kwargs):
        return args, kwargs

    collect.__signature__ = "not a signature"  # makes inspect.signature() fail

    assert invoke(collect, {1: "b", 0: "a", "key": "v"}) == (("a", "b"), {"key": "v"})


def test_invoke_missing_argument_raises():
    with pytest.raises(MissingArgumentError):
        invoke((Greeter(), "greet"))


def test_invoke_protected_method_by_scope_string_raises():
    with pytest.raises(InaccessibleMethodError) as ctx:
        invoke("sample_services.Greeter::_secret")
    assert str(ctx.value) == "Cannot access non-public method sample_services.Greeter::_secret."


def test_invoke_protected_method_by_pair_raises():
    with pytest.raises(InaccessibleMethodError, match="Greeter::_secret"):
        invoke((Greeter(), "_secret"))


def test_invoke_private_method_raises_inaccessible_not_missing():
    with pytest.raises(InaccessibleMethodError, match="Greeter::__hidden"):
        invoke((Greeter(), "__hidden"))


def test_invoke_unknown_method_raises():
    with pytest.raises(InvalidTypeError, match="Greeter::nope"):
        invoke((Greeter(), "nope"))


def test_invoker_uses_given_resolver():
    resolver = MagicMock()
    resolver.resolve.return_value = ["from-resolver"]

    def echo(value):
        return value

    assert CallableInvoker(resolver).invoke(echo, {"value": "ignored"}) == "from-resolver"
    resolver.resolve.assert_called_once()


def test_invoke_error_raised_by_target_propagates_unchanged():
    failure = LookupError("no such user")

    def find_user(user_id):
        raise failure

    with pytest.raises(LookupError) as ctx:
        invoke(find_user, [7])

    assert ctx.value is failure


def test_invoke_missing_argument_never_calls_target():
    target = MagicMock()

    def handler(request, engine: Engine):
        target(request, engine)

    container = MagicMock()
    container.has.return_value = False

    with pytest.raises(MissingArgumentError):
        invoke(handler, {"request": "req"}, container)

    target.assert_not_called()
