# tests/test_definitions.py
from typing import Optional

import pytest

from pico_di import (
    CallableDefinition,
    ClassDefinition,
    Container,
    InvalidConfigurationError,
    NotInstantiableError,
    Reference,
    ValueDefinition,
    tagged,
)
from pico_di.injection import Injector, resolve_arguments
from pico_di.normalizer import normalize, validate
from pico_di.registry import parse_definition


class Engine:
    pass


class Car:
    def __init__(self, engine: Engine, color: str = "red", spare: Optional[Engine] = None):
        self.engine = engine
        self.color = color
        self.spare = spare


class NeedsName:
    def __init__(self, name):
        self.name = name


class PositionalOnly:
    def __init__(self, a, b, /, c=3):
        self.values = (a, b, c)


class Flexible:
    def __init__(self, **options):
        self.options = options


# --- normalize ---

def test_normalize_variants():
    definition = ValueDefinition(1)
    assert normalize(definition) is definition
    assert isinstance(normalize(Engine), ClassDefinition)
    assert isinstance(normalize({"class": Engine}), ClassDefinition)
    assert isinstance(normalize(lambda: 1), CallableDefinition)
    assert normalize("other", "svc") == Reference("other")
    assert isinstance(normalize(42), ValueDefinition)


def test_normalize_self_named_class_path():
    key = "pico_di.composite.CompositeContainer"
    definition = normalize(key, key)
    assert isinstance(definition, ClassDefinition)
    with pytest.raises(InvalidConfigurationError, match="not an importable class"):
        normalize("svc", "svc")


def test_normalize_recipe_with_class_path():
    definition = normalize({"class": "pico_di.composite.CompositeContainer"})
    assert definition.class_.__name__ == "CompositeContainer"


@pytest.mark.parametrize(
    "raw, message",
    [
        ("", "must not be empty"),
        ({"arguments": []}, "requires a 'class' key"),
        ({"class": Engine, "calls": []}, "Invalid definition keys: calls"),
        ({"class": Engine, "arguments": "x"}, "must be a list or a mapping"),
        ({"class": Engine, "properties": []}, "must be a mapping"),
        ({"class": "no.such.Klass"}, "must be a class or a dotted class path"),
    ],
)
def test_validate_rejects_malformed_definitions(raw, message):
    with pytest.raises(InvalidConfigurationError, match=message):
        validate(raw)


def test_set_validates_inner_definition():
    c = Container()
    with pytest.raises(InvalidConfigurationError):
        c.set("svc", {"__tags": ["x"], "__definition": {"arguments": []}})


# --- parse_definition ---

def test_parse_definition_shapes():
    evaluator = lambda container: 1  # noqa: E731
    assert parse_definition(Engine) == (Engine, (), None)
    assert parse_definition(tagged(Engine, "a", evaluator)) == (Engine, ("a",), evaluator)
    assert parse_definition({"__tags": ["a"], "__definition": Engine}) == (Engine, ("a",), None)
    assert parse_definition({"class": Engine, "__cache_tag": evaluator}) == ({"class": Engine}, (), evaluator)
    assert parse_definition({"class": Engine}) == ({"class": Engine}, (), None)


# --- ClassDefinition / CallableDefinition ---

def test_class_definition_uses_container_then_defaults():
    c = Container()
    car = ClassDefinition(Car).resolve(c)
    assert car.engine is c.get(Engine)
    assert car.color == "red"
    assert car.spare is c.get(Engine)


def test_class_definition_params_override_arguments():
    c = Container()
    car = ClassDefinition(Car, {"color": "blue"}).resolve(c, {"color": "green"})
    assert car.color == "green"


def test_class_definition_unresolvable_parameter():
    with pytest.raises(NotInstantiableError, match="unable to resolve parameter 'name'"):
        ClassDefinition(NeedsName).resolve(Container())


def test_class_definition_positional_only_parameters():
    built = ClassDefinition(PositionalOnly, [1, 2]).resolve(Container())
    assert built.values == (1, 2, 3)


def test_class_definition_rejects_builtins():
    with pytest.raises(NotInstantiableError):
        ClassDefinition(dict).resolve(Container())


def test_class_definition_properties_may_be_references():
    c = Container({"color": ValueDefinition("teal")})
    car = ClassDefinition(Car, properties={"color": Reference.to("color")}).resolve(c)
    assert car.color == "teal"


def test_callable_definition_with_params():
    def make_label(engine: Engine, suffix: str = "!"):
        return f"{type(engine).__name__}{suffix}"

    c = Container()
    assert CallableDefinition(make_label).resolve(c) == "Engine!"
    assert CallableDefinition(make_label).resolve(c, {"suffix": "?"}) == "Engine?"


def test_too_many_or_unknown_arguments():
    c = Container()
    with pytest.raises(InvalidConfigurationError, match="Too many positional arguments"):
        resolve_arguments(c, NeedsName, [1, 2])
    with pytest.raises(InvalidConfigurationError, match="Unknown arguments"):
        resolve_arguments(c, NeedsName, named={"name": 1, "other": 2})


def test_var_keyword_accepts_extra_arguments():
    built = ClassDefinition(Flexible, {"debug": True}).resolve(Container())
    assert built.options == {"debug": True}


def test_optional_without_provider_is_none():
    def describe(engine: Optional["Missing"] = None):  # noqa: F821
        return engine

    assert CallableDefinition(describe).resolve(Container()) is None


# --- Injector ---

def test_injector_make_rejects_non_classes_and_abstracts():
    injector = Injector(Container())
    with pytest.raises(InvalidConfigurationError):
        injector.make(lambda: 1)
    with pytest.raises(NotInstantiableError):
        injector.make(dict)


def test_injector_invoke_with_arguments():
    injector = Injector(Container())
    assert injector.invoke(lambda a, b=2: a + b, {"a": 1}) == 3
