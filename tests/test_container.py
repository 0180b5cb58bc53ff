# tests/test_container.py
import pytest

from pico_di import (
    CircularReferenceError,
    CompositeContainer,
    Container,
    ContainerInterface,
    Injector,
    InvalidConfigurationError,
    NotFoundError,
    NotInstantiableError,
    Reference,
    ValueDefinition,
)
from pico_di.keys import key_of

# --- Test Helpers ---


class Mailer:
    pass


class Newsletter:
    def __init__(self, mailer: Mailer):
        self.mailer = mailer


class Greeter:
    def __init__(self, greeting: str = "hello", name: str = "world"):
        self.greeting = greeting
        self.name = name


class NeedsContainer:
    def __init__(self, container: ContainerInterface):
        self.container = container


class Wrapper:
    def __init__(self, inner):
        self.inner = inner


class Exploding:
    def __init__(self):
        raise ValueError("boom")


def make_a(container: ContainerInterface):
    return ("a", container.get("b"))


def make_b(container: ContainerInterface):
    return ("b", container.get("a"))


# --- Memoization ---

def test_get_returns_identical_instance():
    c = Container({"mailer": Mailer})
    first = c.get("mailer")
    assert isinstance(first, Mailer)
    assert c.get("mailer") is first


def test_set_invalidates_cached_instance():
    c = Container({"mailer": Mailer})
    first = c.get("mailer")
    c.set("mailer", Mailer)
    second = c.get("mailer")
    assert second is not first
    assert c.get("mailer") is second


def test_class_key_and_dotted_name_address_same_service():
    c = Container({Mailer: Mailer})
    assert c.get(Mailer) is c.get(key_of(Mailer))


def test_none_is_a_cacheable_value():
    calls = []

    def make_nothing():
        calls.append(1)
        return None

    c = Container({"nothing": make_nothing})
    assert c.get("nothing") is None
    assert c.get("nothing") is None
    assert calls == [1]


# --- has() ---

def test_has_registered_and_unknown():
    c = Container({"mailer": Mailer})
    assert c.has("mailer") is True
    assert c.has("missing") is False
    assert c.has(ContainerInterface) is True
    assert c.has(Injector) is True


def test_has_instantiable_class_paths():
    c = Container()
    assert c.has("pico_di.composite.CompositeContainer") is True
    assert c.has("collections.abc.Mapping") is False
    assert c.has("no.such.module.Thing") is False
    assert c.has(Mailer) is True
    assert c.has(str) is False


def test_has_rejects_invalid_keys_quietly():
    c = Container()
    assert c.has(123) is False


# --- Building ---

def test_autowires_class_dependencies():
    c = Container()
    newsletter = c.get(Newsletter)
    assert newsletter.mailer is c.get(Mailer)


def test_builds_class_from_dotted_path_without_definition():
    c = Container()
    built = c.get("pico_di.composite.CompositeContainer")
    assert isinstance(built, CompositeContainer)


def test_abstract_class_path_is_not_instantiable():
    c = Container()
    with pytest.raises(NotInstantiableError):
        c.get("collections.abc.Mapping")


def test_unknown_identifier_raises_not_found():
    c = Container()
    with pytest.raises(NotFoundError) as exc:
        c.get("missing")
    assert exc.value.key == "missing"
    assert isinstance(exc.value, LookupError)


def test_invalid_identifier_type():
    c = Container()
    with pytest.raises(InvalidConfigurationError):
        c.get(42)
    with pytest.raises(InvalidConfigurationError, match="Key must be a string"):
        c.set_multiple({1: Mailer})


def test_recipe_definition_with_arguments_and_properties():
    c = Container({
        "greeter": {"class": Greeter, "arguments": {"greeting": "hi"}, "properties": {"name": "bob"}},
        "positional": {"class": Greeter, "arguments": ["hey", "ann"]},
    })
    greeter = c.get("greeter")
    assert (greeter.greeting, greeter.name) == ("hi", "bob")
    positional = c.get("positional")
    assert (positional.greeting, positional.name) == ("hey", "ann")


def test_recipe_arguments_may_hold_references():
    c = Container({
        "mailer": Mailer,
        "newsletter": {"class": Newsletter, "arguments": {"mailer": Reference.to("mailer")}},
    })
    assert c.get("newsletter").mailer is c.get("mailer")


def test_aliases_resolve_to_the_same_instance():
    c = Container({
        Mailer: Mailer,
        "by_reference": Reference.to(Mailer),
        "by_string": key_of(Mailer),
    })
    assert c.get("by_reference") is c.get(Mailer)
    assert c.get("by_string") is c.get(Mailer)


def test_prebuilt_values_are_returned_as_is():
    mailer = Mailer()
    settings = {"dsn": "sqlite://"}
    c = Container({"mailer": mailer, "settings": ValueDefinition(settings), "port": 8080})
    assert c.get("mailer") is mailer
    assert c.get("settings") is settings
    assert c.get("port") == 8080


def test_params_apply_to_the_build_only():
    c = Container({"greeter": Greeter})
    built = c.get("greeter", {"greeting": "yo"})
    assert built.greeting == "yo"
    again = c.get("greeter", {"greeting": "ignored"})
    assert again is built


def test_constructor_errors_propagate_unchanged():
    c = Container({"exploding": Exploding})
    with pytest.raises(ValueError, match="boom"):
        c.get("exploding")
    c.set("exploding", Mailer)
    assert isinstance(c.get("exploding"), Mailer)


# --- Circular references ---

def test_circular_reference_names_the_chain():
    c = Container({"a": make_a, "b": make_b})
    with pytest.raises(CircularReferenceError) as exc:
        c.get("a")
    assert exc.value.key == "a"
    assert exc.value.chain == ("a", "b")
    assert "'a'" in str(exc.value)
    assert "b" in str(exc.value)


def test_building_set_is_released_after_a_cycle():
    c = Container({"a": make_a, "b": make_b})
    with pytest.raises(CircularReferenceError):
        c.get("a")
    c.set("b", ValueDefinition("plain-b"))
    assert c.get("a") == ("a", "plain-b")


def test_self_dependency_is_a_cycle():
    def make_self(container: ContainerInterface):
        return container.get("me")

    c = Container({"me": make_self})
    with pytest.raises(CircularReferenceError) as exc:
        c.get("me")
    assert exc.value.chain == ("me",)


# --- The container as a dependency ---

def test_container_is_available_as_dependency():
    c = Container()
    assert c.get(ContainerInterface) is c
    assert c.get(NeedsContainer).container is c


def test_container_self_reference_inside_its_own_definition():
    def wrap(container: ContainerInterface):
        return Wrapper(container)

    c = Container()
    c.set(ContainerInterface, wrap)
    wrapped = c.get(ContainerInterface)
    assert isinstance(wrapped, Wrapper)
    assert wrapped.inner is c


def test_caller_definitions_override_defaults():
    custom = Injector(Container())
    c = Container({Injector: custom})
    assert c.get(Injector) is custom


def test_default_injector_invokes_with_container_arguments():
    c = Container({Mailer: Mailer})
    injector = c.get(Injector)
    assert injector.container is c
    assert injector.invoke(lambda: 5) == 5
    newsletter = injector.make(Newsletter)
    assert newsletter.mailer is c.get(Mailer)


# --- Stats and logging ---

def test_stats_track_builds_and_hits():
    c = Container({"mailer": Mailer})
    before = c.stats()
    c.get("mailer")
    c.get("mailer")
    after = c.stats()
    assert after["builds"] == before["builds"] + 1
    assert after["cache_hits"] == before["cache_hits"] + 1
    assert after["definitions"] == 3


def test_build_is_logged(captured_logs):
    c = Container({"mailer": Mailer})
    c.get("mailer")
    assert any("Building 'mailer'" in line for line in captured_logs)
