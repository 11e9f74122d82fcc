"""
Round Trip Test Suite

Generates code for sample validators, executes it, and checks that the
rebuilt validators accept and reject exactly the same values as the
originals.
"""

import sys
from pathlib import Path

# Add src directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest

from jsval.core.constraints import (
    EMPTY_CONSTRAINT,
    AllConstraint,
    AnyConstraint,
    ArrayConstraint,
    BooleanConstraint,
    ConstraintMap,
    IntegerConstraint,
    JSVal,
    NotConstraint,
    NumberConstraint,
    ObjectConstraint,
    OneOfConstraint,
    ReferenceConstraint,
    StringConstraint,
)
from jsval.core.errors import ValidationError
from jsval.generators.formatter import CheckedFormatter
from jsval.generators.program import Generator


def passes(validator, value) -> bool:
    try:
        validator.validate(value)
    except ValidationError:
        return False
    return True


def rebuild(validators, formatter=None) -> dict:
    """Execute generated code and return its namespace"""
    source = Generator(formatter=formatter).generate(validators)
    namespace: dict = {}
    exec(compile(source, "<generated>", "exec"), namespace)
    return namespace


def person():
    cmap = ConstraintMap()
    address = (
        ObjectConstraint()
        .required("city")
        .add_prop("city", StringConstraint().min_length(1))
        .add_prop("zip", StringConstraint().regexp_string(r"^\d{5}$"))
    )
    root = (
        ObjectConstraint()
        .required("name", "email")
        .add_prop("name", StringConstraint().min_length(1).max_length(20))
        .add_prop("email", StringConstraint().format("email"))
        .add_prop("age", IntegerConstraint().minimum(0).maximum(150))
        .add_prop("score", NumberConstraint().minimum(0).exclusive_minimum(True).maximum(1.5))
        .add_prop("active", BooleanConstraint().default(True))
        .add_prop("role", StringConstraint().enum("admin", "user"))
        .add_prop("home", ReferenceConstraint(cmap).refers_to("#/definitions/address"))
        .prop_dependency("score", "age")
        .additional_properties(NotConstraint(EMPTY_CONSTRAINT))
    )
    return JSVal("Person").set_constraint_map(cmap).set_reference("#/definitions/address", address).set_root(root)


PERSON_VALUES = [
    {"name": "Ann", "email": "ann@example.com"},
    {"name": "", "email": "ann@example.com"},
    {"name": "Ann"},
    {"name": "Ann", "email": "nope"},
    {"name": "Ann", "email": "ann@example.com", "age": -1},
    {"name": "Ann", "email": "ann@example.com", "age": 30, "score": 1.5},
    {"name": "Ann", "email": "ann@example.com", "score": 0.5},
    {"name": "Ann", "email": "ann@example.com", "age": 30, "score": 0},
    {"name": "Ann", "email": "ann@example.com", "role": "admin"},
    {"name": "Ann", "email": "ann@example.com", "role": "root"},
    {"name": "Ann", "email": "ann@example.com", "home": {"city": "Oslo", "zip": "12345"}},
    {"name": "Ann", "email": "ann@example.com", "home": {"zip": "12345"}},
    {"name": "Ann", "email": "ann@example.com", "home": {"city": "Oslo", "zip": "12a45"}},
    {"name": "Ann", "email": "ann@example.com", "nickname": "A"},
    {"name": "Ann", "email": "ann@example.com", "active": "yes"},
    [],
    "Ann",
]


def tree():
    cmap = ConstraintMap()
    node = (
        ObjectConstraint()
        .required("value")
        .add_prop("value", IntegerConstraint())
        .add_prop("children", ArrayConstraint().items(ReferenceConstraint(cmap).refers_to("#/definitions/node")))
    )
    return JSVal("Tree").set_constraint_map(cmap).set_reference("#/definitions/node", node).set_root(node)


TREE_VALUES = [
    {"value": 1},
    {"value": 1, "children": []},
    {"value": 1, "children": [{"value": 2, "children": [{"value": 3}]}]},
    {"value": 1, "children": [{"value": "2"}]},
    {"value": 1, "children": [{"children": []}]},
    {"children": []},
]


def shapes():
    circle = ObjectConstraint().required("radius").add_prop("radius", NumberConstraint().minimum(0))
    square = ObjectConstraint().required("side").add_prop("side", IntegerConstraint().minimum(1))
    root = (
        AllConstraint()
        .add(OneOfConstraint().add(circle).add(square))
        .add(NotConstraint(ObjectConstraint().required("forbidden")))
    )
    return JSVal("Shape").set_root(root)


SHAPE_VALUES = [
    {"radius": 1.5},
    {"side": 2},
    {"radius": 1, "side": 2},
    {"side": 0},
    {"radius": 1, "forbidden": True},
    {},
]


def row():
    root = (
        ArrayConstraint()
        .positional_items([StringConstraint(), IntegerConstraint(), AnyConstraint()])
        .additional_items(AnyConstraint().add(BooleanConstraint()).add(NumberConstraint().maximum(0)))
        .min_items(2)
        .max_items(5)
        .unique_items(True)
    )
    return JSVal().set_root(root)


ROW_VALUES = [
    ["a", 1],
    ["a", 1, "anything"],
    ["a", 1, None, True, -3],
    ["a", 1, None, 4],
    [1, "a"],
    ["a"],
    ["a", 1, None, True, False, -1],
    ["a", 1, "x", "x"],
]


SAMPLES = [
    (person, PERSON_VALUES),
    (tree, TREE_VALUES),
    (shapes, SHAPE_VALUES),
    (row, ROW_VALUES),
]


class TestRoundTrip:
    """Generated validators behave like the originals"""

    @pytest.mark.parametrize("factory, values", SAMPLES)
    def test_outcomes_match(self, factory, values):
        original = factory()
        name = original.name or "V0"
        rebuilt = rebuild([original])[name]
        for value in values:
            assert passes(rebuilt, value) == passes(original, value), value

    @pytest.mark.parametrize("factory, values", SAMPLES)
    def test_outcomes_match_with_unformatted_source(self, factory, values):
        original = factory()
        name = original.name or "V0"
        rebuilt = rebuild([original], formatter=CheckedFormatter())[name]
        for value in values:
            assert passes(rebuilt, value) == passes(original, value), value

    def test_samples_are_not_trivial(self):
        for factory, values in SAMPLES:
            outcomes = {passes(factory(), v) for v in values}
            assert outcomes == {True, False}

    def test_all_validators_in_one_module(self):
        originals = [person(), tree(), shapes()]
        namespace = rebuild(originals)
        for original, (_, values) in zip(originals, SAMPLES):
            rebuilt = namespace[original.name]
            for value in values:
                assert passes(rebuilt, value) == passes(original, value)

    def test_regenerating_rebuilt_graph_is_stable(self):
        original = shapes()
        first = Generator().generate([original])
        rebuilt = rebuild([original])["Shape"]
        rebuilt.set_name("Shape")
        assert Generator().generate([rebuilt]) == first

    def test_same_reference_name_with_different_roots(self):
        number, text = IntegerConstraint(), StringConstraint().max_length(3)
        first = JSVal("VA").set_reference("#/x", number).set_root(number)
        second = JSVal("VB").set_reference("#/x", text).set_root(text)
        namespace = rebuild([first, second])
        for value in ["abc", "abcd", 7, None]:
            assert passes(namespace["VA"], value) == passes(first, value), value
            assert passes(namespace["VB"], value) == passes(second, value), value

    def test_defaults_survive(self):
        v = JSVal("D").set_root(
            ObjectConstraint()
            .default({"flag": True, "tags": ["a"]})
            .add_prop("flag", BooleanConstraint().default(False))
            .add_prop("n", NumberConstraint().default(0.25))
        )
        rebuilt = rebuild([v])["D"]
        assert rebuilt.root.default_value() == {"flag": True, "tags": ["a"]}
        assert rebuilt.root.properties["flag"].default_value() is False
        assert rebuilt.root.properties["n"].default_value() == 0.25
