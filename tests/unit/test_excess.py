"""Tests for strict object codecs."""

import pytest

from typedrest.codecs import (
    case_insensitive_object,
    declared_keys,
    integer,
    intersection,
    named,
    object_,
    partial,
    readonly,
    recursive,
    refinement,
    strict,
    string,
    union,
)
from typedrest.result import Err, Ok


def test_strict_object_accepts_exact_keys() -> None:
    codec = strict(object_({"a": integer, "b": integer}))
    assert codec.decode({"a": 1, "b": 2}) == Ok({"a": 1, "b": 2})


def test_strict_object_reports_one_failure_per_excess_key() -> None:
    codec = strict(object_({"a": integer, "b": integer}))
    result = codec.decode({"a": 1, "b": 2, "c": 3})
    assert isinstance(result, Err)
    (failure,) = result.error
    assert failure.path == ("c",)
    assert failure.actual == 3
    assert failure.message == 'excess key "c" found'


def test_strict_partial_reports_all_excess_keys() -> None:
    codec = strict(partial({"a": integer}))
    assert codec.decode({}) == Ok({})
    result = codec.decode({"x": 1, "y": 2})
    assert isinstance(result, Err)
    assert [failure.path for failure in result.error] == [("x",), ("y",)]


def test_base_failures_take_precedence() -> None:
    result = strict(object_({"a": integer})).decode({"a": "x", "z": 1})
    assert isinstance(result, Err)
    assert [failure.path for failure in result.error] == [("a",)]


def test_strict_rejects_non_mappings() -> None:
    assert isinstance(strict(object_({})).decode(["a"]), Err)
    assert isinstance(strict(object_({})).decode(None), Err)


def test_declared_keys_flatten_through_combinators() -> None:
    codec = intersection(
        object_({"a": integer}),
        readonly(partial({"b": integer})),
        refinement(object_({"c": integer}), lambda value: True, "Checked"),
        named(object_({"d": string}), "Named"),
    )
    assert declared_keys(codec) == {"a", "b", "c", "d"}
    assert strict(codec).decode({"a": 1, "c": 2, "d": "x"}) == Ok({"a": 1, "c": 2, "d": "x"})
    assert isinstance(strict(codec).decode({"a": 1, "c": 2, "d": "x", "e": 0}), Err)


def test_declared_keys_through_recursive_definitions() -> None:
    linked = recursive("Linked", lambda self: intersection(object_({"value": integer}), partial({"next": self})))
    assert declared_keys(linked) == {"value", "next"}
    codec = strict(linked)
    assert codec.decode({"value": 1, "next": {"value": 2}}) == Ok({"value": 1, "next": {"value": 2}})


def test_unions_cannot_be_made_strict() -> None:
    with pytest.raises(TypeError):
        strict(union(object_({"a": integer}), object_({"b": integer})))


def test_strict_names() -> None:
    assert strict(object_({"a": string})).name == "{| a: string |}"
    assert strict(partial({"a": string})).name == "Partial<{| a: string |}>"
    assert strict(intersection(object_({"a": string}))).name == "Excess<({ a: string })>"
    assert strict(object_({"a": string}), name="Body").name == "Body"


def test_strict_encode_drops_excess_keys() -> None:
    codec = strict(object_({"a": string}))
    assert codec.encode({"a": "x", "z": 1}) == {"a": "x"}
    assert codec.is_instance({"a": "x"})
    assert not codec.is_instance({"a": "x", "z": 1})


def test_strict_case_insensitive_headers() -> None:
    codec = strict(case_insensitive_object({"Authorization-Token": string}))
    assert codec.decode({"Authorization-Token": "t"}) == Ok({"authorization-token": "t"})
    result = codec.decode({"Authorization-Token": "t", "Cookie": "c"})
    assert isinstance(result, Err)
    assert [failure.path for failure in result.error] == [("Cookie",)]
