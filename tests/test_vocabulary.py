"""Tests for the schema vocabulary (tokens, combinators, markers)."""

import asyncio

import pytest

from shapecheck.vocabulary import (
    DEFAULT_STRUCT_NAME,
    TYPE_NAME_KEY,
    EqualMarker,
    PromiseMarker,
    UnknownMarker,
    define_type,
    marker_from_mapping,
    marker_key,
    t,
)


def test_tokens():
    assert t.any == "*"
    assert t.number == "Number"
    assert t.string == "String"
    assert t.bool == t.boolean == "Boolean"
    assert t.array == "Array"
    assert t.func == "Function"
    assert t.object == "Object"
    assert t.date == "Date"


def test_combinators():
    assert t.one_of(t.number, t.string) == "Number | String"
    assert t.array_of(t.number, t.string) == "[Number | String]"
    assert t.maybe(t.number) == "Maybe Number"


def test_equal_marker():
    marker = t.equal("a", "b")
    assert marker == EqualMarker(("a", "b"))
    assert marker.accepts("a")
    assert not marker.accepts("c")


def test_equal_does_not_confuse_bool_and_int():
    assert not t.equal(1).accepts(True)
    assert t.equal(True).accepts(True)
    assert t.equal(1).accepts(1.0)


def test_equal_accepts_nan():
    assert t.equal(float("nan")).accepts(float("nan"))
    assert not t.equal(float("nan")).accepts(1.0)
    assert not t.equal(1.0).accepts(float("nan"))


def test_promise_marker():
    loop = asyncio.new_event_loop()
    try:
        future = loop.create_future()
        assert t.promise.accepts(future)
    finally:
        loop.close()
    assert not t.promise.accepts(5)


def test_promise_marker_accepts_coroutine():
    async def work():
        return 1

    coro = work()
    try:
        assert t.promise.accepts(coro)
    finally:
        coro.close()


def test_define_type_is_frozen():
    user = define_type("User", {"id": t.number})
    assert user[TYPE_NAME_KEY] == "User"
    assert user["id"] == "Number"
    with pytest.raises(TypeError):
        user["id"] = "String"


def test_object_struct_names():
    assert t.object_struct({"a": t.number})[TYPE_NAME_KEY] == DEFAULT_STRUCT_NAME
    named = t.object_struct({TYPE_NAME_KEY: "Point", "x": t.number})
    assert named[TYPE_NAME_KEY] == "Point"
    assert t.object_struct() == {TYPE_NAME_KEY: DEFAULT_STRUCT_NAME}


def test_marker_from_plain_mapping():
    assert marker_from_mapping({marker_key("equal"): ["x", "y"]}) == EqualMarker(("x", "y"))
    assert marker_from_mapping({marker_key("equal"): "x"}) == EqualMarker(("x",))
    assert marker_from_mapping({marker_key("promise"): True}) == PromiseMarker()
    assert marker_from_mapping({marker_key("regex"): ".*"}) == UnknownMarker("regex")
    assert marker_from_mapping({"a": "Number"}) is None
    assert marker_from_mapping({}) is None
