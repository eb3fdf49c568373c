"""Tests for equality.py"""

import pytest
from immutables import Map
from pydantic import BaseModel

from pyreselect import strict_equals, deep_equals


class Point(BaseModel):
    x: int
    y: int
    tags: list = []


@pytest.mark.parametrize(
    "a, b, expected",
    [
        (1, 1, True),
        (10 ** 6, int("1000000"), True),
        ("abc", "".join(["a", "b", "c"]), True),
        (None, None, True),
        (1, 1.0, False),
        (True, 1, False),
        ([1], [1], False),
        ({"a": 1}, {"a": 1}, False),
        (float("nan"), float("nan"), False),
    ],
)
def test_strict_equals(a, b, expected):
    assert strict_equals(a, b) is expected


def test_strict_equals_same_object():
    items = [1, 2]
    assert strict_equals(items, items)


@pytest.mark.parametrize(
    "a, b, expected",
    [
        ({"a": {"b": 1}}, {"a": {"b": 1}}, True),
        ({"a": {"b": 1}}, {"a": {"b": 2}}, False),
        ({"a": 1}, {"a": 1, "b": 2}, False),
        ([1, [2, 3]], [1, [2, 3]], True),
        ((1, 2), [1, 2], False),
        (Map(a=1, b=Map(c=2)), Map(a=1, b=Map(c=2)), True),
        (Map(a=1), {"a": 1}, False),
        ({1, 2}, {2, 1}, True),
    ],
)
def test_deep_equals(a, b, expected):
    assert deep_equals(a, b) is expected


def test_deep_equals_pydantic_models():
    assert deep_equals(Point(x=1, y=2, tags=["a"]), Point(x=1, y=2, tags=["a"]))
    assert not deep_equals(Point(x=1, y=2), Point(x=1, y=3))


def test_deep_equals_swallows_comparison_errors():
    class Grumpy:
        def __eq__(self, other):
            raise RuntimeError("no comparing")

    assert deep_equals(Grumpy(), Grumpy()) is False
