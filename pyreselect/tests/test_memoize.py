"""Tests for memoize.py"""

import pytest

from pyreselect import create_memoizor, default_memoize, deep_equals, ConfigurationError
from pyreselect.tests.utils_for_testing import count_calls


def test_no_recompute_on_equal_arguments():
    f = count_calls(lambda a, b: (a, b))
    g = default_memoize(f)
    obj = object()

    first = g(obj, 1)
    assert g(obj, 1) is first
    assert f.calls == 1


def test_recompute_on_changed_argument():
    f = count_calls(lambda a: [a])
    g = default_memoize(f)

    g(1)
    g(2)
    assert f.calls == 2
    assert g.recomputations() == 2


def test_only_the_latest_call_is_cached():
    f = count_calls(lambda a: a)
    g = default_memoize(f)

    g(1)
    g(2)
    g(1)
    assert f.calls == 3


def test_argument_count_change_recomputes():
    f = count_calls(lambda *args: len(args))
    g = default_memoize(f)

    assert g(1) == 1
    assert g(1, None) == 2
    assert g(1, None) == 2
    assert f.calls == 2


def test_zero_argument_calls_are_cached():
    f = count_calls(lambda: object())
    g = default_memoize(f)
    assert g() is g()
    assert f.calls == 1


def test_strict_identity_for_containers():
    f = count_calls(lambda d: d.get("a"))
    g = default_memoize(f)

    g({"a": 1})
    g({"a": 1})
    assert f.calls == 2


def test_custom_equality():
    f = count_calls(lambda d: d["a"])
    g = create_memoizor(deep_equals)(f)

    g({"a": 1})
    g({"a": 1})
    assert f.calls == 1


def test_exception_leaves_cache_intact():
    def risky(x):
        if x < 0:
            raise ValueError("negative")
        return [x]

    f = count_calls(risky)
    g = default_memoize(f)
    first = g(1)

    with pytest.raises(ValueError, match="negative"):
        g(-1)

    # previous slot still holds the (1,) call
    assert g(1) is first
    assert f.calls == 2


def test_failed_call_is_retried():
    attempts = []

    def flaky(x):
        attempts.append(x)
        if len(attempts) == 1:
            raise RuntimeError("boom")
        return x

    g = default_memoize(flaky)
    with pytest.raises(RuntimeError):
        g(5)
    assert g(5) == 5
    assert attempts == [5, 5]


def test_cache_info_and_clear():
    g = default_memoize(lambda a: a)
    assert g.cache_info() == (0, 0, 1, 0)

    g(1)
    g(1)
    info = g.cache_info()
    assert (info.hits, info.misses, info.maxsize, info.currsize) == (1, 1, 1, 1)

    g.cache_clear()
    assert g.cache_info() == (0, 0, 1, 0)


def test_reset_recomputations_keeps_slot():
    f = count_calls(lambda a: a)
    g = default_memoize(f)
    g(1)
    g.reset_recomputations()
    assert g.recomputations() == 0
    g(1)
    assert g.recomputations() == 0
    assert f.calls == 1


def test_wraps_metadata():
    def get_total(state):
        """Sum the state"""
        return sum(state)

    g = default_memoize(get_total)
    assert g.__name__ == "get_total"
    assert g.__doc__ == "Sum the state"
    assert g.__wrapped__ is get_total


def test_non_callable_equality_is_rejected():
    with pytest.raises(ConfigurationError) as excinfo:
        create_memoizor("==")
    assert excinfo.value.config_key == "equals"
