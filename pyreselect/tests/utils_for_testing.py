"""Helpers shared by the selector tests"""

import functools


def count_calls(func):
    """Wrap ``func`` so the number of times it actually ran can be inspected.

    >>> f = count_calls(lambda a: a + 1)
    >>> f(1), f(2), f.calls
    (2, 3, 2)
    """

    @functools.wraps(func)
    def counted(*args):
        counted.calls += 1
        return func(*args)

    counted.calls = 0
    return counted
