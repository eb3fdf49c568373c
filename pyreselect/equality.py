"""
記憶化所使用的比較函數。

strict_equals 是預設的嚴格比較：同一物件，或同型別且值相同的不可變純量。
deep_equals 進行結構化的深度比較，適合每次都重建但內容相同的狀態物件。
"""
from collections.abc import Mapping
from typing import Any

from immutables import Map
from pydantic import BaseModel

# 以值比較的不可變純量型別
_SCALAR_TYPES = (bool, int, float, complex, str, bytes, type(None))


def strict_equals(a: Any, b: Any) -> bool:
    """
    嚴格相等：同一個物件參考，或同型別純量且值相等。

    >>> strict_equals(1000, int("1000"))
    True
    >>> strict_equals([1], [1])
    False
    """
    if a is b:
        return True
    return type(a) is type(b) and type(a) in _SCALAR_TYPES and a == b


def deep_equals(a: Any, b: Any) -> bool:
    """安全的深度比較，出錯時返回 False"""
    try:
        return _deep_equals(a, b)
    except Exception:
        return False


def _deep_equals(a: Any, b: Any) -> bool:
    if a is b:
        return True
    if type(a) is not type(b):
        return False
    if isinstance(a, _SCALAR_TYPES):
        return a == b
    if isinstance(a, BaseModel):
        # 逐欄位比較，欄位值本身可能也是模型或容器
        return _deep_equals(dict(a), dict(b))
    if isinstance(a, (Mapping, Map)):
        if len(a) != len(b):
            return False
        for key in a:
            if key not in b or not _deep_equals(a[key], b[key]):
                return False
        return True
    if isinstance(a, (list, tuple)):
        if len(a) != len(b):
            return False
        return all(_deep_equals(x, y) for x, y in zip(a, b))
    return a == b
