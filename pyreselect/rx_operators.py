"""
reactivex 整合：將狀態流經過選擇器後只在輸出改變時發出。
"""
from collections.abc import Mapping
from typing import Callable

from immutables import Map
from reactivex import Observable, compose
from reactivex import operators as ops

from .equality import strict_equals
from .store_selectors import create_selector
from .types import SelectorSpec


def select(spec: SelectorSpec) -> Callable[[Observable], Observable]:
    """
    創建一個 operator，將每個狀態映射為選擇器的輸出並過濾未改變的值。

    用法：
        state$.pipe(select({"count": lambda s: s["count"]}))

    Args:
        spec: 選擇器規格或已編譯的選擇器；list / Mapping 會先以 create_selector 編譯

    Returns:
        可用於 Observable.pipe 的 operator
    """
    if isinstance(spec, (list, tuple, Mapping, Map)) or not hasattr(spec, "cache_clear"):
        selector = create_selector(spec)
    else:
        selector = spec

    return compose(
        ops.map(selector),
        # 選擇器在輸入未變時返回同一物件，參考比較即可判斷是否需要發出
        ops.distinct_until_changed(comparer=strict_equals),
    )
