"""
PyReselect 共用的類型定義。
"""
from typing import Any, Callable, Mapping, NamedTuple, Sequence, TypeVar, Union

Input = TypeVar("Input")
Output = TypeVar("Output")
R = TypeVar("R")

# 比較函數：(新值, 舊值) -> 是否視為相等
EqualityFn = Callable[[Any, Any], bool]

# 記憶化工廠：接收一個函數，返回具單槽快取的同型函數
MemoizeFn = Callable[[Callable[..., R]], Callable[..., R]]

# 結構化輸出的容器工廠，例如 dict 或 immutables.Map
CompositeFactory = Callable[[Mapping[Any, Any]], Mapping[Any, Any]]

StateSelector = Callable[..., Output]
ResultSelector = Callable[..., R]

# 選擇器規格：函數、管線 (list / tuple) 或鍵值結構 (Mapping)，可任意巢狀
SelectorSpec = Union[Callable[..., Any], Sequence[Any], Mapping[Any, Any]]


class CacheInfo(NamedTuple):
    """單槽快取的統計資訊，欄位與 functools.lru_cache 相同。"""
    hits: int
    misses: int
    maxsize: int
    currsize: int
