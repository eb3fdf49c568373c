"""
單槽記憶化 (Memoizor)。

每個被包裝的函數只保留最近一次呼叫的參數與結果，
以可替換的比較函數判斷是否需要重新計算。
"""
import functools
from typing import Any, Callable, Optional, Tuple

from .equality import strict_equals
from .errors import ConfigurationError
from .types import CacheInfo, EqualityFn, MemoizeFn, R

_EMPTY = object()


def create_memoizor(equals: EqualityFn = strict_equals) -> MemoizeFn:
    """
    以指定的比較函數建立記憶化工廠。

    Args:
        equals: 比較新舊參數的函數，預設為嚴格相等

    Returns:
        memoize(f) -> g，g 只在參數改變時才呼叫 f
    """
    if not callable(equals):
        raise ConfigurationError(
            "equality predicate must be callable",
            component="create_memoizor",
            config_key="equals",
            value=equals,
        )

    def memoize(func: Callable[..., R]) -> Callable[..., R]:
        # 快取槽：上一次的參數元組與結果
        last_args: Optional[Tuple[Any, ...]] = None
        last_result: Any = _EMPTY
        hits = 0
        misses = 0

        def _args_equal(args: Tuple[Any, ...]) -> bool:
            if last_args is None or len(args) != len(last_args):
                return False
            return all(equals(new, old) for new, old in zip(args, last_args))

        @functools.wraps(func)
        def memoized(*args: Any) -> R:
            nonlocal last_args, last_result, hits, misses

            if last_result is not _EMPTY and _args_equal(args):
                hits += 1
                return last_result

            # 先計算，成功後才覆寫快取槽
            result = func(*args)
            last_args = args
            last_result = result
            misses += 1
            return result

        def cache_info() -> CacheInfo:
            return CacheInfo(hits, misses, 1, 0 if last_result is _EMPTY else 1)

        def cache_clear() -> None:
            nonlocal last_args, last_result, hits, misses
            last_args = None
            last_result = _EMPTY
            hits = misses = 0

        def reset_recomputations() -> None:
            nonlocal misses
            misses = 0

        memoized.cache_info = cache_info  # type: ignore
        memoized.cache_clear = cache_clear  # type: ignore
        memoized.recomputations = lambda: misses  # type: ignore
        memoized.reset_recomputations = reset_recomputations  # type: ignore
        return memoized

    return memoize


# 預設的記憶化工廠，使用嚴格相等比較
default_memoize = create_memoizor(strict_equals)
