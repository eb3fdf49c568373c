"""
選擇器工廠：綁定記憶化策略並公開編譯入口。
"""
from typing import Any, Callable

from .compiler import SelectorCompiler
from .equality import deep_equals
from .errors import ConfigurationError, handle_error
from .memoize import create_memoizor, default_memoize
from .types import CompositeFactory, MemoizeFn, SelectorSpec


def create_selector_creator(memoize: MemoizeFn, *,
                            composite_factory: CompositeFactory = dict) -> Callable[[SelectorSpec], Callable[..., Any]]:
    """
    創建一個使用指定記憶化工廠的 create_selector。

    Args:
        memoize: 記憶化工廠，通常由 create_memoizor 產生，
            用於所有葉節點與組合階段
        composite_factory: 鍵值結構選擇器的輸出容器，預設為 dict，
            也可使用 immutables.Map；結構輸出的一致性比較固定為嚴格相等

    Returns:
        create_selector(spec) -> 已編譯的選擇器

    Raises:
        ConfigurationError: memoize 或 composite_factory 不可呼叫
    """
    if not callable(memoize):
        raise ConfigurationError(
            "memoizor factory must be callable",
            component="create_selector_creator",
            config_key="memoize",
            value=memoize,
        )
    if not callable(composite_factory):
        raise ConfigurationError(
            "composite factory must be callable",
            component="create_selector_creator",
            config_key="composite_factory",
            value=composite_factory,
        )

    @handle_error
    def create_selector(spec: SelectorSpec) -> Callable[..., Any]:
        """
        將選擇器規格編譯為已記憶化的選擇器。

        規格可以是：
          - 函數：直接記憶化
          - 管線 [stage0, stage1, ...]：stage0 為單一規格或平行規格列表，
            其後每個階段接收前一階段的輸出作為位置參數
          - 鍵值結構 {key: spec}：輸出同鍵的組合物件，鍵值未變時返回同一物件

        Args:
            spec: 選擇器規格，可任意巢狀

        Returns:
            已編譯的選擇器，每次呼叫都會建立獨立的快取
        """
        return SelectorCompiler(memoize, composite_factory).compile(spec)

    create_selector.memoize = memoize  # type: ignore
    create_selector.composite_factory = composite_factory  # type: ignore
    return create_selector


# 預設工廠，使用嚴格相等
create_selector = create_selector_creator(default_memoize)

# 深度比較版本，適合每次重建但內容相同的狀態
create_deep_selector = create_selector_creator(create_memoizor(deep_equals))
