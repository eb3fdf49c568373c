"""
選擇器編譯器。

將 parse_spec 產生的規格樹編譯為可執行的選擇器函數：
葉節點與組合階段以記憶化工廠包裝，鍵值結構則交由 StructuredOutputCache
維持輸出物件的參考一致性。
"""
import inspect
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from .equality import strict_equals
from .errors import SelectorArityError
from .memoize import default_memoize
from .spec_nodes import FunctionSpec, PipelineSpec, StructuredSpec, iter_nodes, parse_spec
from .types import CompositeFactory, MemoizeFn

logger = logging.getLogger(__name__)


def _pack_values(*values: Any) -> Tuple[Any, ...]:
    """只有平行階段的管線以此組合為元組。"""
    return values


def _recomputations(fn: Callable[..., Any]) -> int:
    counter = getattr(fn, "recomputations", None)
    return counter() if callable(counter) else 0


def _call_if_present(fn: Callable[..., Any], attr: str) -> None:
    method = getattr(fn, attr, None)
    if callable(method):
        method()


def _check_arity(node: FunctionSpec, arg_count: int) -> None:
    """
    檢查組合階段能否接收 arg_count 個位置參數。

    無法取得簽名的可呼叫物件 (部分內建函數) 不檢查。

    Raises:
        SelectorArityError: 簽名無法綁定 arg_count 個位置參數
    """
    try:
        signature = inspect.signature(node.fn)
    except (TypeError, ValueError):
        return
    try:
        signature.bind(*([None] * arg_count))
    except TypeError as err:
        name = getattr(node.fn, "__name__", repr(node.fn))
        raise SelectorArityError(
            f"combinator stage {name}{signature} cannot accept {arg_count} positional argument(s): {err}",
            path=node.path,
            spec=node.fn,
            expected=arg_count,
        ) from err


def _as_selector(call: Callable[..., Any], nodes: List[Callable[..., Any]],
                 recomputations: Callable[[], int], reset: Callable[[], None],
                 name: str, clear: Optional[Callable[[], None]] = None) -> Callable[..., Any]:
    """為複合選擇器加上與記憶化函數相同的管理方法。"""
    def selector(*args: Any) -> Any:
        return call(*args)

    def cache_clear() -> None:
        for node in nodes:
            _call_if_present(node, "cache_clear")
        (clear or reset)()

    selector.__name__ = selector.__qualname__ = name
    selector.recomputations = recomputations  # type: ignore
    selector.reset_recomputations = reset  # type: ignore
    selector.cache_clear = cache_clear  # type: ignore
    return selector


class StructuredOutputCache:
    """
    鍵值結構選擇器的輸出快取。

    每次呼叫都以原始參數計算所有鍵的值，只要每個鍵的新值都與上一次
    嚴格相等 (與記憶化工廠使用的比較函數無關)，就返回同一個組合物件。

    Attributes:
        selectors: 鍵到已編譯選擇器的映射，迭代順序即輸出的鍵順序
        composite_factory: 建立組合物件的工廠，預設為 dict
    """

    def __init__(self, selectors: Dict[Any, Callable[..., Any]],
                 composite_factory: CompositeFactory = dict):
        self.selectors = selectors
        self.composite_factory = composite_factory
        self._last_values: Optional[Dict[Any, Any]] = None
        self._last_composite: Any = None
        self._recomputations = 0

    def __call__(self, *args: Any) -> Any:
        values = {key: select(*args) for key, select in self.selectors.items()}

        if self._last_values is not None and all(
            strict_equals(value, self._last_values[key]) for key, value in values.items()
        ):
            return self._last_composite

        composite = self.composite_factory(values)
        self._last_values = values
        self._last_composite = composite
        self._recomputations += 1
        return composite

    def recomputations(self) -> int:
        """返回建立新組合物件的次數。"""
        return self._recomputations

    def reset_recomputations(self) -> None:
        self._recomputations = 0

    def clear(self) -> None:
        """丟棄上一次的值與組合物件，下一次呼叫必定重建。"""
        self._last_values = None
        self._last_composite = None
        self._recomputations = 0


class SelectorCompiler:
    """
    依規格形狀分派的選擇器編譯器。

    每次 compile 都產生一組全新的節點與快取，同一份規格編譯兩次
    會得到互不干擾的兩個選擇器。
    """

    def __init__(self, memoize: MemoizeFn = default_memoize,
                 composite_factory: CompositeFactory = dict):
        """
        初始化編譯器。

        Args:
            memoize: 包裝葉節點與組合階段的記憶化工廠
            composite_factory: 鍵值結構選擇器建立輸出物件的工廠
        """
        self.memoize = memoize
        self.composite_factory = composite_factory

    def compile(self, spec: Any) -> Callable[..., Any]:
        """
        將規格編譯為選擇器。

        Args:
            spec: 函數、管線 (list / tuple) 或鍵值結構 (Mapping)

        Returns:
            以原始呼叫參數求值的已記憶化選擇器

        Raises:
            SpecError: 規格形狀無法辨識
            SelectorArityError: 組合階段的參數數量與管線輸出不符
        """
        root = parse_spec(spec)
        selector = self._compile_node(root)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("compiled %s selector with %d node(s)", root.kind, len(iter_nodes(root)))
        return selector

    def _compile_node(self, node: Any) -> Callable[..., Any]:
        if node.kind == "function":
            return self.memoize(node.fn)
        if node.kind == "pipeline":
            return self._compile_pipeline(node)
        if node.kind == "structured":
            return self._compile_structured(node)
        raise AssertionError(f"unknown spec node kind {node.kind!r}")

    def _compile_stage(self, node: Any, arg_count: int) -> Callable[..., Any]:
        # 組合階段若本身是巢狀規格，直接以管線傳入的值呼叫編譯結果
        if node.kind == "function":
            _check_arity(node, arg_count)
        return self._compile_node(node)

    def _compile_pipeline(self, node: PipelineSpec) -> Callable[..., Any]:
        heads = [self._compile_node(head) for head in node.head]
        parallel = node.parallel

        if not parallel and not node.stages:
            return heads[0]

        stages: List[Callable[..., Any]] = []
        arg_count = len(heads) if parallel else 1
        for stage in node.stages:
            stages.append(self._compile_stage(stage, arg_count))
            arg_count = 1
        if not stages:
            stages.append(self.memoize(_pack_values))

        def run(*args: Any) -> Any:
            if parallel:
                values = tuple(select(*args) for select in heads)
            else:
                values = (heads[0](*args),)
            # 之後的階段只看到前一階段的輸出
            for stage in stages:
                values = (stage(*values),)
            return values[0]

        last = stages[-1]
        return _as_selector(
            run,
            heads + stages,
            recomputations=lambda: _recomputations(last),
            reset=lambda: _call_if_present(last, "reset_recomputations"),
            name=f"pipeline_selector{node.path}",
        )

    def _compile_structured(self, node: StructuredSpec) -> Callable[..., Any]:
        selectors = {key: self._compile_node(member) for key, member in node.members.items()}
        cache = StructuredOutputCache(selectors, self.composite_factory)
        selector = _as_selector(
            cache,
            list(selectors.values()),
            recomputations=cache.recomputations,
            reset=cache.reset_recomputations,
            name=f"structured_selector{node.path}",
            # cache_clear 連同組合物件一起丟棄
            clear=cache.clear,
        )
        selector.output_cache = cache  # type: ignore
        return selector
