"""
選擇器規格的標記變體 (tagged variants)。

使用者提供的規格是函數、list / tuple 或 Mapping 的任意巢狀組合。
parse_spec 在編譯時將其一次性轉換為以 ``kind`` 區分的 pydantic 模型樹，
之後的編譯只依 ``kind`` 分派，呼叫時不再檢查形狀。
"""
from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Literal, Tuple, Union

from immutables import Map
from pydantic import BaseModel, ConfigDict, Field
from typing_extensions import Annotated

from .errors import SpecError


class _SpecNode(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


class FunctionSpec(_SpecNode):
    """葉節點：一個接收任意位置參數的函數。"""
    kind: Literal["function"] = "function"
    fn: Callable[..., Any]
    path: str = ""


class PipelineSpec(_SpecNode):
    """
    管線：第 0 階段為單一規格或平行規格列表，其後為組合階段。

    Attributes:
        head: 第 0 階段的規格；parallel 為 True 時長度可大於 1
        parallel: 第 0 階段是否為平行階段
        stages: 組合階段，依序接收前一階段的輸出
    """
    kind: Literal["pipeline"] = "pipeline"
    head: Tuple["SpecNode", ...]
    parallel: bool
    stages: Tuple["SpecNode", ...] = ()
    path: str = ""


class StructuredSpec(_SpecNode):
    """鍵值結構：每個鍵對應一個獨立編譯的規格。"""
    kind: Literal["structured"] = "structured"
    members: Dict[Any, "SpecNode"]
    path: str = ""


SpecNode = Annotated[
    Union[FunctionSpec, PipelineSpec, StructuredSpec],
    Field(discriminator="kind"),
]

PipelineSpec.model_rebuild()
StructuredSpec.model_rebuild()


def _is_sequence(spec: Any) -> bool:
    return isinstance(spec, (list, tuple))


def parse_spec(spec: Any, path: str = "") -> Union[FunctionSpec, PipelineSpec, StructuredSpec]:
    """
    將使用者規格解析為標記變體樹。

    Args:
        spec: 函數、list / tuple (管線) 或 Mapping (結構)
        path: 目前節點在整個規格中的位置，用於錯誤訊息

    Returns:
        對應的 FunctionSpec、PipelineSpec 或 StructuredSpec

    Raises:
        SpecError: 規格形狀無法辨識或管線為空
    """
    if isinstance(spec, (Mapping, Map)):
        members = {key: parse_spec(value, f"{path}[{key!r}]") for key, value in spec.items()}
        return StructuredSpec(members=members, path=path)

    if _is_sequence(spec):
        if not spec:
            raise SpecError("pipeline spec must contain at least one stage", path=path, spec=spec)
        first, rest = spec[0], spec[1:]

        # 第 0 階段為列表時是平行階段，每個元素各自對原始參數求值
        parallel = _is_sequence(first)
        if parallel:
            if not first:
                raise SpecError("parallel stage must contain at least one spec", path=f"{path}[0]", spec=first)
            head = tuple(parse_spec(item, f"{path}[0][{i}]") for i, item in enumerate(first))
        else:
            head = (parse_spec(first, f"{path}[0]"),)

        stages = tuple(parse_spec(stage, f"{path}[{i}]") for i, stage in enumerate(rest, start=1))
        return PipelineSpec(head=head, parallel=parallel, stages=stages, path=path)

    if callable(spec):
        return FunctionSpec(fn=spec, path=path)

    raise SpecError(
        f"unsupported selector spec of type {type(spec).__name__}; "
        "expected a callable, a list/tuple pipeline or a mapping",
        path=path,
        spec=spec,
    )


def iter_nodes(node: Union[FunctionSpec, PipelineSpec, StructuredSpec]) -> List[Any]:
    """以前序走訪返回規格樹中的所有節點。"""
    nodes: List[Any] = [node]
    if node.kind == "pipeline":
        for child in node.head + node.stages:
            nodes.extend(iter_nodes(child))
    elif node.kind == "structured":
        for child in node.members.values():
            nodes.extend(iter_nodes(child))
    return nodes
