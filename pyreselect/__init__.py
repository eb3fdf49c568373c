"""
PyReselect：可組合、單槽記憶化的狀態選擇器。
"""
from .errors import (
    PyReselectError, SelectorError, SpecError, SelectorArityError,
    ConfigurationError, ErrorHandler, global_error_handler, handle_error
)
from .equality import strict_equals, deep_equals
from .memoize import create_memoizor, default_memoize
from .compiler import SelectorCompiler, StructuredOutputCache
from .spec_nodes import FunctionSpec, PipelineSpec, StructuredSpec, parse_spec
from .store_selectors import create_selector, create_selector_creator, create_deep_selector
from .rx_operators import select

# 匯出所有公開 API
__all__ = [
    # Errors
    "PyReselectError", "SelectorError", "SpecError", "SelectorArityError",
    "ConfigurationError", "ErrorHandler", "global_error_handler", "handle_error",

    # Equality
    "strict_equals", "deep_equals",

    # Memoize
    "create_memoizor", "default_memoize",

    # Compiler
    "SelectorCompiler", "StructuredOutputCache",
    "FunctionSpec", "PipelineSpec", "StructuredSpec", "parse_spec",

    # Selectors
    "create_selector", "create_selector_creator", "create_deep_selector",

    # Rx
    "select",
]
