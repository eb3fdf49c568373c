"""
PyReselect 錯誤處理模組。

定義函式庫的異常層級，並提供集中式的錯誤處理器，
負責將函式庫錯誤寫入 ``pyreselect`` logger 並通知已註冊的回調。
"""
import functools
import logging
import traceback
from typing import Any, Callable, Dict, List, Optional, TypeVar, Union

T = TypeVar("T")

logger = logging.getLogger("pyreselect")
logger.addHandler(logging.NullHandler())


class PyReselectError(Exception):
    """所有 PyReselect 異常的基礎類。"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.traceback = "".join(traceback.format_stack()[:-1])

    def to_dict(self) -> Dict[str, Any]:
        """
        將錯誤轉換為可序列化的字典。

        Returns:
            包含錯誤類型、訊息、細節與堆疊的字典
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": dict(self.details),
            "traceback": self.traceback,
        }

    def __str__(self) -> str:
        if not self.details:
            return self.message
        detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
        return f"{self.message} ({detail_str})"


class SelectorError(PyReselectError):
    """與 Selector 相關的錯誤。"""

    def __init__(self, message: str, selector_name: Optional[str] = None,
                 input_state: Any = None, **kwargs: Any):
        details = dict(kwargs)
        if selector_name is not None:
            details["selector_name"] = selector_name
        if input_state is not None:
            details["input_state"] = input_state
        super().__init__(message, details)
        self.selector_name = selector_name
        self.input_state = input_state


class SpecError(SelectorError, TypeError):
    """選擇器規格的形狀無法辨識，在編譯時拋出。"""

    def __init__(self, message: str, path: str = "", spec: Any = None, **kwargs: Any):
        super().__init__(message, path=path or "<root>", spec_type=type(spec).__name__, **kwargs)
        self.path = path
        self.spec = spec


class SelectorArityError(SpecError):
    """組合階段無法接收管線傳入的參數數量。"""

    def __init__(self, message: str, path: str = "", spec: Any = None,
                 expected: Optional[int] = None, **kwargs: Any):
        super().__init__(message, path=path, spec=spec, argument_count=expected, **kwargs)
        self.expected = expected


class ConfigurationError(PyReselectError):
    """工廠參數設定錯誤。"""

    def __init__(self, message: str, component: str, config_key: Optional[str] = None, **kwargs: Any):
        details = {"component": component, **kwargs}
        if config_key is not None:
            details["config_key"] = config_key
        super().__init__(message, details)
        self.component = component
        self.config_key = config_key


class ErrorHandler:
    """集中式錯誤處理器，用於捕獲、日誌記錄和錯誤報告。"""

    def __init__(self, log_to_console: bool = True, log_to_file: bool = False,
                 log_file: Optional[str] = None):
        """
        初始化錯誤處理器。

        Args:
            log_to_console: 是否輸出到主控台
            log_to_file: 是否寫入檔案
            log_file: 日誌檔路徑，log_to_file 為 True 時預設為 pyreselect_errors.log
        """
        self.log_to_console = log_to_console
        self.log_to_file = log_to_file
        self.log_file = log_file or ("pyreselect_errors.log" if log_to_file else None)
        self.handlers: List[Callable[[PyReselectError], None]] = []
        self._log_handlers: List[logging.Handler] = []
        self._configure_logger()

    def _configure_logger(self) -> None:
        """依照設定為 pyreselect logger 掛上 handler。"""
        formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        if self.log_to_console:
            stream_handler = logging.StreamHandler()
            stream_handler.setLevel(logging.ERROR)
            stream_handler.setFormatter(formatter)
            self._log_handlers.append(stream_handler)
        if self.log_to_file and self.log_file:
            file_handler = logging.FileHandler(self.log_file, delay=True)
            file_handler.setLevel(logging.ERROR)
            file_handler.setFormatter(formatter)
            self._log_handlers.append(file_handler)
        for handler in self._log_handlers:
            logger.addHandler(handler)

    def close(self) -> None:
        """移除並關閉此處理器掛上的 logging handler。"""
        for handler in self._log_handlers:
            logger.removeHandler(handler)
            handler.close()
        self._log_handlers.clear()

    def register_handler(self, handler: Callable[[PyReselectError], None]) -> None:
        """
        註冊錯誤回調。

        Args:
            handler: 接收 PyReselectError 的函數
        """
        self.handlers.append(handler)

    def unregister_handler(self, handler: Callable[[PyReselectError], None]) -> None:
        """移除先前註冊的錯誤回調。"""
        if handler in self.handlers:
            self.handlers.remove(handler)

    def handle(self, error: Union[PyReselectError, Exception]) -> None:
        """
        記錄錯誤並通知所有回調。

        非 PyReselectError 的異常會先包裝為 PyReselectError。

        Args:
            error: 要處理的錯誤
        """
        if not isinstance(error, PyReselectError):
            error = PyReselectError(str(error), {"original_type": type(error).__name__})

        logger.error("%s: %s", error.__class__.__name__, error)

        for handler in list(self.handlers):
            try:
                handler(error)
            except Exception:
                # 回調本身失敗不影響原錯誤的拋出
                logger.exception("error handler %r failed", handler)


# 單例錯誤處理器
global_error_handler = ErrorHandler(log_to_console=False)


def handle_error(func: Callable[..., T]) -> Callable[..., T]:
    """
    裝飾器：將 PyReselectError 交給 global_error_handler 後重新拋出。

    使用者函數拋出的其他異常不經過處理器，原樣傳遞。
    """
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> T:
        try:
            return func(*args, **kwargs)
        except PyReselectError as err:
            global_error_handler.handle(err)
            raise
    return wrapper
