"""错误处理工具模块.

提供统一的错误处理机制和用户友好的错误消息。
"""

from __future__ import annotations

from certforge.utils.exceptions import (
    AppException,
    AssetError,
    AssetLoadError,
    AssetNotFoundError,
    AssetTooLargeError,
    ConfigError,
    StorageError,
    UnsupportedAssetFormatError,
)
from certforge.utils.logger import setup_logger

logger = setup_logger(__name__)

# 错误消息映射（按顺序匹配，子类在前）
ERROR_MESSAGES = {
    AssetNotFoundError: "The selected image file could not be found.",
    UnsupportedAssetFormatError: "This image format is not supported.",
    AssetTooLargeError: "The selected image file is too large.",
    AssetLoadError: "The selected file could not be read as an image.",
    AssetError: "Failed to load the image.",
    StorageError: "Failed to access the template storage.",
    ConfigError: "Configuration error, please check your settings.",
}


def get_user_friendly_message(exception: Exception) -> str:
    """获取用户友好的错误消息.

    Args:
        exception: 异常对象

    Returns:
        用户友好的错误消息
    """
    for exc_type, message in ERROR_MESSAGES.items():
        if isinstance(exception, exc_type):
            return message

    if isinstance(exception, AppException):
        return exception.message

    return "Operation failed, please try again."


class ErrorCollector:
    """错误收集器.

    用于批量上传图片时收集所有失败的文件。

    Example:
        >>> collector = ErrorCollector()
        >>> for path in paths:
        ...     try:
        ...         load(path)
        ...     except AssetError as e:
        ...         collector.add(e, context=str(path))
        >>> if collector.has_errors:
        ...     print(collector.summary)
    """

    def __init__(self) -> None:
        self._errors: list[tuple[Exception, str]] = []

    def add(self, exception: Exception, context: str = "") -> None:
        """添加错误.

        Args:
            exception: 异常对象
            context: 上下文描述
        """
        self._errors.append((exception, context))
        logger.warning(f"收集到错误 [{context}]: {exception}")

    @property
    def has_errors(self) -> bool:
        """是否有错误."""
        return len(self._errors) > 0

    @property
    def error_count(self) -> int:
        """错误数量."""
        return len(self._errors)

    @property
    def errors(self) -> list[tuple[Exception, str]]:
        """所有错误."""
        return self._errors.copy()

    @property
    def summary(self) -> str:
        """错误摘要."""
        if not self._errors:
            return "No errors"

        lines = [f"{len(self._errors)} error(s):"]
        for i, (exc, ctx) in enumerate(self._errors, 1):
            ctx_str = f" ({ctx})" if ctx else ""
            lines.append(f"  {i}. {type(exc).__name__}{ctx_str}: {exc}")

        return "\n".join(lines)

    def clear(self) -> None:
        """清除所有错误."""
        self._errors.clear()
