"""自定义异常类."""

from __future__ import annotations


class AppException(Exception):
    """应用基础异常类.

    所有自定义异常都应继承此类。

    Attributes:
        message: 错误消息
        code: 错误代码
    """

    def __init__(self, message: str, code: str = "UNKNOWN") -> None:
        """初始化异常.

        Args:
            message: 错误消息
            code: 错误代码
        """
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        """返回异常字符串表示."""
        return f"[{self.code}] {self.message}"


# ===================
# 配置相关异常
# ===================
class ConfigError(AppException):
    """配置错误异常."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "CONFIG_ERROR")


# ===================
# 图片资源相关异常
# ===================
class AssetError(AppException):
    """图片资源错误异常."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "ASSET_ERROR")


class AssetNotFoundError(AssetError):
    """图片文件未找到异常."""

    def __init__(self, path: str) -> None:
        super().__init__(f"图片文件未找到: {path}")


class UnsupportedAssetFormatError(AssetError):
    """不支持的图片格式异常."""

    def __init__(self, format: str) -> None:
        super().__init__(f"不支持的图片格式: {format}")


class AssetTooLargeError(AssetError):
    """图片文件过大异常."""

    def __init__(self, size: int, max_size: int) -> None:
        size_mb = size / (1024 * 1024)
        max_mb = max_size / (1024 * 1024)
        super().__init__(f"图片文件过大 ({size_mb:.1f}MB)，最大允许 {max_mb:.1f}MB")


class AssetLoadError(AssetError):
    """图片解码失败异常."""

    def __init__(self, source: str, reason: str = "") -> None:
        msg = f"图片文件损坏或无法读取: {source}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


# ===================
# 存储相关异常
# ===================
class StorageError(AppException):
    """存储错误异常."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "STORAGE_ERROR")


class StorageConnectionError(StorageError):
    """存储连接错误异常."""

    def __init__(self, path: str) -> None:
        super().__init__(f"无法连接到存储: {path}")


class DocumentFormatError(StorageError):
    """存储的模板文档格式错误异常."""

    def __init__(self, key: str, reason: str = "") -> None:
        msg = f"模板数据格式错误: {key}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)
