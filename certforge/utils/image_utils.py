"""图片工具函数模块.

提供图片文件校验、解码验证以及 data URI 编解码等工具函数。
"""

from __future__ import annotations

import base64
import io
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from certforge.utils.constants import MAX_IMAGE_FILE_SIZE, SUPPORTED_IMAGE_FORMATS
from certforge.utils.exceptions import (
    AssetLoadError,
    AssetNotFoundError,
    AssetTooLargeError,
    UnsupportedAssetFormatError,
)
from certforge.utils.logger import setup_logger

logger = setup_logger(__name__)

# Pillow 格式名到 MIME 类型的映射
FORMAT_MIME_TYPES = {
    "PNG": "image/png",
    "JPEG": "image/jpeg",
    "GIF": "image/gif",
    "WEBP": "image/webp",
    "BMP": "image/bmp",
}

DATA_URI_PREFIX = "data:"


def validate_image_file(path: Path | str, max_size: int = MAX_IMAGE_FILE_SIZE) -> None:
    """验证图片文件（存在性、扩展名、大小）.

    Args:
        path: 图片文件路径
        max_size: 最大允许的文件大小（字节）

    Raises:
        AssetNotFoundError: 文件不存在
        UnsupportedAssetFormatError: 不支持的格式
        AssetTooLargeError: 文件过大
    """
    path = Path(path)

    if not path.is_file():
        raise AssetNotFoundError(str(path))

    ext = path.suffix.lower()
    if ext not in SUPPORTED_IMAGE_FORMATS:
        raise UnsupportedAssetFormatError(ext or "<none>")

    size = path.stat().st_size
    if size > max_size:
        raise AssetTooLargeError(size, max_size)


def detect_mime_type(data: bytes, source: str = "<bytes>") -> str:
    """解码验证图片数据并返回 MIME 类型.

    Args:
        data: 图片字节数据
        source: 数据来源描述（用于错误消息）

    Returns:
        MIME 类型字符串

    Raises:
        AssetLoadError: 数据不是可解码的图片
        UnsupportedAssetFormatError: 可解码但格式不受支持
    """
    if not data:
        raise AssetLoadError(source, "empty file")

    try:
        with Image.open(io.BytesIO(data)) as img:
            img.verify()
            image_format = img.format
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as e:
        raise AssetLoadError(source, str(e)) from e

    mime = FORMAT_MIME_TYPES.get(image_format or "")
    if mime is None:
        raise UnsupportedAssetFormatError(image_format or "unknown")
    return mime


def bytes_to_data_uri(data: bytes, mime_type: str) -> str:
    """字节数据编码为 data URI.

    Args:
        data: 图片字节数据
        mime_type: MIME 类型

    Returns:
        data URI 字符串
    """
    encoded = base64.b64encode(data).decode("ascii")
    return f"{DATA_URI_PREFIX}{mime_type};base64,{encoded}"


def data_uri_to_bytes(uri: str) -> bytes:
    """data URI 解码为字节数据.

    Args:
        uri: data URI 字符串

    Returns:
        图片字节数据

    Raises:
        ValueError: 不是 base64 编码的 data URI
    """
    if not uri.startswith(DATA_URI_PREFIX) or ";base64," not in uri:
        raise ValueError("不是 base64 编码的 data URI")
    return base64.b64decode(uri.split(",", 1)[1])
