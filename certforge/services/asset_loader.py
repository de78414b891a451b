"""图片资源加载服务.

把用户选择的图片文件读取为可显示的资源引用（data URI）。

解码验证使用 Pillow；文件读取和解码在默认执行器中运行，不阻塞事件循环。
加载失败时抛出 AssetError 子类，调用方据此跳过该文件。
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Union

from certforge.utils.constants import MAX_IMAGE_FILE_SIZE
from certforge.utils.exceptions import AssetLoadError, AssetTooLargeError
from certforge.utils.image_utils import bytes_to_data_uri, detect_mime_type, validate_image_file
from certforge.utils.logger import setup_logger

logger = setup_logger(__name__)

# 文件路径或已读取的原始字节
AssetSource = Union[Path, str, bytes]


def describe_source(source: AssetSource) -> str:
    """资源来源的简短描述（用于日志）."""
    if isinstance(source, bytes):
        return f"<{len(source)} bytes>"
    return str(source)


def read_image_asset(source: AssetSource, max_size: int = MAX_IMAGE_FILE_SIZE) -> str:
    """同步读取图片并编码为 data URI.

    Args:
        source: 图片文件路径或原始字节
        max_size: 最大允许的文件大小（字节）

    Returns:
        data URI 字符串

    Raises:
        AssetNotFoundError: 文件不存在
        UnsupportedAssetFormatError: 不支持的格式
        AssetTooLargeError: 文件过大
        AssetLoadError: 无法读取或解码
    """
    label = describe_source(source)

    if isinstance(source, bytes):
        if len(source) > max_size:
            raise AssetTooLargeError(len(source), max_size)
        data = source
    else:
        path = Path(source)
        validate_image_file(path, max_size)
        try:
            data = path.read_bytes()
        except OSError as e:
            raise AssetLoadError(label, str(e)) from e

    mime_type = detect_mime_type(data, label)
    logger.debug(f"图片已读取: {label} ({mime_type}, {len(data)} bytes)")
    return bytes_to_data_uri(data, mime_type)


async def load_image_asset(source: AssetSource, max_size: int = MAX_IMAGE_FILE_SIZE) -> str:
    """异步读取图片并编码为 data URI.

    Args:
        source: 图片文件路径或原始字节
        max_size: 最大允许的文件大小（字节）

    Returns:
        data URI 字符串

    Raises:
        AssetError: 加载失败
    """
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, read_image_asset, source, max_size)
