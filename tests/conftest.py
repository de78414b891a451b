"""Pytest 配置和共享 fixtures."""

import io
import os
import struct
import tempfile
import zlib
from pathlib import Path
from typing import Callable, Generator

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PIL import Image

from certforge.core.editor_controller import EditorController
from certforge.services.template_storage import MemoryStore, TemplateStorage


def make_png_bytes(size: tuple[int, int] = (32, 32), color: tuple = (200, 100, 50)) -> bytes:
    """生成 PNG 图片字节."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color=color).save(buffer, format="PNG")
    return buffer.getvalue()


def make_oversized_png_bytes(width: int = 20000, height: int = 20000) -> bytes:
    """生成只有文件头的 PNG，声明的像素数超过 Pillow 的解压上限."""

    def chunk(tag: bytes, body: bytes) -> bytes:
        return struct.pack(">I", len(body)) + tag + body + struct.pack(">I", zlib.crc32(tag + body))

    header = struct.pack(">IIBBBBB", width, height, 1, 0, 0, 0, 0)
    return b"\x89PNG\r\n\x1a\n" + chunk(b"IHDR", header) + chunk(b"IDAT", zlib.compress(b"")) + chunk(b"IEND", b"")


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """临时目录 fixture."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def png_bytes() -> bytes:
    """示例 PNG 字节."""
    return make_png_bytes()


@pytest.fixture
def image_factory(temp_dir: Path) -> Callable[..., Path]:
    """在临时目录中创建图片文件."""

    def create(name: str = "image.png", size: tuple[int, int] = (32, 32), color: tuple = (0, 128, 255)) -> Path:
        path = temp_dir / name
        Image.new("RGB", size, color=color).save(path)
        return path

    return create


@pytest.fixture
def oversized_image(temp_dir: Path) -> Path:
    """像素数超过解压上限的 PNG 文件."""
    path = temp_dir / "oversized.png"
    path.write_bytes(make_oversized_png_bytes())
    return path


@pytest.fixture
def sample_background_image(image_factory) -> Path:
    """示例背景图片."""
    return image_factory("background.png", size=(200, 140), color=(255, 255, 255))


@pytest.fixture
def memory_store() -> MemoryStore:
    """内存键值存储."""
    return MemoryStore()


@pytest.fixture
def template_storage(memory_store: MemoryStore) -> TemplateStorage:
    """基于内存存储的模板存储."""
    return TemplateStorage(memory_store)


@pytest.fixture
def controller(template_storage: TemplateStorage) -> EditorController:
    """编辑器控制器."""
    return EditorController(template_storage)


@pytest.fixture
def background_uri() -> str:
    """背景图资源引用."""
    return "data:image/png;base64,QkFDS0dST1VORA=="
