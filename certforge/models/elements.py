"""画布元素数据模型.

定义证书模板编辑器中可放置到画布上的两类元素：文字元素和图片元素。

Features:
    - 文字元素（内容、字体、颜色、粗细、斜体、对齐）
    - 图片元素（资源引用、正方形尺寸）
    - 带默认值的构造函数
    - 返回新对象的纯更新函数（浅合并）

元素对象是不可变的，任何修改都通过更新函数生成新的记录。
序列化字段名采用 camelCase（与已保存的模板 JSON 一致）。
"""

from __future__ import annotations

import re
import uuid
from enum import Enum
from typing import Any, ClassVar, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ===================
# 常量定义
# ===================

# 文字元素默认值
DEFAULT_TEXT_CONTENT = "Double click to edit"
DEFAULT_TEXT_POSITION = (200, 200)
DEFAULT_TEXT_FONT_SIZE = 24
DEFAULT_TEXT_FONT_FAMILY = "Arial"
DEFAULT_TEXT_COLOR = "#000000"

# 图片元素默认值
DEFAULT_IMAGE_POSITION = (100, 100)
DEFAULT_IMAGE_SIZE = 150

# 可选字体
FONT_FAMILIES: tuple[str, ...] = (
    "Arial",
    "Times New Roman",
    "Georgia",
    "Courier New",
    "Verdana",
    "Comic Sans MS",
    "Impact",
)

# 工具栏字号选项
FONT_SIZES: tuple[int, ...] = (12, 14, 16, 18, 20, 24, 28, 32, 36, 40, 48, 56, 64, 72)

_HEX_COLOR_RE = re.compile(r"^#[0-9a-fA-F]{6}$")


# ===================
# 枚举定义
# ===================


class ElementKind(str, Enum):
    """元素类型."""

    TEXT = "text"
    IMAGE = "image"


class FontWeight(str, Enum):
    """字体粗细."""

    NORMAL = "normal"
    BOLD = "bold"


class FontStyle(str, Enum):
    """字体样式."""

    NORMAL = "normal"
    ITALIC = "italic"


class TextAlign(str, Enum):
    """文字对齐方式."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


# ===================
# 辅助函数
# ===================


def generate_element_id() -> str:
    """生成元素ID.

    Returns:
        12位十六进制字符串
    """
    return uuid.uuid4().hex[:12]


def validate_hex_color(color: str) -> str:
    """验证并规范化 #rrggbb 颜色值.

    Args:
        color: 十六进制颜色字符串

    Returns:
        小写的颜色字符串

    Raises:
        ValueError: 格式不正确
    """
    if not isinstance(color, str) or not _HEX_COLOR_RE.match(color):
        raise ValueError(f"颜色必须为 #rrggbb 格式，实际: {color!r}")
    return color.lower()


# ===================
# 位置
# ===================


class Position(BaseModel):
    """画布本地坐标（像素，左上角为原点）."""

    model_config = ConfigDict(frozen=True)

    x: float = Field(default=0, ge=0, description="X坐标")
    y: float = Field(default=0, ge=0, description="Y坐标")

    @classmethod
    def of(cls, point: tuple[float, float]) -> "Position":
        """从 (x, y) 元组创建."""
        return cls(x=point[0], y=point[1])


# ===================
# 元素基类
# ===================


class CanvasElement(BaseModel):
    """画布元素基类.

    Attributes:
        id: 元素ID，在所属集合内唯一
        position: 元素左上角的画布本地坐标
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, use_enum_values=False)

    kind: ClassVar[ElementKind]

    id: str = Field(default_factory=generate_element_id, description="元素ID")
    position: Position = Field(default_factory=Position, description="位置")

    @property
    def key(self) -> tuple[ElementKind, str]:
        """复合键 (kind, id)."""
        return (self.kind, self.id)

    def to_dict(self) -> dict[str, Any]:
        """序列化为 JSON 兼容字典（camelCase 字段名）."""
        return self.model_dump(mode="json", by_alias=True)


# ===================
# 文字元素
# ===================


class TextElement(CanvasElement):
    """文字元素.

    Example:
        >>> text = new_text_element()
        >>> text.font_size
        24
        >>> bold = update_text_element(text, fontWeight="bold")
        >>> bold.font_weight
        <FontWeight.BOLD: 'bold'>
    """

    kind: ClassVar[ElementKind] = ElementKind.TEXT

    content: str = Field(default=DEFAULT_TEXT_CONTENT, description="文字内容")
    font_size: int = Field(
        default=DEFAULT_TEXT_FONT_SIZE,
        gt=0,
        alias="fontSize",
        description="字号（像素）",
    )
    font_family: str = Field(
        default=DEFAULT_TEXT_FONT_FAMILY,
        alias="fontFamily",
        description="字体",
    )
    color: str = Field(default=DEFAULT_TEXT_COLOR, description="文字颜色")
    font_weight: FontWeight = Field(
        default=FontWeight.NORMAL,
        alias="fontWeight",
        description="粗细",
    )
    font_style: FontStyle = Field(
        default=FontStyle.NORMAL,
        alias="fontStyle",
        description="样式",
    )
    text_align: TextAlign = Field(
        default=TextAlign.CENTER,
        alias="textAlign",
        description="对齐方式",
    )

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: str) -> str:
        """验证颜色值."""
        return validate_hex_color(v)

    @field_validator("font_family")
    @classmethod
    def validate_font_family(cls, v: str) -> str:
        """字体必须属于可选字体集合."""
        if v not in FONT_FAMILIES:
            raise ValueError(f"不支持的字体: {v}")
        return v

    @property
    def is_bold(self) -> bool:
        """是否粗体."""
        return self.font_weight == FontWeight.BOLD

    @property
    def is_italic(self) -> bool:
        """是否斜体."""
        return self.font_style == FontStyle.ITALIC


# ===================
# 图片元素
# ===================


class ImageElement(CanvasElement):
    """图片元素.

    以 size x size 的正方形区域绘制。

    Attributes:
        src: 图片资源引用（data URI）
        size: 边长（像素）
    """

    kind: ClassVar[ElementKind] = ElementKind.IMAGE

    src: str = Field(description="图片资源引用")
    size: int = Field(default=DEFAULT_IMAGE_SIZE, gt=0, description="边长")


AnyElement = Union[TextElement, ImageElement]


# ===================
# 构造与更新
# ===================


def new_text_element(element_id: Optional[str] = None) -> TextElement:
    """创建带默认属性的文字元素.

    Args:
        element_id: 指定ID，默认自动生成

    Returns:
        新的 TextElement
    """
    return TextElement(
        id=element_id or generate_element_id(),
        position=Position.of(DEFAULT_TEXT_POSITION),
    )


def new_image_element(src: str, element_id: Optional[str] = None) -> ImageElement:
    """创建带默认位置和尺寸的图片元素.

    Args:
        src: 图片资源引用
        element_id: 指定ID，默认自动生成

    Returns:
        新的 ImageElement
    """
    return ImageElement(
        id=element_id or generate_element_id(),
        src=src,
        position=Position.of(DEFAULT_IMAGE_POSITION),
        size=DEFAULT_IMAGE_SIZE,
    )


def _normalize_changes(model: type[CanvasElement], changes: dict[str, Any]) -> dict[str, Any]:
    """把 camelCase 别名统一为字段名，未知字段抛出异常."""
    alias_map = {
        info.alias: name for name, info in model.model_fields.items() if info.alias
    }
    normalized: dict[str, Any] = {}
    for key, value in changes.items():
        name = alias_map.get(key, key)
        if name not in model.model_fields:
            raise ValueError(f"{model.__name__} 没有字段: {key}")
        if name == "id":
            raise ValueError("元素ID不可修改")
        normalized[name] = value
    return normalized


def _apply(element: CanvasElement, changes: dict[str, Any]) -> CanvasElement:
    data = element.model_dump()
    data.update(_normalize_changes(type(element), changes))
    return type(element).model_validate(data)


def update_text_element(element: TextElement, **changes: Any) -> TextElement:
    """返回覆盖了指定字段的新文字元素.

    Args:
        element: 原文字元素
        **changes: 要覆盖的字段（支持 snake_case 与 camelCase）

    Returns:
        新的 TextElement，未指定的字段保持不变
    """
    return _apply(element, changes)  # type: ignore[return-value]


def update_image_element(element: ImageElement, **changes: Any) -> ImageElement:
    """返回覆盖了指定字段的新图片元素.

    Args:
        element: 原图片元素
        **changes: 要覆盖的字段

    Returns:
        新的 ImageElement
    """
    return _apply(element, changes)  # type: ignore[return-value]
