"""数据模型模块."""

from certforge.models.elements import (
    # 枚举
    ElementKind,
    FontStyle,
    FontWeight,
    TextAlign,
    # 常量
    DEFAULT_IMAGE_POSITION,
    DEFAULT_IMAGE_SIZE,
    DEFAULT_TEXT_COLOR,
    DEFAULT_TEXT_CONTENT,
    DEFAULT_TEXT_FONT_FAMILY,
    DEFAULT_TEXT_FONT_SIZE,
    DEFAULT_TEXT_POSITION,
    FONT_FAMILIES,
    FONT_SIZES,
    # 元素类
    AnyElement,
    CanvasElement,
    ImageElement,
    Position,
    TextElement,
    # 辅助函数
    generate_element_id,
    new_image_element,
    new_text_element,
    update_image_element,
    update_text_element,
)
from certforge.models.selection import DragState, EditorPhase, ElementRef, Selection
from certforge.models.template_document import DEFAULT_TEMPLATE_NAME, TemplateDocument, utc_timestamp

__all__ = [
    # 枚举
    "ElementKind",
    "FontStyle",
    "FontWeight",
    "TextAlign",
    # 常量
    "DEFAULT_IMAGE_POSITION",
    "DEFAULT_IMAGE_SIZE",
    "DEFAULT_TEXT_COLOR",
    "DEFAULT_TEXT_CONTENT",
    "DEFAULT_TEXT_FONT_FAMILY",
    "DEFAULT_TEXT_FONT_SIZE",
    "DEFAULT_TEXT_POSITION",
    "FONT_FAMILIES",
    "FONT_SIZES",
    # 元素类
    "AnyElement",
    "CanvasElement",
    "ImageElement",
    "Position",
    "TextElement",
    # 辅助函数
    "generate_element_id",
    "new_image_element",
    "new_text_element",
    "update_image_element",
    "update_text_element",
    # 选择状态
    "DragState",
    "EditorPhase",
    "ElementRef",
    "Selection",
    # 模板文档
    "DEFAULT_TEMPLATE_NAME",
    "TemplateDocument",
    "utc_timestamp",
]
