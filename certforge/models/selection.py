"""选择与拖拽状态模型.

选择状态和拖拽状态都不属于持久化的模板文档。

选择使用标签联合表示：``None`` 表示未选中，``ElementRef`` 同时携带元素类型与ID，
因此“文字选中”和“图片选中”在结构上互斥，不可能同时存在。
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from certforge.models.elements import ElementKind


@dataclass(frozen=True)
class ElementRef:
    """元素引用（复合键 kind + id）."""

    kind: ElementKind
    id: str

    @classmethod
    def text(cls, element_id: str) -> "ElementRef":
        """文字元素引用."""
        return cls(ElementKind.TEXT, element_id)

    @classmethod
    def image(cls, element_id: str) -> "ElementRef":
        """图片元素引用."""
        return cls(ElementKind.IMAGE, element_id)

    @property
    def is_text(self) -> bool:
        return self.kind == ElementKind.TEXT

    @property
    def is_image(self) -> bool:
        return self.kind == ElementKind.IMAGE


# 选择状态：None 或单个元素
Selection = Optional[ElementRef]

# 拖拽状态：None 或正在被指针手势移动的元素
DragState = Optional[ElementRef]


class EditorPhase(str, Enum):
    """编辑器交互阶段."""

    IDLE = "idle"  # 无选中
    SELECTED = "selected"  # 有选中，未拖拽
    DRAGGING = "dragging"  # 正在拖拽
