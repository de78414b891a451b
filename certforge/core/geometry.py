"""画布坐标计算.

把指针的视口坐标换算为画布本地坐标，并把元素位置限制在画布范围内。
所有函数均为纯函数，不依赖任何界面对象。

文字元素以左上角为锚点拖拽，使用固定的名义尺寸（未测量文字渲染框）；
图片元素以中心为锚点拖拽，使用 size x size 的实际尺寸。
"""

from __future__ import annotations

from dataclasses import dataclass

from certforge.models.elements import Position
from certforge.utils.constants import TEXT_NOMINAL_EXTENT


@dataclass(frozen=True)
class CanvasRect:
    """画布在屏幕上的包围矩形."""

    left: float
    top: float
    width: float
    height: float


@dataclass(frozen=True)
class Extent:
    """元素占据的尺寸."""

    width: float
    height: float

    @classmethod
    def square(cls, size: float) -> "Extent":
        return cls(size, size)


# 文字元素的名义尺寸
TEXT_EXTENT = Extent.square(TEXT_NOMINAL_EXTENT)


def to_local(pointer_x: float, pointer_y: float, canvas_rect: CanvasRect) -> tuple[float, float]:
    """视口坐标转换为画布本地坐标.

    结果可能为负或超出画布，由 clamp 负责限制。

    Args:
        pointer_x: 指针视口X坐标
        pointer_y: 指针视口Y坐标
        canvas_rect: 画布包围矩形

    Returns:
        (x, y) 画布本地坐标
    """
    return (pointer_x - canvas_rect.left, pointer_y - canvas_rect.top)


def clamp(point: tuple[float, float], extent: Extent, canvas_rect: CanvasRect) -> Position:
    """限制位置，使元素完整位于画布内.

    画布小于元素时，位置固定为 0。

    Args:
        point: 建议的 (x, y) 左上角位置
        extent: 元素尺寸
        canvas_rect: 画布包围矩形

    Returns:
        限制后的位置
    """
    x, y = point
    return Position(
        x=max(0, min(x, canvas_rect.width - extent.width)),
        y=max(0, min(y, canvas_rect.height - extent.height)),
    )


def text_drag_position(pointer_x: float, pointer_y: float, canvas_rect: CanvasRect) -> Position:
    """计算拖拽文字元素时的新位置（左上角对齐指针）."""
    return clamp(to_local(pointer_x, pointer_y, canvas_rect), TEXT_EXTENT, canvas_rect)


def image_drag_position(
    pointer_x: float,
    pointer_y: float,
    size: float,
    canvas_rect: CanvasRect,
) -> Position:
    """计算拖拽图片元素时的新位置（图片中心对齐指针）.

    Args:
        pointer_x: 指针视口X坐标
        pointer_y: 指针视口Y坐标
        size: 图片边长
        canvas_rect: 画布包围矩形

    Returns:
        限制后的左上角位置
    """
    x, y = to_local(pointer_x, pointer_y, canvas_rect)
    half = size / 2
    return clamp((x - half, y - half), Extent.square(size), canvas_rect)
