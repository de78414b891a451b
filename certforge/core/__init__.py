"""核心业务逻辑模块."""

from certforge.core.drag_engine import SelectionDragEngine
from certforge.core.editor_controller import (
    IMAGE_SIZE_MAX,
    IMAGE_SIZE_MIN,
    IMAGE_SIZE_RANGE,
    AssetResult,
    EditorController,
    ToolbarState,
)
from certforge.core.geometry import (
    TEXT_EXTENT,
    CanvasRect,
    Extent,
    clamp,
    image_drag_position,
    text_drag_position,
    to_local,
)

__all__ = [
    # 坐标计算
    "CanvasRect",
    "Extent",
    "TEXT_EXTENT",
    "clamp",
    "image_drag_position",
    "text_drag_position",
    "to_local",
    # 选择与拖拽
    "SelectionDragEngine",
    # 控制器
    "AssetResult",
    "EditorController",
    "ToolbarState",
    "IMAGE_SIZE_MIN",
    "IMAGE_SIZE_MAX",
    "IMAGE_SIZE_RANGE",
]
