"""模板编辑器组件模块.

Components:
    - EditorCanvas: 画布组件
    - EditorToolbar: 编辑器工具栏
    - TextContentPanel: 文字内容编辑面板
"""

from certforge.ui.widgets.template_editor.canvas import EditorCanvas, build_font, text_bounds
from certforge.ui.widgets.template_editor.editor_toolbar import (
    ColorButton,
    EditorToolbar,
    LabeledSlider,
)
from certforge.ui.widgets.template_editor.text_panel import TextContentPanel

__all__ = [
    # 画布
    "EditorCanvas",
    "build_font",
    "text_bounds",
    # 工具栏
    "EditorToolbar",
    "ColorButton",
    "LabeledSlider",
    # 面板
    "TextContentPanel",
]
