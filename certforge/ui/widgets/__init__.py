"""UI 组件模块."""

from certforge.ui.widgets.template_editor import (
    ColorButton,
    EditorCanvas,
    EditorToolbar,
    LabeledSlider,
    TextContentPanel,
)

__all__ = [
    "ColorButton",
    "EditorCanvas",
    "EditorToolbar",
    "LabeledSlider",
    "TextContentPanel",
]
