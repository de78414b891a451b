"""文字内容编辑面板.

编辑选中文字元素的内容；未选中文字时隐藏。
"""

from __future__ import annotations

from typing import Optional

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import QLabel, QPlainTextEdit, QVBoxLayout, QWidget

from certforge.core.editor_controller import ToolbarState


class TextContentPanel(QWidget):
    """文字内容编辑面板.

    Signals:
        content_changed: 内容变化 (content)
    """

    content_changed = pyqtSignal(str)

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setObjectName("textContentPanel")

        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 8, 8, 8)
        layout.setSpacing(4)

        title = QLabel("Text content")
        title.setObjectName("sectionTitle")
        layout.addWidget(title)

        self.editor = QPlainTextEdit()
        self.editor.setPlaceholderText("Type the text shown on the certificate")
        self.editor.textChanged.connect(self._on_text_changed)
        layout.addWidget(self.editor, 1)

        self.setVisible(False)

    def apply_state(self, state: ToolbarState) -> None:
        """同步选中文字的内容（不发出信号）."""
        text = state.selected_text
        self.setVisible(text is not None)
        content = text.content if text is not None else ""
        if self.editor.toPlainText() != content:
            self.editor.blockSignals(True)
            self.editor.setPlainText(content)
            self.editor.blockSignals(False)

    def focus_editor(self, element_id: str = "") -> None:
        """聚焦编辑框并全选内容."""
        if self.isHidden():
            return
        self.editor.setFocus()
        self.editor.selectAll()

    def _on_text_changed(self) -> None:
        self.content_changed.emit(self.editor.toPlainText())
