"""模板编辑器测试 fixtures."""

import pytest
from PyQt6.QtCore import QEvent, QPointF, Qt
from PyQt6.QtGui import QMouseEvent
from PyQt6.QtWidgets import QApplication


@pytest.fixture(scope="module")
def app():
    """创建 Qt 应用实例."""
    application = QApplication.instance()
    if not application:
        application = QApplication([])
    yield application


@pytest.fixture
def mouse_event():
    """构造画布本地坐标的鼠标事件."""

    def create(
        event_type: QEvent.Type,
        x: float,
        y: float,
        button: Qt.MouseButton = Qt.MouseButton.LeftButton,
    ) -> QMouseEvent:
        buttons = Qt.MouseButton.NoButton if event_type == QEvent.Type.MouseButtonRelease else Qt.MouseButton.LeftButton
        point = QPointF(x, y)
        return QMouseEvent(event_type, point, point, button, buttons, Qt.KeyboardModifier.NoModifier)

    return create
