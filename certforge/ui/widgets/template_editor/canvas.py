"""模板画布组件.

绘制证书模板（背景图、图片元素、文字元素），把鼠标事件转换为
控制器的指针操作。

Features:
    - 背景图铺满画布
    - 图片元素按 size x size 绘制，文字元素按样式绘制
    - 选中元素显示虚线边框
    - 按下元素开始拖拽，移动时实时更新位置，释放或移出画布结束拖拽
    - 双击文字元素请求编辑内容
"""

from __future__ import annotations

from typing import Optional

from PyQt6.QtCore import QEvent, QPointF, QRectF, QSize, Qt, pyqtSignal
from PyQt6.QtGui import (
    QColor,
    QFont,
    QFontMetricsF,
    QMouseEvent,
    QPainter,
    QPaintEvent,
    QPen,
    QPixmap,
)
from PyQt6.QtWidgets import QSizePolicy, QWidget

from certforge.core.editor_controller import EditorController
from certforge.core.geometry import CanvasRect
from certforge.models.elements import ElementKind, TextAlign, TextElement
from certforge.models.selection import ElementRef
from certforge.utils.constants import DEFAULT_CANVAS_HEIGHT, DEFAULT_CANVAS_WIDTH, TEXT_NOMINAL_EXTENT
from certforge.utils.image_utils import data_uri_to_bytes
from certforge.utils.logger import setup_logger

logger = setup_logger(__name__)


# ===================
# 常量定义
# ===================

CANVAS_BACKGROUND_COLOR = QColor(255, 255, 255)
CANVAS_BORDER_COLOR = QColor(200, 200, 200)
SELECTION_COLOR = QColor(13, 110, 253)
PLACEHOLDER_TEXT_COLOR = QColor(160, 160, 160)

_ALIGN_FLAGS = {
    TextAlign.LEFT: Qt.AlignmentFlag.AlignLeft,
    TextAlign.CENTER: Qt.AlignmentFlag.AlignHCenter,
    TextAlign.RIGHT: Qt.AlignmentFlag.AlignRight,
}


def build_font(element: TextElement) -> QFont:
    """根据文字元素样式创建字体."""
    font = QFont(element.font_family)
    font.setPixelSize(element.font_size)
    font.setBold(element.is_bold)
    font.setItalic(element.is_italic)
    return font


def text_bounds(element: TextElement) -> QRectF:
    """文字元素的绘制区域（不小于名义尺寸）."""
    metrics = QFontMetricsF(build_font(element))
    lines = element.content.split("\n") or [""]
    width = max(metrics.horizontalAdvance(line) for line in lines)
    height = metrics.lineSpacing() * len(lines)
    return QRectF(
        element.position.x,
        element.position.y,
        max(width, TEXT_NOMINAL_EXTENT),
        max(height, TEXT_NOMINAL_EXTENT),
    )


# ===================
# 画布
# ===================


class EditorCanvas(QWidget):
    """模板编辑画布.

    Signals:
        text_edit_requested: 双击文字元素 (element_id)

    Example:
        >>> canvas = EditorCanvas(controller)
        >>> canvas.text_edit_requested.connect(panel.focus_editor)
    """

    text_edit_requested = pyqtSignal(str)

    def __init__(
        self,
        controller: EditorController,
        canvas_size: tuple[int, int] = (DEFAULT_CANVAS_WIDTH, DEFAULT_CANVAS_HEIGHT),
        parent: Optional[QWidget] = None,
    ) -> None:
        """初始化画布.

        Args:
            controller: 编辑器控制器
            canvas_size: 画布尺寸 (宽, 高)
            parent: 父组件
        """
        super().__init__(parent)
        self._controller = controller
        self._canvas_size = QSize(*canvas_size)
        self._pixmap_cache: dict[str, QPixmap] = {}

        self.setObjectName("editorCanvas")
        self.setFixedSize(self._canvas_size)
        self.setSizePolicy(QSizePolicy.Policy.Fixed, QSizePolicy.Policy.Fixed)
        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.FocusPolicy.ClickFocus)

        unsubscribe = controller.subscribe(self._on_controller_changed)
        self.destroyed.connect(lambda *_args: unsubscribe())

    @property
    def controller(self) -> EditorController:
        return self._controller

    def canvas_rect(self) -> CanvasRect:
        """画布包围矩形（画布本地坐标系，原点为左上角）."""
        return CanvasRect(0, 0, self.width(), self.height())

    def sizeHint(self) -> QSize:
        return self._canvas_size

    # ========================
    # 图片缓存
    # ========================

    def pixmap_for(self, src: str) -> Optional[QPixmap]:
        """解码图片资源（按资源引用缓存）."""
        pixmap = self._pixmap_cache.get(src)
        if pixmap is not None:
            return pixmap

        pixmap = QPixmap()
        try:
            data = data_uri_to_bytes(src)
        except ValueError as e:
            logger.warning(f"无法解析图片资源: {e}")
            return None
        if not pixmap.loadFromData(data):
            logger.warning("图片资源解码失败")
            return None

        self._pixmap_cache[src] = pixmap
        return pixmap

    @property
    def cached_sources(self) -> set[str]:
        return set(self._pixmap_cache)

    def prune_cache(self) -> None:
        """丢弃文档中已不再引用的图片缓存."""
        document = self._controller.document
        live = {image.src for image in document.images}
        if document.background_image:
            live.add(document.background_image)
        for src in set(self._pixmap_cache) - live:
            del self._pixmap_cache[src]

    def _on_controller_changed(self, _controller: EditorController) -> None:
        self.prune_cache()
        self.update()

    # ========================
    # 命中测试
    # ========================

    def element_at(self, x: float, y: float) -> Optional[ElementRef]:
        """查找指定位置最上层的元素.

        文字绘制在图片之上，因此先检查文字；同类元素中后添加的在上层。

        Args:
            x: 画布本地X坐标
            y: 画布本地Y坐标

        Returns:
            元素引用，空白处返回 None
        """
        point = QPointF(x, y)
        document = self._controller.document

        for text in reversed(document.text_elements):
            if text_bounds(text).contains(point):
                return ElementRef.text(text.id)

        for image in reversed(document.images):
            rect = QRectF(image.position.x, image.position.y, image.size, image.size)
            if rect.contains(point):
                return ElementRef.image(image.id)

        return None

    # ========================
    # 绘制
    # ========================

    def paintEvent(self, event: QPaintEvent) -> None:
        """绘制画布."""
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)

        self._draw_background(painter)
        self._draw_images(painter)
        self._draw_texts(painter)

        painter.setPen(QPen(CANVAS_BORDER_COLOR, 1))
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.drawRect(self.rect().adjusted(0, 0, -1, -1))
        painter.end()

    def _draw_background(self, painter: QPainter) -> None:
        painter.fillRect(self.rect(), CANVAS_BACKGROUND_COLOR)

        background = self._controller.document.background_image
        pixmap = self.pixmap_for(background) if background else None
        if pixmap is not None:
            painter.drawPixmap(QRectF(self.rect()), pixmap, QRectF(pixmap.rect()))
            return

        painter.setPen(PLACEHOLDER_TEXT_COLOR)
        painter.drawText(
            self.rect(),
            Qt.AlignmentFlag.AlignCenter,
            "Upload a background image to start designing",
        )

    def _draw_images(self, painter: QPainter) -> None:
        selected_id = self._controller.engine.selected_image_id
        for image in self._controller.document.images:
            rect = QRectF(image.position.x, image.position.y, image.size, image.size)
            pixmap = self.pixmap_for(image.src)
            if pixmap is not None:
                painter.drawPixmap(rect, pixmap, QRectF(pixmap.rect()))
            if image.id == selected_id:
                self._draw_selection(painter, rect)

    def _draw_texts(self, painter: QPainter) -> None:
        selected_id = self._controller.engine.selected_text_id
        for text in self._controller.document.text_elements:
            rect = text_bounds(text)
            painter.setFont(build_font(text))
            painter.setPen(QColor(text.color))
            flags = _ALIGN_FLAGS[text.text_align] | Qt.AlignmentFlag.AlignTop
            painter.drawText(rect, flags, text.content)
            if text.id == selected_id:
                self._draw_selection(painter, rect)

    def _draw_selection(self, painter: QPainter, rect: QRectF) -> None:
        pen = QPen(SELECTION_COLOR, 2, Qt.PenStyle.DashLine)
        painter.setPen(pen)
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.drawRect(rect.adjusted(-2, -2, 2, 2))

    # ========================
    # 鼠标事件
    # ========================

    def mousePressEvent(self, event: QMouseEvent) -> None:
        """鼠标按下：在元素上开始拖拽（空白处不改变选择）."""
        if event.button() != Qt.MouseButton.LeftButton:
            super().mousePressEvent(event)
            return

        pos = event.position()
        ref = self.element_at(pos.x(), pos.y())
        if ref is not None:
            self._controller.pointer_down(ref.kind, ref.id)
            self.setCursor(Qt.CursorShape.ClosedHandCursor)
        event.accept()

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        """鼠标移动：拖拽中更新元素位置."""
        if self._controller.engine.is_dragging:
            pos = event.position()
            self._controller.pointer_move(pos.x(), pos.y(), self.canvas_rect())
            event.accept()
            return
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        """鼠标释放：结束拖拽."""
        if event.button() == Qt.MouseButton.LeftButton:
            self._controller.pointer_up()
            self.unsetCursor()
            event.accept()
            return
        super().mouseReleaseEvent(event)

    def mouseDoubleClickEvent(self, event: QMouseEvent) -> None:
        """双击文字元素请求编辑."""
        pos = event.position()
        ref = self.element_at(pos.x(), pos.y())
        if ref is not None and ref.kind == ElementKind.TEXT:
            self.text_edit_requested.emit(ref.id)
            event.accept()
            return
        super().mouseDoubleClickEvent(event)

    def leaveEvent(self, event: QEvent) -> None:
        """指针移出画布：结束拖拽."""
        self._controller.pointer_leave()
        self.unsetCursor()
        super().leaveEvent(event)
