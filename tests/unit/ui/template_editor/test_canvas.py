"""模板画布单元测试."""

import pytest
from PyQt6.QtCore import QEvent, QPointF, Qt

from certforge.models.elements import ElementKind, Position
from certforge.models.selection import EditorPhase, ElementRef
from certforge.ui.widgets.template_editor.canvas import EditorCanvas, build_font, text_bounds
from certforge.utils.constants import TEXT_NOMINAL_EXTENT
from certforge.utils.image_utils import bytes_to_data_uri


@pytest.fixture
def canvas(app, controller):
    widget = EditorCanvas(controller)
    yield widget
    widget.deleteLater()


# ===================
# 辅助函数测试
# ===================


class TestTextHelpers:
    """文字字体与边界测试."""

    def test_should_build_font_from_style(self, app, controller):
        """应按元素样式创建字体."""
        text_id = controller.add_text()
        controller.update_text(text_id, fontFamily="Georgia", fontSize=32, fontWeight="bold", fontStyle="italic")

        font = build_font(controller.document.get_text(text_id))

        assert font.family() == "Georgia"
        assert font.pixelSize() == 32
        assert font.bold()
        assert font.italic()

    def test_bounds_start_at_position(self, app, controller):
        """边界左上角应为元素位置."""
        text_id = controller.add_text()
        rect = text_bounds(controller.document.get_text(text_id))

        assert rect.topLeft() == QPointF(200, 200)

    def test_bounds_not_smaller_than_nominal_extent(self, app, controller):
        """短文字的边界不小于名义尺寸."""
        text_id = controller.add_text()
        controller.update_text(text_id, content="", fontSize=8)

        rect = text_bounds(controller.document.get_text(text_id))

        assert rect.width() >= TEXT_NOMINAL_EXTENT
        assert rect.height() >= TEXT_NOMINAL_EXTENT


# ===================
# 画布测试
# ===================


class TestEditorCanvas:
    """画布测试."""

    def test_should_have_fixed_size(self, app, controller):
        """应使用固定的画布尺寸."""
        canvas = EditorCanvas(controller, canvas_size=(800, 600))
        assert canvas.width() == 800
        assert canvas.height() == 600
        rect = canvas.canvas_rect()
        assert (rect.left, rect.top, rect.width, rect.height) == (0, 0, 800, 600)

    def test_should_find_text_above_image(self, canvas, controller):
        """文字应位于图片之上."""
        image_id = controller.add_image("img")
        text_id = controller.add_text()

        assert canvas.element_at(210, 210) == ElementRef.text(text_id)
        assert canvas.element_at(110, 110) == ElementRef.image(image_id)

    def test_should_prefer_last_added_image(self, canvas, controller):
        """后添加的图片应位于上层."""
        controller.add_image("first")
        second = controller.add_image("second")

        assert canvas.element_at(150, 150) == ElementRef.image(second)

    def test_should_return_none_on_empty_area(self, canvas, controller):
        """空白处应返回 None."""
        controller.add_text()
        assert canvas.element_at(900, 650) is None

    def test_should_cache_decoded_pixmaps(self, canvas, png_bytes):
        """应缓存解码后的图片."""
        uri = bytes_to_data_uri(png_bytes, "image/png")

        first = canvas.pixmap_for(uri)
        assert first is not None and not first.isNull()
        assert canvas.pixmap_for(uri) is first

    def test_should_drop_cache_for_deleted_image(self, canvas, controller, png_bytes):
        """删除图片后应丢弃其缓存."""
        uri = bytes_to_data_uri(png_bytes, "image/png")
        image_id = controller.add_image(uri)
        canvas.pixmap_for(uri)
        assert canvas.cached_sources == {uri}

        controller.delete_image(image_id)

        assert canvas.cached_sources == set()

    def test_should_drop_cache_for_replaced_background(self, canvas, controller, png_bytes, image_factory):
        """替换背景后应只保留新背景的缓存."""
        old = bytes_to_data_uri(png_bytes, "image/png")
        new = bytes_to_data_uri(image_factory("dark.png", color=(0, 0, 0)).read_bytes(), "image/png")
        controller.set_background(old)
        canvas.pixmap_for(old)

        controller.set_background(new)
        canvas.pixmap_for(new)

        assert canvas.cached_sources == {new}

    def test_should_keep_cache_for_shared_source(self, canvas, controller, png_bytes):
        """同一资源被多个图片引用时，删除其中一个应保留缓存."""
        uri = bytes_to_data_uri(png_bytes, "image/png")
        first = controller.add_image(uri)
        controller.add_image(uri)
        canvas.pixmap_for(uri)

        controller.delete_image(first)

        assert canvas.cached_sources == {uri}

    def test_should_reject_invalid_source(self, canvas):
        """无法解析的资源返回 None."""
        assert canvas.pixmap_for("not-a-data-uri") is None
        assert canvas.pixmap_for("data:image/png;base64,AAAA") is None

    def test_should_paint_without_error(self, canvas, controller, png_bytes):
        """应能绘制所有元素."""
        uri = bytes_to_data_uri(png_bytes, "image/png")
        controller.set_background(uri)
        controller.add_image(uri)
        controller.add_text()

        image = canvas.grab()
        assert image.width() == canvas.width()


class TestCanvasPointer:
    """画布鼠标交互测试."""

    def test_should_drag_text(self, canvas, controller, mouse_event):
        """按下、移动、释放应拖动文字."""
        text_id = controller.add_text()

        canvas.mousePressEvent(mouse_event(QEvent.Type.MouseButtonPress, 210, 210))
        assert controller.engine.phase == EditorPhase.DRAGGING

        canvas.mouseMoveEvent(mouse_event(QEvent.Type.MouseMove, 400, 300))
        canvas.mouseReleaseEvent(mouse_event(QEvent.Type.MouseButtonRelease, 400, 300))

        assert controller.document.get_text(text_id).position == Position(x=400, y=300)
        assert controller.engine.phase == EditorPhase.SELECTED

    def test_should_center_dragged_image(self, canvas, controller, mouse_event):
        """拖动图片时图片中心应跟随指针."""
        image_id = controller.add_image("img")

        canvas.mousePressEvent(mouse_event(QEvent.Type.MouseButtonPress, 150, 150))
        canvas.mouseMoveEvent(mouse_event(QEvent.Type.MouseMove, 500, 400))

        assert controller.document.get_image(image_id).position == Position(x=425, y=325)

    def test_should_clamp_to_canvas(self, canvas, controller, mouse_event):
        """拖出画布时应限制在边界内."""
        text_id = controller.add_text()

        canvas.mousePressEvent(mouse_event(QEvent.Type.MouseButtonPress, 210, 210))
        canvas.mouseMoveEvent(mouse_event(QEvent.Type.MouseMove, 5000, -40))

        assert controller.document.get_text(text_id).position == Position(x=950, y=0)

    def test_empty_click_keeps_selection(self, canvas, controller, mouse_event):
        """点击空白处不改变选中."""
        text_id = controller.add_text()

        canvas.mousePressEvent(mouse_event(QEvent.Type.MouseButtonPress, 900, 650))

        assert controller.selection == ElementRef.text(text_id)
        assert not controller.engine.is_dragging

    def test_move_without_press_does_nothing(self, canvas, controller, mouse_event):
        """未按下时移动不修改元素."""
        controller.add_text()
        controller.pointer_up()
        before = controller.document.text_elements

        canvas.mouseMoveEvent(mouse_event(QEvent.Type.MouseMove, 500, 500))

        assert controller.document.text_elements is before

    def test_leave_ends_drag(self, canvas, controller, mouse_event):
        """指针移出画布应结束拖拽."""
        controller.add_text()
        canvas.mousePressEvent(mouse_event(QEvent.Type.MouseButtonPress, 210, 210))

        canvas.leaveEvent(QEvent(QEvent.Type.Leave))

        assert not controller.engine.is_dragging
        assert controller.engine.phase == EditorPhase.SELECTED

    def test_right_button_ignored(self, canvas, controller, mouse_event):
        """右键按下不开始拖拽."""
        controller.add_image("img")
        controller.pointer_up()

        canvas.mousePressEvent(
            mouse_event(QEvent.Type.MouseButtonPress, 150, 150, Qt.MouseButton.RightButton)
        )

        assert not controller.engine.is_dragging

    def test_double_click_requests_text_edit(self, canvas, controller, mouse_event, qtbot):
        """双击文字应请求编辑."""
        text_id = controller.add_text()

        with qtbot.waitSignal(canvas.text_edit_requested, timeout=1000) as blocker:
            canvas.mouseDoubleClickEvent(mouse_event(QEvent.Type.MouseButtonDblClick, 210, 210))

        assert blocker.args == [text_id]

    def test_pointer_down_kind(self, canvas, controller, mouse_event):
        """按下图片应选中图片."""
        image_id = controller.add_image("img")
        controller.add_text()

        canvas.mousePressEvent(mouse_event(QEvent.Type.MouseButtonPress, 110, 110))

        assert controller.selection.kind == ElementKind.IMAGE
        assert controller.selection.id == image_id
