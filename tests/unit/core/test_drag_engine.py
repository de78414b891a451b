"""选择与拖拽引擎单元测试."""

import pytest

from certforge.core.drag_engine import SelectionDragEngine
from certforge.core.geometry import CanvasRect
from certforge.models.elements import ElementKind, Position
from certforge.models.selection import EditorPhase, ElementRef
from certforge.models.template_document import TemplateDocument

RECT = CanvasRect(20, 20, 800, 600)


@pytest.fixture
def document() -> TemplateDocument:
    return TemplateDocument()


@pytest.fixture
def engine(document) -> SelectionDragEngine:
    return SelectionDragEngine(document)


class TestSelection:
    """选择测试."""

    def test_initially_idle(self, engine):
        """测试初始状态."""
        assert engine.phase == EditorPhase.IDLE
        assert engine.selection is None
        assert not engine.is_dragging

    def test_text_and_image_mutually_exclusive(self, engine, document):
        """测试选中图片会取消文字选中."""
        text_id = document.add_text()
        image_id = document.add_image("img")

        engine.pointer_down(ElementKind.TEXT, text_id)
        engine.pointer_up()
        assert engine.selected_text_id == text_id

        engine.pointer_down(ElementKind.IMAGE, image_id)
        assert engine.selected_image_id == image_id
        assert engine.selected_text_id is None

    def test_select_replaces(self, engine):
        """测试选择替换."""
        engine.select(ElementRef.text("a"))
        engine.select(ElementRef.image("b"))
        assert engine.selection == ElementRef.image("b")
        assert engine.phase == EditorPhase.SELECTED

    def test_forget_clears_matching_selection(self, engine):
        """测试删除元素后清理引用."""
        engine.pointer_down(ElementKind.TEXT, "a")
        engine.forget(ElementRef.text("a"))
        assert engine.selection is None
        assert engine.drag is None

    def test_forget_other_keeps_selection(self, engine):
        """测试删除其它元素不影响选择."""
        engine.select(ElementRef.text("a"))
        engine.forget(ElementRef.image("a"))
        assert engine.selection == ElementRef.text("a")

    def test_replacing_document_clears_state(self, engine):
        """测试替换文档时清除状态."""
        engine.pointer_down(ElementKind.TEXT, "a")
        engine.document = TemplateDocument()
        assert engine.phase == EditorPhase.IDLE


class TestDragging:
    """拖拽测试."""

    def test_text_drag(self, engine, document):
        """测试拖拽文字."""
        text_id = document.add_text()

        engine.pointer_down(ElementKind.TEXT, text_id)
        assert engine.phase == EditorPhase.DRAGGING
        assert engine.pointer_move(120, 80, RECT) is True

        assert document.get_text(text_id).position == Position(x=100, y=60)

    def test_image_drag_centers(self, engine, document):
        """测试拖拽图片以中心为锚点."""
        image_id = document.add_image("img")

        engine.pointer_down(ElementKind.IMAGE, image_id)
        engine.pointer_move(420, 320, RECT)

        assert document.get_image(image_id).position == Position(x=325, y=225)

    def test_move_without_drag_is_noop(self, engine, document):
        """测试未拖拽时移动不修改文档."""
        text_id = document.add_text()
        engine.select(ElementRef.text(text_id))

        assert engine.pointer_move(120, 80, RECT) is False
        assert document.get_text(text_id).position == Position(x=200, y=200)

    def test_move_without_canvas_rect_is_noop(self, engine, document):
        """测试画布未挂载时移动为空操作."""
        text_id = document.add_text()
        engine.pointer_down(ElementKind.TEXT, text_id)

        assert engine.pointer_move(120, 80, None) is False
        assert engine.is_dragging

    def test_move_deleted_element_is_noop(self, engine, document):
        """测试被拖拽元素已删除时不重新创建."""
        image_id = document.add_image("img")
        engine.pointer_down(ElementKind.IMAGE, image_id)
        document.delete_image(image_id)

        assert engine.pointer_move(300, 300, RECT) is False
        assert document.images == []

    def test_pointer_up_keeps_selection(self, engine, document):
        """测试释放后保留选中."""
        text_id = document.add_text()
        engine.pointer_down(ElementKind.TEXT, text_id)
        engine.pointer_up()

        assert engine.phase == EditorPhase.SELECTED
        assert engine.selected_text_id == text_id

    def test_pointer_leave_ends_drag(self, engine, document):
        """测试指针离开画布结束拖拽."""
        text_id = document.add_text()
        engine.pointer_down(ElementKind.TEXT, text_id)
        engine.pointer_leave()

        assert not engine.is_dragging
        assert engine.pointer_move(400, 400, RECT) is False
        assert document.get_text(text_id).position == Position(x=200, y=200)

    def test_pointer_up_when_idle(self, engine):
        """测试空闲时释放为空操作."""
        engine.pointer_up()
        assert engine.phase == EditorPhase.IDLE
