"""选择与拖拽状态机.

管理当前选中的元素以及正在被指针手势拖动的元素。

状态:
    IDLE      无选中
    SELECTED  选中某个元素（文字或图片，二者互斥）
    DRAGGING  选中并正在拖动该元素

转换:
    pointer_down(kind, id)  任意状态 -> DRAGGING(kind, id)，同时选中该元素
    pointer_move(x, y)      DRAGGING 时更新被拖元素位置，其它状态为空操作
    pointer_up / leave      DRAGGING -> SELECTED，其它状态为空操作

点击画布空白处不会清除选中，只有删除选中元素或选中其它元素才会改变选择。
"""

from __future__ import annotations

from typing import Optional

from certforge.core.geometry import CanvasRect, image_drag_position, text_drag_position
from certforge.models.elements import ElementKind
from certforge.models.selection import DragState, EditorPhase, ElementRef, Selection
from certforge.models.template_document import TemplateDocument
from certforge.utils.logger import setup_logger

logger = setup_logger(__name__)


class SelectionDragEngine:
    """选择与拖拽引擎.

    Attributes:
        document: 被拖拽元素所属的模板文档

    Example:
        >>> doc = TemplateDocument()
        >>> engine = SelectionDragEngine(doc)
        >>> text_id = doc.add_text()
        >>> engine.pointer_down(ElementKind.TEXT, text_id)
        >>> engine.pointer_move(120, 80, CanvasRect(20, 20, 800, 600))
        True
        >>> engine.pointer_up()
        >>> engine.phase
        <EditorPhase.SELECTED: 'selected'>
    """

    def __init__(self, document: TemplateDocument) -> None:
        """初始化引擎.

        Args:
            document: 模板文档
        """
        self._document = document
        self._selection: Selection = None
        self._drag: DragState = None

    # ========================
    # 属性
    # ========================

    @property
    def document(self) -> TemplateDocument:
        return self._document

    @document.setter
    def document(self, document: TemplateDocument) -> None:
        """替换文档时同时清除选择和拖拽."""
        self._document = document
        self.clear()

    @property
    def selection(self) -> Selection:
        """当前选择."""
        return self._selection

    @property
    def drag(self) -> DragState:
        """当前拖拽."""
        return self._drag

    @property
    def is_dragging(self) -> bool:
        return self._drag is not None

    @property
    def phase(self) -> EditorPhase:
        """当前交互阶段."""
        if self._drag is not None:
            return EditorPhase.DRAGGING
        if self._selection is not None:
            return EditorPhase.SELECTED
        return EditorPhase.IDLE

    @property
    def selected_text_id(self) -> Optional[str]:
        """选中的文字元素ID."""
        if self._selection is not None and self._selection.is_text:
            return self._selection.id
        return None

    @property
    def selected_image_id(self) -> Optional[str]:
        """选中的图片元素ID."""
        if self._selection is not None and self._selection.is_image:
            return self._selection.id
        return None

    # ========================
    # 选择
    # ========================

    def select(self, ref: ElementRef) -> None:
        """选中元素（替换已有选择）."""
        self._selection = ref

    def forget(self, ref: ElementRef) -> None:
        """元素被删除后清理对它的引用."""
        if self._selection == ref:
            self._selection = None
        if self._drag == ref:
            self._drag = None

    def clear(self) -> None:
        """清除选择和拖拽."""
        self._selection = None
        self._drag = None

    # ========================
    # 指针事件
    # ========================

    def pointer_down(self, kind: ElementKind, element_id: str) -> None:
        """在元素上按下指针：选中并开始拖拽.

        Args:
            kind: 元素类型
            element_id: 元素ID
        """
        ref = ElementRef(ElementKind(kind), element_id)
        self._selection = ref
        self._drag = ref
        logger.debug(f"开始拖拽: {ref.kind.value}/{ref.id}")

    def pointer_move(
        self,
        pointer_x: float,
        pointer_y: float,
        canvas_rect: Optional[CanvasRect],
    ) -> bool:
        """移动指针：更新被拖拽元素的位置.

        Args:
            pointer_x: 指针视口X坐标
            pointer_y: 指针视口Y坐标
            canvas_rect: 画布包围矩形，画布未挂载时为 None

        Returns:
            是否更新了元素位置
        """
        if self._drag is None or canvas_rect is None:
            return False

        if self._drag.is_text:
            if self._document.get_text(self._drag.id) is None:
                return False
            position = text_drag_position(pointer_x, pointer_y, canvas_rect)
            return self._document.update_text(self._drag.id, position=position)

        image = self._document.get_image(self._drag.id)
        if image is None:
            return False
        position = image_drag_position(pointer_x, pointer_y, image.size, canvas_rect)
        return self._document.update_image(self._drag.id, position=position)

    def pointer_up(self) -> None:
        """释放指针：结束拖拽，保留选择."""
        if self._drag is not None:
            logger.debug(f"结束拖拽: {self._drag.kind.value}/{self._drag.id}")
        self._drag = None

    def pointer_leave(self) -> None:
        """指针离开画布，视为释放."""
        self.pointer_up()
