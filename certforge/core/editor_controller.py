"""模板编辑器控制器.

编辑器的组合根：持有模板文档与选择/拖拽引擎，向工具栏和画布提供操作，
并在每次修改完成后通知订阅者刷新界面。

Features:
    - 添加文字、上传图片（多文件并发读取，按读取完成顺序追加）
    - 上传背景图（单槽位覆盖）
    - 更新选中元素的样式、删除选中元素
    - 工具栏状态（上下文控件启用条件、是否允许保存）
    - 保存 / 加载 / 重置（重置需确认）
    - 指针事件转发到拖拽引擎
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, AsyncIterator, Awaitable, Callable, Iterable, Optional

from certforge.core.drag_engine import SelectionDragEngine
from certforge.core.geometry import CanvasRect
from certforge.models.elements import (
    ElementKind,
    FontStyle,
    FontWeight,
    ImageElement,
    TextAlign,
    TextElement,
)
from certforge.models.selection import ElementRef, Selection
from certforge.models.template_document import TemplateDocument
from certforge.services.asset_loader import AssetSource, describe_source, load_image_asset
from certforge.services.template_storage import TemplateStorage
from certforge.utils.error_handler import ErrorCollector
from certforge.utils.exceptions import AssetError, StorageError
from certforge.utils.logger import setup_logger

logger = setup_logger(__name__)

# 图片尺寸滑块范围
IMAGE_SIZE_MIN = 50
IMAGE_SIZE_MAX = 500
IMAGE_SIZE_RANGE = (IMAGE_SIZE_MIN, IMAGE_SIZE_MAX)

Listener = Callable[["EditorController"], None]
AssetLoader = Callable[[AssetSource], Awaitable[str]]
ConfirmCallback = Callable[[], bool]


@dataclass(frozen=True)
class AssetResult:
    """单个图片来源的读取结果."""

    source: AssetSource
    asset: Optional[str] = None
    error: Optional[AssetError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def label(self) -> str:
        return describe_source(self.source)


@dataclass(frozen=True)
class ToolbarState:
    """工具栏状态快照."""

    text_controls_enabled: bool
    image_controls_enabled: bool
    can_save: bool
    selected_text: Optional[TextElement] = None
    selected_image: Optional[ImageElement] = None


class EditorController:
    """模板编辑器控制器.

    Example:
        >>> controller = EditorController(TemplateStorage(MemoryStore()))
        >>> text_id = controller.add_text()
        >>> controller.toggle_bold()
        True
        >>> controller.save()
        False
    """

    def __init__(
        self,
        storage: TemplateStorage,
        asset_loader: AssetLoader = load_image_asset,
        document: Optional[TemplateDocument] = None,
    ) -> None:
        """初始化控制器.

        Args:
            storage: 模板存储
            asset_loader: 图片读取函数（异步）
            document: 初始文档，默认新建空文档
        """
        self._storage = storage
        self._asset_loader = asset_loader
        self._document = document or TemplateDocument()
        self._engine = SelectionDragEngine(self._document)
        self._listeners: list[Listener] = []

    # ========================
    # 属性
    # ========================

    @property
    def document(self) -> TemplateDocument:
        return self._document

    @property
    def engine(self) -> SelectionDragEngine:
        return self._engine

    @property
    def storage(self) -> TemplateStorage:
        return self._storage

    @property
    def selection(self) -> Selection:
        return self._engine.selection

    @property
    def selected_text(self) -> Optional[TextElement]:
        """当前选中的文字元素."""
        text_id = self._engine.selected_text_id
        return self._document.get_text(text_id) if text_id else None

    @property
    def selected_image(self) -> Optional[ImageElement]:
        """当前选中的图片元素."""
        image_id = self._engine.selected_image_id
        return self._document.get_image(image_id) if image_id else None

    @property
    def can_save(self) -> bool:
        """已设置背景图时才允许保存."""
        return self._document.can_save

    def toolbar_state(self) -> ToolbarState:
        """计算工具栏状态.

        文字/图片上下文控件仅在对应的选中槽位非空时启用。
        """
        text = self.selected_text
        image = self.selected_image
        return ToolbarState(
            text_controls_enabled=text is not None,
            image_controls_enabled=image is not None,
            can_save=self.can_save,
            selected_text=text,
            selected_image=image,
        )

    # ========================
    # 订阅
    # ========================

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """订阅状态变化.

        Args:
            listener: 回调，参数为控制器

        Returns:
            取消订阅函数
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # ========================
    # 元素操作
    # ========================

    def add_text(self) -> str:
        """添加默认文字元素并选中."""
        text_id = self._document.add_text()
        self._engine.select(ElementRef.text(text_id))
        self._notify()
        return text_id

    def add_image(self, asset: str) -> str:
        """添加图片元素并选中."""
        image_id = self._document.add_image(asset)
        self._engine.select(ElementRef.image(image_id))
        self._notify()
        return image_id

    def update_text(self, element_id: str, **changes: Any) -> bool:
        """更新文字元素，ID 不存在时为空操作."""
        if not self._document.update_text(element_id, **changes):
            return False
        self._notify()
        return True

    def update_image(self, element_id: str, **changes: Any) -> bool:
        """更新图片元素，ID 不存在时为空操作."""
        if not self._document.update_image(element_id, **changes):
            return False
        self._notify()
        return True

    def delete_text(self, element_id: str) -> bool:
        """删除文字元素，若其被选中则清除选择."""
        if not self._document.delete_text(element_id):
            return False
        self._engine.forget(ElementRef.text(element_id))
        self._notify()
        return True

    def delete_image(self, element_id: str) -> bool:
        """删除图片元素，若其被选中则清除选择."""
        if not self._document.delete_image(element_id):
            return False
        self._engine.forget(ElementRef.image(element_id))
        self._notify()
        return True

    def set_background(self, asset: Optional[str]) -> None:
        """设置背景图（覆盖已有背景）."""
        self._document.set_background(asset)
        self._notify()

    def set_name(self, name: str) -> None:
        """设置模板名称."""
        self._document.set_name(name)
        self._notify()

    # ========================
    # 上传
    # ========================

    async def load_assets(self, sources: Iterable[AssetSource]) -> AsyncIterator[AssetResult]:
        """并发读取图片，按读取完成顺序逐个产出结果.

        只读取不修改文档，可以在工作线程的事件循环中运行，
        由调用方在界面线程中应用结果。

        Args:
            sources: 图片文件路径或原始字节

        Yields:
            每个来源的读取结果，失败的来源携带异常
        """
        collector = ErrorCollector()

        async def load(source: AssetSource) -> AssetResult:
            try:
                return AssetResult(source, asset=await self._asset_loader(source))
            except AssetError as e:
                return AssetResult(source, error=e)

        loaded = 0
        for future in asyncio.as_completed([load(source) for source in sources]):
            result = await future
            if result.error is not None:
                collector.add(result.error, result.label)
            else:
                loaded += 1
            yield result

        if collector.has_errors:
            logger.warning(collector.summary)
        logger.info(f"图片读取完成: 成功 {loaded} 个，跳过 {collector.error_count} 个")

    async def upload_background(self, source: AssetSource) -> bool:
        """读取图片并设为背景.

        Returns:
            是否成功，读取失败时背景保持不变
        """
        updated = False
        async for result in self.load_assets([source]):
            if result.ok:
                self.set_background(result.asset)
                logger.info(f"背景图已更新: {result.label}")
                updated = True
        return updated

    async def upload_images(self, sources: Iterable[AssetSource]) -> list[str]:
        """并发读取多张图片，每张读取完成后立即追加.

        集合中的顺序为读取完成的顺序，不一定是选择文件的顺序。
        读取失败的文件被跳过，不会插入任何元素。

        Args:
            sources: 图片文件路径或原始字节

        Returns:
            按追加顺序排列的新元素ID
        """
        added: list[str] = []
        async for result in self.load_assets(sources):
            if result.ok:
                added.append(self.add_image(result.asset))
        return added

    # ========================
    # 工具栏：作用于当前选中元素
    # ========================

    def update_selected_text(self, **changes: Any) -> bool:
        """更新选中的文字元素，无选中时为空操作."""
        text_id = self._engine.selected_text_id
        if text_id is None:
            return False
        return self.update_text(text_id, **changes)

    def update_selected_image(self, **changes: Any) -> bool:
        """更新选中的图片元素，无选中时为空操作."""
        image_id = self._engine.selected_image_id
        if image_id is None:
            return False
        return self.update_image(image_id, **changes)

    def set_selected_content(self, content: str) -> bool:
        return self.update_selected_text(content=content)

    def set_font_family(self, family: str) -> bool:
        return self.update_selected_text(font_family=family)

    def set_font_size(self, size: int) -> bool:
        return self.update_selected_text(font_size=int(size))

    def set_text_color(self, color: str) -> bool:
        return self.update_selected_text(color=color)

    def set_text_align(self, align: TextAlign | str) -> bool:
        return self.update_selected_text(text_align=TextAlign(align))

    def toggle_bold(self) -> bool:
        """切换选中文字的粗体."""
        text = self.selected_text
        if text is None:
            return False
        weight = FontWeight.NORMAL if text.is_bold else FontWeight.BOLD
        return self.update_text(text.id, font_weight=weight)

    def toggle_italic(self) -> bool:
        """切换选中文字的斜体."""
        text = self.selected_text
        if text is None:
            return False
        style = FontStyle.NORMAL if text.is_italic else FontStyle.ITALIC
        return self.update_text(text.id, font_style=style)

    def set_image_size(self, size: int) -> bool:
        """设置选中图片的尺寸（限制在滑块范围内）."""
        size = max(IMAGE_SIZE_MIN, min(int(size), IMAGE_SIZE_MAX))
        return self.update_selected_image(size=size)

    def delete_selected(self) -> bool:
        """删除当前选中的元素."""
        selection = self._engine.selection
        if selection is None:
            return False
        if selection.is_text:
            return self.delete_text(selection.id)
        return self.delete_image(selection.id)

    # ========================
    # 指针事件
    # ========================

    def pointer_down(self, kind: ElementKind | str, element_id: str) -> None:
        """在元素上按下指针."""
        self._engine.pointer_down(ElementKind(kind), element_id)
        self._notify()

    def pointer_move(
        self,
        pointer_x: float,
        pointer_y: float,
        canvas_rect: Optional[CanvasRect],
    ) -> bool:
        """拖拽中移动指针."""
        moved = self._engine.pointer_move(pointer_x, pointer_y, canvas_rect)
        if moved:
            self._notify()
        return moved

    def pointer_up(self) -> None:
        """释放指针."""
        was_dragging = self._engine.is_dragging
        self._engine.pointer_up()
        if was_dragging:
            self._notify()

    def pointer_leave(self) -> None:
        """指针离开画布（视为释放）."""
        was_dragging = self._engine.is_dragging
        self._engine.pointer_leave()
        if was_dragging:
            self._notify()

    # ========================
    # 文档级操作
    # ========================

    def save(self) -> bool:
        """保存模板.

        Returns:
            是否已保存；未设置背景图时拒绝保存

        Raises:
            StorageError: 写入存储失败
        """
        if not self.can_save:
            logger.warning("未设置背景图，拒绝保存模板")
            return False
        try:
            self._storage.save(self._document)
        except StorageError as e:
            logger.error(f"保存模板失败: {e}")
            raise
        self._notify()
        return True

    def load(self) -> bool:
        """从存储加载模板，替换当前文档并清除选择.

        Returns:
            是否找到并加载了模板

        Raises:
            StorageError: 读取失败或数据格式错误
        """
        document = self._storage.load()
        if document is None:
            logger.info("存储中没有已保存的模板")
            return False
        self._document = document
        self._engine.document = document
        self._notify()
        return True

    def reset(self, confirm: ConfirmCallback) -> bool:
        """确认后清空整个模板.

        Args:
            confirm: 确认回调，返回 False 时不做任何修改

        Returns:
            是否执行了重置
        """
        if not confirm():
            logger.debug("用户取消重置")
            return False
        self._document.reset()
        self._engine.clear()
        logger.info("模板已重置")
        self._notify()
        return True
