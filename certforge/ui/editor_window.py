"""编辑器主窗口模块.

布局结构:
    ┌─────────────────────────────────────────────────────────────┐
    │                 模板名称                                     │
    ├─────────────────────────────────────────────────────────────┤
    │                         工具栏                               │
    ├───────────────────────────────────────────┬─────────────────┤
    │                                           │                 │
    │                 画布                       │   文字内容面板   │
    │                                           │                 │
    ├───────────────────────────────────────────┴─────────────────┤
    │                         状态栏                               │
    └─────────────────────────────────────────────────────────────┘

紧凑布局下文字内容面板位于画布下方，工具栏控件组纵向排列。
"""

from __future__ import annotations

from typing import Optional

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QCloseEvent, QKeySequence, QShortcut
from PyQt6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QMessageBox,
    QScrollArea,
    QSplitter,
    QStatusBar,
    QVBoxLayout,
    QWidget,
)

from certforge.core.asset_worker import TARGET_BACKGROUND, TARGET_IMAGE, AssetLoadController
from certforge.core.editor_controller import EditorController
from certforge.models.app_settings import EnvironmentConfig, is_compact_layout
from certforge.ui.theme_manager import ThemeManager
from certforge.ui.widgets.template_editor import EditorCanvas, EditorToolbar, TextContentPanel
from certforge.utils.constants import (
    APP_NAME,
    APP_VERSION,
    DEFAULT_CANVAS_HEIGHT,
    DEFAULT_CANVAS_WIDTH,
    WINDOW_MIN_HEIGHT,
    WINDOW_MIN_WIDTH,
)
from certforge.utils.error_handler import get_user_friendly_message
from certforge.utils.exceptions import StorageError
from certforge.utils.logger import setup_logger

logger = setup_logger(__name__)


class EditorWindow(QMainWindow):
    """证书模板编辑器主窗口.

    Example:
        >>> window = EditorWindow(controller, theme_manager, env)
        >>> window.show()
    """

    def __init__(
        self,
        controller: EditorController,
        theme_manager: ThemeManager,
        env: Optional[EnvironmentConfig] = None,
        asset_loader: Optional[AssetLoadController] = None,
        canvas_size: tuple[int, int] = (DEFAULT_CANVAS_WIDTH, DEFAULT_CANVAS_HEIGHT),
    ) -> None:
        """初始化主窗口.

        Args:
            controller: 编辑器控制器
            theme_manager: 主题管理器
            env: 运行环境（决定是否使用紧凑布局）
            asset_loader: 图片加载控制器，默认新建
            canvas_size: 画布尺寸
        """
        super().__init__()

        self._controller = controller
        self._theme_manager = theme_manager
        self._env = env or EnvironmentConfig()
        self._asset_loader = asset_loader or AssetLoadController(controller.load_assets, self)
        self._canvas_size = canvas_size

        self._setup_window()
        self._setup_central_widget()
        self._setup_statusbar()
        self._connect_signals()

        self.apply_layout(is_compact_layout(self._env))
        self._on_state_changed(controller)

        logger.debug("编辑器窗口初始化完成")

    # ========================
    # 属性
    # ========================

    @property
    def controller(self) -> EditorController:
        return self._controller

    @property
    def toolbar(self) -> EditorToolbar:
        return self._toolbar

    @property
    def canvas(self) -> EditorCanvas:
        return self._canvas

    @property
    def text_panel(self) -> TextContentPanel:
        return self._text_panel

    @property
    def name_edit(self) -> QLineEdit:
        return self._name_edit

    @property
    def asset_loader(self) -> AssetLoadController:
        return self._asset_loader

    # ========================
    # 初始化方法
    # ========================

    def _setup_window(self) -> None:
        """设置窗口属性."""
        self.setWindowTitle(f"{APP_NAME} v{APP_VERSION}")
        self.setMinimumSize(640, 480)

        # 默认窗口大小：画布加上文字面板和工具栏
        width, height = self._canvas_size
        self.resize(max(WINDOW_MIN_WIDTH, width + 320), max(WINDOW_MIN_HEIGHT, height + 160))

    def _setup_central_widget(self) -> None:
        """设置中央区域."""
        root = QWidget()
        root.setObjectName("editorRoot")
        layout = QVBoxLayout(root)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        header = QWidget()
        header_layout = QHBoxLayout(header)
        header_layout.setContentsMargins(8, 6, 8, 0)
        header_layout.addWidget(QLabel("Template name"))
        self._name_edit = QLineEdit(self._controller.document.name)
        self._name_edit.setMaxLength(120)
        header_layout.addWidget(self._name_edit, 1)
        layout.addWidget(header)

        self._toolbar = EditorToolbar()
        layout.addWidget(self._toolbar)

        self._canvas = EditorCanvas(self._controller, self._canvas_size)
        scroll = QScrollArea()
        scroll.setWidget(self._canvas)
        scroll.setAlignment(Qt.AlignmentFlag.AlignCenter)
        scroll.setWidgetResizable(False)

        self._text_panel = TextContentPanel()

        self._splitter = QSplitter(Qt.Orientation.Horizontal)
        self._splitter.addWidget(scroll)
        self._splitter.addWidget(self._text_panel)
        self._splitter.setStretchFactor(0, 1)
        self._splitter.setStretchFactor(1, 0)
        layout.addWidget(self._splitter, 1)

        self.setCentralWidget(root)

        self._delete_shortcut = QShortcut(QKeySequence.StandardKey.Delete, self._canvas)
        self._delete_shortcut.setContext(Qt.ShortcutContext.WidgetWithChildrenShortcut)

    def _setup_statusbar(self) -> None:
        """设置状态栏."""
        self._statusbar = QStatusBar()
        self.setStatusBar(self._statusbar)
        self._status_label = QLabel("Ready")
        self._statusbar.addWidget(self._status_label, 1)

    def _connect_signals(self) -> None:
        """连接信号."""
        controller = self._controller
        toolbar = self._toolbar

        controller.subscribe(self._on_state_changed)

        toolbar.add_text_requested.connect(controller.add_text)
        toolbar.background_selected.connect(self.upload_background)
        toolbar.images_selected.connect(self.upload_images)
        toolbar.save_requested.connect(self.save_template)
        toolbar.load_requested.connect(self.load_template)
        toolbar.reset_requested.connect(self.reset_template)
        toolbar.theme_toggle_requested.connect(self._theme_manager.toggle_theme)
        toolbar.font_family_changed.connect(controller.set_font_family)
        toolbar.font_size_changed.connect(controller.set_font_size)
        toolbar.color_changed.connect(controller.set_text_color)
        toolbar.bold_toggled.connect(controller.toggle_bold)
        toolbar.italic_toggled.connect(controller.toggle_italic)
        toolbar.align_changed.connect(controller.set_text_align)
        toolbar.image_size_changed.connect(controller.set_image_size)
        toolbar.delete_requested.connect(controller.delete_selected)

        self._text_panel.content_changed.connect(controller.set_selected_content)
        self._canvas.text_edit_requested.connect(self._text_panel.focus_editor)
        self._name_edit.textEdited.connect(controller.set_name)
        self._delete_shortcut.activated.connect(controller.delete_selected)

        self._asset_loader.asset_loaded.connect(self._on_asset_loaded)
        self._asset_loader.asset_failed.connect(self._on_asset_failed)
        self._asset_loader.load_finished.connect(self._on_load_finished)

    # ========================
    # 布局
    # ========================

    def apply_layout(self, compact: bool) -> None:
        """切换紧凑布局."""
        self._toolbar.set_compact(compact)
        orientation = Qt.Orientation.Vertical if compact else Qt.Orientation.Horizontal
        self._splitter.setOrientation(orientation)
        logger.debug(f"布局: {'紧凑' if compact else '标准'}")

    # ========================
    # 状态同步
    # ========================

    def _on_state_changed(self, controller: EditorController) -> None:
        """控制器状态变化后刷新界面."""
        state = controller.toolbar_state()
        self._toolbar.apply_state(state)
        self._text_panel.apply_state(state)
        if self._name_edit.text() != controller.document.name:
            self._name_edit.setText(controller.document.name)

    def show_status_message(self, message: str, timeout: int = 3000) -> None:
        """在状态栏显示临时消息.

        Args:
            message: 消息内容
            timeout: 显示时长(毫秒)，0表示永久
        """
        self._statusbar.showMessage(message, timeout)

    # ========================
    # 图片上传
    # ========================

    def upload_background(self, file_path: str) -> None:
        """在后台线程读取背景图."""
        self._asset_loader.load(TARGET_BACKGROUND, [file_path])

    def upload_images(self, file_paths: list) -> None:
        """在后台线程读取多张图片."""
        self._asset_loader.load(TARGET_IMAGE, list(file_paths))

    def _on_asset_loaded(self, target: str, data_uri: str) -> None:
        if target == TARGET_BACKGROUND:
            self._controller.set_background(data_uri)
        else:
            self._controller.add_image(data_uri)

    def _on_asset_failed(self, source: str, message: str) -> None:
        self.show_status_message(f"Skipped {source}: {message}", 5000)

    def _on_load_finished(self, target: str, loaded: int, failed: int) -> None:
        if target == TARGET_IMAGE:
            self.show_status_message(f"Added {loaded} image(s), skipped {failed}")

    # ========================
    # 文档操作
    # ========================

    def save_template(self) -> bool:
        """保存模板."""
        try:
            saved = self._controller.save()
        except StorageError as e:
            QMessageBox.critical(self, "Save failed", get_user_friendly_message(e))
            return False

        if not saved:
            QMessageBox.warning(self, "Cannot save", "Please upload a background image first.")
            return False

        self.show_status_message("Template saved successfully!")
        return True

    def load_template(self) -> bool:
        """加载已保存的模板."""
        try:
            loaded = self._controller.load()
        except StorageError as e:
            QMessageBox.critical(self, "Load failed", get_user_friendly_message(e))
            return False

        if not loaded:
            self.show_status_message("No saved template found")
            return False

        self.show_status_message("Template loaded")
        return True

    def confirm_reset(self) -> bool:
        """询问是否重置."""
        reply = QMessageBox.question(
            self,
            "Reset template",
            "Are you sure you want to reset? All changes will be lost.",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
            QMessageBox.StandardButton.No,
        )
        return reply == QMessageBox.StandardButton.Yes

    def reset_template(self) -> bool:
        """确认后重置模板."""
        if not self._controller.reset(self.confirm_reset):
            return False
        self.show_status_message("Template reset")
        return True

    # ========================
    # 事件处理
    # ========================

    def closeEvent(self, event: QCloseEvent) -> None:
        """窗口关闭事件."""
        self._asset_loader.stop()
        logger.info("编辑器窗口关闭")
        event.accept()
