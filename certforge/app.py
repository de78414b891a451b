"""应用初始化和管理."""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING, Optional

from certforge.core.config_manager import ConfigManager
from certforge.core.editor_controller import EditorController
from certforge.models.app_settings import EnvironmentConfig
from certforge.services.asset_loader import load_image_asset
from certforge.services.template_storage import TemplateStorage
from certforge.utils.logger import setup_logger

if TYPE_CHECKING:
    from certforge.ui.editor_window import EditorWindow
    from certforge.ui.theme_manager import ThemeManager

logger = setup_logger(__name__)


class Application:
    """应用管理类.

    负责应用的初始化、配置加载和资源管理。

    Attributes:
        config: 配置管理器
        controller: 编辑器控制器
    """

    def __init__(self, config: Optional[ConfigManager] = None) -> None:
        """初始化应用管理器.

        Args:
            config: 配置管理器，默认从环境变量加载设置
        """
        self.config = config or ConfigManager()
        self.controller: Optional[EditorController] = None
        self._main_window: Optional["EditorWindow"] = None
        self._theme_manager: Optional["ThemeManager"] = None
        self._initialized: bool = False

    def initialize(self) -> None:
        """初始化应用.

        执行以下初始化步骤:
        1. 加载配置
        2. 确保存储数据库所在目录存在
        3. 创建模板存储和编辑器控制器
        """
        if self._initialized:
            logger.warning("应用已初始化，跳过重复初始化")
            return

        logger.info("开始初始化应用...")

        settings = self.config.settings

        settings.db_path.parent.mkdir(parents=True, exist_ok=True)
        logger.debug(f"数据目录: {settings.db_path.parent}")

        storage = TemplateStorage(self.config.store, key=settings.storage_key)
        self.controller = EditorController(
            storage,
            asset_loader=partial(load_image_asset, max_size=settings.max_asset_size),
        )

        self._initialized = True
        logger.info("应用初始化完成")

    def build_environment(self) -> EnvironmentConfig:
        """读取启动时的运行环境（屏幕宽度、主题偏好、系统配色）."""
        from PyQt6.QtWidgets import QApplication

        from certforge.ui.theme_manager import detect_system_prefers_dark

        screen = QApplication.primaryScreen()
        viewport_width = screen.availableGeometry().width() if screen else 1280
        return self.config.build_environment(
            viewport_width=viewport_width,
            system_prefers_dark=detect_system_prefers_dark(),
        )

    def show_main_window(self) -> None:
        """显示主窗口."""
        from certforge.core.asset_worker import AssetLoadController
        from certforge.ui.editor_window import EditorWindow
        from certforge.ui.theme_manager import ThemeManager

        if self.controller is None:
            self.initialize()

        if self._main_window is None:
            env = self.build_environment()

            self._theme_manager = ThemeManager(self.config)
            self._theme_manager.apply_initial_theme(env)

            settings = self.config.settings
            self._main_window = EditorWindow(
                self.controller,
                self._theme_manager,
                env=env,
                asset_loader=AssetLoadController(self.controller.load_assets),
                canvas_size=settings.canvas_size,
            )

        self._main_window.show()
        logger.info("主窗口已显示")

    def cleanup(self) -> None:
        """清理应用资源."""
        logger.info("开始清理应用资源...")
        self.config.close()
        logger.info("应用资源清理完成")

    @property
    def is_initialized(self) -> bool:
        """返回应用是否已初始化."""
        return self._initialized

    @property
    def main_window(self) -> Optional["EditorWindow"]:
        return self._main_window
