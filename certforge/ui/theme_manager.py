"""主题管理器.

支持浅色和暗色主题：启动时优先使用已保存的偏好，否则跟随系统。
切换后的主题会写入键值存储。
"""

from __future__ import annotations

import subprocess
from typing import Optional

from PyQt6.QtCore import QObject, Qt, pyqtSignal
from PyQt6.QtGui import QGuiApplication
from PyQt6.QtWidgets import QApplication

from certforge.core.config_manager import ConfigManager
from certforge.models.app_settings import EnvironmentConfig, ThemeMode, resolve_theme
from certforge.utils.exceptions import StorageError
from certforge.utils.logger import setup_logger

logger = setup_logger(__name__)


LIGHT_STYLESHEET = """
QMainWindow, QWidget#editorRoot { background-color: #f5f6f8; color: #212529; }
QToolBar, QWidget#editorToolbar { background-color: #ffffff; border-bottom: 1px solid #dee2e6; }
QPushButton { background-color: #ffffff; border: 1px solid #ced4da; border-radius: 4px; padding: 4px 10px; color: #212529; }
QPushButton:hover { background-color: #e9ecef; }
QPushButton:checked { background-color: #0d6efd; color: #ffffff; border-color: #0d6efd; }
QPushButton:disabled { color: #adb5bd; }
QPushButton#primaryButton { background-color: #0d6efd; color: #ffffff; border-color: #0d6efd; }
QPushButton#dangerButton { background-color: #dc3545; color: #ffffff; border-color: #dc3545; }
QComboBox, QSpinBox, QLineEdit, QPlainTextEdit { background-color: #ffffff; border: 1px solid #ced4da; border-radius: 4px; color: #212529; }
QLabel#sectionTitle { font-weight: bold; color: #495057; }
"""

DARK_STYLESHEET = """
QMainWindow, QWidget#editorRoot { background-color: #1e1f22; color: #e9ecef; }
QToolBar, QWidget#editorToolbar { background-color: #2b2d31; border-bottom: 1px solid #3a3d43; }
QPushButton { background-color: #2b2d31; border: 1px solid #4a4e55; border-radius: 4px; padding: 4px 10px; color: #e9ecef; }
QPushButton:hover { background-color: #383a40; }
QPushButton:checked { background-color: #3d8bfd; color: #ffffff; border-color: #3d8bfd; }
QPushButton:disabled { color: #6c757d; }
QPushButton#primaryButton { background-color: #3d8bfd; color: #ffffff; border-color: #3d8bfd; }
QPushButton#dangerButton { background-color: #e35d6a; color: #ffffff; border-color: #e35d6a; }
QComboBox, QSpinBox, QLineEdit, QPlainTextEdit { background-color: #2b2d31; border: 1px solid #4a4e55; border-radius: 4px; color: #e9ecef; }
QLabel#sectionTitle { font-weight: bold; color: #adb5bd; }
"""


def detect_system_prefers_dark() -> bool:
    """检测系统是否为暗色模式.

    优先使用 Qt 提供的系统配色，无法判断时在 Linux 上读取 GTK 主题名。

    Returns:
        系统是否为暗色模式
    """
    app = QGuiApplication.instance()
    if app is not None:
        scheme = QGuiApplication.styleHints().colorScheme()
        if scheme == Qt.ColorScheme.Dark:
            return True
        if scheme == Qt.ColorScheme.Light:
            return False

    try:
        result = subprocess.run(
            ["gsettings", "get", "org.gnome.desktop.interface", "gtk-theme"],
            capture_output=True,
            text=True,
            timeout=1,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug(f"检测系统主题失败: {e}")
        return False
    return result.returncode == 0 and "dark" in result.stdout.strip().lower()


class ThemeManager(QObject):
    """主题管理器.

    Signals:
        theme_changed: 主题改变信号，参数为新的主题
    """

    theme_changed = pyqtSignal(ThemeMode)

    def __init__(self, config: ConfigManager, parent: Optional[QObject] = None) -> None:
        """初始化主题管理器.

        Args:
            config: 配置管理器（用于持久化主题偏好）
            parent: 父对象
        """
        super().__init__(parent)
        self._config = config
        self._current_theme = ThemeMode.LIGHT

    @property
    def current_theme(self) -> ThemeMode:
        """当前主题."""
        return self._current_theme

    @property
    def is_dark(self) -> bool:
        return self._current_theme == ThemeMode.DARK

    @staticmethod
    def stylesheet_for(theme: ThemeMode) -> str:
        """主题对应的样式表."""
        return DARK_STYLESHEET if theme == ThemeMode.DARK else LIGHT_STYLESHEET

    def apply_initial_theme(self, env: EnvironmentConfig, app: Optional[QApplication] = None) -> ThemeMode:
        """按运行环境应用启动主题（不写入存储）.

        Args:
            env: 运行环境
            app: QApplication 实例

        Returns:
            实际应用的主题
        """
        theme = resolve_theme(env)
        logger.info(f"启动主题: {theme.value}")
        self.apply_theme(theme, app)
        return theme

    def apply_theme(self, theme: ThemeMode, app: Optional[QApplication] = None) -> None:
        """应用主题.

        Args:
            theme: 要应用的主题
            app: QApplication 实例，如果为 None 则使用 QApplication.instance()
        """
        if app is None:
            app = QApplication.instance()

        if app is None:
            logger.error("无法获取 QApplication 实例")
            return

        app.setStyleSheet(self.stylesheet_for(theme))

        old_theme = self._current_theme
        self._current_theme = theme
        if old_theme != theme:
            self.theme_changed.emit(theme)
            logger.info(f"主题已切换: {old_theme.value} -> {theme.value}")

    def toggle_theme(self) -> ThemeMode:
        """切换主题（浅色 <-> 暗色）并保存偏好.

        Returns:
            切换后的主题
        """
        new_theme = ThemeMode.LIGHT if self.is_dark else ThemeMode.DARK
        self.apply_theme(new_theme)
        try:
            self._config.save_theme_preference(new_theme)
        except StorageError as e:
            logger.warning(f"保存主题偏好失败: {e}")
        return new_theme
