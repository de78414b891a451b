"""配置管理器模块."""

from __future__ import annotations

from typing import Optional

from pydantic import ValidationError

from certforge.models.app_settings import EnvironmentConfig, Settings, ThemeMode
from certforge.services.database_service import DatabaseService
from certforge.services.template_storage import DatabaseStore, KeyValueStore
from certforge.utils.constants import THEME_STORAGE_KEY
from certforge.utils.exceptions import ConfigError, StorageError
from certforge.utils.logger import set_log_level, setup_logger

logger = setup_logger(__name__)


class ConfigManager:
    """配置管理器.

    负责应用设置的加载、键值存储的创建以及主题偏好的持久化。

    Attributes:
        settings: 应用设置
        store: 键值存储
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        store: Optional[KeyValueStore] = None,
    ) -> None:
        """初始化配置管理器.

        Args:
            settings: 应用设置，默认从环境变量加载
            store: 键值存储，默认使用设置中的 SQLite 数据库
        """
        self._settings = settings
        self._store = store
        self._db_service: Optional[DatabaseService] = None
        logger.debug("配置管理器初始化完成")

    @property
    def settings(self) -> Settings:
        """获取应用设置."""
        if self._settings is None:
            self._settings = self._load_settings()
        return self._settings

    @property
    def store(self) -> KeyValueStore:
        """获取键值存储."""
        if self._store is None:
            self._db_service = DatabaseService(self.settings.db_path)
            self._store = DatabaseStore(self._db_service)
        return self._store

    def _load_settings(self) -> Settings:
        """加载应用设置.

        Raises:
            ConfigError: 环境变量或 .env 中的配置非法
        """
        try:
            settings = Settings()
        except ValidationError as e:
            logger.error(f"加载应用设置失败: {e}")
            raise ConfigError(f"加载应用设置失败: {e}") from e
        set_log_level(settings.log_level)
        logger.debug(f"应用设置加载完成: log_level={settings.log_level}")
        return settings

    # ========================
    # 主题偏好
    # ========================

    def load_theme_preference(self) -> Optional[ThemeMode]:
        """读取已保存的主题偏好，读取失败时视为未保存."""
        try:
            value = self.store.load(THEME_STORAGE_KEY)
        except StorageError as e:
            logger.warning(f"读取主题偏好失败: {e}")
            return None
        try:
            return ThemeMode(value) if value is not None else None
        except ValueError:
            logger.warning(f"忽略无效的主题偏好: {value!r}")
            return None

    def save_theme_preference(self, theme: ThemeMode) -> None:
        """保存主题偏好."""
        self.store.save(THEME_STORAGE_KEY, ThemeMode(theme).value)
        logger.debug(f"主题偏好已保存: {theme.value}")

    def build_environment(self, viewport_width: int, system_prefers_dark: bool) -> EnvironmentConfig:
        """组合启动时的运行环境信息.

        Args:
            viewport_width: 可用屏幕宽度
            system_prefers_dark: 系统是否为暗色模式

        Returns:
            EnvironmentConfig 实例
        """
        return EnvironmentConfig(
            viewport_width=viewport_width,
            persisted_theme_preference=self.load_theme_preference(),
            system_prefers_dark=system_prefers_dark,
        )

    def reload(self) -> None:
        """重新加载设置."""
        self._settings = None
        logger.info("配置已重新加载")

    def close(self) -> None:
        """关闭存储连接."""
        if self._db_service is not None:
            self._db_service.close()
            self._db_service = None


_config_manager: Optional[ConfigManager] = None


def get_config() -> ConfigManager:
    """获取全局配置管理器实例.

    Returns:
        ConfigManager 实例
    """
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager
