"""应用设置与运行环境模型."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from certforge.utils.constants import (
    COMPACT_LAYOUT_BREAKPOINT,
    DATABASE_PATH,
    DEFAULT_CANVAS_HEIGHT,
    DEFAULT_CANVAS_WIDTH,
    MAX_IMAGE_FILE_SIZE,
    TEMPLATE_STORAGE_KEY,
)


class ThemeMode(str, Enum):
    """界面主题."""

    LIGHT = "light"
    DARK = "dark"


class Settings(BaseSettings):
    """应用设置.

    支持从环境变量（CERTFORGE_ 前缀）和 .env 文件加载配置。

    Attributes:
        log_level: 日志级别
        database_path: 存储数据库文件路径
        storage_key: 模板文档的存储键
        canvas_width: 画布宽度
        canvas_height: 画布高度
        max_asset_size: 单个图片文件的最大字节数
        debug: 调试模式
    """

    model_config = SettingsConfigDict(
        env_prefix="CERTFORGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = Field(default="INFO", description="日志级别")

    database_path: Optional[Path] = Field(default=None, description="存储数据库路径")

    storage_key: str = Field(
        default=TEMPLATE_STORAGE_KEY,
        min_length=1,
        max_length=100,
        description="模板存储键",
    )

    canvas_width: int = Field(
        default=DEFAULT_CANVAS_WIDTH,
        ge=100,
        le=4096,
        description="画布宽度",
    )

    canvas_height: int = Field(
        default=DEFAULT_CANVAS_HEIGHT,
        ge=100,
        le=4096,
        description="画布高度",
    )

    max_asset_size: int = Field(
        default=MAX_IMAGE_FILE_SIZE,
        ge=1024,
        description="图片文件最大字节数",
    )

    debug: bool = Field(default=False, description="调试模式")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """验证日志级别."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"无效的日志级别: {v}，有效值: {valid_levels}")
        return upper_v

    @property
    def db_path(self) -> Path:
        """获取数据库路径."""
        return self.database_path or DATABASE_PATH

    @property
    def canvas_size(self) -> tuple[int, int]:
        """获取画布尺寸."""
        return (self.canvas_width, self.canvas_height)


class EnvironmentConfig(BaseModel):
    """启动时读取一次的运行环境信息.

    Attributes:
        viewport_width: 可用屏幕宽度（像素）
        persisted_theme_preference: 用户保存过的主题，未保存时为 None
        system_prefers_dark: 系统是否为暗色模式
    """

    model_config = ConfigDict(frozen=True)

    viewport_width: int = Field(default=1280, ge=0)
    persisted_theme_preference: Optional[ThemeMode] = None
    system_prefers_dark: bool = False

    @field_validator("persisted_theme_preference", mode="before")
    @classmethod
    def ignore_unknown_theme(cls, v: object) -> object:
        """无法识别的已保存主题视为未保存."""
        if v is None or isinstance(v, ThemeMode):
            return v
        try:
            return ThemeMode(str(v).lower())
        except ValueError:
            return None


def resolve_theme(env: EnvironmentConfig) -> ThemeMode:
    """确定启动主题：已保存的偏好优先，否则跟随系统.

    Args:
        env: 运行环境

    Returns:
        主题
    """
    if env.persisted_theme_preference is not None:
        return env.persisted_theme_preference
    return ThemeMode.DARK if env.system_prefers_dark else ThemeMode.LIGHT


def is_compact_layout(env: EnvironmentConfig) -> bool:
    """屏幕宽度小于断点时使用紧凑布局."""
    return env.viewport_width < COMPACT_LAYOUT_BREAKPOINT
