"""集成测试配置和共享 fixtures."""

from pathlib import Path
from typing import Generator

import pytest

from certforge.core.config_manager import ConfigManager
from certforge.models.app_settings import Settings


@pytest.fixture
def settings(temp_dir: Path) -> Settings:
    """使用临时数据库的应用设置."""
    return Settings(_env_file=None, database_path=temp_dir / "data" / "storage.db")


@pytest.fixture
def config(settings: Settings) -> Generator[ConfigManager, None, None]:
    """基于临时 SQLite 数据库的配置管理器."""
    manager = ConfigManager(settings=settings)
    yield manager
    manager.close()
