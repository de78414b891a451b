"""服务层模块."""

from certforge.services.asset_loader import (
    AssetSource,
    describe_source,
    load_image_asset,
    read_image_asset,
)
from certforge.services.database_service import DatabaseService
from certforge.services.template_storage import (
    DatabaseStore,
    KeyValueStore,
    MemoryStore,
    TemplateStorage,
)

__all__ = [
    # 图片资源
    "AssetSource",
    "describe_source",
    "load_image_asset",
    "read_image_asset",
    # 数据库
    "DatabaseService",
    # 模板存储
    "DatabaseStore",
    "KeyValueStore",
    "MemoryStore",
    "TemplateStorage",
]
