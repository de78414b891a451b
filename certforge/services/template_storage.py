"""模板存储服务.

提供键值存储抽象以及基于它的模板文档存取。

Features:
    - KeyValueStore 协议（save / load / delete / keys）
    - DatabaseStore：SQLite 键值表实现，每次保存在单个事务中完成
    - MemoryStore：进程内实现（无持久化需求时使用）
    - TemplateStorage：按固定键保存、加载模板文档
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Optional, Protocol, runtime_checkable

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from certforge.models.database import StorageRecord
from certforge.models.template_document import TemplateDocument
from certforge.services.database_service import DatabaseService
from certforge.utils.constants import TEMPLATE_STORAGE_KEY
from certforge.utils.exceptions import DocumentFormatError, StorageError
from certforge.utils.logger import setup_logger

logger = setup_logger(__name__)


@runtime_checkable
class KeyValueStore(Protocol):
    """键值存储协议."""

    def save(self, key: str, value: Any) -> None:
        """保存 JSON 兼容的值."""
        ...

    def load(self, key: str) -> Optional[Any]:
        """读取值，不存在时返回 None."""
        ...

    def delete(self, key: str) -> bool:
        """删除键."""
        ...

    def keys(self) -> list[str]:
        """列出所有键."""
        ...


class MemoryStore:
    """进程内键值存储.

    值以 JSON 文本保存，读取时返回新对象，调用方无法修改已保存的数据。
    """

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def save(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value, ensure_ascii=False)

    def load(self, key: str) -> Optional[Any]:
        raw = self._data.get(key)
        return None if raw is None else json.loads(raw)

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def keys(self) -> list[str]:
        return sorted(self._data)


class DatabaseStore:
    """SQLite 键值存储.

    Example:
        >>> store = DatabaseStore(DatabaseService(tmp_path / "storage.db"))
        >>> store.save("theme", "dark")
        >>> store.load("theme")
        'dark'
    """

    def __init__(self, db_service: DatabaseService) -> None:
        """初始化存储.

        Args:
            db_service: 数据库服务
        """
        self._db = db_service
        self._db.init_db()

    def save(self, key: str, value: Any) -> None:
        """保存值（整体写入，事务提交前对读取方不可见）.

        Raises:
            StorageError: 序列化或写入失败
        """
        try:
            payload = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise StorageError(f"无法序列化键 '{key}' 的值: {e}") from e

        try:
            with self._db.get_session() as session, session.begin():
                session.merge(
                    StorageRecord(key=key, value=payload, updated_at=datetime.utcnow())
                )
        except SQLAlchemyError as e:
            logger.error(f"写入存储失败: {key}, 错误: {e}")
            raise StorageError(f"写入存储失败: {key}") from e
        logger.debug(f"已写入存储: {key} ({len(payload)} bytes)")

    def load(self, key: str) -> Optional[Any]:
        """读取值.

        Raises:
            StorageError: 读取失败
            DocumentFormatError: 存储内容不是合法 JSON
        """
        try:
            with self._db.get_session() as session:
                record = session.get(StorageRecord, key)
                raw = record.value if record is not None else None
        except SQLAlchemyError as e:
            logger.error(f"读取存储失败: {key}, 错误: {e}")
            raise StorageError(f"读取存储失败: {key}") from e

        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise DocumentFormatError(key, str(e)) from e

    def delete(self, key: str) -> bool:
        """删除键."""
        try:
            with self._db.get_session() as session, session.begin():
                record = session.get(StorageRecord, key)
                if record is None:
                    return False
                session.delete(record)
        except SQLAlchemyError as e:
            raise StorageError(f"删除存储项失败: {key}") from e
        return True

    def keys(self) -> list[str]:
        """列出所有键."""
        try:
            with self._db.get_session() as session:
                return list(session.scalars(select(StorageRecord.key).order_by(StorageRecord.key)))
        except SQLAlchemyError as e:
            raise StorageError("读取存储键列表失败") from e


class TemplateStorage:
    """模板文档存储.

    Attributes:
        key: 模板文档使用的存储键
    """

    def __init__(self, store: KeyValueStore, key: str = TEMPLATE_STORAGE_KEY) -> None:
        self._store = store
        self.key = key

    @property
    def store(self) -> KeyValueStore:
        return self._store

    def save(self, document: TemplateDocument) -> dict[str, Any]:
        """序列化并保存文档.

        Returns:
            已保存的序列化结构
        """
        data = document.serialize()
        self._store.save(self.key, data)
        document.created_at = data["createdAt"]
        logger.info(f"模板已保存: {document.name}")
        return data

    def load(self) -> Optional[TemplateDocument]:
        """加载文档，不存在时返回 None.

        Raises:
            DocumentFormatError: 已保存的数据不是合法的模板文档
        """
        data = self._store.load(self.key)
        if data is None:
            return None
        if not isinstance(data, dict):
            raise DocumentFormatError(self.key, "根节点必须是对象")
        try:
            document = TemplateDocument.from_serialized(data)
        except ValidationError as e:
            raise DocumentFormatError(self.key, str(e)) from e
        logger.info(f"模板已加载: {document.name}")
        return document

    def exists(self) -> bool:
        """是否已有保存的模板."""
        return self._store.load(self.key) is not None
