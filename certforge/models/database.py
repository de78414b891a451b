"""数据库 ORM 模型."""

from datetime import datetime

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class StorageRecord(Base):
    """键值存储表.

    每个键保存一份 JSON 文本（模板文档、主题偏好等）。
    """

    __tablename__ = "key_value_store"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<StorageRecord(key={self.key})>"
