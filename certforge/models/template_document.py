"""证书模板文档模型.

把背景图、图片元素、文字元素和模板名称聚合为一个可序列化的整体。

Features:
    - 元素的添加、浅合并更新、删除（ID 不存在时为空操作）
    - 单一背景槽位（覆盖而非追加）
    - 序列化为 JSON 兼容结构 / 从结构反序列化
    - 整体重置

每次修改都会生成新的集合列表，修改完成后外部持有的旧列表不会被改变。
绘制顺序即插入顺序：后添加的元素在上层，文字元素整体位于图片之上。
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Callable, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

from certforge.models.elements import (
    CanvasElement,
    ImageElement,
    TextElement,
    generate_element_id,
    new_image_element,
    new_text_element,
    update_image_element,
    update_text_element,
)
from certforge.utils.logger import setup_logger

logger = setup_logger(__name__)

DEFAULT_TEMPLATE_NAME = "Untitled Template"

E = TypeVar("E", bound=CanvasElement)


def utc_timestamp(moment: Optional[datetime] = None) -> str:
    """返回 ISO-8601 UTC 时间戳（毫秒精度，Z 结尾）."""
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class TemplateDocument(BaseModel):
    """证书模板文档.

    Attributes:
        name: 模板名称
        background_image: 背景图资源引用，最多一个
        images: 图片元素列表（插入顺序即绘制顺序）
        text_elements: 文字元素列表（绘制在图片之上）
        created_at: 保存时写入的时间戳

    Example:
        >>> doc = TemplateDocument()
        >>> text_id = doc.add_text()
        >>> doc.update_text(text_id, fontSize=40)
        True
        >>> doc.get_text(text_id).font_size
        40
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(default=DEFAULT_TEMPLATE_NAME, description="模板名称")
    background_image: Optional[str] = Field(
        default=None,
        alias="backgroundImage",
        description="背景图资源引用",
    )
    images: list[ImageElement] = Field(default_factory=list, description="图片元素")
    text_elements: list[TextElement] = Field(
        default_factory=list,
        alias="textElements",
        description="文字元素",
    )
    created_at: Optional[str] = Field(
        default=None,
        alias="createdAt",
        description="保存时间",
    )

    @model_validator(mode="after")
    def check_unique_ids(self) -> "TemplateDocument":
        """同一集合内元素ID必须唯一."""
        for label, elements in (("images", self.images), ("textElements", self.text_elements)):
            ids = [e.id for e in elements]
            if len(ids) != len(set(ids)):
                raise ValueError(f"{label} 中存在重复的元素ID")
        return self

    # ========================
    # 查询
    # ========================

    @property
    def can_save(self) -> bool:
        """是否允许保存（必须已设置背景图）."""
        return self.background_image is not None

    @property
    def is_empty(self) -> bool:
        """是否为空文档."""
        return self.background_image is None and not self.images and not self.text_elements

    def get_text(self, element_id: str) -> Optional[TextElement]:
        """根据ID获取文字元素."""
        return _find(self.text_elements, element_id)

    def get_image(self, element_id: str) -> Optional[ImageElement]:
        """根据ID获取图片元素."""
        return _find(self.images, element_id)

    # ========================
    # 文字元素
    # ========================

    def add_text(self) -> str:
        """追加一个默认文字元素.

        Returns:
            新元素ID
        """
        element = new_text_element(_unique_id(self.text_elements))
        self.text_elements = [*self.text_elements, element]
        logger.debug(f"添加文字元素: {element.id}")
        return element.id

    def update_text(self, element_id: str, **changes: Any) -> bool:
        """浅合并更新文字元素.

        Args:
            element_id: 元素ID
            **changes: 要覆盖的字段

        Returns:
            是否找到并更新了元素
        """
        updated = _replace(
            self.text_elements,
            element_id,
            lambda e: update_text_element(e, **changes),
        )
        if updated is None:
            logger.debug(f"更新文字元素跳过，ID不存在: {element_id}")
            return False
        self.text_elements = updated
        return True

    def delete_text(self, element_id: str) -> bool:
        """删除文字元素.

        Returns:
            是否删除了元素
        """
        remaining = [e for e in self.text_elements if e.id != element_id]
        if len(remaining) == len(self.text_elements):
            return False
        self.text_elements = remaining
        logger.debug(f"删除文字元素: {element_id}")
        return True

    # ========================
    # 图片元素
    # ========================

    def add_image(self, asset: str) -> str:
        """追加一个默认图片元素.

        Args:
            asset: 图片资源引用

        Returns:
            新元素ID
        """
        element = new_image_element(asset, _unique_id(self.images))
        self.images = [*self.images, element]
        logger.debug(f"添加图片元素: {element.id}")
        return element.id

    def update_image(self, element_id: str, **changes: Any) -> bool:
        """浅合并更新图片元素."""
        updated = _replace(
            self.images,
            element_id,
            lambda e: update_image_element(e, **changes),
        )
        if updated is None:
            logger.debug(f"更新图片元素跳过，ID不存在: {element_id}")
            return False
        self.images = updated
        return True

    def delete_image(self, element_id: str) -> bool:
        """删除图片元素."""
        remaining = [e for e in self.images if e.id != element_id]
        if len(remaining) == len(self.images):
            return False
        self.images = remaining
        logger.debug(f"删除图片元素: {element_id}")
        return True

    # ========================
    # 文档级操作
    # ========================

    def set_background(self, asset: Optional[str]) -> None:
        """设置背景图（覆盖已有背景）."""
        self.background_image = asset

    def set_name(self, name: str) -> None:
        """设置模板名称."""
        self.name = name

    def reset(self) -> None:
        """清空背景、所有元素并恢复默认名称."""
        self.name = DEFAULT_TEMPLATE_NAME
        self.background_image = None
        self.images = []
        self.text_elements = []
        self.created_at = None

    def serialize(self, moment: Optional[datetime] = None) -> dict[str, Any]:
        """生成用于存储的结构快照.

        Args:
            moment: 保存时间，默认为当前时间

        Returns:
            JSON 兼容字典，createdAt 为保存时间；文档本身的 created_at 不变
        """
        return {
            "name": self.name,
            "backgroundImage": self.background_image,
            "images": [e.to_dict() for e in self.images],
            "textElements": [e.to_dict() for e in self.text_elements],
            "createdAt": utc_timestamp(moment),
        }

    def to_json(self, indent: Optional[int] = None) -> str:
        """序列化为 JSON 字符串."""
        return json.dumps(self.serialize(), ensure_ascii=False, indent=indent)

    @classmethod
    def from_serialized(cls, data: dict[str, Any]) -> "TemplateDocument":
        """从序列化结构恢复文档.

        Raises:
            pydantic.ValidationError: 数据结构不合法
        """
        return cls.model_validate(data)


# ===================
# 辅助函数
# ===================


def _find(elements: list[E], element_id: str) -> Optional[E]:
    for element in elements:
        if element.id == element_id:
            return element
    return None


def _replace(
    elements: list[E],
    element_id: str,
    transform: Callable[[E], E],
) -> Optional[list[E]]:
    """返回替换了目标元素的新列表，目标不存在时返回 None."""
    for index, element in enumerate(elements):
        if element.id == element_id:
            return [*elements[:index], transform(element), *elements[index + 1:]]
    return None


def _unique_id(elements: list[E]) -> str:
    existing = {e.id for e in elements}
    element_id = generate_element_id()
    while element_id in existing:
        element_id = generate_element_id()
    return element_id
