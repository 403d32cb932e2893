"""内容记录读模型 Repository.

职责:
- 仅负责 Query 组装与数据库读取
- 不做序列化、不 commit
"""

from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError

from formsmith import db
from formsmith.errors import ChoiceSourceUnavailableError
from formsmith.models.content_record import ContentRecord

PUBLISHED_STATUS = "published"


class ContentRepository:
    """内容记录查询 Repository."""

    def __init__(self, *, published_only: bool = True) -> None:
        self.published_only = published_only

    def fetch_all(self, category: str) -> list[ContentRecord]:
        """返回某内容类型下的全部记录,按 ID 升序.

        Raises:
            ChoiceSourceUnavailableError: 数据库查询失败.

        """
        query = db.session.query(ContentRecord).filter(ContentRecord.contenttype == category)
        if self.published_only:
            query = query.filter(ContentRecord.status == PUBLISHED_STATUS)
        try:
            return query.order_by(ContentRecord.id.asc()).all()
        except SQLAlchemyError as exc:
            db.session.rollback()
            msg = f"查询内容类型 '{category}' 失败"
            raise ChoiceSourceUnavailableError(msg, extra={"contenttype": category}) from exc
