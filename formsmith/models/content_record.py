"""
表单工坊 - 内容记录模型
"""

from datetime import UTC, datetime

from formsmith import db


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ContentRecord(db.Model):
    """内容记录模型。

    作为动态选项的数据来源，``contenttype::pages::title`` 会读取 contenttype 为 pages 的记录。

    Attributes:
        id: 主键，作为选项值。
        contenttype: 内容类型标识（如 pages、articles）。
        slug: 短标识。
        title: 标题。
        status: 发布状态，仅 published 记录参与选项生成。
        values: 其余自定义字段。
        created_at: 创建时间。
        updated_at: 更新时间。
    """

    __tablename__ = "content_records"

    id = db.Column(db.Integer, primary_key=True)
    contenttype = db.Column(db.String(64), nullable=False, index=True)
    slug = db.Column(db.String(128), nullable=True)
    title = db.Column(db.String(255), nullable=True)
    status = db.Column(db.String(32), default="published", nullable=False)
    values = db.Column(db.JSON, default=dict, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    def __repr__(self) -> str:
        return f"<ContentRecord {self.contenttype}#{self.id}>"
