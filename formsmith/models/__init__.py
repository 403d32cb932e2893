"""数据模型."""

from .content_record import ContentRecord

__all__ = ["ContentRecord"]
