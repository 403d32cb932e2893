"""常量模块。

集中管理表单系统常量，包括错误分类、诊断类型、HTTP 状态码等。
"""

# 导入HTTP状态码常量（使用Python标准库）
from http import HTTPStatus as HttpStatus

from .system_constants import (
    DiagnosticKind,
    ErrorCategory,
    ErrorMessages,
    ErrorSeverity,
    LogLevel,
)

# 内容类型选项描述前缀
CONTENTTYPE_CHOICE_PREFIX = "contenttype::"
CONTENTTYPE_SEPARATOR = "::"

__all__ = [
    "CONTENTTYPE_CHOICE_PREFIX",
    "CONTENTTYPE_SEPARATOR",
    "DiagnosticKind",
    "ErrorCategory",
    "ErrorMessages",
    "ErrorSeverity",
    "HttpStatus",
    "LogLevel",
]
