"""表单工坊 - 常量定义模块

统一管理错误分类、严重度与提示文案.
"""

from enum import Enum


class LogLevel(Enum):
    """日志级别枚举."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ErrorCategory(Enum):
    """错误分类枚举."""

    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    BUSINESS = "business"
    SECURITY = "security"
    DATABASE = "database"
    EXTERNAL = "external"
    SYSTEM = "system"
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """错误严重程度枚举."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class DiagnosticKind(str, Enum):
    """诊断事件类型.

    解析期问题(约束、配置、选项来源)与绑定期问题(校验、上传)使用不同取值,
    便于在同一日志通道中区分.
    """

    UNRESOLVED_CONSTRAINT = "unresolved_constraint"
    INVALID_CONFIGURATION = "invalid_configuration"
    CHOICE_SOURCE_UNAVAILABLE = "choice_source_unavailable"
    VALIDATION_FAILURE = "validation_failure"
    UPLOAD_FAILURE = "upload_failure"


# 错误消息常量
class ErrorMessages:
    """错误消息常量."""

    # 通用错误
    INTERNAL_ERROR = "服务器内部错误"
    VALIDATION_ERROR = "数据验证失败"
    RESOURCE_NOT_FOUND = "资源不存在"

    # 表单错误
    INVALID_FORM_CONFIGURATION = "表单配置无效"
    UNKNOWN_FORM = "表单不存在"
    UNKNOWN_FIELD = "表单字段不存在"
    FORM_VALIDATION_FAILED = "表单校验未通过"
    FILE_UPLOAD_ERROR = "文件上传失败"

    # 外部依赖错误
    CHOICE_SOURCE_UNAVAILABLE = "选项数据源不可用"


__all__ = [
    "DiagnosticKind",
    "ErrorCategory",
    "ErrorMessages",
    "ErrorSeverity",
    "LogLevel",
]
