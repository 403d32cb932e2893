"""表单工坊 - 统一异常定义.

集中维护业务异常类型与元数据定义.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from formsmith.constants import HttpStatus
from formsmith.constants.system_constants import ErrorCategory, ErrorMessages, ErrorSeverity

if TYPE_CHECKING:
    from formsmith.types.structures import LoggerExtra


@dataclass(frozen=True, slots=True)
class ExceptionMetadata:
    """异常的元信息."""

    status_code: int
    category: ErrorCategory
    severity: ErrorSeverity
    default_message_key: str


class AppError(Exception):
    """统一的基础业务异常.

    Args:
        message: 自定义错误文案,若为空则根据 ``message_key`` 推导.
        message_key: 自定义消息键.
        extra: 结构化日志附加字段.
        severity: 错误严重度.
        category: 错误分类.
        status_code: HTTP 状态码.

    """

    metadata = ExceptionMetadata(
        status_code=500,
        category=ErrorCategory.SYSTEM,
        severity=ErrorSeverity.HIGH,
        default_message_key="INTERNAL_ERROR",
    )

    def __init__(
        self,
        message: str | None = None,
        *,
        message_key: str | None = None,
        extra: LoggerExtra | None = None,
        severity: ErrorSeverity | None = None,
        category: ErrorCategory | None = None,
        status_code: int | None = None,
    ) -> None:
        self.message_key = message_key or self.metadata.default_message_key
        self.message = message or getattr(ErrorMessages, self.message_key, ErrorMessages.INTERNAL_ERROR)
        self.extra = dict(extra or {})
        self.severity = severity or self.metadata.severity
        self.category = category or self.metadata.category
        self.status_code = status_code or self.metadata.status_code
        super().__init__(self.message)

    @property
    def recoverable(self) -> bool:
        """表示该异常是否可恢复.

        Returns:
            bool: 严重度为 LOW 或 MEDIUM 时为 True,表示可降级或自动修复.

        """
        return self.severity in (ErrorSeverity.LOW, ErrorSeverity.MEDIUM)


class ValidationError(AppError):
    """表示输入参数或请求体验证失败.

    默认返回 400.
    """

    metadata = ExceptionMetadata(
        status_code=HttpStatus.BAD_REQUEST,
        category=ErrorCategory.VALIDATION,
        severity=ErrorSeverity.LOW,
        default_message_key="VALIDATION_ERROR",
    )


class InvalidConfigurationError(ValidationError):
    """表示表单配置片段的结构无法识别.

    例如静态选项不是映射、字段类型未知、表单配置文件无法解析.
    """

    metadata = ExceptionMetadata(
        status_code=HttpStatus.INTERNAL_SERVER_ERROR,
        category=ErrorCategory.CONFIGURATION,
        severity=ErrorSeverity.MEDIUM,
        default_message_key="INVALID_FORM_CONFIGURATION",
    )


class FormValidationError(ValidationError):
    """表示提交的数据未通过字段约束校验."""

    metadata = ExceptionMetadata(
        status_code=HttpStatus.BAD_REQUEST,
        category=ErrorCategory.VALIDATION,
        severity=ErrorSeverity.LOW,
        default_message_key="FORM_VALIDATION_FAILED",
    )


class FileUploadError(ValidationError):
    """表示提交的文件无法被接收."""

    metadata = ExceptionMetadata(
        status_code=HttpStatus.BAD_REQUEST,
        category=ErrorCategory.VALIDATION,
        severity=ErrorSeverity.MEDIUM,
        default_message_key="FILE_UPLOAD_ERROR",
    )


class NotFoundError(AppError):
    """表示客户端请求的资源不存在.

    默认返回 404.
    """

    metadata = ExceptionMetadata(
        status_code=HttpStatus.NOT_FOUND,
        category=ErrorCategory.BUSINESS,
        severity=ErrorSeverity.LOW,
        default_message_key="RESOURCE_NOT_FOUND",
    )


class UnknownFormError(NotFoundError):
    """请求的表单名称从未通过 make_form 注册."""

    metadata = ExceptionMetadata(
        status_code=HttpStatus.NOT_FOUND,
        category=ErrorCategory.BUSINESS,
        severity=ErrorSeverity.HIGH,
        default_message_key="UNKNOWN_FORM",
    )


class UnknownFieldError(NotFoundError):
    """请求的字段尚未添加到表单."""

    metadata = ExceptionMetadata(
        status_code=HttpStatus.NOT_FOUND,
        category=ErrorCategory.BUSINESS,
        severity=ErrorSeverity.HIGH,
        default_message_key="UNKNOWN_FIELD",
    )


class ExternalServiceError(AppError):
    """表示下游依赖不可用或超时.

    抛出后提醒调用方降级,默认返回 502.
    """

    metadata = ExceptionMetadata(
        status_code=HttpStatus.BAD_GATEWAY,
        category=ErrorCategory.EXTERNAL,
        severity=ErrorSeverity.HIGH,
        default_message_key="CHOICE_SOURCE_UNAVAILABLE",
    )


class ChoiceSourceUnavailableError(ExternalServiceError):
    """表示内容查询协作方无法提供选项数据."""

    metadata = ExceptionMetadata(
        status_code=HttpStatus.BAD_GATEWAY,
        category=ErrorCategory.EXTERNAL,
        severity=ErrorSeverity.MEDIUM,
        default_message_key="CHOICE_SOURCE_UNAVAILABLE",
    )


def map_exception_to_status(error: Exception, default: int = 500) -> int:
    """根据异常类型推导 HTTP 状态码.

    Args:
        error: 捕获的异常.
        default: 非 AppError 时使用的状态码.

    Returns:
        HTTP 状态码.

    """
    if isinstance(error, AppError):
        return int(error.status_code)
    return default


__all__ = [
    "AppError",
    "ChoiceSourceUnavailableError",
    "ExternalServiceError",
    "FileUploadError",
    "FormValidationError",
    "InvalidConfigurationError",
    "NotFoundError",
    "UnknownFieldError",
    "UnknownFormError",
    "ValidationError",
    "map_exception_to_status",
]
