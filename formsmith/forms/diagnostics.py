"""表单装配诊断通道.

解析期的降级(约束未识别、配置形态错误、选项来源不可用)与绑定期的失败
(校验、上传)都经由同一个 sink 输出,通过 ``diagnostic_kind`` 字段区分.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Protocol

from formsmith.constants import DiagnosticKind, ErrorSeverity
from formsmith.utils.structlog_config import get_forms_logger

if TYPE_CHECKING:
    from formsmith.types import JsonValue, LoggerProtocol

_SEVERITY_LOG_METHODS: dict[ErrorSeverity, str] = {
    ErrorSeverity.LOW: "info",
    ErrorSeverity.MEDIUM: "warning",
    ErrorSeverity.HIGH: "error",
    ErrorSeverity.CRITICAL: "critical",
}


class DiagnosticSink(Protocol):
    """接收 (severity, message, context) 诊断的协议."""

    def emit(self, severity: ErrorSeverity, message: str, context: Mapping[str, JsonValue]) -> None: ...


class StructlogDiagnosticSink:
    """将诊断写入 structlog 的默认实现."""

    def __init__(self, logger: LoggerProtocol | None = None) -> None:
        self._logger = logger or get_forms_logger()

    def emit(self, severity: ErrorSeverity, message: str, context: Mapping[str, JsonValue]) -> None:
        """按严重度选择日志方法输出诊断.

        Args:
            severity: 诊断严重度.
            message: 诊断描述.
            context: 附加上下文,至少包含 diagnostic_kind 与 form_name.

        """
        method_name = _SEVERITY_LOG_METHODS.get(severity, "warning")
        log_method = getattr(self._logger, method_name, self._logger.warning)
        log_method(message, module="forms", severity=severity.value, **dict(context))


def report(
    sink: DiagnosticSink,
    kind: DiagnosticKind,
    message: str,
    *,
    severity: ErrorSeverity = ErrorSeverity.MEDIUM,
    **context: JsonValue,
) -> None:
    """以统一字段格式发出一条诊断."""
    payload: dict[str, JsonValue] = {"diagnostic_kind": kind.value}
    payload.update(context)
    sink.emit(severity, message, payload)


__all__ = ["DiagnosticSink", "StructlogDiagnosticSink", "report"]
