from __future__ import annotations

import pytest

from formsmith.constants import DiagnosticKind, ErrorSeverity
from formsmith.forms.diagnostics import StructlogDiagnosticSink, report


class _Logger:
    def __init__(self) -> None:
        self.calls: list[tuple[str, str, dict]] = []

    def _record(self, level):
        def _log(message, **kwargs):
            self.calls.append((level, message, kwargs))

        return _log

    def __getattr__(self, name):
        return self._record(name)


@pytest.mark.unit
def test_report_adds_diagnostic_kind(diagnostics) -> None:
    report(diagnostics, DiagnosticKind.UNRESOLVED_CONSTRAINT, "无效约束", form_name="contact", constraint="Foo")

    severity, message, context = diagnostics.records[0]
    assert severity == ErrorSeverity.MEDIUM
    assert message == "无效约束"
    assert context == {"diagnostic_kind": "unresolved_constraint", "form_name": "contact", "constraint": "Foo"}


@pytest.mark.unit
def test_structlog_sink_maps_severity_to_log_level() -> None:
    logger = _Logger()
    sink = StructlogDiagnosticSink(logger)

    sink.emit(ErrorSeverity.HIGH, "严重", {"diagnostic_kind": "unresolved_constraint"})
    sink.emit(ErrorSeverity.LOW, "提示", {"diagnostic_kind": "validation_failure"})

    assert [call[0] for call in logger.calls] == ["error", "info"]
    assert logger.calls[0][2] == {"module": "forms", "severity": "high", "diagnostic_kind": "unresolved_constraint"}
