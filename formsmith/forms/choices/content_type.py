"""内容类型动态选项.

``contenttype::pages`` 以记录 ID 作为标签;``contenttype::pages::title`` 以 title 字段作为标签,
字段缺失或为空时回退为记录 ID.
"""

from __future__ import annotations

from formsmith.constants import DiagnosticKind, ErrorSeverity
from formsmith.errors import ChoiceSourceUnavailableError
from formsmith.forms.choices.base import ChoiceDescriptor, ContentQuery, ContentRecordQuery, record_value
from formsmith.forms.diagnostics import DiagnosticSink, StructlogDiagnosticSink, report
from formsmith.types import ChoiceList


class ContentTypeChoiceProvider:
    """通过内容查询协作方生成选项.

    数据源不可用、内容类型未知或没有记录时返回空列表并输出一条诊断,表单仍可构建.
    """

    def __init__(
        self,
        query: ContentRecordQuery | None = None,
        diagnostics: DiagnosticSink | None = None,
    ) -> None:
        self.query = query
        self.diagnostics = diagnostics or StructlogDiagnosticSink()

    def provide_choices(self, field_name: str, descriptor: ChoiceDescriptor, *, form_name: str = "") -> ChoiceList:
        if not isinstance(descriptor, ContentQuery) or not descriptor.is_well_formed:
            report(
                self.diagnostics,
                DiagnosticKind.INVALID_CONFIGURATION,
                f"表单 '{form_name}' 字段 '{field_name}' 的内容类型选项格式无效",
                form_name=form_name,
                field_name=field_name,
                descriptor=repr(getattr(descriptor, "raw", descriptor)),
            )
            return []

        if self.query is None:
            self._report_unavailable(form_name, field_name, descriptor, "未配置内容查询服务")
            return []

        try:
            records = list(self.query.fetch_all(descriptor.category))
        except ChoiceSourceUnavailableError as exc:
            self._report_unavailable(form_name, field_name, descriptor, str(exc))
            return []

        if not records:
            report(
                self.diagnostics,
                DiagnosticKind.CHOICE_SOURCE_UNAVAILABLE,
                f"内容类型 '{descriptor.category}' 不存在或没有记录",
                severity=ErrorSeverity.LOW,
                form_name=form_name,
                field_name=field_name,
                contenttype=descriptor.category,
            )
            return []

        return [self._project(record, descriptor.display_field) for record in records]

    @staticmethod
    def _project(record: object, display_field: str | None) -> tuple[object, str]:
        record_id = record_value(record, "id")
        label = record_value(record, display_field) if display_field else None
        if label is None or label == "":
            label = record_id
        return record_id, str(label)

    def _report_unavailable(self, form_name: str, field_name: str, descriptor: ContentQuery, reason: str) -> None:
        report(
            self.diagnostics,
            DiagnosticKind.CHOICE_SOURCE_UNAVAILABLE,
            f"无法获取内容类型 '{descriptor.category}' 的选项",
            form_name=form_name,
            field_name=field_name,
            contenttype=descriptor.category,
            reason=reason,
        )
