"""注册表持有的表单对象.

字段以有序表保存,WTForms 的 ``BaseForm`` 在首次访问时才构建,字段变更后重新构建.
使用 ``BaseForm`` 而不是声明式的 ``Form`` 子类,可以严格保持字段的添加顺序.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

from flask_wtf import FlaskForm
from flask_wtf.file import FileField
from wtforms.fields.core import Field, UnboundField
from wtforms.form import BaseForm

from formsmith.constants import DiagnosticKind, ErrorSeverity
from formsmith.errors import FileUploadError, FormValidationError, UnknownFieldError
from formsmith.forms.diagnostics import DiagnosticSink, StructlogDiagnosticSink, report
from formsmith.forms.events import FormEvent, FormEvents, FormEventSubscriber, dispatch
from formsmith.forms.field_types import build_field
from formsmith.forms.view import FormView, build_form_view
from formsmith.types import RawFieldOptions


class ManagedForm:
    """可增量添加字段、可绑定校验、可生成视图快照的表单.

    Attributes:
        name: 表单名.
        form_type: 表单类型标签,仅作记录.
        options: 构建选项,包含 csrf_protection、prefix 等.

    """

    def __init__(
        self,
        name: str,
        *,
        form_type: str = "form",
        data: Mapping[str, Any] | None = None,
        options: Mapping[str, Any] | None = None,
        diagnostics: DiagnosticSink | None = None,
    ) -> None:
        self.name = name
        self.form_type = form_type
        self.options = dict(options or {})
        self.diagnostics = diagnostics or StructlogDiagnosticSink()
        self._data = dict(data) if data is not None else None
        self._subscribers: list[FormEventSubscriber] = []
        self._fields: dict[str, UnboundField] = {}
        self._field_types: dict[str, str] = {}
        self._formdata: Any = None
        self._bound: BaseForm | None = None
        self._valid: bool | None = None

    # ------------------------------------------------------------------ #
    # 结构
    # ------------------------------------------------------------------ #
    @property
    def csrf_enabled(self) -> bool:
        return bool(self.options.get("csrf_protection", True))

    @property
    def subscribers(self) -> tuple[FormEventSubscriber, ...]:
        return tuple(self._subscribers)

    def add_event_subscriber(self, subscriber: FormEventSubscriber) -> ManagedForm:
        self._subscribers.append(subscriber)
        return self

    def add(self, field_name: str, type_tag: str, options: RawFieldOptions) -> ManagedForm:
        """添加(或替换)字段,字段顺序即添加顺序."""
        self._fields[field_name] = build_field(type_tag, options, field_name=field_name)
        self._field_types[field_name] = type_tag
        self._invalidate()
        return self

    @property
    def field_names(self) -> list[str]:
        return list(self._fields)

    def field_type(self, field_name: str) -> str:
        if field_name not in self._field_types:
            raise self._unknown_field(field_name)
        return self._field_types[field_name]

    def has(self, field_name: str) -> bool:
        return field_name in self._fields

    def __contains__(self, field_name: object) -> bool:
        return field_name in self._fields

    def get(self, field_name: str) -> Field:
        """返回已绑定的字段.

        Raises:
            UnknownFieldError: 字段尚未添加.

        """
        if field_name not in self._fields:
            raise self._unknown_field(field_name)
        return self.form[field_name]

    def __iter__(self) -> Iterator[Field]:
        return iter(self.form)

    # ------------------------------------------------------------------ #
    # 绑定与校验
    # ------------------------------------------------------------------ #
    @property
    def form(self) -> BaseForm:
        """当前字段集合对应的 WTForms 表单,按需构建."""
        if self._bound is None:
            self._bound = self._build()
        return self._bound

    @property
    def data(self) -> dict[str, Any]:
        return dict(self.form.data)

    @property
    def errors(self) -> dict[str, Any]:
        return dict(self.form.errors)

    @property
    def is_submitted(self) -> bool:
        return self._formdata is not None

    @property
    def is_valid(self) -> bool | None:
        return self._valid

    def set_data(self, data: Mapping[str, Any] | None) -> ManagedForm:
        """设置初始数据,触发 PRE_SET_DATA / POST_SET_DATA."""
        event = dispatch(self._subscribers, FormEvent(FormEvents.PRE_SET_DATA, self.name, data))
        self._data = dict(event.data) if event.data is not None else None
        self._invalidate()
        dispatch(self._subscribers, FormEvent(FormEvents.POST_SET_DATA, self.name, self.data))
        return self

    def submit(self, formdata: Any, *, raise_on_invalid: bool = False) -> bool:
        """绑定提交数据并执行校验.

        Args:
            formdata: 具有 ``getlist`` 的提交数据(如 werkzeug MultiDict).
            raise_on_invalid: 校验失败时是否抛出异常.

        Returns:
            校验是否通过.

        Raises:
            FileUploadError: raise_on_invalid 且上传字段校验失败.
            FormValidationError: raise_on_invalid 且其他字段校验失败.

        """
        event = dispatch(self._subscribers, FormEvent(FormEvents.PRE_SUBMIT, self.name, formdata))
        self._formdata = event.data
        self._invalidate()

        form = self.form
        dispatch(self._subscribers, FormEvent(FormEvents.SUBMIT, self.name, form.data))
        self._valid = bool(form.validate())
        if not self._valid:
            self._report_failures(form)
        dispatch(self._subscribers, FormEvent(FormEvents.POST_SUBMIT, self.name, form.data))

        if raise_on_invalid and not self._valid:
            raise self._failure_error(form)
        return self._valid

    def create_view(self) -> FormView:
        """生成当前状态的视图快照."""
        return build_form_view(
            self.name,
            self.form,
            self._field_types,
            submitted=self.is_submitted,
            valid=self._valid,
        )

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #
    def _build(self) -> BaseForm:
        meta = FlaskForm.Meta()
        meta.csrf = self.csrf_enabled
        form = BaseForm(list(self._fields.items()), prefix=self.options.get("prefix", ""), meta=meta)
        form.process(formdata=self._formdata, data=self._data)
        return form

    def _invalidate(self) -> None:
        self._bound = None
        self._valid = None

    def _upload_errors(self, form: BaseForm) -> dict[str, list[str]]:
        return {
            bound_field.short_name: [str(error) for error in bound_field.errors]
            for bound_field in form
            if isinstance(bound_field, FileField) and bound_field.errors
        }

    def _report_failures(self, form: BaseForm) -> None:
        upload_errors = self._upload_errors(form)
        if upload_errors:
            report(
                self.diagnostics,
                DiagnosticKind.UPLOAD_FAILURE,
                f"表单 '{self.name}' 的文件上传未通过校验",
                form_name=self.name,
                errors=upload_errors,
            )
        other_errors = {
            name: [str(error) for error in errors] for name, errors in form.errors.items() if name not in upload_errors
        }
        if other_errors:
            report(
                self.diagnostics,
                DiagnosticKind.VALIDATION_FAILURE,
                f"表单 '{self.name}' 未通过校验",
                severity=ErrorSeverity.LOW,
                form_name=self.name,
                errors=other_errors,
            )

    def _failure_error(self, form: BaseForm) -> FormValidationError | FileUploadError:
        upload_errors = self._upload_errors(form)
        if upload_errors:
            return FileUploadError(extra={"form_name": self.name, "errors": upload_errors})
        errors = {name: [str(error) for error in messages] for name, messages in form.errors.items()}
        return FormValidationError(extra={"form_name": self.name, "errors": errors})

    def _unknown_field(self, field_name: str) -> UnknownFieldError:
        msg = f"表单 '{self.name}' 中不存在字段 '{field_name}'"
        return UnknownFieldError(msg, extra={"form_name": self.name, "field_name": field_name})


__all__ = ["ManagedForm"]
