"""表单视图快照.

模板只接触快照,不直接持有表单对象;每次渲染都会重新生成.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field

from markupsafe import Markup
from wtforms.form import BaseForm

_HIDDEN_FIELD_TYPES = frozenset({"CSRFTokenField", "HiddenField"})


@dataclass(frozen=True, slots=True)
class FieldView:
    """单个字段的渲染快照."""

    name: str
    type: str
    label: Markup
    widget: Markup
    data: object = None
    errors: tuple[str, ...] = ()
    description: str = ""
    required: bool = False
    hidden: bool = False


@dataclass(frozen=True, slots=True)
class FormView:
    """表单的渲染快照.

    Attributes:
        name: 表单名.
        fields: 按添加顺序排列的字段快照,CSRF 字段位于末尾.
        errors: 字段短名(不含前缀) -> 错误列表.
        submitted: 是否已绑定提交数据.
        valid: 校验结果,未校验时为 None.

    """

    name: str
    fields: tuple[FieldView, ...] = ()
    errors: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    submitted: bool = False
    valid: bool | None = None

    def __iter__(self) -> Iterator[FieldView]:
        return iter(self.fields)

    def __getitem__(self, name: str) -> FieldView:
        for field_view in self.fields:
            if field_view.name == name:
                return field_view
        raise KeyError(name)

    @property
    def visible_fields(self) -> tuple[FieldView, ...]:
        return tuple(item for item in self.fields if not item.hidden)

    @property
    def hidden_fields(self) -> tuple[FieldView, ...]:
        return tuple(item for item in self.fields if item.hidden)

    @property
    def hidden_tag(self) -> Markup:
        """拼接全部隐藏字段(含 CSRF)的 HTML."""
        return Markup("").join(item.widget for item in self.hidden_fields)


def build_form_view(
    name: str,
    form: BaseForm,
    field_types: Mapping[str, str],
    *,
    submitted: bool = False,
    valid: bool | None = None,
) -> FormView:
    """从绑定后的 WTForms 表单生成快照.

    Args:
        name: 表单名.
        form: 已绑定的表单.
        field_types: 字段名 -> 配置中的类型标签.
        submitted: 是否已绑定提交数据.
        valid: 校验结果.

    Returns:
        FormView 快照.

    """
    field_views = []
    errors: dict[str, tuple[str, ...]] = {}
    for bound_field in form:
        field_errors = tuple(str(error) for error in bound_field.errors or ())
        if field_errors:
            errors[bound_field.short_name] = field_errors
        hidden = bound_field.type in _HIDDEN_FIELD_TYPES
        field_views.append(
            FieldView(
                name=bound_field.name,
                type=field_types.get(bound_field.short_name, "csrf" if bound_field.type == "CSRFTokenField" else ""),
                label=Markup(bound_field.label()),
                widget=Markup(bound_field()),
                data=bound_field.data,
                errors=field_errors,
                description=str(bound_field.description or ""),
                required=bool(bound_field.flags.required),
                hidden=hidden,
            ),
        )
    return FormView(name=name, fields=tuple(field_views), errors=errors, submitted=submitted, valid=valid)


__all__ = ["FieldView", "FormView", "build_form_view"]
