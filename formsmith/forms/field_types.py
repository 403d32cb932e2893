"""字段类型表与选项转换.

配置中的类型标签(text、choice、email 等)映射到 WTForms 字段类,
字段选项映射到字段构造参数.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from flask_wtf.file import FileField
from wtforms import (
    BooleanField,
    DateField,
    DateTimeLocalField,
    DecimalField,
    EmailField,
    HiddenField,
    IntegerField,
    PasswordField,
    RadioField,
    SearchField,
    SelectField,
    SelectMultipleField,
    StringField,
    SubmitField,
    TelField,
    TextAreaField,
    TimeField,
    URLField,
)
from wtforms.fields.core import Field, UnboundField

from formsmith.errors import InvalidConfigurationError
from formsmith.types import RawFieldOptions
from formsmith.utils.structlog_config import log_debug

CHOICE_TYPE = "choice"

FIELD_TYPES: dict[str, type[Field]] = {
    "text": StringField,
    "textarea": TextAreaField,
    "email": EmailField,
    "password": PasswordField,
    "integer": IntegerField,
    "number": DecimalField,
    "choice": SelectField,
    "checkbox": BooleanField,
    "date": DateField,
    "datetime": DateTimeLocalField,
    "time": TimeField,
    "file": FileField,
    "hidden": HiddenField,
    "submit": SubmitField,
    "url": URLField,
    "search": SearchField,
    "tel": TelField,
}

COERCE_FUNCTIONS: dict[str, Callable[[Any], Any]] = {
    "str": str,
    "int": int,
    "float": float,
}

# 已消费的选项键,其余键忽略
_KNOWN_OPTIONS = frozenset(
    {
        "label",
        "constraints",
        "choices",
        "coerce",
        "multiple",
        "expanded",
        "data",
        "attr",
        "placeholder",
        "required",
        "description",
        "help",
    },
)


def field_class_for(type_tag: str, options: RawFieldOptions) -> type[Field]:
    """根据类型标签选择字段类.

    Raises:
        InvalidConfigurationError: 类型标签未知时抛出.

    """
    if type_tag == CHOICE_TYPE:
        if options.get("multiple"):
            return SelectMultipleField
        if options.get("expanded"):
            return RadioField
        return SelectField
    field_class = FIELD_TYPES.get(type_tag)
    if field_class is None:
        msg = f"未知的字段类型: {type_tag}"
        raise InvalidConfigurationError(msg, extra={"field_type": type_tag})
    return field_class


def collect_validators(resolved_constraints: object) -> list[object]:
    """将已解析的 constraints 展平为校验器列表,丢弃未解析(None)的条目."""
    if resolved_constraints is None:
        return []
    if isinstance(resolved_constraints, Mapping):
        items = list(resolved_constraints.values())
    elif isinstance(resolved_constraints, (list, tuple)):
        items = list(resolved_constraints)
    else:
        items = [resolved_constraints]
    return [item for item in items if item is not None]


def _resolve_coerce(options: RawFieldOptions, choices: list[tuple[object, str]]) -> Callable[[Any], Any]:
    coerce = options.get("coerce")
    if callable(coerce):
        return coerce
    if isinstance(coerce, str) and coerce in COERCE_FUNCTIONS:
        return COERCE_FUNCTIONS[coerce]
    # 内容类型选项以整数 ID 作为值
    if choices and all(isinstance(value, int) and not isinstance(value, bool) for value, _ in choices):
        return int
    return str


def build_field(type_tag: str, options: RawFieldOptions, *, field_name: str = "") -> UnboundField:
    """构造未绑定的 WTForms 字段.

    Args:
        type_tag: 字段类型标签.
        options: 已完成约束与选项解析的字段选项.
        field_name: 字段名,仅用于日志.

    Returns:
        UnboundField,绑定到表单时才会实例化.

    """
    field_class = field_class_for(type_tag, options)
    kwargs: dict[str, Any] = {"validators": collect_validators(options.get("constraints"))}

    if options.get("label") is not None:
        kwargs["label"] = options["label"]
    description = options.get("description") or options.get("help")
    if description:
        kwargs["description"] = description
    if "data" in options:
        kwargs["default"] = options["data"]

    render_kw = dict(options.get("attr") or {})
    if options.get("placeholder"):
        render_kw["placeholder"] = options["placeholder"]
    if options.get("required"):
        render_kw["required"] = True
    if render_kw:
        kwargs["render_kw"] = render_kw

    if type_tag == CHOICE_TYPE:
        choices = list(options.get("choices") or [])
        kwargs["choices"] = choices
        kwargs["coerce"] = _resolve_coerce(options, choices)

    ignored = sorted(str(key) for key in options if key not in _KNOWN_OPTIONS)
    if ignored:
        log_debug("忽略不支持的字段选项", module="forms", field_name=field_name, ignored_options=ignored)

    return field_class(**kwargs)


__all__ = [
    "CHOICE_TYPE",
    "FIELD_TYPES",
    "build_field",
    "collect_validators",
    "field_class_for",
]
