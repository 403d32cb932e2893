"""表单配置文件(YAML)的读取与校验.

示例::

    csrf: true
    templates:
      form: formsmith/form.html
    forms:
      contact:
        fields:
          name:
            type: text
            options:
              constraints: [NotBlank, {Length: {min: 3}}]

兼容把表单直接写在顶层的旧格式(顶层键下含 ``fields`` 即视为表单).
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from formsmith.errors import InvalidConfigurationError, UnknownFormError

_GLOBAL_KEYS = frozenset({"csrf", "templates", "forms"})


class FieldConfig(BaseModel):
    """单个字段: 类型标签与原始选项."""

    model_config = ConfigDict(extra="ignore")

    type: str
    options: dict[str, Any] = Field(default_factory=dict)

    @field_validator("options", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        return {} if value is None else value


class TemplatesConfig(BaseModel):
    """模板配置."""

    model_config = ConfigDict(extra="ignore")

    form: str | None = None


class FormDefinitionConfig(BaseModel):
    """单个表单定义,字段顺序与文件中一致."""

    model_config = ConfigDict(extra="ignore")

    fields: dict[str, FieldConfig] = Field(default_factory=dict)
    template: str | None = None

    def field_specs(self) -> dict[str, dict[str, Any]]:
        """转换为 add_field_array 接受的结构."""
        return {name: {"type": spec.type, "options": dict(spec.options)} for name, spec in self.fields.items()}


class FormsConfig(BaseModel):
    """表单配置根节点."""

    model_config = ConfigDict(extra="ignore")

    csrf: bool | None = None
    templates: TemplatesConfig = Field(default_factory=TemplatesConfig)
    forms: dict[str, FormDefinitionConfig] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _collect_top_level_forms(cls, value: object) -> object:
        if not isinstance(value, Mapping):
            return value
        payload = {key: item for key, item in value.items() if key in _GLOBAL_KEYS}
        forms = dict(payload.get("forms") or {})
        for key, item in value.items():
            if key not in _GLOBAL_KEYS and isinstance(item, Mapping) and "fields" in item:
                forms.setdefault(key, item)
        payload["forms"] = forms
        return payload

    def get(self, form_name: str) -> FormDefinitionConfig:
        """返回表单定义.

        Raises:
            UnknownFormError: 配置中没有该表单.

        """
        definition = self.forms.get(form_name)
        if definition is None:
            msg = f"表单配置中不存在 '{form_name}'"
            raise UnknownFormError(msg, extra={"form_name": form_name})
        return definition


def parse_forms_config(payload: object) -> FormsConfig:
    """校验已解析的配置数据."""
    if payload is None:
        return FormsConfig()
    try:
        return FormsConfig.model_validate(payload)
    except ValidationError as exc:
        msg = f"表单配置格式错误: {exc.error_count()} 处问题"
        raise InvalidConfigurationError(msg, extra={"errors": str(exc)}) from exc


def load_forms_config(path: str | Path) -> FormsConfig:
    """读取 YAML 表单配置.

    Args:
        path: 配置文件路径.

    Returns:
        FormsConfig 对象;文件为空时返回空配置.

    Raises:
        InvalidConfigurationError: 文件不可读、YAML 语法错误或结构不符合要求.

    """
    config_path = Path(path)
    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"无法读取表单配置文件: {config_path}"
        raise InvalidConfigurationError(msg, extra={"path": str(config_path)}) from exc
    try:
        payload = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        msg = f"表单配置文件不是合法的 YAML: {config_path}"
        raise InvalidConfigurationError(msg, extra={"path": str(config_path)}) from exc
    return parse_forms_config(payload)


__all__ = [
    "FieldConfig",
    "FormDefinitionConfig",
    "FormsConfig",
    "TemplatesConfig",
    "load_forms_config",
    "parse_forms_config",
]
