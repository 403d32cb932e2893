"""表单装配相关的类型别名."""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from typing import Any, TypeAlias

# 配置中的原始片段(来自 YAML),结构松散
RawDescriptor: TypeAlias = Any
RawFieldOptions: TypeAlias = Mapping[str, Any]
FieldOptions: TypeAlias = MutableMapping[str, Any]
ChoiceValue: TypeAlias = str | int | float | bool | None
ChoicePair: TypeAlias = tuple[ChoiceValue, str]
ChoiceList: TypeAlias = list[ChoicePair]
FieldSpec: TypeAlias = Mapping[str, Any]
FieldSpecMapping: TypeAlias = Mapping[str, FieldSpec]
ExtraTemplateVariables: TypeAlias = Mapping[str, object]
