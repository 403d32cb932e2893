"""选项描述与选项提供者协议.

``contenttype::`` 前缀是静态选项与动态查询之间唯一的分派依据.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Protocol, TypeAlias

from formsmith.constants import CONTENTTYPE_CHOICE_PREFIX, CONTENTTYPE_SEPARATOR
from formsmith.types import ChoiceList, RawDescriptor


@dataclass(frozen=True, slots=True)
class StaticChoices:
    """配置中直接给出的 value -> label 映射."""

    source: RawDescriptor


@dataclass(frozen=True, slots=True)
class ContentQuery:
    """``contenttype::<identifier>[::<display_field>]`` 形式的动态查询."""

    raw: str
    category: str
    display_field: str | None = None
    extra_segments: tuple[str, ...] = ()

    @property
    def is_well_formed(self) -> bool:
        """标识是否为合法的内容类型描述."""
        return bool(self.category) and not self.extra_segments and self.display_field != ""


ChoiceDescriptor: TypeAlias = StaticChoices | ContentQuery


def parse_choice_descriptor(raw: RawDescriptor) -> ChoiceDescriptor:
    """根据前缀将 choices 选项解析为描述.

    Args:
        raw: 字段配置中的 choices 值.

    Returns:
        以 ``contenttype::`` 开头的字符串返回 ContentQuery,其余一律视为 StaticChoices.

    """
    if isinstance(raw, str) and raw.startswith(CONTENTTYPE_CHOICE_PREFIX):
        segments = raw[len(CONTENTTYPE_CHOICE_PREFIX) :].split(CONTENTTYPE_SEPARATOR)
        category = segments[0].strip()
        display_field = segments[1].strip() if len(segments) > 1 else None
        return ContentQuery(
            raw=raw,
            category=category,
            display_field=display_field,
            extra_segments=tuple(segments[2:]),
        )
    return StaticChoices(raw)


class ChoiceProvider(Protocol):
    """给定描述,产出有序的 (value, label) 列表."""

    def provide_choices(self, field_name: str, descriptor: ChoiceDescriptor, *, form_name: str = "") -> ChoiceList: ...


class ContentRecordQuery(Protocol):
    """内容查询协作方: 获取某内容类型下的全部记录."""

    def fetch_all(self, category: str) -> Sequence[object]: ...


def record_value(record: object, key: str) -> object:
    """读取记录字段,依次尝试属性(或映射键)与 values 字典."""
    if isinstance(record, Mapping):
        if key in record:
            return record[key]
        values = record.get("values")
    else:
        if hasattr(record, key):
            return getattr(record, key)
        values = getattr(record, "values", None)
    if isinstance(values, Mapping):
        return values.get(key)
    return None
