"""选项提供者.

按描述类型在固定的提供者表中选择实现,而不是通过子类覆写.
"""

from __future__ import annotations

from formsmith.forms.choices.array_type import ArrayTypeChoiceProvider
from formsmith.forms.choices.base import (
    ChoiceDescriptor,
    ChoiceProvider,
    ContentQuery,
    ContentRecordQuery,
    StaticChoices,
    parse_choice_descriptor,
)
from formsmith.forms.choices.content_type import ContentTypeChoiceProvider
from formsmith.types import ChoiceList, RawDescriptor


class ChoiceProviders:
    """描述类型 -> 提供者 的分派表."""

    def __init__(self, array_type: ChoiceProvider, content_type: ChoiceProvider) -> None:
        self._providers: dict[type, ChoiceProvider] = {
            StaticChoices: array_type,
            ContentQuery: content_type,
        }

    def provider_for(self, descriptor: ChoiceDescriptor) -> ChoiceProvider:
        """返回描述对应的提供者."""
        return self._providers[type(descriptor)]

    def resolve(self, field_name: str, raw: RawDescriptor, *, form_name: str = "") -> ChoiceList:
        """解析 choices 原始值并生成选项列表."""
        descriptor = parse_choice_descriptor(raw)
        return self.provider_for(descriptor).provide_choices(field_name, descriptor, form_name=form_name)


__all__ = [
    "ArrayTypeChoiceProvider",
    "ChoiceDescriptor",
    "ChoiceProvider",
    "ChoiceProviders",
    "ContentQuery",
    "ContentRecordQuery",
    "ContentTypeChoiceProvider",
    "StaticChoices",
    "parse_choice_descriptor",
]
