"""静态数组选项."""

from __future__ import annotations

from collections.abc import Mapping

from formsmith.errors import InvalidConfigurationError
from formsmith.forms.choices.base import ChoiceDescriptor, StaticChoices
from formsmith.types import ChoiceList


class ArrayTypeChoiceProvider:
    """原样返回配置中的 value -> label 映射,保持键顺序."""

    def provide_choices(self, field_name: str, descriptor: ChoiceDescriptor, *, form_name: str = "") -> ChoiceList:
        """将映射转换为 (value, label) 列表.

        Raises:
            InvalidConfigurationError: 选项不是映射时抛出,属于配置错误.

        """
        source = descriptor.source if isinstance(descriptor, StaticChoices) else descriptor
        if not isinstance(source, Mapping):
            msg = f"表单 '{form_name}' 字段 '{field_name}' 的 choices 必须是 value: label 映射"
            raise InvalidConfigurationError(
                msg,
                extra={"form_name": form_name, "field_name": field_name, "choices_type": type(source).__name__},
            )
        return [(value, label) for value, label in source.items()]
