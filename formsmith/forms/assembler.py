"""字段装配.

对单个字段: 解析约束 -> (choice 类型)解析选项 -> 挂到表单上.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from formsmith.forms.choices import ChoiceProviders
from formsmith.forms.constraints import ConstraintResolver
from formsmith.forms.field_types import CHOICE_TYPE
from formsmith.types import FieldOptions, RawFieldOptions

if TYPE_CHECKING:
    from formsmith.forms.managed_form import ManagedForm


class FieldAssembler:
    """把原始字段选项装配为最终选项并添加到表单."""

    def __init__(self, resolver: ConstraintResolver, choices: ChoiceProviders) -> None:
        self.resolver = resolver
        self.choices = choices

    def finalize_options(self, form_name: str, field_name: str, type_tag: str, raw_options: RawFieldOptions) -> FieldOptions:
        """解析 constraints 与 choices,返回新的选项字典(不修改入参)."""
        options: FieldOptions = dict(raw_options)

        if options.get("constraints") is not None:
            options["constraints"] = self.resolver.resolve_all(options["constraints"], form_name=form_name)

        if type_tag == CHOICE_TYPE:
            options["choices"] = self.choices.resolve(field_name, options.get("choices"), form_name=form_name)

        return options

    def assemble_field(
        self,
        form: ManagedForm,
        field_name: str,
        type_tag: str,
        raw_options: RawFieldOptions,
    ) -> FieldOptions:
        """装配字段并添加到表单.

        Args:
            form: 目标表单.
            field_name: 字段名.
            type_tag: 字段类型标签.
            raw_options: 配置中的原始选项.

        Returns:
            最终的字段选项.

        Raises:
            InvalidConfigurationError: 字段类型未知,或静态 choices 不是映射.

        """
        options = self.finalize_options(form.name, field_name, type_tag, raw_options)
        form.add(field_name, type_tag, options)
        return options


__all__ = ["FieldAssembler"]
