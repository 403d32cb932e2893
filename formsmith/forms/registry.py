"""表单注册表.

按表单名持有请求内的表单实例,负责创建表单(注入 CSRF 选项、挂载事件订阅者)、
委托 FieldAssembler 添加字段,以及委托 RenderBridge 渲染.

注册表为请求级的可变状态,不支持多线程并发修改.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from typing import TYPE_CHECKING, Any

from formsmith.errors import InvalidConfigurationError, UnknownFormError
from formsmith.forms.assembler import FieldAssembler
from formsmith.forms.choices import ArrayTypeChoiceProvider, ChoiceProviders, ContentTypeChoiceProvider
from formsmith.forms.constraints import ConstraintRegistry, ConstraintResolver
from formsmith.forms.diagnostics import DiagnosticSink, StructlogDiagnosticSink
from formsmith.forms.events import FormEventSubscriber, FormLifecycleSubscriber
from formsmith.forms.managed_form import ManagedForm
from formsmith.forms.render import RenderBridge, Renderer
from formsmith.settings import DEFAULT_FORM_TEMPLATE
from formsmith.utils.structlog_config import log_debug, log_info

if TYPE_CHECKING:
    from markupsafe import Markup
    from wtforms.fields.core import Field

    from formsmith.forms.choices import ContentRecordQuery
    from formsmith.forms.config import FormsConfig
    from formsmith.settings import Settings
    from formsmith.types import ExtraTemplateVariables, FieldOptions, FieldSpecMapping, RawFieldOptions


def resolve_csrf_protection(settings: Settings, forms_config: FormsConfig | None = None) -> bool:
    """返回生效的 CSRF 开关: 表单配置文件中的 csrf 优先于 FORMS_CSRF."""
    if forms_config is not None and forms_config.csrf is not None:
        return forms_config.csrf
    return settings.forms_csrf


class FormRegistry:
    """请求级表单注册表.

    Attributes:
        csrf_protection: 创建表单时注入的 CSRF 开关.
        forms_config: 已加载的表单配置,供 build_from_config 使用.

    """

    def __init__(
        self,
        *,
        csrf_protection: bool = True,
        default_template: str = DEFAULT_FORM_TEMPLATE,
        forms_config: FormsConfig | None = None,
        content_query: ContentRecordQuery | None = None,
        constraint_registry: ConstraintRegistry | None = None,
        diagnostics: DiagnosticSink | None = None,
        renderer: Renderer | None = None,
        subscriber_factory: Callable[[], FormEventSubscriber] = FormLifecycleSubscriber,
    ) -> None:
        self.csrf_protection = csrf_protection
        self.forms_config = forms_config
        self.diagnostics = diagnostics or StructlogDiagnosticSink()
        self.subscriber_factory = subscriber_factory
        self.assembler = FieldAssembler(
            ConstraintResolver(constraint_registry, self.diagnostics),
            ChoiceProviders(
                array_type=ArrayTypeChoiceProvider(),
                content_type=ContentTypeChoiceProvider(content_query, self.diagnostics),
            ),
        )
        self.render_bridge = RenderBridge(default_template, renderer)
        self._forms: dict[str, ManagedForm] = {}

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        forms_config: FormsConfig | None = None,
        **kwargs: Any,
    ) -> FormRegistry:
        """按应用设置创建注册表,表单配置文件中的 csrf / templates.form 优先."""
        csrf_protection = resolve_csrf_protection(settings, forms_config)
        default_template = settings.forms_template
        if forms_config is not None and forms_config.templates.form:
            default_template = forms_config.templates.form
        return cls(
            csrf_protection=csrf_protection,
            default_template=default_template,
            forms_config=forms_config,
            **kwargs,
        )

    # ------------------------------------------------------------------ #
    # 表单表
    # ------------------------------------------------------------------ #
    def make_form(
        self,
        form_name: str,
        form_type: str = "form",
        data: Mapping[str, Any] | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> ManagedForm:
        """创建并注册表单,同名表单会被直接替换.

        Args:
            form_name: 表单名.
            form_type: 表单类型标签.
            data: 初始数据.
            options: 构建选项,其中 csrf_protection 总是被全局设置覆盖.

        Returns:
            新建的表单.

        """
        build_options = dict(options or {})
        build_options["csrf_protection"] = self.csrf_protection
        form = ManagedForm(
            form_name,
            form_type=form_type,
            data=data,
            options=build_options,
            diagnostics=self.diagnostics,
        )
        form.add_event_subscriber(self.subscriber_factory())
        self._forms[form_name] = form
        log_debug("表单已创建", module="forms", form_name=form_name, csrf_protection=self.csrf_protection)
        return form

    def get_form(self, form_name: str) -> ManagedForm:
        """返回已注册的表单.

        Raises:
            UnknownFormError: 表单从未通过 make_form 注册.

        """
        form = self._forms.get(form_name)
        if form is None:
            msg = f"表单 '{form_name}' 尚未创建"
            raise UnknownFormError(msg, extra={"form_name": form_name})
        return form

    def get_field(self, form_name: str, field_name: str) -> Field:
        """返回表单中的已绑定字段.

        Raises:
            UnknownFormError: 表单不存在.
            UnknownFieldError: 字段不存在.

        """
        return self.get_form(form_name).get(field_name)

    def has_form(self, form_name: str) -> bool:
        return form_name in self._forms

    def discard(self, form_name: str) -> None:
        """丢弃表单;不存在时抛出 UnknownFormError."""
        self.get_form(form_name)
        del self._forms[form_name]

    @property
    def form_names(self) -> list[str]:
        return list(self._forms)

    def __contains__(self, form_name: object) -> bool:
        return form_name in self._forms

    def __iter__(self) -> Iterator[str]:
        return iter(self._forms)

    def __len__(self) -> int:
        return len(self._forms)

    # ------------------------------------------------------------------ #
    # 字段
    # ------------------------------------------------------------------ #
    def add_field(self, form_name: str, field_name: str, type_tag: str, options: RawFieldOptions) -> FieldOptions:
        """向表单添加单个字段,返回最终字段选项."""
        form = self.get_form(form_name)
        return self.assembler.assemble_field(form, field_name, type_tag, options)

    def add_field_array(self, form_name: str, fields: FieldSpecMapping) -> None:
        """按顺序添加一组字段.

        Args:
            form_name: 表单名.
            fields: 字段名 -> {"type": ..., "options": {...}},options 可省略.

        Raises:
            UnknownFormError: 表单不存在.
            InvalidConfigurationError: 字段缺少 type.

        """
        form = self.get_form(form_name)
        for field_name, field in fields.items():
            type_tag = field.get("type")
            if not isinstance(type_tag, str) or not type_tag:
                msg = f"表单 '{form_name}' 字段 '{field_name}' 缺少 type"
                raise InvalidConfigurationError(msg, extra={"form_name": form_name, "field_name": field_name})
            options = field.get("options") or {}
            self.assembler.assemble_field(form, field_name, type_tag, options)

    def build_from_config(
        self,
        form_name: str,
        data: Mapping[str, Any] | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> ManagedForm:
        """按已加载的表单配置创建表单并添加全部字段.

        Raises:
            UnknownFormError: 未加载配置或配置中没有该表单.

        """
        if self.forms_config is None:
            msg = f"未加载表单配置,无法构建 '{form_name}'"
            raise UnknownFormError(msg, extra={"form_name": form_name})
        definition = self.forms_config.get(form_name)
        form = self.make_form(form_name, data=data, options=options)
        self.add_field_array(form_name, definition.field_specs())
        log_info("表单已按配置构建", module="forms", form_name=form_name, field_count=len(definition.fields))
        return form

    # ------------------------------------------------------------------ #
    # 渲染
    # ------------------------------------------------------------------ #
    def render_form(
        self,
        form_name: str,
        template: str | None = None,
        extra: ExtraTemplateVariables | None = None,
    ) -> Markup:
        """渲染表单当前状态的快照.

        Args:
            form_name: 表单名.
            template: 模板名;为空时依次使用表单配置中的 template 与默认模板.
            extra: 额外模板变量.

        Returns:
            可信 HTML.

        Raises:
            UnknownFormError: 表单不存在.

        """
        form = self.get_form(form_name)
        if not template and self.forms_config is not None and form_name in self.forms_config.forms:
            template = self.forms_config.forms[form_name].template
        return self.render_bridge.render(form.create_view(), template, extra)


__all__ = ["FormRegistry", "resolve_csrf_protection"]
