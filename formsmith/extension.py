"""Flask 扩展: 为宿主应用接入配置驱动的表单.

- 注册包内模板目录(``formsmith/form.html``);
- 每个请求持有独立的 FormRegistry(存放在 ``flask.g``);
- 提供 Jinja 全局函数 ``render_configured_form``,在模板中按名称构建并渲染表单.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from flask import Blueprint, Flask, current_app, g, has_request_context, request
from werkzeug.datastructures import CombinedMultiDict

from formsmith.errors import InvalidConfigurationError
from formsmith.forms.config import FormsConfig, load_forms_config
from formsmith.forms.registry import FormRegistry, resolve_csrf_protection
from formsmith.settings import Settings
from formsmith.utils.structlog_config import log_warning

if TYPE_CHECKING:
    from markupsafe import Markup

    from formsmith.forms.choices import ContentRecordQuery

EXTENSION_KEY = "formsmith"
_REGISTRY_ATTR = "formsmith_registry"
_SUBMIT_METHODS = frozenset({"POST", "PUT", "PATCH"})


@dataclass(slots=True)
class FormSmithState:
    """挂在 app.extensions 上的扩展状态."""

    settings: Settings
    forms_config: FormsConfig
    content_query: ContentRecordQuery | None


class FormSmith:
    """表单扩展.

    Example:
        >>> formsmith = FormSmith()
        >>> formsmith.init_app(app, settings)

    """

    def __init__(self, app: Flask | None = None, settings: Settings | None = None) -> None:
        if app is not None:
            self.init_app(app, settings)

    def init_app(
        self,
        app: Flask,
        settings: Settings | None = None,
        *,
        content_query: ContentRecordQuery | None = None,
    ) -> None:
        """绑定应用.

        Args:
            app: Flask 应用.
            settings: 应用设置,缺省时从环境变量加载.
            content_query: 内容查询协作方,缺省使用数据库 ContentRepository.

        """
        resolved_settings = settings or Settings.load()
        if content_query is None:
            from formsmith.repositories.content_repository import ContentRepository

            content_query = ContentRepository()

        forms_config = self._load_forms_config(resolved_settings)
        # 全局 CSRFProtect 与表单内的令牌字段使用同一开关
        app.config["WTF_CSRF_ENABLED"] = resolve_csrf_protection(resolved_settings, forms_config)

        app.extensions[EXTENSION_KEY] = FormSmithState(
            settings=resolved_settings,
            forms_config=forms_config,
            content_query=content_query,
        )
        app.register_blueprint(Blueprint("formsmith", __name__, template_folder="templates"))
        app.add_template_global(render_configured_form, "render_configured_form")

    @staticmethod
    def _load_forms_config(settings: Settings) -> FormsConfig:
        path = settings.resolved_forms_config_path
        if not path.exists():
            log_warning("表单配置文件不存在,使用空配置", module="forms", path=str(path))
            return FormsConfig()
        return load_forms_config(path)


def _state() -> FormSmithState:
    state = current_app.extensions.get(EXTENSION_KEY)
    if state is None:
        msg = "FormSmith 扩展尚未初始化"
        raise InvalidConfigurationError(msg)
    return state


def get_registry() -> FormRegistry:
    """返回当前应用上下文(请求)内的表单注册表."""
    registry = g.get(_REGISTRY_ATTR)
    if registry is None:
        state = _state()
        registry = FormRegistry.from_settings(
            state.settings,
            forms_config=state.forms_config,
            content_query=state.content_query,
        )
        setattr(g, _REGISTRY_ATTR, registry)
    return registry


def _submitted_for(form_name: str) -> bool:
    if not has_request_context() or request.method not in _SUBMIT_METHODS:
        return False
    prefix = f"{form_name}-"
    return any(key.startswith(prefix) for key in request.form) or any(key.startswith(prefix) for key in request.files)


def render_configured_form(form_name: str, template: str | None = None, **extra: Any) -> Markup:
    """按配置构建(首次调用时)并渲染表单.

    字段名以表单名为前缀(``contact-email``),请求中带有该前缀的提交数据会被绑定并校验.
    """
    registry = get_registry()
    if not registry.has_form(form_name):
        form = registry.build_from_config(form_name, options={"prefix": form_name})
        if _submitted_for(form_name):
            form.submit(CombinedMultiDict((request.files, request.form)))
    return registry.render_form(form_name, template, extra)


__all__ = ["FormSmith", "FormSmithState", "get_registry", "render_configured_form"]
