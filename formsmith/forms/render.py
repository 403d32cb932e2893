"""渲染桥接: 将表单视图交给模板引擎,并把结果标记为可信 HTML."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from flask import render_template
from markupsafe import Markup

from formsmith.settings import DEFAULT_FORM_TEMPLATE
from formsmith.types import ExtraTemplateVariables, TemplateContext

if TYPE_CHECKING:
    from formsmith.forms.view import FormView

Renderer = Callable[..., str]


class RenderBridge:
    """模板渲染适配器.

    转义由模板引擎负责,这里不做任何转义.

    Attributes:
        default_template: 未指定模板时使用的模板名.

    """

    def __init__(self, default_template: str = DEFAULT_FORM_TEMPLATE, renderer: Renderer | None = None) -> None:
        self.default_template = default_template
        self._renderer = renderer or render_template

    def build_context(self, view: FormView, extra: ExtraTemplateVariables | None = None) -> TemplateContext:
        """组装模板上下文,extra 后写入,同名键(包括 form)以 extra 为准."""
        context: TemplateContext = {"form": view}
        for name, value in (extra or {}).items():
            context[name] = value
        return context

    def render(
        self,
        view: FormView,
        template: str | None = None,
        extra: ExtraTemplateVariables | None = None,
    ) -> Markup:
        """渲染表单视图.

        Args:
            view: 表单视图快照.
            template: 模板名,为空时使用 default_template.
            extra: 额外模板变量.

        Returns:
            可信的 HTML 片段.

        """
        template_name = template or self.default_template
        html = self._renderer(template_name, **self.build_context(view, extra))
        return Markup(html)


__all__ = ["RenderBridge", "Renderer"]
