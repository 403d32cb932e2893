from __future__ import annotations

import pytest
from markupsafe import Markup

from formsmith.forms.render import RenderBridge
from formsmith.forms.view import FormView


@pytest.mark.unit
def test_extra_variables_win_over_form() -> None:
    bridge = RenderBridge("default.html", renderer=lambda name, **context: "")
    view = FormView(name="contact")

    context = bridge.build_context(view, {"form": "override", "title": "联系"})

    assert context == {"form": "override", "title": "联系"}
    assert bridge.build_context(view) == {"form": view}


@pytest.mark.unit
def test_render_marks_output_safe_without_escaping() -> None:
    seen = {}

    def _renderer(name, **context):
        seen["name"] = name
        return "<form><input name='a'></form>"

    bridge = RenderBridge("default.html", renderer=_renderer)

    html = bridge.render(FormView(name="contact"))

    assert isinstance(html, Markup)
    assert str(html) == "<form><input name='a'></form>"
    assert seen["name"] == "default.html"

    bridge.render(FormView(name="contact"), "other.html")
    assert seen["name"] == "other.html"
