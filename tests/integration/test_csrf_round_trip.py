import re

import pytest

from formsmith import create_app
from formsmith.extension import render_configured_form
from formsmith.settings import Settings

_FORMS_YAML = """
{csrf_line}
forms:
  feedback:
    fields:
      name:
        type: text
        options:
          constraints: [NotBlank]
"""


def _build_app(monkeypatch, tmp_path, *, yaml_csrf=None, env_csrf=None):
    csrf_line = "" if yaml_csrf is None else f"csrf: {str(yaml_csrf).lower()}"
    config_path = tmp_path / "forms.yaml"
    config_path.write_text(_FORMS_YAML.format(csrf_line=csrf_line), encoding="utf-8")

    monkeypatch.setenv("FLASK_ENV", "testing")
    monkeypatch.setenv("SECRET_KEY", "test-secret-key")
    monkeypatch.setenv("DATABASE_URL", "sqlite:///:memory:")
    monkeypatch.setenv("FORMS_CONFIG_PATH", str(config_path))
    if env_csrf is None:
        monkeypatch.delenv("FORMS_CSRF", raising=False)
    else:
        monkeypatch.setenv("FORMS_CSRF", str(env_csrf).lower())

    app = create_app(settings=Settings.load())
    app.config["TESTING"] = True

    @app.route("/feedback", methods=["GET", "POST"])
    def _feedback():
        return render_configured_form("feedback", success_message="感谢反馈")

    return app


def _csrf_token(html: str) -> str | None:
    match = re.search(r'name="feedback-csrf_token"[^>]*value="([^"]+)"', html)
    return match.group(1) if match else None


@pytest.mark.integration
def test_csrf_enabled_round_trip(monkeypatch, tmp_path) -> None:
    app = _build_app(monkeypatch, tmp_path)
    client = app.test_client()

    page = client.get("/feedback").get_data(as_text=True)
    token = _csrf_token(page)

    assert app.config["WTF_CSRF_ENABLED"] is True
    assert token

    accepted = client.post("/feedback", data={"feedback-name": "张三", "feedback-csrf_token": token})
    assert accepted.status_code == 200
    assert "感谢反馈" in accepted.get_data(as_text=True)

    rejected = client.post("/feedback", data={"feedback-name": "张三"})
    assert rejected.status_code == 400


@pytest.mark.integration
def test_yaml_csrf_false_disables_global_protection(monkeypatch, tmp_path) -> None:
    app = _build_app(monkeypatch, tmp_path, yaml_csrf=False)
    client = app.test_client()

    page = client.get("/feedback").get_data(as_text=True)
    response = client.post("/feedback", data={"feedback-name": "张三"})

    assert app.config["WTF_CSRF_ENABLED"] is False
    assert _csrf_token(page) is None
    assert response.status_code == 200
    assert "感谢反馈" in response.get_data(as_text=True)


@pytest.mark.integration
def test_yaml_csrf_true_overrides_disabled_setting(monkeypatch, tmp_path) -> None:
    app = _build_app(monkeypatch, tmp_path, yaml_csrf=True, env_csrf=False)
    client = app.test_client()

    page = client.get("/feedback").get_data(as_text=True)
    response = client.post("/feedback", data={"feedback-name": "张三"})

    assert app.config["WTF_CSRF_ENABLED"] is True
    assert _csrf_token(page)
    assert response.status_code == 400
