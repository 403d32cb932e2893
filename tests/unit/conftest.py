# tests/unit/conftest.py
"""单元测试专用 fixtures.

提供最小 Flask 应用上下文与诊断、内容查询的替身实现。
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

import pytest
from flask import Flask

from formsmith.constants import ErrorSeverity
from formsmith.errors import ChoiceSourceUnavailableError


@pytest.fixture(autouse=True)
def _unit_test_env(monkeypatch):
    """为 unit tests 强制注入隔离环境变量.

    避免开发者本机的 .env 或环境变量影响测试稳定性。
    """
    monkeypatch.setenv("FLASK_ENV", "testing")
    monkeypatch.setenv("SECRET_KEY", "test-secret-key")
    monkeypatch.setenv("DATABASE_URL", "sqlite:///:memory:")
    monkeypatch.delenv("FORMS_CONFIG_PATH", raising=False)
    monkeypatch.delenv("FORMS_CSRF", raising=False)
    monkeypatch.delenv("FORMS_TEMPLATE", raising=False)


class RecordingDiagnosticSink:
    """记录全部诊断,便于断言数量与类型."""

    def __init__(self) -> None:
        self.records: list[tuple[ErrorSeverity, str, dict]] = []

    def emit(self, severity: ErrorSeverity, message: str, context: Mapping) -> None:
        self.records.append((severity, message, dict(context)))

    @property
    def kinds(self) -> list[str]:
        return [context["diagnostic_kind"] for _, _, context in self.records]

    @property
    def messages(self) -> list[str]:
        return [message for _, message, _ in self.records]


class StubContentQuery:
    """内存中的内容查询协作方."""

    def __init__(self, records: Mapping[str, Sequence[object]] | None = None, *, unavailable: bool = False) -> None:
        self.records = dict(records or {})
        self.unavailable = unavailable
        self.calls: list[str] = []

    def fetch_all(self, category: str) -> list[object]:
        self.calls.append(category)
        if self.unavailable:
            raise ChoiceSourceUnavailableError("数据库不可用", extra={"contenttype": category})
        return list(self.records.get(category, ()))


@pytest.fixture
def diagnostics() -> RecordingDiagnosticSink:
    return RecordingDiagnosticSink()


@pytest.fixture
def content_query() -> StubContentQuery:
    return StubContentQuery(
        {
            "pages": [
                {"id": 1, "title": "关于我们", "values": {}},
                {"id": 2, "title": "", "values": {}},
                {"id": 3, "values": {"title": "联系方式"}},
            ],
        },
    )


@pytest.fixture
def flask_app() -> Flask:
    """最小 Flask 应用,仅用于提供 WTForms 所需的应用/请求上下文."""
    app = Flask(__name__)
    app.config.update(SECRET_KEY="test-secret-key", TESTING=True, WTF_CSRF_ENABLED=True)
    return app


@pytest.fixture
def app_context(flask_app):
    with flask_app.app_context():
        yield flask_app


@pytest.fixture
def request_context(flask_app):
    with flask_app.test_request_context("/"):
        yield flask_app


@pytest.fixture
def unavailable_query() -> StubContentQuery:
    return StubContentQuery(unavailable=True)
