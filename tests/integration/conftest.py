# tests/integration/conftest.py
"""集成测试专用 fixtures.

使用内存 SQLite 创建完整应用,覆盖模板渲染与内容查询.
"""

import pytest

from formsmith import create_app, db
from formsmith.models import ContentRecord
from formsmith.settings import Settings


@pytest.fixture(scope="function")
def app(monkeypatch):
    """创建测试应用实例."""
    monkeypatch.setenv("FLASK_ENV", "testing")
    monkeypatch.setenv("SECRET_KEY", "test-secret-key")
    monkeypatch.setenv("DATABASE_URL", "sqlite:///:memory:")
    monkeypatch.setenv("FORMS_CSRF", "false")
    monkeypatch.delenv("FORMS_CONFIG_PATH", raising=False)
    monkeypatch.delenv("FORMS_TEMPLATE", raising=False)

    app = create_app(settings=Settings.load())
    app.config["TESTING"] = True

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope="function")
def pages(app):
    """写入 pages 内容记录,其中一条为草稿."""
    records = [
        ContentRecord(contenttype="pages", slug="about", title="关于我们"),
        ContentRecord(contenttype="pages", slug="contact", title="联系方式"),
        ContentRecord(contenttype="pages", slug="draft", title="草稿", status="draft"),
        ContentRecord(contenttype="articles", slug="news", title="新闻"),
    ]
    db.session.add_all(records)
    db.session.commit()
    return records
