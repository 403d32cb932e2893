"""表单工坊 - 本地开发环境启动文件."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Final

from formsmith import create_app, db
from formsmith.utils.structlog_config import get_system_logger

if TYPE_CHECKING:
    from flask import Flask

os.environ.setdefault("FLASK_ENV", "development")

DEFAULT_HOST: Final[str] = "127.0.0.1"
DEFAULT_PORT: Final[str] = "5001"
DEFAULT_DEBUG: Final[str] = "true"


def _ensure_tables(flask_app: Flask) -> None:
    """确保内容记录表存在, 便于本地调试动态选项."""
    with flask_app.app_context():
        db.create_all()


def _load_runtime_config() -> tuple[str, int, bool]:
    """读取开发服务器运行参数."""
    host = os.environ.get("FLASK_HOST") or DEFAULT_HOST
    port = int(os.environ.get("FLASK_PORT", DEFAULT_PORT))
    debug = os.environ.get("FLASK_DEBUG", DEFAULT_DEBUG).lower() == "true"
    return host, port, debug


def main() -> None:
    """启动 Flask 开发服务器."""
    app = create_app()
    host, port, debug = _load_runtime_config()
    _ensure_tables(app)
    get_system_logger().info("表单工坊开发环境已启动", host=host, port=port, debug=debug)
    app.run(host=host, port=port, debug=debug, use_reloader=False)


if __name__ == "__main__":
    main()
