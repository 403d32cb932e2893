"""表单工坊 - Flask 应用初始化.

基于配置文件动态装配 HTML 表单.
"""

import logging

from flask import Flask, jsonify
from flask.typing import ResponseReturnValue
from flask_sqlalchemy import SQLAlchemy
from flask_wtf.csrf import CSRFProtect

from formsmith.errors import AppError
from formsmith.extension import FormSmith
from formsmith.infra.logging import register_request_logging
from formsmith.settings import Settings
from formsmith.utils.structlog_config import configure_structlog, get_system_logger, log_error

# 初始化扩展
db = SQLAlchemy()
csrf = CSRFProtect()
formsmith = FormSmith()


def create_app(*, settings: Settings | None = None) -> Flask:
    """创建Flask应用实例.

    Args:
        settings: 可选的配置对象,用于测试或多环境启动.

    Returns:
        Flask: Flask应用实例

    """
    resolved_settings = settings or Settings.load()
    app = Flask(__name__)
    app.config.update(resolved_settings.to_flask_config())

    # 初始化扩展
    db.init_app(app)
    csrf.init_app(app)
    formsmith.init_app(app, resolved_settings)

    # 配置统一日志系统
    configure_structlog(app)
    register_request_logging(app)
    logging.getLogger().setLevel(getattr(logging, resolved_settings.log_level, logging.INFO))

    @app.errorhandler(AppError)
    def handle_app_error(error: AppError) -> ResponseReturnValue:
        """业务异常统一输出."""
        log_error(error.message, module="system", error_type=error.__class__.__name__, extra=error.extra)
        payload = {
            "error": True,
            "message": error.message,
            "message_code": error.message_key,
            "category": error.category.value,
            "severity": error.severity.value,
            "recoverable": error.recoverable,
        }
        return jsonify(payload), error.status_code

    get_system_logger().info("表单工坊应用已创建", environment=resolved_settings.environment)
    return app


__all__ = ["create_app", "csrf", "db", "formsmith"]
