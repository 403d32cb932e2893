"""表单工坊的结构化日志配置与辅助函数."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, cast

import structlog
from flask import Flask, current_app, has_request_context

from formsmith.settings import APP_NAME, APP_VERSION
from formsmith.types import ContextDict, JsonValue, LoggerExtra, StructlogEventDict
from formsmith.utils.logging.context_vars import request_id_var
from formsmith.utils.logging.handlers import DebugFilter

if TYPE_CHECKING:
    from structlog.typing import BindableLogger, Processor

LogField = JsonValue | ContextDict | LoggerExtra


class StructlogConfig:
    """structlog 配置核心类.

    负责配置处理器链与调试日志过滤.

    Attributes:
        debug_filter: 调试日志过滤器.
        configured: 是否已配置标志.

    Example:
        >>> config = StructlogConfig()
        >>> config.configure(app)
        >>> logger = get_logger('my_module')

    """

    def __init__(self) -> None:
        self.debug_filter = DebugFilter(enabled=False)
        self.configured = False

    def configure(self, app: Flask | None = None) -> None:
        """初始化 structlog 处理器(幂等).

        Args:
            app: Flask 应用实例,可选.如果提供,将读取 ENABLE_DEBUG_LOG 配置.

        """
        if not self.configured:
            processors = [
                self.debug_filter,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.stdlib.add_log_level,
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                self._add_request_context,
                self._add_global_context,
                self._get_renderer(),
            ]
            structlog.configure(
                processors=cast("list[structlog.types.Processor]", processors),
                context_class=dict,
                logger_factory=structlog.stdlib.LoggerFactory(),
                wrapper_class=structlog.stdlib.BoundLogger,
                cache_logger_on_first_use=True,
            )
            self.configured = True

        if app is not None:
            enable_debug = bool(app.config.get("ENABLE_DEBUG_LOG", False))
            self.debug_filter.set_enabled(enabled=enable_debug)

    @staticmethod
    def _add_request_context(
        _logger: BindableLogger,
        _method_name: str,
        event_dict: StructlogEventDict,
    ) -> StructlogEventDict:
        """向事件字典写入请求上下文."""
        if has_request_context():
            event_dict["request_id"] = request_id_var.get()
        return event_dict

    @staticmethod
    def _add_global_context(
        _logger: BindableLogger,
        _method_name: str,
        event_dict: StructlogEventDict,
    ) -> StructlogEventDict:
        """附加应用名、版本等全局上下文.

        Args:
            logger: 当前 logger.
            method_name: 日志方法.
            event_dict: 事件字典.

        Returns:
            更新后的事件字典.

        """
        try:
            event_dict["app_name"] = current_app.config["APP_NAME"]
            event_dict["app_version"] = current_app.config["APP_VERSION"]
        except (RuntimeError, KeyError):
            event_dict["app_name"] = APP_NAME
            event_dict["app_version"] = APP_VERSION

        event_dict["logger_name"] = getattr(_logger, "name", "unknown")
        return event_dict

    @staticmethod
    def _get_renderer() -> Processor:
        """根据终端能力返回渲染器.

        Returns:
            终端时使用彩色控制台渲染,否则输出 JSON.

        """
        if sys.stdout.isatty():
            return structlog.dev.ConsoleRenderer(colors=True)
        return structlog.processors.JSONRenderer()


structlog_config = StructlogConfig()


def get_logger(name: str) -> structlog.BoundLogger:
    """获取结构化日志记录器.

    Args:
        name: 日志记录器名称,通常使用模块名.

    Returns:
        绑定的 structlog 日志记录器实例.

    Example:
        >>> logger = get_logger('forms')
        >>> logger.info('表单已创建', form_name='contact')

    """
    structlog_config.configure()
    return structlog.get_logger(name)


def configure_structlog(app: Flask) -> None:
    """配置 structlog 并注册 Flask 钩子.

    Args:
        app: Flask 应用实例.

    """
    structlog_config.configure(app)

    @app.teardown_appcontext
    def log_teardown_error(exception: BaseException | None) -> None:
        if exception:
            get_logger("app").error("应用请求处理异常", module="system", exception=str(exception))


def log_info(message: str, module: str = "app", **kwargs: LogField) -> None:
    """记录信息级别日志.

    Example:
        >>> log_info('表单渲染完成', module='forms', form_name='contact')

    """
    get_logger("app").info(message, module=module, **kwargs)


def log_warning(
    message: str,
    module: str = "app",
    exception: Exception | None = None,
    **kwargs: LogField,
) -> None:
    """记录警告级别日志.

    Args:
        message: 日志消息.
        module: 模块名称,默认为 'app'.
        exception: 可选的异常对象.
        **kwargs: 额外的上下文信息.

    """
    logger = get_logger("app")
    if exception:
        logger.warning(message, module=module, exception=str(exception), **kwargs)
    else:
        logger.warning(message, module=module, **kwargs)


def log_error(
    message: str,
    module: str = "app",
    exception: Exception | None = None,
    **kwargs: LogField,
) -> None:
    """记录错误级别日志.

    Args:
        message: 日志消息.
        module: 模块名称,默认为 'app'.
        exception: 可选的异常对象,会记录堆栈信息.
        **kwargs: 额外的上下文信息.

    """
    logger = get_logger("app")
    if exception:
        logger.exception(message, module=module, error=str(exception), **kwargs)
    else:
        logger.error(message, module=module, **kwargs)


def log_debug(message: str, module: str = "app", **kwargs: LogField) -> None:
    """记录调试级别日志(是否输出由 DebugFilter 决定)."""
    get_logger("app").debug(message, module=module, **kwargs)


def get_system_logger() -> structlog.BoundLogger:
    """返回系统级 logger."""
    return get_logger("system")


def get_forms_logger() -> structlog.BoundLogger:
    """返回表单装配 logger."""
    return get_logger("forms")


__all__ = [
    "configure_structlog",
    "get_forms_logger",
    "get_logger",
    "get_system_logger",
    "log_debug",
    "log_error",
    "log_info",
    "log_warning",
    "structlog_config",
]
