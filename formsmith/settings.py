"""表单工坊 - 统一配置读取与校验.

目标:
- 将环境变量读取、默认值、校验集中到单一入口,避免散落在各模块中重复解析.
- `create_app(settings=...)` 只消费 Settings,不再直接读取环境变量.

说明:
- Settings 使用 `pydantic-settings` 的 `BaseSettings` 从环境变量与本地 `.env`(可选)读取配置.
- 表单级配置(字段、约束、选项)由 `formsmith.forms.config` 从 YAML 文件读取,此处只保存其路径与全局缺省值.
"""

from __future__ import annotations

import logging
import secrets
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from formsmith.constants import LogLevel

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DOTENV_PATH = PROJECT_ROOT / ".env"

APP_NAME = "表单工坊"
APP_VERSION = "1.0.0"
DEFAULT_ENVIRONMENT = "development"

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_FORMS_CONFIG_PATH = "config/forms.yaml"
DEFAULT_FORM_TEMPLATE = "formsmith/form.html"
DEFAULT_FORMS_CSRF = True

_LOG_LEVELS = {level.value for level in LogLevel}


def _resolve_sqlite_fallback_url() -> str:
    return f"sqlite:///{(PROJECT_ROOT / 'userdata' / 'formsmith_dev.db').absolute()}"


class Settings(BaseSettings):
    """应用运行时设置集合."""

    model_config = SettingsConfigDict(
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
        str_strip_whitespace=True,
    )

    environment: str = Field(default=DEFAULT_ENVIRONMENT, validation_alias="FLASK_ENV")
    debug: bool = Field(default=False, validation_alias="FLASK_DEBUG")

    app_name: str = Field(default=APP_NAME, validation_alias="APP_NAME")
    app_version: str = APP_VERSION

    secret_key: str = Field(default="", validation_alias="SECRET_KEY")
    database_url: str = Field(default="", validation_alias="DATABASE_URL")

    log_level: str = Field(default=DEFAULT_LOG_LEVEL, validation_alias="LOG_LEVEL")
    enable_debug_log: bool = Field(default=False, validation_alias="ENABLE_DEBUG_LOG")

    # 表单全局设置: YAML 中的 csrf / templates.form 会覆盖这里的缺省值
    forms_config_path: str = Field(default=DEFAULT_FORMS_CONFIG_PATH, validation_alias="FORMS_CONFIG_PATH")
    forms_csrf: bool = Field(default=DEFAULT_FORMS_CSRF, validation_alias="FORMS_CSRF")
    forms_template: str = Field(default=DEFAULT_FORM_TEMPLATE, validation_alias="FORMS_TEMPLATE")

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return value.upper()

    @property
    def is_production(self) -> bool:
        """当前是否为生产环境."""
        return self.environment.strip().lower() == "production"

    @property
    def resolved_forms_config_path(self) -> Path:
        """表单配置文件的绝对路径,相对路径按项目根目录解析."""
        path = Path(self.forms_config_path)
        if path.is_absolute():
            return path
        return PROJECT_ROOT / path

    def to_flask_config(self) -> dict[str, object]:
        """转换为 Flask app.config 可写入的配置字典."""
        return {
            "ENV": self.environment,
            "DEBUG": self.debug,
            "APP_NAME": self.app_name,
            "APP_VERSION": self.app_version,
            "SECRET_KEY": self.secret_key,
            "SQLALCHEMY_DATABASE_URI": self.database_url,
            "SQLALCHEMY_TRACK_MODIFICATIONS": False,
            "LOG_LEVEL": self.log_level,
            "ENABLE_DEBUG_LOG": self.enable_debug_log,
            "WTF_CSRF_ENABLED": self.forms_csrf,
            "FORMS_CONFIG_PATH": str(self.resolved_forms_config_path),
            "FORMS_CSRF": self.forms_csrf,
            "FORMS_TEMPLATE": self.forms_template,
        }

    @classmethod
    def load(cls) -> Settings:
        """从环境变量加载 Settings 并执行必要校验."""
        load_dotenv(dotenv_path=DOTENV_PATH if DOTENV_PATH.exists() else None, override=False)
        return cls()

    @model_validator(mode="after")
    def _apply_defaults_and_validate(self) -> Settings:
        environment_normalized = self.environment.strip().lower()

        debug = self._resolve_debug(environment_normalized)
        self._ensure_secret_key(debug)
        self._ensure_database_url(environment_normalized)

        self._validate()
        return self

    def _resolve_debug(self, environment_normalized: str) -> bool:
        if "debug" in self.model_fields_set:
            return bool(self.debug)
        debug = environment_normalized != "production"
        object.__setattr__(self, "debug", debug)
        return debug

    def _ensure_secret_key(self, debug: bool) -> None:
        if self.secret_key:
            return
        if not debug:
            raise ValueError("SECRET_KEY environment variable must be set in production")
        object.__setattr__(self, "secret_key", secrets.token_urlsafe(32))
        logger.warning("⚠️  开发环境使用随机生成的SECRET_KEY,生产环境请设置环境变量")

    def _ensure_database_url(self, environment_normalized: str) -> None:
        if self.database_url:
            return
        if environment_normalized == "production":
            raise ValueError("DATABASE_URL environment variable must be set in production")
        object.__setattr__(self, "database_url", _resolve_sqlite_fallback_url())
        if environment_normalized not in {"testing", "test"}:
            logger.warning("⚠️  未设置 DATABASE_URL, 非 production 环境将回退 SQLite")

    def _validate(self) -> None:
        """执行跨字段校验,统一抛出可读的 ValueError."""
        errors: list[str] = []
        checks: list[tuple[str, bool]] = [
            ("LOG_LEVEL 仅支持 DEBUG/INFO/WARNING/ERROR/CRITICAL", self.log_level not in _LOG_LEVELS),
            ("FORMS_TEMPLATE 不能为空", not self.forms_template),
            ("FORMS_CONFIG_PATH 不能为空", not self.forms_config_path),
        ]
        for message, condition in checks:
            if condition:
                errors.append(message)

        if errors:
            joined = "; ".join(errors)
            raise ValueError(f"配置校验失败: {joined}")
