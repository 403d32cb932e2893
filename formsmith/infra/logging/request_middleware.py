"""请求级别的上下文注入(Infra).

让 request_id 通过 contextvars 在整个请求生命周期可用,用于诊断日志关联.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING
from uuid import uuid4

from flask import Flask, g, request

from formsmith.utils.logging.context_vars import request_id_var

if TYPE_CHECKING:
    from contextvars import Token

_REQUEST_ID_HEADER = "X-Request-ID"
_REQUEST_ID_MAX_LEN = 128
_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.:-]{0,127}$")


def _generate_request_id() -> str:
    return f"req_{uuid4().hex}"


def _sanitize_request_id(raw_value: str | None) -> str | None:
    if not raw_value:
        return None
    value = raw_value.strip()
    if not value or len(value) > _REQUEST_ID_MAX_LEN:
        return None
    if not _REQUEST_ID_PATTERN.match(value):
        return None
    return value


def register_request_logging(app: Flask) -> None:
    """注册请求级别的 request_id 注入与清理."""

    @app.before_request
    def _bind_request_context() -> None:
        request_id = _sanitize_request_id(request.headers.get(_REQUEST_ID_HEADER)) or _generate_request_id()
        token: Token[str | None] = request_id_var.set(request_id)
        # teardown 时 reset,避免同线程后续请求串号
        g._request_id_token = token
        g.request_id = request_id

    @app.teardown_request
    def _reset_request_context(_exc: BaseException | None) -> None:
        token = g.pop("_request_id_token", None)
        if token is not None:
            request_id_var.reset(token)
