from __future__ import annotations

import pytest
import structlog
from flask import Flask, g

from formsmith.infra.logging import register_request_logging
from formsmith.utils.logging.context_vars import request_id_var
from formsmith.utils.logging.handlers import DebugFilter


@pytest.mark.unit
def test_debug_filter_drops_debug_events_when_disabled() -> None:
    debug_filter = DebugFilter(enabled=False)

    with pytest.raises(structlog.DropEvent):
        debug_filter(None, "debug", {"event": "x"})
    assert debug_filter(None, "info", {"event": "x"}) == {"event": "x"}

    debug_filter.set_enabled(enabled=True)
    assert debug_filter(None, "debug", {"event": "x"}) == {"event": "x"}


@pytest.mark.unit
def test_request_logging_binds_and_resets_request_id() -> None:
    app = Flask(__name__)
    register_request_logging(app)
    seen = {}

    @app.route("/ping")
    def _ping():
        seen["request_id"] = g.request_id
        seen["context"] = request_id_var.get()
        return "pong"

    client = app.test_client()
    client.get("/ping", headers={"X-Request-ID": "abc-123"})
    assert seen == {"request_id": "abc-123", "context": "abc-123"}

    client.get("/ping", headers={"X-Request-ID": "bad id with spaces"})
    assert seen["request_id"].startswith("req_")
    assert request_id_var.get() is None
