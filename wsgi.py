"""表单工坊 - WSGI 入口文件。."""

from __future__ import annotations

import os

from formsmith import create_app

os.environ.setdefault("FLASK_ENV", "production")

application = app = create_app()
