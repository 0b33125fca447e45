"""Flask application serving the dashboard page and its data endpoint."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from flask import Flask, jsonify

from .config import load_config
from .dashboard import load_dashboard
from .rendering import render_dashboard_html

LOGGER = logging.getLogger(__name__)


def create_app(config: Optional[Dict[str, Any]] = None) -> Flask:
    app = Flask(__name__)
    app.config["DASHBOARD"] = config if config is not None else load_config()

    @app.get("/healthz")
    def healthz():
        return jsonify({"status": "ok"})

    @app.get("/api/dashboard-data")
    def dashboard_data():
        response = load_dashboard(app.config["DASHBOARD"])
        status = 200 if response.success else 500
        return jsonify(response.to_dict()), status

    @app.get("/")
    def dashboard_page():
        response = load_dashboard(app.config["DASHBOARD"])
        status = 200 if response.success else 500
        return render_dashboard_html(response), status

    LOGGER.debug("Dashboard application created")
    return app
