from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import error_response
from ..core.exceptions import StoreError
from ..container import Container
from ..database.bootstrap import ping


def register(app: Flask, container: Container) -> None:
    @app.route("/", methods=["GET"], endpoint="index")
    def index():
        return "Backend is live!"

    @app.route("/api/dbtest", methods=["GET"], endpoint="dbtest")
    def dbtest():
        try:
            ok = ping(container.conn)
        except StoreError:
            return error_response("DB test failed", 503)
        if not ok:
            return error_response("DB test failed", 503)
        return jsonify({"success": True})
