from __future__ import annotations

from typing import Any, Dict

from flask import jsonify, request

STORE_FAILURE_MESSAGE = "Database operation failed"


def json_body() -> Dict[str, Any]:
    """Request JSON as a dict; absent or malformed bodies read as `{}`."""

    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def error_response(message: str, status: int):
    return jsonify({"error": message}), status
