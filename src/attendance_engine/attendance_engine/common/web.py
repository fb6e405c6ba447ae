"""Shared helpers of the JSON controllers."""

from __future__ import annotations

import dataclasses
from datetime import date, datetime, time
from enum import Enum
from functools import wraps
from typing import Any

from flask import jsonify, session

from ..core.enums import ErrorKind, Role
from ..core.result import Result

ERROR_STATUS = {
    ErrorKind.CONFLICT: 409,
    ErrorKind.INVALID_SESSION: 400,
    ErrorKind.UNKNOWN_CARD: 404,
    ErrorKind.INVALID_STATE: 409,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.VALIDATION: 400,
    ErrorKind.CONFIG_UNAVAILABLE: 503,
    ErrorKind.STORE_FAILURE: 503,
}


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "message": "Login required"}), 401
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    allowed = {r.value for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"success": False, "message": "Login required"}), 401
            if session.get("role") not in allowed:
                return jsonify({"success": False, "message": "Permission denied"}), 403
            return view(*args, **kwargs)

        return wrapper

    return decorator


def current_user_id() -> int:
    return int(session["user_id"])


def to_json(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        data = {f.name: to_json(getattr(value, f.name)) for f in dataclasses.fields(value)}
        # Summaries expose their totals as properties.
        for name in ("closed", "marked_absent"):
            if name not in data and hasattr(value, name):
                data[name] = getattr(value, name)
        return data
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [to_json(v) for v in value]
    if isinstance(value, dict):
        return {k: to_json(v) for k, v in value.items()}
    return value


def result_response(result: Result, *, key: str = "data"):
    if result.ok:
        body = {"success": True, key: to_json(result.value)}
        if result.message:
            body["message"] = result.message
        return jsonify(body), 200

    body = {
        "success": False,
        "error": result.error.value if result.error else None,
        "message": result.message,
        "retryable": result.retryable,
    }
    return jsonify(body), ERROR_STATUS.get(result.error, 400)
