from __future__ import annotations

from functools import wraps

from flask import jsonify, session

from ..core.enums import Role, ScanError
from ..core.exceptions import ConcurrentConflict, ScanRejected

# Every ScanError must appear here; tests assert the table is exhaustive.
SCAN_ERROR_HTTP_STATUS: dict[ScanError, int] = {
    ScanError.EMPLOYEE_NOT_FOUND: 404,
    ScanError.EMPLOYEE_INACTIVE: 403,
    ScanError.CODE_NOT_FOUND: 404,
    ScanError.CODE_INACTIVE: 410,
    ScanError.CODE_EXPIRED: 410,
    ScanError.ALREADY_COMPLETED: 409,
    ScanError.CONCURRENT_CONFLICT: 409,
}


def roles_required(*roles: Role):
    """Allow the view only for sessions whose `role` is one of `roles`.

    The session is filled by the external login layer; this app never
    authenticates anyone itself.
    """

    allowed = {r.value for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            role = session.get("role")
            if not role:
                return jsonify({"success": False, "message": "Login required"}), 401
            if role not in allowed:
                return jsonify({"success": False, "message": "Forbidden"}), 403
            return view(*args, **kwargs)

        return wrapper

    return decorator


def error_response(e: ScanRejected | ConcurrentConflict):
    return (
        jsonify({"success": False, "error": e.kind.value, "message": str(e), "retryable": isinstance(e, ConcurrentConflict)}),
        SCAN_ERROR_HTTP_STATUS[e.kind],
    )


def bad_request(message: str):
    return jsonify({"success": False, "error": "invalid_request", "message": message}), 400


def server_error(message: str):
    return jsonify({"success": False, "error": "server_error", "message": message}), 500
