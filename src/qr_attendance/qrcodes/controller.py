from __future__ import annotations

import io
import logging

import qrcode
from flask import Flask, jsonify, request, send_file

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.http import bad_request, error_response, roles_required, server_error
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ConcurrentConflict, ValidationError
from .model import DailyCode

logger = logging.getLogger(__name__)


def _code_to_dict(c: DailyCode) -> dict:
    return {
        "code": c.code,
        "date": c.code_date.isoformat(),
        "issued_at": c.issued_at.isoformat(),
        "expires_at": c.expires_at.isoformat(),
        "active": c.is_active,
    }


def render_qr_png(code: str) -> io.BytesIO:
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=2,
    )
    qr.add_data(code)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    buf.seek(0)
    return buf


def register(app: Flask, container: Container) -> None:
    def _date_arg(value):
        return parse_iso_date(value) if value else now_local().date()

    @app.route("/admin/qr/issue", methods=["POST"], endpoint="admin_qr_issue")
    @roles_required(Role.ADMIN)
    def admin_qr_issue():
        """Body: {"date": "YYYY-MM-DD"} (defaults to today). Replaces the date's active code."""
        data = request.get_json(silent=True) or {}
        try:
            code_date = _date_arg(data.get("date"))
            issued = container.qr_code_service.issue(code_date)
        except ValidationError as e:
            return bad_request(str(e))
        except ConcurrentConflict as e:
            return error_response(e)
        except Exception:
            logger.exception("Issuing QR code failed")
            return server_error("System error while issuing QR code")

        return jsonify({"success": True, **_code_to_dict(issued)}), 201

    @app.route("/api/qr/current", methods=["GET"], endpoint="api_qr_current")
    @roles_required(Role.KIOSK, Role.ADMIN)
    def api_qr_current():
        try:
            code_date = _date_arg(request.args.get("date"))
        except ValidationError as e:
            return bad_request(str(e))

        current = container.qr_code_service.current_active(code_date)
        if current is None:
            return jsonify({"success": False, "message": f"No active QR code for {code_date.isoformat()}"}), 404
        return jsonify({"success": True, **_code_to_dict(current)}), 200

    @app.route("/admin/qr/image", methods=["GET"], endpoint="admin_qr_image")
    @roles_required(Role.ADMIN)
    def admin_qr_image():
        """PNG of the date's current code, for printing or the kiosk screen."""
        try:
            code_date = _date_arg(request.args.get("date"))
        except ValidationError as e:
            return bad_request(str(e))

        current = container.qr_code_service.current_active(code_date)
        if current is None:
            return jsonify({"success": False, "message": f"No active QR code for {code_date.isoformat()}"}), 404
        return send_file(
            render_qr_png(current.code),
            mimetype="image/png",
            download_name=f"qr_attendance_{code_date.strftime('%Y%m%d')}.png",
        )

    @app.route("/admin/qr/history", methods=["GET"], endpoint="admin_qr_history")
    @roles_required(Role.ADMIN)
    def admin_qr_history():
        try:
            code_date = _date_arg(request.args.get("date"))
        except ValidationError as e:
            return bad_request(str(e))

        codes = container.qr_code_service.history(code_date)
        return jsonify({"success": True, "date": code_date.isoformat(), "codes": [_code_to_dict(c) for c in codes]}), 200
