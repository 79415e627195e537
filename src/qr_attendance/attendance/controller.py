from __future__ import annotations

import json
import logging
import queue

from flask import Flask, Response, jsonify, request
from PIL import Image

from ..common.datetime_utils import now_local, parse_iso_date, parse_timestamp
from ..common.http import bad_request, error_response, roles_required, server_error
from ..common.validators import require_non_empty, require_positive
from ..container import Container
from ..core.constants import DEFAULT_FEED_LIMIT
from ..core.enums import Role
from ..core.exceptions import ConcurrentConflict, ScanRejected, ValidationError

logger = logging.getLogger(__name__)

STREAM_KEEPALIVE_SECONDS = 15


def register(app: Flask, container: Container) -> None:
    def _scan(employee_code: str, code: str, timestamp: str | None):
        try:
            employee_code = require_non_empty(employee_code, "employee_id")
            code = require_non_empty(code, "code")
            now = parse_timestamp(timestamp) if timestamp else now_local()
            outcome = container.attendance_service.process_scan_with_retry(employee_code, code, now=now)
            return jsonify({"success": True, **outcome.to_dict()}), 200
        except ValidationError as e:
            return bad_request(str(e))
        except (ScanRejected, ConcurrentConflict) as e:
            return error_response(e)
        except Exception:
            logger.exception("Scan failed for employee %r", employee_code)
            return server_error("System error while recording attendance")

    @app.route("/api/scan", methods=["POST"], endpoint="api_scan")
    @roles_required(Role.KIOSK, Role.ADMIN)
    def api_scan():
        """Body: {"employee_id": str, "code": str, "timestamp": ISO-8601 (optional)}."""
        data = request.get_json(silent=True) or {}
        return _scan(str(data.get("employee_id") or ""), str(data.get("code") or ""), data.get("timestamp"))

    @app.route("/api/scan/image", methods=["POST"], endpoint="api_scan_image")
    @roles_required(Role.KIOSK, Role.ADMIN)
    def api_scan_image():
        """Multipart upload: `image` (photo of the QR code) and `employee_id`."""
        # zbar is a system library; import on use so the other endpoints work without it.
        from pyzbar.pyzbar import decode as pyzbar_decode

        if "image" not in request.files:
            return bad_request("Missing image file")

        try:
            img = Image.open(request.files["image"].stream).convert("RGB")
        except OSError:
            # UnidentifiedImageError and truncated files both land here.
            return bad_request("Uploaded file is not a readable image")

        decoded = pyzbar_decode(img)
        if not decoded:
            return bad_request("No QR code found in image")

        try:
            scanned_code = decoded[0].data.decode("utf-8").strip()
        except UnicodeDecodeError:
            return bad_request("QR code does not contain text")
        return _scan(request.form.get("employee_id", ""), scanned_code, request.form.get("timestamp"))

    @app.route("/api/attendance", methods=["GET"], endpoint="api_attendance_list")
    @roles_required(Role.ADMIN)
    def api_attendance_list():
        try:
            work_date = parse_iso_date(request.args["date"]) if request.args.get("date") else now_local().date()
            limit = require_positive(int(request.args.get("limit", DEFAULT_FEED_LIMIT)), "limit")
        except (ValidationError, ValueError) as e:
            return bad_request(str(e))

        rows = container.attendance_service.list_for_date(work_date, limit=limit)
        return jsonify({"success": True, "date": work_date.isoformat(), "rows": [r.to_dict() for r in rows]}), 200

    @app.route("/api/attendance/record", methods=["GET"], endpoint="api_attendance_record")
    @roles_required(Role.KIOSK, Role.ADMIN)
    def api_attendance_record():
        try:
            employee_code = require_non_empty(request.args.get("employee_id", ""), "employee_id")
            work_date = parse_iso_date(request.args["date"]) if request.args.get("date") else now_local().date()
        except ValidationError as e:
            return bad_request(str(e))

        record = container.attendance_service.get_record(employee_code, work_date)
        if record is None:
            return jsonify({"success": False, "message": "No attendance record"}), 404
        return (
            jsonify(
                {
                    "success": True,
                    "employee_id": employee_code,
                    "date": record.work_date.isoformat(),
                    "check_in": record.check_in_time.isoformat(),
                    "check_out": record.check_out_time.isoformat() if record.check_out_time else None,
                    "status": record.status.value,
                    "note": record.note,
                }
            ),
            200,
        )

    @app.route("/api/attendance/stream", methods=["GET"], endpoint="api_attendance_stream")
    @roles_required(Role.ADMIN)
    def api_attendance_stream():
        """Server-sent events: one `attendance` event per recorded scan."""
        q = container.broadcaster.subscribe()

        def generate():
            try:
                yield ": connected\n\n"
                while True:
                    try:
                        payload = q.get(timeout=STREAM_KEEPALIVE_SECONDS)
                    except queue.Empty:
                        yield ": keep-alive\n\n"
                        continue
                    yield f"event: attendance\ndata: {json.dumps(payload)}\n\n"
            finally:
                container.broadcaster.unsubscribe(q)

        return Response(generate(), mimetype="text/event-stream", headers={"Cache-Control": "no-cache"})
