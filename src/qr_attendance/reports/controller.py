from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.http import bad_request, roles_required
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError

MAX_RANGE_DAYS = 31


def register(app: Flask, container: Container) -> None:
    @app.route("/api/reports/daily", methods=["GET"], endpoint="api_report_daily")
    @roles_required(Role.ADMIN)
    def api_report_daily():
        try:
            work_date = parse_iso_date(request.args["date"]) if request.args.get("date") else now_local().date()
        except ValidationError as e:
            return bad_request(str(e))

        summary = container.report_service.build_daily_summary(work_date)
        return jsonify({"success": True, **summary.to_dict()}), 200

    @app.route("/api/reports/range", methods=["GET"], endpoint="api_report_range")
    @roles_required(Role.ADMIN)
    def api_report_range():
        start_s = request.args.get("start")
        end_s = request.args.get("end")
        if not start_s or not end_s:
            return bad_request("Missing start/end")

        try:
            start = parse_iso_date(start_s)
            end = parse_iso_date(end_s)
        except ValidationError as e:
            return bad_request(str(e))
        if end < start or (end - start).days >= MAX_RANGE_DAYS:
            return bad_request(f"Range must be 1..{MAX_RANGE_DAYS} days")

        days = container.report_service.build_range_summary(start, end)
        return jsonify({"success": True, "days": [d.to_dict() for d in days]}), 200
