from __future__ import annotations

from flask import Flask, request

from ..common.auth import admin_required, current_role
from ..common.datetime_utils import month_range
from ..common.http import ok
from ..common.validators import optional_date, parse_id_list
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/reports/attendance", endpoint="attendance_report")
    @admin_required
    def attendance_report():
        report = container.report_service.build_report(
            current_role=current_role(),
            start=optional_date(request.args.get("start"), "Start date"),
            end=optional_date(request.args.get("end"), "End date"),
            user_ids=parse_id_list(request.args.get("user_ids")),
        )
        return ok(container.report_service.payload(report))

    @app.route("/api/admin/reports/monthly", endpoint="monthly_report")
    @admin_required
    def monthly_report():
        month = (request.args.get("month") or "").strip()
        if not month:
            report = container.report_service.monthly_report(current_role=current_role())
        else:
            try:
                year, month_no = (int(p) for p in month.split("-", 1))
                start, end = month_range(year, month_no)
            except ValueError:
                raise ValidationError("month must be YYYY-MM")
            report = container.report_service.build_report(current_role=current_role(), start=start, end=end)
        return ok(container.report_service.payload(report))
