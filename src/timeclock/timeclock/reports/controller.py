from __future__ import annotations

from dataclasses import asdict

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date, today_iso
from ..container import Container
from ..users import session as gate
from . import export
from .service import RangeReport, week_range


def register(app: Flask, container: Container) -> None:
    def _report() -> RangeReport:
        start = request.args.get("from")
        end = request.args.get("to")
        if not (start and end):
            start, end = week_range(request.args.get("preset") or "this", today_iso(container.timezone))
        parse_iso_date(start)
        parse_iso_date(end)
        return container.report_service.build_report(
            start=start,
            end=end,
            person=request.args.get("name") or None,
            organization=request.args.get("company") or None,
        )

    @app.route("/api/manager/report", methods=["GET"], endpoint="manager_report")
    @gate.manager_required
    def manager_report():
        try:
            report = _report()
        except Exception as e:
            return gate.json_error(e)
        return jsonify(
            {
                "success": True,
                "from": report.start,
                "to": report.end,
                "summary": [asdict(s) for s in report.summary],
                "detail": report.table,
                "grand_total": report.grand_total if report.records else None,
                "message": f"Found {len(report.records)} day-rows in range.",
            }
        )

    @app.route("/api/manager/report.csv", methods=["GET"], endpoint="manager_report_csv")
    @gate.manager_required
    def manager_report_csv():
        try:
            return export.master_csv(_report()).as_download()
        except Exception as e:
            return gate.json_error(e)

    @app.route("/api/manager/report.xlsx", methods=["GET"], endpoint="manager_report_xlsx")
    @gate.manager_required
    def manager_report_xlsx():
        try:
            return export.master_workbook(_report()).as_download()
        except Exception as e:
            return gate.json_error(e)

    @app.route("/api/template.xlsx", methods=["GET"], endpoint="template_xlsx")
    def template_xlsx():
        try:
            return export.template_workbook().as_download()
        except Exception as e:
            return gate.json_error(e)
