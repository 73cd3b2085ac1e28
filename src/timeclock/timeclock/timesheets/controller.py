from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date, today_iso
from ..common.validators import require_non_empty
from ..container import Container
from ..reports import export
from ..reports.service import summarize, week_range
from ..users import session as gate
from .model import RecordKey


def _row_json(record) -> dict:
    return record.to_document() | {"lunchMins": record.lunch_minutes, "totalHours": record.total_hours}


def register(app: Flask, container: Container) -> None:
    service = container.timesheet_service

    def _identity():
        return gate.current_identity(container.timezone)

    def _range_args() -> tuple[str, str]:
        """from/to query args, or a this/last week preset (default: this week)."""
        today = today_iso(container.timezone)
        start_s = request.args.get("from")
        end_s = request.args.get("to")
        if start_s and end_s:
            parse_iso_date(start_s)
            parse_iso_date(end_s)
            return start_s, end_s
        return week_range(request.args.get("preset") or "this", today)

    def _history():
        start, end = _range_args()
        rows = service.history(_identity(), start=start, end=end)
        return summarize(rows, start=start, end=end)

    @app.route("/api/today", methods=["GET"], endpoint="today")
    @gate.login_required
    def today():
        try:
            return jsonify({"success": True, **service.today(_identity())})
        except Exception as e:
            return gate.json_error(e)

    @app.route("/api/stamp/<field>", methods=["POST"], endpoint="stamp")
    @gate.login_required
    def stamp(field: str):
        try:
            service.stamp(_identity(), field)
            return jsonify({"success": True, **service.today(_identity())})
        except Exception as e:
            return gate.json_error(e)

    @app.route("/api/notes", methods=["POST"], endpoint="notes")
    @gate.login_required
    def notes():
        data = request.get_json(silent=True) or request.form.to_dict()
        identity = _identity()
        try:
            date = data.get("date") or identity.date
            parse_iso_date(date)
            key = RecordKey(
                date=date,
                person=require_non_empty(data.get("name") or identity.person, "Name"),
                organization=require_non_empty(data.get("company") or identity.organization, "Company"),
            )
            record = service.update_notes(key, data.get("notes", ""), identity=identity)
        except Exception as e:
            return gate.json_error(e)
        return jsonify({"success": True, "record": record.to_document()})

    @app.route("/api/history", methods=["GET"], endpoint="history")
    @gate.login_required
    def history():
        try:
            report = _history()
        except Exception as e:
            return gate.json_error(e)
        return jsonify(
            {
                "success": True,
                "from": report.start,
                "to": report.end,
                "rows": [_row_json(r) for r in report.records],
                "range_total": report.grand_total if report.records else None,
            }
        )

    @app.route("/api/history.csv", methods=["GET"], endpoint="history_csv")
    @gate.login_required
    def history_csv():
        try:
            report = _history()
            filename = export.log_filename(_identity().person, today_iso(container.timezone), "csv")
            return export.log_csv(report.records, filename).as_download()
        except Exception as e:
            return gate.json_error(e)

    @app.route("/api/history.xlsx", methods=["GET"], endpoint="history_xlsx")
    @gate.login_required
    def history_xlsx():
        try:
            report = _history()
            filename = export.log_filename(_identity().person, today_iso(container.timezone), "xlsx")
            return export.log_workbook(report.records, filename).as_download()
        except Exception as e:
            return gate.json_error(e)

    @app.route("/api/device-log", methods=["GET"], endpoint="device_log")
    def device_log():
        """Every log saved on this device, whoever stamped it."""
        try:
            rows = service.device_log(_identity())
        except Exception as e:
            return gate.json_error(e)
        return jsonify({"success": True, "rows": [_row_json(r) for r in rows]})

    @app.route("/api/device-log.csv", methods=["GET"], endpoint="device_log_csv")
    def device_log_csv():
        try:
            rows = service.device_log(_identity())
            filename = export.device_log_filename(today_iso(container.timezone), "csv")
            return export.log_csv(rows, filename).as_download()
        except Exception as e:
            return gate.json_error(e)

    @app.route("/api/device-log.xlsx", methods=["GET"], endpoint="device_log_xlsx")
    def device_log_xlsx():
        try:
            rows = service.device_log(_identity())
            filename = export.device_log_filename(today_iso(container.timezone), "xlsx")
            return export.log_workbook(rows, filename).as_download()
        except Exception as e:
            return gate.json_error(e)

    @app.route("/api/wipe", methods=["POST"], endpoint="wipe")
    def wipe():
        data = request.get_json(silent=True) or {}
        if data.get("confirm") is not True:
            return jsonify({"success": False, "message": "Confirm to erase ALL saved logs."}), 400
        try:
            service.wipe_all(_identity())
        except Exception as e:
            return gate.json_error(e)
        return jsonify({"success": True, "message": "Cleared."})
