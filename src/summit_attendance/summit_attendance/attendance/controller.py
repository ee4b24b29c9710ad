from __future__ import annotations

import csv
import io

from flask import Flask, request

from ..attendees.qr import parse_payload
from ..common.http import admin_required, error_response, json_body, ok, unexpected_error
from ..core.enums import RecordingMode
from ..core.exceptions import DomainError, PreconditionFailed, ValidationError
from ..container import Container
from ..reports.service import REPORT_FIELDS
from .auto_select import NO_SESSIONS_MESSAGE, choose


def register(app: Flask, container: Container) -> None:
    def _resolve_attendee(data: dict):
        qr_code = (data.get("qr_code") or "").strip()
        if qr_code:
            mobile = parse_payload(app.config["QR_TOKEN"], qr_code)
            return container.attendee_service.find_by_mobile(mobile)
        if data.get("mobile"):
            return container.attendee_service.find_by_mobile(str(data["mobile"]))
        if data.get("attendee_id") not in (None, ""):
            try:
                attendee_id = int(data["attendee_id"])
            except (TypeError, ValueError):
                raise ValidationError("attendee_id must be a number")
            return container.attendee_service.get(attendee_id)
        raise ValidationError("Please enter a valid 10-digit mobile number")

    def _write_report_csv(*, data, filename: str):
        """Write report rows to a CSV download."""

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=REPORT_FIELDS)
        writer.writeheader()
        for row in data.rows:
            writer.writerow(row)

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/attendance/checkin", methods=["POST"], endpoint="attendance_checkin")
    def attendance_checkin():
        data = json_body()
        try:
            attendee = _resolve_attendee(data)
            day = data.get("day")
            session_key = data.get("session")
            missing = [v in (None, "") for v in (day, session_key)]

            if any(missing) and not all(missing):
                raise ValidationError("Choose both a day and a session")
            if all(missing):
                _, options = container.recorder.options(attendee.attendee_id)
                selection = choose(options)
                if not selection.available:
                    raise PreconditionFailed(NO_SESSIONS_MESSAGE)
                if not selection.selected:
                    raise ValidationError(selection.message)
                day, session_key = selection.selected.day, selection.selected.session.key

            result = container.recorder.record(attendee.attendee_id, day, session_key, RecordingMode.SELF_SERVICE)
            return ok(message=result.message, result=result.to_dict())
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("marking attendance")

    @app.route("/admin/attendance/manual", methods=["POST"], endpoint="admin_manual_attendance")
    @admin_required
    def admin_manual_attendance():
        data = json_body()
        try:
            attendee = _resolve_attendee(data)
            result = container.recorder.record(
                attendee.attendee_id,
                data.get("day"),
                data.get("session", ""),
                RecordingMode.MANUAL,
                remarks=data.get("remarks"),
            )
            return ok(message=result.message, result=result.to_dict())
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("marking manual attendance")

    @app.route("/admin/stats", methods=["GET"], endpoint="admin_stats")
    @admin_required
    def admin_stats():
        try:
            return ok(stats=container.report_service.dashboard_stats())
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("loading statistics")

    @app.route("/admin/reports/attendance", methods=["GET"], endpoint="admin_attendance_report")
    @admin_required
    def admin_attendance_report():
        try:
            data = container.report_service.build_attendance_report(
                attendance=request.args.get("attendance", "all"),
                zone=request.args.get("zone", ""),
            )
            return ok(rows=data.rows, summary=data.summary)
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("building the attendance report")

    @app.route("/admin/reports/attendance.csv", methods=["GET"], endpoint="admin_attendance_report_csv")
    @admin_required
    def admin_attendance_report_csv():
        attendance = request.args.get("attendance", "all")
        zone = request.args.get("zone", "")
        try:
            data = container.report_service.build_attendance_report(attendance=attendance, zone=zone)
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("exporting the attendance report")

        filename = f"attendance_report_{attendance}.csv"
        return _write_report_csv(data=data, filename=filename)

    @app.route("/admin/reports/schedule", methods=["GET"], endpoint="admin_schedule_report")
    @admin_required
    def admin_schedule_report():
        try:
            return ok(report=container.report_service.build_schedule_report())
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("building the schedule report")
