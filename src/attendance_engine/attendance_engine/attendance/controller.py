from __future__ import annotations

from typing import Any, Dict

from flask import Flask

from ..common.datetime_utils import first_of_month, now_local, whole_minutes
from ..common.http import as_date, as_datetime, as_int, date_range_args, json_body, ok, require_field
from ..container import Container
from .model import AttendanceRecord, PunchRecord


def record_json(record: AttendanceRecord) -> Dict[str, Any]:
    fields = record.classification
    data: Dict[str, Any] = {
        "attendance_id": record.attendance_id,
        "employee_id": record.employee_id,
        "date": record.work_date.isoformat(),
        "check_in": record.check_in_time.isoformat() if record.check_in_time else None,
        "check_out": record.check_out_time.isoformat() if record.check_out_time else None,
        "notes": record.notes,
    }
    if fields is not None:
        data.update(
            status=fields.status.value,
            work_minutes=whole_minutes(fields.work_duration),
            is_complete=fields.is_complete,
            late_minutes=whole_minutes(fields.late_duration),
            early_arrival_minutes=whole_minutes(fields.early_arrival_duration),
            early_departure_minutes=whole_minutes(fields.early_departure_duration),
            overtime_minutes=whole_minutes(fields.overtime_duration),
            is_flexible_schedule=fields.is_flexible_schedule,
            expected_work_hours=fields.expected_work_hours,
        )
    return data


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    def check_in():
        data = json_body()
        employee_id = as_int(require_field(data, "employee_id"), "employee_id")
        record = service.check_in(employee_id, now=as_datetime(data.get("time"), "time"))
        return ok(record=record_json(record), message="Checked in")

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    def check_out():
        data = json_body()
        employee_id = as_int(require_field(data, "employee_id"), "employee_id")
        record = service.check_out(employee_id, now=as_datetime(data.get("time"), "time"))
        return ok(record=record_json(record), message="Checked out")

    @app.route("/api/attendance/punch", methods=["POST"], endpoint="attendance_punch")
    def punch():
        """Raw punch already translated by device sync / file import."""
        data = json_body()
        record = service.record_punch(
            PunchRecord(
                employee_id=as_int(require_field(data, "employee_id"), "employee_id"),
                work_date=as_date(require_field(data, "date"), "date"),
                check_in_time=as_datetime(data.get("check_in"), "check_in"),
                check_out_time=as_datetime(data.get("check_out"), "check_out"),
            )
        )
        return ok(record=record_json(record))

    @app.route("/api/attendance/<int:attendance_id>", methods=["GET"], endpoint="attendance_get")
    def get_record(attendance_id: int):
        return ok(record=record_json(service.get_record(attendance_id)))

    @app.route("/api/attendance/<int:attendance_id>", methods=["PATCH"], endpoint="attendance_update")
    def update_record(attendance_id: int):
        data = json_body()
        changes: Dict[str, Any] = {}
        if "check_in" in data:
            changes["check_in_time"] = as_datetime(data["check_in"], "check_in")
        if "check_out" in data:
            changes["check_out_time"] = as_datetime(data["check_out"], "check_out")
        if data.get("notes") is not None:
            changes["notes"] = str(data["notes"])
        record = service.update_record(attendance_id, **changes)
        return ok(record=record_json(record), message="Record updated")

    @app.route("/api/attendance/<int:attendance_id>", methods=["DELETE"], endpoint="attendance_delete")
    def delete_record(attendance_id: int):
        service.delete_record(attendance_id)
        return ok(message="Record deleted")

    @app.route("/api/employees/<int:employee_id>/attendance", methods=["GET"], endpoint="attendance_list")
    def list_records(employee_id: int):
        today = now_local().date()
        start, end = date_range_args(default_start=first_of_month(today), default_end=today)
        records = service.list_records(employee_id, start=start, end=end)
        return ok(records=[record_json(r) for r in records])

    @app.route("/api/attendance/recalculate", methods=["POST"], endpoint="attendance_recalculate")
    def recalculate():
        data = json_body()
        ids = require_field(data, "employee_ids")
        if not isinstance(ids, list):
            ids = [ids]
        summary = service.recalculate(
            [as_int(i, "employee_ids") for i in ids],
            as_date(require_field(data, "start"), "start"),
            as_date(require_field(data, "end"), "end"),
        )
        return ok(processed=summary.processed, failed=summary.failed, cancelled=summary.cancelled)
