from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict

from flask import Flask

from ..common.http import as_int, as_time, json_body, ok, require_field
from ..container import Container
from ..core.exceptions import ValidationError
from .model import MONDAY_TO_FRIDAY, WEEKDAY_NAMES, WorkSchedule


def schedule_json(schedule: WorkSchedule) -> Dict[str, Any]:
    return {
        "schedule_id": schedule.schedule_id,
        "name": schedule.name,
        "start_time": schedule.start_time.strftime("%H:%M"),
        "end_time": schedule.end_time.strftime("%H:%M"),
        "working_days": [name for name, works in zip(WEEKDAY_NAMES, schedule.working_days) if works],
        "grace_minutes": schedule.grace_minutes,
        "is_flexible": schedule.is_flexible,
        "total_work_hours": schedule.total_work_hours,
        "department_id": schedule.department_id,
        "description": schedule.description,
    }


def _working_days(value: Any) -> tuple:
    """Accepts weekday names (["monday", ...]) or seven booleans."""
    if not isinstance(value, list):
        raise ValidationError("working_days must be a list")
    if len(value) == 7 and all(isinstance(v, bool) for v in value):
        return tuple(value)
    names = {str(v).strip().lower() for v in value}
    unknown = names - set(WEEKDAY_NAMES)
    if unknown:
        raise ValidationError(f"unknown weekday(s): {', '.join(sorted(unknown))}")
    return tuple(name in names for name in WEEKDAY_NAMES)


def _apply(schedule: WorkSchedule, data: Dict[str, Any]) -> WorkSchedule:
    changes: Dict[str, Any] = {}
    if "name" in data:
        changes["name"] = str(data["name"]).strip()
    if "start_time" in data:
        changes["start_time"] = as_time(data["start_time"], "start_time")
    if "end_time" in data:
        changes["end_time"] = as_time(data["end_time"], "end_time")
    if "working_days" in data:
        changes["working_days"] = _working_days(data["working_days"])
    if "grace_minutes" in data:
        changes["grace_minutes"] = as_int(data["grace_minutes"], "grace_minutes")
    if "is_flexible" in data:
        changes["is_flexible"] = bool(data["is_flexible"])
    if "total_work_hours" in data:
        try:
            changes["total_work_hours"] = float(data["total_work_hours"])
        except (TypeError, ValueError):
            raise ValidationError("total_work_hours must be a number") from None
    if "department_id" in data:
        changes["department_id"] = None if data["department_id"] is None else as_int(data["department_id"], "department_id")
    if "description" in data:
        changes["description"] = str(data["description"] or "")
    return replace(schedule, **changes)


def register(app: Flask, container: Container) -> None:
    service = container.schedule_service

    def _recalc_json(summary):
        return {"processed": summary.processed, "failed": summary.failed, "cancelled": summary.cancelled}

    @app.route("/api/schedules", methods=["GET"], endpoint="schedules_list")
    def list_schedules():
        return ok(schedules=[schedule_json(s) for s in service.list_all()])

    @app.route("/api/schedules/<int:schedule_id>", methods=["GET"], endpoint="schedules_get")
    def get_schedule(schedule_id: int):
        return ok(schedule=schedule_json(service.get(schedule_id)))

    @app.route("/api/schedules", methods=["POST"], endpoint="schedules_create")
    def create_schedule():
        data = json_body()
        require_field(data, "name")
        draft = _apply(WorkSchedule(schedule_id=0, name="", working_days=MONDAY_TO_FRIDAY), data)
        return ok(201, schedule=schedule_json(service.create_schedule(draft)), message="Schedule created")

    @app.route("/api/schedules/<int:schedule_id>", methods=["PUT"], endpoint="schedules_update")
    def update_schedule(schedule_id: int):
        schedule = _apply(service.get(schedule_id), json_body())
        summary = service.update_schedule(schedule)
        return ok(schedule=schedule_json(schedule), recalculation=_recalc_json(summary), message="Schedule updated")

    @app.route("/api/schedules/<int:schedule_id>/department", methods=["PUT"], endpoint="schedules_assign_department")
    def assign_department(schedule_id: int):
        data = json_body()
        department_id = data.get("department_id")
        summary = service.assign_to_department(
            schedule_id=schedule_id,
            department_id=None if department_id is None else as_int(department_id, "department_id"),
        )
        return ok(recalculation=_recalc_json(summary), message="Schedule assigned to department")

    @app.route("/api/employees/<int:employee_id>/schedule", methods=["PUT"], endpoint="schedules_assign_employee")
    def assign_employee(employee_id: int):
        data = json_body()
        schedule_id = data.get("schedule_id")
        summary = service.assign_to_employee(
            employee_id=employee_id,
            schedule_id=None if schedule_id is None else as_int(schedule_id, "schedule_id"),
        )
        return ok(recalculation=_recalc_json(summary), message="Schedule assigned to employee")
