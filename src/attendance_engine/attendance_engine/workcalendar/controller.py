from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict

from flask import Flask, request

from ..common.datetime_utils import now_local
from ..common.http import as_date, as_int, json_body, ok, require_field
from ..container import Container
from ..core.enums import CalendarEntryType
from ..core.exceptions import ValidationError
from .model import CalendarEntry


def entry_json(entry: CalendarEntry) -> Dict[str, Any]:
    return {
        "entry_id": entry.entry_id,
        "date": entry.entry_date.isoformat(),
        "name": entry.name,
        "description": entry.description,
        "entry_type": entry.entry_type.value,
        "is_recurring_annually": entry.is_recurring_annually,
        "is_working": entry.is_working,
    }


def _entry_type(value: Any) -> CalendarEntryType:
    try:
        return CalendarEntryType(str(value).upper())
    except ValueError:
        allowed = ", ".join(t.value for t in CalendarEntryType)
        raise ValidationError(f"entry_type must be one of {allowed}") from None


def register(app: Flask, container: Container) -> None:
    service = container.calendar_service

    @app.route("/api/calendar", methods=["GET"], endpoint="calendar_list")
    def list_entries():
        if request.args.get("start") or request.args.get("end"):
            entries = service.list_in_range(
                start=as_date(request.args.get("start"), "start"),
                end=as_date(request.args.get("end"), "end"),
            )
        else:
            today = now_local().date()
            entries = service.list_for_month(
                year=as_int(request.args.get("year", today.year), "year"),
                month=as_int(request.args.get("month", today.month), "month"),
            )
        return ok(entries=[entry_json(e) for e in entries])

    @app.route("/api/calendar/<int:entry_id>", methods=["GET"], endpoint="calendar_get")
    def get_entry(entry_id: int):
        return ok(entry=entry_json(service.get(entry_id)))

    @app.route("/api/calendar", methods=["POST"], endpoint="calendar_create")
    def create_entry():
        data = json_body()
        entry = service.create(
            entry_date=as_date(require_field(data, "date"), "date"),
            name=str(require_field(data, "name")),
            entry_type=_entry_type(require_field(data, "entry_type")),
            description=str(data.get("description") or ""),
            is_recurring_annually=bool(data.get("is_recurring_annually", False)),
        )
        return ok(201, entry=entry_json(entry), message="Calendar entry created")

    @app.route("/api/calendar/<int:entry_id>", methods=["PUT"], endpoint="calendar_update")
    def update_entry(entry_id: int):
        data = json_body()
        entry = service.get(entry_id)
        changes: Dict[str, Any] = {}
        if "date" in data:
            changes["entry_date"] = as_date(data["date"], "date")
        if "name" in data:
            changes["name"] = str(data["name"]).strip()
        if "description" in data:
            changes["description"] = str(data["description"] or "")
        if "entry_type" in data:
            changes["entry_type"] = _entry_type(data["entry_type"])
        if "is_recurring_annually" in data:
            changes["is_recurring_annually"] = bool(data["is_recurring_annually"])
        entry = service.update(replace(entry, **changes))
        return ok(entry=entry_json(entry), message="Calendar entry updated")

    @app.route("/api/calendar/<int:entry_id>", methods=["DELETE"], endpoint="calendar_delete")
    def delete_entry(entry_id: int):
        service.delete(entry_id)
        return ok(message="Calendar entry deleted")
