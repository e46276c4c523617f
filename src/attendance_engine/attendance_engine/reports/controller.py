from __future__ import annotations

from flask import Flask

from ..common.datetime_utils import first_of_month, now_local
from ..common.http import date_range_args, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.report_service

    def _range():
        today = now_local().date()
        return date_range_args(default_start=first_of_month(today), default_end=today)

    def _respond(items):
        return ok(
            items=[i.to_dict() for i in items],
            statistics=service.statistics(items).to_dict(),
        )

    @app.route("/api/reports/employees/<int:employee_id>", methods=["GET"], endpoint="report_employee")
    def employee_report(employee_id: int):
        start, end = _range()
        return _respond(service.build_employee_report(employee_id, start, end))

    @app.route("/api/reports/departments/<int:department_id>", methods=["GET"], endpoint="report_department")
    def department_report(department_id: int):
        start, end = _range()
        return _respond(service.build_department_report(department_id, start, end))

    @app.route("/api/reports/company", methods=["GET"], endpoint="report_company")
    def company_report():
        start, end = _range()
        return _respond(service.build_company_report(start, end))
