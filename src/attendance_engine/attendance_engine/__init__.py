"""Attendance Engine package.

This package is organized by feature modules (schedules, workcalendar,
attendance, leave, reports, ...) with a thin Flask controller layer and
service/repository layers underneath.
"""
