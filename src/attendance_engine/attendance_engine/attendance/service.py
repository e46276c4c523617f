from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_date_range
from ..core.constants import ATTENDANCE_LOCK_STRIPES
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..notifications.notifier import ChangeNotifier
from ..schedules.resolver import ScheduleResolver
from .classifier import AttendanceClassifier
from .model import AttendanceRecord, PunchRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_UNSET = object()


@dataclass(frozen=True)
class RecalculationSummary:
    processed: int = 0
    failed: int = 0
    cancelled: bool = False


class AttendanceService:
    """Use cases around attendance records: punches, edits and recalculation.

    Every persisted mutation stores freshly classified fields and is followed
    by an attendance-changed notification.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        schedule_resolver: ScheduleResolver,
        *,
        classifier: AttendanceClassifier | None = None,
        notifier: ChangeNotifier | None = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._schedules = schedule_resolver
        self._classifier = classifier or AttendanceClassifier()
        self._notifier = notifier or ChangeNotifier()
        self._locks = tuple(threading.RLock() for _ in range(ATTENDANCE_LOCK_STRIPES))

    def _lock_for(self, employee_id: int, work_date: date) -> threading.RLock:
        # Striped: distinct days may share a lock; the same day always maps to one.
        # Re-entrant: a change subscriber may write back from the publishing thread.
        return self._locks[hash((int(employee_id), work_date)) % len(self._locks)]

    def _employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee", employee_id)
        return employee

    def _store(self, record: AttendanceRecord, employee: Employee) -> AttendanceRecord:
        schedule = self._schedules.effective_for(employee)
        saved = self._attendance.save(self._classifier.reclassify(record, schedule))
        self._notifier.attendance_changed(employee_id=saved.employee_id, work_date=saved.work_date)
        return saved

    @staticmethod
    def _check_order(check_in: Optional[datetime], check_out: Optional[datetime]) -> None:
        if check_in is not None and check_out is not None and check_out < check_in:
            raise ValidationError("check-out time is before check-in time")

    def get_record(self, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(attendance_id)
        if not record:
            raise NotFoundError("AttendanceRecord", attendance_id)
        return record

    def get_for_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_employee_and_date(employee_id, work_date)

    def list_records(self, employee_id: int, *, start: date, end: date) -> Sequence[AttendanceRecord]:
        require_date_range(start, end)
        self._employee(employee_id)
        return self._attendance.list_for_employee(employee_id, start=start, end=end)

    def check_in(self, employee_id: int, *, now: datetime | None = None) -> AttendanceRecord:
        """Record the first check-in of the day; a repeat returns the existing record."""
        now = now or now_local()
        today = now.date()
        employee = self._employee(employee_id)

        with self._lock_for(employee_id, today):
            existing = self._attendance.get_for_employee_and_date(employee_id, today)
            if existing and existing.check_in_time is not None:
                logger.debug("Employee %s already checked in on %s", employee_id, today)
                return existing

            if existing:
                self._check_order(now, existing.check_out_time)
                record = replace(existing, check_in_time=now)
            else:
                record = AttendanceRecord(attendance_id=0, employee_id=employee_id, work_date=today, check_in_time=now)
            saved = self._store(record, employee)

        logger.info("Employee %s checked in at %s (%s)", employee_id, now.isoformat(), saved.classification.status.value)
        return saved

    def check_out(self, employee_id: int, *, now: datetime | None = None) -> AttendanceRecord:
        """Record the check-out; a repeat returns the existing record.

        A check-out after midnight closes the previous day's open record
        (night shifts) when today has none.
        """
        now = now or now_local()
        employee = self._employee(employee_id)

        record = self._open_record(employee_id, now.date())
        if record is None:
            raise ValidationError(f"Employee {employee_id} has not checked in")

        with self._lock_for(employee_id, record.work_date):
            current = self._attendance.get_for_employee_and_date(employee_id, record.work_date) or record
            if current.check_out_time is not None:
                logger.debug("Employee %s already checked out on %s", employee_id, current.work_date)
                return current
            self._check_order(current.check_in_time, now)
            saved = self._store(replace(current, check_out_time=now), employee)

        logger.info("Employee %s checked out at %s (%s)", employee_id, now.isoformat(), saved.classification.status.value)
        return saved

    def _open_record(self, employee_id: int, today: date) -> Optional[AttendanceRecord]:
        record = self._attendance.get_for_employee_and_date(employee_id, today)
        if record and record.check_in_time is not None:
            return record
        previous = self._attendance.get_for_employee_and_date(employee_id, today - timedelta(days=1))
        if previous and previous.check_in_time is not None and previous.check_out_time is None:
            return previous
        return None

    def record_punch(self, punch: PunchRecord) -> AttendanceRecord:
        """Merge a raw punch (device sync / file import) into the day's record.

        Timestamps present on the punch replace the stored ones; missing ones
        keep whatever is already recorded.
        """
        employee = self._employee(punch.employee_id)
        with self._lock_for(punch.employee_id, punch.work_date):
            existing = self._attendance.get_for_employee_and_date(punch.employee_id, punch.work_date)
            record = existing or AttendanceRecord(attendance_id=0, employee_id=punch.employee_id, work_date=punch.work_date)
            record = replace(
                record,
                check_in_time=punch.check_in_time or record.check_in_time,
                check_out_time=punch.check_out_time or record.check_out_time,
            )
            self._check_order(record.check_in_time, record.check_out_time)
            saved = self._store(record, employee)

        logger.info("Punch stored for employee %s on %s", punch.employee_id, punch.work_date)
        return saved

    def update_record(
        self,
        attendance_id: int,
        *,
        check_in_time=_UNSET,
        check_out_time=_UNSET,
        notes: str | None = None,
    ) -> AttendanceRecord:
        """Edit raw data of a record and reclassify it. Omitted fields keep their value."""
        record = self.get_record(attendance_id)
        employee = self._employee(record.employee_id)
        changes = {}
        if check_in_time is not _UNSET:
            changes["check_in_time"] = check_in_time
        if check_out_time is not _UNSET:
            changes["check_out_time"] = check_out_time
        if notes is not None:
            changes["notes"] = notes.strip()

        with self._lock_for(record.employee_id, record.work_date):
            record = replace(record, **changes)
            self._check_order(record.check_in_time, record.check_out_time)
            saved = self._store(record, employee)

        logger.info("Attendance record %s updated", attendance_id)
        return saved

    def delete_record(self, attendance_id: int) -> None:
        record = self.get_record(attendance_id)
        if not self._attendance.delete(attendance_id):
            raise NotFoundError("AttendanceRecord", attendance_id)
        self._notifier.attendance_changed(employee_id=record.employee_id, work_date=record.work_date)
        logger.info("Attendance record %s deleted", attendance_id)

    def recalculate(
        self,
        employee_ids: Iterable[int],
        start: date,
        end: date,
        *,
        cancel_event: threading.Event | None = None,
    ) -> RecalculationSummary:
        """Reclassify stored records of the given employees between start and end.

        Checked for cancellation before each employee and each record; work
        done before cancellation stays saved. A failing record is logged and
        counted, the batch goes on.
        """
        require_date_range(start, end)
        processed = failed = 0

        def cancelled() -> bool:
            return cancel_event is not None and cancel_event.is_set()

        for employee_id in employee_ids:
            if cancelled():
                logger.info("Recalculation cancelled after %d records", processed)
                return RecalculationSummary(processed, failed, True)

            employee = self._employees.get_by_id(employee_id)
            if not employee:
                logger.warning("Recalculation skipped unknown employee %s", employee_id)
                failed += 1
                continue

            schedule = self._schedules.effective_for(employee)
            for record in self._attendance.list_for_employee(employee_id, start=start, end=end):
                if cancelled():
                    logger.info("Recalculation cancelled after %d records", processed)
                    return RecalculationSummary(processed, failed, True)
                try:
                    with self._lock_for(employee_id, record.work_date):
                        saved = self._attendance.save(self._classifier.reclassify(record, schedule))
                    self._notifier.attendance_changed(employee_id=employee_id, work_date=saved.work_date)
                    processed += 1
                except Exception:
                    logger.exception("Recalculation failed for employee %s on %s", employee_id, record.work_date)
                    failed += 1

        logger.info("Recalculated %d records (%d failed) from %s to %s", processed, failed, start, end)
        return RecalculationSummary(processed, failed, False)
