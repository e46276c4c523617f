from __future__ import annotations

import logging
import threading
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Dict, List, Optional

from ..core.enums import ChangeTopic

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangeEvent:
    topic: ChangeTopic
    employee_id: Optional[int] = None
    work_date: Optional[date] = None
    details: Dict[str, object] = field(default_factory=dict)


Subscriber = Callable[[ChangeEvent], None]


class ChangeNotifier:
    """Fire-and-forget "data changed" signal.

    Subscribers run synchronously on the publishing thread. A failing
    subscriber is logged and skipped; publishers never see its error.
    """

    def __init__(self) -> None:
        self._subscribers: Dict[ChangeTopic, List[Subscriber]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, topic: ChangeTopic, callback: Subscriber) -> None:
        with self._lock:
            self._subscribers[topic].append(callback)

    def unsubscribe(self, topic: ChangeTopic, callback: Subscriber) -> None:
        with self._lock:
            if callback in self._subscribers[topic]:
                self._subscribers[topic].remove(callback)

    def publish(self, event: ChangeEvent) -> None:
        with self._lock:
            subscribers = list(self._subscribers[event.topic])
        for callback in subscribers:
            try:
                callback(event)
            except Exception:
                logger.exception("Subscriber %r failed on %s change", callback, event.topic.value)

    def attendance_changed(self, *, employee_id: int, work_date: date) -> None:
        self.publish(ChangeEvent(ChangeTopic.ATTENDANCE, employee_id=employee_id, work_date=work_date))

    def schedules_changed(self, *, schedule_id: int) -> None:
        self.publish(ChangeEvent(ChangeTopic.SCHEDULES, details={"schedule_id": schedule_id}))

    def calendar_changed(self, *, entry_id: int) -> None:
        self.publish(ChangeEvent(ChangeTopic.CALENDAR, details={"entry_id": entry_id}))
