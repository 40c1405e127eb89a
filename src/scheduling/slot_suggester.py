from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Sequence, Tuple

from todo_generator.models import (
    PRIORITY_WEIGHTS,
    CalendarEvent,
    Task,
    TaskSlotSuggestion,
    WorkingHours,
)

logger = logging.getLogger(__name__)

Interval = Tuple[datetime, datetime]


def slot_confidence(task: Task) -> float:
    return (task.urgency_score + PRIORITY_WEIGHTS[task.priority]) / 2


def _next_midnight(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0) + timedelta(days=1)


class SlotSuggester:
    """Greedy, deterministic slot placement.

    Tasks are placed earliest deadline first (then by confidence) into the
    first gap that is inside working hours and free of busy events and of
    slots already handed out. Suggestions come back in placement order.
    """

    def suggest(
        self,
        tasks: Sequence[Task],
        start: datetime,
        end: datetime,
        working_hours: Optional[WorkingHours] = None,
        calendar_events: Iterable[CalendarEvent] = (),
    ) -> List[TaskSlotSuggestion]:
        if end <= start:
            raise ValueError("end must be after start")

        occupied: List[Interval] = sorted((e.start, e.end) for e in calendar_events if e.is_busy)
        suggestions: List[TaskSlotSuggestion] = []

        for task in sorted(tasks, key=self._order_key):
            duration = timedelta(seconds=task.estimated_duration)
            slot_start = self._find_slot(start, end, duration, working_hours, occupied)
            confidence = slot_confidence(task)

            if slot_start is None:
                logger.info("No free slot for task %s", task.id)
                suggestions.append(TaskSlotSuggestion(
                    task_id=task.id,
                    recommended_start=start,
                    recommended_end=start + duration,
                    confidence=confidence,
                    reasoning=(
                        f"No free {duration_minutes(duration)} min slot in range; "
                        "suggested at range start"
                    ),
                ))
                continue

            slot_end = slot_start + duration
            occupied.append((slot_start, slot_end))
            occupied.sort()
            suggestions.append(TaskSlotSuggestion(
                task_id=task.id,
                recommended_start=slot_start,
                recommended_end=slot_end,
                confidence=confidence,
                reasoning=self._reasoning(task, slot_end, working_hours),
            ))

        return suggestions

    @staticmethod
    def _order_key(task: Task):
        return (
            task.deadline is None,
            task.deadline.timestamp() if task.deadline is not None else 0.0,
            -slot_confidence(task),
        )

    def _find_slot(
        self,
        start: datetime,
        end: datetime,
        duration: timedelta,
        working_hours: Optional[WorkingHours],
        occupied: Sequence[Interval],
    ) -> Optional[datetime]:
        candidate = start
        while candidate < end:
            if working_hours is not None:
                window = self._working_window(candidate, working_hours)
                if window is None:
                    candidate = _next_midnight(candidate)
                    continue
                candidate, window_end = window
            else:
                window_end = end

            slot_end = candidate + duration
            if slot_end > min(window_end, end):
                if working_hours is None:
                    return None
                candidate = _next_midnight(candidate)
                continue

            clash = next((iv for iv in occupied if iv[0] < slot_end and candidate < iv[1]), None)
            if clash is None:
                return candidate
            candidate = clash[1]
        return None

    @staticmethod
    def _working_window(moment: datetime, hours: WorkingHours) -> Optional[Interval]:
        """Working interval of ``moment``'s day that is still ahead of it, if any."""
        if moment.isoweekday() not in hours.working_days:
            return None
        midnight = moment.replace(hour=0, minute=0, second=0, microsecond=0)
        day_start = midnight + timedelta(hours=hours.start_hour)
        day_end = midnight + timedelta(hours=hours.end_hour)
        if moment >= day_end or day_start >= day_end:
            return None
        return max(moment, day_start), day_end

    @staticmethod
    def _reasoning(task: Task, slot_end: datetime, working_hours: Optional[WorkingHours]) -> str:
        parts = [f"{task.priority.value} priority, urgency {task.urgency_score:.2f}"]
        if task.deadline is not None:
            if slot_end <= task.deadline:
                parts.append(f"finishes before deadline {task.deadline:%Y-%m-%d %H:%M}")
            else:
                parts.append(f"finishes after deadline {task.deadline:%Y-%m-%d %H:%M}")
        if working_hours is not None:
            parts.append("within working hours")
        return "; ".join(parts)


def duration_minutes(duration: timedelta) -> int:
    return int(duration.total_seconds() // 60)
