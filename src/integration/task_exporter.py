from __future__ import annotations

import csv
import io
import logging
from datetime import datetime, timezone
from typing import Dict, List, Sequence, Union

from pydantic import TypeAdapter

from todo_generator.models import ExportFormat, Task, TaskPriority

logger = logging.getLogger(__name__)

ICAL_PRIORITY: Dict[TaskPriority, int] = {
    TaskPriority.CRITICAL: 1,
    TaskPriority.HIGH: 5,
    TaskPriority.MEDIUM: 7,
    TaskPriority.LOW: 9,
}

CSV_HEADER = ["title", "priority", "category", "urgency_score", "estimated_duration", "deadline"]

MEDIA_TYPES: Dict[ExportFormat, str] = {
    ExportFormat.JSON: "application/json",
    ExportFormat.CSV: "text/csv",
    ExportFormat.ICAL: "text/calendar",
    ExportFormat.MARKDOWN: "text/markdown",
}

_TASK_LIST = TypeAdapter(List[Task])


def format_duration(seconds: int) -> str:
    hours, rest = divmod(int(seconds), 3600)
    minutes = rest // 60
    if hours and minutes:
        return f"{hours}h {minutes}min"
    if hours:
        return f"{hours}h"
    return f"{minutes}min"


def ical_escape(text: str) -> str:
    return (
        text.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\r\n", "\\n")
        .replace("\n", "\\n")
    )


def ical_utc(moment: datetime) -> str:
    # naive datetimes are taken as local time
    return moment.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


class TaskExporter:
    """Serializes a final task list for downstream tools."""

    def export(self, tasks: Sequence[Task], fmt: Union[ExportFormat, str]) -> str:
        fmt = ExportFormat(fmt)
        logger.info("Exporting %d tasks as %s", len(tasks), fmt.value)
        if fmt is ExportFormat.JSON:
            return _TASK_LIST.dump_json(list(tasks), indent=2).decode()
        if fmt is ExportFormat.CSV:
            return self.to_csv(tasks)
        if fmt is ExportFormat.ICAL:
            return self.to_ical(tasks)
        return self.to_markdown(tasks)

    def to_csv(self, tasks: Sequence[Task]) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow(CSV_HEADER)
        for task in tasks:
            writer.writerow([
                task.title,
                task.priority.value,
                task.category.value,
                task.urgency_score,
                task.estimated_duration,
                task.deadline.isoformat() if task.deadline else "",
            ])
        return buffer.getvalue()

    def to_ical(self, tasks: Sequence[Task]) -> str:
        lines = [
            "BEGIN:VCALENDAR",
            "VERSION:2.0",
            "PRODID:-//todo-generator//EN",
        ]
        for task in tasks:
            lines.extend([
                "BEGIN:VTODO",
                f"UID:{task.id}",
                f"DTSTAMP:{ical_utc(task.created_at)}",
                f"SUMMARY:{ical_escape(task.title)}",
                f"DESCRIPTION:{ical_escape(task.description)}",
                f"PRIORITY:{ICAL_PRIORITY[task.priority]}",
                f"CATEGORIES:{task.category.value.upper()}",
            ])
            if task.deadline is not None:
                lines.append(f"DUE:{ical_utc(task.deadline)}")
            lines.append(f"STATUS:{'COMPLETED' if task.is_completed else 'NEEDS-ACTION'}")
            lines.append("END:VTODO")
        lines.append("END:VCALENDAR")
        return "\r\n".join(lines) + "\r\n"

    def to_markdown(self, tasks: Sequence[Task]) -> str:
        out = ["# Todo List", ""]
        for priority in (TaskPriority.CRITICAL, TaskPriority.HIGH, TaskPriority.MEDIUM, TaskPriority.LOW):
            group = [t for t in tasks if t.priority is priority]
            if not group:
                continue
            out.extend([f"## {priority.value.upper()} Priority", ""])
            for task in group:
                checkbox = "- [x]" if task.is_completed else "- [ ]"
                out.append(f"{checkbox} **{task.title}**")
                out.append(f"   - Category: {task.category.value}")
                out.append(f"   - Urgency: {task.urgency_score:.2f}")
                out.append(f"   - Estimated time: {format_duration(task.estimated_duration)}")
                if task.deadline is not None:
                    out.append(f"   - Due: {task.deadline:%Y-%m-%d %H:%M}")
                if task.tags:
                    out.append(f"   - Tags: {', '.join(task.tags)}")
                out.append("")
        return "\n".join(out)
