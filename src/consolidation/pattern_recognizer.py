from __future__ import annotations

from typing import Dict, List, Sequence

from todo_generator.models import (
    PatternType,
    RecurrencePattern,
    Task,
    TaskCategory,
    TaskPattern,
)


class PatternRecognizer:
    def recognize(self, tasks: Sequence[Task]) -> List[TaskPattern]:
        if not tasks:
            return []
        total = len(tasks)
        patterns: List[TaskPattern] = []

        groups: Dict[RecurrencePattern, List[Task]] = {}
        for task in tasks:
            if task.is_recurring and task.recurrence_pattern is not None:
                groups.setdefault(task.recurrence_pattern, []).append(task)

        for recurrence, members in groups.items():
            patterns.append(TaskPattern(
                pattern_type=PatternType.RECURRING,
                frequency=len(members) / total,
                description=f"{recurrence.value} tasks detected",
                related_tasks=[t.id for t in members],
            ))

        project_tasks = [t for t in tasks if t.category is TaskCategory.PROJECT]
        if len(project_tasks) > 1:
            patterns.append(TaskPattern(
                pattern_type=PatternType.PROJECT_PHASE,
                frequency=len(project_tasks) / total,
                description="Project workflow detected",
                related_tasks=[t.id for t in project_tasks],
            ))

        return patterns
