"""Sequencing edges between tasks ("then", "after", ...).

The heuristic is coarse: it does not order tasks transitively and it can
produce cycles. Cycles are reported, not resolved.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Sequence
from uuid import UUID

import networkx as nx

from extraction.similarity import jaccard_similarity, word_set
from lexicon.lexicon_store import DEFAULT_LEXICON, Lexicon
from todo_generator.models import DependencyType, Task, TaskDependency

logger = logging.getLogger(__name__)


class DependencyDetector:
    def __init__(self, lexicon: Lexicon = DEFAULT_LEXICON, similarity_threshold: float = 0.5):
        self.lexicon = lexicon
        self.similarity_threshold = similarity_threshold

    def has_sequencing_marker(self, title: str) -> bool:
        return bool(word_set(title) & self.lexicon.sequencing_markers)

    def detect(self, tasks: Sequence[Task]) -> List[TaskDependency]:
        dependencies: List[TaskDependency] = []
        for task in tasks:
            if not self.has_sequencing_marker(task.title):
                continue
            for other in tasks:
                if other.id == task.id:
                    continue
                if jaccard_similarity(other.title, task.title) > self.similarity_threshold:
                    dependencies.append(TaskDependency(
                        task_id=task.id,
                        depends_on_task_id=other.id,
                        type=DependencyType.MUST_COMPLETE,
                    ))
        logger.debug("Detected %d dependencies", len(dependencies))
        return dependencies

    def apply(self, tasks: Sequence[Task], dependencies: Sequence[TaskDependency]) -> List[Task]:
        """Fold edges into the dependent tasks' dependency lists, keeping task order."""
        by_task: Dict[UUID, List[UUID]] = {}
        for dep in dependencies:
            by_task.setdefault(dep.task_id, []).append(dep.depends_on_task_id)

        result: List[Task] = []
        for task in tasks:
            extra = [d for d in by_task.get(task.id, []) if d not in task.dependencies]
            if extra:
                task = task.model_copy(update={"dependencies": [*task.dependencies, *extra]})
            result.append(task)
        return result

    def find_cycles(self, dependencies: Sequence[TaskDependency]) -> List[List[UUID]]:
        graph = nx.DiGraph()
        graph.add_edges_from((d.task_id, d.depends_on_task_id) for d in dependencies)
        cycles = [
            sorted(component, key=str)
            for component in nx.strongly_connected_components(graph)
            if len(component) > 1
        ]
        if cycles:
            logger.warning("Dependency graph contains %d cycle(s)", len(cycles))
        return cycles
