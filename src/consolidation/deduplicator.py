from __future__ import annotations

import logging
from typing import List, Sequence

from extraction.similarity import jaccard_similarity, word_set
from todo_generator.models import Task

logger = logging.getLogger(__name__)


def _union(lists) -> list:
    return list(dict.fromkeys(item for items in lists for item in items))


class Deduplicator:
    """Folds near-duplicate tasks into the first-seen ("anchor") task.

    The anchor keeps its own title, category and deadline; participants,
    tags and dependencies are unioned and the score fields take the
    maximum over the group. Input tasks are never mutated.
    """

    def __init__(self, similarity_threshold: float = 0.7):
        self.similarity_threshold = similarity_threshold

    def is_similar(self, a: str, b: str) -> bool:
        lower_a, lower_b = a.lower(), b.lower()
        if lower_a in lower_b or lower_b in lower_a:
            return True
        words_a, words_b = word_set(a), word_set(b)
        if words_a and words_b and (words_a <= words_b or words_b <= words_a):
            return True
        return jaccard_similarity(a, b) > self.similarity_threshold

    def merge(self, tasks: Sequence[Task]) -> List[Task]:
        merged: List[Task] = []
        processed = set()

        for i, anchor in enumerate(tasks):
            if i in processed:
                continue
            similar: List[Task] = []
            for j in range(i + 1, len(tasks)):
                if j in processed:
                    continue
                if self.is_similar(anchor.title, tasks[j].title):
                    similar.append(tasks[j])
                    processed.add(j)
            merged.append(self.fold(anchor, similar) if similar else anchor)

        if len(merged) < len(tasks):
            logger.info("Merged %d tasks into %d", len(tasks), len(merged))
        return merged

    def fold(self, anchor: Task, similar: Sequence[Task]) -> Task:
        group = [anchor, *similar]
        return anchor.model_copy(update={
            "participants": _union(t.participants for t in group),
            "tags": _union(t.tags for t in group),
            "dependencies": _union(t.dependencies for t in group),
            "urgency_score": max(t.urgency_score for t in group),
            "completion_probability": max(t.completion_probability for t in group),
            "updated_at": max(t.updated_at for t in group),
        })
