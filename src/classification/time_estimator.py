from __future__ import annotations

import re
from typing import Optional, Sequence, Tuple

from extraction.similarity import words
from extraction.tokenizer import Token, tokenize
from lexicon.lexicon_store import CATEGORY_DEFAULT_MINUTES, DEFAULT_LEXICON, Lexicon
from todo_generator.models import (
    MAX_DURATION_S,
    EstimateBasis,
    Task,
    TaskCategory,
    TimeEstimate,
    clamp,
)

_LEADING_DIGITS_RE = re.compile(r"\d+")
MAX_ESTIMATE_MINUTES = MAX_DURATION_S // 60


class TimeEstimator:
    """Duration estimate for a task text, in seconds.

    Explicit "<number> <unit>" mentions win over qualitative keywords,
    which win over the per-category default.
    """

    def __init__(self, lexicon: Lexicon = DEFAULT_LEXICON):
        self.lexicon = lexicon

    def estimate(self, tokens: Sequence[Token], category: TaskCategory) -> Tuple[int, EstimateBasis]:
        minutes = self.explicit_minutes(tokens)
        if minutes is not None:
            return minutes * 60, EstimateBasis.EXPLICIT

        for token in tokens:
            minutes = self.lexicon.duration_keywords.get(token.lower)
            if minutes is not None:
                return minutes * 60, EstimateBasis.KEYWORD

        return CATEGORY_DEFAULT_MINUTES[category] * 60, EstimateBasis.CATEGORY

    def explicit_minutes(self, tokens: Sequence[Token]) -> Optional[int]:
        for i, token in enumerate(tokens):
            match = _LEADING_DIGITS_RE.match(token.text)
            if match is None:
                continue
            number = int(match.group())
            unit = token.text[match.end():].lower()
            if not unit and i + 1 < len(tokens):
                unit = tokens[i + 1].lower
            per_unit = self.lexicon.time_units.get(unit)
            if per_unit is not None and number > 0:
                return min(number * per_unit, MAX_ESTIMATE_MINUTES)
        return None

    def confidence(self, task: Task, basis: EstimateBasis) -> float:
        confidence = 0.5
        if basis is EstimateBasis.EXPLICIT:
            confidence += 0.3
        if len(words(task.title)) > 15:
            confidence -= 0.2

        if task.category is TaskCategory.MEETING:
            confidence += 0.2
        elif task.category is TaskCategory.URGENT:
            confidence -= 0.1
        elif task.category is TaskCategory.PROJECT:
            confidence -= 0.15

        return clamp(confidence, 0.1, 0.95)

    def time_estimate(self, task: Task) -> TimeEstimate:
        _, basis = self.estimate(tokenize(task.title), task.category)
        return TimeEstimate(
            task_id=task.id,
            estimated_minutes=task.estimated_duration // 60,
            confidence=self.confidence(task, basis),
            basis=basis,
        )
