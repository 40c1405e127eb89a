"""Turns one action-item candidate into a fully scored Task.

Each call is a pure function of its inputs, so candidates can be processed
in any order or in parallel.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple, Union

from extraction.action_item_extractor import Candidate
from extraction.deadline_inferrer import DeadlineInferrer
from extraction.similarity import jaccard_similarity, words
from extraction.tokenizer import Token, tokenize
from extraction.urgency_analyzer import UrgencyAnalyzer
from classification.time_estimator import TimeEstimator
from lexicon.lexicon_store import DEFAULT_LEXICON, Lexicon
from todo_generator.models import (
    AnalysisContext,
    RecurrencePattern,
    Task,
    TaskCategory,
    UrgencyIndicator,
    clamp,
)

logger = logging.getLogger(__name__)

NEUTRAL_URGENCY = 0.5
IN_TEXT_KEYWORD_WEIGHT = 0.5
MAX_KEYWORD_TAGS = 5


def completion_probability(text: str, urgency_score: float, duration_s: int) -> float:
    """Heuristic chance that a task gets done: urgent, short and concrete tasks score higher."""
    word_count = len(words(text))
    if word_count <= 5:
        complexity_factor = 0.9
    elif word_count <= 15:
        complexity_factor = 0.7
    else:
        complexity_factor = 0.5

    hours = duration_s / 3600
    if hours <= 0.5:
        time_factor = 0.9
    elif hours <= 2:
        time_factor = 0.8
    elif hours <= 4:
        time_factor = 0.6
    else:
        time_factor = 0.4

    return clamp(0.4 * urgency_score + 0.4 * complexity_factor + 0.2 * time_factor, 0.1, 0.95)


class TaskProcessor:
    def __init__(
        self,
        lexicon: Lexicon = DEFAULT_LEXICON,
        deadline_inferrer: Optional[DeadlineInferrer] = None,
        urgency_analyzer: Optional[UrgencyAnalyzer] = None,
        time_estimator: Optional[TimeEstimator] = None,
    ):
        self.lexicon = lexicon
        self.deadline_inferrer = deadline_inferrer or DeadlineInferrer(lexicon)
        self.urgency_analyzer = urgency_analyzer or UrgencyAnalyzer(lexicon)
        self.time_estimator = time_estimator or TimeEstimator(lexicon)

    def process(
        self,
        candidate: Union[Candidate, str],
        urgency_indicators: Sequence[UrgencyIndicator],
        context: Optional[AnalysisContext] = None,
        participants: Sequence[str] = (),
    ) -> Task:
        if isinstance(candidate, str):
            candidate = Candidate(text=candidate, source=candidate)
        context = context or AnalysisContext()
        now = context.reference_time()

        text = candidate.text
        tokens = tokenize(text)

        category = self.categorize(text, tokens)
        urgency = self.urgency_score(text, urgency_indicators)
        duration, basis = self.time_estimator.estimate(tokens, category)

        deadlines = self.deadline_inferrer.infer(tokens, now)
        deadline = deadlines[0].inferred_date if deadlines else None

        is_recurring, pattern = self.detect_recurrence(text)

        people = self.match_participants(candidate.source, participants)
        people.extend(p for p in context.delegates_for(category) if p not in people)

        logger.debug(
            "Processed candidate %r: category=%s urgency=%.2f duration=%ss (%s)",
            text, category.value, urgency, duration, basis.value,
        )
        return Task(
            title=text,
            description=text,
            category=category,
            urgency_score=urgency,
            estimated_duration=duration,
            deadline=deadline,
            is_recurring=is_recurring,
            recurrence_pattern=pattern,
            participants=people,
            completion_probability=completion_probability(text, urgency, duration),
            tags=self.extract_tags(tokens),
            source_text=candidate.source,
            created_at=now,
            updated_at=now,
        )

    def categorize(self, text: str, tokens: Sequence[Token]) -> TaskCategory:
        lower = text.lower()
        for keyword, category in self.lexicon.categories.items():
            if keyword in lower:
                return category

        present = {t.lower for t in tokens}
        for category, hints in self.lexicon.category_hints.items():
            if present & hints:
                return category
        return TaskCategory.PERSONAL

    def urgency_score(self, text: str, indicators: Sequence[UrgencyIndicator]) -> float:
        """Relevance-weighted urgency of document indicators and in-text keywords.

        The divisor is at least 1.
        """
        total = 0.0
        weight_sum = 0.0

        for indicator in indicators:
            relevance = jaccard_similarity(indicator.context, text)
            total += indicator.score * relevance
            weight_sum += relevance

        for _, score in self.urgency_analyzer.keyword_scores(text):
            total += score * IN_TEXT_KEYWORD_WEIGHT
            weight_sum += IN_TEXT_KEYWORD_WEIGHT

        if weight_sum == 0:
            return NEUTRAL_URGENCY
        return clamp(total / max(weight_sum, 1.0))

    def extract_tags(self, tokens: Sequence[Token]) -> List[str]:
        tags = [t.text[1:] for t in tokens if t.text.startswith("#") and len(t.text) > 1]

        keywords = [
            t.text for t in tokens
            if not t.text.startswith("#")
            and len(t.text) > 3
            and not t.text.isdigit()
            and not t.text[0].isupper()
            and t.lower not in self.lexicon.stopwords
        ]
        tags.extend(keywords[:MAX_KEYWORD_TAGS])
        return list(dict.fromkeys(tags))

    def detect_recurrence(self, text: str) -> Tuple[bool, Optional[RecurrencePattern]]:
        lower = text.lower()
        for keyword, pattern in self.lexicon.recurrence.items():
            if keyword in lower:
                return True, pattern

        if any(day in lower for day in self.lexicon.weekdays):
            return True, RecurrencePattern.WEEKLY
        return False, None

    def match_participants(self, source: str, participants: Sequence[str]) -> List[str]:
        """Names from ``participants`` whose every part occurs as a word of ``source``."""
        present = {t.text for t in tokenize(source)}
        return [name for name in participants if all(part in present for part in name.split())]
