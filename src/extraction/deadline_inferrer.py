"""Relative date expressions resolved against a reference time.

Every match is kept. Callers that need a single deadline take the first
one; conflicting dates are not reconciled here.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import List, Sequence

from extraction.tokenizer import Token, join_tokens, matches_phrase, window
from lexicon.lexicon_store import DEFAULT_LEXICON, Lexicon
from todo_generator.models import DateInference

logger = logging.getLogger(__name__)

RELATIVE_DAY_CONFIDENCE = 0.8
WEEKDAY_CONFIDENCE = 0.7
RELATIVE_WEEK_CONFIDENCE = 0.6


def days_until_weekday(now: datetime, target_weekday: int) -> int:
    """Days to the next occurrence of ``target_weekday`` (0 = Monday); 0 means today."""
    return (target_weekday - now.weekday() + 7) % 7


class DeadlineInferrer:
    def __init__(self, lexicon: Lexicon = DEFAULT_LEXICON, context_window: int = 3):
        self.lexicon = lexicon
        self.context_window = context_window
        self._relative = [
            (phrase, self.lexicon.relative_days[" ".join(phrase)], RELATIVE_DAY_CONFIDENCE)
            for phrase in lexicon.phrases(lexicon.relative_days)
        ] + [
            (phrase, self.lexicon.relative_weeks[" ".join(phrase)], RELATIVE_WEEK_CONFIDENCE)
            for phrase in lexicon.phrases(lexicon.relative_weeks)
        ]
        self._relative.sort(key=lambda entry: len(entry[0]), reverse=True)

    def infer(self, tokens: Sequence[Token], now: datetime) -> List[DateInference]:
        inferences: List[DateInference] = []
        i = 0
        while i < len(tokens):
            matched = self._match_relative(tokens, i)
            if matched is not None:
                phrase, days, confidence = matched
                inferences.append(self._inference(tokens, i, len(phrase), now + timedelta(days=days), confidence))
                i += len(phrase)
                continue

            weekday = self.lexicon.weekdays.get(tokens[i].lower)
            if weekday is not None:
                resolved = now + timedelta(days=days_until_weekday(now, weekday))
                inferences.append(self._inference(tokens, i, 1, resolved, WEEKDAY_CONFIDENCE))
            i += 1

        logger.debug("Inferred %d dates", len(inferences))
        return inferences

    def _match_relative(self, tokens: Sequence[Token], index: int):
        for phrase, days, confidence in self._relative:
            if matches_phrase(tokens, index, phrase):
                return phrase, days, confidence
        return None

    def _inference(
        self,
        tokens: Sequence[Token],
        index: int,
        length: int,
        resolved: datetime,
        confidence: float,
    ) -> DateInference:
        return DateInference(
            inferred_date=resolved,
            confidence=confidence,
            source_text=join_tokens(tokens[index:index + length]),
            context=join_tokens(window(tokens, index, self.context_window, self.context_window)),
        )
