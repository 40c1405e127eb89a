from __future__ import annotations

import logging
from typing import List, Sequence, Tuple

from extraction.tokenizer import Token, join_tokens, matches_phrase, window
from lexicon.lexicon_store import DEFAULT_LEXICON, Lexicon
from todo_generator.models import UrgencyIndicator

logger = logging.getLogger(__name__)


class UrgencyAnalyzer:
    """Emits one indicator per urgency keyword hit.

    Matching is a plain substring test on the lowercased token, with no
    stemming, so it over-reports on purpose; relevance weighting happens
    when a task is scored.
    """

    def __init__(self, lexicon: Lexicon = DEFAULT_LEXICON, context_window: int = 3):
        self.lexicon = lexicon
        self.context_window = context_window

    def analyze(self, tokens: Sequence[Token]) -> List[UrgencyIndicator]:
        indicators: List[UrgencyIndicator] = []
        for i, token in enumerate(tokens):
            for keyword, score in self.lexicon.urgency.items():
                if " " in keyword:
                    hit = matches_phrase(tokens, i, keyword.split())
                else:
                    hit = keyword in token.lower
                if not hit:
                    continue
                context = window(tokens, i, self.context_window, self.context_window)
                indicators.append(
                    UrgencyIndicator(score=score, keywords=[keyword], context=join_tokens(context))
                )
        logger.debug("Found %d urgency indicators", len(indicators))
        return indicators

    def keyword_scores(self, text: str) -> List[Tuple[str, float]]:
        """Urgency keywords occurring anywhere in ``text``."""
        lower = text.lower()
        return [(kw, score) for kw, score in self.lexicon.urgency.items() if kw in lower]
