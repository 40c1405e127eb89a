from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence

from extraction.tokenizer import Token, join_tokens, sentence_text, window
from lexicon.lexicon_store import DEFAULT_LEXICON, Lexicon

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Candidate:
    """Raw text span that may become a task.

    ``source`` is the sentence the span was cut from.
    """

    text: str
    source: str


class ActionItemExtractor:
    """Cuts candidate spans around action verbs and imperative markers.

    Overlapping candidates are kept on purpose; merging happens later on
    fully scored tasks.
    """

    def __init__(
        self,
        lexicon: Lexicon = DEFAULT_LEXICON,
        window_before: int = 5,
        window_after: int = 5,
        imperative_window: int = 3,
    ):
        self.lexicon = lexicon
        self.window_before = window_before
        self.window_after = window_after
        self.imperative_window = imperative_window

    def extract(self, tokens: Sequence[Token]) -> List[Candidate]:
        candidates: List[Candidate] = []

        for i, token in enumerate(tokens):
            if token.lower in self.lexicon.action_verbs:
                span = window(tokens, i, self.window_before, self.window_after)
                candidates.append(self._candidate(tokens, span, token))

        for i, token in enumerate(tokens):
            if token.lower in self.lexicon.imperative_markers:
                span = window(tokens, i, self.imperative_window, self.imperative_window)
                candidates.append(self._candidate(tokens, span, token))

        logger.debug("Extracted %d action item candidates", len(candidates))
        return candidates

    def _candidate(self, tokens: Sequence[Token], span: Sequence[Token], anchor: Token) -> Candidate:
        return Candidate(text=join_tokens(span), source=sentence_text(tokens, anchor.sentence))
