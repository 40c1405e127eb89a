from __future__ import annotations

import logging
from typing import List, Sequence

from extraction.tokenizer import Token
from lexicon.lexicon_store import DEFAULT_LEXICON, Lexicon

logger = logging.getLogger(__name__)


class ParticipantDetector:
    """Finds people mentioned in text from capitalization and pronouns.

    A capitalized word that is really a sentence-initial common word will
    be reported as a name; that is a known limit of the heuristic.
    """

    def __init__(self, lexicon: Lexicon = DEFAULT_LEXICON):
        self.lexicon = lexicon

    def is_likely_name(self, word: str) -> bool:
        lower = word.lower()
        return (
            len(word) > 1
            and word[0].isupper()
            and lower not in self.lexicon.stopwords
            and lower not in self.lexicon.pronouns
        )

    def names(self, tokens: Sequence[Token]) -> List[str]:
        found: List[str] = []
        i = 0
        while i < len(tokens):
            token = tokens[i]
            if not self.is_likely_name(token.text):
                i += 1
                continue
            nxt = tokens[i + 1] if i + 1 < len(tokens) else None
            if nxt is not None and nxt.sentence == token.sentence and self.is_likely_name(nxt.text):
                found.append(f"{token.text} {nxt.text}")
                i += 2
            else:
                found.append(token.text)
                i += 1
        return list(dict.fromkeys(found))

    def pronouns(self, tokens: Sequence[Token]) -> List[str]:
        return list(dict.fromkeys(t.lower for t in tokens if t.lower in self.lexicon.pronouns))

    def detect(self, tokens: Sequence[Token]) -> List[str]:
        participants = list(dict.fromkeys(self.names(tokens) + self.pronouns(tokens)))
        logger.debug("Detected %d participants", len(participants))
        return participants
