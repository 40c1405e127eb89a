"""Word tokenizer shared by every extraction stage.

Case is preserved because capitalization is a signal for name detection.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, List, Sequence

_TOKEN_RE = re.compile(r"#?\w+(?:['’-]\w+)*")
_SENTENCE_BREAK_RE = re.compile(r"[.!?\n]")


@dataclass(frozen=True)
class Token:
    text: str
    start: int
    end: int
    sentence: int

    @property
    def lower(self) -> str:
        return self.text.lower()


def iter_tokens(content: str) -> Iterator[Token]:
    """Yield word tokens in order; single pass over ``content``."""
    sentence = 0
    prev_end = 0
    seen_any = False
    for match in _TOKEN_RE.finditer(content):
        if seen_any and _SENTENCE_BREAK_RE.search(content, prev_end, match.start()):
            sentence += 1
        seen_any = True
        prev_end = match.end()
        yield Token(match.group(), match.start(), match.end(), sentence)


def tokenize(content: str) -> List[Token]:
    return list(iter_tokens(content))


def window(tokens: Sequence[Token], index: int, before: int, after: int) -> Sequence[Token]:
    """Tokens around ``index``, clipped to the sentence of the anchor token."""
    sentence = tokens[index].sentence
    lo = max(0, index - before)
    while tokens[lo].sentence < sentence:
        lo += 1
    hi = min(len(tokens), index + after + 1)
    while tokens[hi - 1].sentence > sentence:
        hi -= 1
    return tokens[lo:hi]


def join_tokens(tokens: Sequence[Token]) -> str:
    return " ".join(t.text for t in tokens)


def sentence_text(tokens: Sequence[Token], sentence: int) -> str:
    return join_tokens([t for t in tokens if t.sentence == sentence])


def matches_phrase(tokens: Sequence[Token], index: int, phrase: Sequence[str]) -> bool:
    """True when the lowercased tokens starting at ``index`` spell ``phrase``."""
    end = index + len(phrase)
    if end > len(tokens):
        return False
    sentence = tokens[index].sentence
    return all(
        tokens[index + k].sentence == sentence and tokens[index + k].lower == word
        for k, word in enumerate(phrase)
    )
