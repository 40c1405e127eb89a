from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class GeneratorConfig:
    """Tunables of the extraction pipeline.

    Window sizes are in tokens and never cross a sentence boundary.
    """

    context_window: int = 3
    action_window_before: int = 5
    action_window_after: int = 5
    max_workers: int = 8
    time_budget_s: Optional[float] = None
    lexicon: str = "default"

    @classmethod
    def from_env(cls) -> "GeneratorConfig":
        budget = os.getenv("TODO_TIME_BUDGET_S", "").strip()
        return cls(
            context_window=int(os.getenv("TODO_CONTEXT_WINDOW", "3")),
            action_window_before=int(os.getenv("TODO_ACTION_WINDOW_BEFORE", "5")),
            action_window_after=int(os.getenv("TODO_ACTION_WINDOW_AFTER", "5")),
            max_workers=int(os.getenv("TODO_MAX_WORKERS", "8")),
            time_budget_s=float(budget) if budget else None,
            lexicon=os.getenv("TODO_LEXICON", "default").strip().lower() or "default",
        )
