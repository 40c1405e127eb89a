"""Pipeline orchestrator: one document in, one ContentAnalysis out.

Token-level analyzers are independent of each other and per-candidate
processing is independent across candidates; merging, dependency
detection and pattern recognition reason over the whole task set and run
last.
"""
from __future__ import annotations

import asyncio
import logging
import threading
import time
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence

from classification.task_processor import TaskProcessor
from classification.time_estimator import TimeEstimator
from consolidation.deduplicator import Deduplicator
from consolidation.dependency_detector import DependencyDetector
from consolidation.pattern_recognizer import PatternRecognizer
from extraction.action_item_extractor import ActionItemExtractor, Candidate
from extraction.deadline_inferrer import DeadlineInferrer
from extraction.participant_detector import ParticipantDetector
from extraction.tokenizer import Token, tokenize
from extraction.urgency_analyzer import UrgencyAnalyzer
from lexicon.lexicon_store import Lexicon, get_lexicon
from todo_generator.config import GeneratorConfig
from todo_generator.models import (
    AnalysisContext,
    ContentAnalysis,
    DateInference,
    Task,
    UrgencyIndicator,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Signals:
    names: List[str]
    pronouns: List[str]
    deadlines: List[DateInference]
    indicators: List[UrgencyIndicator]
    candidates: List[Candidate]

    @property
    def participants(self) -> List[str]:
        return list(dict.fromkeys(self.names + self.pronouns))


class TodoGenerator:
    def __init__(self, lexicon: Optional[Lexicon] = None, config: Optional[GeneratorConfig] = None):
        self.config = config or GeneratorConfig()
        self.lexicon = lexicon or get_lexicon(self.config.lexicon)

        cfg = self.config
        self.participant_detector = ParticipantDetector(self.lexicon)
        self.deadline_inferrer = DeadlineInferrer(self.lexicon, cfg.context_window)
        self.urgency_analyzer = UrgencyAnalyzer(self.lexicon, cfg.context_window)
        self.action_item_extractor = ActionItemExtractor(
            self.lexicon,
            window_before=cfg.action_window_before,
            window_after=cfg.action_window_after,
            imperative_window=cfg.context_window,
        )
        self.time_estimator = TimeEstimator(self.lexicon)
        self.task_processor = TaskProcessor(
            self.lexicon,
            deadline_inferrer=self.deadline_inferrer,
            urgency_analyzer=self.urgency_analyzer,
            time_estimator=self.time_estimator,
        )
        self.deduplicator = Deduplicator()
        self.dependency_detector = DependencyDetector(self.lexicon)
        self.pattern_recognizer = PatternRecognizer()

    def generate(
        self,
        content: str,
        context: Optional[AnalysisContext] = None,
        *,
        cancel_event: Optional[threading.Event] = None,
        time_budget_s: Optional[float] = None,
    ) -> ContentAnalysis:
        if not content or not content.strip():
            return ContentAnalysis()

        context = self._pin_now(context)
        deadline = self._deadline(time_budget_s)

        tokens = tokenize(content)
        signals = self._signals(tokens, context.reference_time())

        tasks: List[Task] = []
        partial = False
        for candidate in signals.candidates:
            if self._should_stop(cancel_event, deadline):
                partial = True
                break
            tasks.append(self._process(candidate, signals, context))

        return self._finalize(tasks, signals, partial)

    async def generate_async(
        self,
        content: str,
        context: Optional[AnalysisContext] = None,
        *,
        cancel_event: Optional[threading.Event] = None,
        time_budget_s: Optional[float] = None,
    ) -> ContentAnalysis:
        if not content or not content.strip():
            return ContentAnalysis()

        context = self._pin_now(context)
        budget = time_budget_s if time_budget_s is not None else self.config.time_budget_s
        now = context.reference_time()

        tokens = tokenize(content)
        names, pronouns, deadlines, indicators, candidates = await asyncio.gather(
            asyncio.to_thread(self.participant_detector.names, tokens),
            asyncio.to_thread(self.participant_detector.pronouns, tokens),
            asyncio.to_thread(self.deadline_inferrer.infer, tokens, now),
            asyncio.to_thread(self.urgency_analyzer.analyze, tokens),
            asyncio.to_thread(self.action_item_extractor.extract, tokens),
        )
        signals = _Signals(names, pronouns, deadlines, indicators, candidates)
        if not candidates:
            return self._finalize([], signals, False)

        semaphore = asyncio.Semaphore(min(len(candidates), self.config.max_workers))

        async def run(candidate: Candidate) -> Optional[Task]:
            async with semaphore:
                if cancel_event is not None and cancel_event.is_set():
                    return None
                return await asyncio.to_thread(self._process, candidate, signals, context)

        jobs = [asyncio.create_task(run(c)) for c in candidates]
        done, pending = await asyncio.wait(jobs, timeout=budget)
        for job in pending:
            job.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        tasks = [job.result() for job in jobs if job in done]
        partial = bool(pending) or any(task is None for task in tasks)
        return self._finalize([t for t in tasks if t is not None], signals, partial)

    def _pin_now(self, context: Optional[AnalysisContext]) -> AnalysisContext:
        # every stage of one run resolves dates against the same instant
        context = context or AnalysisContext()
        if context.now is None:
            context = context.model_copy(update={"now": datetime.now()})
        return context

    def _deadline(self, time_budget_s: Optional[float]) -> Optional[float]:
        budget = time_budget_s if time_budget_s is not None else self.config.time_budget_s
        return None if budget is None else time.monotonic() + budget

    @staticmethod
    def _should_stop(cancel_event: Optional[threading.Event], deadline: Optional[float]) -> bool:
        if cancel_event is not None and cancel_event.is_set():
            return True
        return deadline is not None and time.monotonic() >= deadline

    def _signals(self, tokens: Sequence[Token], now: datetime) -> _Signals:
        return _Signals(
            names=self.participant_detector.names(tokens),
            pronouns=self.participant_detector.pronouns(tokens),
            deadlines=self.deadline_inferrer.infer(tokens, now),
            indicators=self.urgency_analyzer.analyze(tokens),
            candidates=self.action_item_extractor.extract(tokens),
        )

    def _process(self, candidate: Candidate, signals: _Signals, context: AnalysisContext) -> Task:
        return self.task_processor.process(
            candidate,
            signals.indicators,
            context=context,
            participants=signals.names,
        )

    def _finalize(self, tasks: List[Task], signals: _Signals, partial: bool) -> ContentAnalysis:
        merged = self.deduplicator.merge(tasks)
        dependencies = self.dependency_detector.detect(merged)
        final = self.dependency_detector.apply(merged, dependencies)
        cycles = self.dependency_detector.find_cycles(dependencies)

        if partial:
            logger.warning(
                "Stopped early: processed %d of %d candidates",
                len(tasks), len(signals.candidates),
            )
        logger.info(
            "Extracted %d candidates, %d tasks after merging, %d dependencies",
            len(signals.candidates), len(final), len(dependencies),
        )

        return ContentAnalysis(
            extracted_tasks=final,
            detected_participants=signals.participants,
            deadlines=signals.deadlines,
            urgency_indicators=signals.indicators,
            time_estimates=[self.time_estimator.time_estimate(t) for t in final],
            patterns=self.pattern_recognizer.recognize(final),
            dependencies=dependencies,
            dependency_cycles=cycles,
            candidates_processed=len(tasks),
            partial=partial,
        )
