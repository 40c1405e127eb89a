import asyncio
import threading
from datetime import datetime, timedelta

import pytest

from scheduling.slot_suggester import SlotSuggester
from todo_generator.config import GeneratorConfig
from todo_generator.models import (
    MAX_DURATION_S,
    PatternType,
    TaskCategory,
    TaskPriority,
    derive_priority,
)


def test_german_example(generator, context, now, example_notes):
    analysis = generator.generate(example_notes, context)
    tasks = analysis.extracted_tasks

    assert [t.title for t in tasks] == [
        "Bitte erledige das Budget-Review dringend heute",
        "soll die Präsentation für Freitag vorbereiten",
        "Maria soll die Präsentation für",
    ]
    assert analysis.candidates_processed == 4

    review = tasks[0]
    assert review.category is TaskCategory.URGENT
    assert review.priority is TaskPriority.CRITICAL
    assert review.urgency_score > 0.8
    assert review.deadline == now

    slides = tasks[1]
    assert slides.category is TaskCategory.WORK
    assert slides.deadline == datetime(2026, 10, 16, 10, 0)
    assert "Maria" in slides.participants
    assert slides.recurrence_pattern is not None

    assert "Maria" in analysis.detected_participants
    assert [d.confidence for d in analysis.deadlines] == [0.8, 0.7]
    assert len(analysis.urgency_indicators) >= 2
    assert [e.task_id for e in analysis.time_estimates] == [t.id for t in tasks]
    assert [p.pattern_type for p in analysis.patterns] == [PatternType.RECURRING]
    assert analysis.dependencies == [] and analysis.dependency_cycles == []
    assert analysis.partial is False


def test_scores_stay_in_range_and_priority_is_consistent(generator, context):
    notes = (
        "Sofort den Server reparieren! Wir müssen morgen das Projekt planen. "
        "Then we should review the project budget next week. Buy milk."
    )
    analysis = generator.generate(notes, context)
    assert analysis.extracted_tasks
    for task in analysis.extracted_tasks:
        assert 0.0 <= task.urgency_score <= 1.0
        assert 0.1 <= task.completion_probability <= 0.95
        assert task.priority is derive_priority(task.urgency_score, task.category)
        assert task.estimated_duration > 0
    for estimate in analysis.time_estimates:
        assert 0.1 <= estimate.confidence <= 0.95


def test_english_notes(generator, context, now):
    analysis = generator.generate("Please call the dentist tomorrow.", context)
    assert len(analysis.extracted_tasks) == 1
    task = analysis.extracted_tasks[0]
    assert task.title == "Please call the dentist tomorrow"
    assert task.category is TaskCategory.HEALTH
    assert task.deadline == now + timedelta(days=1)


def test_same_weekday_resolves_to_today(generator, context, now):
    analysis = generator.generate("Bericht am Mittwoch einreichen.", context)
    assert analysis.extracted_tasks[0].deadline.date() == now.date()


def test_no_action_words_no_tasks(generator, context):
    analysis = generator.generate("Das Wetter war schön.", context)
    assert analysis.extracted_tasks == []
    assert analysis.time_estimates == []
    assert analysis.patterns == []


def test_context_is_optional(generator):
    analysis = generator.generate("Please call the dentist tomorrow.")
    task = analysis.extracted_tasks[0]
    assert task.deadline.date() == (task.created_at + timedelta(days=1)).date()


def test_time_budget_gives_partial_result(generator, context, example_notes):
    analysis = generator.generate(example_notes, context, time_budget_s=0)
    assert analysis.partial is True
    assert analysis.extracted_tasks == []
    assert len(analysis.deadlines) == 2


def test_cancel_event_gives_partial_result(generator, context, example_notes):
    cancel = threading.Event()
    cancel.set()
    analysis = generator.generate(example_notes, context, cancel_event=cancel)
    assert analysis.partial is True
    assert analysis.extracted_tasks == []


def test_async_matches_sync(generator, context, example_notes):
    sync = generator.generate(example_notes, context)
    result = asyncio.run(generator.generate_async(example_notes, context, time_budget_s=30))
    assert [t.title for t in result.extracted_tasks] == [t.title for t in sync.extracted_tasks]
    assert [t.priority for t in result.extracted_tasks] == [t.priority for t in sync.extracted_tasks]
    assert result.detected_participants == sync.detected_participants
    assert result.partial is False


def test_async_cancel_and_empty_input(generator, context, example_notes):
    cancel = threading.Event()
    cancel.set()
    result = asyncio.run(generator.generate_async(example_notes, context, cancel_event=cancel))
    assert result.partial is True
    assert result.extracted_tasks == []

    empty = asyncio.run(generator.generate_async("Das Wetter war schön.", context))
    assert empty.extracted_tasks == [] and empty.partial is False


def test_lexicon_is_selected_by_config(generator_factory, context, example_notes):
    english_only = generator_factory(config=GeneratorConfig(lexicon="en"))
    assert english_only.generate(example_notes, context).extracted_tasks == []


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("TODO_MAX_WORKERS", "2")
    monkeypatch.setenv("TODO_TIME_BUDGET_S", "1.5")
    monkeypatch.setenv("TODO_LEXICON", "EN")
    monkeypatch.delenv("TODO_CONTEXT_WINDOW", raising=False)
    cfg = GeneratorConfig.from_env()
    assert cfg.max_workers == 2
    assert cfg.time_budget_s == 1.5
    assert cfg.lexicon == "en"
    assert cfg.context_window == 3


def test_loosely_related_urgency_does_not_escalate(generator, context):
    analysis = generator.generate("Kritisch ist die Milch, bitte im Laden die Milch kaufen", context)
    [task] = analysis.extracted_tasks
    assert task.title == "bitte im Laden die Milch kaufen"
    assert task.category is TaskCategory.SHOPPING
    assert task.urgency_score == pytest.approx(3 / 7)
    assert task.priority is TaskPriority.MEDIUM


def test_huge_duration_note_can_be_scheduled(generator, context, now):
    analysis = generator.generate("Bitte 99999999999 Wochen warten.", context)
    task = analysis.extracted_tasks[0]
    assert task.estimated_duration == MAX_DURATION_S

    [suggestion] = SlotSuggester().suggest([task], now, now + timedelta(days=2))
    assert suggestion.recommended_start == now
