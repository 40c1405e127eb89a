import pytest

from classification.task_processor import TaskProcessor, completion_probability
from classification.time_estimator import TimeEstimator
from extraction.action_item_extractor import Candidate
from extraction.tokenizer import tokenize
from todo_generator.models import (
    MAX_DURATION_S,
    AnalysisContext,
    DelegationRule,
    EstimateBasis,
    RecurrencePattern,
    Task,
    TaskCategory,
    TaskPriority,
    UrgencyIndicator,
    UserPreferences,
)


@pytest.fixture
def processor():
    return TaskProcessor()


def test_process_urgent_candidate(processor, context, now):
    task = processor.process("Bitte erledige das Budget-Review dringend heute", [], context)
    assert task.category is TaskCategory.URGENT
    assert task.urgency_score == pytest.approx(0.85)
    assert task.priority is TaskPriority.CRITICAL
    assert task.estimated_duration == 30 * 60
    assert task.deadline == now
    assert task.is_recurring is False
    assert task.tags == ["erledige"]
    assert task.completion_probability == pytest.approx(0.8)
    assert task.created_at == now


def test_categorize_first_match_then_hints(processor):
    def categorize(text):
        return processor.categorize(text, tokenize(text))

    assert categorize("Termin beim Arzt vereinbaren") is TaskCategory.MEETING
    assert categorize("Milch holen") is TaskCategory.SHOPPING
    assert categorize("Irgendwas erledigen") is TaskCategory.PERSONAL


def test_urgency_without_signals_is_neutral(processor):
    assert processor.urgency_score("Irgendwas erledigen", []) == 0.5


def test_urgency_weights_indicators_by_relevance(processor):
    unrelated = UrgencyIndicator(score=1.0, keywords=["sofort"], context="ganz andere Sache")
    assert processor.urgency_score("Irgendwas erledigen", [unrelated]) == 0.5

    related = UrgencyIndicator(score=1.0, keywords=["sofort"], context="Irgendwas sofort erledigen")
    assert processor.urgency_score("Irgendwas erledigen", [related]) == pytest.approx(2 / 3)


def test_weakly_related_indicator_is_discounted(processor):
    indicator = UrgencyIndicator(score=1.0, keywords=["sofort"], context="a b c d e f Milch")
    assert processor.urgency_score("Milch kaufen", [indicator]) == pytest.approx(0.125)


def test_in_text_keyword_alone_counts_half(processor):
    assert processor.urgency_score("dringend", []) == pytest.approx(0.45)


def test_recurrence(processor):
    assert processor.detect_recurrence("Jeden Tag Wasser trinken") == (True, RecurrencePattern.DAILY)
    assert processor.detect_recurrence("Send the report weekly") == (True, RecurrencePattern.WEEKLY)
    assert processor.detect_recurrence("Am Freitag einkaufen") == (True, RecurrencePattern.WEEKLY)
    assert processor.detect_recurrence("Einmal einkaufen") == (False, None)


def test_hashtags_become_tags(processor):
    tags = processor.extract_tags(tokenize("Server neu starten #ops #ops 2024"))
    assert tags == ["ops", "starten"]


def test_participants_from_source_sentence_and_delegation(processor, now):
    candidate = Candidate(
        text="soll die Präsentation vorbereiten",
        source="Maria soll die Präsentation vorbereiten",
    )
    prefs = UserPreferences(delegation_rules=[
        DelegationRule(category=TaskCategory.WORK, participants=["Tom"]),
    ])
    task = processor.process(
        candidate,
        [],
        AnalysisContext(now=now, user_preferences=prefs),
        participants=["Maria", "Anna Lena"],
    )
    assert task.category is TaskCategory.WORK
    assert task.participants == ["Maria", "Tom"]
    assert task.source_text == "Maria soll die Präsentation vorbereiten"


def test_completion_probability_bounds():
    long_text = " ".join(["wort"] * 20)
    assert completion_probability(long_text, 0.0, 10 * 3600) == pytest.approx(0.28)
    assert completion_probability("kurz", 1.0, 600) == pytest.approx(0.94)
    assert 0.1 <= completion_probability("", 0.0, 999999) <= 0.95


@pytest.mark.parametrize(
    "text, seconds, basis",
    [
        ("Bericht schreiben 45 Minuten", 45 * 60, EstimateBasis.EXPLICIT),
        ("2h Workshop vorbereiten", 120 * 60, EstimateBasis.EXPLICIT),
        ("Kurze Mail schreiben", 15 * 60, EstimateBasis.KEYWORD),
        ("Irgendwas erledigen", 90 * 60, EstimateBasis.CATEGORY),
    ],
)
def test_time_estimation(processor, text, seconds, basis):
    category = processor.categorize(text, tokenize(text))
    assert processor.time_estimator.estimate(tokenize(text), category) == (seconds, basis)


def test_time_estimate_confidence():
    estimator = TimeEstimator()
    meeting = Task(title="Meeting 30 Minuten", category=TaskCategory.MEETING, estimated_duration=1800)
    estimate = estimator.time_estimate(meeting)
    assert estimate.basis is EstimateBasis.EXPLICIT
    assert estimate.estimated_minutes == 30
    assert estimate.confidence == 0.95

    project = Task(title="Projekt planen", category=TaskCategory.PROJECT, estimated_duration=14400)
    assert estimator.time_estimate(project).confidence == pytest.approx(0.35)


def test_huge_explicit_duration_is_capped(processor):
    tokens = tokenize("Archiv sortieren 99999999999 Wochen")
    assert processor.time_estimator.estimate(tokens, TaskCategory.PERSONAL) == (
        MAX_DURATION_S,
        EstimateBasis.EXPLICIT,
    )
