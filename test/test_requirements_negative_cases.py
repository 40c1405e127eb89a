import pytest
from pydantic import ValidationError

from lexicon.lexicon_store import get_lexicon
from integration.task_exporter import TaskExporter
from scheduling.slot_suggester import SlotSuggester
from todo_generator.models import Task


def test_task_invalid_duration():
    with pytest.raises(ValidationError):
        Task(title="Bad", estimated_duration=0)


def test_task_empty_title():
    with pytest.raises(ValidationError):
        Task(title="")


def test_task_blank_title():
    with pytest.raises(ValidationError):
        Task(title="   ")


def test_unknown_lexicon():
    with pytest.raises(ValueError):
        get_lexicon("fr")


def test_unknown_export_format():
    with pytest.raises(ValueError):
        TaskExporter().export([Task(title="X")], "pdf")


def test_slot_range_must_be_positive(now):
    with pytest.raises(ValueError):
        SlotSuggester().suggest([Task(title="X")], now, now)


def test_blank_content_is_not_an_error(generator):
    for content in ("", "   ", "\n\t"):
        analysis = generator.generate(content)
        assert analysis.extracted_tasks == []
        assert analysis.partial is False


def test_task_duration_upper_bound():
    with pytest.raises(ValidationError):
        Task(title="Bad", estimated_duration=10**17)
