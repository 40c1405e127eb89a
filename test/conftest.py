from datetime import datetime

import pytest

from pipeline.todo_generator import TodoGenerator
from todo_generator.models import AnalysisContext

# a Wednesday
NOW = datetime(2026, 10, 14, 10, 0)

EXAMPLE_NOTES = (
    "Bitte erledige das Budget-Review dringend heute. "
    "Maria soll die Präsentation für Freitag vorbereiten."
)


@pytest.fixture
def example_notes():
    return EXAMPLE_NOTES


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def context(now):
    return AnalysisContext(now=now)


@pytest.fixture
def generator_factory():
    def _make(**kwargs):
        return TodoGenerator(**kwargs)
    return _make


@pytest.fixture
def generator(generator_factory):
    return generator_factory()
