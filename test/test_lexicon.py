from dataclasses import replace
from types import MappingProxyType

import pytest

from lexicon.lexicon_store import DEFAULT_LEXICON, ENGLISH, GERMAN, get_lexicon
from todo_generator.models import TaskCategory


def test_default_lexicon_is_union():
    assert "dringend" in DEFAULT_LEXICON.urgency
    assert "urgent" in DEFAULT_LEXICON.urgency
    assert "erledige" in DEFAULT_LEXICON.action_verbs
    assert "prepare" in DEFAULT_LEXICON.action_verbs
    assert DEFAULT_LEXICON.weekdays["freitag"] == DEFAULT_LEXICON.weekdays["friday"] == 4


def test_merge_prefers_left_side():
    custom = replace(ENGLISH, name="custom", urgency=MappingProxyType({"urgent": 0.2}))
    merged = custom.merge(ENGLISH)
    assert merged.urgency["urgent"] == 0.2
    assert merged.urgency["critical"] == 1.0
    assert merged.name == "custom+en"


def test_category_order_is_preserved():
    keys = list(DEFAULT_LEXICON.categories)
    assert keys[0] == "dringend"
    assert keys.index("termin") < keys.index("arzt")
    assert DEFAULT_LEXICON.categories["dentist"] is TaskCategory.HEALTH


def test_tables_are_read_only():
    with pytest.raises(TypeError):
        GERMAN.urgency["neu"] = 0.5


def test_phrases_longest_first():
    assert ENGLISH.phrases(ENGLISH.relative_days)[0] == ("day", "after", "tomorrow")


def test_get_lexicon():
    assert get_lexicon("de") is GERMAN
    assert get_lexicon("default") is DEFAULT_LEXICON
