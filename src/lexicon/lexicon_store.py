"""Keyword tables the extraction stages read from.

A ``Lexicon`` is plain data: every stage receives one by injection and only
reads from it, so one instance can be shared by any number of concurrent
pipeline runs. Language support means swapping the tables, never the
algorithms.
"""
from __future__ import annotations

from dataclasses import dataclass, fields
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, Mapping, Tuple

from todo_generator.models import RecurrencePattern, TaskCategory


def _table(data: Dict) -> Mapping:
    return MappingProxyType(dict(data))


def _words(items: Iterable[str]) -> FrozenSet[str]:
    return frozenset(item.lower() for item in items)


# minutes per category when nothing in the text says otherwise
CATEGORY_DEFAULT_MINUTES: Mapping[TaskCategory, int] = _table({
    TaskCategory.URGENT: 30,
    TaskCategory.MEETING: 60,
    TaskCategory.WORK: 120,
    TaskCategory.PERSONAL: 90,
    TaskCategory.PROJECT: 240,
    TaskCategory.HEALTH: 45,
    TaskCategory.SHOPPING: 30,
    TaskCategory.HOME: 60,
    TaskCategory.OTHER: 60,
})


@dataclass(frozen=True)
class Lexicon:
    name: str
    version: str

    # keyword -> urgency score in [0, 1]
    urgency: Mapping[str, float]
    # keyword -> category, first match (insertion order) wins
    categories: Mapping[str, TaskCategory]
    # whole-token hints used when no category keyword matched
    category_hints: Mapping[TaskCategory, FrozenSet[str]]
    # unit keyword -> minutes
    time_units: Mapping[str, int]
    # qualitative keyword -> minutes
    duration_keywords: Mapping[str, int]
    stopwords: FrozenSet[str]
    pronouns: FrozenSet[str]
    action_verbs: FrozenSet[str]
    imperative_markers: FrozenSet[str]
    recurrence: Mapping[str, RecurrencePattern]
    # phrase -> day offset from "now"
    relative_days: Mapping[str, int]
    relative_weeks: Mapping[str, int]
    # name -> weekday, 0 = Monday
    weekdays: Mapping[str, int]
    sequencing_markers: FrozenSet[str]

    def merge(self, other: "Lexicon") -> "Lexicon":
        """Combine two lexicons; on conflicting keys ``self`` wins."""
        merged = {}
        for f in fields(self):
            mine, theirs = getattr(self, f.name), getattr(other, f.name)
            if isinstance(mine, str):
                merged[f.name] = f"{mine}+{theirs}"
            elif isinstance(mine, frozenset):
                merged[f.name] = mine | theirs
            elif f.name == "category_hints":
                keys = list(mine) + [k for k in theirs if k not in mine]
                merged[f.name] = _table({
                    k: mine.get(k, frozenset()) | theirs.get(k, frozenset()) for k in keys
                })
            else:
                combined = dict(mine)
                for key, value in theirs.items():
                    combined.setdefault(key, value)
                merged[f.name] = _table(combined)
        return Lexicon(**merged)

    def phrases(self, table: Mapping[str, int]) -> Tuple[Tuple[str, ...], ...]:
        """Keys of ``table`` split into words, longest phrase first."""
        return tuple(sorted((tuple(k.split()) for k in table), key=len, reverse=True))


GERMAN = Lexicon(
    name="de",
    version="1.0",
    urgency=_table({
        "sofort": 1.0,
        "kritisch": 1.0,
        "überfällig": 1.0,
        "asap": 0.95,
        "dringend": 0.9,
        "umgehend": 0.9,
        "eilig": 0.9,
        "verspätet": 0.9,
        "wichtig": 0.8,
        "heute": 0.8,
        "morgen": 0.7,
        "bald": 0.6,
        "diese woche": 0.6,
        "nächste woche": 0.4,
    }),
    categories=_table({
        "dringend": TaskCategory.URGENT,
        "sofort": TaskCategory.URGENT,
        "notfall": TaskCategory.URGENT,
        "meeting": TaskCategory.MEETING,
        "termin": TaskCategory.MEETING,
        "besprechung": TaskCategory.MEETING,
        "workshop": TaskCategory.MEETING,
        "projekt": TaskCategory.PROJECT,
        "arbeit": TaskCategory.WORK,
        "büro": TaskCategory.WORK,
        "bericht": TaskCategory.WORK,
        "budget": TaskCategory.WORK,
        "präsentation": TaskCategory.WORK,
        "kunde": TaskCategory.WORK,
        "einkaufen": TaskCategory.SHOPPING,
        "supermarkt": TaskCategory.SHOPPING,
        "shop": TaskCategory.SHOPPING,
        "kaufen": TaskCategory.SHOPPING,
        "arzt": TaskCategory.HEALTH,
        "gesundheit": TaskCategory.HEALTH,
        "medizin": TaskCategory.HEALTH,
        "haushalt": TaskCategory.HOME,
        "reinigung": TaskCategory.HOME,
        "putzen": TaskCategory.HOME,
        "kochen": TaskCategory.HOME,
        "schule": TaskCategory.PERSONAL,
        "ausbildung": TaskCategory.PERSONAL,
        "lernen": TaskCategory.PERSONAL,
    }),
    category_hints=_table({
        TaskCategory.MEETING: _words(["anruf", "telefonat", "treffen", "call"]),
        TaskCategory.WORK: _words(["kollegen", "chef", "team", "deadline", "server"]),
        TaskCategory.SHOPPING: _words(["milch", "brot", "eier"]),
        TaskCategory.HEALTH: _words(["training", "medikament", "zahnarzt"]),
        TaskCategory.HOME: _words(["wäsche", "garten", "home"]),
    }),
    time_units=_table({
        "minute": 1, "minuten": 1, "min": 1,
        "stunde": 60, "stunden": 60, "std": 60,
        "tag": 1440, "tage": 1440, "tagen": 1440,
        "woche": 10080, "wochen": 10080,
    }),
    duration_keywords=_table({
        "kurz": 15, "kurze": 15, "kurzes": 15,
        "schnell": 30, "schnelle": 30,
        "einfach": 30, "einfache": 30,
        "kurzfristig": 60,
        "mittel": 120,
        "normal": 180,
        "länger": 240,
        "aufwändig": 360, "aufwendig": 360,
        "komplex": 480, "komplexe": 480, "komplexes": 480,
    }),
    stopwords=_words([
        "der", "die", "das", "den", "dem", "des", "ein", "eine", "einen", "einem", "einer",
        "und", "oder", "aber", "in", "im", "auf", "an", "am", "um", "zu", "zum", "zur",
        "für", "mit", "von", "bei", "nach", "vor", "ist", "sind", "war", "waren",
        "haben", "hat", "wird", "werden", "bitte", "dann", "auch", "noch", "nicht",
        "hallo", "danke", "dringend", "wichtig", "heute", "morgen", "übermorgen",
        "montag", "dienstag", "mittwoch", "donnerstag", "freitag", "samstag", "sonntag",
        "er", "sie", "es",
    ]),
    pronouns=_words([
        "ich", "mich", "mir", "mein", "meine", "du", "dich", "dir", "dein", "deine",
        "wir", "uns", "unser", "unsere", "ihr", "euch", "euer", "eure",
    ]),
    action_verbs=_words([
        "erledigen", "erledige", "machen", "mache", "tun", "umsetzen", "durchführen",
        "organisieren", "organisiere", "planen", "plane", "vorbereiten", "fertigstellen",
        "kontrollieren", "überprüfen", "prüfen", "anrufen", "schreiben", "schreibe",
        "senden", "schicken", "besuchen", "kaufen", "verkaufen", "installieren",
        "konfigurieren", "testen", "dokumentieren", "präsentieren", "buchen",
        "aktualisieren", "klären", "vereinbaren", "reparieren", "bezahlen", "einreichen",
    ]),
    imperative_markers=_words([
        "bitte", "machen", "tun", "erledigen", "sollte", "sollten", "soll", "sollen",
        "muss", "müssen", "könnte", "kann", "werden", "wird", "geht",
    ]),
    recurrence=_table({
        "täglich": RecurrencePattern.DAILY,
        "jeden tag": RecurrencePattern.DAILY,
        "wöchentlich": RecurrencePattern.WEEKLY,
        "jede woche": RecurrencePattern.WEEKLY,
        "monatlich": RecurrencePattern.MONTHLY,
        "jeden monat": RecurrencePattern.MONTHLY,
        "jährlich": RecurrencePattern.YEARLY,
        "jedes jahr": RecurrencePattern.YEARLY,
    }),
    relative_days=_table({"heute": 0, "morgen": 1, "übermorgen": 2}),
    relative_weeks=_table({"diese woche": 0, "nächste woche": 7, "nächsten woche": 7}),
    weekdays=_table({
        "montag": 0, "dienstag": 1, "mittwoch": 2, "donnerstag": 3,
        "freitag": 4, "samstag": 5, "sonntag": 6,
    }),
    sequencing_markers=_words(["nach", "dann", "anschließend", "danach"]),
)


ENGLISH = Lexicon(
    name="en",
    version="1.0",
    urgency=_table({
        "immediately": 1.0,
        "critical": 1.0,
        "overdue": 1.0,
        "asap": 0.95,
        "urgent": 0.9,
        "important": 0.8,
        "today": 0.8,
        "tonight": 0.8,
        "tomorrow": 0.7,
        "soon": 0.6,
        "this week": 0.6,
        "next week": 0.4,
    }),
    categories=_table({
        "urgent": TaskCategory.URGENT,
        "emergency": TaskCategory.URGENT,
        "meeting": TaskCategory.MEETING,
        "appointment": TaskCategory.MEETING,
        "workshop": TaskCategory.MEETING,
        "project": TaskCategory.PROJECT,
        "office": TaskCategory.WORK,
        "report": TaskCategory.WORK,
        "budget": TaskCategory.WORK,
        "presentation": TaskCategory.WORK,
        "client": TaskCategory.WORK,
        "groceries": TaskCategory.SHOPPING,
        "supermarket": TaskCategory.SHOPPING,
        "shopping": TaskCategory.SHOPPING,
        "buy": TaskCategory.SHOPPING,
        "doctor": TaskCategory.HEALTH,
        "dentist": TaskCategory.HEALTH,
        "health": TaskCategory.HEALTH,
        "gym": TaskCategory.HEALTH,
        "household": TaskCategory.HOME,
        "cleaning": TaskCategory.HOME,
        "laundry": TaskCategory.HOME,
        "cook": TaskCategory.HOME,
        "school": TaskCategory.PERSONAL,
        "study": TaskCategory.PERSONAL,
    }),
    category_hints=_table({
        TaskCategory.MEETING: _words(["call", "sync", "standup"]),
        TaskCategory.WORK: _words(["work", "colleague", "boss", "team", "deadline", "server"]),
        TaskCategory.SHOPPING: _words(["milk", "bread", "eggs", "shop"]),
        TaskCategory.HEALTH: _words(["run", "training", "medication", "pills"]),
        TaskCategory.HOME: _words(["home", "garden", "dishes"]),
    }),
    time_units=_table({
        "minute": 1, "minutes": 1, "min": 1, "mins": 1,
        "hour": 60, "hours": 60, "hr": 60, "hrs": 60, "h": 60,
        "day": 1440, "days": 1440,
        "week": 10080, "weeks": 10080,
    }),
    duration_keywords=_table({
        "quick": 15,
        "brief": 15,
        "short": 30,
        "simple": 30,
        "easy": 30,
        "medium": 120,
        "long": 240,
        "lengthy": 240,
        "extensive": 360,
        "complex": 480,
    }),
    stopwords=_words([
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with",
        "by", "is", "are", "was", "were", "has", "have", "had", "be", "this", "that",
        "it", "please", "then", "after", "also", "not", "hi", "hello", "thanks",
        "today", "tomorrow", "tonight", "urgent", "important",
        "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
        "he", "she", "they",
    ]),
    pronouns=_words(["i", "me", "my", "mine", "we", "us", "our", "you", "your", "yours"]),
    action_verbs=_words([
        "do", "finish", "complete", "prepare", "organize", "plan", "call", "email",
        "write", "send", "review", "check", "buy", "book", "schedule", "fix", "update",
        "submit", "test", "document", "present", "deploy", "install", "configure",
        "clean", "pay", "contact", "discuss", "create", "draft",
    ]),
    imperative_markers=_words([
        "please", "must", "should", "need", "needs", "will", "shall", "let's",
    ]),
    recurrence=_table({
        "daily": RecurrencePattern.DAILY,
        "every day": RecurrencePattern.DAILY,
        "weekly": RecurrencePattern.WEEKLY,
        "every week": RecurrencePattern.WEEKLY,
        "monthly": RecurrencePattern.MONTHLY,
        "every month": RecurrencePattern.MONTHLY,
        "yearly": RecurrencePattern.YEARLY,
        "annually": RecurrencePattern.YEARLY,
        "every year": RecurrencePattern.YEARLY,
    }),
    relative_days=_table({"today": 0, "tonight": 0, "tomorrow": 1, "day after tomorrow": 2}),
    relative_weeks=_table({"this week": 0, "next week": 7}),
    weekdays=_table({
        "monday": 0, "tuesday": 1, "wednesday": 2, "thursday": 3,
        "friday": 4, "saturday": 5, "sunday": 6,
    }),
    sequencing_markers=_words(["after", "then", "subsequently", "afterwards"]),
)


DEFAULT_LEXICON = GERMAN.merge(ENGLISH)

_LEXICONS: Dict[str, Lexicon] = {
    "default": DEFAULT_LEXICON,
    "de": GERMAN,
    "en": ENGLISH,
}


def get_lexicon(name: str) -> Lexicon:
    try:
        return _LEXICONS[name]
    except KeyError:
        raise ValueError(f"unknown lexicon {name!r}, expected one of {sorted(_LEXICONS)}")
