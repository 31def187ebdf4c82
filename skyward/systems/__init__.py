"""Core game systems: events, expeditions, choices, the day cycle and the narrative log."""

from .event_log import EventLog
from .event_system import EventSystem
from .expedition_engine import ExpeditionEngine
from .day_cycle import DayCycle, DayPhase, InvalidTransition
from .choices import ChoiceConstraints, ChoiceProvider, ScriptedChoices, AutoChoices

__all__ = [
    "EventLog",
    "EventSystem",
    "ExpeditionEngine",
    "DayCycle",
    "DayPhase",
    "InvalidTransition",
    "ChoiceConstraints",
    "ChoiceProvider",
    "ScriptedChoices",
    "AutoChoices",
]
