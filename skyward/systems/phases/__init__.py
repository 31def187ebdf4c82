"""The four phases of a day."""

from .morning import MorningPhase
from .midday import MiddayPhase
from .afternoon import AfternoonPhase
from .evening import EveningPhase

__all__ = ["MorningPhase", "MiddayPhase", "AfternoonPhase", "EveningPhase"]
