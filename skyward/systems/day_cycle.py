"""Day cycle - the phase state machine. Knows nothing about I/O."""

from __future__ import annotations
from enum import Enum
import logging

logger = logging.getLogger(__name__)


class DayPhase(str, Enum):
    MORNING = "morning"
    MIDDAY = "midday"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    TERMINAL = "terminal"


class InvalidTransition(ValueError):
    """Raised when the cycle is asked to jump somewhere it cannot go."""


NEXT_PHASE = {
    DayPhase.MORNING: DayPhase.MIDDAY,
    DayPhase.MIDDAY: DayPhase.AFTERNOON,
    DayPhase.AFTERNOON: DayPhase.EVENING,
    DayPhase.EVENING: DayPhase.MORNING,
}


class DayCycle:
    """MORNING -> MIDDAY -> AFTERNOON -> EVENING -> MORNING, until nobody is left."""

    def __init__(self, day: int = 1, phase: DayPhase = DayPhase.MORNING):
        self.day = day
        self.phase = phase

    @property
    def is_over(self) -> bool:
        return self.phase == DayPhase.TERMINAL

    @staticmethod
    def can_transition(current: DayPhase, target: DayPhase) -> bool:
        if current == DayPhase.TERMINAL:
            return False
        if target == DayPhase.TERMINAL:
            return True
        return NEXT_PHASE[current] == target

    def transition(self, target: DayPhase) -> DayPhase:
        if not self.can_transition(self.phase, target):
            raise InvalidTransition(f"Cannot go from {self.phase.value} to {target.value}")
        if self.phase == DayPhase.EVENING and target == DayPhase.MORNING:
            self.day += 1
        logger.debug("Day %d: %s -> %s", self.day, self.phase.value, target.value)
        self.phase = target
        return target

    def advance(self, roster_empty: bool = False) -> DayPhase:
        """Move to the next phase, or to TERMINAL once the roster is empty."""
        if self.is_over:
            raise InvalidTransition("The game is over")
        if roster_empty:
            return self.transition(DayPhase.TERMINAL)
        return self.transition(NEXT_PHASE[self.phase])
