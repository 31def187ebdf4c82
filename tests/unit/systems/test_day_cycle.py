"""Tests for the phase state machine."""

import pytest

from skyward.systems.day_cycle import DayCycle, DayPhase, InvalidTransition


class TestDayCycle:
    def test_full_day_wraps_and_counts(self):
        cycle = DayCycle()
        seen = [cycle.phase]
        for _ in range(4):
            seen.append(cycle.advance())
        assert seen == [
            DayPhase.MORNING, DayPhase.MIDDAY, DayPhase.AFTERNOON, DayPhase.EVENING, DayPhase.MORNING,
        ]
        assert cycle.day == 2

    def test_day_only_increments_on_morning(self):
        cycle = DayCycle()
        cycle.advance()
        cycle.advance()
        assert cycle.day == 1

    def test_skipping_a_phase_is_rejected(self):
        cycle = DayCycle()
        with pytest.raises(InvalidTransition):
            cycle.transition(DayPhase.AFTERNOON)
        assert cycle.phase == DayPhase.MORNING

    def test_empty_roster_ends_from_any_phase(self):
        for phase in (DayPhase.MORNING, DayPhase.MIDDAY, DayPhase.AFTERNOON, DayPhase.EVENING):
            cycle = DayCycle(day=3, phase=phase)
            assert cycle.advance(roster_empty=True) == DayPhase.TERMINAL
            assert cycle.is_over
            assert cycle.day == 3

    def test_terminal_is_final(self):
        cycle = DayCycle(phase=DayPhase.TERMINAL)
        assert not DayCycle.can_transition(DayPhase.TERMINAL, DayPhase.MORNING)
        with pytest.raises(InvalidTransition):
            cycle.advance()
        with pytest.raises(InvalidTransition):
            cycle.transition(DayPhase.MORNING)

    def test_invalid_transition_is_value_error(self):
        assert issubclass(InvalidTransition, ValueError)
