"""Tests for settler state and wellbeing."""

import pytest

from skyward.config import ConsumptionSettings
from skyward.models.settler import (
    BuildingInfrastructure,
    BuildingShelter,
    Idle,
    OnExpedition,
    Role,
    Settler,
    unique_name,
)


def _settler(**kwargs) -> Settler:
    data = {"name": "Riley", "role": Role.GENERALIST}
    data.update(kwargs)
    return Settler(**data)


class TestClamping:
    @pytest.mark.parametrize("amount", [-250, -101, -1, 0, 1, 99, 250])
    def test_health_stays_in_range(self, amount):
        s = _settler(health=50)
        s.adjust_health(amount)
        assert 0 <= s.health <= 100

    def test_adjust_returns_applied_delta(self):
        s = _settler(health=95, morale=3)
        assert s.adjust_health(10) == 5
        assert s.adjust_morale(-10) == -3
        assert s.health == 100
        assert s.morale == 0

    def test_mixed_sequence_never_leaves_range(self):
        s = _settler(health=10, morale=90)
        for amount in [-30, 80, 80, -5, -200, 15, 300]:
            s.adjust_health(amount)
            s.adjust_morale(-amount)
            assert 0 <= s.health <= 100
            assert 0 <= s.morale <= 100

    def test_update_morale_message(self):
        s = _settler(morale=50)
        msg = s.update_morale(10, "successful expedition")
        assert s.morale == 60
        assert "increased by 10" in msg

    def test_update_morale_at_cap(self):
        s = _settler(morale=100)
        msg = s.update_morale(5, "day survived")
        assert s.morale == 100
        assert "remains at 100" in msg


class TestPredicates:
    def test_activity_kinds(self):
        s = _settler()
        assert s.is_idle and s.is_available and not s.is_away

        s.activity = OnExpedition(return_day=4)
        assert s.is_away and not s.is_available

        s.activity = BuildingShelter()
        assert not s.is_away and not s.is_idle

        s.activity = BuildingInfrastructure(project_id="abc")
        assert s.activity_label() == "Building infrastructure"

        s.set_idle()
        assert isinstance(s.activity, Idle)

    def test_recovering_is_not_available(self):
        s = _settler()
        s.start_recovery(2)
        assert s.is_idle
        assert not s.is_available

    def test_dead_and_abandoned(self):
        assert _settler(health=0).is_dead
        assert _settler(morale=0).has_abandoned
        assert not _settler(health=1, morale=1).is_dead

    def test_activity_parses_from_dict(self):
        s = Settler.model_validate({"name": "Quinn", "activity": {"kind": "expedition", "return_day": 7}})
        assert isinstance(s.activity, OnExpedition)
        assert s.activity.return_day == 7


class TestRecovery:
    def test_counts_down_to_available(self):
        s = _settler()
        s.start_recovery(2)
        assert "still recovering" in s.update_recovery()
        assert s.recovering
        assert "fully recovered" in s.update_recovery()
        assert not s.recovering
        assert s.update_recovery() is None


class TestHealing:
    def test_medic_heals_more_and_cures(self):
        s = _settler(health=40, wounded=True)
        result = s.heal(15, 15, by_medic=True)
        assert result["health_gained"] == 30
        assert result["cured_wound"]
        assert not s.wounded

    def test_heal_without_medic_keeps_wound(self):
        s = _settler(health=40, wounded=True)
        result = s.heal(15, 15, by_medic=False)
        assert result["health_gained"] == 15
        assert s.wounded

    def test_heal_caps_at_100(self):
        s = _settler(health=90)
        assert s.heal(15, 15, by_medic=True)["new_health"] == 100


class TestWellbeing:
    def test_starving_three_days_without_hope(self):
        s = _settler(health=100, days_without_food=3)
        s.update_wellbeing(0, ConsumptionSettings())
        assert s.health == 85

    def test_first_day_hungry(self):
        s = _settler(health=100, days_without_food=1)
        s.update_wellbeing(0, ConsumptionSettings())
        assert s.health == 90

    def test_thirst_hits_morale(self):
        s = _settler(morale=100, days_without_water=2)
        s.update_wellbeing(0, ConsumptionSettings())
        assert s.morale == 75

    def test_hope_mitigation_capped_at_half(self):
        s = _settler(health=100, days_without_food=3)
        s.update_wellbeing(100, ConsumptionSettings())
        # ceil(15 * 0.5)
        assert s.health == 92

    def test_fed_settler_unchanged(self):
        s = _settler(health=70, morale=70)
        assert s.update_wellbeing(30, ConsumptionSettings()) is None
        assert (s.health, s.morale) == (70, 70)


class TestUniqueName:
    def test_free_name_unchanged(self):
        assert unique_name("Riley", {"Quinn"}) == "Riley"

    def test_suffixes(self):
        assert unique_name("Riley", {"Riley"}) == "Riley 2"
        assert unique_name("Riley", {"Riley", "Riley 2"}) == "Riley 3"
