"""Tests for the settlement economy: resources, hope, stability and shelter."""

import random

from skyward.config import GameConfig
from skyward.models.settlement import Resources, ResourceType, Settlement
from skyward.models.settler import BuildingShelter, OnExpedition, Role, Settler


def _settlers(*morales: int) -> list[Settler]:
    return [Settler(name=f"S{i}", morale=m) for i, m in enumerate(morales)]


def _settlement(**resources) -> Settlement:
    settlement = Settlement(GameConfig())
    for name, value in resources.items():
        settlement.resources.set(name, value)
    return settlement


class TestResources:
    def test_adjust_refuses_negative(self):
        res = Resources(food=2)
        assert not res.adjust("food", -3)
        assert res.food == 2
        assert res.adjust(ResourceType.FOOD, -2)
        assert res.food == 0

    def test_remove_insufficient_is_noop(self):
        settlement = _settlement(water=1)
        assert not settlement.remove_resource(ResourceType.WATER, 2)
        assert settlement.resources.water == 1

    def test_random_sequences_stay_non_negative(self):
        rng = random.Random(99)
        settlement = _settlement()
        for _ in range(500):
            resource = rng.choice(list(ResourceType))
            amount = rng.randint(0, 6)
            if rng.random() < 0.5:
                settlement.add_resource(resource, amount)
            else:
                settlement.remove_resource(resource, amount)
            assert all(v >= 0 for v in settlement.resources.as_dict().values())

    def test_negative_add_rejected(self):
        settlement = _settlement(food=3)
        assert not settlement.add_resource(ResourceType.FOOD, -5)
        assert settlement.resources.food == 3

    def test_has_resources(self):
        settlement = _settlement(food=1, water=1)
        assert settlement.has_resources(Resources(food=1, water=1))
        assert not settlement.has_resources({"food": 2})

    def test_starting_stockpile(self):
        res = Settlement().resources
        assert (res.food, res.water, res.meds, res.materials) == (9, 9, 1, 3)


class TestHope:
    def test_average_fifty_gets_full_cushion(self):
        assert _settlement().get_hope(_settlers(50, 50)) == 60

    def test_extremes_have_no_cushion(self):
        settlement = _settlement()
        assert settlement.get_hope(_settlers(0, 0, 0)) == 0
        assert settlement.get_hope(_settlers(100, 100)) == 100

    def test_empty_roster(self):
        assert _settlement().get_hope([]) == 50

    def test_always_in_range(self):
        settlement = _settlement()
        for morale in range(0, 101, 5):
            hope = settlement.get_hope(_settlers(morale, 100 - morale // 2))
            assert 0 <= hope <= 100

    def test_visitor_chance(self):
        settlement = _settlement()
        assert settlement.get_visitor_chance(29) == 0
        assert settlement.get_visitor_chance(30) == 8
        assert settlement.get_visitor_chance(100) == 15

    def test_description_bands(self):
        settlement = _settlement()
        assert "bleak" in settlement.hope_description(10)
        assert "inspired" in settlement.hope_description(85)
        assert "40%" in settlement.hope_description(80)


class TestStability:
    def test_bonus_once_per_streak(self):
        settlement = _settlement(food=9, water=9)
        settlers = _settlers(50, 50, 50)

        assert settlement.track_resource_stability(settlers) == []
        assert settlement.track_resource_stability(settlers) == []
        messages = settlement.track_resource_stability(settlers)
        assert len(messages) == 2
        assert all(s.morale == 60 for s in settlers)

        # Keeps counting but does not pay again
        assert settlement.track_resource_stability(settlers) == []
        assert all(s.morale == 60 for s in settlers)

    def test_shortage_resets_streak(self):
        settlement = _settlement(food=9, water=9)
        settlers = _settlers(50, 50, 50)
        settlement.track_resource_stability(settlers)
        settlement.track_resource_stability(settlers)
        settlement.resources.food = 1
        messages = settlement.track_resource_stability(settlers)
        assert len(messages) == 1
        assert "water" in messages[0]
        assert settlement.stability[ResourceType.FOOD] == 0

    def test_no_bonus_with_someone_away(self):
        settlement = _settlement(food=9, water=9)
        settlers = _settlers(50, 50, 50)
        settlers[0].activity = OnExpedition(return_day=9)
        for _ in range(3):
            assert settlement.track_resource_stability(settlers) == []
        assert all(s.morale == 50 for s in settlers)


class TestShelter:
    def test_gating_on_materials(self):
        settlement = _settlement(materials=3)
        check = settlement.can_upgrade_shelter()
        assert not check.possible
        assert check.reason == "Not enough materials. Need 15, have 3."

    def test_failed_start_mutates_nothing(self):
        settlement = _settlement(materials=3)
        mechanic = Settler(name="Casey", role=Role.MECHANIC)
        result = settlement.start_shelter_upgrade(mechanic)
        assert not result["success"]
        assert settlement.resources.materials == 3
        assert mechanic.is_idle
        assert settlement.shelter_upgrade is None

    def test_possible_reports_next_tier(self):
        settlement = _settlement(materials=20)
        check = settlement.can_upgrade_shelter()
        assert check.possible
        assert check.next_tier == 1
        assert check.materials_needed == 15
        assert check.time_needed == 3

    def test_upgrade_runs_to_completion(self):
        settlement = _settlement(materials=15)
        mechanic = Settler(name="Casey", role=Role.MECHANIC)
        assert settlement.start_shelter_upgrade(mechanic)["success"]
        assert settlement.resources.materials == 0
        assert isinstance(mechanic.activity, BuildingShelter)

        assert not settlement.can_upgrade_shelter().possible
        assert settlement.can_upgrade_shelter().reason == "Shelter upgrade already in progress."

        first = settlement.process_shelter_upgrade([mechanic])
        second = settlement.process_shelter_upgrade([mechanic])
        assert not first.complete and first.days_left == 2
        assert not second.complete
        done = settlement.process_shelter_upgrade([mechanic])
        assert done.complete
        assert done.hope_bonus == 5
        assert settlement.shelter_tier == 1
        assert settlement.shelter_name == "Basic Tents"
        assert mechanic.is_idle
        assert settlement.process_shelter_upgrade([mechanic]) is None

    def test_max_tier(self):
        settlement = _settlement(materials=100)
        settlement.shelter_tier = 3
        check = settlement.can_upgrade_shelter()
        assert not check.possible
        assert check.reason == "Shelter is already at maximum tier."

    def test_release_stops_work(self):
        settlement = _settlement(materials=15)
        mechanic = Settler(name="Casey", role=Role.MECHANIC)
        settlement.start_shelter_upgrade(mechanic)
        messages = settlement.release_settler("Casey")
        assert settlement.shelter_upgrade is None
        assert "Basic Tents" in messages[0]
