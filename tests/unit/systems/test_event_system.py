"""Tests for expedition events."""

from skyward.config import GameConfig
from skyward.models.expedition import Expedition, Radius
from skyward.models.settler import Settler
from skyward.systems.event_system import (
    NEGATIVE_EVENTS,
    NEUTRAL_EVENTS,
    POSITIVE_EVENTS,
    EventCategory,
    EventSystem,
)


class _StubRandom:
    """Scripted stand-in for random.Random."""

    def __init__(self, floats=None, ints=None):
        self.floats = list(floats or [])
        self.ints = list(ints or [])

    def random(self):
        return self.floats.pop(0) if self.floats else 0.99

    def randint(self, a, b):
        return self.ints.pop(0) if self.ints else a


def _expedition(radius=Radius.SMALL, **resources) -> Expedition:
    expedition = Expedition(settler=Settler(name="Riley"), radius=radius, duration=2)
    for name, value in resources.items():
        expedition.resources.set(name, value)
    return expedition


def _event(pool, name):
    return next(e for e in pool if e.name == name)


class TestPools:
    def test_pool_sizes(self):
        assert len(POSITIVE_EVENTS) == 5
        assert len(NEGATIVE_EVENTS) == 5
        assert len(NEUTRAL_EVENTS) == 3

    def test_categories_match_pools(self):
        assert all(e.category == EventCategory.POSITIVE for e in POSITIVE_EVENTS)
        assert all(e.category == EventCategory.NEGATIVE for e in NEGATIVE_EVENTS)
        assert all(e.category == EventCategory.NEUTRAL for e in NEUTRAL_EVENTS)


class TestRolls:
    def test_no_event_above_chance(self):
        system = EventSystem(GameConfig(), _StubRandom([0.5]))
        expedition = _expedition()
        assert system.generate_event(expedition.settler, expedition) is None

    def test_category_thresholds(self):
        system = EventSystem(GameConfig(), _StubRandom([0.1, 0.7, 0.95]))
        assert system.pick_category(Radius.SMALL) == EventCategory.POSITIVE
        assert system.pick_category(Radius.SMALL) == EventCategory.NEGATIVE
        assert system.pick_category(Radius.SMALL) == EventCategory.NEUTRAL

    def test_unknown_radius_uses_defaults(self):
        system = EventSystem(GameConfig(), _StubRandom([0.45]))
        assert system.event_chance("nowhere") == 0.3
        assert system.pick_category("nowhere") == EventCategory.POSITIVE

    def test_picks_by_index(self):
        # event roll, category roll, pick roll -> last positive event
        system = EventSystem(GameConfig(), _StubRandom([0.1, 0.1, 0.99], ints=[2, 1]))
        expedition = _expedition()
        event = system.generate_event(expedition.settler, expedition)
        assert event.name == "Friendly Survivor"
        assert expedition.resources.food == 2
        assert expedition.resources.water == 1


class TestEffects:
    def test_scavengers_take_part_of_the_food(self):
        expedition = _expedition(food=4)
        result = _event(NEGATIVE_EVENTS, "Hostile Scavengers").effect(expedition.settler, expedition, _StubRandom())
        assert expedition.resources.food == 2
        assert "took 2 food" in result

    def test_scavengers_hurt_when_nothing_to_take(self):
        expedition = _expedition(food=2, water=1)
        _event(NEGATIVE_EVENTS, "Hostile Scavengers").effect(expedition.settler, expedition, _StubRandom(ints=[9]))
        assert expedition.settler.health == 91
        assert expedition.resources.food == 2

    def test_bad_fall_wounds(self):
        expedition = _expedition()
        _event(NEGATIVE_EVENTS, "Bad Fall").effect(expedition.settler, expedition, _StubRandom())
        assert expedition.settler.wounded
        assert expedition.settler.health == 85

    def test_damage_clamps_at_zero(self):
        expedition = _expedition()
        expedition.settler.health = 5
        _event(NEGATIVE_EVENTS, "Roof Collapse").effect(expedition.settler, expedition, _StubRandom())
        assert expedition.settler.health == 0

    def test_old_photos_lift_morale(self):
        expedition = _expedition()
        expedition.settler.morale = 50
        _event(NEUTRAL_EVENTS, "Old Photos").effect(expedition.settler, expedition, _StubRandom())
        assert expedition.settler.morale == 55
