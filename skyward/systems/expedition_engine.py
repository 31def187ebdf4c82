"""Expedition engine - rolls everything about a trip the moment it departs.

The whole outcome (haul, daily events, survivor, status report) is decided up
front; the morning phase then reveals it on the report and return days.
"""

from __future__ import annotations
from math import ceil, floor
from random import Random
from typing import Iterable, Optional, TYPE_CHECKING
import logging

from skyward.models.expedition import Expedition, Radius, Survivor
from skyward.models.settlement import Resources, ResourceType
from skyward.models.settler import Role, unique_name

if TYPE_CHECKING:
    from skyward.config import GameConfig
    from skyward.models.settler import Settler
    from skyward.systems.event_system import EventSystem

logger = logging.getLogger(__name__)

GENERIC_REPORTS = [
    "is finding good scavenging spots",
    "has found some supplies",
    "is making steady progress",
    "has encountered some difficulties but continues",
    "reports the area is more dangerous than expected",
    "has found evidence of other survivors",
]


class ExpeditionEngine:
    """Creates expeditions and resolves their randomized outcomes."""

    def __init__(self, config: "GameConfig", event_system: "EventSystem", rng: Optional[Random] = None):
        self.config = config
        self.event_system = event_system
        self.rng = rng or Random()

    def _pick(self, items: list):
        return items[floor(self.rng.random() * len(items))]

    # ===== Creation =====

    def create(
        self,
        settler: "Settler",
        radius: Radius | str,
        departure_day: int,
        duration: Optional[int] = None,
    ) -> Expedition:
        """Build an expedition. Unknown radius values raise ValueError."""
        radius = Radius(radius)
        settings = self.config.expedition

        if radius == Radius.EMERGENCY:
            duration = 1
        elif duration is None:
            span = settings.duration[radius]
            duration = self.rng.randint(span.min, span.max)

        cost = settings.supply_cost.get(radius)
        supply_cost = Resources(food=cost.food, water=cost.water) if cost else Resources()
        if radius == Radius.EMERGENCY:
            supply_cost = Resources()

        return Expedition(
            settler=settler,
            radius=radius,
            duration=duration,
            supply_cost=supply_cost,
            recover_time=settings.recover_time.get(radius, 1),
            departure_day=departure_day,
        )

    # ===== Processing =====

    def process_expedition(self, expedition: Expedition, taken_names: Iterable[str] = ()) -> Expedition:
        """Roll the haul, daily events, survivor and status report, then fix the return day."""
        self.generate_base_resources(expedition)

        for day in range(1, expedition.duration + 1):
            event = self.event_system.generate_event(expedition.settler, expedition)
            if event:
                event.day = day
                expedition.events.append(event)

        if expedition.radius != Radius.EMERGENCY:
            chance = self.config.expedition.survivor_chance.get(expedition.radius, 0)
            if self.rng.random() < chance:
                expedition.survivor = self.generate_survivor(set(taken_names))
                expedition.found_survivor = True

        if expedition.duration >= 2:
            expedition.status_report_day = expedition.duration // 2
            expedition.status_report = self.generate_status_report(expedition)

        expedition.return_day = expedition.departure_day + expedition.duration
        logger.info(
            "Expedition %s: %s, %d day(s), haul %s, %d event(s)",
            expedition.id, expedition.settler.name, expedition.duration,
            expedition.resources.nonzero(), len(expedition.events),
        )
        return expedition

    def generate_base_resources(self, expedition: Expedition) -> None:
        settings = self.config.expedition

        if expedition.radius == Radius.EMERGENCY:
            self._generate_emergency_resources(expedition)
            return

        success = self.rng.random() < settings.success_chance.get(expedition.radius, 0)
        if not success:
            self._handle_failure(expedition)
            return

        res = self.config.expedition_resources
        base = floor(expedition.duration * res.multiplier.get(expedition.radius, 1))
        factor = res.variability.min + self.rng.random() * (res.variability.max - res.variability.min)
        adjusted = ceil(base * factor)

        for resource in ResourceType:
            amount = floor(adjusted * res.shares.get(resource, 0))
            if resource in (ResourceType.FOOD, ResourceType.WATER):
                amount = max(1, amount)
            expedition.add_resource(resource, amount)

        if self.rng.random() < settings.jackpot_chance:
            expedition.jackpot_find = True
            for resource in ResourceType:
                expedition.add_resource(resource, expedition.resources.get(resource))

        if self.rng.random() < settings.delay_chance:
            expedition.duration += self.rng.randint(settings.delay_days.min, settings.delay_days.max)
            expedition.delay_reason = "encountered obstacles"

    def _generate_emergency_resources(self, expedition: Expedition) -> None:
        settings = self.config.expedition
        if self.rng.random() >= settings.success_chance.get(Radius.EMERGENCY, 0):
            expedition.failure_reason = "couldn't find any resources"
            return
        span = settings.emergency_yield
        expedition.add_resource(ResourceType.FOOD, self.rng.randint(span.min, span.max))
        expedition.add_resource(ResourceType.WATER, self.rng.randint(span.min, span.max))

    def _handle_failure(self, expedition: Expedition) -> None:
        if self.rng.random() < self.config.expedition.total_failure_chance:
            expedition.resources = Resources()
            expedition.failure_reason = "couldn't find any resources"
        else:
            expedition.add_resource(self._pick([ResourceType.FOOD, ResourceType.WATER]), 1)
            expedition.failure_reason = "found very little"

    def generate_survivor(self, taken_names: set[str], visitor: bool = False) -> Survivor:
        """Synthesize a stranger. Visitors arrive healthier and bring food and water more often."""
        settings = self.config.survivors
        health_span = settings.visitor_health if visitor else settings.expedition_health
        morale_span = settings.visitor_morale if visitor else settings.expedition_morale
        health = self.rng.randint(health_span.min, health_span.max)
        morale = self.rng.randint(morale_span.min, morale_span.max)

        roll = self.rng.random()
        if roll < settings.generalist_threshold:
            role = Role.GENERALIST
        elif roll < settings.mechanic_threshold:
            role = Role.MECHANIC
        else:
            role = Role.MEDIC

        name = unique_name(self._pick(settings.names), taken_names)

        supply_chance = 0.7 if visitor else 0.5
        gift = Resources(
            food=self.rng.randint(1, 2) if self.rng.random() < supply_chance else 0,
            water=self.rng.randint(1, 2) if self.rng.random() < supply_chance else 0,
        )
        if visitor:
            gift.meds = 1 if self.rng.random() < 0.3 else 0
        else:
            gift.meds = 1 if role == Role.MEDIC else (1 if self.rng.random() < 0.2 else 0)
            gift.materials = (
                self.rng.randint(1, 3) if role == Role.MECHANIC
                else (1 if self.rng.random() < 0.2 else 0)
            )

        return Survivor(name=name, role=role, health=health, morale=morale, gift=gift)

    def generate_status_report(self, expedition: Expedition) -> str:
        name = expedition.settler.name
        held = expedition.resources

        if expedition.failure_reason:
            return f"{name} {expedition.failure_reason} but continues searching"
        if any(
            e.day <= expedition.status_report_day and ("Hostile" in e.name or "Contaminated" in e.name)
            for e in expedition.events
        ):
            return f"{name} has encountered hostile scavengers but escaped"
        if held.meds > 0:
            return f"{name} has found medical supplies"
        if held.materials > 0:
            return f"{name} has found useful building materials"
        if held.water >= 3:
            return f"{name} has found a good water source"
        if held.food >= 3:
            return f"{name} has found a food cache"
        return f"{name} {self._pick(GENERIC_REPORTS)}"
