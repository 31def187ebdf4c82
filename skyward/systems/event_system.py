"""Event system - random things that happen to a settler on each day of an expedition."""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from math import ceil, floor
from random import Random
from typing import Callable, Optional, TYPE_CHECKING
import logging

from skyward.models.expedition import ExpeditionEvent
from skyward.models.settlement import ResourceType

if TYPE_CHECKING:
    from skyward.config import GameConfig
    from skyward.models.expedition import Expedition
    from skyward.models.settler import Settler

logger = logging.getLogger(__name__)


class EventCategory(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


Effect = Callable[["Settler", "Expedition", Random], str]


@dataclass(frozen=True)
class EventDefinition:
    """A static event template. The effect mutates through clamping setters only."""
    name: str
    description: str
    category: EventCategory
    effect: Effect


# ===== Positive =====

def _untouched_stockpile(settler: "Settler", expedition: "Expedition", rng: Random) -> str:
    food = rng.randint(1, 2)
    water = rng.randint(1, 2)
    expedition.add_resource(ResourceType.FOOD, food)
    expedition.add_resource(ResourceType.WATER, water)
    return f"Found extra {food} food and {water} water!"


def _rain_collector(settler: "Settler", expedition: "Expedition", rng: Random) -> str:
    water = rng.randint(2, 4)
    expedition.add_resource(ResourceType.WATER, water)
    return f"Collected {water} extra water!"


def _medical_cabinet(settler: "Settler", expedition: "Expedition", rng: Random) -> str:
    meds = rng.randint(1, 2)
    expedition.add_resource(ResourceType.MEDS, meds)
    return f"Found {meds} medicine!"


def _rooftop_garden(settler: "Settler", expedition: "Expedition", rng: Random) -> str:
    food = rng.randint(2, 4)
    expedition.add_resource(ResourceType.FOOD, food)
    return f"Harvested {food} extra food!"


def _friendly_survivor(settler: "Settler", expedition: "Expedition", rng: Random) -> str:
    food = rng.randint(1, 2)
    water = rng.randint(1, 2)
    expedition.add_resource(ResourceType.FOOD, food)
    expedition.add_resource(ResourceType.WATER, water)
    return f"Received {food} food and {water} water from a friendly survivor!"


# ===== Negative =====

def _roof_collapse(settler: "Settler", expedition: "Expedition", rng: Random) -> str:
    damage = rng.randint(10, 20)
    settler.adjust_health(-damage)
    if rng.random() < 0.5:
        settler.wounded = True
        return (
            f"{settler.name} was injured, losing {damage} health (now {settler.health}). "
            "The injury has left them WOUNDED and will need medicine to fully recover."
        )
    return f"{settler.name} was injured, losing {damage} health (now {settler.health})."


def _contaminated_water(settler: "Settler", expedition: "Expedition", rng: Random) -> str:
    damage = rng.randint(5, 15)
    settler.adjust_health(-damage)
    return f"{settler.name} got sick from contaminated water, losing {damage} health (now {settler.health})."


def _hostile_scavengers(settler: "Settler", expedition: "Expedition", rng: Random) -> str:
    held = expedition.resources
    lost_type = ""
    lost = 0

    # Never strips a critical resource bare
    if held.food > 2:
        lost = expedition.take_resource(ResourceType.FOOD, min(ceil(held.food / 2), floor(held.food * 0.75)))
        lost_type = "food"
    elif held.water > 2:
        lost = expedition.take_resource(ResourceType.WATER, min(ceil(held.water / 2), floor(held.water * 0.75)))
        lost_type = "water"
    elif held.materials > 1:
        lost = expedition.take_resource(ResourceType.MATERIALS, ceil(held.materials / 2))
        lost_type = "materials"
    elif held.meds > 0:
        lost = expedition.take_resource(ResourceType.MEDS, 1)
        lost_type = "medicine"

    if lost > 0:
        return f"Hostile scavengers took {lost} {lost_type} from {settler.name}!"

    damage = rng.randint(5, 15)
    settler.adjust_health(-damage)
    return f"Hostile scavengers attacked {settler.name}, causing {damage} damage (now {settler.health})!"


def _bad_fall(settler: "Settler", expedition: "Expedition", rng: Random) -> str:
    damage = rng.randint(15, 25)
    settler.adjust_health(-damage)
    settler.wounded = True
    return (
        f"{settler.name} fell and was injured, losing {damage} health (now {settler.health}). "
        "They are now WOUNDED and need medicine to fully recover."
    )


def _extreme_weather(settler: "Settler", expedition: "Expedition", rng: Random) -> str:
    health_loss = rng.randint(5, 10)
    morale_loss = rng.randint(10, 20)
    settler.adjust_health(-health_loss)
    settler.adjust_morale(-morale_loss)
    return f"{settler.name} was caught in bad weather, losing {health_loss} health and {morale_loss} morale."


# ===== Neutral =====

def _abandoned_camp(settler: "Settler", expedition: "Expedition", rng: Random) -> str:
    return "They find some signs of other survivors, but nothing useful."


def _strange_noises(settler: "Settler", expedition: "Expedition", rng: Random) -> str:
    return "The city feels alive in an unsettling way, but they continue their search."


def _old_photos(settler: "Settler", expedition: "Expedition", rng: Random) -> str:
    settler.adjust_morale(5)
    return f"{settler.name} finds old photos, bringing back memories (+5 morale)."


POSITIVE_EVENTS: tuple[EventDefinition, ...] = (
    EventDefinition("Untouched Stockpile", "They discover an untouched stockpile of supplies in an abandoned apartment.",
                    EventCategory.POSITIVE, _untouched_stockpile),
    EventDefinition("Rain Collector", "They find a functioning rain collector on a nearby roof.",
                    EventCategory.POSITIVE, _rain_collector),
    EventDefinition("Medical Cabinet", "They break into an apartment with an untouched medicine cabinet.",
                    EventCategory.POSITIVE, _medical_cabinet),
    EventDefinition("Rooftop Garden", "They discover a rooftop garden with some edible plants still growing.",
                    EventCategory.POSITIVE, _rooftop_garden),
    EventDefinition("Friendly Survivor", "They meet a friendly survivor who shares some supplies.",
                    EventCategory.POSITIVE, _friendly_survivor),
)

NEGATIVE_EVENTS: tuple[EventDefinition, ...] = (
    EventDefinition("Roof Collapse", "Part of a roof collapses while they're exploring it.",
                    EventCategory.NEGATIVE, _roof_collapse),
    EventDefinition("Contaminated Water", "They drink from a water source that turns out to be contaminated.",
                    EventCategory.NEGATIVE, _contaminated_water),
    EventDefinition("Hostile Scavengers", "They encounter hostile scavengers who demand supplies.",
                    EventCategory.NEGATIVE, _hostile_scavengers),
    EventDefinition("Bad Fall", "They lose their footing while jumping between buildings.",
                    EventCategory.NEGATIVE, _bad_fall),
    EventDefinition("Extreme Weather", "They're caught in a sudden downpour with nowhere to take shelter.",
                    EventCategory.NEGATIVE, _extreme_weather),
)

NEUTRAL_EVENTS: tuple[EventDefinition, ...] = (
    EventDefinition("Abandoned Camp", "They find an abandoned camp with remnants of supplies.",
                    EventCategory.NEUTRAL, _abandoned_camp),
    EventDefinition("Strange Noises", "They hear strange noises echoing between the buildings.",
                    EventCategory.NEUTRAL, _strange_noises),
    EventDefinition("Old Photos", "They find old photos of the city before everything changed.",
                    EventCategory.NEUTRAL, _old_photos),
)


class EventSystem:
    """Rolls for and applies expedition events."""

    def __init__(self, config: "GameConfig", rng: Optional[Random] = None):
        self.config = config
        self.rng = rng or Random()
        self.pools: dict[EventCategory, tuple[EventDefinition, ...]] = {
            EventCategory.POSITIVE: POSITIVE_EVENTS,
            EventCategory.NEGATIVE: NEGATIVE_EVENTS,
            EventCategory.NEUTRAL: NEUTRAL_EVENTS,
        }

    def event_chance(self, radius) -> float:
        settings = self.config.events
        return settings.event_chance.get(radius, settings.default_event_chance)

    def pick_category(self, radius) -> EventCategory:
        settings = self.config.events
        chances = settings.type_chance.get(radius, settings.default_type_chance)
        roll = self.rng.random()
        if roll < chances.positive:
            return EventCategory.POSITIVE
        if roll < chances.positive + chances.negative:
            return EventCategory.NEGATIVE
        return EventCategory.NEUTRAL

    def generate_event(self, settler: "Settler", expedition: "Expedition") -> Optional[ExpeditionEvent]:
        """Maybe produce an event for one day of the trip."""
        radius = expedition.radius
        if self.rng.random() > self.event_chance(radius):
            return None

        category = self.pick_category(radius)
        pool = self.pools[category]
        definition = pool[floor(self.rng.random() * len(pool))]
        result = definition.effect(settler, expedition, self.rng)
        logger.debug("%s event for %s: %s", category.value, settler.name, definition.name)
        return ExpeditionEvent(name=definition.name, description=definition.description, result=result)
