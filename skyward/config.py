"""Game tuning tables and loading them from YAML and .env."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from skyward.models.expedition import Radius
from skyward.models.infrastructure import InfraCategory
from skyward.models.settlement import ResourceType

logger = logging.getLogger(__name__)


class IntRange(BaseModel):
    """Inclusive integer range."""
    model_config = {"frozen": True}
    min: int
    max: int


class FloatRange(BaseModel):
    model_config = {"frozen": True}
    min: float
    max: float


class SupplyCost(BaseModel):
    model_config = {"frozen": True}
    food: int = 0
    water: int = 0


class TypeChance(BaseModel):
    """Cumulative thresholds for event categories; the remainder is neutral."""
    model_config = {"frozen": True}
    positive: float
    negative: float


class StartingSettings(BaseModel):
    model_config = {"frozen": True}
    food: int = 9
    water: int = 9
    meds: int = 1
    materials: int = 3
    settlers: int = 3


class ExpeditionSettings(BaseModel):
    model_config = {"frozen": True}
    duration: dict[Radius, IntRange] = Field(default_factory=lambda: {
        Radius.SMALL: IntRange(min=2, max=3),
        Radius.MEDIUM: IntRange(min=3, max=5),
        Radius.LARGE: IntRange(min=5, max=7),
        Radius.EMERGENCY: IntRange(min=1, max=1),
    })
    supply_cost: dict[Radius, SupplyCost] = Field(default_factory=lambda: {
        Radius.SMALL: SupplyCost(food=1, water=1),
        Radius.MEDIUM: SupplyCost(food=2, water=2),
        Radius.LARGE: SupplyCost(food=3, water=3),
        Radius.EMERGENCY: SupplyCost(food=0, water=0),
    })
    recover_time: dict[Radius, int] = Field(default_factory=lambda: {
        Radius.SMALL: 1,
        Radius.MEDIUM: 2,
        Radius.LARGE: 3,
        Radius.EMERGENCY: 1,
    })
    success_chance: dict[Radius, float] = Field(default_factory=lambda: {
        Radius.SMALL: 0.7,
        Radius.MEDIUM: 0.6,
        Radius.LARGE: 0.5,
        Radius.EMERGENCY: 0.3,
    })
    survivor_chance: dict[Radius, float] = Field(default_factory=lambda: {
        Radius.SMALL: 0.05,
        Radius.MEDIUM: 0.10,
        Radius.LARGE: 0.15,
        Radius.EMERGENCY: 0.0,
    })
    jackpot_chance: float = 0.15
    delay_chance: float = 0.05
    delay_days: IntRange = Field(default_factory=lambda: IntRange(min=1, max=2))
    total_failure_chance: float = 0.7
    emergency_yield: IntRange = Field(default_factory=lambda: IntRange(min=1, max=3))


class ExpeditionResourceSettings(BaseModel):
    """How a successful trip's haul is sized and split."""
    model_config = {"frozen": True}
    multiplier: dict[Radius, float] = Field(default_factory=lambda: {
        Radius.SMALL: 2.0,
        Radius.MEDIUM: 3.0,
        Radius.LARGE: 4.5,
    })
    shares: dict[ResourceType, float] = Field(default_factory=lambda: {
        ResourceType.FOOD: 0.35,
        ResourceType.WATER: 0.35,
        ResourceType.MEDS: 0.15,
        ResourceType.MATERIALS: 0.15,
    })
    variability: FloatRange = Field(default_factory=lambda: FloatRange(min=0.75, max=1.25))


class EventSettings(BaseModel):
    model_config = {"frozen": True}
    event_chance: dict[Radius, float] = Field(default_factory=lambda: {
        Radius.SMALL: 0.2,
        Radius.MEDIUM: 0.3,
        Radius.LARGE: 0.4,
        Radius.EMERGENCY: 0.4,
    })
    type_chance: dict[Radius, TypeChance] = Field(default_factory=lambda: {
        Radius.SMALL: TypeChance(positive=0.6, negative=0.3),
        Radius.MEDIUM: TypeChance(positive=0.5, negative=0.4),
        Radius.LARGE: TypeChance(positive=0.4, negative=0.5),
        Radius.EMERGENCY: TypeChance(positive=0.3, negative=0.6),
    })
    # Used for a radius missing from the tables above
    default_event_chance: float = 0.3
    default_type_chance: TypeChance = Field(default_factory=lambda: TypeChance(positive=0.5, negative=0.4))


class HungerEffects(BaseModel):
    model_config = {"frozen": True}
    day1: int = 10
    day3_plus: int = 15


class ThirstEffects(BaseModel):
    model_config = {"frozen": True}
    day1: int = 15
    day2_plus: int = 25


class ConsumptionSettings(BaseModel):
    """Health lost to hunger and morale lost to thirst."""
    model_config = {"frozen": True}
    hunger_effects: HungerEffects = Field(default_factory=HungerEffects)
    thirst_effects: ThirstEffects = Field(default_factory=ThirstEffects)


class StabilitySettings(BaseModel):
    model_config = {"frozen": True}
    days_needed: int = 3
    morale_bonus: int = 5


class HopeChanges(BaseModel):
    """Morale deltas applied to everyone present."""
    model_config = {"frozen": True}
    successful_expedition: int = 10
    exceptional_find: int = 15
    failed_expedition: int = -5
    new_settler: int = 15
    rescued_survivor: int = 20
    turned_away_survivor: int = -5
    settler_death: int = -20
    settler_abandonment: int = -15
    food_shortage: int = -3
    water_shortage: int = -3
    day_survived: int = 3


class HopeSettings(BaseModel):
    model_config = {"frozen": True}
    changes: HopeChanges = Field(default_factory=HopeChanges)
    cushion_factor: float = 10
    empty_hope: int = 50


class ShelterTier(BaseModel):
    model_config = {"frozen": True}
    name: str
    materials_needed: int = 0
    time_needed: int = 0
    hope_bonus: int = 0
    protection: float = 0.5


class InfrastructureTier(BaseModel):
    model_config = {"frozen": True}
    name: str
    description: str = ""
    material_cost: int
    build_time: int
    production: IntRange
    hope_bonus: int = 0


def _default_infrastructure() -> dict[InfraCategory, list[InfrastructureTier]]:
    return {
        InfraCategory.FOOD: [
            InfrastructureTier(
                name="Basic Garden", description="A small rooftop garden.",
                material_cost=5, build_time=2, production=IntRange(min=1, max=2), hope_bonus=5,
            ),
            InfrastructureTier(
                name="Makeshift Greenhouse", description="A greenhouse patched together from salvage.",
                material_cost=15, build_time=4, production=IntRange(min=3, max=5), hope_bonus=10,
            ),
            InfrastructureTier(
                name="Basic Hydroponics", description="A soil-free growing system.",
                material_cost=25, build_time=6, production=IntRange(min=5, max=8), hope_bonus=15,
            ),
        ],
        InfraCategory.WATER: [
            InfrastructureTier(
                name="Basic Rain Collector", description="Tarps and buckets to catch rainwater.",
                material_cost=5, build_time=1, production=IntRange(min=1, max=3), hope_bonus=5,
            ),
            InfrastructureTier(
                name="Proper Rain Barrels", description="Sealed barrels with simple filters.",
                material_cost=12, build_time=3, production=IntRange(min=3, max=5), hope_bonus=8,
            ),
            InfrastructureTier(
                name="Rooftop Water Tank", description="A large tank fed by gutters across the roof.",
                material_cost=20, build_time=5, production=IntRange(min=5, max=10), hope_bonus=12,
            ),
        ],
    }


class InfrastructureSettings(BaseModel):
    model_config = {"frozen": True}
    categories: dict[InfraCategory, list[InfrastructureTier]] = Field(default_factory=_default_infrastructure)
    # Build-time divisor by number of mechanics
    mechanic_speed_bonus: dict[int, float] = Field(default_factory=lambda: {1: 1.0, 2: 1.6, 3: 2.5, 4: 3.0})


class SurvivorSettings(BaseModel):
    model_config = {"frozen": True}
    names: list[str] = Field(default_factory=lambda: [
        "Riley", "Jordan", "Taylor", "Casey", "Quinn", "Avery", "Blake", "Drew", "Jamie",
        "Morgan", "Rowan", "Reese", "Skyler", "Dakota", "Kendall", "Parker", "Hayden", "Finley",
    ])
    expedition_health: IntRange = Field(default_factory=lambda: IntRange(min=30, max=70))
    expedition_morale: IntRange = Field(default_factory=lambda: IntRange(min=40, max=80))
    visitor_health: IntRange = Field(default_factory=lambda: IntRange(min=40, max=80))
    visitor_morale: IntRange = Field(default_factory=lambda: IntRange(min=50, max=90))
    # Role roll: below generalist -> Generalist, below mechanic -> Mechanic, else Medic
    generalist_threshold: float = 0.6
    mechanic_threshold: float = 0.9


class TaskSettings(BaseModel):
    model_config = {"frozen": True}
    forage_min_health: int = 20
    build_min_health: int = 50
    heal_amount: int = 15
    medic_bonus: int = 15


def _default_shelter_tiers() -> list[ShelterTier]:
    return [
        ShelterTier(name="Makeshift Camp", protection=0.5),
        ShelterTier(name="Basic Tents", materials_needed=15, time_needed=3, hope_bonus=5, protection=0.75),
        ShelterTier(name="Reinforced Shelters", materials_needed=30, time_needed=5, hope_bonus=10, protection=0.9),
        ShelterTier(name="Permanent Settlement", materials_needed=50, time_needed=7, hope_bonus=15, protection=1.0),
    ]


class GameConfig(BaseModel):
    """Every tunable number in the game. Shared by reference, never mutated."""
    model_config = {"frozen": True}

    seed: Optional[int] = None
    starting: StartingSettings = Field(default_factory=StartingSettings)
    expedition: ExpeditionSettings = Field(default_factory=ExpeditionSettings)
    expedition_resources: ExpeditionResourceSettings = Field(default_factory=ExpeditionResourceSettings)
    events: EventSettings = Field(default_factory=EventSettings)
    consumption: ConsumptionSettings = Field(default_factory=ConsumptionSettings)
    stability: StabilitySettings = Field(default_factory=StabilitySettings)
    hope: HopeSettings = Field(default_factory=HopeSettings)
    shelter_tiers: list[ShelterTier] = Field(default_factory=_default_shelter_tiers)
    infrastructure: InfrastructureSettings = Field(default_factory=InfrastructureSettings)
    survivors: SurvivorSettings = Field(default_factory=SurvivorSettings)
    tasks: TaskSettings = Field(default_factory=TaskSettings)


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into a copy of base."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path: str | Path | None = None) -> GameConfig:
    """Build a GameConfig from defaults, an optional YAML override and .env.

    SKYWARD_CONFIG names the override file when path is not given;
    SKYWARD_SEED sets the seed when the file does not.
    """
    load_dotenv()

    if path is None:
        path = os.getenv("SKYWARD_CONFIG") or None

    data: dict[str, Any] = GameConfig().model_dump(mode="json")
    if path is not None:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config not found: {path}")
        with open(path, encoding="utf-8") as f:
            override = yaml.safe_load(f) or {}
        if not isinstance(override, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        data = _deep_merge(data, override)
        logger.info("Loaded config overrides from %s", path)

    seed = os.getenv("SKYWARD_SEED")
    if data.get("seed") is None and seed:
        data["seed"] = int(seed)

    return GameConfig.model_validate(data)
