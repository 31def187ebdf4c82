"""Infrastructure model - food and water production buildings that take time to build."""

from __future__ import annotations
from enum import Enum
from math import floor
from random import Random
from typing import Optional, TYPE_CHECKING
from pydantic import BaseModel, Field
import logging
import uuid

from skyward.models.settler import BuildingInfrastructure

if TYPE_CHECKING:
    from skyward.config import InfrastructureSettings, InfrastructureTier
    from skyward.models.settler import Settler

logger = logging.getLogger(__name__)


class InfraCategory(str, Enum):
    """Production categories."""
    FOOD = "food"
    WATER = "water"


class ProductionRange(BaseModel):
    """Daily yield range of a built tier."""
    min: int = Field(default=0, ge=0)
    max: int = Field(default=0, ge=0)


class UpgradeOption(BaseModel):
    """The next tier a category can be built up to."""
    category: InfraCategory
    level: int
    name: str
    description: str = ""
    material_cost: int
    build_time: int
    production: ProductionRange
    hope_bonus: int = 0


class UpgradeCheck(BaseModel):
    """Result of asking whether a category can be upgraded right now."""
    possible: bool
    reason: Optional[str] = None
    option: Optional[UpgradeOption] = None


class UpgradeProject(BaseModel):
    """A building project in progress."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4())[:8])
    category: InfraCategory
    level: int
    name: str
    time_left: int = Field(ge=0)
    original_time: int = Field(ge=1)
    mechanics: list[str] = Field(default_factory=list)
    material_cost: int = 0
    hope_bonus: int = 0
    production: ProductionRange = Field(default_factory=ProductionRange)

    @property
    def progress_percent(self) -> int:
        """Progress as a percentage 0-100."""
        done = self.original_time - self.time_left
        return min(100, int((done / self.original_time) * 100))

    def advance(self, days: int = 1) -> bool:
        """Count down. Returns True once the project is finished."""
        self.time_left = max(0, self.time_left - days)
        return self.time_left == 0

    def progress_bar(self, width: int = 10) -> str:
        """Generate a text progress bar."""
        filled = int((self.progress_percent / 100) * width)
        return "▓" * filled + "░" * (width - filled)


class UpgradeResults(BaseModel):
    """Projects split by whether they finished today."""
    completed: list[UpgradeProject] = Field(default_factory=list)
    continuing: list[UpgradeProject] = Field(default_factory=list)


class Infrastructure:
    """Tracks production tiers per category and the projects raising them."""

    def __init__(self, settings: "InfrastructureSettings"):
        self.settings = settings
        self.levels: dict[InfraCategory, int] = {c: 0 for c in InfraCategory}
        self.in_progress: list[UpgradeProject] = []
        self.production_ranges: dict[InfraCategory, ProductionRange] = {}
        self._calculate_production()

    # ===== Tiers =====

    def _tier(self, category: InfraCategory, level: int) -> Optional["InfrastructureTier"]:
        tiers = self.settings.categories.get(category, [])
        if 1 <= level <= len(tiers):
            return tiers[level - 1]
        return None

    def get_level(self, category: InfraCategory) -> int:
        return self.levels.get(category, 0)

    def set_level(self, category: InfraCategory, level: int) -> None:
        self.levels[category] = level
        self._calculate_production()

    def tier_name(self, category: InfraCategory) -> Optional[str]:
        tier = self._tier(category, self.get_level(category))
        return tier.name if tier else None

    def _calculate_production(self) -> None:
        """Recompute production ranges from current tiers."""
        ranges = {}
        for category in InfraCategory:
            tier = self._tier(category, self.get_level(category))
            if tier:
                ranges[category] = ProductionRange(min=tier.production.min, max=tier.production.max)
        self.production_ranges = ranges

    @property
    def daily_production(self) -> dict[str, int]:
        """Expected minimum output per category, for previews."""
        return {c.value: r.min for c, r in self.production_ranges.items()}

    # ===== Upgrades =====

    def has_upgrade_in_progress(self, category: InfraCategory) -> bool:
        return any(p.category == category for p in self.in_progress)

    def available_upgrades(self) -> list[UpgradeOption]:
        """Next tier for every category that is not maxed out."""
        options = []
        for category in InfraCategory:
            level = self.get_level(category) + 1
            tier = self._tier(category, level)
            if tier is None:
                continue
            options.append(UpgradeOption(
                category=category,
                level=level,
                name=tier.name,
                description=tier.description,
                material_cost=tier.material_cost,
                build_time=tier.build_time,
                production=ProductionRange(min=tier.production.min, max=tier.production.max),
                hope_bonus=tier.hope_bonus,
            ))
        return options

    def can_start(self, category: InfraCategory, materials: int) -> UpgradeCheck:
        """Gate a new project on tier limits, running work and materials."""
        option = next((o for o in self.available_upgrades() if o.category == category), None)
        if option is None:
            return UpgradeCheck(possible=False, reason=f"Cannot upgrade {category.value} - no further upgrades available.")
        if self.has_upgrade_in_progress(category):
            return UpgradeCheck(possible=False, reason=f"{category.value.capitalize()} already has an upgrade in progress.")
        if materials < option.material_cost:
            return UpgradeCheck(
                possible=False,
                reason=f"Not enough materials. Need {option.material_cost}, have {materials}.",
            )
        return UpgradeCheck(possible=True, option=option)

    def speed_multiplier(self, mechanic_count: int) -> float:
        count = min(max(mechanic_count, 1), 4)
        return self.settings.mechanic_speed_bonus.get(count, 1.0)

    def adjusted_build_time(self, build_time: int, mechanic_count: int) -> int:
        return max(1, floor(build_time / self.speed_multiplier(mechanic_count)))

    def start_upgrade(self, category: InfraCategory, mechanics: list["Settler"]) -> dict:
        """Queue the next tier for category and put the mechanics to work.

        Materials are not checked here; Settlement.start_infrastructure_upgrade
        validates and debits them.
        """
        if not mechanics:
            return {"success": False, "message": "At least one mechanic is needed to build."}

        option = next((o for o in self.available_upgrades() if o.category == category), None)
        if option is None:
            return {"success": False, "message": f"Cannot upgrade {category.value} - no further upgrades available."}
        if self.has_upgrade_in_progress(category):
            return {"success": False, "message": f"Cannot start upgrade - {category.value} already has an upgrade in progress."}

        adjusted = self.adjusted_build_time(option.build_time, len(mechanics))
        project = UpgradeProject(
            category=category,
            level=option.level,
            name=option.name,
            time_left=adjusted,
            original_time=adjusted,
            mechanics=[m.name for m in mechanics],
            material_cost=option.material_cost,
            hope_bonus=option.hope_bonus,
            production=option.production,
        )
        self.in_progress.append(project)
        for mechanic in mechanics:
            mechanic.activity = BuildingInfrastructure(project_id=project.id)

        logger.info("Started %s with %d mechanic(s): %d day(s)", project.name, len(mechanics), adjusted)
        return {
            "success": True,
            "message": f"Started building {project.name}. Will take {adjusted} days to complete.",
            "project": project,
            "adjusted_build_time": adjusted,
            "original_build_time": option.build_time,
        }

    def process_daily_upgrades(self, settlers: list["Settler"]) -> UpgradeResults:
        """Advance every project by a day; finished ones raise their tier."""
        results = UpgradeResults()

        for project in self.in_progress:
            if project.advance():
                results.completed.append(project)
                self.levels[project.category] = project.level
                for settler in settlers:
                    if (isinstance(settler.activity, BuildingInfrastructure)
                            and settler.activity.project_id == project.id):
                        settler.set_idle()
            else:
                results.continuing.append(project)

        self.in_progress = results.continuing
        self._calculate_production()
        return results

    def release_mechanic(self, name: str) -> Optional[UpgradeProject]:
        """Drop a mechanic from their project; a project with nobody left is abandoned."""
        for project in self.in_progress:
            if name in project.mechanics:
                project.mechanics.remove(name)
                if not project.mechanics:
                    self.in_progress.remove(project)
                    logger.info("Project %s abandoned", project.name)
                    return project
                return None
        return None

    def generate_daily_resources(self, rng: Random) -> dict[str, int]:
        """Roll today's output for every built category."""
        return {
            category.value: rng.randint(r.min, r.max)
            for category, r in self.production_ranges.items()
        }
