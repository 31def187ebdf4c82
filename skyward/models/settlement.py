"""Settlement schemas - stockpile, hope, shelter and production buildings."""

from __future__ import annotations
from enum import Enum
from math import floor
from random import Random
from typing import Optional, TYPE_CHECKING
from pydantic import BaseModel, Field
import logging

from skyward.models.settler import BuildingShelter

if TYPE_CHECKING:
    from skyward.config import GameConfig
    from skyward.models.infrastructure import InfraCategory, UpgradeCheck, UpgradeResults
    from skyward.models.settler import Settler

logger = logging.getLogger(__name__)


class ResourceType(str, Enum):
    """Stockpiled resource kinds."""
    FOOD = "food"
    WATER = "water"
    MEDS = "meds"
    MATERIALS = "materials"


class Resources(BaseModel):
    """A bundle of resources. No field is ever negative."""
    food: int = Field(default=0, ge=0)
    water: int = Field(default=0, ge=0)
    meds: int = Field(default=0, ge=0)
    materials: int = Field(default=0, ge=0)

    def get(self, resource: ResourceType | str) -> int:
        return getattr(self, ResourceType(resource).value)

    def set(self, resource: ResourceType | str, value: int) -> None:
        setattr(self, ResourceType(resource).value, max(0, value))

    def adjust(self, resource: ResourceType | str, amount: int) -> bool:
        """Adjust a resource by amount. Returns True if successful."""
        current = self.get(resource)
        new_value = current + amount
        if new_value < 0:
            return False
        self.set(resource, new_value)
        return True

    def total(self) -> int:
        return self.food + self.water + self.meds + self.materials

    def as_dict(self) -> dict[str, int]:
        return {r.value: self.get(r) for r in ResourceType}

    def nonzero(self) -> dict[str, int]:
        return {k: v for k, v in self.as_dict().items() if v > 0}


class ShelterUpgrade(BaseModel):
    """The shelter tier currently under construction."""
    target_tier: int
    time_left: int = Field(ge=0)
    assigned_mechanic: str


class ShelterCheck(BaseModel):
    """Whether the shelter can be raised to the next tier right now."""
    possible: bool
    reason: Optional[str] = None
    next_tier: Optional[int] = None
    next_tier_name: Optional[str] = None
    materials_needed: int = 0
    time_needed: int = 0


class ShelterProgress(BaseModel):
    """One day of shelter work."""
    complete: bool
    shelter_name: str
    tier: int
    days_left: int = 0
    hope_bonus: int = 0
    mechanic: str


class Settlement:
    """The rooftop: resources, hope, stability streaks, shelter and infrastructure."""

    def __init__(self, config: Optional["GameConfig"] = None):
        if config is None:
            from skyward.config import GameConfig
            config = GameConfig()
        from skyward.models.infrastructure import Infrastructure

        self.config = config
        start = config.starting
        self.resources = Resources(
            food=start.food,
            water=start.water,
            meds=start.meds,
            materials=start.materials,
        )
        self.shelter_tier = 0
        self.shelter_upgrade: Optional[ShelterUpgrade] = None
        self.stability: dict[ResourceType, int] = {ResourceType.FOOD: 0, ResourceType.WATER: 0}
        self.infrastructure = Infrastructure(config.infrastructure)

    # ===== Resources =====

    def add_resource(self, resource: ResourceType | str, amount: int) -> bool:
        if amount < 0:
            return False
        return self.resources.adjust(resource, amount)

    def remove_resource(self, resource: ResourceType | str, amount: int) -> bool:
        """Take amount out of the stockpile; refuses if there is not enough."""
        if amount < 0:
            return False
        ok = self.resources.adjust(resource, -amount)
        if not ok:
            logger.debug("Refused to remove %d %s (have %d)", amount, ResourceType(resource).value, self.resources.get(resource))
        return ok

    def has_resources(self, costs: Resources | dict) -> bool:
        if isinstance(costs, Resources):
            costs = costs.as_dict()
        return all(self.resources.get(r) >= n for r, n in costs.items())

    def add_bundle(self, bundle: Resources) -> None:
        for resource, amount in bundle.as_dict().items():
            if amount:
                self.add_resource(resource, amount)

    # ===== Hope =====

    def get_hope(self, settlers: list["Settler"]) -> int:
        """Collective optimism, derived from average morale."""
        if not settlers:
            return self.config.hope.empty_hope
        avg = sum(s.morale for s in settlers) / len(settlers)
        cushion = self.config.hope.cushion_factor * (1 - abs(avg - 50) / 50)
        # Half-up rounding
        return max(0, min(100, floor(avg + cushion + 0.5)))

    def get_visitor_chance(self, hope: int) -> int:
        """Daily percent chance that a survivor finds the settlement."""
        if hope < 30:
            return 0
        return min(15, 5 + hope // 10)

    def hope_description(self, hope: int) -> str:
        if hope >= 80:
            mood = "Your settlers are inspired and optimistic about their future."
        elif hope >= 60:
            mood = "Your settlement has a positive atmosphere."
        elif hope >= 40:
            mood = "The mood in the settlement is cautiously hopeful."
        elif hope >= 20:
            mood = "Doubt and concern are spreading in the settlement."
        else:
            mood = "The settlement feels bleak and desperate."

        lines = [mood]
        mitigation = min(50, hope // 2)
        if mitigation > 0:
            lines.append(f"Hope reduces hunger and thirst effects by {mitigation}%.")
        visitor_chance = self.get_visitor_chance(hope)
        if visitor_chance > 0:
            lines.append(f"{visitor_chance}% daily chance of attracting new survivors.")
        return "\n".join(lines)

    # ===== Stability =====

    def track_resource_stability(self, settlers: list["Settler"]) -> list[str]:
        """Count consecutive days of sufficient food and water.

        The morale bonus is paid on the day a streak reaches the threshold, and
        only if nobody is away that day.
        """
        settings = self.config.stability
        count = len(settlers)
        everyone_home = not any(s.is_away for s in settlers)
        messages = []

        for resource in (ResourceType.FOOD, ResourceType.WATER):
            if count and self.resources.get(resource) >= count:
                self.stability[resource] += 1
            else:
                self.stability[resource] = 0

            if self.stability[resource] == settings.days_needed and everyone_home:
                for settler in settlers:
                    settler.adjust_morale(settings.morale_bonus)
                logger.info("%s stability streak reached %d days", resource.value, settings.days_needed)
                messages.append(
                    f"Stable {resource.value} supply for {settings.days_needed} days! "
                    f"Everyone's morale improves by {settings.morale_bonus}."
                )
        return messages

    # ===== Shelter =====

    @property
    def shelter_name(self) -> str:
        return self.config.shelter_tiers[self.shelter_tier].name

    @property
    def shelter_protection(self) -> float:
        return self.config.shelter_tiers[self.shelter_tier].protection

    def can_upgrade_shelter(self) -> ShelterCheck:
        tiers = self.config.shelter_tiers
        if self.shelter_tier >= len(tiers) - 1:
            return ShelterCheck(possible=False, reason="Shelter is already at maximum tier.")
        if self.shelter_upgrade is not None:
            return ShelterCheck(possible=False, reason="Shelter upgrade already in progress.")

        next_tier = self.shelter_tier + 1
        tier = tiers[next_tier]
        if self.resources.materials < tier.materials_needed:
            return ShelterCheck(
                possible=False,
                reason=f"Not enough materials. Need {tier.materials_needed}, have {self.resources.materials}.",
                next_tier=next_tier,
                next_tier_name=tier.name,
                materials_needed=tier.materials_needed,
                time_needed=tier.time_needed,
            )
        return ShelterCheck(
            possible=True,
            next_tier=next_tier,
            next_tier_name=tier.name,
            materials_needed=tier.materials_needed,
            time_needed=tier.time_needed,
        )

    def start_shelter_upgrade(self, mechanic: "Settler") -> dict:
        """Validate, debit materials and put the mechanic to work."""
        check = self.can_upgrade_shelter()
        if not check.possible:
            return {"success": False, "message": check.reason}

        if not self.remove_resource(ResourceType.MATERIALS, check.materials_needed):
            return {"success": False, "message": "Not enough materials."}

        self.shelter_upgrade = ShelterUpgrade(
            target_tier=check.next_tier,
            time_left=check.time_needed,
            assigned_mechanic=mechanic.name,
        )
        mechanic.activity = BuildingShelter()
        logger.info("%s started shelter tier %d", mechanic.name, check.next_tier)
        return {
            "success": True,
            "message": (
                f"{mechanic.name} started upgrading the shelter to {check.next_tier_name}. "
                f"It will take {check.time_needed} days."
            ),
        }

    def process_shelter_upgrade(self, settlers: list["Settler"]) -> Optional[ShelterProgress]:
        upgrade = self.shelter_upgrade
        if upgrade is None:
            return None

        upgrade.time_left = max(0, upgrade.time_left - 1)
        tier = self.config.shelter_tiers[upgrade.target_tier]
        if upgrade.time_left > 0:
            return ShelterProgress(
                complete=False,
                shelter_name=tier.name,
                tier=upgrade.target_tier,
                days_left=upgrade.time_left,
                mechanic=upgrade.assigned_mechanic,
            )

        self.shelter_tier = upgrade.target_tier
        self.shelter_upgrade = None
        for settler in settlers:
            if settler.name == upgrade.assigned_mechanic and isinstance(settler.activity, BuildingShelter):
                settler.set_idle()
        logger.info("Shelter upgraded to %s", tier.name)
        return ShelterProgress(
            complete=True,
            shelter_name=tier.name,
            tier=self.shelter_tier,
            hope_bonus=tier.hope_bonus,
            mechanic=upgrade.assigned_mechanic,
        )

    # ===== Infrastructure =====

    def can_start_infrastructure(self, category: "InfraCategory") -> "UpgradeCheck":
        return self.infrastructure.can_start(category, self.resources.materials)

    def start_infrastructure_upgrade(self, category: "InfraCategory", mechanics: list["Settler"]) -> dict:
        """Validate, debit materials and start the project."""
        check = self.can_start_infrastructure(category)
        if not check.possible:
            return {"success": False, "message": check.reason}
        if not mechanics:
            return {"success": False, "message": "At least one mechanic is needed to build."}

        if not self.remove_resource(ResourceType.MATERIALS, check.option.material_cost):
            return {"success": False, "message": "Not enough materials."}
        result = self.infrastructure.start_upgrade(category, mechanics)
        if not result["success"]:
            self.add_resource(ResourceType.MATERIALS, check.option.material_cost)
        return result

    def process_daily_infrastructure(self, settlers: list["Settler"], rng: Random) -> tuple["UpgradeResults", dict[str, int]]:
        """Advance projects, then credit today's production."""
        results = self.infrastructure.process_daily_upgrades(settlers)
        produced = self.infrastructure.generate_daily_resources(rng)
        for resource, amount in produced.items():
            self.add_resource(resource, amount)
        return results, produced

    # ===== Removal =====

    def release_settler(self, name: str) -> list[str]:
        """Drop any building work held by a settler who has left."""
        messages = []
        if self.shelter_upgrade and self.shelter_upgrade.assigned_mechanic == name:
            tier = self.config.shelter_tiers[self.shelter_upgrade.target_tier]
            self.shelter_upgrade = None
            messages.append(f"Work on the {tier.name} has stopped.")
        abandoned = self.infrastructure.release_mechanic(name)
        if abandoned:
            messages.append(f"Work on the {abandoned.name} has stopped.")
        return messages
