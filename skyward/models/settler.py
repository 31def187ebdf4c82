"""Settler schemas - the people living on the rooftop."""

from __future__ import annotations
from enum import Enum
from math import ceil
from typing import Annotated, Literal, Optional, Union, TYPE_CHECKING
from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from skyward.config import ConsumptionSettings


class Role(str, Enum):
    """Settler specialisations."""
    GENERALIST = "Generalist"
    MEDIC = "Medic"
    MECHANIC = "Mechanic"


class Idle(BaseModel):
    """At the settlement with nothing assigned."""
    kind: Literal["idle"] = "idle"


class OnExpedition(BaseModel):
    """Away foraging until the given day."""
    kind: Literal["expedition"] = "expedition"
    return_day: int


class BuildingShelter(BaseModel):
    """Working on the shelter upgrade."""
    kind: Literal["shelter"] = "shelter"


class BuildingInfrastructure(BaseModel):
    """Working on a food or water project."""
    kind: Literal["infrastructure"] = "infrastructure"
    project_id: str


Activity = Annotated[
    Union[Idle, OnExpedition, BuildingShelter, BuildingInfrastructure],
    Field(discriminator="kind"),
]


class Settler(BaseModel):
    """A member of the settlement."""
    name: str
    role: Role = Role.GENERALIST
    health: int = Field(default=100, ge=0, le=100)
    morale: int = Field(default=100, ge=0, le=100)
    wounded: bool = False

    # Post-expedition cooldown
    recovering: bool = False
    recovery_days_left: int = Field(default=0, ge=0)

    activity: Activity = Field(default_factory=Idle)

    days_without_food: int = Field(default=0, ge=0)
    days_without_water: int = Field(default=0, ge=0)

    # ===== State =====

    @property
    def is_idle(self) -> bool:
        return isinstance(self.activity, Idle)

    @property
    def is_away(self) -> bool:
        """Only expeditions take a settler away from the rooftop."""
        return isinstance(self.activity, OnExpedition)

    @property
    def is_available(self) -> bool:
        """Free to take a new task this afternoon."""
        return self.is_idle and not self.recovering

    @property
    def is_dead(self) -> bool:
        return self.health <= 0

    @property
    def has_abandoned(self) -> bool:
        return self.morale <= 0

    def set_idle(self) -> None:
        self.activity = Idle()

    def activity_label(self) -> str:
        """Short description of what the settler is doing."""
        if isinstance(self.activity, OnExpedition):
            return "On expedition"
        if isinstance(self.activity, BuildingShelter):
            return "Building shelter"
        if isinstance(self.activity, BuildingInfrastructure):
            return "Building infrastructure"
        if self.recovering:
            return f"Recovering ({self.recovery_days_left}d)"
        return "Idle"

    # ===== Clamped mutation =====

    def adjust_health(self, amount: int) -> int:
        """Change health, clamped to 0-100. Returns the applied delta."""
        old = self.health
        self.health = max(0, min(100, self.health + amount))
        return self.health - old

    def adjust_morale(self, amount: int) -> int:
        """Change morale, clamped to 0-100. Returns the applied delta."""
        old = self.morale
        self.morale = max(0, min(100, self.morale + amount))
        return self.morale - old

    def update_morale(self, amount: int, reason: str) -> Optional[str]:
        """Apply a morale change and describe it."""
        applied = self.adjust_morale(amount)
        if applied > 0:
            return f"{self.name}'s morale increased by {applied} to {self.morale} ({reason})."
        if applied < 0:
            return f"{self.name}'s morale decreased by {-applied} to {self.morale} ({reason})."
        if amount != 0:
            return f"{self.name}'s morale remains at {self.morale} ({reason})."
        return None

    # ===== Daily routines =====

    def rest(self) -> str:
        if self.wounded:
            return f"{self.name} is wounded and cannot recover from resting."
        return f"{self.name} rested but gains no immediate benefits."

    def heal(self, base_amount: int, medic_bonus: int = 0, by_medic: bool = False) -> dict:
        """Apply one dose of medicine. Only a medic cures a wound."""
        gained = self.adjust_health(base_amount + (medic_bonus if by_medic else 0))
        cured = by_medic and self.wounded
        if by_medic:
            self.wounded = False
        return {"health_gained": gained, "new_health": self.health, "cured_wound": cured}

    def start_recovery(self, days: int) -> None:
        self.recovering = days > 0
        self.recovery_days_left = max(0, days)

    def update_recovery(self) -> Optional[str]:
        """Count down the post-expedition cooldown."""
        if not self.recovering:
            return None
        self.recovery_days_left = max(0, self.recovery_days_left - 1)
        if self.recovery_days_left == 0:
            self.recovering = False
            return f"{self.name} has fully recovered from their expedition and is ready for new assignments."
        return f"{self.name} is still recovering from expedition ({self.recovery_days_left} day(s) left)."

    def update_wellbeing(self, hope: int, consumption: "ConsumptionSettings") -> Optional[str]:
        """Apply hunger and thirst penalties, softened by settlement hope."""
        changes = []
        mitigation = min(0.5, hope / 100)

        if self.days_without_food >= 1:
            effects = consumption.hunger_effects
            loss = effects.day3_plus if self.days_without_food >= 3 else effects.day1
            loss = ceil(loss * (1 - mitigation))
            applied = self.adjust_health(-loss)
            if applied:
                changes.append(f"health -{loss} (now {self.health})")

        if self.days_without_water >= 1:
            effects = consumption.thirst_effects
            loss = effects.day2_plus if self.days_without_water >= 2 else effects.day1
            loss = ceil(loss * (1 - mitigation))
            applied = self.adjust_morale(-loss)
            if applied:
                changes.append(f"morale -{loss} (now {self.morale})")

        return ", ".join(changes) if changes else None


def unique_name(name: str, taken: set[str]) -> str:
    """Return name, or name with a numeric suffix if it is already in use."""
    if name not in taken:
        return name
    n = 2
    while f"{name} {n}" in taken:
        n += 1
    return f"{name} {n}"
