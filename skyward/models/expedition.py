"""Expedition schemas - foraging trips away from the settlement."""

from __future__ import annotations
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field
import uuid

from skyward.models.settler import Role, Settler
from skyward.models.settlement import Resources, ResourceType


class Radius(str, Enum):
    """How far an expedition ranges from the rooftop."""
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    EMERGENCY = "emergency"


class ExpeditionEvent(BaseModel):
    """Something that happened on a given day of an expedition."""
    day: int = 0
    name: str
    description: str
    result: str


class Survivor(BaseModel):
    """A stranger who may join the settlement."""
    name: str
    role: Role
    health: int = Field(ge=0, le=100)
    morale: int = Field(ge=0, le=100)
    gift: Resources = Field(default_factory=Resources)

    def to_settler(self, name: Optional[str] = None) -> Settler:
        return Settler(
            name=name or self.name,
            role=self.role,
            health=self.health,
            morale=self.morale,
        )


class Expedition(BaseModel):
    """One settler's trip; lives until its return day is processed."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4())[:8])
    settler: Settler
    radius: Radius
    duration: int = Field(ge=1)
    supply_cost: Resources = Field(default_factory=Resources)
    recover_time: int = Field(default=1, ge=0)

    departure_day: int = 1
    return_day: int = 0

    # Outcome
    resources: Resources = Field(default_factory=Resources)
    events: list[ExpeditionEvent] = Field(default_factory=list)
    failure_reason: Optional[str] = None
    delay_reason: Optional[str] = None
    jackpot_find: bool = False

    # Mid-trip report
    status_report: Optional[str] = None
    status_report_day: int = 0
    status_report_shown: bool = False

    found_survivor: bool = False
    survivor: Optional[Survivor] = None

    def add_resource(self, resource: ResourceType | str, amount: int) -> int:
        """Add found resources. Negative amounts never push a field below zero."""
        resource = ResourceType(resource)
        current = self.resources.get(resource)
        new_value = max(0, current + amount)
        self.resources.set(resource, new_value)
        return new_value - current

    def take_resource(self, resource: ResourceType | str, amount: int) -> int:
        """Remove up to amount; returns how much was actually taken."""
        resource = ResourceType(resource)
        taken = min(max(0, amount), self.resources.get(resource))
        self.resources.set(resource, self.resources.get(resource) - taken)
        return taken

    @property
    def report_due_day(self) -> Optional[int]:
        """Absolute game day the status report reaches the settlement."""
        if not self.status_report:
            return None
        return self.departure_day + self.status_report_day
