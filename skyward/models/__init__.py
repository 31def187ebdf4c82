"""Pydantic data models for settlers, the settlement, expeditions and the narrative log."""

from .settler import Settler, Role, Idle, OnExpedition, BuildingShelter, BuildingInfrastructure
from .settlement import Settlement, Resources, ResourceType, ShelterCheck, ShelterProgress, ShelterUpgrade
from .infrastructure import Infrastructure, InfraCategory, UpgradeProject, UpgradeResults
from .expedition import Expedition, ExpeditionEvent, Radius, Survivor
from .events import EventType, LogEntry, NarrativeLog

__all__ = [
    "Settler",
    "Role",
    "Idle",
    "OnExpedition",
    "BuildingShelter",
    "BuildingInfrastructure",
    "Settlement",
    "Resources",
    "ResourceType",
    "ShelterCheck",
    "ShelterProgress",
    "ShelterUpgrade",
    "Infrastructure",
    "InfraCategory",
    "UpgradeProject",
    "UpgradeResults",
    "Expedition",
    "ExpeditionEvent",
    "Radius",
    "Survivor",
    "EventType",
    "LogEntry",
    "NarrativeLog",
]
