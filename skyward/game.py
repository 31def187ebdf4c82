"""Game controller - owns the settlement state and drives the day cycle."""

from __future__ import annotations
from random import Random
from typing import Callable, Optional, TYPE_CHECKING
import logging

from skyward.config import GameConfig
from skyward.models.events import EventType
from skyward.models.expedition import Expedition, Survivor
from skyward.models.settlement import Settlement
from skyward.models.settler import Role, Settler, unique_name
from skyward.systems.choices import AutoChoices, ChoiceConstraints, ChoiceProvider, parse_yes_no
from skyward.systems.day_cycle import DayCycle, DayPhase
from skyward.systems.event_log import EventLog
from skyward.systems.event_system import EventSystem
from skyward.systems.expedition_engine import ExpeditionEngine
from skyward.systems.phases import AfternoonPhase, EveningPhase, MiddayPhase, MorningPhase

if TYPE_CHECKING:
    from skyward.systems.phases.base import Phase

logger = logging.getLogger(__name__)

PhaseHook = Callable[["Game", DayPhase], None]


class Game:
    """Main game controller."""

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        choices: Optional[ChoiceProvider] = None,
        rng: Optional[Random] = None,
        event_log: Optional[EventLog] = None,
        settlers: Optional[list[Settler]] = None,
        on_phase: Optional[PhaseHook] = None,
    ):
        self.config = config or GameConfig()
        self.rng = rng or Random(self.config.seed)
        self.choices: ChoiceProvider = choices or AutoChoices()
        self.event_log = event_log or EventLog()
        self.on_phase = on_phase

        self.settlement = Settlement(self.config)
        self.event_system = EventSystem(self.config, self.rng)
        self.expedition_engine = ExpeditionEngine(self.config, self.event_system, self.rng)
        self.cycle = DayCycle()

        self.settlers: list[Settler] = settlers if settlers is not None else self._starting_roster()
        self.expeditions: list[Expedition] = []
        self.running = True

        self.phases: dict[DayPhase, "Phase"] = {
            DayPhase.MORNING: MorningPhase(self),
            DayPhase.MIDDAY: MiddayPhase(self),
            DayPhase.AFTERNOON: AfternoonPhase(self),
            DayPhase.EVENING: EveningPhase(self),
        }

    def _starting_roster(self) -> list[Settler]:
        """Two healthy generalists and a wounded mechanic, named from the pool."""
        count = self.config.starting.settlers
        pool = self.config.survivors.names
        names = self.rng.sample(pool, min(count, len(pool)))
        taken: set[str] = set()
        roster = []
        for i in range(count):
            name = unique_name(names[i] if i < len(names) else "Settler", taken)
            taken.add(name)
            if i == 2:
                roster.append(Settler(name=name, role=Role.MECHANIC, health=40, morale=80, wounded=True))
            else:
                roster.append(Settler(name=name, role=Role.GENERALIST))
        return roster

    # ===== Accessors =====

    @property
    def day(self) -> int:
        return self.cycle.day

    @property
    def phase(self) -> DayPhase:
        return self.cycle.phase

    @property
    def hope(self) -> int:
        return self.settlement.get_hope(self.settlers)

    @property
    def present_settlers(self) -> list[Settler]:
        return [s for s in self.settlers if not s.is_away]

    def get_settler(self, name: str) -> Optional[Settler]:
        for s in self.settlers:
            if s.name == name:
                return s
        return None

    def taken_names(self) -> set[str]:
        return {s.name for s in self.settlers}

    # ===== Collaborators =====

    def log(self, message: str, event_type: EventType = EventType.INFO) -> None:
        """Send a line to the narrative sink."""
        self.event_log.day = self.day
        self.event_log.log_event(message, event_type)

    def ask(self, prompt: str, constraints: ChoiceConstraints) -> str:
        answer = self.choices.ask_choice(prompt, constraints)
        logger.debug("Asked %r -> %r", prompt, answer)
        return answer if answer is not None else constraints.default

    def ask_yes_no(self, prompt: str, default: bool = False) -> bool:
        return parse_yes_no(self.ask(prompt, ChoiceConstraints.yes_no(default)), default)

    # ===== Morale =====

    def update_all_morale(self, amount: int, reason: str, exclude: Optional[Settler] = None) -> list[str]:
        """Apply a morale change to everyone at the settlement."""
        messages = []
        for settler in self.settlers:
            if settler is exclude or settler.is_away:
                continue
            message = settler.update_morale(amount, reason)
            if message:
                messages.append(message)
        for message in messages:
            self.log(message, EventType.HOPE)
        return messages

    # ===== Roster =====

    def remove_settler(self, settler: Settler) -> None:
        """Take a settler off the roster along with anything they were doing."""
        self.settlers = [s for s in self.settlers if s is not settler]
        before = len(self.expeditions)
        self.expeditions = [e for e in self.expeditions if e.settler.name != settler.name]
        if len(self.expeditions) != before:
            logger.info("Discarded expedition of %s", settler.name)
        for message in self.settlement.release_settler(settler.name):
            self.log(message, EventType.BUILDING)

    def check_critical_status(self) -> list[str]:
        """Remove the dead and the departed. Returns the names removed.

        A removal lowers everyone's morale, which can push someone already
        checked to zero, so sweep until a pass removes nobody.
        """
        removed = []
        changes = self.config.hope.changes
        while True:
            removed_this_pass = False
            for settler in list(self.settlers):
                if settler.is_dead:
                    self.log(f"! {settler.name} has died due to poor health!", EventType.DANGER)
                    self.remove_settler(settler)
                    self.update_all_morale(changes.settler_death, "settler death")
                elif settler.has_abandoned:
                    self.log(f"! {settler.name} has left the settlement due to low morale!", EventType.DANGER)
                    self.remove_settler(settler)
                    self.update_all_morale(changes.settler_abandonment, "settler abandonment")
                else:
                    continue
                removed.append(settler.name)
                removed_this_pass = True
                logger.info("Removed %s from the roster", settler.name)
            if not removed_this_pass:
                return removed

    def admit_survivor(self, survivor: Survivor, rescued: bool) -> bool:
        """Offer a survivor a place. Returns True if they joined."""
        status = "FOUND" if rescued else "ARRIVED"
        arrival = "found on an expedition" if rescued else "came on their own"
        self.log(f"=== SURVIVOR {status} ===", EventType.HEADER)
        self.log(f"{survivor.name}, a {survivor.role.value}, was {arrival}!", EventType.SETTLER)
        self.log(f"Health: {survivor.health}, Morale: {survivor.morale}")

        gift = survivor.gift.nonzero()
        gift_text = ", ".join(f"{amount} {resource}" for resource, amount in gift.items())
        if gift_text:
            self.log(f"They're offering to share their remaining supplies: {gift_text}")
        if survivor.role == Role.MEDIC:
            self.log("A medic can heal wounded settlers and boost overall health!")
        elif survivor.role == Role.MECHANIC:
            self.log("A mechanic helps you build and upgrade structures when materials are available!")

        changes = self.config.hope.changes
        if not self.ask_yes_no(f"Do you want to accept {survivor.name} into your settlement? (y/n): ", default=True):
            self.log(f"You decided not to accept {survivor.name} into the settlement.")
            self.update_all_morale(changes.turned_away_survivor, "turned away survivor")
            return False

        settler = survivor.to_settler(unique_name(survivor.name, self.taken_names()))
        self.settlers.append(settler)
        self.settlement.add_bundle(survivor.gift)
        self.log(f"{settler.name} ({settler.role.value}) has joined the settlement!", EventType.SUCCESS)
        if gift_text:
            self.log(f"{settler.name} contributed {gift_text} to the community supplies.", EventType.RESOURCE)

        if rescued:
            self.update_all_morale(changes.rescued_survivor, "rescued survivor")
        else:
            self.update_all_morale(changes.new_settler, "new settler joined")
        return True

    # ===== Loop =====

    def run_day(self) -> bool:
        """Play phases until the next morning. Returns False once the game should stop."""
        while not self.cycle.is_over:
            phase = self.cycle.phase
            if self.on_phase:
                self.on_phase(self, phase)
            self.phases[phase].execute()
            self.cycle.advance(roster_empty=not self.settlers)
            if self.cycle.phase == DayPhase.MORNING:
                break

        if self.cycle.is_over:
            self.log("*** GAME OVER ***", EventType.DANGER)
            self.log("All settlers have died or left the settlement.", EventType.DANGER)
            return False
        return self.running

    def run(self, max_days: Optional[int] = None) -> int:
        """Play until quit, total loss or max_days. Returns the last day reached."""
        self.log("=== SKYWARD SETTLERS ===", EventType.HEADER)
        self.log("A post-apocalyptic rooftop settlement simulation")
        while self.run_day():
            if max_days is not None and self.day > max_days:
                break
        logger.info("Game ended on day %d with %d settler(s)", self.day, len(self.settlers))
        return self.day
