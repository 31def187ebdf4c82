"""Afternoon - assigning tasks to everyone who is free."""

from __future__ import annotations
from typing import Optional, TYPE_CHECKING
import logging

from skyward.models.events import EventType
from skyward.models.expedition import Radius
from skyward.models.infrastructure import InfraCategory
from skyward.models.settlement import ResourceType
from skyward.models.settler import OnExpedition, Role
from skyward.systems.choices import ChoiceConstraints, match_name, parse_option
from skyward.systems.phases.base import Phase

if TYPE_CHECKING:
    from skyward.models.settler import Settler

logger = logging.getLogger(__name__)

FORAGE, HEAL, BUILD, REST = range(4)

RADIUS_MENU = [Radius.SMALL, Radius.MEDIUM, Radius.LARGE]


class AfternoonPhase(Phase):
    title = "AFTERNOON PHASE: TASK ASSIGNMENT"

    def __init__(self, game):
        super().__init__(game)
        self.departures = 0
        self.free_slots = 0

    def execute(self) -> None:
        game = self.game
        self.header(self.title)
        self.departures = 0
        self.free_slots = self._count_free_slots()

        available = [s for s in game.settlers if s.is_available]
        if not available:
            game.log("No settlers available for tasks today.")
            return

        game.log("Available settlers:")
        for i, settler in enumerate(available, 1):
            game.log(f"{i}. {settler.name} ({settler.role.value}) - Health: {settler.health}, Morale: {settler.morale}")

        busy = [s for s in game.settlers if not s.is_idle]
        if busy:
            game.log("Currently busy settlers:")
            for settler in busy:
                game.log(f"- {settler.name} ({settler.role.value}): {settler.activity_label()}")

        if self.expedition_slots() <= 0:
            game.log("WARNING: You must keep at least one settler at the settlement!", EventType.WARNING)

        for settler in available:
            # May have been drafted onto another mechanic's project
            if not settler.is_available or settler not in game.settlers:
                continue
            self.assign_task(settler)

    def _count_free_slots(self) -> int:
        """Settlers who could leave, as counted when the afternoon starts."""
        settlers = self.game.settlers
        occupied = sum(1 for s in settlers if not s.is_idle or s.recovering)
        return max(0, len(settlers) - 1 - occupied)

    def expedition_slots(self) -> int:
        """How many more settlers may leave this afternoon."""
        return max(0, self.free_slots - self.departures)

    def rest(self, settler: "Settler", reason: Optional[str] = None) -> None:
        if reason:
            self.game.log(reason)
            self.game.log(f"{settler.name} will rest instead.")
        self.game.log(settler.rest())

    # ===== Menu =====

    def assign_task(self, settler: "Settler") -> None:
        game = self.game
        res = game.settlement.resources
        game.log(f"Assign task to {settler.name}:", EventType.HEADER)

        emergency = res.food == 0 and res.water == 0
        forage_label = "Emergency foraging (desperate measure, no supplies needed)" if emergency else "Send foraging"
        if self.expedition_slots() <= 0:
            forage_label = f"[UNAVAILABLE] {forage_label} (must keep at least one settler at settlement)"
        heal_label = "Heal (requires medicine and a medic)"
        if settler.role != Role.MEDIC:
            heal_label = f"[UNAVAILABLE] {heal_label}"
        build_label = "Build infrastructure (shelter, food production, water collection)"
        if settler.role != Role.MECHANIC:
            build_label = "[UNAVAILABLE] Build infrastructure (requires mechanic)"

        options = [forage_label, heal_label, build_label, "Rest"]
        answer = game.ask("Choose task (1-4): ", ChoiceConstraints.option(options, default=REST + 1))
        choice = parse_option(answer, len(options))

        if choice == FORAGE:
            self.handle_foraging(settler)
        elif choice == HEAL:
            self.handle_healing(settler)
        elif choice == BUILD:
            self.handle_building(settler)
        else:
            self.rest(settler)

    # ===== Foraging =====

    def handle_foraging(self, settler: "Settler") -> None:
        game = self.game
        if self.expedition_slots() <= 0:
            self.rest(settler, "You must keep at least one settler at the settlement!")
            return
        if settler.health <= game.config.tasks.forage_min_health:
            self.rest(settler, f"{settler.name} is too unhealthy to forage.")
            return

        res = game.settlement.resources
        if res.food == 0 and res.water == 0:
            game.log("EMERGENCY FORAGING:", EventType.HEADER)
            game.log("- 1 day expedition, no supplies needed, high risk of failure")
            if not game.ask_yes_no("Proceed with emergency foraging? (y/n): ", default=False):
                self.rest(settler)
                return
            self.launch(settler, Radius.EMERGENCY)
            return

        settings = game.config.expedition
        labels = []
        for radius in RADIUS_MENU:
            span = settings.duration[radius]
            cost = settings.supply_cost[radius]
            labels.append(
                f"{radius.value.capitalize()} ({span.min}-{span.max} days, "
                f"costs {cost.food} food & {cost.water} water)"
            )
        answer = game.ask("Select radius (1-3): ", ChoiceConstraints.option(labels, default=1))
        choice = parse_option(answer, len(RADIUS_MENU))
        if choice is None:
            self.rest(settler, "Invalid radius.")
            return
        self.launch(settler, RADIUS_MENU[choice])

    def launch(self, settler: "Settler", radius: Radius) -> bool:
        game = self.game
        settlement = game.settlement
        expedition = game.expedition_engine.create(settler, radius, departure_day=game.day)

        if not settlement.has_resources(expedition.supply_cost):
            cost = expedition.supply_cost
            self.rest(
                settler,
                f"Not enough supplies! This expedition requires {cost.food} food and {cost.water} water.",
            )
            return False

        settlement.remove_resource(ResourceType.FOOD, expedition.supply_cost.food)
        settlement.remove_resource(ResourceType.WATER, expedition.supply_cost.water)

        game.expedition_engine.process_expedition(expedition, taken_names=game.taken_names())
        settler.activity = OnExpedition(return_day=expedition.return_day)
        game.expeditions.append(expedition)
        self.departures += 1

        if radius == Radius.EMERGENCY:
            game.log(
                f"{settler.name} set out on an emergency foraging mission. They should return tomorrow.",
                EventType.EXPEDITION,
            )
        else:
            # Return day stays hidden
            game.log(
                f"{settler.name} set out on a {radius.value} radius expedition with "
                f"{expedition.supply_cost.food} food and {expedition.supply_cost.water} water.",
                EventType.EXPEDITION,
            )
        return True

    # ===== Healing =====

    def handle_healing(self, medic: "Settler") -> None:
        game = self.game
        if medic.role != Role.MEDIC:
            self.rest(medic, f"Only a medic can heal settlers, and {medic.name} is a {medic.role.value}!")
            return
        if game.settlement.resources.meds <= 0:
            self.rest(medic, "No medicine available!")
            return

        patients = game.present_settlers
        for i, s in enumerate(patients, 1):
            game.log(f"{i}. {s.name} - Health: {s.health}{' [WOUNDED]' if s.wounded else ''}")
        patient = self.pick_patient(patients)
        if patient is None:
            self.rest(medic, "Invalid choice.")
            return

        if not game.settlement.remove_resource(ResourceType.MEDS, 1):
            self.rest(medic, "Not enough medicine!")
            return

        tasks = game.config.tasks
        old_health = patient.health
        result = patient.heal(tasks.heal_amount, tasks.medic_bonus, by_medic=True)
        message = (
            f"{medic.name} used 1 medicine to heal {patient.name}. "
            f"Health improved from {old_health} to {result['new_health']}."
        )
        if result["cured_wound"]:
            message += f" {patient.name} is no longer wounded."
        game.log(message, EventType.SUCCESS)

    def pick_patient(self, patients: list["Settler"]) -> Optional["Settler"]:
        """Ask for a patient by name or number; names are fuzzy-matched."""
        names = [s.name for s in patients]
        answer = self.game.ask(
            f"Choose settler to heal (name or 1-{len(patients)}): ",
            ChoiceConstraints.name(names, default=names[0]),
        )
        index = parse_option(answer, len(patients))
        if index is not None:
            return patients[index]
        name = match_name(answer, names)
        if name is None:
            return None
        return patients[names.index(name)]

    # ===== Building =====

    def handle_building(self, mechanic: "Settler") -> None:
        game = self.game
        settlement = game.settlement
        if mechanic.role != Role.MECHANIC:
            self.rest(mechanic, f"Only a mechanic can build structures, and {mechanic.name} is a {mechanic.role.value}!")
            return
        if mechanic.health <= game.config.tasks.build_min_health:
            self.rest(mechanic, f"{mechanic.name} is too weak to do construction work.")
            return

        targets: list[Optional[InfraCategory]] = []
        labels = []

        shelter = settlement.can_upgrade_shelter()
        if shelter.possible:
            targets.append(None)
            tier = game.config.shelter_tiers[shelter.next_tier]
            labels.append(
                f"Shelter: Upgrade to {shelter.next_tier_name} (materials: {shelter.materials_needed}, "
                f"{shelter.time_needed} days, protection {int(tier.protection * 100)}%)"
            )
        else:
            game.log(f"[UNAVAILABLE] Shelter: {shelter.reason}")

        for category in InfraCategory:
            check = settlement.can_start_infrastructure(category)
            if check.possible:
                option = check.option
                targets.append(category)
                labels.append(
                    f"{category.value.capitalize()}: {option.name} (materials: {option.material_cost}, "
                    f"{option.build_time} days, produces {option.production.min}-{option.production.max} per day)"
                )
            else:
                game.log(f"[UNAVAILABLE] {category.value.capitalize()}: {check.reason}")

        if not targets:
            self.rest(mechanic, "No affordable upgrades available. Make sure you have enough materials.")
            return

        labels.append("Cancel (settler will rest instead)")
        answer = game.ask(
            f"Choose what to build or upgrade (1-{len(labels)}): ",
            ChoiceConstraints.option(labels, default=len(labels)),
        )
        choice = parse_option(answer, len(labels))
        if choice is None or choice == len(targets):
            self.rest(mechanic, None if choice is not None else "Invalid choice.")
            return

        target = targets[choice]
        if target is None:
            result = settlement.start_shelter_upgrade(mechanic)
        else:
            crew = [mechanic] + self.recruit_helpers(mechanic)
            result = settlement.start_infrastructure_upgrade(target, crew)
            if result["success"] and len(crew) > 1:
                game.log(
                    f"With {len(crew)} mechanics working together, construction time has been reduced from "
                    f"{result['original_build_time']} to {result['adjusted_build_time']} days."
                )

        if result["success"]:
            game.log(result["message"], EventType.BUILDING)
        else:
            self.rest(mechanic, result["message"])

    def recruit_helpers(self, lead: "Settler") -> list["Settler"]:
        """Offer other free mechanics the chance to join the project."""
        game = self.game
        candidates = [
            s for s in game.settlers
            if s is not lead and s.role == Role.MECHANIC and s.is_available
            and s.health > game.config.tasks.build_min_health
        ]
        if not candidates:
            return []

        game.log("Adding more mechanics will speed up construction.")
        return [
            s for s in candidates
            if game.ask_yes_no(f"Add {s.name} to the project? (y/n): ", default=False)
        ]
