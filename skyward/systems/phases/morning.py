"""Morning - overnight progress, returns and arrivals."""

from __future__ import annotations
import logging

from skyward.models.events import EventType
from skyward.models.expedition import Expedition
from skyward.systems.phases.base import Phase

logger = logging.getLogger(__name__)


class MorningPhase(Phase):
    title = "MORNING PHASE"

    def execute(self) -> None:
        game = self.game
        self.header(self.title)
        game.log(f"Day {game.day} has begun.")

        if game.day > 1:
            game.update_all_morale(game.config.hope.changes.day_survived, "another day survived")

        self.process_infrastructure()
        self.process_shelter()

        hope = game.hope
        game.log(f"Settlement hope: {hope}", EventType.HOPE)

        self.check_for_visitors(hope)

        for message in game.settlement.track_resource_stability(game.settlers):
            game.log(message, EventType.SUCCESS)

        for settler in game.settlers:
            message = settler.update_recovery()
            if message:
                game.log(message, EventType.SETTLER)

        self.surface_status_reports()
        self.process_returning_expeditions()
        game.check_critical_status()

    # ===== Buildings =====

    def process_infrastructure(self) -> None:
        game = self.game
        results, produced = game.settlement.process_daily_infrastructure(game.settlers, game.rng)

        for resource, amount in produced.items():
            if amount > 0:
                game.log(f"{amount} {resource} was produced by your infrastructure today.", EventType.RESOURCE)

        for project in results.completed:
            game.log(f"{project.name} construction is complete!", EventType.BUILDING)
            for name in project.mechanics:
                game.log(f"- {name} is now available for other tasks.")
            if project.hope_bonus:
                game.update_all_morale(project.hope_bonus, f"completed {project.name}")
            game.log(
                f"- Will produce {project.production.min}-{project.production.max} "
                f"{project.category.value} per day."
            )

        for project in results.continuing:
            verb = "are" if len(project.mechanics) > 1 else "is"
            game.log(f"{project.name} construction continues. {project.time_left} day(s) remaining.", EventType.BUILDING)
            game.log(f"- {', '.join(project.mechanics)} {verb} working on the project.")

    def process_shelter(self) -> None:
        game = self.game
        progress = game.settlement.process_shelter_upgrade(game.settlers)
        if progress is None:
            return
        if progress.complete:
            game.log(f"The shelter has been upgraded to {progress.shelter_name}!", EventType.BUILDING)
            game.log(f"- {progress.mechanic} is now available for other tasks.")
            if progress.hope_bonus:
                game.update_all_morale(progress.hope_bonus, f"completed {progress.shelter_name}")
        else:
            game.log(
                f"{progress.mechanic} continues work on the {progress.shelter_name}. "
                f"{progress.days_left} day(s) remaining.",
                EventType.BUILDING,
            )

    # ===== Arrivals =====

    def check_for_visitors(self, hope: int) -> None:
        game = self.game
        chance = game.settlement.get_visitor_chance(hope)
        if chance > 0 and game.rng.random() * 100 < chance:
            logger.info("Visitor arrived (chance %d%%)", chance)
            survivor = game.expedition_engine.generate_survivor(game.taken_names(), visitor=True)
            game.admit_survivor(survivor, rescued=False)

    def surface_status_reports(self) -> None:
        game = self.game
        for expedition in game.expeditions:
            due = expedition.report_due_day
            if due is None or expedition.status_report_shown:
                continue
            if due <= game.day < expedition.return_day:
                game.log(f"Status report: {expedition.status_report}.", EventType.EXPEDITION)
                expedition.status_report_shown = True

    def process_returning_expeditions(self) -> None:
        game = self.game
        returning = [e for e in game.expeditions if e.return_day <= game.day]
        if not returning:
            game.log("No expeditions returning today.")
            return

        self.header("RETURNING EXPEDITIONS")
        game.expeditions = [e for e in game.expeditions if e.return_day > game.day]
        for expedition in returning:
            self.resolve_expedition(expedition)

    def resolve_expedition(self, expedition: Expedition) -> None:
        game = self.game
        changes = game.config.hope.changes
        settler = game.get_settler(expedition.settler.name)
        if settler is None:
            return

        settler.set_idle()
        settler.start_recovery(expedition.recover_time)
        game.settlement.add_bundle(expedition.resources)

        found = expedition.resources.nonzero()
        if found:
            details = ", ".join(f"{amount} {resource}" for resource, amount in found.items())
            message = f"{settler.name} has returned from the {expedition.radius.value} radius with {details}."
            if expedition.jackpot_find:
                message += " They found an exceptional cache of supplies!"
            message += f" They need {expedition.recover_time} day(s) to recover."
            game.log(message, EventType.EXPEDITION)
            game.update_all_morale(changes.successful_expedition, "successful expedition")
            if expedition.jackpot_find:
                game.update_all_morale(changes.exceptional_find, "found more than expected")
        else:
            game.log(
                f"{settler.name} has returned from the {expedition.radius.value} radius with no resources. "
                f"The expedition was a failure. They need {expedition.recover_time} day(s) to recover.",
                EventType.WARNING,
            )
            game.update_all_morale(changes.failed_expedition, "failed expedition")

        if expedition.events:
            game.log(f"{settler.name}'s expedition events:", EventType.EXPEDITION)
            for event in expedition.events:
                game.log(f"Day {event.day}: {event.name} - {event.description}")
                game.log(f"  {event.result}")

        if expedition.found_survivor and expedition.survivor:
            game.admit_survivor(expedition.survivor, rescued=True)
