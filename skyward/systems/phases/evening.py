"""Evening - summary of the day and a look at tomorrow."""

from __future__ import annotations

from skyward.models.events import EventType
from skyward.systems.choices import ChoiceConstraints
from skyward.systems.phases.base import Phase


class EveningPhase(Phase):
    title = "EVENING PHASE: DAY SUMMARY"

    def execute(self) -> None:
        game = self.game
        self.header(self.title)
        game.log(f"Day {game.day} is complete.")

        self.day_summary()
        self.night_conditions()
        self.tomorrow_preview()

        answer = game.ask(
            "Press Enter to advance to next day (or type 'quit' to end): ",
            ChoiceConstraints(default=""),
        )
        if answer.strip().lower() == "quit":
            game.running = False

    def day_summary(self) -> None:
        game = self.game
        settlement = game.settlement
        game.log("DAY SUMMARY:", EventType.HEADER)

        active = len(game.expeditions)
        if active:
            game.log(f"- {active} active expedition{'s' if active > 1 else ''}")

        projects = settlement.infrastructure.in_progress
        if projects:
            game.log(f"- {len(projects)} infrastructure project{'s' if len(projects) > 1 else ''} in progress")
            for project in projects:
                game.log(f"  {project.name}: {project.time_left}/{project.original_time} days remaining")

        upgrade = settlement.shelter_upgrade
        if upgrade:
            name = game.config.shelter_tiers[upgrade.target_tier].name
            game.log(f"- Building {name}: {upgrade.time_left} days remaining")

        critical = [s for s in game.settlers if s.health < 30 or s.morale < 30]
        if critical:
            game.log("WARNING: Settlers in critical condition:", EventType.DANGER)
            for settler in critical:
                issues = []
                if settler.health < 30:
                    issues.append(f"health critical ({settler.health})")
                if settler.morale < 30:
                    issues.append(f"morale critical ({settler.morale})")
                game.log(f"- {settler.name}: {', '.join(issues)}", EventType.DANGER)

    def night_conditions(self) -> None:
        game = self.game
        settlement = game.settlement
        game.log("NIGHT CONDITIONS:", EventType.HEADER)
        game.log(f"Shelter: {settlement.shelter_name} ({int(settlement.shelter_protection * 100)}% protection)")
        if settlement.shelter_tier == 0:
            game.log("- The makeshift shelter provides little protection from the elements.")
        else:
            game.log("- The settlement's shelter provides adequate protection for the night.")

    def tomorrow_preview(self) -> None:
        game = self.game
        settlement = game.settlement
        tomorrow = game.day + 1
        game.log("TOMORROW'S PREVIEW:", EventType.HEADER)

        # Count only; who returns stays a surprise
        returning = sum(1 for e in game.expeditions if e.return_day == tomorrow)
        if returning:
            game.log(f"- {returning} expedition{'s' if returning > 1 else ''} may return tomorrow.")
        else:
            game.log("- No expeditions expected to return tomorrow.")

        still_away = sum(1 for e in game.expeditions if e.return_day > tomorrow)
        mouths = len(game.settlers) - still_away
        game.log(f"- {mouths} settlers will need food and water tomorrow.")

        res = settlement.resources
        if res.food < mouths:
            game.log(f"! WARNING: Not enough food for everyone tomorrow ({res.food}/{mouths}).", EventType.WARNING)
        if res.water < mouths:
            game.log(f"! WARNING: Not enough water for everyone tomorrow ({res.water}/{mouths}).", EventType.WARNING)

        production = settlement.infrastructure.daily_production
        if production.get("food"):
            game.log(f"- Expected food production: ~{production['food']}")
        if production.get("water"):
            game.log(f"- Expected water collection: ~{production['water']}")

        for project in settlement.infrastructure.in_progress:
            if project.time_left == 1:
                game.log(f"- {project.name} will be completed tomorrow.", EventType.BUILDING)
