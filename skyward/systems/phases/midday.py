"""Midday - feeding and watering everyone at the settlement."""

from __future__ import annotations
from typing import TYPE_CHECKING

from skyward.models.events import EventType
from skyward.models.settlement import ResourceType
from skyward.systems.phases.base import Phase

if TYPE_CHECKING:
    from skyward.models.settler import Settler


class MiddayPhase(Phase):
    title = "MIDDAY PHASE: RESOURCE DISTRIBUTION"

    def execute(self) -> None:
        game = self.game
        self.header(self.title)

        present = game.present_settlers
        res = game.settlement.resources
        game.log(f"You have {res.food} food and {res.water} water.")
        game.log(f"{len(present)} settlers are present and need resources.")

        if present:
            if game.ask_yes_no("Distribute resources automatically? (y/n): ", default=True):
                food_short, water_short = self.auto_distribute(present)
            else:
                food_short, water_short = self.manual_distribute(present)
            self.apply_shortage_effects(food_short, water_short)

            game.log("HEALTH & MORALE UPDATES:", EventType.HEADER)
            hope = game.hope
            for settler in present:
                changes = settler.update_wellbeing(hope, game.config.consumption)
                if changes:
                    game.log(f"- {settler.name}: {changes}", EventType.WARNING)
                else:
                    game.log(f"- {settler.name}'s health and morale remain stable.")

        game.check_critical_status()

    def _distribute(self, present: list["Settler"], resource: ResourceType) -> bool:
        """Hand out one unit each. Returns True if anyone went without."""
        game = self.game
        settlement = game.settlement
        available = settlement.resources.get(resource)
        count = len(present)
        counter = "days_without_food" if resource == ResourceType.FOOD else "days_without_water"

        if available >= count:
            settlement.remove_resource(resource, count)
            for settler in present:
                setattr(settler, counter, 0)
            game.log(f"- Each settler received 1 {resource.value} ({count} total).", EventType.RESOURCE)
            return False

        game.log(
            f"- Not enough {resource.value} for everyone! Only {available}/{count} settlers will get some.",
            EventType.WARNING,
        )
        # Food goes to the weakest, water to the most miserable
        if resource == ResourceType.FOOD:
            ordered = sorted(present, key=lambda s: s.health)
        else:
            ordered = sorted(present, key=lambda s: s.morale)
        for i, settler in enumerate(ordered):
            if i < available:
                setattr(settler, counter, 0)
                game.log(f"  - {settler.name} received {resource.value}.")
            else:
                setattr(settler, counter, getattr(settler, counter) + 1)
                game.log(f"  - {settler.name} went without {resource.value}.")
        settlement.remove_resource(resource, available)
        return True

    def auto_distribute(self, present: list["Settler"]) -> tuple[bool, bool]:
        self.game.log("AUTOMATIC DISTRIBUTION:", EventType.HEADER)
        food_short = self._distribute(present, ResourceType.FOOD)
        water_short = self._distribute(present, ResourceType.WATER)
        return food_short, water_short

    def manual_distribute(self, present: list["Settler"]) -> tuple[bool, bool]:
        game = self.game
        settlement = game.settlement
        game.log("MANUAL DISTRIBUTION:", EventType.HEADER)
        food_short = water_short = False

        for settler in present:
            game.log(f"{settler.name} - Health: {settler.health}, Morale: {settler.morale}")

            food = settlement.resources.food
            if food > 0 and game.ask_yes_no(
                f"Give 1 food to {settler.name}? ({food} remaining) (y/n): ", default=True
            ):
                settlement.remove_resource(ResourceType.FOOD, 1)
                settler.days_without_food = 0
                game.log(f"- {settler.name} received food.")
            else:
                settler.days_without_food += 1
                food_short = True
                game.log(f"- {settler.name} went hungry.")

            water = settlement.resources.water
            if water > 0 and game.ask_yes_no(
                f"Give 1 water to {settler.name}? ({water} remaining) (y/n): ", default=True
            ):
                settlement.remove_resource(ResourceType.WATER, 1)
                settler.days_without_water = 0
                game.log(f"- {settler.name} received water.")
            else:
                settler.days_without_water += 1
                water_short = True
                game.log(f"- {settler.name} went thirsty.")

        return food_short, water_short

    def apply_shortage_effects(self, food_short: bool, water_short: bool) -> None:
        changes = self.game.config.hope.changes
        if food_short:
            self.game.update_all_morale(changes.food_shortage, "food shortage")
        if water_short:
            self.game.update_all_morale(changes.water_shortage, "water shortage")
