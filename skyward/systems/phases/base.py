"""Common base for the four phases of a day."""

from __future__ import annotations
from typing import TYPE_CHECKING

from skyward.models.events import EventType

if TYPE_CHECKING:
    from skyward.game import Game


class Phase:
    """One step of the day cycle. Reads and mutates the game it is bound to."""

    title = ""

    def __init__(self, game: "Game"):
        self.game = game

    def header(self, text: str) -> None:
        self.game.log(f"=== {text} ===", EventType.PHASE)

    def execute(self) -> None:
        raise NotImplementedError
