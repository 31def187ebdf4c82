"""Choice collaborator - how the game asks the player to decide things.

The game never reads input itself. Every decision goes through a
ChoiceProvider, so the console, scripted tests and unattended runs all drive
the same phase code.
"""

from __future__ import annotations
from collections import deque
from enum import Enum
from typing import Iterable, Optional, Protocol, runtime_checkable
from pydantic import BaseModel, Field
from thefuzz import fuzz
import logging

logger = logging.getLogger(__name__)


class ChoiceKind(str, Enum):
    YES_NO = "yes_no"
    OPTION = "option"
    NAME = "name"
    TEXT = "text"


class ChoiceConstraints(BaseModel):
    """What kind of answer a prompt expects, and the answer to assume otherwise."""
    kind: ChoiceKind = ChoiceKind.TEXT
    options: list[str] = Field(default_factory=list)
    default: str = ""

    @classmethod
    def yes_no(cls, default: bool = False) -> "ChoiceConstraints":
        return cls(kind=ChoiceKind.YES_NO, options=["y", "n"], default="y" if default else "n")

    @classmethod
    def option(cls, options: list[str], default: int = 1) -> "ChoiceConstraints":
        """Numbered menu; answers are 1-based indexes."""
        return cls(kind=ChoiceKind.OPTION, options=options, default=str(default))

    @classmethod
    def name(cls, names: list[str], default: str = "") -> "ChoiceConstraints":
        return cls(kind=ChoiceKind.NAME, options=names, default=default)


@runtime_checkable
class ChoiceProvider(Protocol):
    def ask_choice(self, prompt: str, constraints: ChoiceConstraints) -> str:
        ...


class ScriptedChoices:
    """Answers from a queue; falls back to each prompt's default once exhausted."""

    def __init__(self, answers: Iterable[str] = ()):
        self._answers = deque(answers)
        self.asked: list[str] = []

    def push(self, *answers: str) -> None:
        self._answers.extend(answers)

    @property
    def remaining(self) -> int:
        return len(self._answers)

    def ask_choice(self, prompt: str, constraints: ChoiceConstraints) -> str:
        self.asked.append(prompt)
        if self._answers:
            return self._answers.popleft()
        return constraints.default


class AutoChoices:
    """Always takes the default; used for unattended runs."""

    def ask_choice(self, prompt: str, constraints: ChoiceConstraints) -> str:
        return constraints.default


# ===== Parsing =====

def parse_yes_no(text: Optional[str], default: bool = False) -> bool:
    if not text:
        return default
    answer = text.strip().lower()
    if answer in ("y", "yes"):
        return True
    if answer in ("n", "no"):
        return False
    return default


def parse_option(text: Optional[str], count: int) -> Optional[int]:
    """Parse a 1-based menu answer. Returns a 0-based index, or None if invalid."""
    if not text:
        return None
    try:
        value = int(text.strip())
    except ValueError:
        return None
    if 1 <= value <= count:
        return value - 1
    return None


def match_name(query: Optional[str], names: list[str], threshold: int = 70) -> Optional[str]:
    """Find the name that exactly or fuzzy-matches the query."""
    if not query:
        return None
    query = query.strip().lower()
    for name in names:
        if name.lower() == query:
            return name

    best_match = None
    best_score = 0
    for name in names:
        score = fuzz.ratio(query, name.lower())
        if score > best_score and score >= threshold:
            best_score = score
            best_match = name
    return best_match
