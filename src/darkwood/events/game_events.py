"""Event types for game logging."""

import uuid
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class Phase(str, Enum):
    """Phases of the day/night cycle."""

    SETUP = "SETUP"
    NIGHT_INTRO = "NIGHT_INTRO"
    NIGHT_ACTION = "NIGHT_ACTION"
    DAY_INTRO = "DAY_INTRO"
    DAY_DISCUSSION = "DAY_DISCUSSION"
    DAY_VOTING = "DAY_VOTING"
    GAME_OVER = "GAME_OVER"


class LogKind(str, Enum):
    """How a log line should be presented."""

    NARRATIVE = "narrative"
    CHAT = "chat"
    SYSTEM = "system"
    ACTION = "action"


class Team(str, Enum):
    """Winning sides."""

    VILLAGERS = "Villagers"
    WEREWOLVES = "Werewolves"


class LogEvent(BaseModel):
    """A single entry in the session log.

    Log events are frozen: once emitted they are never mutated or
    reordered.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    phase: Phase
    text: str
    source_name: Optional[str] = None  # speaker for chat/action lines
    kind: LogKind = LogKind.SYSTEM

    def __str__(self) -> str:
        """Transcript form: 'Source: text'."""
        return f"{self.source_name or 'System'}: {self.text}"


def narrative(phase: Phase, text: str) -> LogEvent:
    return LogEvent(phase=phase, text=text, kind=LogKind.NARRATIVE)


def system(phase: Phase, text: str) -> LogEvent:
    return LogEvent(phase=phase, text=text, kind=LogKind.SYSTEM)


def action(phase: Phase, text: str, source_name: str) -> LogEvent:
    return LogEvent(phase=phase, text=text, kind=LogKind.ACTION, source_name=source_name)


def chat(phase: Phase, text: str, source_name: str) -> LogEvent:
    return LogEvent(phase=phase, text=text, kind=LogKind.CHAT, source_name=source_name)
