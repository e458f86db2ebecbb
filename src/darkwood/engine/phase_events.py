"""Inputs and outputs of the phase controller.

Events are fed into PhaseController.advance; effects come back out and are
executed by the host (oracle calls, timers). Every effect carries the
session epoch, and every result event built from it carries the same epoch
back so results from before a reset can be recognised and dropped.
"""

from enum import Enum
from typing import Optional, Union
from pydantic import BaseModel, Field

from darkwood.engine.actions import DayDecision, NightDecision, UserNightAction
from darkwood.engine.game_state import GameSession
from darkwood.events.game_events import Phase
from darkwood.models.player import Player


# ============================================================================
# Events
# ============================================================================


class StartGame(BaseModel):
    """Leave SETUP with a freshly created roster."""

    players: list[Player]
    user_player_id: str


class ResetGame(BaseModel):
    """Discard the session and return to SETUP. Accepted in any phase."""


class ConfirmNightAction(BaseModel):
    """The user confirms their night action (None if they have no action)."""

    action: Optional[UserNightAction] = None


class ConfirmVote(BaseModel):
    """The user confirms their day vote (None if the user is dead)."""

    target_id: Optional[str] = None


class NarrationReceived(BaseModel):
    epoch: int
    text: str


class NightIntroElapsed(BaseModel):
    epoch: int


class ChatTick(BaseModel):
    epoch: int


class NightDecisionsReceived(BaseModel):
    epoch: int
    decision: NightDecision


class DayDecisionsReceived(BaseModel):
    epoch: int
    decisions: list[DayDecision] = Field(default_factory=list)


GameInput = Union[
    StartGame,
    ResetGame,
    ConfirmNightAction,
    ConfirmVote,
    NarrationReceived,
    NightIntroElapsed,
    ChatTick,
    NightDecisionsReceived,
    DayDecisionsReceived,
]


# ============================================================================
# Effects
# ============================================================================


class DecisionPurpose(str, Enum):
    """Why bot day decisions are requested."""

    DISCUSSION = "DISCUSSION"  # chat lines are played back
    VOTING = "VOTING"  # votes are tallied


class TimerKind(str, Enum):
    """Pacing timers; the host maps them to GameConfig delays."""

    NIGHT_INTRO = "NIGHT_INTRO"
    CHAT = "CHAT"


class RequestNarration(BaseModel):
    epoch: int
    phase: Phase
    day_count: int
    summary: str
    atmosphere: str


class RequestNightDecisions(BaseModel):
    epoch: int
    players: list[Player]
    day_count: int


class RequestDayDecisions(BaseModel):
    epoch: int
    purpose: DecisionPurpose
    players: list[Player]
    day_count: int
    recent_log: list[str] = Field(default_factory=list)


class StartTimer(BaseModel):
    epoch: int
    timer: TimerKind


Effect = Union[RequestNarration, RequestNightDecisions, RequestDayDecisions, StartTimer]


class Transition(BaseModel):
    """Result of one advance: the new snapshot and the effects it requests."""

    session: GameSession
    effects: list[Effect] = Field(default_factory=list)
