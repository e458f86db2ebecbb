"""Game session snapshot for the Darkwood game."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from darkwood.engine.actions import DayDecision, NightTargets, UserNightAction
from darkwood.engine.vote_resolver import VoteOutcome
from darkwood.events.game_events import LogEvent, Phase, Team
from darkwood.models.player import MOON_PHASES, Player, Role


class Awaiting(str, Enum):
    """Which asynchronous result the session is waiting for."""

    NARRATION = "NARRATION"
    TIMER = "TIMER"
    NIGHT_DECISIONS = "NIGHT_DECISIONS"
    DAY_DECISIONS = "DAY_DECISIONS"


class GameSession(BaseModel):
    """Immutable-by-convention snapshot of a game.

    Transitions never mutate a published session; they build a new one
    with model_copy(deep=True).
    """

    players: list[Player] = Field(default_factory=list)
    phase: Phase = Phase.SETUP
    day_count: int = 1
    moon_phase: str = MOON_PHASES[0]
    logs: list[LogEvent] = Field(default_factory=list)
    winner: Optional[Team] = None
    user_player_id: str = ""
    epoch: int = 0  # bumped on every reset; stale results carry an old epoch

    # Transient between NIGHT_ACTION and DAY_INTRO
    targets: NightTargets = Field(default_factory=NightTargets)
    # Roles revealed to the user; only ever grows
    knowledge: dict[str, Role] = Field(default_factory=dict)

    awaiting: Optional[Awaiting] = None
    pending_night_action: Optional[UserNightAction] = None
    pending_vote: Optional[str] = None
    chat_queue: list[DayDecision] = Field(default_factory=list)
    last_vote: Optional[VoteOutcome] = None

    def get_player(self, player_id: Optional[str]) -> Optional[Player]:
        """Get player by id, or None if not found."""
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    @property
    def user_player(self) -> Optional[Player]:
        return self.get_player(self.user_player_id)

    def alive_players(self) -> list[Player]:
        """Get all players who are still alive."""
        return [p for p in self.players if p.is_alive]

    def is_alive(self, player_id: Optional[str]) -> bool:
        player = self.get_player(player_id)
        return player is not None and player.is_alive

    def recent_log_lines(self, limit: Optional[int] = None) -> list[str]:
        """Transcript lines ('Source: text'), optionally only the last N."""
        logs = self.logs if limit is None else self.logs[-limit:]
        return [str(event) for event in logs]
