"""Engine package - state machine and resolvers.

GameController lives in darkwood.engine.game_controller; it is not
re-exported here because it depends on darkwood.ai.
"""

from .actions import (
    ActionKind,
    DayDecision,
    NightDecision,
    NightTargets,
    RuneUse,
    UserNightAction,
)
from .errors import InvalidActionError, InvalidTransitionError
from .vote_resolver import VoteOutcome, VoteResolution, VoteResolver, apply_vote_outcome
from .game_state import Awaiting, GameSession
from .cooldown_ledger import consume, is_rune_ready, tick_down
from .night_action_resolver import NightActionResolver, NightResolution
from .death_resolution import DeathOutcome, apply_night_deaths, narrative_summary
from .victory import check_victory, count_alive, victory_message
from .validator import (
    GameValidator,
    NoOpValidator,
    CollectingValidator,
    StrictValidator,
    create_validator,
)
from .phase_controller import PhaseController

__all__ = [
    "ActionKind",
    "DayDecision",
    "NightDecision",
    "NightTargets",
    "RuneUse",
    "UserNightAction",
    "InvalidActionError",
    "InvalidTransitionError",
    "VoteOutcome",
    "VoteResolution",
    "VoteResolver",
    "apply_vote_outcome",
    "Awaiting",
    "GameSession",
    "consume",
    "is_rune_ready",
    "tick_down",
    "NightActionResolver",
    "NightResolution",
    "DeathOutcome",
    "apply_night_deaths",
    "narrative_summary",
    "check_victory",
    "count_alive",
    "victory_message",
    "GameValidator",
    "NoOpValidator",
    "CollectingValidator",
    "StrictValidator",
    "create_validator",
    "PhaseController",
]
