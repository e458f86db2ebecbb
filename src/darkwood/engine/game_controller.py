"""GameController - runs a session against live oracles and timers.

The PhaseController decides; this class executes. It holds the latest
snapshot, applies events one at a time under an asyncio.Lock, runs the
requested effects (oracle calls, pacing timers) outside the lock and feeds
their results back in as events. A call to start(), confirm_night_action()
or confirm_vote() returns once the session is waiting on the user again
(or the game is over).
"""

import asyncio
import logging
import random
from collections import deque
from typing import Callable, Optional

from darkwood.ai.boundary import (
    call_oracle,
    day_decisions_or_fallback,
    narration_or_default,
    night_decision_or_fallback,
    parse_day_decisions,
    parse_narration,
    parse_night_decision,
    Ok,
)
from darkwood.ai.oracle import DecisionOracle, NarrativeOracle
from darkwood.engine.actions import UserNightAction
from darkwood.engine.game_state import GameSession
from darkwood.engine.phase_controller import PhaseController
from darkwood.engine.phase_events import (
    ChatTick,
    ConfirmNightAction,
    ConfirmVote,
    DayDecisionsReceived,
    Effect,
    GameInput,
    NarrationReceived,
    NightDecisionsReceived,
    NightIntroElapsed,
    RequestDayDecisions,
    RequestNarration,
    RequestNightDecisions,
    ResetGame,
    StartGame,
    StartTimer,
    TimerKind,
)
from darkwood.engine.validator import GameValidator
from darkwood.events.game_events import LogEvent
from darkwood.models.config import GameConfig
from darkwood.models.player import Player, PlayerType, Role, create_roster

logger = logging.getLogger(__name__)

EventCallback = Callable[[LogEvent], None]


class GameController:
    """Host-side orchestrator for one game at a time."""

    def __init__(
        self,
        decision_oracle: DecisionOracle,
        narrative_oracle: NarrativeOracle,
        config: Optional[GameConfig] = None,
        validator: Optional[GameValidator] = None,
        on_event: Optional[EventCallback] = None,
    ):
        """Initialize the controller.

        Args:
            decision_oracle: Source of bot night actions, chat and votes.
            narrative_oracle: Source of flavor text.
            config: Timeouts, pacing delays and seed (default GameConfig()).
            validator: Optional validator called after every transition.
            on_event: Called with each new LogEvent, in log order.
        """
        self._decisions = decision_oracle
        self._narrator = narrative_oracle
        self.config = config or GameConfig()
        self._on_event = on_event
        self._rng = random.Random(self.config.seed)
        self._phases = PhaseController(validator=validator)
        self._session = GameSession()
        self._lock = asyncio.Lock()

    @property
    def session(self) -> GameSession:
        """The latest published snapshot."""
        return self._session

    @property
    def user_player(self) -> Optional[Player]:
        return self._session.user_player

    # ------------------------------------------------------------------
    # User-facing API
    # ------------------------------------------------------------------

    async def start(self, user_role: Role) -> GameSession:
        """Deal a new roster and play until the first night action."""
        players = create_roster(self._rng, user_role)
        user = next(p for p in players if p.player_type == PlayerType.HUMAN)
        return await self.dispatch(StartGame(players=players, user_player_id=user.id))

    async def confirm_night_action(self, action: Optional[UserNightAction]) -> GameSession:
        """Submit the user's night action and play until voting (or game over)."""
        return await self.dispatch(ConfirmNightAction(action=action))

    async def confirm_vote(self, target_id: Optional[str]) -> GameSession:
        """Submit the user's vote and play until the next night action."""
        return await self.dispatch(ConfirmVote(target_id=target_id))

    async def reset(self) -> GameSession:
        """Discard the game. Results still in flight are ignored."""
        return await self.dispatch(ResetGame())

    # ------------------------------------------------------------------
    # Event loop
    # ------------------------------------------------------------------

    async def dispatch(self, event: GameInput) -> GameSession:
        """Apply an event, then keep executing effects until none are left.

        Raises:
            InvalidTransitionError / InvalidActionError from the phase
            controller. Oracle failures never propagate.
        """
        pending: deque[GameInput] = deque([event])
        while pending:
            current = pending.popleft()
            async with self._lock:
                before = self._session
                transition = self._phases.advance(before, current)
                self._session = transition.session
                self._publish(before, transition.session)

            for effect in transition.effects:
                pending.append(await self._execute(effect))

        return self._session

    def _publish(self, before: GameSession, after: GameSession) -> None:
        if self._on_event is None or after is before:
            return
        fresh = after.logs[len(before.logs):] if after.epoch == before.epoch else after.logs
        for log_event in fresh:
            self._on_event(log_event)

    async def _execute(self, effect: Effect) -> GameInput:
        """Run one effect and turn its outcome into a result event."""
        timeout = self.config.oracle_timeout

        if isinstance(effect, RequestNarration):
            result = await call_oracle(
                lambda: self._narrator.narrate(
                    effect.phase, effect.day_count, effect.summary, effect.atmosphere
                ),
                timeout,
            )
            if isinstance(result, Ok):
                result = parse_narration(result.payload)
            return NarrationReceived(epoch=effect.epoch, text=narration_or_default(result))

        if isinstance(effect, RequestNightDecisions):
            result = await call_oracle(
                lambda: self._decisions.decide_night(effect.players, effect.day_count),
                timeout,
            )
            if isinstance(result, Ok):
                result = parse_night_decision(result.payload)
            decision = night_decision_or_fallback(result, effect.players, self._rng)
            return NightDecisionsReceived(epoch=effect.epoch, decision=decision)

        if isinstance(effect, RequestDayDecisions):
            result = await call_oracle(
                lambda: self._decisions.decide_day(
                    effect.players, effect.day_count, effect.recent_log
                ),
                timeout,
            )
            if isinstance(result, Ok):
                result = parse_day_decisions(result.payload)
            return DayDecisionsReceived(
                epoch=effect.epoch, decisions=day_decisions_or_fallback(result)
            )

        if isinstance(effect, StartTimer):
            if effect.timer == TimerKind.NIGHT_INTRO:
                await asyncio.sleep(self.config.night_intro_delay)
                return NightIntroElapsed(epoch=effect.epoch)
            await asyncio.sleep(self.config.chat_delay)
            return ChatTick(epoch=effect.epoch)

        raise TypeError(f"Unknown effect: {type(effect).__name__}")
