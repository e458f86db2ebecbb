"""PhaseController - the game's finite state machine.

Phase order:
    SETUP -> NIGHT_INTRO -> NIGHT_ACTION -> DAY_INTRO -> DAY_DISCUSSION
    -> DAY_VOTING -> (NIGHT_INTRO with day_count + 1 | GAME_OVER)

advance() is a pure function of (session, event): it never awaits, never
sleeps and never calls an oracle. Oracle calls and timers are returned as
effects for the host to execute; their results come back as events.
"""

from typing import Callable, Optional

from darkwood.engine.actions import ActionKind, NightTargets, UserNightAction
from darkwood.engine.death_resolution import apply_night_deaths, narrative_summary
from darkwood.engine.errors import InvalidActionError, InvalidTransitionError
from darkwood.engine.game_state import Awaiting, GameSession
from darkwood.engine.cooldown_ledger import tick_down
from darkwood.engine.night_action_resolver import NightActionResolver
from darkwood.engine.phase_events import (
    ChatTick,
    ConfirmNightAction,
    ConfirmVote,
    DayDecisionsReceived,
    DecisionPurpose,
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
    Transition,
)
from darkwood.engine.validator import GameValidator
from darkwood.engine.victory import check_victory, victory_message
from darkwood.engine.vote_resolver import VoteResolver, apply_vote_outcome
from darkwood.events.game_events import Phase, Team, narrative, chat
from darkwood.models.player import INITIAL_LOG_MESSAGE, MOON_PHASES, PlayerType, Role, RuneKind

# Lines of log context the bots see when voting
VOTING_LOG_CONTEXT = 5

NIGHT_INTRO_SUMMARY = "Night falls. Runes begin to hum."

Handler = Callable[[GameSession, GameInput], Transition]


class PhaseController:
    """Drives every phase transition of a session.

    Each (phase, event type) pair maps to one handler. Events not accepted
    in the current phase raise InvalidTransitionError; results from an
    earlier epoch are ignored.
    """

    def __init__(
        self,
        validator: Optional[GameValidator] = None,
        night_resolver: Optional[NightActionResolver] = None,
        vote_resolver: Optional[VoteResolver] = None,
    ):
        """Initialize the controller.

        Args:
            validator: Optional validator called after every transition.
                       Pass None for production (zero overhead).
            night_resolver: Night resolver (default NightActionResolver()).
            vote_resolver: Day resolver (default VoteResolver()).
        """
        self._validator = validator
        self._night_resolver = night_resolver or NightActionResolver()
        self._vote_resolver = vote_resolver or VoteResolver()
        self._handlers: dict[tuple[Phase, type], Handler] = {
            (Phase.SETUP, StartGame): self._start,
            (Phase.NIGHT_INTRO, NarrationReceived): self._night_intro_narrated,
            (Phase.NIGHT_INTRO, NightIntroElapsed): self._night_intro_elapsed,
            (Phase.NIGHT_ACTION, ConfirmNightAction): self._confirm_night_action,
            (Phase.NIGHT_ACTION, NightDecisionsReceived): self._resolve_night,
            (Phase.DAY_INTRO, NarrationReceived): self._day_intro_narrated,
            (Phase.DAY_DISCUSSION, DayDecisionsReceived): self._queue_chat,
            (Phase.DAY_DISCUSSION, ChatTick): self._chat_tick,
            (Phase.DAY_VOTING, ConfirmVote): self._confirm_vote,
            (Phase.DAY_VOTING, DayDecisionsReceived): self._resolve_vote,
        }

    def advance(self, session: GameSession, event: GameInput) -> Transition:
        """Apply one event to a session.

        Args:
            session: The current snapshot (never mutated).
            event: The input to apply.

        Returns:
            Transition with the new snapshot and the effects to execute.

        Raises:
            InvalidTransitionError: The event is not accepted right now.
            InvalidActionError: The user's action or vote is not allowed.
        """
        if self.is_stale(session, event):
            return Transition(session=session)

        if isinstance(event, ResetGame):
            transition = Transition(session=GameSession(epoch=session.epoch + 1))
        else:
            handler = self._handlers.get((session.phase, type(event)))
            if handler is None:
                raise InvalidTransitionError(session.phase, event)
            transition = handler(session, event)

        if self._validator:
            self._validator.on_transition(session, event, transition.session)

        return transition

    @staticmethod
    def is_stale(session: GameSession, event: GameInput) -> bool:
        """True if the event is a result requested by an earlier epoch."""
        epoch = getattr(event, "epoch", None)
        return epoch is not None and epoch != session.epoch

    # ------------------------------------------------------------------
    # SETUP / NIGHT_INTRO
    # ------------------------------------------------------------------

    def _start(self, session: GameSession, event: StartGame) -> Transition:
        humans = [p for p in event.players if p.player_type == PlayerType.HUMAN]
        if len(humans) != 1 or humans[0].id != event.user_player_id:
            raise InvalidActionError("A game needs exactly one user-controlled player")

        fresh = GameSession(
            players=[p.model_copy(deep=True) for p in event.players],
            user_player_id=event.user_player_id,
            day_count=1,
            epoch=session.epoch + 1,
            logs=[narrative(Phase.SETUP, INITIAL_LOG_MESSAGE)],
        )
        return self._enter_night_intro(fresh)

    def _enter_night_intro(self, session: GameSession) -> Transition:
        """Tick cooldowns, pick the moon, ask for night flavor text."""
        moon = MOON_PHASES[(session.day_count - 1) % len(MOON_PHASES)]
        nxt = session.model_copy(
            update={
                "players": tick_down(session.players),
                "phase": Phase.NIGHT_INTRO,
                "moon_phase": moon,
                "targets": NightTargets(),
                "pending_night_action": None,
                "pending_vote": None,
                "chat_queue": [],
                "awaiting": Awaiting.NARRATION,
            },
            deep=True,
        )
        return Transition(
            session=nxt,
            effects=[RequestNarration(
                epoch=nxt.epoch,
                phase=Phase.NIGHT_INTRO,
                day_count=nxt.day_count,
                summary=NIGHT_INTRO_SUMMARY,
                atmosphere=moon,
            )],
        )

    def _night_intro_narrated(self, session: GameSession, event: NarrationReceived) -> Transition:
        self._expect(session, Awaiting.NARRATION, event)
        nxt = session.model_copy(
            update={
                "logs": [*session.logs, narrative(Phase.NIGHT_INTRO, event.text)],
                "awaiting": Awaiting.TIMER,
            },
            deep=True,
        )
        return Transition(
            session=nxt,
            effects=[StartTimer(epoch=nxt.epoch, timer=TimerKind.NIGHT_INTRO)],
        )

    def _night_intro_elapsed(self, session: GameSession, event: NightIntroElapsed) -> Transition:
        self._expect(session, Awaiting.TIMER, event)
        nxt = session.model_copy(
            update={"phase": Phase.NIGHT_ACTION, "awaiting": None},
            deep=True,
        )
        return Transition(session=nxt)

    # ------------------------------------------------------------------
    # NIGHT_ACTION
    # ------------------------------------------------------------------

    def _confirm_night_action(self, session: GameSession, event: ConfirmNightAction) -> Transition:
        if session.awaiting is not None:
            raise InvalidActionError("Night action already confirmed")

        user_action = self._validate_night_action(session, event.action)
        nxt = session.model_copy(
            update={
                "pending_night_action": user_action,
                "awaiting": Awaiting.NIGHT_DECISIONS,
            },
            deep=True,
        )
        return Transition(
            session=nxt,
            effects=[RequestNightDecisions(
                epoch=nxt.epoch,
                players=nxt.players,
                day_count=nxt.day_count,
            )],
        )

    def _validate_night_action(
        self,
        session: GameSession,
        user_action: Optional[UserNightAction],
    ) -> Optional[UserNightAction]:
        """Check the user's action; a dead user's action is discarded."""
        user = session.user_player
        if user is None or not user.is_alive:
            return None
        if user_action is None:
            raise InvalidActionError("Choose an action before confirming")

        target = session.get_player(user_action.target_id)

        if user_action.kind == ActionKind.RUNE:
            rune = user.get_rune(user_action.rune_id) if user_action.rune_id else None
            if rune is None:
                raise InvalidActionError("You do not own that rune")
            if not rune.is_ready:
                raise InvalidActionError(
                    f"{rune.name} is recharging ({rune.current_cooldown} nights left)"
                )
            if rune.self_only:
                return user_action.model_copy(update={"target_id": user.id})
            if rune.kind == RuneKind.SIGHT and target is not None and target.id == user.id:
                raise InvalidActionError("Scry someone other than yourself")
        elif user.role == Role.VILLAGER:
            # No night ability; confirming simply passes the night
            return user_action.model_copy(update={"target_id": None})
        elif target is not None and target.id == user.id and user.role == Role.SEER:
            raise InvalidActionError("Check someone other than yourself")
        elif target is not None and user.role == Role.WEREWOLF and target.role == Role.WEREWOLF:
            raise InvalidActionError("Werewolves do not hunt their own pack")

        if target is None or not target.is_alive:
            raise InvalidActionError("Choose a living target")
        return user_action

    def _resolve_night(self, session: GameSession, event: NightDecisionsReceived) -> Transition:
        self._expect(session, Awaiting.NIGHT_DECISIONS, event)
        resolution = self._night_resolver.resolve(
            players=session.players,
            decision=event.decision,
            user_id=session.user_player_id,
            user_action=session.pending_night_action,
            knowledge=session.knowledge,
        )
        nxt = session.model_copy(
            update={
                "players": resolution.players,
                "knowledge": resolution.knowledge,
                "targets": resolution.targets,
                "logs": [*session.logs, *resolution.logs],
                "pending_night_action": None,
                "awaiting": None,
            },
            deep=True,
        )
        return self._enter_day_intro(nxt)

    # ------------------------------------------------------------------
    # DAY_INTRO / DAY_DISCUSSION
    # ------------------------------------------------------------------

    def _enter_day_intro(self, session: GameSession) -> Transition:
        """Apply the pending night kill, then check for a winner."""
        outcome = apply_night_deaths(session.players, session.targets)
        nxt = session.model_copy(
            update={
                "phase": Phase.DAY_INTRO,
                "players": outcome.players,
                "logs": [*session.logs, *outcome.logs],
            },
            deep=True,
        )

        winner = check_victory(nxt.players)
        if winner is not None:
            return self._enter_game_over(nxt, winner)

        nxt.awaiting = Awaiting.NARRATION
        return Transition(
            session=nxt,
            effects=[RequestNarration(
                epoch=nxt.epoch,
                phase=Phase.DAY_INTRO,
                day_count=nxt.day_count,
                summary=narrative_summary(outcome, nxt.moon_phase),
                atmosphere=nxt.moon_phase,
            )],
        )

    def _day_intro_narrated(self, session: GameSession, event: NarrationReceived) -> Transition:
        self._expect(session, Awaiting.NARRATION, event)
        nxt = session.model_copy(
            update={
                "logs": [*session.logs, narrative(Phase.DAY_INTRO, event.text)],
                "phase": Phase.DAY_DISCUSSION,
                "awaiting": Awaiting.DAY_DECISIONS,
            },
            deep=True,
        )
        return Transition(
            session=nxt,
            effects=[RequestDayDecisions(
                epoch=nxt.epoch,
                purpose=DecisionPurpose.DISCUSSION,
                players=nxt.players,
                day_count=nxt.day_count,
                recent_log=nxt.recent_log_lines(),
            )],
        )

    def _queue_chat(self, session: GameSession, event: DayDecisionsReceived) -> Transition:
        """Queue one chat line per alive bot, in oracle order."""
        self._expect(session, Awaiting.DAY_DECISIONS, event)
        speakers: set[str] = set()
        queue = []
        for decision in event.decisions:
            speaker = session.get_player(decision.actor_id)
            if speaker is None or not speaker.is_bot or speaker.id in speakers:
                continue
            if not decision.chat_message.strip():
                continue
            speakers.add(speaker.id)
            queue.append(decision)

        nxt = session.model_copy(update={"chat_queue": queue, "awaiting": None}, deep=True)
        return self._play_next_chat(nxt)

    def _chat_tick(self, session: GameSession, event: ChatTick) -> Transition:
        self._expect(session, Awaiting.TIMER, event)
        return self._play_next_chat(session.model_copy(update={"awaiting": None}, deep=True))

    def _play_next_chat(self, session: GameSession) -> Transition:
        """Emit the next chat line, or move to voting when the queue is empty."""
        queue = list(session.chat_queue)
        while queue:
            decision = queue.pop(0)
            speaker = session.get_player(decision.actor_id)
            if speaker is None or not speaker.is_alive:
                continue
            nxt = session.model_copy(
                update={
                    "logs": [
                        *session.logs,
                        chat(Phase.DAY_DISCUSSION, decision.chat_message, speaker.name),
                    ],
                    "chat_queue": queue,
                    "awaiting": Awaiting.TIMER,
                },
                deep=True,
            )
            return Transition(
                session=nxt,
                effects=[StartTimer(epoch=nxt.epoch, timer=TimerKind.CHAT)],
            )

        nxt = session.model_copy(
            update={"phase": Phase.DAY_VOTING, "chat_queue": [], "awaiting": None},
            deep=True,
        )
        return Transition(session=nxt)

    # ------------------------------------------------------------------
    # DAY_VOTING
    # ------------------------------------------------------------------

    def _confirm_vote(self, session: GameSession, event: ConfirmVote) -> Transition:
        if session.awaiting is not None:
            raise InvalidActionError("Vote already confirmed")

        user = session.user_player
        target = None
        if user is not None and user.is_alive:
            if not session.is_alive(event.target_id):
                raise InvalidActionError("Vote for a living player")
            if event.target_id == user.id:
                raise InvalidActionError("You cannot vote for yourself")
            target = event.target_id

        nxt = session.model_copy(
            update={"pending_vote": target, "awaiting": Awaiting.DAY_DECISIONS},
            deep=True,
        )
        return Transition(
            session=nxt,
            effects=[RequestDayDecisions(
                epoch=nxt.epoch,
                purpose=DecisionPurpose.VOTING,
                players=nxt.players,
                day_count=nxt.day_count,
                recent_log=nxt.recent_log_lines(VOTING_LOG_CONTEXT),
            )],
        )

    def _resolve_vote(self, session: GameSession, event: DayDecisionsReceived) -> Transition:
        self._expect(session, Awaiting.DAY_DECISIONS, event)
        resolution = self._vote_resolver.resolve(
            players=session.players,
            decisions=event.decisions,
            user_id=session.user_player_id,
            user_target=session.pending_vote,
        )
        players, outcome_logs = apply_vote_outcome(resolution.players, resolution.outcome)
        nxt = session.model_copy(
            update={
                "players": players,
                "logs": [*session.logs, *resolution.logs, *outcome_logs],
                "last_vote": resolution.outcome,
                "pending_vote": None,
                "awaiting": None,
            },
            deep=True,
        )

        winner = check_victory(nxt.players)
        if winner is not None:
            return self._enter_game_over(nxt, winner)

        # Loop back: the only place day_count increments
        nxt.day_count += 1
        return self._enter_night_intro(nxt)

    # ------------------------------------------------------------------
    # GAME_OVER
    # ------------------------------------------------------------------

    def _enter_game_over(self, session: GameSession, winner: Team) -> Transition:
        nxt = session.model_copy(
            update={
                "phase": Phase.GAME_OVER,
                "winner": winner,
                "logs": [*session.logs, narrative(Phase.GAME_OVER, victory_message(winner))],
                "awaiting": None,
                "pending_night_action": None,
                "pending_vote": None,
                "chat_queue": [],
            },
            deep=True,
        )
        return Transition(session=nxt)

    @staticmethod
    def _expect(session: GameSession, awaiting: Awaiting, event: GameInput) -> None:
        """Reject a result the session did not ask for."""
        if session.awaiting != awaiting:
            raise InvalidTransitionError(session.phase, event)

