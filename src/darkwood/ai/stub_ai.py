"""Stub oracle implementations for testing and offline play.

These generate valid random decisions without calling a model.
Useful for:
- Integration tests (full game flow without network calls)
- Development testing
- The console host's default mode

Decisions are returned in the same wire shape a real oracle would send
(camelCase dicts), so they travel through the same boundary parsing.
"""

import random
from typing import Any, Optional

from darkwood.engine.actions import ActionKind, UserNightAction
from darkwood.engine.game_state import GameSession
from darkwood.events.game_events import Phase
from darkwood.models.player import Player, Role, RuneKind

# Chance that a bot activates a ready rune on a given night
RUNE_USE_CHANCE = 0.2

CHAT_LINES = {
    "accuse": [
        "I don't trust {target}. Too quiet last night.",
        "{target} keeps changing the subject. Suspicious.",
        "My rune flickered when {target} walked past.",
        "I'm voting {target}. Call it a hunch.",
    ],
    "defend": [
        "I was home all night, I swear it on the runes.",
        "We are wasting daylight arguing.",
        "Look at who benefits from these deaths.",
        "Whoever it is, they are sitting among us right now.",
    ],
}

NIGHT_LINES = [
    "Clouds swallow the stars above Darkwood.",
    "Somewhere beyond the tree line, something howls.",
    "The runes pulse faintly in the dark.",
    "Doors are barred. Candles gutter out one by one.",
]

DAY_LINES = [
    "Grey light creeps over the rooftops.",
    "The village gathers in the square, eyes darting.",
    "Morning mist clings to the graves.",
    "Crows circle the well as the villagers wake.",
]


def _alive(players: list[Player]) -> list[Player]:
    return [p for p in players if p.is_alive]


class StubDecisionOracle:
    """Random but rule-aware bot decisions.

    - Werewolves kill a living non-werewolf.
    - The doctor saves any living player; the seer checks someone else.
    - Each ready bot rune fires with RUNE_USE_CHANCE.
    - Votes never target the voter; werewolves spare their pack.
    """

    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random(seed)

    async def decide_night(self, players: list[Player], day_count: int) -> dict[str, Any]:
        alive = _alive(players)
        bots = [p for p in alive if p.is_bot]

        def bot_with(role: Role) -> Optional[Player]:
            return next((p for p in bots if p.role == role), None)

        decision: dict[str, Any] = {
            "werewolfKillTargetId": None,
            "doctorSaveTargetId": None,
            "seerCheckTargetId": None,
            "abilityUses": [],
        }

        if bot_with(Role.WEREWOLF):
            prey = [p for p in alive if p.role != Role.WEREWOLF]
            if prey:
                decision["werewolfKillTargetId"] = self._rng.choice(prey).id

        if bot_with(Role.DOCTOR) and alive:
            decision["doctorSaveTargetId"] = self._rng.choice(alive).id

        seer = bot_with(Role.SEER)
        if seer:
            others = [p for p in alive if p.id != seer.id]
            if others:
                decision["seerCheckTargetId"] = self._rng.choice(others).id

        for bot in bots:
            for rune in bot.runes:
                if not rune.is_ready or self._rng.random() >= RUNE_USE_CHANCE:
                    continue
                if rune.self_only:
                    target = bot
                elif rune.kind == RuneKind.SIGHT:
                    others = [p for p in alive if p.id != bot.id]
                    if not others:
                        continue
                    target = self._rng.choice(others)
                else:
                    target = self._rng.choice(alive)
                decision["abilityUses"].append({
                    "actorId": bot.id,
                    "itemId": rune.id,
                    "targetId": target.id,
                })

        return decision

    async def decide_day(
        self,
        players: list[Player],
        day_count: int,
        recent_log: list[str],
    ) -> list[dict[str, Any]]:
        alive = _alive(players)
        decisions = []
        for bot in alive:
            if not bot.is_bot:
                continue
            candidates = [p for p in alive if p.id != bot.id]
            if bot.role == Role.WEREWOLF:
                candidates = [p for p in candidates if p.role != Role.WEREWOLF] or candidates
            target = self._rng.choice(candidates) if candidates else None

            if target is not None and self._rng.random() < 0.6:
                line = self._rng.choice(CHAT_LINES["accuse"]).format(target=target.name)
            else:
                line = self._rng.choice(CHAT_LINES["defend"])

            decisions.append({
                "actorId": bot.id,
                "chatMessage": line,
                "voteTargetId": target.id if target else None,
            })
        return decisions


class StubNarrator:
    """Canned atmospheric lines per phase."""

    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random(seed)

    async def narrate(
        self,
        phase: Phase,
        day_count: int,
        summary: str,
        atmosphere: str,
    ) -> str:
        lines = NIGHT_LINES if phase == Phase.NIGHT_INTRO else DAY_LINES
        return f"Under the {atmosphere}, {self._rng.choice(lines).lower()}"


class AutopilotUser:
    """Plays the user's seat at random (console host --ai)."""

    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random(seed)

    def night_action(self, session: GameSession) -> Optional[UserNightAction]:
        user = session.user_player
        if user is None or not user.is_alive:
            return None

        others = [p for p in session.alive_players() if p.id != user.id]
        ready = [r for r in user.runes if r.is_ready]
        if ready and others and self._rng.random() < RUNE_USE_CHANCE:
            rune = self._rng.choice(ready)
            return UserNightAction(
                kind=ActionKind.RUNE,
                rune_id=rune.id,
                target_id=user.id if rune.self_only else self._rng.choice(others).id,
            )

        if user.role == Role.WEREWOLF:
            others = [p for p in others if p.role != Role.WEREWOLF]
        elif user.role == Role.DOCTOR:
            others = [user, *others]
        if user.role == Role.VILLAGER or not others:
            return UserNightAction(kind=ActionKind.ROLE)
        return UserNightAction(kind=ActionKind.ROLE, target_id=self._rng.choice(others).id)

    def vote(self, session: GameSession) -> Optional[str]:
        user = session.user_player
        if user is None or not user.is_alive:
            return None
        others = [p for p in session.alive_players() if p.id != user.id]
        return self._rng.choice(others).id if others else None
