"""Night action resolution - folds every night proposal into pending targets.

Resolution order:
1. Kill proposals: oracle werewolf kill, then the user's (if a werewolf).
   Only the first is carried forward (single victim per night).
2. Protect proposals: oracle doctor save, oracle SHIELD runes, user
   DOCTOR/SHIELD action.
3. Reveal proposals: user SEER/SIGHT action (oracle sight stays internal).
4. Runes used this night go back on cooldown.

No death is applied here; see death_resolution.apply_night_deaths.
"""

import logging
from typing import Mapping, Optional, Sequence
from pydantic import BaseModel, Field

from darkwood.engine.actions import ActionKind, NightDecision, NightTargets, UserNightAction
from darkwood.engine.cooldown_ledger import consume, is_rune_ready
from darkwood.events.game_events import LogEvent, Phase, action, system
from darkwood.models.player import Player, Role, RuneKind

logger = logging.getLogger(__name__)


class NightResolution(BaseModel):
    """Output of the night resolver."""

    players: list[Player]  # cooldowns updated, nobody killed
    knowledge: dict[str, Role]
    targets: NightTargets
    logs: list[LogEvent] = Field(default_factory=list)


class NightActionResolver:
    """Merges oracle night decisions with the user's action.

    Invalid oracle references (unknown or dead players, runes not owned or
    not ready, actors that are not oracle-controlled) are dropped.
    """

    def resolve(
        self,
        players: Sequence[Player],
        decision: NightDecision,
        user_id: str,
        user_action: Optional[UserNightAction] = None,
        knowledge: Optional[Mapping[str, Role]] = None,
    ) -> NightResolution:
        """Resolve one night.

        Args:
            players: Current roster.
            decision: Oracle proposals, already validated and defaulted.
            user_id: Id of the human player.
            user_action: The user's confirmed action, or None.
            knowledge: Roles already revealed to the user.

        Returns:
            NightResolution with updated cooldowns, knowledge and targets.
        """
        working = [p.model_copy(deep=True) for p in players]
        by_id = {p.id: p for p in working}
        new_knowledge = dict(knowledge or {})
        logs: list[LogEvent] = []

        kills: list[str] = []
        protected: set[str] = set()
        reveals: list[str] = []

        def alive_target(target_id: Optional[str]) -> Optional[str]:
            player = by_id.get(target_id) if target_id is not None else None
            if player is None or not player.is_alive:
                if target_id is not None:
                    logger.debug("Dropping night proposal with invalid target %s", target_id)
                return None
            return player.id

        # A. Oracle role actions
        kill_target = alive_target(decision.werewolf_kill_target_id)
        if kill_target is not None:
            kills.append(kill_target)
        save_target = alive_target(decision.doctor_save_target_id)
        if save_target is not None:
            protected.add(save_target)
        seer_target = alive_target(decision.seer_check_target_id)

        # B. Oracle rune uses
        for use in decision.ability_uses:
            actor = by_id.get(use.actor_id)
            if actor is None or not actor.is_alive or not actor.is_bot:
                logger.debug("Dropping rune use from invalid actor %s", use.actor_id)
                continue
            if not is_rune_ready(working, actor.id, use.item_id):
                logger.debug("Dropping rune use of unavailable rune %s", use.item_id)
                continue

            rune = actor.get_rune(use.item_id)
            target = actor.id if rune.self_only else alive_target(use.target_id)
            if target is None:
                continue

            if rune.kind == RuneKind.SHIELD:
                protected.add(target)
            # SIGHT: bots learn silently, nothing is revealed to the user

            working = consume(working, actor.id, rune.id)
            by_id = {p.id: p for p in working}

        # C. User action
        user = by_id.get(user_id)
        if user is not None and user.is_alive and user_action is not None:
            if user_action.kind == ActionKind.ROLE:
                target = alive_target(user_action.target_id)
                if target is not None:
                    if user.role == Role.WEREWOLF:
                        kills.append(target)
                    elif user.role == Role.DOCTOR:
                        protected.add(target)
                    elif user.role == Role.SEER:
                        reveals.append(target)
            elif user_action.rune_id is not None and is_rune_ready(
                working, user.id, user_action.rune_id
            ):
                rune = user.get_rune(user_action.rune_id)
                target = user.id if rune.self_only else alive_target(user_action.target_id)
                if target is not None:
                    logs.append(action(
                        Phase.NIGHT_ACTION, f"You activated {rune.name}!", source_name=user.name
                    ))
                    if rune.kind == RuneKind.SHIELD:
                        protected.add(target)
                    elif rune.kind == RuneKind.SIGHT:
                        reveals.append(target)
                    working = consume(working, user.id, rune.id)
                    by_id = {p.id: p for p in working}

        # D. Reveals to the user
        for target_id in reveals:
            target = by_id[target_id]
            new_knowledge[target.id] = target.role
            logs.append(system(
                Phase.NIGHT_ACTION,
                f"The mists clear... {target.name} is a {target.role.value}.",
            ))

        primary = kills[0] if kills else None
        targets = NightTargets(
            werewolf=primary,
            doctor=primary if primary is not None and primary in protected else None,
            seer=seer_target,
        )

        return NightResolution(
            players=working,
            knowledge=new_knowledge,
            targets=targets,
            logs=logs,
        )
