"""Session invariants (R, A, C, K, D, N, L, W rules).

Rules:
- R.1: ids unique, exactly one HUMAN player, roster ids/roles fixed after setup
- A.1: is_alive only goes True -> False
- C.1: every rune cooldown stays within [0, cooldown]
- K.1: knowledge only grows; a revealed role never changes
- D.1: day_count only increments by 1, on DAY_VOTING -> NIGHT_INTRO
- N.1: at most one death per transition
- L.1: the log is append-only within an epoch
- W.1: winner is set iff the phase is GAME_OVER
"""

from typing import Optional, TYPE_CHECKING

from darkwood.events.game_events import Phase
from darkwood.models.player import PlayerType
from .types import ValidationViolation, ValidationSeverity

if TYPE_CHECKING:
    from darkwood.engine.game_state import GameSession


def validate_session(session: "GameSession") -> list[ValidationViolation]:
    """Validate rules that hold for any single snapshot (R.1, C.1, W.1)."""
    violations: list[ValidationViolation] = []

    if session.phase != Phase.SETUP:
        ids = [p.id for p in session.players]
        if len(ids) != len(set(ids)):
            violations.append(ValidationViolation(
                rule_id="R.1",
                category="Roster",
                message="Player ids must be unique",
                context={"ids": ids},
            ))

        humans = [p.id for p in session.players if p.player_type == PlayerType.HUMAN]
        if len(humans) != 1 or humans[0] != session.user_player_id:
            violations.append(ValidationViolation(
                rule_id="R.1",
                category="Roster",
                message=f"Expected exactly one HUMAN player (the user), found {len(humans)}",
                context={"humans": humans, "user_player_id": session.user_player_id},
            ))

    for player in session.players:
        for rune in player.runes:
            if not 0 <= rune.current_cooldown <= rune.cooldown:
                violations.append(ValidationViolation(
                    rule_id="C.1",
                    category="Cooldowns",
                    message=(
                        f"{player.name}'s {rune.name}: current_cooldown="
                        f"{rune.current_cooldown} outside [0, {rune.cooldown}]"
                    ),
                    context={"player": player.id, "rune": rune.id},
                ))

    if (session.winner is not None) != (session.phase == Phase.GAME_OVER):
        violations.append(ValidationViolation(
            rule_id="W.1",
            category="Victory",
            message=f"winner={session.winner} inconsistent with phase={session.phase.value}",
        ))

    return violations


def validate_transition(
    before: Optional["GameSession"],
    after: "GameSession",
) -> list[ValidationViolation]:
    """Validate rules that compare two consecutive snapshots.

    Transitions across a reset (epoch change) or out of SETUP start a new
    game and are only checked with validate_session.
    """
    violations = validate_session(after)
    if before is None or before.epoch != after.epoch or before.phase == Phase.SETUP:
        return violations

    # R.1: roster identity and roles are fixed
    before_roles = {p.id: p.role for p in before.players}
    after_roles = {p.id: p.role for p in after.players}
    if before_roles != after_roles:
        violations.append(ValidationViolation(
            rule_id="R.1",
            category="Roster",
            message="Roster ids or roles changed after setup",
        ))

    # A.1 / N.1
    was_alive = {p.id for p in before.players if p.is_alive}
    now_alive = {p.id for p in after.players if p.is_alive}
    revived = now_alive - was_alive
    if revived:
        violations.append(ValidationViolation(
            rule_id="A.1",
            category="Aliveness",
            message="Dead players came back to life",
            context={"revived": sorted(revived)},
        ))
    died = was_alive - now_alive
    if len(died) > 1:
        violations.append(ValidationViolation(
            rule_id="N.1",
            category="Deaths",
            message=f"{len(died)} players died in a single transition",
            context={"died": sorted(died)},
        ))

    # K.1
    for player_id, role in before.knowledge.items():
        if after.knowledge.get(player_id) != role:
            violations.append(ValidationViolation(
                rule_id="K.1",
                category="Knowledge",
                message=f"Known role for {player_id} was removed or changed",
                context={"before": role.value, "after": str(after.knowledge.get(player_id))},
            ))

    # D.1
    delta = after.day_count - before.day_count
    looped = before.phase == Phase.DAY_VOTING and after.phase == Phase.NIGHT_INTRO
    if delta not in (0, 1) or (delta == 1) != looped:
        violations.append(ValidationViolation(
            rule_id="D.1",
            category="Day Count",
            message=(
                f"day_count {before.day_count} -> {after.day_count} on "
                f"{before.phase.value} -> {after.phase.value}"
            ),
        ))

    # L.1
    before_ids = [e.id for e in before.logs]
    after_ids = [e.id for e in after.logs[:len(before_ids)]]
    if before_ids != after_ids:
        violations.append(ValidationViolation(
            rule_id="L.1",
            category="Log",
            message="Log entries were removed or reordered",
            severity=ValidationSeverity.ERROR,
        ))

    return violations
