"""Death application on entry to DAY_INTRO.

This is the only place a night kill turns is_alive from True to False.
"""

from typing import Optional, Sequence
from pydantic import BaseModel, Field

from darkwood.engine.actions import NightTargets
from darkwood.events.game_events import LogEvent, Phase, system
from darkwood.models.player import Player


class DeathOutcome(BaseModel):
    """What happened to last night's werewolf target."""

    players: list[Player]
    victim_id: Optional[str] = None
    rescued: bool = False
    logs: list[LogEvent] = Field(default_factory=list)


def apply_night_deaths(players: Sequence[Player], targets: NightTargets) -> DeathOutcome:
    """Apply the pending werewolf kill unless the save matched it.

    - no werewolf target: nobody dies
    - werewolf target == doctor target: rescued, nobody dies
    - otherwise the target dies
    """
    updated = [p.model_copy(deep=True) for p in players]

    if targets.werewolf is None:
        return DeathOutcome(
            players=updated,
            logs=[system(Phase.DAY_INTRO, "The night passed quietly.")],
        )

    if targets.werewolf == targets.doctor:
        return DeathOutcome(
            players=updated,
            rescued=True,
            logs=[system(
                Phase.DAY_INTRO,
                "A rune flashed in the night, protecting the innocent from the beast's claws!",
            )],
        )

    victim = next((p for p in updated if p.id == targets.werewolf), None)
    if victim is None or not victim.is_alive:
        return DeathOutcome(players=updated)

    victim.is_alive = False
    return DeathOutcome(
        players=updated,
        victim_id=victim.id,
        logs=[system(Phase.DAY_INTRO, f"{victim.name} has died.")],
    )


def narrative_summary(outcome: DeathOutcome, moon_phase: str) -> str:
    """Event summary handed to the narrative oracle at sunrise."""
    if outcome.rescued:
        return (
            "The sun rises. A rune flashed in the night, "
            "protecting the innocent from the beast's claws!"
        )
    if outcome.victim_id is not None:
        victim = next(p for p in outcome.players if p.id == outcome.victim_id)
        return (
            f"The sun rises. Tragedy strikes! {victim.name} was found dead, "
            "torn apart by a beast."
        )
    return f"The sun rises on a {moon_phase}. The village is peaceful."
