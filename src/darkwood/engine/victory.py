"""Win evaluation."""

from typing import Optional, Sequence

from darkwood.events.game_events import Team
from darkwood.models.player import Player, Role


def count_alive(players: Sequence[Player]) -> tuple[int, int]:
    """Return (alive werewolves, alive non-werewolves)."""
    werewolves = sum(1 for p in players if p.is_alive and p.role == Role.WEREWOLF)
    others = sum(1 for p in players if p.is_alive and p.role != Role.WEREWOLF)
    return werewolves, others


def check_victory(players: Sequence[Player]) -> Optional[Team]:
    """Check whether the game has ended.

    Villagers win when no werewolf is alive. Werewolves win on reaching
    parity with everyone else (w >= v), not just a majority.

    Returns:
        The winning team, or None if the game continues.
    """
    werewolves, others = count_alive(players)

    if werewolves == 0:
        return Team.VILLAGERS
    if werewolves >= others:
        return Team.WEREWOLVES
    return None


def victory_message(team: Team) -> str:
    return f"Game Over! The {team.value} have won!"
