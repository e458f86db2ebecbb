"""Protocols for the external collaborators that drive the bots.

Both oracles are untrusted: they may be slow, may raise, and may return
anything. Callers go through darkwood.ai.boundary, never the raw result.
"""

from typing import Any, Protocol

from darkwood.events.game_events import Phase
from darkwood.models.player import Player


class DecisionOracle(Protocol):
    """Proposes the bots' night actions, chat lines and votes."""

    async def decide_night(self, players: list[Player], day_count: int) -> Any:
        """Return the night proposals.

        Expected shape (dict or JSON string):
            {"werewolfKillTargetId": ..., "doctorSaveTargetId": ...,
             "seerCheckTargetId": ...,
             "abilityUses": [{"actorId": ..., "itemId": ..., "targetId": ...}]}
        """
        ...

    async def decide_day(
        self,
        players: list[Player],
        day_count: int,
        recent_log: list[str],
    ) -> Any:
        """Return a list of {"actorId", "chatMessage", "voteTargetId"} entries."""
        ...


class NarrativeOracle(Protocol):
    """Writes the flavor text for night and day intros."""

    async def narrate(
        self,
        phase: Phase,
        day_count: int,
        summary: str,
        atmosphere: str,
    ) -> str:
        ...
