"""Rune cooldown ledger.

- tick_down: once per NIGHT_INTRO, every rune moves one night closer to ready
- consume: once a rune's use is final, it goes back to its full cooldown

Both return new player lists; inputs are never mutated.
"""

from typing import Sequence

from darkwood.models.player import Player


def tick_down(players: Sequence[Player]) -> list[Player]:
    """Decrement every rune's cooldown by one, floored at 0."""
    updated = [p.model_copy(deep=True) for p in players]
    for player in updated:
        for rune in player.runes:
            rune.current_cooldown = max(0, rune.current_cooldown - 1)
    return updated


def consume(players: Sequence[Player], player_id: str, rune_id: str) -> list[Player]:
    """Put a used rune on cooldown.

    No-op if the player or rune does not exist or the rune is not ready,
    so a rune cannot be consumed twice in one resolution pass.
    """
    updated = [p.model_copy(deep=True) for p in players]
    for player in updated:
        if player.id != player_id:
            continue
        rune = player.get_rune(rune_id)
        if rune is not None and rune.is_ready:
            rune.current_cooldown = rune.cooldown
    return updated


def is_rune_ready(players: Sequence[Player], player_id: str, rune_id: str) -> bool:
    """Check whether a player owns a rune and it is off cooldown."""
    for player in players:
        if player.id == player_id:
            rune = player.get_rune(rune_id)
            return rune is not None and rune.is_ready
    return False
