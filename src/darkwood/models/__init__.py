"""Models package."""

from darkwood.models.player import (
    Role,
    PlayerType,
    RuneKind,
    Rune,
    Player,
    RoleConfig,
    RuneTemplate,
    STANDARD_8_PLAYER_CONFIG,
    AVAILABLE_RUNES,
    ROLE_DESCRIPTIONS,
    BOT_NAMES,
    MOON_PHASES,
    INITIAL_LOG_MESSAGE,
    USER_NAME,
    build_role_pool,
    random_rune,
    create_roster,
)
from darkwood.models.config import GameConfig

__all__ = [
    "Role",
    "PlayerType",
    "RuneKind",
    "Rune",
    "Player",
    "RoleConfig",
    "RuneTemplate",
    "STANDARD_8_PLAYER_CONFIG",
    "AVAILABLE_RUNES",
    "ROLE_DESCRIPTIONS",
    "BOT_NAMES",
    "MOON_PHASES",
    "INITIAL_LOG_MESSAGE",
    "USER_NAME",
    "build_role_pool",
    "random_rune",
    "create_roster",
    "GameConfig",
]
