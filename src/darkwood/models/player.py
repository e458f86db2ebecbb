"""Player, Role and Rune models."""

import random
import uuid
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator


class Role(str, Enum):
    """Player roles in the game."""

    VILLAGER = "Villager"
    WEREWOLF = "Werewolf"
    SEER = "Seer"
    DOCTOR = "Doctor"


class PlayerType(str, Enum):
    """Who controls a player (decision oracle or the human user)."""

    AI = "AI"
    HUMAN = "HUMAN"


class RuneKind(str, Enum):
    """What a rune does when activated."""

    SIGHT = "SIGHT"  # reveal a target's role
    SHIELD = "SHIELD"  # prevent one death


class Rune(BaseModel):
    """A cooldown-gated ability item, independent of the owner's role.

    current_cooldown counts the nights until the rune is usable again;
    0 means ready.
    """

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    name: str
    kind: RuneKind
    description: str = ""
    cooldown: int
    current_cooldown: int = 0
    self_only: bool = False  # only ever protects/targets its owner

    @model_validator(mode="after")
    def validate_cooldown(self) -> "Rune":
        if self.cooldown < 1:
            raise ValueError(f"cooldown must be >= 1, got {self.cooldown}")
        if not 0 <= self.current_cooldown <= self.cooldown:
            raise ValueError(
                f"current_cooldown must be within [0, {self.cooldown}], "
                f"got {self.current_cooldown}"
            )
        return self

    @property
    def is_ready(self) -> bool:
        return self.current_cooldown == 0


class Player(BaseModel):
    """A participant in the game.

    The id is the primary identifier; name is for display only.
    Role and id never change after setup; is_alive only goes True -> False.
    """

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    name: str
    role: Role
    player_type: PlayerType = PlayerType.AI
    is_alive: bool = True
    votes_against: int = 0
    runes: list[Rune] = Field(default_factory=list)

    @property
    def is_bot(self) -> bool:
        return self.player_type == PlayerType.AI

    def get_rune(self, rune_id: str) -> Optional[Rune]:
        """Find one of this player's runes by id."""
        for rune in self.runes:
            if rune.id == rune_id:
                return rune
        return None


class RoleConfig(BaseModel):
    """Role configuration for game setup."""

    role: Role
    count: int = 0
    description: str = ""

    model_config = ConfigDict(use_enum_values=True)


class RuneTemplate(BaseModel):
    """Catalogue entry a fresh Rune is stamped from."""

    name: str
    kind: RuneKind
    description: str
    cooldown: int
    self_only: bool = False

    def create(self) -> Rune:
        """Create a ready rune with a fresh id."""
        return Rune(
            name=self.name,
            kind=self.kind,
            description=self.description,
            cooldown=self.cooldown,
            current_cooldown=0,
            self_only=self.self_only,
        )


# Standard 8-player game configuration
STANDARD_8_PLAYER_CONFIG = [
    RoleConfig(role=Role.SEER, count=1, description="Learn one player's true role each night"),
    RoleConfig(role=Role.DOCTOR, count=1, description="Protect one player each night"),
    RoleConfig(role=Role.WEREWOLF, count=2, description="Kill a villager each night"),
    RoleConfig(role=Role.VILLAGER, count=4, description="Find and vote out the werewolves"),
]

AVAILABLE_RUNES = [
    RuneTemplate(
        name="Lunar Sight",
        kind=RuneKind.SIGHT,
        description="Reveal the true role of a target.",
        cooldown=3,
    ),
    RuneTemplate(
        name="Guardian Ward",
        kind=RuneKind.SHIELD,
        description="Protect a target from death for one night.",
        cooldown=3,
    ),
    RuneTemplate(
        name="Shadow Veil",
        kind=RuneKind.SHIELD,
        description="Protect yourself from death for one night.",
        cooldown=4,
        self_only=True,
    ),
]

ROLE_DESCRIPTIONS = {
    Role.VILLAGER: "Find the werewolves and vote them out during the day.",
    Role.WEREWOLF: "Kill a villager each night without getting caught.",
    Role.SEER: "Wake up at night to learn the true role of one player.",
    Role.DOCTOR: "Wake up at night to protect one player from being killed.",
}

BOT_NAMES = ["Silas", "Elara", "Gideon", "Thorne", "Rowan", "Lysandra", "Kael"]

MOON_PHASES = [
    "New Moon",
    "Waxing Crescent",
    "First Quarter",
    "Waxing Gibbous",
    "Full Moon",
    "Waning Gibbous",
    "Last Quarter",
    "Waning Crescent",
]

INITIAL_LOG_MESSAGE = "Welcome to Darkwood. The runes are glowing..."

USER_NAME = "You"


def build_role_pool(user_role: Role) -> list[Role]:
    """Build the role pool with the user's role in the first slot.

    The first occurrence of user_role is taken out of the standard
    composition so the totals stay fixed.
    """
    roles: list[Role] = []
    for role_config in STANDARD_8_PLAYER_CONFIG:
        roles.extend([Role(role_config.role)] * role_config.count)

    roles.remove(user_role)
    return [user_role] + roles


def random_rune(rng: random.Random) -> Rune:
    """Stamp a ready rune from a random catalogue entry."""
    return rng.choice(AVAILABLE_RUNES).create()


def create_roster(
    rng: random.Random,
    user_role: Role,
    bot_names: Optional[list[str]] = None,
    user_name: str = USER_NAME,
) -> list[Player]:
    """Create the full roster for a new game.

    Args:
        rng: random.Random instance for reproducible setup.
        user_role: Role chosen by the human player.
        bot_names: Display names for the bots (default BOT_NAMES).
        user_name: Display name for the human player.

    Returns:
        Shuffled list of players; exactly one is HUMAN.

    Raises:
        ValueError: If the number of bot names does not fit the role pool.
    """
    bot_names = list(BOT_NAMES if bot_names is None else bot_names)
    pool = build_role_pool(user_role)
    if len(bot_names) != len(pool) - 1:
        raise ValueError(
            f"Roster needs exactly {len(pool) - 1} bots, got {len(bot_names)}"
        )

    bot_roles = pool[1:]
    rng.shuffle(bot_roles)

    players = [
        Player(
            name=user_name,
            role=pool[0],
            player_type=PlayerType.HUMAN,
            runes=[random_rune(rng)],
        )
    ]
    for name, role in zip(bot_names, bot_roles):
        players.append(Player(name=name, role=role, runes=[random_rune(rng)]))

    rng.shuffle(players)
    return players
