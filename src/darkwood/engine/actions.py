"""Action proposals and pending night targets.

Oracle payloads use camelCase keys on the wire (werewolfKillTargetId,
abilityUses, ...); the models accept both the wire names and the Python
field names.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for models validated from oracle JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RuneUse(WireModel):
    """An oracle-controlled player activating one of their runes."""

    actor_id: str
    item_id: str
    target_id: Optional[str] = None


class NightDecision(WireModel):
    """The decision oracle's proposals for one night.

    Every field is optional; a missing target means no action.
    """

    werewolf_kill_target_id: Optional[str] = None
    doctor_save_target_id: Optional[str] = None
    seer_check_target_id: Optional[str] = None
    ability_uses: list[RuneUse] = Field(default_factory=list)


class DayDecision(WireModel):
    """One bot's chat line and vote for the day."""

    actor_id: str
    chat_message: str = ""
    vote_target_id: Optional[str] = None  # None = abstain


class ActionKind(str, Enum):
    """What the user chose to do at night."""

    ROLE = "ROLE"  # use the role ability (kill / save / check)
    RUNE = "RUNE"  # activate a ready rune


class UserNightAction(BaseModel):
    """The user's single chosen action for the night."""

    kind: ActionKind = ActionKind.ROLE
    target_id: Optional[str] = None
    rune_id: Optional[str] = None


class NightTargets(BaseModel):
    """Pending night targets, carried from NIGHT_ACTION to DAY_INTRO.

    doctor is only ever set when it equals werewolf (the save matched the
    primary kill target).
    """

    werewolf: Optional[str] = None
    doctor: Optional[str] = None
    seer: Optional[str] = None
