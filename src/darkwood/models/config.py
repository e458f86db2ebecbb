"""Game configuration."""

from typing import Optional
from pydantic import BaseModel, Field


class GameConfig(BaseModel):
    """Tunables for a game session.

    Delays only pace the host; they never change resolution.
    """

    oracle_timeout: float = Field(default=20.0, gt=0)  # seconds per oracle call
    night_intro_delay: float = Field(default=2.0, ge=0)
    chat_delay: float = Field(default=0.8, ge=0)
    seed: Optional[int] = None
