"""Events package."""

from darkwood.events.game_events import (
    Phase,
    LogKind,
    Team,
    LogEvent,
    narrative,
    system,
    action,
    chat,
)
from darkwood.events.event_formatter import (
    EventFormatter,
    transcript_lines,
    format_transcript,
)

__all__ = [
    "Phase",
    "LogKind",
    "Team",
    "LogEvent",
    "narrative",
    "system",
    "action",
    "chat",
    "EventFormatter",
    "transcript_lines",
    "format_transcript",
]
