"""Event formatter for human-readable game logs.

Formats log events as rich console markup or plain transcript lines.
"""

from typing import Iterable

from rich.markup import escape

from .game_events import LogEvent, LogKind


class EventFormatter:
    """Format log events for the console host.

    - narrative lines in italics
    - chat lines prefixed with the speaker
    - actions highlighted
    - system lines dimmed
    """

    def __init__(self, user_name: str = "You"):
        """Initialize formatter.

        Args:
            user_name: Display name of the human player (highlighted in chat)
        """
        self.user_name = user_name

    def format(self, event: LogEvent) -> str:
        """Format a single event as rich markup."""
        return self._dispatch(event)

    def _dispatch(self, event: LogEvent) -> str:
        """Route event to appropriate formatter method."""
        if event.kind == LogKind.NARRATIVE:
            return self._format_narrative(event)
        elif event.kind == LogKind.CHAT:
            return self._format_chat(event)
        elif event.kind == LogKind.ACTION:
            return self._format_action(event)
        return self._format_system(event)

    def _format_narrative(self, event: LogEvent) -> str:
        return f"[italic magenta]{escape(event.text)}[/italic magenta]"

    def _format_chat(self, event: LogEvent) -> str:
        speaker = event.source_name or "Someone"
        style = "bold green" if speaker == self.user_name else "bold cyan"
        return f"[{style}]{escape(speaker)}:[/{style}] {escape(event.text)}"

    def _format_action(self, event: LogEvent) -> str:
        return f"[bold yellow]> {escape(event.text)}[/bold yellow]"

    def _format_system(self, event: LogEvent) -> str:
        return f"[dim]{escape(event.text)}[/dim]"


def transcript_lines(events: Iterable[LogEvent]) -> list[str]:
    """Plain 'Source: text' lines, as handed to the decision oracle."""
    return [str(event) for event in events]


def format_transcript(events: Iterable[LogEvent]) -> str:
    """Plain transcript with phase tags, for log files."""
    return "\n".join(
        f"[{event.phase.value}] {event}" for event in events
    )
