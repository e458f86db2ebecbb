"""Engine exceptions."""


class InvalidTransitionError(Exception):
    """Raised when an event is not accepted in the session's current phase.

    Stale oracle results (old epoch) are not errors; they are ignored.
    """

    def __init__(self, phase, event):
        self.phase = phase
        self.event = event
        super().__init__(f"{type(event).__name__} is not accepted during {phase.value}")


class InvalidActionError(Exception):
    """Raised when the user's confirmed action or vote is not allowed."""

    pass
