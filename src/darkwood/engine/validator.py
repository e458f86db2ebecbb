"""GameValidator - runtime validation hooks for game rules.

The phase controller calls the validator after every transition so that
resolver bugs are caught at the transition that introduced them.

Usage:
    # In tests or development
    validator = CollectingValidator()
    controller = PhaseController(validator=validator)
    violations = validator.get_violations()

    # Fail fast
    controller = PhaseController(validator=StrictValidator())

    # No overhead in production (validator=None)
    controller = PhaseController()
"""

from typing import Optional, Protocol

from darkwood.engine.game_state import GameSession
from darkwood.validation import ValidationError, ValidationViolation, validate_transition


class GameValidator(Protocol):
    """Hook called after each phase-controller transition."""

    def on_transition(
        self,
        before: Optional[GameSession],
        event: object,
        after: GameSession,
    ) -> None:
        """Called with the snapshots on both sides of a transition."""
        ...


class NoOpValidator:
    """No-op validator for production use (zero overhead)."""

    def on_transition(
        self,
        before: Optional[GameSession],
        event: object,
        after: GameSession,
    ) -> None:
        pass


class CollectingValidator(NoOpValidator):
    """Validator that collects violations for later inspection.

    Use this in tests to verify game rules are being followed.
    """

    def __init__(self):
        self._violations: list[ValidationViolation] = []

    def get_violations(self) -> list[ValidationViolation]:
        """Get all collected violations."""
        return list(self._violations)

    def clear(self) -> None:
        """Clear collected violations."""
        self._violations.clear()

    def on_transition(
        self,
        before: Optional[GameSession],
        event: object,
        after: GameSession,
    ) -> None:
        for violation in validate_transition(before, after):
            self._violations.append(
                violation.model_copy(update={"event_type": type(event).__name__})
            )


class StrictValidator(NoOpValidator):
    """Validator that raises ValidationError on the first bad transition."""

    def on_transition(
        self,
        before: Optional[GameSession],
        event: object,
        after: GameSession,
    ) -> None:
        violations = validate_transition(before, after)
        if violations:
            raise ValidationError(violations, transition=type(event).__name__)


def create_validator(mode: Optional[str]) -> Optional[GameValidator]:
    """Build a validator from a mode name: None, "collect" or "strict"."""
    if mode is None or mode == "off":
        return None
    if mode == "collect":
        return CollectingValidator()
    if mode == "strict":
        return StrictValidator()
    raise ValueError(f"Unknown validator mode: {mode}")
