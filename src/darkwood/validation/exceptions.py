"""Validation exceptions."""

from .types import ValidationSeverity, ValidationViolation


class ValidationError(Exception):
    """A transition broke a structural invariant.

    These point at an engine bug, not at bad oracle input, so
    StrictValidator raises instead of letting the game continue.
    """

    def __init__(self, violations: list[ValidationViolation], transition: str = ""):
        self.violations = violations
        self.transition = transition
        errors = [v for v in violations if v.severity == ValidationSeverity.ERROR]
        rules = ", ".join(sorted({v.rule_id for v in violations}))
        where = f" after {transition}" if transition else ""
        super().__init__(f"{len(errors)} invariant violation(s){where}: {rules}")

    @property
    def rule_ids(self) -> set[str]:
        return {v.rule_id for v in self.violations}

    def __str__(self) -> str:
        lines = [self.args[0]]
        for v in self.violations:
            lines.append(f"  [{v.severity.value.upper()}] {v.rule_id}: {v.message}")
        return "\n".join(lines)
