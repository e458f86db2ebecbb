"""Runtime validation of session invariants.

Modules:
- types.py: ValidationViolation, ValidationSeverity
- exceptions.py: ValidationError
- invariants.py: R.1, A.1, C.1, K.1, D.1, N.1, L.1, W.1 checks
"""

from .types import ValidationSeverity, ValidationViolation
from .exceptions import ValidationError
from .invariants import validate_session, validate_transition

__all__ = [
    "ValidationSeverity",
    "ValidationViolation",
    "ValidationError",
    "validate_session",
    "validate_transition",
]
