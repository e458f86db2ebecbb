"""Oracle protocols, the oracle boundary and stub oracles."""

from darkwood.ai.oracle import DecisionOracle, NarrativeOracle
from darkwood.ai.boundary import (
    DEFAULT_NARRATION,
    Ok,
    Malformed,
    Unreachable,
    OracleResult,
    call_oracle,
    parse_night_decision,
    parse_day_decisions,
    parse_narration,
    night_decision_or_fallback,
    day_decisions_or_fallback,
    narration_or_default,
)
from darkwood.ai.stub_ai import StubDecisionOracle, StubNarrator, AutopilotUser

__all__ = [
    "DecisionOracle",
    "NarrativeOracle",
    "DEFAULT_NARRATION",
    "Ok",
    "Malformed",
    "Unreachable",
    "OracleResult",
    "call_oracle",
    "parse_night_decision",
    "parse_day_decisions",
    "parse_narration",
    "night_decision_or_fallback",
    "day_decisions_or_fallback",
    "narration_or_default",
    "StubDecisionOracle",
    "StubNarrator",
    "AutopilotUser",
]
