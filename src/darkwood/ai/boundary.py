"""Oracle boundary: call, validate and degrade.

Every oracle call goes through call_oracle(), which turns a raised
exception or a timeout into Unreachable. The parse_* helpers turn a raw
payload into Ok(model) or Malformed. The *_or_fallback helpers collapse a
result into a value the phase controller can always consume, so the game
advances no matter what the oracle does.
"""

import asyncio
import json
import logging
import random
from typing import Any, Awaitable, Callable, Literal, Optional, Union

from pydantic import BaseModel, ValidationError

from darkwood.ai.parsing import extract_json
from darkwood.engine.actions import DayDecision, NightDecision, RuneUse
from darkwood.models.player import Player

logger = logging.getLogger(__name__)

DEFAULT_NARRATION = "A strange silence falls over the village."
QUIET_NARRATION = "The wind howls through the trees..."


class Ok(BaseModel):
    status: Literal["ok"] = "ok"
    payload: Any = None


class Malformed(BaseModel):
    """The oracle answered, but not with something usable."""

    status: Literal["malformed"] = "malformed"
    reason: str


class Unreachable(BaseModel):
    """The oracle raised or timed out."""

    status: Literal["unreachable"] = "unreachable"
    reason: str


OracleResult = Union[Ok, Malformed, Unreachable]


async def call_oracle(
    factory: Callable[[], Awaitable[Any]],
    timeout: Optional[float] = None,
) -> OracleResult:
    """Await one oracle call with a timeout.

    Args:
        factory: Zero-argument callable returning the oracle coroutine
        timeout: Seconds to wait (None waits forever)

    Returns:
        Ok(raw payload) or Unreachable(reason). Cancellation propagates.
    """
    try:
        payload = await asyncio.wait_for(factory(), timeout=timeout)
    except asyncio.TimeoutError:
        return Unreachable(reason=f"timed out after {timeout}s")
    except Exception as e:
        return Unreachable(reason=f"{type(e).__name__}: {e}")
    return Ok(payload=payload)


def _load(raw: Any) -> Any:
    """Decode a JSON string (possibly fenced); pass structures through."""
    if isinstance(raw, str):
        return json.loads(extract_json(raw))
    if isinstance(raw, BaseModel):
        return raw.model_dump(by_alias=True)
    return raw


def parse_night_decision(raw: Any) -> OracleResult:
    """Validate a raw night payload into Ok(NightDecision).

    Rune uses are validated one by one; a bad entry is dropped and the
    remaining proposals are kept. A missing or non-list abilityUses means
    no rune uses.
    """
    try:
        data = _load(raw)
    except ValueError as e:
        return Malformed(reason=str(e))
    if not isinstance(data, dict):
        return Malformed(reason=f"expected an object, got {type(data).__name__}")

    data = dict(data)
    entries = data.pop("abilityUses", None)
    if entries is None:
        entries = data.pop("ability_uses", None)
    try:
        decision = NightDecision.model_validate(data)
    except ValidationError as e:
        return Malformed(reason=str(e))

    if not isinstance(entries, list):
        if entries is not None:
            logger.debug("Ignoring non-list abilityUses %r", entries)
        entries = []
    uses = []
    for entry in entries:
        try:
            uses.append(RuneUse.model_validate(entry))
        except ValidationError as e:
            logger.debug("Dropping malformed rune use %r: %s", entry, e)
    return Ok(payload=decision.model_copy(update={"ability_uses": uses}))


def parse_day_decisions(raw: Any) -> OracleResult:
    """Validate a raw day payload into Ok(list[DayDecision]).

    Entries are validated one by one; a bad entry is dropped without
    discarding the rest.
    """
    try:
        data = _load(raw)
    except ValueError as e:
        return Malformed(reason=str(e))

    if isinstance(data, dict):
        data = data.get("decisions", data.get("actions"))
    if not isinstance(data, list):
        return Malformed(reason=f"expected a list, got {type(data).__name__}")

    decisions = []
    for entry in data:
        try:
            decisions.append(DayDecision.model_validate(entry))
        except ValidationError as e:
            logger.debug("Dropping malformed day decision %r: %s", entry, e)
    return Ok(payload=decisions)


def parse_narration(raw: Any) -> OracleResult:
    """Accept any string; an empty one becomes the quiet-night line."""
    if not isinstance(raw, str):
        return Malformed(reason=f"expected text, got {type(raw).__name__}")
    return Ok(payload=raw.strip() or QUIET_NARRATION)


def night_decision_or_fallback(
    result: OracleResult,
    players: list[Player],
    rng: random.Random,
) -> NightDecision:
    """Return the oracle's decision, or uniformly random alive targets.

    The fallback picks kill, save and check targets independently from the
    alive players and uses no runes.
    """
    if isinstance(result, Ok) and isinstance(result.payload, NightDecision):
        return result.payload

    logger.warning("Night decisions unavailable (%s); using random targets", _reason(result))
    alive_ids = [p.id for p in players if p.is_alive]

    def pick() -> Optional[str]:
        return rng.choice(alive_ids) if alive_ids else None

    return NightDecision(
        werewolf_kill_target_id=pick(),
        doctor_save_target_id=pick(),
        seer_check_target_id=pick(),
    )


def day_decisions_or_fallback(result: OracleResult) -> list[DayDecision]:
    """Return the oracle's decisions, or none (bots stay silent and abstain)."""
    if isinstance(result, Ok) and isinstance(result.payload, list):
        return result.payload
    logger.warning("Day decisions unavailable (%s); bots abstain", _reason(result))
    return []


def narration_or_default(result: OracleResult) -> str:
    if isinstance(result, Ok) and isinstance(result.payload, str):
        return result.payload
    logger.warning("Narration unavailable (%s); using default", _reason(result))
    return DEFAULT_NARRATION


def _reason(result: OracleResult) -> str:
    if isinstance(result, Ok):
        return f"unexpected payload {type(result.payload).__name__}"
    return f"{result.status}: {result.reason}"
