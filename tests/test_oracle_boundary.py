"""Tests for the oracle boundary: calls, parsing and fallbacks."""

import asyncio
import json
import random

import pytest

from darkwood.ai.boundary import (
    DEFAULT_NARRATION,
    QUIET_NARRATION,
    Malformed,
    Ok,
    Unreachable,
    call_oracle,
    day_decisions_or_fallback,
    narration_or_default,
    night_decision_or_fallback,
    parse_day_decisions,
    parse_narration,
    parse_night_decision,
)
from darkwood.ai.parsing import extract_json
from darkwood.engine.actions import NightDecision
from darkwood.models.player import Player, Role


def make_players() -> list[Player]:
    return [
        Player(name="Silas", role=Role.WEREWOLF),
        Player(name="Elara", role=Role.SEER),
        Player(name="Gideon", role=Role.VILLAGER, is_alive=False),
    ]


class TestExtractJson:
    def test_code_fence(self):
        raw = 'Here you go:\n```json\n{"a": 1}\n```\nGood luck.'
        assert extract_json(raw) == '{"a": 1}'

    def test_bare_object_in_prose(self):
        assert extract_json('Decision: {"a": [1, 2]} done') == '{"a": [1, 2]}'

    def test_array(self):
        assert extract_json('[{"actorId": "x"}]') == '[{"actorId": "x"}]'

    def test_plain_text_passthrough(self):
        assert extract_json("  nothing here  ") == "nothing here"


class TestCallOracle:
    @pytest.mark.asyncio
    async def test_ok(self):
        async def oracle():
            return {"x": 1}

        result = await call_oracle(oracle, timeout=1)
        assert result == Ok(payload={"x": 1})

    @pytest.mark.asyncio
    async def test_exception_becomes_unreachable(self):
        async def oracle():
            raise ConnectionError("offline")

        result = await call_oracle(oracle, timeout=1)
        assert isinstance(result, Unreachable)
        assert "offline" in result.reason

    @pytest.mark.asyncio
    async def test_timeout_becomes_unreachable(self):
        async def oracle():
            await asyncio.sleep(10)

        result = await call_oracle(oracle, timeout=0.01)
        assert isinstance(result, Unreachable)
        assert "timed out" in result.reason


class TestParseNightDecision:
    def test_camel_case_dict(self):
        result = parse_night_decision({
            "werewolfKillTargetId": "a",
            "doctorSaveTargetId": None,
            "abilityUses": [{"actorId": "b", "itemId": "r1", "targetId": "c"}],
        })
        assert isinstance(result, Ok)
        decision = result.payload
        assert decision.werewolf_kill_target_id == "a"
        assert decision.seer_check_target_id is None
        assert decision.ability_uses[0].item_id == "r1"

    def test_fenced_json_string(self):
        raw = "```json\n" + json.dumps({"seerCheckTargetId": "s"}) + "\n```"
        result = parse_night_decision(raw)
        assert result.payload.seer_check_target_id == "s"

    def test_garbage_string(self):
        assert isinstance(parse_night_decision("the wolves are hungry"), Malformed)

    def test_wrong_shape(self):
        assert isinstance(parse_night_decision([1, 2, 3]), Malformed)
        assert isinstance(parse_night_decision({"werewolfKillTargetId": ["a", "b"]}), Malformed)

    def test_bad_rune_use_dropped_kill_kept(self):
        result = parse_night_decision({
            "werewolfKillTargetId": "a",
            "doctorSaveTargetId": "b",
            "abilityUses": [
                {"actorId": "c"},
                "nonsense",
                {"actorId": "d", "itemId": "r2", "targetId": "a"},
            ],
        })
        assert isinstance(result, Ok)
        decision = result.payload
        assert decision.werewolf_kill_target_id == "a"
        assert decision.doctor_save_target_id == "b"
        assert [u.actor_id for u in decision.ability_uses] == ["d"]

    @pytest.mark.parametrize("ability_uses", [None, "none", {"actorId": "c"}])
    def test_missing_rune_use_list(self, ability_uses):
        result = parse_night_decision({"werewolfKillTargetId": "a", "abilityUses": ability_uses})
        assert isinstance(result, Ok)
        assert result.payload.werewolf_kill_target_id == "a"
        assert result.payload.ability_uses == []

    def test_bad_rune_use_does_not_trigger_fallback(self, caplog):
        parsed = parse_night_decision({"werewolfKillTargetId": "a", "abilityUses": [{"actorId": "c"}]})
        with caplog.at_level("WARNING", logger="darkwood.ai.boundary"):
            decision = night_decision_or_fallback(parsed, make_players(), random.Random(1))
        assert decision.werewolf_kill_target_id == "a"
        assert "random targets" not in caplog.text


class TestParseDayDecisions:
    def test_bad_entries_dropped_individually(self):
        result = parse_day_decisions([
            {"actorId": "a", "chatMessage": "hi", "voteTargetId": "b"},
            {"chatMessage": "no actor"},
            "nonsense",
            {"actorId": "c"},
        ])
        assert isinstance(result, Ok)
        assert [d.actor_id for d in result.payload] == ["a", "c"]
        assert result.payload[1].vote_target_id is None

    def test_wrapped_in_object(self):
        result = parse_day_decisions({"decisions": [{"actorId": "a"}]})
        assert [d.actor_id for d in result.payload] == ["a"]

    def test_not_a_list(self):
        assert isinstance(parse_day_decisions("{}"), Malformed)
        assert isinstance(parse_day_decisions("not json at all"), Malformed)


class TestParseNarration:
    def test_text(self):
        assert parse_narration("  The moon rises.  ") == Ok(payload="The moon rises.")

    def test_empty_text(self):
        assert parse_narration("") == Ok(payload=QUIET_NARRATION)

    def test_not_text(self):
        assert isinstance(parse_narration({"text": "x"}), Malformed)


class TestFallbacks:
    def test_night_ok_passthrough(self):
        decision = NightDecision(werewolf_kill_target_id="a")
        assert night_decision_or_fallback(
            Ok(payload=decision), make_players(), random.Random(1)
        ) is decision

    @pytest.mark.parametrize(
        "result", [Unreachable(reason="down"), Malformed(reason="junk"), Ok(payload="raw")]
    )
    def test_night_fallback_picks_alive_targets(self, result):
        players = make_players()
        alive = {p.id for p in players if p.is_alive}
        decision = night_decision_or_fallback(result, players, random.Random(3))

        assert decision.werewolf_kill_target_id in alive
        assert decision.doctor_save_target_id in alive
        assert decision.seer_check_target_id in alive
        assert decision.ability_uses == []

    def test_night_fallback_with_nobody_alive(self):
        players = [p.model_copy(update={"is_alive": False}) for p in make_players()]
        decision = night_decision_or_fallback(Unreachable(reason="x"), players, random.Random(1))
        assert decision == NightDecision()

    def test_night_fallback_logs_warning(self, caplog):
        with caplog.at_level("WARNING", logger="darkwood.ai.boundary"):
            night_decision_or_fallback(Unreachable(reason="down"), make_players(), random.Random(1))
        assert "random targets" in caplog.text

    def test_day_fallback_is_silence(self):
        assert day_decisions_or_fallback(Unreachable(reason="down")) == []
        assert day_decisions_or_fallback(Malformed(reason="junk")) == []

    def test_narration_fallback(self):
        assert narration_or_default(Unreachable(reason="down")) == DEFAULT_NARRATION
        assert narration_or_default(Ok(payload="Fog.")) == "Fog."
