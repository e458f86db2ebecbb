"""Tests for the runtime validators and session invariants."""

import pytest

from darkwood.engine.game_state import GameSession
from darkwood.engine.validator import (
    CollectingValidator,
    NoOpValidator,
    StrictValidator,
    create_validator,
)
from darkwood.events.game_events import Phase, Team, narrative
from darkwood.models.player import AVAILABLE_RUNES, Player, PlayerType, Role
from darkwood.validation import ValidationError, validate_session, validate_transition


def make_session(**update) -> GameSession:
    players = [
        Player(name="You", role=Role.SEER, player_type=PlayerType.HUMAN,
               runes=[AVAILABLE_RUNES[0].create()]),
        Player(name="Silas", role=Role.WEREWOLF),
        Player(name="Elara", role=Role.VILLAGER),
        Player(name="Gideon", role=Role.DOCTOR),
    ]
    session = GameSession(
        players=players,
        user_player_id=players[0].id,
        phase=Phase.NIGHT_ACTION,
        epoch=1,
        logs=[narrative(Phase.SETUP, "Welcome")],
    )
    return session.model_copy(update=update, deep=True)


def kill(session: GameSession, *names: str) -> GameSession:
    players = [
        p.model_copy(update={"is_alive": False}) if p.name in names else p
        for p in session.players
    ]
    return session.model_copy(update={"players": players})


def rule_ids(violations) -> set[str]:
    return {v.rule_id for v in violations}


class TestValidateSession:
    def test_valid_session(self):
        assert validate_session(make_session()) == []

    def test_two_humans(self):
        session = make_session()
        players = [p.model_copy(update={"player_type": PlayerType.HUMAN}) for p in session.players]
        assert "R.1" in rule_ids(validate_session(session.model_copy(update={"players": players})))

    def test_cooldown_out_of_range(self):
        session = make_session()
        user = session.players[0]
        # model_copy skips field validation, so the bad value gets through
        bad_rune = user.runes[0].model_copy(update={"current_cooldown": 99})
        players = [user.model_copy(update={"runes": [bad_rune]}), *session.players[1:]]
        assert "C.1" in rule_ids(validate_session(session.model_copy(update={"players": players})))

    def test_winner_without_game_over(self):
        assert "W.1" in rule_ids(validate_session(make_session(winner=Team.VILLAGERS)))
        assert "W.1" in rule_ids(validate_session(make_session(phase=Phase.GAME_OVER)))


class TestValidateTransition:
    def test_revival(self):
        before = kill(make_session(), "Elara")
        after = before.model_copy(update={
            "players": [p.model_copy(update={"is_alive": True}) for p in before.players]
        })
        assert "A.1" in rule_ids(validate_transition(before, after))

    def test_two_deaths_in_one_step(self):
        before = make_session()
        after = kill(before, "Elara", "Gideon")
        assert "N.1" in rule_ids(validate_transition(before, after))

    def test_one_death_allowed(self):
        before = make_session()
        assert validate_transition(before, kill(before, "Elara")) == []

    def test_knowledge_removed(self):
        before = make_session()
        before = before.model_copy(update={"knowledge": {before.players[1].id: Role.WEREWOLF}})
        after = before.model_copy(update={"knowledge": {}})
        assert "K.1" in rule_ids(validate_transition(before, after))

    def test_knowledge_changed(self):
        before = make_session()
        target = before.players[1].id
        before = before.model_copy(update={"knowledge": {target: Role.WEREWOLF}})
        after = before.model_copy(update={"knowledge": {target: Role.VILLAGER}})
        assert "K.1" in rule_ids(validate_transition(before, after))

    def test_day_count_outside_loop(self):
        before = make_session()
        after = before.model_copy(update={"day_count": 2, "phase": Phase.DAY_INTRO})
        assert "D.1" in rule_ids(validate_transition(before, after))

    def test_day_count_on_loop(self):
        before = make_session(phase=Phase.DAY_VOTING)
        after = before.model_copy(update={"day_count": 2, "phase": Phase.NIGHT_INTRO})
        assert validate_transition(before, after) == []

    def test_log_rewritten(self):
        before = make_session()
        after = before.model_copy(update={"logs": [narrative(Phase.SETUP, "Rewritten")]})
        assert "L.1" in rule_ids(validate_transition(before, after))

    def test_role_changed(self):
        before = make_session()
        players = [before.players[0].model_copy(update={"role": Role.WEREWOLF}), *before.players[1:]]
        after = before.model_copy(update={"players": players})
        assert "R.1" in rule_ids(validate_transition(before, after))

    def test_reset_is_not_compared(self):
        before = make_session()
        assert validate_transition(before, GameSession(epoch=2)) == []


class TestValidators:
    def test_noop(self):
        before = make_session()
        NoOpValidator().on_transition(before, object(), kill(before, "Elara", "Gideon"))

    def test_collecting_records_event_type(self):
        validator = CollectingValidator()
        before = make_session()
        validator.on_transition(before, object(), kill(before, "Elara", "Gideon"))

        violations = validator.get_violations()
        assert rule_ids(violations) == {"N.1"}
        assert violations[0].event_type == "object"

        validator.clear()
        assert validator.get_violations() == []

    def test_strict_raises(self):
        before = make_session()
        with pytest.raises(ValidationError) as excinfo:
            StrictValidator().on_transition(before, object(), kill(before, "Elara", "Gideon"))
        assert excinfo.value.rule_ids == {"N.1"}
        assert "N.1" in str(excinfo.value)

    def test_strict_passes_clean_transition(self):
        before = make_session()
        StrictValidator().on_transition(before, object(), kill(before, "Elara"))

    def test_create_validator(self):
        assert create_validator(None) is None
        assert create_validator("off") is None
        assert isinstance(create_validator("collect"), CollectingValidator)
        assert isinstance(create_validator("strict"), StrictValidator)
        with pytest.raises(ValueError):
            create_validator("loud")
