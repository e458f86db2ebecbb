"""Test models and roster creation."""

import random
from collections import Counter

import pytest
from pydantic import ValidationError

from darkwood.events import LogEvent, LogKind, Phase
from darkwood.models import (
    AVAILABLE_RUNES,
    BOT_NAMES,
    GameConfig,
    Player,
    PlayerType,
    Role,
    Rune,
    RuneKind,
    build_role_pool,
    create_roster,
)


def test_player_creation():
    """Test creating a player."""
    player = Player(name="Silas", role=Role.WEREWOLF)
    assert player.name == "Silas"
    assert player.role == Role.WEREWOLF
    assert player.is_alive
    assert player.is_bot
    assert player.votes_against == 0
    assert player.id


def test_player_ids_are_unique():
    assert Player(name="A", role=Role.SEER).id != Player(name="A", role=Role.SEER).id


def test_rune_rejects_out_of_range_cooldown():
    with pytest.raises(ValidationError):
        Rune(name="Broken", kind=RuneKind.SIGHT, cooldown=3, current_cooldown=4)
    with pytest.raises(ValidationError):
        Rune(name="Broken", kind=RuneKind.SIGHT, cooldown=3, current_cooldown=-1)
    with pytest.raises(ValidationError):
        Rune(name="Broken", kind=RuneKind.SHIELD, cooldown=0)


def test_rune_readiness():
    rune = Rune(name="Lunar Sight", kind=RuneKind.SIGHT, cooldown=3)
    assert rune.is_ready
    assert not rune.model_copy(update={"current_cooldown": 1}).is_ready


def test_rune_templates_create_ready_runes():
    for template in AVAILABLE_RUNES:
        rune = template.create()
        assert rune.current_cooldown == 0
        assert rune.cooldown == template.cooldown
    first, second = AVAILABLE_RUNES[0].create(), AVAILABLE_RUNES[0].create()
    assert first.id != second.id


def test_shadow_veil_is_self_only():
    veil = next(t for t in AVAILABLE_RUNES if t.name == "Shadow Veil")
    assert veil.self_only
    assert veil.kind == RuneKind.SHIELD


class TestRolePool:
    @pytest.mark.parametrize("role", list(Role))
    def test_user_role_first_and_composition_fixed(self, role):
        pool = build_role_pool(role)
        assert pool[0] == role
        assert Counter(pool) == Counter({
            Role.SEER: 1, Role.DOCTOR: 1, Role.WEREWOLF: 2, Role.VILLAGER: 4,
        })


class TestCreateRoster:
    @pytest.mark.parametrize("role", list(Role))
    def test_standard_roster(self, role):
        players = create_roster(random.Random(7), role)

        assert len(players) == 8
        assert len({p.id for p in players}) == 8
        assert Counter(p.role for p in players) == Counter({
            Role.SEER: 1, Role.DOCTOR: 1, Role.WEREWOLF: 2, Role.VILLAGER: 4,
        })

        humans = [p for p in players if p.player_type == PlayerType.HUMAN]
        assert len(humans) == 1
        assert humans[0].role == role
        assert humans[0].name == "You"

        for player in players:
            assert len(player.runes) == 1
            assert player.runes[0].is_ready

    def test_bots_use_bot_names(self):
        players = create_roster(random.Random(1), Role.VILLAGER)
        assert sorted(p.name for p in players if p.is_bot) == sorted(BOT_NAMES)

    def test_same_seed_same_roles(self):
        first = create_roster(random.Random(42), Role.SEER)
        second = create_roster(random.Random(42), Role.SEER)
        assert [(p.name, p.role) for p in first] == [(p.name, p.role) for p in second]

    def test_wrong_bot_count_rejected(self):
        with pytest.raises(ValueError):
            create_roster(random.Random(1), Role.SEER, bot_names=["Silas", "Elara"])


def test_log_event_is_frozen():
    event = LogEvent(phase=Phase.SETUP, text="Welcome")
    with pytest.raises(ValidationError):
        event.text = "changed"


def test_log_event_transcript_form():
    assert str(LogEvent(phase=Phase.DAY_DISCUSSION, text="Hi", source_name="Kael")) == "Kael: Hi"
    assert str(LogEvent(phase=Phase.DAY_INTRO, text="Dawn")) == "System: Dawn"
    assert LogEvent(phase=Phase.SETUP, text="x").kind == LogKind.SYSTEM


def test_game_config_defaults_and_bounds():
    config = GameConfig()
    assert config.oracle_timeout == 20.0
    assert config.seed is None
    with pytest.raises(ValidationError):
        GameConfig(oracle_timeout=0)
    with pytest.raises(ValidationError):
        GameConfig(chat_delay=-1)
