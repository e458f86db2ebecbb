"""Tests for win evaluation."""

import random

import pytest

from darkwood.engine.victory import check_victory, count_alive, victory_message
from darkwood.events.game_events import Team
from darkwood.models.player import Player, Role


def make_players(wolves: int, others: int, dead_wolves: int = 0) -> list[Player]:
    players = [Player(name=f"W{i}", role=Role.WEREWOLF) for i in range(wolves)]
    players += [
        Player(name=f"D{i}", role=Role.WEREWOLF, is_alive=False) for i in range(dead_wolves)
    ]
    players += [Player(name=f"V{i}", role=Role.VILLAGER) for i in range(others)]
    return players


@pytest.mark.parametrize(
    "wolves, others, expected",
    [
        (0, 5, Team.VILLAGERS),
        (0, 0, Team.VILLAGERS),
        (2, 2, Team.WEREWOLVES),
        (2, 1, Team.WEREWOLVES),
        (1, 1, Team.WEREWOLVES),
        (2, 3, None),
        (1, 6, None),
    ],
)
def test_check_victory(wolves, others, expected):
    assert check_victory(make_players(wolves, others)) == expected


def test_dead_players_do_not_count():
    players = make_players(1, 3, dead_wolves=1)
    assert count_alive(players) == (1, 3)
    assert check_victory(players) is None


def test_seer_and_doctor_count_as_villagers():
    players = [
        Player(name="W", role=Role.WEREWOLF),
        Player(name="S", role=Role.SEER),
        Player(name="D", role=Role.DOCTOR),
    ]
    assert check_victory(players) is None


def test_victory_message():
    assert victory_message(Team.WEREWOLVES) == "Game Over! The Werewolves have won!"
    assert victory_message(Team.VILLAGERS) == "Game Over! The Villagers have won!"


@pytest.mark.parametrize("seed", range(20))
def test_werewolf_win_is_monotonic(seed):
    """Once werewolves reach parity, further villager deaths never undo it."""
    rng = random.Random(seed)
    players = make_players(2, 6)
    order = [i for i, p in enumerate(players) if p.role != Role.WEREWOLF]
    rng.shuffle(order)

    won = False
    for index in order:
        players[index] = players[index].model_copy(update={"is_alive": False})
        result = check_victory(players)
        if won:
            assert result == Team.WEREWOLVES
        if result == Team.WEREWOLVES:
            won = True

    assert won
