"""Tests for VoteResolver and vote outcome application."""

from darkwood.engine.actions import DayDecision
from darkwood.engine.vote_resolver import VoteOutcome, VoteResolver, apply_vote_outcome
from darkwood.events.game_events import LogKind
from darkwood.models.player import Player, PlayerType, Role


def make_players() -> list[Player]:
    return [
        Player(name="You", role=Role.VILLAGER, player_type=PlayerType.HUMAN),
        Player(name="Silas", role=Role.WEREWOLF),
        Player(name="Elara", role=Role.SEER),
        Player(name="Gideon", role=Role.DOCTOR),
        Player(name="Thorne", role=Role.VILLAGER),
    ]


def vote(voter: Player, target: Player | None) -> DayDecision:
    return DayDecision(actor_id=voter.id, vote_target_id=target.id if target else None)


class TestVoteResolver:
    def test_unique_maximum_eliminated(self):
        you, silas, elara, gideon, thorne = make_players()
        result = VoteResolver().resolve(
            [you, silas, elara, gideon, thorne],
            [vote(silas, thorne), vote(elara, silas), vote(gideon, silas)],
            user_id=you.id,
            user_target=silas.id,
        )
        assert result.outcome.eliminated == silas.id
        assert result.outcome.tally == {thorne.id: 1, silas.id: 3}
        assert result.outcome.tied_players == []
        counted = {p.id: p.votes_against for p in result.players}
        assert counted[silas.id] == 3
        assert counted[thorne.id] == 1

    def test_tie_no_elimination(self):
        you, silas, elara, gideon, thorne = make_players()
        result = VoteResolver().resolve(
            [you, silas, elara, gideon, thorne],
            [vote(silas, elara), vote(elara, silas)],
            user_id=you.id,
        )
        assert result.outcome.eliminated is None
        assert sorted(result.outcome.tied_players) == sorted([elara.id, silas.id])

    def test_no_votes_no_elimination(self):
        players = make_players()
        result = VoteResolver().resolve(players, [], user_id=players[0].id)
        assert result.outcome.eliminated is None
        assert result.outcome.tally == {}

    def test_abstention_counts_nothing(self):
        you, silas, elara, gideon, thorne = make_players()
        result = VoteResolver().resolve(
            [you, silas, elara, gideon, thorne],
            [vote(silas, None), vote(elara, thorne)],
            user_id=you.id,
        )
        assert result.outcome.eliminated == thorne.id

    def test_dead_voters_and_dead_targets_ignored(self):
        you, silas, elara, gideon, thorne = make_players()
        elara = elara.model_copy(update={"is_alive": False})
        gideon = gideon.model_copy(update={"is_alive": False})
        result = VoteResolver().resolve(
            [you, silas, elara, gideon, thorne],
            [vote(elara, silas), vote(silas, gideon), vote(thorne, silas)],
            user_id=you.id,
        )
        assert result.outcome.tally == {silas.id: 1}

    def test_first_vote_per_bot_counts(self):
        you, silas, elara, gideon, thorne = make_players()
        result = VoteResolver().resolve(
            [you, silas, elara, gideon, thorne],
            [vote(silas, thorne), vote(silas, elara), vote(silas, elara)],
            user_id=you.id,
        )
        assert result.outcome.tally == {thorne.id: 1}

    def test_vote_from_user_seat_via_oracle_dropped(self):
        you, silas, elara, gideon, thorne = make_players()
        result = VoteResolver().resolve(
            [you, silas, elara, gideon, thorne],
            [vote(you, silas)],
            user_id=you.id,
        )
        assert result.outcome.tally == {}

    def test_user_vote_logged(self):
        you, silas, *_ = players = make_players()
        result = VoteResolver().resolve(players, [], user_id=you.id, user_target=silas.id)
        assert result.outcome.eliminated == silas.id
        assert result.logs[0].kind == LogKind.ACTION
        assert result.logs[0].text == "You voted for Silas"

    def test_dead_user_vote_ignored(self):
        you, silas, *rest = make_players()
        you = you.model_copy(update={"is_alive": False})
        result = VoteResolver().resolve(
            [you, silas, *rest], [], user_id=you.id, user_target=silas.id
        )
        assert result.outcome.tally == {}
        assert result.logs == []


class TestApplyVoteOutcome:
    def test_elimination_applied_and_counters_reset(self):
        you, silas, *rest = make_players()
        players = [
            p.model_copy(update={"votes_against": 2}) for p in [you, silas, *rest]
        ]
        updated, logs = apply_vote_outcome(players, VoteOutcome(eliminated=silas.id))

        assert not next(p for p in updated if p.id == silas.id).is_alive
        assert all(p.votes_against == 0 for p in updated)
        assert logs[0].text == "Silas was voted out by the village."
        assert logs[1].text == (
            "The village has spoken. Silas is executed. They were a Werewolf."
        )

    def test_no_elimination(self):
        players = make_players()
        updated, logs = apply_vote_outcome(players, VoteOutcome())
        assert all(p.is_alive for p in updated)
        assert logs[0].text == "The village could not agree on who to execute."
