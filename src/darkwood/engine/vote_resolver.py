"""Day vote resolution.

Rules:
- Every alive caster contributes exactly one vote (first decision per bot)
- Abstention allowed (vote for None)
- Votes for unknown or dead players count as abstentions
- Unique maximum is eliminated; tie for the maximum = no elimination
"""

import logging
from collections import defaultdict
from typing import Optional, Sequence
from pydantic import BaseModel, Field

from darkwood.engine.actions import DayDecision
from darkwood.events.game_events import LogEvent, Phase, action, narrative, system
from darkwood.models.player import Player

logger = logging.getLogger(__name__)


class VoteOutcome(BaseModel):
    """Result of one voting round."""

    tally: dict[str, int] = Field(default_factory=dict)  # target id -> votes
    eliminated: Optional[str] = None
    tied_players: list[str] = Field(default_factory=list)


class VoteResolution(BaseModel):
    """Vote outcome plus the roster with votes_against populated."""

    outcome: VoteOutcome
    players: list[Player]
    logs: list[LogEvent] = Field(default_factory=list)


class VoteResolver:
    """Tallies oracle votes and the user's vote into an elimination outcome.

    The resolver never kills anyone; apply_vote_outcome does.
    """

    def resolve(
        self,
        players: Sequence[Player],
        decisions: Sequence[DayDecision],
        user_id: str,
        user_target: Optional[str] = None,
    ) -> VoteResolution:
        """Tally votes.

        Args:
            players: Current roster
            decisions: Oracle day decisions (chat + vote per bot)
            user_id: Id of the human player
            user_target: The user's vote, or None to abstain

        Returns:
            VoteResolution with the outcome and players carrying votes_against
        """
        by_id = {p.id: p for p in players}
        alive = {p.id for p in players if p.is_alive}
        logs: list[LogEvent] = []

        tally: dict[str, int] = defaultdict(int)
        voted: set[str] = set()

        for decision in decisions:
            voter = by_id.get(decision.actor_id)
            if voter is None or not voter.is_alive or not voter.is_bot:
                logger.debug("Dropping vote from invalid actor %s", decision.actor_id)
                continue
            if voter.id in voted:
                continue
            voted.add(voter.id)

            target = decision.vote_target_id
            if target is None:
                continue
            if target not in alive:
                logger.debug("Dropping vote for invalid target %s", target)
                continue
            tally[target] += 1

        user = by_id.get(user_id)
        if user is not None and user.is_alive and user_target in alive:
            tally[user_target] += 1
            logs.append(action(
                Phase.DAY_VOTING,
                f"You voted for {by_id[user_target].name}",
                source_name=user.name,
            ))

        eliminated = self._determine_eliminated(tally)
        outcome = VoteOutcome(
            tally=dict(tally),
            eliminated=eliminated,
            tied_players=self._get_tied_players(tally),
        )

        counted = [
            p.model_copy(update={"votes_against": tally.get(p.id, 0)}, deep=True)
            for p in players
        ]
        return VoteResolution(outcome=outcome, players=counted, logs=logs)

    def _determine_eliminated(self, tally: dict[str, int]) -> Optional[str]:
        """Unique maximum, or None if tie/no votes."""
        if not tally:
            return None

        max_votes = max(tally.values())
        leaders = [target for target, count in tally.items() if count == max_votes]

        if len(leaders) > 1:
            return None

        return leaders[0]

    def _get_tied_players(self, tally: dict[str, int]) -> list[str]:
        """Players tied for the maximum (empty if no tie)."""
        if not tally:
            return []

        max_votes = max(tally.values())
        leaders = [target for target, count in tally.items() if count == max_votes]

        return leaders if len(leaders) > 1 else []


def apply_vote_outcome(
    players: Sequence[Player],
    outcome: VoteOutcome,
) -> tuple[list[Player], list[LogEvent]]:
    """Apply an elimination and reset every votes_against to 0.

    Returns:
        Tuple of (updated players, outcome log events)
    """
    updated = [p.model_copy(deep=True) for p in players]
    logs: list[LogEvent] = []

    victim = next((p for p in updated if p.id == outcome.eliminated), None)
    if victim is not None:
        victim.is_alive = False
        logs.append(system(Phase.DAY_VOTING, f"{victim.name} was voted out by the village."))
        logs.append(narrative(
            Phase.DAY_VOTING,
            f"The village has spoken. {victim.name} is executed. "
            f"They were a {victim.role.value}.",
        ))
    else:
        logs.append(system(Phase.DAY_VOTING, "The village could not agree on who to execute."))
        logs.append(narrative(
            Phase.DAY_VOTING,
            "The sun sets without an execution. The village trembles.",
        ))

    for player in updated:
        player.votes_against = 0

    return updated, logs
