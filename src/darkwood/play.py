#!/usr/bin/env python
"""Playable Darkwood game: you against seven stub-driven bots.

Usage:
    darkwood                           # Pick a role and play in the console
    darkwood --role Seer --seed 42     # Reproducible game as the Seer
    darkwood --ai                      # Let the autopilot play your seat
    darkwood --validate strict         # Fail fast on any broken game rule
    darkwood --games 100               # Stress test with validators
"""

import argparse
import asyncio
import logging
import random
from collections import Counter
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import IntPrompt, Prompt
from rich.table import Table

from darkwood.ai.stub_ai import AutopilotUser, StubDecisionOracle, StubNarrator
from darkwood.engine.actions import ActionKind, UserNightAction
from darkwood.engine.errors import InvalidActionError
from darkwood.engine.game_controller import GameController
from darkwood.engine.game_state import GameSession
from darkwood.engine.validator import CollectingValidator, GameValidator, create_validator
from darkwood.events.event_formatter import EventFormatter, format_transcript
from darkwood.events.game_events import Phase
from darkwood.models import GameConfig, Role, ROLE_DESCRIPTIONS, RuneKind

RULES_TEXT = (
    "[bold blue]Villagers[/bold blue] must find and vote out all Werewolves.\n"
    "[bold red]Werewolves[/bold red] must eliminate Villagers until they equal "
    "or outnumber them.\n\n"
    "At night, use your role or one of your [bold]Runes[/bold]. "
    "Runes recharge over several nights.\n"
    "By day, listen to the village and vote someone out.\n\n"
    + "\n".join(f"[bold]{role.value}:[/bold] {desc}" for role, desc in ROLE_DESCRIPTIONS.items())
)


def render_players(session: GameSession) -> Table:
    """Roster table from the user's point of view."""
    user = session.user_player
    table = Table(title=f"Day {session.day_count} - {session.moon_phase}")
    table.add_column("#", justify="right")
    table.add_column("Name")
    table.add_column("Status")
    table.add_column("Known role")

    for index, player in enumerate(session.players, start=1):
        if player.id == session.user_player_id:
            known = player.role.value
        elif session.winner is not None:
            known = player.role.value
        elif session.knowledge.get(player.id) is not None:
            known = session.knowledge[player.id].value
        else:
            known = "?"
        status = "[green]alive[/green]" if player.is_alive else "[red]dead[/red]"
        name = f"[bold]{player.name}[/bold]" if user is not None and player.id == user.id else player.name
        table.add_row(str(index), name, status, known)
    return table


def _choose(console: Console, title: str, options: list[tuple[str, object]]) -> object:
    """Numbered menu; returns the value of the chosen option."""
    console.print(f"[bold]{title}[/bold]")
    for index, (label, _) in enumerate(options, start=1):
        console.print(f"  {index}. {label}")
    choice = IntPrompt.ask(
        "Choose",
        choices=[str(i) for i in range(1, len(options) + 1)],
        console=console,
    )
    return options[choice - 1][1]


def prompt_role(console: Console) -> Role:
    options = [(f"{role.value} - {ROLE_DESCRIPTIONS[role]}", role) for role in Role]
    return _choose(console, "Choose your role", options)


def prompt_night_action(console: Console, session: GameSession) -> Optional[UserNightAction]:
    """Ask the user for their role action or a ready rune, then a target."""
    user = session.user_player
    if user is None or not user.is_alive:
        return None

    verbs = {Role.WEREWOLF: "Kill", Role.DOCTOR: "Save", Role.SEER: "Check"}
    options: list[tuple[str, object]] = []
    if user.role in verbs:
        options.append((f"{verbs[user.role]} (role ability)", None))
    else:
        options.append(("Sleep through the night", None))
    for rune in user.runes:
        if rune.is_ready:
            options.append((f"Cast {rune.name} - {rune.description}", rune))
        else:
            console.print(
                f"[dim]{rune.name} recharging: {rune.current_cooldown} nights[/dim]"
            )

    picked = _choose(console, "Your night action", options)
    alive = session.alive_players()

    if picked is None:
        if user.role not in verbs:
            return UserNightAction(kind=ActionKind.ROLE)
        targets = alive
        if user.role == Role.SEER:
            targets = [p for p in alive if p.id != user.id]
        elif user.role == Role.WEREWOLF:
            targets = [p for p in alive if p.role != Role.WEREWOLF]
        target = _choose(console, "Target", [(p.name, p.id) for p in targets])
        return UserNightAction(kind=ActionKind.ROLE, target_id=target)

    if picked.self_only:
        return UserNightAction(kind=ActionKind.RUNE, rune_id=picked.id, target_id=user.id)
    targets = alive
    if picked.kind == RuneKind.SIGHT:
        targets = [p for p in alive if p.id != user.id]
    target = _choose(console, "Target", [(p.name, p.id) for p in targets])
    return UserNightAction(kind=ActionKind.RUNE, rune_id=picked.id, target_id=target)


def prompt_vote(console: Console, session: GameSession) -> Optional[str]:
    user = session.user_player
    if user is None or not user.is_alive:
        return None
    candidates = [p for p in session.alive_players() if p.id != user.id]
    return _choose(console, "Vote to execute", [(p.name, p.id) for p in candidates])


async def play_game(
    config: GameConfig,
    role: Optional[Role],
    console: Console,
    validator: Optional[GameValidator] = None,
    autopilot: Optional[AutopilotUser] = None,
    quiet: bool = False,
) -> GameSession:
    """Play one game to GAME_OVER and return the final session."""
    formatter = EventFormatter()

    def show(event) -> None:
        if not quiet:
            console.print(formatter.format(event))

    controller = GameController(
        StubDecisionOracle(config.seed),
        StubNarrator(config.seed),
        config=config,
        validator=validator,
        on_event=show,
    )

    if role is None:
        role = random.Random(config.seed).choice(list(Role)) if autopilot else prompt_role(console)
    session = await controller.start(role)
    if not quiet:
        console.print(Panel(
            f"You are the [bold]{role.value}[/bold]. {ROLE_DESCRIPTIONS[role]}",
            title="Your role",
        ))

    while session.phase != Phase.GAME_OVER:
        if not quiet:
            console.print(render_players(session))
        try:
            if session.phase == Phase.NIGHT_ACTION:
                action = (
                    autopilot.night_action(session) if autopilot
                    else prompt_night_action(console, session)
                )
                session = await controller.confirm_night_action(action)
            elif session.phase == Phase.DAY_VOTING:
                target = autopilot.vote(session) if autopilot else prompt_vote(console, session)
                session = await controller.confirm_vote(target)
            else:
                raise RuntimeError(f"Game stalled in {session.phase.value}")
        except InvalidActionError as e:
            console.print(f"[red]{e}[/red]")

    return session


def run_stress_test(num_games: int, seed_base: int, console: Console) -> None:
    """Run many autopilot games with a collecting validator and report."""
    winners: Counter = Counter()
    violations = []

    async def run_all():
        for i in range(num_games):
            validator = CollectingValidator()
            config = GameConfig(seed=seed_base + i, night_intro_delay=0, chat_delay=0)
            final = await play_game(
                config,
                role=None,
                console=console,
                validator=validator,
                autopilot=AutopilotUser(seed_base + i),
                quiet=True,
            )
            winners[final.winner.value if final.winner else None] += 1
            violations.extend(validator.get_violations())

    asyncio.run(run_all())

    console.print("=" * 60)
    console.print("STRESS TEST REPORT")
    console.print("=" * 60)
    console.print(f"\nGames run: {num_games}")
    console.print("\nWinner Distribution:")
    for winner, count in sorted(winners.items(), key=lambda x: (x[0] is None, x[0])):
        console.print(f"  {winner}: {count} ({count / num_games * 100:.1f}%)")

    by_rule = Counter(v.rule_id for v in violations)
    console.print("\nViolations:")
    if by_rule:
        for rule_id, count in sorted(by_rule.items()):
            console.print(f"  {rule_id}: {count}")
    else:
        console.print("  None")
    console.print("=" * 60)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Darkwood - a werewolf game of runes and moonlight",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducible games"
    )
    parser.add_argument(
        "--role",
        choices=[role.value for role in Role],
        default=None,
        help="Play as this role (default: ask, or random with --ai)"
    )
    parser.add_argument(
        "--ai",
        action="store_true",
        help="Let the autopilot play your seat"
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=None,
        help="Seconds between chat lines (default: 0.8)"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=20.0,
        help="Seconds to wait for each oracle call (default: 20)"
    )
    parser.add_argument(
        "--validate",
        choices=["off", "collect", "strict"],
        default="off",
        help="Check game rules after every transition"
    )
    parser.add_argument(
        "--games",
        type=int,
        default=None,
        help="Run N autopilot games with validators (stress test mode)"
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="File to save the game transcript"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show debug logging (dropped proposals, oracle fallbacks)"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s: %(message)s",
    )

    console = Console()

    # Generate seed if not provided
    if args.seed is None:
        args.seed = random.randint(1, 1000000)

    if args.games is not None:
        if args.games < 1:
            console.print("[red]Error: --games must be a positive integer[/red]")
            return 1
        run_stress_test(args.games, seed_base=args.seed, console=console)
        return 0

    config = GameConfig(
        seed=args.seed,
        oracle_timeout=args.timeout,
        **({"chat_delay": args.delay} if args.delay is not None else {}),
    )
    validator = create_validator(args.validate)
    role = Role(args.role) if args.role else None

    console.print(Panel(RULES_TEXT, title="Welcome to Darkwood"))
    final = asyncio.run(play_game(
        config,
        role,
        console,
        validator=validator,
        autopilot=AutopilotUser(args.seed) if args.ai else None,
    ))

    console.print(render_players(final))
    console.print(Panel(
        f"[bold]Game Over[/bold]\n\n"
        f"Winner: {final.winner.value if final.winner else 'nobody'}",
        title="Result"
    ))

    if isinstance(validator, CollectingValidator):
        for violation in validator.get_violations():
            console.print(f"[yellow]{violation.rule_id}: {violation.message}[/yellow]")

    # Save transcript to file
    if args.log_file:
        try:
            with open(args.log_file, "w", encoding="utf-8") as f:
                f.write(format_transcript(final.logs))
            console.print(f"Transcript saved to {args.log_file}")
        except OSError as e:
            console.print(f"[red]Failed to save log: {e}[/red]")

    return 0


if __name__ == "__main__":
    exit(main())
