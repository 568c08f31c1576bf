"""
Pandemic CLI - Command-line interface for the engine.

Usage:
    pandemic new [--players N] [--difficulty D] [--seed S] [--output FILE]
    pandemic simulate [--players N] [--difficulty D] [--seed S] [--max-turns T] [--policy random|first]
    pandemic show FILE
    pandemic play [--players N] [--difficulty D] [--seed S]
"""

import argparse
import sys

from . import config
from .logging_setup import configure_logging


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Pandemic - Cooperative disease-control game engine",
        prog="pandemic",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: PANDEMIC_LOG_LEVEL)")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # New game
    new_parser = subparsers.add_parser("new", help="Deal a new game")
    _add_game_arguments(new_parser)
    new_parser.add_argument("--output", "-o", help="Write the game to a save file")

    # Simulation
    simulate_parser = subparsers.add_parser("simulate", help="Play a whole game with a bot")
    _add_game_arguments(simulate_parser)
    simulate_parser.add_argument(
        "--max-turns", type=int, default=config.MAX_TURNS, help="Stop after this many turns"
    )
    simulate_parser.add_argument(
        "--policy", choices=["random", "first"], default="random", help="Bot policy"
    )
    simulate_parser.add_argument("--output", "-o", help="Write the final state to a save file")

    # Show save
    show_parser = subparsers.add_parser("show", help="Summarize a save file")
    show_parser.add_argument("save_file", help="Path to save file")

    # Interactive
    play_parser = subparsers.add_parser("play", help="Play by typing commands")
    _add_game_arguments(play_parser)

    args = parser.parse_args(argv)
    configure_logging(args.log_level or "WARNING")

    if args.command == "new":
        cmd_new(args)
    elif args.command == "simulate":
        cmd_simulate(args)
    elif args.command == "show":
        cmd_show(args)
    elif args.command == "play":
        cmd_play(args)
    else:
        parser.print_help()
        sys.exit(1)


def _add_game_arguments(parser):
    parser.add_argument("--players", type=int, default=config.DEFAULT_PLAYER_COUNT, help="Number of players (2-4)")
    parser.add_argument(
        "--difficulty", type=int, default=config.DEFAULT_DIFFICULTY, help="Epidemic cards (4-6)"
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")


def _create_session(args, policy=None):
    from .engine_core.state import GameConfig
    from .session import SessionManager

    manager = SessionManager()
    try:
        return manager.create_session(
            GameConfig(player_count=args.players, difficulty=args.difficulty),
            random_seed=args.seed,
            policy=policy,
        )
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)


def format_state(state):
    """Multi-line text summary of a game state."""
    from .engine_core.cards import describe_card
    from .engine_core.infection import get_infection_rate

    lines = [
        f"Status: {state.status.value}",
        f"Turn: player {state.current_player_index} ({state.current_player.role.value}), "
        f"{state.phase.value} phase, {state.actions_remaining} action(s) left",
        f"Outbreaks: {state.outbreak_count}/8   "
        f"Infection rate: {get_infection_rate(state.infection_rate_position)} "
        f"(position {state.infection_rate_position})",
        "Cures: " + ", ".join(f"{c.value}={s.value}" for c, s in state.cures.items()),
        "Cube supply: " + ", ".join(f"{c.value}={n}" for c, n in state.cube_supply.items()),
        f"Player deck: {len(state.player_deck)} card(s)",
    ]

    lines.append("Players:")
    for i, player in enumerate(state.players):
        hand = ", ".join(describe_card(card) for card in player.hand) or "-"
        lines.append(f"  {i}. {player.role.value} in {player.location}: {hand}")
        if player.stored_event_card:
            lines.append(f"     stored: {player.stored_event_card.event.value}")

    lines.append("Infected cities:")
    for name, city in state.board.items():
        if city.total_cubes:
            cubes = ", ".join(
                f"{color}={getattr(city, color)}"
                for color in ("blue", "yellow", "black", "red")
                if getattr(city, color)
            )
            lines.append(f"  {name}: {cubes}")
    return "\n".join(lines)


def cmd_new(args):
    """Deal a new game."""
    session = _create_session(args)
    print(format_state(session.game_state))

    if args.output:
        from .serialization import save_game
        save_game(args.output, session.game_state)
        print(f"\nSaved to {args.output}")


def cmd_simulate(args):
    """Play a whole game with a bot policy."""
    from .bots import create_policy
    from .session import GameLoop

    policy = create_policy(args.policy, args.seed)
    session = _create_session(args, policy)
    summary = GameLoop(session).run(max_turns=args.max_turns)

    print(f"Turns played: {summary.turns_played}")
    print(f"Result: {summary.status.value}")
    print(f"Outbreaks: {summary.outbreak_count}")
    print(f"Infection rate position: {summary.infection_rate_position}")
    print(f"Actions applied: {summary.actions_applied}")

    if args.output:
        from .serialization import save_game
        save_game(args.output, session.game_state)
        print(f"Saved to {args.output}")


def cmd_show(args):
    """Summarize a save file."""
    from .serialization import DeserializationError, create_save_preview, load_game

    try:
        state = load_game(args.save_file)
    except FileNotFoundError:
        print(f"Error: File not found: {args.save_file}")
        sys.exit(1)
    except DeserializationError as e:
        print(f"Error: {e}")
        sys.exit(1)

    preview = create_save_preview(state)
    print(
        f"Diseases cured: {preview.diseases_cured}  Outbreaks: {preview.outbreak_count}  "
        f"Current role: {preview.current_player_role}"
    )
    print(format_state(state))


def cmd_play(args):
    """Read commands from stdin until the game ends or the player quits."""
    from .bots import FirstLegalPolicy
    from .engine_core.action import parse_action
    from .engine_core.action_generator import get_available_actions
    from .session import GameLoop

    session = _create_session(args)
    game_loop = GameLoop(session, FirstLegalPolicy())
    print(format_state(session.game_state))
    print("\nType a command, 'actions' to list legal ones, 'bot' to auto-play the turn, 'quit' to stop.")

    while session.is_active():
        try:
            line = input("> ").strip()
        except EOFError:
            break

        if not line:
            continue
        if line == "quit":
            break
        if line == "actions":
            for command in get_available_actions(session.game_state):
                print(f"  {command}")
            continue
        if line == "state":
            print(format_state(session.game_state))
            continue
        if line == "bot":
            result = game_loop.play_turn()
            for change in result.changes:
                print(f"  {change}")
            continue

        try:
            action = parse_action(line)
        except ValueError as e:
            print(f"Error: {e}")
            continue

        result = session.apply(action)
        if not result.success:
            print(f"Error: {result.error}")
            continue
        for change in result.state_changes:
            print(f"  {change}")

    print(f"Game {session.game_state.status.value}.")


if __name__ == "__main__":
    main()
