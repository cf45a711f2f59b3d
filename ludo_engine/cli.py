"""
Ludo Engine CLI - Command-line interface for the engine.

Usage:
    ludo-engine simulate [--players N] [--seed S]   Play bot matches
    ludo-engine board [--size N]                    Print board geometry as JSON
    ludo-engine serve [--host H] [--port P]         Run the HTTP API
"""

import argparse
import json
import sys

from .config import Settings, configure_logging


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Ludo Engine - Four-color race game rules",
        prog="ludo-engine",
    )
    parser.add_argument("--log-level", help="Logging level (default: LUDO_LOG_LEVEL or INFO)")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Simulate command
    simulate_parser = subparsers.add_parser("simulate", help="Play matches between bots")
    simulate_parser.add_argument("--players", type=int, default=4, help="Number of players (2-4)")
    simulate_parser.add_argument("--games", type=int, default=1, help="Number of matches")
    simulate_parser.add_argument("--seed", type=int, default=None, help="Seed for replayable games")
    simulate_parser.add_argument("--max-turns", type=int, default=2000, help="Roll limit per match")
    simulate_parser.add_argument(
        "--policy", default="random", help="Bot policy: random, first, capture"
    )

    # Board command
    board_parser = subparsers.add_parser("board", help="Print board geometry")
    board_parser.add_argument("--size", type=float, default=600, help="Canvas side length")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Bind port")

    args = parser.parse_args(argv)
    settings = Settings.from_env()
    configure_logging((args.log_level or settings.log_level).upper())

    if args.command == "simulate":
        return cmd_simulate(args)
    elif args.command == "board":
        return cmd_board(args)
    elif args.command == "serve":
        return cmd_serve(args, settings)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_simulate(args):
    """Play bot matches and print the results."""
    from .bots import POLICIES
    from .engine_core.errors import InsufficientPlayers
    from .session import play_game

    policy_cls = POLICIES.get(args.policy)
    if policy_cls is None:
        print(f"Error: Unknown policy: {args.policy}")
        sys.exit(1)

    player_ids = [f"P{i + 1}" for i in range(args.players)]
    wins = {pid: 0 for pid in player_ids}

    for game in range(args.games):
        seed = None if args.seed is None else args.seed + game
        policies = {pid: policy_cls() for pid in player_ids} if args.policy != "random" else None
        try:
            record = play_game(player_ids, policies=policies, seed=seed, max_turns=args.max_turns)
        except InsufficientPlayers as e:
            print(f"Error: {e.message}")
            sys.exit(1)

        state = record.final_state
        colors = ", ".join(f"{pid}={state.colors[pid].value}" for pid in state.order)
        print(f"Game {game + 1}: order [{colors}]")
        if record.completed:
            wins[record.winner] += 1
            print(f"  Winner: {record.winner} after {record.turns} turns ({record.captures} captures)")
        elif record.stalled:
            print(f"  Stalled after {record.turns} turns: every piece is in a home lane")
        else:
            print(f"  No winner after {record.turns} turns")

    if args.games > 1:
        print("\nWins:")
        for pid, count in wins.items():
            print(f"  {pid}: {count}")
    return 0


def cmd_board(args):
    """Print board geometry as JSON."""
    from .engine_core.board import build_board_geometry

    try:
        geometry = build_board_geometry(args.size)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(json.dumps(geometry.to_dict(), indent=2))
    return 0


def cmd_serve(args, settings):
    """Run the HTTP API with uvicorn."""
    import uvicorn
    from .api import create_app

    app = create_app(settings=settings)
    uvicorn.run(app, host=args.host, port=args.port, log_level=settings.log_level.lower())
    return 0


if __name__ == "__main__":
    main()
