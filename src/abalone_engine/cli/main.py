"""
Main CLI for the Abalone engine.
"""

import argparse
import logging
import sys

from tqdm import tqdm

from ..core import (
    DEFAULT_RADIUS,
    GameState,
    apply_move,
    create_starting_state,
    generate_legal_moves,
    get_game_result,
    has_winner,
)
from ..solver import NegamaxSearcher, ParallelNegamaxSolver, SearchLimits, evaluate
from ..utils.rich_display import GameDisplay, setup_rich_logging


def setup_logging(level: str = "INFO") -> None:
    """Configure logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def build_searcher(args):
    """Create the sequential or parallel searcher selected on the command line."""
    if args.workers and args.workers > 1:
        return ParallelNegamaxSolver(depth=args.depth, num_workers=args.workers)

    limits = SearchLimits(max_nodes=args.max_nodes, time_limit=args.time_limit)
    return NegamaxSearcher(depth=args.depth, limits=limits)


def play_game(
    state: GameState,
    searcher,
    max_plies: int,
    display: GameDisplay = None,
    show_progress: bool = False,
):
    """
    Let the searcher play both sides until someone wins or max_plies is hit.

    Args:
        state: Starting position
        searcher: Object with choose_move(state) -> SearchResult
        max_plies: Maximum number of moves to play
        display: Optional display for per-move output
        show_progress: Show a tqdm bar over plies

    Returns:
        (final_state, plies_played, total_nodes)
    """
    logger = logging.getLogger(__name__)
    total_nodes = 0
    plies = 0

    with tqdm(total=max_plies, desc="Self-play", unit=" ply", disable=not show_progress) as pbar:
        while plies < max_plies and has_winner(state) is None:
            search = searcher.choose_move(state)
            total_nodes += search.nodes

            if search.move is None:
                if display:
                    display.log_warning("Side to move has no legal moves, stopping")
                else:
                    logger.info("Side to move has no legal moves, stopping")
                break

            result = apply_move(state, search.move.selection, search.move.direction)
            if not result.ok:
                # Search only returns generated moves, which are legal
                raise RuntimeError(f"Search chose illegal move {search.move}: {result.reason}")

            plies += 1
            if display:
                display.show_move(plies, state.player, search.move, result, search.value, search.nodes)
            state = result.next_state
            pbar.update(1)

    return state, plies, total_nodes


def selfplay_command(args):
    """Play the engine against itself from the opening."""
    setup_rich_logging(args.log_level)

    display = GameDisplay(show_board=not args.quiet)
    display.show_header("Abalone Self-Play", args.radius, args.depth, args.workers)

    state = create_starting_state(args.radius)
    display.show_state(state, title="Opening")

    searcher = build_searcher(args)
    final_state, plies, total_nodes = play_game(
        state, searcher, args.max_plies, display=display, show_progress=args.quiet
    )

    display.show_state(final_state, title=f"After {plies} plies")
    display.show_summary(final_state, plies, total_nodes)

    result = get_game_result(final_state)
    if result:
        display.log_success(result)
    else:
        display.log_warning(f"No winner after {plies} plies")


def moves_command(args):
    """List the legal moves of the opening position."""
    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    state = create_starting_state(args.radius)
    moves = generate_legal_moves(state, dedupe=args.dedupe)

    for move in moves:
        print(move)
    logger.info(f"{len(moves)} legal moves (dedupe={args.dedupe})")


def evaluate_command(args):
    """Search the opening position and report the result."""
    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    state = create_starting_state(args.radius)
    logger.info(f"Static evaluation: {evaluate(state, state.player):.1f}")

    search = build_searcher(args).choose_move(state)
    logger.info(f"Search value: {search.value:.1f}")
    logger.info(f"Best move: {search.move}")
    logger.info(f"Nodes: {search.nodes:,}")
    if search.aborted:
        logger.warning("Search was cut short by its budget")


def add_search_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--depth", type=int, default=2, help="Search depth in plies")
    parser.add_argument(
        "--workers", type=int, default=None, help="Worker processes for root-parallel search"
    )
    parser.add_argument(
        "--max-nodes", type=int, default=None, help="Node budget per search (sequential only)"
    )
    parser.add_argument(
        "--time-limit", type=float, default=None, help="Seconds per search (sequential only)"
    )


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Abalone rules engine and search opponent")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    parser.add_argument(
        "--radius", type=int, default=DEFAULT_RADIUS, help="Board radius"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Self-play command
    selfplay_parser = subparsers.add_parser("selfplay", help="Play the engine against itself")
    add_search_arguments(selfplay_parser)
    selfplay_parser.add_argument(
        "--max-plies", type=int, default=200, help="Stop after this many moves"
    )
    selfplay_parser.add_argument(
        "--quiet", action="store_true", help="Only show a progress bar and the final board"
    )
    selfplay_parser.set_defaults(func=selfplay_command)

    # Moves command
    moves_parser = subparsers.add_parser("moves", help="List legal opening moves")
    moves_parser.add_argument(
        "--dedupe", action="store_true", help="Drop moves leading to the same position"
    )
    moves_parser.set_defaults(func=moves_command)

    # Evaluate command
    evaluate_parser = subparsers.add_parser("evaluate", help="Search the opening position")
    add_search_arguments(evaluate_parser)
    evaluate_parser.set_defaults(func=evaluate_command)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    args.func(args)


if __name__ == "__main__":
    main()
