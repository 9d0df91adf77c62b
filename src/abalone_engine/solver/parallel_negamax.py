"""
Parallel root negamax search.

Splits the root move list across worker processes. Each worker unpacks its
own copy of a child position and searches it with a full window, so no
board is ever shared between processes. Ties go to the earliest move,
which picks the same move as the sequential alpha-beta search.
"""

import logging
import time
from multiprocessing import Pool, cpu_count
from typing import Optional, Tuple

from tqdm import tqdm

from ..core import GameState, generate_successors, has_winner, pack_state, unpack_state
from .evaluation import DEFAULT_WEIGHTS, EvaluationWeights
from .negamax import NO_MOVES_SCORE, NegamaxSearcher, SearchResult

logger = logging.getLogger(__name__)


# Global searcher for worker processes
_worker_searcher: Optional[NegamaxSearcher] = None
_worker_radius: Optional[int] = None


def _worker_init(radius: int, depth: int, weights: EvaluationWeights, dedupe: bool) -> None:
    """Initialize worker process with its own searcher."""
    global _worker_searcher, _worker_radius

    _worker_searcher = NegamaxSearcher(depth=depth, weights=weights, dedupe=dedupe)
    _worker_radius = radius


def _worker_search_child(packed: bytes) -> Tuple[float, int]:
    """
    Worker: Search one child of the root.

    Returns:
        (value from the child's side to move, nodes searched)
    """
    child = unpack_state(packed, _worker_radius)
    _worker_searcher.nodes = 0
    value, _ = _worker_searcher.search(
        child, _worker_searcher.depth - 1, float("-inf"), float("inf"), child.player
    )
    return value, _worker_searcher.nodes


class ParallelNegamaxSolver:
    """
    Root-parallel negamax solver.

    Each root move is searched independently in a worker process.
    """

    def __init__(
        self,
        depth: int = 2,
        num_workers: int = None,
        weights: EvaluationWeights = DEFAULT_WEIGHTS,
        dedupe: bool = True,
        show_progress: bool = False,
    ):
        """
        Initialize parallel solver.

        Args:
            depth: Plies to search
            num_workers: Number of worker processes (default: CPU count)
            weights: Evaluation weights
            dedupe: Skip root moves that repeat an earlier child position
            show_progress: Show a tqdm bar over root moves
        """
        if depth < 0:
            raise ValueError(f"Invalid depth {depth}, must be >= 0")
        self.depth = depth
        self.num_workers = num_workers or cpu_count()
        self.weights = weights
        self.dedupe = dedupe
        self.show_progress = show_progress

        logger.info(f"Using {self.num_workers} worker processes for root search")

    def choose_move(self, state: GameState) -> SearchResult:
        """
        Pick the best move for the side to move.

        Args:
            state: Current position

        Returns:
            SearchResult; move is None if the game is over or no move exists
        """
        if self.depth == 0 or has_winner(state) is not None:
            searcher = NegamaxSearcher(depth=self.depth, weights=self.weights)
            return searcher.choose_move(state)

        successors = generate_successors(state, dedupe=self.dedupe)
        if not successors:
            logger.info("No legal moves at root")
            return SearchResult(value=NO_MOVES_SCORE, move=None, depth=self.depth)

        packed_children = [pack_state(result.next_state) for _, result in successors]

        start = time.time()
        with Pool(
            processes=min(self.num_workers, len(packed_children)),
            initializer=_worker_init,
            initargs=(state.radius, self.depth, self.weights, self.dedupe),
        ) as pool:
            results = pool.imap(_worker_search_child, packed_children)
            if self.show_progress:
                results = tqdm(results, total=len(packed_children), desc="Root moves", unit=" move")
            child_results = list(results)
        elapsed = time.time() - start

        best_value = float("-inf")
        best_move = successors[0][0]
        nodes = len(child_results)

        for (move, _), (child_value, child_nodes) in zip(successors, child_results):
            nodes += child_nodes
            value = -child_value
            if value > best_value:
                best_value = value
                best_move = move

        logger.info(
            f"Depth {self.depth}: value {best_value:.1f}, best move {best_move}, "
            f"{nodes:,} nodes in {elapsed:.2f}s ({self.num_workers} workers)"
        )

        return SearchResult(value=best_value, move=best_move, nodes=nodes, depth=self.depth)
