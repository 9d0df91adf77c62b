"""
Depth-limited negamax search with alpha-beta pruning.

Each ply reports its value for the perspective it was called with, and
the perspective flips between plies; a child's value is negated to express
it from the parent's side. The search can be cut short by a node or
wall-clock budget, checked between sibling moves, in which case the best
value found so far is returned.
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional, Tuple

from ..core import GameState, Move, generate_successors, has_winner, opponent
from .evaluation import DEFAULT_WEIGHTS, EvaluationWeights, evaluate

logger = logging.getLogger(__name__)

WIN_SCORE = 100000
NO_MOVES_SCORE = -50000  # Side to move is stuck


@dataclass(frozen=True)
class SearchLimits:
    """Optional budget for a single search."""

    max_nodes: Optional[int] = None  # Positions expanded
    time_limit: Optional[float] = None  # Seconds


@dataclass
class SearchResult:
    """Outcome of a root search."""

    value: float
    move: Optional[Move]
    nodes: int = 0
    depth: int = 0
    aborted: bool = False  # Budget ran out before the search finished


class NegamaxSearcher:
    """
    Negamax alpha-beta searcher.

    One instance can run many searches; counters are reset per choose_move().
    """

    def __init__(
        self,
        depth: int = 2,
        weights: EvaluationWeights = DEFAULT_WEIGHTS,
        limits: Optional[SearchLimits] = None,
        dedupe: bool = False,
    ):
        """
        Initialize searcher.

        Args:
            depth: Plies to search
            weights: Evaluation weights used at the leaves
            limits: Optional node/time budget
            dedupe: Skip moves that repeat an already generated child position
        """
        if depth < 0:
            raise ValueError(f"Invalid depth {depth}, must be >= 0")
        self.depth = depth
        self.weights = weights
        self.limits = limits or SearchLimits()
        self.dedupe = dedupe

        self.nodes = 0
        self.aborted = False
        self._deadline: Optional[float] = None

    def _budget_exhausted(self) -> bool:
        if self.aborted:
            return True
        if self.limits.max_nodes is not None and self.nodes >= self.limits.max_nodes:
            self.aborted = True
        elif self._deadline is not None and time.monotonic() >= self._deadline:
            self.aborted = True
        return self.aborted

    def search(
        self, state: GameState, depth: int, alpha: float, beta: float, perspective: int
    ) -> Tuple[float, Optional[Move]]:
        """
        Negamax search from a position.

        Args:
            state: Position to search
            depth: Remaining plies
            alpha: Lower bound of the window
            beta: Upper bound of the window
            perspective: Player the value is reported for; kept fixed down the
                tree, alternating sides each ply (choose_move passes the side to move)

        Returns:
            (value, best_move); best_move is None at leaves and terminals
        """
        winner = has_winner(state)
        if winner is not None:
            return (WIN_SCORE if winner == perspective else -WIN_SCORE), None

        if depth == 0:
            return evaluate(state, perspective, self.weights), None

        successors = generate_successors(state, dedupe=self.dedupe)
        if not successors:
            return NO_MOVES_SCORE, None

        best_value = float("-inf")
        best_move = successors[0][0]

        for i, (move, result) in enumerate(successors):
            # Always finish at least one child so the value is meaningful
            if i > 0 and self._budget_exhausted():
                break

            self.nodes += 1
            child = result.next_state
            child_value, _ = self.search(
                child, depth - 1, -beta, -alpha, opponent(perspective)
            )
            value = -child_value

            if value > best_value:
                best_value = value
                best_move = move

            if value > alpha:
                alpha = value
            if alpha >= beta:
                break

        return best_value, best_move

    def choose_move(self, state: GameState) -> SearchResult:
        """
        Pick the best move for the side to move.

        Args:
            state: Current position

        Returns:
            SearchResult; move is None if the game is over or no move exists
        """
        self.nodes = 0
        self.aborted = False
        self._deadline = (
            time.monotonic() + self.limits.time_limit
            if self.limits.time_limit is not None
            else None
        )

        start = time.time()
        value, move = self.search(
            state, self.depth, float("-inf"), float("inf"), state.player
        )
        elapsed = time.time() - start

        if self.aborted:
            logger.warning(
                f"Search budget exhausted after {self.nodes:,} nodes, "
                f"returning best-so-far"
            )
        logger.info(
            f"Depth {self.depth}: value {value:.1f}, best move {move}, "
            f"{self.nodes:,} nodes in {elapsed:.2f}s"
        )

        return SearchResult(
            value=value,
            move=move,
            nodes=self.nodes,
            depth=self.depth,
            aborted=self.aborted,
        )


def choose_move(
    state: GameState,
    depth: int = 2,
    weights: EvaluationWeights = DEFAULT_WEIGHTS,
    limits: Optional[SearchLimits] = None,
    dedupe: bool = False,
) -> SearchResult:
    """
    Search a position and return the best move for the side to move.

    Args:
        state: Current position
        depth: Plies to search
        weights: Evaluation weights
        limits: Optional node/time budget
        dedupe: Skip duplicate child positions

    Returns:
        SearchResult with value and move
    """
    searcher = NegamaxSearcher(depth=depth, weights=weights, limits=limits, dedupe=dedupe)
    return searcher.choose_move(state)
