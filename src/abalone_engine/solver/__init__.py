"""Position evaluation and move search."""

from .evaluation import DEFAULT_WEIGHTS, EvaluationWeights, evaluate
from .negamax import (
    NO_MOVES_SCORE,
    WIN_SCORE,
    NegamaxSearcher,
    SearchLimits,
    SearchResult,
    choose_move,
)
from .parallel_negamax import ParallelNegamaxSolver

__all__ = [
    "DEFAULT_WEIGHTS",
    "EvaluationWeights",
    "evaluate",
    "NO_MOVES_SCORE",
    "WIN_SCORE",
    "NegamaxSearcher",
    "SearchLimits",
    "SearchResult",
    "choose_move",
    "ParallelNegamaxSolver",
]
