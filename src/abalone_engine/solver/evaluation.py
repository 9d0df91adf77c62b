"""
Static position evaluation.

Scores a position from one player's point of view as a weighted sum of
differentials (mine minus opponent's):
- Captures: pieces ejected
- Material: pieces still on the board
- Centrality: radius - hex distance to the center, per piece
- Edge safety: radius - ring index, per piece (0 on the outer ring)
"""

from dataclasses import dataclass

from ..core import EMPTY, GameState, opponent
from ..core.hex_grid import distance_to_center, get_cell_index, ring


@dataclass(frozen=True)
class EvaluationWeights:
    """Weights for each evaluation term."""

    captures: float = 100.0
    material: float = 10.0
    centrality: float = 0.5
    edge_safety: float = 2.0


DEFAULT_WEIGHTS = EvaluationWeights()


def evaluate(
    state: GameState, perspective: int, weights: EvaluationWeights = DEFAULT_WEIGHTS
) -> float:
    """
    Evaluate a position heuristically.

    Args:
        state: Position to score
        perspective: Player whose point of view the score is from
        weights: Term weights

    Returns:
        Score; positive favours perspective
    """
    me = perspective
    op = opponent(perspective)
    radius = state.radius
    index = get_cell_index(radius)

    counts = {me: 0, op: 0}
    center = {me: 0.0, op: 0.0}
    edge = {me: 0, op: 0}

    for cell_idx, occupant in enumerate(state.cells):
        if occupant == EMPTY:
            continue
        q, r = index.cell_at(cell_idx)
        counts[occupant] += 1
        center[occupant] += radius - distance_to_center(q, r)
        edge[occupant] += radius - ring(q, r)

    return (
        (state.captured_by(me) - state.captured_by(op)) * weights.captures
        + (counts[me] - counts[op]) * weights.material
        + (center[me] - center[op]) * weights.centrality
        + (edge[me] - edge[op]) * weights.edge_safety
    )
