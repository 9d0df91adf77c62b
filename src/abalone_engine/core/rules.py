"""
Abalone game rules implementation.

Implements inline-only Abalone rules:
- A move slides a straight line of 1-3 own pieces one step along its axis
- A line can push a strictly shorter run of opponent pieces
- Pushed pieces leaving the board are ejected and count as captures
- First player to eject 6 opposing pieces wins

Illegal moves are never raised as exceptions: every move attempt returns a
MoveResult carrying either the resulting state or a rejection reason.
"""

import logging
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Sequence, Tuple

from .game_state import BLACK, EMPTY, PLAYER_NAMES, WHITE, GameState, opponent
from .hash import zobrist_hash
from .hex_grid import (
    DIRECTION_VECTORS,
    DIRECTIONS,
    Cell,
    get_cell_index,
    in_board,
    neighbor,
    opposite,
)

logger = logging.getLogger(__name__)

MAX_LINE = 3
WIN_THRESHOLD = 6

# Rejection reasons
EMPTY_SELECTION = "no pieces selected"
UNKNOWN_DIRECTION = "unknown direction"
NOT_YOUR_PIECES = "not your pieces"
NOT_A_LINE = "not a contiguous line"
ONLY_INLINE = "only inline moves are legal"
OFF_BOARD = "off the board"
OWN_PIECE_BLOCKS = "cannot push your own pieces"
NOT_ENOUGH_PIECES = "not enough pieces to push"
OPPONENT_BACKED = "opponent is backed"


class InconsistentStateError(RuntimeError):
    """Raised when a state could not have been reached through legal play."""


@dataclass(frozen=True)
class Move:
    """A selection of own pieces plus the direction to move them."""

    selection: Tuple[Cell, ...]
    direction: str

    def __str__(self) -> str:
        cells = " ".join(f"({q},{r})" for q, r in self.selection)
        return f"{cells} -> {self.direction}"


@dataclass(frozen=True)
class MoveResult:
    """
    Outcome of a move attempt.

    On success next_state holds the new position and moved holds the line
    that moved, back to front in the direction of travel.
    """

    ok: bool
    reason: Optional[str] = None
    next_state: Optional[GameState] = None
    pushed_count: int = 0  # Opponent pieces displaced
    ejected_count: int = 0  # Opponent pieces pushed off the board
    moved: Tuple[Cell, ...] = ()


@dataclass(frozen=True)
class LineInfo:
    """Line detection result: ordered back to front along direction."""

    ok: bool
    direction: Optional[str] = None
    ordered: Tuple[Cell, ...] = ()


def _reject(reason: str) -> MoveResult:
    return MoveResult(ok=False, reason=reason)


def find_line(selection: Sequence[Cell]) -> LineInfo:
    """
    Check whether a selection forms a contiguous straight line.

    A single piece is always a line with no direction of its own. Two or
    three pieces form a line if, for some direction d, they are exactly
    back, back+d (, back+2d). Directions are tried in DIRECTIONS order.

    Args:
        selection: 1-3 cells

    Returns:
        LineInfo with the line direction and back-to-front ordering
    """
    cells = [tuple(cell) for cell in selection]
    wanted = set(cells)
    if not cells or len(wanted) != len(cells) or len(cells) > MAX_LINE:
        return LineInfo(ok=False)

    if len(cells) == 1:
        return LineInfo(ok=True, direction=None, ordered=(cells[0],))

    for direction in DIRECTIONS:
        for back in cells:
            line = [back]
            while len(line) < len(cells):
                line.append(neighbor(line[-1], direction))
            if set(line) == wanted:
                return LineInfo(ok=True, direction=direction, ordered=tuple(line))

    return LineInfo(ok=False)


def expand_selection(
    state: GameState, selection: Sequence[Cell], direction: str
) -> Tuple[Optional[Tuple[Cell, ...]], Optional[str]]:
    """
    Turn a player's selection into the full line that will move.

    - A single piece is extended ahead in the move direction through
      contiguous own pieces, up to 3.
    - A line of 2 is extended to 3 when an own piece sits directly ahead
      of its front, or else directly behind its back.

    Args:
        state: Current game state
        selection: Selected cells
        direction: Move direction

    Returns:
        (line ordered back to front in the direction of travel, None)
        or (None, rejection reason)
    """
    if direction not in DIRECTION_VECTORS:
        return None, UNKNOWN_DIRECTION
    if not selection:
        return None, EMPTY_SELECTION

    player = state.player
    cells = [tuple(cell) for cell in selection]
    if any(state.get(cell) != player for cell in cells):
        return None, NOT_YOUR_PIECES

    info = find_line(cells)
    if not info.ok:
        return None, NOT_A_LINE

    if info.direction is None:
        line = [info.ordered[0]]
        cursor = neighbor(line[0], direction)
        while len(line) < MAX_LINE and state.get(cursor) == player:
            line.append(cursor)
            cursor = neighbor(cursor, direction)
        return tuple(line), None

    if direction == info.direction:
        line = list(info.ordered)
    elif direction == opposite(info.direction):
        line = list(reversed(info.ordered))
    else:
        return None, ONLY_INLINE

    if len(line) == 2:
        ahead = neighbor(line[-1], direction)
        behind = neighbor(line[0], opposite(direction))
        if state.get(ahead) == player:
            line.append(ahead)
        elif state.get(behind) == player:
            line.insert(0, behind)

    return tuple(line), None


def resolve_inline(state: GameState, line: Sequence[Cell], direction: str) -> MoveResult:
    """
    Move a line of own pieces one step in the direction of travel.

    Resolution order:
    1. Cell ahead of the front off the board: rejected
    2. Cell ahead holds an own piece: rejected
    3. Cell ahead empty: slide
    4. Cell ahead holds an opponent: push if the opposing run is strictly
       shorter and nothing sits right behind it; pieces leaving the board
       are ejected

    Args:
        state: Current game state
        line: Own pieces ordered back to front in the direction of travel
        direction: Direction of travel

    Returns:
        MoveResult with the new state or a rejection reason
    """
    player = state.player
    enemy = opponent(player)
    radius = state.radius
    index = get_cell_index(radius)

    next_front = neighbor(line[-1], direction)
    if not in_board(next_front[0], next_front[1], radius):
        return _reject(OFF_BOARD)

    occupant = state.get(next_front)
    if occupant == player:
        return _reject(OWN_PIECE_BLOCKS)

    board = list(state.cells)
    captured = list(state.captured)
    opponent_count = 0
    ejected_count = 0

    if occupant != EMPTY:
        # Count the contiguous opponent run ahead; anything past 3 can't be pushed
        scan = next_front
        while in_board(scan[0], scan[1], radius) and state.get(scan) == enemy:
            opponent_count += 1
            scan = neighbor(scan, direction)
            if opponent_count > MAX_LINE:
                break

        if opponent_count >= len(line):
            return _reject(NOT_ENOUGH_PIECES)

        # scan now sits just past the run
        if in_board(scan[0], scan[1], radius) and state.get(scan) != EMPTY:
            return _reject(OPPONENT_BACKED)

        run = [next_front]
        while len(run) < opponent_count:
            run.append(neighbor(run[-1], direction))

        # Farthest first so each target is free before it's written
        for source in reversed(run):
            target = neighbor(source, direction)
            if in_board(target[0], target[1], radius):
                board[index.index_of(target)] = enemy
            else:
                ejected_count += 1
            board[index.index_of(source)] = EMPTY

        captured[player - 1] += ejected_count

    # Front first, same reason
    for source in reversed(line):
        board[index.index_of(neighbor(source, direction))] = player
        board[index.index_of(source)] = EMPTY

    next_state = GameState(
        radius=radius,
        cells=tuple(board),
        player=enemy,
        captured=tuple(captured),
    )
    return MoveResult(
        ok=True,
        next_state=next_state,
        pushed_count=opponent_count,
        ejected_count=ejected_count,
        moved=tuple(line),
    )


def apply_move(state: GameState, selection: Sequence[Cell], direction: str) -> MoveResult:
    """
    Apply a move and return the resulting state.

    The input state is never modified.

    Args:
        state: Current game state
        selection: Own pieces chosen by the side to move
        direction: Move direction name

    Returns:
        MoveResult; ok is False with a reason if the move is illegal
    """
    line, reason = expand_selection(state, selection, direction)
    if reason is not None:
        logger.debug(f"Rejected {list(selection)} -> {direction}: {reason}")
        return _reject(reason)

    result = resolve_inline(state, line, direction)
    if not result.ok:
        logger.debug(f"Rejected {list(selection)} -> {direction}: {result.reason}")
    return result


def is_legal_move(state: GameState, selection: Sequence[Cell], direction: str) -> MoveResult:
    """Check a move without handing back the resulting state."""
    return replace(apply_move(state, selection, direction), next_state=None)


def generate_successors(
    state: GameState, dedupe: bool = False
) -> List[Tuple[Move, MoveResult]]:
    """
    Generate every legal move for the current player with its outcome.

    Each own piece is tried as a single-piece selection in all six
    directions; auto-extension finds the 2- and 3-piece lines behind it.
    The same multi-piece push can show up once per piece in the line.

    Args:
        state: Current game state
        dedupe: Drop moves whose resulting position was already produced

    Returns:
        List of (move, result) pairs in board order
    """
    successors = []
    seen: Dict[int, GameState] = {}

    for cell in state.pieces_of(state.player):
        for direction in DIRECTIONS:
            result = apply_move(state, (cell,), direction)
            if not result.ok:
                continue

            if dedupe:
                h = zobrist_hash(result.next_state)
                if seen.get(h) == result.next_state:
                    continue
                seen[h] = result.next_state

            successors.append((Move(selection=(cell,), direction=direction), result))

    return successors


def generate_legal_moves(state: GameState, dedupe: bool = False) -> List[Move]:
    """
    Generate all legal moves for the current player.

    Args:
        state: Current game state
        dedupe: Drop moves leading to an already produced position

    Returns:
        List of legal moves
    """
    return [move for move, _ in generate_successors(state, dedupe=dedupe)]


def has_winner(state: GameState) -> Optional[int]:
    """
    Get the winning player, if any.

    A player wins once they have ejected WIN_THRESHOLD opposing pieces.

    Raises:
        InconsistentStateError: if both players reached the threshold
    """
    white_won = state.captured_by(WHITE) >= WIN_THRESHOLD
    black_won = state.captured_by(BLACK) >= WIN_THRESHOLD

    if white_won and black_won:
        raise InconsistentStateError(
            f"Both players reached {WIN_THRESHOLD} captures: {state.captured}"
        )
    if white_won:
        return WHITE
    if black_won:
        return BLACK
    return None


def is_terminal(state: GameState) -> bool:
    """Check if the game has been won."""
    return has_winner(state) is not None


def get_game_result(state: GameState) -> Optional[str]:
    """
    Get human-readable game result.

    Args:
        state: Game state

    Returns:
        Result string or None if not terminal
    """
    winner = has_winner(state)
    if winner is None:
        return None

    loser = opponent(winner)
    return (
        f"{PLAYER_NAMES[winner]} wins "
        f"{state.captured_by(winner)}-{state.captured_by(loser)}"
    )
