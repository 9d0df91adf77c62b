"""Core board representation and rules."""

from .game_state import (
    BLACK,
    EMPTY,
    WHITE,
    GameState,
    create_starting_state,
    opponent,
    pack_state,
    unpack_state,
)
from .hash import init_zobrist_table, zobrist_hash
from .hex_grid import (
    DEFAULT_RADIUS,
    DIRECTIONS,
    CellIndex,
    add,
    all_cells,
    direction_between,
    in_board,
    neighbor,
    opposite,
    sub,
)
from .rules import (
    InconsistentStateError,
    Move,
    MoveResult,
    apply_move,
    expand_selection,
    find_line,
    generate_legal_moves,
    generate_successors,
    get_game_result,
    has_winner,
    is_legal_move,
    is_terminal,
    resolve_inline,
)

__all__ = [
    "BLACK",
    "EMPTY",
    "WHITE",
    "GameState",
    "create_starting_state",
    "opponent",
    "pack_state",
    "unpack_state",
    "init_zobrist_table",
    "zobrist_hash",
    "DEFAULT_RADIUS",
    "DIRECTIONS",
    "CellIndex",
    "add",
    "all_cells",
    "direction_between",
    "in_board",
    "neighbor",
    "opposite",
    "sub",
    "InconsistentStateError",
    "Move",
    "MoveResult",
    "apply_move",
    "expand_selection",
    "find_line",
    "generate_legal_moves",
    "generate_successors",
    "get_game_result",
    "has_winner",
    "is_legal_move",
    "is_terminal",
    "resolve_inline",
]
