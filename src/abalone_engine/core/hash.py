"""
Zobrist hashing for fast position hashing.

Zobrist hashing uses pre-generated random numbers to create unique hashes
for board positions. The move generator uses it to spot moves that lead
to the same resulting position.
"""

import random
from typing import Dict, Tuple

from .game_state import BLACK, WHITE, GameState
from .hex_grid import get_cell_index

# Capture counts above this share a key; the game ends at 6 anyway
MAX_HASHED_CAPTURES = 15

# Global Zobrist tables (initialized once per radius)
_zobrist_table: Dict[Tuple[int, int, int], int] = {}
_zobrist_player: Dict[int, int] = {}
_zobrist_captured: Dict[Tuple[int, int], int] = {}
_initialized_radii = set()


def init_zobrist_table(radius: int, seed: int = 42) -> None:
    """
    Initialize Zobrist hash table with random 64-bit numbers.

    Args:
        radius: Board radius
        seed: Random seed for reproducibility
    """
    global _zobrist_player, _zobrist_captured

    rng = random.Random(seed)

    # One key per (cell, occupant); empty cells contribute nothing
    for cell_idx in range(len(get_cell_index(radius))):
        for occupant in (WHITE, BLACK):
            _zobrist_table[(radius, cell_idx, occupant)] = rng.getrandbits(64)

    # Player turn and capture keys are shared by all radii, generate once
    if not _zobrist_player:
        side_rng = random.Random(seed + 1)
        _zobrist_player = {WHITE: side_rng.getrandbits(64), BLACK: side_rng.getrandbits(64)}
        _zobrist_captured = {
            (player, count): side_rng.getrandbits(64)
            for player in (WHITE, BLACK)
            for count in range(MAX_HASHED_CAPTURES + 1)
        }

    _initialized_radii.add(radius)


def zobrist_hash(state: GameState) -> int:
    """
    Compute Zobrist hash for a game state.

    The hash is computed by XORing random numbers corresponding to:
    - Each occupied cell's occupant
    - Current player
    - Each player's capture count

    Args:
        state: GameState to hash

    Returns:
        64-bit hash value
    """
    if state.radius not in _initialized_radii:
        # Auto-initialize if not done already
        init_zobrist_table(state.radius)

    h = 0

    for cell_idx, occupant in enumerate(state.cells):
        if occupant:  # Optimization: skip empty cells
            h ^= _zobrist_table[(state.radius, cell_idx, occupant)]

    h ^= _zobrist_player[state.player]

    for player in (WHITE, BLACK):
        count = min(state.captured_by(player), MAX_HASHED_CAPTURES)
        h ^= _zobrist_captured[(player, count)]

    return h
