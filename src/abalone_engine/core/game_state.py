"""
Game state representation with bit-packing for transport.

An Abalone game state consists of:
- Occupancy of every board cell (empty, white or black)
- Current player turn
- Opponent pieces ejected by each player

Occupancy is a flat tuple indexed through the board's CellIndex.

We use bit-packing when shipping states to worker processes:
- 2 bits per cell (empty/white/black)
- 1 bit for player turn
- 4 bits per capture count (0-15)
- Total: 17 bytes for the classic radius-4 board
"""

from dataclasses import dataclass, replace
from typing import List, Tuple

from .hex_grid import DEFAULT_RADIUS, Cell, get_cell_index, in_board

EMPTY = 0
WHITE = 1  # Player A, moves first
BLACK = 2  # Player B

PLAYERS = (WHITE, BLACK)
PLAYER_NAMES = {WHITE: "White", BLACK: "Black"}
SYMBOLS = {EMPTY: ".", WHITE: "O", BLACK: "@"}


def opponent(player: int) -> int:
    """Get the other player."""
    return BLACK if player == WHITE else WHITE


@dataclass(frozen=True)
class GameState:
    """
    Immutable game state representation.

    Every change produces a new GameState, so a state handed to a caller
    can never be changed underneath them.

    Board layout for radius=4 (White on top, rows r=-4..4):

            O O O O O
           O O O O O O
          . . O O O . .
         . . . . . . . .
        . . . . . . . . .
         . . . . . . . .
          . . @ @ @ . .
           @ @ @ @ @ @
            @ @ @ @ @
    """

    radius: int  # Board radius (classic board is 4)
    cells: Tuple[int, ...]  # Occupant of each cell, CellIndex order
    player: int  # Side to move (WHITE or BLACK)
    captured: Tuple[int, int] = (0, 0)  # Pieces ejected by (WHITE, BLACK)

    def __post_init__(self) -> None:
        """Validate state invariants."""
        if self.radius < 1:
            raise ValueError(f"Invalid radius {self.radius}, must be positive")
        expected_size = len(get_cell_index(self.radius))
        if len(self.cells) != expected_size:
            raise ValueError(
                f"Board size {len(self.cells)} doesn't match expected {expected_size}"
            )
        if any(v not in (EMPTY, WHITE, BLACK) for v in self.cells):
            raise ValueError("Unknown occupant code on board")
        if self.player not in PLAYERS:
            raise ValueError(f"Invalid player {self.player}, must be {WHITE} or {BLACK}")
        if len(self.captured) != 2 or any(c < 0 for c in self.captured):
            raise ValueError(f"Invalid capture counts {self.captured}")

    @classmethod
    def empty(cls, radius: int = DEFAULT_RADIUS, player: int = WHITE) -> "GameState":
        """Create a board with no pieces on it."""
        return cls(radius=radius, cells=(EMPTY,) * len(get_cell_index(radius)), player=player)

    @classmethod
    def from_pieces(
        cls,
        white: List[Cell],
        black: List[Cell],
        player: int = WHITE,
        captured: Tuple[int, int] = (0, 0),
        radius: int = DEFAULT_RADIUS,
    ) -> "GameState":
        """Create a state from explicit piece lists."""
        index = get_cell_index(radius)
        cells = [EMPTY] * len(index)
        for cell in white:
            cells[index.index_of(cell)] = WHITE
        for cell in black:
            cells[index.index_of(cell)] = BLACK
        return cls(radius=radius, cells=tuple(cells), player=player, captured=tuple(captured))

    def get(self, cell: Cell) -> int:
        """Occupant of a cell (EMPTY for off-board cells)."""
        cell = tuple(cell)
        if not in_board(cell[0], cell[1], self.radius):
            return EMPTY
        return self.cells[get_cell_index(self.radius).index_of(cell)]

    def set(self, cell: Cell, occupant: int) -> "GameState":
        """
        Return a copy with one cell changed.

        Args:
            cell: In-bounds cell to write
            occupant: EMPTY, WHITE or BLACK

        Returns:
            New GameState; this state is left untouched
        """
        board = list(self.cells)
        board[get_cell_index(self.radius).index_of(tuple(cell))] = occupant
        return replace(self, cells=tuple(board))

    def clone(self) -> "GameState":
        """Independent copy with identical radius, turn, captures and occupancy."""
        return replace(self)

    def with_player(self, player: int) -> "GameState":
        return replace(self, player=player)

    def captured_by(self, player: int) -> int:
        """Number of opponent pieces this player has ejected."""
        return self.captured[player - 1]

    def pieces_of(self, player: int) -> List[Cell]:
        """Cells occupied by a player, in board order."""
        index = get_cell_index(self.radius)
        return [index.cell_at(i) for i, v in enumerate(self.cells) if v == player]

    def count(self, player: int) -> int:
        return self.cells.count(player)

    @property
    def pieces_on_board(self) -> int:
        """Total pieces of both colors on the board."""
        return len(self.cells) - self.cells.count(EMPTY)

    def __str__(self) -> str:
        """Human-readable board representation."""
        lines = []
        for r in range(-self.radius, self.radius + 1):
            row = []
            for q in range(-self.radius, self.radius + 1):
                if in_board(q, r, self.radius):
                    row.append(SYMBOLS[self.get((q, r))])
            lines.append(" " * abs(r) + " ".join(row))

        board_str = "\n".join(lines)
        return (
            f"\n{board_str}\n\n"
            f"Captured: White {self.captured[0]}, Black {self.captured[1]}\n"
            f"{PLAYER_NAMES[self.player]}'s turn\n"
        )


def create_starting_state(radius: int = DEFAULT_RADIUS) -> GameState:
    """
    Create the initial game state.

    Each side fills the two rows nearest its edge plus the three central
    cells of the third row. White (top, r < 0) moves first.

    For radius 4 this is 14 pieces per side: White holds rows r=-4 and
    r=-3 plus (0,-2), (1,-2), (2,-2).

    Args:
        radius: Board radius (at least 3 so the two camps don't overlap)

    Returns:
        Starting GameState
    """
    if radius < 3:
        raise ValueError(f"Starting layout needs radius >= 3, got {radius}")

    def center_three(r: int) -> List[Cell]:
        lo = max(-radius, -radius - r)
        hi = min(radius, radius - r)
        mid = (lo + hi) // 2
        return [(q, r) for q in (mid - 1, mid, mid + 1)]

    def full_row(r: int) -> List[Cell]:
        return [(q, r) for q in range(-radius, radius + 1) if in_board(q, r, radius)]

    white = full_row(-radius) + full_row(-radius + 1) + center_three(-radius + 2)
    # Black is White reflected through the center
    black = [(-q, -r) for q, r in white]

    return GameState.from_pieces(white, black, player=WHITE, radius=radius)


BITS_PER_CELL = 2
BITS_PER_CAPTURE = 4


def pack_state(state: GameState) -> bytes:
    """
    Pack game state into compact byte representation.

    Uses 2 bits per cell, 1 bit for player, then 4 bits per capture count.
    For radius 4: 61 cells x 2 bits + 1 bit + 8 bits = 131 bits = 17 bytes

    Args:
        state: GameState to pack

    Returns:
        Packed bytes representation
    """
    total_bits = len(state.cells) * BITS_PER_CELL + 1 + 2 * BITS_PER_CAPTURE
    packed = bytearray((total_bits + 7) // 8)

    def write(value: int, width: int, bit_offset: int) -> int:
        for i in range(width):
            if value & (1 << i):
                packed[bit_offset // 8] |= 1 << (bit_offset % 8)
            bit_offset += 1
        return bit_offset

    bit_offset = 0
    for occupant in state.cells:
        bit_offset = write(occupant, BITS_PER_CELL, bit_offset)

    bit_offset = write(1 if state.player == BLACK else 0, 1, bit_offset)

    for count in state.captured:
        if count >= 1 << BITS_PER_CAPTURE:
            raise ValueError(f"Cannot pack capture count {count} (max 15 with 4 bits)")
        bit_offset = write(count, BITS_PER_CAPTURE, bit_offset)

    return bytes(packed)


def unpack_state(packed: bytes, radius: int = DEFAULT_RADIUS) -> GameState:
    """
    Unpack byte representation back to GameState.

    Args:
        packed: Packed bytes from pack_state()
        radius: Board radius the state was packed for

    Returns:
        Reconstructed GameState
    """
    num_cells = len(get_cell_index(radius))

    def read(width: int, bit_offset: int) -> Tuple[int, int]:
        value = 0
        for i in range(width):
            byte_idx = bit_offset // 8
            if byte_idx < len(packed) and packed[byte_idx] & (1 << (bit_offset % 8)):
                value |= 1 << i
            bit_offset += 1
        return value, bit_offset

    cells = []
    bit_offset = 0
    for _ in range(num_cells):
        occupant, bit_offset = read(BITS_PER_CELL, bit_offset)
        cells.append(occupant)

    player_bit, bit_offset = read(1, bit_offset)
    white_captured, bit_offset = read(BITS_PER_CAPTURE, bit_offset)
    black_captured, bit_offset = read(BITS_PER_CAPTURE, bit_offset)

    return GameState(
        radius=radius,
        cells=tuple(cells),
        player=BLACK if player_bit else WHITE,
        captured=(white_captured, black_captured),
    )
