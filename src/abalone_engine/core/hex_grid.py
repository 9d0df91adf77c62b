"""
Axial hex coordinate arithmetic for the hexagonal board.

Cells are (q, r) tuples with the center at (0, 0). A cell is on a board
of radius R when |q| <= R, |r| <= R and |q + r| <= R.

Direction names, in rotation order:

      NW  NE
    W   .   E
      SW  SE

Rotating a direction by 3 positions gives its opposite.
"""

from typing import Dict, List, Optional, Tuple

Cell = Tuple[int, int]

DEFAULT_RADIUS = 4

# Unit vectors (dq, dr), index order matters for opposite()
DIRECTIONS: Tuple[str, ...] = ("E", "NE", "NW", "W", "SW", "SE")

DIRECTION_VECTORS: Dict[str, Cell] = {
    "E": (1, 0),
    "NE": (1, -1),
    "NW": (0, -1),
    "W": (-1, 0),
    "SW": (-1, 1),
    "SE": (0, 1),
}

DIRECTION_INDEX: Dict[str, int] = {name: i for i, name in enumerate(DIRECTIONS)}


def _vector(direction: str) -> Cell:
    try:
        return DIRECTION_VECTORS[direction]
    except KeyError:
        raise ValueError(f"Unknown direction {direction!r}") from None


def in_board(q: int, r: int, radius: int = DEFAULT_RADIUS) -> bool:
    """Check if (q, r) lies on a board of the given radius."""
    return abs(q) <= radius and abs(r) <= radius and abs(q + r) <= radius


def all_cells(radius: int = DEFAULT_RADIUS) -> List[Cell]:
    """
    Enumerate every in-bounds cell.

    Ordered by q, then r, so enumeration is reproducible.

    Args:
        radius: Board radius

    Returns:
        List of 3R^2 + 3R + 1 cells
    """
    cells = []
    for q in range(-radius, radius + 1):
        for r in range(-radius, radius + 1):
            if in_board(q, r, radius):
                cells.append((q, r))
    return cells


def add(a: Cell, b: Cell) -> Cell:
    return (a[0] + b[0], a[1] + b[1])


def sub(a: Cell, b: Cell) -> Cell:
    return (a[0] - b[0], a[1] - b[1])


def neighbor(cell: Cell, direction: str) -> Cell:
    """Get the adjacent cell one step away in a direction."""
    dq, dr = _vector(direction)
    return (cell[0] + dq, cell[1] + dr)


def direction_between(a: Cell, b: Cell) -> Optional[str]:
    """
    Get the unit direction from a to b.

    Returns:
        Direction name if b is exactly one step from a, else None
    """
    delta = sub(b, a)
    for name in DIRECTIONS:
        if DIRECTION_VECTORS[name] == delta:
            return name
    return None


def opposite(direction: str) -> str:
    """Get the direction rotated by 180 degrees."""
    _vector(direction)
    return DIRECTIONS[(DIRECTION_INDEX[direction] + 3) % 6]


def distance_to_center(q: int, r: int) -> float:
    """Hex distance from (q, r) to the center cell."""
    return (abs(q) + abs(r) + abs(q + r)) / 2


def ring(q: int, r: int) -> int:
    """Index of the concentric ring holding (q, r); the outer ring equals the radius."""
    return max(abs(q), abs(r), abs(q + r))


class CellIndex:
    """
    Bijection between in-bounds cells and array slots [0, n).

    Board occupancy is stored as a flat tuple indexed through this table,
    so cells never need to be hashed into string keys.
    """

    def __init__(self, radius: int):
        if radius < 1:
            raise ValueError(f"Invalid radius {radius}, must be positive")
        self.radius = radius
        self.cells: Tuple[Cell, ...] = tuple(all_cells(radius))
        self._index: Dict[Cell, int] = {cell: i for i, cell in enumerate(self.cells)}

    def __len__(self) -> int:
        return len(self.cells)

    def __contains__(self, cell: Cell) -> bool:
        return cell in self._index

    def index_of(self, cell: Cell) -> int:
        """Slot index of a cell; raises ValueError for off-board cells."""
        try:
            return self._index[cell]
        except KeyError:
            raise ValueError(f"Cell {cell} is off a radius-{self.radius} board") from None

    def cell_at(self, index: int) -> Cell:
        return self.cells[index]


_cell_indexes: Dict[int, CellIndex] = {}


def get_cell_index(radius: int) -> CellIndex:
    """Get the shared CellIndex for a radius (built once per radius)."""
    index = _cell_indexes.get(radius)
    if index is None:
        index = CellIndex(radius)
        _cell_indexes[radius] = index
    return index
