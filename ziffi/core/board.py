"""8x8 board grid with the Ziffi starting layout and scoped move simulation."""

from contextlib import contextmanager
from typing import Iterator, List, Optional, Sequence, Tuple

from ziffi.core.pieces import Color, Piece, PieceKind

BOARD_SIZE = 8

# Row 0 is Black's side of the board, row 7 White's.
PAWN_DIRECTION = {Color.WHITE: -1, Color.BLACK: 1}
PAWN_HOME_ROW = {Color.WHITE: 6, Color.BLACK: 1}
PROMOTION_ROW = {Color.WHITE: 0, Color.BLACK: 7}

ZIFFI_LAYOUT: List[List[Optional[str]]] = [
    [None, None, None, None, None, None, None, None],
    [None, None, None, None, None, None, None, None],
    [None, None, "bR", "bN", "bB", "bQ", "bK", None],
    [None, None, "bP", "bP", "bP", None, None, None],
    [None, None, "wP", "wP", "wP", None, None, None],
    [None, None, "wR", "wN", "wB", "wQ", "wK", None],
    [None, None, None, None, None, None, None, None],
    [None, None, None, None, None, None, None, None],
]

Grid = List[List[Optional[Piece]]]


class Board:
    def __init__(self, grid: Optional[Grid] = None):
        """Wrap a grid (copied) or start from an empty board."""
        if grid is None:
            self.grid: Grid = [[None] * BOARD_SIZE for _ in range(BOARD_SIZE)]
        else:
            self.grid = [list(row) for row in grid]

    @classmethod
    def ziffi(cls) -> "Board":
        """The variant's fixed mid-game starting position."""
        return cls.from_codes(ZIFFI_LAYOUT)

    @classmethod
    def from_codes(cls, rows: Sequence[Sequence[Optional[str]]]) -> "Board":
        """Build a board from rows of piece codes ('wP') or None/''."""
        if len(rows) != BOARD_SIZE or any(len(r) != BOARD_SIZE for r in rows):
            raise ValueError("Board must be 8x8")
        return cls([[Piece.from_code(c) if c else None for c in row] for row in rows])

    def to_codes(self, flipped: bool = False) -> List[List[Optional[str]]]:
        return [[p.code if p else None for p in row] for row in self.view(flipped)]

    @staticmethod
    def in_bounds(row: int, col: int) -> bool:
        return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE

    def get(self, row: int, col: int) -> Optional[Piece]:
        if not self.in_bounds(row, col):
            return None
        return self.grid[row][col]

    def set(self, row: int, col: int, piece: Optional[Piece]) -> None:
        self.grid[row][col] = piece

    def pieces(self, color: Optional[Color] = None) -> Iterator[Tuple[int, int, Piece]]:
        """Yield (row, col, piece) for occupied squares, row-major."""
        for row in range(BOARD_SIZE):
            for col in range(BOARD_SIZE):
                piece = self.grid[row][col]
                if piece is not None and (color is None or piece.color == color):
                    yield row, col, piece

    def find_king(self, color: Color) -> Optional[Tuple[int, int]]:
        target = Piece(color, PieceKind.KING)
        for row, col, piece in self.pieces(color):
            if piece == target:
                return row, col
        return None

    def view(self, flipped: bool = False) -> Grid:
        """Copy of the grid, rotated 180 degrees when flipped."""
        if not flipped:
            return [list(row) for row in self.grid]
        return [
            [self.grid[BOARD_SIZE - 1 - r][BOARD_SIZE - 1 - c] for c in range(BOARD_SIZE)]
            for r in range(BOARD_SIZE)
        ]

    def recolor(self) -> None:
        """Swap the color of every piece in place."""
        for row, col, piece in list(self.pieces()):
            self.grid[row][col] = piece.recolored()

    def copy(self) -> "Board":
        return Board(self.grid)

    @contextmanager
    def simulate(self, from_row: int, from_col: int, to_row: int, to_col: int):
        """Temporarily play a move; both squares are restored on exit.

        Promotion is not applied while simulating.
        """
        moved = self.grid[from_row][from_col]
        target = self.grid[to_row][to_col]
        self.grid[to_row][to_col] = moved
        self.grid[from_row][from_col] = None
        try:
            yield target
        finally:
            self.grid[from_row][from_col] = moved
            self.grid[to_row][to_col] = target

    def __eq__(self, other) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.grid == other.grid

    def __repr__(self) -> str:
        rows = [" ".join(p.code if p else ".." for p in row) for row in self.grid]
        return "\n".join(rows)
