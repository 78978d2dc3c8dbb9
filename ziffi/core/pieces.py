"""Piece identities: colors, kinds, material values and display symbols."""

from enum import Enum
from typing import Dict, NamedTuple, Optional

from ziffi.config import CONFIG


class Color(str, Enum):
    WHITE = "w"
    BLACK = "b"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self is Color.WHITE else Color.WHITE

    @property
    def label(self) -> str:
        return "White" if self is Color.WHITE else "Black"


class PieceKind(str, Enum):
    PAWN = "P"
    KNIGHT = "N"
    BISHOP = "B"
    ROOK = "R"
    QUEEN = "Q"
    KING = "K"

    @classmethod
    def from_letter(cls, letter: str) -> "PieceKind":
        """Parse a kind letter in either case ('q', 'N')."""
        try:
            return cls(letter.upper())
        except ValueError:
            raise ValueError(f"Unknown piece letter: {letter!r}") from None


class Piece(NamedTuple):
    color: Color
    kind: PieceKind

    @property
    def code(self) -> str:
        """Two-letter wire code, e.g. 'wQ'."""
        return self.color.value + self.kind.value

    @classmethod
    def from_code(cls, code: str) -> "Piece":
        if not isinstance(code, str) or len(code) != 2:
            raise ValueError(f"Invalid piece code: {code!r}")
        try:
            return cls(Color(code[0]), PieceKind(code[1]))
        except ValueError:
            raise ValueError(f"Invalid piece code: {code!r}") from None

    def recolored(self) -> "Piece":
        return Piece(self.color.opponent, self.kind)

    def __str__(self) -> str:
        return self.code


def piece_value(kind: PieceKind, values: Optional[Dict[str, int]] = None) -> int:
    """Material points of a piece kind (king counts as 0)."""
    values = values or CONFIG.eval.piece_values
    return values.get(kind.name, 0)


PIECE_SYMBOLS = {
    "wK": "♔", "wQ": "♕", "wR": "♖", "wB": "♗", "wN": "♘", "wP": "♙",
    "bK": "♚", "bQ": "♛", "bR": "♜", "bB": "♝", "bN": "♞", "bP": "♟",
}
