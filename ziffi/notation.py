"""Coordinate notation, FEN export and text rendering on top of python-chess."""

from typing import Optional, Tuple

import chess

from ziffi.core.board import Board, BOARD_SIZE
from ziffi.core.movegen import Move
from ziffi.core.pieces import Color, PieceKind

_KIND_TO_CHESS = {
    PieceKind.PAWN: chess.PAWN,
    PieceKind.KNIGHT: chess.KNIGHT,
    PieceKind.BISHOP: chess.BISHOP,
    PieceKind.ROOK: chess.ROOK,
    PieceKind.QUEEN: chess.QUEEN,
    PieceKind.KING: chess.KING,
}
_CHESS_TO_KIND = {v: k for k, v in _KIND_TO_CHESS.items()}


def to_square(row: int, col: int) -> chess.Square:
    """Grid row 0 is rank 8, column 0 is file a."""
    return chess.square(col, BOARD_SIZE - 1 - row)


def from_square(square: chess.Square) -> Tuple[int, int]:
    return BOARD_SIZE - 1 - chess.square_rank(square), chess.square_file(square)


def square_name(row: int, col: int) -> str:
    return chess.square_name(to_square(row, col))


def parse_square(name: str) -> Tuple[int, int]:
    """'c4' -> (4, 2). Raises ValueError on bad input."""
    return from_square(chess.parse_square(name.strip().lower()))


def move_to_uci(move: Move, promotion: Optional[PieceKind] = None) -> str:
    text = square_name(move.from_row, move.from_col) + square_name(move.to_row, move.to_col)
    return text + (promotion.value.lower() if promotion else "")


def parse_move(text: str) -> Tuple[int, int, int, int, Optional[PieceKind]]:
    """'c4d5' or 'd7d8n' -> grid coordinates and optional promotion kind.

    Raises ValueError (chess.InvalidMoveError) for malformed text.
    """
    uci = chess.Move.from_uci(text.strip().lower())
    fr, fc = from_square(uci.from_square)
    tr, tc = from_square(uci.to_square)
    promotion = _CHESS_TO_KIND[uci.promotion] if uci.promotion else None
    return fr, fc, tr, tc, promotion


def to_chess_board(board: Board, turn: Color = Color.WHITE) -> chess.Board:
    """python-chess board with the same placement (no castling, no en passant)."""
    cb = chess.Board(None)
    for row, col, piece in board.pieces():
        cb.set_piece_at(
            to_square(row, col),
            chess.Piece(_KIND_TO_CHESS[piece.kind], piece.color is Color.WHITE),
        )
    cb.turn = turn is Color.WHITE
    return cb


def to_fen(board: Board, turn: Color = Color.WHITE, fullmove: int = 1) -> str:
    cb = to_chess_board(board, turn)
    cb.fullmove_number = fullmove
    return cb.fen()


def render(board: Board, flipped: bool = False) -> str:
    """Unicode diagram with coordinates; Black at the bottom when flipped."""
    cb = to_chess_board(board)
    orientation = chess.BLACK if flipped else chess.WHITE
    return cb.unicode(borders=False, empty_square="·", orientation=orientation)
