"""Pseudo-legal move generation, attack predicates and check detection."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from loguru import logger

from ziffi.core.board import Board, PAWN_DIRECTION, PAWN_HOME_ROW
from ziffi.core.pieces import Color, Piece, PieceKind

ROOK_DIRECTIONS = [(-1, 0), (1, 0), (0, -1), (0, 1)]
BISHOP_DIRECTIONS = [(-1, -1), (-1, 1), (1, -1), (1, 1)]
KNIGHT_OFFSETS = [(-2, -1), (-2, 1), (-1, -2), (-1, 2), (1, -2), (1, 2), (2, -1), (2, 1)]
KING_OFFSETS = [(-1, -1), (-1, 0), (-1, 1), (0, -1), (0, 1), (1, -1), (1, 0), (1, 1)]


class MoveKind(str, Enum):
    MOVE = "move"
    CAPTURE = "capture"


@dataclass(frozen=True)
class Move:
    from_row: int
    from_col: int
    to_row: int
    to_col: int
    kind: MoveKind = MoveKind.MOVE

    @property
    def is_capture(self) -> bool:
        return self.kind is MoveKind.CAPTURE

    @property
    def squares(self):
        return self.from_row, self.from_col, self.to_row, self.to_col

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fromRow": self.from_row,
            "fromCol": self.from_col,
            "toRow": self.to_row,
            "toCol": self.to_col,
            "type": self.kind.value,
        }


# ── Pseudo-legal generation ─────────────────────────────────


def _target(board: Board, row: int, col: int, piece: Piece, to_row: int, to_col: int) -> Optional[Move]:
    """Move onto an empty or enemy square, None for own pieces."""
    occupant = board.get(to_row, to_col)
    if occupant is None:
        return Move(row, col, to_row, to_col, MoveKind.MOVE)
    if occupant.color != piece.color:
        return Move(row, col, to_row, to_col, MoveKind.CAPTURE)
    return None


def _pawn_moves(board: Board, row: int, col: int, piece: Piece) -> List[Move]:
    moves = []
    direction = PAWN_DIRECTION[piece.color]
    one = row + direction
    if board.in_bounds(one, col) and board.get(one, col) is None:
        moves.append(Move(row, col, one, col))
        two = row + 2 * direction
        if row == PAWN_HOME_ROW[piece.color] and board.get(two, col) is None:
            moves.append(Move(row, col, two, col))
    for offset in (-1, 1):
        occupant = board.get(one, col + offset)
        if occupant is not None and occupant.color != piece.color:
            moves.append(Move(row, col, one, col + offset, MoveKind.CAPTURE))
    return moves


def _slide(board: Board, row: int, col: int, piece: Piece, directions) -> List[Move]:
    moves = []
    for dr, dc in directions:
        r, c = row + dr, col + dc
        while board.in_bounds(r, c):
            occupant = board.get(r, c)
            if occupant is None:
                moves.append(Move(row, col, r, c))
            else:
                if occupant.color != piece.color:
                    moves.append(Move(row, col, r, c, MoveKind.CAPTURE))
                break
            r += dr
            c += dc
    return moves


def _step(board: Board, row: int, col: int, piece: Piece, offsets) -> List[Move]:
    moves = []
    for dr, dc in offsets:
        r, c = row + dr, col + dc
        if board.in_bounds(r, c):
            move = _target(board, row, col, piece, r, c)
            if move is not None:
                moves.append(move)
    return moves


def pseudo_legal_moves(board: Board, row: int, col: int) -> List[Move]:
    """Moves obeying the piece's pattern and occupancy, not yet check-filtered."""
    piece = board.get(row, col)
    if piece is None:
        return []
    kind = piece.kind
    if kind is PieceKind.PAWN:
        return _pawn_moves(board, row, col, piece)
    if kind is PieceKind.ROOK:
        return _slide(board, row, col, piece, ROOK_DIRECTIONS)
    if kind is PieceKind.BISHOP:
        return _slide(board, row, col, piece, BISHOP_DIRECTIONS)
    if kind is PieceKind.QUEEN:
        return _slide(board, row, col, piece, ROOK_DIRECTIONS) + _slide(board, row, col, piece, BISHOP_DIRECTIONS)
    if kind is PieceKind.KNIGHT:
        return _step(board, row, col, piece, KNIGHT_OFFSETS)
    return _step(board, row, col, piece, KING_OFFSETS)


# ── Attacks & check ─────────────────────────────────────────


def _clear_line(board: Board, fr: int, fc: int, tr: int, tc: int) -> bool:
    """True when every square strictly between the two is empty."""
    dr = (tr > fr) - (tr < fr)
    dc = (tc > fc) - (tc < fc)
    r, c = fr + dr, fc + dc
    while (r, c) != (tr, tc):
        if board.get(r, c) is not None:
            return False
        r += dr
        c += dc
    return True


def _rook_attack(board: Board, fr: int, fc: int, tr: int, tc: int) -> bool:
    if fr != tr and fc != tc:
        return False
    return _clear_line(board, fr, fc, tr, tc)


def _bishop_attack(board: Board, fr: int, fc: int, tr: int, tc: int) -> bool:
    if abs(fr - tr) != abs(fc - tc) or fr == tr:
        return False
    return _clear_line(board, fr, fc, tr, tc)


def is_attacking(board: Board, piece: Piece, fr: int, fc: int, tr: int, tc: int) -> bool:
    """Whether `piece` standing on (fr, fc) attacks (tr, tc)."""
    dr, dc = abs(fr - tr), abs(fc - tc)
    kind = piece.kind
    if kind is PieceKind.PAWN:
        return tr == fr + PAWN_DIRECTION[piece.color] and dc == 1
    if kind is PieceKind.KNIGHT:
        return (dr, dc) in ((1, 2), (2, 1))
    if kind is PieceKind.KING:
        return max(dr, dc) == 1
    if kind is PieceKind.ROOK:
        return _rook_attack(board, fr, fc, tr, tc)
    if kind is PieceKind.BISHOP:
        return _bishop_attack(board, fr, fc, tr, tc)
    return _rook_attack(board, fr, fc, tr, tc) or _bishop_attack(board, fr, fc, tr, tc)


def is_in_check(board: Board, color: Color) -> bool:
    """True when any enemy piece attacks `color`'s king; False without a king."""
    king = board.find_king(color)
    if king is None:
        return False
    kr, kc = king
    for row, col, piece in board.pieces(color.opponent):
        if is_attacking(board, piece, row, col, kr, kc):
            return True
    return False


# ── Legality ────────────────────────────────────────────────


def legal_moves(board: Board, row: int, col: int, guard: Color) -> List[Move]:
    """Pseudo-legal moves from (row, col) that leave `guard`'s king safe."""
    result = []
    for move in pseudo_legal_moves(board, row, col):
        with board.simulate(*move.squares):
            unsafe = is_in_check(board, guard)
        if not unsafe:
            result.append(move)
    return result


def all_legal_moves(board: Board, color: Color, guard: Optional[Color] = None) -> List[Move]:
    """Every legal move of `color`'s pieces; safety is checked for `guard` (default: color)."""
    guard = guard or color
    moves = []
    for row, col, _ in list(board.pieces(color)):
        moves.extend(legal_moves(board, row, col, guard))
    logger.trace(f"movegen.all_legal_moves color={color.value} guard={guard.value} count={len(moves)}")
    return moves
