"""Material evaluation: static position score, move heuristic and terminal totals."""

from typing import Dict, Iterable, Optional

from ziffi.config import CONFIG, EvalConfig
from ziffi.core.board import Board
from ziffi.core.movegen import Move, all_legal_moves, is_in_check
from ziffi.core.pieces import Color, Piece, piece_value

CENTER_SQUARES = ((3, 3), (3, 4), (4, 3), (4, 4))


class Evaluator:
    def __init__(self, cfg: Optional[EvalConfig] = None):
        self.cfg = cfg or CONFIG.eval

    def value(self, piece: Piece) -> int:
        return piece_value(piece.kind, self.cfg.piece_values)

    def material(self, board: Board, color: Color) -> int:
        """Sum of piece values `color` has on the board."""
        return sum(self.value(p) for _, _, p in board.pieces(color))

    def evaluate(self, board: Board, color: Color) -> int:
        """Static material balance from `color`'s point of view."""
        return self.material(board, color) - self.material(board, color.opponent)

    def positional(self, board: Board, color: Color) -> float:
        """Material balance plus centre occupation and check terms.

        Antisymmetric: positional(board, c) == -positional(board, c.opponent).
        """
        score = float(self.evaluate(board, color))
        for row, col in CENTER_SQUARES:
            piece = board.get(row, col)
            if piece is not None:
                score += self.cfg.center_bonus if piece.color == color else -self.cfg.center_bonus
        if is_in_check(board, color.opponent):
            score += self.cfg.check_bonus
        if is_in_check(board, color):
            score -= self.cfg.check_bonus
        return score

    def score_move(self, board: Board, move: Move, color: Color, depth: int = 0) -> float:
        """Heuristic value of `move` for `color`.

        Depth <= 1 scores the position right after the move; deeper levels take
        the worst case over the opponent's replies scored one level shallower.
        """
        with board.simulate(*move.squares):
            if depth <= 1:
                return self.positional(board, color)
            replies = all_legal_moves(board, color.opponent)
            if not replies:
                return self.positional(board, color)
            return min(-self.score_move(board, reply, color.opponent, depth - 1) for reply in replies)

    def totals(self, board: Board, captured: Dict[Color, Iterable[Piece]]) -> Dict[Color, int]:
        """Terminal tally: material on the board plus material each side captured."""
        result = {}
        for color in Color:
            result[color] = self.material(board, color) + sum(self.value(p) for p in captured.get(color, ()))
        return result

    def winner(self, board: Board, captured: Dict[Color, Iterable[Piece]]) -> Optional[Color]:
        """Side with the strictly higher total, None on a draw."""
        totals = self.totals(board, captured)
        white, black = totals[Color.WHITE], totals[Color.BLACK]
        if white > black:
            return Color.WHITE
        if black > white:
            return Color.BLACK
        return None
