"""The Ziffi Chess engine: game state, move execution and the AI entry point."""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from loguru import logger

from ziffi.config import CONFIG
from ziffi.core.board import Board, PROMOTION_ROW
from ziffi.core.evaluator import Evaluator
from ziffi.core.movegen import Move, is_in_check, legal_moves
from ziffi.core.pieces import Color, Piece, PieceKind, PIECE_SYMBOLS
from ziffi.core.search import SearchEngine

PlayerArg = Union[Color, str, None]


PROMOTION_KINDS = (PieceKind.QUEEN, PieceKind.ROOK, PieceKind.BISHOP, PieceKind.KNIGHT)


def _color(player: Union[Color, str]) -> Color:
    return player if isinstance(player, Color) else Color(player)


def _promotion_kind(promotion: Union[PieceKind, str, None]):
    """PieceKind, None when absent, False when unusable.

    Accepts a kind, a single letter ('n') or a full piece code ('wN'); the
    promoted piece always keeps the pawn's color.
    """
    if promotion is None or promotion == "":
        return None
    if not isinstance(promotion, PieceKind):
        text = str(promotion)
        try:
            if len(text) == 1:
                promotion = PieceKind.from_letter(text)
            elif len(text) == 2:
                promotion = Piece.from_code(text).kind
            else:
                return False
        except ValueError:
            return False
    return promotion if promotion in PROMOTION_KINDS else False


@dataclass
class MoveRecord:
    """Delta needed to invert one make_move."""
    from_row: int
    from_col: int
    to_row: int
    to_col: int
    moved_piece: Piece
    captured_piece: Optional[Piece]
    current_player: Color
    move_count: Dict[Color, int]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fromRow": self.from_row,
            "fromCol": self.from_col,
            "toRow": self.to_row,
            "toCol": self.to_col,
            "movedPiece": self.moved_piece.code,
            "capturedPiece": self.captured_piece.code if self.captured_piece else None,
            "currentPlayer": self.current_player.value,
            "moveCount": {c.value: n for c, n in self.move_count.items()},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MoveRecord":
        captured = data.get("capturedPiece")
        return cls(
            from_row=data["fromRow"],
            from_col=data["fromCol"],
            to_row=data["toRow"],
            to_col=data["toCol"],
            moved_piece=Piece.from_code(data["movedPiece"]),
            captured_piece=Piece.from_code(captured) if captured else None,
            current_player=Color(data["currentPlayer"]),
            move_count={Color(k): int(v) for k, v in data["moveCount"].items()},
        )


class Engine:
    def __init__(self, search: Optional[SearchEngine] = None, move_limit: Optional[int] = None):
        self.evaluator = Evaluator()
        self.search = search or SearchEngine(self.evaluator)
        self.move_limit = move_limit or CONFIG.rules.move_limit
        self.reset_game()

    # ── State ───────────────────────────────────────────────

    def reset_game(self):
        self.board = Board.ziffi()
        self.current_player = Color.WHITE
        self.move_count: Dict[Color, int] = {Color.WHITE: 0, Color.BLACK: 0}
        self.game_over = False
        self.winner: Optional[Color] = None
        self.move_history: List[MoveRecord] = []
        self.captured_pieces: Dict[Color, List[Piece]] = {Color.WHITE: [], Color.BLACK: []}
        self.is_flipped = False
        logger.info("engine.reset_game ziffi layout restored")

    def get_board(self, flipped: bool = False) -> List[List[Optional[Piece]]]:
        return self.board.view(flipped)

    def get_current_player(self) -> Color:
        return self.current_player

    def get_move_count(self, player: PlayerArg = None):
        if player:
            return self.move_count[_color(player)]
        return dict(self.move_count)

    def is_move_limit_reached(self, player: PlayerArg = None) -> bool:
        if player:
            return self.move_count[_color(player)] >= self.move_limit
        return all(n >= self.move_limit for n in self.move_count.values())

    def get_piece(self, row: int, col: int) -> Optional[Piece]:
        return self.board.get(row, col)

    def get_piece_symbol(self, piece: Union[Piece, str, None]) -> str:
        if piece is None:
            return ""
        code = piece.code if isinstance(piece, Piece) else piece
        return PIECE_SYMBOLS.get(code, "")

    def toggle_flip(self) -> bool:
        self.is_flipped = not self.is_flipped
        return self.is_flipped

    def swap_sides(self):
        """Swap color identities: pieces, side to move, counts, captures and history."""
        self.board.recolor()
        self.current_player = self.current_player.opponent
        self.move_count = {
            Color.WHITE: self.move_count[Color.BLACK],
            Color.BLACK: self.move_count[Color.WHITE],
        }
        self.captured_pieces = {
            Color.WHITE: [p.recolored() for p in self.captured_pieces[Color.BLACK]],
            Color.BLACK: [p.recolored() for p in self.captured_pieces[Color.WHITE]],
        }
        for record in self.move_history:
            record.current_player = record.current_player.opponent
            record.moved_piece = record.moved_piece.recolored()
            if record.captured_piece is not None:
                record.captured_piece = record.captured_piece.recolored()
            record.move_count = {c.opponent: n for c, n in record.move_count.items()}
        logger.debug(f"engine.swap_sides current_player={self.current_player.value}")

    # ── Rules ───────────────────────────────────────────────

    def is_in_check(self, player: Union[Color, str]) -> bool:
        return is_in_check(self.board, _color(player))

    def generate_valid_moves(self, row: int, col: int) -> List[Move]:
        """Legal moves from a square, safety checked against the side to move."""
        return legal_moves(self.board, row, col, self.current_player)

    def generate_safe_moves(self, row: int, col: int) -> List[Move]:
        """Legal moves from a square, safety checked against the piece's own color."""
        piece = self.board.get(row, col)
        if piece is None:
            return []
        return legal_moves(self.board, row, col, piece.color)

    def get_all_possible_moves(self, player: Union[Color, str]) -> List[Move]:
        moves = []
        for row, col, _ in list(self.board.pieces(_color(player))):
            moves.extend(self.generate_valid_moves(row, col))
        return moves

    def make_move(self, from_row: int, from_col: int, to_row: int, to_col: int,
                  promotion: Union[PieceKind, str, None] = None) -> bool:
        piece = self.board.get(from_row, from_col)
        if piece is None:
            return False
        promote_to = _promotion_kind(promotion)
        if promote_to is False:
            logger.warning(f"engine.make_move invalid promotion piece {promotion!r}")
            return False
        if not any((m.to_row, m.to_col) == (to_row, to_col) for m in self.generate_valid_moves(from_row, from_col)):
            logger.warning(
                f"engine.make_move rejected {piece.code} ({from_row},{from_col})->({to_row},{to_col}) "
                f"player={self.current_player.value}"
            )
            return False

        record = MoveRecord(
            from_row, from_col, to_row, to_col,
            moved_piece=piece,
            captured_piece=self.board.get(to_row, to_col),
            current_player=self.current_player,
            move_count=dict(self.move_count),
        )

        self.board.set(to_row, to_col, piece)
        self.board.set(from_row, from_col, None)

        if record.captured_piece is not None:
            self.captured_pieces[self.current_player].append(record.captured_piece)

        if piece.kind is PieceKind.PAWN and to_row == PROMOTION_ROW[piece.color]:
            self.board.set(to_row, to_col, Piece(piece.color, promote_to or PieceKind.QUEEN))

        self.move_history.append(record)
        self.move_count[self.current_player] += 1

        if self.is_move_limit_reached():
            self.game_over = True
            self.winner = self.calculate_winner()
            logger.info(f"engine.make_move game over winner={self.winner.value if self.winner else 'draw'}")

        self.current_player = self.current_player.opponent
        return True

    def undo_move(self) -> bool:
        if not self.move_history:
            return False
        last = self.move_history.pop()
        self.board.set(last.from_row, last.from_col, last.moved_piece)
        self.board.set(last.to_row, last.to_col, last.captured_piece)
        self.current_player = last.current_player
        self.move_count = dict(last.move_count)
        # keyed by the restored side to move, not necessarily the capturer
        if last.captured_piece is not None and self.captured_pieces[self.current_player]:
            self.captured_pieces[self.current_player].pop()
        self.game_over = False
        self.winner = None
        return True

    def calculate_winner(self) -> Optional[Color]:
        return self.evaluator.winner(self.board, self.captured_pieces)

    def get_material_totals(self) -> Dict[Color, int]:
        return self.evaluator.totals(self.board, self.captured_pieces)

    # ── AI ──────────────────────────────────────────────────

    def get_ai_move(self, player: Union[Color, str], difficulty: int) -> Optional[Move]:
        color = _color(player)
        moves = self.get_all_possible_moves(color)
        if not moves:
            return None
        return self.search.choose_move(self.board, color, moves, difficulty)

    # ── Snapshots ───────────────────────────────────────────

    def get_game_state(self) -> Dict[str, Any]:
        """JSON-serializable snapshot of the whole game."""
        return {
            "board": self.board.to_codes(self.is_flipped),
            "currentPlayer": self.current_player.value,
            "moveCount": {c.value: n for c, n in self.move_count.items()},
            "gameOver": self.game_over,
            "winner": self.winner.value if self.winner else None,
            "moveHistory": [r.to_dict() for r in self.move_history],
            "isFlipped": self.is_flipped,
            "capturedPieces": {c.value: [p.code for p in ps] for c, ps in self.captured_pieces.items()},
        }

    def load_game_state(self, state: Dict[str, Any]):
        """Restore a snapshot produced by get_game_state.

        Every field is parsed before any is assigned, so a malformed snapshot
        raises ValueError (or KeyError) and leaves the current game untouched.
        """
        flipped = bool(state.get("isFlipped", False))
        board = Board(Board.from_codes(state["board"]).view(flipped))
        current_player = Color(state["currentPlayer"])
        move_count = {Color(k): int(v) for k, v in state["moveCount"].items()}
        if set(move_count) != set(Color):
            raise ValueError(f"moveCount needs both colors, got {sorted(c.value for c in move_count)}")
        winner = state.get("winner")
        winner = Color(winner) if winner else None
        history = [MoveRecord.from_dict(r) for r in state.get("moveHistory", [])]
        captured = state.get("capturedPieces", {})
        captured_pieces = {c: [Piece.from_code(p) for p in captured.get(c.value, [])] for c in Color}

        self.board = board
        self.current_player = current_player
        self.move_count = move_count
        self.game_over = bool(state.get("gameOver", False))
        self.winner = winner
        self.move_history = history
        self.captured_pieces = captured_pieces
        self.is_flipped = flipped
