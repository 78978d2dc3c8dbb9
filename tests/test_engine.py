"""
Test suite for the Ziffi Chess rules engine.

Covers:
- Board layout, views and move simulation
- Move generation per piece kind (blockers, captures, board edges)
- Check detection and self-check filtering
- make_move / undo_move round trips, promotion
- Move limit, terminal scoring and winner
- Swap / flip
- Evaluator terms
- AI tiers (seeded) and alpha-beta vs plain minimax
- python-chess notation helpers
"""

import random

import pytest

from ziffi.core.board import Board, ZIFFI_LAYOUT
from ziffi.core.evaluator import Evaluator
from ziffi.core.movegen import (
    Move,
    MoveKind,
    all_legal_moves,
    is_in_check,
    legal_moves,
    pseudo_legal_moves,
)
from ziffi.core.pieces import Color, Piece, PieceKind
from ziffi.core.search import Difficulty, SearchEngine, Strategy
from ziffi.main import Engine
from ziffi.notation import parse_move, parse_square, render, square_name, to_fen


def empty_codes():
    return [[None] * 8 for _ in range(8)]


def board_with(**placements):
    """board_with(wK=(7, 4), bR=(0, 4)); repeat a code with a list of squares."""
    rows = empty_codes()
    for code, squares in placements.items():
        if isinstance(squares, tuple):
            squares = [squares]
        for r, c in squares:
            rows[r][c] = code
    return Board.from_codes(rows)


def targets(moves):
    return {(m.to_row, m.to_col) for m in moves}


def seeded_engine(seed=1, **kwargs):
    return Engine(search=SearchEngine(rng=random.Random(seed)), **kwargs)


# ════════════════════════════════════════════════════════════════════════════
#  BOARD TESTS
# ════════════════════════════════════════════════════════════════════════════

class TestBoard:
    def test_ziffi_layout(self):
        b = Board.ziffi()
        assert b.to_codes() == ZIFFI_LAYOUT
        assert b.get(2, 6) == Piece(Color.BLACK, PieceKind.KING)
        assert b.get(5, 6) == Piece(Color.WHITE, PieceKind.KING)
        assert len(list(b.pieces(Color.WHITE))) == 8
        assert len(list(b.pieces(Color.BLACK))) == 8

    def test_out_of_bounds_get(self):
        b = Board.ziffi()
        assert b.get(-1, 0) is None
        assert b.get(8, 8) is None

    def test_invalid_codes_rejected(self):
        rows = empty_codes()
        rows[0][0] = "xK"
        with pytest.raises(ValueError):
            Board.from_codes(rows)
        with pytest.raises(ValueError):
            Board.from_codes([[None] * 8])

    def test_flipped_view(self):
        b = Board.ziffi()
        view = b.view(flipped=True)
        assert view[0][0] == b.get(7, 7)
        assert view[2][1] == b.get(5, 6)
        # view is a copy
        view[0][0] = Piece(Color.WHITE, PieceKind.QUEEN)
        assert b.get(7, 7) is None

    def test_simulate_restores(self):
        b = Board.ziffi()
        before = b.copy()
        with b.simulate(4, 3, 3, 2) as captured:
            assert captured == Piece(Color.BLACK, PieceKind.PAWN)
            assert b.get(3, 2) == Piece(Color.WHITE, PieceKind.PAWN)
            assert b.get(4, 3) is None
        assert b == before

    def test_simulate_restores_on_error(self):
        b = Board.ziffi()
        before = b.copy()
        with pytest.raises(RuntimeError):
            with b.simulate(5, 3, 7, 4):
                raise RuntimeError("boom")
        assert b == before

    def test_find_king_missing(self):
        assert board_with(wK=(7, 4)).find_king(Color.BLACK) is None


# ════════════════════════════════════════════════════════════════════════════
#  MOVE GENERATION
# ════════════════════════════════════════════════════════════════════════════

class TestMoveGeneration:
    def test_pawn_blocked_but_captures_diagonally(self):
        b = Board.ziffi()
        moves = pseudo_legal_moves(b, 4, 3)
        assert targets(moves) == {(3, 2), (3, 4)}
        assert all(m.kind is MoveKind.CAPTURE for m in moves)

    def test_pawn_double_step_from_home_row(self):
        b = board_with(wP=(6, 0), bP=(1, 7))
        assert targets(pseudo_legal_moves(b, 6, 0)) == {(5, 0), (4, 0)}
        assert targets(pseudo_legal_moves(b, 1, 7)) == {(2, 7), (3, 7)}

    def test_pawn_double_step_needs_both_squares_empty(self):
        b = board_with(wP=(6, 0), bN=(4, 0))
        assert targets(pseudo_legal_moves(b, 6, 0)) == {(5, 0)}
        b = board_with(wP=(6, 0), bN=(5, 0))
        assert pseudo_legal_moves(b, 6, 0) == []

    def test_pawn_no_double_step_off_home_row(self):
        b = board_with(wP=(5, 0))
        assert targets(pseudo_legal_moves(b, 5, 0)) == {(4, 0)}

    def test_pawn_at_edge_has_no_moves(self):
        # a white pawn on row 0 has nowhere to go
        assert pseudo_legal_moves(board_with(wP=(0, 3)), 0, 3) == []

    def test_knight_from_start(self):
        b = Board.ziffi()
        moves = pseudo_legal_moves(b, 5, 3)
        assert len(moves) == 8
        captures = {(m.to_row, m.to_col) for m in moves if m.is_capture}
        assert captures == {(3, 2), (3, 4)}

    def test_knight_in_corner(self):
        assert targets(pseudo_legal_moves(board_with(wN=(0, 0)), 0, 0)) == {(1, 2), (2, 1)}

    def test_rook_from_start(self):
        b = Board.ziffi()
        assert targets(pseudo_legal_moves(b, 5, 2)) == {(6, 2), (7, 2), (5, 1), (5, 0)}

    def test_rook_stops_at_blockers(self):
        b = board_with(wR=(4, 4), wP=(4, 6), bP=(1, 4))
        t = targets(pseudo_legal_moves(b, 4, 4))
        assert (4, 5) in t and (4, 6) not in t and (4, 7) not in t
        assert (1, 4) in t and (0, 4) not in t
        assert len(t) == 4 + 3 + 3 + 1  # left, down, up to capture, right

    def test_bishop_from_start(self):
        b = Board.ziffi()
        t = targets(pseudo_legal_moves(b, 5, 4))
        assert t == {(4, 5), (3, 6), (2, 7), (6, 3), (7, 2), (6, 5), (7, 6)}

    def test_queen_is_rook_plus_bishop(self):
        b = board_with(wQ=(3, 3))
        rook = targets(pseudo_legal_moves(board_with(wR=(3, 3)), 3, 3))
        bishop = targets(pseudo_legal_moves(board_with(wB=(3, 3)), 3, 3))
        assert targets(pseudo_legal_moves(b, 3, 3)) == rook | bishop
        assert len(rook | bishop) == 27

    def test_queen_capture_from_start(self):
        b = Board.ziffi()
        moves = pseudo_legal_moves(b, 5, 5)
        assert Move(5, 5, 2, 5, MoveKind.CAPTURE) in moves
        assert len(moves) == 11

    def test_king_steps(self):
        assert len(pseudo_legal_moves(board_with(wK=(4, 4)), 4, 4)) == 8
        assert len(pseudo_legal_moves(board_with(wK=(7, 7)), 7, 7)) == 3

    def test_empty_square(self):
        assert pseudo_legal_moves(Board.ziffi(), 0, 0) == []


# ════════════════════════════════════════════════════════════════════════════
#  CHECK DETECTION & LEGALITY
# ════════════════════════════════════════════════════════════════════════════

class TestCheck:
    def test_rook_gives_check(self):
        b = board_with(wK=(7, 4), bR=(0, 4))
        assert is_in_check(b, Color.WHITE)
        assert not is_in_check(b, Color.BLACK)

    def test_blocker_removes_check(self):
        b = board_with(wK=(7, 4), bR=(0, 4), wB=(4, 4))
        assert not is_in_check(b, Color.WHITE)

    def test_pinned_piece_cannot_leave_line(self):
        b = board_with(wK=(7, 4), bR=(0, 4), wB=(4, 4))
        assert legal_moves(b, 4, 4, Color.WHITE) == []

    def test_pinned_rook_may_slide_along_pin(self):
        b = board_with(wK=(7, 4), bR=(0, 4), wR=(4, 4))
        t = targets(legal_moves(b, 4, 4, Color.WHITE))
        assert t == {(5, 4), (6, 4), (3, 4), (2, 4), (1, 4), (0, 4)}

    def test_pawn_check_direction(self):
        # black pawns attack downward (toward higher rows)
        assert is_in_check(board_with(wK=(4, 4), bP=(3, 3)), Color.WHITE)
        assert not is_in_check(board_with(wK=(4, 4), bP=(5, 3)), Color.WHITE)

    def test_knight_and_king_attacks(self):
        assert is_in_check(board_with(wK=(4, 4), bN=(2, 3)), Color.WHITE)
        assert is_in_check(board_with(wK=(4, 4), bK=(3, 3)), Color.WHITE)

    def test_no_king_never_in_check(self):
        assert not is_in_check(board_with(bQ=(0, 0)), Color.WHITE)

    def test_king_avoids_attacked_squares_at_start(self):
        b = Board.ziffi()
        assert targets(legal_moves(b, 5, 6, Color.WHITE)) == {(6, 5), (6, 6), (6, 7)}

    def test_check_must_be_answered(self):
        b = board_with(wK=(7, 4), bR=(0, 4), wN=(7, 1))
        moves = all_legal_moves(b, Color.WHITE)
        # knight can only block on the file or the king must step off it
        for m in moves:
            with b.simulate(*m.squares):
                assert not is_in_check(b, Color.WHITE)
        assert Move(7, 1, 5, 2) not in moves


# ════════════════════════════════════════════════════════════════════════════
#  ENGINE: MAKE / UNDO
# ════════════════════════════════════════════════════════════════════════════

class TestEngineMoves:
    def setup_method(self):
        self.engine = Engine()

    def test_initial_state(self):
        e = self.engine
        assert e.get_current_player() is Color.WHITE
        assert e.get_move_count() == {Color.WHITE: 0, Color.BLACK: 0}
        assert not e.game_over and e.winner is None

    def test_valid_move(self):
        e = self.engine
        assert e.make_move(4, 3, 3, 2) is True
        assert e.get_piece(3, 2) == Piece(Color.WHITE, PieceKind.PAWN)
        assert e.get_current_player() is Color.BLACK
        assert e.get_move_count(Color.WHITE) == 1
        assert e.captured_pieces[Color.WHITE] == [Piece(Color.BLACK, PieceKind.PAWN)]

    def test_illegal_move_no_mutation(self):
        e = self.engine
        before = e.get_game_state()
        assert e.make_move(4, 3, 3, 3) is False   # blocked pawn push
        assert e.make_move(0, 0, 1, 0) is False   # empty square
        assert e.make_move(5, 6, 4, 5) is False   # king into check
        assert e.make_move(5, 2, 9, 2) is False   # off the board
        assert e.get_game_state() == before

    def test_off_turn_piece_checked_against_side_to_move(self):
        # only the destination is re-validated; the guard is the side to move
        e = self.engine
        assert e.make_move(3, 3, 4, 2) is True   # black pawn takes on white's turn
        assert e.get_piece(4, 2) == Piece(Color.BLACK, PieceKind.PAWN)
        assert e.captured_pieces[Color.WHITE] == [Piece(Color.WHITE, PieceKind.PAWN)]
        assert e.get_move_count(Color.WHITE) == 1
        assert e.get_current_player() is Color.BLACK

    def test_undo_round_trip(self):
        e = self.engine
        before = e.get_game_state()
        e.make_move(4, 3, 3, 2)
        e.make_move(2, 3, 4, 2)   # knight takes pawn
        assert e.undo_move() and e.undo_move()
        assert e.get_game_state() == before
        assert e.board == Board.ziffi()

    def test_undo_empty(self):
        assert self.engine.undo_move() is False

    def test_valid_moves_guard_current_player(self):
        e = self.engine
        # black's knight has moves of its own, but it is not black's turn
        valid = targets(e.generate_valid_moves(2, 3))
        safe = targets(e.generate_safe_moves(2, 3))
        assert len(safe) == 8
        # squares where the knight would check the white king are filtered
        assert safe - valid == {(3, 5), (4, 4)}

    def test_all_possible_moves_count(self):
        # 4 pawn captures, rook 4, knight 8, bishop 7, queen 11, king 3
        assert len(self.engine.get_all_possible_moves(Color.WHITE)) == 37


class TestPromotion:
    def setup_method(self):
        self.engine = Engine()
        self.engine.board = board_with(wP=(1, 0), wK=(7, 7), bK=(3, 7))

    def test_default_queen(self):
        assert self.engine.make_move(1, 0, 0, 0)
        assert self.engine.get_piece(0, 0) == Piece(Color.WHITE, PieceKind.QUEEN)

    @pytest.mark.parametrize("choice", ["n", "N", "wN", PieceKind.KNIGHT])
    def test_underpromotion(self, choice):
        assert self.engine.make_move(1, 0, 0, 0, choice)
        assert self.engine.get_piece(0, 0) == Piece(Color.WHITE, PieceKind.KNIGHT)

    def test_color_comes_from_pawn(self):
        assert self.engine.make_move(1, 0, 0, 0, "bR")
        assert self.engine.get_piece(0, 0) == Piece(Color.WHITE, PieceKind.ROOK)

    @pytest.mark.parametrize("choice", ["k", "P", "x", "queen", "xN", "wK", "qq"])
    def test_invalid_promotion(self, choice):
        before = self.engine.get_game_state()
        assert self.engine.make_move(1, 0, 0, 0, choice) is False
        assert self.engine.get_game_state() == before

    def test_undo_restores_pawn(self):
        self.engine.make_move(1, 0, 0, 0)
        self.engine.undo_move()
        assert self.engine.get_piece(1, 0) == Piece(Color.WHITE, PieceKind.PAWN)
        assert self.engine.get_piece(0, 0) is None

    def test_black_pawn_promotes_on_last_row(self):
        e = Engine()
        e.board = board_with(bP=(6, 0), bK=(4, 7), wK=(0, 7))
        e.current_player = Color.BLACK
        assert e.make_move(6, 0, 7, 0)
        assert e.get_piece(7, 0) == Piece(Color.BLACK, PieceKind.QUEEN)


# ════════════════════════════════════════════════════════════════════════════
#  MOVE LIMIT & SCORING
# ════════════════════════════════════════════════════════════════════════════

class TestGameOver:
    def test_totals_double_count_captures(self):
        e = Engine()
        assert e.get_material_totals() == {Color.WHITE: 23, Color.BLACK: 23}
        e.make_move(4, 3, 3, 2)
        # white keeps 23 on board and banks the captured pawn
        assert e.get_material_totals() == {Color.WHITE: 24, Color.BLACK: 22}

    def test_limit_ends_game(self):
        e = Engine(move_limit=1)
        e.make_move(4, 3, 3, 2)
        assert not e.game_over
        assert e.is_move_limit_reached(Color.WHITE)
        assert not e.is_move_limit_reached()
        e.make_move(2, 2, 1, 2)
        assert e.game_over
        assert e.is_move_limit_reached()
        assert e.winner is Color.WHITE
        # turn still alternates into the finished game
        assert e.get_current_player() is Color.WHITE

    def test_undo_reopens_game(self):
        e = Engine(move_limit=1)
        e.make_move(4, 3, 3, 2)
        e.make_move(2, 2, 1, 2)
        assert e.undo_move()
        assert not e.game_over and e.winner is None
        assert e.get_current_player() is Color.BLACK

    def test_draw_when_totals_equal(self):
        e = Engine(move_limit=1)
        e.make_move(5, 2, 6, 2)
        e.make_move(2, 2, 1, 2)
        assert e.game_over
        assert e.winner is None
        assert e.calculate_winner() is None

    def test_full_game_reaches_limit(self):
        e = seeded_engine(5)
        for _ in range(12):
            move = e.get_ai_move(e.get_current_player(), Difficulty.EASY)
            assert move is not None
            assert e.make_move(*move.squares)
        assert e.game_over
        assert e.get_move_count() == {Color.WHITE: 6, Color.BLACK: 6}
        totals = e.get_material_totals()
        expected = None
        if totals[Color.WHITE] != totals[Color.BLACK]:
            expected = Color.WHITE if totals[Color.WHITE] > totals[Color.BLACK] else Color.BLACK
        assert e.winner is expected


# ════════════════════════════════════════════════════════════════════════════
#  SWAP / FLIP / SNAPSHOTS
# ════════════════════════════════════════════════════════════════════════════

class TestSwapFlip:
    def test_toggle_flip(self):
        e = Engine()
        assert e.toggle_flip() is True
        assert e.get_board(flipped=True)[2][1] == Piece(Color.WHITE, PieceKind.KING)
        assert e.toggle_flip() is False

    def test_swap_sides_recolors(self):
        e = Engine()
        e.make_move(4, 3, 3, 2)
        e.swap_sides()
        assert e.get_piece(5, 6) == Piece(Color.BLACK, PieceKind.KING)
        assert e.get_piece(3, 2) == Piece(Color.BLACK, PieceKind.PAWN)
        assert e.get_current_player() is Color.WHITE
        assert e.get_move_count() == {Color.WHITE: 0, Color.BLACK: 1}
        assert e.captured_pieces[Color.BLACK] == [Piece(Color.WHITE, PieceKind.PAWN)]
        assert e.undo_move()
        assert e.get_piece(4, 3) == Piece(Color.BLACK, PieceKind.PAWN)
        assert e.get_piece(3, 2) == Piece(Color.WHITE, PieceKind.PAWN)
        assert e.get_current_player() is Color.BLACK

    def test_swap_twice_is_identity(self):
        e = Engine()
        e.make_move(4, 3, 3, 2)
        before = e.get_game_state()
        e.swap_sides()
        e.swap_sides()
        assert e.get_game_state() == before

    @pytest.mark.parametrize("field, value", [
        ("capturedPieces", {"w": ["zz"], "b": []}),
        ("moveCount", {"w": 0}),
        ("currentPlayer", "x"),
    ])
    def test_bad_snapshot_leaves_game_untouched(self, field, value):
        e = Engine()
        e.make_move(4, 3, 3, 2)
        before = e.get_game_state()
        state = Engine().get_game_state()
        state["currentPlayer"] = "w"
        state[field] = value
        with pytest.raises(ValueError):
            e.load_game_state(state)
        assert e.get_game_state() == before

    def test_game_state_round_trip_flipped(self):
        e = Engine()
        e.make_move(4, 3, 3, 2)
        e.toggle_flip()
        state = e.get_game_state()
        assert state["board"][7 - 3][7 - 2] == "wP"
        assert state["capturedPieces"] == {"w": ["bP"], "b": []}

        other = Engine()
        other.load_game_state(state)
        assert other.board == e.board
        assert other.is_flipped
        assert other.undo_move()
        assert other.board == Board.ziffi()

    def test_piece_symbol(self):
        e = Engine()
        assert e.get_piece_symbol(Piece(Color.WHITE, PieceKind.KING)) == "♔"
        assert e.get_piece_symbol("bP") == "♟"
        assert e.get_piece_symbol(None) == ""


# ════════════════════════════════════════════════════════════════════════════
#  EVALUATOR
# ════════════════════════════════════════════════════════════════════════════

class TestEvaluator:
    def setup_method(self):
        self.ev = Evaluator()

    def test_start_is_balanced(self):
        b = Board.ziffi()
        assert self.ev.evaluate(b, Color.WHITE) == 0
        assert self.ev.positional(b, Color.WHITE) == 0

    def test_material_difference(self):
        b = board_with(wQ=(7, 0), bR=(0, 0))
        assert self.ev.evaluate(b, Color.WHITE) == 4
        assert self.ev.evaluate(b, Color.BLACK) == -4

    def test_positional_antisymmetric(self):
        b = board_with(wK=(7, 4), bR=(0, 4), wN=(3, 3), bP=(1, 1))
        assert self.ev.positional(b, Color.WHITE) == -self.ev.positional(b, Color.BLACK)

    def test_center_and_check_terms(self):
        b = board_with(wN=(3, 3))
        assert self.ev.positional(b, Color.WHITE) == 3 + 0.25
        b = board_with(wK=(7, 4), bR=(0, 4))
        assert self.ev.positional(b, Color.BLACK) == 5 + 0.5

    def test_score_move_sees_recapture(self):
        # taking the defended pawn with the queen loses the queen
        b = board_with(wQ=(7, 3), bP=(2, 3), bR=(2, 0), wK=(7, 7), bK=(0, 7))
        grab = Move(7, 3, 2, 3, MoveKind.CAPTURE)
        assert self.ev.score_move(b, grab, Color.WHITE, 1) > 0
        assert self.ev.score_move(b, grab, Color.WHITE, 2) < 0

    def test_winner(self):
        b = board_with(wK=(7, 4), bK=(0, 4))
        captured = {Color.WHITE: [], Color.BLACK: [Piece(Color.WHITE, PieceKind.PAWN)]}
        assert self.ev.winner(b, captured) is Color.BLACK
        assert self.ev.winner(b, {Color.WHITE: [], Color.BLACK: []}) is None


# ════════════════════════════════════════════════════════════════════════════
#  AI TIERS
# ════════════════════════════════════════════════════════════════════════════

class _FirstChoiceRng(random.Random):
    def random(self):
        return 0.0

    def choice(self, seq):
        return seq[0]


class TestSearch:
    def test_plan_table(self):
        s = SearchEngine()
        assert s.plan(0)[0] is Strategy.RANDOM_WEIGHTED
        assert s.plan(1)[0] is Strategy.CAPTURE_BIASED
        assert s.plan(2) == (Strategy.GREEDY_HEURISTIC, 2)
        assert s.plan(3) == (Strategy.MINIMAX, 2)
        assert s.plan(4) == (Strategy.MINIMAX, 3)
        assert s.plan(5) == (Strategy.MINIMAX, 4)
        assert s.plan(42) == (Strategy.MINIMAX, 3)

    @pytest.mark.parametrize("difficulty", [0, 1, 2, 3])
    def test_every_tier_returns_playable_move(self, difficulty):
        e = seeded_engine(11)
        move = e.get_ai_move(Color.WHITE, difficulty)
        assert move in e.get_all_possible_moves(Color.WHITE)
        assert e.make_move(*move.squares)

    def test_black_ai_move(self):
        e = seeded_engine(3)
        e.make_move(5, 2, 6, 2)
        move = e.get_ai_move(Color.BLACK, Difficulty.HARD)
        assert e.make_move(*move.squares)

    def test_no_moves_returns_none(self):
        e = Engine()
        e.board = board_with(wK=(7, 4))
        assert e.get_ai_move(Color.BLACK, 3) is None
        assert SearchEngine().choose_move(e.board, Color.BLACK, [], 3) is None

    def test_seeded_tiers_are_deterministic(self):
        for difficulty in (0, 1):
            a = seeded_engine(7).get_ai_move(Color.WHITE, difficulty)
            b = seeded_engine(7).get_ai_move(Color.WHITE, difficulty)
            assert a == b

    def test_capture_biased_prefers_captures(self):
        s = SearchEngine(rng=_FirstChoiceRng())
        moves = all_legal_moves(Board.ziffi(), Color.WHITE)
        assert s.capture_biased(Board.ziffi(), Color.WHITE, moves).is_capture

    @pytest.mark.parametrize("difficulty", [2, 3, 4, 5])
    def test_takes_free_queen(self, difficulty):
        e = Engine()
        e.board = board_with(wK=(7, 0), wR=(7, 7), bQ=(0, 7), bK=(0, 0))
        assert e.get_ai_move(Color.WHITE, difficulty) == Move(7, 7, 0, 7, MoveKind.CAPTURE)

    def test_minimax_avoids_losing_queen(self):
        b = board_with(wQ=(7, 3), bP=(2, 3), bR=(2, 0), wK=(7, 7), bK=(0, 7))
        move = SearchEngine().minimax_root(b, Color.WHITE, 2)
        assert move != Move(7, 3, 2, 3, MoveKind.CAPTURE)

    @pytest.mark.parametrize("depth", [1, 2, 3])
    def test_pruning_matches_plain_minimax(self, depth):
        b = Board.ziffi()
        pruned, plain = SearchEngine(), SearchEngine()
        assert pruned.minimax_root(b, Color.WHITE, depth) == plain.minimax_root(b, Color.WHITE, depth, prune=False)
        assert pruned.nodes <= plain.nodes
        assert b == Board.ziffi()

    def test_search_leaves_board_untouched(self):
        e = seeded_engine(2)
        before = e.get_game_state()
        for difficulty in range(4):
            e.get_ai_move(Color.WHITE, difficulty)
        assert e.get_game_state() == before


# ════════════════════════════════════════════════════════════════════════════
#  NOTATION
# ════════════════════════════════════════════════════════════════════════════

class TestNotation:
    def test_squares(self):
        assert square_name(4, 2) == "c4"
        assert square_name(2, 6) == "g6"
        assert parse_square("C4") == (4, 2)

    def test_parse_move(self):
        assert parse_move("d4c5") == (4, 3, 3, 2, None)
        assert parse_move("a7a8n") == (1, 0, 0, 0, PieceKind.KNIGHT)
        with pytest.raises(ValueError):
            parse_move("zz99")

    def test_fen(self):
        fen = to_fen(Board.ziffi(), Color.WHITE)
        assert fen.startswith("8/8/2rnbqk1/2ppp3/2PPP3/2RNBQK1/8/8 w - -")

    def test_render(self):
        text = render(Board.ziffi())
        assert "♚" in text and "♔" in text
