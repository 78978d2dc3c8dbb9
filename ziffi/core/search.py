import random
import time
from enum import Enum, IntEnum
from typing import List, Optional, Tuple

from loguru import logger

from ziffi.config import CONFIG, SearchConfig
from ziffi.core.board import Board
from ziffi.core.evaluator import Evaluator
from ziffi.core.movegen import Move, all_legal_moves
from ziffi.core.pieces import Color

INF = float("inf")


class Difficulty(IntEnum):
    VERY_EASY = 0   # ~600
    EASY = 1        # ~1000
    MEDIUM = 2      # ~1400
    HARD = 3        # ~1800
    EXPERT = 4      # ~2200
    MASTER = 5      # ~2800


class Strategy(Enum):
    RANDOM_WEIGHTED = "random-weighted"
    CAPTURE_BIASED = "capture-biased"
    GREEDY_HEURISTIC = "greedy-heuristic"
    MINIMAX = "minimax"


class SearchEngine:
    def __init__(self, evaluator: Optional[Evaluator] = None,
                 cfg: Optional[SearchConfig] = None,
                 rng: Optional[random.Random] = None):
        self.evaluator = evaluator or Evaluator()
        self.cfg = cfg or CONFIG.search
        self.rng = rng or random.Random(self.cfg.seed)
        self.nodes = 0

    def plan(self, difficulty: int) -> Tuple[Strategy, int]:
        """Strategy and depth for a difficulty tier."""
        if difficulty == Difficulty.VERY_EASY:
            return Strategy.RANDOM_WEIGHTED, 1
        if difficulty == Difficulty.EASY:
            return Strategy.CAPTURE_BIASED, 0
        if difficulty == Difficulty.MEDIUM:
            return Strategy.GREEDY_HEURISTIC, self.cfg.greedy_depth
        depth = self.cfg.minimax_depths.get(int(difficulty), self.cfg.default_depth)
        return Strategy.MINIMAX, depth

    def choose_move(self, board: Board, player: Color, moves: List[Move], difficulty: int) -> Optional[Move]:
        if not moves:
            return None
        strategy, depth = self.plan(difficulty)
        self.nodes = 0
        start_time = time.time()

        if strategy is Strategy.RANDOM_WEIGHTED:
            move = self.random_weighted(board, player, moves)
        elif strategy is Strategy.CAPTURE_BIASED:
            move = self.capture_biased(board, player, moves)
        elif strategy is Strategy.GREEDY_HEURISTIC:
            move = self.greedy(board, player, moves, depth)
        else:
            move = self.minimax_root(board, player, depth, moves)

        elapsed = (time.time() - start_time) * 1000
        logger.debug(
            f"search.choose_move player={player.value} difficulty={difficulty} "
            f"strategy={strategy.value} depth={depth} nodes={self.nodes} time={elapsed:.0f}ms move={move}"
        )
        return move or moves[0]

    # ── Lower tiers ─────────────────────────────────────────

    def random_weighted(self, board: Board, player: Color, moves: List[Move]) -> Move:
        if self.rng.random() < self.cfg.random_move_rate:
            return self.rng.choice(moves)
        return self.noisy_best(board, player, moves, self.cfg.heuristic_noise)

    def noisy_best(self, board: Board, player: Color, moves: List[Move], noise: float) -> Move:
        """Best one-ply heuristic move after jittering every score."""
        scale = noise * self.evaluator.cfg.noise_scale
        best_move, best_score = moves[0], -INF
        for move in moves:
            score = self.evaluator.score_move(board, move, player, 1) + self.rng.uniform(-scale, scale)
            if score > best_score:
                best_move, best_score = move, score
        return best_move

    def capture_biased(self, board: Board, player: Color, moves: List[Move]) -> Move:
        captures = [m for m in moves if m.is_capture]
        if captures and self.rng.random() < self.cfg.capture_preference:
            return self.rng.choice(captures)
        return self.rng.choice(moves)

    def greedy(self, board: Board, player: Color, moves: List[Move], depth: int) -> Move:
        best_move, best_score = moves[0], -INF
        for move in moves:
            score = self.evaluator.score_move(board, move, player, depth)
            if score > best_score:
                best_move, best_score = move, score
        return best_move

    # ── Minimax ─────────────────────────────────────────────

    def minimax_root(self, board: Board, player: Color, depth: int,
                     moves: Optional[List[Move]] = None, prune: bool = True) -> Optional[Move]:
        moves = moves if moves is not None else all_legal_moves(board, player)
        if not moves:
            return None
        if depth <= 0:
            return self.greedy(board, player, moves, 0)

        best_move, best_score = moves[0], -INF
        alpha = -INF
        for move in moves:
            with board.simulate(*move.squares):
                score = self.minimax(board, player.opponent, depth - 1, False,
                                     alpha if prune else -INF, INF, player, prune)
            if score > best_score:
                best_move, best_score = move, score
            if prune:
                alpha = max(alpha, best_score)
        return best_move

    def minimax(self, board: Board, player: Color, depth: int, maximizing: bool,
                alpha: float, beta: float, root: Color, prune: bool = True) -> float:
        """Score of the position with `player` to move, from `root`'s point of view."""
        self.nodes += 1
        if depth == 0:
            return self.evaluator.evaluate(board, root)
        moves = all_legal_moves(board, player)
        if not moves:
            return self.evaluator.evaluate(board, root)

        best = -INF if maximizing else INF
        for move in moves:
            with board.simulate(*move.squares):
                score = self.minimax(board, player.opponent, depth - 1, not maximizing,
                                     alpha, beta, root, prune)
            if maximizing:
                best = max(best, score)
                alpha = max(alpha, best)
            else:
                best = min(best, score)
                beta = min(beta, best)
            if prune and beta <= alpha:
                break
        return best
