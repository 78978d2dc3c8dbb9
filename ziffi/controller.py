"""Game session controller: modes, selection, undo/redo, AI turns and persistence.

The engine only knows the rules. Everything a front end needs on top of that
(whose turn is the AI's, bounded history stacks, online move forwarding,
saving) lives here so the REST API and the CLI share one implementation.
"""

import random
from collections import deque
from enum import Enum
from typing import Any, Callable, Deque, Dict, List, Optional

from loguru import logger

from ziffi.config import CONFIG
from ziffi.core.movegen import Move
from ziffi.core.pieces import Color, PieceKind
from ziffi.main import Engine
from ziffi.storage import GameStore
from ziffi.schemas import StoreResult


class GameMode(str, Enum):
    HUMAN_VS_ENGINE = "human-vs-engine"
    ENGINE_VS_ENGINE = "engine-vs-engine"
    LOCAL_TWO_PLAYER = "local-two-player"
    ONLINE_TWO_PLAYER = "online-two-player"


MoveCallback = Callable[[Dict[str, Any]], None]


class GameController:
    def __init__(self, engine: Optional[Engine] = None,
                 mode: GameMode = GameMode.HUMAN_VS_ENGINE,
                 difficulty: Optional[int] = None,
                 history_limit: Optional[int] = None,
                 on_move: Optional[MoveCallback] = None,
                 rng: Optional[random.Random] = None):
        self.engine = engine or Engine()
        self.mode = GameMode(mode)
        self.difficulty = CONFIG.ui.default_difficulty if difficulty is None else difficulty
        self.player_colors: Dict[str, Color] = {"human": Color.WHITE, "ai": Color.BLACK}
        self.history_limit = history_limit or CONFIG.rules.history_limit
        self.undo_stack: Deque[Dict[str, Any]] = deque(maxlen=self.history_limit)
        self.redo_stack: Deque[Dict[str, Any]] = deque(maxlen=self.history_limit)
        self.on_move = on_move
        self.rng = rng or random.Random()
        self.game_id: Optional[str] = None
        self.game_active = False
        self.selected: Optional[tuple] = None
        self.valid_moves: List[Move] = []

    # ── Lifecycle ───────────────────────────────────────────

    def start_game(self, mode: Optional[GameMode] = None):
        if mode is not None:
            self.mode = GameMode(mode)
        self.engine.reset_game()
        self.undo_stack.clear()
        self.redo_stack.clear()
        self.clear_selection()
        self.game_id = None
        self.game_active = True
        logger.info(f"controller.start_game mode={self.mode.value} difficulty={self.difficulty}")

    new_game = start_game

    def set_difficulty(self, difficulty: int):
        if not 0 <= int(difficulty) <= 5:
            raise ValueError(f"difficulty must be 0..5, got {difficulty}")
        self.difficulty = int(difficulty)

    @property
    def game_over(self) -> bool:
        return self.engine.game_over

    # ── Selection & moves ───────────────────────────────────

    def clear_selection(self):
        self.selected = None
        self.valid_moves = []

    def select_piece(self, row: int, col: int) -> List[Move]:
        """Select a piece of the side to move and cache its valid moves."""
        piece = self.engine.get_piece(row, col)
        if piece is None or piece.color != self.engine.current_player:
            self.clear_selection()
            return []
        self.selected = (row, col)
        self.valid_moves = self.engine.generate_valid_moves(row, col)
        return self.valid_moves

    def can_move(self) -> bool:
        if not self.game_active or self.engine.game_over:
            return False
        if self.mode is GameMode.ONLINE_TWO_PLAYER:
            # the opponent's moves arrive through apply_remote_move
            return self.engine.current_player == self.player_colors["human"]
        return not self.is_ai_turn()

    def attempt_move(self, from_row: int, from_col: int, to_row: int, to_col: int,
                     promotion: Optional[PieceKind] = None) -> bool:
        """Play a human move; the destination must be among the selection's moves."""
        if not self.can_move():
            return False
        if self.selected != (from_row, from_col):
            self.select_piece(from_row, from_col)
        if not any((m.to_row, m.to_col) == (to_row, to_col) for m in self.valid_moves):
            return False
        player = self.engine.current_player
        if not self._play(from_row, from_col, to_row, to_col, promotion):
            return False
        if self.mode is GameMode.ONLINE_TWO_PLAYER and self.on_move:
            self.on_move({
                "fromRow": from_row, "fromCol": from_col,
                "toRow": to_row, "toCol": to_col,
                "player": player.value,
            })
        return True

    def _play(self, from_row, from_col, to_row, to_col, promotion=None) -> bool:
        snapshot = self.engine.get_game_state()
        if not self.engine.make_move(from_row, from_col, to_row, to_col, promotion):
            return False
        self.undo_stack.append(snapshot)
        self.redo_stack.clear()
        self.clear_selection()
        return True

    def apply_remote_move(self, data: Dict[str, Any]) -> bool:
        """Play a move forwarded by the online opponent."""
        if self.mode is not GameMode.ONLINE_TWO_PLAYER or self.engine.game_over:
            return False
        try:
            player = Color(data["player"])
            squares = int(data["fromRow"]), int(data["fromCol"]), int(data["toRow"]), int(data["toCol"])
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"controller.apply_remote_move malformed data={data!r} error={e}")
            return False
        if player != self.engine.current_player:
            logger.warning(f"controller.apply_remote_move out of turn player={player.value}")
            return False
        return self._play(*squares)

    # ── AI ──────────────────────────────────────────────────

    def ai_color(self) -> Color:
        if self.mode is GameMode.ENGINE_VS_ENGINE:
            return self.engine.current_player
        return self.player_colors["ai"]

    def is_ai_turn(self) -> bool:
        if self.mode is GameMode.ENGINE_VS_ENGINE:
            return True
        if self.mode is GameMode.HUMAN_VS_ENGINE:
            return self.engine.current_player == self.player_colors["ai"]
        return False

    def think_delay(self) -> float:
        """Seconds a front end should wait before showing the AI move."""
        low, high = CONFIG.ui.think_delay
        return self.rng.uniform(low, high)

    def ai_turn(self) -> Optional[Move]:
        if not self.game_active or self.engine.game_over or not self.is_ai_turn():
            return None
        color = self.engine.current_player
        move = self.engine.get_ai_move(color, self.difficulty)
        if move is None or not self._play(*move.squares):
            logger.warning(f"controller.ai_turn no move played player={color.value}")
            return None
        return move

    # ── History ─────────────────────────────────────────────

    def undo_move(self) -> bool:
        if not self.undo_stack:
            return False
        self.redo_stack.append(self.engine.get_game_state())
        self._restore(self.undo_stack.pop())
        return True

    def redo_move(self) -> bool:
        if not self.redo_stack:
            return False
        self.undo_stack.append(self.engine.get_game_state())
        self._restore(self.redo_stack.pop())
        return True

    def _restore(self, state: Dict[str, Any]):
        # board orientation is a view setting, not part of the history
        flipped = self.engine.is_flipped
        self.engine.load_game_state(state)
        if self.engine.is_flipped != flipped:
            self.engine.toggle_flip()
        self.clear_selection()

    # ── View ────────────────────────────────────────────────

    def flip_board(self) -> bool:
        return self.engine.toggle_flip()

    def swap_sides(self):
        """Swap roles: the human takes over the other color, pieces stay put."""
        self.engine.current_player = self.engine.current_player.opponent
        self.player_colors = {
            "human": self.player_colors["ai"],
            "ai": self.player_colors["human"],
        }
        self.clear_selection()
        logger.debug(f"controller.swap_sides human={self.player_colors['human'].value}")

    def status(self) -> Dict[str, Any]:
        player = self.engine.current_player
        limit = self.engine.move_limit
        if self.engine.game_over:
            winner = self.engine.winner
            message = f"{winner.label} wins" if winner else "Draw"
        else:
            message = f"{player.label} to move"
        return {
            "currentPlayer": player.value,
            "moveCounter": f"{self.engine.move_count[player]}/{limit}",
            "message": message,
            "gameOver": self.engine.game_over,
            "materialTotals": {c.value: n for c, n in self.engine.get_material_totals().items()},
        }

    # ── Persistence ─────────────────────────────────────────

    def save_current_game(self, store: GameStore) -> StoreResult:
        result = store.save(
            self.engine.get_game_state(),
            game_mode=self.mode.value,
            difficulty=self.difficulty,
            player_colors={k: v.value for k, v in self.player_colors.items()},
            game_id=self.game_id,
        )
        if result.success:
            self.game_id = result.gameId
        return result

    def load_game(self, store: GameStore, game_id: str) -> StoreResult:
        result = store.load(game_id)
        if not result.success:
            return result
        doc = result.gameData
        try:
            mode = GameMode(doc.gameMode) if doc.gameMode else self.mode
            colors = {k: Color(v) for k, v in doc.playerColors.items()}
            if set(colors) != {"human", "ai"}:
                raise ValueError(f"playerColors needs 'human' and 'ai', got {sorted(colors)}")
            self.engine.load_game_state(doc.gameState.model_dump())
        except (KeyError, ValueError) as e:
            logger.error(f"controller.load_game rejected game_id={game_id} error={e}")
            return StoreResult(success=False, error=str(e))
        self.mode = mode
        self.difficulty = doc.difficulty
        self.player_colors = colors
        self.undo_stack.clear()
        self.redo_stack.clear()
        self.clear_selection()
        self.game_id = doc.gameId
        self.game_active = True
        return result
