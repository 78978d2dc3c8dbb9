"""FastAPI REST interface for a Ziffi Chess session."""

import threading

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field
from typing import Optional

from ziffi.config import CONFIG
from ziffi.controller import GameController, GameMode
from ziffi.notation import to_fen
from ziffi.storage import GameStore

app = FastAPI(title=CONFIG.ui.engine_name, version="1.0.0")

# Shared session; every request mutates it under the lock.
controller = GameController()
controller.start_game()
store = GameStore()
_lock = threading.Lock()


class ModeRequest(BaseModel):
    mode: GameMode


class DifficultyRequest(BaseModel):
    difficulty: int = Field(ge=0, le=5)


class MoveRequest(BaseModel):
    fromRow: int = Field(ge=0, le=7)
    fromCol: int = Field(ge=0, le=7)
    toRow: int = Field(ge=0, le=7)
    toCol: int = Field(ge=0, le=7)
    promotion: Optional[str] = None


def _state():
    engine = controller.engine
    state = engine.get_game_state()
    state["fen"] = to_fen(engine.board, engine.current_player, engine.move_count[engine.current_player] + 1)
    state["mode"] = controller.mode.value
    state["difficulty"] = controller.difficulty
    state["playerColors"] = {k: v.value for k, v in controller.player_colors.items()}
    state["status"] = controller.status()
    return state


@app.get("/state")
def get_state():
    with _lock:
        return _state()


@app.post("/reset")
def reset_game():
    with _lock:
        controller.start_game()
        return _state()


@app.post("/mode")
def set_mode(req: ModeRequest):
    with _lock:
        controller.start_game(req.mode)
        return _state()


@app.post("/difficulty")
def set_difficulty(req: DifficultyRequest):
    with _lock:
        controller.set_difficulty(req.difficulty)
        return {"difficulty": controller.difficulty}


@app.get("/moves/{row}/{col}")
def get_moves(row: int, col: int):
    with _lock:
        if not controller.engine.board.in_bounds(row, col):
            raise HTTPException(status_code=400, detail=f"Square out of range: ({row}, {col})")
        return {"moves": [m.to_dict() for m in controller.engine.generate_valid_moves(row, col)]}


@app.post("/move")
def make_move(req: MoveRequest):
    with _lock:
        if not controller.attempt_move(req.fromRow, req.fromCol, req.toRow, req.toCol, req.promotion):
            raise HTTPException(
                status_code=400,
                detail=f"Illegal move: ({req.fromRow},{req.fromCol})->({req.toRow},{req.toCol})",
            )
        return _state()


@app.post("/undo")
def undo_move():
    with _lock:
        if not controller.undo_move():
            raise HTTPException(status_code=400, detail="Nothing to undo")
        return _state()


@app.post("/redo")
def redo_move():
    with _lock:
        if not controller.redo_move():
            raise HTTPException(status_code=400, detail="Nothing to redo")
        return _state()


@app.post("/flip")
def flip_board():
    with _lock:
        controller.flip_board()
        return _state()


@app.post("/swap-roles")
def swap_roles():
    with _lock:
        controller.swap_sides()
        return _state()


@app.post("/swap-sides")
def swap_sides():
    with _lock:
        controller.engine.swap_sides()
        return _state()


@app.post("/ai-move")
def ai_move():
    with _lock:
        if controller.game_over:
            raise HTTPException(status_code=400, detail="Game is already over")
        if not controller.is_ai_turn():
            raise HTTPException(status_code=400, detail="Not the engine's turn")
        move = controller.ai_turn()
        if move is None:
            raise HTTPException(status_code=400, detail="No move available")
        return {"move": move.to_dict(), "state": _state()}


@app.post("/save")
def save_game():
    with _lock:
        result = controller.save_current_game(store)
        if not result.success:
            raise HTTPException(status_code=500, detail=result.error)
        return result.as_dict()


@app.post("/load/{game_id}")
def load_game(game_id: str):
    with _lock:
        result = controller.load_game(store, game_id)
        if not result.success:
            status = 404 if result.error == "Game not found" else 400
            raise HTTPException(status_code=status, detail=result.error)
        return _state()
