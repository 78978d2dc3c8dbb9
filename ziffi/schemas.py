"""Pydantic models for serialized game state, saved games and API payloads."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from ziffi.core.pieces import Piece

COLORS = ("w", "b")


def _check_code(code: Optional[str]) -> Optional[str]:
    if code:
        Piece.from_code(code)
    return code or None


def _check_move_count(v: dict[str, int]) -> dict[str, int]:
    if set(v) != set(COLORS):
        raise ValueError("moveCount needs exactly the keys 'w' and 'b'")
    if any(n < 0 for n in v.values()):
        raise ValueError("moveCount values must be non-negative")
    return v


class MoveRecordModel(BaseModel):
    fromRow: int = Field(ge=0, le=7)
    fromCol: int = Field(ge=0, le=7)
    toRow: int = Field(ge=0, le=7)
    toCol: int = Field(ge=0, le=7)
    movedPiece: str
    capturedPiece: Optional[str] = None
    currentPlayer: str = Field(pattern="^[wb]$")
    moveCount: dict[str, int]

    @field_validator("movedPiece")
    @classmethod
    def check_moved(cls, v: str) -> str:
        Piece.from_code(v)
        return v

    @field_validator("capturedPiece")
    @classmethod
    def check_captured(cls, v: Optional[str]) -> Optional[str]:
        return _check_code(v)

    @field_validator("moveCount")
    @classmethod
    def check_move_count(cls, v: dict[str, int]) -> dict[str, int]:
        return _check_move_count(v)


class GameStateModel(BaseModel):
    """Shape returned by Engine.get_game_state()."""

    board: list[list[Optional[str]]]
    currentPlayer: str = Field(pattern="^[wb]$")
    moveCount: dict[str, int]
    gameOver: bool = False
    winner: Optional[str] = Field(default=None, pattern="^[wb]$")
    moveHistory: list[MoveRecordModel] = Field(default_factory=list)
    isFlipped: bool = False
    capturedPieces: dict[str, list[str]] = Field(default_factory=lambda: {"w": [], "b": []})

    @field_validator("board")
    @classmethod
    def check_board(cls, v: list[list[Optional[str]]]) -> list[list[Optional[str]]]:
        if len(v) != 8 or any(len(row) != 8 for row in v):
            raise ValueError("board must be 8x8")
        return [[_check_code(c) for c in row] for row in v]

    @field_validator("moveCount")
    @classmethod
    def check_move_count(cls, v: dict[str, int]) -> dict[str, int]:
        return _check_move_count(v)

    @field_validator("capturedPieces")
    @classmethod
    def check_captured(cls, v: dict[str, list[str]]) -> dict[str, list[str]]:
        unknown = set(v) - set(COLORS)
        if unknown:
            raise ValueError(f"capturedPieces has unknown colors {sorted(unknown)}")
        for codes in v.values():
            for code in codes:
                Piece.from_code(code)
        return {c: list(v.get(c, [])) for c in COLORS}


class SavedGame(BaseModel):
    """One persisted game: state snapshot plus controller settings."""

    gameId: str
    gameState: GameStateModel
    gameMode: Optional[str] = None
    difficulty: int = Field(default=3, ge=0, le=5)
    playerColors: dict[str, str] = Field(default_factory=lambda: {"human": "w", "ai": "b"})
    createdAt: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    savedAt: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class StoreResult(BaseModel):
    success: bool
    gameId: Optional[str] = None
    gameData: Optional[SavedGame] = None
    error: Optional[str] = None

    def as_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)
