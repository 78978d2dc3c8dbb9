"""JSON file store for saved games, one document per game."""

import json
import random
import string
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from loguru import logger
from pydantic import ValidationError

from ziffi.config import CONFIG
from ziffi.schemas import GameStateModel, SavedGame, StoreResult

_BASE36 = string.digits + string.ascii_lowercase


def new_game_id(rng: Optional[random.Random] = None) -> str:
    """'ziffi_<epoch ms>_<9 base36 chars>'."""
    rng = rng or random.Random()
    suffix = "".join(rng.choice(_BASE36) for _ in range(9))
    return f"ziffi_{int(time.time() * 1000)}_{suffix}"


class GameStore:
    def __init__(self, path: Optional[str] = None, key_prefix: Optional[str] = None):
        self.path = Path(path or CONFIG.storage.path)
        self.key_prefix = key_prefix if key_prefix is not None else CONFIG.storage.key_prefix

    def key(self, game_id: str) -> str:
        return f"{self.key_prefix}{game_id}"

    def _file(self, game_id: str) -> Path:
        return self.path / f"{self.key(game_id)}.json"

    def save(self, game_state: Dict[str, Any], game_mode: Optional[str] = None,
             difficulty: int = 3, player_colors: Optional[Dict[str, str]] = None,
             game_id: Optional[str] = None) -> StoreResult:
        """Persist a snapshot; a known game_id keeps its original createdAt."""
        game_id = game_id or new_game_id()
        now = datetime.now(timezone.utc)
        try:
            created = now
            if self._file(game_id).exists():
                created = self._read(game_id).createdAt
            doc = SavedGame(
                gameId=game_id,
                gameState=GameStateModel.model_validate(game_state),
                gameMode=game_mode,
                difficulty=difficulty,
                playerColors=player_colors or {"human": "w", "ai": "b"},
                createdAt=created,
                savedAt=now,
            )
            self.path.mkdir(parents=True, exist_ok=True)
            self._file(game_id).write_text(doc.model_dump_json(indent=2), encoding="utf-8")
        except (OSError, ValueError) as e:
            logger.error(f"storage.save failed game_id={game_id} error={e}")
            return StoreResult(success=False, error=str(e))
        logger.info(f"storage.save game_id={game_id}")
        return StoreResult(success=True, gameId=game_id)

    def _read(self, game_id: str) -> SavedGame:
        return SavedGame.model_validate_json(self._file(game_id).read_text(encoding="utf-8"))

    def load(self, game_id: str) -> StoreResult:
        if not self._file(game_id).exists():
            logger.warning(f"storage.load not found game_id={game_id}")
            return StoreResult(success=False, error="Game not found")
        try:
            doc = self._read(game_id)
        except (OSError, ValidationError, json.JSONDecodeError) as e:
            logger.error(f"storage.load failed game_id={game_id} error={e}")
            return StoreResult(success=False, error=str(e))
        logger.info(f"storage.load game_id={game_id}")
        return StoreResult(success=True, gameData=doc)

    def list_games(self) -> List[str]:
        """Saved game ids, oldest file first."""
        if not self.path.is_dir():
            return []
        files = sorted(self.path.glob(f"{self.key_prefix}*.json"), key=lambda p: p.stat().st_mtime)
        return [p.stem[len(self.key_prefix):] for p in files]

    def delete(self, game_id: str) -> bool:
        try:
            self._file(game_id).unlink()
        except FileNotFoundError:
            return False
        logger.info(f"storage.delete game_id={game_id}")
        return True
