# ziffi/config.py
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple
import os
import tomllib

from loguru import logger

# Material points used for terminal scoring and the static evaluator
PIECE_VALUES = {
    "PAWN": 1,
    "KNIGHT": 3,
    "BISHOP": 3,
    "ROOK": 5,
    "QUEEN": 9,
    "KING": 0,
}

@dataclass
class RulesConfig:
    move_limit: int = 6       # completed moves per side before scoring
    history_limit: int = 50   # controller undo/redo stack size

@dataclass
class SearchConfig:
    random_move_rate: float = 0.1      # tier 0: chance of a uniformly random move
    heuristic_noise: float = 0.2       # tier 0: jitter applied to heuristic scores
    capture_preference: float = 0.7    # tier 1: chance of picking a capture
    greedy_depth: int = 2              # tier 2 look-ahead
    minimax_depths: Dict[int, int] = field(default_factory=lambda: {3: 2, 4: 3, 5: 4})
    default_depth: int = 3             # unknown difficulty levels
    seed: Optional[int] = None         # None means non-deterministic

@dataclass
class EvalConfig:
    piece_values: Dict[str, int] = field(default_factory=lambda: PIECE_VALUES.copy())
    center_bonus: float = 0.25
    check_bonus: float = 0.5
    noise_scale: float = 9.0           # heuristic noise is a fraction of this

@dataclass
class UIConfig:
    engine_name: str = "Ziffi Chess"
    api_port: int = 8000
    default_difficulty: int = 3
    think_delay: Tuple[float, float] = (0.5, 1.0)   # seconds

@dataclass
class StorageConfig:
    path: str = ".ziffi/saves"
    key_prefix: str = "ziffi_chess_game_"

@dataclass
class Config:
    rules: RulesConfig = field(default_factory=RulesConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    eval: EvalConfig = field(default_factory=EvalConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    log_level: str = "INFO"

    @staticmethod
    def load_from_toml(path: str = "config.toml") -> "Config":
        cfg = Config()
        if not os.path.exists(path):
            return cfg
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        for section in ("rules", "search", "eval", "ui", "storage"):
            target = getattr(cfg, section)
            for k, v in raw.get(section, {}).items():
                if hasattr(target, k):
                    setattr(target, k, v)
                else:
                    logger.warning(f"config.load_from_toml unknown key {section}.{k}")
        # TOML tables have string keys
        cfg.search.minimax_depths = {int(k): int(v) for k, v in cfg.search.minimax_depths.items()}
        cfg.ui.think_delay = tuple(cfg.ui.think_delay)
        if "log_level" in raw:
            cfg.log_level = str(raw["log_level"]).upper()
        return cfg

# single globally importable config instance
CONFIG = Config.load_from_toml(os.environ.get("ZIFFI_CONFIG_TOML", "config.toml"))
# env overrides for quick debugging
if os.environ.get("ZIFFI_LOG_LEVEL"):
    CONFIG.log_level = os.environ["ZIFFI_LOG_LEVEL"].upper()
override_seed = os.environ.get("ZIFFI_SEARCH_SEED")
if override_seed:
    try:
        CONFIG.search.seed = int(override_seed)
    except ValueError:
        logger.warning(f"config ignoring non-integer ZIFFI_SEARCH_SEED={override_seed!r}")
