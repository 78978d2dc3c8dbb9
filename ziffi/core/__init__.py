"""Core rules components: pieces, board, move generation, evaluator and search."""

from .board import Board
from .evaluator import Evaluator
from .movegen import Move, MoveKind
from .pieces import Color, Piece, PieceKind
from .search import Difficulty, SearchEngine
