"""Ziffi Chess: a short-form chess variant scored on material after six moves a side."""

from .main import Engine

__version__ = "1.0.0"
