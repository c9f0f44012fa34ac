# services/__init__.py
from __future__ import annotations

from . import movies, statistics

__all__ = [
    "movies",
    "statistics",
]
