from __future__ import annotations

from .api import ClientError, MoviesClient
from .state import WatchlistState

__all__ = ["ClientError", "MoviesClient", "WatchlistState"]
