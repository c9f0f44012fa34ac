from __future__ import annotations

from fastapi import FastAPI

from . import moviesAPI
from .configAPI import router as config_router
from .moviesAPI import router as movies_router

__all__ = [
    "config_router",
    "movies_router",
    "register",
]

def register(app: FastAPI) -> None:
    app.include_router(config_router)
    moviesAPI.register(app)
