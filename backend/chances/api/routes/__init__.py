# API Routes Module
from chances.api.routes import chances

__all__ = [
    "chances",
]
