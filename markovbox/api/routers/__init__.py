"""
API Routers Package
"""

from . import markov_router

__all__ = [
    "markov_router",
]
