"""
WebSocket server and event handling for Deathwick tables.
"""

from .server import app

__all__ = ["app"]
