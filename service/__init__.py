"""Odds service package: wraps the engine with a WebSocket JSON protocol."""

from .server import OddsServer

__all__ = ["OddsServer"]
