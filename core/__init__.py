"""
Core Module
"""

from .engine import MemeCoinEngine, EngineState

__all__ = [
    'MemeCoinEngine',
    'EngineState'
]
