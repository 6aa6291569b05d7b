"""
Typed Exception Classes for the Meme-Coin Metrics Engine

This module provides specific exception types so that every layer can decide
whether a failure drops a single coin, empties a page, or falls back to
synthetic data.
"""

from typing import Optional


class EngineError(Exception):
    """Base exception for all engine errors"""
    pass


# ============================================================================
# Network & API Exceptions
# ============================================================================

class UpstreamError(EngineError):
    """Network/HTTP failure after retries were exhausted"""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class RateLimitedError(EngineError):
    """Upstream source call budget exhausted for the current window"""

    def __init__(self, source: str):
        super().__init__(f"Rate limit reached for source '{source}'")
        self.source = source


# ============================================================================
# Configuration & Validation Exceptions
# ============================================================================

class ConfigurationError(EngineError):
    """Configuration validation errors"""
    pass


class ValidationError(EngineError):
    """Malformed or unserializable intermediate record"""
    pass
