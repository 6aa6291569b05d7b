"""
Global Settings for the Meme-Coin Metrics Engine
Process-level settings read from the environment when asked for; engine tunables live in config_manager
"""

import os
from pathlib import Path
from typing import Optional


class Settings:
    """Global application settings"""

    # Application
    APP_NAME = "MemeDash Metrics Engine"
    APP_VERSION = "1.0.0"

    # Directories
    BASE_DIR = Path(__file__).parent.parent
    CONFIG_DIR = BASE_DIR / "config"

    @staticmethod
    def debug() -> bool:
        """DEBUG=true forces DEBUG logging regardless of LOG_LEVEL"""
        return os.getenv('DEBUG', 'false').lower() in ('1', 'true', 'yes')

    @classmethod
    def default_config_file(cls) -> Optional[Path]:
        """Explicit ENGINE_CONFIG_FILE, else config/engine.yaml when present"""
        explicit = os.getenv('ENGINE_CONFIG_FILE')
        if explicit:
            return Path(explicit)
        candidate = cls.CONFIG_DIR / "engine.yaml"
        return candidate if candidate.exists() else None
