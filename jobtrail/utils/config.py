"""
Configuration utilities.
"""
import os
from typing import Any, Optional
from dotenv import load_dotenv

ENV_PREFIX = "JOBTRAIL_"

DEFAULTS = {
    "storage_dir": "data/active",
    "backup_dir": "data/backups",
    "log_level": "INFO",
    "log_file": None,
    "notification_history": 20,
}


class Config:
    """Configuration manager backed by environment variables."""
    
    def __init__(self, env_file: Optional[str] = None):
        """Initialize configuration.
        
        Args:
            env_file: Optional path to a .env file loaded before reading values
        """
        if env_file:
            load_dotenv(env_file)

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value.
        
        Looks up ``JOBTRAIL_<KEY>`` in the environment, then the built-in
        defaults, then ``default``.
        """
        value = os.getenv(ENV_PREFIX + key.upper())
        if value is not None and value != "":
            return value
        if default is None:
            return DEFAULTS.get(key.lower())
        return default

    @property
    def storage_dir(self) -> str:
        return self.get("storage_dir")

    @property
    def backup_dir(self) -> str:
        return self.get("backup_dir")

    @property
    def log_level(self) -> str:
        return str(self.get("log_level")).upper()

    @property
    def log_file(self) -> Optional[str]:
        return self.get("log_file")

    @property
    def notification_history(self) -> int:
        try:
            size = int(self.get("notification_history"))
        except (TypeError, ValueError):
            return DEFAULTS["notification_history"]
        return size if size > 0 else DEFAULTS["notification_history"]
