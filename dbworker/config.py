"""Database configuration."""

import os
from pathlib import Path
from typing import Optional


class DatabaseConfig:
    """Database configuration settings."""

    # Default database path relative to the working directory
    DEFAULT_DB_PATH = "workspace/dbworker.db"
    DEFAULT_PROFILE = "default"

    @classmethod
    def get_db_path(cls) -> Path:
        """Get database path from environment or default."""
        env_path = os.environ.get("DBWORKER_DB_PATH")
        if env_path:
            return Path(env_path)
        return Path.cwd() / cls.DEFAULT_DB_PATH

    @classmethod
    def get_db_url(cls, profile: Optional[str] = None) -> str:
        """Resolve a connection profile to a SQLAlchemy database URL.

        Args:
            profile: A full URL, a profile name, or None for the default profile

        Returns:
            The database URL

        Raises:
            KeyError: If a named profile has no URL configured
        """
        if profile and "://" in profile:
            return profile

        if profile is None or profile == cls.DEFAULT_PROFILE:
            db_path = cls.get_db_path()
            # Ensure parent directory exists
            db_path.parent.mkdir(parents=True, exist_ok=True)
            return f"sqlite:///{db_path}"

        env_key = f"DBWORKER_{profile.upper().replace('-', '_')}_URL"
        url = os.environ.get(env_key)
        if not url:
            raise KeyError(f"No URL configured for profile '{profile}' (set {env_key})")
        return url

    @classmethod
    def is_echo_enabled(cls) -> bool:
        """Check if SQL statements should be echoed."""
        return os.environ.get("DBWORKER_SQL_ECHO", "0").lower() in ("1", "true", "yes")

    @classmethod
    def get_failure_policy_name(cls) -> str:
        """Get the configured failure policy name ('propagate' or 'legacy')."""
        return os.environ.get("DBWORKER_FAILURE_POLICY", "propagate").strip().lower()
