"""
Configuration module for the JobPursuit MCP Server.

Provides centralized configuration management with support for:
- Environment variables
- Default values
- Path resolution
- Timezone selection for calendar arithmetic
- Logging configuration
"""

import logging
import os
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from utils.clock import Clock
from utils.recommendations import DEFAULT_FOLLOW_UP_AFTER_DAYS
from utils.staleness import DEFAULT_STALL_THRESHOLD_DAYS

# Load environment variables from .env file at repository root
_env_path = Path(__file__).resolve().parent / ".env"
load_dotenv(dotenv_path=_env_path)


def _parse_int(env_var: str, default: int) -> int:
    """Parse an integer from an environment variable, falling back on bad input."""
    value = os.getenv(env_var)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        logging.getLogger(__name__).warning(
            f"Ignoring non-integer {env_var}={value!r}; using {default}"
        )
        return default


class Config:
    """
    Configuration class for MCP server and engine settings.

    Supports configuration via environment variables (and .env file) with sensible defaults.
    All relative paths are resolved against the repository root.
    """

    def __init__(self):
        """Initialize configuration from environment variables and defaults."""
        self._repo_root = self._find_repo_root()

        # Database configuration
        self.db_path = self._resolve_db_path()

        # Logging configuration
        self.log_level = os.getenv("JOBPURSUIT_LOG_LEVEL", "INFO").upper()
        self.log_file = self._resolve_log_path()

        # Server configuration
        self.server_name = os.getenv("JOBPURSUIT_SERVER_NAME", "jobpursuit-mcp-server")

        # Calendar configuration (None means the host's local zone)
        self.timezone_name = os.getenv("JOBPURSUIT_TIMEZONE") or None

        # Workflow thresholds
        self.stall_threshold_days = _parse_int(
            "JOBPURSUIT_STALL_THRESHOLD_DAYS", DEFAULT_STALL_THRESHOLD_DAYS
        )
        self.follow_up_after_days = _parse_int(
            "JOBPURSUIT_FOLLOW_UP_AFTER_DAYS", DEFAULT_FOLLOW_UP_AFTER_DAYS
        )

    def _find_repo_root(self) -> Path:
        """config.py lives at the repository root."""
        return Path(__file__).resolve().parent

    def _resolve_db_path(self) -> Path:
        """
        Resolve the database path from environment or default.

        Resolution order:
        1. JOBPURSUIT_DB environment variable (absolute or relative)
        2. JOBPURSUIT_ROOT/data/jobpursuit.db
        3. Default: <repo_root>/data/jobpursuit.db

        Returns:
            Resolved absolute Path to database
        """
        db_env = os.getenv("JOBPURSUIT_DB")
        if db_env:
            db_path = Path(db_env)
            if db_path.is_absolute():
                return db_path
            return self._repo_root / db_path

        root_env = os.getenv("JOBPURSUIT_ROOT")
        if root_env:
            return Path(root_env) / "data" / "jobpursuit.db"

        return self._repo_root / "data" / "jobpursuit.db"

    def _resolve_log_path(self) -> Optional[Path]:
        """
        Resolve the log file path from environment.

        If JOBPURSUIT_LOG_FILE is set, logs will be written to that file.
        Otherwise, logs go to stderr only.
        """
        log_env = os.getenv("JOBPURSUIT_LOG_FILE")
        if not log_env:
            return None

        log_path = Path(log_env)
        if log_path.is_absolute():
            return log_path
        return self._repo_root / log_path

    def get_timezone(self) -> Optional[ZoneInfo]:
        """
        Resolve the configured IANA timezone.

        Returns:
            ZoneInfo for JOBPURSUIT_TIMEZONE, or None for the host's local zone
            (also when the name is unknown; ``validate`` reports that case)
        """
        if not self.timezone_name:
            return None
        try:
            return ZoneInfo(self.timezone_name)
        except (ZoneInfoNotFoundError, ValueError):
            return None

    def build_clock(self) -> Clock:
        """Clock bound to the configured timezone."""
        return Clock(self.get_timezone())

    def setup_logging(self):
        """
        Configure logging based on configuration settings.

        Sets up logging to stderr and optionally to a file.
        Log level is controlled by JOBPURSUIT_LOG_LEVEL.
        """
        numeric_level = getattr(logging, self.log_level, logging.INFO)

        formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
        )

        root_logger = logging.getLogger()
        root_logger.setLevel(numeric_level)

        # Remove existing handlers to avoid duplicates
        root_logger.handlers.clear()

        # stderr only: stdout carries the MCP stdio transport
        stderr_handler = logging.StreamHandler()
        stderr_handler.setLevel(numeric_level)
        stderr_handler.setFormatter(formatter)
        root_logger.addHandler(stderr_handler)

        if self.log_file:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(self.log_file)
            file_handler.setLevel(numeric_level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

            logging.info(f"Logging to file: {self.log_file}")

        logging.info(f"Log level set to: {self.log_level}")
        logging.info(f"Repository root: {self._repo_root}")
        logging.info(f"Database path: {self.db_path}")
        logging.info(f"Timezone: {self.timezone_name or 'system local'}")

    def get_db_path_str(self) -> str:
        """Database path as string for use in tool handlers."""
        return str(self.db_path)

    def validate(self) -> list[str]:
        """
        Validate configuration and return any warnings.

        Returns:
            List of warning messages (empty if all valid)
        """
        warnings = []

        if not self.db_path.exists():
            warnings.append(
                f"Database file not found: {self.db_path}. "
                "It will be created on first write."
            )

        if self.timezone_name and self.get_timezone() is None:
            warnings.append(
                f"Unknown timezone '{self.timezone_name}'; falling back to system local time."
            )

        if self.stall_threshold_days < 1:
            warnings.append(
                f"JOBPURSUIT_STALL_THRESHOLD_DAYS should be positive, got {self.stall_threshold_days}"
            )

        if self.follow_up_after_days < 0:
            warnings.append(
                f"JOBPURSUIT_FOLLOW_UP_AFTER_DAYS should not be negative, got {self.follow_up_after_days}"
            )

        if self.log_file:
            log_dir = self.log_file.parent
            if not log_dir.exists():
                try:
                    log_dir.mkdir(parents=True, exist_ok=True)
                except OSError as e:
                    warnings.append(f"Cannot create log directory {log_dir}: {e}")
            elif not os.access(log_dir, os.W_OK):
                warnings.append(f"Log directory not writable: {log_dir}")

        return warnings


# Global configuration instance
config = Config()


def get_config() -> Config:
    """Get the global configuration instance."""
    return config
