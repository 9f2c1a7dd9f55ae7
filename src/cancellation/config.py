"""
Cancellation Configuration

Centralized configuration for the cancellation subsystem.
All settings can be overridden via environment variables, falling back to
.env.local / .env at the project root.

Example:
    >>> from cancellation.config import config
    >>> print(config.STORE_BACKEND)
    file

    # Override via environment:
    >>> os.environ["CANCELLATION_STORE_BACKEND"] = "redis"
    >>> config = CancellationConfig()  # Reload
    >>> print(config.STORE_BACKEND)
    redis
"""
import os
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import dotenv_values

from cancellation.errors import ConfigurationError

PROJECT_ROOT = Path(__file__).parent.parent.parent

DEFAULT_DENIAL_CODES = "CANCELLATION_REJECTED,CANCELLATION_DENIED,CANCELLATION_NOT_ALLOWED"


def _load_env_files(project_root: Path = PROJECT_ROOT) -> Dict[str, Optional[str]]:
    """
    Read .env and .env.local from the project root.

    .env.local takes precedence over .env.
    """
    values: Dict[str, Optional[str]] = {}
    for env_path in [project_root / ".env", project_root / ".env.local"]:
        if env_path.exists():
            values.update(dotenv_values(env_path))
    return values


class CancellationConfig:
    """
    Central configuration for booking cancellation.

    Values are resolved on instantiation: process environment first,
    then .env.local / .env, then the defaults below.
    """

    def __init__(self, env_files: Optional[Dict[str, Optional[str]]] = None):
        self._file_values = _load_env_files() if env_files is None else env_files

        # ====================================================================
        # Bookings API
        # ====================================================================

        self.API_BASE_URL: str = self._get(
            "CANCELLATION_API_BASE_URL", "http://localhost:3000")
        """Base URL of the bookings backend"""

        self.API_TIMEOUT: float = self._get_float("CANCELLATION_API_TIMEOUT", "30.0")
        """Per-request transport timeout in seconds"""

        self.REQUESTED_BY: str = self._get("CANCELLATION_REQUESTED_BY", "student")
        """Role reported as requestedBy / cancelledBy"""

        self.DEFAULT_REASON: str = self._get(
            "CANCELLATION_DEFAULT_REASON", "User requested cancellation")
        """Reason used when the caller supplies none"""

        self.DENIAL_CODES: List[str] = [
            code.strip().upper()
            for code in self._get("CANCELLATION_DENIAL_CODES", DEFAULT_DENIAL_CODES).split(",")
            if code.strip()
        ]
        """Error codes in a response body that mark an explicit business denial"""

        self.SUPPORT_EMAIL: str = self._get(
            "CANCELLATION_SUPPORT_EMAIL", "support@staykaru.com")
        """Support address shown in remediation messages"""

        # ====================================================================
        # Intent Store
        # ====================================================================

        self.STORE_BACKEND: str = self._get("CANCELLATION_STORE_BACKEND", "file").lower()
        """Intent store backend: 'file', 'redis' or 'memory'"""

        self.STORE_PATH: str = os.path.expanduser(self._get(
            "CANCELLATION_STORE_PATH", "~/.staykaru/cancellation_requests.json"))
        """JSON file used by the file store"""

        self.REDIS_URL: Optional[str] = self._get("REDIS_URL", None)
        """Redis URL used by the redis store"""

        self.REDIS_KEY: str = self._get("CANCELLATION_REDIS_KEY", "cancellation_requests")
        """Redis hash holding one JSON document per intent"""

        # ====================================================================
        # Execution
        # ====================================================================

        self.EXECUTION_MODE: str = self._get(
            "CANCELLATION_EXECUTION_MODE", "production").lower()
        """'production' calls the bookings API, 'test' uses the scripted gateway"""

        # ====================================================================
        # Logging Settings
        # ====================================================================

        self.LOG_LEVEL: str = self._get("LOG_LEVEL", "INFO")
        """Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL"""

        self.LOG_FORMAT: str = self._get("LOG_FORMAT", "json")
        """Log format: 'json' (structured) or 'pretty' (readable)"""

        self.LOG_FILE: Optional[str] = self._get("LOG_FILE", None)
        """Optional: Write logs to file"""

    def _get(self, name: str, default: Optional[str]) -> Optional[str]:
        value = os.getenv(name)
        if value:
            return value
        value = self._file_values.get(name)
        if value:
            return value
        return default

    def _get_float(self, name: str, default: str) -> float:
        value = self._get(name, default)
        try:
            return float(value)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"{name} must be a number, got {value!r}") from e

    def to_dict(self) -> Dict[str, object]:
        """Settings as a dict (for debugging)."""
        return {k: v for k, v in vars(self).items() if k.isupper()}


config = CancellationConfig()
