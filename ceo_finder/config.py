"""
Configuration module with validation and environment overrides.

Settings are read from the process environment (and a ``.env`` file when
present). Every numeric setting is range-checked; out-of-range values are
clamped and logged rather than rejected.
"""

import os
import logging
import multiprocessing
from typing import Dict, List, Any, Optional, Tuple

from dotenv import load_dotenv

# Initialize logger
log = logging.getLogger(__name__)

# Load environment variables from .env file
load_dotenv()

DEFAULT_SITE_FILTERS = "linkedin.com"
KNOWN_BACKENDS = ("browser", "api")


class ConfigurationError(Exception):
    """Exception raised for configuration errors."""
    pass


class Config:
    """Runtime settings for a search run."""

    def __init__(self, env_file: Optional[str] = None):
        """
        Initialize configuration with default values and environment overrides.

        Args:
            env_file: Optional path to .env file to load
        """
        if env_file:
            load_dotenv(env_file, override=True)

        # Files
        self.input_file = os.getenv("INPUT_FILE", "input.txt")
        self.output_dir = os.getenv("OUTPUT_DIR", ".")

        # Query construction
        self.site_filters = self._parse_list("SITE_FILTERS", DEFAULT_SITE_FILTERS)
        self.search_year = os.getenv("SEARCH_YEAR", "2024").strip() or "2024"

        # Search backend
        self.search_backend = os.getenv("SEARCH_BACKEND", "browser").strip().lower()
        self.search_engine_url = os.getenv(
            "SEARCH_ENGINE_URL", "https://www.google.com/search?q="
        )

        # Worker processes and per-worker page concurrency
        self.max_workers = self._parse_int("MAX_WORKERS", 4, 1, 64)
        self.max_concurrent_pages = self._parse_int("MAX_CONCURRENT_PAGES", 16, 1, 64)
        # multiprocessing start method for workers; empty uses the platform default
        self.worker_start_method = os.getenv("WORKER_START_METHOD", "").strip().lower()

        # Browser settings
        self.headless = self._parse_bool("HEADLESS", True)
        self.navigation_timeout = self._parse_float("NAVIGATION_TIMEOUT", 30.0, 1.0, 300.0)

        # Retry of transient navigation failures (0 disables retries)
        self.search_max_retries = self._parse_int("SEARCH_MAX_RETRIES", 0, 0, 10)
        self.search_retry_backoff = self._parse_float("SEARCH_RETRY_BACKOFF", 2.0, 0.0, 60.0)

        # Merge policy for result buckets
        self.strict_merge = self._parse_bool("STRICT_MERGE", False)

        # Google Custom Search API backend
        self.api_key = os.getenv("GOOGLE_API_KEY", "")
        self.cx_id = os.getenv("GOOGLE_CX_ID", "")
        self.google_safe_interval = self._parse_float("GOOGLE_SAFE_INTERVAL", 0.8, 0.1, 10.0)
        self.google_max_retries = self._parse_int("GOOGLE_MAX_RETRIES", 5, 1, 10)

        # User agents rotated per browser context
        self.user_agents = [
            # Chrome Desktop (Windows 10)
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36",
            # Chrome Desktop (macOS)
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 13_4) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36",
            # Firefox Desktop (Windows 10)
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:124.0) "
            "Gecko/20100101 Firefox/124.0",
            # Edge Desktop (Windows 10)
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36 Edg/124.0.0.0",
        ]

    def _parse_int(self, env_var: str, default: int, min_val: int, max_val: int) -> int:
        """
        Parse an integer environment variable with range validation.

        Args:
            env_var: Environment variable name
            default: Default value if not set
            min_val: Minimum allowed value
            max_val: Maximum allowed value

        Returns:
            Parsed integer value
        """
        try:
            value = int(os.getenv(env_var, str(default)))
            if value < min_val:
                log.warning("%s value %d below minimum %d, using minimum", env_var, value, min_val)
                return min_val
            if value > max_val:
                log.warning("%s value %d above maximum %d, using maximum", env_var, value, max_val)
                return max_val
            return value
        except ValueError:
            log.warning("Invalid %s value, using default %d", env_var, default)
            return default

    def _parse_float(self, env_var: str, default: float, min_val: float, max_val: float) -> float:
        """Parse a float environment variable with range validation."""
        try:
            value = float(os.getenv(env_var, str(default)))
            if value < min_val:
                log.warning("%s value %f below minimum %f, using minimum", env_var, value, min_val)
                return min_val
            if value > max_val:
                log.warning("%s value %f above maximum %f, using maximum", env_var, value, max_val)
                return max_val
            return value
        except ValueError:
            log.warning("Invalid %s value, using default %f", env_var, default)
            return default

    def _parse_bool(self, env_var: str, default: bool) -> bool:
        value = os.getenv(env_var, "")
        if not value:
            return default
        return value.lower() in {"1", "true", "yes", "y", "on"}

    def _parse_list(self, env_var: str, default: str) -> Tuple[str, ...]:
        raw = os.getenv(env_var, default)
        return tuple(p.strip() for p in raw.split(",") if p.strip())

    def as_dict(self) -> Dict[str, Any]:
        """
        Return configuration as a dictionary.

        Returns:
            Dictionary of configuration values
        """
        return {k: v for k, v in self.__dict__.items() if not k.startswith('_')}

    def validate(self) -> List[str]:
        """
        Validate configuration and return a list of error messages.

        Returns:
            List of error messages, empty if valid
        """
        errors = []

        if self.search_backend not in KNOWN_BACKENDS:
            errors.append(f"SEARCH_BACKEND must be one of {', '.join(KNOWN_BACKENDS)}")

        if self.search_backend == "api":
            if not self.api_key:
                errors.append("GOOGLE_API_KEY is missing")
            if not self.cx_id:
                errors.append("GOOGLE_CX_ID is missing")

        if self.max_workers < 1:
            errors.append("MAX_WORKERS must be at least 1")

        if self.worker_start_method and self.worker_start_method not in multiprocessing.get_all_start_methods():
            errors.append(f"WORKER_START_METHOD {self.worker_start_method!r} is not available")

        if not self.site_filters:
            errors.append("SITE_FILTERS must name at least one site")

        return errors

    def validate_or_raise(self) -> None:
        """
        Validate configuration and raise an exception if invalid.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        errors = self.validate()
        if errors:
            error_msg = "Configuration errors: " + ", ".join(errors)
            log.error(error_msg)
            raise ConfigurationError(error_msg)

    def update_from_dict(self, config_dict: Dict[str, Any]) -> None:
        """
        Update configuration from a dictionary.

        Args:
            config_dict: Dictionary of configuration values
        """
        for key, value in config_dict.items():
            if hasattr(self, key):
                setattr(self, key, value)


# Create a global configuration instance
config = Config()
