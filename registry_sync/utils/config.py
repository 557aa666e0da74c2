"""
Configuration management with environment variables.

Settings for registry synchronization runs: registry address and
credentials, the extra-lesson policy, retry limits and output locations.
"""

import os
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse
from dotenv import load_dotenv


class SecureString:
    """
    Wrapper for sensitive strings that prevents accidental exposure.

    This class wraps sensitive data (like passwords) to prevent
    accidental logging or printing; the registry password is always
    held in one.

    Examples:
        >>> password = SecureString("secret123")
        >>> str(password)  # Returns "********"
        >>> password.get_value()  # Returns actual value
    """

    def __init__(self, value: str):
        """
        Initialize SecureString with sensitive value.

        Args:
            value: Sensitive string to protect
        """
        self._value = value

    def get_value(self) -> str:
        """
        Get the actual value (use with caution).

        Returns:
            The actual sensitive string value

        Warning:
            This exposes the sensitive value. Use only when necessary
            (e.g., for authentication) and never log the result.
        """
        return self._value

    def __str__(self) -> str:
        """Return masked string representation."""
        return "********"

    def __repr__(self) -> str:
        """Return masked repr."""
        return "SecureString(********)"

    def __eq__(self, other) -> bool:
        """Compare SecureString values."""
        if isinstance(other, SecureString):
            return self._value == other._value
        return False


class Config:
    """
    Application configuration manager.

    Loads configuration from environment variables (and a .env file) and
    provides validated access to configuration values.

    Attributes:
        registry_base_url: Base URL of the online registry
        registry_username: Registry login name
        registry_password: Registry login password
        lesson_duration: Lesson length in minutes
        extra_lesson_action: "leave_alone" or "delete"
        apply_max_retries: Attempts per registry request
        circuit_breaker_threshold: Consecutive failures before giving up
        output_dir: Output directory for reports and logs
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Examples:
        >>> config = Config()
        >>> if config.validate():
        ...     print(f"Registry: {config.registry_base_url}")
    """

    DEFAULT_REGISTRY_URL = "http://crd.usm.md/studregistry/"
    EXTRA_LESSON_ACTIONS = ["leave_alone", "delete"]

    @staticmethod
    def _validate_url(url: str, name: str) -> str:
        """
        Validate URL format and scheme.

        Args:
            url: URL to validate
            name: Variable name for error message

        Returns:
            Validated URL

        Raises:
            ValueError: If URL is invalid
        """
        try:
            parsed = urlparse(url)

            if not parsed.scheme:
                raise ValueError(f"{name} must include URL scheme (http/https)")

            if parsed.scheme not in ['http', 'https']:
                raise ValueError(f"{name} must use http or https scheme, got: {parsed.scheme}")

            if not parsed.netloc:
                raise ValueError(f"{name} must have a valid domain")

            return url

        except Exception as e:
            if isinstance(e, ValueError):
                raise
            raise ValueError(f"Invalid {name}: {url} - {e}")

    @staticmethod
    def _int_env(name: str, default: str) -> int:
        value = os.getenv(name, default)
        try:
            return int(value)
        except ValueError:
            raise ValueError(f"{name} must be an integer, got: {value}")

    def __init__(self):
        """Initialize configuration by loading environment variables."""
        load_dotenv()

        url = os.getenv("REGISTRY_BASE_URL", self.DEFAULT_REGISTRY_URL)
        self._registry_base_url = self._validate_url(url, "REGISTRY_BASE_URL")

        self._registry_username = os.getenv("REGISTRY_USERNAME")

        # Wrap password in SecureString for protection
        pwd = os.getenv("REGISTRY_PASSWORD")
        self._registry_password = SecureString(pwd) if pwd else None

        # Synchronization settings
        self._lesson_duration = self._int_env("LESSON_DURATION_MINUTES", "90")
        self._extra_lesson_action = os.getenv("EXTRA_LESSON_ACTION", "leave_alone").lower()
        self._apply_max_retries = self._int_env("APPLY_MAX_RETRIES", "3")
        self._circuit_breaker_threshold = self._int_env("CIRCUIT_BREAKER_THRESHOLD", "3")

        # Output settings
        self._output_dir = Path(os.getenv("OUTPUT_DIR", "output"))
        self._log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def registry_base_url(self) -> str:
        """Get registry base URL."""
        return self._registry_base_url

    @property
    def registry_username(self) -> Optional[str]:
        """Get registry login name (None for dry runs)."""
        return self._registry_username

    @property
    def registry_password(self) -> Optional[SecureString]:
        """
        Get registry login password (wrapped in SecureString).

        Returns:
            SecureString wrapper containing password, or None if not set

        Warning:
            Use get_value() to extract the actual password only when needed
            for authentication. Never log the result.
        """
        return self._registry_password

    @property
    def lesson_duration(self) -> int:
        """Get lesson duration in minutes."""
        return self._lesson_duration

    @property
    def extra_lesson_action(self) -> str:
        return self._extra_lesson_action

    @property
    def apply_max_retries(self) -> int:
        return self._apply_max_retries

    @property
    def circuit_breaker_threshold(self) -> int:
        return self._circuit_breaker_threshold

    @property
    def output_dir(self) -> Path:
        """Get output directory path."""
        return self._output_dir

    @property
    def log_level(self) -> str:
        """Get logging level."""
        return self._log_level

    def validate(self) -> bool:
        """
        Validate configuration values.

        Returns:
            True if all configuration is valid

        Raises:
            ValueError: If validation fails
        """
        errors = []

        if self._registry_password and not self._registry_username:
            errors.append("REGISTRY_USERNAME is required when REGISTRY_PASSWORD is set")

        if self._lesson_duration <= 0:
            errors.append("LESSON_DURATION_MINUTES must be positive")

        if self._extra_lesson_action not in self.EXTRA_LESSON_ACTIONS:
            errors.append(
                f"EXTRA_LESSON_ACTION must be one of: {', '.join(self.EXTRA_LESSON_ACTIONS)}"
            )

        if self._apply_max_retries < 1:
            errors.append("APPLY_MAX_RETRIES must be at least 1")

        if self._circuit_breaker_threshold < 1:
            errors.append("CIRCUIT_BREAKER_THRESHOLD must be at least 1")

        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self._log_level not in valid_levels:
            errors.append(
                f"LOG_LEVEL must be one of: {', '.join(valid_levels)}"
            )

        if errors:
            error_msg = "Configuration validation failed:\n  - " + "\n  - ".join(errors)
            raise ValueError(error_msg)

        return True

    def create_output_directories(self, output_dir: Optional[Path] = None):
        """
        Create the logs/ and reports/ directories if they don't exist.

        Args:
            output_dir: Base directory (default: the configured output_dir)
        """
        base = output_dir or self.output_dir
        directories = [
            base / "logs",
            base / "reports",
        ]

        for directory in directories:
            directory.mkdir(parents=True, exist_ok=True)


# Singleton instance
config = Config()
