# src/kubegate/core/config.py

import logging
import os

from dotenv import load_dotenv

# Load environment variables from a .env file located in the project root
dotenv_path = os.path.join(os.path.dirname(__file__), "..", "..", "..", ".env")
load_dotenv(dotenv_path=dotenv_path)


def _as_bool(value: str) -> bool:
    return str(value).lower() in ("true", "1", "t", "y", "yes")


class Config:
    """
    Handles the application's configuration by loading values from environment variables.
    """

    SECRETS_DIR = "/etc/kubegate/secrets"

    def __init__(self):
        # --- Prism Central credentials ---
        self.PRISM_USERNAME = self._get_secret("PRISM_USERNAME")
        self.PRISM_PASSWORD = self._get_secret("PRISM_PASSWORD")

    @classmethod
    def _get_secret(cls, key: str, default: str = None) -> str:
        """
        Retrieves a secret from a file (mounted secret volume) or falls back to environment variable.

        Raises:
            PermissionError: If the secret file exists but cannot be read due to permissions.
            IOError: If the secret file exists but cannot be read due to I/O errors.
        """
        secret_file = f"{cls.SECRETS_DIR}/{key}"
        if os.path.exists(secret_file):
            try:
                with open(secret_file, "r") as f:
                    value = f.read().strip()
                    logging.getLogger(__name__).debug(f"Loaded secret '{key}' from {secret_file}")
                    return value
            except PermissionError as e:
                raise PermissionError(
                    f"Secret file '{secret_file}' exists but cannot be read due to permission denied. "
                    f"Please check file permissions or run with appropriate privileges."
                ) from e
            except (IOError, OSError) as e:
                raise IOError(
                    f"Secret file '{secret_file}' exists but cannot be read: {e}. "
                    f"Please check the file integrity and system resources."
                ) from e
        return os.getenv(key, default)

    # --- Prism Central connection ---
    # Resolved at access time so the CLI picks up values exported after import.
    @property
    def PRISM_HOST(self) -> str:
        return os.getenv("PRISM_HOST", "")

    @property
    def PRISM_PORT(self) -> int:
        return int(os.getenv("PRISM_PORT", "9440"))

    @property
    def PRISM_INSECURE(self) -> bool:
        return _as_bool(os.getenv("PRISM_INSECURE", "False"))

    # --- HTTP client variables ---
    HTTP_TIMEOUT_CONNECT = float(os.getenv("HTTP_TIMEOUT_CONNECT", "5"))
    HTTP_TIMEOUT_READ = float(os.getenv("HTTP_TIMEOUT_READ", "30"))
    USER_AGENT = os.getenv("USER_AGENT", "kubegate")
    PRISM_LIST_PAGE_LENGTH = int(os.getenv("PRISM_LIST_PAGE_LENGTH", "100"))

    # --- Logging variables ---
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # --- Quota thresholds (percent of the project limit) ---
    QUOTA_WARNING_THRESHOLD = float(os.getenv("QUOTA_WARNING_THRESHOLD", "80"))
    QUOTA_CRITICAL_THRESHOLD = float(os.getenv("QUOTA_CRITICAL_THRESHOLD", "95"))

    # --- Validation execution ---
    VALIDATION_MAX_WORKERS = int(os.getenv("VALIDATION_MAX_WORKERS", "1"))

    def validate_instance(self):
        if not 0 <= self.QUOTA_WARNING_THRESHOLD <= 100 or not 0 <= self.QUOTA_CRITICAL_THRESHOLD <= 100:
            raise ValueError("QUOTA_WARNING_THRESHOLD and QUOTA_CRITICAL_THRESHOLD must be between 0 and 100.")
        if self.QUOTA_WARNING_THRESHOLD > self.QUOTA_CRITICAL_THRESHOLD:
            raise ValueError("QUOTA_WARNING_THRESHOLD must not be greater than QUOTA_CRITICAL_THRESHOLD.")
        if self.VALIDATION_MAX_WORKERS < 1:
            raise ValueError("VALIDATION_MAX_WORKERS must be at least 1.")
        if not self.PRISM_HOST:
            logging.getLogger(__name__).debug("PRISM_HOST is not set.")


# Instantiate the config to be imported by other modules
config = Config()
config.validate_instance()
