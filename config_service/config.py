"""
Config service configuration.
"""

import os
from dataclasses import dataclass

from shared.repository.resolver import GITHUB_URL


@dataclass
class ConfigServiceConfig:
    """Configuration for the repository configuration API."""
    # Service settings
    host: str = "0.0.0.0"
    port: int = 8081

    # Check-out behaviour
    default_branch: str = "master"
    github_url: str = GITHUB_URL
    verify_repository: bool = True
    verify_timeout_seconds: float = 10

    # Logging
    log_level: str = "INFO"
    json_logs: bool = True

    @classmethod
    def from_env(cls) -> "ConfigServiceConfig":
        """Load configuration from environment variables."""
        return cls(
            host=os.getenv("CONFIG_SERVICE_HOST", "0.0.0.0"),
            port=int(os.getenv("CONFIG_SERVICE_PORT", "8081")),
            default_branch=os.getenv("DEFAULT_BRANCH", "master"),
            github_url=os.getenv("GITHUB_URL", GITHUB_URL),
            verify_repository=os.getenv("VERIFY_REPOSITORY", "true").lower() == "true",
            verify_timeout_seconds=float(os.getenv("VERIFY_TIMEOUT", "10")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            json_logs=os.getenv("LOG_JSON", "true").lower() == "true",
        )
