"""
Hash service configuration.
"""

import os
from dataclasses import dataclass

from shared.repository.resolver import RAW_CONTENT_HOST


@dataclass
class HashServiceConfig:
    """Configuration for the file-content and hashing API."""
    # Service settings
    host: str = "0.0.0.0"
    port: int = 8080

    # Configuration provider
    config_service_url: str = "http://init_api:8081"
    config_timeout_seconds: float = 10

    # Content host
    raw_content_host: str = RAW_CONTENT_HOST
    fetch_timeout_seconds: float = 30

    # Cancel pending fetches once one file has failed
    cancel_on_failure: bool = False

    # Logging
    log_level: str = "INFO"
    json_logs: bool = True

    @classmethod
    def from_env(cls) -> "HashServiceConfig":
        """Load configuration from environment variables."""
        return cls(
            host=os.getenv("HASH_SERVICE_HOST", "0.0.0.0"),
            port=int(os.getenv("HASH_SERVICE_PORT", "8080")),
            config_service_url=os.getenv("CONFIG_SERVICE_URL", "http://init_api:8081"),
            config_timeout_seconds=float(os.getenv("CONFIG_SERVICE_TIMEOUT", "10")),
            raw_content_host=os.getenv("RAW_CONTENT_HOST", RAW_CONTENT_HOST),
            fetch_timeout_seconds=float(os.getenv("FETCH_TIMEOUT", "30")),
            cancel_on_failure=os.getenv("HASH_CANCEL_ON_FAILURE", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            json_logs=os.getenv("LOG_JSON", "true").lower() == "true",
        )
