"""
Configuration management.
"""

import os
from dataclasses import dataclass, field
from typing import Optional


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass
class Config:
    """
    Application configuration.

    Loads from environment variables with sensible defaults.
    """

    # Server
    host: str = field(default_factory=lambda: os.getenv("HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    debug: bool = field(default_factory=lambda: _env_bool("DEBUG", "false"))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    # Data
    sales_data_path: Optional[str] = field(
        default_factory=lambda: os.getenv("SALES_DATA_PATH", "./data/sales_history.json")
    )

    # Comparable search
    source_timeout_seconds: float = field(
        default_factory=lambda: float(os.getenv("SOURCE_TIMEOUT_SECONDS", "8"))
    )
    portal_timeout_seconds: float = field(
        default_factory=lambda: float(os.getenv("PORTAL_TIMEOUT_SECONDS", "10"))
    )
    max_concurrent_sources: int = field(
        default_factory=lambda: int(os.getenv("MAX_CONCURRENT_SOURCES", "4"))
    )
    portal_search_enabled: bool = field(
        default_factory=lambda: _env_bool("PORTAL_SEARCH_ENABLED", "true")
    )

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.source_timeout_seconds <= 0:
            raise ValueError("source_timeout_seconds must be positive")
        if self.portal_timeout_seconds <= 0:
            raise ValueError("portal_timeout_seconds must be positive")
        if self.max_concurrent_sources < 1:
            raise ValueError("max_concurrent_sources must be at least 1")

    @classmethod
    def load(cls) -> "Config":
        """Load configuration from environment."""
        return cls()

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "host": self.host,
            "port": self.port,
            "debug": self.debug,
            "log_level": self.log_level,
            "sales_data_path": self.sales_data_path,
            "source_timeout_seconds": self.source_timeout_seconds,
            "portal_timeout_seconds": self.portal_timeout_seconds,
            "max_concurrent_sources": self.max_concurrent_sources,
            "portal_search_enabled": self.portal_search_enabled,
        }
