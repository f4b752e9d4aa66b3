"""
ChatBoard Configuration Module

Handles loading, validation, and management of configuration settings.
"""

import os
import sys
import logging
from dataclasses import dataclass, field, fields, asdict
from pathlib import Path
from typing import Any, Optional

# Use tomllib for Python 3.11+, tomli for earlier versions
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "CHATBOARD_CONFIG"
DEFAULT_CONFIG_PATH = Path("config.toml")


@dataclass
class BoardConfig:
    """Board general settings."""
    name: str = "ChatBoard"
    anonymous_username: str = "anonymous"


@dataclass
class DatabaseConfig:
    """Database settings."""
    path: str = "/tmp/chat_messages.db"
    busy_timeout_seconds: float = 5.0


@dataclass
class LimitsConfig:
    """Size and retention limits."""
    retention_limit: int = 200
    max_list_messages: int = 50
    max_message_bytes: int = 1024
    max_post_data_bytes: int = 4096
    max_username_length: int = 255


@dataclass
class NetworkConfig:
    """Client address resolution."""
    trust_proxy_header: bool = True
    proxy_header: str = "CF-Connecting-IP"


@dataclass
class WebConfig:
    """Development web server settings."""
    host: str = "127.0.0.1"
    port: int = 8080
    endpoint: str = "/cgi-bin/chat_handler"


@dataclass
class LoggingConfig:
    """Logging settings."""
    level: str = "INFO"
    file: str = ""
    max_size_mb: int = 10
    backup_count: int = 3


@dataclass
class Config:
    """Main configuration container."""
    board: BoardConfig = field(default_factory=BoardConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    limits: LimitsConfig = field(default_factory=LimitsConfig)
    network: NetworkConfig = field(default_factory=NetworkConfig)
    web: WebConfig = field(default_factory=WebConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors."""
        errors = []

        if not self.board.anonymous_username:
            errors.append("board.anonymous_username cannot be empty")

        if not self.database.path:
            errors.append("database.path cannot be empty")
        if self.database.busy_timeout_seconds <= 0:
            errors.append("database.busy_timeout_seconds must be positive")

        if self.limits.retention_limit < 1:
            errors.append("limits.retention_limit must be at least 1")
        if self.limits.max_list_messages < 1:
            errors.append("limits.max_list_messages must be at least 1")
        if self.limits.max_message_bytes < 1:
            errors.append("limits.max_message_bytes must be at least 1")
        if self.limits.max_post_data_bytes < self.limits.max_message_bytes:
            errors.append("limits.max_post_data_bytes must not be smaller than limits.max_message_bytes")

        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR"]
        if self.logging.level.upper() not in valid_levels:
            errors.append(f"logging.level must be one of: {valid_levels}")

        return errors

    def save(self, path: Path):
        """Save configuration to TOML file."""
        import toml  # For writing

        with open(path, "w") as f:
            toml.dump(self._to_dict(), f)

    def _to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary for serialization."""
        return asdict(self)


_SECTIONS = {
    "board": BoardConfig,
    "database": DatabaseConfig,
    "limits": LimitsConfig,
    "network": NetworkConfig,
    "web": WebConfig,
    "logging": LoggingConfig,
}


def load_config(path: Path) -> Config:
    """Load configuration from TOML file. Missing file yields defaults."""
    config = Config()

    if not path.exists():
        return config

    with open(path, "rb") as f:
        data = tomllib.load(f)

    # Map TOML sections to config dataclasses
    for section, cls in _SECTIONS.items():
        if section in data:
            known = {f.name for f in fields(cls)}
            values = data[section]
            for key in sorted(values.keys() - known):
                logger.warning(f"Ignoring unknown config key: {section}.{key}")
            setattr(config, section, cls(**{k: v for k, v in values.items() if k in known}))

    return config


def resolve_config_path(path: Optional[Path] = None) -> Path:
    """Explicit path, else $CHATBOARD_CONFIG, else ./config.toml."""
    if path is not None:
        return path
    env_path = os.environ.get(CONFIG_ENV_VAR)
    return Path(env_path) if env_path else DEFAULT_CONFIG_PATH


def create_default_config(path: Path):
    """Create a default configuration file."""
    Config().save(path)
