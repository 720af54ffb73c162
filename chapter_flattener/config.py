"""Configuration management for the Chapter Flattener.

This module handles loading and validating run configuration from
environment variables and .env files, with environment variables taking
precedence. Command-line flags are applied on top by the CLI.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from dotenv import load_dotenv


FLATTEN = "flatten"
REVERT = "revert"

VALID_MODES = [FLATTEN, REVERT]

# Filename contract shared with the cataloging tool and the audio splitter
CHAPTERS_SUFFIX = "-chapters.json"
BACKUP_SUFFIX = ".bak"


class ConfigurationError(Exception):
    """Raised when configuration is invalid or incomplete."""
    pass


@dataclass
class Config:
    """Configuration for one Chapter Flattener run.

    Attributes:
        mode: What to do: "flatten" or "revert"
        backup_enabled: Whether to copy each chapters file to a .bak file
            before flattening it
        working_dir: Directory scanned for chapters and backup files
    """
    mode: str = FLATTEN
    backup_enabled: bool = True
    working_dir: str = "."

    @classmethod
    def load(cls, env_file: str = ".env") -> "Config":
        """Load configuration from .env file and environment variables.

        Environment variables take precedence over .env file values.

        Args:
            env_file: Path to the .env file (default: ".env")

        Returns:
            Config: Loaded and validated configuration

        Raises:
            ConfigurationError: If configuration is invalid
        """
        # Load .env file if it exists (doesn't override existing env vars)
        env_path = Path(env_file)
        if env_path.exists():
            load_dotenv(env_path)

        working_dir = os.getenv("CHAPTERS_DIR", ".")
        backup_str = os.getenv("CHAPTERS_BACKUP", "true").lower()

        backup_enabled = backup_str in ("true", "1", "yes", "on")

        config = cls(
            mode=FLATTEN,
            backup_enabled=backup_enabled,
            working_dir=working_dir
        )

        config.validate()

        return config

    def validate(self) -> None:
        """Validate the configuration.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        errors = []

        if self.mode not in VALID_MODES:
            errors.append(f"Invalid mode: must be one of {VALID_MODES}")

        if not self.working_dir or not self.working_dir.strip():
            errors.append("Invalid CHAPTERS_DIR: directory cannot be empty")
        elif not Path(self.working_dir).is_dir():
            errors.append(f"Invalid CHAPTERS_DIR: not a directory: {self.working_dir}")

        if errors:
            error_message = "Configuration validation failed:\n"
            for error in errors:
                error_message += f"  - {error}\n"
            error_message += "\nSet via environment variable or .env file"
            raise ConfigurationError(error_message)
