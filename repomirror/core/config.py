"""
Configuration management for repomirror.

Provides centralized configuration for mirroring and the hosted
services with sensible defaults.
"""

import os
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


@dataclass
class MirrorConfig:
    """Configuration for local mirrors and git invocation."""

    # Root directory holding <host>/<owner>/<name> mirrors
    mirror_dir: str = "./data/mirrors"

    # Git executable to invoke
    git_executable: str = "git"

    # Ref used when a manifest is read without a tag
    default_branch: str = "master"

    # Marker that identifies package manifest files
    manifest_suffix: str = ".jquery.json"

    # Permission mode for created mirror parent directories
    dir_mode: int = 0o755


@dataclass
class BitbucketConfig:
    """URL bases for the Bitbucket service."""

    site_base: str = "http://bitbucket.org"
    git_base: str = "git://bitbucket.org"


@dataclass
class AppConfig:
    """Master configuration combining all sections."""

    mirror: MirrorConfig = field(default_factory=MirrorConfig)
    bitbucket: BitbucketConfig = field(default_factory=BitbucketConfig)

    # Enable verbose logging
    verbose: bool = False


class Config:
    """
    Central configuration manager providing access to all settings.

    Supports loading from environment variables and configuration files.
    """

    _instance: Optional["Config"] = None
    _config: AppConfig = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._config = AppConfig()
        return cls._instance

    @classmethod
    def get(cls) -> AppConfig:
        """Get the current configuration."""
        if cls._instance is None:
            cls()
        return cls._instance._config

    @classmethod
    def reset(cls) -> None:
        """Restore the default configuration (mainly for testing)."""
        cls()._config = AppConfig()

    @classmethod
    def load_from_file(cls, config_path: str) -> AppConfig:
        """
        Load configuration from a JSON file.

        Args:
            config_path: Path to the configuration file.

        Returns:
            Loaded AppConfig instance.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, "r") as f:
            data = json.load(f)

        instance = cls()
        instance._config = cls._dict_to_config(data)
        return instance._config

    @classmethod
    def load_from_env(cls, dotenv_path: Optional[str] = None) -> AppConfig:
        """
        Load configuration from environment variables.

        Variables are prefixed with REPOMIRROR_. A .env file is read first
        without overriding variables that are already set.

        Returns:
            AppConfig with environment overrides applied.
        """
        load_dotenv(dotenv_path)

        instance = cls()
        config = instance._config

        if os.getenv("REPOMIRROR_MIRROR_DIR"):
            config.mirror.mirror_dir = os.getenv("REPOMIRROR_MIRROR_DIR")

        if os.getenv("REPOMIRROR_GIT"):
            config.mirror.git_executable = os.getenv("REPOMIRROR_GIT")

        if os.getenv("REPOMIRROR_DEFAULT_BRANCH"):
            config.mirror.default_branch = os.getenv("REPOMIRROR_DEFAULT_BRANCH")

        if os.getenv("REPOMIRROR_MANIFEST_SUFFIX"):
            config.mirror.manifest_suffix = os.getenv("REPOMIRROR_MANIFEST_SUFFIX")

        if os.getenv("REPOMIRROR_VERBOSE"):
            config.verbose = os.getenv("REPOMIRROR_VERBOSE").lower() in ("true", "1", "yes")

        return config

    @staticmethod
    def _dict_to_config(data: dict) -> AppConfig:
        """Convert a dictionary to AppConfig."""
        config = AppConfig()

        if "mirror" in data:
            mirror_data = dict(data["mirror"])
            if isinstance(mirror_data.get("dir_mode"), str):
                mirror_data["dir_mode"] = int(mirror_data["dir_mode"], 8)
            config.mirror = MirrorConfig(**mirror_data)

        if "bitbucket" in data:
            config.bitbucket = BitbucketConfig(**data["bitbucket"])

        if "verbose" in data:
            config.verbose = data["verbose"]

        return config

    @classmethod
    def save_to_file(cls, config_path: str) -> None:
        """
        Save current configuration to a JSON file.

        Args:
            config_path: Path to save the configuration file.
        """
        config_path = Path(config_path)
        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = cls._config_to_dict(cls.get())

        with open(config_path, "w") as f:
            json.dump(data, f, indent=2)

    @staticmethod
    def _config_to_dict(config: AppConfig) -> dict:
        """Convert AppConfig to a dictionary."""
        return {
            "mirror": {
                "mirror_dir": config.mirror.mirror_dir,
                "git_executable": config.mirror.git_executable,
                "default_branch": config.mirror.default_branch,
                "manifest_suffix": config.mirror.manifest_suffix,
                "dir_mode": oct(config.mirror.dir_mode)[2:],
            },
            "bitbucket": {
                "site_base": config.bitbucket.site_base,
                "git_base": config.bitbucket.git_base,
            },
            "verbose": config.verbose,
        }
