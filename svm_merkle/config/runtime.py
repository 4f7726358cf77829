"""
Runtime Configuration

Default hashing parameters and logging level for trees built without
explicit arguments.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from svm_merkle.crypto.backend import HashingAlgorithm, validate_hash_size
from svm_merkle.schemas.errors import InvalidConfigurationError

load_dotenv()


_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class MerkleConfig:
    """
    Configuration for Merkle tree construction.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    algorithm: HashingAlgorithm = HashingAlgorithm.SHA256
    hash_size: int = 32
    log_level: str = "WARNING"

    def __post_init__(self):
        self.algorithm = HashingAlgorithm.parse(self.algorithm)
        self.hash_size = validate_hash_size(self.algorithm, self.hash_size)
        level = str(self.log_level).upper()
        if level not in _LOG_LEVELS:
            raise InvalidConfigurationError(
                f"Unknown log level: {self.log_level!r}",
                details={"log_level": self.log_level},
            )
        self.log_level = level

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - SVM_MERKLE_ALGORITHM: algorithm name or tag (sha256, sha256d, keccak, keccakd)
        - SVM_MERKLE_HASH_SIZE: digest size in bytes (1..32)
        - SVM_MERKLE_LOG_LEVEL: package log level
        """
        overrides: dict[str, Any] = {}

        algorithm = os.getenv("SVM_MERKLE_ALGORITHM")
        if algorithm:
            overrides["algorithm"] = int(algorithm) if algorithm.isdigit() else algorithm

        hash_size = os.getenv("SVM_MERKLE_HASH_SIZE")
        if hash_size:
            try:
                overrides["hash_size"] = int(hash_size)
            except ValueError:
                raise InvalidConfigurationError(
                    f"SVM_MERKLE_HASH_SIZE must be an integer, got {hash_size!r}",
                    details={"hash_size": hash_size},
                ) from None

        if os.getenv("SVM_MERKLE_LOG_LEVEL"):
            overrides["log_level"] = os.getenv("SVM_MERKLE_LOG_LEVEL")

        return overrides

    @classmethod
    def from_env(cls) -> "MerkleConfig":
        """Load configuration purely from environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "MerkleConfig":
        """
        Load configuration from a YAML file.

        Accepts either top-level keys or a ``merkle:`` section.
        """
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise InvalidConfigurationError(
                f"Config file must contain a mapping: {path}",
                details={"path": str(path)},
            )
        section = data.get("merkle", data)
        if section is None:
            section = {}
        if not isinstance(section, dict):
            raise InvalidConfigurationError(
                f"'merkle' section must be a mapping: {path}",
                details={"path": str(path)},
            )
        return cls.from_dict(section)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MerkleConfig":
        """Load configuration from a dictionary (supports partial data)."""
        known = {k: data[k] for k in ("algorithm", "hash_size", "log_level") if k in data}
        return cls(**known)

    def with_env_overrides(self) -> "MerkleConfig":
        """Return a new config with environment variable overrides applied."""
        overrides = self._get_env_overrides()
        if not overrides:
            return self
        merged = self.to_dict()
        merged.update(overrides)
        return self.from_dict(merged)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "algorithm": self.algorithm.label,
            "hash_size": self.hash_size,
            "log_level": self.log_level,
        }


def configure_logging(config: Optional[MerkleConfig] = None) -> logging.Logger:
    """Apply the configured level to the package logger and return it."""
    config = config or get_default_config()
    package_logger = logging.getLogger("svm_merkle")
    package_logger.setLevel(config.log_level)
    return package_logger


# Global default configuration
_default_config: Optional[MerkleConfig] = None


def get_default_config() -> MerkleConfig:
    """Get the default configuration."""
    global _default_config
    if _default_config is None:
        _default_config = MerkleConfig.from_env()
    return _default_config


def set_default_config(config: Optional[MerkleConfig]) -> None:
    """Set the default configuration (None resets to environment-derived)."""
    global _default_config
    _default_config = config
