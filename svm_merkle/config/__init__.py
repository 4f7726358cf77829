"""
Runtime Configuration Module

Provides configuration loading for default tree parameters.
"""

from .runtime import (
    MerkleConfig,
    configure_logging,
    get_default_config,
    set_default_config,
)

__all__ = [
    "MerkleConfig",
    "configure_logging",
    "get_default_config",
    "set_default_config",
]
