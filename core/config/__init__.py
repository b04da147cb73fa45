"""
Runtime Configuration Module

Provides configuration loading and management for the anchoring service.
"""

from .runtime import (
    STORAGE_BACKENDS,
    Environment,
    PipelineConfig,
    RuntimeConfig,
    ServerConfig,
    StorageConfig,
    load_runtime_config,
)

__all__ = [
    "STORAGE_BACKENDS",
    "Environment",
    "PipelineConfig",
    "RuntimeConfig",
    "ServerConfig",
    "StorageConfig",
    "load_runtime_config",
]
