"""
Runtime Configuration

Central configuration for the storage backend, the HTTP server and the
stage pipeline.
"""

from __future__ import annotations

import copy
import json
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

load_dotenv()


class Environment(str, Enum):
    """Deployment environment."""
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TEST = "test"

    @classmethod
    def parse(cls, value: str) -> "Environment":
        """Lenient parse; unknown values map to development."""
        normalized = value.strip().lower()
        if normalized in ("production", "prod"):
            return cls.PRODUCTION
        if normalized == "test":
            return cls.TEST
        return cls.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        return self is Environment.PRODUCTION


STORAGE_BACKENDS = ("ipfs", "memory")


@dataclass
class StorageConfig:
    """
    Storage collaborator settings.

    Timeout and retry policy live here and nowhere else: the pipeline
    itself never times out a call.
    """
    backend: str = "ipfs"
    api_url: str = "http://127.0.0.1:5001"
    project_id: Optional[str] = None
    project_secret: Optional[str] = None
    timeout: float = 30.0
    max_retries: int = 3
    retry_delay: float = 1.0

    def __post_init__(self) -> None:
        if self.backend not in STORAGE_BACKENDS:
            raise ValueError(
                f"Unknown storage backend '{self.backend}', expected one of {STORAGE_BACKENDS}"
            )
        if self.timeout <= 0:
            raise ValueError(f"Storage timeout must be positive, got {self.timeout}")
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {self.max_retries}")

    @property
    def auth(self) -> Optional[tuple[str, str]]:
        """Basic-auth credentials, when both halves are configured."""
        if self.project_id and self.project_secret:
            return (self.project_id, self.project_secret)
        return None


@dataclass
class ServerConfig:
    """Configuration for the HTTP API server."""
    host: str = "0.0.0.0"
    port: int = 3000
    environment: Environment = Environment.DEVELOPMENT
    log_level: str = "INFO"
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"


@dataclass
class PipelineConfig:
    """Configuration for stage pipeline execution."""
    did_method: str = "farmer"
    debug: bool = False


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables
    - JSON or YAML file
    - Programmatic construction
    """
    storage: StorageConfig = field(default_factory=StorageConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    proxy: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.server.environment.is_production and self.storage.backend == "memory":
            raise ValueError("The in-memory storage backend is not allowed in production")

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        This is the SINGLE source of truth for all env var reading.

        Supported variables:
        - IPFS_URL: Storage API base URL
        - IPFS_PROJECT_ID / IPFS_PROJECT_SECRET: Basic-auth credentials
        - ANCHOR_STORAGE_BACKEND: "ipfs" or "memory"
        - ANCHOR_STORAGE_TIMEOUT: Storage request timeout in seconds
        - ANCHOR_STORAGE_MAX_RETRIES: Retries for transient storage failures
        - HOST / PORT: Server bind address
        - ENVIRONMENT: development, production or test
        - ANCHOR_LOG_LEVEL: Log level
        - ANCHOR_HTTP_PROXY: HTTP proxy URL
        """
        overrides: dict[str, Any] = {}

        # Storage settings
        if os.getenv("IPFS_URL"):
            overrides.setdefault("storage", {})["api_url"] = os.getenv("IPFS_URL")
        if os.getenv("IPFS_PROJECT_ID"):
            overrides.setdefault("storage", {})["project_id"] = os.getenv("IPFS_PROJECT_ID")
        if os.getenv("IPFS_PROJECT_SECRET"):
            overrides.setdefault("storage", {})["project_secret"] = os.getenv("IPFS_PROJECT_SECRET")
        if os.getenv("ANCHOR_STORAGE_BACKEND"):
            overrides.setdefault("storage", {})["backend"] = os.getenv("ANCHOR_STORAGE_BACKEND", "").lower()
        if os.getenv("ANCHOR_STORAGE_TIMEOUT"):
            overrides.setdefault("storage", {})["timeout"] = float(os.getenv("ANCHOR_STORAGE_TIMEOUT", "30"))
        if os.getenv("ANCHOR_STORAGE_MAX_RETRIES"):
            overrides.setdefault("storage", {})["max_retries"] = int(os.getenv("ANCHOR_STORAGE_MAX_RETRIES", "3"))

        # Server settings
        if os.getenv("HOST"):
            overrides.setdefault("server", {})["host"] = os.getenv("HOST")
        if os.getenv("PORT"):
            overrides.setdefault("server", {})["port"] = int(os.getenv("PORT", "3000"))
        if os.getenv("ENVIRONMENT"):
            overrides.setdefault("server", {})["environment"] = os.getenv("ENVIRONMENT")
        if os.getenv("ANCHOR_LOG_LEVEL"):
            overrides.setdefault("server", {})["log_level"] = os.getenv("ANCHOR_LOG_LEVEL", "INFO").upper()

        # Proxy
        if os.getenv("ANCHOR_HTTP_PROXY"):
            overrides["proxy"] = os.getenv("ANCHOR_HTTP_PROXY")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_file(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a JSON or YAML file (by extension)."""
        path = Path(path)
        if path.suffix in (".yaml", ".yml"):
            return cls.from_yaml(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path) as f:
            return cls.from_dict(json.load(f))

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        storage_data = data.get("storage", {}) or {}
        server_data = dict(data.get("server", {}) or {})
        pipeline_data = data.get("pipeline", {}) or {}

        if "environment" in server_data and not isinstance(server_data["environment"], Environment):
            server_data["environment"] = Environment.parse(str(server_data["environment"]))

        return cls(
            storage=StorageConfig(**storage_data) if storage_data else StorageConfig(),
            server=ServerConfig(**server_data) if server_data else ServerConfig(),
            pipeline=PipelineConfig(**pipeline_data) if pipeline_data else PipelineConfig(),
            proxy=data.get("proxy"),
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        data = self.to_dict(include_secrets=True)
        for section in ("storage", "server"):
            if section in overrides:
                data[section].update(overrides[section])
        if "proxy" in overrides:
            data["proxy"] = overrides["proxy"]

        return self.from_dict(data)

    def to_dict(self, *, include_secrets: bool = False) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        storage = {
            "backend": self.storage.backend,
            "api_url": self.storage.api_url,
            "project_id": self.storage.project_id,
            "timeout": self.storage.timeout,
            "max_retries": self.storage.max_retries,
            "retry_delay": self.storage.retry_delay,
        }
        if include_secrets:
            storage["project_secret"] = self.storage.project_secret
        else:
            storage["project_secret"] = "***" if self.storage.project_secret else None

        return {
            "storage": storage,
            "server": {
                "host": self.server.host,
                "port": self.server.port,
                "environment": self.server.environment.value,
                "log_level": self.server.log_level,
                "cors_origins": list(self.server.cors_origins),
            },
            "pipeline": {
                "did_method": self.pipeline.did_method,
                "debug": self.pipeline.debug,
            },
            "proxy": self.proxy,
            "extra": copy.deepcopy(self.extra),
        }


def load_runtime_config(path: str | Path | None = None) -> RuntimeConfig:
    """
    Load RuntimeConfig from a config file, then overlay environment variables.

    Search order when no path is given:
      1. ./anchor.json
      2. ./anchor.yaml
      3. ~/.config/anchor/config.json

    Environment variables ALWAYS override config file values.
    """
    if path is not None:
        return RuntimeConfig.from_file(path).with_env_overrides()

    search_paths = [
        Path.cwd() / "anchor.json",
        Path.cwd() / "anchor.yaml",
        Path.home() / ".config" / "anchor" / "config.json",
    ]
    for candidate in search_paths:
        if candidate.exists():
            return RuntimeConfig.from_file(candidate).with_env_overrides()

    return RuntimeConfig().with_env_overrides()
