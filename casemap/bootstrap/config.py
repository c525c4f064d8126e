"""
bootstrap/config.py - Application configuration

Provides configuration loading from files, environment variables, and defaults.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from pathlib import Path
import os
import json
import logging

logger = logging.getLogger(__name__)


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass
class ResolverConfig:
    """Resolution behaviour."""

    strict_catalog: bool = True  # Undeclared non-produced variables are errors
    cache_enabled: bool = True

    @classmethod
    def from_env(cls) -> "ResolverConfig":
        return cls(
            strict_catalog=_env_flag("CASEMAP_STRICT_CATALOG", "true"),
            cache_enabled=_env_flag("CASEMAP_CACHE", "true"),
        )


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_file: Optional[str] = None
    json_logs: bool = False

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        return cls(
            level=os.getenv("CASEMAP_LOG_LEVEL", "INFO"),
            format=os.getenv("CASEMAP_LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
            log_file=os.getenv("CASEMAP_LOG_FILE"),
            json_logs=_env_flag("CASEMAP_JSON_LOGS", "false"),
        )


@dataclass
class CaseMapConfig:
    """Root configuration."""

    environment: str = "development"
    debug: bool = False

    # Declaration document (.json / .yaml) loaded at build time
    spec_path: Optional[str] = None

    resolver: ResolverConfig = field(default_factory=ResolverConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls) -> "CaseMapConfig":
        """Create configuration from environment variables."""
        return cls(
            environment=os.getenv("CASEMAP_ENVIRONMENT", "development"),
            debug=_env_flag("CASEMAP_DEBUG", "false"),
            spec_path=os.getenv("CASEMAP_SPEC_PATH"),
            resolver=ResolverConfig.from_env(),
            logging=LoggingConfig.from_env(),
        )

    @classmethod
    def from_file(cls, filepath: str) -> "CaseMapConfig":
        """Load configuration from JSON file, on top of the environment."""
        path = Path(filepath)
        if not path.exists():
            logger.warning(f"Config file not found: {filepath}, using defaults")
            return cls.from_env()

        with open(path) as f:
            data = json.load(f)

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "CaseMapConfig":
        config = cls.from_env()

        if "environment" in data:
            config.environment = data["environment"]
        if "debug" in data:
            config.debug = data["debug"]
        if "spec_path" in data:
            config.spec_path = data["spec_path"]

        for section in ("resolver", "logging"):
            target = getattr(config, section)
            for key, value in data.get(section, {}).items():
                if hasattr(target, key):
                    setattr(target, key, value)
                else:
                    logger.warning(f"Ignoring unknown config key: {section}.{key}")

        return config

    def to_dict(self) -> Dict[str, Any]:
        return {
            "environment": self.environment,
            "debug": self.debug,
            "spec_path": self.spec_path,
            "resolver": {
                "strict_catalog": self.resolver.strict_catalog,
                "cache_enabled": self.resolver.cache_enabled,
            },
            "logging": {
                "level": self.logging.level,
                "log_file": self.logging.log_file,
                "json_logs": self.logging.json_logs,
            },
        }


# Global config instance
_config: Optional[CaseMapConfig] = None


def load_config(filepath: str = None) -> CaseMapConfig:
    """
    Load configuration from file or environment.

    Args:
        filepath: Optional path to JSON config file

    Returns:
        CaseMapConfig instance
    """
    global _config

    if filepath:
        _config = CaseMapConfig.from_file(filepath)
    else:
        default_paths = [
            "./casemap.json",
            "./config/casemap.json",
        ]

        for path in default_paths:
            if Path(path).exists():
                logger.info(f"Loading config from: {path}")
                _config = CaseMapConfig.from_file(path)
                return _config

        _config = CaseMapConfig.from_env()

    logger.info(f"Configuration loaded: environment={_config.environment}")
    return _config


def get_config() -> CaseMapConfig:
    """Get current configuration, loading if needed."""
    global _config
    if _config is None:
        _config = load_config()
    return _config
