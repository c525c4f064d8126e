"""
bootstrap/ - Bootstrap Layer

Provides configuration, logging setup and application wiring.
"""

from .config import (
    CaseMapConfig,
    ResolverConfig,
    LoggingConfig,
    load_config,
    get_config,
)
from .app import (
    AppState,
    CaseMapApp,
)
from .entrypoints import (
    JSONFormatter,
    setup_logging,
    setup_logging_from_config,
    create_app,
)

__all__ = [
    # Config
    "CaseMapConfig",
    "ResolverConfig",
    "LoggingConfig",
    "load_config",
    "get_config",
    # App
    "AppState",
    "CaseMapApp",
    # Entry points
    "JSONFormatter",
    "setup_logging",
    "setup_logging_from_config",
    "create_app",
]
