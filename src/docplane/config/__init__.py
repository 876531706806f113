"""Config module exports."""

from docplane.config.loader import load_config
from docplane.config.models import (
    ClassesConfig,
    DocPlaneConfig,
    DocsConfig,
    LoggingConfig,
    LogOutputConfig,
)

__all__ = [
    "load_config",
    "ClassesConfig",
    "DocPlaneConfig",
    "DocsConfig",
    "LoggingConfig",
    "LogOutputConfig",
]
