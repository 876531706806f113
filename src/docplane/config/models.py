"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (DOCPLANE__SECTION__KEY)
3. Repo YAML (<root>/.docplane/config.yaml)
4. Global YAML (~/.config/docplane/config.yaml)
5. Built-in defaults (this file)

Examples:
    DOCPLANE__LOGGING__LEVEL=DEBUG
    DOCPLANE__DOCS__FORMAT_STYLE=rst
    DOCPLANE__DOCS__USER=true
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from docplane.config.constants import DEFAULT_SOURCE_SUFFIXES, FORMAT_STYLES, MARKUP_STYLES

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        DOCPLANE__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every classified file and resolved class.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class DocsConfig(BaseModel):
    """Documentation build configuration.

    Env vars:
        DOCPLANE__DOCS__FORMAT_STYLE: Default comment dialect
        DOCPLANE__DOCS__MARKUP_STYLE: Default markup style
        DOCPLANE__DOCS__USER: Build user-level documentation (hides private items)
    """

    format_style: str = Field(
        default="idldoc",
        description="Comment dialect used unless a file declares its own docformat.",
    )
    markup_style: str | None = Field(
        default=None,
        description="Markup style for comment bodies. None uses the dialect's default.",
    )
    user: bool = Field(
        default=False,
        description="User-level documentation: private routines, files and arguments are hidden.",
    )
    title: str = Field(default="Documentation for IDL", description="Title of the build.")
    subtitle: str = Field(default="Generated by DocPlane", description="Subtitle of the build.")
    overview: str | None = Field(
        default=None,
        description="Overview file with top-level and per-directory comments.",
    )
    source_suffixes: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SOURCE_SUFFIXES),
        description="File suffixes treated as IDL source.",
    )

    @field_validator("format_style")
    @classmethod
    def validate_format_style(cls, v: str) -> str:
        v = v.lower()
        if v not in FORMAT_STYLES:
            raise ValueError(f"Unknown format style '{v}', expected one of {FORMAT_STYLES}")
        return v

    @field_validator("markup_style")
    @classmethod
    def validate_markup_style(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.lower()
        if v not in MARKUP_STYLES:
            raise ValueError(f"Unknown markup style '{v}', expected one of {MARKUP_STYLES}")
        return v


class ClassesConfig(BaseModel):
    """Class introspection configuration.

    Env vars:
        DOCPLANE__CLASSES__SEARCH_PATH: Extra directories holding __define files
    """

    search_path: list[str] = Field(
        default_factory=list,
        description="Directories searched for <class>__define.pro files in addition "
        "to the source root. Classes not found there get no fields.",
    )


class DocPlaneConfig(BaseModel):
    """Root configuration for DocPlane."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    docs: DocsConfig = Field(default_factory=DocsConfig)
    classes: ClassesConfig = Field(default_factory=ClassesConfig)
