"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (CCVIEW__SECTION__KEY)
3. View YAML (<view root>/.ccview/config.yaml)
4. Global YAML (~/.config/ccview/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    CCVIEW__<SECTION>__<KEY>=<VALUE>

Examples:
    CCVIEW__LOGGING__LEVEL=DEBUG
    CCVIEW__CLEARCASE__TREAT_MAIN_AS_VERSION_IDENTIFIER=false
    CCVIEW__CLEARCASE__NOISE_BRANCH=integration
"""

from collections.abc import Callable
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

NoiseFilter = Callable[[str, int], bool]
"""Predicate (branch name, version number) -> True when the change is noise."""


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

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
        CCVIEW__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every rule decision and is verbose.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ClearCaseConfig(BaseModel):
    """Version resolution and history configuration.

    Env vars:
        CCVIEW__CLEARCASE__TREAT_MAIN_AS_VERSION_IDENTIFIER: Legacy `main` heuristic
        CCVIEW__CLEARCASE__DISABLE_HISTORY_TRANSFORMATION: Keep lshistory names as-is
        CCVIEW__CLEARCASE__NOISE_BRANCH: Branch whose first version is noise
    """

    treat_main_as_version_identifier: bool = Field(
        default=True,
        description="Treat a bare 'main' path segment as the start of a version suffix "
        "when the previous segment has no explicit '@@'. Legacy behavior, kept on by default.",
    )
    disable_history_transformation: bool = Field(
        default=False,
        description="Do not strip embedded version segments from lshistory object names.",
    )
    noise_branch: str = Field(
        default="main",
        description="Branch on which the first checked-in versions are not real changes.",
    )
    noise_max_version_on_branch: int = Field(
        default=1,
        description="Changes up to this version number on noise_branch are ignored.",
    )
    noise_max_version_elsewhere: int = Field(
        default=0,
        description="Changes up to this version number on any other branch are ignored.",
    )
    lshistory_options: list[str] = Field(
        default_factory=lambda: ["-all"],
        description="One history stream is read per option set; streams are merged.",
    )
    directory_history_options: list[str] = Field(
        default_factory=lambda: ["-d"],
        description="Options for the directory-only history stream.",
    )

    @field_validator("noise_max_version_on_branch", "noise_max_version_elsewhere")
    @classmethod
    def validate_noise_version(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"Version number must be non-negative, got {v}")
        return v

    def noise_filter(self) -> NoiseFilter:
        """Build the 'first version is noise' predicate from these settings."""
        branch = self.noise_branch
        on_branch = self.noise_max_version_on_branch
        elsewhere = self.noise_max_version_elsewhere

        def is_noise(branch_name: str, version: int) -> bool:
            return version <= (on_branch if branch_name == branch else elsewhere)

        return is_noise


class CCViewConfig(BaseModel):
    """Root configuration model."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    clearcase: ClearCaseConfig = Field(default_factory=ClearCaseConfig)
