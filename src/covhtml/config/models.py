"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config() (CLI options)
2. Environment variables (COVHTML__SECTION__KEY)
3. Repo YAML (.covhtml.yaml in the working directory)
4. Global YAML (~/.config/covhtml/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    COVHTML__<SECTION>__<KEY>=<VALUE>

Examples:
    COVHTML__LOGGING__LEVEL=DEBUG
    COVHTML__REPORT__OUTPUT_DIR=build/coverage
    COVHTML__REPORT__LINE_COUNTING=distinct
    COVHTML__WATERMARKS__HIGH=90
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LineCounting = Literal["span", "distinct"]
MissingSources = Literal["fail", "skip"]


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
        COVHTML__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. INFO logs one event per file.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ProfileConfig(BaseModel):
    """Coverage profile interpretation.

    Env vars:
        COVHTML__PROFILE__LOCATOR_SEGMENTS: Leading path segments to strip
    """

    locator_segments: int = Field(
        default=3,
        description="Leading slash-separated segments of each profile path that form "
        "the repository locator (host/org/repo). The last one names the repository.",
    )

    @field_validator("locator_segments")
    @classmethod
    def validate_locator_segments(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"locator_segments must be >= 0, got {v}")
        return v


class ReportConfig(BaseModel):
    """HTML report generation.

    Env vars:
        COVHTML__REPORT__OUTPUT_DIR: Output directory, relative to the working dir
        COVHTML__REPORT__LINE_COUNTING: span (legacy) or distinct (overlap-aware)
        COVHTML__REPORT__MISSING_SOURCES: fail or skip
        COVHTML__REPORT__WORKERS: Parallel classification threads
        COVHTML__REPORT__SYNTAX_HIGHLIGHTING: Highlight source pages (true/false)
    """

    output_dir: str = Field(
        default="coverage",
        description="Report output directory. Relative paths resolve against the working dir.",
    )
    line_counting: LineCounting = Field(
        default="span",
        description="How uncovered lines are counted. 'span' sums end-start per zero-hit "
        "range without deduplication (legacy numbers). 'distinct' counts each line once.",
    )
    missing_sources: MissingSources = Field(
        default="fail",
        description="What to do when a profiled source file cannot be read. "
        "'skip' leaves the file out of the report and logs a warning.",
    )
    workers: int = Field(
        default=1,
        description="Threads used to classify files. Results do not depend on this.",
    )
    syntax_highlighting: bool = Field(
        default=True,
        description="Highlight source pages with Pygments, picking the lexer by file name.",
    )

    @field_validator("workers")
    @classmethod
    def validate_workers(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"workers must be >= 1, got {v}")
        return v


class WatermarkConfig(BaseModel):
    """Watermark thresholds, in percent.

    Env vars:
        COVHTML__WATERMARKS__LOW: Below this is 'low'
        COVHTML__WATERMARKS__HIGH: Above this is 'high'
    """

    low: float = Field(default=50.0, description="Percentages below this are 'low'.")
    high: float = Field(default=80.0, description="Percentages above this are 'high'.")

    @model_validator(mode="after")
    def validate_order(self) -> "WatermarkConfig":
        if not (0.0 <= self.low <= self.high <= 100.0):
            raise ValueError(
                f"watermarks must satisfy 0 <= low <= high <= 100, got {self.low}/{self.high}"
            )
        return self


class CovHtmlConfig(BaseModel):
    """Root configuration for covhtml."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    profile: ProfileConfig = Field(default_factory=ProfileConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
    watermarks: WatermarkConfig = Field(default_factory=WatermarkConfig)
