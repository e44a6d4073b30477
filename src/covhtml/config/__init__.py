"""Config module exports."""

from covhtml.config.loader import load_config
from covhtml.config.models import (
    CovHtmlConfig,
    LoggingConfig,
    ProfileConfig,
    ReportConfig,
    WatermarkConfig,
)

__all__ = [
    "load_config",
    "CovHtmlConfig",
    "LoggingConfig",
    "ProfileConfig",
    "ReportConfig",
    "WatermarkConfig",
]
