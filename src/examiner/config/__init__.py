"""Configuration loading and validation."""

from examiner.config.loader import load_config
from examiner.config.logging import configure_logging
from examiner.config.schema import (
    ExaminerConfig,
    LoggingConfig,
    PolicySettings,
)

__all__ = [
    "ExaminerConfig",
    "LoggingConfig",
    "PolicySettings",
    "configure_logging",
    "load_config",
]
