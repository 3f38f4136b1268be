"""
Logging setup for adaptevo runs.

One console sink and one rotating file sink per run, both driven by a
``LoggingConfig`` (the ``logging`` section of the Hydra config).
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
import sys

from loguru import logger
from pydantic import BaseModel, Field, field_validator

__all__ = ["LoggingConfig", "setup_logger"]

LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")

_PLAIN_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message}"
_COLOR_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<yellow>{line}</yellow> | "
    "<level>{message}</level>"
)


class LoggingConfig(BaseModel):
    """Where and how much a run logs."""

    log_dir: Path = Field(default=Path("logs"), description="Directory for run log files")
    level: str = Field(default="INFO", description="Minimum level for both sinks")
    file_level: str | None = Field(
        default=None, description="Separate minimum level for the file sink (defaults to level)"
    )
    run_name: str = Field(default="adaptevo", min_length=1, description="Log file name prefix")
    rotation: str = Field(default="50 MB", description='Loguru rotation policy, e.g. "1 day"')
    retention: str = Field(default="30 days", description="Loguru retention policy")
    enable_colors: bool = True

    @field_validator("level", "file_level")
    @classmethod
    def validate_level(cls, v: str | None) -> str | None:
        if v is None:
            return v
        level = v.upper()
        if level not in LEVELS:
            raise ValueError(f"Unknown log level '{v}', expected one of {LEVELS}")
        return level


def setup_logger(config: LoggingConfig | None = None, **overrides) -> Path:
    """
    Replace loguru's handlers with a console sink and a timestamped file sink.

    Args:
        config: Logging options; keyword ``overrides`` are applied on top
            (``setup_logger(level="DEBUG")`` works without a config)

    Returns:
        Path to the run's log file
    """
    config = (config or LoggingConfig()).model_copy(update=overrides)
    config = LoggingConfig.model_validate(config.model_dump())

    config.log_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    log_file = config.log_dir / f"{config.run_name}_{timestamp}.log"

    logger.remove()

    colorize = config.enable_colors and sys.stderr.isatty()
    logger.add(
        sys.stderr,
        level=config.level,
        format=_COLOR_FORMAT if colorize else _PLAIN_FORMAT,
        colorize=colorize,
        backtrace=True,
        diagnose=False,
    )
    logger.add(
        str(log_file),
        level=config.file_level or config.level,
        format=_PLAIN_FORMAT,
        rotation=config.rotation,
        retention=config.retention,
        compression="zip",
        encoding="utf-8",
        backtrace=True,
        diagnose=False,
    )

    logger.info(
        "Logging to console ({}) and {} ({})",
        config.level,
        log_file,
        config.file_level or config.level,
    )
    return log_file
