from __future__ import annotations

from pathlib import Path

from beartype import beartype
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from constraint_core.config import ConfigError, load_section

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class SolverConfig(BaseModel):
    """
    Solver settings.

    The comparison tolerance is not configurable; see ``constraint_core.floats.EPSILON``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")
    max_iterations: int = Field(default=1000, ge=1)
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return level

    @classmethod
    @beartype
    def from_yaml(cls, path: str | Path) -> "SolverConfig":
        """Load the ``solver`` section of a YAML file, or its root when there is no such section."""
        section = load_section(path, "solver")
        try:
            return cls.model_validate(section)
        except ValidationError as err:
            raise ConfigError(f"Invalid solver config: {err}") from err
