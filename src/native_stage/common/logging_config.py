"""The ``[logging]`` config section."""

from typing import Literal
from pydantic import BaseModel, Field, ConfigDict, field_validator

from .config_utils import expand_path_variables


class LoggingConfig(BaseModel):
    """How the native_stage logger reports staging and loading."""

    model_config = ConfigDict(extra='forbid')

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Level of the native_stage logger"
    )
    format: Literal["simple", "detailed", "json"] = Field(
        default="simple",
        description="Console format"
    )
    file: str | None = Field(
        default=None,
        description="Optional JSON log file; ${VAR} placeholders are expanded"
    )
    max_file_size_mb: int = Field(default=10, ge=1, description="Rotate the log file at this size")
    backup_count: int = Field(default=5, ge=0, description="Rotated log files to keep")

    @field_validator('level', mode='before')
    @classmethod
    def normalize_level(cls, v: str) -> str:
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator('format', mode='before')
    @classmethod
    def normalize_format(cls, v: str) -> str:
        if isinstance(v, str):
            return v.lower()
        return v

    @field_validator('file', mode='before')
    @classmethod
    def expand_file(cls, v: str | None) -> str | None:
        if not v:
            return None
        return expand_path_variables(v)
