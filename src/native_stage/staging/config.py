"""Configuration schema for native resource staging."""

from pathlib import Path
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from native_stage.common import LoggingConfig, expand_path_variables


class StagingSettings(BaseModel):
    """Where extracted resources land and where they are looked up."""

    model_config = ConfigDict(extra='forbid')

    temp_dir: str = Field(
        default="${TEMP}",
        description="Base temporary directory; ${VAR} placeholders are expanded"
    )
    app_subfolder: str = Field(
        default="native-libs",
        min_length=1,
        description="Fixed subfolder under temp_dir that holds staged resources"
    )
    search_path: List[str] = Field(
        default_factory=list,
        description="Extra directories or zip archives searched before sys.path"
    )
    include_sys_path: bool = Field(
        default=True,
        description="Also search every sys.path entry"
    )

    @field_validator('temp_dir', mode='before')
    @classmethod
    def expand_temp_dir(cls, v: str) -> str:
        return expand_path_variables(v)

    @field_validator('search_path', mode='before')
    @classmethod
    def expand_search_path(cls, v: List[str]) -> List[str]:
        if isinstance(v, str):
            v = [v]
        if isinstance(v, list):
            return [expand_path_variables(entry) for entry in v]
        return v

    @field_validator('app_subfolder')
    @classmethod
    def single_component(cls, v: str) -> str:
        """Reject subfolder names that would escape temp_dir."""
        if '/' in v or '\\' in v or v in ('.', '..'):
            raise ValueError(f"app_subfolder must be a single folder name, got {v!r}")
        return v

    @property
    def staging_root(self) -> Path:
        return Path(self.temp_dir) / self.app_subfolder


class LoaderSettings(BaseModel):
    """Native library loading options."""

    model_config = ConfigDict(extra='forbid')

    library_name: str | None = Field(
        default=None,
        description="Logical library name, e.g. 'opencv_java' for libopencv_java.so"
    )
    resource_name: str | None = Field(
        default=None,
        description="Resource folder to stage; defaults to the platform prefix"
    )
    library_search_path: str | None = Field(
        default=None,
        description="Existing search path to append to instead of the platform variable"
    )


class NativeStageConfig(BaseModel):
    """Root configuration for native-stage."""

    model_config = ConfigDict(extra='forbid')

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    staging: StagingSettings = Field(default_factory=StagingSettings)
    loader: LoaderSettings = Field(default_factory=LoaderSettings)
