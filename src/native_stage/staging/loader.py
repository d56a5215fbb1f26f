"""Loading a native library from the staging directory."""

import ctypes
import ctypes.util
import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any, Callable, List, Optional

from native_stage.common import configure_logging

from .config import NativeStageConfig
from .coordinator import STAGING_LOCK, StagingCoordinator, get_default_coordinator
from .errors import LibraryLoadError
from .platforms import library_file_names, library_path_variable, resource_prefix

logger = logging.getLogger(__name__)


class LoadState(Enum):
    """Lifecycle of a native library within the process."""
    UNLOADED = "unloaded"
    LOADED = "loaded"


class NativeLibraryLoader:
    """Stages platform resources once and loads a library from them.

    The search path is handed to the lookup explicitly; neither
    ``os.environ`` nor any other process-wide setting is modified.
    """

    def __init__(
        self,
        library_name: str,
        resource_name: Optional[str] = None,
        coordinator: Optional[StagingCoordinator] = None,
        library_search_path: Optional[str] = None,
        load_function: Callable[[str], Any] = ctypes.CDLL,
        system: Optional[str] = None,
    ):
        """Initialize the loader.

        Args:
            library_name: Logical library name (``foo`` for ``libfoo.so``)
            resource_name: Resource folder to stage, defaults to the platform prefix
            coordinator: Staging coordinator, defaults to the shared one
            library_search_path: Existing search path to append to; defaults to
                the platform's library path environment variable
            load_function: Primitive that loads a library from a path
            system: Platform system name override (``platform.system()`` style)
        """
        self.library_name = library_name
        self.system = system
        self.resource_name = resource_name or resource_prefix(system)
        self._coordinator = coordinator
        self.library_search_path = library_search_path
        self._load_function = load_function
        self._state = LoadState.UNLOADED
        self._handle: Any = None
        self.loaded_from: Optional[str] = None

    @classmethod
    def from_config(
        cls,
        config: NativeStageConfig,
        library_name: Optional[str] = None,
        **kwargs: Any
    ) -> "NativeLibraryLoader":
        library_name = library_name or config.loader.library_name
        if not library_name:
            raise LibraryLoadError("No native library name configured")
        configure_logging(config.logging)
        return cls(
            library_name,
            resource_name=config.loader.resource_name,
            coordinator=StagingCoordinator.from_config(config),
            library_search_path=config.loader.library_search_path,
            **kwargs
        )

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def coordinator(self) -> StagingCoordinator:
        if self._coordinator is None:
            self._coordinator = get_default_coordinator()
        return self._coordinator

    def prepare(self) -> str:
        """Stage resources and build the effective library search path.

        The staged folder is appended to the existing search path when it
        exists; an existing value is never replaced.
        """
        staged = self.coordinator.stage(self.resource_name)

        existing = self.library_search_path
        if existing is None:
            existing = os.environ.get(library_path_variable(self.system), "")

        if not staged.exists():
            return existing
        if existing:
            return existing + os.pathsep + str(staged)
        return str(staged)

    def find_library(self, search_path: str) -> Optional[Path]:
        """First matching library file along ``search_path``."""
        file_names = library_file_names(self.library_name, self.system)
        for directory in search_path.split(os.pathsep):
            if not directory:
                continue
            folder = Path(directory)
            for file_name in file_names:
                candidate = folder / file_name
                if candidate.is_file():
                    return candidate
            versioned: List[Path] = sorted(folder.glob(f"lib{self.library_name}.so.*"))
            if versioned:
                return versioned[0]
        return None

    def load(self) -> Any:
        """Load the library once; later calls return the same handle.

        Raises:
            LibraryLoadError: If the library cannot be found or loaded
        """
        with STAGING_LOCK:
            if self._state is LoadState.LOADED:
                return self._handle

            search_path = self.prepare()
            target = self.find_library(search_path)
            location = str(target) if target else ctypes.util.find_library(self.library_name)
            if location is None:
                raise LibraryLoadError(
                    f"Native library '{self.library_name}' not found",
                    library=self.library_name,
                    search_path=search_path,
                )

            try:
                handle = self._load_function(location)
            except OSError as e:
                raise LibraryLoadError(
                    f"Failed to load native library '{self.library_name}' from {location}: {e}",
                    library=self.library_name,
                    location=location,
                ) from e

            self._handle = handle
            self.loaded_from = location
            self._state = LoadState.LOADED
            logger.info(f"Loaded {self.library_name} library from {location}")
            return handle
