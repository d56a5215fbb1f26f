"""Orchestration of resolution and extraction into the staging directory."""

import logging
import threading
from pathlib import Path
from typing import Optional

from native_stage.common import ConfigLoader, configure_logging

from .archive import extract_archive
from .config import NativeStageConfig
from .plain import extract_plain
from .resources import PathResolver, ResourceRoot
from .sources import SourceKind, classify
from .vfs import extract_virtual

logger = logging.getLogger(__name__)

# Serializes every staging pass and library load in the process
STAGING_LOCK = threading.RLock()

_default_coordinator: Optional["StagingCoordinator"] = None


class StagingCoordinator:
    """Stages every resource root found for a logical name into one folder."""

    def __init__(self, staging_root: Path, resolver: Optional[PathResolver] = None):
        """Initialize the coordinator.

        Args:
            staging_root: Fixed root under which each logical name gets a folder
            resolver: Resolver used to find resource roots
        """
        self.staging_root = Path(staging_root)
        self.resolver = resolver if resolver is not None else PathResolver()

    @classmethod
    def from_config(cls, config: NativeStageConfig) -> "StagingCoordinator":
        resolver = PathResolver(
            search_path=config.staging.search_path,
            include_sys_path=config.staging.include_sys_path,
        )
        return cls(config.staging.staging_root, resolver)

    def destination_for(self, resource_name: str) -> Path:
        name = resource_name.strip("/")
        if not name:
            raise ValueError("Resource name must not be empty")
        return self.staging_root / name

    def stage(self, resource_name: str) -> Path:
        """Extract all roots of ``resource_name`` into its staging folder.

        The folder is returned even when nothing was found, in which case
        it may not exist.

        Raises:
            VirtualFSCopyError: If a virtual filesystem root cannot be copied
            PlainCopyError: If a plain root cannot be copied
        """
        destination = self.destination_for(resource_name)
        context = {"extra_fields": {"resource_name": resource_name}}

        with STAGING_LOCK:
            found = 0
            for root in self.resolver.resolve(resource_name):
                found += 1
                self._copy_root(root, destination, context)

            if found:
                logger.info(
                    f"Staged {found} resource root(s) for '{resource_name}' into {destination}",
                    extra=context
                )
            else:
                logger.debug(f"No resources found for '{resource_name}'", extra=context)

        return destination

    def _copy_root(self, root: Optional[ResourceRoot], destination: Path, context: dict) -> None:
        source = classify(root, self.resolver.vfs)
        if source is None:
            return

        logger.debug(f"Copying {source.kind.value} root {root}", extra=context)

        if source.kind is SourceKind.ARCHIVE:
            extract_archive(source.connection, destination)
        elif source.kind is SourceKind.VIRTUAL_FS:
            extract_virtual(source.node, destination)
        elif source.kind is SourceKind.PLAIN:
            extract_plain(source.path, destination)
        else:
            raise AssertionError(f"Unhandled source kind: {source.kind}")


def get_default_coordinator() -> StagingCoordinator:
    """Coordinator built from the layered configuration, created on first use."""
    global _default_coordinator

    with STAGING_LOCK:
        if _default_coordinator is None:
            config = ConfigLoader(NativeStageConfig).load()
            configure_logging(config.logging)
            _default_coordinator = StagingCoordinator.from_config(config)
        return _default_coordinator


def stage_resources(resource_name: str) -> Path:
    """Stage ``resource_name`` with the default coordinator."""
    return get_default_coordinator().stage(resource_name)
