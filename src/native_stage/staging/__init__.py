"""Discovery and extraction of bundled native-library resources."""

from .archive import extract_archive
from .config import LoaderSettings, NativeStageConfig, StagingSettings
from .coordinator import STAGING_LOCK, StagingCoordinator, get_default_coordinator, stage_resources
from .errors import (
    LibraryLoadError,
    PlainCopyError,
    StagingError,
    UnknownMountError,
    VirtualFSCopyError,
)
from .loader import LoadState, NativeLibraryLoader
from .plain import extract_plain
from .platforms import library_file_names, library_path_variable, resource_prefix
from .resources import ArchiveConnection, PathResolver, ResourceConnection, ResourceRoot
from .sources import ClassifiedSource, SourceKind, classify
from .vfs import VFS, VirtualFileSystem, VirtualNode, extract_virtual

__all__ = [
    'ArchiveConnection',
    'ClassifiedSource',
    'LibraryLoadError',
    'LoadState',
    'LoaderSettings',
    'NativeLibraryLoader',
    'NativeStageConfig',
    'PathResolver',
    'PlainCopyError',
    'ResourceConnection',
    'ResourceRoot',
    'STAGING_LOCK',
    'SourceKind',
    'StagingCoordinator',
    'StagingError',
    'StagingSettings',
    'UnknownMountError',
    'VFS',
    'VirtualFSCopyError',
    'VirtualFileSystem',
    'VirtualNode',
    'classify',
    'extract_archive',
    'extract_plain',
    'extract_virtual',
    'get_default_coordinator',
    'library_file_names',
    'library_path_variable',
    'resource_prefix',
    'stage_resources',
]
