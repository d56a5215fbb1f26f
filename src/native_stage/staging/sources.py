"""Classification of resource roots into archive, virtual or plain sources."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from .resources import ArchiveConnection, ResourceRoot
from .vfs import VFS, VFS_PROTOCOL, VirtualFileSystem, VirtualNode


class SourceKind(Enum):
    """Physical representation of a resource root."""
    ARCHIVE = "archive"
    VIRTUAL_FS = "vfs"
    PLAIN = "plain"


@dataclass(frozen=True)
class ClassifiedSource:
    """A resource root together with the handle its extractor needs."""
    kind: SourceKind
    root: ResourceRoot
    connection: Optional[ArchiveConnection] = None
    node: Optional[VirtualNode] = None
    path: Optional[Path] = None


def classify(
    root: Optional[ResourceRoot],
    vfs: Optional[VirtualFileSystem] = None
) -> Optional[ClassifiedSource]:
    """Decide how ``root`` must be extracted.

    Archive connections win over the URL scheme; anything that is
    neither an archive nor a ``vfs:`` URL is treated as a plain path.

    Returns:
        The classified source, or None when there is no root
    """
    if root is None:
        return None

    connection = root.open_connection()
    if isinstance(connection, ArchiveConnection):
        return ClassifiedSource(SourceKind.ARCHIVE, root, connection=connection)

    if root.scheme == VFS_PROTOCOL:
        node = (vfs if vfs is not None else VFS).get_child(root.url)
        return ClassifiedSource(SourceKind.VIRTUAL_FS, root, node=node)

    return ClassifiedSource(SourceKind.PLAIN, root, path=root.path)
