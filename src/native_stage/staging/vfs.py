"""Virtual filesystem mounts and recursive extraction of virtual subtrees.

A virtual filesystem node is anything implementing
``importlib.resources.abc.Traversable``: a ``zipfile.Path`` into a
web-deployment bundle, package resources served by a non-filesystem
loader, or a plain ``pathlib.Path``. Mounts are addressed with
``vfs:/<mount>/<path>`` URLs.
"""

import logging
import shutil
import threading
import zipfile
from pathlib import Path
from typing import BinaryIO, Dict, Iterator, List
from urllib.parse import quote, unquote, urlparse

from importlib.resources.abc import Traversable

from .errors import UnknownMountError, VirtualFSCopyError

logger = logging.getLogger(__name__)

VFS_PROTOCOL = "vfs"


def _traversable_size(traversable: Traversable) -> int:
    """Byte size of a leaf traversable; directories report 0."""
    if traversable.is_dir():
        return 0
    stat = getattr(traversable, "stat", None)
    if callable(stat):
        return stat().st_size
    root = getattr(traversable, "root", None)
    at = getattr(traversable, "at", None)
    if isinstance(root, zipfile.ZipFile) and at:
        return root.getinfo(at).file_size
    return len(traversable.read_bytes())


class VirtualNode:
    """A file or folder inside a virtual filesystem."""

    def __init__(self, traversable: Traversable) -> None:
        self._traversable = traversable

    @property
    def name(self) -> str:
        return self._traversable.name

    @property
    def is_directory(self) -> bool:
        return self._traversable.is_dir()

    @property
    def size(self) -> int:
        return _traversable_size(self._traversable)

    def children(self) -> List["VirtualNode"]:
        """Child nodes ordered by name."""
        return [
            VirtualNode(child)
            for child in sorted(self._traversable.iterdir(), key=lambda c: c.name)
        ]

    def open(self) -> BinaryIO:
        return self._traversable.open("rb")

    def __repr__(self) -> str:
        return f"VirtualNode({self.name!r}, directory={self.is_directory})"


class VirtualFileSystem:
    """Registry of named virtual filesystem mounts."""

    def __init__(self) -> None:
        self._mounts: Dict[str, Traversable] = {}
        self._lock = threading.Lock()

    def mount(self, mount_name: str, root: Traversable) -> str:
        """Register ``root`` under ``mount_name``.

        Returns:
            The ``vfs:`` URL of the mount point
        """
        if not mount_name or "/" in mount_name:
            raise ValueError(f"Invalid mount name: {mount_name!r}")
        with self._lock:
            self._mounts[mount_name] = root
        logger.debug(f"Mounted {root} at {VFS_PROTOCOL}:/{mount_name}")
        return self.url_for(mount_name, "")

    def unmount(self, mount_name: str) -> None:
        with self._lock:
            self._mounts.pop(mount_name, None)

    def mounts(self) -> Dict[str, Traversable]:
        with self._lock:
            return dict(self._mounts)

    @staticmethod
    def url_for(mount_name: str, relative_path: str) -> str:
        return f"{VFS_PROTOCOL}:/{quote(mount_name)}/{quote(relative_path.strip('/'))}"

    def get_child(self, url: str) -> VirtualNode:
        """Look up the node a ``vfs:`` URL points at.

        Raises:
            UnknownMountError: If the URL names an unregistered mount
            VirtualFSCopyError: If the URL is not a vfs URL
        """
        parsed = urlparse(url)
        if parsed.scheme != VFS_PROTOCOL:
            raise VirtualFSCopyError(f"Not a {VFS_PROTOCOL} URL: {url}", url=url)

        mount_name, _, relative_path = unquote(parsed.path).lstrip("/").partition("/")
        root = self.mounts().get(mount_name)
        if root is None:
            raise UnknownMountError(f"No virtual filesystem mounted as '{mount_name}'", url=url)

        node = root
        for part in relative_path.split("/"):
            if part:
                node = node.joinpath(part)
        return VirtualNode(node)

    def find(self, name: str) -> Iterator[str]:
        """Yield the URL of ``name`` in every mount that contains it."""
        for mount_name, root in self.mounts().items():
            node = root
            for part in name.split("/"):
                if part:
                    node = node.joinpath(part)
            if node.is_dir() or node.is_file():
                yield self.url_for(mount_name, name)


# Process-wide default registry
VFS = VirtualFileSystem()


def extract_virtual(node: VirtualNode, destination_folder: Path) -> int:
    """Recursively mirror a virtual subtree into ``destination_folder``.

    A folder-shaped node (a directory without a dot in its name) whose
    name matches the destination folder name case-insensitively is
    treated as the destination itself, so its children land directly in
    ``destination_folder``. Any other folder gets its own subfolder.
    Everything else is copied as a file unless a file of the same size
    already exists at the target.

    Args:
        node: Virtual node to copy
        destination_folder: Folder on the regular filesystem

    Returns:
        Number of files written

    Raises:
        VirtualFSCopyError: If reading the node or writing the copy fails
    """
    destination_folder = Path(destination_folder)

    try:
        if node.is_directory and "." not in node.name:
            if destination_folder.name.lower() == node.name.lower():
                target_folder = destination_folder
            else:
                target_folder = destination_folder / node.name
                target_folder.mkdir(parents=True, exist_ok=True)

            return sum(extract_virtual(child, target_folder) for child in node.children())

        target_file = destination_folder / node.name
        if target_file.is_file() and target_file.stat().st_size == node.size:
            logger.debug(f"Skipping {target_file} (already staged)")
            return 0

        target_file.parent.mkdir(parents=True, exist_ok=True)
        with node.open() as source, open(target_file, "wb") as target:
            shutil.copyfileobj(source, target)
        logger.debug(f"Copied {node.name} -> {target_file}")
        return 1

    except OSError as e:
        raise VirtualFSCopyError(
            f"Failed to copy virtual node '{node.name}' to {destination_folder}: {e}",
            node=node.name,
            destination=str(destination_folder),
        ) from e
