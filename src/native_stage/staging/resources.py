"""Resource roots and their discovery along the search path."""

import logging
import sys
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Union
from urllib.parse import urlparse
from urllib.request import url2pathname

from .vfs import VFS, VirtualFileSystem

logger = logging.getLogger(__name__)

ARCHIVE_PROTOCOL = "zip"
ARCHIVE_SEPARATOR = "!/"


def file_uri_to_path(uri: str) -> Path:
    """Convert a ``file:`` URI back to a filesystem path."""
    parsed = urlparse(uri)
    if parsed.netloc and parsed.netloc != "localhost":
        return Path(url2pathname(f"//{parsed.netloc}{parsed.path}"))
    return Path(url2pathname(parsed.path))


@dataclass(frozen=True)
class ResourceConnection:
    """Connection to a non-archive resource root."""
    url: str


@dataclass(frozen=True)
class ArchiveConnection(ResourceConnection):
    """Connection to a folder-shaped entry inside a zip archive."""
    archive_path: Path = Path()
    entry_name: str = ""

    def open_archive(self) -> zipfile.ZipFile:
        return zipfile.ZipFile(self.archive_path, "r")


@dataclass(frozen=True)
class ResourceRoot:
    """Locator of a folder-shaped resource bundle.

    URL shapes:
        ``zip:<archive file URI>!/<entry>`` for archive entries,
        ``vfs:/<mount>/<path>`` for virtual filesystem nodes,
        ``file:`` URIs for plain files and directories.
    """
    url: str

    @classmethod
    def for_path(cls, path: Path) -> "ResourceRoot":
        return cls(Path(path).absolute().as_uri())

    @classmethod
    def for_archive(cls, archive_path: Path, entry_name: str) -> "ResourceRoot":
        archive_uri = Path(archive_path).absolute().as_uri()
        return cls(f"{ARCHIVE_PROTOCOL}:{archive_uri}{ARCHIVE_SEPARATOR}{entry_name.strip('/')}")

    @property
    def scheme(self) -> str:
        return self.url.partition(":")[0].lower()

    @property
    def path(self) -> Path:
        """Filesystem path of a ``file:`` root (best effort for other schemes)."""
        if self.scheme == "file":
            return file_uri_to_path(self.url)
        return Path(url2pathname(urlparse(self.url).path))

    def open_connection(self) -> ResourceConnection:
        if self.scheme == ARCHIVE_PROTOCOL:
            archive_uri, _, entry_name = self.url[len(ARCHIVE_PROTOCOL) + 1:].rpartition(ARCHIVE_SEPARATOR)
            return ArchiveConnection(
                url=self.url,
                archive_path=file_uri_to_path(archive_uri),
                entry_name=entry_name,
            )
        return ResourceConnection(url=self.url)

    def __str__(self) -> str:
        return self.url


class PathResolver:
    """Finds every resource root matching a logical name.

    Search order: configured entries, then ``sys.path`` (when enabled),
    then every mounted virtual filesystem.
    """

    def __init__(
        self,
        search_path: Optional[Sequence[Union[str, Path]]] = None,
        vfs: Optional[VirtualFileSystem] = None,
        include_sys_path: bool = True,
    ):
        self.search_path = [str(entry) for entry in (search_path or [])]
        self.vfs = vfs if vfs is not None else VFS
        self.include_sys_path = include_sys_path

    def entries(self) -> List[str]:
        """Effective search path with duplicates removed."""
        entries = list(self.search_path)
        if self.include_sys_path:
            entries.extend(sys.path)
        return list(dict.fromkeys(entries))

    def resolve(self, name: str) -> Iterator[ResourceRoot]:
        """Lazily yield the resource roots for ``name``.

        Lookup failures are logged and end the iteration; callers never
        see an exception from here.
        """
        name = name.strip("/")
        try:
            for entry in self.entries():
                root = self._match_entry(Path(entry) if entry else Path.cwd(), name)
                if root is not None:
                    logger.debug(f"Resolved '{name}' -> {root}")
                    yield root

            for url in self.vfs.find(name):
                logger.debug(f"Resolved '{name}' -> {url}")
                yield ResourceRoot(url)

        except (OSError, zipfile.BadZipFile) as e:
            logger.warning(
                f"Failed to resolve resources for '{name}': {e}",
                exc_info=True,
                extra={"extra_fields": {"resource_name": name}}
            )

    def _match_entry(self, entry: Path, name: str) -> Optional[ResourceRoot]:
        if entry.is_dir():
            candidate = entry / name
            if candidate.exists():
                return ResourceRoot.for_path(candidate)
        elif entry.is_file() and zipfile.is_zipfile(entry):
            prefix = name + "/"
            with zipfile.ZipFile(entry, "r") as archive:
                if any(member.startswith(prefix) for member in archive.namelist()):
                    return ResourceRoot.for_archive(entry, name)
        return None
