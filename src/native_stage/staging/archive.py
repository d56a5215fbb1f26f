"""Extraction of a folder-shaped entry out of a zip archive."""

import logging
import shutil
import zipfile
import zlib
from pathlib import Path

from .resources import ArchiveConnection

logger = logging.getLogger(__name__)


def _is_safe_path(base_dir: Path, target_path: Path) -> bool:
    """Check that ``target_path`` stays inside ``base_dir`` (no path traversal)."""
    return target_path.resolve().is_relative_to(base_dir.resolve())


def extract_archive(connection: ArchiveConnection, destination: Path) -> int:
    """Copy every entry below the connection's entry path into ``destination``.

    Only entries named ``<entry>/...`` take part; the part after that
    prefix becomes the path under ``destination``. A file that already
    exists with the entry's uncompressed size is left alone. Read or
    write errors are logged and abandon the remaining entries; whatever
    was written so far stays in place for the next run to complete.

    Args:
        connection: Archive connection pointing at a folder entry
        destination: Directory that corresponds to the folder entry

    Returns:
        Number of files written
    """
    destination = Path(destination)
    base_path = connection.entry_name.strip("/")
    prefix = base_path + "/"
    copied = 0
    skipped = 0

    try:
        with connection.open_archive() as archive:
            for info in archive.infolist():
                if not info.filename.startswith(prefix):
                    continue

                relative_name = info.filename[len(prefix):]
                target_path = destination / relative_name if relative_name else destination

                if not _is_safe_path(destination, target_path):
                    logger.warning(f"Skipping unsafe path: {info.filename}")
                    continue

                if info.is_dir():
                    target_path.mkdir(parents=True, exist_ok=True)
                    continue

                if target_path.is_file() and target_path.stat().st_size == info.file_size:
                    skipped += 1
                    continue

                target_path.parent.mkdir(parents=True, exist_ok=True)
                with archive.open(info) as source, open(target_path, "wb") as target:
                    shutil.copyfileobj(source, target)
                copied += 1
                logger.debug(f"Extracted {info.filename} -> {target_path}")

    # zipfile signals truncated, encrypted or unsupported members outside OSError
    except (
        OSError,
        EOFError,
        RuntimeError,
        NotImplementedError,
        zipfile.BadZipFile,
        zlib.error,
    ) as e:
        logger.warning(
            f"Failed to extract {connection.archive_path}!/{base_path}: {e}",
            exc_info=True
        )

    logger.debug(
        f"Archive {connection.archive_path.name}!/{base_path}: "
        f"{copied} extracted, {skipped} already staged"
    )
    return copied
