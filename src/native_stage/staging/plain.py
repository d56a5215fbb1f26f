"""Copying of plain files and directories."""

import logging
import shutil
from pathlib import Path

from .errors import PlainCopyError

logger = logging.getLogger(__name__)


def extract_plain(source: Path, destination: Path) -> None:
    """Copy a file or a whole directory tree to ``destination``.

    Existing files are overwritten. For a single file, ``destination``
    is the target file path.

    Raises:
        PlainCopyError: If the copy fails
    """
    source = Path(source)
    destination = Path(destination)

    try:
        if source.is_dir():
            shutil.copytree(source, destination, dirs_exist_ok=True)
        else:
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, destination)
    except OSError as e:
        raise PlainCopyError(
            f"Failed to copy {source} to {destination}: {e}",
            source=str(source),
            destination=str(destination),
        ) from e

    logger.debug(f"Copied {source} -> {destination}")
