"""Rename an extracted update archive to the theme slug."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Callable

from themeupdater.exceptions import RenameFailedError

logger = logging.getLogger(__name__)

Mover = Callable[[str, str], object]


class SourceDirectoryFixup:
    """Make ``<remote_source_parent>/<slug>`` the extracted source directory.

    Release archives unpack to names like ``owner-repo-abc123``; installation
    needs the directory to match the slug exactly.
    """

    def __init__(self, mover: Mover = shutil.move) -> None:
        self._mover = mover

    def fix(self, extracted_path: str | Path, remote_source_parent: str | Path, slug: str) -> Path:
        """Return the corrected path, renaming the directory when needed.

        Raises:
            RenameFailedError: the directory could not be moved into place.
        """
        source = Path(extracted_path)
        target = Path(remote_source_parent) / slug
        if source == target:
            return source
        if not slug or Path(slug).name != slug:
            raise RenameFailedError(slug, "invalid slug")
        if target.exists():
            raise RenameFailedError(slug, f"{target} already exists")
        try:
            self._mover(str(source), str(target))
        except OSError as exc:
            raise RenameFailedError(slug, str(exc)) from exc
        logger.info("renamed update source %s -> %s", source, target)
        return target
