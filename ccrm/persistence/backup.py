"""
Directory backup into timestamped snapshot folders.
"""

import os
import shutil
from pathlib import Path
from typing import Optional, Union

import structlog

from ..config import Settings, get_settings
from ..core.exceptions import BackupError

logger = structlog.get_logger(__name__)


def _raise_walk_error(error: OSError) -> None:
    raise error


class BackupService:
    """Mirrors a directory tree into ``<data_folder>/backup-<timestamp>``."""

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or get_settings()

    @property
    def backup_root(self) -> Path:
        return self._settings.data_folder

    def _destination(self) -> Path:
        return self._settings.data_folder / f"backup-{self._settings.timestamp()}"

    def backup_directory(self, source: Union[str, Path]) -> Path:
        """Copy ``source`` recursively into a fresh backup folder.

        Directories are created before the files inside them are copied.
        Links to directories are not followed; each becomes an empty
        directory in the snapshot.
        The first I/O failure stops the walk and is raised as a BackupError;
        whatever was already copied stays in place.
        """
        source = Path(source)
        destination = self._destination()

        if not source.is_dir():
            raise BackupError(
                f"Backup source {source} is not a directory",
                error_code="BACKUP_SOURCE_INVALID",
                details={'source': str(source), 'destination': str(destination)}
            )

        logger.info("backup_started", source=str(source), destination=str(destination))
        files_copied = 0
        try:
            destination.mkdir(parents=True, exist_ok=True)
            skip = destination.resolve()
            for dirpath, dirnames, filenames in os.walk(source, onerror=_raise_walk_error):
                current = Path(dirpath)
                links = [d for d in dirnames if (current / d).is_symlink()]
                # Never descend into the snapshot being written or through a link.
                dirnames[:] = [d for d in dirnames if d not in links and (current / d).resolve() != skip]
                target_dir = destination / current.relative_to(source)
                target_dir.mkdir(parents=True, exist_ok=True)
                for name in links:
                    (target_dir / name).mkdir(exist_ok=True)
                for filename in filenames:
                    shutil.copyfile(current / filename, target_dir / filename)
                    files_copied += 1
        except OSError as e:
            logger.error("backup_failed", source=str(source), destination=str(destination),
                         files_copied=files_copied, error=str(e))
            raise BackupError(
                f"Backup of {source} into {destination} failed: {e}",
                error_code="BACKUP_IO_ERROR",
                details={'source': str(source), 'destination': str(destination), 'files_copied': files_copied}
            ) from e

        logger.info("backup_completed", source=str(source), destination=str(destination), files_copied=files_copied)
        return destination
