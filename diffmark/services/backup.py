"""
Rotating backups of files about to be rewritten.

The newest backup of ``file`` is always ``file.bk``; older ones are shifted
to ``file.bk-001``, ``file.bk-002``, ... with the oldest at the highest index.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from diffmark.services.file_io import FileIOService


class BackupService:
    """Creates rotating backups next to the backed-up file."""

    def __init__(
        self,
        file_service: Optional[FileIOService] = None,
        suffix: str = ".bk",
        index_width: int = 3
    ):
        self.file_service = file_service or FileIOService()
        self.suffix = suffix
        self.index_width = index_width

    def backup_path(self, path: Path | str) -> Path:
        path = Path(path)
        return path.with_name(path.name + self.suffix)

    def rotated_path(self, path: Path | str, index: int) -> Path:
        """Path of the index-th older backup, e.g. ``file.bk-001``."""
        path = Path(path)
        return path.with_name(f"{path.name}{self.suffix}-{index:0{self.index_width}d}")

    def write_backup(self, path: Path | str) -> Path:
        """
        Copy path to its backup location, rotating earlier backups.

        Args:
            path: File to back up

        Returns:
            Path of the new backup

        Raises:
            FileServiceError: If a rename or the copy fails
        """
        path = Path(path)
        backup = self.backup_path(path)

        if self.file_service.exists(backup):
            free_index = 1
            while self.file_service.exists(self.rotated_path(path, free_index)):
                free_index += 1

            # Shift existing backups up by one, newest last
            for j in range(free_index, 1, -1):
                self.file_service.rename(
                    self.rotated_path(path, j - 1),
                    self.rotated_path(path, j)
                )
            self.file_service.rename(backup, self.rotated_path(path, 1))

        self.file_service.copy_file(path, backup)
        logging.info(f"BackupService - Backed up {path} to {backup}")
        return backup
