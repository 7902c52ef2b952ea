"""
Conflict marking workflow for a single file.

Sources the original version of a file (another file, or the git index),
marks the differences against the working copy and writes the result back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Optional

from diffmark.core.merge.marker import DiffMarker
from diffmark.core.merge.three_way import ThreeWayMerger
from diffmark.core.models import MergeResult
from diffmark.services.backup import BackupService
from diffmark.services.file_io import FileIOService, LineEnding
from diffmark.services.git_service import GitService, GitServiceError
from diffmark.services.settings import ApplicationSettings


class MarkStatus(Enum):
    """Outcome of a marking run."""
    NOT_FOUND = auto()           # Target file missing
    IS_DIRECTORY = auto()        # Target is a directory
    ORIGINAL_NOT_FOUND = auto()  # --orig file missing
    NO_REPOSITORY = auto()       # No git repository around the target
    READ_ERROR = auto()          # Target or original unreadable
    WRITE_ERROR = auto()         # Marked content could not be written
    NO_DIFFERENCES = auto()      # Nothing to mark
    DRY_RUN = auto()             # Marked content produced, not written
    WRITTEN = auto()             # Marked content written to the target


_FAILURES = {
    MarkStatus.NOT_FOUND,
    MarkStatus.IS_DIRECTORY,
    MarkStatus.ORIGINAL_NOT_FOUND,
    MarkStatus.NO_REPOSITORY,
    MarkStatus.READ_ERROR,
    MarkStatus.WRITE_ERROR,
}


@dataclass
class MarkRequest:
    """What to mark and how."""
    target: Path
    original: Optional[Path] = None
    dry_run: bool = False
    backup: bool = False


@dataclass
class MarkOutcome:
    """Result of a marking run."""
    status: MarkStatus
    target: Path
    message: str
    content: Optional[str] = None
    result: Optional[MergeResult] = None
    backup_path: Optional[Path] = None

    @property
    def is_error(self) -> bool:
        return self.status in _FAILURES


class MarkService:
    """Runs the mark workflow with injected collaborators."""

    def __init__(
        self,
        marker: Optional[DiffMarker] = None,
        file_service: Optional[FileIOService] = None,
        git_service: Optional[GitService] = None,
        backup_service: Optional[BackupService] = None
    ):
        self.marker = marker or DiffMarker()
        self.file_service = file_service or FileIOService()
        self.git_service = git_service or GitService()
        self.backup_service = backup_service or BackupService(self.file_service)

    @classmethod
    def from_settings(cls, settings: ApplicationSettings) -> MarkService:
        """Build a service wired according to the application settings."""
        merger = ThreeWayMerger.with_labels(
            settings.markers.left_label,
            settings.markers.right_label
        )
        file_service = FileIOService(
            default_encoding=settings.io.encoding,
            detect_encoding=settings.io.detect_encoding,
            atomic_writes=settings.io.atomic_writes
        )
        return cls(
            marker=DiffMarker(merger),
            file_service=file_service,
            git_service=GitService(settings.io.git_executable),
            backup_service=BackupService(
                file_service,
                suffix=settings.backup.suffix,
                index_width=settings.backup.index_width
            )
        )

    def run(self, request: MarkRequest) -> MarkOutcome:
        """
        Mark the differences between a file and its original version.

        Args:
            request: Target file and options

        Returns:
            MarkOutcome describing what happened

        Raises:
            GitServiceError: For git failures other than a missing repository
            FileServiceError: If the backup cannot be made
        """
        target = Path(request.target).resolve()

        if not self.file_service.exists(target):
            return MarkOutcome(MarkStatus.NOT_FOUND, target, f"File not found: {target}")

        if self.file_service.stats(target).is_directory:
            return MarkOutcome(MarkStatus.IS_DIRECTORY, target,
                               f"Cannot process a directory: {target}")

        modified = self.file_service.read_text_file(target)
        if not modified.success:
            return MarkOutcome(MarkStatus.READ_ERROR, target, modified.error or f"Cannot read {target}")

        if modified.content.line_ending not in (LineEnding.LF, LineEnding.NONE):
            # Lines are split on \n only, so a \r stays part of each line
            logging.warning(
                f"MarkService - {target} uses {modified.content.line_ending.name} line endings, "
                f"markers are written with LF"
            )

        if request.original is not None:
            original_path = Path(request.original).resolve()
            if not self.file_service.exists(original_path):
                return MarkOutcome(MarkStatus.ORIGINAL_NOT_FOUND, target,
                                   f"Original file not found: {original_path}")

            original = self.file_service.read_text_file(original_path)
            if not original.success:
                return MarkOutcome(MarkStatus.READ_ERROR, target,
                                   original.error or f"Cannot read {original_path}")
            original_text = original.text
        else:
            try:
                git_root = self.git_service.find_git_root(target)
            except GitServiceError as e:
                if not e.is_repository_missing:
                    raise
                return MarkOutcome(
                    MarkStatus.NO_REPOSITORY, target,
                    "Could not find the .git directory. "
                    "To compare with a local file, use the --orig flag."
                )
            original_text = self.git_service.get_latest_file_content(git_root, target)

        result = self.marker.mark(original_text, modified.text)
        logging.info(f"MarkService - {target}: {result.conflict_count} conflict block(s)")

        if not result.has_conflicts:
            return MarkOutcome(MarkStatus.NO_DIFFERENCES, target, "No differences found.",
                               result=result)

        if request.dry_run:
            return MarkOutcome(MarkStatus.DRY_RUN, target, result.content,
                               content=result.content, result=result)

        backup_path = None
        if request.backup:
            backup_path = self.backup_service.write_backup(target)

        written = self.file_service.write_text_file(target, result.content, modified.encoding)
        if not written.success:
            return MarkOutcome(MarkStatus.WRITE_ERROR, target,
                               written.error or f"Cannot write {target}",
                               result=result, backup_path=backup_path)

        return MarkOutcome(
            MarkStatus.WRITTEN, target,
            "Successfully added conflict markers to the file.",
            content=result.content,
            result=result,
            backup_path=backup_path
        )
