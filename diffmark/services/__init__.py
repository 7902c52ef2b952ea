"""
Services: file access, git lookup, backups, settings and the mark workflow.
"""

from diffmark.services.backup import BackupService
from diffmark.services.file_io import FileIOService, FileServiceError, ReadResult, WriteResult
from diffmark.services.git_service import GitService, GitServiceError
from diffmark.services.mark_service import MarkOutcome, MarkRequest, MarkService, MarkStatus
from diffmark.services.settings import ApplicationSettings, SettingsManager

__all__ = [
    'BackupService',
    'FileIOService',
    'FileServiceError',
    'ReadResult',
    'WriteResult',
    'GitService',
    'GitServiceError',
    'MarkOutcome',
    'MarkRequest',
    'MarkService',
    'MarkStatus',
    'ApplicationSettings',
    'SettingsManager',
]
