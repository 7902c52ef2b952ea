"""
Git repository access.

Locates the repository a file belongs to and reads the file's staged
content, by running the ``git`` executable.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Optional, Sequence


NOT_FOUND_ERROR = "NotFoundError"
GIT_UNAVAILABLE_ERROR = "GitUnavailableError"
INDEX_ENTRY_MISSING_ERROR = "IndexEntryMissingError"

UTF8_BOM = "\ufeff"


class GitServiceError(Exception):
    """
    Raised when a git lookup fails.

    Attributes:
        code: Machine readable failure kind
        caller: Operation that failed
    """

    def __init__(self, message: str, code: Optional[str] = None, caller: Optional[str] = None):
        super().__init__(message)
        self.code = code
        self.caller = caller

    @property
    def is_repository_missing(self) -> bool:
        return self.code == NOT_FOUND_ERROR and self.caller == "git.findRoot"


class GitService:
    """Read-only access to the git repository holding a file."""

    def __init__(self, git_executable: str = "git"):
        self.git_executable = git_executable

    def find_git_root(self, path: Path | str) -> Path:
        """
        Find the top level directory of the repository containing path.

        Args:
            path: A file or directory inside the working tree

        Returns:
            Absolute path of the repository root

        Raises:
            GitServiceError: If path is not inside a repository
        """
        path = Path(path).resolve()
        start_dir = path if path.is_dir() else path.parent

        result = self._run_git(["rev-parse", "--show-toplevel"], cwd=start_dir, caller="git.findRoot")
        if result.returncode != 0:
            logging.debug(f"GitService - No repository for {path}: {result.stderr.strip()}")
            raise GitServiceError(
                f"Could not find a git repository for {path}",
                code=NOT_FOUND_ERROR,
                caller="git.findRoot"
            )

        root = Path(result.stdout.strip()).resolve()
        logging.info(f"GitService - Repository root for {path} is {root}")
        return root

    def get_latest_file_content(self, git_root: Path | str, file_path: Path | str) -> str:
        """
        Read the content of a file as recorded in the git index.

        Args:
            git_root: Repository root as returned by find_git_root
            file_path: The working tree file

        Returns:
            The staged content, decoded as UTF-8 without a leading BOM

        Raises:
            GitServiceError: If the file has no stage 0 index entry
        """
        git_root = Path(git_root).resolve()
        file_path = Path(file_path).resolve()

        try:
            relative_path = file_path.relative_to(git_root).as_posix()
        except ValueError:
            raise GitServiceError(
                "Could not find the specified file in the git index.",
                code=INDEX_ENTRY_MISSING_ERROR,
                caller="git.readBlob"
            ) from None

        result = self._run_git(["show", f":{relative_path}"], cwd=git_root, caller="git.readBlob")
        if result.returncode != 0:
            logging.debug(f"GitService - git show failed for {relative_path}: {result.stderr.strip()}")
            raise GitServiceError(
                "Could not find the specified file in the git index.",
                code=INDEX_ENTRY_MISSING_ERROR,
                caller="git.readBlob"
            )

        content = result.stdout
        # Same BOM rule as FileIOService.read_text_file
        if content.startswith(UTF8_BOM):
            content = content[len(UTF8_BOM):]
        return content

    def _run_git(
        self,
        args: Sequence[str],
        *,
        cwd: Path,
        caller: str
    ) -> subprocess.CompletedProcess[str]:
        """Run a git command and capture its decoded output."""
        command = [self.git_executable, *args]
        try:
            process = subprocess.run(
                command,
                cwd=cwd,
                capture_output=True,
                text=False,
                check=False,
            )
        except OSError as e:
            raise GitServiceError(
                f"Could not run {self.git_executable}: {e}",
                code=GIT_UNAVAILABLE_ERROR,
                caller=caller
            ) from e

        stdout = process.stdout.decode("utf-8", errors="replace") if process.stdout else ""
        stderr = process.stderr.decode("utf-8", errors="replace") if process.stderr else ""
        return subprocess.CompletedProcess(process.args, process.returncode, stdout, stderr)
