"""
Command line entry point for diffmark.

This module handles:
- Command line argument parsing
- Logging configuration
- Settings loading
- Running the mark workflow and reporting its outcome
- Exception handling
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, List

from diffmark import __version__
from diffmark.services.file_io import FileServiceError
from diffmark.services.git_service import GitServiceError
from diffmark.services.mark_service import MarkRequest, MarkService, MarkStatus
from diffmark.services.settings import SettingsManager


# =============================================================================
# Constants
# =============================================================================

APP_NAME = "diffmark"
APP_VERSION = __version__

EXIT_OK = 0
EXIT_ERROR = 1


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class CommandLineArgs:
    """Parsed command line arguments."""
    file_path: str = ""
    original_path: Optional[str] = None
    dry_run: bool = False
    backup: Optional[bool] = None
    config_file: Optional[str] = None
    log_level: Optional[str] = None


# =============================================================================
# Logging Setup
# =============================================================================

class LogFormatter(logging.Formatter):
    """Custom log formatter with colors for console."""

    COLORS = {
        logging.INFO: '\033[32m',      # Green
        logging.WARNING: '\033[33m',   # Yellow
        logging.ERROR: '\033[31m',     # Red
        logging.CRITICAL: '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def __init__(self, use_colors: bool = True):
        super().__init__(
            fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        self.use_colors = use_colors and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)

        if self.use_colors:
            color = self.COLORS.get(record.levelno, '')
            return f"{color}{formatted}{self.RESET}"

        return formatted


def setup_logging(level: str = "WARNING", log_file: Optional[Path] = None) -> logging.Logger:
    """
    Configure application logging.

    Log records go to stderr so that dry run output on stdout stays clean.

    Args:
        level: Log level string
        log_file: Optional file path for logging

    Returns:
        Root logger instance
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(LogFormatter(use_colors=True))
    root_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(
            log_file,
            encoding='utf-8'
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(LogFormatter(use_colors=False))
        root_logger.addHandler(file_handler)

    return root_logger


# =============================================================================
# Exception Handling
# =============================================================================

class ExceptionHandler:
    """
    Global exception handler for unhandled exceptions.

    Logs the exception and prints a short message instead of a traceback.
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def handle_exception(
        self,
        exc_type: type,
        exc_value: BaseException,
        exc_tb
    ) -> None:
        """Handle an unhandled exception."""
        # Don't handle keyboard interrupt
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_tb)
            return

        self.logger.critical(
            "Unhandled exception",
            exc_info=(exc_type, exc_value, exc_tb)
        )
        print(f"An unexpected error occurred: {exc_type.__name__}: {exc_value}", file=sys.stderr)


# =============================================================================
# Argument Parsing
# =============================================================================

def parse_arguments(args: Optional[List[str]] = None) -> CommandLineArgs:
    """
    Parse command line arguments.

    Args:
        args: Arguments to parse (defaults to sys.argv)

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="A tool to diff a file and create merge conflict markers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s notes.txt                     Mark changes against the git index
  %(prog)s -o old.txt new.txt            Mark changes against another file
  %(prog)s -d notes.txt                  Print the marked text only
  %(prog)s --backup notes.txt            Keep notes.txt.bk before writing
        """
    )

    parser.add_argument(
        'file',
        help='File to mark'
    )
    parser.add_argument(
        '-o', '--orig',
        metavar='ORIGINAL_FILE',
        help='The original file to compare against'
    )
    parser.add_argument(
        '-d', '--dry-run',
        action='store_true',
        help='Print the diff to stdout without writing to the file'
    )
    parser.add_argument(
        '--backup',
        action='store_true',
        default=None,
        help='Create a backup of the target file before modifying it'
    )

    # Configuration
    parser.add_argument(
        '-c', '--config',
        help='Configuration file path'
    )

    # Logging
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        default=None,
        help='Log level'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=APP_VERSION
    )

    parsed = parser.parse_args(args)

    result = CommandLineArgs()
    result.file_path = parsed.file
    result.original_path = parsed.orig
    result.dry_run = parsed.dry_run
    result.backup = parsed.backup
    result.config_file = parsed.config

    if parsed.verbose:
        result.log_level = 'DEBUG'
    else:
        result.log_level = parsed.log_level

    return result


# =============================================================================
# Main
# =============================================================================

def run(args: CommandLineArgs, service: MarkService) -> int:
    """
    Run the mark workflow and report the outcome.

    Returns:
        Exit code
    """
    request = MarkRequest(
        target=Path(args.file_path),
        original=Path(args.original_path) if args.original_path else None,
        dry_run=args.dry_run,
        backup=bool(args.backup)
    )

    try:
        outcome = service.run(request)
    except (GitServiceError, FileServiceError) as e:
        logging.debug("mark failed", exc_info=True)
        print(f"An unexpected error occurred: {e}", file=sys.stderr)
        return EXIT_ERROR

    if outcome.is_error:
        print(outcome.message, file=sys.stderr)
        return EXIT_ERROR

    if outcome.status == MarkStatus.DRY_RUN:
        print(outcome.content)
    else:
        print(outcome.message)

    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """
    Application main entry point.

    Returns:
        Exit code (0 for success)
    """
    args = parse_arguments(argv)

    settings_manager = SettingsManager(Path(args.config_file) if args.config_file else None)
    settings = settings_manager.settings

    log_file = Path(settings.log_file) if settings.log_file else None
    logger = setup_logging(args.log_level or settings.log_level, log_file)
    logger.debug(f"Starting {APP_NAME} v{APP_VERSION}")

    exception_handler = ExceptionHandler(logger)
    sys.excepthook = exception_handler.handle_exception

    if args.backup is None:
        args.backup = settings.backup.enabled

    return run(args, MarkService.from_settings(settings))
