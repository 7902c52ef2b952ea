"""
Application settings management.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Optional


APP_CONFIG_DIR = "diffmark"
SETTINGS_FILE = "settings.json"


@dataclass
class MarkerSettings:
    """Settings for conflict markers."""
    # Empty labels give bare markers ("<<<<<<<" / ">>>>>>>")
    left_label: str = ""
    right_label: str = ""


@dataclass
class BackupSettings:
    """Settings for backups of marked files."""
    enabled: bool = False
    suffix: str = ".bk"
    index_width: int = 3


@dataclass
class IOSettings:
    """Settings for reading and writing files."""
    encoding: str = "utf-8"
    detect_encoding: bool = False
    atomic_writes: bool = True
    git_executable: str = "git"


@dataclass
class ApplicationSettings:
    """Main application settings container."""
    markers: MarkerSettings = field(default_factory=MarkerSettings)
    backup: BackupSettings = field(default_factory=BackupSettings)
    io: IOSettings = field(default_factory=IOSettings)

    log_level: str = "WARNING"
    log_file: str = ""


class SettingsManager:
    """Manager for loading/saving application settings."""

    def __init__(self, settings_path: Optional[Path] = None):
        self.settings_path = Path(settings_path) if settings_path else self._get_default_path()
        self._settings: Optional[ApplicationSettings] = None

    @staticmethod
    def _get_default_path() -> Path:
        """Get the default settings file path."""
        if os.name == 'nt':
            # Windows
            app_data = os.environ.get('APPDATA', os.path.expanduser('~'))
            return Path(app_data) / APP_CONFIG_DIR / SETTINGS_FILE
        else:
            # Linux/Mac
            config_home = os.environ.get('XDG_CONFIG_HOME',
                                         os.path.expanduser('~/.config'))
            return Path(config_home) / APP_CONFIG_DIR / SETTINGS_FILE

    @property
    def settings(self) -> ApplicationSettings:
        """Get current settings, loading from disk if needed."""
        if self._settings is None:
            self._settings = self.load()
        return self._settings

    def load(self) -> ApplicationSettings:
        """Load settings from disk, falling back to defaults."""
        if not self.settings_path.exists():
            return ApplicationSettings()

        try:
            with open(self.settings_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logging.warning(f"SettingsManager - Could not read {self.settings_path}: {e}")
            return ApplicationSettings()

        if not isinstance(data, dict):
            logging.warning(f"SettingsManager - Ignoring malformed settings in {self.settings_path}")
            return ApplicationSettings()

        return self._from_dict(data)

    def save(self, settings: Optional[ApplicationSettings] = None) -> bool:
        """Save settings to disk."""
        settings = settings or self._settings
        if settings is None:
            return False

        try:
            self.settings_path.parent.mkdir(parents=True, exist_ok=True)

            with open(self.settings_path, 'w', encoding='utf-8') as f:
                json.dump(self._to_dict(settings), f, indent=2)
        except OSError as e:
            logging.error(f"SettingsManager - Could not save {self.settings_path}: {e}")
            return False

        self._settings = settings
        return True

    def reset(self) -> ApplicationSettings:
        """Reset to default settings."""
        self._settings = ApplicationSettings()
        self.save()
        return self._settings

    def _to_dict(self, settings: ApplicationSettings) -> dict:
        """Convert settings to dictionary for JSON serialization."""
        return asdict(settings)

    def _from_dict(self, data: dict) -> ApplicationSettings:
        """Convert dictionary back to settings objects."""
        def section(name: str) -> dict:
            value = data.get(name, {})
            return value if isinstance(value, dict) else {}

        def pick(values: dict, key: str, default: Any) -> Any:
            value = values.get(key, default)
            # Reject values of the wrong type
            if not isinstance(value, type(default)):
                return default
            return value

        markers_data = section('markers')
        markers = MarkerSettings(
            left_label=pick(markers_data, 'left_label', MarkerSettings.left_label),
            right_label=pick(markers_data, 'right_label', MarkerSettings.right_label),
        )

        backup_data = section('backup')
        backup = BackupSettings(
            enabled=pick(backup_data, 'enabled', BackupSettings.enabled),
            suffix=pick(backup_data, 'suffix', BackupSettings.suffix) or BackupSettings.suffix,
            index_width=max(1, pick(backup_data, 'index_width', BackupSettings.index_width)),
        )

        io_data = section('io')
        io = IOSettings(
            encoding=pick(io_data, 'encoding', IOSettings.encoding),
            detect_encoding=pick(io_data, 'detect_encoding', IOSettings.detect_encoding),
            atomic_writes=pick(io_data, 'atomic_writes', IOSettings.atomic_writes),
            git_executable=pick(io_data, 'git_executable', IOSettings.git_executable),
        )

        return ApplicationSettings(
            markers=markers,
            backup=backup,
            io=io,
            log_level=pick(data, 'log_level', ApplicationSettings.log_level),
            log_file=pick(data, 'log_file', ApplicationSettings.log_file),
        )
