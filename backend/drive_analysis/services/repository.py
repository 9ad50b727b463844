"""
Drive Repository - manages loading and caching of drive exports.

This abstraction layer lets the server work with exported files now and be
pointed at a live telemetry source later without touching the API.
"""

import hashlib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from drive_analysis.models.raw import RawDrive
from drive_analysis.services.drive_parser import ADAPTERS, parse_drive_file


logger = logging.getLogger(__name__)


@dataclass
class DriveFileSummary:
    """Lightweight summary of one drive export file."""

    id: str
    name: str
    source_file: str
    drive_count: int
    first_started_at: Optional[float]
    last_ended_at: Optional[float]


class DriveRepository:
    """
    Repository for raw drives.

    Currently reads JSON/CSV exports from a folder.
    Caches parsed drives in memory per file.
    """

    def __init__(self, data_folder: Optional[Path] = None):
        """
        Initialize the repository.

        Args:
            data_folder: Folder containing drive exports. If None, must be set later.
        """
        self._data_folder: Optional[Path] = data_folder
        self._cache: dict[str, list[RawDrive]] = {}
        self._index: dict[str, Path] = {}  # id -> filepath mapping

        if data_folder is not None:
            self.scan_folder(data_folder)

    @property
    def data_folder(self) -> Optional[Path]:
        return self._data_folder

    @property
    def file_count(self) -> int:
        return len(self._index)

    def set_data_folder(self, folder: Path) -> int:
        """
        Set the data folder and scan for drive exports.

        Returns:
            Number of export files found
        """
        self._data_folder = folder
        self._cache.clear()
        self._index.clear()
        return self.scan_folder(folder)

    def scan_folder(self, folder: Path) -> int:
        """
        Scan a folder for drive exports and build the index.

        Args:
            folder: Folder to scan

        Returns:
            Number of export files found
        """
        if not folder.exists():
            logger.warning(f"Data folder does not exist: {folder}")
            return 0

        count = 0
        for filepath in sorted(folder.iterdir()):
            if filepath.is_file() and any(a.can_parse(filepath) for a in ADAPTERS):
                file_id = self._filepath_to_id(filepath)
                self._index[file_id] = filepath
                count += 1
                logger.debug(f"Indexed drive export: {file_id} -> {filepath.name}")

        logger.info(f"Scanned {count} drive exports in {folder}")
        return count

    def list_files(self) -> list[DriveFileSummary]:
        """
        List all indexed export files.

        Files that fail to load are logged and skipped.
        """
        summaries = []
        for file_id, filepath in self._index.items():
            drives = self._get_file_drives(file_id)
            if drives is None:
                continue
            summaries.append(DriveFileSummary(
                id=file_id,
                name=filepath.stem,
                source_file=str(filepath),
                drive_count=len(drives),
                first_started_at=min((d.started_at for d in drives), default=None),
                last_ended_at=max((d.ended_at for d in drives), default=None),
            ))
        summaries.sort(key=lambda s: s.name)
        return summaries

    def get_drives(
        self,
        start: Optional[float] = None,
        end: Optional[float] = None,
    ) -> list[RawDrive]:
        """
        Get all drives across export files.

        Args:
            start: Only drives starting at or after this epoch second
            end: Only drives starting at or before this epoch second

        Returns:
            Drives deduplicated by id, ordered by start time
        """
        by_id: dict[int, RawDrive] = {}
        for file_id in self._index:
            for drive in self._get_file_drives(file_id) or []:
                by_id[drive.id] = drive

        drives = [
            d for d in by_id.values()
            if (start is None or d.started_at >= start)
            and (end is None or d.started_at <= end)
        ]
        drives.sort(key=lambda d: d.started_at)
        return drives

    def get_drive(self, drive_id: int) -> Optional[RawDrive]:
        for drive in self.get_drives():
            if drive.id == drive_id:
                return drive
        return None

    def clear_cache(self) -> None:
        """Clear the in-memory cache."""
        self._cache.clear()
        logger.info("Drive cache cleared")

    def _get_file_drives(self, file_id: str) -> Optional[list[RawDrive]]:
        if file_id in self._cache:
            return self._cache[file_id]

        filepath = self._index[file_id]
        try:
            drives = parse_drive_file(filepath)
        except (OSError, ValueError, TypeError) as e:
            logger.error(f"Failed to load drive export {filepath}: {e}")
            return None

        self._cache[file_id] = drives
        logger.debug(f"Loaded and cached {len(drives)} drives from {filepath.name}")
        return drives

    def _filepath_to_id(self, filepath: Path) -> str:
        """Generate a consistent ID from filepath."""
        stat = filepath.stat()
        id_string = f"{filepath.name}_{stat.st_size}_{stat.st_mtime}"
        return hashlib.sha256(id_string.encode()).hexdigest()[:16]


# Global repository instance (set up by app initialization)
_repository: Optional[DriveRepository] = None


def get_repository() -> DriveRepository:
    """Get the global repository instance."""
    global _repository
    if _repository is None:
        _repository = DriveRepository()
    return _repository


def init_repository(data_folder: Path) -> DriveRepository:
    """Initialize the global repository with a data folder."""
    global _repository
    _repository = DriveRepository(data_folder)
    return _repository
