"""Batch file handling for the Chapter Flattener.

This module finds chapters files in a directory and, one file at a time,
backs each one up, flattens its chapter tree and writes it back. It also
provides the inverse operation that restores every backup and removes it.

Files are processed sequentially. A failure on one file is reported and
recorded, and processing moves on to the next file.
"""

import os
import shutil
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from chapter_flattener.config import Config, CHAPTERS_SUFFIX, BACKUP_SUFFIX
from chapter_flattener.document import ChaptersDocument
from chapter_flattener.errors import ChapterFlattenerError, FileSystemError

# Temporary name a backup is copied to before it is moved into place
PARTIAL_SUFFIX = ".partial"


@dataclass
class BatchResult:
    """Result of a flatten or revert run over a directory.

    Attributes:
        operation: "flatten" or "revert"
        processed: Paths of files handled successfully
        failed: Mapping of path to error message for files that failed
        skipped_backups: Chapters files whose existing backup was kept
    """
    operation: str
    processed: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)
    skipped_backups: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.failed

    @property
    def total(self) -> int:
        return len(self.processed) + len(self.failed)


def backup_path_for(path: Path) -> Path:
    """Return the sibling backup path for a chapters file."""
    return path.with_name(path.name + BACKUP_SUFFIX)


def live_path_for(backup_path: Path) -> Path:
    """Return the chapters file a backup file restores."""
    return backup_path.with_name(backup_path.name[:-len(BACKUP_SUFFIX)])


class ChapterFileManager:
    """Flattens chapters files in place and restores them from backups.

    Each file goes through backup, read, flatten and write before the next
    file is touched. Nothing is transformed unless its backup succeeded,
    except when backups are disabled in the configuration.
    """

    def __init__(self, config: Config):
        """Initialize the manager.

        Args:
            config: Run configuration (working directory, backup setting)
        """
        self.config = config
        self.working_dir = Path(config.working_dir)

    def _find(self, suffix: str) -> List[Path]:
        try:
            entries = list(self.working_dir.iterdir())
        except OSError as e:
            raise FileSystemError(
                "Failed to list directory",
                context={
                    "file_path": str(self.working_dir),
                    "operation": "list",
                    "cause": str(e)
                }
            )
        return sorted(
            (entry for entry in entries if entry.name.endswith(suffix) and entry.is_file()),
            key=lambda entry: entry.name
        )

    def find_chapter_files(self) -> List[Path]:
        """List the chapters files in the working directory, sorted by name."""
        return self._find(CHAPTERS_SUFFIX)

    def find_backup_files(self) -> List[Path]:
        """List the chapters backup files in the working directory, sorted by name."""
        return self._find(CHAPTERS_SUFFIX + BACKUP_SUFFIX)

    def backup_file(self, path: Path) -> bool:
        """Copy a chapters file to its backup path.

        An existing backup is left alone: it holds the file as it was before
        the first flatten, which a later run must not replace. The copy is
        written to a temporary sibling and moved into place, so a failed copy
        never leaves a partial backup behind.

        Returns:
            True if a backup was written, False if one already existed

        Raises:
            FileSystemError: If the copy fails
        """
        backup_path = backup_path_for(path)
        if backup_path.exists():
            return False
        partial_path = backup_path.with_name(backup_path.name + PARTIAL_SUFFIX)
        try:
            shutil.copy2(path, partial_path)
            os.replace(partial_path, backup_path)
        except OSError as e:
            partial_path.unlink(missing_ok=True)
            raise FileSystemError(
                "Failed to back up chapters file",
                context={
                    "file_path": str(path),
                    "operation": "backup",
                    "cause": str(e)
                }
            )
        return True

    def flatten_file(self, path: Path) -> int:
        """Back up (if enabled), flatten and rewrite one chapters file.

        Args:
            path: Chapters file to rewrite in place

        Returns:
            Number of chapters in the flattened list

        Raises:
            FileSystemError: If backup, read or write fails
            ParseError: If the file is not a valid chapters document
        """
        if self.config.backup_enabled:
            self.backup_file(path)

        document = ChaptersDocument.from_file(str(path))
        flattened = document.flattened()
        flattened.to_file(str(path))
        return len(flattened.chapter_info["chapters"])

    def revert_file(self, backup_path: Path) -> Path:
        """Restore a chapters file from its backup, then delete the backup.

        The backup is only deleted once the restore copy has succeeded.

        Args:
            backup_path: Backup file to restore from

        Returns:
            Path of the restored chapters file

        Raises:
            FileSystemError: If the copy or the delete fails
        """
        live_path = live_path_for(backup_path)
        try:
            shutil.copy2(backup_path, live_path)
        except OSError as e:
            raise FileSystemError(
                "Failed to restore chapters file from backup",
                context={
                    "file_path": str(backup_path),
                    "operation": "restore",
                    "cause": str(e)
                }
            )

        try:
            backup_path.unlink()
        except OSError as e:
            raise FileSystemError(
                "Restored chapters file but failed to delete backup",
                context={
                    "file_path": str(backup_path),
                    "operation": "delete backup",
                    "cause": str(e)
                }
            )
        return live_path

    def flatten_all(self) -> BatchResult:
        """Flatten every chapters file in the working directory.

        Returns:
            BatchResult: Files processed and files that failed
        """
        result = BatchResult(operation="flatten")
        paths = self.find_chapter_files()
        if not paths:
            print("No chapter files found.")
            return result

        for path in paths:
            print(f"Flattening {path.name}...")
            try:
                if self.config.backup_enabled and backup_path_for(path).exists():
                    result.skipped_backups.append(str(path))
                    print(f"  Keeping existing backup {backup_path_for(path).name} (may be older than this file)")
                count = self.flatten_file(path)
            except ChapterFlattenerError as e:
                result.failed[str(path)] = str(e)
                print(str(e), file=sys.stderr)
                continue
            result.processed.append(str(path))
            print(f"  ✓ {count} chapters written")

        return result

    def revert_all(self) -> BatchResult:
        """Restore every chapters file that has a backup and delete the backups.

        Returns:
            BatchResult: Backups restored and backups that failed
        """
        result = BatchResult(operation="revert")
        backups = self.find_backup_files()
        if not backups:
            print("No backup files found.")
            return result

        for backup_path in backups:
            print(f"Restoring {live_path_for(backup_path).name} from {backup_path.name}...")
            try:
                self.revert_file(backup_path)
            except ChapterFlattenerError as e:
                result.failed[str(backup_path)] = str(e)
                print(str(e), file=sys.stderr)
                continue
            result.processed.append(str(backup_path))
            print("  ✓ Restored")

        return result
