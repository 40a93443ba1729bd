"""Filesystem-specific string replacement."""

import logging
import os
import shutil
import stat
import tempfile
from pathlib import Path
from typing import Callable

from text_edit.text_edit_applier import TextEditApplier
from text_edit.text_edit_config import TextEditConfig
from text_edit.text_edit_exceptions import EditError
from text_edit.text_edit_path_safety import assert_path_is_safe
from text_edit.text_edit_types import PatchResult


class FilesystemTextEditApplier(TextEditApplier):
    """
    String replacement for files on disk.

    Files are read and written without newline translation so CRLF files
    keep their line endings byte for byte.
    """

    def __init__(
        self,
        config: TextEditConfig | None = None,
        encoding: str = 'utf-8',
        max_file_size_mb: int = 10
    ):
        """
        Initialize the applier.

        Args:
            config: Matching limits; defaults are used when not given
            encoding: Text encoding used to read and write files
            max_file_size_mb: Maximum file size in MB for read/write operations
        """
        super().__init__(config)
        self._encoding = encoding
        self._max_file_size_bytes = max_file_size_mb * 1024 * 1024
        self._logger = logging.getLogger("FilesystemTextEditApplier")

    def read_file(self, path: Path) -> str:
        """
        Read a file's text exactly as stored.

        Args:
            path: File to read

        Returns:
            File content

        Raises:
            FileNotFoundError: If the file does not exist
            EditError: If the file is too large, is not a file, or cannot be decoded
        """
        if path.exists() and not path.is_file():
            raise EditError(f"Path is not a file: {path}", 'notAFile', str(path))

        file_size = path.stat().st_size
        if file_size > self._max_file_size_bytes:
            size_mb = file_size / (1024 * 1024)
            max_mb = self._max_file_size_bytes / (1024 * 1024)
            raise EditError(f"File too large: {size_mb:.1f}MB (max: {max_mb:.1f}MB)", 'fileTooLarge', str(path))

        try:
            with open(path, 'r', encoding=self._encoding, newline='') as f:
                return f.read()

        except UnicodeDecodeError as e:
            raise EditError(
                f"Failed to decode file with encoding '{self._encoding}': {str(e)}",
                'encodingError',
                str(path)
            ) from e

    def write_file(self, path: Path, content: str, backup: bool = False) -> Path | None:
        """
        Write a file atomically, without newline translation.

        Args:
            path: File to write
            content: New file content
            backup: Copy the existing file to <name>.bak first

        Returns:
            Path of the backup file, or None if no backup was made

        Raises:
            EditError: If the file cannot be written
        """
        backup_path = None
        tmp_path = None

        try:
            # Existing files keep their permissions, new ones follow the umask
            if path.exists():
                mode = stat.S_IMODE(path.stat().st_mode)

            else:
                umask = os.umask(0)
                os.umask(umask)
                mode = 0o666 & ~umask

            if backup and path.exists():
                backup_path = path.with_suffix(path.suffix + '.bak')
                shutil.copy2(path, backup_path)
                self._logger.debug("Created backup %s", backup_path)

            path.parent.mkdir(parents=True, exist_ok=True)

            # Write to temporary file first, then rename for atomicity
            with tempfile.NamedTemporaryFile(
                mode='w',
                encoding=self._encoding,
                newline='',
                dir=path.parent,
                delete=False,
                suffix='.tmp'
            ) as tmp_file:
                tmp_path = Path(tmp_file.name)
                tmp_file.write(content)

            tmp_path.chmod(mode)
            tmp_path.replace(path)
            tmp_path = None

        except UnicodeEncodeError as e:
            raise EditError(
                f"Failed to encode file with encoding '{self._encoding}': {str(e)}",
                'encodingError',
                str(path)
            ) from e

        except PermissionError as e:
            raise EditError(f"Permission denied writing file: {str(e)}", 'permissionDenied', str(path)) from e

        except OSError as e:
            raise EditError(f"Failed to write file: {str(e)}", 'unknownError', str(path)) from e

        finally:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)

        return backup_path

    def apply_edit_to_file(
        self,
        path: Path | str,
        old_string: str,
        new_string: str,
        write: bool = False,
        backup: bool = False,
        is_notebook_cell: Callable[[str], bool] | None = None
    ) -> PatchResult:
        """
        Replace the single occurrence of old_string in a file with new_string.

        Args:
            path: File to edit; it is created if missing and old_string is empty
            old_string: Text to find
            new_string: Replacement text
            write: Write the updated content back to the file
            backup: When writing, copy the existing file to <name>.bak first
            is_notebook_cell: Returns True if path refers to notebook cell content

        Returns:
            PatchResult

        Raises:
            UnsafePathError: If the path is not safe to write
            EditError: If the edit cannot be applied or the file cannot be read or written
        """
        file_path = Path(path)
        assert_path_is_safe(str(file_path))

        result = self.apply_edit(
            str(file_path),
            old_string,
            new_string,
            lambda: self.read_file(file_path),
            is_notebook_cell
        )

        if write:
            self.write_file(file_path, result.updated_file, backup)
            self._logger.info("Updated %s (%d edit(s))", file_path, len(result.edits))

        return result
