"""
File-based profile store backend
"""
import json
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Any, Iterator, Optional, TextIO

from ...core.interfaces import StoreBackend
from ...core.exceptions import StoreError
from ...core.constants import DEFAULT_STORE_FILE, STORE_FILE_MODE
from ...core.logging import get_logger

logger = get_logger(__name__)


class JsonFileBackend(StoreBackend):
    """
    Stores the profile store document as a single JSON file.

    The file is readable and writable by its owner only. Writes go to a
    sibling temporary file which replaces the store file once flushed to
    disk, so a crash mid-write leaves the previous store intact.
    """

    def __init__(self, path: Optional[Path] = None):
        """
        Initialize file backend.

        Args:
            path: Store file path (default: ec2.json next to the installation)
        """
        if path is None:
            path = DEFAULT_STORE_FILE

        self.path = Path(path).expanduser()

    def _get_temp_file(self) -> Path:
        """Get temporary file path used while writing"""
        return self.path.with_name(f".{self.path.name}.{os.getpid()}.tmp")

    def load(self) -> Optional[Dict[str, Any]]:
        """Load the store document, None if the file does not exist"""
        if not self.path.exists():
            return None

        try:
            data = json.loads(self.path.read_text(encoding='utf-8'))
        except (OSError, ValueError) as e:
            raise StoreError(f"Failed to read profile store {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise StoreError(f"Profile store {self.path} is not a JSON object")
        return data

    def save(self, data: Dict[str, Any]) -> None:
        """Write the store document and wait until it is on disk"""
        temp_file = self._get_temp_file()
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self._open_private(temp_file) as fh:
                json.dump(data, fh, indent=2, sort_keys=True)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(temp_file, self.path)
            os.chmod(self.path, STORE_FILE_MODE)
        except OSError as e:
            if temp_file.exists():
                temp_file.unlink()
            raise StoreError(f"Failed to write profile store {self.path}: {e}") from e
        logger.debug("Saved profile store to %s", self.path)

    @contextmanager
    def _open_private(self, path: Path) -> Iterator[TextIO]:
        """Open path for writing with owner-only permissions"""
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, STORE_FILE_MODE)
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            yield fh
