"""
Export and import of a history log as a plain text file.
"""
import logging
from pathlib import Path
from typing import List, Optional, Union

from .config import HISTORY_HEADER
from .history import HistoryLog

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class HistoryStoreError(Exception):
    """Base class for history persistence failures."""
    pass


class ResourceUnavailableError(HistoryStoreError):
    """Raised when no file is configured or it cannot be opened."""
    pass


class HistoryNotFoundError(HistoryStoreError):
    """Raised when loading from a file that does not exist."""
    pass


class HistoryStore:
    """Writes rendered history entries to a text file and reads them back."""

    def __init__(self, path: Optional[PathLike] = None):
        """
        Initialize store.

        Args:
            path: Target file. Must be set (here or via set_path) before
                save() or load() are called
        """
        self._path: Optional[Path] = None
        self.set_path(path)

    @property
    def path(self) -> Optional[Path]:
        return self._path

    def set_path(self, path: Optional[PathLike]) -> None:
        self._path = Path(path) if path else None

    def save(self, log: HistoryLog) -> int:
        """
        Write the header and one rendered line per entry.

        Args:
            log: History to export

        Returns:
            Number of entries written

        Raises:
            ResourceUnavailableError: If no path is configured or the
                file cannot be written
        """
        path = self._require_path()
        lines = [HISTORY_HEADER] + [record.render() for record in log.entries()]

        try:
            path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        except OSError as e:
            logger.error(f"Cannot write history to {path}: {e}")
            raise ResourceUnavailableError(f"Cannot write history to {path}: {e}") from e

        logger.info(f"Saved {len(lines) - 1} history entries to {path}")
        return len(lines) - 1

    def load(self) -> List[str]:
        """
        Read the saved lines, header included, without re-parsing them.

        Returns:
            Lines of the file without line terminators

        Raises:
            ResourceUnavailableError: If no path is configured or the
                file cannot be read
            HistoryNotFoundError: If the file does not exist
        """
        path = self._require_path()

        if not path.exists():
            raise HistoryNotFoundError(f"History file does not exist: {path}")

        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Cannot read history from {path}: {e}")
            raise ResourceUnavailableError(f"Cannot read history from {path}: {e}") from e

        # Only "\n" ends a line; form feeds and the like stay in the text
        lines = content.split("\n") if content else []
        if content.endswith("\n"):
            lines.pop()
        logger.info(f"Loaded {len(lines)} lines from {path}")
        return lines

    def _require_path(self) -> Path:
        if self._path is None:
            raise ResourceUnavailableError("No history file configured")
        return self._path
