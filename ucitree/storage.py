"""
Backing storage for UCI configs.

A storage moves the raw bytes of a config between the Tree and wherever
the files live. DirectoryStorage keeps one file per config in a directory
and replaces files atomically:

1. create a temporary file in the same directory
2. write the content
3. set the permission bits
4. fsync
5. close
6. rename over the destination

A failure in any step removes the temporary file and leaves the
destination untouched.
"""

import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

from .const import DEFAULT_FILE_MODE, DEFAULT_TREE_PATH, TEMP_FILE_PREFIX
from .errors import StorageError
from .logging import get_logger


logger = get_logger("storage")


class Storage(ABC):
    """
    Abstract transport for config files.

    Implementations must raise FileNotFoundError from load_config() when
    the config does not exist; the Tree relies on it for lazy loading.
    """

    @abstractmethod
    def load_config(self, name: str) -> bytes:
        """Read the raw content of a config."""

    @abstractmethod
    def save_config(self, name: str, data: bytes) -> None:
        """Replace the content of a config."""

    def exists(self, name: str) -> bool:
        """Check whether a config exists."""
        try:
            self.load_config(name)
        except FileNotFoundError:
            return False
        return True


class DirectoryStorage(Storage):
    """Configs stored as files in a single directory (e.g. /etc/config)."""

    def __init__(self, root: str | Path = DEFAULT_TREE_PATH, file_mode: int = DEFAULT_FILE_MODE):
        self.root = Path(root)
        self.file_mode = file_mode

    def __repr__(self) -> str:
        return f"DirectoryStorage({str(self.root)!r})"

    def path(self, name: str) -> Path:
        """
        Path of the file backing a config.

        Raises:
            ValueError: If the name is empty or would leave the directory
        """
        if not name or name in (".", "..") or "/" in name or os.sep in name:
            raise ValueError(f"invalid config name: {name!r}")
        return self.root / name

    def exists(self, name: str) -> bool:
        return self.path(name).is_file()

    def load_config(self, name: str) -> bytes:
        path = self.path(name)
        data = path.read_bytes()
        logger.debug("Read %d bytes from %s", len(data), path)
        return data

    def save_config(self, name: str, data: bytes) -> None:
        """
        Atomically replace the file of a config.

        Raises:
            StorageError: Naming the failed phase; the OS error is chained
        """
        path = self.path(name)

        try:
            fd, tmp_name = tempfile.mkstemp(prefix=f"{TEMP_FILE_PREFIX}{name}.", dir=self.root)
        except OSError as e:
            raise StorageError("create", str(path), e) from e

        phase = "write"
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()

                phase = "chmod"
                os.chmod(tmp_name, self.file_mode)

                phase = "sync"
                os.fsync(f.fileno())

                phase = "close"

            phase = "rename"
            os.replace(tmp_name, path)
        except OSError as e:
            self._remove_temp(tmp_name)
            raise StorageError(phase, str(path), e) from e

        logger.debug("Wrote %d bytes to %s", len(data), path)

    @staticmethod
    def _remove_temp(tmp_name: str) -> None:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Cannot remove temporary file %s: %s", tmp_name, e)
