# src/bulkgraph/core/storage.py
"""
Local filesystem implementation of the distributed storage boundary.

Suitable when every worker shares a filesystem (single host, NFS mount)
and for integration tests. Handles ``file`` locations only; any other
scheme is rejected through supports().
"""

import shutil
from pathlib import Path

import structlog

from bulkgraph.contracts.errors import UnsupportedLocationError
from bulkgraph.contracts.locations import DEFAULT_SCHEME, Location

__all__ = ["LocalFileSystemStorage"]

logger = structlog.get_logger(__name__)


class LocalFileSystemStorage:
    """DistributedStorage over the local filesystem.

    Args:
        home: Directory reported as the executing user's home. Defaults to
            Path.home(). Tests pass a temporary directory.
    """

    SCHEMES: tuple[str, ...] = (DEFAULT_SCHEME,)

    def __init__(self, home: Path | None = None) -> None:
        self._home = (home if home is not None else Path.home()).resolve()

    def supports(self, location: Location) -> bool:
        return location.scheme in self.SCHEMES and not location.authority

    def _path(self, location: Location) -> Path:
        if not self.supports(location):
            raise UnsupportedLocationError(location, self.SCHEMES)
        return Path(location.path)

    def exists(self, location: Location) -> bool:
        return self._path(location).exists()

    def delete(self, location: Location, recursive: bool = True) -> bool:
        """Delete a file or directory.

        Raises:
            IsADirectoryError: If ``location`` is a directory and recursive is False
        """
        path = self._path(location)
        if not path.exists():
            return False
        if path.is_dir() and not path.is_symlink():
            if not recursive:
                raise IsADirectoryError(f"Refusing to delete directory without recursive=True: {path}")
            shutil.rmtree(path)
        else:
            path.unlink()
        logger.debug("Deleted location", location=str(location))
        return True

    def copy_from_local(self, local_path: Path, location: Location) -> None:
        target = self._path(location)
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(local_path, target)

    def home_directory(self) -> Location:
        return Location.parse(str(self._home))
