# src/bulkgraph/engine/staging.py
"""ArtifactStager: ship executable archives to every worker before launch.

Staging policy:
- The environment variable naming local archive directories is optional.
  If unset, a warning is recorded and the submission proceeds.
- A listed directory that does not exist is skipped with a warning.
- Any failure while copying an archive that does exist is fatal
  (StagingError). A missing directory is a configuration gap; a failed
  copy is a storage malfunction.

Archives land in ``<storage home>/<remote_libs_dir>/<file name>`` and are
registered on the classpath list handed to every job spec.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from bulkgraph.contracts.errors import StagingError
from bulkgraph.contracts.events import StagingWarning
from bulkgraph.contracts.results import StagedArtifact
from bulkgraph.core.events import EventBusProtocol, NullEventBus

if TYPE_CHECKING:
    from bulkgraph.contracts.boundaries import DistributedStorage
    from bulkgraph.contracts.locations import Location
    from bulkgraph.core.config import ComputerSettings

logger = structlog.get_logger(__name__)


class ArtifactStager:
    """Copies executable archives to distributed storage.

    Args:
        storage: Destination storage
        settings: Supplies the env var name, remote directory and suffixes
        environ: Environment to read the directory list from (os.environ by default)
        event_bus: Receives a StagingWarning per non-fatal condition
    """

    def __init__(
        self,
        storage: DistributedStorage,
        settings: ComputerSettings,
        *,
        environ: Mapping[str, str] | None = None,
        event_bus: EventBusProtocol | None = None,
    ) -> None:
        self._storage = storage
        self._settings = settings
        self._environ = environ if environ is not None else os.environ
        self._events = event_bus if event_bus is not None else NullEventBus()
        self._warnings: list[str] = []
        self._staged: list[StagedArtifact] = []

    @property
    def warnings(self) -> tuple[str, ...]:
        """Non-fatal conditions recorded by stage()."""
        return tuple(self._warnings)

    @property
    def classpath(self) -> tuple[Location, ...]:
        """Remote locations registered for worker processes, in staging order."""
        return tuple(artifact.remote_location for artifact in self._staged)

    def _warn(self, message: str, path: str | None = None) -> None:
        self._warnings.append(message)
        logger.warning(message, path=path)
        self._events.emit(StagingWarning(message=message, path=path))

    def search_paths(self) -> list[Path] | None:
        """Local directories from the environment, None if the variable is unset."""
        raw = self._environ.get(self._settings.libs_env_var)
        if raw is None:
            return None
        return [Path(entry) for entry in raw.split(os.pathsep) if entry]

    def stage(self) -> list[StagedArtifact]:
        """Copy every archive found in the search paths.

        Returns:
            Artifacts staged by this call, in copy order

        Raises:
            StagingError: If copying an archive fails
        """
        paths = self.search_paths()
        if paths is None:
            self._warn(f"{self._settings.libs_env_var} is not set -- proceeding regardless")
            return []

        remote_dir = self._storage.home_directory().child(self._settings.remote_libs_dir)
        staged: list[StagedArtifact] = []
        for directory in paths:
            if not directory.is_dir():
                self._warn(f"{directory} does not reference a valid directory -- proceeding regardless", str(directory))
                continue

            for archive in self._list_archives(directory):
                staged.append(self._stage_one(archive, remote_dir))

        logger.info("Staged executable archives", count=len(staged), remote_dir=str(remote_dir))
        return staged

    def _list_archives(self, directory: Path) -> list[Path]:
        # Non-recursive, sorted for a deterministic classpath order
        try:
            return sorted(
                entry for entry in directory.iterdir() if entry.is_file() and entry.name.endswith(self._settings.artifact_suffixes)
            )
        except OSError as e:
            raise StagingError(directory, f"cannot list directory: {e}") from e

    def _stage_one(self, archive: Path, remote_dir: Location) -> StagedArtifact:
        remote = remote_dir.child(archive.name)
        try:
            self._storage.copy_from_local(archive, remote)
        except Exception as e:
            raise StagingError(archive, str(e)) from e

        artifact = StagedArtifact(local_path=archive, remote_location=remote)
        self._staged.append(artifact)
        logger.debug("Staged archive", local=str(archive), remote=str(remote))
        return artifact
