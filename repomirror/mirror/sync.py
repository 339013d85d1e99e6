"""
Clone-or-fetch synchronization of local mirrors.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from repomirror.core.config import MirrorConfig
from repomirror.core.exceptions import MirrorFilesystemError
from repomirror.core.pipeline import Pipeline, PipelineState
from repomirror.mirror.descriptor import RepositoryDescriptor
from repomirror.mirror.git_handler import GitHandler

logger = logging.getLogger(__name__)


class MirrorSyncEngine:
    """
    Brings a local mirror to parity with its remote.

    The mirror path is probed on every call. A missing path is cloned,
    an existing one is fetched in place (with tags). An existing mirror
    is never removed, even if git reports it as broken.
    """

    def __init__(self, git: GitHandler, config: Optional[MirrorConfig] = None):
        self.git = git
        self.config = config or MirrorConfig()

    def sync(self, descriptor: RepositoryDescriptor) -> None:
        """
        Clone or fetch the mirror for a descriptor.

        Raises:
            MirrorFilesystemError: If the parent directory cannot be created
                or the mirror path cannot be inspected.
            GitCommandError: If clone or fetch fails.
        """
        pipeline = Pipeline(f"sync {descriptor.full_name}")
        pipeline.add_step("prepare", lambda state: self._prepare(descriptor))
        pipeline.add_step("probe", lambda state: self._exists(descriptor))
        pipeline.add_step("update", lambda state: self._update(descriptor, state))
        pipeline.run()

    def _prepare(self, descriptor: RepositoryDescriptor) -> None:
        parent = descriptor.path.parent
        try:
            make_dirs(parent, self.config.dir_mode)
        except OSError as e:
            raise MirrorFilesystemError(
                f"Cannot create mirror directory {parent}: {e}",
                details={"path": str(parent), "errno": e.errno},
            ) from e

    def _exists(self, descriptor: RepositoryDescriptor) -> bool:
        try:
            os.stat(descriptor.path)
        except FileNotFoundError:
            return False
        except OSError as e:
            raise MirrorFilesystemError(
                f"Cannot inspect mirror {descriptor.path}: {e}",
                details={"path": str(descriptor.path), "errno": e.errno},
            ) from e
        return True

    def _update(self, descriptor: RepositoryDescriptor, state: PipelineState) -> str:
        if state.data["probe"]:
            logger.info(f"Fetching {descriptor.full_name} into {descriptor.path}")
            self.git.run(["fetch", "-t"], cwd=descriptor.path)
            return "fetch"

        logger.info(f"Cloning {descriptor.source_url} into {descriptor.path}")
        self.git.run(["clone", descriptor.source_url, str(descriptor.path)])
        return "clone"


def make_dirs(path: Path, mode: int) -> None:
    """
    Create `path` and any missing ancestors, each with `mode`.

    `os.makedirs` only applies the mode to the last directory. Existing
    directories are left untouched.
    """
    missing = []
    current = Path(path)
    while not current.is_dir():
        missing.append(current)
        if current.parent == current:
            break
        current = current.parent

    for directory in reversed(missing):
        try:
            os.mkdir(directory, mode)
        except FileExistsError:
            if not directory.is_dir():
                raise
