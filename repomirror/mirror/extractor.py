"""
Package metadata queries against a synced mirror.

Every query syncs the mirror first. Nothing is cached between calls.
"""

import logging
from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import List, Optional

from repomirror.core.config import MirrorConfig
from repomirror.core.exceptions import GitOutputError, RepositoryValidationError
from repomirror.core.pipeline import Pipeline
from repomirror.mirror.descriptor import RepositoryDescriptor
from repomirror.mirror.git_handler import GitHandler
from repomirror.mirror.sync import MirrorSyncEngine
from repomirror.utils.validation import validate_ref

logger = logging.getLogger(__name__)


class MetadataExtractor:
    """
    Reads tags, manifests and release dates from a local mirror.
    """

    def __init__(
        self,
        git: GitHandler,
        sync_engine: MirrorSyncEngine,
        config: Optional[MirrorConfig] = None,
    ):
        self.git = git
        self.sync_engine = sync_engine
        self.config = config or MirrorConfig()

    def _query(self, descriptor: RepositoryDescriptor, label: str, args: List[str], parse):
        pipeline = Pipeline(f"{label} {descriptor.full_name}")
        pipeline.add_step("sync", lambda state: self.sync_engine.sync(descriptor))
        pipeline.add_step("query", lambda state: self.git.run(args, cwd=descriptor.path))
        pipeline.add_step("parse", lambda state: parse(state.data["query"]))
        return pipeline.run().output

    def list_tags(self, descriptor: RepositoryDescriptor) -> List[str]:
        """
        List tag names.

        The order is whatever `git tag` prints; it is not re-sorted here.
        """
        return self._query(descriptor, "tags", ["tag"], split_lines)

    def list_manifest_files(self, descriptor: RepositoryDescriptor, tag: str) -> List[str]:
        """List paths at `tag` whose name contains the manifest marker after position 0."""
        check_ref(tag)
        marker = self.config.manifest_suffix

        def parse(stdout: str) -> List[str]:
            return [entry for entry in stdout.split("\n") if entry.find(marker) > 0]

        return self._query(
            descriptor, "manifests", ["ls-tree", tag, "--name-only"], parse
        )

    def get_manifest(
        self, descriptor: RepositoryDescriptor, tag: Optional[str], path: str
    ) -> str:
        """Read a file at `tag` (default branch when None), stripped of surrounding whitespace."""
        version = tag or self.config.default_branch
        check_ref(version)
        return self._query(
            descriptor, "manifest", ["show", f"{version}:{path}"], str.strip
        )

    def get_release_date(self, descriptor: RepositoryDescriptor, tag: str) -> datetime:
        """Commit date of the newest commit reachable from `tag`."""
        check_ref(tag)
        return self._query(
            descriptor, "release-date", ["log", "--pretty=%cD", "-1", tag], parse_commit_date
        )


def check_ref(ref: str) -> None:
    """
    Reject refs git would read as options.

    Raises:
        RepositoryValidationError: If the ref is empty or starts with '-'.
    """
    is_valid, error = validate_ref(ref)
    if not is_valid:
        raise RepositoryValidationError(ref, error)


def split_lines(stdout: str) -> List[str]:
    """Split git output into lines, dropping the element after a trailing newline."""
    lines = stdout.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def parse_commit_date(stdout: str) -> datetime:
    """
    Parse an RFC 2822 date as printed by `--pretty=%cD`.

    Raises:
        GitOutputError: If the output is not a date.
    """
    text = stdout.strip()
    try:
        parsed = parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError) as e:
        raise GitOutputError(
            f"Unrecognized commit date: {text!r}",
            details={"stdout": stdout},
        ) from e
    if parsed is None:
        raise GitOutputError(
            f"Unrecognized commit date: {text!r}",
            details={"stdout": stdout},
        )
    return parsed
