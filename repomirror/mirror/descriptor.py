"""
Repository descriptors and host path layout.

A descriptor is the identifying owner/name pair of a hosted repository
plus every location derived from it: the local mirror directory, the
clone URL and the web site URL.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from repomirror.core.exceptions import RepositoryValidationError
from repomirror.utils.validation import validate_name


@dataclass(frozen=True)
class RepositoryDescriptor:
    """Immutable description of one hosted repository and its mirror."""

    host: str
    site_base: str
    owner: str
    name: str
    path: Path
    source_url: str
    site_url: str

    # Pass-through counters copied from webhook payloads
    forks: Optional[Any] = None
    watchers: Optional[Any] = None

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "host": self.host,
            "owner": self.owner,
            "name": self.name,
            "path": str(self.path),
            "source_url": self.source_url,
            "site_url": self.site_url,
            "forks": self.forks,
            "watchers": self.watchers,
        }


class HostLayout:
    """
    Derives descriptor locations for a single hosting service.

    Mirrors live at <mirror_dir>/<host>/<owner>/<name>, where <host> is
    the network location of the site base URL.
    """

    def __init__(self, site_base: str, git_base: str, mirror_dir: str):
        self.site_base = site_base.rstrip("/")
        self.git_base = git_base.rstrip("/")
        self.mirror_dir = Path(mirror_dir)
        self.host = urlparse(self.site_base).netloc

    def mirror_path(self, owner: str, name: str) -> Path:
        return self.mirror_dir / self.host / owner / name

    def source_url(self, owner: str, name: str) -> str:
        return f"{self.git_base}/{owner}/{name}.git"

    def site_url(self, owner: str, name: str) -> str:
        return f"{self.site_base}/{owner}/{name}"

    def describe(
        self,
        owner: str,
        name: str,
        forks: Optional[Any] = None,
        watchers: Optional[Any] = None,
    ) -> RepositoryDescriptor:
        """
        Build a descriptor for owner/name.

        Raises:
            RepositoryValidationError: If owner or name is not path-safe.
        """
        for value in (owner, name):
            is_valid, error = validate_name(value)
            if not is_valid:
                raise RepositoryValidationError(value, error)

        return RepositoryDescriptor(
            host=self.host,
            site_base=self.site_base,
            owner=owner,
            name=name,
            path=self.mirror_path(owner, name),
            source_url=self.source_url(owner, name),
            site_url=self.site_url(owner, name),
            forks=forks,
            watchers=watchers,
        )
