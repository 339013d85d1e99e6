"""
Repository service interface.

A repository service is a named, addressable hosted repository that can
restore its local mirror and answer package metadata queries. Backends
implement RepositorySource; MirroredRepository supplies the shared
git-mirror behaviour.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from repomirror.core.config import AppConfig, Config
from repomirror.mirror.descriptor import RepositoryDescriptor
from repomirror.mirror.extractor import MetadataExtractor
from repomirror.mirror.git_handler import GitHandler
from repomirror.mirror.sync import MirrorSyncEngine

logger = logging.getLogger(__name__)


class RepositorySource(ABC):
    """
    Abstract base class for repository services.

    Each backend must implement this interface and declare the key it is
    registered under.
    """

    NAME: str = "unknown"

    @classmethod
    @abstractmethod
    def probe(cls, raw_body: Union[str, bytes], config: Optional[AppConfig] = None) -> Optional[Dict[str, Any]]:
        """
        Check whether a raw webhook body belongs to this service.

        Returns:
            The decoded payload, or None if the body is not understood.
        """

    @classmethod
    @abstractmethod
    def from_owner(cls, owner: str, name: str, config: Optional[AppConfig] = None) -> "RepositorySource":
        """Create a repository from its owner and name."""

    @classmethod
    @abstractmethod
    def from_webhook(cls, payload: Dict[str, Any], config: Optional[AppConfig] = None) -> Optional["RepositorySource"]:
        """Create a repository from a payload accepted by `probe`."""

    @abstractmethod
    def download_url(self, version: str) -> str:
        """Archive URL for a version."""

    @abstractmethod
    def restore(self) -> None:
        """Make sure the local mirror exists and is current."""

    @abstractmethod
    def get_tags(self) -> List[str]:
        """List tag names in git's order."""

    @abstractmethod
    def get_manifest_files(self, tag: str) -> List[str]:
        """List manifest file paths at a tag."""

    @abstractmethod
    def get_manifest(self, tag: Optional[str], path: str) -> str:
        """Read a manifest file at a tag."""

    @abstractmethod
    def get_release_date(self, tag: str) -> datetime:
        """Commit date of a tag."""


class MirroredRepository(RepositorySource):
    """
    Base implementation backed by a local git mirror.

    Every public query re-syncs the mirror before reading from it.
    """

    def __init__(
        self,
        descriptor: RepositoryDescriptor,
        config: Optional[AppConfig] = None,
        git: Optional[GitHandler] = None,
    ):
        self.config = config or Config.get()
        self.descriptor = descriptor

        mirror_config = self.config.mirror
        self.git = git or GitHandler(mirror_config)
        self.sync_engine = MirrorSyncEngine(self.git, mirror_config)
        self.extractor = MetadataExtractor(self.git, self.sync_engine, mirror_config)

    @property
    def owner(self) -> str:
        return self.descriptor.owner

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def path(self):
        return self.descriptor.path

    @property
    def site_url(self) -> str:
        return self.descriptor.site_url

    @property
    def source_url(self) -> str:
        return self.descriptor.source_url

    @property
    def forks(self):
        return self.descriptor.forks

    @property
    def watchers(self):
        return self.descriptor.watchers

    def restore(self) -> None:
        self.sync_engine.sync(self.descriptor)

    def get_tags(self) -> List[str]:
        return self.extractor.list_tags(self.descriptor)

    def get_manifest_files(self, tag: str) -> List[str]:
        return self.extractor.list_manifest_files(self.descriptor, tag)

    def get_manifest(self, tag: Optional[str], path: str) -> str:
        return self.extractor.get_manifest(self.descriptor, tag, path)

    def get_release_date(self, tag: str) -> datetime:
        return self.extractor.get_release_date(self.descriptor, tag)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.descriptor.full_name!r})"
