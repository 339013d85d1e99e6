"""
Local mirror management: descriptors, git execution, sync and queries.
"""

from repomirror.mirror.descriptor import RepositoryDescriptor, HostLayout
from repomirror.mirror.git_handler import GitHandler
from repomirror.mirror.sync import MirrorSyncEngine
from repomirror.mirror.extractor import MetadataExtractor

__all__ = [
    "RepositoryDescriptor",
    "HostLayout",
    "GitHandler",
    "MirrorSyncEngine",
    "MetadataExtractor",
]
