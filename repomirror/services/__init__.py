"""
Repository services and their registry.
"""

from repomirror.services.base import RepositorySource, MirroredRepository
from repomirror.services.bitbucket import BitbucketRepository
from repomirror.services.registry import ServiceRegistry, default_registry

__all__ = [
    "RepositorySource",
    "MirroredRepository",
    "BitbucketRepository",
    "ServiceRegistry",
    "default_registry",
]
