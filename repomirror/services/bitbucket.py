"""
Bitbucket repository service.
"""

import logging
from typing import Any, Dict, Optional, Union

from repomirror.core.config import AppConfig, Config
from repomirror.mirror.descriptor import HostLayout
from repomirror.mirror.git_handler import GitHandler
from repomirror.services.base import MirroredRepository
from repomirror.webhook.decoder import WebhookPayloadDecoder

logger = logging.getLogger(__name__)


def _layout(config: AppConfig) -> HostLayout:
    return HostLayout(
        site_base=config.bitbucket.site_base,
        git_base=config.bitbucket.git_base,
        mirror_dir=config.mirror.mirror_dir,
    )


class BitbucketRepository(MirroredRepository):
    """
    A repository hosted on bitbucket.org.

    Example:
        repo = BitbucketRepository.from_owner("alice", "widget")
        for tag in repo.get_tags():
            print(tag, repo.get_release_date(tag))
    """

    NAME = "bitbucket"

    @classmethod
    def decoder(cls, config: Optional[AppConfig] = None) -> WebhookPayloadDecoder:
        return WebhookPayloadDecoder(_layout(config or Config.get()))

    @classmethod
    def probe(cls, raw_body: Union[str, bytes], config: Optional[AppConfig] = None) -> Optional[Dict[str, Any]]:
        return cls.decoder(config).parse(raw_body)

    @classmethod
    def from_owner(
        cls,
        owner: str,
        name: str,
        config: Optional[AppConfig] = None,
        git: Optional[GitHandler] = None,
    ) -> "BitbucketRepository":
        """
        Raises:
            RepositoryValidationError: If owner or name is not path-safe.
        """
        config = config or Config.get()
        return cls(_layout(config).describe(owner, name), config, git)

    @classmethod
    def from_webhook(
        cls,
        payload: Dict[str, Any],
        config: Optional[AppConfig] = None,
        git: Optional[GitHandler] = None,
    ) -> Optional["BitbucketRepository"]:
        config = config or Config.get()
        descriptor = cls.decoder(config).descriptor_from_payload(payload)
        if descriptor is None:
            return None

        logger.debug(
            f"Webhook for {descriptor.full_name} "
            f"(forks={descriptor.forks}, watchers={descriptor.watchers})"
        )
        return cls(descriptor, config, git)

    def download_url(self, version: str) -> str:
        return f"{self.site_url}/zipball/{version}"
