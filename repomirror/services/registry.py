"""
Repository service registry.

Backends are handed to the registry explicitly when it is built; nothing
registers itself on import.
"""

import logging
from typing import Dict, Iterable, List, Optional, Type, Union

from repomirror.core.config import AppConfig, Config
from repomirror.core.exceptions import ServiceNotFoundError
from repomirror.services.base import RepositorySource
from repomirror.services.bitbucket import BitbucketRepository

logger = logging.getLogger(__name__)


class ServiceRegistry:
    """
    Lookup table from service name to repository service class.

    Dispatches inbound webhook bodies to the first service that
    understands them.
    """

    def __init__(
        self,
        services: Iterable[Type[RepositorySource]] = (),
        config: Optional[AppConfig] = None,
    ):
        self.config = config or Config.get()
        self._services: Dict[str, Type[RepositorySource]] = {}
        for service_class in services:
            self._add(service_class)

    def _add(self, service_class: Type[RepositorySource]) -> None:
        name = service_class.NAME
        if name in self._services:
            logger.warning(
                f"Overwriting existing service for {name}: "
                f"{self._services[name].__name__} -> {service_class.__name__}"
            )

        self._services[name] = service_class
        logger.debug(f"Registered service {name}: {service_class.__name__}")

    def get(self, name: str) -> Optional[Type[RepositorySource]]:
        """Get the service class registered under a name."""
        return self._services.get(name)

    def has_service(self, name: str) -> bool:
        """Check if a service is registered under a name."""
        return name in self._services

    def list_services(self) -> List[str]:
        """List all registered service names."""
        return list(self._services.keys())

    def create(self, name: str, owner: str, repo: str) -> RepositorySource:
        """
        Create a repository on a named service.

        Raises:
            ServiceNotFoundError: If no service is registered under `name`.
        """
        service_class = self.get(name)
        if service_class is None:
            raise ServiceNotFoundError(name)
        return service_class.from_owner(owner, repo, self.config)

    def from_webhook(self, raw_body: Union[str, bytes]) -> Optional[RepositorySource]:
        """
        Build a repository from a raw webhook body.

        Returns:
            A repository from the first service whose probe accepts the
            body, or None if no service does.
        """
        for name, service_class in self._services.items():
            payload = service_class.probe(raw_body, self.config)
            if payload is None:
                continue

            repository = service_class.from_webhook(payload, self.config)
            if repository is not None:
                logger.info(f"Webhook dispatched to {name}: {repository!r}")
                return repository

        logger.info("No service accepted the webhook body")
        return None


def default_registry(config: Optional[AppConfig] = None) -> ServiceRegistry:
    """Registry holding the bundled services."""
    return ServiceRegistry([BitbucketRepository], config)
