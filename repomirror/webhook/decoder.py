"""
Webhook payload decoding.

Hosting services post repository events as a URL-encoded form whose
`payload` field holds a JSON document. Bodies that do not decode, or
that describe a repository on another host, are rejected with None so
the caller can offer them to the next service.
"""

import json
import logging
import re
from typing import Any, Dict, Optional, Pattern, Union
from urllib.parse import parse_qs

from repomirror.core.exceptions import RepositoryValidationError
from repomirror.mirror.descriptor import HostLayout, RepositoryDescriptor

logger = logging.getLogger(__name__)


def repository_url_pattern(site_base: str) -> Pattern:
    """
    Pattern for `scheme://host/<owner>/<name>[/anything]` on one host.

    Any path after the repository name is accepted and ignored.
    """
    host = re.escape(site_base.split("://", 1)[-1].rstrip("/"))
    return re.compile(rf"^https?://{host}/([^/]+)/([^/]+)(/.*)?$")


class WebhookPayloadDecoder:
    """Turns a raw webhook body into a repository descriptor."""

    def __init__(self, layout: HostLayout, url_pattern: Optional[Pattern] = None):
        self.layout = layout
        self.url_pattern = url_pattern or repository_url_pattern(layout.site_base)

    def parse(self, raw_body: Union[str, bytes]) -> Optional[Dict[str, Any]]:
        """
        Decode and validate a webhook body.

        Returns:
            The decoded payload document, or None if the body is not a
            payload for this host.
        """
        try:
            if isinstance(raw_body, bytes):
                raw_body = raw_body.decode("utf-8")
            form = parse_qs(raw_body, keep_blank_values=True, errors="strict")
            data = json.loads(form["payload"][0])
        except (UnicodeDecodeError, KeyError, IndexError, TypeError, ValueError, RecursionError) as e:
            logger.debug(f"Rejected webhook body: {e!r}")
            return None

        repository = data.get("repository") if isinstance(data, dict) else None
        url = repository.get("url") if isinstance(repository, dict) else None
        if not isinstance(url, str) or not self.url_pattern.match(url):
            logger.debug(f"Rejected webhook repository url: {url!r}")
            return None

        return data

    def descriptor_from_payload(self, data: Dict[str, Any]) -> Optional[RepositoryDescriptor]:
        """
        Build a descriptor from a payload accepted by `parse`.

        Returns:
            The descriptor, or None if the URL no longer matches or its
            owner/name are not usable as path components.
        """
        repository = data["repository"]
        match = self.url_pattern.match(repository["url"])
        if not match:
            return None

        try:
            return self.layout.describe(
                match.group(1),
                match.group(2),
                forks=repository.get("forks"),
                watchers=repository.get("watchers"),
            )
        except RepositoryValidationError as e:
            logger.debug(f"Rejected webhook repository: {e}")
            return None

    def decode(self, raw_body: Union[str, bytes]) -> Optional[RepositoryDescriptor]:
        """Decode a raw webhook body into a descriptor, or None."""
        data = self.parse(raw_body)
        if data is None:
            return None
        return self.descriptor_from_payload(data)
