"""
Inbound webhook handling.
"""

from repomirror.webhook.decoder import WebhookPayloadDecoder, repository_url_pattern

__all__ = [
    "WebhookPayloadDecoder",
    "repository_url_pattern",
]
