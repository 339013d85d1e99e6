"""
Unit tests for webhook payload decoding.
"""

import json
import unittest
from urllib.parse import urlencode

from repomirror.mirror.descriptor import HostLayout
from repomirror.webhook.decoder import WebhookPayloadDecoder, repository_url_pattern


def make_body(repository, **extra):
    payload = {"repository": repository, "commits": []}
    payload.update(extra)
    return urlencode({"payload": json.dumps(payload)})


class TestRepositoryUrlPattern(unittest.TestCase):
    """Tests for the repository URL shape."""

    def setUp(self):
        self.pattern = repository_url_pattern("http://bitbucket.org")

    def test_matches_both_schemes(self):
        for url in ("http://bitbucket.org/alice/widget", "https://bitbucket.org/alice/widget"):
            match = self.pattern.match(url)
            self.assertEqual(match.group(1, 2), ("alice", "widget"))

    def test_trailing_path_ignored(self):
        match = self.pattern.match("https://bitbucket.org/alice/widget/src/tip/")

        self.assertEqual(match.group(1, 2), ("alice", "widget"))

    def test_rejects_other_hosts(self):
        for url in (
            "http://github.com/alice/widget",
            "http://bitbucketXorg/alice/widget",
            "ftp://bitbucket.org/alice/widget",
            "http://bitbucket.org/alice",
            "http://bitbucket.org/alice/",
        ):
            self.assertIsNone(self.pattern.match(url), url)


class TestWebhookPayloadDecoder(unittest.TestCase):
    """Tests for the webhook decoder."""

    def setUp(self):
        layout = HostLayout("http://bitbucket.org", "git://bitbucket.org", "/srv/mirrors")
        self.decoder = WebhookPayloadDecoder(layout)

    def test_decode_valid_body(self):
        """Test that owner and name come from the URL segments."""
        body = make_body({
            "url": "http://bitbucket.org/alice/widget",
            "forks": 3,
            "watchers": 12,
        })

        descriptor = self.decoder.decode(body)

        self.assertEqual(descriptor.owner, "alice")
        self.assertEqual(descriptor.name, "widget")
        self.assertEqual(descriptor.forks, 3)
        self.assertEqual(descriptor.watchers, 12)
        self.assertEqual(descriptor.source_url, "git://bitbucket.org/alice/widget.git")

    def test_decode_bytes_body(self):
        """Test that raw request bytes are accepted."""
        body = make_body({"url": "https://bitbucket.org/alice/widget/"}).encode("utf-8")

        descriptor = self.decoder.decode(body)

        self.assertEqual(descriptor.full_name, "alice/widget")
        self.assertIsNone(descriptor.forks)

    def test_parse_returns_payload(self):
        """Test that the probe hands back the decoded document."""
        body = make_body({"url": "http://bitbucket.org/alice/widget"}, user="alice")

        data = self.decoder.parse(body)

        self.assertEqual(data["user"], "alice")
        self.assertEqual(data["repository"]["url"], "http://bitbucket.org/alice/widget")

    def test_rejects_malformed_bodies(self):
        """Test that undecodable bodies yield None instead of raising."""
        bodies = [
            "",
            "not a form",
            "payload=",
            "payload=%7Bnot+json",
            urlencode({"other": "{}"}),
            urlencode({"payload": "[]"}),
            urlencode({"payload": "null"}),
            urlencode({"payload": json.dumps({"repository": "widget"})}),
            urlencode({"payload": json.dumps({"repository": {}})}),
            urlencode({"payload": json.dumps({"repository": {"url": 42}})}),
            b"payload=%ff%fe",
            b"\xff\xfe",
            urlencode({"payload": "[" * 200000 + "]" * 200000}),
        ]
        for body in bodies:
            self.assertIsNone(self.decoder.parse(body), body)
            self.assertIsNone(self.decoder.decode(body), body)

    def test_rejects_deeply_nested_payload(self):
        """Test that a payload too deep to parse is rejected, not raised."""
        body = urlencode({"payload": "{\"repository\": " * 100000 + "{}" + "}" * 100000})

        self.assertIsNone(self.decoder.parse(body))
        self.assertIsNone(self.decoder.decode(body))

    def test_rejects_other_hosts(self):
        """Test that repositories on other services are not decoded."""
        body = make_body({"url": "https://github.com/alice/widget"})

        self.assertIsNone(self.decoder.decode(body))

    def test_rejects_unsafe_segments(self):
        """Test that URL segments unusable as directory names are rejected."""
        body = make_body({"url": "http://bitbucket.org/../widget"})

        self.assertIsNotNone(self.decoder.parse(body))
        self.assertIsNone(self.decoder.decode(body))


if __name__ == "__main__":
    unittest.main()
