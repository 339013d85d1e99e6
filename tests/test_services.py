"""
Unit tests for repository services and the service registry.
"""

import json
import os
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest import mock
from urllib.parse import urlencode

from repomirror.core.config import AppConfig, MirrorConfig
from repomirror.core.exceptions import RepositoryValidationError, ServiceNotFoundError
from repomirror.mirror.git_handler import GitHandler
from repomirror.services.base import RepositorySource
from repomirror.services.bitbucket import BitbucketRepository
from repomirror.services.registry import ServiceRegistry, default_registry


def make_body(url, **repository):
    repository["url"] = url
    return urlencode({"payload": json.dumps({"repository": repository})})


class ServiceTestCase(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.config = AppConfig(mirror=MirrorConfig(mirror_dir=self.tmpdir))

    def tearDown(self):
        shutil.rmtree(self.tmpdir)


class TestBitbucketRepository(ServiceTestCase):
    """Tests for the Bitbucket service."""

    def test_from_owner(self):
        """Test construction from owner and name."""
        repo = BitbucketRepository.from_owner("foo", "bar", self.config)

        self.assertIsInstance(repo, RepositorySource)
        self.assertEqual(repo.owner, "foo")
        self.assertEqual(repo.name, "bar")
        self.assertEqual(repo.site_url, "http://bitbucket.org/foo/bar")
        self.assertEqual(repo.source_url, "git://bitbucket.org/foo/bar.git")
        self.assertEqual(repo.path, Path(self.tmpdir) / "bitbucket.org" / "foo" / "bar")

    def test_download_url(self):
        """Test the archive URL template."""
        repo = BitbucketRepository.from_owner("foo", "bar", self.config)

        self.assertEqual(repo.download_url("v1.0"), "http://bitbucket.org/foo/bar/zipball/v1.0")

    def test_from_owner_rejects_unsafe_names(self):
        with self.assertRaises(RepositoryValidationError):
            BitbucketRepository.from_owner("foo", "../bar", self.config)

    def test_probe_and_from_webhook(self):
        """Test the static probe followed by webhook construction."""
        body = make_body("http://bitbucket.org/alice/widget", forks=1, watchers=7)

        payload = BitbucketRepository.probe(body, self.config)
        repo = BitbucketRepository.from_webhook(payload, self.config)

        self.assertEqual((repo.owner, repo.name), ("alice", "widget"))
        self.assertEqual(repo.forks, 1)
        self.assertEqual(repo.watchers, 7)

    def test_probe_rejects_foreign_body(self):
        self.assertIsNone(BitbucketRepository.probe("payload=%7B%7D", self.config))

    def test_restore_clones_then_fetches(self):
        """Test that restore drives the sync engine."""
        git = mock.Mock(spec=GitHandler)
        git.run.side_effect = lambda args, cwd=None: os.makedirs(args[2]) if args[0] == "clone" else ""
        repo = BitbucketRepository.from_owner("foo", "bar", self.config, git=git)

        repo.restore()
        repo.restore()

        self.assertEqual(
            git.run.call_args_list,
            [
                mock.call(["clone", "git://bitbucket.org/foo/bar.git", str(repo.path)]),
                mock.call(["fetch", "-t"], cwd=repo.path),
            ],
        )

    def test_queries_delegate_to_extractor(self):
        """Test that each query syncs and then reads from the mirror."""
        git = mock.Mock(spec=GitHandler)
        git.run.side_effect = lambda args, cwd=None: {
            "tag": "1.0.0\n1.1.0\n",
            "ls-tree": "bar.jquery.json\n",
            "show": "{}\n",
            "log": "Wed, 1 May 2013 12:00:00 +0000\n",
        }.get(args[0], "")
        repo = BitbucketRepository.from_owner("foo", "bar", self.config, git=git)
        os.makedirs(repo.path)

        self.assertEqual(repo.get_tags(), ["1.0.0", "1.1.0"])
        self.assertEqual(repo.get_manifest_files("1.0.0"), ["bar.jquery.json"])
        self.assertEqual(repo.get_manifest("1.0.0", "bar.jquery.json"), "{}")
        self.assertEqual(repo.get_release_date("1.0.0").year, 2013)

        fetches = [c for c in git.run.call_args_list if c.args[0] == ["fetch", "-t"]]
        self.assertEqual(len(fetches), 4)

    def test_repr(self):
        repo = BitbucketRepository.from_owner("foo", "bar", self.config)

        self.assertEqual(repr(repo), "BitbucketRepository('foo/bar')")


class TestServiceRegistry(ServiceTestCase):
    """Tests for the service registry."""

    def test_default_registry(self):
        registry = default_registry(self.config)

        self.assertEqual(registry.list_services(), ["bitbucket"])
        self.assertTrue(registry.has_service("bitbucket"))
        self.assertIs(registry.get("bitbucket"), BitbucketRepository)
        self.assertIsNone(registry.get("github"))

    def test_registries_are_independent(self):
        """Test that building one registry does not affect another."""
        empty = ServiceRegistry([], self.config)
        default_registry(self.config)

        self.assertEqual(empty.list_services(), [])

    def test_create(self):
        registry = default_registry(self.config)

        repo = registry.create("bitbucket", "foo", "bar")

        self.assertIsInstance(repo, BitbucketRepository)
        self.assertEqual(repo.path, Path(self.tmpdir) / "bitbucket.org" / "foo" / "bar")

    def test_create_unknown_service(self):
        registry = default_registry(self.config)

        with self.assertRaises(ServiceNotFoundError):
            registry.create("github", "foo", "bar")

    def test_from_webhook_dispatch(self):
        """Test that a Bitbucket body is routed to the Bitbucket service."""
        registry = default_registry(self.config)

        repo = registry.from_webhook(make_body("https://bitbucket.org/alice/widget", forks=2))

        self.assertIsInstance(repo, BitbucketRepository)
        self.assertEqual(repo.descriptor.full_name, "alice/widget")
        self.assertEqual(repo.forks, 2)

    def test_from_webhook_unrecognized(self):
        registry = default_registry(self.config)

        self.assertIsNone(registry.from_webhook(make_body("https://github.com/alice/widget")))
        self.assertIsNone(registry.from_webhook("garbage"))

    def test_from_webhook_tries_next_service(self):
        """Test that a rejecting service does not stop dispatch."""

        class RejectingService(BitbucketRepository):
            NAME = "rejecting"

            @classmethod
            def probe(cls, raw_body, config=None):
                return None

        registry = ServiceRegistry([RejectingService, BitbucketRepository], self.config)

        repo = registry.from_webhook(make_body("http://bitbucket.org/alice/widget"))

        self.assertIsInstance(repo, BitbucketRepository)
        self.assertNotIsInstance(repo, RejectingService)

    def test_duplicate_name_overwrites(self):
        class OtherBitbucket(BitbucketRepository):
            pass

        with self.assertLogs("repomirror.services.registry", level="WARNING"):
            registry = ServiceRegistry([BitbucketRepository, OtherBitbucket], self.config)

        self.assertIs(registry.get("bitbucket"), OtherBitbucket)


if __name__ == "__main__":
    unittest.main()
