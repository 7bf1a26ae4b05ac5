"""Unit tests for common/settings.py."""

import os
import unittest
from unittest import mock

import common.settings


class TestSettings(unittest.TestCase):
    """Tests for site-wide settings."""

    def test_domain_defaults_to_localhost(self) -> None:
        """domain() falls back to localhost when DOMAIN is not set."""
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertEqual(common.settings.domain(), 'localhost:8000')

    def test_domain_reads_from_env(self) -> None:
        """domain() is read from the DOMAIN environment variable."""
        with mock.patch.dict(os.environ, {'DOMAIN': 'rosemary.example.com'}):
            self.assertEqual(common.settings.domain(), 'rosemary.example.com')

    def test_home_url_uses_http_for_localhost(self) -> None:
        """home_url() uses plain http for local development hosts."""
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertEqual(common.settings.home_url(), 'http://localhost:8000')

    def test_home_url_strips_leading_dot(self) -> None:
        """home_url() strips a leading dot and uses https for public hosts."""
        with mock.patch.dict(os.environ, {'DOMAIN': '.rosemary.example.com'}):
            self.assertEqual(
                common.settings.home_url(), 'https://rosemary.example.com'
            )


if __name__ == '__main__':
    unittest.main()
