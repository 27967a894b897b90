#!/usr/bin/env python3
"""
Tests for the Vela documentation fetcher
"""

import unittest
from unittest.mock import Mock, patch
import os
import sys

import requests

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from docs_client import VelaDocsClient

STEPS_PAGE = """<html><head><style>.x { color: red }</style>
<script>var secrets = "docker";</script></head>
<body><h1>Steps</h1><p>Each step runs a Docker   image.</p></body></html>"""

SECRETS_PAGE = "<html><body><h1>Secrets</h1><p>Inject credentials safely.</p></body></html>"


def _response(html, status_code=200):
    response = Mock()
    response.status_code = status_code
    response.text = html
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Error")
    else:
        response.raise_for_status.return_value = None
    return response


class TestVelaDocsClient(unittest.TestCase):
    """Test documentation fetching and relevance filtering"""

    def setUp(self):
        self.urls = ["https://docs.example/steps/", "https://docs.example/secrets/"]
        self.client = VelaDocsClient(self.urls, timeout=5)

    def test_html_to_text_strips_markup(self):
        text = VelaDocsClient.html_to_text(STEPS_PAGE)
        self.assertEqual(text, "Steps Each step runs a Docker image.")
        self.assertNotIn("color", text)
        self.assertNotIn("secrets", text)

    def test_is_relevant_full_query(self):
        self.assertTrue(VelaDocsClient.is_relevant("Each step runs a Docker image", "DOCKER IMAGE"))

    def test_is_relevant_single_token(self):
        self.assertTrue(VelaDocsClient.is_relevant("Each step runs a Docker image", "EACCES docker mkdir"))

    def test_is_relevant_no_token(self):
        self.assertFalse(VelaDocsClient.is_relevant("Inject credentials safely", "EACCES docker mkdir"))

    @patch("requests.get")
    def test_fetch_relevant_filters_and_keeps_order(self, mock_get):
        """Pages mentioning a query token are kept, in configured order"""
        mock_get.side_effect = [_response(STEPS_PAGE), _response(SECRETS_PAGE)]

        snippets = self.client.fetch_relevant("OCI runtime docker-build docker")

        self.assertEqual([s.url for s in snippets], ["https://docs.example/steps/"])
        self.assertEqual(snippets[0].content, "Steps Each step runs a Docker image.")
        self.assertEqual(mock_get.call_count, 2)
        self.assertEqual(mock_get.call_args_list[0][0][0], "https://docs.example/steps/")
        self.assertEqual(mock_get.call_args_list[0][1]["timeout"], 5)

    @patch("requests.get")
    def test_fetch_relevant_both_match(self, mock_get):
        mock_get.side_effect = [_response(STEPS_PAGE), _response(SECRETS_PAGE)]

        snippets = self.client.fetch_relevant("steps secrets")

        self.assertEqual([s.url for s in snippets], self.urls)

    @patch("requests.get")
    def test_fetch_skips_failed_sources(self, mock_get):
        """Network errors and error statuses drop only that source"""
        mock_get.side_effect = [requests.ConnectionError("boom"), _response(SECRETS_PAGE)]
        snippets = self.client.fetch_relevant("secrets")
        self.assertEqual([s.url for s in snippets], ["https://docs.example/secrets/"])

        mock_get.side_effect = [_response(STEPS_PAGE, 404), _response(SECRETS_PAGE, 500)]
        self.assertEqual(self.client.fetch_relevant("steps"), [])

    @patch("requests.get")
    def test_content_is_truncated(self, mock_get):
        client = VelaDocsClient(["https://docs.example/long/"], max_content_chars=20)
        mock_get.return_value = _response("<p>" + "pipeline " * 100 + "</p>")

        snippets = client.fetch_relevant("pipeline")

        self.assertEqual(len(snippets), 1)
        self.assertEqual(len(snippets[0].content), 20)

    @patch("requests.get")
    def test_relevance_uses_full_text(self, mock_get):
        """A match past the truncation point still counts"""
        client = VelaDocsClient(["https://docs.example/long/"], max_content_chars=10)
        mock_get.return_value = _response("<p>" + "filler " * 50 + "buildkit</p>")

        snippets = client.fetch_relevant("buildkit")

        self.assertEqual(len(snippets), 1)
        self.assertNotIn("buildkit", snippets[0].content)


if __name__ == "__main__":
    unittest.main()
