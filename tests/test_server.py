#!/usr/bin/env python3
"""
Tests for the HTTP handlers
"""

import unittest
from unittest.mock import Mock, patch
import os
import sys
from datetime import datetime, timezone

from fastapi.testclient import TestClient

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import server
from analyzer import ConfigOptimizer, FailureAnalyzer
from config import AppConfig, ProviderConfig
from llm_client import ModelProviderError
from models import DocumentationSnippet

ENHANCED_BODY = {
    "logs": "[ERROR] npm ERR! code EACCES",
    "error": "OCI runtime create failed",
    "repo": "inventory-service",
    "step": "docker-build",
    "branch": "main",
    "pipeline_config": "steps: []",
}


class TestServer(unittest.TestCase):
    """Test the FastAPI endpoints"""

    def setUp(self):
        self.llm = Mock()
        self.llm.name = "Groq Llama3-8B"
        self.llm.provider = ProviderConfig("Groq", "https://api.example/v1", "llama3-8b-8192")
        self.docs = Mock()
        self.docs.fetch_relevant.return_value = [
            DocumentationSnippet("https://go-vela.github.io/docs/troubleshooting/", "Troubleshooting"),
        ]
        fixed_time = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)
        self.analyzer = FailureAnalyzer(self.llm, self.docs, clock=lambda: fixed_time)

        self.optimizer_llm = Mock()
        self.optimizer_llm.name = "OpenAI gpt-4o-mini"
        self.optimizer = ConfigOptimizer(self.optimizer_llm)

        server.app.dependency_overrides[server.get_failure_analyzer] = lambda: self.analyzer
        server.app.dependency_overrides[server.get_config_optimizer] = lambda: self.optimizer
        self.client = TestClient(server.app)

    def tearDown(self):
        server.app.dependency_overrides.clear()

    def test_enhanced_analysis(self):
        self.llm.complete.return_value = "**Root Cause Analysis**: disk full\n**Prevention**: add cleanup step"

        response = self.client.post("/enhanced-failure-analysis", json=ENHANCED_BODY)

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["sections"]["rootCause"], "disk full")
        self.assertEqual(body["sections"]["prevention"], "add cleanup step")
        self.assertEqual(body["sections"]["workarounds"], "")
        self.assertEqual(body["provider"], "Groq Llama3-8B")
        self.assertEqual(body["aiProvider"], "Groq Llama3-8B")
        self.assertEqual(body["referencedDocs"], ["https://go-vela.github.io/docs/troubleshooting/"])
        self.assertEqual(body["velaDocs"], body["referencedDocs"])
        self.assertEqual(body["timestamp"], "2024-05-01T12:00:00.000Z")

    def test_enhanced_analysis_provider_down(self):
        """Provider failures never fail the request"""
        self.llm.complete.side_effect = ModelProviderError("Groq API error: 503")

        response = self.client.post("/enhanced-failure-analysis", json=ENHANCED_BODY)

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["provider"], "Basic Analysis (Groq failed)")
        self.assertIn("docker-build", body["sections"]["rootCause"])

    def test_enhanced_analysis_missing_field(self):
        body = dict(ENHANCED_BODY)
        del body["branch"]

        response = self.client.post("/enhanced-failure-analysis", json=body)

        self.assertEqual(response.status_code, 400)
        self.assertIn("branch", response.json()["error"])

    def test_enhanced_analysis_blank_step(self):
        response = self.client.post("/enhanced-failure-analysis", json=dict(ENHANCED_BODY, step=" "))
        self.assertEqual(response.status_code, 400)
        self.assertIn("failing_step", response.json()["error"])

    def test_enhanced_analysis_internal_error(self):
        self.docs.fetch_relevant.side_effect = RuntimeError("unexpected")

        response = self.client.post("/enhanced-failure-analysis", json=ENHANCED_BODY)

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "unexpected"})

    def test_enhanced_analysis_value_error_from_analyzer(self):
        """Only invalid request fields map to 400; analyzer errors are a 500"""
        self.docs.fetch_relevant.side_effect = ValueError("bad page index")

        response = self.client.post("/enhanced-failure-analysis", json=ENHANCED_BODY)

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "bad page index"})

    def test_basic_analysis_value_error_from_analyzer(self):
        self.llm.complete.side_effect = ValueError("bad token count")
        body = {k: ENHANCED_BODY[k] for k in ("logs", "error", "repo", "step")}

        response = self.client.post("/analyze-failure-logs", json=body)

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "bad token count"})

    def test_invalid_environment_returns_json_error(self):
        """A dependency that fails while reading config still answers with an error body"""
        del server.app.dependency_overrides[server.get_failure_analyzer]
        server.get_config.cache_clear()
        self.addCleanup(server.get_config.cache_clear)
        client = TestClient(server.app, raise_server_exceptions=False)

        with patch.dict(os.environ, {"LLM_TIMEOUT": "sixty"}):
            response = client.post("/enhanced-failure-analysis", json=ENHANCED_BODY)

        self.assertEqual(response.status_code, 500)
        self.assertIn("sixty", response.json()["error"])

    def test_basic_analysis(self):
        self.llm.complete.return_value = "Fix the permissions"
        body = {k: ENHANCED_BODY[k] for k in ("logs", "error", "repo", "step")}

        response = self.client.post("/analyze-failure-logs", json=body)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"analysis": "Fix the permissions"})

    def test_basic_analysis_provider_error(self):
        self.llm.complete.side_effect = ModelProviderError("Groq API key not found")
        body = {k: ENHANCED_BODY[k] for k in ("logs", "error", "repo", "step")}

        response = self.client.post("/analyze-failure-logs", json=body)

        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.json(), {"error": "Groq API key not found"})

    def test_invalid_json_body(self):
        response = self.client.post(
            "/analyze-failure-logs",
            content="not json",
            headers={"Content-Type": "application/json"},
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("error", response.json())

    def test_config_analysis(self):
        self.optimizer_llm.complete.return_value = "## Performance\n- cache deps"

        response = self.client.post("/analyze-vela-config", json={"config": "steps: []", "analysisType": "analyze"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"result": "## Performance\n- cache deps"})

    def test_config_analysis_bad_type(self):
        response = self.client.post("/analyze-vela-config", json={"config": "steps: []", "analysisType": "lint"})
        self.assertEqual(response.status_code, 400)
        self.assertIn("analysisType", response.json()["error"])

    def test_cors_preflight(self):
        response = self.client.options(
            "/enhanced-failure-analysis",
            headers={"Origin": "https://dashboard.example", "Access-Control-Request-Method": "POST"},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.headers["access-control-allow-origin"], "*")

    def test_health(self):
        config = AppConfig(
            failure_provider=ProviderConfig("Groq", "u", "m", api_key=None, label="Groq Llama3-8B"),
            config_provider=ProviderConfig("OpenAI", "u", "gpt-4o-mini"),
        )
        server.app.dependency_overrides[server.get_config] = lambda: config

        response = self.client.get("/health")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["provider"], "Groq Llama3-8B")
        self.assertFalse(response.json()["credentialConfigured"])


if __name__ == "__main__":
    unittest.main()
