#!/usr/bin/env python3
"""
Chat-completion client for OpenAI-compatible providers
"""

from typing import Optional

import requests

from config import ProviderConfig


class ModelProviderError(Exception):
    """The provider could not produce an answer"""


class MissingCredentialError(ModelProviderError):
    """No API key is configured for the provider"""


class ChatCompletionClient:
    """Client for a provider's /chat/completions endpoint"""

    def __init__(self, provider: ProviderConfig):
        self.provider = provider

    @property
    def name(self) -> str:
        return self.provider.display_name

    def complete(self, system_prompt: str, user_prompt: str,
                 max_tokens: Optional[int] = None, temperature: Optional[float] = None) -> str:
        """Send one system + user message pair and return the top answer"""
        if not self.provider.has_credential:
            raise MissingCredentialError(f"{self.provider.name} API key not found")

        headers = self._create_headers()
        data = self._create_data(system_prompt, user_prompt, max_tokens, temperature)

        print(f"🤖 Calling {self.name} ({self.provider.model})...")
        return self._post_completion_request(headers, data)

    def _create_headers(self) -> dict:
        """Create headers for the HTTP request"""
        return {
            "Authorization": f"Bearer {self.provider.api_key}",
            "Content-Type": "application/json",
        }

    def _create_data(self, system_prompt: str, user_prompt: str,
                     max_tokens: Optional[int], temperature: Optional[float]) -> dict:
        """Create data payload for the HTTP request"""
        return {
            "model": self.provider.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "max_tokens": max_tokens if max_tokens is not None else self.provider.max_tokens,
            "temperature": temperature if temperature is not None else self.provider.temperature,
        }

    def _post_completion_request(self, headers: dict, data: dict) -> str:
        try:
            response = requests.post(
                url=f"{self.provider.base_url.rstrip('/')}/chat/completions",
                headers=headers,
                json=data,
                timeout=self.provider.timeout,
            )
        except requests.RequestException as e:
            raise ModelProviderError(f"{self.provider.name} request failed: {e}") from e

        if not response.ok:
            raise ModelProviderError(f"{self.provider.name} API error: {response.status_code}")

        try:
            body = response.json()
        except ValueError as e:
            raise ModelProviderError(f"{self.provider.name} returned invalid JSON") from e

        return self._parse_content(body)

    def _parse_content(self, body) -> str:
        """Pull choices[0].message.content out of a response body"""
        if not isinstance(body, dict):
            raise ModelProviderError("Response body is not a JSON object")

        choices = body.get("choices")
        if not isinstance(choices, list) or not choices:
            raise ModelProviderError("Response has no completion choices")

        first = choices[0]
        message = first.get("message") if isinstance(first, dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str) or not content.strip():
            raise ModelProviderError("Response choice has no message content")

        return content
