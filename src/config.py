#!/usr/bin/env python3
"""
Runtime configuration for Vela Insight
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional

from constants import VELA_DOC_URLS


@dataclass
class ProviderConfig:
    """Connection settings for one chat-completion provider"""
    name: str
    base_url: str
    model: str
    api_key: Optional[str] = None
    label: str = ""
    temperature: float = 0.1
    max_tokens: int = 3000
    timeout: int = 60

    @property
    def display_name(self) -> str:
        return self.label or f"{self.name} {self.model}"

    @property
    def has_credential(self) -> bool:
        return bool(self.api_key)


@dataclass
class AppConfig:
    """Explicit configuration handed to the analysis pipeline"""
    failure_provider: ProviderConfig
    config_provider: ProviderConfig
    doc_urls: List[str] = field(default_factory=lambda: list(VELA_DOC_URLS))
    docs_timeout: int = 10
    github_token: Optional[str] = None
    github_repository: Optional[str] = None
    vela_config_path: str = ".vela.yml"

    @classmethod
    def from_env(cls) -> "AppConfig":
        failure_provider = ProviderConfig(
            name="Groq",
            base_url=os.getenv("GROQ_BASE_URL", "https://api.groq.com/openai/v1"),
            model=os.getenv("GROQ_MODEL", "llama3-8b-8192"),
            api_key=os.getenv("GROQ_API_KEY") or None,
            label=os.getenv("GROQ_PROVIDER_LABEL", "Groq Llama3-8B"),
            temperature=0.1,
            max_tokens=int(os.getenv("LLM_MAX_TOKENS", "3000")),
            timeout=int(os.getenv("LLM_TIMEOUT", "60")),
        )
        config_provider = ProviderConfig(
            name="OpenAI",
            base_url=os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1"),
            model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
            api_key=os.getenv("OPENAI_API_KEY") or None,
            temperature=0.3,
            max_tokens=2000,
            timeout=int(os.getenv("LLM_TIMEOUT", "60")),
        )

        doc_urls = list(VELA_DOC_URLS)
        raw_urls = os.getenv("VELA_DOC_URLS")
        if raw_urls:
            doc_urls = [url.strip() for url in raw_urls.split(",") if url.strip()]

        return cls(
            failure_provider=failure_provider,
            config_provider=config_provider,
            doc_urls=doc_urls,
            docs_timeout=int(os.getenv("DOCS_TIMEOUT", "10")),
            github_token=os.getenv("GITHUB_TOKEN") or None,
            github_repository=os.getenv("GITHUB_REPOSITORY") or None,
            vela_config_path=os.getenv("VELA_CONFIG_PATH", ".vela.yml"),
        )
