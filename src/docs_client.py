#!/usr/bin/env python3
"""
Vela documentation fetcher
"""

from typing import List, Optional

import requests
from bs4 import BeautifulSoup

from constants import MAX_DOC_CONTENT_CHARS, VELA_DOC_URLS
from models import DocumentationSnippet


class VelaDocsClient:
    """Fetches reference documentation pages and keeps the ones matching a query"""

    def __init__(self, urls: Optional[List[str]] = None, timeout: int = 10,
                 max_content_chars: int = MAX_DOC_CONTENT_CHARS):
        self.urls = list(urls) if urls is not None else list(VELA_DOC_URLS)
        self.timeout = timeout
        self.max_content_chars = max_content_chars
        self.headers = {"User-Agent": "Mozilla/5.0 (Vela-Insight)"}

    def fetch_relevant(self, query: str) -> List[DocumentationSnippet]:
        """Return snippets of every configured page that mentions the query"""
        snippets = []

        for url in self.urls:
            text = self._fetch_text(url)
            if text is None:
                continue

            if self.is_relevant(text, query):
                snippets.append(DocumentationSnippet(url=url, content=text[:self.max_content_chars]))
            else:
                print(f"⏭️  Skipping doc {url} (no match for query)")

        print(f"📚 Matched {len(snippets)}/{len(self.urls)} documentation page(s)")
        return snippets

    def _fetch_text(self, url: str) -> Optional[str]:
        """Download a page and reduce it to plain text, or None on any failure"""
        try:
            response = requests.get(url, headers=self.headers, timeout=self.timeout)
            response.raise_for_status()
            return self.html_to_text(response.text)
        except Exception as e:
            print(f"⚠️  Failed to fetch {url}: {e}")
            return None

    @staticmethod
    def html_to_text(html: str) -> str:
        """Strip scripts, styles and tags, and collapse whitespace"""
        soup = BeautifulSoup(html, "html.parser")
        for tag in soup(["script", "style"]):
            tag.decompose()
        return " ".join(soup.get_text(separator=" ").split())

    @staticmethod
    def is_relevant(text: str, query: str) -> bool:
        """A page matches on the whole query or on any single query word"""
        text_lower = text.lower()
        query_lower = (query or "").lower()
        if query_lower in text_lower:
            return True
        return any(word in text_lower for word in query_lower.split())
