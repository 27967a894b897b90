#!/usr/bin/env python3
"""
Data models for Vela Insight
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional

from constants import MAX_LOG_CHARS, SECTION_LABELS


@dataclass(frozen=True)
class FailureRecord:
    """One failed pipeline run's step, error and logs"""
    repository: str
    branch: str
    failing_step: str
    error_message: str
    log_text: str
    pipeline_config: Optional[str] = None

    def __post_init__(self):
        for name in ("repository", "failing_step", "error_message"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"'{name}' is required")
        for name in ("branch", "log_text"):
            if not isinstance(getattr(self, name), str):
                raise ValueError(f"'{name}' must be a string")
        if self.pipeline_config is not None and not isinstance(self.pipeline_config, str):
            raise ValueError("'pipeline_config' must be a string")

    @property
    def capped_logs(self) -> str:
        """Tail of the log text, bounded to keep prompts small"""
        return self.log_text[-MAX_LOG_CHARS:]


@dataclass
class DocumentationSnippet:
    """Relevance-filtered excerpt of a reference documentation page"""
    url: str
    content: str


@dataclass
class ModelOutput:
    """Analysis text produced by the configured language model"""
    text: str
    provider: str


@dataclass
class FallbackOutput:
    """Analysis text produced by the local template"""
    text: str
    provider: str
    reason: str = ""


@dataclass
class AnalysisResult:
    """Structured outcome of one enhanced failure analysis"""
    raw_text: str
    sections: Dict[str, str]
    provider: str
    referenced_docs: List[str] = field(default_factory=list)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        timestamp = self.timestamp.astimezone(timezone.utc)
        iso = timestamp.isoformat(timespec="milliseconds").replace("+00:00", "Z")
        sections = {key: self.sections.get(key, "") for key in SECTION_LABELS}
        return {
            "analysis": self.raw_text,
            "sections": sections,
            "referencedDocs": list(self.referenced_docs),
            "velaDocs": list(self.referenced_docs),
            "provider": self.provider,
            "aiProvider": self.provider,
            "timestamp": iso,
        }


@dataclass
class PipelineRun:
    """One execution of a CI build, as listed on the dashboard"""
    id: str
    repo_name: str
    branch: str
    status: str  # running | success | failed | pending
    progress: Optional[int] = None
    duration: Optional[str] = None
    author: Optional[str] = None
    commit_hash: Optional[str] = None
    current_step: Optional[str] = None
    external_build_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
