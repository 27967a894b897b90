#!/usr/bin/env python3
"""
Failure analysis pipeline: docs lookup, prompting, model call, section extraction
"""

from datetime import datetime, timezone
from typing import Callable, Optional, Union

from config import AppConfig
from constants import (
    BASIC_ANALYSIS_FAILED_PROVIDER,
    BASIC_ANALYSIS_MAX_TOKENS,
    BASIC_ANALYSIS_PROVIDER,
    CONFIG_ANALYSIS_TYPES,
    MAX_DOC_QUERY_CHARS,
)
from docs_client import VelaDocsClient
from llm_client import ChatCompletionClient, MissingCredentialError, ModelProviderError
from models import AnalysisResult, FailureRecord, FallbackOutput, ModelOutput
import prompts
from section_extractor import extract_sections


def basic_fallback_analysis(record: FailureRecord) -> str:
    """Six-section analysis built without a model, echoing the failing step and error"""
    step = record.failing_step
    return f"""**Root Cause Analysis**: The pipeline failed at step "{step}" with error: {record.error_message}

**Immediate Workarounds**:
- Check if the step configuration is correct
- Verify that all required dependencies are available
- Review the step's Docker image and commands

**Proper Solutions**:
- Examine the build logs for specific error patterns
- Update pipeline configuration if needed
- Check for resource constraints or permissions issues

**Code Examples**:
```yaml
steps:
  - name: {step}
    image: # verify this image exists and is accessible
    commands:
      # check these commands are correct
```

**Prevention**:
- Add validation steps before the failing step
- Use proper error handling in pipeline configuration
- Test pipeline changes in a development environment

**Vela Best Practices**:
- Use specific image tags instead of 'latest'
- Implement proper secret management
- Add adequate logging for debugging
"""


def build_docs_query(record: FailureRecord) -> str:
    return f"{record.error_message} {record.failing_step} {record.log_text}"[:MAX_DOC_QUERY_CHARS]


class FailureAnalyzer:
    """Runs basic and enhanced failure analyses against one model provider"""

    def __init__(self, llm: ChatCompletionClient, docs: VelaDocsClient,
                 clock: Optional[Callable[[], datetime]] = None):
        self.llm = llm
        self.docs = docs
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    @classmethod
    def from_config(cls, config: AppConfig) -> "FailureAnalyzer":
        return cls(
            ChatCompletionClient(config.failure_provider),
            VelaDocsClient(config.doc_urls, timeout=config.docs_timeout),
        )

    def analyze_basic(self, record: FailureRecord) -> str:
        """Single free-text analysis; provider errors propagate to the caller"""
        print(f"🔍 Analyzing failure with {self.llm.name}: {record.repository} / {record.failing_step}")
        return self.llm.complete(
            prompts.basic_system_prompt(),
            prompts.basic_user_prompt(record),
            max_tokens=BASIC_ANALYSIS_MAX_TOKENS,
        )

    def analyze_enhanced(self, record: FailureRecord) -> AnalysisResult:
        """Docs-grounded analysis that always returns a result"""
        print(f"🔍 Enhanced analysis request: {record.repository} / {record.branch} / {record.failing_step}")

        docs = self.docs.fetch_relevant(build_docs_query(record))
        system_prompt = prompts.enhanced_system_prompt()
        user_prompt = prompts.enhanced_user_prompt(record, docs)

        output = self._generate(record, system_prompt, user_prompt)
        if isinstance(output, FallbackOutput):
            print(f"⚠️  Using basic analysis: {output.reason}")
        else:
            print(f"✅ Analysis produced by {output.provider}")

        return AnalysisResult(
            raw_text=output.text,
            sections=extract_sections(output.text),
            provider=output.provider,
            referenced_docs=[doc.url for doc in docs],
            timestamp=self.clock(),
        )

    def _generate(self, record: FailureRecord, system_prompt: str,
                  user_prompt: str) -> Union[ModelOutput, FallbackOutput]:
        """One attempt at the model, otherwise the local template"""
        try:
            text = self.llm.complete(system_prompt, user_prompt)
        except MissingCredentialError as e:
            return FallbackOutput(basic_fallback_analysis(record), BASIC_ANALYSIS_PROVIDER, str(e))
        except ModelProviderError as e:
            provider = BASIC_ANALYSIS_FAILED_PROVIDER.format(provider=self.llm.provider.name)
            print(f"❌ {self.llm.name} analysis failed: {e}")
            return FallbackOutput(basic_fallback_analysis(record), provider, str(e))
        return ModelOutput(text, self.llm.name)


class ConfigOptimizer:
    """Reviews or rewrites a .vela.yml with a language model"""

    def __init__(self, llm: ChatCompletionClient):
        self.llm = llm

    @classmethod
    def from_config(cls, config: AppConfig) -> "ConfigOptimizer":
        return cls(ChatCompletionClient(config.config_provider))

    def run(self, config: str, analysis_type: str) -> str:
        if not isinstance(config, str) or not config.strip():
            raise ValueError("'config' is required")
        if analysis_type not in CONFIG_ANALYSIS_TYPES:
            raise ValueError(f"'analysisType' must be one of: {', '.join(CONFIG_ANALYSIS_TYPES)}")

        print(f"🔧 Running config {analysis_type} with {self.llm.name}")
        system_prompt, user_prompt = prompts.config_prompts(config, analysis_type)
        return self.llm.complete(system_prompt, user_prompt)
