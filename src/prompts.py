#!/usr/bin/env python3
"""
Prompt templates for failure and configuration analysis
"""

from typing import List, Tuple

from constants import SECTION_LABELS
from models import DocumentationSnippet, FailureRecord


def _numbered_sections() -> str:
    descriptions = {
        "rootCause": "What exactly went wrong and why?",
        "workarounds": "Quick fixes to get the pipeline working",
        "solutions": "Long-term fixes that address the underlying issue",
        "codeExamples": "Show specific YAML changes or commands needed",
        "prevention": "How to avoid this issue in the future",
        "bestPractices": "Relevant recommendations from the documentation",
    }
    return "\n".join(
        f"{i}. **{label}**: {descriptions[key]}"
        for i, (key, label) in enumerate(SECTION_LABELS.items(), 1)
    )


def enhanced_system_prompt() -> str:
    labels = ", ".join(f"**{label}**" for label in SECTION_LABELS.values())
    return (
        "You are an expert DevOps engineer and Vela CI/CD specialist. "
        "Analyze the provided build failure and provide detailed insights with actionable solutions.\n\n"
        f"Structure your answer as exactly {len(SECTION_LABELS)} sections, in this order, "
        f"each introduced by its bold markdown label: {labels}. "
        "Do not use bold text anywhere else in the answer."
    )


def render_docs(docs: List[DocumentationSnippet]) -> str:
    """Documentation block appended to the user prompt, empty when nothing matched"""
    if not docs:
        return ""
    body = "\n\n".join(f"{doc.url}:\n{doc.content}" for doc in docs)
    return f"Relevant Vela Documentation (reference material):\n{body}"


def enhanced_user_prompt(record: FailureRecord, docs: List[DocumentationSnippet]) -> str:
    parts = [
        f"""Analyze this Vela pipeline failure:

Repository: {record.repository}
Branch: {record.branch}
Failed Step: {record.failing_step}
Error Message: {record.error_message}

Build Logs:
```
{record.capped_logs}
```"""
    ]

    if record.pipeline_config:
        parts.append(f"""Pipeline Configuration:
```yaml
{record.pipeline_config}
```""")

    docs_block = render_docs(docs)
    if docs_block:
        parts.append(docs_block)

    parts.append(f"""Please provide:
{_numbered_sections()}

Format your response with clear sections and actionable steps.""")

    return "\n\n".join(parts)


def basic_system_prompt() -> str:
    return (
        "You are an expert DevOps engineer analyzing CI/CD pipeline failures. "
        "Provide concise, actionable analysis and solutions."
    )


def basic_user_prompt(record: FailureRecord) -> str:
    return f"""Analyze this pipeline failure:

Repository: {record.repository}
Failed Step: {record.failing_step}
Error: {record.error_message}

Build Logs:
{record.capped_logs}

Provide a brief analysis of what went wrong and how to fix it."""


def config_prompts(config: str, analysis_type: str) -> Tuple[str, str]:
    """System and user prompts for reviewing or rewriting a .vela.yml"""
    if analysis_type == "analyze":
        system_prompt = """You are an expert DevOps engineer specializing in Vela CI/CD pipeline optimization. Analyze the provided .vela.yml configuration and provide detailed recommendations for:
1. Performance improvements
2. Cost optimization opportunities
3. Reliability enhancements
4. Security best practices
5. Estimated time and cost savings

Format your response with clear sections using markdown headers and bullet points."""
        user_prompt = f"""Please analyze this .vela.yml configuration and provide optimization recommendations:

```yaml
{config}
```"""
    elif analysis_type == "optimize":
        system_prompt = """You are an expert DevOps engineer. Take the provided .vela.yml configuration and return an optimized version that includes:
1. Dependency caching for faster builds
2. Parallel execution where possible
3. Docker BuildKit support
4. Retry logic for flaky steps
5. Resource optimization
6. Security improvements

Return ONLY the optimized YAML configuration without explanations."""
        user_prompt = f"""Optimize this .vela.yml configuration:

```yaml
{config}
```"""
    else:
        raise ValueError(f"Unknown analysis type: {analysis_type}")

    return system_prompt, user_prompt
