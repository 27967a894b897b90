#!/usr/bin/env python3
"""
Vela Insight - analyze the most recent failed pipeline run of a repository
"""

import json
import os
import sys
from typing import Optional

from analyzer import FailureAnalyzer
from config import AppConfig
from constants import SECTION_LABELS
from github_client import GitHubClient, most_recent_failed
from models import AnalysisResult


class VelaInsight:
    """Main class for the command-line analysis"""

    def __init__(self, config: Optional[AppConfig] = None):
        self.config = config or AppConfig.from_env()
        self.output_format = os.getenv("OUTPUT_FORMAT", "markdown")

        if not all([self.config.github_token, self.config.github_repository]):
            raise ValueError("Missing required environment variables: GITHUB_TOKEN, GITHUB_REPOSITORY")

        self.github = GitHubClient(
            self.config.github_token,
            self.config.github_repository,
            self.config.vela_config_path,
        )
        self.analyzer = FailureAnalyzer.from_config(self.config)

    def run(self) -> Optional[AnalysisResult]:
        """Main execution method"""
        print(f"🔍 Looking for failed pipeline runs in {self.config.github_repository}...")
        if not self.config.failure_provider.has_credential:
            print("ℹ️  No model API key configured - results will use the basic analysis template")

        runs = self.github.list_pipeline_runs()
        failed_run = most_recent_failed(runs)
        if failed_run is None:
            print("✅ No failed pipeline runs found")
            return None

        print(f"🚨 Most recent failure: run {failed_run.external_build_id} on {failed_run.branch} ({failed_run.commit_hash})")
        record = self.github.build_failure_record(failed_run)
        print(f"📝 Failed step '{record.failing_step}': {record.error_message}")

        result = self.analyzer.analyze_enhanced(record)
        print(self.format_result(result))
        print("✅ Analysis complete!")
        return result

    def format_result(self, result: AnalysisResult) -> str:
        if self.output_format == "json":
            return json.dumps(result.to_dict(), indent=2)

        lines = [f"# 🔧 Vela Failure Analysis ({result.provider})", ""]
        for key, label in SECTION_LABELS.items():
            lines.append(f"## {label}")
            lines.append(result.sections.get(key) or "_No content_")
            lines.append("")
        if result.referenced_docs:
            lines.append("## 📚 Referenced Documentation")
            lines.extend(f"- {url}" for url in result.referenced_docs)
        return "\n".join(lines)


def main():
    """Entry point for Vela Insight"""
    try:
        insight = VelaInsight()
        insight.run()
    except Exception as e:
        print(f"❌ Vela Insight failed: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
