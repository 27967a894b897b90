#!/usr/bin/env python3
"""
GitHub Actions as a source of pipeline runs and failure records
"""

from datetime import datetime, timezone
from typing import List, Optional

import requests
from github import Github, GithubException

from constants import ERROR_INDICATORS, MAX_JOB_LOG_CHARS
from models import FailureRecord, PipelineRun

FAILED_CONCLUSIONS = {"failure", "timed_out", "cancelled", "startup_failure", "action_required"}
PENDING_STATUSES = {"queued", "waiting", "requested", "pending"}
NO_TIMESTAMP = datetime.min.replace(tzinfo=timezone.utc)


def map_run_status(status: Optional[str], conclusion: Optional[str]) -> str:
    """Collapse GitHub's status/conclusion pair into the dashboard's four states"""
    if status in PENDING_STATUSES:
        return "pending"
    if status == "in_progress":
        return "running"
    if conclusion in FAILED_CONCLUSIONS:
        return "failed"
    if status == "completed":
        return "success"
    return "pending"


def format_duration(started_at, finished_at) -> Optional[str]:
    if not started_at or not finished_at:
        return None
    seconds = max(0, int((finished_at - started_at).total_seconds()))
    minutes, seconds = divmod(seconds, 60)
    return f"{minutes}m {seconds}s" if minutes else f"{seconds}s"


def run_timestamp(run: PipelineRun) -> datetime:
    """Sort key for runs; runs without timestamps sort oldest"""
    return run.updated_at or run.created_at or NO_TIMESTAMP


def most_recent_failed(runs: List[PipelineRun]) -> Optional[PipelineRun]:
    """Latest run with status 'failed', by updated_at (falling back to created_at)"""
    failed = [run for run in runs if run.status == "failed"]
    if not failed:
        return None
    return max(failed, key=run_timestamp)


def extract_error_line(logs: str) -> Optional[str]:
    """Last log line that looks like an error, without the runner timestamp"""
    for line in reversed(logs.splitlines()):
        if any(indicator.lower() in line.lower() for indicator in ERROR_INDICATORS):
            parts = line.strip().split(" ", 1)
            # Actions logs prefix each line with an ISO timestamp
            if len(parts) == 2 and parts[0][:4].isdigit() and "T" in parts[0]:
                return parts[1].strip()
            return line.strip()
    return None


class GitHubClient:
    def __init__(self, github_token: str, repository: str, config_path: str = ".vela.yml"):
        self.github_token = github_token
        self.repository = repository
        self.config_path = config_path
        self.github = Github(self.github_token)

    def _headers(self) -> dict:
        return {
            "Authorization": f"token {self.github_token}",
            "Accept": "application/vnd.github.v3+json"
        }

    def list_pipeline_runs(self, limit: int = 20) -> List[PipelineRun]:
        """Most recent workflow runs, newest first"""
        repo = self.github.get_repo(self.repository)
        runs = []

        for workflow_run in repo.get_workflow_runs():
            if len(runs) >= limit:
                break
            runs.append(self._to_pipeline_run(workflow_run))

        runs.sort(key=run_timestamp, reverse=True)
        print(f"📋 Loaded {len(runs)} pipeline run(s) for {self.repository}")
        return runs

    def _to_pipeline_run(self, workflow_run) -> PipelineRun:
        status = map_run_status(workflow_run.status, workflow_run.conclusion)
        started_at = getattr(workflow_run, "run_started_at", None) or workflow_run.created_at
        actor = getattr(workflow_run, "actor", None)

        return PipelineRun(
            id=str(workflow_run.id),
            repo_name=self.repository,
            branch=workflow_run.head_branch or "",
            status=status,
            progress=100 if status in ("success", "failed") else (0 if status == "pending" else None),
            duration=format_duration(started_at, workflow_run.updated_at) if status in ("success", "failed") else None,
            author=actor.login if actor else None,
            commit_hash=workflow_run.head_sha,
            current_step=None,
            external_build_id=str(workflow_run.id),
            created_at=workflow_run.created_at,
            updated_at=workflow_run.updated_at,
        )

    def build_failure_record(self, run: PipelineRun) -> FailureRecord:
        """Failure record for a failed run: first failed step, its job log and the pipeline config"""
        jobs_url = f"https://api.github.com/repos/{self.repository}/actions/runs/{run.external_build_id}/jobs"
        response = requests.get(jobs_url, headers=self._headers(), timeout=30)

        if response.status_code != 200:
            raise RuntimeError(f"Error getting jobs for run {run.external_build_id}: {response.status_code}")

        failed_job, failed_step = None, None
        for job in response.json().get("jobs", []):
            if job.get("conclusion") in FAILED_CONCLUSIONS:
                failed_job = job
                failed_step = next(
                    (step for step in job.get("steps", []) if step.get("conclusion") == "failure"),
                    None,
                )
                break

        if failed_job is None:
            raise RuntimeError(f"Run {run.external_build_id} has no failed job")

        step_name = (failed_step or {}).get("name") or failed_job.get("name") or "Unknown Step"
        logs = self.get_job_logs(failed_job["id"])
        error_message = extract_error_line(logs) or f"Step '{step_name}' finished with {failed_job.get('conclusion')}"

        return FailureRecord(
            repository=self.repository,
            branch=run.branch,
            failing_step=step_name,
            error_message=error_message,
            log_text=logs,
            pipeline_config=self.get_pipeline_config(run.branch or None),
        )

    def get_job_logs(self, job_id: int) -> str:
        """Get logs for a specific job"""
        try:
            url = f"https://api.github.com/repos/{self.repository}/actions/jobs/{job_id}/logs"
            response = requests.get(url, headers=self._headers(), timeout=30)

            if response.status_code == 200:
                logs = response.text
                return logs[-MAX_JOB_LOG_CHARS:]
            else:
                return f"Could not retrieve logs (status: {response.status_code})"

        except requests.RequestException as e:
            return f"Error retrieving logs: {str(e)}"

    def get_pipeline_config(self, ref: Optional[str] = None) -> Optional[str]:
        """Contents of the pipeline config at a branch, or None when it is missing"""
        try:
            repo = self.github.get_repo(self.repository)
            if ref:
                contents = repo.get_contents(self.config_path, ref=ref)
            else:
                contents = repo.get_contents(self.config_path)
            return contents.decoded_content.decode("utf-8")
        except GithubException as e:
            print(f"ℹ️  No {self.config_path} found ({e.status})")
            return None
