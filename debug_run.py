#!/usr/bin/env python3
"""
Quick script to run an enhanced failure analysis on a sample Vela failure
"""

import json
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "src"))

from analyzer import FailureAnalyzer
from config import AppConfig
from models import FailureRecord

SAMPLE_LOGS = """[INFO] Building Docker image...
[INFO] Step 1/8 : FROM node:18-alpine
[INFO] Step 2/8 : WORKDIR /app
[INFO] Step 3/8 : COPY package*.json ./
[INFO] Step 4/8 : RUN npm ci --only=production
[ERROR] npm ERR! code EACCES
[ERROR] npm ERR! syscall mkdir
[ERROR] npm ERR! path /app/node_modules
[ERROR] npm ERR! Error: EACCES: permission denied, mkdir '/app/node_modules'
[ERROR] Error response from daemon: failed to create shim task: OCI runtime create failed"""

SAMPLE_CONFIG = """version: "1"
steps:
  - name: docker-build
    image: plugins/docker
    settings:
      repo: inventory-service
      tags: latest
      dockerfile: Dockerfile"""


def run_sample():
    config = AppConfig.from_env()
    print(f"🔧 Provider: {config.failure_provider.display_name}")
    print(f"   API key: {'✓' if config.failure_provider.has_credential else '✗'}")

    record = FailureRecord(
        repository="inventory-service",
        branch="feature/stock-optimization",
        failing_step="docker-build",
        error_message="Error response from daemon: failed to create shim task: OCI runtime create failed",
        log_text=SAMPLE_LOGS,
        pipeline_config=SAMPLE_CONFIG,
    )

    result = FailureAnalyzer.from_config(config).analyze_enhanced(record)
    print("\n" + "=" * 60 + "\n")
    print(json.dumps(result.to_dict(), indent=2))


if __name__ == '__main__':
    run_sample()
