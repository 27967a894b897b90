#!/usr/bin/env python3
"""
Constants for Vela Insight
"""

SERVICE_NAME = "vela-insight"
SERVICE_VERSION = "1.0.0"

# Section key -> bold label the model is asked to emit, in document order.
# Prompts and the section extractor both read this mapping.
SECTION_LABELS = {
    "rootCause": "Root Cause Analysis",
    "workarounds": "Immediate Workarounds",
    "solutions": "Proper Solutions",
    "codeExamples": "Code Examples",
    "prevention": "Prevention",
    "bestPractices": "Vela Best Practices",
}

# Provider tags for the local template path
BASIC_ANALYSIS_PROVIDER = "Basic Analysis"
BASIC_ANALYSIS_FAILED_PROVIDER = "Basic Analysis ({provider} failed)"

# Reference documentation searched for every enhanced analysis
VELA_DOC_URLS = [
    "https://go-vela.github.io/docs/concepts/pipeline/steps/",
    "https://go-vela.github.io/docs/concepts/pipeline/services/",
    "https://go-vela.github.io/docs/concepts/pipeline/secrets/",
    "https://go-vela.github.io/docs/concepts/pipeline/templates/",
    "https://go-vela.github.io/docs/usage/examples/",
    "https://go-vela.github.io/docs/reference/yaml/",
    "https://go-vela.github.io/docs/troubleshooting/",
]

MAX_DOC_CONTENT_CHARS = 2000
MAX_DOC_QUERY_CHARS = 100
MAX_LOG_CHARS = 8000
MAX_JOB_LOG_CHARS = 5000

BASIC_ANALYSIS_MAX_TOKENS = 1000

CONFIG_ANALYSIS_TYPES = ("analyze", "optimize")

# Lines that look like the actual error in a build log
ERROR_INDICATORS = [
    "ERROR", "FAILED", "Error:", "error:", "Exception:", "Traceback",
    "npm ERR!", "fatal:", "##[error]", "FAIL:", "FAILURE:", "panic:",
]
