#!/usr/bin/env python3
"""
Split a markdown analysis into its bold-labeled sections
"""

import re
from typing import Dict

from constants import SECTION_LABELS

# Body runs until the next **Label** (optionally **Label:** / **Label**:) or end of text
_NEXT_LABEL = r"(?=\*\*[^*]+[:*]*\*\*|\Z)"


def extract_section(text: str, label: str) -> str:
    """Text following **label** up to the next bold label, or "" when absent"""
    if not isinstance(text, str) or not text:
        return ""

    pattern = re.compile(
        r"\*\*" + re.escape(label) + r"[:*]*\*\*:?([\s\S]*?)" + _NEXT_LABEL,
        re.IGNORECASE,
    )
    match = pattern.search(text)
    return match.group(1).strip() if match else ""


def extract_sections(text: str) -> Dict[str, str]:
    """All six analysis sections keyed by their field name"""
    return {key: extract_section(text, label) for key, label in SECTION_LABELS.items()}
