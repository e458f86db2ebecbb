"""Parsing utilities for oracle response extraction."""

import re


def extract_json(raw_response: str) -> str:
    """Extract a JSON body from an oracle response.

    Priority:
    1. ```json ... ``` (or bare ```) code fence
    2. First {...} or [...] span in the text
    3. Raw response

    Args:
        raw_response: The raw response string from the oracle

    Returns:
        The extracted JSON text (not yet parsed)
    """
    # Try markdown code fence
    if match := re.search(
        r'```(?:json)?\s*(.*?)```', raw_response, re.IGNORECASE | re.DOTALL
    ):
        return match.group(1).strip()

    # Try the outermost object or array
    if match := re.search(r'[\[{].*[\]}]', raw_response, re.DOTALL):
        return match.group(0).strip()

    return raw_response.strip()
