"""Parsing helpers for JSON returned by Claude"""

import json
from typing import Any


def parse_json_response(response_text: str) -> Any:
    """
    Parse a JSON payload from a model response.

    Claude sometimes wraps JSON in markdown code fences; those are removed first.

    Raises:
        json.JSONDecodeError: If the cleaned text is not valid JSON
    """
    cleaned = response_text.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    if cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    cleaned = cleaned.strip()

    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as error:
        # Fall back to the outermost object or array embedded in prose
        for opener, closer in (("{", "}"), ("[", "]")):
            start = cleaned.find(opener)
            end = cleaned.rfind(closer)
            if start != -1 and end > start:
                try:
                    return json.loads(cleaned[start:end + 1])
                except json.JSONDecodeError:
                    continue
        raise error
