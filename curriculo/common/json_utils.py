"""
JSON Utilities for AI Response Parsing.

The text enhancement model is asked for bare JSON but regularly wraps it in
markdown fences or emits slightly malformed objects (trailing commas, single
quotes). Uses json-repair as a fallback when json.loads() fails.
"""

import json
import re
from typing import Any, Dict


def parse_llm_json(text: str) -> Dict[str, Any]:
    """
    Parse a JSON object from a model response with error recovery.

    Args:
        text: Raw model response text that may contain JSON

    Returns:
        Parsed dictionary

    Raises:
        ValueError: If no valid JSON object can be extracted or repaired

    Example:
        >>> parse_llm_json('```json\\n{"skills": ["Git"]}\\n```')
        {'skills': ['Git']}
    """
    if not text or not text.strip():
        raise ValueError("Empty input: no JSON content to parse")

    json_str = _extract_json_object(strip_markdown_fences(text.strip()))

    try:
        parsed = json.loads(json_str)
    except json.JSONDecodeError:
        parsed = _repair(json_str, text)

    if isinstance(parsed, list) and len(parsed) == 1 and isinstance(parsed[0], dict):
        # Model wrapped the object in brackets: [{...}]
        parsed = parsed[0]

    if not isinstance(parsed, dict):
        raise ValueError(f"Expected a JSON object, got {type(parsed).__name__}")

    return parsed


def strip_markdown_fences(text: str) -> str:
    """
    Remove ```json ... ``` or ``` ... ``` wrappers.

    Args:
        text: Text that may be wrapped in markdown code blocks

    Returns:
        Text with code block markers removed
    """
    result = text

    if result.startswith("```json"):
        result = result[7:]
    elif result.startswith("```"):
        result = result[3:]

    if result.endswith("```"):
        result = result[:-3]

    return result.strip()


def _repair(json_str: str, original: str) -> Any:
    from json_repair import repair_json

    try:
        repaired = repair_json(json_str, return_objects=True)
    except Exception as e:
        raise ValueError(
            f"Failed to parse or repair JSON: {e}\n"
            f"Original text (first 500 chars): {original[:500]}"
        )

    if isinstance(repaired, str):
        # Some inputs come back as a repaired string rather than an object
        try:
            return json.loads(repaired)
        except json.JSONDecodeError as e:
            raise ValueError(f"Failed to parse repaired JSON: {e}")

    return repaired


def _extract_json_object(text: str) -> str:
    """
    Extract JSON object from text that may contain surrounding content.

    Raises:
        ValueError: If no JSON object pattern is found
    """
    text = text.strip()

    if text.startswith("{") or text.startswith("["):
        return text

    # Content between first { and last }
    json_match = re.search(r'\{.*\}', text, re.DOTALL)
    if json_match:
        return json_match.group(0)

    raise ValueError(f"No JSON object found in text: {text[:200]}")
