"""
Parsing of the model's summarization reply.

The model is asked for JSON but may wrap it in prose or code fences. The
first brace-delimited object is extracted; anything unusable degrades to a
plain-text summary with empty structured fields. Parsing never raises.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Optional


logger = logging.getLogger("processor")

FALLBACK_SUMMARY_CHARS = 500

_JSON_BLOCK_RE = re.compile(r"\{[\s\S]*\}")


@dataclass
class SummaryData:
    summary: str = ""
    key_points: list[str] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)
    timestamps: list[dict[str, Any]] = field(default_factory=list)


def extract_json_block(reply: str) -> Optional[str]:
    """
    Return the JSON object embedded in a reply, or None.

    Tries the span from the first "{" to the last "}" and, if that is not
    valid JSON (e.g. trailing prose with braces), the first complete object
    starting at the first "{".
    """
    if not reply:
        return None
    match = _JSON_BLOCK_RE.search(reply)
    if match is None:
        return None

    candidate = match.group(0)
    try:
        json.loads(candidate)
        return candidate
    except ValueError:
        pass

    try:
        _, end = json.JSONDecoder().raw_decode(reply, match.start())
    except ValueError:
        return None
    return reply[match.start():end]


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if str(item).strip()]


def _timestamp(value: Any) -> Optional[dict[str, Any]]:
    if not isinstance(value, dict):
        return None
    try:
        time = int(float(value.get("time")))
    except (TypeError, ValueError, OverflowError):
        return None
    if time < 0:
        return None
    return {
        "time": time,
        "topic": str(value.get("topic") or ""),
        "summary": str(value.get("summary") or ""),
    }


def timestamps_are_ordered(timestamps: list[dict[str, Any]]) -> bool:
    """True if the timestamps are in non-decreasing time order."""
    times = [ts["time"] for ts in timestamps]
    return all(a <= b for a, b in zip(times, times[1:]))


def _fallback(reply: str) -> SummaryData:
    return SummaryData(summary=(reply or "")[:FALLBACK_SUMMARY_CHARS])


def parse_summary_response(reply: str) -> SummaryData:
    """
    Turn a model reply into SummaryData.

    Well-formed entries are kept in reply order; malformed list items and
    timestamps (missing or negative time) are dropped. Without a usable JSON
    object the summary is the first 500 characters of the reply.
    """
    block = extract_json_block(reply)
    if block is None:
        logger.error("No JSON object found in AI response, storing raw text")
        return _fallback(reply)

    try:
        payload = json.loads(block)
    except ValueError as e:
        logger.error(f"Failed to parse AI response: {e}")
        return _fallback(reply)

    if not isinstance(payload, dict):
        return _fallback(reply)

    raw_timestamps = payload.get("timestamps")
    timestamps = []
    if isinstance(raw_timestamps, list):
        timestamps = [ts for ts in map(_timestamp, raw_timestamps) if ts is not None]
    if not timestamps_are_ordered(timestamps):
        logger.warning("AI response timestamps are not in ascending order")

    summary = payload.get("summary")
    return SummaryData(
        summary=summary.strip() if isinstance(summary, str) else "",
        key_points=_string_list(payload.get("key_points")),
        keywords=_string_list(payload.get("keywords")),
        timestamps=timestamps,
    )
