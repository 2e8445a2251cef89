"""
Scraped podcast and episode records and their normalization.

The page payload is not a stable API: every field may be missing and some
live under one of several keys. normalize_episode() turns one raw entry into
an EpisodeInfo with defaults applied.
"""

import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional


logger = logging.getLogger("ingestion")


def utc_now() -> datetime:
    """Current time as naive UTC (how timestamps are stored)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


@dataclass
class PodcastInfo:
    id: str
    name: str
    description: str = ""
    avatar: str = ""

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


@dataclass
class EpisodeInfo:
    id: str
    title: str
    duration: int = 0
    published_at: datetime = field(default_factory=utc_now)
    audio_url: str = ""
    thumbnail_url: str = ""
    shownotes: str = ""


@dataclass
class PodcastPage:
    """Everything extracted from a podcast homepage."""

    podcast: PodcastInfo
    episodes: list[EpisodeInfo] = field(default_factory=list)


def _first_non_empty(*values: Any) -> Any:
    for value in values:
        if value:
            return value
    return None


def nested_get(data: Any, *keys: str) -> Any:
    """data[k1][k2]... or None when any level is missing or not a dict."""
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def parse_published_at(value: Any) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp (e.g. "2024-05-01T08:00:00.000Z") to naive UTC.

    Returns None when the value is missing or unparseable.
    """
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        logger.warning(f"Could not parse publish date: {value!r}")
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _parse_duration(value: Any) -> int:
    try:
        duration = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(duration, 0)


def normalize_episode(
    raw: dict[str, Any], fallback_thumbnail: str = ""
) -> Optional[EpisodeInfo]:
    """
    Build an EpisodeInfo from one raw episode entry of the page payload.

    Defaults: duration 0, publish time now (UTC), audio URL from
    enclosure.url then media.source.url, thumbnail from the episode image then
    fallback_thumbnail.

    Returns:
        The episode, or None when the entry has no episode id
    """
    if not isinstance(raw, dict):
        return None
    episode_id = raw.get("eid")
    if not episode_id:
        logger.warning(f"Skipping episode without eid: {raw.get('title')!r}")
        return None

    published_at = parse_published_at(
        _first_non_empty(raw.get("pubDate"), raw.get("publishedAt"))
    )

    return EpisodeInfo(
        id=str(episode_id),
        title=str(raw.get("title") or ""),
        duration=_parse_duration(raw.get("duration")),
        published_at=published_at or utc_now(),
        audio_url=_first_non_empty(
            nested_get(raw, "enclosure", "url"), nested_get(raw, "media", "source", "url")
        )
        or "",
        thumbnail_url=_first_non_empty(
            nested_get(raw, "image", "picUrl"),
            nested_get(raw, "image", "smallPicUrl"),
            fallback_thumbnail,
        )
        or "",
        shownotes=_first_non_empty(raw.get("shownotes"), raw.get("description")) or "",
    )
