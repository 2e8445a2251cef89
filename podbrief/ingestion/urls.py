"""URL helpers for the xiaoyuzhoufm.com podcast site."""

import re
from typing import Optional

XIAOYUZHOU_BASE_URL = "https://www.xiaoyuzhoufm.com"

# e.g. https://www.xiaoyuzhoufm.com/podcast/5e280fab418a84a0461fc579
_PODCAST_URL_RE = re.compile(r"xiaoyuzhoufm\.com/podcast/([a-zA-Z0-9]+)")


def parse_podcast_url(url: str) -> Optional[str]:
    """Return the podcast id of a podcast homepage URL, or None."""
    if not url:
        return None
    match = _PODCAST_URL_RE.search(url.strip())
    return match.group(1) if match else None


def podcast_page_url(podcast_id: str) -> str:
    return f"{XIAOYUZHOU_BASE_URL}/podcast/{podcast_id}"


def episode_page_url(episode_id: str) -> str:
    return f"{XIAOYUZHOU_BASE_URL}/episode/{episode_id}"
