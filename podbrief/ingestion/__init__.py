"""Podcast page scraping and episode ingestion.

fetch.py: page download with browser headers
extractors.py: structured JSON / meta tag extraction strategies
models.py: scraped records and normalization
urls.py: platform URL helpers
podcast_ingest.py: the ingestion handler (import it directly, it depends on
    podbrief.processing)
"""

from .extractors import (
    DEFAULT_EXTRACTORS,
    MAX_EPISODES_PER_INGEST,
    MetaTagExtractor,
    PageExtractor,
    StructuredJsonExtractor,
    extract_episode_notes,
    extract_podcast_page,
)
from .fetch import fetch_page
from .models import EpisodeInfo, PodcastInfo, PodcastPage, normalize_episode
from .urls import episode_page_url, parse_podcast_url, podcast_page_url

__all__ = [
    "DEFAULT_EXTRACTORS",
    "MAX_EPISODES_PER_INGEST",
    "MetaTagExtractor",
    "PageExtractor",
    "StructuredJsonExtractor",
    "extract_episode_notes",
    "extract_podcast_page",
    "fetch_page",
    "EpisodeInfo",
    "PodcastInfo",
    "PodcastPage",
    "normalize_episode",
    "episode_page_url",
    "parse_podcast_url",
    "podcast_page_url",
]
