"""
Extraction strategies for podcast and episode pages.

Pages are read by a chain of extractors tried in order:

    StructuredJsonExtractor: the Next.js payload embedded in
        <script id="__NEXT_DATA__" type="application/json">
    MetaTagExtractor: Open Graph <meta property="og:*"> tags, always available

The first extractor that yields podcast metadata wins, and independently the
first that yields an episode list wins, so a payload without a podcast object
still contributes its episodes.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

from bs4 import BeautifulSoup

from .models import PodcastInfo, PodcastPage, normalize_episode, nested_get


logger = logging.getLogger("ingestion")

MAX_EPISODES_PER_INGEST = 3


def default_podcast_name(podcast_id: str) -> str:
    return f"播客 {podcast_id}"


def html_to_text(value: str) -> str:
    """Strip markup from shownotes, keeping line breaks between blocks."""
    if not value:
        return ""
    return BeautifulSoup(value, "html.parser").get_text("\n", strip=True)


class PageExtractor(ABC):
    """Common interface of the page extraction strategies."""

    name = "base"

    @abstractmethod
    def load(self, soup: BeautifulSoup) -> Optional[Any]:
        """
        Return the data this strategy reads from the page.

        Returns:
            Strategy-specific data, or None when the page does not carry it
        """

    @abstractmethod
    def extract_metadata(self, data: Any, podcast_id: str) -> Optional[PodcastInfo]:
        """Podcast id, name, description and avatar, or None if absent."""

    @abstractmethod
    def extract_episode_list(self, data: Any) -> Optional[list[dict[str, Any]]]:
        """Raw episode entries in page order, or None if absent."""

    @abstractmethod
    def extract_episode_notes(self, data: Any) -> Optional[str]:
        """Shownotes or description of an episode page, or None if absent."""


class StructuredJsonExtractor(PageExtractor):
    """Reads props.pageProps of the embedded __NEXT_DATA__ JSON."""

    name = "structured_json"
    script_id = "__NEXT_DATA__"

    def load(self, soup: BeautifulSoup) -> Optional[dict[str, Any]]:
        script = soup.find("script", id=self.script_id)
        if script is None:
            return None
        try:
            payload = json.loads(script.string or script.get_text())
        except ValueError as e:
            logger.error(f"Failed to parse {self.script_id}: {e}")
            return None
        page_props = nested_get(payload, "props", "pageProps")
        return page_props if isinstance(page_props, dict) else None

    def extract_metadata(
        self, data: dict[str, Any], podcast_id: str
    ) -> Optional[PodcastInfo]:
        podcast = data.get("podcast")
        if not isinstance(podcast, dict):
            return None
        return PodcastInfo(
            id=str(podcast.get("pid") or podcast_id),
            name=podcast.get("title")
            or podcast.get("name")
            or default_podcast_name(podcast_id),
            description=podcast.get("description") or "",
            avatar=nested_get(podcast, "image", "picUrl")
            or nested_get(podcast, "image", "smallPicUrl")
            or "",
        )

    def extract_episode_list(
        self, data: dict[str, Any]
    ) -> Optional[list[dict[str, Any]]]:
        # Episodes sit either directly under pageProps or under the podcast object
        for episodes in (data.get("episodes"), nested_get(data, "podcast", "episodes")):
            if isinstance(episodes, list):
                return episodes
        return []

    def extract_episode_notes(self, data: dict[str, Any]) -> Optional[str]:
        return nested_get(data, "episode", "shownotes") or nested_get(
            data, "episode", "description"
        )


class MetaTagExtractor(PageExtractor):
    """Falls back to Open Graph tags. Never fails."""

    name = "meta_tags"

    def load(self, soup: BeautifulSoup) -> BeautifulSoup:
        return soup

    @staticmethod
    def _og(soup: BeautifulSoup, prop: str) -> Optional[str]:
        tag = soup.find("meta", attrs={"property": f"og:{prop}"})
        if tag is None:
            return None
        return tag.get("content") or None

    def extract_metadata(self, data: BeautifulSoup, podcast_id: str) -> PodcastInfo:
        return PodcastInfo(
            id=podcast_id,
            name=self._og(data, "title") or default_podcast_name(podcast_id),
            description=self._og(data, "description") or "",
            avatar=self._og(data, "image") or "",
        )

    def extract_episode_list(self, data: BeautifulSoup) -> list[dict[str, Any]]:
        return []

    def extract_episode_notes(self, data: BeautifulSoup) -> Optional[str]:
        return self._og(data, "description")


DEFAULT_EXTRACTORS: tuple[PageExtractor, ...] = (
    StructuredJsonExtractor(),
    MetaTagExtractor(),
)


def extract_podcast_page(
    html: str,
    podcast_id: str,
    extractors: Sequence[PageExtractor] = DEFAULT_EXTRACTORS,
    max_episodes: int = MAX_EPISODES_PER_INGEST,
) -> PodcastPage:
    """
    Extract podcast metadata and the most recent episodes from a podcast homepage.

    Episodes keep source order (most recent first) and are capped to
    max_episodes before normalization.

    Args:
        html: Podcast homepage HTML
        podcast_id: Platform podcast id, used for defaults
        extractors: Strategies to try, in order
        max_episodes: Maximum number of episodes to return

    Returns:
        PodcastPage, always with metadata (possibly only a synthesized name)
    """
    soup = BeautifulSoup(html, "html.parser")
    podcast: Optional[PodcastInfo] = None
    raw_episodes: Optional[list[dict[str, Any]]] = None

    for extractor in extractors:
        data = extractor.load(soup)
        if data is None:
            logger.info(f"{extractor.name}: no data on page for podcast {podcast_id}")
            continue
        if podcast is None:
            podcast = extractor.extract_metadata(data, podcast_id)
        if raw_episodes is None:
            raw_episodes = extractor.extract_episode_list(data)
        if podcast is not None and raw_episodes is not None:
            break

    if podcast is None:
        podcast = PodcastInfo(id=podcast_id, name=default_podcast_name(podcast_id))

    episodes = []
    for raw in (raw_episodes or [])[:max_episodes]:
        episode = normalize_episode(raw, fallback_thumbnail=podcast.avatar)
        if episode is not None:
            episodes.append(episode)

    logger.info(f"Found podcast: {podcast.name}, Episodes: {len(episodes)}")
    return PodcastPage(podcast=podcast, episodes=episodes)


def extract_episode_notes(
    html: str, extractors: Sequence[PageExtractor] = DEFAULT_EXTRACTORS
) -> str:
    """
    Extract shownotes (or the description) from an episode page as plain text.

    Returns:
        The first non-empty notes found by the extractor chain, or ""
    """
    soup = BeautifulSoup(html, "html.parser")
    for extractor in extractors:
        data = extractor.load(soup)
        if data is None:
            continue
        notes = extractor.extract_episode_notes(data)
        if notes:
            return html_to_text(notes)
    return ""
