"""
Podcast ingestion: subscribe to a creator, scrape its homepage, upsert the
latest episodes and run the episode processor on each of them.

Processing is synchronous and sequential: one episode's pipeline completes
(or fails) before the next one starts. Only the initial validation errors and
a failed homepage fetch reach the caller; everything per episode is logged.
"""

import time
from typing import Any, Callable, Optional

from podbrief.config import Settings, load_settings
from podbrief.db import (
    Platform,
    TERMINAL_STATUSES,
    creator_exists,
    list_creator_episode_statuses,
    register_creator,
    update_creator_metadata,
    upsert_episode,
)
from podbrief.errors import InvalidRequest, NotFound
from podbrief.logger import setup_logging, log_function
from podbrief.processing.processor import ProcessingResult, process_episode
from .extractors import MAX_EPISODES_PER_INGEST, extract_podcast_page
from .fetch import fetch_page
from .urls import episode_page_url, parse_podcast_url, podcast_page_url


logger = setup_logging(logger_name="ingestion", log_file="ingestion.log")

Fetcher = Callable[..., str]
Processor = Callable[[str], ProcessingResult]


@log_function(logger_name="ingestion", log_args=True)
def register_creator_from_url(homepage_url: str) -> tuple[str, str]:
    """
    Get or create the creator behind a podcast homepage URL.

    Args:
        homepage_url: e.g. https://www.xiaoyuzhoufm.com/podcast/5e280fab418a84a0461fc579

    Returns:
        (creator id, podcast id)

    Raises:
        InvalidRequest: If the URL is not a supported podcast homepage
    """
    if not homepage_url or "xiaoyuzhoufm.com" not in homepage_url:
        raise InvalidRequest("Only xiaoyuzhoufm.com podcast links are supported")
    podcast_id = parse_podcast_url(homepage_url)
    if not podcast_id:
        raise InvalidRequest(f"Not a podcast homepage link: {homepage_url}")

    creator_id, created = register_creator(
        platform=Platform.XIAOYUZHOU,
        platform_id=podcast_id,
        homepage_url=homepage_url.strip(),
        name=f"播客 {podcast_id[:6]}...",
    )
    if created:
        logger.info(f"Registered creator {creator_id} for podcast {podcast_id}")
    return creator_id, podcast_id


@log_function(logger_name="ingestion", log_args=True, log_execution_time=True)
def ingest_podcast(
    podcast_id: Optional[str],
    creator_id: Optional[str],
    settings: Optional[Settings] = None,
    fetcher: Fetcher = fetch_page,
    processor: Optional[Processor] = None,
) -> dict[str, Any]:
    """
    Scrape a podcast homepage, upsert its latest episodes and process them.

    Args:
        podcast_id: Platform podcast id
        creator_id: Creator record to attach the episodes to
        settings: Runtime settings (loaded from the environment when None)
        fetcher: Page download function (url, timeout=...) -> html
        processor: Episode processor (episode_id) -> ProcessingResult

    Returns:
        {"success": True, "podcast": {...}, "episodesCount": n, "processedCount": m}

    Raises:
        InvalidRequest: If an identifier is missing
        NotFound: If the creator does not exist
        UpstreamFetchError: If the homepage cannot be fetched
    """
    if not podcast_id or not creator_id:
        raise InvalidRequest("Missing podcastId or creatorId")
    if not creator_exists(creator_id):
        raise NotFound(f"Creator not found: {creator_id}")

    settings = settings or load_settings()
    if processor is None:

        def processor(episode_id: str) -> ProcessingResult:
            return process_episode(episode_id, settings=settings, fetcher=fetcher)

    logger.info(f"Fetching podcast info for: {podcast_id}")
    html = fetcher(podcast_page_url(podcast_id), timeout=settings.request_timeout)
    page = extract_podcast_page(html, podcast_id)

    try:
        update_creator_metadata(
            creator_id,
            name=page.podcast.name,
            description=page.podcast.description,
            avatar_url=page.podcast.avatar,
        )
    except Exception as e:
        logger.error(f"Failed to update creator {creator_id}: {e}")

    episode_ids = []
    for episode in page.episodes:
        try:
            episode_ids.append(
                upsert_episode(
                    creator_id=creator_id,
                    platform_episode_id=episode.id,
                    title=episode.title,
                    original_url=episode_page_url(episode.id),
                    duration=episode.duration,
                    published_at=episode.published_at,
                    thumbnail_url=episode.thumbnail_url,
                    audio_url=episode.audio_url,
                )
            )
        except Exception as e:
            logger.error(f"Failed to upsert episode {episode.id}: {e}")
    logger.info(f"Upserted {len(episode_ids)} episodes")

    episodes_to_process = episode_ids[:MAX_EPISODES_PER_INGEST]
    for episode_id in episodes_to_process:
        logger.info(f"Processing episode: {episode_id}")
        try:
            result = processor(episode_id)
        except Exception as e:
            logger.error(f"Error processing episode {episode_id}: {e}", exc_info=True)
            continue
        if result.ok:
            logger.info(f"Episode {episode_id} processed successfully")
        else:
            logger.error(f"Failed to process episode {episode_id}: {result.body}")

    return {
        "success": True,
        "podcast": page.podcast.to_dict(),
        "episodesCount": len(page.episodes),
        "processedCount": len(episodes_to_process),
    }


def wait_for_terminal_episode(
    creator_id: str,
    timeout: float = 30,
    interval: float = 1,
    sleep: Callable[[float], None] = time.sleep,
) -> tuple[bool, dict[str, int]]:
    """
    Poll a creator's episodes until one is completed or failed.

    Advisory only: processing carries on whether or not anyone is polling.

    Returns:
        (True if a terminal episode was seen before the timeout,
         episode count per status at the last poll)
    """
    attempts = max(int(timeout / interval), 1) if interval > 0 else 1
    counts: dict[str, int] = {}
    for attempt in range(attempts):
        statuses = list_creator_episode_statuses(creator_id)
        counts = {}
        for status in statuses:
            counts[status.value] = counts.get(status.value, 0) + 1
        if any(status in TERMINAL_STATUSES for status in statuses):
            return True, counts
        if attempt < attempts - 1:
            sleep(interval)
    return False, counts
