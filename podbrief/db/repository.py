"""
Record-level operations used by the ingestion and processing handlers.

Every function opens its own session and commits once, so each upsert and
each status change is an atomic write. Functions return plain values or
dataclass snapshots rather than ORM instances, so callers never touch
detached objects.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from podbrief.errors import InvalidStatusTransition, NotFound
from podbrief.logger import log_function
from .database import db_logger, get_db_session
from .models import Creator, Episode, EpisodeStatus, Platform, Summary


@dataclass(frozen=True)
class EpisodeContext:
    """What the processor needs to know about an episode."""

    id: str
    title: str
    original_url: str
    duration: Optional[int]
    audio_url: Optional[str]
    status: EpisodeStatus
    creator_id: str
    creator_name: Optional[str]


# ============ CREATORS ============
@log_function(logger_name="database", log_args=True)
def register_creator(
    platform: Platform, platform_id: str, homepage_url: str, name: str
) -> tuple[str, bool]:
    """
    Get or create the creator identified by (platform, platform_id).

    Returns:
        (creator id, True if the record was created by this call)
    """
    with get_db_session() as session:
        existing = (
            session.query(Creator)
            .filter_by(platform=platform, platform_id=platform_id)
            .first()
        )
        if existing:
            return existing.id, False

        creator = Creator(
            platform=platform,
            platform_id=platform_id,
            homepage_url=homepage_url,
            name=name,
        )
        session.add(creator)
        session.commit()
        db_logger.info(f"Created creator {creator.id} for {platform.value}:{platform_id}")
        return creator.id, True


def creator_exists(creator_id: str) -> bool:
    with get_db_session() as session:
        return session.get(Creator, creator_id) is not None


@log_function(logger_name="database", log_args=True)
def update_creator_metadata(
    creator_id: str,
    name: Optional[str] = None,
    description: Optional[str] = None,
    avatar_url: Optional[str] = None,
) -> None:
    """
    Update scraped creator fields. Only provided (non-None) fields are written.

    Raises:
        NotFound: If the creator does not exist
    """
    update_data: dict[str, Any] = {}
    if name is not None:
        update_data["name"] = name
    if description is not None:
        update_data["description"] = description
    if avatar_url is not None:
        update_data["avatar_url"] = avatar_url

    with get_db_session() as session:
        query = session.query(Creator).filter(Creator.id == creator_id)
        if query.count() == 0:
            raise NotFound(f"Creator not found: {creator_id}")
        if update_data:
            query.update(update_data, synchronize_session=False)
            session.commit()


# ============ EPISODES ============
@log_function(logger_name="database")
def upsert_episode(
    creator_id: str,
    platform_episode_id: str,
    title: str,
    original_url: str,
    duration: Optional[int] = None,
    published_at: Optional[datetime] = None,
    thumbnail_url: Optional[str] = None,
    audio_url: Optional[str] = None,
    platform: Platform = Platform.XIAOYUZHOU,
) -> str:
    """
    Insert or update the episode keyed by (platform, platform_episode_id).

    Either way the episode is (re)queued: status PENDING, error_message cleared.

    Returns:
        The episode id
    """
    fields = {
        "creator_id": creator_id,
        "title": title,
        "original_url": original_url,
        "duration": duration,
        "published_at": published_at,
        "thumbnail_url": thumbnail_url,
        "audio_url": audio_url,
        "status": EpisodeStatus.PENDING,
        "error_message": None,
    }
    with get_db_session() as session:
        episode = (
            session.query(Episode)
            .filter_by(platform=platform, platform_episode_id=platform_episode_id)
            .first()
        )
        if episode is None:
            episode = Episode(
                platform=platform, platform_episode_id=platform_episode_id, **fields
            )
            session.add(episode)
            action = "Inserted"
        else:
            for key, value in fields.items():
                setattr(episode, key, value)
            action = "Updated"
        session.commit()
        db_logger.info(f"{action} episode {episode.id} ({platform_episode_id})")
        return episode.id


def get_episode_context(episode_id: str) -> Optional[EpisodeContext]:
    """Load an episode with its creator name, or None if it does not exist."""
    with get_db_session() as session:
        episode = session.get(Episode, episode_id)
        if episode is None:
            return None
        return EpisodeContext(
            id=episode.id,
            title=episode.title,
            original_url=episode.original_url,
            duration=episode.duration,
            audio_url=episode.audio_url,
            status=episode.status,
            creator_id=episode.creator_id,
            creator_name=episode.creator.name if episode.creator else None,
        )


def get_episode_status(episode_id: str) -> Optional[EpisodeStatus]:
    with get_db_session() as session:
        episode = session.get(Episode, episode_id)
        return episode.status if episode else None


@log_function(logger_name="database", log_args=True)
def transition_episode_status(
    episode_id: str,
    target: EpisodeStatus,
    error_message: Optional[str] = None,
) -> EpisodeStatus:
    """
    Move an episode to target following EPISODE_STATUS_TRANSITIONS.

    error_message is stored when entering FAILED and cleared otherwise.

    Returns:
        The previous status

    Raises:
        NotFound: If the episode does not exist
        InvalidStatusTransition: If the table does not allow the change
    """
    with get_db_session() as session:
        episode = session.get(Episode, episode_id)
        if episode is None:
            raise NotFound(f"Episode not found: {episode_id}")

        current = episode.status
        if not current.can_transition_to(target):
            raise InvalidStatusTransition(current, target)

        episode.status = target
        episode.error_message = (
            error_message if target == EpisodeStatus.FAILED else None
        )
        session.commit()
        return current


@log_function(logger_name="database", log_args=True)
def reset_episode_status(episode_id: str) -> None:
    """Put an episode stranded mid-run back to PENDING (a new run, not a transition)."""
    with get_db_session() as session:
        updated = (
            session.query(Episode)
            .filter(Episode.id == episode_id)
            .update(
                {"status": EpisodeStatus.PENDING, "error_message": None},
                synchronize_session=False,
            )
        )
        if not updated:
            raise NotFound(f"Episode not found: {episode_id}")
        session.commit()


def list_creator_episode_statuses(creator_id: str) -> list[EpisodeStatus]:
    with get_db_session() as session:
        rows = (
            session.query(Episode.status)
            .filter(Episode.creator_id == creator_id)
            .order_by(Episode.published_at.desc())
            .all()
        )
        return [row[0] for row in rows]


def count_episodes_by_status() -> dict[str, int]:
    """Episode counts per status value (every status present, zero included)."""
    with get_db_session() as session:
        return {
            status.value: session.query(Episode).filter_by(status=status).count()
            for status in EpisodeStatus
        }


def list_failed_episode_ids(limit: Optional[int] = None) -> list[str]:
    """Failed episodes, most recently published first."""
    with get_db_session() as session:
        query = (
            session.query(Episode.id)
            .filter(Episode.status == EpisodeStatus.FAILED)
            .order_by(Episode.published_at.desc())
        )
        if limit is not None:
            query = query.limit(limit)
        return [row[0] for row in query.all()]


# ============ SUMMARIES ============
@log_function(logger_name="database")
def upsert_summary(
    episode_id: str,
    transcript: str,
    summary: str,
    key_points: list[str],
    keywords: list[str],
    timestamps: list[dict[str, Any]],
) -> str:
    """
    Insert or overwrite the summary of an episode.

    Returns:
        The summary id
    """
    with get_db_session() as session:
        record = session.query(Summary).filter_by(episode_id=episode_id).first()
        if record is None:
            record = Summary(episode_id=episode_id)
            session.add(record)
        record.transcript = transcript
        record.summary = summary
        record.key_points = list(key_points)
        record.keywords = list(keywords)
        record.timestamps = [dict(ts) for ts in timestamps]
        session.commit()
        return record.id


def get_summary(episode_id: str) -> Optional[dict[str, Any]]:
    """Summary of an episode with its title and duration, or None."""
    with get_db_session() as session:
        record = session.query(Summary).filter_by(episode_id=episode_id).first()
        if record is None:
            return None
        return {
            "episode_id": record.episode_id,
            "title": record.episode.title,
            "duration": record.episode.duration,
            "transcript": record.transcript,
            "summary": record.summary,
            "key_points": list(record.key_points or []),
            "keywords": list(record.keywords or []),
            "timestamps": list(record.timestamps or []),
        }
