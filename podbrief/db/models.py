"""
SQLAlchemy ORM models for podbrief.

Models:
    Creator: A subscribable podcast on a platform
    Episode: One episode of a creator, tracked through the processing state machine
    Summary: AI-generated digest of an episode (1:1 with Episode)
    TimestampMixin: Provides automatic created_at/updated_at timestamps

Enums:
    Platform: Supported content platforms
    EpisodeStatus: Episode processing states, with EPISODE_STATUS_TRANSITIONS
        as the exhaustive table of allowed changes
"""

from enum import Enum as PyEnum

from sqlalchemy import (
    Column,
    Integer,
    Enum,
    ForeignKey,
    JSON,
    String,
    Text,
    DateTime,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func
import uuid_utils as uuid

Base = declarative_base()


def new_id() -> str:
    """Primary keys are UUID7 strings (time ordered)."""
    return str(uuid.uuid7())


def _enum_values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


class TimestampMixin:
    """
    Adds created_at/updated_at columns maintained by the database.
    """

    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime, nullable=False, server_default=func.now(), onupdate=func.now()
    )


class Platform(str, PyEnum):
    """Content platforms a creator can live on."""

    XIAOYUZHOU = "xiaoyuzhou"
    BILIBILI = "bilibili"
    YOUTUBE = "youtube"


class EpisodeStatus(str, PyEnum):
    """
    Processing states of an episode.

        PENDING: Upserted by ingestion, waiting for the processor
        DOWNLOADING: Reserved for audio download, unused by the current flow
        TRANSCRIBING: Looking for transcript text (shownotes surrogate)
        SUMMARIZING: Prompting the language model and storing its output
        COMPLETED: Summary stored (terminal)
        FAILED: Processing aborted, see error_message (terminal)
    """

    PENDING = "pending"
    DOWNLOADING = "downloading"
    TRANSCRIBING = "transcribing"
    SUMMARIZING = "summarizing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES

    def can_transition_to(self, target: "EpisodeStatus") -> bool:
        return target in EPISODE_STATUS_TRANSITIONS[self]


TERMINAL_STATUSES = frozenset({EpisodeStatus.COMPLETED, EpisodeStatus.FAILED})

# Terminal states only reopen through an explicit reprocessing run.
EPISODE_STATUS_TRANSITIONS: dict[EpisodeStatus, frozenset[EpisodeStatus]] = {
    EpisodeStatus.PENDING: frozenset(
        {EpisodeStatus.DOWNLOADING, EpisodeStatus.TRANSCRIBING, EpisodeStatus.FAILED}
    ),
    EpisodeStatus.DOWNLOADING: frozenset(
        {EpisodeStatus.TRANSCRIBING, EpisodeStatus.FAILED}
    ),
    EpisodeStatus.TRANSCRIBING: frozenset(
        {EpisodeStatus.SUMMARIZING, EpisodeStatus.FAILED}
    ),
    EpisodeStatus.SUMMARIZING: frozenset(
        {EpisodeStatus.COMPLETED, EpisodeStatus.FAILED}
    ),
    EpisodeStatus.COMPLETED: frozenset({EpisodeStatus.TRANSCRIBING}),
    EpisodeStatus.FAILED: frozenset({EpisodeStatus.TRANSCRIBING}),
}


class Creator(Base, TimestampMixin):
    """
    A podcast a user can subscribe to.

    Attributes:
        id: Primary key (UUID7)
        platform: Platform the podcast is hosted on
        platform_id: Podcast id on that platform (unique together with platform)
        name: Display name (placeholder until ingestion scrapes the real one)
        avatar_url: Cover image URL
        homepage_url: Public podcast page the user subscribed with
        rss_url: RSS feed, when known
        description: Podcast description scraped from the homepage
    """

    __tablename__ = "creators"
    __table_args__ = (
        UniqueConstraint("platform", "platform_id", name="uq_creator_platform_id"),
    )

    id = Column(String, primary_key=True, default=new_id)
    platform = Column(
        Enum(Platform, name="platform", values_callable=_enum_values),
        nullable=False,
        default=Platform.XIAOYUZHOU,
    )
    platform_id = Column(String, nullable=False)
    name = Column(String, nullable=False)
    avatar_url = Column(String, nullable=True)
    homepage_url = Column(String, nullable=False)
    rss_url = Column(String, nullable=True)
    description = Column(Text, nullable=True)

    episodes = relationship("Episode", back_populates="creator")

    def __repr__(self):
        return (
            f"<Creator(id={self.id}, platform={self.platform.value}, "
            f"platform_id='{self.platform_id}', name='{self.name}')>"
        )


class Episode(Base, TimestampMixin):
    """
    One episode of a creator and its processing status.

    Attributes:
        id: Primary key (UUID7)
        creator_id: Owning creator
        platform: Platform of the episode (same as the creator's)
        platform_episode_id: Episode id on the platform, unique per platform,
            which makes re-ingestion an upsert
        title: Episode title
        original_url: Public episode page
        duration: Length in seconds (nullable)
        published_at: Publication time in UTC (nullable)
        thumbnail_url: Episode cover, falling back to the podcast avatar
        audio_url: Media URL from the page payload
        status: EpisodeStatus, only changed through the transition table
        error_message: Last processing error, set when status is FAILED
    """

    __tablename__ = "episodes"
    __table_args__ = (
        UniqueConstraint(
            "platform", "platform_episode_id", name="uq_episode_platform_id"
        ),
    )

    id = Column(String, primary_key=True, default=new_id)
    creator_id = Column(String, ForeignKey("creators.id"), nullable=False)
    platform = Column(
        Enum(Platform, name="platform", values_callable=_enum_values),
        nullable=False,
        default=Platform.XIAOYUZHOU,
    )
    platform_episode_id = Column(String, nullable=False)
    title = Column(String, nullable=False)
    original_url = Column(String, nullable=False)
    duration = Column(Integer, nullable=True)  # in seconds
    published_at = Column(DateTime, nullable=True)
    thumbnail_url = Column(String, nullable=True)
    audio_url = Column(String, nullable=True)

    # Processing tracking
    status = Column(
        Enum(EpisodeStatus, name="episodestatus", values_callable=_enum_values),
        nullable=False,
        default=EpisodeStatus.PENDING,
        server_default=EpisodeStatus.PENDING.value,
    )
    error_message = Column(Text, nullable=True)

    creator = relationship("Creator", back_populates="episodes")
    summary = relationship("Summary", back_populates="episode", uselist=False)

    def __repr__(self):
        return (
            f"<Episode(id={self.id}, platform_episode_id='{self.platform_episode_id}', "
            f"title='{self.title}', status={self.status.value})>"
        )


class Summary(Base, TimestampMixin):
    """
    AI digest of an episode, overwritten on reprocessing.

    Attributes:
        episode_id: Summarized episode (unique)
        transcript: Transcript text used for the prompt (capped at 10,000 chars)
        summary: Free-text summary
        key_points: Ordered list of strings
        keywords: Ordered list of strings
        timestamps: Ordered list of {"time": int, "topic": str, "summary": str}
    """

    __tablename__ = "summaries"

    id = Column(String, primary_key=True, default=new_id)
    episode_id = Column(String, ForeignKey("episodes.id"), nullable=False, unique=True)
    transcript = Column(Text, nullable=True)
    summary = Column(Text, nullable=True)
    key_points = Column(JSON, nullable=False, default=list)
    keywords = Column(JSON, nullable=False, default=list)
    timestamps = Column(JSON, nullable=False, default=list)

    episode = relationship("Episode", back_populates="summary")

    def __repr__(self):
        return (
            f"<Summary(episode_id={self.episode_id}, key_points={len(self.key_points or [])}, "
            f"timestamps={len(self.timestamps or [])})>"
        )
