"""
Database package for podbrief.

Structure:
- models.py: SQLAlchemy ORM models (Creator, Episode, Summary) and the
  EpisodeStatus transition table
- database.py: engine configuration and session factory
- repository.py: atomic upserts, status transitions and read helpers

Usage:
    from podbrief.db import get_db_session, Episode, EpisodeStatus
"""

from .models import (
    Base,
    Creator,
    Episode,
    EpisodeStatus,
    EPISODE_STATUS_TRANSITIONS,
    Platform,
    Summary,
    TERMINAL_STATUSES,
    TimestampMixin,
)
from .database import (
    check_database_connection,
    configure_database,
    get_database_info,
    get_db_session,
    get_engine,
    init_database,
    validate_database_url,
)
from .repository import (
    EpisodeContext,
    count_episodes_by_status,
    creator_exists,
    get_episode_context,
    get_episode_status,
    get_summary,
    list_creator_episode_statuses,
    list_failed_episode_ids,
    register_creator,
    reset_episode_status,
    transition_episode_status,
    update_creator_metadata,
    upsert_episode,
    upsert_summary,
)

__all__ = [
    # Models
    "Base",
    "Creator",
    "Episode",
    "EpisodeStatus",
    "EPISODE_STATUS_TRANSITIONS",
    "Platform",
    "Summary",
    "TERMINAL_STATUSES",
    "TimestampMixin",
    # Database utilities
    "check_database_connection",
    "configure_database",
    "get_database_info",
    "get_db_session",
    "get_engine",
    "init_database",
    "validate_database_url",
    # Repository
    "EpisodeContext",
    "count_episodes_by_status",
    "creator_exists",
    "get_episode_context",
    "get_episode_status",
    "get_summary",
    "list_creator_episode_statuses",
    "list_failed_episode_ids",
    "register_creator",
    "reset_episode_status",
    "transition_episode_status",
    "update_creator_metadata",
    "upsert_episode",
    "upsert_summary",
]
