"""
Episode processor: transcript surrogate → AI summary → stored Summary.

Each status change is written before the corresponding work starts, so a
crash leaves the episode visibly at the step it was in:

    pending → transcribing → summarizing → completed
                    └──────────┴──────────→ failed

process_episode() never raises: errors are logged, the episode is marked
failed (with its error message) when it exists, and a ProcessingResult with
an error payload is returned.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional

from openai import OpenAI

from podbrief.config import Settings, load_settings
from podbrief.db import (
    EpisodeContext,
    EpisodeStatus,
    get_episode_context,
    reset_episode_status,
    transition_episode_status,
    upsert_summary,
)
from podbrief.errors import ConfigurationError, InvalidRequest, NotFound, PodbriefError
from podbrief.ingestion.fetch import fetch_page
from podbrief.llm import init_llm_openai, request_chat_completion
from podbrief.logger import setup_logging, log_function
from .prompts import build_summary_prompt
from .summary_parser import parse_summary_response
from .transcript import (
    MAX_STORED_TRANSCRIPT_CHARS,
    acquire_transcript,
    apply_asr_placeholder,
)


logger = setup_logging(logger_name="processor", log_file="processor.log")

STRANDED_STATUSES = frozenset({EpisodeStatus.TRANSCRIBING, EpisodeStatus.SUMMARIZING})


@dataclass
class ProcessingResult:
    """Outcome of one processor run, shaped like the HTTP response."""

    status_code: int
    body: dict[str, Any]

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


def _begin_run(episode: EpisodeContext) -> None:
    """Move the episode to TRANSCRIBING, recovering runs left mid-way by a crash."""
    if episode.status in STRANDED_STATUSES:
        logger.warning(
            f"Episode {episode.id} was left in '{episode.status.value}', restarting run"
        )
        reset_episode_status(episode.id)
    transition_episode_status(episode.id, EpisodeStatus.TRANSCRIBING)


def _mark_failed(episode_id: str, message: str) -> None:
    try:
        transition_episode_status(episode_id, EpisodeStatus.FAILED, error_message=message)
    except Exception as e:
        logger.error(f"Could not mark episode {episode_id} as failed: {e}")


@log_function(logger_name="processor", log_args=True, log_execution_time=True)
def process_episode(
    episode_id: Optional[str],
    settings: Optional[Settings] = None,
    fetcher: Callable[..., str] = fetch_page,
    client: Optional[OpenAI] = None,
) -> ProcessingResult:
    """
    Run the summarization pipeline for one episode.

    Args:
        episode_id: Episode record id
        settings: Runtime settings (loaded from the environment when None)
        fetcher: Page download function (url, timeout=...) -> html
        client: OpenAI client to use instead of one built from settings

    Returns:
        200 {"success": True, "episodeId": ...} on success, otherwise the
        error's status with {"error": ..., "debug": {baseUrl, model, keyConfigured}}
    """
    episode: Optional[EpisodeContext] = None

    try:
        settings = settings or load_settings()
        if not episode_id:
            raise InvalidRequest("Missing episodeId")

        episode = get_episode_context(episode_id)
        if episode is None:
            raise NotFound(f"Episode not found: {episode_id}")

        logger.info(f"Processing episode: {episode_id} ({episode.title})")
        _begin_run(episode)

        # Credential check happens before any network call
        if not settings.key_configured:
            raise ConfigurationError("AI API token not configured")
        llm = client if client is not None else init_llm_openai(settings)

        transcript = acquire_transcript(
            title=episode.title,
            creator_name=episode.creator_name,
            original_url=episode.original_url,
            fetcher=fetcher,
            timeout=settings.request_timeout,
        )

        transition_episode_status(episode_id, EpisodeStatus.SUMMARIZING)
        transcript = apply_asr_placeholder(transcript, episode.title, episode.audio_url)

        prompt = build_summary_prompt(
            title=episode.title,
            creator_name=episode.creator_name,
            duration=episode.duration,
            transcript=transcript.text,
        )

        logger.info(
            f"Calling AI API for summary (provider: {settings.ai_base_url}, model: {settings.ai_model})"
        )
        reply = request_chat_completion(
            llm, settings.ai_model, prompt, max_tokens=settings.ai_max_tokens
        )
        summary = parse_summary_response(reply)

        upsert_summary(
            episode_id,
            transcript=transcript.text[:MAX_STORED_TRANSCRIPT_CHARS],
            summary=summary.summary,
            key_points=summary.key_points,
            keywords=summary.keywords,
            timestamps=summary.timestamps,
        )

        transition_episode_status(episode_id, EpisodeStatus.COMPLETED)
        logger.info(f"Episode {episode_id} processed successfully")
        return ProcessingResult(200, {"success": True, "episodeId": episode_id})

    except Exception as e:
        logger.error(f"Error processing episode {episode_id}: {e}", exc_info=True)
        if episode is not None:
            _mark_failed(episode.id, str(e))
        status_code = e.status_code if isinstance(e, PodbriefError) else 500
        return ProcessingResult(
            status_code, {"error": str(e), "debug": (settings or Settings()).debug_info()}
        )
