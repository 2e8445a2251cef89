"""
Transcript acquisition for episode processing.

There is no speech-to-text: the episode page's shownotes (or description)
stand in for a transcript. Text shorter than MIN_TRANSCRIPT_CHARS is replaced
with a low-confidence filler built from the title and creator name.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from podbrief.ingestion.extractors import extract_episode_notes


logger = logging.getLogger("processor")

MIN_TRANSCRIPT_CHARS = 100
MAX_STORED_TRANSCRIPT_CHARS = 10000
LOW_CONFIDENCE_MARKER = "(低置信度)"
ASR_NOT_PERFORMED_MARKER = "(音频转写未执行)"


@dataclass(frozen=True)
class Transcript:
    text: str
    low_confidence: bool = False
    source: str = "shownotes"  # shownotes | filler | asr_placeholder


def is_adequate_transcript(text: Optional[str]) -> bool:
    return bool(text) and len(text.strip()) >= MIN_TRANSCRIPT_CHARS


def build_filler_transcript(title: str, creator_name: Optional[str]) -> str:
    return (
        f"{LOW_CONFIDENCE_MARKER} 播客标题: {title}\n\n"
        f"这是一期来自 {creator_name or '未知播主'} 的播客内容。"
        "由于暂时无法获取完整的语音转录，系统将基于已有信息生成摘要。"
    )


def fetch_episode_text(
    original_url: str, fetcher: Callable[..., str], timeout: int = 30
) -> str:
    """Shownotes of the episode page as plain text, "" on any failure."""
    if not original_url:
        return ""
    try:
        html = fetcher(original_url, timeout=timeout)
        return extract_episode_notes(html)
    except Exception as e:
        logger.error(f"Failed to fetch episode transcript from {original_url}: {e}")
        return ""


def acquire_transcript(
    title: str,
    creator_name: Optional[str],
    original_url: str,
    fetcher: Callable[..., str],
    timeout: int = 30,
) -> Transcript:
    """
    Get the best available transcript surrogate for an episode.

    Returns:
        The shownotes when long enough, otherwise a low-confidence filler
    """
    text = fetch_episode_text(original_url, fetcher, timeout=timeout)
    if is_adequate_transcript(text):
        return Transcript(text=text.strip())

    logger.info(
        f"Transcript too short ({len(text)} chars) for '{title}', using filler text"
    )
    return Transcript(
        text=build_filler_transcript(title, creator_name),
        low_confidence=True,
        source="filler",
    )


def apply_asr_placeholder(
    transcript: Transcript, title: str, audio_url: Optional[str]
) -> Transcript:
    """
    Speech-to-text extension point.

    When the transcript is inadequate and audio is available this is where
    audio would be transcribed. No ASR provider is wired in: the transcript
    is only prefixed with ASR_NOT_PERFORMED_MARKER.
    """
    if not transcript.low_confidence or not audio_url:
        return transcript

    logger.info(f"No transcript found, ASR not performed for audio: {audio_url}")
    return Transcript(
        text=f"{ASR_NOT_PERFORMED_MARKER} 标题: {title}。 描述: {transcript.text or '无'}",
        low_confidence=True,
        source="asr_placeholder",
    )
