"""Prompt construction for episode summarization."""

import json
import math
from typing import Optional


DEFAULT_DURATION_SECONDS = 3600
MAX_PROMPT_TRANSCRIPT_CHARS = 3000

# Fractions of the episode duration used as example timestamps in the prompt
TIMESTAMP_ANCHOR_FRACTIONS = (0.0, 0.1, 0.3, 0.5, 0.7, 0.9)

_ANCHOR_TOPICS = (
    ("开场介绍", "节目开始，主持人介绍本期主题"),
    ("第一个话题", "简要描述"),
    ("第二个话题", "简要描述"),
    ("第三个话题", "简要描述"),
    ("第四个话题", "简要描述"),
    ("总结与结语", "简要描述"),
)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def seed_timestamp_anchors(duration: int) -> list[int]:
    """
    Example timestamps at 0%, 10%, 30%, 50%, 70% and 90% of the duration.

    >>> seed_timestamp_anchors(3600)
    [0, 360, 1080, 1800, 2520, 3240]
    """
    duration = max(int(duration), 0)
    return [_round_half_up(duration * fraction) for fraction in TIMESTAMP_ANCHOR_FRACTIONS]


def build_summary_prompt(
    title: str,
    creator_name: Optional[str],
    duration: Optional[int],
    transcript: str,
) -> str:
    """
    Build the summarization prompt for one episode.

    The model is asked for a JSON object with summary, key_points, keywords
    and timestamps; the timestamps are pre-seeded with proportional anchors
    as a formatting example.

    Args:
        title: Episode title
        creator_name: Podcast name ("未知" when unknown)
        duration: Episode length in seconds (3600 when unknown)
        transcript: Transcript text, truncated to 3000 characters

    Returns:
        The prompt text
    """
    duration = duration or DEFAULT_DURATION_SECONDS
    duration_min = _round_half_up(duration / 60)

    timestamps_example = ",\n".join(
        "    "
        + json.dumps(
            {"time": time, "topic": topic, "summary": summary}, ensure_ascii=False
        )
        for time, (topic, summary) in zip(seed_timestamp_anchors(duration), _ANCHOR_TOPICS)
    )

    return f"""你是一个专业的播客内容分析助手。请根据以下播客信息生成结构化的内容摘要。

播客信息:
- 标题: {title}
- 播主: {creator_name or "未知"}
- 时长: {duration_min}分钟
- 内容/简介:
{transcript[:MAX_PROMPT_TRANSCRIPT_CHARS]}

请生成以下内容，使用JSON格式返回:
{{
  "summary": "200-300字的内容摘要，概括播客的主要内容和核心观点",
  "key_points": ["关键要点1", "关键要点2", "关键要点3", "关键要点4", "关键要点5"],
  "keywords": ["关键词1", "关键词2", "关键词3", "关键词4", "关键词5"],
  "timestamps": [
{timestamps_example}
  ]
}}

注意:
1. 根据播客实际内容生成合理的时间戳和话题
2. 如果内容信息有限，可以基于标题和简介进行合理推断
3. 确保返回的是有效的JSON格式"""
