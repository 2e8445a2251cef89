"""Episode processing: transcript surrogate, prompt, AI call, summary parsing.

processor.py: the status-tracked pipeline (process_episode)
transcript.py: shownotes retrieval, quality gate, ASR placeholder
prompts.py: prompt template and seeded timestamp anchors
summary_parser.py: JSON extraction from the model reply
"""

from .processor import ProcessingResult, process_episode
from .prompts import build_summary_prompt, seed_timestamp_anchors
from .summary_parser import SummaryData, parse_summary_response, timestamps_are_ordered
from .transcript import Transcript, acquire_transcript, apply_asr_placeholder

__all__ = [
    "ProcessingResult",
    "process_episode",
    "build_summary_prompt",
    "seed_timestamp_anchors",
    "SummaryData",
    "parse_summary_response",
    "timestamps_are_ordered",
    "Transcript",
    "acquire_transcript",
    "apply_asr_placeholder",
]
