#!/usr/bin/env python3
"""
CLI for subscribing to podcasts and ingesting their latest episodes.

Usage:
    python -m podbrief.ingestion subscribe https://www.xiaoyuzhoufm.com/podcast/5e280fab418a84a0461fc579
    python -m podbrief.ingestion subscribe URL --no-process     # Register only
    python -m podbrief.ingestion ingest PODCAST_ID CREATOR_ID
    python -m podbrief.ingestion wait CREATOR_ID --timeout 30

subscribe registers the creator (idempotent), scrapes its homepage, upserts
the 3 most recent episodes and summarizes them one by one.
"""

import argparse
import json
import sys

from podbrief.logger import setup_logging
from .podcast_ingest import (
    ingest_podcast,
    register_creator_from_url,
    wait_for_terminal_episode,
)


def parse_arguments() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Subscribe to xiaoyuzhoufm.com podcasts and ingest their episodes"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subscribe_parser = subparsers.add_parser(
        "subscribe", help="Register a podcast by homepage URL and ingest it"
    )
    subscribe_parser.add_argument("url", help="Podcast homepage URL")
    subscribe_parser.add_argument(
        "--no-process",
        action="store_true",
        help="Only register the creator, do not fetch episodes",
    )

    ingest_parser = subparsers.add_parser(
        "ingest", help="Ingest a podcast for an existing creator record"
    )
    ingest_parser.add_argument("podcast_id")
    ingest_parser.add_argument("creator_id")

    wait_parser = subparsers.add_parser(
        "wait", help="Wait until one of the creator's episodes is completed or failed"
    )
    wait_parser.add_argument("creator_id")
    wait_parser.add_argument("--timeout", type=float, default=30)
    wait_parser.add_argument("--interval", type=float, default=1)

    return parser.parse_args()


def main():
    args = parse_arguments()
    setup_logging(logger_name="ingestion", log_file="ingestion.log", verbose=args.verbose)

    try:
        if args.command == "subscribe":
            creator_id, podcast_id = register_creator_from_url(args.url)
            print(f"✓ Creator {creator_id} (podcast {podcast_id})")
            if args.no_process:
                return
            result = ingest_podcast(podcast_id, creator_id)
            print(json.dumps(result, ensure_ascii=False, indent=2))

        elif args.command == "ingest":
            result = ingest_podcast(args.podcast_id, args.creator_id)
            print(json.dumps(result, ensure_ascii=False, indent=2))

        else:
            done, counts = wait_for_terminal_episode(
                args.creator_id, timeout=args.timeout, interval=args.interval
            )
            summary = ", ".join(f"{k}: {v}" for k, v in counts.items()) or "no episodes"
            if done:
                print(f"✓ Episode processing finished ({summary})")
            else:
                print(f"… Still processing after {args.timeout:.0f}s ({summary})")

    except Exception as e:
        print(f"✗ Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
