#!/usr/bin/env python3
"""
CLI for episode processing.

Usage:
    python -m podbrief.processing process EPISODE_ID [EPISODE_ID ...]
    python -m podbrief.processing reprocess-failed --limit 5
    python -m podbrief.processing show EPISODE_ID
    python -m podbrief.processing status

Episodes are processed one after the other; a failure is reported and the
next episode still runs. Logs are written to logs/processor.log.
"""

import argparse
import sys

from rich.console import Console
from rich.table import Table

from podbrief.db import count_episodes_by_status, get_summary, list_failed_episode_ids
from podbrief.formatting import format_duration, format_timestamp
from podbrief.logger import setup_logging
from .processor import process_episode


console = Console()


def parse_arguments() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Summarize podcast episodes with the configured AI endpoint",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
  OPENAI_API_KEY     Required API key of the chat-completion endpoint
  OPENAI_BASE_URL    Endpoint base URL (default: https://api.siliconflow.cn/v1)
  AI_MODEL           Model name (default: gpt-4o-mini)
  DATABASE_URL       SQLite URL (default: sqlite:///data/podbrief.db)
        """,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    process_parser = subparsers.add_parser("process", help="Process episodes by id")
    process_parser.add_argument("episode_ids", nargs="+", metavar="EPISODE_ID")

    reprocess_parser = subparsers.add_parser(
        "reprocess-failed", help="Process failed episodes again"
    )
    reprocess_group = reprocess_parser.add_mutually_exclusive_group()
    reprocess_group.add_argument(
        "--limit", type=int, default=5, help="Episodes to process (default: 5)"
    )
    reprocess_group.add_argument(
        "--all", action="store_true", help="Process every failed episode"
    )

    show_parser = subparsers.add_parser("show", help="Print an episode summary")
    show_parser.add_argument("episode_id", metavar="EPISODE_ID")

    subparsers.add_parser("status", help="Count episodes per status")

    return parser.parse_args()


def run_episodes(episode_ids: list[str]) -> int:
    """Process episodes sequentially. Returns the number of failures."""
    failures = 0
    for episode_id in episode_ids:
        result = process_episode(episode_id)
        if result.ok:
            console.print(f"[green]✓[/green] {episode_id} completed")
        else:
            failures += 1
            console.print(f"[red]✗[/red] {episode_id}: {result.body['error']}")
    return failures


def show_summary(episode_id: str) -> bool:
    summary = get_summary(episode_id)
    if summary is None:
        console.print(f"[red]✗[/red] No summary for episode {episode_id}")
        return False

    console.rule(f"{summary['title']} ({format_duration(summary['duration'])})")
    console.print(summary["summary"] or "(empty summary)")

    if summary["key_points"]:
        console.print("\n[bold]Key points[/bold]")
        for point in summary["key_points"]:
            console.print(f"  • {point}")

    if summary["keywords"]:
        console.print("\n[bold]Keywords[/bold]: " + ", ".join(summary["keywords"]))

    if summary["timestamps"]:
        table = Table(title="Timestamps")
        table.add_column("Time", justify="right")
        table.add_column("Topic")
        table.add_column("Summary")
        for ts in summary["timestamps"]:
            table.add_row(format_timestamp(ts["time"]), ts["topic"], ts["summary"])
        console.print(table)
    return True


def show_status() -> None:
    table = Table(title="Episodes by status")
    table.add_column("Status")
    table.add_column("Count", justify="right")
    for status, count in count_episodes_by_status().items():
        table.add_row(status, str(count))
    console.print(table)


def main():
    args = parse_arguments()
    setup_logging(logger_name="processor", log_file="processor.log", verbose=args.verbose)

    try:
        if args.command == "process":
            failures = run_episodes(args.episode_ids)
        elif args.command == "reprocess-failed":
            episode_ids = list_failed_episode_ids(None if args.all else args.limit)
            if not episode_ids:
                console.print("No failed episodes")
                return
            failures = run_episodes(episode_ids)
        elif args.command == "show":
            failures = 0 if show_summary(args.episode_id) else 1
        else:
            show_status()
            failures = 0
    except Exception as e:
        console.print(f"[red]✗ Error: {e}[/red]")
        sys.exit(1)

    if failures:
        sys.exit(1)


if __name__ == "__main__":
    main()
