#!/usr/bin/env python3
"""
Debug script to run a keyword search against a video's captions directly,
bypassing authentication and quota.

Usage:
    python debug_search.py <video_url> <keyword>
    python debug_search.py --file captions.srt <keyword>
"""
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from models import SearchError
from services.caption_parser import find_keyword, parse_blocks
from services.transcript_fetcher import TranscriptFetcher
from services.utils import extract_video_id

console = Console()


def load_captions(source: str, from_file: bool) -> str:
    """Read captions from a local SRT file or fetch them for a video URL."""
    if from_file:
        return Path(source).read_text(encoding="utf-8")

    video_id = extract_video_id(source)
    if not video_id:
        raise SystemExit(f"Could not extract a video ID from {source!r}")

    console.print(f"[dim]Fetching captions for {video_id}...[/dim]")
    return TranscriptFetcher().fetch_captions(video_id)


def main():
    args = sys.argv[1:]
    from_file = bool(args) and args[0] == "--file"
    if from_file:
        args = args[1:]
    if len(args) != 2:
        console.print(__doc__)
        sys.exit(1)

    source, keyword = args
    try:
        captions = load_captions(source, from_file)
    except SearchError as e:
        console.print(f"[red]✗ {e.message}[/red]")
        sys.exit(1)

    blocks = parse_blocks(captions)
    hits = find_keyword(blocks, keyword)

    table = Table(title=f"'{keyword}' in {len(blocks)} caption blocks")
    table.add_column("Timestamp", style="cyan", no_wrap=True)
    table.add_column("Text")
    for hit in hits:
        table.add_row(hit.timestamp, hit.text)

    console.print(table)
    console.print(f"[green]✓ {len(hits)} hits[/green]")


if __name__ == "__main__":
    main()
