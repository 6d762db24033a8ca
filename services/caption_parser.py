"""
Caption parsing and keyword matching over SRT-style caption documents.
"""
from typing import Iterable, List

from models import CaptionBlock, KeywordHit

TIME_RANGE_SEPARATOR = "-->"


def parse_blocks(document: str) -> List[CaptionBlock]:
    """
    Split a caption document into timed text blocks.

    Blocks are separated by a blank line. The first line of a block is its
    ordinal, the second the ``START --> END`` range, the rest is caption text.
    Blocks without a time range or without text are skipped.

    Args:
        document: Raw caption document

    Returns:
        Caption blocks in document order
    """
    blocks = []
    normalised = document.replace("\r\n", "\n")

    for raw_block in normalised.split("\n\n"):
        lines = raw_block.strip("\n").split("\n")
        if len(lines) < 3:
            continue

        time_range = lines[1]
        if TIME_RANGE_SEPARATOR not in time_range:
            continue

        text = " ".join(lines[2:]).lower()
        if not text.strip():
            continue

        start_time = time_range.split(TIME_RANGE_SEPARATOR)[0].strip()
        blocks.append(CaptionBlock(start_time=start_time, text=text))

    return blocks


def find_keyword(blocks: Iterable[CaptionBlock], keyword: str) -> List[KeywordHit]:
    """
    Case-insensitive substring search of ``keyword`` in each block.

    One hit per matching block, in block order. An empty keyword matches
    every block.
    """
    needle = keyword.lower()
    return [
        KeywordHit(timestamp=block.start_time, text=block.text)
        for block in blocks
        if needle in block.text
    ]
