"""
Block segmentation for repeated document sections.
"""

import logging
from typing import Iterable, List

from .classifiers import starts_with

logger = logging.getLogger(__name__)


def split_by_keyword(lines: List[str], keywords: Iterable[str]) -> List[List[str]]:
    """
    Split a list of lines into blocks starting at keyword lines.

    A new block opens at every line that starts (case-insensitively, after
    stripping) with one of the keywords. Lines before the first keyword line
    form their own leading block. Every line lands in exactly one block and
    the original order is kept.

    Args:
        lines: Lines to segment
        keywords: Anchor keywords, e.g. ["COLLECTION", "LOADING"]

    Returns:
        List of blocks, each a list of lines
    """
    keywords = list(keywords)
    blocks: List[List[str]] = []
    current: List[str] = []

    for line in lines:
        if starts_with(line, *keywords) and current:
            blocks.append(current)
            current = []
        current.append(line)

    if current:
        blocks.append(current)

    logger.debug(f"Split {len(lines)} lines into {len(blocks)} blocks on {keywords}")
    return blocks
