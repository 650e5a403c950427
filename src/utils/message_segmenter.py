"""
Splits pasted bulk SMS text into individual message candidates.
"""
import logging
import re
from typing import List

logger = logging.getLogger(__name__)

MIN_MESSAGE_LENGTH = 10

# Blank lines separate messages; "Dear" and "Your Account" open a new bank
# message even when the user pasted them back-to-back. The greeting match is a
# heuristic: a body that says "Dear" mid-sentence is split there as well.
MESSAGE_BOUNDARY = re.compile(r"(?:\r?\n){2,}|(?=Dear)|(?=Your Account)")


def split_messages(bulk_text: str) -> List[str]:
    """
    Split bulk text into trimmed message candidates, in input order.
    Candidates shorter than MIN_MESSAGE_LENGTH are treated as noise and dropped.
    """
    if not isinstance(bulk_text, str):
        raise TypeError(f"Bulk SMS text must be a string, got {type(bulk_text).__name__}")

    candidates = []
    for segment in MESSAGE_BOUNDARY.split(bulk_text):
        segment = segment.strip()
        if len(segment) < MIN_MESSAGE_LENGTH:
            if segment:
                logger.debug(f"Dropping short segment: {segment!r}")
            continue
        candidates.append(segment)

    logger.debug(f"Split bulk text into {len(candidates)} candidate message(s)")
    return candidates
