"""
Simulated streaming - re-chunk a complete answer and release it with pacing.
"""

import asyncio
import re
from typing import AsyncIterator, List

SENTENCE_PATTERN = re.compile(r"[^.!?]+[.!?]+|\s*[.!?]+\s*|[^.!?]+\Z")


def split_for_simulation(text: str, words_per_chunk: int = 10) -> List[str]:
    """
    Split ``text`` into progressive-reveal pieces.

    Sentences are preferred; if that yields at most one piece the text is cut
    into groups of ``words_per_chunk`` words. Whitespace-only pieces are merged
    into their predecessor, so for sentence splits ``"".join(pieces) == text``.
    Word groups are separated by a single space.
    """
    if not text:
        return []

    pieces: List[str] = []
    for match in SENTENCE_PATTERN.findall(text):
        if not match.strip() and pieces:
            pieces[-1] += match
        elif match:
            pieces.append(match)

    if len(pieces) <= 1:
        words = text.split()
        groups = [
            " ".join(words[i:i + words_per_chunk])
            for i in range(0, len(words), words_per_chunk)
        ]
        pieces = [
            group if index == len(groups) - 1 else group + " "
            for index, group in enumerate(groups)
        ]

    return [piece for piece in pieces if piece.strip()]


async def paced(pieces: List[str], delay: float) -> AsyncIterator[str]:
    """
    Yield ``pieces`` with ``delay`` seconds between consecutive items.

    The pause happens only when the consumer asks for the next piece, so a
    consumer that stops iterating (or closes the generator) leaves no pending
    sleep behind.
    """
    for index, piece in enumerate(pieces):
        if index:
            await asyncio.sleep(delay)
        yield piece
