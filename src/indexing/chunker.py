# build_chunks() with a single private helper

"""Chunk construction for indexing.

Core responsibilities:
- Split one item's normalized text into contiguous byte-bounded slices.
- Number slices from zero so record ids are stable across re-runs.
"""

from __future__ import annotations

import logging

from src.indexing.byte_budget import byte_len, chunk_bytes
from src.indexing.models import Chunk, RecordLimits

logger = logging.getLogger(__name__)


# pieces longer than the budget can only be lone code points wider than a
# tiny budget; they are kept so the join still reproduces the source text
def _oversized(pieces: list[str], budget: int) -> int:
    return sum(1 for piece in pieces if byte_len(piece) > budget)


# build_chunks()
# the entry point: partitions text, wraps each piece with its index, returns them in order.

def build_chunks(text: str, limits: RecordLimits) -> list[Chunk]:
    """Split *text* into ordered chunks of at most ``limits.chunk_bytes`` bytes.

    Returns ``[]`` for empty text.  ``"".join(c.text for c in chunks) == text``.
    """
    if not text:
        return []

    pieces = chunk_bytes(text, limits.chunk_bytes)
    oversized = _oversized(pieces, limits.chunk_bytes)
    if oversized:
        logger.warning(
            "chunker: %d single-character chunk(s) exceed the %d-byte budget",
            oversized, limits.chunk_bytes,
        )

    return [Chunk(index=index, text=piece) for index, piece in enumerate(pieces)]
