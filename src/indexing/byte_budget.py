"""UTF-8 byte budgeting for strings.

Every size-bounded string in the pipeline goes through these two
functions: ``clamp_bytes`` for a single prefix, ``chunk_bytes`` for a
full partition.  Both search over *character* offsets and measure the
encoded candidate, so a multi-byte code point can never be split.
"""

from __future__ import annotations


def byte_len(text: str) -> int:
    return len(text.encode("utf-8"))


def _longest_fitting_end(text: str, start: int, max_bytes: int) -> int:
    """Largest ``end`` in ``[start, len(text)]`` with ``text[start:end]`` <= max_bytes."""
    # every character is at least one byte, so no fitting slice is longer than max_bytes
    lo, hi = start, min(len(text), start + max_bytes)
    best = start
    while lo <= hi:
        mid = (lo + hi) // 2
        if byte_len(text[start:mid]) <= max_bytes:
            best = mid
            lo = mid + 1
        else:
            hi = mid - 1
    return best


def clamp_bytes(text: str, max_bytes: int) -> str:
    """Return the longest prefix of *text* whose UTF-8 encoding fits *max_bytes*."""
    if not text:
        return text
    if max_bytes <= 0:
        return ""
    if byte_len(text) <= max_bytes:
        return text
    return text[: _longest_fitting_end(text, 0, max_bytes)]


def chunk_bytes(text: str, budget_bytes: int) -> list[str]:
    """Partition *text* into consecutive pieces of at most *budget_bytes* each.

    ``"".join(result) == text`` always holds.  A single character that
    encodes to more than the budget is emitted as its own piece so the
    scan keeps advancing instead of dropping the tail.
    """
    if budget_bytes < 1:
        raise ValueError(f"budget_bytes must be at least 1, got {budget_bytes}.")

    pieces: list[str] = []
    start = 0
    while start < len(text):
        end = _longest_fitting_end(text, start, budget_bytes)
        if end == start:
            # oversized code point (budget < 4 bytes); emit it alone
            end = start + 1
        pieces.append(text[start:end])
        start = end
    return pieces
