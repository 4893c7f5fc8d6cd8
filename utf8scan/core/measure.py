"""Scalar-unit counting."""

from __future__ import annotations

from typing import Optional

from .classify import classify_lead
from .scanner import ByteInput, Utf8Scanner, as_bytes


def count_scalars(data: ByteInput, scanner: Optional[Utf8Scanner] = None) -> int:
    """Count scalar units by their leading bytes.

    Continuation bytes are skipped without being checked, so the result is
    only meaningful for well-formed input. Use ``is_valid`` first when that
    is not already known.
    """
    scanner = scanner or Utf8Scanner()
    buf = as_bytes(data)
    end = scanner.logical_end(buf)
    pos = count = 0
    while pos < end:
        pos += classify_lead(buf[pos]).length
        count += 1
    return count


length = count_scalars
