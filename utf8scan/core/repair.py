"""Splice a replacement marker over every malformed UTF-8 run."""

from __future__ import annotations

from typing import Optional

from .scanner import ByteInput, Utf8Scanner, as_bytes


def repair(data: ByteInput, replacement: ByteInput = b"", scanner: Optional[Utf8Scanner] = None) -> bytes:
    """Return a copy of ``data`` with each malformed run replaced.

    Valid spans are copied verbatim and every run gets its own copy of
    ``replacement``; adjacent runs are not coalesced. A run announced longer
    than the remaining input consumes only what is there.
    """
    scanner = scanner or Utf8Scanner()
    buf = as_bytes(data)
    marker = as_bytes(replacement, "replacement")
    end = scanner.logical_end(buf)

    out = bytearray()
    cursor = 0
    for run in scanner.iter_invalid(buf):
        out += buf[cursor:run.offset]
        out += marker
        cursor = min(run.end, end)

    # Anything past the logical end (a NUL terminator and what follows it)
    # is not text and passes through untouched.
    out += buf[cursor:]
    return bytes(out)


fix_utf8 = repair
