"""ASCII and Cyrillic case folding over raw UTF-8 bytes.

Only ASCII letters and the two-byte Cyrillic rows U+0400..U+045F are folded.
Every other unit, including the rest of the two-byte range and all three- and
four-byte units, is copied through unchanged.
"""

from __future__ import annotations

from typing import Callable, Optional

from .classify import LeadClass, classify_lead, is_continuation
from .scanner import ByteInput, Utf8Scanner, as_bytes

CYRILLIC_LEADS = (0xD0, 0xD1)


def _lower_cyrillic(cp: int) -> int:
    if 0x0400 <= cp <= 0x040F:
        return cp + 0x50
    if 0x0410 <= cp <= 0x042F:
        return cp + 0x20
    return cp


def _upper_cyrillic(cp: int) -> int:
    if 0x0430 <= cp <= 0x044F:
        return cp - 0x20
    if 0x0450 <= cp <= 0x045F:
        return cp - 0x50
    return cp


def _fold(
    data: ByteInput,
    ascii_range: bytes,
    ascii_shift: int,
    cyrillic: Callable[[int], int],
    scanner: Optional[Utf8Scanner],
) -> bytes:
    scanner = scanner or Utf8Scanner()
    buf = as_bytes(data)
    end = scanner.logical_end(buf)
    first, last = ascii_range
    out = bytearray(buf)
    pos = 0
    while pos < end:
        lead = buf[pos]
        kind = classify_lead(lead)
        if kind is LeadClass.ASCII:
            if first <= lead <= last:
                out[pos] = lead + ascii_shift
        elif lead in CYRILLIC_LEADS and pos + 1 < end and is_continuation(buf[pos + 1]):
            cp = cyrillic(((lead & 0x1F) << 6) | (buf[pos + 1] & 0x3F))
            out[pos] = 0xC0 | (cp >> 6)
            out[pos + 1] = 0x80 | (cp & 0x3F)
        pos += kind.length
    return bytes(out)


def to_lower(data: ByteInput, scanner: Optional[Utf8Scanner] = None) -> bytes:
    return _fold(data, b"AZ", 0x20, _lower_cyrillic, scanner)


def to_upper(data: ByteInput, scanner: Optional[Utf8Scanner] = None) -> bytes:
    return _fold(data, b"az", -0x20, _upper_cyrillic, scanner)
