"""Leading-byte classification shared by every byte walker."""

from enum import Enum
from typing import Dict, Tuple

# Table 3-7 boundaries that the generic bit patterns do not capture.
MIN_LEAD2 = 0xC2
MAX_LEAD4 = 0xF4

CONTINUATION_MIN = 0x80
CONTINUATION_MAX = 0xBF

# Second-byte ranges for the leads that would otherwise admit overlong
# encodings, surrogates or scalars above U+10FFFF.
NARROWED_SECOND_BYTE: Dict[int, Tuple[int, int]] = {
    0xE0: (0xA0, 0xBF),
    0xED: (0x80, 0x9F),
    0xF0: (0x90, 0xBF),
    0xF4: (0x80, 0x8F),
}


class LeadClass(Enum):
    """Sequence-length class implied by a leading byte."""

    ASCII = 1
    LEAD2 = 2
    LEAD3 = 3
    LEAD4 = 4
    INVALID = 0

    @property
    def length(self) -> int:
        return self.value or 1


def classify_lead(byte: int) -> LeadClass:
    if byte & 0x80 == 0x00:
        return LeadClass.ASCII
    if byte & 0xE0 == 0xC0:
        return LeadClass.LEAD2
    if byte & 0xF0 == 0xE0:
        return LeadClass.LEAD3
    if byte & 0xF8 == 0xF0:
        return LeadClass.LEAD4
    return LeadClass.INVALID


def is_continuation(byte: int) -> bool:
    return byte & 0xC0 == 0x80


def second_byte_range(lead: int) -> Tuple[int, int]:
    """Return the inclusive range allowed for the byte following ``lead``."""
    return NARROWED_SECOND_BYTE.get(lead, (CONTINUATION_MIN, CONTINUATION_MAX))
