"""Well-formedness scanner locating the first malformed UTF-8 run."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Union

from .classify import LeadClass, MAX_LEAD4, MIN_LEAD2, classify_lead, is_continuation, second_byte_range

ByteInput = Optional[Union[bytes, bytearray, memoryview]]


def as_bytes(data: ByteInput, name: str = "data") -> bytes:
    """Coerce a bytes-like argument; ``None`` behaves as an empty sequence."""
    if data is None:
        return b""
    if isinstance(data, bytes):
        return data
    if isinstance(data, (bytearray, memoryview)):
        return bytes(data)
    raise TypeError(f"{name} must be a bytes-like object, not {type(data).__name__}")


@dataclass(frozen=True)
class InvalidRun:
    """First byte of a malformed unit and the length its lead byte announced."""

    offset: int
    length: int

    @property
    def end(self) -> int:
        return self.offset + self.length


@dataclass(frozen=True)
class Utf8Scanner:
    """Validate byte sequences against Unicode Table 3-7.

    With ``stop_at_nul`` the first zero byte terminates the logical text, the
    way a NUL-terminated buffer would. Otherwise zero bytes are plain ASCII.
    """

    stop_at_nul: bool = False

    def logical_end(self, data: bytes) -> int:
        if self.stop_at_nul:
            nul = data.find(0)
            if nul != -1:
                return nul
        return len(data)

    def locate_invalid(self, data: ByteInput, offset: int = 0) -> Optional[InvalidRun]:
        """Return the first malformed run at or after ``offset``, or None."""
        buf = as_bytes(data)
        end = self.logical_end(buf)
        if offset < 0 or offset > len(buf):
            raise ValueError(f"offset {offset} outside sequence of length {len(buf)}")
        return self._scan(buf, offset, end)

    def iter_invalid(self, data: ByteInput, offset: int = 0) -> Iterator[InvalidRun]:
        """Yield every malformed run in scan order.

        Scanning resumes after each run's full announced length, clamped to
        the logical end, so a truncated tail is reported once.
        """
        buf = as_bytes(data)
        end = self.logical_end(buf)
        if offset < 0 or offset > len(buf):
            raise ValueError(f"offset {offset} outside sequence of length {len(buf)}")
        cursor = offset
        while cursor < end:
            run = self._scan(buf, cursor, end)
            if run is None:
                return
            yield run
            cursor = min(run.end, end)

    def is_valid(self, data: ByteInput) -> bool:
        buf = as_bytes(data)
        return self._scan(buf, 0, self.logical_end(buf)) is None

    @staticmethod
    def _scan(buf: bytes, pos: int, end: int) -> Optional[InvalidRun]:
        while pos < end:
            lead = buf[pos]
            kind = classify_lead(lead)
            if kind is LeadClass.ASCII:
                pos += 1
                continue
            if kind is LeadClass.INVALID:
                return InvalidRun(pos, 1)

            size = kind.length
            if kind is LeadClass.LEAD2 and lead < MIN_LEAD2:
                return InvalidRun(pos, size)
            if kind is LeadClass.LEAD4 and lead > MAX_LEAD4:
                return InvalidRun(pos, size)

            # Truncation counts as a bad continuation byte.
            if pos + 1 >= end:
                return InvalidRun(pos, size)
            low, high = second_byte_range(lead)
            if not low <= buf[pos + 1] <= high:
                return InvalidRun(pos, size)
            for index in range(pos + 2, pos + size):
                if index >= end or not is_continuation(buf[index]):
                    return InvalidRun(pos, size)
            pos += size
        return None


_DEFAULT = Utf8Scanner()


def locate_invalid(data: ByteInput, offset: int = 0) -> Optional[InvalidRun]:
    return _DEFAULT.locate_invalid(data, offset)


def iter_invalid(data: ByteInput, offset: int = 0) -> Iterator[InvalidRun]:
    return _DEFAULT.iter_invalid(data, offset)


def is_valid(data: ByteInput) -> bool:
    return _DEFAULT.is_valid(data)
