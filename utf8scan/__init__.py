"""Validate, repair, measure and case-fold UTF-8 byte sequences."""

from utf8scan.core import (  # noqa: F401
    InvalidRun,
    Utf8Scanner,
    count_scalars,
    is_valid,
    locate_invalid,
    repair,
    to_lower,
    to_upper,
)

__version__ = "0.1.0"
