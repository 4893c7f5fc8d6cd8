"""Core modules for the UTF-8 scanner."""

from .audit import AuditRunner, AuditTarget  # noqa: F401
from .casefold import to_lower, to_upper  # noqa: F401
from .classify import LeadClass, classify_lead, is_continuation  # noqa: F401
from .measure import count_scalars, length  # noqa: F401
from .repair import fix_utf8, repair  # noqa: F401
from .scanlog import ScanLog  # noqa: F401
from .scanner import InvalidRun, Utf8Scanner, is_valid, iter_invalid, locate_invalid  # noqa: F401
