"""Unit resolution engine: sanitizer, resolver and formatter."""
from driveinfo.core.formatter import format_bytes
from driveinfo.core.resolver import Resolution, UnitCandidate, resolve
from driveinfo.core.sanitizer import sanitize

__all__ = ['format_bytes', 'Resolution', 'UnitCandidate', 'resolve', 'sanitize']
