"""Human-readable byte totals."""
from typing import Optional

UNKNOWN = "Unknown"

# Largest first; 1024-based multiples
_UNITS = (
    ("TB", 1024 ** 4),
    ("GB", 1024 ** 3),
    ("MB", 1024 ** 2),
    ("KB", 1024),
)


def format_bytes(value: Optional[int]) -> str:
    """Format a byte count with two decimals and the exact count.

    Examples:
        format_bytes(1023)  -> "1023 B (1023 bytes)"
        format_bytes(1024)  -> "1.00 KB (1024 bytes)"
        format_bytes(None)  -> "Unknown"
    """
    if value is None:
        return UNKNOWN
    if value < 0:
        raise ValueError(f"byte count must be >= 0, got {value}")

    for unit, size in _UNITS:
        if value >= size:
            return f"{_hundredths(value, size)} {unit} ({value} bytes)"
    return f"{value} B ({value} bytes)"


def _hundredths(value: int, size: int) -> str:
    """value / size with two decimals, in integer arithmetic (no float overflow).

    Ties round half to even, as float formatting does.
    """
    quotient, remainder = divmod(value * 100, size)
    if remainder * 2 > size or (remainder * 2 == size and quotient % 2):
        quotient += 1
    whole, cents = divmod(quotient, 100)
    return f"{whole}.{cents:02d}"
