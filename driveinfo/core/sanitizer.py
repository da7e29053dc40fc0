"""Extract counter values from free-form SMART output."""
from typing import Optional


def sanitize(raw: Optional[str]) -> Optional[int]:
    """Strip every non-digit character and parse what is left.

    smartctl prints counters with thousands separators (``"1,778,273"``)
    and some bridges append unit text, so only the digits are kept.

    Args:
        raw: Raw attribute text, or None when the attribute was not found

    Returns:
        The non-negative integer, or None if no digits were present
    """
    if raw is None:
        return None

    digits = "".join(ch for ch in str(raw) if "0" <= ch <= "9")
    if not digits:
        return None
    return int(digits)
