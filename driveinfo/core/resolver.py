"""Best-guess conversion of SMART LBA counters into bytes.

Drive firmware disagrees on what one unit of "Data Units Read/Written" or
"Total_LBAs_Written" is worth. Some report logical blocks, most SSDs report
512 KiB units, and some USB-SATA bridges report 1 MiB units. The only
vendor-neutral signal available is the drive's own capacity: every candidate
interpretation is scored as a fraction of the capacity and an implausible
total (less than 0.1% of the disk, or more than two full drive writes) is
rejected.

Selection is a ranked rule list evaluated top to bottom:

1. ``single-plausible``    exactly one candidate is plausible
2. ``vendor-over-logical`` vendor-scale and logical-block are both plausible
3. ``bridge-quirk``        bridge-quirk is plausible
4. ``fallback``            nothing is plausible, vendor-scale is reported
                           with a fallback marker
"""
from dataclasses import dataclass
from fractions import Fraction
from typing import Callable, Dict, Optional, Tuple

from driveinfo.core.logger import get_logger
from driveinfo.models.disk import DiskDescriptor

logger = get_logger(__name__)

# Exact bounds, both inclusive: 0.1% of the disk up to two full drive writes
PLAUSIBLE_MIN = Fraction(1, 1000)
PLAUSIBLE_MAX = Fraction(2)

VENDOR_SCALE_BYTES = 524288   # 512 KiB
BRIDGE_QUIRK_BYTES = 1048576  # 1 MiB

LOGICAL_BLOCK = "logical_block"
VENDOR_SCALE = "vendor_scale"
BRIDGE_QUIRK = "bridge_quirk"

FALLBACK_MARKER = " (fallback)"


@dataclass(frozen=True)
class UnitCandidate:
    """A hypothesis about how many bytes one counter unit is worth."""
    key: str
    multiplier: int
    label: str


@dataclass(frozen=True)
class CandidateScore:
    """A candidate evaluated against a concrete counter and disk."""
    candidate: UnitCandidate
    bytes: int
    ratio: float
    plausible: bool


@dataclass(frozen=True)
class Resolution:
    """Outcome of a successful resolve() call."""
    bytes: int
    label: str
    candidate: UnitCandidate
    rule: str
    fallback: bool
    scores: Tuple[CandidateScore, ...]


def candidates_for(block_size: int) -> Tuple[UnitCandidate, ...]:
    """Return the three fixed candidates for a drive's logical block size."""
    return (
        UnitCandidate(LOGICAL_BLOCK, block_size, f"assumes logical block size ({block_size} B)"),
        UnitCandidate(VENDOR_SCALE, VENDOR_SCALE_BYTES, "assumes 512 KiB per unit (vendor-scale)"),
        UnitCandidate(BRIDGE_QUIRK, BRIDGE_QUIRK_BYTES, "assumes 1 MiB per unit (USB-SATA quirk)"),
    )


def score(candidate_bytes: int, capacity_bytes: int) -> float:
    """Fraction of the disk capacity a byte total represents.

    Display only. Counters are unbounded integers, so a quotient too large
    for a float is reported as infinity.
    """
    try:
        return candidate_bytes / capacity_bytes
    except OverflowError:
        return float("inf")


def is_plausible(candidate_bytes: int, capacity_bytes: int) -> bool:
    """True if the byte total lies within the plausibility window.

    Compared in exact integer arithmetic so that neither huge counters nor
    float rounding at the bounds affect the outcome.
    """
    return PLAUSIBLE_MIN * capacity_bytes <= candidate_bytes <= PLAUSIBLE_MAX * capacity_bytes


# -----------------------------
#  Selection rules
# -----------------------------
Scores = Dict[str, CandidateScore]


@dataclass(frozen=True)
class SelectionRule:
    """One row of the decision table."""
    name: str
    matches: Callable[[Scores], bool]
    pick: Callable[[Scores], CandidateScore]
    fallback: bool = False


def _plausible_keys(scores: Scores):
    return {key for key, entry in scores.items() if entry.plausible}


def _only_plausible(scores: Scores) -> CandidateScore:
    (key,) = _plausible_keys(scores)
    return scores[key]


SELECTION_RULES: Tuple[SelectionRule, ...] = (
    SelectionRule(
        "single-plausible",
        lambda s: len(_plausible_keys(s)) == 1,
        _only_plausible,
    ),
    SelectionRule(
        "vendor-over-logical",
        lambda s: _plausible_keys(s) == {VENDOR_SCALE, LOGICAL_BLOCK},
        lambda s: s[VENDOR_SCALE],
    ),
    SelectionRule(
        "bridge-quirk",
        lambda s: s[BRIDGE_QUIRK].plausible,
        lambda s: s[BRIDGE_QUIRK],
    ),
    SelectionRule(
        "fallback",
        lambda s: True,
        lambda s: s[VENDOR_SCALE],
        fallback=True,
    ),
)


def evaluate(counter: int, disk: DiskDescriptor) -> Tuple[CandidateScore, ...]:
    """Score every candidate for a counter against a disk of known capacity."""
    if counter < 0:
        raise ValueError(f"counter must be >= 0, got {counter}")
    if not disk.capacity_known:
        raise ValueError(f"capacity of {disk.device} is unknown")

    scored = []
    for candidate in candidates_for(disk.logical_block_size):
        candidate_bytes = counter * candidate.multiplier
        scored.append(CandidateScore(
            candidate,
            candidate_bytes,
            score(candidate_bytes, disk.capacity_bytes),
            is_plausible(candidate_bytes, disk.capacity_bytes),
        ))
    return tuple(scored)


def resolve(counter: int, disk: DiskDescriptor) -> Optional[Resolution]:
    """Pick the most plausible byte interpretation of a SMART counter.

    Args:
        counter: Sanitized counter value (LBAs or data units)
        disk: Descriptor carrying capacity and logical block size

    Returns:
        Resolution with bytes and label, or None when the disk capacity is
        unknown and no candidate can be scored

    Raises:
        ValueError: If counter is negative
    """
    if counter < 0:
        raise ValueError(f"counter must be >= 0, got {counter}")
    if not disk.capacity_known:
        logger.debug(f"{disk.device}: capacity unknown, cannot interpret counter {counter}")
        return None

    scored = evaluate(counter, disk)
    by_key = {entry.candidate.key: entry for entry in scored}

    for rule in SELECTION_RULES:
        if not rule.matches(by_key):
            continue

        chosen = rule.pick(by_key)
        label = chosen.candidate.label + (FALLBACK_MARKER if rule.fallback else "")
        logger.debug(
            f"{disk.device}: counter {counter} resolved by rule '{rule.name}' "
            f"as {chosen.candidate.key} ({chosen.ratio:.6f} of capacity)"
        )
        return Resolution(
            bytes=chosen.bytes,
            label=label,
            candidate=chosen.candidate,
            rule=rule.name,
            fallback=rule.fallback,
            scores=scored,
        )

    # The fallback rule always matches.
    raise AssertionError("no selection rule matched")
