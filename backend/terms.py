"""
Term sequences and term ordering.

A sequence maps term labels ("1A", "1B", "WT1", ...) to the season the term
falls in ("F", "W", "S"). Dict order is chronological order.

Term labels are compared through an explicit rank instead of string
comparison, so "10A" sorts after "2A" and work terms sort by where they sit
in the student's sequence.
"""

import re

SEASONS = ("F", "W", "S")
SEASON_NAMES = {"F": "Fall", "W": "Winter", "S": "Spring"}

ACADEMIC_TERM_RE = re.compile(r'^(\d{1,2})([AB])$', re.IGNORECASE)

# Rank used for any term that comes before the first academic term.
BEFORE_FIRST_TERM = (0, 0)

SEQUENCES: dict[str, tuple[tuple[str, str], ...]] = {
    # Four years of Fall/Winter study, summers off.
    "Regular": (
        ("1A", "F"), ("1B", "W"),
        ("2A", "F"), ("2B", "W"),
        ("3A", "F"), ("3B", "W"),
        ("4A", "F"), ("4B", "W"),
    ),
    # Standard co-op stream: first work term right after 1B.
    "Co-op": (
        ("1A", "F"), ("1B", "W"), ("WT1", "S"),
        ("2A", "F"), ("WT2", "W"), ("2B", "S"),
        ("WT3", "F"), ("3A", "W"), ("WT4", "S"),
        ("3B", "F"), ("WT5", "W"), ("4A", "S"),
        ("WT6", "F"), ("4B", "W"),
    ),
}


def _sequence_key(name: str) -> str:
    return re.sub(r'[^a-z0-9]', '', str(name or "").lower())


_SEQUENCE_LOOKUP = {_sequence_key(name): name for name in SEQUENCES}


def available_sequences() -> list[str]:
    return list(SEQUENCES)


def generate_sequence(sequence_name: str) -> dict[str, str]:
    """
    'Regular' → {"1A": "F", "1B": "W", "2A": "F", ...}

    Matching ignores case and separators, so 'co-op', 'Coop' and 'CO OP'
    all resolve to 'Co-op'. Returns a new dict on every call.
    """
    canonical = _SEQUENCE_LOOKUP.get(_sequence_key(sequence_name))
    if canonical is None:
        raise ValueError(
            f"Unknown sequence: {sequence_name!r}. Expected one of: {', '.join(SEQUENCES)}"
        )
    return dict(SEQUENCES[canonical])


def academic_rank(label: str) -> tuple[int, int] | None:
    """'2B' → (2, 1). None for work terms and anything unparseable."""
    m = ACADEMIC_TERM_RE.match(str(label or "").strip())
    if not m:
        return None
    return int(m.group(1)), 0 if m.group(2).upper() == "A" else 1


def term_standing(term: str, sequence_map: dict | None = None) -> tuple[int, int]:
    """
    Academic standing of a student during the given term.

    Academic terms rank as themselves. A work term (or any other label)
    ranks as the latest academic term before it in the sequence, i.e. after
    every academic term already completed and before the next one. Labels
    not in the sequence, or preceding the first academic term, rank below 1A.
    """
    rank = academic_rank(term)
    if rank is not None:
        return rank

    standing = BEFORE_FIRST_TERM
    for label in (sequence_map or {}):
        if label == term:
            return standing
        label_rank = academic_rank(label)
        if label_rank is not None:
            standing = label_rank
    return BEFORE_FIRST_TERM


def meets_min_level(minimum_level: str, term: str, sequence_map: dict | None = None) -> bool:
    """
    True if a course needing minimum_level may be taken in term.

    A blank or unparseable minimum level places no restriction.
    """
    required = academic_rank(minimum_level)
    if required is None:
        return True
    return term_standing(term, sequence_map) >= required
