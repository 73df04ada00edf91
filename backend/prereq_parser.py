import itertools
import re

import pandas as pd

from models import ParsedPrereqData
from normalizer import normalize_code

# Case-insensitive OR splitter; preserves token casing before normalize_code()
OR_SPLIT = re.compile(r'\s+or\s+', re.IGNORECASE)
OPTION_SPLIT = re.compile(r'\s*,\s*|\s+or\s+', re.IGNORECASE)
CHOOSE_N_RE = re.compile(
    r'^(?:any\s+|choose\s+)?(?P<count>\d+|one|two|three|four|five)\s+'
    r'(?:courses?\s+)?(?:of|from)\s*:?\s*(?P<options>.+)$',
    re.IGNORECASE,
)

# "Level at least 2A", "level 2B", "3A or higher"
LEVEL_RE = re.compile(
    r'(?:\blevel\s+(?:at\s+least\s+)?(?P<level>\d{1,2}[AB])\b'
    r'|\b(?P<higher>\d{1,2}[AB])\s+or\s+higher\b)',
    re.IGNORECASE,
)

# Parenthetical clauses: "(or equivalent)" is dropped, "(CS 136 or CS 146)" is unwrapped
ANNOTATION_RE = re.compile(r'\s*\((?P<inner>[^)]*)\)')
CODE_RE = re.compile(r'\b[A-Za-z]{2,8}\s*-?\s*\d{3}[A-Za-z]?\b')

# Signals that the prerequisite string contains unsupported grammar.
UNSUPPORTED_SIGNALS = [
    "permission",
    "concurrent",
    "minimum grade",
    "standing",
    "instructor",
    "co-req",
    "coreq",
    "enrolled",
    "enrollment",
    "consent",
    "placement",
    "students only",
]

NONE_VALUES = {"none", "none listed", "n/a", ""}
COUNT_WORDS = {
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
}

DEFAULT_MIN_LEVEL = "1A"


def _parse_count_token(token: str) -> int | None:
    raw = str(token or "").strip().lower()
    if raw.isdigit():
        return int(raw)
    return COUNT_WORDS.get(raw)


def _strip_annotations(s: str) -> str:
    """Drop annotation clauses; keep the contents of groups that name courses."""
    def replace(match):
        inner = match.group("inner")
        return " " + inner if CODE_RE.search(inner) else ""
    return ANNOTATION_RE.sub(replace, s).strip()


def _clean(s: str) -> str:
    return s.strip().strip(";,.").strip()


def _code(token: str) -> str:
    token = token.strip()
    return normalize_code(token) or token


def _is_joined_codes(token: str) -> bool:
    """Several codes left in one token, e.g. 'CS 135, MATH 135'."""
    return normalize_code(token) is None and len(CODE_RE.findall(token)) > 1


def extract_min_level(s: str) -> tuple[str | None, str]:
    """
    Pull a minimum-level clause out of a prerequisite string.

    Returns (level or None, remaining string with the clause removed).
    """
    match = LEVEL_RE.search(s)
    if not match:
        return None, s
    level = (match.group("level") or match.group("higher")).upper()
    rest = (s[:match.start()] + s[match.end():]).strip()
    rest = re.sub(r'\s*;\s*;\s*', '; ', rest)
    return level, _clean(rest)


def _choose_n_alternatives(s: str) -> list[tuple] | None:
    """'Two of A, B, C' → every 2-combination of A, B, C."""
    match = CHOOSE_N_RE.match(s)
    if not match:
        return None
    count = _parse_count_token(match.group("count"))
    options_raw = _clean(match.group("options"))
    tokens = [_code(t) for t in OPTION_SPLIT.split(options_raw) if t.strip()]
    if count is None or count <= 0 or len(tokens) < count:
        return None
    return [tuple(combo) for combo in itertools.combinations(tokens, count)]


def _clause_alternatives(clause: str) -> list[tuple]:
    choose_n = _choose_n_alternatives(clause)
    if choose_n is not None:
        return choose_n
    if OR_SPLIT.search(clause):
        return [(_code(t),) for t in OR_SPLIT.split(clause) if t.strip()]
    return [(_code(clause),)]


def _distribute(clauses: list[list[tuple]]) -> tuple:
    """
    AND of ORs → OR of ANDs.

    [[(A,), (B,)], [(C,)]] → ((A, C), (B, C))
    Codes repeated across clauses appear once per conjunction.
    """
    result = []
    for combo in itertools.product(*clauses):
        merged = tuple(dict.fromkeys(code for group in combo for code in group))
        if merged not in result:
            result.append(merged)
    return tuple(result)


def parse_prereqs(prereq_str, min_level=None) -> ParsedPrereqData:
    """
    Parses a prerequisite string into a ParsedPrereqData record.

    Supported grammar:
      none / none listed        → no alternatives
      CODE                      → ((CODE,),)
      CODE; CODE                → ((A, B),)
      CODE or CODE              → ((A,), (B,))
      CODE or CODE; CODE        → ((A, C), (B, C))
      Two of A, B, C            → ((A, B), (A, C), (B, C))
      Level at least 2A         → minimum_level "2A" (combinable with the above)

    Parenthetical annotations are stripped before parsing; parenthesized
    course groups are unwrapped. Anything using
    unsupported grammar (permission, consent, enrolment restrictions, ...)
    comes back with manual_review=True and no alternatives, as does a clause
    that lists several codes without "or" or ";" between them. Such
    prerequisites are never satisfied automatically.

    An explicit min_level argument overrides any level found in the string.
    """
    if prereq_str is None or (isinstance(prereq_str, float) and pd.isna(prereq_str)):
        raw = ""
    else:
        raw = str(prereq_str).strip()

    explicit_level = None
    if min_level is not None and not (isinstance(min_level, float) and pd.isna(min_level)):
        explicit_level = str(min_level).strip().upper() or None

    parsed_level, s = extract_min_level(raw)
    level = explicit_level or parsed_level or DEFAULT_MIN_LEVEL

    if s.lower() in NONE_VALUES:
        return ParsedPrereqData(minimum_level=level, alternatives=(), raw=raw)

    if "(" in s:
        s = _clean(_strip_annotations(s))

    s_lower = s.lower()
    if "(" in s or any(signal in s_lower for signal in UNSUPPORTED_SIGNALS):
        return ParsedPrereqData(minimum_level=level, alternatives=(), raw=raw, manual_review=True)

    clauses = [_clean(c) for c in s.split(";")]
    clauses = [_clause_alternatives(c) for c in clauses if c]
    if not clauses:
        return ParsedPrereqData(minimum_level=level, alternatives=(), raw=raw)

    alternatives = _distribute(clauses)
    if any(_is_joined_codes(code) for group in alternatives for code in group):
        return ParsedPrereqData(minimum_level=level, alternatives=(), raw=raw, manual_review=True)
    return ParsedPrereqData(minimum_level=level, alternatives=alternatives, raw=raw)


def prereq_course_codes(parsed: ParsedPrereqData) -> list[str]:
    """Every course code referenced by any alternative, first-seen order."""
    return list(dict.fromkeys(code for group in parsed.alternatives for code in group))


def prereqs_satisfied(alternatives, taken_codes) -> bool:
    """
    True if at least one conjunction is fully contained in taken_codes.
    No alternatives, or only empty ones, is always satisfied.
    """
    if not any(len(group) > 0 for group in alternatives):
        return True
    return any(all(code in taken_codes for code in group) for group in alternatives)


def missing_prereqs(alternatives, taken_codes) -> list[str]:
    """
    Codes still missing from the closest alternative (fewest gaps first,
    then listed order). Empty when satisfied.
    """
    if prereqs_satisfied(alternatives, taken_codes):
        return []
    gaps = [[code for code in group if code not in taken_codes] for group in alternatives if group]
    return min(gaps, key=len)
