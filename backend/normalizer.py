import re

# Matches: SUBJ NNN, SUBJ-NNN, SUBJNNN, with an optional suffix letter
# (CS 135, MATH 135, EMLS 101R, COMMST 100, cs135).
CANONICAL = re.compile(r'^([A-Za-z]{2,8})\s*[-]?\s*(\d{3}[A-Za-z]?)$')

SEPARATORS = re.compile(r'[,\n;]+')


def normalize_code(raw: str) -> str | None:
    """
    Normalizes a course code to canonical 'SUBJ NNN' format.
    Handles: 'cs135', 'CS-135', 'CS 135', 'emls101r', 'COMMST 100'
    Returns None if the string cannot be parsed as a course code.
    """
    if not raw or not str(raw).strip():
        return None
    m = CANONICAL.match(str(raw).strip())
    if m:
        subject = m.group(1).upper()
        num = m.group(2).upper()
        return f"{subject} {num}"
    return None


def split_codes(raw) -> list[str]:
    """
    Accepts a list of codes or one comma/newline/semicolon-separated string.

    Tokens are normalized where possible; unparseable tokens are kept
    verbatim (stripped) so a caller can still report them per course.
    Order is preserved, duplicates are kept.
    """
    if raw is None:
        return []
    tokens = SEPARATORS.split(raw) if isinstance(raw, str) else [str(t) for t in raw]
    out = []
    for token in tokens:
        token = token.strip()
        if not token:
            continue
        out.append(normalize_code(token) or token)
    return out
