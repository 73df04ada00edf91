from models import Course, ValidationResult
from normalizer import split_codes
from prereq_parser import missing_prereqs
from schedule_validator import ScheduleValidator
from terms import SEASON_NAMES, generate_sequence, term_standing
import settings


def build_schedule(raw_plan: dict, catalog: dict) -> dict:
    """
    {"1A": ["cs135", "MATH 135"], "1B": "CS 136, MATH 136"}
      → {"1A": [Course("CS 135", ...), Course("MATH 135", ...)], "1B": [...]}

    Term order is kept as given; labels differing only in case are merged.
    Codes missing from the catalog become a Course with no availability,
    which the validator reports as NoSuchCourse.
    """
    schedule = {}
    for term, raw_codes in (raw_plan or {}).items():
        term_label = str(term).strip().upper()
        # "1a" and "1A" name the same term
        schedule.setdefault(term_label, []).extend(
            catalog.get(code) or Course(code=code)
            for code in split_codes(raw_codes)
        )
    return schedule


def validate_plan(
    raw_plan: dict,
    degree: str,
    data: dict,
    sequence_name: str | None = None,
    validator: ScheduleValidator | None = None,
) -> dict:
    """
    Service-level entry point: raw plan in, validation result plus the
    inputs it was computed from out.

    Returns:
      {
        "schedule":     {term: [Course, ...]},
        "sequence_map": {"1A": "F", ...},
        "result":       ScheduleValidationOutput,
      }

    Raises ValueError for an unknown sequence name.
    """
    sequence_map = generate_sequence(sequence_name or settings.DEFAULT_SEQUENCE)
    schedule = build_schedule(raw_plan, data["catalog"])
    if validator is None:
        validator = ScheduleValidator(data["prereq_repo"], data["program_repo"])
    result = validator.validate_schedule(schedule, degree, sequence_map)
    return {"schedule": schedule, "sequence_map": sequence_map, "result": result}


def _why_not(failure, course: Course, term: str, sequence_map: dict, prereq, taken: set) -> str:
    if failure == ValidationResult.NO_SUCH_COURSE:
        return f"{course.code} is not in the course catalog."
    if failure == ValidationResult.TERM_UNAVAILABLE:
        season = sequence_map.get(term)
        if season is None:
            return f"{term} is not a term of the selected sequence."
        offered = ", ".join(SEASON_NAMES[s] for s in ("F", "W", "S") if s in course.availability) or "no term"
        return f"{course.code} is not offered in {SEASON_NAMES.get(season, season)} (offered: {offered})."
    if failure == ValidationResult.NOT_MEET_MIN_LVL:
        year, half = term_standing(term, sequence_map)
        standing = f"{year}{'AB'[half]}" if year else "before 1A"
        return f"{course.code} requires level {prereq.minimum_level}; standing in {term} is {standing}."
    if failure == ValidationResult.NOT_MEET_PRE_REQ:
        if prereq.manual_review:
            return f"Prerequisite needs manual review: {prereq.raw}."
        missing = missing_prereqs(prereq.alternatives, taken)
        return f"Missing prerequisite(s) from earlier terms: {', '.join(missing)}."
    return f"{course.code} failed {failure.value}."


def explain_course_failures(plan: dict, data: dict) -> list[dict]:
    """
    One row per failed course of a validate_plan() result, in schedule order:
      {"term": "1B", "course_code": "CS 136", "failures": ["NotMeetPreReq"],
       "why_not": ["Missing prerequisite(s) from earlier terms: CS 135."]}
    """
    schedule = plan["schedule"]
    sequence_map = plan["sequence_map"]
    course_results = plan["result"].course_validation_result
    order = list(ValidationResult)

    rows = []
    taken: set[str] = set()
    for term, courses in schedule.items():
        for course, failures in zip(courses, course_results.get(term, [])):
            if not failures:
                continue
            prereq = data["prereq_map"].get(course.code)
            ordered = sorted(failures, key=order.index)
            rows.append({
                "term": term,
                "course_code": course.code,
                "failures": [f.value for f in ordered],
                "why_not": [_why_not(f, course, term, sequence_map, prereq, taken) for f in ordered],
            })
        taken.update(c.code for c in courses if c.code in data["prereq_map"])
    return rows
