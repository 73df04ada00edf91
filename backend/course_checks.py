"""
Course-level validation rules.

Each rule looks at one scheduled course and returns a single
ValidationResult. Rules are independent: a course can fail several at once.
validate_course() runs a tuple of rules and keeps only the failures.

Co-requisite, anti-requisite and open-to rules are placeholders that always
pass. Replace them by passing a different rules tuple to ScheduleValidator.
"""

from dataclasses import dataclass, field

from models import Course, ParsedPrereqData, ValidationResult
from prereq_parser import prereqs_satisfied
from terms import meets_min_level


@dataclass(frozen=True)
class CourseCheckContext:
    """
    Everything a course rule may look at.

    taken_codes holds courses from strictly earlier terms only.
    season is None when the term is not part of the sequence map.
    """
    course: Course
    term: str
    season: str | None
    taken_codes: frozenset
    prereq_map: dict
    sequence_map: dict = field(default_factory=dict)
    term_codes: tuple = ()
    all_codes: tuple = ()
    degree: str = ""

    @property
    def prereq(self) -> ParsedPrereqData | None:
        return self.prereq_map.get(self.course.code)


def check_availability(ctx: CourseCheckContext) -> ValidationResult:
    if ctx.season is not None and ctx.season in ctx.course.availability:
        return ValidationResult.SUCCESS
    return ValidationResult.TERM_UNAVAILABLE


def check_min_level(ctx: CourseCheckContext) -> ValidationResult:
    prereq = ctx.prereq
    if prereq is None:
        return ValidationResult.NO_SUCH_COURSE
    if meets_min_level(prereq.minimum_level, ctx.term, ctx.sequence_map):
        return ValidationResult.SUCCESS
    return ValidationResult.NOT_MEET_MIN_LVL


def check_prereq(ctx: CourseCheckContext) -> ValidationResult:
    prereq = ctx.prereq
    if prereq is None:
        return ValidationResult.NO_SUCH_COURSE
    # unreadable prerequisite: never satisfied automatically
    if prereq.manual_review:
        return ValidationResult.NOT_MEET_PRE_REQ
    if prereqs_satisfied(prereq.alternatives, ctx.taken_codes):
        return ValidationResult.SUCCESS
    return ValidationResult.NOT_MEET_PRE_REQ


def check_coreq(ctx: CourseCheckContext) -> ValidationResult:
    # Co-requisites would be matched against ctx.term_codes; no data yet.
    return ValidationResult.SUCCESS


def check_antireq(ctx: CourseCheckContext) -> ValidationResult:
    # Anti-requisites would be matched against ctx.all_codes; no data yet.
    return ValidationResult.SUCCESS


def check_open_to(ctx: CourseCheckContext) -> ValidationResult:
    # "Only open to" / "not open to" program restrictions against ctx.degree.
    return ValidationResult.SUCCESS


DEFAULT_COURSE_RULES = (
    check_availability,
    check_min_level,
    check_prereq,
    check_coreq,
    check_antireq,
    check_open_to,
)


def validate_course(ctx: CourseCheckContext, rules=DEFAULT_COURSE_RULES) -> set:
    """
    Run every rule against one course.

    Returns the set of failed results, or {SUCCESS} if nothing failed.
    """
    results = {rule(ctx) for rule in rules}
    failures = results - {ValidationResult.SUCCESS}
    return failures or {ValidationResult.SUCCESS}
