"""
Degree-level validation rules.

These span the whole schedule rather than one course. Each rule returns a
list of findings; SUCCESS entries are dropped by the validator, so the
result is an open list of independent findings rather than one verdict.
"""

from dataclasses import dataclass

from models import OverallValidationResult, Program

# Approved List 1 communication courses.
LIST_ONE_COMMUNICATION_COURSES = frozenset({
    "COMMST 100",
    "COMMST 223",
    "EMLS 101R",
    "EMLS 102R",
    "EMLS 129R",
    "ENGL 129R",
    "ENGL 109",
})

# Double-degree students must take the course in their very first term.
DOUBLE_DEGREE_COMMUNICATION_TERMS = ("1A",)
# Everyone else must take it before 2A.
COMMUNICATION_TERMS = ("1A", "1B", "WT1")


@dataclass(frozen=True)
class DegreeCheckContext:
    """
    schedule is the caller's term → [Course] mapping, read only.
    program is None when the degree name did not resolve.
    """
    schedule: dict
    degree: str
    program: Program | None


def _scheduled_codes(schedule: dict, terms=None) -> list[str]:
    keys = schedule.keys() if terms is None else terms
    return [course.code for term in keys for course in schedule.get(term, [])]


def check_communication_course(ctx: DegreeCheckContext) -> list:
    if ctx.program is None:
        return [OverallValidationResult.NO_SUCH_MAJOR]

    terms = DOUBLE_DEGREE_COMMUNICATION_TERMS if ctx.program.is_double_degree else COMMUNICATION_TERMS
    codes = _scheduled_codes(ctx.schedule, terms)
    if any(code in LIST_ONE_COMMUNICATION_COURSES for code in codes):
        return [OverallValidationResult.SUCCESS]
    return [OverallValidationResult.COMMUNICATION_COURSE_TOO_LATE]


def requirement_group_met(group, scheduled: set) -> bool:
    count = sum(1 for code in dict.fromkeys(group.courses) if code in scheduled)
    if group.mode == "required":
        return count >= len(set(group.courses))
    return count >= group.needed_count


def unmet_requirements(program: Program, scheduled: set) -> list[str]:
    """requirement_ids of the program's groups the schedule does not cover."""
    return [g.requirement_id for g in program.requirements if not requirement_group_met(g, scheduled)]


def check_degree_requirements(ctx: DegreeCheckContext) -> list:
    """
    Course-count and requirement-group coverage.

    Not part of the default rule set. An unknown program yields nothing here;
    check_communication_course already reports NO_SUCH_MAJOR.
    """
    if ctx.program is None:
        return []
    scheduled = set(_scheduled_codes(ctx.schedule))

    findings = []
    if ctx.program.min_course_count is not None and len(scheduled) < ctx.program.min_course_count:
        findings.append(OverallValidationResult.NOT_ENOUGH_COURSE)
    if unmet_requirements(ctx.program, scheduled):
        findings.append(OverallValidationResult.NOT_MEET_DEGREE_REQUIREMENT)
    return findings or [OverallValidationResult.SUCCESS]


DEFAULT_DEGREE_RULES = (check_communication_course,)
