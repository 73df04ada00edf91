"""
Record types and result enumerations shared by the validation engines.

Inputs (Course, ParsedPrereqData, Program) are frozen: they are loaded once
per validation run and only read afterwards. ScheduleValidationOutput is
built fresh by the validator for every call.
"""

from dataclasses import dataclass, field
from enum import Enum


class ValidationResult(str, Enum):
    """Outcome of a single course-level rule."""
    SUCCESS = "Success"
    TERM_UNAVAILABLE = "TermUnavailable"
    NOT_MEET_MIN_LVL = "NotMeetMinLvl"
    NOT_MEET_PRE_REQ = "NotMeetPreReq"
    NOT_MEET_CO_REQ = "NotMeetCoReq"
    NOT_MEET_ANTI_REQ = "NotMeetAntiReq"
    NO_SUCH_COURSE = "NoSuchCourse"


class OverallValidationResult(str, Enum):
    """Degree-level finding. Each one is independent of the others."""
    SUCCESS = "Success"
    NO_SUCH_MAJOR = "NoSuchMajor"
    COMMUNICATION_COURSE_TOO_LATE = "CommunicationCourseTooLate"
    NOT_ENOUGH_COURSE = "NotEnoughCourse"
    NOT_MEET_DEGREE_REQUIREMENT = "NotMeetDegreeRequirement"


@dataclass(frozen=True)
class Course:
    """
    A scheduled course.

    Attributes:
        code: Canonical course code, e.g. "CS 135"
        availability: Season codes the course is offered in ("F", "W", "S")
        name: Human-readable title, display only
    """
    code: str
    availability: frozenset = field(default_factory=frozenset)
    name: str = ""


@dataclass(frozen=True)
class ParsedPrereqData:
    """
    Parsed requirement metadata for one course.

    alternatives is a disjunction of conjunctions: the prerequisite is met
    when every code of at least one inner tuple has been taken. No
    alternatives (or only empty ones) means no prerequisite.
    """
    minimum_level: str = "1A"
    alternatives: tuple = ()
    raw: str = ""
    manual_review: bool = False


@dataclass(frozen=True)
class RequirementGroup:
    """
    One requirement group of a program.

    mode "required": every listed course must be scheduled.
    mode "choose_n": at least needed_count of the listed courses.
    """
    requirement_id: str
    mode: str
    courses: tuple
    needed_count: int = 0


@dataclass(frozen=True)
class Program:
    name: str
    kind: str = "major"
    is_double_degree: bool = False
    min_course_count: int | None = None
    requirements: tuple = ()


@dataclass
class ScheduleValidationOutput:
    """
    Result of validating one schedule.

    course_validation_result mirrors the input schedule: one entry per term,
    one failure set per course in the same order. An empty set means the
    course passed every rule.
    """
    course_validation_result: dict = field(default_factory=dict)
    degree_validation_result: list = field(default_factory=list)
    overall_result: bool = True

    def to_dict(self) -> dict:
        """Plain-JSON rendering for a presentation layer."""
        order = list(ValidationResult)
        return {
            "courseValidationResult": {
                term: [
                    [r.value for r in sorted(failures, key=order.index)]
                    for failures in term_results
                ]
                for term, term_results in self.course_validation_result.items()
            },
            "degreeValidationResult": [r.value for r in self.degree_validation_result],
            "overallResult": self.overall_result,
        }
