from models import (
    OverallValidationResult,
    ScheduleValidationOutput,
    ValidationResult,
)
from course_checks import CourseCheckContext, DEFAULT_COURSE_RULES, validate_course
from degree_checks import DegreeCheckContext, DEFAULT_DEGREE_RULES
import settings


def _blocking_from_settings() -> frozenset:
    blocking = set()
    for name in settings.BLOCKING_DEGREE_FINDINGS:
        try:
            blocking.add(OverallValidationResult[name.upper()])
        except KeyError:
            try:
                blocking.add(OverallValidationResult(name))
            except ValueError:
                raise ValueError(f"Unknown degree finding in BLOCKING_DEGREE_FINDINGS: {name!r}") from None
    return frozenset(blocking)


class ScheduleValidator:
    """
    Validates a term-by-term schedule against course and degree rules.

    Both repositories are supplied by the caller. The validator keeps no
    per-request state, so one instance can serve concurrent calls as long
    as the repositories allow concurrent reads.

    blocking_findings lists degree-level findings that make the overall
    result False. It is empty by default: degree findings are advisory and
    only course failures invalidate a schedule.
    """

    def __init__(
        self,
        prereq_repo,
        program_repo,
        course_rules=DEFAULT_COURSE_RULES,
        degree_rules=DEFAULT_DEGREE_RULES,
        blocking_findings=None,
    ):
        self.prereq_repo = prereq_repo
        self.program_repo = program_repo
        self.course_rules = tuple(course_rules)
        self.degree_rules = tuple(degree_rules)
        if blocking_findings is None:
            blocking_findings = _blocking_from_settings()
        self.blocking_findings = frozenset(blocking_findings)

    def validate_degree(self, schedule: dict, degree: str) -> list:
        """Run every degree rule once; returns non-SUCCESS findings in rule order."""
        ctx = DegreeCheckContext(
            schedule=schedule,
            degree=degree,
            program=self.program_repo.get_program_by_name(degree),
        )
        findings = []
        for rule in self.degree_rules:
            for finding in rule(ctx):
                if finding != OverallValidationResult.SUCCESS:
                    findings.append(finding)
        return findings

    def validate_schedule(self, schedule: dict, degree: str, sequence_map: dict) -> ScheduleValidationOutput:
        """
        Validate every course of the schedule, in order, plus degree rules.

        Terms are walked in the schedule's own order. A course only sees
        courses from earlier terms as taken; a term's courses join the
        taken set once the whole term has been checked.

        Returns:
          ScheduleValidationOutput(
            course_validation_result={"1A": [frozenset(), {TERM_UNAVAILABLE}], ...},
            degree_validation_result=[COMMUNICATION_COURSE_TOO_LATE],
            overall_result=False,
          )

        Repository errors propagate; there is no partial result.
        """
        all_codes = tuple(course.code for courses in schedule.values() for course in courses)
        prereq_map = self.prereq_repo.get_parsed_prereq_data(set(all_codes))

        degree_findings = self.validate_degree(schedule, degree)
        overall_result = not any(f in self.blocking_findings for f in degree_findings)

        course_results: dict[str, list] = {}
        taken: set[str] = set()
        for term, courses in schedule.items():
            season = sequence_map.get(term)
            term_codes = tuple(course.code for course in courses)
            term_results = []
            newly_taken = []
            for course in courses:
                if course.code not in prereq_map:
                    term_results.append(frozenset({ValidationResult.NO_SUCH_COURSE}))
                    overall_result = False
                    continue

                ctx = CourseCheckContext(
                    course=course,
                    term=term,
                    season=season,
                    taken_codes=frozenset(taken),
                    prereq_map=prereq_map,
                    sequence_map=sequence_map,
                    term_codes=term_codes,
                    all_codes=all_codes,
                    degree=degree,
                )
                failures = frozenset(validate_course(ctx, self.course_rules) - {ValidationResult.SUCCESS})
                if failures:
                    overall_result = False
                term_results.append(failures)
                newly_taken.append(course.code)

            course_results[term] = term_results
            taken.update(newly_taken)

        return ScheduleValidationOutput(
            course_validation_result=course_results,
            degree_validation_result=degree_findings,
            overall_result=overall_result,
        )


def validate_schedule(schedule: dict, degree: str, sequence_map: dict, prereq_repo, program_repo) -> ScheduleValidationOutput:
    """One-shot helper with the default rule sets."""
    return ScheduleValidator(prereq_repo, program_repo).validate_schedule(schedule, degree, sequence_map)
