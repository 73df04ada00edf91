import pytest
from course_checks import (
    CourseCheckContext,
    DEFAULT_COURSE_RULES,
    check_antireq,
    check_availability,
    check_coreq,
    check_min_level,
    check_open_to,
    check_prereq,
    validate_course,
)
from models import Course, ParsedPrereqData, ValidationResult
from terms import generate_sequence

R = ValidationResult


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture
def prereq_map():
    return {
        "CS 135": ParsedPrereqData(minimum_level="1A", alternatives=()),
        "CS 136": ParsedPrereqData(minimum_level="1A", alternatives=(("CS 135",), ("CS 145",))),
        "CS 240": ParsedPrereqData(minimum_level="2A", alternatives=(("CS 136", "MATH 135"),)),
        "CS 241": ParsedPrereqData(minimum_level="2A", alternatives=((), ())),
    }


def make_ctx(prereq_map, code, term="1A", season="F", taken=(), availability=("F", "W", "S"), sequence_map=None):
    return CourseCheckContext(
        course=Course(code=code, availability=frozenset(availability)),
        term=term,
        season=season,
        taken_codes=frozenset(taken),
        prereq_map=prereq_map,
        sequence_map=sequence_map or generate_sequence("Regular"),
    )


class TestAvailability:
    def test_offered(self, prereq_map):
        assert check_availability(make_ctx(prereq_map, "CS 135", availability=("F",))) == R.SUCCESS

    def test_not_offered(self, prereq_map):
        ctx = make_ctx(prereq_map, "CS 135", season="W", availability=("F",))
        assert check_availability(ctx) == R.TERM_UNAVAILABLE

    def test_term_without_season(self, prereq_map):
        ctx = make_ctx(prereq_map, "CS 135", season=None)
        assert check_availability(ctx) == R.TERM_UNAVAILABLE


class TestMinLevel:
    def test_meets(self, prereq_map):
        assert check_min_level(make_ctx(prereq_map, "CS 240", term="2A")) == R.SUCCESS

    def test_too_early(self, prereq_map):
        assert check_min_level(make_ctx(prereq_map, "CS 240", term="1B")) == R.NOT_MEET_MIN_LVL

    def test_unknown_course(self, prereq_map):
        assert check_min_level(make_ctx(prereq_map, "CS 999")) == R.NO_SUCH_COURSE

    def test_work_term_uses_sequence_position(self, prereq_map):
        ctx = make_ctx(prereq_map, "CS 240", term="WT1", sequence_map=generate_sequence("Co-op"))
        assert check_min_level(ctx) == R.NOT_MEET_MIN_LVL


class TestPrereq:
    def test_no_prereq(self, prereq_map):
        assert check_prereq(make_ctx(prereq_map, "CS 135")) == R.SUCCESS

    def test_all_empty_alternatives_pass(self, prereq_map):
        assert check_prereq(make_ctx(prereq_map, "CS 241", term="2A")) == R.SUCCESS

    def test_first_alternative(self, prereq_map):
        assert check_prereq(make_ctx(prereq_map, "CS 136", taken={"CS 135"})) == R.SUCCESS

    def test_second_alternative(self, prereq_map):
        assert check_prereq(make_ctx(prereq_map, "CS 136", taken={"CS 145"})) == R.SUCCESS

    def test_missing(self, prereq_map):
        assert check_prereq(make_ctx(prereq_map, "CS 136")) == R.NOT_MEET_PRE_REQ

    def test_partial_conjunction(self, prereq_map):
        ctx = make_ctx(prereq_map, "CS 240", term="2A", taken={"CS 136"})
        assert check_prereq(ctx) == R.NOT_MEET_PRE_REQ

    def test_unknown_course(self, prereq_map):
        assert check_prereq(make_ctx(prereq_map, "CS 999")) == R.NO_SUCH_COURSE

    def test_manual_review_never_satisfied(self, prereq_map):
        prereq_map = {**prereq_map, "CS 492": ParsedPrereqData(raw="Department consent", manual_review=True)}
        ctx = make_ctx(prereq_map, "CS 492", taken={"CS 135", "CS 136"})
        assert check_prereq(ctx) == R.NOT_MEET_PRE_REQ


class TestPlaceholders:
    @pytest.mark.parametrize("rule", [check_coreq, check_antireq, check_open_to])
    def test_always_success(self, prereq_map, rule):
        assert rule(make_ctx(prereq_map, "CS 240", term="1A")) == R.SUCCESS

    def test_placeholders_are_in_default_rules(self):
        assert {check_coreq, check_antireq, check_open_to} <= set(DEFAULT_COURSE_RULES)


class TestValidateCourse:
    def test_all_pass(self, prereq_map):
        assert validate_course(make_ctx(prereq_map, "CS 135")) == {R.SUCCESS}

    def test_multiple_failures(self, prereq_map):
        ctx = make_ctx(prereq_map, "CS 240", term="1B", season="W", availability=("F",))
        assert validate_course(ctx) == {R.TERM_UNAVAILABLE, R.NOT_MEET_MIN_LVL, R.NOT_MEET_PRE_REQ}

    def test_success_dropped_when_failing(self, prereq_map):
        result = validate_course(make_ctx(prereq_map, "CS 136"))
        assert R.SUCCESS not in result
        assert result == {R.NOT_MEET_PRE_REQ}

    def test_custom_rule_slots_in(self, prereq_map):
        def no_cs_in_1a(ctx):
            return R.NOT_MEET_CO_REQ if ctx.term == "1A" else R.SUCCESS

        rules = DEFAULT_COURSE_RULES + (no_cs_in_1a,)
        assert validate_course(make_ctx(prereq_map, "CS 135"), rules) == {R.NOT_MEET_CO_REQ}
