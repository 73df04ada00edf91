import pandas as pd
import pytest
from data_loader import build_catalog, load_data
from models import Course, RequirementGroup
from repositories import InMemoryPrereqRepository, InMemoryProgramRepository


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture
def courses_df():
    return pd.DataFrame([
        {"course_code": "CS 135",   "course_name": "Designing Functional Programs", "offered_fall": True,   "offered_winter": 1,       "offered_spring": "no",  "prereq": "none",                       "min_level": None},
        {"course_code": "cs136",    "course_name": "Elementary Algorithm Design",   "offered_fall": "TRUE", "offered_winter": True,    "offered_spring": True,  "prereq": "CS 135 or CS 145",           "min_level": None},
        {"course_code": "CS 240",   "course_name": "Data Structures",               "offered_fall": True,   "offered_winter": False,   "offered_spring": None,  "prereq": "CS 136; Level at least 2A",  "min_level": None},
        {"course_code": "CS 492",   "course_name": "Social Implications",           "offered_fall": False,  "offered_winter": "yes",   "offered_spring": False, "prereq": "Department consent",         "min_level": "3A"},
        {"course_code": "ENGL 109", "course_name": "Academic Writing",              "offered_fall": True,   "offered_winter": True,    "offered_spring": True,  "prereq": None,                         "min_level": None},
    ])


@pytest.fixture
def programs_df():
    return pd.DataFrame([
        {"program_name": "Computer Science",             "kind": "major",  "is_double_degree": False,  "min_course_count": 40},
        {"program_name": "Computer Science and Business", "kind": "major", "is_double_degree": "TRUE", "min_course_count": None},
        {"program_name": "Statistics",                   "kind": "Minor",  "is_double_degree": 0,      "min_course_count": None},
    ])


@pytest.fixture
def requirements_df():
    return pd.DataFrame([
        {"program_name": "Computer Science", "requirement_id": "CS_CORE", "mode": "required", "needed_count": None, "courses": "CS 135; CS 136; CS 240"},
        {"program_name": "Computer Science", "requirement_id": "CS_COMM", "mode": "choose_n", "needed_count": 1,    "courses": "ENGL 109, COMMST 100"},
        {"program_name": "Physics",          "requirement_id": "PHYS",    "mode": "required", "needed_count": None, "courses": "PHYS 121"},
        {"program_name": "Computer Science", "requirement_id": "BAD",     "mode": "sometimes", "needed_count": None, "courses": "CS 135"},
    ])


@pytest.fixture
def data(courses_df, programs_df, requirements_df):
    return build_catalog(courses_df, programs_df, requirements_df)


class TestBuildCatalog:
    def test_codes_normalized(self, data):
        assert "CS 136" in data["catalog"]
        assert "cs136" not in data["catalog"]

    def test_availability_from_offering_columns(self, data):
        assert data["catalog"]["CS 135"].availability == {"F", "W"}
        assert data["catalog"]["CS 240"].availability == {"F"}
        assert data["catalog"]["CS 492"].availability == {"W"}

    def test_availability_column_wins(self, programs_df):
        df = pd.DataFrame([{"course_code": "CS 135", "availability": "fw", "offered_spring": True}])
        data = build_catalog(df, programs_df)
        assert data["catalog"]["CS 135"].availability == {"F", "W"}

    def test_course_record(self, data):
        assert data["catalog"]["ENGL 109"] == Course(
            code="ENGL 109", availability=frozenset({"F", "W", "S"}), name="Academic Writing"
        )

    def test_prereq_parsed(self, data):
        assert data["prereq_map"]["CS 136"].alternatives == (("CS 135",), ("CS 145",))
        assert data["prereq_map"]["ENGL 109"].alternatives == ()

    def test_min_level_from_prereq_string(self, data):
        assert data["prereq_map"]["CS 240"].minimum_level == "2A"

    def test_min_level_column(self, data):
        assert data["prereq_map"]["CS 492"].minimum_level == "3A"
        assert data["prereq_map"]["CS 492"].manual_review

    def test_default_min_level(self, data):
        assert data["prereq_map"]["CS 135"].minimum_level == "1A"

    def test_programs(self, data):
        by_name = {p.name: p for p in data["programs"]}
        assert by_name["Computer Science"].min_course_count == 40
        assert not by_name["Computer Science"].is_double_degree
        assert by_name["Computer Science and Business"].is_double_degree
        assert by_name["Computer Science and Business"].min_course_count is None
        assert by_name["Statistics"].kind == "minor"

    def test_requirements_attached(self, data):
        cs = data["program_repo"].get_program_by_name("Computer Science")
        assert cs.requirements == (
            RequirementGroup("CS_CORE", "required", ("CS 135", "CS 136", "CS 240"), needed_count=3),
            RequirementGroup("CS_COMM", "choose_n", ("ENGL 109", "COMMST 100"), needed_count=1),
        )

    def test_repositories(self, data):
        assert isinstance(data["prereq_repo"], InMemoryPrereqRepository)
        assert isinstance(data["program_repo"], InMemoryProgramRepository)
        assert set(data["prereq_repo"].get_parsed_prereq_data(["CS 135", "NOPE 101"])) == {"CS 135"}

    def test_warnings(self, data, capsys, courses_df, programs_df, requirements_df):
        build_catalog(courses_df, programs_df, requirements_df)
        out = capsys.readouterr().out
        assert "[WARN] 1 prerequisite course(s) not found in courses sheet: ['CS 145']" in out
        assert "[WARN] 1 requirement program(s) not found in programs sheet: ['Physics']" in out
        assert "unknown mode 'sometimes'" in out
        assert "manual review required" in out
        assert "COMMST 100" in out

    def test_duplicate_course_keeps_first(self, programs_df, capsys):
        df = pd.DataFrame([
            {"course_code": "CS 135", "course_name": "First", "offered_fall": True},
            {"course_code": "cs 135", "course_name": "Second", "offered_fall": True},
        ])
        data = build_catalog(df, programs_df)
        assert data["catalog"]["CS 135"].name == "First"
        assert "Duplicate course row for CS 135" in capsys.readouterr().out

    def test_missing_column_raises(self, programs_df):
        with pytest.raises(ValueError, match="course_code"):
            build_catalog(pd.DataFrame([{"code": "CS 135"}]), programs_df)

    def test_without_requirements(self, courses_df, programs_df):
        data = build_catalog(courses_df, programs_df)
        assert all(p.requirements == () for p in data["programs"])


class TestLoadData:
    def test_round_trip_workbook(self, tmp_path, courses_df, programs_df, requirements_df):
        path = tmp_path / "catalog.xlsx"
        with pd.ExcelWriter(path) as writer:
            courses_df.to_excel(writer, sheet_name="courses", index=False)
            programs_df.to_excel(writer, sheet_name="programs", index=False)
            requirements_df.to_excel(writer, sheet_name="requirements", index=False)
        data = load_data(str(path))
        assert len(data["catalog"]) == 5
        assert data["catalog"]["CS 135"].availability == {"F", "W"}
        assert data["program_repo"].get_program_by_name("computer science").requirements

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_data(str(tmp_path / "nope.xlsx"))

    def test_missing_sheet(self, tmp_path, courses_df):
        path = tmp_path / "catalog.xlsx"
        with pd.ExcelWriter(path) as writer:
            courses_df.to_excel(writer, sheet_name="courses", index=False)
        with pytest.raises(ValueError, match="programs"):
            load_data(str(path))
