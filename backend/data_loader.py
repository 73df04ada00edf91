import os

import pandas as pd

from models import Course, Program, RequirementGroup
from normalizer import normalize_code, split_codes
from prereq_parser import parse_prereqs, prereq_course_codes
from repositories import InMemoryPrereqRepository, InMemoryProgramRepository
from terms import SEASONS


_BOOL_TRUTHY = {"true", "1", "yes", "y"}

# Season code -> offering flag column in the courses sheet.
OFFERING_COLUMNS = {
    "F": "offered_fall",
    "W": "offered_winter",
    "S": "offered_spring",
}

REQUIRED_SHEETS = ("courses", "programs")


def _safe_bool_col(df: pd.DataFrame, col: str) -> pd.DataFrame:
    """Normalize a boolean column to Python bool regardless of Excel format.

    Handles: Python bool, Excel int/float (1/0), and string variants
    (TRUE/FALSE, true/false, 1/0, yes/no, y/n). NaN → False.
    """
    def _coerce(x):
        if pd.isna(x):
            return False
        if isinstance(x, bool):
            return x
        if isinstance(x, (int, float)):
            return bool(x)
        return str(x).strip().lower() in _BOOL_TRUTHY

    if col in df.columns:
        df[col] = df[col].apply(_coerce)
    return df


def _safe_int(val, default=None):
    try:
        if pd.isna(val):
            return default
        return int(val)
    except (TypeError, ValueError):
        return default


def _normalize_program_kind(raw_kind) -> str:
    """Normalize program kind to one of: major, minor, specialization."""
    k = str(raw_kind or "").strip().lower()
    if k in {"minor"}:
        return "minor"
    if k in {"specialization", "specialisation", "spec", "option"}:
        return "specialization"
    return "major"


def _normalize_requirement_mode(raw_mode) -> str | None:
    m = str(raw_mode or "").strip().lower()
    if m in {"", "required", "all", "all_of"}:
        return "required"
    if m in {"choose_n", "n_of", "choose", "one_of"}:
        return "choose_n"
    return None


def _availability(row: pd.Series) -> frozenset:
    raw = row.get("availability")
    if isinstance(raw, str) and raw.strip():
        return frozenset(s for s in raw.upper() if s in SEASONS)
    return frozenset(season for season, col in OFFERING_COLUMNS.items() if row.get(col, False))


def _require_columns(df: pd.DataFrame, sheet: str, columns: list[str]) -> None:
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise ValueError(f"Sheet '{sheet}' is missing required column(s): {missing}")


def _build_requirements(requirements_df: pd.DataFrame | None, program_names: set) -> dict[str, list]:
    """program name (lowercase) → [RequirementGroup, ...] in sheet order."""
    by_program: dict[str, list] = {}
    if requirements_df is None or len(requirements_df) == 0:
        return by_program
    _require_columns(requirements_df, "requirements", ["program_name", "courses"])

    unknown_programs = set()
    for i, row in requirements_df.iterrows():
        program = str(row.get("program_name", "") or "").strip()
        if not program:
            continue
        if program.lower() not in program_names:
            unknown_programs.add(program)
            continue
        mode = _normalize_requirement_mode(row.get("mode"))
        req_id = str(row.get("requirement_id", "") or "").strip() or f"REQ_{i + 1}"
        if mode is None:
            print(f"[WARN] Requirement '{req_id}' for '{program}' has unknown mode {row.get('mode')!r}; skipped.")
            continue
        raw_courses = row.get("courses")
        courses = tuple(split_codes(raw_courses if isinstance(raw_courses, str) else ""))
        default_count = len(courses) if mode == "required" else 1
        needed = _safe_int(row.get("needed_count"), default_count)
        by_program.setdefault(program.lower(), []).append(
            RequirementGroup(requirement_id=req_id, mode=mode, courses=courses, needed_count=needed)
        )

    if unknown_programs:
        print(f"[WARN] {len(unknown_programs)} requirement program(s) not found in programs sheet: {sorted(unknown_programs)}")
    return by_program


def build_catalog(
    courses_df: pd.DataFrame,
    programs_df: pd.DataFrame,
    requirements_df: pd.DataFrame | None = None,
) -> dict:
    """
    Build course, prerequisite and program lookups from loaded sheets.

    Returns:
      {
        "catalog":      {"CS 135": Course, ...},
        "prereq_map":   {"CS 135": ParsedPrereqData, ...},
        "programs":     [Program, ...],
        "prereq_repo":  InMemoryPrereqRepository,
        "program_repo": InMemoryProgramRepository,
      }
    """
    _require_columns(courses_df, "courses", ["course_code"])
    _require_columns(programs_df, "programs", ["program_name"])

    courses_df = courses_df.copy()
    programs_df = programs_df.copy()

    for col in OFFERING_COLUMNS.values():
        courses_df = _safe_bool_col(courses_df, col)
    programs_df = _safe_bool_col(programs_df, "is_double_degree")

    courses_df["course_code"] = courses_df["course_code"].astype(str).str.strip()
    courses_df["course_code"] = courses_df["course_code"].apply(lambda c: normalize_code(c) or c)
    courses_df["prereq"] = courses_df.get("prereq", pd.Series(dtype=str)).fillna("none")
    if "min_level" not in courses_df.columns:
        courses_df["min_level"] = None

    catalog: dict[str, Course] = {}
    prereq_map: dict = {}
    for _, row in courses_df.iterrows():
        code = row["course_code"]
        if code in catalog:
            print(f"[WARN] Duplicate course row for {code}; keeping the first.")
            continue
        name = row.get("course_name", "")
        catalog[code] = Course(
            code=code,
            availability=_availability(row),
            name="" if pd.isna(name) else str(name),
        )
        prereq_map[code] = parse_prereqs(row.get("prereq", "none"), row.get("min_level"))

    program_names = {
        str(n).strip().lower()
        for n in programs_df["program_name"].tolist()
        if str(n).strip()
    }
    requirements_by_program = _build_requirements(requirements_df, program_names)

    programs = []
    for _, row in programs_df.iterrows():
        name = str(row.get("program_name", "") or "").strip()
        if not name:
            continue
        programs.append(Program(
            name=name,
            kind=_normalize_program_kind(row.get("kind")),
            is_double_degree=bool(row.get("is_double_degree", False)),
            min_course_count=_safe_int(row.get("min_course_count")),
            requirements=tuple(requirements_by_program.get(name.lower(), [])),
        ))

    # ── Data integrity checks ──────────────────────────────────────────────
    catalog_codes = set(catalog)
    referenced = {code for p in prereq_map.values() for code in prereq_course_codes(p)}
    orphaned = referenced - catalog_codes
    if orphaned:
        print(f"[WARN] {len(orphaned)} prerequisite course(s) not found in courses sheet: {sorted(orphaned)}")

    required_codes = {
        code for p in programs for group in p.requirements for code in group.courses
    }
    orphaned_required = required_codes - catalog_codes
    if orphaned_required:
        print(f"[WARN] {len(orphaned_required)} requirement course(s) not found in courses sheet: {sorted(orphaned_required)}")

    manual = [code for code, p in prereq_map.items() if p.manual_review]
    if manual:
        print(f"[WARN] {len(manual)} course(s) have unsupported prereq format (manual review required): {sorted(manual)}")

    return {
        "catalog": catalog,
        "prereq_map": prereq_map,
        "programs": programs,
        "prereq_repo": InMemoryPrereqRepository(prereq_map),
        "program_repo": InMemoryProgramRepository(programs),
    }


def load_data(data_path: str) -> dict:
    """Load and parse the catalog workbook. Raises on file/schema errors."""
    if not os.path.exists(data_path):
        raise FileNotFoundError(f"Data file not found: {data_path}")
    xl = pd.ExcelFile(data_path)
    sheet_names = xl.sheet_names

    missing = [s for s in REQUIRED_SHEETS if s not in sheet_names]
    if missing:
        raise ValueError(f"Workbook {data_path} is missing required sheet(s): {missing}")

    courses_df = xl.parse("courses")
    programs_df = xl.parse("programs")
    requirements_df = xl.parse("requirements") if "requirements" in sheet_names else None

    data = build_catalog(courses_df, programs_df, requirements_df)
    print(f"[INFO] Loaded {len(data['catalog'])} courses and {len(data['programs'])} programs from {data_path}")
    return data
