"""
Validate a term-by-term course plan against the catalog workbook.

The plan is a JSON file:
    {
      "degree": "Computer Science",
      "sequence": "Co-op",
      "schedule": {"1A": ["CS 135", "MATH 135"], "1B": ["CS 136"]}
    }

--degree and --sequence override the values in the file.

Usage:
    python scripts/validate_schedule.py plan.json
    python scripts/validate_schedule.py plan.json --path data/catalog.xlsx --json
    python scripts/validate_schedule.py plan.json --check-requirements

Exit code 0 when the schedule is valid, 1 otherwise.
"""

import argparse
import json
import os
import sys

BACKEND_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "backend")


def format_report(plan: dict, rows: list[dict], degree: str) -> str:
    result = plan["result"]
    status = "PASS" if result.overall_result else "FAIL"
    course_count = sum(len(courses) for courses in plan["schedule"].values())
    lines = [f"[{status}] {course_count} course(s) across {len(plan['schedule'])} term(s) for '{degree}'"]
    for row in rows:
        for why in row["why_not"]:
            lines.append(f"  [ERROR] {row['term']} {row['course_code']}: {why}")
    for finding in result.degree_validation_result:
        lines.append(f"  [WARN]  {finding.value}")
    if result.overall_result and not result.degree_validation_result:
        lines.append("  All checks passed.")
    return "\n".join(lines)


def main(args=None):
    parser = argparse.ArgumentParser(
        description="Validate a course schedule against prerequisite and degree rules.",
    )
    parser.add_argument("plan", type=str, help="Path to the plan JSON file.")
    parser.add_argument("--degree", type=str, help="Degree/program name (overrides the plan file).")
    parser.add_argument("--sequence", type=str, help="Sequence name, e.g. Regular or Co-op.")
    parser.add_argument("--path", type=str, default=None, help="Path to the catalog workbook.")
    parser.add_argument(
        "--check-requirements", action="store_true",
        help="Also check course counts and requirement groups of the program.",
    )
    parser.add_argument("--json", action="store_true", help="Print the raw result as JSON.")
    opts = parser.parse_args(args)

    sys.path.insert(0, BACKEND_DIR)
    import settings
    from data_loader import load_data
    from degree_checks import DEFAULT_DEGREE_RULES, check_degree_requirements
    from planner import explain_course_failures, validate_plan
    from schedule_validator import ScheduleValidator

    try:
        with open(opts.plan, "r") as f:
            plan_input = json.load(f)
        data = load_data(settings.resolve_data_path(opts.path))
    except (OSError, ValueError) as exc:
        print(f"[FATAL] {exc}", file=sys.stderr)
        return 1

    degree = opts.degree or plan_input.get("degree", "")
    sequence = opts.sequence or plan_input.get("sequence")

    degree_rules = DEFAULT_DEGREE_RULES
    if opts.check_requirements:
        degree_rules = DEFAULT_DEGREE_RULES + (check_degree_requirements,)
    validator = ScheduleValidator(data["prereq_repo"], data["program_repo"], degree_rules=degree_rules)

    try:
        plan = validate_plan(plan_input.get("schedule", {}), degree, data, sequence, validator=validator)
    except ValueError as exc:
        print(f"[FATAL] {exc}", file=sys.stderr)
        return 1

    if opts.json:
        print(json.dumps(plan["result"].to_dict(), indent=2))
    else:
        print(format_report(plan, explain_course_failures(plan, data), degree))
    return 0 if plan["result"].overall_result else 1


if __name__ == "__main__":
    sys.exit(main())
