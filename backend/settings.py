import os

from dotenv import load_dotenv

load_dotenv()

# ── Paths ─────────────────────────────────────────────────────────────────────
BACKEND_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.dirname(BACKEND_DIR)
_DEFAULT_DATA_PATH = os.path.join(PROJECT_ROOT, "data", "catalog.xlsx")


def _env_str(name: str, default: str) -> str:
    raw = os.environ.get(name, "")
    return raw.strip() or default


def _env_list(name: str) -> list[str]:
    raw = os.environ.get(name, "")
    return [part.strip() for part in raw.split(",") if part.strip()]


def resolve_data_path(raw: str | None = None) -> str:
    """Relative paths are resolved against the project root."""
    if raw is None:
        raw = os.environ.get("DATA_PATH")
    if not raw:
        return _DEFAULT_DATA_PATH
    if not os.path.isabs(raw):
        return os.path.join(PROJECT_ROOT, raw)
    return raw


DATA_PATH = resolve_data_path()
DEFAULT_SEQUENCE = _env_str("DEFAULT_SEQUENCE", "Regular")

# Degree-level finding names (OverallValidationResult member names) that make
# the whole schedule invalid. Empty by default: degree findings are advisory.
BLOCKING_DEGREE_FINDINGS = _env_list("BLOCKING_DEGREE_FINDINGS")
