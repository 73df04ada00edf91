import sys
import os

import pytest

# Add backend/ to path so tests can import backend modules directly
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "backend"))

# Add scripts/ to path so tests can import script modules directly
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "scripts"))


@pytest.fixture(autouse=True)
def _advisory_degree_findings(monkeypatch):
    """Keep a developer's BLOCKING_DEGREE_FINDINGS env out of the tests."""
    import settings
    monkeypatch.setattr(settings, "BLOCKING_DEGREE_FINDINGS", [])
