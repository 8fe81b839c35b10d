import os
import sys

import pytest

_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _root not in sys.path:
    sys.path.insert(0, _root)

from prospector.config import get_settings


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Fresh settings per test with a throwaway SQLite file."""
    monkeypatch.setenv("PROSPECTOR_DB_PATH", str(tmp_path / "prospector.db"))
    monkeypatch.setenv("GOOGLE_PLACES_API_KEY", "test-key")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
