import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture(autouse=True)
def _no_figma_token(monkeypatch):
    """Keep a developer's real token out of the tests"""
    monkeypatch.delenv("FIGMA_TOKEN", raising=False)


@pytest.fixture
def write_json(tmp_path):
    """Write a JSON document into tmp_path and return its path"""
    import json

    def _write(data, name="document.json"):
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write
