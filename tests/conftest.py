"""
pytest configuration for schemadoc tests.

Adds src directory to Python path for imports and provides shared schema
fixtures.
"""

import sys
from pathlib import Path

import pytest

# Add src directory to Python path
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixture_schema_dir() -> Path:
    """The sample schema under tests/fixtures/schema."""
    return FIXTURES_DIR / "schema"


@pytest.fixture
def write_schema(tmp_path):
    """Write schema files into a fresh directory: write_schema({"a.toml": "..."})."""

    def _write(files: dict[str, str]) -> Path:
        schema_dir = tmp_path / "schema"
        for name, text in files.items():
            path = schema_dir / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        return schema_dir

    return _write


@pytest.fixture
def fixture_schema(fixture_schema_dir):
    """The sample schema, loaded, resolved and validated."""
    from schemadoc.generator import load_and_validate

    return load_and_validate(fixture_schema_dir)
