"""Shared test fixtures for ramlmock.

Provides RAML fixture paths, isolated config environments, output state
management, and a CLI runner. These fixtures are automatically discovered
by pytest and available to all test modules without explicit imports.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Any

import pytest

from ramlmock.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file").  Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# RAML fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def widgets_raml() -> Path:
    """Single-resource document with a templated baseUri."""
    return FIXTURES_DIR / "widgets.raml"


@pytest.fixture
def library_raml() -> Path:
    """Nested document with named schemas, an include, and vendor media types."""
    return FIXTURES_DIR / "library.raml"


@pytest.fixture
def broken_schema_raml() -> Path:
    """Document whose only response schema is not valid JSON."""
    return FIXTURES_DIR / "broken_schema.raml"


@pytest.fixture
def refs_raml() -> Path:
    """Schemas that point at each other with ``$ref``."""
    return FIXTURES_DIR / "refs.raml"


@pytest.fixture
def spec_dir(tmp_path: Path) -> Path:
    """A directory holding two copies of widgets.raml and a non-RAML file."""
    directory = tmp_path / "specs"
    directory.mkdir()
    shutil.copy(FIXTURES_DIR / "widgets.raml", directory / "a.raml")
    shutil.copy(FIXTURES_DIR / "widgets.raml", directory / "b.raml")
    (directory / "notes.txt").write_text("not a spec")
    return directory


class RecordingSchemaMocker:
    """Schema mocker double that records its calls and returns a marker body."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, Any]] = []

    def __call__(self, schema: Any, formats: Any) -> Any:
        self.calls.append((schema, formats))
        return {"mocked": len(self.calls)}


@pytest.fixture
def recording_mocker() -> RecordingSchemaMocker:
    return RecordingSchemaMocker()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Clears all RAMLMOCK_* environment variables and changes the working
    directory to tmp_path, so no stray ``ramlmock.json`` is picked up.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    for var in ["RAMLMOCK_PATH", "RAMLMOCK_FILES"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def json_output() -> OutputManager:
    """Install a JSON-format OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.JSON)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
