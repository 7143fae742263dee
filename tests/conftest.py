"""Shared test fixtures for annospec.

Provides reusable fixtures for building type catalogs, parsers, isolated
config environments, output state, and CLI runners. These fixtures are
automatically discovered by pytest and available to all test modules
without explicit imports.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from annospec.catalog import TypeCatalog
from annospec.models import Document, TypeDescriptor, TypeField
from annospec.output import OutputFormat, OutputManager, reset_output, set_output
from annospec.parser import DirectiveParser


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Catalog fixtures
# ---------------------------------------------------------------------------


def make_type(name: str, *fields: tuple[str, ...], alias: str = "") -> TypeDescriptor:
    """Build a descriptor from ``(name, type[, tag])`` tuples."""
    return TypeDescriptor(
        name=name,
        fields=[TypeField(name=f[0], type=f[1], tag=f[2] if len(f) > 2 else "") for f in fields],
        alias=alias,
    )


@pytest.fixture
def catalog() -> TypeCatalog:
    """A small catalog modelled on a typical ``models`` package.

    * ``Person`` -- untagged ``Name string`` / ``Age int``.
    * ``models.User`` -- tagged fields, pointer, time, nested struct, alias.
    * ``models.Address`` -- referenced unqualified from ``models.User``.
    * ``models.Role`` -- alias of ``string``.
    * ``models.RoleList`` -- alias of ``[]Role``.
    * ``models.Team`` -- array of structs and nested arrays.
    """
    return TypeCatalog(
        [
            make_type("Person", ("Name", "string"), ("Age", "int")),
            make_type(
                "models.User",
                ("ID", "int64", 'json:"id"'),
                ("Email", "*string", 'json:"email,omitempty" openapi:"format=email;example=a@b.c"'),
                ("Password", "string", 'json:"-"'),
                ("CreatedAt", "time.Time", 'json:"created_at"'),
                ("Address", "*Address", 'json:"address"'),
                ("Role", "Role", 'json:"role"'),
                ("Avatar", "[]byte", 'json:"avatar"'),
            ),
            make_type("models.Address", ("City", "string", 'json:"city"'), ("Zip", "string", 'json:"zip"')),
            make_type("models.Role", alias="string"),
            make_type("models.RoleList", alias="[]Role"),
            make_type(
                "models.Team",
                ("Members", "[]User", 'json:"members"'),
                ("Grid", "[][]float64", 'json:"grid"'),
                ("Roles", "RoleList", 'json:"roles"'),
            ),
        ]
    )


@pytest.fixture
def document() -> Document:
    return Document()


@pytest.fixture
def parser(document: Document, catalog: TypeCatalog) -> DirectiveParser:
    return DirectiveParser(document, catalog)


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path
    so that tests never touch real user config. Clears all ANNOSPEC_*
    environment variables and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("annospec.config._is_xdg_platform", lambda: True)

    for var in [
        "ANNOSPEC_TITLE",
        "ANNOSPEC_API_VERSION",
        "ANNOSPEC_FORMAT",
        "ANNOSPEC_KEEP_GOING",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager for the test."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
