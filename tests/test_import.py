"""Verify package imports work correctly."""

import subprocess
import sys

import pytest


def test_import_goteo() -> None:
    """Test that goteo can be imported and version matches pyproject."""
    import tomllib
    from pathlib import Path

    import goteo

    with (Path(__file__).resolve().parent.parent / "pyproject.toml").open("rb") as f:
        expected = tomllib.load(f)["project"]["version"]
    assert goteo.__version__ == expected


def test_version_format() -> None:
    """Test version string format."""
    from goteo import __version__

    parts = __version__.split(".")
    assert len(parts) == 3
    assert all(part.isdigit() for part in parts)


def test_public_names_resolve() -> None:
    """Every name in __all__ is importable from the package."""
    import goteo

    for name in goteo.__all__:
        assert hasattr(goteo, name), name


@pytest.mark.parametrize(
    "module",
    ["goteo.table", "goteo.blocks", "goteo.detectors", "goteo.detectors.table", "goteo.parser"],
)
def test_submodule_imports_in_fresh_interpreter(module: str) -> None:
    """Each submodule imports on its own, with no earlier import of the package."""
    result = subprocess.run(
        [sys.executable, "-c", f"import {module}"],
        capture_output=True,
        text=True,
        check=False,
    )

    assert result.returncode == 0, result.stderr
