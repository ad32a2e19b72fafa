"""Tests for ``python -m mfdeps``.

The subprocess tests run the module the way users do, against a real
catalog directory, so they cover the path from ``__main__`` through the
click group to a command and its exit code.
"""

from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path
from typing import List
from unittest.mock import patch

import pytest

from mfdeps.__main__ import _print_startup_error, main

REPO_ROOT = Path(__file__).resolve().parents[1]


def _run_module(args: List[str], cwd: Path) -> subprocess.CompletedProcess:
    env = dict(os.environ)
    env["NO_COLOR"] = "1"
    env["PYTHONPATH"] = os.pathsep.join(
        filter(None, [str(REPO_ROOT), env.get("PYTHONPATH")])
    )
    for name in ("MFDEPS_CONFIG", "MFDEPS_CATALOG_PATH", "MFDEPS_REGISTRY_URL"):
        env.pop(name, None)

    return subprocess.run(
        [sys.executable, "-m", "mfdeps", *args],
        cwd=str(cwd),
        env=env,
        capture_output=True,
        text=True,
        timeout=60,
    )


@pytest.fixture
def project(tmp_path: Path) -> Path:
    catalog = tmp_path / "catalog"
    catalog.mkdir()
    (catalog / "core.json").write_text(
        json.dumps({"react": "18.2.0", "react-dom": "18.2.0"}), encoding="utf-8"
    )
    return tmp_path


@pytest.mark.unit
class TestModuleExecution:
    """End-to-end runs of ``python -m mfdeps``."""

    def test_version(self, project: Path) -> None:
        result = _run_module(["--version"], project)

        assert result.returncode == 0
        assert "mfdeps" in result.stdout

    def test_show_category_as_json(self, project: Path) -> None:
        result = _run_module(["show", "core", "--format", "json"], project)

        assert result.returncode == 0
        assert json.loads(result.stdout) == {"react": "18.2.0", "react-dom": "18.2.0"}

    def test_update_rewrites_manifest(self, project: Path) -> None:
        manifest = project / "package.json"
        manifest.write_text(
            json.dumps({"name": "shell", "dependencies": {"react": "^17.0.2"}}),
            encoding="utf-8",
        )

        result = _run_module(["update"], project)

        assert result.returncode == 0
        assert json.loads(manifest.read_text(encoding="utf-8")) == {
            "name": "shell",
            "dependencies": {"react": "18.2.0"},
        }

    def test_missing_category_exits_one(self, project: Path) -> None:
        result = _run_module(["show", "ui"], project)

        assert result.returncode == 1
        assert "Category 'ui' not found" in result.stdout

    def test_unknown_command_exits_two(self, project: Path) -> None:
        result = _run_module(["frobnicate"], project)

        assert result.returncode == 2


@pytest.mark.unit
class TestMain:
    """Tests for main()."""

    def test_returns_cli_exit_code(self) -> None:
        with patch("mfdeps.cli.main", return_value=130) as cli_main:
            assert main() == 130

        cli_main.assert_called_once_with()

    def test_cli_import_failure(self, capsys: pytest.CaptureFixture) -> None:
        with patch.dict(sys.modules, {"mfdeps.cli": None}):
            assert main() == 1

        err = capsys.readouterr().err
        assert "mfdeps CLI could not be loaded." in err
        assert "ImportError:" in err


@pytest.mark.unit
def test_startup_error_report(capsys: pytest.CaptureFixture) -> None:
    _print_startup_error(ImportError("No module named 'rich'"))

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "mfdeps version: 0.2.0" in captured.err
    assert "ImportError: No module named 'rich'" in captured.err
