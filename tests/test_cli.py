"""Command-level tests for the mfdeps CLI.

Each test runs in a temporary project directory with a ``catalog/``
directory next to ``package.json``. Registry access is replaced by a stub
lookup.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Generator, Optional
from unittest.mock import patch

import pytest
from click.testing import CliRunner, Result

from mfdeps.cli import cli, main
from mfdeps.exceptions import MfDepsError, RegistryLookupError
from mfdeps.utils.logger import disable_logging


class StubLookup:
    def __init__(self, versions: Dict[str, str]) -> None:
        self.versions = versions

    async def latest_version(self, name: str) -> str:
        if name not in self.versions:
            raise RegistryLookupError(f"Package '{name}' not found in registry")
        return self.versions[name]


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """A project directory with two catalog categories."""
    for name in ("MFDEPS_CONFIG", "MFDEPS_CATALOG_PATH", "MFDEPS_REGISTRY_URL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.chdir(tmp_path)

    catalog = tmp_path / "catalog"
    catalog.mkdir()
    _write_json(catalog / "core.json", {"react": "18.2.0", "react-dom": "18.2.0"})
    _write_json(catalog / "testing.json", {"jest": "29.7.0"})

    yield tmp_path
    disable_logging()


def _write_json(path: Path, data: Any) -> None:
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")


def _read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def _run(*args: str, input: Optional[str] = None) -> Result:
    return CliRunner().invoke(cli, ["--no-color", *args], input=input)


# ============================================================================
# Global options
# ============================================================================


@pytest.mark.unit
class TestGlobalOptions:
    def test_version(self, project: Path) -> None:
        result = _run("--version")

        assert result.exit_code == 0
        assert "mfdeps" in result.output

    def test_help_lists_commands(self, project: Path) -> None:
        result = _run("--help")

        assert result.exit_code == 0
        for command in ("add", "list", "show", "update", "check-updates", "update-catalog"):
            assert command in result.output

    def test_missing_configured_category_is_fatal(self, project: Path) -> None:
        (project / "mfdeps.toml").write_text(
            '[mfdeps]\ncategories = ["core", "ui"]\n', encoding="utf-8"
        )

        result = _run("list")

        assert result.exit_code == 1
        assert "Missing category files: ui" in result.output

    def test_invalid_config_is_fatal(self, project: Path) -> None:
        (project / "mfdeps.toml").write_text("[mfdeps]\nbogus = 1\n", encoding="utf-8")

        result = _run("list")

        assert result.exit_code == 1
        assert "Unknown configuration keys" in result.output

    def test_catalog_path_option(self, project: Path) -> None:
        other = project / "shared"
        other.mkdir()
        _write_json(other / "ui.json", {"antd": "5.0.0"})

        result = _run("--catalog-path", str(other), "list")

        assert result.exit_code == 0
        assert "ui" in result.output
        assert "core" not in result.output


# ============================================================================
# list / show
# ============================================================================


@pytest.mark.unit
class TestCatalogCommands:
    def test_list(self, project: Path) -> None:
        result = _run("list")

        assert result.exit_code == 0
        assert "core" in result.output
        assert "testing" in result.output

    def test_show_json(self, project: Path) -> None:
        result = _run("show", "core", "--format", "json")

        assert result.exit_code == 0
        assert json.loads(result.output) == {"react": "18.2.0", "react-dom": "18.2.0"}

    def test_show_table(self, project: Path) -> None:
        result = _run("show", "testing")

        assert result.exit_code == 0
        assert "jest" in result.output
        assert "29.7.0" in result.output

    def test_show_missing_category(self, project: Path) -> None:
        result = _run("show", "ui")

        assert result.exit_code == 1
        assert "Category 'ui' not found" in result.output


# ============================================================================
# add
# ============================================================================


@pytest.mark.unit
class TestAddCommand:
    def test_add_category(self, project: Path) -> None:
        _write_json(project / "package.json", {"name": "app"})

        result = _run("add", "core")

        assert result.exit_code == 0
        assert _read_json(project / "package.json") == {
            "name": "app",
            "dependencies": {"react": "18.2.0", "react-dom": "18.2.0"},
        }
        assert "npm install" in result.output

    def test_add_package_as_dev(self, project: Path) -> None:
        _write_json(project / "package.json", {"name": "app"})

        result = _run("add", "testing:jest", "--dev")

        assert result.exit_code == 0
        assert _read_json(project / "package.json")["devDependencies"] == {"jest": "29.7.0"}

    def test_dev_and_peer_are_exclusive(self, project: Path) -> None:
        _write_json(project / "package.json", {"name": "app"})

        result = _run("add", "core", "--dev", "--peer")

        assert result.exit_code == 2

    def test_missing_package_exits_nonzero(self, project: Path) -> None:
        _write_json(project / "package.json", {"name": "app"})

        result = _run("add", "core:vue", "testing")

        assert result.exit_code == 1
        assert "Package 'vue' not found in category 'core'" in result.output
        assert _read_json(project / "package.json")["dependencies"] == {"jest": "29.7.0"}

    def test_missing_manifest(self, project: Path) -> None:
        result = _run("add", "core")

        assert result.exit_code == 1
        assert "package.json not found" in result.output


# ============================================================================
# update
# ============================================================================


@pytest.mark.unit
class TestUpdateCommand:
    def test_up_to_date(self, project: Path) -> None:
        _write_json(project / "package.json", {"dependencies": {"react": "18.2.0"}})

        result = _run("update")

        assert result.exit_code == 0
        assert "All dependencies are up to date" in result.output

    def test_dry_run_leaves_manifest(self, project: Path) -> None:
        manifest = {"dependencies": {"react": "^17.0.2"}}
        _write_json(project / "package.json", manifest)

        result = _run("update", "--dry-run")

        assert result.exit_code == 0
        assert "Dry run - no changes made" in result.output
        assert _read_json(project / "package.json") == manifest

    def test_upgrade_applied(self, project: Path) -> None:
        _write_json(
            project / "package.json",
            {
                "dependencies": {"react": "^17.0.2"},
                "peerDependencies": {"react-dom": ">=17.0.0"},
            },
        )

        result = _run("update")

        assert result.exit_code == 0
        assert _read_json(project / "package.json") == {
            "dependencies": {"react": "18.2.0"},
            "peerDependencies": {"react-dom": ">=17.0.0"},
        }
        assert "Skipping react-dom" in result.output

    def test_downgrade_declined(self, project: Path) -> None:
        manifest = {"dependencies": {"react": "^19.0.0"}}
        _write_json(project / "package.json", manifest)

        result = _run("update", input="n\n")

        assert result.exit_code == 0
        assert "will be downgraded" in result.output
        assert _read_json(project / "package.json") == manifest

    def test_downgrade_confirmed(self, project: Path) -> None:
        _write_json(project / "package.json", {"dependencies": {"react": "^19.0.0"}})

        result = _run("update", input="y\n")

        assert result.exit_code == 0
        assert _read_json(project / "package.json") == {"dependencies": {"react": "18.2.0"}}

    def test_yes_skips_prompt(self, project: Path) -> None:
        _write_json(project / "package.json", {"dependencies": {"react": "^19.0.0"}})

        result = _run("update", "--yes")

        assert result.exit_code == 0
        assert "will be downgraded" not in result.output
        assert _read_json(project / "package.json") == {"dependencies": {"react": "18.2.0"}}

    def test_conflict_resolved_to_current_version(self, project: Path) -> None:
        _write_json(project / "catalog" / "ui.json", {"react": "17.0.2"})
        manifest = {"dependencies": {"react": "17.0.2"}}
        _write_json(project / "package.json", manifest)

        for _ in range(2):
            result = _run("update", "--yes")

            assert result.exit_code == 0
            assert "Conflicting catalog versions" in result.output
            assert "All dependencies are up to date" in result.output
            assert _read_json(project / "package.json") == manifest

    def test_conflict_error_policy(self, project: Path) -> None:
        _write_json(project / "catalog" / "ui.json", {"react": "18.3.0"})
        (project / "mfdeps.toml").write_text(
            '[mfdeps]\non_conflict = "error"\n', encoding="utf-8"
        )
        _write_json(project / "package.json", {"dependencies": {"react": "^17.0.2"}})

        result = _run("update")

        assert result.exit_code == 1
        assert "different versions" in result.output


# ============================================================================
# check-updates / update-catalog
# ============================================================================


@pytest.mark.unit
class TestRegistryCommands:
    def test_check_updates_reports_without_writing(self, project: Path) -> None:
        before = (project / "catalog" / "core.json").read_text(encoding="utf-8")
        lookup = StubLookup({"react": "18.3.1", "react-dom": "18.2.0", "jest": "29.7.0"})

        with patch("mfdeps.commands.check_updates.build_lookup", return_value=lookup):
            result = _run("check-updates")

        assert result.exit_code == 0
        assert "18.3.1" in result.output
        assert "mfdeps update-catalog <category>" in result.output
        assert (project / "catalog" / "core.json").read_text(encoding="utf-8") == before

    def test_check_updates_skips_missing_category(self, project: Path) -> None:
        with patch(
            "mfdeps.commands.check_updates.build_lookup",
            return_value=StubLookup({"jest": "29.7.0"}),
        ):
            result = _run("check-updates", "ui", "testing")

        assert result.exit_code == 0
        assert "ui.json not found, skipping" in result.output
        assert "All packages in testing are up to date" in result.output

    def test_update_catalog_writes_and_backs_up(self, project: Path) -> None:
        lookup = StubLookup({"react": "18.3.1"})

        with patch("mfdeps.commands.update_catalog.build_lookup", return_value=lookup):
            result = _run("update-catalog", "core")

        assert result.exit_code == 0
        assert _read_json(project / "catalog" / "core.json") == {
            "react": "18.3.1",
            "react-dom": "18.2.0",
        }
        assert _read_json(project / "catalog" / "core.json.backup") == {
            "react": "18.2.0",
            "react-dom": "18.2.0",
        }
        assert "Error checking react-dom" in result.output

    def test_update_catalog_missing_category(self, project: Path) -> None:
        with patch(
            "mfdeps.commands.update_catalog.build_lookup", return_value=StubLookup({})
        ):
            result = _run("update-catalog", "ui")

        assert result.exit_code == 1
        assert "Category 'ui' not found" in result.output


# ============================================================================
# main()
# ============================================================================


@pytest.mark.unit
class TestMain:
    """Tests for the exit-code mapping of main()."""

    def test_success(self, project: Path) -> None:
        with patch("sys.argv", ["mfdeps", "--no-color", "--version"]):
            assert main() == 0

    def test_usage_error(self, project: Path) -> None:
        with patch("sys.argv", ["mfdeps", "--no-color", "no-such-command"]):
            assert main() == 2

    def test_application_error(self) -> None:
        with patch("mfdeps.cli.cli", side_effect=MfDepsError("boom")):
            assert main() == 1

    def test_keyboard_interrupt(self) -> None:
        with patch("mfdeps.cli.cli", side_effect=KeyboardInterrupt):
            assert main() == 130

    def test_unexpected_error(self) -> None:
        with patch("mfdeps.cli.cli", side_effect=RuntimeError("kaboom")):
            assert main() == 1
