"""Unit tests for mfdeps.core.manifest_store."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from mfdeps.core.manifest_store import ManifestStore
from mfdeps.exceptions import ManifestNotFoundError
from mfdeps.models import DependencyType


@pytest.mark.unit
class TestManifestStore:
    """Tests for ManifestStore."""

    def test_defaults_to_current_directory(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)

        assert ManifestStore().path == tmp_path / "package.json"

    def test_load(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text(
            json.dumps({"name": "app", "dependencies": {"react": "^18.2.0"}}),
            encoding="utf-8",
        )

        manifest = ManifestStore(tmp_path).load()

        assert manifest.get_version(DependencyType.DEPENDENCIES, "react") == "^18.2.0"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ManifestNotFoundError) as exc_info:
            ManifestStore(tmp_path).load()

        assert "package.json not found" in exc_info.value.message

    @pytest.mark.parametrize("content", ["{broken", "[1, 2]"])
    def test_invalid_content(self, tmp_path: Path, content: str) -> None:
        (tmp_path / "package.json").write_text(content, encoding="utf-8")

        with pytest.raises(ManifestNotFoundError):
            ManifestStore(tmp_path).load()

    def test_save_preserves_unrelated_fields(self, tmp_path: Path) -> None:
        document = {
            "name": "app",
            "version": "1.0.0",
            "scripts": {"build": "webpack"},
            "dependencies": {"react": "^17.0.2"},
        }
        (tmp_path / "package.json").write_text(json.dumps(document), encoding="utf-8")
        store = ManifestStore(tmp_path)

        manifest = store.load()
        manifest.set_version(DependencyType.DEPENDENCIES, "react", "18.2.0")
        store.save(manifest)

        written = (tmp_path / "package.json").read_text(encoding="utf-8")
        assert written.endswith("}\n")
        assert '  "name": "app"' in written
        assert list(json.loads(written)) == ["name", "version", "scripts", "dependencies"]
        assert json.loads(written)["dependencies"] == {"react": "18.2.0"}
