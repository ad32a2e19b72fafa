"""Unit tests for mfdeps.core.adder."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from mfdeps.core.adder import add_items, parse_item
from mfdeps.core.catalog_store import CatalogStore
from mfdeps.exceptions import CategoryNotFoundError, MfDepsError
from mfdeps.models import DependencyType, Manifest


@pytest.fixture
def store(tmp_path: Path) -> CatalogStore:
    (tmp_path / "core.json").write_text(
        json.dumps({"react": "18.2.0", "react-dom": "18.2.0"}), encoding="utf-8"
    )
    (tmp_path / "testing.json").write_text(json.dumps({"jest": "29.7.0"}), encoding="utf-8")
    return CatalogStore(tmp_path)


@pytest.mark.unit
class TestParseItem:
    """Tests for parse_item."""

    def test_category(self) -> None:
        assert parse_item("core") == ("core", None)

    def test_category_and_package(self) -> None:
        assert parse_item("core:react") == ("core", "react")

    def test_scoped_package(self) -> None:
        assert parse_item("build:@babel/core") == ("build", "@babel/core")

    @pytest.mark.parametrize("item", ["", ":react", "core:", "  "])
    def test_malformed(self, item: str) -> None:
        with pytest.raises(MfDepsError):
            parse_item(item)


@pytest.mark.unit
class TestAddItems:
    """Tests for add_items."""

    def test_whole_category(self, store: CatalogStore) -> None:
        manifest = Manifest({"name": "app"})

        result = add_items(manifest, store, ["core"])

        assert result.manifest.data["dependencies"] == {
            "react": "18.2.0",
            "react-dom": "18.2.0",
        }
        assert result.categories == [("core", DependencyType.DEPENDENCIES)]
        assert manifest.data == {"name": "app"}

    def test_single_package_into_dev(self, store: CatalogStore) -> None:
        result = add_items(
            Manifest(), store, ["core:react"], target=DependencyType.DEV_DEPENDENCIES
        )

        assert result.manifest.data == {"devDependencies": {"react": "18.2.0"}}
        (entry,) = result.added
        assert (entry.name, entry.version, entry.category) == ("react", "18.2.0", "core")

    def test_overwrites_existing_declaration(self, store: CatalogStore) -> None:
        manifest = Manifest({"dependencies": {"react": "^17.0.2", "lodash": "4.17.21"}})

        result = add_items(manifest, store, ["core:react"])

        assert result.manifest.data["dependencies"] == {
            "react": "18.2.0",
            "lodash": "4.17.21",
        }

    def test_missing_package_is_reported(self, store: CatalogStore) -> None:
        result = add_items(Manifest(), store, ["core:vue", "testing"])

        assert result.missing == [("core", "vue")]
        assert result.manifest.data == {"dependencies": {"jest": "29.7.0"}}
        assert result.changed is True

    def test_missing_category_raises(self, store: CatalogStore) -> None:
        with pytest.raises(CategoryNotFoundError):
            add_items(Manifest(), store, ["ui"])

    def test_default_behavior_redirects_categories(self, store: CatalogStore) -> None:
        behavior = {"testing": DependencyType.DEV_DEPENDENCIES}

        result = add_items(
            Manifest(), store, ["testing", "core"], default_behavior=behavior
        )

        assert result.manifest.data == {
            "devDependencies": {"jest": "29.7.0"},
            "dependencies": {"react": "18.2.0", "react-dom": "18.2.0"},
        }

    def test_explicit_target_wins_over_default_behavior(self, store: CatalogStore) -> None:
        behavior = {"testing": DependencyType.DEV_DEPENDENCIES}

        result = add_items(
            Manifest(),
            store,
            ["testing"],
            target=DependencyType.PEER_DEPENDENCIES,
            default_behavior=behavior,
        )

        assert result.manifest.data == {"peerDependencies": {"jest": "29.7.0"}}

    def test_empty_category_creates_bucket(self, tmp_path: Path) -> None:
        (tmp_path / "empty.json").write_text("{}", encoding="utf-8")

        result = add_items(Manifest(), CatalogStore(tmp_path), ["empty"])

        assert result.manifest.data == {"dependencies": {}}
        assert result.changed is False
