from __future__ import annotations

import pytest

from mfdeps.models import (
    CategoryConflict,
    ChangeOutcome,
    DependencyType,
    PendingChange,
    ReconcileResult,
    RefreshEntry,
    RefreshReport,
    RefreshStatus,
    VersionRelation,
)


def _change(**overrides) -> PendingChange:
    values = dict(
        name="react",
        bucket=DependencyType.DEPENDENCIES,
        current="^17.0.2",
        target="18.2.0",
        category="core",
    )
    values.update(overrides)
    return PendingChange(**values)


@pytest.mark.unit
class TestPendingChange:
    """Tests for PendingChange."""

    def test_unclassified_defaults(self) -> None:
        change = _change()

        assert change.outcome is ChangeOutcome.PLANNED
        assert change.is_downgrade is False
        assert change.is_range_satisfied is None
        assert change.is_applied is False

    def test_relation_accessors(self) -> None:
        change = _change(relation=VersionRelation(is_downgrade=True))

        assert change.is_downgrade is True

    def test_to_json(self) -> None:
        change = _change(
            relation=VersionRelation(is_range_satisfied=True),
            outcome=ChangeOutcome.SKIPPED_SATISFIED,
        )

        assert change.to_json() == {
            "name": "react",
            "bucket": "dependencies",
            "current": "^17.0.2",
            "target": "18.2.0",
            "category": "core",
            "is_downgrade": False,
            "is_range_satisfied": True,
            "outcome": "skipped_satisfied",
            "error": None,
        }

    def test_outcome_labels(self) -> None:
        assert ChangeOutcome.SKIPPED_SATISFIED.label == "already satisfied"
        assert ChangeOutcome.APPLIED.label == "updated"


@pytest.mark.unit
class TestReconcileResult:
    def test_filters(self) -> None:
        applied = _change(outcome=ChangeOutcome.APPLIED)
        declined = _change(
            name="vue", bucket=DependencyType.DEV_DEPENDENCIES, outcome=ChangeOutcome.DECLINED
        )
        result = ReconcileResult(changes=[applied, declined])

        assert result.applied == [applied]
        assert result.changes_for(DependencyType.DEV_DEPENDENCIES) == [declined]
        assert result.with_outcome(ChangeOutcome.DECLINED) == [declined]
        assert result.has_changes is True
        assert ReconcileResult().is_up_to_date is True


@pytest.mark.unit
def test_category_conflict_display() -> None:
    conflict = CategoryConflict(
        name="react",
        bucket=DependencyType.DEPENDENCIES,
        candidates={"core": "18.2.0", "ui": "18.3.0"},
        chosen="ui",
    )

    assert conflict.to_display_string() == (
        "react (dependencies) uses ui=18.3.0; ignored core=18.2.0"
    )


@pytest.mark.unit
class TestRefreshReport:
    """Tests for RefreshEntry and RefreshReport."""

    @pytest.mark.parametrize(
        "entry, status, resulting",
        [
            (RefreshEntry("a", "1.0.0", latest="1.1.0"), RefreshStatus.UPDATED, "1.1.0"),
            (RefreshEntry("a", "1.0.0", latest="1.0.0"), RefreshStatus.UNCHANGED, "1.0.0"),
            (RefreshEntry("a", "1.0.0", error="boom"), RefreshStatus.FAILED, "1.0.0"),
        ],
    )
    def test_entry_status(
        self, entry: RefreshEntry, status: RefreshStatus, resulting: str
    ) -> None:
        assert entry.status is status
        assert entry.resulting_version == resulting

    def test_catalog_keeps_failed_versions(self) -> None:
        report = RefreshReport(
            category="core",
            entries=[
                RefreshEntry("a", "1.0.0", latest="1.1.0"),
                RefreshEntry("b", "2.0.0", error="not found"),
            ],
        )

        assert report.catalog == {"a": "1.1.0", "b": "2.0.0"}
        assert [e.name for e in report.updated] == ["a"]
        assert [e.name for e in report.failed] == ["b"]
        assert report.has_updates is True
