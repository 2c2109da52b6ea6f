"""Unit tests for label conventions."""

from __future__ import annotations

from copilot_seat_report.github_labels import FIXED_LABEL_SPECS, fixed_label_spec_by_name


def test_label_lifecycle_names() -> None:
    assert [spec.name for spec in FIXED_LABEL_SPECS] == [
        "query-created",
        "query-processing",
        "query-succeeded",
        "query-error",
    ]


def test_lookup_by_name() -> None:
    spec = fixed_label_spec_by_name(" query-error ")

    assert spec is not None
    assert spec.color == "d73a4a"
    assert fixed_label_spec_by_name("bug") is None
