"""Shared GitHub label conventions.

A report request moves through these labels:

    query-created -> query-processing -> query-succeeded | query-error

The issue form applies `query-created`; everything after that is applied by the
report. Names are stable and human-readable so repos can be bootstrapped
idempotently (create if missing) and users can filter requests by outcome.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class LabelSpec:
    name: str
    color: str
    description: str


LABEL_QUERY_CREATED = "query-created"
LABEL_QUERY_PROCESSING = "query-processing"
LABEL_QUERY_SUCCEEDED = "query-succeeded"
LABEL_QUERY_ERROR = "query-error"


FIXED_LABEL_SPECS: tuple[LabelSpec, ...] = (
    LabelSpec(
        name=LABEL_QUERY_CREATED,
        color="c5def5",
        description="Copilot seat report: request received",
    ),
    LabelSpec(
        name=LABEL_QUERY_PROCESSING,
        color="fbca04",
        description="Copilot seat report: query in progress",
    ),
    LabelSpec(
        name=LABEL_QUERY_SUCCEEDED,
        color="0e8a16",
        description="Copilot seat report: user list posted",
    ),
    LabelSpec(
        name=LABEL_QUERY_ERROR,
        color="d73a4a",
        description="Copilot seat report: query failed",
    ),
)


def fixed_label_spec_by_name(name: str) -> LabelSpec | None:
    normalized = name.strip()
    for spec in FIXED_LABEL_SPECS:
        if spec.name == normalized:
            return spec
    return None
