"""Tests for urgency labels and the per-behavior urgency query."""

from __future__ import annotations

import logging

import pytest

from dungeonmind.ai.errors import InvalidUrgencyError
from dungeonmind.ai.urgency import (
    Urgency,
    find_urgency,
    numeric_urgency,
    prepare_metric_name,
)
from dungeonmind.util.live_vars import live_variable_registry
from tests.helpers import make_registry, scripted


@pytest.mark.parametrize(
    ("label", "expected"),
    [
        (Urgency.CRITICAL, 50),
        (Urgency.IMPORTANT, 40),
        (Urgency.NORMAL, 30),
        (Urgency.UNIMPORTANT, 20),
        (Urgency.FALLBACK, 10),
        (Urgency.NONE, 0),
        ("critical", 50),
        ("fallback", 10),
        ("none", 0),
    ],
)
def test_numeric_urgency_projection(label: Urgency | str, expected: int) -> None:
    assert numeric_urgency(label) == expected


def test_projection_is_strictly_monotonic() -> None:
    ordered = [
        Urgency.CRITICAL,
        Urgency.IMPORTANT,
        Urgency.NORMAL,
        Urgency.UNIMPORTANT,
        Urgency.FALLBACK,
        Urgency.NONE,
    ]
    scores = [numeric_urgency(label) for label in ordered]
    assert scores == sorted(scores, reverse=True)
    assert len(set(scores)) == len(scores)


@pytest.mark.parametrize(
    "label", ["urgent", "", "CRITICAL", "Fallback", 30, None, 2.5]
)
def test_numeric_urgency_rejects_unknown_labels(label: object) -> None:
    with pytest.raises(InvalidUrgencyError, match="is not an urgency"):
        numeric_urgency(label)  # type: ignore[arg-type]


def test_find_urgency_resets_then_prepares() -> None:
    registry = make_registry("Explore")
    explore = scripted(registry, "Explore")
    explore.urgency = Urgency.CRITICAL  # Left over from a previous cycle
    explore.next_urgency = Urgency.UNIMPORTANT

    assert find_urgency(registry, "Explore") == 20
    assert explore.prepare_calls == 1


def test_find_urgency_defaults_to_none_when_nothing_reported() -> None:
    registry = make_registry("Rest")
    scripted(registry, "Rest").urgency = Urgency.IMPORTANT

    assert find_urgency(registry, "Rest") == 0


def test_find_urgency_missing_behavior_logs_and_scores_zero(
    caplog: pytest.LogCaptureFixture,
) -> None:
    registry = make_registry("Explore")

    with caplog.at_level(logging.INFO):
        assert find_urgency(registry, "Ghost") == 0

    assert "The 'Ghost' behavior may have disappeared." in caplog.text
    (record,) = [r for r in caplog.records if "disappeared" in r.getMessage()]
    assert record.levelno == logging.INFO


def test_find_urgency_propagates_malformed_label() -> None:
    registry = make_registry("Broken")
    scripted(registry, "Broken").next_urgency = "whenever"

    with pytest.raises(InvalidUrgencyError):
        find_urgency(registry, "Broken")


def test_find_urgency_records_preparation_time() -> None:
    registry = make_registry("Explore")
    scripted(registry, "Explore").next_urgency = Urgency.NORMAL

    find_urgency(registry, "Explore")
    find_urgency(registry, "Explore")

    metric = live_variable_registry.get_variable(prepare_metric_name("Explore"))
    assert metric is not None
    assert metric.stats_var.sample_count == 2
