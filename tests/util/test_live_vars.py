from __future__ import annotations

import pytest

from dungeonmind.util.live_vars import (
    LiveVariableRegistry,
    live_variable_registry,
    record_time_live_variable,
)


def test_register_metric_and_get_variable() -> None:
    live_variable_registry.register_metric("test.metric", description="A metric")
    var = live_variable_registry.get_variable("test.metric")
    assert var is not None
    assert var.description == "A metric"
    assert live_variable_registry.get_variable("missing") is None


def test_register_duplicate_raises() -> None:
    live_variable_registry.register_metric("dup.metric")
    with pytest.raises(ValueError):
        live_variable_registry.register_metric("dup.metric")


def test_get_stats_variables_filters_by_prefix() -> None:
    live_variable_registry.register_metric("ai.select_ms")
    live_variable_registry.register_metric("render.frame_ms")
    live_variable_registry.register_metric("ai.decide_ms")

    names = [v.name for v in live_variable_registry.get_stats_variables("ai.")]
    assert names == ["ai.decide_ms", "ai.select_ms"]
    assert len(live_variable_registry.get_stats_variables()) == 3


def test_ensure_metric_is_idempotent() -> None:
    first = live_variable_registry.ensure_metric("ai.prepare.Fight_ms")
    second = live_variable_registry.ensure_metric("ai.prepare.Fight_ms")
    assert first is second


def test_metric_getter_reports_samples() -> None:
    var = live_variable_registry.register_metric("m", num_samples=10)
    assert var.get_value() == "No samples"
    live_variable_registry.record_metric("m", 4.0)
    assert var.get_value() == "p50=4.00 p95=4.00 p99=4.00"


def test_record_metric_unknown_raises() -> None:
    with pytest.raises(KeyError):
        live_variable_registry.record_metric("missing", 1.0)


def test_record_time_records_one_sample() -> None:
    registry = LiveVariableRegistry()
    var = registry.register_metric("time.block_ms")

    with record_time_live_variable("time.block_ms", registry):
        pass

    assert var.stats_var.sample_count == 1
    assert var.stats_var.get_percentiles()[0] >= 0.0


def test_record_time_strict_and_lenient() -> None:
    registry = LiveVariableRegistry()
    with pytest.raises(KeyError), record_time_live_variable("nope", registry):
        pass

    registry.strict = False
    with record_time_live_variable("nope", registry):
        pass
