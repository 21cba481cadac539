from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager, nullcontext, suppress
from dataclasses import dataclass
from time import perf_counter

from .metrics import MostRecentNVar, StatsVar


@dataclass
class LiveVariable:
    """A named timing metric exposed for inspection while the agent runs."""

    name: str
    description: str
    getter: Callable[[], str]
    stats_var: StatsVar

    def get_value(self) -> str:
        """Return the current summary using the getter."""
        return self.getter()

    def record_value(self, value: float) -> None:
        """Record a value to the statistics tracker."""
        self.stats_var.record(value)


class LiveVariableRegistry:
    """Registry for all ``LiveVariable`` instances.

    When ``strict`` is ``True`` (the default), recording to a metric that has
    not been registered raises immediately. Test fixtures that clear the
    registry should set ``strict = False`` so timing code in the decision
    core does not crash on metrics registered by an earlier test.
    """

    def __init__(self) -> None:
        self._variables: dict[str, LiveVariable] = {}
        self.strict: bool = True

    def register_metric(
        self,
        name: str,
        description: str = "",
        num_samples: int = 1000,
    ) -> LiveVariable:
        """Register a metric variable that only tracks statistics.

        Args:
            name: Variable name, dotted by subsystem (``"ai.select_ms"``).
            description: Human-readable description.
            num_samples: Number of recent samples to keep.

        Returns:
            The created LiveVariable.
        """
        if name in self._variables:
            raise ValueError(f"Live variable '{name}' already registered")

        stats_var = MostRecentNVar(num_samples)

        def getter() -> str:
            if stats_var.sample_count == 0:
                return "No samples"
            return stats_var.get_percentiles_string()

        live_var = LiveVariable(
            name=name,
            description=description,
            getter=getter,
            stats_var=stats_var,
        )
        self._variables[name] = live_var
        return live_var

    def ensure_metric(
        self, name: str, description: str = "", num_samples: int = 1000
    ) -> LiveVariable:
        """Return the metric called ``name``, registering it on first use.

        Behaviors come and go at runtime, so their per-behavior metrics
        cannot be declared up front.
        """
        var = self._variables.get(name)
        if var is not None:
            return var
        return self.register_metric(name, description, num_samples)

    def get_variable(self, name: str) -> LiveVariable | None:
        """Retrieve a registered ``LiveVariable`` by name."""
        return self._variables.get(name)

    def get_stats_variables(self, prefix: str = "") -> list[LiveVariable]:
        """Return the metrics whose names start with ``prefix``, sorted by name."""
        return sorted(
            (var for var in self._variables.values() if var.name.startswith(prefix)),
            key=lambda v: v.name,
        )

    def record_metric(self, name: str, value: float) -> None:
        """Record a value to a metric variable.

        Raises:
            KeyError: If the metric name is not registered.
        """
        var = self.get_variable(name)
        if var is None:
            raise KeyError(f"Metric '{name}' is not registered")
        var.record_value(value)


# Global registry instance used throughout the application
live_variable_registry = LiveVariableRegistry()


# Timing helper for recording wall-clock time to a metric:
#   with record_time_live_variable("ai.select_ms"): ...
@contextmanager
def record_time_live_variable(
    metric_name: str, registry: LiveVariableRegistry | None = None
) -> Iterator[None]:
    """Record elapsed wall-clock time (ms) to the named metric.

    In strict mode (the default), raises ``KeyError`` if the metric is not
    registered. When the registry has ``strict`` set to ``False``,
    unregistered metrics are silently skipped.
    """
    registry = registry or live_variable_registry
    start = perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (perf_counter() - start) * 1000
        ctx = nullcontext() if registry.strict else suppress(KeyError)
        with ctx:
            registry.record_metric(metric_name, elapsed_ms)
