"""
Arbiter: picks the one behavior that acts this decision cycle.

Each cycle the arbiter refreshes the priority order, then asks every
behavior in that order for its urgency and keeps the first one with the
highest score. Ties go to the behavior earlier in the order, which is the
only thing the order is used for.

The order is snapshotted before any behavior is prepared. A behavior whose
``prepare()`` adds or removes behaviors changes what the *next* cycle sees;
the running cycle keeps iterating its snapshot, and names that vanished in
the meantime simply score zero.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TypeAlias
from time import perf_counter

from dungeonmind import config
from dungeonmind.types import Action, BehaviorName
from dungeonmind.util.live_vars import LiveVariableRegistry, live_variable_registry

from .behavior import Behavior
from .errors import NoBehaviorSelectedError
from .registry import BehaviorRegistry
from .urgency import find_urgency

logger = logging.getLogger(__name__)

# Returns the order for this cycle, or None to keep the current one.
PriorityPolicy: TypeAlias = Callable[[], Sequence[BehaviorName] | None]

SELECT_METRIC = "ai.select_ms"


@dataclass(frozen=True, slots=True)
class Decision:
    """Outcome of one decision cycle.

    Attributes:
        behavior: Name of the winning behavior.
        action: The action it wants performed.
        status: ``"<behavior>:<what it is currently doing>"`` for display.
    """

    behavior: BehaviorName
    action: Action
    status: str


class Arbiter:
    """Run decision cycles over a BehaviorRegistry.

    Args:
        registry: The behaviors to arbitrate between.
        policy: Called at the start of every cycle to produce the priority
            order. When omitted the registry's current order is used as is.
        live_vars: Where timing metrics go. Defaults to the global registry.
    """

    def __init__(
        self,
        registry: BehaviorRegistry,
        policy: PriorityPolicy | None = None,
        live_vars: LiveVariableRegistry | None = None,
    ) -> None:
        self.registry = registry
        self.policy = policy
        self.live_vars = live_vars or live_variable_registry

    def _refresh_priorities(self) -> tuple[BehaviorName, ...]:
        if self.policy is not None:
            order = self.policy()
            if order is not None:
                self.registry.prioritize(order)
        return self.registry.priorities()

    def select_behavior(self) -> Behavior | None:
        """Prepare every prioritized behavior and return the most urgent.

        Only a strictly greater score replaces the running best, so the
        earliest behavior wins a tie.

        Returns:
            The winning behavior, or None if nothing scored above zero.
        """
        return self._select()[1]

    def _select(self) -> tuple[BehaviorName | None, Behavior | None]:
        priorities = self._refresh_priorities()
        max_urgency = 0
        max_behavior: BehaviorName | None = None

        start = perf_counter()
        for name in priorities:
            urgency = find_urgency(self.registry, name, self.live_vars)
            if urgency > max_urgency:
                max_urgency, max_behavior = urgency, name
        elapsed = perf_counter() - start

        if config.AI_TIMING_METRICS_ENABLED:
            self.live_vars.ensure_metric(
                SELECT_METRIC,
                description="Time spent preparing all behaviors in one cycle",
                num_samples=config.AI_METRIC_SAMPLES,
            ).record_value(elapsed * 1000)

        if max_urgency <= 0 or max_behavior is None:
            return None, None

        logger.debug(
            f"Selecting behavior {max_behavior} with urgency {max_urgency} "
            f"({elapsed:6g}s)."
        )
        # The winner may have been removed by a later behavior's prepare().
        return max_behavior, self.registry.get(max_behavior)

    def decide(self) -> Decision:
        """Run one decision cycle and return the winning action.

        Raises:
            NoBehaviorSelectedError: No behavior reported any urgency.
                Agents are expected to always carry a fallback behavior, so
                this is logged as critical and never swallowed.
        """
        name, behavior = self._select()
        if name is None or behavior is None:
            message = (
                "next_behavior gave no behavior (no behavior with urgency "
                "above 0); the agent has no fallback"
            )
            logger.critical(message)
            raise NoBehaviorSelectedError(message)

        action = behavior.action()
        return Decision(
            behavior=name,
            action=action,
            status=f"{name}:{behavior.currently}",
        )
