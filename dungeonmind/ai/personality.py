"""
Personality: base class for agents driven by behaviors.

A Personality owns the behavior registry and wires the arbiter, the
consensus voter and the threat heuristic to one actor. Concrete agents
subclass it and override ``sort_behaviors`` to say which behaviors they
run and in what order; the order is asked for again at the start of every
decision cycle, so it can depend on the situation.

Typical use from a run loop:

    personality = Explorer(catalog=BEHAVIORS, actor=player)
    action = personality.next_action()
    if personality.pickup(item):
        ...
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from contextlib import AbstractContextManager, nullcontext
from typing import Any, Protocol

from dungeonmind import config
from dungeonmind.types import Action, BehaviorName
from dungeonmind.util.live_vars import (
    LiveVariableRegistry,
    live_variable_registry,
    record_time_live_variable,
)

from .arbiter import Arbiter, Decision
from .behavior import Behavior
from .consensus import ConsensusVoter, Item, Purse, VoteResult
from .registry import BehaviorFactory, BehaviorRegistry, BehaviorSelector
from .threat import CombatStats, MonsterProfile, Threat, evaluate_threat

logger = logging.getLogger(__name__)

DECIDE_METRIC = "ai.decide_ms"

# Every timing metric the decision core records starts with this.
AI_METRIC_PREFIX = "ai."


class ActorState(CombatStats, Purse, Protocol):
    """Everything the decision core reads about the actor it plays."""


class Personality:
    """Base class for AIs with behaviors and personalities.

    Args:
        catalog: Factories for every behavior this personality may run.
        actor: Live view of the actor's health, speed and gold.
        live_vars: Where timing metrics go. Defaults to the global registry.
    """

    def __init__(
        self,
        catalog: Mapping[BehaviorName, BehaviorFactory],
        actor: ActorState,
        live_vars: LiveVariableRegistry | None = None,
    ) -> None:
        self.actor = actor
        self.live_vars = live_vars or live_variable_registry
        # Status line of the last decision, "<behavior>:<what it is doing>".
        self.currently = "?"

        self.registry = BehaviorRegistry(catalog)
        self.registry.populate(self.sort_behaviors() or ())

        self.arbiter = Arbiter(
            self.registry, policy=self._prioritize, live_vars=self.live_vars
        )
        self.voter = ConsensusVoter(self.registry, actor)

    # ------------------------------------------------------------------
    # Priority policy
    # ------------------------------------------------------------------
    def sort_behaviors(self) -> Sequence[BehaviorName] | None:
        """Return the behaviors to run, highest priority first.

        Called once at construction to build the initial behavior set and
        again at the start of every decision cycle. Subclasses must
        override this; returning None keeps the current order.
        """
        logger.error(f"{type(self).__name__} must override sort_behaviors")
        return None

    def _prioritize(self) -> list[BehaviorName] | None:
        order = self.sort_behaviors()
        if order is None:
            return None

        if len(set(order)) != len(order):
            logger.debug(f"Ignoring repeated behaviors in ordering: {list(order)}")
            order = list(dict.fromkeys(order))

        # Behaviors removed at runtime may still be named by a static
        # ordering; behaviors added at runtime may not be named at all.
        ranked = [name for name in order if name in self.registry]
        dropped = [name for name in order if name not in self.registry]
        if dropped:
            logger.debug(f"Ignoring unregistered behaviors in ordering: {dropped}")
        ranked.extend(
            name for name in self.registry.priorities() if name not in ranked
        )
        return ranked

    # ------------------------------------------------------------------
    # Behavior lifecycle
    # ------------------------------------------------------------------
    def get_behavior(self, name: BehaviorName) -> Behavior | None:
        return self.registry.get(name)

    def add_behavior(
        self,
        name: BehaviorName,
        *,
        before: BehaviorName | None = None,
        after: BehaviorName | None = None,
    ) -> Behavior:
        return self.registry.add(name, before=before, after=after)

    def remove_behavior(self, selector: BehaviorSelector) -> list[BehaviorName]:
        return self.registry.remove(selector)

    @property
    def prioritized_behaviors(self) -> tuple[BehaviorName, ...]:
        return self.registry.priorities()

    # ------------------------------------------------------------------
    # Decisions
    # ------------------------------------------------------------------
    def next_behavior(self) -> Behavior | None:
        """Prepare and weigh all behaviors, returning the most urgent one."""
        return self.arbiter.select_behavior()

    def decide(self) -> Decision:
        """Run one decision cycle and update ``currently``.

        Raises:
            NoBehaviorSelectedError: No behavior had any urgency.
        """
        with self._decide_timer():
            decision = self.arbiter.decide()
        self.currently = decision.status
        return decision

    def _decide_timer(self) -> AbstractContextManager[None]:
        if not config.AI_TIMING_METRICS_ENABLED:
            return nullcontext()
        self.live_vars.ensure_metric(
            DECIDE_METRIC,
            description="Time spent in one full decision cycle",
            num_samples=config.AI_METRIC_SAMPLES,
        )
        return record_time_live_variable(DECIDE_METRIC, self.live_vars)

    def next_action(self) -> Action:
        """Choose a behavior and return the action it wants performed."""
        return self.decide().action

    def pickup(self, item: Item) -> VoteResult:
        """Consult each behavior about picking up ``item``."""
        return self.voter.pickup(item)

    def drop(self, item: Item) -> VoteResult:
        """Consult each behavior about dropping ``item``."""
        return self.voter.drop(item)

    def evaluate_threat(self, monster: MonsterProfile) -> Threat:
        """Evaluate the threat ``monster`` poses to our actor."""
        return evaluate_threat(monster, self.actor)

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------
    def send_message(self, message: str, *args: Any, **kwargs: Any) -> int:
        """Deliver ``message`` to every behavior that handles it.

        A behavior handles ``message`` by defining ``msg_<message>``.
        Handlers run synchronously; return values are ignored and an
        exception in one handler is logged without stopping the others.

        Returns:
            How many behaviors handled the message.
        """
        return self.registry.notify(message, *args, **kwargs)

    # ------------------------------------------------------------------
    # Instrumentation
    # ------------------------------------------------------------------
    def timing_report(self) -> list[str]:
        """Summarize the decision core's timing metrics, one line per metric.

        Lines look like ``"ai.select_ms: p50=0.12 p95=0.31 p99=0.40"``,
        sorted by metric name. Empty when timing metrics are disabled.
        """
        report = [
            f"{var.name}: {var.get_value()}"
            for var in self.live_vars.get_stats_variables(AI_METRIC_PREFIX)
        ]
        for line in report:
            logger.debug(line)
        return report
