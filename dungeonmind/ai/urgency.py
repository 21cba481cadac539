"""
Urgency labels and the per-behavior urgency query.

Every decision cycle each behavior is asked how badly it wants to act. It
answers with one of a small closed set of labels, which are projected onto
integers so the arbiter can take a maximum. The projection is strictly
monotonic and total over the label set; anything outside it is a bug in the
behavior and fails loudly.
"""

from __future__ import annotations

import logging
from enum import IntEnum
from time import perf_counter
from typing import TYPE_CHECKING

from dungeonmind import config
from dungeonmind.types import BehaviorName, UrgencyScore
from dungeonmind.util.live_vars import LiveVariableRegistry, live_variable_registry

from .errors import InvalidUrgencyError

if TYPE_CHECKING:
    from .registry import BehaviorRegistry

logger = logging.getLogger(__name__)


class Urgency(IntEnum):
    """How strongly a behavior wants to act this cycle.

    Members compare by their numeric projection, so
    ``Urgency.CRITICAL > Urgency.FALLBACK`` holds.
    """

    NONE = 0
    FALLBACK = 10
    UNIMPORTANT = 20
    NORMAL = 30
    IMPORTANT = 40
    CRITICAL = 50

    @property
    def label(self) -> str:
        return self.name.lower()


def numeric_urgency(urgency: Urgency | str) -> UrgencyScore:
    """Project an urgency label onto its integer score.

    Accepts ``Urgency`` members and their lower-case labels as strings
    (``"critical"``). Plain integers are rejected even when they happen to
    match a score; behaviors must report a label.

    Raises:
        InvalidUrgencyError: ``urgency`` is not one of the six labels.
    """
    if isinstance(urgency, Urgency):
        return UrgencyScore(int(urgency))
    if isinstance(urgency, str) and urgency.islower():
        member = Urgency.__members__.get(urgency.upper())
        if member is not None:
            return UrgencyScore(int(member))
    raise InvalidUrgencyError(f"{urgency!r} is not an urgency")


def prepare_metric_name(name: BehaviorName) -> str:
    """Live metric that receives preparation times for behavior ``name``."""
    return f"ai.prepare.{name}_ms"


def find_urgency(
    registry: BehaviorRegistry,
    name: BehaviorName,
    live_vars: LiveVariableRegistry | None = None,
) -> UrgencyScore:
    """Prepare the behavior called ``name`` and return its urgency score.

    A name with no registered behavior scores 0. This happens when a
    behavior removes another (or itself) in the middle of a cycle, after
    the priority order was snapshotted.

    ``prepare()`` is the one place the decision core hands control to
    behavior code that may change the world. It runs synchronously.
    """
    behavior = registry.get(name)
    if behavior is None:
        logger.info(f"The '{name}' behavior may have disappeared.")
        return numeric_urgency(Urgency.NONE)

    behavior.reset_urgency()
    start = perf_counter()
    behavior.prepare()
    elapsed = perf_counter() - start

    urgency = behavior.urgency
    if urgency is None:
        urgency = Urgency.NONE
    score = numeric_urgency(urgency)

    label = urgency.label if isinstance(urgency, Urgency) else urgency
    logger.debug(f"The {name} behavior has urgency {label}. ({elapsed:6g}s)")

    if config.AI_TIMING_METRICS_ENABLED:
        live_vars = live_vars or live_variable_registry
        metric = live_vars.ensure_metric(
            prepare_metric_name(name),
            description=f"Time spent preparing the {name} behavior",
            num_samples=config.AI_METRIC_SAMPLES,
        )
        metric.record_value(elapsed * 1000)

    return score
