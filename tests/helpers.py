from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from dungeonmind.ai.behavior import INDIFFERENT, Behavior, Vote
from dungeonmind.ai.registry import BehaviorFactory, BehaviorRegistry
from dungeonmind.ai.urgency import Urgency


class ScriptedBehavior(Behavior):
    """A behavior whose answers are set directly by the test.

    ``prepare()`` proposes ``f"{name}-action"`` at ``next_urgency`` (nothing
    when it is None) and then runs ``on_prepare`` if one is set.
    """

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.next_urgency: Urgency | str | None = None
        self.pickup_vote: Any = INDIFFERENT
        self.drop_vote: Any = INDIFFERENT
        self.on_prepare: Callable[[], None] | None = None
        self.prepare_calls = 0
        self.pickup_calls = 0
        self.messages: list[tuple[str, tuple[Any, ...]]] = []

    def prepare(self) -> None:
        self.prepare_calls += 1
        if self.next_urgency is not None:
            self._action = f"{self.name}-action"
            self.urgency = self.next_urgency
            self.currently = f"doing {self.name.lower()}"
        if self.on_prepare is not None:
            self.on_prepare()

    def pickup(self, item: Any) -> Vote:
        self.pickup_calls += 1
        return self.pickup_vote

    def drop(self, item: Any) -> Vote:
        return self.drop_vote


class ListeningBehavior(ScriptedBehavior):
    """Scripted behavior that also handles the ``new_level`` message."""

    def msg_new_level(self, *args: Any) -> None:
        self.messages.append(("new_level", args))


def make_catalog(names: Iterable[str]) -> dict[str, BehaviorFactory]:
    """Catalog building a ScriptedBehavior for each name."""
    return {name: ScriptedBehavior for name in names}


def make_registry(*names: str, extra: Iterable[str] = ()) -> BehaviorRegistry:
    """Registry populated with ``names``, able to build ``extra`` later."""
    registry = BehaviorRegistry(make_catalog([*names, *extra]))
    registry.populate(names)
    return registry


def scripted(registry: BehaviorRegistry, name: str) -> ScriptedBehavior:
    behavior = registry.get(name)
    assert isinstance(behavior, ScriptedBehavior)
    return behavior


@dataclass
class DummyActor:
    hp: int = 10
    speed: float = 12
    gold: int = 0


@dataclass
class DummyItem:
    name: str = "dagger"
    quantity: int = 1
    cost: int | None = None

    def __str__(self) -> str:
        return self.name


@dataclass
class DummyMonster:
    average_melee_damage: float = 1.0
    maximum_melee_damage: float = 1.0
    speed: float = 12
    always_avoid_melee: bool = False
