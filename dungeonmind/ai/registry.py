"""
BehaviorRegistry: owns the live behavior instances and their priority order.

The registry maps behavior names to instances built from a catalog of
factories. Alongside it sits the PriorityList, the order in which the
arbiter consults behaviors. The two always hold exactly the same names;
every mutation goes through the registry so neither side can drift.

Behaviors are instantiated once, when first added, and live until removed.
Re-adding a registered name only moves it in the priority order.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from typing import Any, TypeAlias

from dungeonmind.types import BehaviorName, BehaviorPredicate

from .behavior import Behavior
from .errors import InvalidBehaviorError

logger = logging.getLogger(__name__)

BehaviorFactory: TypeAlias = Callable[[BehaviorName], Behavior]
BehaviorSelector: TypeAlias = BehaviorName | BehaviorPredicate


class PriorityList:
    """Ordered, duplicate-free sequence of behavior names.

    Earlier names win urgency ties during arbitration. The registry is the
    only writer; readers take snapshots via ``snapshot()``.
    """

    def __init__(self, names: Iterable[BehaviorName] = ()) -> None:
        self._names: list[BehaviorName] = []
        for name in names:
            self.append(name)

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[BehaviorName]:
        return iter(self._names)

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __repr__(self) -> str:
        return f"PriorityList({self._names!r})"

    def snapshot(self) -> tuple[BehaviorName, ...]:
        """Return the current order, unaffected by later mutation."""
        return tuple(self._names)

    def index(self, name: BehaviorName) -> int:
        return self._names.index(name)

    def append(self, name: BehaviorName) -> None:
        if name in self._names:
            raise ValueError(f"'{name}' is already prioritized")
        self._names.append(name)

    def insert(self, position: int, name: BehaviorName) -> None:
        if name in self._names:
            raise ValueError(f"'{name}' is already prioritized")
        self._names.insert(position, name)

    def discard(self, name: BehaviorName) -> None:
        if name in self._names:
            self._names.remove(name)

    def retain(self, keep: Callable[[BehaviorName], bool]) -> None:
        """Drop every name for which ``keep`` is false, preserving order."""
        self._names = [name for name in self._names if keep(name)]

    def replace(self, names: Sequence[BehaviorName]) -> None:
        """Reorder to ``names``, which must hold the current names exactly once."""
        if len(set(names)) != len(names):
            raise ValueError(f"Priority order contains duplicates: {list(names)}")
        if set(names) != set(self._names):
            missing = sorted(set(self._names) - set(names))
            unknown = sorted(set(names) - set(self._names))
            raise ValueError(
                f"Priority order must name every registered behavior "
                f"(missing={missing}, unknown={unknown})"
            )
        self._names = list(names)


class BehaviorRegistry:
    """Owns behavior instances, keyed by name, plus their priority order.

    Args:
        catalog: Factory for every behavior name this agent knows how to
            build. Factories receive the name and return a fresh Behavior.
    """

    def __init__(self, catalog: Mapping[BehaviorName, BehaviorFactory]) -> None:
        self.catalog: dict[BehaviorName, BehaviorFactory] = dict(catalog)
        self._behaviors: dict[BehaviorName, Behavior] = {}
        self.priority = PriorityList()

    def __len__(self) -> int:
        return len(self._behaviors)

    def __contains__(self, name: object) -> bool:
        return name in self._behaviors

    def __iter__(self) -> Iterator[Behavior]:
        return iter(self.behaviors())

    def get(self, name: BehaviorName) -> Behavior | None:
        """Return the behavior registered as ``name``, or None."""
        return self._behaviors.get(name)

    def names(self) -> list[BehaviorName]:
        return list(self._behaviors)

    def behaviors(self) -> list[Behavior]:
        """Every registered behavior, in no particular order.

        Returns a copy so callers may add or remove behaviors while
        iterating.
        """
        return list(self._behaviors.values())

    def priorities(self) -> tuple[BehaviorName, ...]:
        """Snapshot of the current priority order."""
        return self.priority.snapshot()

    def populate(self, names: Iterable[BehaviorName]) -> None:
        """Instantiate the initial behavior set, in priority order.

        Called once at agent start-up. Names already registered are skipped.
        """
        for name in names:
            if name not in self._behaviors:
                self.add(name)

    def _instantiate(self, name: BehaviorName) -> Behavior:
        factory = self.catalog.get(name)
        if factory is None:
            raise InvalidBehaviorError(f"No behavior implementation named '{name}'")
        return factory(name)

    def _anchor_position(self, anchor: BehaviorName, moving: BehaviorName) -> int:
        if anchor == moving:
            raise InvalidBehaviorError(
                f"'{moving}' cannot be placed relative to itself"
            )
        if anchor not in self._behaviors:
            raise InvalidBehaviorError(
                f"Cannot place '{moving}' relative to unregistered '{anchor}'"
            )
        return self.priority.index(anchor)

    def add(
        self,
        name: BehaviorName,
        *,
        before: BehaviorName | None = None,
        after: BehaviorName | None = None,
    ) -> Behavior:
        """Register ``name`` and place it in the priority order.

        With ``before`` or ``after`` the name lands immediately before or
        after that behavior; with neither it goes last. Everything is
        validated before anything changes, so a failed add leaves the
        registry untouched.

        Returns:
            The registered behavior instance.

        Raises:
            InvalidBehaviorError: ``name`` has no catalog entry, both
                constraints were given, or the anchor is not registered.
        """
        if before is not None and after is not None:
            raise InvalidBehaviorError(
                f"'{name}' cannot be placed both before '{before}' and after '{after}'"
            )

        behavior = self._behaviors.get(name)
        if behavior is None:
            behavior = self._instantiate(name)
        # Validate the anchor before touching either structure.
        if before is not None:
            self._anchor_position(before, name)
        elif after is not None:
            self._anchor_position(after, name)

        self._behaviors[name] = behavior
        self.priority.discard(name)
        if before is not None:
            self.priority.insert(self.priority.index(before), name)
        elif after is not None:
            self.priority.insert(self.priority.index(after) + 1, name)
        else:
            self.priority.append(name)

        logger.debug(f"Added behavior {name}; priorities now {list(self.priority)}")
        return behavior

    def remove(self, selector: BehaviorSelector) -> list[BehaviorName]:
        """Remove every behavior matching ``selector``.

        ``selector`` is either an exact name or a predicate over names.
        Unknown names are ignored.

        Returns:
            The names that were removed.
        """
        if callable(selector):
            matches = selector
        else:

            def matches(name: BehaviorName) -> bool:
                return name == selector

        removed = [name for name in self._behaviors if matches(name)]
        for name in removed:
            del self._behaviors[name]
        self.priority.retain(lambda name: name in self._behaviors)

        if removed:
            logger.debug(f"Removed behaviors {removed}")
        return removed

    def notify(self, message: str, *args: Any, **kwargs: Any) -> int:
        """Call ``msg_<message>`` on every behavior that defines it.

        Fire-and-forget: return values are ignored, and a handler that
        raises is logged with its traceback without stopping the others.

        Returns:
            How many behaviors handled the message.
        """
        handled = 0
        for behavior in self.behaviors():
            handler = getattr(behavior, f"msg_{message}", None)
            if not callable(handler):
                continue
            handled += 1
            try:
                handler(*args, **kwargs)
            except Exception:
                logger.exception(f"Error handling message {message} in {behavior.name}")
        return handled

    def prioritize(self, order: Sequence[BehaviorName]) -> None:
        """Replace the priority order.

        Raises:
            ValueError: ``order`` is not a permutation of the registered names.
        """
        self.priority.replace(order)
