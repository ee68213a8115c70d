""" Decides which narrative event comes next and applies the player's choices.

Responsible for:
 * deciding if an event may trigger given stats and event history
 * keeping the pool of currently eligible events
 * the forced event queue, which always drains before random selection
 * weighted random selection, favoring events deeper in a chain
 * applying a choice: stat changes, forcing, suppression and influences

The engine owns no files and does no I/O. Dynamic state lives in EventState
so it can be snapshot, restored and carried across tier changes.
"""

import os
import logging
import collections
from dataclasses import dataclass
from importlib.resources.abc import Traversable
from typing import Optional, Union
from collections.abc import Iterable, Mapping

import numpy as np

from dominion import util, narrative
from dominion.core import EventId, Event, Choice, Influence, Requirements, StatSet, RESOURCES
from dominion.narrative import EventCatalog


class EventState:
    """ Dynamic event bookkeeping, everything that must be persisted. """

    def __init__(self) -> None:
        # absence means never triggered
        self.trigger_counts:dict[EventId, int] = {}
        # chronological, duplicates allowed
        self.triggered_history:list[EventId] = []
        # never eligible again
        self.suppressed_events:set[EventId] = set()
        self.forced_queue:collections.deque[EventId] = collections.deque()
        # shown but not yet resolved
        self.current_event_id:Optional[EventId] = None

    def copy(self) -> "EventState":
        event_state = EventState()
        event_state.trigger_counts = dict(self.trigger_counts)
        event_state.triggered_history = list(self.triggered_history)
        event_state.suppressed_events = set(self.suppressed_events)
        event_state.forced_queue = collections.deque(self.forced_queue)
        event_state.current_event_id = self.current_event_id
        return event_state


@dataclass(frozen=True)
class EventView:
    """ What the presentation layer needs to show an event. """
    title:str
    description_lines:tuple[str, ...]
    choice_lines:tuple[tuple[str, ...], ...]


class EventManager:
    def __init__(
        self,
        catalog:EventCatalog,
        event_state:Optional[EventState]=None,
        random:Optional[np.random.Generator]=None,
    ) -> None:
        self.logger = logging.getLogger(util.fullname(self))
        self.catalog = catalog
        self.event_state = event_state if event_state is not None else EventState()
        self.random = random if random is not None else np.random.default_rng()

        # derived from catalog and event_state, never persisted
        self._eligible:list[Event] = []

    @classmethod
    def load(
        cls,
        tier:int,
        content_root:Optional[Union[str, os.PathLike, Traversable]]=None,
        event_state:Optional[EventState]=None,
        random:Optional[np.random.Generator]=None,
    ) -> "EventManager":
        return cls(narrative.load_catalog(tier, content_root), event_state, random)

    # catalog access

    @property
    def tier(self) -> int:
        return self.catalog.tier

    def get_event(self, event_id:EventId) -> Optional[Event]:
        return self.catalog.get(event_id)

    @property
    def all_events(self) -> list[Event]:
        return self.catalog.events()

    @property
    def eligible_events(self) -> list[Event]:
        return list(self._eligible)

    @property
    def current_event(self) -> Optional[Event]:
        if self.event_state.current_event_id is None:
            return None
        return self.catalog.get(self.event_state.current_event_id)

    # dynamic state accessors
    # setters are a trusted bulk replace for restoring saves, nothing is
    # re-evaluated

    @property
    def trigger_counts(self) -> dict[EventId, int]:
        return dict(self.event_state.trigger_counts)

    @trigger_counts.setter
    def trigger_counts(self, trigger_counts:Mapping[EventId, int]) -> None:
        self.event_state.trigger_counts = dict(trigger_counts)

    @property
    def triggered_history(self) -> list[EventId]:
        return list(self.event_state.triggered_history)

    @triggered_history.setter
    def triggered_history(self, history:Iterable[EventId]) -> None:
        self.event_state.triggered_history = list(history)

    @property
    def suppressed_events(self) -> set[EventId]:
        return set(self.event_state.suppressed_events)

    @suppressed_events.setter
    def suppressed_events(self, suppressed:Iterable[EventId]) -> None:
        self.event_state.suppressed_events = set(suppressed)

    @property
    def forced_queue(self) -> list[EventId]:
        return list(self.event_state.forced_queue)

    @forced_queue.setter
    def forced_queue(self, forced:Iterable[EventId]) -> None:
        self.event_state.forced_queue = collections.deque(forced)

    @property
    def current_event_id(self) -> Optional[EventId]:
        return self.event_state.current_event_id

    @current_event_id.setter
    def current_event_id(self, event_id:Optional[EventId]) -> None:
        self.event_state.current_event_id = event_id

    def triggers(self, event_id:EventId) -> int:
        return self.event_state.trigger_counts.get(event_id, 0)

    # eligibility

    def _stats_satisfied(self, requirements:Requirements, stats:StatSet) -> bool:
        for stat in RESOURCES:
            value = stats.get(stat)
            low = requirements.min_stats.get(stat)
            high = requirements.max_stats.get(stat)
            if low is not None and value < low:
                return False
            if high is not None and value > high:
                return False
        return True

    def can_trigger(self, event_id:EventId, stats:StatSet) -> bool:
        """ True if the event may fire now.

        Does not modify any state and does not consider the forced queue. """

        event = self.catalog.get(event_id)
        if event is None:
            return False

        if not event.unlimited and self.triggers(event_id) >= event.max_triggered:
            return False

        if any(self.triggers(ref.id) == 0 for ref in event.requirements.required_events):
            return False

        if not self._stats_satisfied(event.requirements, stats):
            return False

        if event_id in self.event_state.suppressed_events:
            return False

        return True

    # scheduling

    def _admit_forced(self, event:Event) -> bool:
        """ Enqueues a forced event unless that could exceed its trigger cap.

        The cap is triggers + pending < max_triggered. Unlimited events have
        no cap to apply, so instead of always admitting them they are only
        admitted while no instance is pending. Otherwise every
        recompute_pool would grow the queue by one more copy. """
        in_queue = self.event_state.forced_queue.count(event.id)
        if event.unlimited:
            admit = in_queue == 0
        else:
            admit = self.triggers(event.id) + in_queue < event.max_triggered

        if admit:
            self.logger.debug(f'enqueuing forced event {event.id}')
            self.event_state.forced_queue.append(event.id)
        return admit

    def recompute_pool(self, stats:StatSet) -> None:
        """ Rebuilds the eligible pool, enqueuing eligible forced events. """
        self._eligible.clear()
        for event in self.catalog.values():
            if self.can_trigger(event.id, stats):
                if event.forced:
                    self._admit_forced(event)
                self._eligible.append(event)

    def _record_trigger(self, event:Event) -> None:
        self.event_state.trigger_counts[event.id] = self.triggers(event.id) + 1
        self.event_state.triggered_history.append(event.id)
        self.event_state.current_event_id = event.id

    def _select(self, event:Event, stats:StatSet) -> Event:
        self._record_trigger(event)
        self.recompute_pool(stats)
        return event

    def select_next(self, stats:StatSet) -> Optional[Event]:
        """ Chooses the next event to present, or None if there is nothing left.

        Forced events are returned first, in queue order. Otherwise an
        eligible event is drawn at random weighted by its required event
        count. The chosen event is recorded as triggered. """

        while len(self.event_state.forced_queue) > 0:
            event_id = self.event_state.forced_queue.popleft()
            event = self.catalog.get(event_id)
            if event is None or not self.can_trigger(event_id, stats):
                self.logger.debug(f'discarding stale forced event {event_id}')
                continue
            self.logger.debug(f'selected forced event {event_id}')
            return self._select(event, stats)

        if len(self._eligible) == 0:
            return None

        weights = np.array([e.weight for e in self._eligible], dtype=np.int64)
        cumulative = np.cumsum(weights)
        r = self.random.integers(cumulative[-1])
        idx = int(np.searchsorted(cumulative, r, side="right"))
        event = self._eligible[idx]
        self.logger.debug(f'selected event {event.id} from {len(self._eligible)} candidates')
        return self._select(event, stats)

    def trigger_event(self, event_id:EventId, stats:StatSet) -> Optional[Event]:
        """ Triggers a specific event directly, if it is eligible. """
        if not self.can_trigger(event_id, stats):
            return None
        return self._select(self.catalog[event_id], stats)

    def peek_forced(self) -> Optional[Event]:
        if len(self.event_state.forced_queue) == 0:
            return None
        return self.catalog.get(self.event_state.forced_queue[0])

    def manual_enqueue_forced(self, event_id:EventId) -> bool:
        """ Pushes an event onto the forced queue without any cap. """
        if event_id not in self.catalog:
            return False
        self.event_state.forced_queue.append(event_id)
        return True

    # resolution

    def winning_influence(self, choice:Choice) -> Optional[Influence]:
        """ The highest priority influence whose target has triggered.

        Ties go to the first declared. """
        active = [x for x in choice.influences if self.triggers(x.target.id) > 0]
        if len(active) == 0:
            return None
        return max(active, key=lambda x: x.priority)

    def resolve(self, event:Optional[Event], choice:Optional[Choice], stats:StatSet) -> bool:
        """ Applies the effects of choosing choice for event.

        The current event was already recorded when it was selected. Any
        other event must be eligible and is recorded before its effects are
        applied. Misuse is logged and ignored. Returns True if the choice was
        applied. """

        if event is None or choice is None:
            self.logger.warning("cannot resolve without an event and a choice")
            return False

        if self.catalog.get(event.id) is None:
            self.logger.warning(f'cannot resolve unknown event {event.id}')
            return False

        if choice not in event.choices:
            self.logger.warning(f'choice is not one of event {event.id} choices')
            return False

        if event.id != self.event_state.current_event_id:
            if not self.can_trigger(event.id, stats):
                self.logger.warning(f'cannot resolve ineligible event {event.id}')
                return False
            self._record_trigger(event)

        self.event_state.current_event_id = None

        stats.apply(choice.stat_change)

        if choice.forces is not None:
            forced = self.catalog.resolve(choice.forces)
            if forced is None:
                self.logger.warning(f'event {event.id} forces unknown event {choice.forces.id}')
            else:
                self._admit_forced(forced)

        for ref in choice.suppresses:
            if ref.id not in self.catalog:
                self.logger.warning(f'event {event.id} suppresses unknown event {ref.id}')
            else:
                self.event_state.suppressed_events.add(ref.id)

        influence = self.winning_influence(choice)
        if influence is not None:
            self.logger.debug(f'applying influence of event {influence.target.id} on event {event.id}')
            stats.apply(influence.stat_change)

        self.recompute_pool(stats)
        return True

    def outcome_text(self, choice:Optional[Choice]) -> tuple[str, ...]:
        """ Outcome lines to show for choice.

        Falls back from the winning influence's override text, to the choice
        outcome text, to the choice's own text. """
        if choice is None:
            return ()

        influence = self.winning_influence(choice)
        if influence is not None and len(influence.override_outcome_text) > 0:
            return influence.override_outcome_text
        if len(choice.outcome_text) > 0:
            return choice.outcome_text
        return choice.text

    def event_view(self, event:Event) -> EventView:
        return EventView(
            event.title,
            event.description,
            tuple(choice.text for choice in event.choices),
        )


def rebind(
    event_manager:EventManager,
    tier:int,
    content_root:Optional[Union[str, os.PathLike, Traversable]]=None,
) -> EventManager:
    """ Binds dynamic event state to the catalog for a new tier.

    The old manager is left untouched. The eligible pool of the new manager
    is empty until recompute_pool is called. """

    event_manager.logger.info(f'rebinding event state from tier {event_manager.tier} to tier {tier}')
    return EventManager.load(
        tier,
        content_root,
        event_state=event_manager.event_state.copy(),
        random=event_manager.random,
    )
