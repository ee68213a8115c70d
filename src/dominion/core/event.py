""" Narrative event entities.

Events are loaded from content and never change after loading. Events refer
to each other only through EventRef, a lookup key resolved against the
catalog of the current tier. """

import enum
from dataclasses import dataclass, field
from typing import NewType, Optional, Iterator

from dominion.core.stats import StatOverlay

EventId = NewType("EventId", int)

# maxTriggered value meaning no limit
UNLIMITED = -1


class RefKind(enum.Enum):
    REQUIRED = "required"
    FORCES = "forces"
    SUPPRESSES = "suppresses"
    INFLUENCE = "influence"


@dataclass(frozen=True)
class EventRef:
    id:EventId
    title:str = ""


@dataclass(frozen=True)
class Requirements:
    min_stats:StatOverlay = field(default_factory=StatOverlay)
    max_stats:StatOverlay = field(default_factory=StatOverlay)
    required_events:tuple[EventRef, ...] = ()


@dataclass(frozen=True)
class Influence:
    """ If target has ever triggered, modifies the outcome of its choice.

    stat_change stacks with the choice's own stat change, override text
    replaces the choice's outcome text when non-empty. """

    target:EventRef
    priority:int = 0
    stat_change:StatOverlay = field(default_factory=StatOverlay)
    override_outcome_text:tuple[str, ...] = ()


@dataclass(frozen=True)
class Choice:
    text:tuple[str, ...] = ()
    outcome_text:tuple[str, ...] = ()
    stat_change:StatOverlay = field(default_factory=StatOverlay)
    forces:Optional[EventRef] = None
    suppresses:tuple[EventRef, ...] = ()
    influences:tuple[Influence, ...] = ()


@dataclass(frozen=True)
class Event:
    id:EventId
    title:str = ""
    description:tuple[str, ...] = ()
    requirements:Requirements = field(default_factory=Requirements)
    forced:bool = False
    max_triggered:int = UNLIMITED
    choices:tuple[Choice, ...] = ()

    @property
    def unlimited(self) -> bool:
        return self.max_triggered == UNLIMITED

    @property
    def weight(self) -> int:
        """ Selection weight, deeper event chains are favored. """
        return 2 ** len(self.requirements.required_events)

    def references(self) -> Iterator[tuple[RefKind, EventRef]]:
        for ref in self.requirements.required_events:
            yield RefKind.REQUIRED, ref
        for choice in self.choices:
            if choice.forces is not None:
                yield RefKind.FORCES, choice.forces
            for ref in choice.suppresses:
                yield RefKind.SUPPRESSES, ref
            for influence in choice.influences:
                yield RefKind.INFLUENCE, influence.target
