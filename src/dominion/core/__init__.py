""" Dominion core data model """

from .stats import Stat, StatOverlay, StatSet, RESOURCES, UNSET
from .event import EventId, EventRef, Requirements, Influence, Choice, Event, RefKind, UNLIMITED
