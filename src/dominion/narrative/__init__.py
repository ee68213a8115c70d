""" Narrative content for Dominion

Events are authored as one json document per event and grouped by dominion
level (tier). Each tier has its own catalog: when the player's dominion level
changes, the catalog for the new tier replaces the old one.

An event has requirements (stat bounds and other events that must have
triggered first), may be forced (jumping ahead of random selection) and may
only trigger a limited number of times. Each choice of an event changes stats
and can reach out to other events: forcing one to come next, suppressing
others for good, or having its outcome modified by events the player has
already seen (influences).

Some motivating examples:

Blood Moon
Early in the game the player is offered a feast. Feasting raises blood but
lowers happiness, and forces a follow up event where the nobles react.
Refusing suppresses the follow up entirely.

The Old Debt
A merchant asks for payment. If the player has previously spared the
merchant's brother (an earlier event), an influence replaces the outcome text
and softens the stat penalty.
"""

from .event_parser import loads, loadd
from .catalog import EventCatalog, UnknownEventError, load_catalog, validate_references, tier_directory
