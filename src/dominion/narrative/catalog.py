""" Event catalogs, one per dominion level (tier).

Content for a tier is a directory holding a manifest and the event files it
lists:

    <content root>/<tier directory>/manifest.json   {"events": ["a.json", ...]}
    <content root>/<tier directory>/Event_List/a.json

Content defects never fail a load. Missing or malformed files are logged and
skipped, duplicate ids are logged and the later definition wins, dangling
references are logged after loading.
"""

import os
import json
import logging
import pathlib
import importlib.resources
from importlib.resources.abc import Traversable
from collections.abc import Iterator, Mapping
from typing import Optional, Union

from dominion import config, util
from dominion.core import EventId, EventRef, Event, RefKind
from . import event_parser

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike, Traversable]


class UnknownEventError(KeyError):
    pass


class EventCatalog(Mapping[EventId, Event]):
    """ id indexed events for a single tier, in manifest order. """

    def __init__(self, tier:int, events:Optional[Mapping[EventId, Event]]=None) -> None:
        self.logger = logging.getLogger(util.fullname(self))
        self.tier = tier
        self._events:dict[EventId, Event] = dict(events) if events else {}

    def add(self, event:Event) -> None:
        if event.id in self._events:
            self.logger.warning(f'duplicate event {event.id} in tier {self.tier}, later definition wins')
        self._events[event.id] = event

    def get(self, event_id:EventId, default:Optional[Event]=None) -> Optional[Event]: # type: ignore[override]
        return self._events.get(event_id, default)

    def resolve(self, ref:Optional[EventRef]) -> Optional[Event]:
        if ref is None:
            return None
        return self._events.get(ref.id)

    def __getitem__(self, event_id:EventId) -> Event:
        try:
            return self._events[event_id]
        except KeyError as ke:
            raise UnknownEventError(f'event {event_id} not in tier {self.tier} catalog') from ke

    def __contains__(self, event_id:object) -> bool:
        return event_id in self._events

    def __iter__(self) -> Iterator[EventId]:
        return iter(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def events(self) -> list[Event]:
        return list(self._events.values())


def default_content_root() -> Traversable:
    return importlib.resources.files("dominion.data").joinpath("events")


def tier_directory(tier:int) -> Optional[str]:
    """ the content directory for tier, None for a tier with no content """
    if not 0 <= tier <= config.Settings.tiers.MAX_TIER:
        raise ValueError(f'invalid dominion level {tier}')
    directory = config.Tiers.get(tier, "")
    return directory if directory else None


def load_catalog(tier:int, content_root:Optional[PathLike]=None) -> EventCatalog:
    """ Loads a fresh catalog for tier.

    An invalid tier raises ValueError, everything else degrades to a partial
    or empty catalog. """

    directory = tier_directory(tier)
    catalog = EventCatalog(tier)
    if directory is None:
        logger.info(f'tier {tier} has no content')
        return catalog

    root:Traversable
    if content_root is None:
        root = default_content_root()
    elif isinstance(content_root, (str, os.PathLike)):
        root = pathlib.Path(content_root)
    else:
        root = content_root
    tier_path = root.joinpath(directory)
    manifest_path = tier_path.joinpath(config.Settings.tiers.MANIFEST)

    try:
        manifest = json.loads(manifest_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning(f'could not read manifest {manifest_path}: {e}')
        return catalog

    if not isinstance(manifest, dict) or not isinstance(manifest.get("events"), list):
        logger.warning(f'manifest is empty or invalid: {manifest_path}')
        return catalog

    for filename in manifest["events"]:
        if not isinstance(filename, str):
            logger.warning(f'bad entry {filename!r} in manifest {manifest_path}')
            continue
        event_path = tier_path.joinpath(config.Settings.tiers.EVENT_LIST).joinpath(filename)
        try:
            event = event_parser.loads(event_path.read_text(encoding="utf-8"))
        except OSError as e:
            logger.warning(f'event file not found {event_path}: {e}')
            continue
        except ValueError as e:
            # includes json.JSONDecodeError
            logger.warning(f'could not parse event {event_path}: {e}')
            continue
        catalog.add(event)

    logger.info(f'loaded {len(catalog)} events for tier {tier}')
    validate_references(catalog)
    return catalog


def validate_references(catalog:EventCatalog) -> list[tuple[EventId, RefKind, EventId]]:
    """ Warns about every reference to an event missing from catalog. """
    dangling:list[tuple[EventId, RefKind, EventId]] = []
    for event in catalog.values():
        for kind, ref in event.references():
            if ref.id not in catalog:
                logger.warning(f'event {event.id} has {kind.value} reference to missing event {ref.id} ({ref.title!r})')
                dangling.append((event.id, kind, ref.id))
    return dangling
