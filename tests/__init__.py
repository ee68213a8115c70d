import json
import pathlib
from typing import Any, Optional, Sequence

from dominion.core import EventId, EventRef, Requirements, Influence, Choice, Event, StatOverlay, UNLIMITED
from dominion.narrative import EventCatalog

def ref(event_id:int, title:str="") -> EventRef:
    return EventRef(EventId(event_id), title)

def make_event(
    event_id:int,
    *choices:Choice,
    requires:Sequence[int]=(),
    min_stats:Optional[StatOverlay]=None,
    max_stats:Optional[StatOverlay]=None,
    forced:bool=False,
    max_triggered:int=UNLIMITED,
    title:str="",
) -> Event:
    return Event(
        EventId(event_id),
        title or f'event {event_id}',
        (f'description of {event_id}',),
        Requirements(
            min_stats or StatOverlay(),
            max_stats or StatOverlay(),
            tuple(ref(x) for x in requires),
        ),
        forced,
        max_triggered,
        choices if choices else (Choice(("ok",)),),
    )

def make_catalog(*events:Event, tier:int=0) -> EventCatalog:
    catalog = EventCatalog(tier)
    for event in events:
        catalog.add(event)
    return catalog

def event_doc(event_id:int, **kwargs:Any) -> dict[str, Any]:
    """ a minimal json event document """
    doc:dict[str, Any] = {
        "id": event_id,
        "title": f'event {event_id}',
        "description": [f'description of {event_id}'],
        "forced": False,
        "maxTriggered": -1,
        "choices": [{"text": ["ok"]}],
    }
    doc.update(kwargs)
    return doc

def write_tier(root:pathlib.Path, directory:str, docs:Sequence[Any], extra_manifest:Sequence[str]=()) -> pathlib.Path:
    """ writes a tier's manifest and event files under root

    docs that are strings are written verbatim (for broken content) """
    tier_path = root / directory
    (tier_path / "Event_List").mkdir(parents=True, exist_ok=True)
    filenames = []
    for i, doc in enumerate(docs):
        filename = f'{i:03d}.json'
        text = doc if isinstance(doc, str) else json.dumps(doc)
        (tier_path / "Event_List" / filename).write_text(text, encoding="utf-8")
        filenames.append(filename)
    filenames.extend(extra_manifest)
    (tier_path / "manifest.json").write_text(json.dumps({"events": filenames}), encoding="utf-8")
    return tier_path
