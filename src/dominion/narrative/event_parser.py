""" Narrative Event Parsing """

import json
from typing import Any, Mapping, Optional

from dominion.core import EventId, EventRef, Requirements, Influence, Choice, Event, StatOverlay, UNLIMITED

# EventRef id meaning "no event"
NO_EVENT = -1


def _is_int(v:Any) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)


def parse_lines(data:Any, where:str) -> tuple[str, ...]:
    """ multi-line text: a list of strings, a single string or missing """
    if data is None:
        return ()
    if isinstance(data, str):
        return (data,)
    if not isinstance(data, list) or not all(isinstance(x, str) for x in data):
        raise ValueError(f'{where} must be a list of strings, got {data!r}')
    return tuple(data)


def parse_stat_overlay(data:Any, where:str) -> StatOverlay:
    if data is None:
        return StatOverlay()
    if not isinstance(data, Mapping):
        raise ValueError(f'{where} must be a table of stats, got {data!r}')
    try:
        return StatOverlay.from_dict(data)
    except ValueError as e:
        raise ValueError(f'bad stats in {where}') from e


def parse_event_ref(data:Any, where:str) -> Optional[EventRef]:
    if data is None:
        return None
    if not isinstance(data, Mapping):
        raise ValueError(f'{where} must be an event reference, got {data!r}')
    if "id" not in data or not _is_int(data["id"]):
        raise ValueError(f'missing or bad id in event reference in {where}')
    if data["id"] == NO_EVENT:
        return None
    title = data.get("title", "")
    if not isinstance(title, str):
        raise ValueError(f'title in event reference in {where} must be a string')
    return EventRef(EventId(data["id"]), title)


def parse_event_refs(data:Any, where:str) -> tuple[EventRef, ...]:
    if data is None:
        return ()
    if not isinstance(data, list):
        raise ValueError(f'{where} must be a list of event references')
    refs = []
    for i, ref_data in enumerate(data):
        ref = parse_event_ref(ref_data, f'{where}[{i}]')
        if ref is not None:
            refs.append(ref)
    return tuple(refs)


def parse_requirements(data:Any, where:str) -> Requirements:
    if data is None:
        return Requirements()
    if not isinstance(data, Mapping):
        raise ValueError(f'requirements for {where} must be a table')
    return Requirements(
        parse_stat_overlay(data.get("minStats"), f'{where}.minStats'),
        parse_stat_overlay(data.get("maxStats"), f'{where}.maxStats'),
        parse_event_refs(data.get("requiredEvents"), f'{where}.requiredEvents'),
    )


def parse_influence(data:Any, where:str) -> Influence:
    if not isinstance(data, Mapping):
        raise ValueError(f'{where} must be a table')
    target = parse_event_ref(data, where)
    if target is None:
        raise ValueError(f'{where} must reference an event')
    priority = data.get("priority", 0)
    if not _is_int(priority):
        raise ValueError(f'bad priority in {where}')
    return Influence(
        target,
        priority,
        parse_stat_overlay(data.get("statChange"), f'{where}.statChange'),
        parse_lines(data.get("overrideOutcomeText"), f'{where}.overrideOutcomeText'),
    )


def parse_choice(data:Any, where:str) -> Choice:
    if not isinstance(data, Mapping):
        raise ValueError(f'{where} must be a table')

    influence_data = data.get("eventInfluences")
    if influence_data is None:
        influence_data = []
    elif not isinstance(influence_data, list):
        raise ValueError(f'{where}.eventInfluences must be a list')

    return Choice(
        parse_lines(data.get("text"), f'{where}.text'),
        parse_lines(data.get("outcomeText"), f'{where}.outcomeText'),
        parse_stat_overlay(data.get("statChange"), f'{where}.statChange'),
        parse_event_ref(data.get("forcesEvent"), f'{where}.forcesEvent'),
        parse_event_refs(data.get("preventEvents"), f'{where}.preventEvents'),
        tuple(parse_influence(x, f'{where}.eventInfluences[{i}]') for i, x in enumerate(influence_data)),
    )


def loads(data:str) -> Event:
    """
    Loads an event from a json string.

    Parameters
    ----------
    data : str
        json encoded event data

    Returns
    -------
    out : Event
        the event as parsed from the input
    """

    return loadd(json.loads(data))


def loadd(event_data:Any) -> Event:
    """
    Loads an event from a decoded json document.

    Only id is required. Stat fields of -1 and event references with id -1
    are unset.

    Parameters
    ----------
    event_data : dict
        a single event document

    Returns
    -------
    out : Event
        the event as parsed from the input
    """

    if not isinstance(event_data, Mapping):
        raise ValueError(f'event must be a table, got {type(event_data).__name__}')

    if "id" not in event_data or not _is_int(event_data["id"]):
        raise ValueError('missing or bad id in event')
    event_id = EventId(event_data["id"])
    where = f'event {event_id}'

    title = event_data.get("title", "")
    if not isinstance(title, str):
        raise ValueError(f'title must be a string in {where}')

    forced = event_data.get("forced", False)
    if not isinstance(forced, bool):
        raise ValueError(f'forced must be a bool in {where}')

    max_triggered = event_data.get("maxTriggered", UNLIMITED)
    if not _is_int(max_triggered) or max_triggered < UNLIMITED:
        raise ValueError(f'bad maxTriggered in {where}')

    choice_data = event_data.get("choices")
    if choice_data is None:
        choice_data = []
    elif not isinstance(choice_data, list):
        raise ValueError(f'choices for {where} must be a list')

    return Event(
        event_id,
        title,
        parse_lines(event_data.get("description"), f'{where}.description'),
        parse_requirements(event_data.get("requirements"), where),
        forced,
        max_triggered,
        tuple(parse_choice(x, f'{where}.choices[{i}]') for i, x in enumerate(choice_data)),
    )
