""" Saving and restoring a game session.

A session is the player's stats plus the dynamic event state. Saves are json
documents:

    {
        "statSet": {"blood": 100, ...},
        "triggerCounts": {"12": 1, ...},
        "triggeredHistory": [12, ...],
        "suppressedEvents": [7, ...],
        "forcedQueue": [13, ...],
        "currentEventId": 12
    }

The previous save is kept as a backup next to the save file.
"""

import os
import json
import logging
import shutil
import tempfile
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from dominion import util, config
from dominion.core import EventId, StatSet
from dominion.events import EventManager


@dataclass
class SessionState:
    stats:StatSet = field(default_factory=StatSet)
    trigger_counts:dict[EventId, int] = field(default_factory=dict)
    triggered_history:list[EventId] = field(default_factory=list)
    suppressed_events:set[EventId] = field(default_factory=set)
    forced_queue:list[EventId] = field(default_factory=list)
    current_event_id:Optional[EventId] = None


def snapshot(event_manager:EventManager, stats:StatSet) -> SessionState:
    return SessionState(
        stats.copy(),
        event_manager.trigger_counts,
        event_manager.triggered_history,
        event_manager.suppressed_events,
        event_manager.forced_queue,
        event_manager.current_event_id,
    )


def restore(event_manager:EventManager, session:SessionState) -> StatSet:
    """ Replaces event_manager's dynamic state with session.

    No eligibility is evaluated. Returns a copy of the session's stats. """
    event_manager.trigger_counts = session.trigger_counts
    event_manager.triggered_history = session.triggered_history
    event_manager.suppressed_events = session.suppressed_events
    event_manager.forced_queue = session.forced_queue
    event_manager.current_event_id = session.current_event_id
    return session.stats.copy()


def _is_int(v:Any) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)


def _ids(data:Any, key:str) -> list[EventId]:
    if not isinstance(data, list) or not all(_is_int(x) for x in data):
        raise ValueError(f'{key} must be a list of event ids')
    return [EventId(x) for x in data]


def session_to_dict(session:SessionState) -> dict[str, Any]:
    return {
        "statSet": session.stats.to_dict(),
        # json object keys are strings
        "triggerCounts": {str(k): v for k, v in session.trigger_counts.items()},
        "triggeredHistory": list(session.triggered_history),
        "suppressedEvents": sorted(session.suppressed_events),
        "forcedQueue": list(session.forced_queue),
        "currentEventId": session.current_event_id,
    }


def session_from_dict(data:Any) -> SessionState:
    if not isinstance(data, dict):
        raise ValueError("session must be a json object")

    stat_data = data.get("statSet", {})
    if not isinstance(stat_data, dict):
        raise ValueError("statSet must be a json object")
    for k, v in stat_data.items():
        if v is not None and not _is_int(v):
            raise ValueError(f'bad value {v!r} for stat {k}')

    trigger_data = data.get("triggerCounts", {})
    if not isinstance(trigger_data, dict):
        raise ValueError("triggerCounts must be a json object")
    trigger_counts:dict[EventId, int] = {}
    for k, v in trigger_data.items():
        if not _is_int(v) or v < 0:
            raise ValueError(f'bad trigger count {v!r} for event {k}')
        trigger_counts[EventId(int(k))] = v

    current_event_id = data.get("currentEventId")
    if current_event_id is not None and not _is_int(current_event_id):
        raise ValueError("currentEventId must be an event id or null")

    return SessionState(
        StatSet.from_dict(stat_data),
        trigger_counts,
        _ids(data.get("triggeredHistory", []), "triggeredHistory"),
        set(_ids(data.get("suppressedEvents", []), "suppressedEvents")),
        _ids(data.get("forcedQueue", []), "forcedQueue"),
        None if current_event_id is None else EventId(current_event_id),
    )


def dumps(session:SessionState) -> str:
    return json.dumps(session_to_dict(session), indent=2)


def loads(data:str) -> SessionState:
    return session_from_dict(json.loads(data))


class GameSaver:
    """ Central point for saving a game session to disk. """

    def __init__(self, save_path:Optional[Union[str, os.PathLike]]=None) -> None:
        self.logger = logging.getLogger(util.fullname(self))
        if save_path is None:
            save_path = config.Settings.save.SAVE_FILE
        self.save_path = os.path.expanduser(os.fspath(save_path))
        self.backup_path = self.save_path + config.Settings.save.BACKUP_SUFFIX

    def save(self, session:SessionState) -> str:
        """ Writes session, keeping the previous save as a backup. """
        data = dumps(session)

        if os.path.exists(self.save_path):
            try:
                shutil.copyfile(self.save_path, self.backup_path)
            except OSError as e:
                self.logger.warning(f'failed to create backup save {self.backup_path}: {e}')

        save_dir = os.path.dirname(self.save_path) or "."
        os.makedirs(save_dir, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(dir=save_dir, prefix=".dominion_", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(data)
            os.replace(temp_path, self.save_path)
        except BaseException:
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise

        self.logger.debug(f'saved session to {self.save_path}')
        return self.save_path

    def load(self) -> SessionState:
        """ Loads the saved session, a fresh one if there's no usable save. """
        if not os.path.exists(self.save_path):
            self.logger.info(f'no save at {self.save_path}, starting a new session')
            return SessionState()

        try:
            with open(self.save_path, "r", encoding="utf-8") as f:
                return loads(f.read())
        except (OSError, ValueError) as e:
            self.logger.warning(f'failed to load save {self.save_path}, starting a new session: {e}')
            return SessionState()

    def reset(self) -> None:
        for path in (self.save_path, self.backup_path):
            if os.path.exists(path):
                try:
                    os.remove(path)
                except OSError as e:
                    self.logger.warning(f'failed to delete {path}: {e}')
        self.logger.info("save files reset")
