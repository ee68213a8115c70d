""" Game settings.

The built-in config.toml is read at import time. A player supplied toml file
can override any of it with load_config. """

import types
import importlib.resources
from typing import Dict, Optional, Any, List, TextIO

import toml # type: ignore

def merge(base:Dict[str, Any], override:Dict[str, Any], path:Optional[List[str]]=None) -> Dict[str, Any]:
    """ merges override into base in place, tables merge key by key

    raises ValueError if an override value has a different type than the
    setting it replaces """

    path = path or []
    for key, value in override.items():
        current = base.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merge(current, value, path + [str(key)])
        elif key in base and type(current) != type(value):
            raise ValueError(f'Conflict at {".".join(path + [str(key)])}')
        else:
            base[key] = value
    return base

def to_namespace(d:Dict[str, Any]) -> types.SimpleNamespace:
    return types.SimpleNamespace(**{k: to_namespace(v) if isinstance(v, dict) else v for k, v in d.items()})

def load_config(config_file:Optional[TextIO]=None) -> types.SimpleNamespace:
    config = toml.loads(importlib.resources.files("dominion.data").joinpath("config.toml").read_text(encoding="utf-8"))
    if config_file:
        merge(config, toml.load(config_file))

    global Settings, Tiers
    Settings = to_namespace(config)
    # tier keys are strings in toml
    Tiers = {int(k): v for k, v in config["tiers"]["directories"].items()}

    return Settings

Tiers:Dict[int, str] = {}

Settings = load_config()
