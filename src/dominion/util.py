""" Small helpers shared across the package. """

from typing import Any

def fullname(o:Any) -> str:
    """ module qualified class name of o (or of o itself if it's a class),
    used to name loggers """
    klass = o if isinstance(o, type) else type(o)
    module = getattr(klass, "__module__", None)
    if module is None or module == "builtins":
        return klass.__qualname__
    return f'{module}.{klass.__qualname__}'

def clip(x:int, min_x:int, max_x:int) -> int:
    return min_x if x < min_x else max_x if x > max_x else x
