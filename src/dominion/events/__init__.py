""" Event selection and resolution for Dominion """

from .core import EventState, EventManager, EventView, rebind
