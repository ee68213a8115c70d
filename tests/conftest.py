import logging
from typing import Generator

import pytest
import numpy as np

from dominion import config, events
from dominion.core import StatSet, StatOverlay, Choice
from dominion.narrative import EventCatalog

from . import make_event, make_catalog, ref

# some logging to turn on if we like
#logging.getLogger("dominion.events").level = logging.DEBUG
#logging.getLogger("dominion.narrative").level = logging.DEBUG

@pytest.fixture(autouse=True)
def settings() -> Generator[None, None, None]:
    # tests may load config overrides, always put the built-in config back
    yield
    config.load_config()

@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(0)

@pytest.fixture
def stats() -> StatSet:
    return StatSet()

@pytest.fixture
def single_event_catalog() -> EventCatalog:
    return make_catalog(make_event(999, Choice(("Test Choice",), stat_change=StatOverlay(blood=50))))

@pytest.fixture
def single_event_manager(single_event_catalog:EventCatalog, rng:np.random.Generator) -> events.EventManager:
    return events.EventManager(single_event_catalog, random=rng)

@pytest.fixture
def chain_catalog() -> EventCatalog:
    """ a small story:

    1 feast: forces 2, or suppresses 2
    2 nobles react: forced, requires 1
    3 brother: no requirements
    4 debt: requires 3, influenced by 3 and 2
    5 unrest: only when happiness is low
    """
    feast = make_event(
        1,
        Choice(("feast",), ("you feast",), StatOverlay(blood=40, happiness=-5), forces=ref(2)),
        Choice(("decline",), ("you decline",), StatOverlay(happiness=15), suppresses=(ref(2),)),
        max_triggered=1,
    )
    nobles = make_event(2, Choice(("invite",)), requires=[1], forced=True, max_triggered=1)
    brother = make_event(3, Choice(("spare",), ("spared",)), max_triggered=1)
    debt = make_event(4, Choice(("pay",), ("paid",), StatOverlay(population=-20)), requires=[3], max_triggered=1)
    unrest = make_event(5, Choice(("calm",)), max_stats=StatOverlay(happiness=30), max_triggered=1)
    return make_catalog(feast, nobles, brother, debt, unrest)

@pytest.fixture
def event_manager(chain_catalog:EventCatalog, rng:np.random.Generator) -> events.EventManager:
    return events.EventManager(chain_catalog, random=rng)
