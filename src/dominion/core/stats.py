""" Player stats: the bounded resources events read and mutate. """

import enum
from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional

from dominion import config, util

# wire value meaning "no constraint" / "no change"
UNSET = -1


class Stat(enum.Enum):
    BLOOD = "blood"
    POPULATION = "population"
    HAPPINESS = "happiness"
    CORRUPTION = "corruption"
    DOMINION_LEVEL = "dominionLevel"

    @property
    def attr(self) -> str:
        return self.name.lower()

    def max_value(self) -> int:
        return getattr(config.Settings.stats, f'MAX_{self.name}')

    def default_value(self) -> int:
        return getattr(config.Settings.stats, f'DEFAULT_{self.name}')


# the four resources as opposed to the progression tier
RESOURCES = (Stat.BLOOD, Stat.POPULATION, Stat.HAPPINESS, Stat.CORRUPTION)


@dataclass(frozen=True)
class StatOverlay:
    """ A partial set of stat values.

    Used both as requirement bounds and as stat change payloads. A field of
    None is unset: it neither constrains nor changes anything. On the wire
    unset is encoded as -1. """

    blood:Optional[int] = None
    population:Optional[int] = None
    happiness:Optional[int] = None
    corruption:Optional[int] = None
    dominion_level:Optional[int] = None

    def get(self, stat:Stat) -> Optional[int]:
        return getattr(self, stat.attr)

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    @classmethod
    def from_dict(cls, data:Mapping[str, Any]) -> "StatOverlay":
        values:dict[str, Optional[int]] = {}
        for stat in Stat:
            v = data.get(stat.value, UNSET)
            if v is None:
                v = UNSET
            if not isinstance(v, int) or isinstance(v, bool):
                raise ValueError(f'stat {stat.value} must be an int, got {v!r}')
            values[stat.attr] = None if v == UNSET else v
        return cls(**values)

    def to_dict(self) -> dict[str, int]:
        out:dict[str, int] = {}
        for stat in Stat:
            v = self.get(stat)
            out[stat.value] = UNSET if v is None else v
        return out


class StatSet:
    """ Holds the player's resources and dominion level.

    Every mutation is clamped to [MIN_STAT, MAX_<stat>], out of range input
    is not an error. """

    def __init__(
        self,
        blood:Optional[int]=None,
        population:Optional[int]=None,
        happiness:Optional[int]=None,
        corruption:Optional[int]=None,
        dominion_level:Optional[int]=None,
    ) -> None:
        self._values:dict[Stat, int] = {}
        given = {
            Stat.BLOOD: blood,
            Stat.POPULATION: population,
            Stat.HAPPINESS: happiness,
            Stat.CORRUPTION: corruption,
            Stat.DOMINION_LEVEL: dominion_level,
        }
        for stat, value in given.items():
            self.set(stat, stat.default_value() if value is None else value)

    def get(self, stat:Stat) -> int:
        return self._values[stat]

    def set(self, stat:Stat, value:int) -> None:
        self._values[stat] = util.clip(value, config.Settings.stats.MIN_STAT, stat.max_value())

    def add(self, stat:Stat, amount:int) -> None:
        self.set(stat, self._values[stat] + amount)

    def apply(self, overlay:StatOverlay) -> None:
        """ Adds each set field of overlay to the corresponding stat. """
        for stat in Stat:
            delta = overlay.get(stat)
            if delta is not None:
                self.add(stat, delta)

    @property
    def blood(self) -> int:
        return self._values[Stat.BLOOD]

    @blood.setter
    def blood(self, value:int) -> None:
        self.set(Stat.BLOOD, value)

    @property
    def population(self) -> int:
        return self._values[Stat.POPULATION]

    @population.setter
    def population(self, value:int) -> None:
        self.set(Stat.POPULATION, value)

    @property
    def happiness(self) -> int:
        return self._values[Stat.HAPPINESS]

    @happiness.setter
    def happiness(self, value:int) -> None:
        self.set(Stat.HAPPINESS, value)

    @property
    def corruption(self) -> int:
        return self._values[Stat.CORRUPTION]

    @corruption.setter
    def corruption(self, value:int) -> None:
        self.set(Stat.CORRUPTION, value)

    @property
    def dominion_level(self) -> int:
        return self._values[Stat.DOMINION_LEVEL]

    @dominion_level.setter
    def dominion_level(self, value:int) -> None:
        self.set(Stat.DOMINION_LEVEL, value)

    def copy(self) -> "StatSet":
        return StatSet(**{stat.attr: v for stat, v in self._values.items()})

    def to_dict(self) -> dict[str, int]:
        return {stat.value: v for stat, v in self._values.items()}

    @classmethod
    def from_dict(cls, data:Mapping[str, Any]) -> "StatSet":
        return cls(**{stat.attr: data.get(stat.value) for stat in Stat})

    def __eq__(self, other:object) -> bool:
        if not isinstance(other, StatSet):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        return f'StatSet({", ".join(f"{stat.attr}={v}" for stat, v in self._values.items())})'

    def __str__(self) -> str:
        return f'Blood: {self.blood:,} | Population: {self.population:,} | Happiness: {self.happiness:,} | Corruption: {self.corruption:,} | Dominion Level: {self.dominion_level}'
