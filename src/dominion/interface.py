""" Line based console interface.

Renders events and outcomes and reads the player's choices. Holds no game
state of its own. """

import sys
import logging
from typing import Callable, Optional, Sequence, TextIO

from dominion import util
from dominion.core import StatSet
from dominion.events import EventView

TITLE = "Dominion Rising: Veins of Fate"
RULE_WIDTH = 78


def _rule(label:str="") -> str:
    if not label:
        return "-=" * (RULE_WIDTH // 2)
    label = f' {label} '
    left = (RULE_WIDTH - len(label)) // 2
    right = RULE_WIDTH - len(label) - left
    return ("-=" * RULE_WIDTH)[:left] + label + ("=-" * RULE_WIDTH)[:right]


class ConsoleInterface:
    def __init__(self, input_fn:Callable[[str], str]=input, out:Optional[TextIO]=None) -> None:
        self.logger = logging.getLogger(util.fullname(self))
        self.input_fn = input_fn
        self.out = out if out is not None else sys.stdout

    def _print(self, line:str="") -> None:
        print(line, file=self.out)

    def display_title(self) -> None:
        self._print(TITLE)

    def display_stats(self, stats:StatSet) -> None:
        self._print(str(stats))

    def display_message(self, message:str) -> None:
        self._print(message)

    def display_event(self, view:EventView) -> None:
        self._print()
        self._print(_rule("Event"))
        self._print(view.title)
        self._print()
        for line in view.description_lines:
            self._print(line)
        self._print()
        for i, choice_lines in enumerate(view.choice_lines):
            first = choice_lines[0] if len(choice_lines) > 0 else ""
            self._print(f'{i+1}: {first}')
            for line in choice_lines[1:]:
                self._print(f'   {line}')
            self._print()

    def display_outcome(self, outcome_lines:Sequence[str]) -> None:
        self._print()
        self._print(_rule("Outcome"))
        for line in outcome_lines:
            self._print(f'  {line}')
        self._print(_rule())

    def choose(self, num_choices:int) -> int:
        """ Prompts until the player picks a choice, returns its index. """
        while True:
            answer = self.input_fn("Choose an option: ").strip()
            try:
                index = int(answer) - 1
            except ValueError:
                self.logger.debug(f'ignoring non-numeric choice {answer!r}')
                continue
            if 0 <= index < num_choices:
                return index

    def continue_game(self) -> bool:
        while True:
            answer = self.input_fn("Continue? (y/n): ").strip().lower()
            if answer == "y":
                return True
            elif answer == "n":
                return False
            self._print("Invalid input. Please enter 'y' or 'n'.")
