""" Dominion game loop and entry point """

import sys
import logging
import argparse
import contextlib
from typing import Optional

import numpy as np

from dominion import config, events, interface, util
from dominion.core import Event, StatSet
from dominion.serialization import save_game


class GameLoop:
    """ Runs turns: pick an event, show it, apply the player's choice. """

    def __init__(
        self,
        event_manager:events.EventManager,
        stats:StatSet,
        ui:interface.ConsoleInterface,
        game_saver:Optional[save_game.GameSaver]=None,
        content_root:Optional[str]=None,
    ) -> None:
        self.logger = logging.getLogger(util.fullname(self))
        self.event_manager = event_manager
        self.stats = stats
        self.ui = ui
        self.game_saver = game_saver
        self.content_root = content_root
        self.turns = 0

    def save(self) -> None:
        if self.game_saver is not None:
            self.game_saver.save(save_game.snapshot(self.event_manager, self.stats))

    def next_event(self) -> Optional[Event]:
        # an event shown before a restart but never resolved comes back first
        event = self.event_manager.current_event
        if event is not None:
            self.logger.info(f'resuming event {event.id}')
            return event
        return self.event_manager.select_next(self.stats)

    def step(self) -> bool:
        """ Plays one turn, returns False if there was no event to play. """
        if self.stats.dominion_level != self.event_manager.tier:
            self.event_manager = events.rebind(self.event_manager, self.stats.dominion_level, self.content_root)
        self.event_manager.recompute_pool(self.stats)

        event = self.next_event()
        if event is None:
            self.ui.display_message("No events available. You may have finished the game or encountered an error.")
            return False

        self.turns += 1
        self.ui.display_event(self.event_manager.event_view(event))

        if len(event.choices) == 0:
            # nothing to resolve, it was recorded when it was selected
            self.event_manager.current_event_id = None
            self.save()
            return True

        choice = event.choices[self.ui.choose(len(event.choices))]
        self.event_manager.resolve(event, choice, self.stats)
        self.save()

        self.ui.display_outcome(self.event_manager.outcome_text(choice))
        self.ui.display_stats(self.stats)
        return True

    def run(self) -> None:
        self.ui.display_title()
        self.ui.display_stats(self.stats)
        while self.step():
            if not self.ui.continue_game():
                break
        self.ui.display_message("Game session ended.")
        self.logger.info(f'session ended after {self.turns} turns')


def main() -> None:
    parser = argparse.ArgumentParser(description="Dominion Rising: Veins of Fate")
    parser.add_argument("-c", "--config", nargs="?", type=str, default=None,
            help="toml file overriding the built-in config")
    parser.add_argument("-s", "--save", nargs="?", type=str, default=None,
            help="save file to use. default from config")
    parser.add_argument("--content", nargs="?", type=str, default=None,
            help="directory holding event content for each tier. default is the built-in content")
    parser.add_argument("--seed", type=int, default=None,
            help="seed for event selection")
    parser.add_argument("--reset", action="store_true",
            help="delete any existing save and start over")
    args = parser.parse_args()

    with contextlib.ExitStack() as context_stack:
        if args.config:
            config.load_config(context_stack.enter_context(open(args.config, "rt")))

        # for reference, config to stderr:
        # logging.basicConfig(stream=sys.stderr, level=logging.INFO)
        logging.basicConfig(
                format="%(asctime)s %(name)-12s %(levelname)-8s %(message)s",
                filename=config.Settings.log.LOG_FILE,
                filemode="w",
                level=logging.INFO
        )
        #logging.getLogger("dominion.events").level = logging.DEBUG
        # send warnings to the logger
        logging.captureWarnings(True)

        game_saver = save_game.GameSaver(args.save)
        if args.reset:
            game_saver.reset()

        session = game_saver.load()
        event_manager = events.EventManager.load(
            session.stats.dominion_level,
            args.content,
            random=np.random.default_rng(args.seed),
        )
        stats = save_game.restore(event_manager, session)

        game_loop = GameLoop(event_manager, stats, interface.ConsoleInterface(), game_saver, args.content)
        try:
            game_loop.run()
        except (KeyboardInterrupt, EOFError):
            print(file=sys.stderr)
            logging.info("interrupted")

        logging.info("done.")

if __name__ == "__main__":
    main()
