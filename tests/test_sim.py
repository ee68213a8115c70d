""" Tests for the console interface and the game loop """

import io
import sys

import pytest

from dominion import sim, interface, events
from dominion.core import EventId, Event, StatSet
from dominion.serialization import save_game

from . import make_catalog, event_doc, write_tier

def scripted_ui(*answers):
    answer_iter = iter(answers)
    out = io.StringIO()
    return interface.ConsoleInterface(lambda prompt: next(answer_iter), out), out

def test_display_event():
    ui, out = scripted_ui()
    ui.display_event(events.EventView("A Title", ("line one", "line two"), (("first", "continued"), ("second",))))
    text = out.getvalue()
    assert "A Title\n" in text
    assert "line one\nline two\n" in text
    assert "1: first\n   continued\n" in text
    assert "2: second\n" in text

def test_choose_reprompts():
    ui, _ = scripted_ui("", "zero", "0", "3", "2")
    assert ui.choose(2) == 1

def test_continue_game():
    ui, out = scripted_ui("maybe", "Y")
    assert ui.continue_game()
    assert "Invalid input. Please enter 'y' or 'n'." in out.getvalue()

    ui, _ = scripted_ui("n")
    assert not ui.continue_game()

def test_single_turn(single_event_manager, stats):
    ui, out = scripted_ui("1", "n")
    game_loop = sim.GameLoop(single_event_manager, stats, ui)
    game_loop.run()

    text = out.getvalue()
    assert text.startswith(interface.TITLE)
    assert "1: Test Choice" in text
    assert "Blood: 150" in text
    assert text.rstrip().endswith("Game session ended.")
    assert game_loop.turns == 1
    assert stats.blood == 150
    assert single_event_manager.trigger_counts == {999: 1}
    assert single_event_manager.current_event_id is None

def test_no_events(rng, stats):
    ui, out = scripted_ui()
    game_loop = sim.GameLoop(events.EventManager(make_catalog(), random=rng), stats, ui)
    game_loop.run()
    text = out.getvalue()
    assert "No events available. You may have finished the game or encountered an error." in text
    assert "Game session ended." in text
    assert game_loop.turns == 0

def test_event_without_choices(rng, stats):
    quiet = Event(EventId(1), "Quiet Night", ("Nothing happens.",), max_triggered=1)
    ui, out = scripted_ui()
    game_loop = sim.GameLoop(events.EventManager(make_catalog(quiet), random=rng), stats, ui)
    assert game_loop.step()
    assert game_loop.event_manager.current_event_id is None
    assert game_loop.event_manager.trigger_counts == {1: 1}
    assert "Quiet Night" in out.getvalue()
    assert not game_loop.step()

def test_resume_current_event(single_event_manager, stats):
    single_event_manager.trigger_event(EventId(999), stats)
    ui, _ = scripted_ui()
    game_loop = sim.GameLoop(single_event_manager, stats, ui)
    assert game_loop.next_event().id == 999
    # resuming doesn't count as another trigger
    assert single_event_manager.trigger_counts == {999: 1}

def test_tier_change(tmp_path, rng):
    write_tier(tmp_path, "0_Early", [event_doc(1, maxTriggered=1, choices=[{"text": ["rise"], "statChange": {"dominionLevel": 1}}])])
    write_tier(tmp_path, "1_Early_Mid", [event_doc(2, maxTriggered=1, requirements={"requiredEvents": [{"id": 1}]})])

    stats = StatSet()
    game_saver = save_game.GameSaver(tmp_path / "save.json")
    ui, out = scripted_ui("1", "y", "1", "y")
    game_loop = sim.GameLoop(events.EventManager.load(0, tmp_path, random=rng), stats, ui, game_saver, tmp_path)
    game_loop.run()

    assert stats.dominion_level == 1
    assert game_loop.event_manager.tier == 1
    assert game_loop.event_manager.trigger_counts == {1: 1, 2: 1}
    assert game_loop.turns == 2
    assert "No events available." in out.getvalue()

    session = game_saver.load()
    assert session.stats == stats
    assert session.triggered_history == [1, 2]
    assert session.current_event_id is None

def test_main(tmp_path, monkeypatch, capsys):
    write_tier(tmp_path / "content", "0_Early", [event_doc(1, maxTriggered=1, choices=[{"text": ["feast"], "statChange": {"blood": 25}}])])
    config_path = tmp_path / "override.toml"
    config_path.write_text(f'[log]\nLOG_FILE = "{tmp_path / "dominion.log"}"\n')
    save_path = tmp_path / "save.json"

    monkeypatch.setattr(sys, "argv", [
        "dominion",
        "-c", str(config_path),
        "-s", str(save_path),
        "--content", str(tmp_path / "content"),
        "--seed", "0",
    ])
    monkeypatch.setattr(sys, "stdin", io.StringIO("1\ny\n"))
    sim.main()

    assert "Blood: 125" in capsys.readouterr().out
    session = save_game.GameSaver(save_path).load()
    assert session.stats.blood == 125
    assert session.trigger_counts == {1: 1}

    # playing again picks up where we left off
    monkeypatch.setattr(sys, "stdin", io.StringIO(""))
    sim.main()
    assert "No events available." in capsys.readouterr().out
