""" Tests for loading tier catalogs and checking their references """

import io
import logging

import pytest

from dominion import config, narrative
from dominion.core import EventId, RefKind

from . import event_doc, write_tier, make_event, make_catalog, ref

def test_load_tier(tmp_path):
    write_tier(tmp_path, "0_Early", [event_doc(1), event_doc(2, requirements={"requiredEvents": [{"id": 1}]})])
    catalog = narrative.load_catalog(0, tmp_path)
    assert catalog.tier == 0
    assert len(catalog) == 2
    assert list(catalog) == [1, 2]
    assert catalog[EventId(2)].requirements.required_events[0].id == 1

def test_load_string_root(tmp_path):
    write_tier(tmp_path, "2_Mid", [event_doc(300)])
    catalog = narrative.load_catalog(2, str(tmp_path))
    assert EventId(300) in catalog

def test_missing_and_malformed_files_skipped(tmp_path, caplog):
    write_tier(
        tmp_path, "0_Early",
        [event_doc(1), "{ not json", event_doc(3)],
        extra_manifest=["missing.json"],
    )
    with caplog.at_level(logging.WARNING):
        catalog = narrative.load_catalog(0, tmp_path)
    assert sorted(catalog) == [1, 3]
    assert any("missing.json" in r.getMessage() for r in caplog.records)
    assert any("could not parse" in r.getMessage() for r in caplog.records)

def test_invalid_event_skipped(tmp_path):
    write_tier(tmp_path, "0_Early", [event_doc(1), {"title": "no id"}])
    catalog = narrative.load_catalog(0, tmp_path)
    assert list(catalog) == [1]

def test_duplicate_later_wins(tmp_path, caplog):
    write_tier(tmp_path, "0_Early", [event_doc(1, title="first"), event_doc(1, title="second")])
    with caplog.at_level(logging.WARNING):
        catalog = narrative.load_catalog(0, tmp_path)
    assert len(catalog) == 1
    assert catalog[EventId(1)].title == "second"
    assert any("duplicate event 1" in r.getMessage() for r in caplog.records)

def test_missing_manifest(tmp_path):
    (tmp_path / "0_Early").mkdir()
    catalog = narrative.load_catalog(0, tmp_path)
    assert len(catalog) == 0

def test_bad_manifest(tmp_path):
    (tmp_path / "0_Early").mkdir()
    (tmp_path / "0_Early" / "manifest.json").write_text("[]")
    assert len(narrative.load_catalog(0, tmp_path)) == 0

def test_terminal_tier_is_empty(tmp_path):
    catalog = narrative.load_catalog(5, tmp_path)
    assert catalog.tier == 5
    assert len(catalog) == 0
    assert narrative.tier_directory(5) is None

def test_unmapped_tier_is_empty(tmp_path):
    config.load_config(io.StringIO("[tiers]\nMAX_TIER = 7\n"))
    assert narrative.tier_directory(6) is None
    assert len(narrative.load_catalog(7, tmp_path)) == 0
    with pytest.raises(ValueError):
        narrative.load_catalog(8, tmp_path)

@pytest.mark.parametrize("tier", [-1, 6, 42])
def test_invalid_tier(tier, tmp_path):
    with pytest.raises(ValueError):
        narrative.load_catalog(tier, tmp_path)

def test_unknown_event():
    catalog = make_catalog(make_event(1))
    with pytest.raises(narrative.UnknownEventError):
        catalog[EventId(2)]
    # still a KeyError for Mapping semantics
    with pytest.raises(KeyError):
        catalog[EventId(2)]
    assert catalog.get(EventId(2)) is None
    assert catalog.resolve(None) is None
    assert catalog.resolve(ref(1)).id == 1

def test_dangling_references(caplog):
    catalog = make_catalog(
        make_event(1, requires=[7]),
        make_event(2, requires=[1]),
    )
    with caplog.at_level(logging.WARNING):
        dangling = narrative.validate_references(catalog)
    assert dangling == [(EventId(1), RefKind.REQUIRED, EventId(7))]
    assert any("missing event 7" in r.getMessage() for r in caplog.records)

def test_dangling_references_still_load(tmp_path):
    write_tier(tmp_path, "0_Early", [event_doc(1, choices=[{"text": ["go"], "forcesEvent": {"id": 99}}])])
    catalog = narrative.load_catalog(0, tmp_path)
    assert catalog[EventId(1)].choices[0].forces.id == 99

def test_builtin_content():
    catalog = narrative.load_catalog(0)
    assert sorted(catalog) == [100, 101, 102, 103, 104, 105]
    assert narrative.validate_references(catalog) == []

    for tier in range(1, 5):
        assert len(narrative.load_catalog(tier)) > 0
