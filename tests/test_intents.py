"""
Tests for voice shortcuts logging into the persisted current walk.
"""
import pytest

from intents import (
  NoWalkInProgressError, SHORTCUTS, add_event_to_current_walk, find_shortcut,
  log_pee, log_play, log_poop, log_water,
)
from schema import EventType
from stores import WalkStore


class TestShortcutActions:

  def test_no_walk_raises(self, storage):
    with pytest.raises(NoWalkInProgressError) as exc:
      log_pee(storage)
    assert str(exc.value) == "No walk in progress. Start a walk in WalkyTrails first."

  def test_pending_summary_raises(self, storage):
    store = WalkStore(storage)
    store.start_walk()
    store.end_walk()
    with pytest.raises(NoWalkInProgressError):
      log_water(storage)

  def test_logs_each_type(self, storage):
    WalkStore(storage).start_walk()

    log_pee(storage)
    log_poop(storage)
    log_water(storage)
    log_play(storage)

    walk = WalkStore(storage).current_walk
    assert [e.type for e in walk.events] == [
      EventType.PEE, EventType.POOP, EventType.WATER, EventType.PLAY,
    ]
    assert all(e.coordinate is None for e in walk.events)

  def test_running_store_reloads(self, storage):
    store = WalkStore(storage)
    store.start_walk(["DOG-1"])

    event = add_event_to_current_walk(EventType.POOP, storage)
    assert event.dog_id == "DOG-1"

    store.reload_current_walk_from_storage()
    assert store.current_walk.events[0].id == event.id


class TestShortcutCatalogue:

  def test_every_action_has_phrases(self):
    assert len(SHORTCUTS) == 4
    for shortcut in SHORTCUTS:
      assert shortcut["phrases"]
      assert all("WalkyTrails" in phrase for phrase in shortcut["phrases"])

  def test_find_shortcut(self):
    assert find_shortcut("log POOP in walkytrails")["action"] is log_poop
    assert find_shortcut("  WalkyTrails log play ")["action"] is log_play
    assert find_shortcut("order pizza") is None
