"""
Voice Shortcuts
v1.0.0

Log pee, poop, water or play during a walk without touching the screen.

These actions edit the persisted current walk directly instead of going
through WalkStore, because they run while the app may be in the
background. A running WalkStore picks the change up with
reload_current_walk_from_storage().
"""
from typing import Optional, Dict, List

from schema import EventType, WalkEvent
from storage import KeyValueStore, get_storage
from stores.walk_store import load_current_walk, save_current_walk


class NoWalkInProgressError(Exception):
  """Raised when a shortcut runs without a walk in progress"""

  def __init__(self):
    super().__init__("No walk in progress. Start a walk in WalkyTrails first.")


def add_event_to_current_walk(event_type: EventType, storage: Optional[KeyValueStore] = None) -> WalkEvent:
  """Append an event (no location) to the persisted current walk"""
  storage = storage or get_storage()
  walk = load_current_walk(storage)
  if walk is None or not walk.is_in_progress:
    raise NoWalkInProgressError()

  event = walk.add_event(event_type)
  save_current_walk(storage, walk)
  return event


def log_pee(storage: Optional[KeyValueStore] = None) -> WalkEvent:
  return add_event_to_current_walk(EventType.PEE, storage)


def log_poop(storage: Optional[KeyValueStore] = None) -> WalkEvent:
  return add_event_to_current_walk(EventType.POOP, storage)


def log_water(storage: Optional[KeyValueStore] = None) -> WalkEvent:
  return add_event_to_current_walk(EventType.WATER, storage)


def log_play(storage: Optional[KeyValueStore] = None) -> WalkEvent:
  return add_event_to_current_walk(EventType.PLAY, storage)


# Shortcut catalogue: what each action is called and how to invoke it
SHORTCUTS: List[Dict] = [
  {
    "action": log_pee,
    "title": "Log pee",
    "phrases": ["Log pee in WalkyTrails", "WalkyTrails log pee", "Record pee in WalkyTrails"],
  },
  {
    "action": log_poop,
    "title": "Log poop",
    "phrases": ["Log poop in WalkyTrails", "WalkyTrails log poop", "Record poop in WalkyTrails"],
  },
  {
    "action": log_water,
    "title": "Log water",
    "phrases": ["Log water in WalkyTrails", "WalkyTrails log water", "Record water in WalkyTrails"],
  },
  {
    "action": log_play,
    "title": "Log play",
    "phrases": ["Log play in WalkyTrails", "WalkyTrails log play", "Record play in WalkyTrails"],
  },
]


def find_shortcut(phrase: str) -> Optional[Dict]:
  """Match a spoken phrase to a shortcut, ignoring case"""
  wanted = phrase.strip().lower()
  for shortcut in SHORTCUTS:
    if wanted in (p.lower() for p in shortcut["phrases"]):
      return shortcut
  return None
