"""
Walk Store
v2.0.0 - Multi-dog walks

Owns the walk lifecycle and walk history.

States:
- NO_WALK: nothing in progress, nothing waiting
- IN_PROGRESS: current walk is being tracked (persisted so shortcuts
  can log events while the app is in the background)
- PENDING_SUMMARY: walk has ended and waits to be saved or discarded

Transitions:
  start_walk   NO_WALK         -> IN_PROGRESS
  end_walk     IN_PROGRESS     -> PENDING_SUMMARY
  save_walk    PENDING_SUMMARY -> NO_WALK (walk goes to history)
  discard_walk PENDING_SUMMARY -> NO_WALK (walk dropped)

Calls made in the wrong state are no-ops and return None.
"""
from enum import Enum
from typing import List, Optional, Dict

from config import STORAGE_KEYS
from schema import Walk, WalkEvent, EventType, Coordinate, SavedWeather
from storage import KeyValueStore
from .base_store import BaseStore


class WalkState(str, Enum):
  NO_WALK = "no_walk"
  IN_PROGRESS = "in_progress"
  PENDING_SUMMARY = "pending_summary"


def decode_walk(data: Dict) -> Optional[Walk]:
  """Decode one walk; None (with a warning) if the record is unreadable"""
  try:
    return Walk.from_dict(data)
  except (KeyError, TypeError, ValueError) as e:
    walk_id = data.get('id', '?') if isinstance(data, dict) else '?'
    print(f"  ⚠️ Skipping unreadable walk {walk_id}: {e}")
    return None


def load_current_walk(storage: KeyValueStore) -> Optional[Walk]:
  """Read the persisted current walk. Shared with voice shortcuts."""
  store = BaseStore(storage)
  data = store.load_json(STORAGE_KEYS["current_walk"])
  if not data:
    return None
  return decode_walk(data)


def save_current_walk(storage: KeyValueStore, walk: Optional[Walk]):
  """Write (or clear) the persisted current walk. Shared with voice shortcuts."""
  if walk is None:
    storage.remove(STORAGE_KEYS["current_walk"])
  else:
    storage.set_json(STORAGE_KEYS["current_walk"], walk.to_dict())


class WalkStore(BaseStore):
  """
  Persists and manages walks.

  walks is newest first. current_walk and walk_to_summarize are each
  persisted under their own key on every change.
  """

  def __init__(self, storage: Optional[KeyValueStore] = None):
    super().__init__(storage)
    self.walks: List[Walk] = self._load_walks()
    self.current_walk: Optional[Walk] = load_current_walk(self.storage)
    self.walk_to_summarize: Optional[Walk] = self._load_walk_to_summarize()

  # ============================================
  # Persistence
  # ============================================

  def _load_walks(self) -> List[Walk]:
    data = self.load_json(STORAGE_KEYS["walks"], default=[])
    if not isinstance(data, list):
      print("  ⚠️ Walk history is not a list, starting empty")
      return []

    walks = []
    for item in data:
      walk = decode_walk(item)
      if walk is not None:
        walks.append(walk)
    return walks

  def _load_walk_to_summarize(self) -> Optional[Walk]:
    data = self.load_json(STORAGE_KEYS["walk_to_summarize"])
    return decode_walk(data) if data else None

  def _persist_walks(self):
    self.save_json(STORAGE_KEYS["walks"], [walk.to_dict() for walk in self.walks])

  def _persist_current_walk(self):
    save_current_walk(self.storage, self.current_walk)

  def _persist_walk_to_summarize(self):
    if self.walk_to_summarize is None:
      self.remove(STORAGE_KEYS["walk_to_summarize"])
    else:
      self.save_json(STORAGE_KEYS["walk_to_summarize"], self.walk_to_summarize.to_dict())

  def reload_current_walk_from_storage(self):
    """Pick up events a shortcut added while we were not looking"""
    self.current_walk = load_current_walk(self.storage)

  # ============================================
  # Lifecycle
  # ============================================

  @property
  def state(self) -> WalkState:
    if self.walk_to_summarize is not None:
      return WalkState.PENDING_SUMMARY
    if self.current_walk is not None:
      return WalkState.IN_PROGRESS
    return WalkState.NO_WALK

  def start_walk(self, dog_ids: Optional[List[str]] = None) -> Optional[Walk]:
    """Start a new walk with the given dogs"""
    if self.state != WalkState.NO_WALK:
      print(f"  ⚠️ Cannot start a walk while {self.state.value}")
      return None

    self.current_walk = Walk(dog_ids=list(dog_ids or []))
    self._persist_current_walk()
    return self.current_walk

  def add_event_to_current_walk(
    self,
    event_type: EventType,
    coordinate: Optional[Coordinate] = None,
    dog_id: Optional[str] = None
  ) -> Optional[WalkEvent]:
    """Log an event; pass the current location so it shows on the map"""
    walk = self.current_walk
    if walk is None:
      return None

    try:
      event = walk.add_event(event_type, coordinate=coordinate, dog_id=dog_id)
    except ValueError as e:
      print(f"  ⚠️ {e}")
      return None

    self._persist_current_walk()
    return event

  def update_current_walk(self, walk: Walk):
    if self.current_walk is None:
      return
    self.current_walk = walk
    self._persist_current_walk()

  def update_current_walk_distance(self, meters: float):
    """Update distance from GPS tracking"""
    if self.current_walk is None:
      return
    self.current_walk.distance_meters = meters
    self._persist_current_walk()

  def update_current_walk_route(self, route: List[Coordinate]):
    if self.current_walk is None:
      return
    self.current_walk.route_coordinates = list(route)
    self._persist_current_walk()

  def end_walk(
    self,
    route: Optional[List[Coordinate]] = None,
    distance_meters: Optional[float] = None
  ) -> Optional[Walk]:
    """
    End the current walk and hold it for the summary.
    Snapshots the tracker's route and distance when given.
    """
    walk = self.current_walk
    if walk is None:
      return None

    if distance_meters is not None:
      walk.distance_meters = distance_meters
    walk.end(route=route)

    self.current_walk = None
    self._persist_current_walk()

    self.walk_to_summarize = walk
    self._persist_walk_to_summarize()
    return walk

  def set_notes_for_walk_to_summarize(self, notes: Optional[str]):
    if self.walk_to_summarize is None:
      return
    self.walk_to_summarize.notes = self.clean_text(notes)
    self._persist_walk_to_summarize()

  def save_walk(self, weather: Optional[SavedWeather] = None) -> Optional[Walk]:
    """Move the summarized walk into history (newest first)"""
    walk = self.walk_to_summarize
    if walk is None:
      return None

    if weather is not None:
      walk.saved_weather = weather

    self.walks.insert(0, walk)
    self._persist_walks()

    self.walk_to_summarize = None
    self._persist_walk_to_summarize()
    return walk

  def discard_walk(self) -> Optional[Walk]:
    walk = self.walk_to_summarize
    if walk is None:
      return None

    self.walk_to_summarize = None
    self._persist_walk_to_summarize()
    return walk

  # ============================================
  # History
  # ============================================

  def get_walk(self, walk_id: str) -> Optional[Walk]:
    for walk in self.walks:
      if walk.id == walk_id:
        return walk
    return None

  def update_notes(self, walk_id: str, notes: Optional[str]) -> bool:
    """Update notes on a saved walk"""
    walk = self.get_walk(walk_id)
    if walk is None:
      return False
    walk.notes = self.clean_text(notes)
    self._persist_walks()
    return True

  def delete_walk(self, walk_id: str) -> bool:
    remaining = [walk for walk in self.walks if walk.id != walk_id]
    if len(remaining) == len(self.walks):
      return False
    self.walks = remaining
    self._persist_walks()
    return True

  def replace_walks(self, walks: List[Walk]):
    """Replace all saved walks, e.g. after restoring a backup"""
    self.walks = list(walks)
    self._persist_walks()
