"""
Walk display helpers

Single place for walk-related text: durations, dog summaries and event labels.
"""
from datetime import datetime
from typing import Optional

from schema import Walk, WalkEvent, EventType, get_current_time


def formatted_duration(seconds: float) -> str:
  """Duration from seconds: "5 min 30 sec" """
  total = int(seconds)
  return f"{total // 60} min {total % 60} sec"


def formatted_elapsed(start: datetime, now: Optional[datetime] = None) -> str:
  """Elapsed time since start as minutes:seconds, e.g. "12:34" """
  total = int(((now or get_current_time()) - start).total_seconds())
  return f"{total // 60}:{total % 60:02d}"


def dogs_summary_text(walk: Walk, dog_store) -> str:
  """"Rex, Luna", or a count when the dogs were deleted, or "" for legacy walks"""
  if not walk.dog_ids:
    return ""

  names = []
  for dog_id in walk.dog_ids:
    dog = dog_store.dog(dog_id)
    if dog is not None and dog.name:
      names.append(dog.name)

  if not names:
    return f"{len(walk.dog_ids)} dog(s) (no longer in profile)"
  return ", ".join(names)


def event_label(event: WalkEvent, dog_store) -> Optional[str]:
  """Dog name for the event; None if the event has no dog"""
  if event.dog_id is None:
    return None
  dog = dog_store.dog(event.dog_id)
  if dog is not None and dog.name:
    return dog.name
  return "No longer in profile"


def event_icon(event_type: EventType) -> str:
  """Get emoji icon for event type"""
  icons = {
    EventType.PEE: "💧",
    EventType.POOP: "💩",
    EventType.WATER: "🥤",
    EventType.PLAY: "🎾",
  }
  return icons.get(event_type, "📋")
