"""
Tests for walk history statistics.
"""
from datetime import timedelta

from schema import EventType, Walk
from stats import get_walk_stats


def _walk(start, minutes, meters, dog_ids=(), events=()):
  walk = Walk(start_time=start, distance_meters=meters, dog_ids=list(dog_ids))
  for event_type in events:
    walk.add_event(event_type, now=start)
  walk.end(now=start + timedelta(minutes=minutes))
  return walk


def test_empty_history(start_time):
  stats = get_walk_stats([], now=start_time)
  assert stats["total_walks"] == 0
  assert stats["avg_distance_meters"] is None
  assert stats["longest_walk_id"] is None
  assert stats["events_by_type"] == {"pee": 0, "poop": 0, "water": 0, "play": 0}


def test_totals(start_time):
  recent = _walk(start_time - timedelta(days=1), 30, 2000, dog_ids=["A"], events=[EventType.PEE, EventType.POOP])
  old = _walk(start_time - timedelta(days=30), 10, 500, dog_ids=["A", "B"], events=[EventType.PEE])

  stats = get_walk_stats([recent, old], now=start_time)

  assert stats["total_walks"] == 2
  assert stats["total_distance_meters"] == 2500
  assert stats["total_duration_seconds"] == 2400
  assert stats["avg_distance_meters"] == 1250
  assert stats["avg_duration_seconds"] == 1200
  assert stats["events_by_type"]["pee"] == 2
  assert stats["events_by_type"]["poop"] == 1
  assert stats["walks_by_dog"] == {"A": 2, "B": 1}
  assert stats["walks_last_7_days"] == 1
  assert stats["longest_walk_id"] == recent.id
