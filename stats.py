"""
Walk statistics
v1.0.0

Provides:
- Totals and averages over walk history
- Event counts per type
- Per-dog walk counts
- Recent activity (last 7 days)
"""
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from schema import Walk, EventType, get_current_time


def get_walk_stats(walks: List[Walk], now: Optional[datetime] = None) -> Dict:
  """
  Calculate walk statistics

  Returns dict with:
    - total_walks, total_distance_meters, total_duration_seconds
    - avg_distance_meters, avg_duration_seconds (None without walks)
    - events_by_type: count per event type value
    - walks_by_dog: count per dog id
    - walks_last_7_days
    - longest_walk_id: walk with the greatest distance
  """
  now = now or get_current_time()
  week_ago = now - timedelta(days=7)

  total_distance = 0.0
  total_duration = 0.0
  events_by_type = {event_type.value: 0 for event_type in EventType}
  walks_by_dog: Dict[str, int] = {}
  recent = 0
  longest: Optional[Walk] = None

  for walk in walks:
    total_distance += walk.distance_meters
    total_duration += walk.duration_seconds(now)

    for event in walk.events:
      events_by_type[event.type.value] += 1

    for dog_id in walk.dog_ids:
      walks_by_dog[dog_id] = walks_by_dog.get(dog_id, 0) + 1

    if walk.start_time >= week_ago:
      recent += 1

    if longest is None or walk.distance_meters > longest.distance_meters:
      longest = walk

  count = len(walks)
  return {
    'total_walks': count,
    'total_distance_meters': total_distance,
    'total_duration_seconds': total_duration,
    'avg_distance_meters': total_distance / count if count else None,
    'avg_duration_seconds': total_duration / count if count else None,
    'events_by_type': events_by_type,
    'walks_by_dog': walks_by_dog,
    'walks_last_7_days': recent,
    'longest_walk_id': longest.id if longest else None,
  }
